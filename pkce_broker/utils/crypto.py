"""Cryptographic utilities for PKCE and state generation."""
import base64
import hashlib
import os
from typing import Tuple

# 32 bytes -> 43 chars base64url (RFC 7636 recommendation)
VERIFIER_BYTES = 32
STATE_BYTES = 16


def b64url(data: bytes) -> str:
    """Encode bytes as base64url (RFC 4648 Section 5) without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def derive_challenge(verifier: str) -> str:
    """S256 code challenge for a verifier's encoded string form."""
    return b64url(hashlib.sha256(verifier.encode("ascii")).digest())


def make_pkce_pair() -> Tuple[str, str]:
    """Generate PKCE verifier and challenge pair.

    Returns (verifier, challenge). The verifier carries 256 bits of entropy
    from the OS CSPRNG.
    """
    verifier = b64url(os.urandom(VERIFIER_BYTES))
    return verifier, derive_challenge(verifier)


def generate_state() -> str:
    """Generate a secure random state parameter (16 bytes, hex)."""
    return os.urandom(STATE_BYTES).hex()
