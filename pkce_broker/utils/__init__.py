"""Utility package for the PKCE broker.

Re-exports the PKCE helpers from the `crypto` module for convenience.
"""

from .crypto import derive_challenge, generate_state, make_pkce_pair  # re-export helpers

__all__ = [
    "derive_challenge",
    "generate_state",
    "make_pkce_pair",
]
