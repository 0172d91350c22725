"""
Pydantic models for the authorization flow.
"""
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..utils.crypto import derive_challenge


class LoginRequest(BaseModel):
    """Request model for login endpoint.

    Accepts the SPA's camelCase keys as well as snake_case.
    """
    model_config = ConfigDict(populate_by_name=True)

    client_id: Optional[str] = Field(default=None, alias="clientId")
    redirect_uri: Optional[str] = Field(default=None, alias="redirectUri")
    scopes: Optional[str] = None

    @field_validator('client_id', 'redirect_uri', 'scopes', mode='before')
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v


class LoginResponse(BaseModel):
    """Response model for login endpoint."""
    model_config = ConfigDict(populate_by_name=True)

    auth_url: str = Field(alias="authUrl")


class PendingAuthorization(BaseModel):
    """Record kept under a state key between login and callback."""
    model_config = ConfigDict(frozen=True)

    verifier: str
    client_id: str
    redirect_uri: str
    scopes: str
    created_at: float
    expires_at: float

    @field_validator('verifier')
    @classmethod
    def validate_verifier(cls, v):
        if not v or len(v) < 43:  # Base64url encoded 32 bytes minimum
            raise ValueError('Invalid PKCE verifier')
        return v

    @property
    def challenge(self) -> str:
        return derive_challenge(self.verifier)

    def expired(self, now: float) -> bool:
        return now >= self.expires_at


class TokenExchangeRequest(BaseModel):
    """Body sent to the provider token endpoint."""
    grant_type: str = "authorization_code"
    code: str
    redirect_uri: str
    client_id: str
    # PKCE replaces the client secret; the provider expects the key to be present.
    client_secret: str = ""
    code_verifier: str


class CallbackResponse(BaseModel):
    """Response model for a completed code exchange."""
    success: bool = True
    token: Dict[str, Any]
    timestamp: str
