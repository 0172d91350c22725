"""
Configuration settings for the PKCE broker service.
Uses Pydantic for validation and type safety.
"""
import logging
from typing import Annotated, List, Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with validation."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="PKCE_",
        case_sensitive=False,
        extra="ignore",
    )

    # Identity provider endpoints
    authorize_url: str = "https://www.dropbox.com/oauth2/authorize"
    token_url: str = "https://api.dropboxapi.com/oauth2/token"
    default_scope: str = "files.metadata.read"
    token_access_type: str = "offline"
    token_request_format: Literal["json", "form"] = "json"

    # CORS Configuration
    cors_origins: Annotated[List[str], NoDecode] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    # Security
    state_ttl_seconds: int = 600  # 10 minutes
    state_sweep_interval_seconds: int = 60

    # Application
    app_name: str = "PKCE Broker"
    debug: bool = False
    log_level: str = "INFO"

    # External API timeouts
    provider_timeout_seconds: float = 10.0

    @field_validator('authorize_url', 'token_url', mode='before')
    @classmethod
    def validate_provider_url(cls, v):
        """Ensure provider URLs carry a scheme."""
        if isinstance(v, str):
            v = v.strip().rstrip("/")
            if not v.startswith(('http://', 'https://')):
                return f"https://{v}"
        return v

    @field_validator('cors_origins', mode='before')
    @classmethod
    def validate_cors_origins(cls, v):
        """Parse CORS origins from string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(',') if origin.strip()]
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator('state_ttl_seconds', 'state_sweep_interval_seconds')
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be positive")
        return v


# Global settings instance
settings = Settings()
