"""
Common response models.
"""
from typing import Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response model."""
    error: str
    details: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = "ok"
    version: Optional[str] = None
    timestamp: Optional[str] = None
