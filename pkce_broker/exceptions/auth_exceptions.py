"""
Custom exceptions for the authorization flow.
"""
from typing import Optional


class BrokerException(Exception):
    """Base exception for authorization flow errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[str] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class InvalidRequestException(BrokerException):
    """Raised when login parameters are missing or malformed."""

    def __init__(
        self,
        message: str = "Missing required parameters",
        details: Optional[str] = "client_id and redirect_uri are required"
    ):
        super().__init__(message, status_code=400, details=details)


class InvalidCallbackException(BrokerException):
    """Raised when the provider redirect lacks code or state."""

    def __init__(self, message: str = "Missing required parameters", details: Optional[str] = None):
        super().__init__(message, status_code=400, details=details)


class InvalidStateException(BrokerException):
    """Raised when OAuth state parameter is unknown, replayed or expired.

    The three cases share one message so callers cannot tell them apart.
    """

    def __init__(
        self,
        message: str = "Invalid or expired state parameter",
        details: Optional[str] = "Possible CSRF attack or session expired"
    ):
        super().__init__(message, status_code=400, details=details)


class TokenExchangeException(BrokerException):
    """Raised when the provider rejects the code exchange or is unreachable."""

    def __init__(self, message: str = "Authentication failed", details: Optional[str] = None):
        super().__init__(message, status_code=500, details=details)


class StateStoreException(BrokerException):
    """Raised when state store operations fail."""

    def __init__(self, message: str = "State store error", details: Optional[str] = None):
        super().__init__(message, status_code=500, details=details)
