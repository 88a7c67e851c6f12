"""Custom exceptions for the load bridge."""
from typing import Any, Optional


class LoadBridgeException(Exception):
    """Base exception for load bridge errors."""
    pass


class ConfigError(LoadBridgeException):
    """Raised when a required credential or setting is missing at startup."""
    pass


ConfigurationError = ConfigError


class IntegrationError(LoadBridgeException):
    """Raised when talking to the TMS fails."""
    pass


class AuthError(IntegrationError):
    """Raised when an OAuth token cannot be obtained."""

    def __init__(self, message: str, status_line: Optional[str] = None):
        super().__init__(message)
        self.status_line = status_line


class ExternalAPIError(IntegrationError):
    """Raised when the TMS responds with status >= 400."""

    def __init__(
        self,
        message: str,
        status_code: int,
        status_line: str,
        body: Optional[str] = None,
        response: Any = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.status_line = status_line
        self.body = body
        # Decoded response, when the error body was valid JSON
        self.response = response


class DecodeError(IntegrationError):
    """Raised when a TMS response body is not the expected JSON."""

    def __init__(self, message: str, body: Optional[str] = None):
        super().__init__(message)
        self.body = body


class TMSConnectionError(IntegrationError):
    """Raised when the TMS cannot be reached (connect error, timeout)."""
    pass


class TransformError(LoadBridgeException):
    """Raised when a load cannot be mapped to the TMS request schema."""
    pass


class ValidationError(LoadBridgeException):
    """Raised when caller input is malformed."""
    pass
