"""Core exceptions for the gateway.

Every error carries the OpenAI-style ``type`` string and the HTTP status it
maps to, so the application-level handler can render the
``{"error": {"message", "type"}}`` envelope without inspecting the class.
"""

from typing import Any, Optional


class GatewayError(Exception):
    """Base exception for gateway errors."""

    error_type = "internal_error"
    status_code = 500

    def __init__(
        self,
        message: str,
        *,
        error_type: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if error_type is not None:
            self.error_type = error_type
        if status_code is not None:
            self.status_code = status_code

    def to_payload(self) -> dict[str, Any]:
        return {"error": {"message": self.message, "type": self.error_type}}


class InvalidRequestError(GatewayError):
    """Raised when an incoming request is missing required input."""

    error_type = "invalid_request_error"
    status_code = 400


class AuthenticationError(GatewayError):
    """Raised when the bearer credential is missing, malformed or wrong."""

    error_type = "authentication_error"
    status_code = 401


class EndpointNotFoundError(GatewayError):
    """Raised for unmapped path/method combinations."""

    error_type = "invalid_request_error"
    status_code = 404


class BackendError(GatewayError):
    """Raised when the inference backend call fails."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.backend_status = status


class ConfigurationError(GatewayError):
    """Raised when there's an issue with the configuration."""
    pass
