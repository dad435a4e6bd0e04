"""API module for the gateway."""

from .errors import error_response, register_exception_handlers
from .middleware import CORS_HEADERS, cors_middleware
from .routes import chat_completions, legacy_ai, list_models, responses_endpoint

__all__ = [
    "CORS_HEADERS",
    "chat_completions",
    "cors_middleware",
    "error_response",
    "legacy_ai",
    "list_models",
    "register_exception_handlers",
    "responses_endpoint",
]
