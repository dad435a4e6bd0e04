"""Core module initialization."""

from .backend import (
    BackendResult,
    InferenceBackend,
    WorkersAIBackend,
    build_run_options,
    format_httpx_error,
)
from .exceptions import (
    AuthenticationError,
    BackendError,
    ConfigurationError,
    EndpointNotFoundError,
    GatewayError,
    InvalidRequestError,
)
from .models import DEFAULT_BACKEND_MODEL, MODEL_TABLE, list_model_cards, resolve_backend_model
from .prompt import extract_text, input_to_prompt, messages_to_prompt
from .registry import get_backend, set_backend
from .sse import DONE_FRAME, SSEDecoder, encode_sse_data

__all__ = [
    "AuthenticationError",
    "BackendError",
    "BackendResult",
    "ConfigurationError",
    "DEFAULT_BACKEND_MODEL",
    "DONE_FRAME",
    "EndpointNotFoundError",
    "GatewayError",
    "InferenceBackend",
    "InvalidRequestError",
    "MODEL_TABLE",
    "SSEDecoder",
    "WorkersAIBackend",
    "build_run_options",
    "encode_sse_data",
    "extract_text",
    "format_httpx_error",
    "get_backend",
    "input_to_prompt",
    "list_model_cards",
    "messages_to_prompt",
    "resolve_backend_model",
    "set_backend",
]
