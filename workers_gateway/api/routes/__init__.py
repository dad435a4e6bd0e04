"""API routes for the gateway."""

from .chat import chat_completions, handle_chat_completion, legacy_ai
from .models import list_models
from .responses import responses_endpoint

__all__ = [
    "chat_completions",
    "handle_chat_completion",
    "legacy_ai",
    "list_models",
    "responses_endpoint",
]
