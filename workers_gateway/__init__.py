"""workers-ai-gateway - OpenAI-compatible front end for Workers AI

Accepts chat completions and Responses API requests, maps the requested
model onto a Workers AI text model, runs a single inference call and renders
the result as the caller expects: one JSON document, or an SSE stream that
replays the finished text with the target API's event protocol.

Example:
    >>> from workers_gateway import create_app
    >>> import uvicorn
    >>> uvicorn.run(create_app(), host="127.0.0.1", port=8787)
"""

from .config_loader import load_config
from .core import BackendResult, WorkersAIBackend, resolve_backend_model
from .logging import logger, setup_logging
from .main import create_app
from .settings import GatewaySettings

__all__ = [
    "BackendResult",
    "GatewaySettings",
    "WorkersAIBackend",
    "create_app",
    "load_config",
    "logger",
    "resolve_backend_model",
    "setup_logging",
]
