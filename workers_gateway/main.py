"""FastAPI application for the Workers AI gateway."""

import logging
from typing import Any, Mapping, Optional

from fastapi import FastAPI

from .api import (
    chat_completions,
    cors_middleware,
    legacy_ai,
    list_models,
    register_exception_handlers,
    responses_endpoint,
)
from .auth import BearerKeyValidator, set_key_validator
from .config_loader import load_config
from .core import InferenceBackend, WorkersAIBackend, set_backend
from .logging import setup_logging
from .settings import GatewaySettings

logger = logging.getLogger("workers-gateway")


def build_backend(settings: GatewaySettings) -> WorkersAIBackend:
    """Build the Workers AI client described by ``settings``."""
    if not settings.account_id or not settings.api_token:
        logger.warning("Workers AI account_id/api_token not configured; backend calls will fail")
    return WorkersAIBackend(
        account_id=settings.account_id,
        api_token=settings.api_token,
        base_url=settings.base_url,
        timeout=settings.timeout,
    )


def create_app(
    config: Optional[Mapping[str, Any]] = None,
    *,
    backend: Optional[InferenceBackend] = None,
) -> FastAPI:
    """Factory function to create the FastAPI application.

    Args:
        config: Parsed configuration. Loaded with ``load_config`` when omitted.
        backend: Inference backend override. Defaults to a ``WorkersAIBackend``
            built from the configuration.

    Returns:
        The configured FastAPI application instance.
    """
    setup_logging()
    if config is None:
        config = load_config()
    settings = GatewaySettings.from_config(config)

    set_backend(backend if backend is not None else build_backend(settings))
    set_key_validator(BearerKeyValidator(settings.api_key))
    logger.info(
        "Gateway configured: auth=%s slice_width=%d pacing_delay=%.3fs",
        "enabled" if settings.api_key else "disabled",
        settings.slice_width,
        settings.pacing_delay,
    )

    app = FastAPI(title="Workers AI Gateway")
    app.state.settings = settings

    register_exception_handlers(app)
    app.middleware("http")(cors_middleware)

    # Register routes
    app.post("/v1/chat/completions")(chat_completions)
    app.post("/v1/responses")(responses_endpoint)
    app.get("/v1/models")(list_models)
    app.post("/api/ai")(legacy_ai)

    @app.on_event("startup")
    async def startup_event():
        """Handle application startup."""
        logger.info("Workers AI gateway starting up...")
        logger.info("Configured bind address %s:%s", settings.host, settings.port)
        logger.info("Workers AI base URL: %s", settings.base_url)
        logger.info("Workers AI gateway ready to handle requests")

    return app


__all__ = ["build_backend", "create_app"]
