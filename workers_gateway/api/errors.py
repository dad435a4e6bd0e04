"""OpenAI-style error envelopes and the app-level exception handlers."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..core.exceptions import EndpointNotFoundError, GatewayError

logger = logging.getLogger("workers-gateway")


def error_response(status_code: int, message: str, error_type: str) -> JSONResponse:
    """Build a ``{"error": {"message", "type"}}`` JSON response."""
    return JSONResponse(
        {"error": {"message": message, "type": error_type}},
        status_code=status_code,
    )


async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    return JSONResponse(exc.to_payload(), status_code=exc.status_code)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render routing misses in the gateway's error envelope.

    Unknown paths and known paths hit with the wrong method both count as an
    invalid endpoint.
    """
    if exc.status_code in (404, 405):
        logger.info("No route for %s %s", request.method, request.url.path)
        not_found = EndpointNotFoundError(f"Invalid endpoint: {request.url.path}")
        return JSONResponse(not_found.to_payload(), status_code=not_found.status_code)
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return error_response(exc.status_code, message, "invalid_request_error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(GatewayError, gateway_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
