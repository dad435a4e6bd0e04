"""OpenAI-compatible chat completions endpoint."""

import logging

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.requests import ClientDisconnect

from ...auth import get_key_validator
from ...core import (
    BackendResult,
    InvalidRequestError,
    build_run_options,
    get_backend,
    messages_to_prompt,
    resolve_backend_model,
)
from ...openai import ChatCompletionStreamEmulator, build_chat_completion
from ..errors import error_response
from .common import echoed_model, event_stream_response, get_settings, read_json_payload

logger = logging.getLogger("workers-gateway")


async def handle_chat_completion(request: Request) -> Response:
    """Handle a chat completions request end to end.

    Validates the bearer key and the ``messages`` array, compiles the
    conversation into one prompt, runs the backend once and renders the
    result as a ``chat.completion`` document or an emulated chunk stream.

    Args:
        request: The FastAPI request object.

    Returns:
        A JSONResponse, or a StreamingResponse when ``stream`` is set.
    """
    logger.info(f"Handling {request.method} request to {request.url.path}")
    get_key_validator().validate_request(request)

    try:
        payload = await read_json_payload(request)
    except ClientDisconnect:
        logger.warning("Client disconnected before request body was fully read")
        return Response(status_code=499)  # Client Closed Request

    messages = payload.get("messages")
    if not messages or not isinstance(messages, list):
        logger.error("Request missing or invalid messages array")
        raise InvalidRequestError("Messages array is required")

    is_stream = bool(payload.get("stream"))
    settings = get_settings(request)

    try:
        backend_model = resolve_backend_model(payload.get("model"))
        model = echoed_model(payload, backend_model)
        logger.info(f"Processing chat request for model {model} -> {backend_model}, stream={is_stream}")

        options = build_run_options(
            messages_to_prompt(messages),
            temperature=payload.get("temperature"),
            max_tokens=payload.get("max_tokens"),
        )
        result = BackendResult.from_payload(await get_backend().run(backend_model, options))
        logger.info(f"Backend {backend_model} returned {len(result.text)} characters")

        if is_stream:
            emulator = ChatCompletionStreamEmulator(
                model,
                result.text,
                slice_width=settings.slice_width,
                pacing_delay=settings.pacing_delay,
                disconnect_checker=request.is_disconnected,
            )
            return event_stream_response(emulator.stream())

        return JSONResponse(build_chat_completion(model, result.text, result.usage))
    except Exception as exc:
        logger.exception(f"Error processing chat request: {exc}")
        return error_response(500, str(exc) or "Unknown error", "internal_error")


async def chat_completions(request: Request) -> Response:
    """Chat completions endpoint - OpenAI compatible.

    POST /v1/chat/completions
    """
    logger.info("Received chat completions request")
    return await handle_chat_completion(request)


async def legacy_ai(request: Request) -> Response:
    """Legacy alias for chat completions.

    POST /api/ai
    """
    logger.info("Received legacy /api/ai request")
    return await handle_chat_completion(request)
