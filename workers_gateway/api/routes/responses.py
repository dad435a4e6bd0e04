"""OpenAI Responses API endpoint.

Implements POST /v1/responses on top of a single, non-streaming backend call:
- Non-streaming: one ``response`` document
- Streaming: the Responses event lifecycle replayed from the final text
"""

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
    input_to_prompt,
    resolve_backend_model,
)
from ...openai import ResponsesStreamEmulator, build_response
from ..errors import error_response
from .common import echoed_model, event_stream_response, get_settings, read_json_payload

logger = logging.getLogger("workers-gateway")


async def responses_endpoint(request: Request) -> Response:
    """POST /v1/responses - OpenAI Responses API endpoint.

    Args:
        request: The FastAPI request object

    Returns:
        JSONResponse for non-streaming, StreamingResponse for streaming
    """
    logger.info("Received Responses API request")
    get_key_validator().validate_request(request)

    try:
        payload = await read_json_payload(request)
    except ClientDisconnect:
        logger.warning("Client disconnected before request body was fully read")
        return Response(status_code=499)  # Client Closed Request

    input_data = payload.get("input")
    if not input_data:
        logger.error("Request missing input")
        raise InvalidRequestError("Input is required")
    if not isinstance(input_data, (str, list)):
        logger.error("Request input has unsupported type %s", type(input_data).__name__)
        raise InvalidRequestError("Input must be a string or an array of input items")

    is_stream = bool(payload.get("stream"))
    settings = get_settings(request)

    try:
        backend_model = resolve_backend_model(payload.get("model"))
        model = echoed_model(payload, backend_model)
        logger.info(
            f"Processing Responses request: model={model} -> {backend_model}, stream={is_stream}"
        )

        instructions = payload.get("instructions")
        options = build_run_options(
            input_to_prompt(input_data, instructions if isinstance(instructions, str) else None),
            temperature=payload.get("temperature"),
            max_tokens=payload.get("max_output_tokens"),
        )
        result = BackendResult.from_payload(await get_backend().run(backend_model, options))
        logger.info(f"Backend {backend_model} returned {len(result.text)} characters")

        if is_stream:
            emulator = ResponsesStreamEmulator(
                model,
                result.text,
                usage=result.usage,
                request=payload,
                slice_width=settings.slice_width,
                pacing_delay=settings.pacing_delay,
                disconnect_checker=request.is_disconnected,
            )
            logger.info(f"Streaming response {emulator.response_id}")
            return event_stream_response(emulator.stream())

        return JSONResponse(build_response(model, result.text, result.usage))
    except Exception as exc:
        logger.exception(f"Error processing Responses request: {exc}")
        return error_response(500, str(exc) or "Unknown error", "internal_error")
