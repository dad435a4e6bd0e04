"""Request plumbing shared by the chat completions and responses routes."""

import json
import logging
from typing import Any, AsyncIterator

from fastapi import Request
from fastapi.responses import StreamingResponse

from ...core.exceptions import InvalidRequestError
from ...core.sse import SSE_HEADERS, SSE_MEDIA_TYPE
from ...settings import GatewaySettings

logger = logging.getLogger("workers-gateway")


async def read_json_payload(request: Request) -> dict[str, Any]:
    """Read the request body as a JSON object.

    Raises:
        InvalidRequestError: if the body is not valid JSON or not an object.
    """
    body = await request.body()
    try:
        payload = json.loads(body or b"{}")
    except json.JSONDecodeError as exc:
        logger.error(f"Invalid JSON payload: {exc}")
        raise InvalidRequestError("Invalid JSON payload") from exc

    if not isinstance(payload, dict):
        logger.error("Payload must be a JSON object")
        raise InvalidRequestError("Request body must be a JSON object")
    return payload


def get_settings(request: Request) -> GatewaySettings:
    return getattr(request.app.state, "settings", None) or GatewaySettings()


def echoed_model(payload: dict[str, Any], backend_model: str) -> str:
    """The model name reported back: the caller's, else the backend's."""
    model = payload.get("model")
    if isinstance(model, str) and model:
        return model
    return backend_model


def event_stream_response(frames: AsyncIterator[bytes]) -> StreamingResponse:
    return StreamingResponse(frames, media_type=SSE_MEDIA_TYPE, headers=dict(SSE_HEADERS))
