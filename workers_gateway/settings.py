"""Resolved gateway settings.

Environment variables take priority over the config file:
WORKERS_GATEWAY_HOST, WORKERS_GATEWAY_PORT and OPENAI_API_KEY.
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from typing import Any, Mapping

from .core.backend import DEFAULT_BASE_URL, DEFAULT_TIMEOUT
from .openai.stream_emulator import DEFAULT_PACING_DELAY, DEFAULT_SLICE_WIDTH

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8787


@dataclass(frozen=True)
class GatewaySettings:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    account_id: str = ""
    api_token: str = ""
    base_url: str = DEFAULT_BASE_URL
    timeout: float | None = DEFAULT_TIMEOUT
    slice_width: int = DEFAULT_SLICE_WIDTH
    pacing_delay: float = DEFAULT_PACING_DELAY
    api_key: str | None = None

    @classmethod
    def from_config(cls, config: Mapping[str, Any] | None) -> "GatewaySettings":
        config = config or {}
        server = _section(config, "server")
        backend = _section(config, "backend")
        streaming = _section(config, "streaming")
        auth = _section(config, "auth")

        host = os.getenv("WORKERS_GATEWAY_HOST") or str(server.get("host") or DEFAULT_HOST)
        port = _get_int(server, "port", DEFAULT_PORT)
        env_port = os.getenv("WORKERS_GATEWAY_PORT")
        if env_port is not None:
            port = _get_int({"port": env_port}, "port", port)

        slice_width = _get_int(streaming, "slice_width", DEFAULT_SLICE_WIDTH)
        if slice_width < 1:
            slice_width = DEFAULT_SLICE_WIDTH
        pacing_delay = _get_optional_float(streaming, "pacing_delay_s", DEFAULT_PACING_DELAY)
        if pacing_delay is None or not math.isfinite(pacing_delay) or pacing_delay < 0:
            pacing_delay = DEFAULT_PACING_DELAY

        api_key = os.getenv("OPENAI_API_KEY") or auth.get("api_key") or None

        return cls(
            host=host,
            port=port,
            account_id=str(backend.get("account_id") or ""),
            api_token=str(backend.get("api_token") or ""),
            base_url=str(backend.get("base_url") or DEFAULT_BASE_URL),
            timeout=_get_optional_float(backend, "timeout", DEFAULT_TIMEOUT),
            slice_width=slice_width,
            pacing_delay=pacing_delay,
            api_key=str(api_key) if api_key else None,
        )


def _section(config: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = config.get(key)
    return value if isinstance(value, Mapping) else {}


def _get_int(config: Mapping[str, Any], key: str, default: int) -> int:
    """Get an integer value from config with fallback."""
    value = config.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except (ValueError, TypeError):
        return default


def _get_optional_float(
    config: Mapping[str, Any], key: str, default: float | None = None
) -> float | None:
    """Get an optional float value from config with fallback."""
    value = config.get(key)
    if value is None:
        return default
    try:
        return float(value)
    except (ValueError, TypeError):
        return default
