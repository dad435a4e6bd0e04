"""Workers AI inference backend client.

The gateway makes exactly one inference call per request. The backend is
anything with an ``async run(model, options)`` coroutine returning the Workers
AI ``result`` mapping (``{"response"?, "text"?, "usage"?}``);
``WorkersAIBackend`` is the HTTP implementation against the Cloudflare REST
API.
"""

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol

import httpx

from .exceptions import BackendError, ConfigurationError
from .upstream_transport import get_upstream_transport

logger = logging.getLogger("workers-gateway")

DEFAULT_BASE_URL = "https://api.cloudflare.com/client/v4"
DEFAULT_TIMEOUT = 60


class InferenceBackend(Protocol):
    async def run(self, model: str, options: Mapping[str, Any]) -> Mapping[str, Any]:
        ...


@dataclass(frozen=True)
class BackendResult:
    """Text and token counters produced by a single inference call."""

    text: str
    prompt_tokens: int = 0
    completion_tokens: int = 0

    @property
    def usage(self) -> dict[str, int]:
        return {
            "prompt_tokens": self.prompt_tokens,
            "completion_tokens": self.completion_tokens,
        }

    @classmethod
    def from_payload(cls, payload: Optional[Mapping[str, Any]]) -> "BackendResult":
        """Normalise a raw backend result.

        ``response`` is preferred over ``text``; either may be missing, in
        which case the text is empty. Missing or non-numeric counters are 0.
        """
        payload = payload or {}
        text = payload.get("response") or payload.get("text") or ""
        if not isinstance(text, str):
            text = str(text)
        usage = payload.get("usage")
        if not isinstance(usage, Mapping):
            usage = {}
        return cls(
            text=text,
            prompt_tokens=token_count(usage.get("prompt_tokens")),
            completion_tokens=token_count(usage.get("completion_tokens")),
        )


def token_count(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    try:
        count = int(value)
    except (TypeError, ValueError):
        return 0
    return max(count, 0)


def build_run_options(
    prompt: str,
    temperature: Optional[float] = None,
    max_tokens: Optional[int] = None,
) -> dict[str, Any]:
    """Build the backend options, omitting unset sampling parameters."""
    options: dict[str, Any] = {"prompt": prompt}
    if temperature is not None:
        options["temperature"] = temperature
    if max_tokens is not None:
        options["max_tokens"] = max_tokens
    return options


def format_httpx_error(exc: Exception, url: str, timeout: Optional[float] = None) -> str:
    """Produce a detailed, user-facing description of an httpx error."""
    parts = [exc.__class__.__name__]
    message = str(exc).strip()
    if message:
        parts.append(message)
    parts.append(f"url={url}")
    if isinstance(exc, httpx.TimeoutException):
        parts.append(f"timeout={timeout or DEFAULT_TIMEOUT}s")
    return "; ".join(parts)


def _describe_api_errors(body: Any) -> Optional[str]:
    if not isinstance(body, Mapping):
        return None
    errors = body.get("errors")
    if not isinstance(errors, list) or not errors:
        return None
    messages = []
    for error in errors:
        if isinstance(error, Mapping):
            code = error.get("code")
            text = error.get("message") or str(error)
            messages.append(f"{text} (code={code})" if code is not None else text)
        else:
            messages.append(str(error))
    return "; ".join(messages)


@dataclass
class WorkersAIBackend:
    """Cloudflare Workers AI REST client."""

    account_id: str
    api_token: str
    base_url: str = DEFAULT_BASE_URL
    timeout: Optional[float] = DEFAULT_TIMEOUT

    def build_url(self, model: str) -> str:
        base = self.base_url.rstrip("/")
        return f"{base}/accounts/{self.account_id}/ai/run/{model.lstrip('/')}"

    def build_headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            # Explicitly request uncompressed responses
            "Accept-Encoding": "identity",
        }
        if self.api_token:
            headers["Authorization"] = f"Bearer {self.api_token}"
        return headers

    async def run(self, model: str, options: Mapping[str, Any]) -> Mapping[str, Any]:
        """Invoke ``model`` once and return the unwrapped ``result`` mapping.

        Raises:
            BackendError: on transport failures, non-2xx statuses, bodies that
                are not JSON, or ``success: false`` envelopes.
            ConfigurationError: if no account id is configured.
        """
        if not self.account_id:
            raise ConfigurationError("Workers AI account_id is not configured")
        url = self.build_url(model)
        transport = get_upstream_transport(url)
        logger.debug("Running %s via %s", model, url)

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=transport, follow_redirects=True
            ) as client:
                resp = await client.post(url, headers=self.build_headers(), json=dict(options))
        except httpx.HTTPError as exc:
            detail = format_httpx_error(exc, url, self.timeout)
            logger.error("Workers AI request failed: %s", detail)
            raise BackendError(f"Workers AI request failed: {detail}") from exc

        logger.debug("Received response from %s: status %s", url, resp.status_code)

        try:
            body = resp.json()
        except ValueError:
            body = None

        if resp.status_code >= 400:
            detail = _describe_api_errors(body) or resp.text[:500]
            raise BackendError(
                f"Workers AI returned status {resp.status_code}: {detail}",
                status=resp.status_code,
            )
        if not isinstance(body, Mapping):
            raise BackendError("Workers AI returned a non-JSON body", status=resp.status_code)
        if body.get("success") is False:
            detail = _describe_api_errors(body) or "unknown error"
            raise BackendError(f"Workers AI run failed: {detail}", status=resp.status_code)

        result = body.get("result", body)
        if not isinstance(result, Mapping):
            raise BackendError("Workers AI result is not an object", status=resp.status_code)
        return result
