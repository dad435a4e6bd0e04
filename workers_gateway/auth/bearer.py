"""Static bearer-token authentication for the gateway."""

from __future__ import annotations

import hmac
import logging
import re

from fastapi import Request

from ..core.exceptions import AuthenticationError

logger = logging.getLogger("workers-gateway")

_BEARER_PATTERN = re.compile(r"^Bearer\s+(.+)$", re.IGNORECASE)


class BearerKeyValidator:
    """Checks ``Authorization: Bearer <token>`` against one shared secret.

    With no secret configured every request is accepted.
    """

    def __init__(self, api_key: str | None = None) -> None:
        self.api_key = api_key or None

    def is_enabled(self) -> bool:
        return self.api_key is not None

    def validate_request(self, request: Request) -> None:
        """Raise ``AuthenticationError`` unless the request carries the secret."""
        if self.api_key is None:
            return

        auth_header = request.headers.get("Authorization")
        if not auth_header:
            logger.warning("Request rejected: missing Authorization header")
            raise AuthenticationError("Missing Authorization header")

        match = _BEARER_PATTERN.match(auth_header)
        if not match:
            logger.warning("Request rejected: malformed Authorization header")
            raise AuthenticationError(
                "Invalid Authorization header format. Expected: Bearer <token>"
            )

        if not hmac.compare_digest(match.group(1).encode("utf-8"), self.api_key.encode("utf-8")):
            logger.warning("Request rejected: invalid API key")
            raise AuthenticationError("Invalid API key")


# Global validator - replaced by main.create_app from settings
_validator = BearerKeyValidator()


def set_key_validator(validator: BearerKeyValidator) -> None:
    global _validator
    _validator = validator


def get_key_validator() -> BearerKeyValidator:
    return _validator
