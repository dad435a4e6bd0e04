"""Authentication module for the gateway."""

from .bearer import BearerKeyValidator, get_key_validator, set_key_validator

__all__ = ["BearerKeyValidator", "get_key_validator", "set_key_validator"]
