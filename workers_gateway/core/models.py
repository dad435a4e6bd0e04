"""Caller-facing model aliases and their Workers AI backend models."""

import logging
from types import MappingProxyType
from typing import Mapping, NamedTuple, Optional

logger = logging.getLogger("workers-gateway")


class ModelAlias(NamedTuple):
    """A caller-facing model name and the backend model it runs on."""

    backend_model: str
    owned_by: str


LLAMA_8B = "@cf/meta/llama-3.1-8b-instruct"
LLAMA_70B = "@cf/meta/llama-3.1-70b-instruct"
DEEPSEEK_R1_QWEN_32B = "@cf/deepseek-ai/deepseek-r1-distill-qwen-32b"

# Smallest variant; used for any name not in the table.
DEFAULT_BACKEND_MODEL = LLAMA_8B

# Read-only after import, safe to share across concurrent requests.
MODEL_TABLE: Mapping[str, ModelAlias] = MappingProxyType({
    "gpt-4": ModelAlias(LLAMA_70B, "openai"),
    "gpt-4o": ModelAlias(LLAMA_70B, "openai"),
    "gpt-4o-mini": ModelAlias(LLAMA_8B, "openai"),
    "gpt-3.5-turbo": ModelAlias(LLAMA_8B, "openai"),
    "llama-3.1-8b": ModelAlias(LLAMA_8B, "meta"),
    "llama-3.1-70b": ModelAlias(LLAMA_70B, "meta"),
    "deepseek-r1": ModelAlias(DEEPSEEK_R1_QWEN_32B, "deepseek-ai"),
    "deepseek-chat": ModelAlias(DEEPSEEK_R1_QWEN_32B, "deepseek-ai"),
})


def resolve_backend_model(requested_model: Optional[str]) -> str:
    """Map a client-supplied model name onto a backend model.

    Unknown names never fail the request; they fall back to
    ``DEFAULT_BACKEND_MODEL``.
    """
    alias = MODEL_TABLE.get(requested_model) if isinstance(requested_model, str) else None
    if alias is None:
        logger.debug(
            "Model %r not in table, using default %s", requested_model, DEFAULT_BACKEND_MODEL
        )
        return DEFAULT_BACKEND_MODEL
    return alias.backend_model


def list_model_cards() -> list[dict[str, str]]:
    """Return an OpenAI-style model card for every alias, in table order."""
    return [
        {"id": name, "object": "model", "owned_by": alias.owned_by}
        for name, alias in MODEL_TABLE.items()
    ]
