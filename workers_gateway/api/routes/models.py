"""Models listing endpoint - OpenAI compatible."""

import logging

from ...core.models import list_model_cards

logger = logging.getLogger("workers-gateway")


async def list_models() -> dict:
    """List available models in OpenAI API format.

    GET /v1/models

    Returns:
        A dictionary containing every alias in the model table.
    """
    logger.info("Received models list request")
    return {
        "object": "list",
        "data": list_model_cards(),
    }
