"""Types for the OpenAI-compatible chat completions surface.

These follow the OpenAI API format. Only the fields the gateway reads or
writes are declared.
"""

from typing import Any, Literal, Optional
from typing_extensions import TypedDict


class ContentPart(TypedDict, total=False):
    """A content part for multi-part messages (OpenAI format).

    Only text-bearing parts (``text``, ``input_text``, ``output_text``) reach
    the prompt.
    """
    type: str
    text: Optional[str]
    image_url: Optional[dict[str, Any]]


class ChatMessage(TypedDict, total=False):
    """A message in a chat conversation.

    Attributes:
        role: "system", "user" or "assistant". Any other role is rendered
            without a label.
        content: Text content, or a list of ContentPart.
    """
    role: str
    content: str | list[ContentPart] | None


class ChatCompletionRequest(TypedDict, total=False):
    """Body of ``POST /v1/chat/completions`` (and the legacy ``/api/ai``)."""
    model: str
    messages: list[ChatMessage]
    temperature: float
    max_tokens: int
    top_p: float
    stream: bool


class Usage(TypedDict):
    """Token usage statistics (chat completions naming)."""
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


class AssistantMessage(TypedDict):
    role: Literal["assistant"]
    content: str


class Choice(TypedDict):
    index: int
    message: AssistantMessage
    finish_reason: str


class ChatCompletionResponse(TypedDict):
    """Non-streaming chat completion document."""
    id: str
    object: Literal["chat.completion"]
    created: int
    model: str
    choices: list[Choice]
    usage: Usage


class Delta(TypedDict, total=False):
    """A streamed delta of a choice."""
    role: str
    content: str


class ChunkChoice(TypedDict):
    index: int
    delta: Delta
    finish_reason: Optional[str]


class ChatCompletionChunk(TypedDict):
    """One ``chat.completion.chunk`` streaming frame."""
    id: str
    object: Literal["chat.completion.chunk"]
    created: int
    model: str
    choices: list[ChunkChoice]
