"""Type definitions for the gateway."""

from .chat import (
    ChatCompletionChunk,
    ChatCompletionRequest,
    ChatCompletionResponse,
    ChatMessage,
    ContentPart,
    Usage,
)
from .responses import (
    MessageItem,
    ResponseDocument,
    ResponseInputItem,
    ResponseShell,
    ResponseUsage,
    ResponsesRequest,
    StreamEvent,
)

__all__ = [
    "ChatCompletionChunk",
    "ChatCompletionRequest",
    "ChatCompletionResponse",
    "ChatMessage",
    "ContentPart",
    "MessageItem",
    "ResponseDocument",
    "ResponseInputItem",
    "ResponseShell",
    "ResponseUsage",
    "ResponsesRequest",
    "StreamEvent",
    "Usage",
]
