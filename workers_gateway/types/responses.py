"""Types for the OpenAI Responses API.

Covers the request body, the non-streaming response document and the
payloads of the eight streaming event kinds the gateway emits.
"""

from typing import Any, Literal, Optional, Union
from typing_extensions import TypedDict


Role = Literal["user", "assistant", "system"]

ItemStatus = Literal["in_progress", "completed"]

ResponseStatus = Literal["in_progress", "completed"]


# =============================================================================
# Input
# =============================================================================

class InputContentPart(TypedDict, total=False):
    """A structured content part of an input item.

    ``input_text`` and ``output_text`` carry ``text``; ``input_image`` parts
    are accepted but contribute nothing to the prompt.
    """
    type: Literal["input_text", "input_image", "output_text"]
    text: str
    image_url: str


class ResponseInputItem(TypedDict, total=False):
    role: Role
    content: Union[str, list[InputContentPart]]


class ResponsesRequest(TypedDict, total=False):
    """Body of ``POST /v1/responses``."""
    model: str
    input: Union[str, list[ResponseInputItem]]
    instructions: str
    temperature: float
    max_output_tokens: int
    top_p: float
    stream: bool
    store: bool


# =============================================================================
# Output
# =============================================================================

class OutputText(TypedDict, total=False):
    type: Literal["output_text"]
    text: str
    annotations: list[Any]


class MessageItem(TypedDict, total=False):
    id: str
    type: Literal["message"]
    role: Literal["assistant"]
    status: ItemStatus
    content: list[OutputText]


class InputTokensDetails(TypedDict):
    cached_tokens: int


class OutputTokensDetails(TypedDict):
    reasoning_tokens: int


class ResponseUsage(TypedDict, total=False):
    """Token usage statistics (Responses API naming)."""
    input_tokens: int
    output_tokens: int
    total_tokens: int
    input_tokens_details: InputTokensDetails
    output_tokens_details: OutputTokensDetails


class ResponseDocument(TypedDict, total=False):
    """Non-streaming ``response`` object."""
    id: str
    object: Literal["response"]
    created_at: int
    model: str
    status: ResponseStatus
    output: list[MessageItem]
    output_text: str
    usage: ResponseUsage


class ResponseShell(TypedDict, total=False):
    """The response object carried by ``response.created``/``response.completed``."""
    id: str
    object: Literal["response"]
    created_at: int
    model: str
    status: ResponseStatus
    error: Optional[dict[str, Any]]
    incomplete_details: Optional[dict[str, Any]]
    instructions: Optional[str]
    max_output_tokens: Optional[int]
    output: list[MessageItem]
    parallel_tool_calls: bool
    previous_response_id: Optional[str]
    reasoning: dict[str, Any]
    store: bool
    temperature: float
    text: dict[str, Any]
    tool_choice: str
    tools: list[Any]
    top_p: float
    truncation: str
    usage: Optional[ResponseUsage]
    user: Optional[str]
    metadata: dict[str, Any]


# =============================================================================
# Streaming event types
# =============================================================================

EVENT_RESPONSE_CREATED = "response.created"
EVENT_OUTPUT_ITEM_ADDED = "response.output_item.added"
EVENT_CONTENT_PART_ADDED = "response.content_part.added"
EVENT_OUTPUT_TEXT_DELTA = "response.output_text.delta"
EVENT_OUTPUT_TEXT_DONE = "response.output_text.done"
EVENT_CONTENT_PART_DONE = "response.content_part.done"
EVENT_OUTPUT_ITEM_DONE = "response.output_item.done"
EVENT_RESPONSE_COMPLETED = "response.completed"

# Lifecycle order of a single-message stream; deltas repeat in place.
STREAM_EVENT_ORDER = (
    EVENT_RESPONSE_CREATED,
    EVENT_OUTPUT_ITEM_ADDED,
    EVENT_CONTENT_PART_ADDED,
    EVENT_OUTPUT_TEXT_DELTA,
    EVENT_OUTPUT_TEXT_DONE,
    EVENT_CONTENT_PART_DONE,
    EVENT_OUTPUT_ITEM_DONE,
    EVENT_RESPONSE_COMPLETED,
)


class ResponseLifecycleEvent(TypedDict):
    type: str
    sequence_number: int
    response: ResponseShell


class OutputItemEvent(TypedDict):
    type: str
    sequence_number: int
    output_index: int
    item: MessageItem


class ContentPartEvent(TypedDict):
    type: str
    sequence_number: int
    item_id: str
    output_index: int
    content_index: int
    part: OutputText


class OutputTextDeltaEvent(TypedDict):
    type: str
    sequence_number: int
    item_id: str
    output_index: int
    content_index: int
    delta: str


class OutputTextDoneEvent(TypedDict):
    type: str
    sequence_number: int
    item_id: str
    output_index: int
    content_index: int
    text: str


StreamEvent = Union[
    ResponseLifecycleEvent,
    OutputItemEvent,
    ContentPartEvent,
    OutputTextDeltaEvent,
    OutputTextDoneEvent,
]
