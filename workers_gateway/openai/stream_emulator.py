"""Emulated streaming for already-generated text.

The backend returns the whole completion at once. To give streaming clients
the event protocol they expect, the final text is replayed in fixed-width
slices with a fixed delay between emissions.

Chat Completions stream::

    data: {"object":"chat.completion.chunk","choices":[{"delta":{"content":"Hell"}}]}
    data: {"object":"chat.completion.chunk","choices":[{"delta":{},"finish_reason":"stop"}]}
    data: [DONE]

Responses API stream::

    data: {"type":"response.created",...}
    data: {"type":"response.output_item.added",...}
    data: {"type":"response.content_part.added",...}
    data: {"type":"response.output_text.delta","delta":"Hell",...}
    data: {"type":"response.output_text.done","text":"Hello",...}
    data: {"type":"response.content_part.done",...}
    data: {"type":"response.output_item.done",...}
    data: {"type":"response.completed",...}

Each emulator is an explicit state machine advanced by ``stream()``. Between
slices the loop first checks the client connection and stops for good if it
has gone away, then sleeps for the pacing delay.
"""

import asyncio
import logging
import math
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, AsyncIterator, Awaitable, Callable, Mapping, Optional

from ..core.backend import token_count
from ..core.sse import DONE_FRAME, encode_sse_data
from ..types.responses import (
    EVENT_CONTENT_PART_ADDED,
    EVENT_CONTENT_PART_DONE,
    EVENT_OUTPUT_ITEM_ADDED,
    EVENT_OUTPUT_ITEM_DONE,
    EVENT_OUTPUT_TEXT_DELTA,
    EVENT_OUTPUT_TEXT_DONE,
    EVENT_RESPONSE_COMPLETED,
    EVENT_RESPONSE_CREATED,
)
from .documents import (
    build_message_item,
    build_response_shell,
    build_response_usage,
    generate_chat_completion_id,
    generate_message_id,
    generate_response_id,
    unix_now,
)

logger = logging.getLogger("workers-gateway")

DEFAULT_SLICE_WIDTH = 4
DEFAULT_PACING_DELAY = 0.02  # seconds

DisconnectChecker = Callable[[], Awaitable[bool]]


class StreamState(str, Enum):
    CREATED = "created"
    STREAMING = "streaming"
    CLOSING = "closing"
    DONE = "done"
    ABORTED = "aborted"


TERMINAL_STATES = frozenset({StreamState.DONE, StreamState.ABORTED})


class ReplayCursor:
    """Cursor over the final text, handing it out in fixed-width slices."""

    def __init__(self, text: str, slice_width: int = DEFAULT_SLICE_WIDTH) -> None:
        if slice_width < 1:
            raise ValueError(f"slice_width must be positive, got {slice_width}")
        self.text = text
        self.slice_width = slice_width
        self.position = 0

    @property
    def exhausted(self) -> bool:
        return self.position >= len(self.text)

    def next_slice(self) -> str:
        chunk = self.text[self.position:self.position + self.slice_width]
        self.position += self.slice_width
        return chunk

    def slice_count(self) -> int:
        return math.ceil(len(self.text) / self.slice_width)


class PacedStreamEmulator(ABC):
    """Drives a state machine, yielding SSE frames with pacing between slices.

    Subclasses implement ``_advance``, which performs one transition and
    returns the frames it produced plus whether the pacing delay should
    follow them.
    """

    initial_state = StreamState.STREAMING

    def __init__(
        self,
        model: str,
        text: str,
        *,
        slice_width: int = DEFAULT_SLICE_WIDTH,
        pacing_delay: float = DEFAULT_PACING_DELAY,
        disconnect_checker: Optional[DisconnectChecker] = None,
    ) -> None:
        if not math.isfinite(pacing_delay) or pacing_delay < 0:
            raise ValueError(f"pacing_delay must be finite and non-negative, got {pacing_delay}")
        self.model = model
        self.cursor = ReplayCursor(text, slice_width)
        self.pacing_delay = pacing_delay
        self.disconnect_checker = disconnect_checker
        self.state = self.initial_state

    @property
    def text(self) -> str:
        return self.cursor.text

    async def stream(self) -> AsyncIterator[bytes]:
        """Yield every SSE frame of the stream, in order."""
        while self.state not in TERMINAL_STATES:
            frames, paced = self._advance()
            for frame in frames:
                yield frame
            if not paced or self.state in TERMINAL_STATES:
                continue
            if await self._channel_closed():
                logger.info(
                    "Client disconnected, stopping %s replay at offset %d/%d",
                    type(self).__name__,
                    min(self.cursor.position, len(self.text)),
                    len(self.text),
                )
                self.state = StreamState.ABORTED
                return
            await asyncio.sleep(self.pacing_delay)

    async def _channel_closed(self) -> bool:
        if self.disconnect_checker is None:
            return False
        return bool(await self.disconnect_checker())

    @abstractmethod
    def _advance(self) -> tuple[list[bytes], bool]:
        """Perform one transition; return (frames, pace_after)."""
        pass


class ChatCompletionStreamEmulator(PacedStreamEmulator):
    """Replays text as ``chat.completion.chunk`` frames followed by ``[DONE]``."""

    def __init__(self, model: str, text: str, **kwargs: Any) -> None:
        super().__init__(model, text, **kwargs)
        self.completion_id = generate_chat_completion_id()
        self.created = unix_now()
        self._sent_role = False

    def _chunk(self, delta: dict[str, str], finish_reason: Optional[str]) -> bytes:
        return encode_sse_data({
            "id": self.completion_id,
            "object": "chat.completion.chunk",
            "created": self.created,
            "model": self.model,
            "choices": [
                {"index": 0, "delta": delta, "finish_reason": finish_reason},
            ],
        })

    def _advance(self) -> tuple[list[bytes], bool]:
        if not self.cursor.exhausted:
            delta = {"content": self.cursor.next_slice()}
            if not self._sent_role:
                delta = {"role": "assistant", **delta}
                self._sent_role = True
            return [self._chunk(delta, None)], True

        self.state = StreamState.DONE
        return [self._chunk({}, "stop"), DONE_FRAME], False


class ResponsesStreamEmulator(PacedStreamEmulator):
    """Replays text as the Responses API event lifecycle for one message."""

    initial_state = StreamState.CREATED
    output_index = 0
    content_index = 0

    def __init__(
        self,
        model: str,
        text: str,
        *,
        usage: Optional[Mapping[str, Any]] = None,
        request: Optional[Mapping[str, Any]] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(model, text, **kwargs)
        self.response_id = generate_response_id()
        self.item_id = generate_message_id()
        self.created_at = unix_now()
        self.request = request or {}
        usage = usage or {}
        self.prompt_tokens = token_count(usage.get("prompt_tokens"))
        self.completion_tokens = token_count(usage.get("completion_tokens"))
        self.sequence_number = 0

    def _event(self, event_type: str, data: dict[str, Any]) -> bytes:
        self.sequence_number += 1
        return encode_sse_data({
            "type": event_type,
            "sequence_number": self.sequence_number,
            **data,
        })

    def _shell(self, status: str, **kwargs: Any) -> dict[str, Any]:
        return build_response_shell(
            self.response_id,
            self.model,
            status,
            created_at=self.created_at,
            request=self.request,
            **kwargs,
        )

    def _part_position(self) -> dict[str, Any]:
        return {
            "item_id": self.item_id,
            "output_index": self.output_index,
            "content_index": self.content_index,
        }

    def final_usage(self) -> dict[str, Any]:
        """Usage for ``response.completed``; output falls back to the slice count."""
        output_tokens = self.completion_tokens or self.cursor.slice_count()
        return build_response_usage(self.prompt_tokens, output_tokens, include_details=True)

    def _advance(self) -> tuple[list[bytes], bool]:
        if self.state is StreamState.CREATED:
            self.state = StreamState.STREAMING
            return [
                self._event(EVENT_RESPONSE_CREATED, {"response": self._shell("in_progress")}),
                self._event(EVENT_OUTPUT_ITEM_ADDED, {
                    "output_index": self.output_index,
                    "item": {
                        "id": self.item_id,
                        "type": "message",
                        "role": "assistant",
                        "content": [],
                        "status": "in_progress",
                    },
                }),
                self._event(EVENT_CONTENT_PART_ADDED, {
                    **self._part_position(),
                    "part": {"type": "output_text", "text": "", "annotations": []},
                }),
            ], False

        if self.state is StreamState.STREAMING:
            if self.cursor.exhausted:
                self.state = StreamState.CLOSING
                return [], False
            return [
                self._event(EVENT_OUTPUT_TEXT_DELTA, {
                    **self._part_position(),
                    "delta": self.cursor.next_slice(),
                }),
            ], True

        # CLOSING: the full text goes out once, in output_text.done
        self.state = StreamState.DONE
        return [
            self._event(EVENT_OUTPUT_TEXT_DONE, {
                **self._part_position(),
                "text": self.text,
            }),
            self._event(EVENT_CONTENT_PART_DONE, {
                **self._part_position(),
                "part": {"type": "output_text", "text": "", "annotations": []},
            }),
            self._event(EVENT_OUTPUT_ITEM_DONE, {
                "output_index": self.output_index,
                "item": {
                    "id": self.item_id,
                    "type": "message",
                    "role": "assistant",
                    "content": [],
                    "status": "completed",
                },
            }),
            self._event(EVENT_RESPONSE_COMPLETED, {
                "response": self._shell(
                    "completed",
                    output=[build_message_item(self.item_id, self.text)],
                    usage=self.final_usage(),
                ),
            }),
        ], False
