"""SSE (Server-Sent Events) framing helpers."""

import codecs
import json
from dataclasses import dataclass, field
from typing import Any, Optional

SSE_MEDIA_TYPE = "text/event-stream"

# Headers sent with every emulated stream
SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}

DONE_SENTINEL = "[DONE]"
DONE_FRAME = f"data: {DONE_SENTINEL}\n\n".encode("utf-8")


def encode_sse_data(payload: Any) -> bytes:
    """Frame a JSON-serialisable payload as a single ``data:`` event."""
    json_str = json.dumps(payload, ensure_ascii=False)
    return f"data: {json_str}\n\n".encode("utf-8")


@dataclass
class SSEEvent:
    data: Optional[str]
    other_lines: list[str] = field(default_factory=list)

    def json(self) -> Any:
        if self.data is None or self.data == DONE_SENTINEL:
            return None
        return json.loads(self.data)


class SSEDecoder:
    """Incremental decoder for ``\\n\\n``-delimited SSE events.

    Used by the test harness and clients to split a byte stream that may be
    chunked at arbitrary boundaries.
    """

    def __init__(self) -> None:
        self._buffer = ""
        # Multi-byte characters may straddle chunk boundaries.
        self._utf8 = codecs.getincrementaldecoder("utf-8")(errors="replace")

    def feed(self, chunk: bytes) -> list[SSEEvent]:
        if not chunk:
            return []
        self._buffer += self._utf8.decode(chunk)
        # A trailing CR may be the first half of a CRLF.
        held_cr = self._buffer.endswith("\r")
        if held_cr:
            self._buffer = self._buffer[:-1]
        self._buffer = self._buffer.replace("\r\n", "\n").replace("\r", "\n")
        events: list[SSEEvent] = []

        while True:
            sep_index = self._buffer.find("\n\n")
            if sep_index == -1:
                break
            raw_event = self._buffer[:sep_index]
            self._buffer = self._buffer[sep_index + 2:]
            if not raw_event.strip():
                continue
            events.append(self._parse_event(raw_event))

        if held_cr:
            self._buffer += "\r"
        return events

    def flush(self) -> Optional[bytes]:
        self._buffer += self._utf8.decode(b"", final=True)
        if not self._buffer:
            return None
        leftover = self._buffer
        self._buffer = ""
        return leftover.encode("utf-8")

    @staticmethod
    def _parse_event(raw: str) -> SSEEvent:
        data_lines: list[str] = []
        other_lines: list[str] = []
        for line in raw.split("\n"):
            if line.startswith("data:"):
                data_lines.append(line[5:].lstrip())
            else:
                other_lines.append(line)
        data = "\n".join(data_lines) if data_lines else None
        return SSEEvent(data=data, other_lines=other_lines)
