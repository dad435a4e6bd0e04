"""OpenAI-shaped output: response documents and emulated streams."""

from .documents import (
    build_chat_completion,
    build_response,
    build_response_shell,
    generate_chat_completion_id,
    generate_message_id,
    generate_response_id,
)
from .stream_emulator import (
    ChatCompletionStreamEmulator,
    ReplayCursor,
    ResponsesStreamEmulator,
    StreamState,
)

__all__ = [
    "ChatCompletionStreamEmulator",
    "ReplayCursor",
    "ResponsesStreamEmulator",
    "StreamState",
    "build_chat_completion",
    "build_response",
    "build_response_shell",
    "generate_chat_completion_id",
    "generate_message_id",
    "generate_response_id",
]
