"""Non-streaming OpenAI response documents.

Builds the chat completion and Responses API documents from a backend
result. Both builders are pure apart from the wall clock and a fresh uuid4
per id.
"""

import time
from typing import Any, Mapping, Optional
from uuid import uuid4

from ..core.backend import token_count
from ..types.chat import ChatCompletionResponse, Usage
from ..types.responses import MessageItem, ResponseDocument, ResponseShell, ResponseUsage


def generate_chat_completion_id() -> str:
    """Generate a unique chat completion ID."""
    return f"chatcmpl-{uuid4()}"


def generate_response_id() -> str:
    """Generate a unique response ID."""
    return f"resp_{uuid4().hex}"


def generate_message_id() -> str:
    """Generate a unique message ID."""
    return f"msg_{uuid4().hex}"


def unix_now() -> int:
    return int(time.time())


def _usage_counts(usage: Optional[Mapping[str, Any]]) -> tuple[int, int]:
    usage = usage or {}
    return (
        token_count(usage.get("prompt_tokens")),
        token_count(usage.get("completion_tokens")),
    )


def build_chat_usage(prompt_tokens: int, completion_tokens: int) -> Usage:
    return {
        "prompt_tokens": prompt_tokens,
        "completion_tokens": completion_tokens,
        "total_tokens": prompt_tokens + completion_tokens,
    }


def build_response_usage(
    input_tokens: int,
    output_tokens: int,
    *,
    include_details: bool = False,
) -> ResponseUsage:
    usage: ResponseUsage = {
        "input_tokens": input_tokens,
        "output_tokens": output_tokens,
        "total_tokens": input_tokens + output_tokens,
    }
    if include_details:
        usage["input_tokens_details"] = {"cached_tokens": 0}
        usage["output_tokens_details"] = {"reasoning_tokens": 0}
    return usage


def build_message_item(item_id: str, text: str, status: str = "completed") -> MessageItem:
    """Build the assistant message output item."""
    return {
        "type": "message",
        "id": item_id,
        "status": status,
        "role": "assistant",
        "content": [{"type": "output_text", "text": text, "annotations": []}],
    }


def build_chat_completion(
    model: str,
    text: str,
    usage: Optional[Mapping[str, Any]] = None,
) -> ChatCompletionResponse:
    """Build a ``chat.completion`` document.

    Args:
        model: Model name echoed back to the caller.
        text: The assistant message content.
        usage: Backend usage with optional ``prompt_tokens`` and
            ``completion_tokens``; missing counters count as 0.
    """
    prompt_tokens, completion_tokens = _usage_counts(usage)
    return {
        "id": generate_chat_completion_id(),
        "object": "chat.completion",
        "created": unix_now(),
        "model": model,
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": text},
                "finish_reason": "stop",
            }
        ],
        "usage": build_chat_usage(prompt_tokens, completion_tokens),
    }


def build_response(
    model: str,
    text: str,
    usage: Optional[Mapping[str, Any]] = None,
) -> ResponseDocument:
    """Build a Responses API ``response`` document with one assistant message."""
    prompt_tokens, completion_tokens = _usage_counts(usage)
    return {
        "id": generate_response_id(),
        "object": "response",
        "created_at": unix_now(),
        "model": model,
        "status": "completed",
        "output": [build_message_item(generate_message_id(), text)],
        "output_text": text,
        "usage": build_response_usage(prompt_tokens, completion_tokens),
    }


# Fields echoed from the request into streamed response shells, with the
# values reported when the request leaves them unset.
SHELL_ECHO_DEFAULTS: dict[str, Any] = {
    "instructions": None,
    "max_output_tokens": None,
    "temperature": 1.0,
    "top_p": 1.0,
}


def build_response_shell(
    response_id: str,
    model: str,
    status: str,
    *,
    created_at: Optional[int] = None,
    output: Optional[list[MessageItem]] = None,
    usage: Optional[ResponseUsage] = None,
    request: Optional[Mapping[str, Any]] = None,
) -> ResponseShell:
    """Build the full response object carried by lifecycle stream events."""
    request = request or {}
    shell: ResponseShell = {
        "id": response_id,
        "object": "response",
        "created_at": created_at if created_at is not None else unix_now(),
        "model": model,
        "status": status,
        "error": None,
        "incomplete_details": None,
        "output": list(output or []),
        "parallel_tool_calls": True,
        "previous_response_id": None,
        "reasoning": {"effort": "medium", "generate_summary": None},
        "store": True,
        "text": {"format": {"type": "text"}},
        "tool_choice": "auto",
        "tools": [],
        "truncation": "disabled",
        "usage": usage,
        "user": None,
        "metadata": {},
    }
    for key, default in SHELL_ECHO_DEFAULTS.items():
        value = request.get(key)
        shell[key] = value if value is not None else default
    return shell
