"""Flatten chat messages and Responses API input into a single prompt.

Workers AI text models are invoked with one ``prompt`` string, so the
conversation is rendered as role-tagged blocks::

    [System]
    You are terse.

    [User]
    hi
"""

from typing import Any, Iterable, Mapping, Optional, Union

ROLE_LABELS = {
    "system": "System",
    "user": "User",
    "assistant": "Assistant",
}

BLOCK_SEPARATOR = "\n\n"

# Content part variants that carry text. Anything else (input_image, ...)
# projects to nothing.
RESPONSES_TEXT_PARTS = frozenset({"input_text", "output_text"})
CHAT_TEXT_PARTS = frozenset({"text", "input_text", "output_text"})


def render_block(role: Any, content: str) -> str:
    """Render one turn; unknown roles are emitted without a label."""
    label = ROLE_LABELS.get(role) if isinstance(role, str) else None
    if label is None:
        return content
    return f"[{label}]\n{content}"


def part_text(part: Any, text_types: frozenset = RESPONSES_TEXT_PARTS) -> Optional[str]:
    """Project a single content part onto its text fragment, if it has one."""
    if not isinstance(part, Mapping):
        return None
    if part.get("type") not in text_types:
        return None
    text = part.get("text")
    return text if isinstance(text, str) else ""


def extract_text(content: Any, text_types: frozenset = RESPONSES_TEXT_PARTS) -> str:
    """Extract the text of a message's content.

    Strings are used verbatim; lists of content parts keep only text-bearing
    parts, concatenated in order with no separator.
    """
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        fragments = (part_text(part, text_types) for part in content)
        return "".join(fragment for fragment in fragments if fragment is not None)
    return ""


def messages_to_prompt(messages: Iterable[Mapping[str, Any]]) -> str:
    """Compile a chat completions ``messages`` array into a prompt."""
    blocks = []
    for message in messages:
        if not isinstance(message, Mapping):
            continue
        content = extract_text(message.get("content"), CHAT_TEXT_PARTS)
        blocks.append(render_block(message.get("role"), content))
    return BLOCK_SEPARATOR.join(blocks)


def input_to_prompt(
    input_: Union[str, Iterable[Mapping[str, Any]]],
    instructions: Optional[str] = None,
) -> str:
    """Compile a Responses API ``input`` (plus ``instructions``) into a prompt."""
    blocks = []
    if instructions:
        blocks.append(render_block("system", instructions))

    if isinstance(input_, str):
        blocks.append(render_block("user", input_))
    else:
        for item in input_:
            if not isinstance(item, Mapping):
                continue
            blocks.append(render_block(item.get("role"), extract_text(item.get("content"))))

    return BLOCK_SEPARATOR.join(blocks)
