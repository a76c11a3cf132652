"""Flatten a conversation snapshot into the single prompt the CLI accepts.

The CLI takes the whole request as one positional argument, so multi-turn
history is rendered as a role-tagged transcript.
"""

from __future__ import annotations

from cursor_bridge.stream.models import (
    AssistantMessage,
    Context,
    ImageContent,
    TextContent,
    ToolResultMessage,
    UserMessage,
)


def content_block_to_text(block: TextContent | ImageContent) -> str:
    """Render a content block as prompt text.

    The CLI's print mode has no image attachments, so images become a
    placeholder carrying the MIME type and approximate size.
    """
    if isinstance(block, TextContent):
        return block.text
    approx_bytes = round(len(block.data) * 3 / 4)
    return (
        f"[Image: {block.mime_type}, ~{approx_bytes} bytes; image input is not "
        "supported by the Cursor Agent CLI, the visual content cannot be passed "
        "through]"
    )


def serialize_context(context: Context) -> str:
    """Serialise *context* into a flat ``[Role]``-tagged transcript."""
    sections: list[str] = []

    if context.system_prompt:
        sections.append(f"[System]\n{context.system_prompt}\n")

    for msg in context.messages:
        if isinstance(msg, UserMessage):
            if isinstance(msg.content, str):
                text = msg.content
            else:
                text = "\n".join(content_block_to_text(b) for b in msg.content)
            sections.append(f"[User]\n{text}")
        elif isinstance(msg, AssistantMessage):
            text = "\n".join(b.text for b in msg.content)
            if text.strip():
                sections.append(f"[Assistant]\n{text}")
        elif isinstance(msg, ToolResultMessage):
            text = "\n".join(content_block_to_text(b) for b in msg.content)
            if text.strip():
                sections.append(f"[Tool result: {msg.tool_name}]\n{text}")

    return "\n\n".join(sections)
