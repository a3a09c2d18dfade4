"""Render extracted messages as a textual summary.

Three strategies are available: ``concise`` (one truncated line per message),
``detailed`` (numbered, untruncated, blank-line separated) and ``structured``
(system context block followed by an interleaved conversation flow). Unknown
strategies fall back to ``concise``.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
import logging

from context_transfer.core.types import Message

log = logging.getLogger(__name__)

EMPTY_SUMMARY = "No conversation context available."
DEFAULT_MAX_CHARS = 500
ELLIPSIS = "..."

_ROLE_LABELS = {"user": "User", "assistant": "Assistant", "system": "System"}


def summarize_context(
    messages: Sequence[Message],
    summary_type: str = "concise",
    *,
    max_chars: int = DEFAULT_MAX_CHARS,
) -> str:
    """Summarize messages with the named strategy.

    Args:
        messages: Extracted messages, in order.
        summary_type: ``concise``, ``detailed`` or ``structured``.
        max_chars: Per-message truncation length for ``concise``.

    Returns:
        The summary text, or the fixed sentinel when there are no messages.
    """
    if not messages:
        return EMPTY_SUMMARY
    if summary_type == "structured":
        return structured_summary(messages)
    if summary_type == "detailed":
        return detailed_summary(messages)
    return concise_summary(messages, max_chars=max_chars)


def concise_summary(
    messages: Sequence[Message], *, max_chars: int = DEFAULT_MAX_CHARS
) -> str:
    parts = []
    for message in messages:
        content = message.content
        if len(content) > max_chars:
            content = content[:max_chars] + ELLIPSIS
        parts.append(f"{_ROLE_LABELS[message.role]}: {content}")
    log.debug("Generated concise summary with %d parts", len(parts))
    return "\n".join(parts)


def detailed_summary(messages: Sequence[Message]) -> str:
    parts = []
    for i, message in enumerate(messages, 1):
        parts.append(_DETAILED_LINES[message.role](i, message.content))
    log.debug("Generated detailed summary with %d parts", len(parts))
    return "\n\n".join(parts)


_DETAILED_LINES: dict[str, Callable[[int, str], str]] = {
    "user": lambda i, content: f"User (Message {i}): {content}",
    "assistant": lambda i, content: f"Assistant (Response {i}): {content}",
    "system": lambda _i, content: f"System Configuration: {content}",
}


def structured_summary(messages: Sequence[Message]) -> str:
    """Group by role, then interleave user and assistant turns positionally."""
    user = [m.content for m in messages if m.role == "user"]
    assistant = [m.content for m in messages if m.role == "assistant"]
    system = [m.content for m in messages if m.role == "system"]

    parts: list[str] = []
    if system:
        parts.append("System Context:")
        parts.extend(f"- {content}" for content in system)
        parts.append("")

    parts.append("Conversation Flow:")
    for i in range(max(len(user), len(assistant))):
        if i < len(user):
            parts.append(f"User: {user[i]}")
        if i < len(assistant):
            parts.append(f"Assistant: {assistant[i]}")
        parts.append("")

    log.debug(
        "Generated structured summary with %d user and %d assistant messages",
        len(user),
        len(assistant),
    )
    return "\n".join(parts).rstrip()
