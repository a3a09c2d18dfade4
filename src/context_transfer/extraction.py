"""Context extraction: choose which messages of a transcript to carry over.

Output is always an order-preserving subsequence of the input, never longer
than the input.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from context_transfer.core.types import Message

log = logging.getLogger(__name__)

IMPORTANT_KEYWORDS: frozenset[str] = frozenset(
    {
        "system",
        "setup",
        "configuration",
        "requirements",
        "constraints",
        "important",
        "note",
        "warning",
        "error",
        "critical",
        "essential",
    }
)

# How many of the important earlier messages smart extraction keeps.
DEFAULT_IMPORTANT_WINDOW = 2


def is_important(message: Message) -> bool:
    """True for system messages and messages mentioning an important keyword."""
    if message.role == "system":
        return True
    lowered = message.content.lower()
    return any(keyword in lowered for keyword in IMPORTANT_KEYWORDS)


def extract_context(
    messages: Sequence[Message],
    last_n: int = 5,
    smart_extraction: bool = True,
    *,
    important_window: int = DEFAULT_IMPORTANT_WINDOW,
) -> list[Message]:
    """Select the messages to retain from a transcript.

    Args:
        messages: The full transcript, in conversation order.
        last_n: Number of most recent messages to keep.
        smart_extraction: When True, up to ``important_window`` important
            earlier messages are kept ahead of the recent ones. The recent
            tail is shortened by the number of important messages kept. When that
            leaves no room the tail slices as Python does, so the total can
            exceed ``last_n`` but never ``len(messages)``.
        important_window: Maximum number of important earlier messages kept.

    Returns:
        A subsequence of ``messages`` preserving relative order.
    """
    if not messages:
        return []
    if smart_extraction:
        return _smart_extract(messages, last_n, important_window)

    count = min(max(last_n, 0), len(messages))
    extracted = list(messages[len(messages) - count :])
    log.debug("Extracted %d messages from conversation", len(extracted))
    return extracted


def _smart_extract(
    messages: Sequence[Message], last_n: int, important_window: int
) -> list[Message]:
    if len(messages) <= last_n:
        return list(messages)

    split = len(messages) - max(last_n, 0)
    recent = list(messages[split:])
    important = [m for m in messages[:split] if is_important(m)]

    window = max(important_window, 0)
    if not important or window == 0:
        return recent

    kept = important[-window:]
    # A fill of zero keeps all of recent; a negative fill drops that many from
    # its front.
    combined = kept + recent[-(last_n - len(kept)) :]
    log.debug(
        "Smart extraction: %d important + %d recent messages",
        len(kept),
        len(combined) - len(kept),
    )
    return combined
