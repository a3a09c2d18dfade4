"""Conversation statistics and advisory recommendations.

Validation counts every entry. Messages whose role is not user, assistant or
system are reported as unknown rather than discarded.
"""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import TYPE_CHECKING, Any

from context_transfer.core.types import (
    ConversationAnalysis,
    Message,
    ValidationResult,
)
from context_transfer.exceptions import ValidationError
from context_transfer.parsing import coerce_entries

if TYPE_CHECKING:
    from collections.abc import Sequence

log = logging.getLogger(__name__)

LONG_MESSAGE_THRESHOLD = 1000
LARGE_CONVERSATION_THRESHOLD = 20


def _role_and_content(entry: Any) -> tuple[Any, str]:
    if isinstance(entry, Message):
        return entry.role, entry.content
    if not isinstance(entry, Mapping):
        raise ValidationError(
            f"Message entry must be a mapping, got {type(entry).__name__}"
        )
    content = entry.get("content")
    if not isinstance(content, str):
        raise ValidationError(
            f"Message content must be str, got {type(content).__name__}"
        )
    return entry.get("role"), content


def analyze_conversation(entries: Sequence[Any]) -> ConversationAnalysis:
    """Compute per-role counts and the average content length."""
    counts = {"user": 0, "assistant": 0, "system": 0}
    unknown = 0
    total_length = 0

    for entry in entries:
        role, content = _role_and_content(entry)
        if role in counts:
            counts[role] += 1
        else:
            unknown += 1
        total_length += len(content)

    total = len(entries)
    return ConversationAnalysis(
        total_messages=total,
        user_messages=counts["user"],
        assistant_messages=counts["assistant"],
        system_messages=counts["system"],
        unknown_messages=unknown,
        average_message_length=total_length / total if total else 0,
        has_system_context=counts["system"] > 0,
    )


def generate_recommendations(analysis: ConversationAnalysis) -> list[str]:
    """Advisory, human-readable suggestions; nothing here is enforced."""
    recommendations: list[str] = []

    if analysis.total_messages == 0:
        recommendations.append("No messages found in conversation data")
    if analysis.user_messages == 0:
        recommendations.append(
            "No user messages found - ensure conversation has user input"
        )
    if analysis.assistant_messages == 0:
        recommendations.append(
            "No assistant messages found - ensure conversation has AI responses"
        )
    if analysis.unknown_messages > 0:
        recommendations.append(
            f"Found {analysis.unknown_messages} messages with unknown roles"
        )
    if analysis.average_message_length > LONG_MESSAGE_THRESHOLD:
        recommendations.append(
            "Long messages detected - consider using smart extraction"
        )
    if analysis.total_messages > LARGE_CONVERSATION_THRESHOLD:
        recommendations.append(
            "Large conversation detected - consider using smart extraction "
            "and detailed summary"
        )
    if not analysis.has_system_context:
        recommendations.append(
            "No system context found - consider adding system messages for "
            "better context"
        )
    return recommendations


def validate_conversation_data(data: Any) -> ValidationResult:
    """Normalize and analyze conversation data.

    Never raises: any failure becomes a ``success=False`` result.
    """
    try:
        entries = coerce_entries(data)
        analysis = analyze_conversation(entries)
    except Exception as e:  # noqa: BLE001
        log.warning("Conversation validation failed: %s", e)
        return ValidationResult(
            success=False,
            valid=False,
            error=str(e),
            error_type=type(e).__name__,
        )
    return ValidationResult(
        success=True,
        valid=True,
        analysis=analysis,
        recommendations=tuple(generate_recommendations(analysis)),
    )
