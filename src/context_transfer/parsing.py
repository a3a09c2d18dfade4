"""Conversation parsing and normalization.

Turns raw transcript text (JSON, prefixed plain text, or heading-delimited
markdown) into an ordered list of `Message` objects, and normalizes the
conversation data shapes accepted by the orchestrator and the validator.

Parsing and I/O errors propagate to the caller: a bad path or a bad format is
a caller mistake, not something to recover from here.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import json
import logging
import os
from pathlib import Path
from typing import Any

from context_transfer.core.types import ROLES, Message
from context_transfer.exceptions import FormatError, ValidationError

log = logging.getLogger(__name__)

SUPPORTED_FORMATS: tuple[str, ...] = ("json", "txt", "markdown")

# Line prefixes that open a new message, per format.
TEXT_PREFIXES: tuple[tuple[str, str], ...] = (
    ("User:", "user"),
    ("Assistant:", "assistant"),
    ("System:", "system"),
)
MARKDOWN_PREFIXES: tuple[tuple[str, str], ...] = (
    ("### User:", "user"),
    ("### Assistant:", "assistant"),
    ("### System:", "system"),
)


def detect_format(path: str | os.PathLike[str]) -> str:
    """Infer the format tag from a file extension (``txt`` when unknown)."""
    suffix = Path(path).suffix.lower()
    if suffix == ".json":
        return "json"
    if suffix in (".md", ".markdown"):
        return "markdown"
    return "txt"


def parse_records(text: str, fmt: str) -> list[Any]:
    """Parse raw text into message records without checking roles.

    Records are whatever the source holds: `{role, content}` dicts for text
    and markdown, arbitrary JSON values for JSON. Use `to_messages` to turn
    them into validated `Message` objects.

    Raises:
        FormatError: If the format tag is unsupported or the JSON shape is
            invalid.
    """
    if fmt == "json":
        return _parse_json(text)
    if fmt == "txt":
        return _parse_prefixed(_lines(text.strip()), TEXT_PREFIXES)
    if fmt == "markdown":
        return _parse_prefixed(_lines(text), MARKDOWN_PREFIXES)
    raise FormatError(f"Unsupported format: {fmt}")


def parse_conversation(text: str, fmt: str) -> list[Message]:
    """Parse raw text in the given format into messages."""
    return to_messages(parse_records(text, fmt))


def load_records(path: str | os.PathLike[str], fmt: str = "auto") -> list[Any]:
    """Read a conversation file and return its raw message records.

    Args:
        path: File to read.
        fmt: ``json``, ``txt``, ``markdown`` or ``auto`` (detect from extension).

    Raises:
        FormatError: If the format is unsupported or the content malformed.
        OSError: If the file cannot be read.
    """
    if fmt == "auto":
        fmt = detect_format(path)
    if fmt not in SUPPORTED_FORMATS:
        raise FormatError(f"Unsupported format: {fmt}")
    text = Path(path).read_text(encoding="utf-8")
    records = parse_records(text, fmt)
    log.debug("Loaded %d messages from %s file %s", len(records), fmt, path)
    return records


def load_conversation(
    path: str | os.PathLike[str], fmt: str = "auto"
) -> list[Message]:
    """Read a conversation file into messages."""
    return to_messages(load_records(path, fmt))


def coerce_entries(data: Any) -> list[Any]:
    """Normalize conversation data into a list of message entries.

    Accepts a message sequence, a mapping carrying a ``messages`` or
    ``conversation`` list, a single message mapping, or a file path.

    Raises:
        ValidationError: If the data has an unsupported type or shape.
        FormatError: If a referenced file has an invalid format.
        OSError: If a referenced file cannot be read.
    """
    if isinstance(data, str | os.PathLike):
        return load_records(data)
    if isinstance(data, Mapping):
        for key in ("messages", "conversation"):
            if key in data:
                entries = data[key]
                if isinstance(entries, str | bytes) or not isinstance(
                    entries, Sequence
                ):
                    raise ValidationError(
                        f"'{key}' must be a list of messages, "
                        f"got {type(entries).__name__}"
                    )
                return list(entries)
        return [data]
    if isinstance(data, Sequence) and not isinstance(data, bytes):
        return list(data)
    raise ValidationError(f"Unsupported conversation data type: {type(data).__name__}")


def to_messages(entries: Sequence[Any]) -> list[Message]:
    """Validate entries into messages, refusing unknown roles.

    Entries with a role outside user/assistant/system are never dropped: their
    presence is reported as a ValidationError so the caller can inspect them
    with the validator.
    """
    unknown = sum(
        1
        for e in entries
        if isinstance(e, Mapping) and e.get("role") not in ROLES
    )
    if unknown:
        raise ValidationError(
            f"Found {unknown} messages with unknown roles; "
            f"expected one of {list(ROLES)}"
        )
    return [Message.from_mapping(e) for e in entries]


def _parse_json(text: str) -> list[Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise FormatError(f"Invalid JSON: {e}") from e

    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for key in ("messages", "conversation"):
            if isinstance(data.get(key), list):
                return data[key]
    raise FormatError(
        "Invalid JSON structure. Expected list of messages or dict with "
        "'messages' key."
    )


def _lines(text: str) -> list[str]:
    # Only \n ends a line; str.splitlines would also break on \u2028, \x0c etc.
    return [line.removesuffix("\r") for line in text.split("\n")]


def _parse_prefixed(
    lines: Sequence[str], prefixes: Sequence[tuple[str, str]]
) -> list[dict[str, str]]:
    records: list[dict[str, str]] = []
    role: str | None = None
    content: list[str] = []

    def flush() -> None:
        if role is not None:
            records.append({"role": role, "content": "\n".join(content).strip()})

    for line in lines:
        match = next((p for p in prefixes if line.startswith(p[0])), None)
        if match is None:
            # Text before the first prefixed line is discarded
            if role is not None:
                content.append(line)
            continue
        flush()
        prefix, role = match
        content = [line[len(prefix) :].strip()]

    flush()
    return records
