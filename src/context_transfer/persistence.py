"""Persist formatted prompts as plain text, JSON, or markdown.

The JSON and markdown shapes are a contract for consumers that parse saved
output:

- json: ``{"prompt": ..., "metadata": {"created_at", "format", "length"}}``
- markdown: fixed heading, the content, and an attribution footer

Write failures propagate: the caller explicitly asked to persist.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from context_transfer.core.types import utc_now_iso

log = logging.getLogger(__name__)

MARKDOWN_TEMPLATE = """# Formatted Prompt

## Content

{content}

---
*Generated by Context Transfer*
"""


def render_prompt(content: str, fmt: str = "txt") -> str:
    """Render content in the persisted shape for the given format.

    Unknown formats are written as plain text.
    """
    if fmt == "json":
        data = {
            "prompt": content,
            "metadata": {
                "created_at": utc_now_iso(),
                "format": "json",
                "length": len(content),
            },
        }
        return json.dumps(data, indent=2, ensure_ascii=False)
    if fmt == "markdown":
        return MARKDOWN_TEMPLATE.format(content=content)
    return content


def save_formatted_prompt(
    content: str, output_file: str | os.PathLike[str], fmt: str = "txt"
) -> Path:
    """Write a formatted prompt to disk.

    Args:
        content: The prompt text.
        output_file: Destination path.
        fmt: ``txt``, ``json`` or ``markdown``.

    Returns:
        The path written.

    Raises:
        OSError: If the file cannot be written.
    """
    path = Path(output_file)
    path.write_text(render_prompt(content, fmt), encoding="utf-8", newline="")
    log.info("Formatted prompt saved to %s in %s format", path, fmt)
    return path
