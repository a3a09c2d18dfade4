"""Generic prompt formatter used when no model-specific adapter exists."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

SDK_NAME = "Context Transfer SDK"


def format_generic(
    summary: str,
    source_model: str,
    target_model: str,
    *,
    include_metadata: bool = True,
) -> str:
    """Wrap a summary in a model-agnostic continuation prompt."""
    prompt = (
        f"You are {target_model}, an AI assistant.\n\n"
        f"A user was previously working with {source_model} on the following "
        f"conversation:\n\n"
        f"{summary}\n\n"
        "Please continue helping the user from where they left off. "
        "Maintain the context and provide helpful responses."
    )
    if include_metadata:
        prompt += (
            f"\n\n---\nContext transferred from {source_model} to "
            f"{target_model} using {SDK_NAME}"
        )
    return prompt


class GenericAdapter:
    """The always-available fallback variant of `ModelAdapter`.

    Unlike registered adapters it is bound to a target model name, since the
    generic prompt introduces the target by name.
    """

    def __init__(self, target_model: str, *, include_metadata: bool = True) -> None:
        self.target_model = target_model
        self.include_metadata = include_metadata

    async def format_context(
        self,
        summary: str,
        source_model: str,
        hints: Mapping[str, bool],  # noqa: ARG002
    ) -> str:
        return format_generic(
            summary,
            source_model,
            self.target_model,
            include_metadata=self.include_metadata,
        )
