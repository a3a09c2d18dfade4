"""Protocols for the external capability seam.

The core depends only on these two narrow interfaces. Implementations may live
in-process (`AdapterRegistry`) or behind any out-of-process transport
(`RemoteCapabilityProvider`).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping

    from context_transfer.core.types import ModelCapabilities


def normalize_model_name(name: str) -> str:
    """Lowercase a model name and replace spaces and hyphens with underscores."""
    return name.lower().replace(" ", "_").replace("-", "_")


@runtime_checkable
class ModelAdapter(Protocol):
    """Formats a conversation summary into a prompt for one target model."""

    async def format_context(
        self, summary: str, source_model: str, hints: Mapping[str, bool]
    ) -> str:
        """Return the target-specific prompt.

        Args:
            summary: Summarized conversation text.
            source_model: Name of the model the conversation came from.
            hints: Opaque ``include_*`` flags, passed through verbatim.
        """
        ...


@runtime_checkable
class CapabilityProvider(Protocol):
    """Looks up adapters and capability records by model name.

    Any method may raise; callers apply the documented fallbacks.
    """

    async def get_adapter(self, name: str) -> ModelAdapter: ...  # noqa: D102

    async def get_model_capabilities(self, name: str) -> ModelCapabilities: ...  # noqa: D102

    async def list_all_capabilities(self) -> dict[str, ModelCapabilities]: ...  # noqa: D102
