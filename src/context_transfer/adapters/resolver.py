"""Resolve a target model name to a prompt, degrading gracefully.

Lookup failures of any kind are recovered here and never reach the caller:
formatting falls back to the generic adapter and capability lookups fall back
to the default capability record.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from context_transfer.core.types import ModelCapabilities

from .base import normalize_model_name
from .generic import GenericAdapter

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .base import CapabilityProvider, ModelAdapter

log = logging.getLogger(__name__)


class AdapterResolver:
    """Capability-aware formatting on top of a `CapabilityProvider`."""

    def __init__(self, provider: CapabilityProvider) -> None:
        self.provider = provider

    async def find_adapter(self, target_model: str) -> ModelAdapter | None:
        """Return the registered adapter for a model, or None."""
        name = normalize_model_name(target_model)
        try:
            return await self.provider.get_adapter(name)
        except Exception as e:  # noqa: BLE001
            log.debug("No adapter for %r (%s); using generic formatter", name, e)
            return None

    async def resolve_formatting(
        self,
        target_model: str,
        summary: str,
        source_model: str,
        hints: Mapping[str, bool] | None = None,
        *,
        include_metadata: bool = True,
    ) -> str:
        """Format a summary for the target model.

        Args:
            target_model: Target model name as given by the caller.
            summary: Summarized conversation text.
            source_model: Model the conversation came from.
            hints: Opaque ``include_*`` flags forwarded to the adapter.
            include_metadata: Whether the generic fallback appends its
                attribution footer.

        Returns:
            The formatted prompt. Always succeeds: when no adapter exists, or
            the adapter fails, the generic formatter is used.
        """
        hints = dict(hints or {})
        adapter = await self.find_adapter(target_model)
        if adapter is not None:
            try:
                return await adapter.format_context(summary, source_model, hints)
            except Exception as e:  # noqa: BLE001
                log.warning(
                    "Adapter for %r failed (%s); using generic formatter",
                    target_model,
                    e,
                )
        fallback = GenericAdapter(target_model, include_metadata=include_metadata)
        return await fallback.format_context(summary, source_model, hints)

    async def get_model_info(self, model_name: str) -> ModelCapabilities:
        """Capability record for a model, or the default record on failure."""
        try:
            return await self.provider.get_model_capabilities(model_name)
        except Exception as e:  # noqa: BLE001
            log.debug("Capability lookup failed for %r (%s); using defaults", model_name, e)
            return ModelCapabilities.default(model_name)

    async def list_all_models(self) -> dict[str, ModelCapabilities]:
        """Every capability record the provider knows, or {} on failure."""
        try:
            return await self.provider.list_all_capabilities()
        except Exception as e:  # noqa: BLE001
            log.error("Error getting model capabilities: %s", e)
            return {}
