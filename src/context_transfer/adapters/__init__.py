"""Model adapters and the capability lookup seam.

The core formats prompts through `AdapterResolver`, which asks a
`CapabilityProvider` for a model-specific adapter and falls back to the
generic formatter when none is available.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .base import CapabilityProvider, ModelAdapter, normalize_model_name
from .generic import GenericAdapter, format_generic
from .registry import SUPPORTED_MODELS, AdapterRegistry
from .remote import RemoteAdapter, RemoteCapabilityProvider
from .resolver import AdapterResolver

if TYPE_CHECKING:
    from context_transfer.config import FrozenConfig


def create_provider(config: FrozenConfig) -> CapabilityProvider:
    """Build the capability provider selected by configuration.

    A configured ``capability_service_url`` selects the remote service;
    otherwise an empty in-process registry is used.
    """
    if config.capability_service_url:
        return RemoteCapabilityProvider(
            config.capability_service_url, timeout=config.request_timeout
        )
    return AdapterRegistry()


__all__ = [  # noqa: RUF022
    "CapabilityProvider",
    "ModelAdapter",
    "normalize_model_name",
    "GenericAdapter",
    "format_generic",
    "AdapterRegistry",
    "SUPPORTED_MODELS",
    "RemoteAdapter",
    "RemoteCapabilityProvider",
    "AdapterResolver",
    "create_provider",
]
