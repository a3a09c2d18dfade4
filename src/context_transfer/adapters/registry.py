"""In-process adapter registry.

An open, process-local registry of model adapters and capability records keyed
by normalized model name. It performs no I/O; it only stores what callers
register so the resolver can find it. Model-specific formatting semantics are
owned by whoever registers an adapter.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from context_transfer.exceptions import AdapterLookupError

from .base import normalize_model_name
from .generic import GenericAdapter

if TYPE_CHECKING:
    from context_transfer.core.types import ModelCapabilities

    from .base import ModelAdapter

# Display names of the models transfers are commonly made between.
SUPPORTED_MODELS: dict[str, str] = {
    "chatgpt": "ChatGPT",
    "deepseek": "DeepSeek",
    "claude": "Claude",
    "gemini": "Gemini",
    "mistral": "Mistral",
    "llama": "Llama",
    "cohere": "Cohere",
    "anthropic_claude": "Anthropic Claude",
    "openai_gpt4": "OpenAI GPT-4",
    "gpt4": "GPT-4",
    "gpt-4": "GPT-4",
    "gpt3": "GPT-3",
    "gpt-3": "GPT-3",
    "claude-3": "Claude-3",
    "claude-2": "Claude-2",
    "claude-1": "Claude-1",
}

GENERIC_NAME = "generic"


class AdapterRegistry:
    """Maps normalized model names to adapters and capability records.

    Implements the `CapabilityProvider` protocol. Lookups for names that were
    never registered raise `AdapterLookupError`, which the resolver turns into
    the generic fallback.
    """

    def __init__(self) -> None:
        self._adapters: dict[str, ModelAdapter] = {}
        self._capabilities: dict[str, ModelCapabilities] = {}

    def register(
        self,
        name: str,
        adapter: ModelAdapter | None = None,
        *,
        capabilities: ModelCapabilities | None = None,
    ) -> None:
        """Register an adapter and/or a capability record for a model.

        Raises:
            ValueError: If the name is empty or reserved for the generic adapter.
        """
        if not isinstance(name, str) or not name.strip():
            raise ValueError("Model name must be a non-empty string")
        key = normalize_model_name(name)
        if key == GENERIC_NAME or isinstance(adapter, GenericAdapter):
            raise ValueError("The generic adapter is built in and cannot be registered")
        if adapter is not None:
            self._adapters[key] = adapter
        if capabilities is not None:
            self._capabilities[key] = capabilities

    def unregister(self, name: str) -> None:
        key = normalize_model_name(name)
        self._adapters.pop(key, None)
        self._capabilities.pop(key, None)

    def names(self) -> list[str]:
        """Known model names: the supported table plus anything registered."""
        known = dict.fromkeys(SUPPORTED_MODELS)
        known.update(dict.fromkeys(self._adapters))
        known.update(dict.fromkeys(self._capabilities))
        return list(known)

    async def get_adapter(self, name: str) -> ModelAdapter:
        key = normalize_model_name(name)
        try:
            return self._adapters[key]
        except KeyError:
            raise AdapterLookupError(f"Model '{name}' not supported") from None

    async def get_model_capabilities(self, name: str) -> ModelCapabilities:
        key = normalize_model_name(name)
        try:
            return self._capabilities[key]
        except KeyError:
            raise AdapterLookupError(
                f"No capability record for model '{name}'"
            ) from None

    async def list_all_capabilities(self) -> dict[str, ModelCapabilities]:
        return dict(self._capabilities)
