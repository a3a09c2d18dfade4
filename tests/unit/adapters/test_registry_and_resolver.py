"""Unit tests for the adapter registry, generic formatter and resolver."""

from unittest.mock import AsyncMock

import pytest

from context_transfer.adapters import (
    AdapterRegistry,
    AdapterResolver,
    CapabilityProvider,
    GenericAdapter,
    ModelAdapter,
    format_generic,
    normalize_model_name,
)
from context_transfer.core.types import ModelCapabilities
from context_transfer.exceptions import AdapterLookupError

pytestmark = pytest.mark.unit


class EchoAdapter:
    """Adapter that records the hints it receives."""

    def __init__(self):
        self.calls = []

    async def format_context(self, summary, source_model, hints):
        self.calls.append((summary, source_model, dict(hints)))
        return f"[echo from {source_model}] {summary}"


class FailingAdapter:
    async def format_context(self, summary, source_model, hints):  # noqa: ARG002
        raise RuntimeError("adapter exploded")


class TestGenericFormatter:
    def test_exact_prompt_with_metadata(self):
        prompt = format_generic("User: hi", "chatgpt", "claude")

        assert prompt == (
            "You are claude, an AI assistant.\n\n"
            "A user was previously working with chatgpt on the following "
            "conversation:\n\n"
            "User: hi\n\n"
            "Please continue helping the user from where they left off. "
            "Maintain the context and provide helpful responses.\n\n"
            "---\nContext transferred from chatgpt to claude using "
            "Context Transfer SDK"
        )

    def test_footer_omitted_without_metadata(self):
        prompt = format_generic("s", "a", "b", include_metadata=False)

        assert prompt.endswith("provide helpful responses.")
        assert "---" not in prompt

    @pytest.mark.asyncio
    async def test_generic_adapter_is_a_model_adapter(self):
        adapter = GenericAdapter("gemini")

        assert isinstance(adapter, ModelAdapter)
        assert (await adapter.format_context("s", "x", {})).startswith(
            "You are gemini"
        )


class TestNormalization:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [("GPT-4", "gpt_4"), ("Claude 3", "claude_3"), ("gemini", "gemini")],
    )
    def test_normalize_model_name(self, name, expected):
        assert normalize_model_name(name) == expected


class TestAdapterRegistry:
    def test_registry_satisfies_provider_protocol(self):
        assert isinstance(AdapterRegistry(), CapabilityProvider)

    @pytest.mark.asyncio
    async def test_lookup_uses_normalized_names(self):
        registry = AdapterRegistry()
        adapter = EchoAdapter()
        registry.register("GPT-4", adapter)

        assert await registry.get_adapter("gpt 4") is adapter

    @pytest.mark.asyncio
    async def test_unknown_name_raises_lookup_error(self):
        with pytest.raises(AdapterLookupError, match="not supported"):
            await AdapterRegistry().get_adapter("nobody")
        with pytest.raises(LookupError):
            await AdapterRegistry().get_model_capabilities("nobody")

    @pytest.mark.parametrize("name", ["", "  ", "generic", "Generic"])
    def test_reserved_or_empty_names_rejected(self, name):
        with pytest.raises(ValueError):
            AdapterRegistry().register(name, EchoAdapter())

    def test_generic_adapter_cannot_be_registered(self):
        with pytest.raises(ValueError, match="built in"):
            AdapterRegistry().register("claude", GenericAdapter("claude"))

    @pytest.mark.asyncio
    async def test_unregister_removes_adapter_and_capabilities(self):
        registry = AdapterRegistry()
        registry.register(
            "mistral", EchoAdapter(), capabilities=ModelCapabilities("mistral")
        )
        registry.unregister("mistral")

        assert await registry.list_all_capabilities() == {}
        with pytest.raises(AdapterLookupError):
            await registry.get_adapter("mistral")

    def test_names_include_supported_table_and_registrations(self):
        registry = AdapterRegistry()
        registry.register("my-model", EchoAdapter())

        names = registry.names()
        assert "chatgpt" in names
        assert "claude-1" in names
        assert "my_model" in names


class TestAdapterResolver:
    @pytest.mark.asyncio
    async def test_registered_adapter_receives_hints_verbatim(self):
        registry = AdapterRegistry()
        adapter = EchoAdapter()
        registry.register("deepseek", adapter)
        hints = {"include_code_context": True, "include_reasoning": False}

        prompt = await AdapterResolver(registry).resolve_formatting(
            "DeepSeek", "summary", "chatgpt", hints
        )

        assert prompt == "[echo from chatgpt] summary"
        assert adapter.calls == [("summary", "chatgpt", hints)]

    @pytest.mark.asyncio
    async def test_unregistered_target_uses_generic_formatter(self):
        prompt = await AdapterResolver(AdapterRegistry()).resolve_formatting(
            "unknown-model", "summary", "chatgpt"
        )

        assert prompt == format_generic("summary", "chatgpt", "unknown-model")

    @pytest.mark.asyncio
    async def test_failing_adapter_falls_back_to_generic(self):
        registry = AdapterRegistry()
        registry.register("claude", FailingAdapter())

        prompt = await AdapterResolver(registry).resolve_formatting(
            "claude", "summary", "gemini", include_metadata=False
        )

        assert prompt == format_generic(
            "summary", "gemini", "claude", include_metadata=False
        )

    @pytest.mark.asyncio
    async def test_provider_errors_never_escape(self):
        provider = AsyncMock()
        provider.get_adapter.side_effect = ConnectionError("down")
        provider.get_model_capabilities.side_effect = ConnectionError("down")
        provider.list_all_capabilities.side_effect = ConnectionError("down")
        resolver = AdapterResolver(provider)

        prompt = await resolver.resolve_formatting("claude", "s", "gpt")
        info = await resolver.get_model_info("claude")
        listing = await resolver.list_all_models()

        assert prompt.startswith("You are claude")
        assert info == ModelCapabilities.default("claude")
        assert listing == {}

    @pytest.mark.asyncio
    async def test_default_capability_record(self):
        info = await AdapterResolver(AdapterRegistry()).get_model_info("llama")

        assert info.to_dict() == {
            "name": "llama",
            "supported_formats": ["text"],
            "max_context_length": 8000,
            "supports_code": True,
            "supports_images": False,
            "supports_tools": False,
        }

    @pytest.mark.asyncio
    async def test_registered_capabilities_are_returned(self):
        registry = AdapterRegistry()
        caps = ModelCapabilities("claude", max_context_length=200000)
        registry.register("claude", capabilities=caps)

        assert await AdapterResolver(registry).get_model_info("claude") is caps
