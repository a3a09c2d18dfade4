"""Unit tests for the HTTP capability provider.

The adapter service is simulated with ``httpx.MockTransport``; no network is
used.
"""

import json

import httpx
import pytest

from context_transfer.adapters import AdapterResolver, RemoteCapabilityProvider
from context_transfer.exceptions import AdapterLookupError

pytestmark = pytest.mark.unit

CLAUDE_RECORD = {
    "supported_formats": ["text", "markdown"],
    "max_context_length": 200000,
    "supports_code": True,
    "supports_images": True,
    "supports_tools": True,
}


def _service(requests: list[httpx.Request]):
    """Build a handler that serves one adapter (claude) and two records."""

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        path = request.url.path
        if path == "/adapters/claude":
            return httpx.Response(200, json={"name": "claude"})
        if path == "/adapters/claude/format":
            body = json.loads(request.content)
            return httpx.Response(
                200,
                json={"prompt": f"<claude>{body['summary']}</claude>"},
            )
        if path == "/capabilities/claude":
            return httpx.Response(200, json=CLAUDE_RECORD)
        if path == "/capabilities":
            return httpx.Response(
                200,
                json={
                    "claude": CLAUDE_RECORD,
                    "gemini": {"maxContextLength": 1000000, "supportsImages": True},
                },
            )
        return httpx.Response(404, json={"error": "not found"})

    return handler


@pytest.fixture
def requests_seen() -> list[httpx.Request]:
    return []


@pytest.fixture
def provider(requests_seen) -> RemoteCapabilityProvider:
    return RemoteCapabilityProvider(
        "http://adapters.test/",
        transport=httpx.MockTransport(_service(requests_seen)),
        headers={"X-Client": "tests"},
    )


class TestRemoteCapabilityProvider:
    @pytest.mark.asyncio
    async def test_format_posts_summary_and_options(self, provider, requests_seen):
        adapter = await provider.get_adapter("claude")
        prompt = await adapter.format_context(
            "User: hi", "chatgpt", {"include_reasoning": True}
        )

        assert prompt == "<claude>User: hi</claude>"
        post = requests_seen[-1]
        assert post.method == "POST"
        assert post.headers["X-Client"] == "tests"
        assert json.loads(post.content) == {
            "summary": "User: hi",
            "source_model": "chatgpt",
            "options": {"include_reasoning": True},
        }

    @pytest.mark.asyncio
    async def test_missing_adapter_raises_lookup_error(self, provider):
        with pytest.raises(AdapterLookupError, match="HTTP error 404"):
            await provider.get_adapter("mistral")

    @pytest.mark.asyncio
    async def test_capabilities_snake_case(self, provider):
        caps = await provider.get_model_capabilities("claude")

        assert caps.max_context_length == 200000
        assert caps.supported_formats == ("text", "markdown")
        assert caps.supports_tools is True

    @pytest.mark.asyncio
    async def test_capability_listing_accepts_camel_case(self, provider):
        listing = await provider.list_all_capabilities()

        assert set(listing) == {"claude", "gemini"}
        assert listing["gemini"].max_context_length == 1000000
        assert listing["gemini"].supports_images is True
        assert listing["gemini"].supports_code is True

    @pytest.mark.asyncio
    async def test_names_are_url_quoted(self, provider, requests_seen):
        with pytest.raises(AdapterLookupError):
            await provider.get_adapter("a/b")

        assert requests_seen[-1].url.raw_path == b"/adapters/a%2Fb"

    @pytest.mark.asyncio
    async def test_transport_errors_become_lookup_errors(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        provider = RemoteCapabilityProvider(
            "http://adapters.test", transport=httpx.MockTransport(handler)
        )

        with pytest.raises(AdapterLookupError, match="request failed"):
            await provider.list_all_capabilities()

    @pytest.mark.asyncio
    async def test_timeouts_become_lookup_errors(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        provider = RemoteCapabilityProvider(
            "http://adapters.test", transport=httpx.MockTransport(handler)
        )

        with pytest.raises(AdapterLookupError, match="timeout"):
            await provider.get_model_capabilities("claude")

    @pytest.mark.asyncio
    async def test_missing_prompt_in_response(self):
        def handler(request: httpx.Request) -> httpx.Response:  # noqa: ARG001
            return httpx.Response(200, json={"text": "wrong key"})

        provider = RemoteCapabilityProvider(
            "http://adapters.test", transport=httpx.MockTransport(handler)
        )

        with pytest.raises(AdapterLookupError, match="no prompt"):
            await provider.format_context("claude", "s", "gpt", {})

    @pytest.mark.asyncio
    async def test_invalid_json_body(self):
        def handler(request: httpx.Request) -> httpx.Response:  # noqa: ARG001
            return httpx.Response(200, content=b"<html>")

        provider = RemoteCapabilityProvider(
            "http://adapters.test", transport=httpx.MockTransport(handler)
        )

        with pytest.raises(AdapterLookupError, match="Invalid JSON"):
            await provider.get_model_capabilities("claude")


class TestResolverOverRemote:
    @pytest.mark.asyncio
    async def test_remote_adapter_is_used_when_available(self, provider):
        prompt = await AdapterResolver(provider).resolve_formatting(
            "Claude", "summary", "gpt"
        )

        assert prompt == "<claude>summary</claude>"

    @pytest.mark.asyncio
    async def test_missing_remote_adapter_falls_back(self, provider):
        prompt = await AdapterResolver(provider).resolve_formatting(
            "mistral", "summary", "gpt"
        )

        assert prompt.startswith("You are mistral, an AI assistant.")
