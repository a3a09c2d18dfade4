"""HTTP client for an out-of-process adapter service.

The service owns model-specific formatting and capability metadata. Endpoints:

- ``GET  /adapters/{name}``         404 when no adapter is registered
- ``POST /adapters/{name}/format``  ``{summary, source_model, options}`` -> ``{prompt}``
- ``GET  /capabilities/{name}``     capability record (snake_case keys)
- ``GET  /capabilities``            mapping of name -> capability record

Every failure (transport, HTTP status, malformed payload) is raised as
`AdapterLookupError` so the resolver can apply its fallbacks.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import httpx

from context_transfer.core.types import ModelCapabilities
from context_transfer.exceptions import AdapterLookupError

if TYPE_CHECKING:
    from collections.abc import Mapping

log = logging.getLogger(__name__)


class RemoteAdapter:
    """Adapter proxy that formats prompts through the remote service."""

    def __init__(self, provider: RemoteCapabilityProvider, name: str) -> None:
        self.provider = provider
        self.name = name

    async def format_context(
        self, summary: str, source_model: str, hints: Mapping[str, bool]
    ) -> str:
        return await self.provider.format_context(
            self.name, summary, source_model, hints
        )


class RemoteCapabilityProvider:
    """`CapabilityProvider` backed by an HTTP adapter service."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize the provider.

        Args:
            base_url: Root URL of the adapter service.
            timeout: Per-request timeout in seconds.
            transport: Optional custom transport (e.g. ``httpx.MockTransport``).
            headers: Extra headers sent with every request.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._headers = dict(headers or {})

    def _create_http_client(self) -> httpx.AsyncClient:
        """Create a configured HTTP client - centralized configuration"""  # noqa: D415
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
            headers=self._headers,
        )

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Make an HTTP request with centralized error handling."""
        try:
            async with self._create_http_client() as client:
                response = await client.request(method, path, **kwargs)
                response.raise_for_status()
                return response.json()
        except httpx.TimeoutException as e:
            raise AdapterLookupError(f"Adapter service timeout: {path}") from e
        except httpx.HTTPStatusError as e:
            raise AdapterLookupError(
                f"HTTP error {e.response.status_code}: {path}"
            ) from e
        except httpx.HTTPError as e:
            raise AdapterLookupError(f"Adapter service request failed: {e}") from e
        except ValueError as e:
            raise AdapterLookupError(f"Invalid JSON from adapter service: {path}") from e

    async def get_adapter(self, name: str) -> RemoteAdapter:
        await self._request("GET", f"/adapters/{quote(name, safe='')}")
        return RemoteAdapter(self, name)

    async def format_context(
        self,
        name: str,
        summary: str,
        source_model: str,
        hints: Mapping[str, bool],
    ) -> str:
        data = await self._request(
            "POST",
            f"/adapters/{quote(name, safe='')}/format",
            json={
                "summary": summary,
                "source_model": source_model,
                "options": dict(hints),
            },
        )
        prompt = data.get("prompt") if isinstance(data, dict) else None
        if not isinstance(prompt, str):
            raise AdapterLookupError(f"Adapter service returned no prompt for '{name}'")
        return prompt

    async def get_model_capabilities(self, name: str) -> ModelCapabilities:
        data = await self._request("GET", f"/capabilities/{quote(name, safe='')}")
        if not isinstance(data, dict):
            raise AdapterLookupError(f"Malformed capability record for '{name}'")
        try:
            return ModelCapabilities.from_mapping(name, data)
        except (TypeError, ValueError) as e:
            raise AdapterLookupError(f"Malformed capability record for '{name}'") from e

    async def list_all_capabilities(self) -> dict[str, ModelCapabilities]:
        data = await self._request("GET", "/capabilities")
        if not isinstance(data, dict):
            raise AdapterLookupError("Malformed capability listing")
        records: dict[str, ModelCapabilities] = {}
        for name, record in data.items():
            if not isinstance(record, dict):
                log.debug("Skipping malformed capability record for %s", name)
                continue
            records[name] = ModelCapabilities.from_mapping(name, record)
        return records
