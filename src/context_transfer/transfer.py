"""Transfer orchestration: the primary user-facing entry point.

Composes parse -> extract -> summarize -> resolve adapter -> (persist).

`ContextTransferManager` exposes the individual stages and a file-to-file
pipeline whose errors propagate. `ContextTransferAPI` wraps the pipeline for
callers that process many conversations: `transfer`, `batch_transfer` and
`validate` never raise, they return structured results instead.
"""

from __future__ import annotations

import asyncio
import dataclasses
import importlib.metadata
import logging
from typing import TYPE_CHECKING, Any

from context_transfer.adapters import (
    SUPPORTED_MODELS,
    AdapterRegistry,
    AdapterResolver,
    create_provider,
)
from context_transfer.config import FrozenConfig, resolve_config
from context_transfer.core.types import (
    BatchTransferResult,
    TransferMetadata,
    TransferOptions,
    TransferRequest,
    TransferResult,
    utc_now_iso,
)
from context_transfer.exceptions import ContextTransferError
from context_transfer.extraction import extract_context
from context_transfer.parsing import (
    SUPPORTED_FORMATS,
    coerce_entries,
    load_conversation,
    to_messages,
)
from context_transfer.persistence import save_formatted_prompt
from context_transfer.summarizer import summarize_context
from context_transfer.validation import validate_conversation_data

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence
    import os
    from pathlib import Path

    from context_transfer.adapters import CapabilityProvider
    from context_transfer.core.types import (
        Message,
        ModelCapabilities,
        ValidationResult,
    )

log = logging.getLogger(__name__)

API_VERSION = "2.0"


def sdk_version() -> str:
    """Installed distribution version, or ``development`` from a checkout."""
    try:
        return importlib.metadata.version("context-transfer")
    except importlib.metadata.PackageNotFoundError:
        return "development"


class ContextTransferManager:
    """Runs the individual pipeline stages with configured defaults."""

    def __init__(
        self,
        config: FrozenConfig | None = None,
        provider: CapabilityProvider | None = None,
    ) -> None:
        """Initialize the manager.

        Args:
            config: Frozen configuration; documented defaults when None.
            provider: Capability provider; chosen from configuration when None.
        """
        self.config = config or FrozenConfig()
        self.provider = provider or create_provider(self.config)
        self.resolver = AdapterResolver(self.provider)

    # --- Stages ---

    def load_conversation_from_file(
        self, file_path: str | os.PathLike[str], fmt: str = "auto"
    ) -> list[Message]:
        return load_conversation(file_path, fmt)

    def extract_context(
        self,
        messages: Sequence[Message],
        last_n: int | None = None,
        smart_extraction: bool | None = None,
    ) -> list[Message]:
        return extract_context(
            messages,
            self.config.last_n if last_n is None else last_n,
            self.config.smart_extraction
            if smart_extraction is None
            else smart_extraction,
            important_window=self.config.important_window,
        )

    def summarize_context(
        self, messages: Sequence[Message], summary_type: str | None = None
    ) -> str:
        return summarize_context(
            messages,
            summary_type or self.config.summary_type,
            max_chars=self.config.concise_max_chars,
        )

    def summarize_for_options(
        self, extracted: Sequence[Message], options: TransferOptions
    ) -> str:
        """Summarize per options; without a summary only the last message is kept."""
        if options.include_summary:
            return self.summarize_context(extracted, options.summary_type)
        return self.summarize_context(extracted[-1:], "concise")

    async def format_for_target_model(
        self,
        target_model: str,
        summary: str,
        source_model: str,
        hints: Mapping[str, bool] | None = None,
        *,
        include_metadata: bool | None = None,
    ) -> str:
        return await self.resolver.resolve_formatting(
            target_model,
            summary,
            source_model,
            hints,
            include_metadata=self.config.include_metadata
            if include_metadata is None
            else include_metadata,
        )

    def save_formatted_prompt(
        self, content: str, output_file: str | os.PathLike[str], fmt: str = "txt"
    ) -> Path:
        return save_formatted_prompt(content, output_file, fmt)

    # --- Capabilities ---

    def get_supported_models(self) -> list[str]:
        if isinstance(self.provider, AdapterRegistry):
            return self.provider.names()
        return list(SUPPORTED_MODELS)

    async def get_model_info(self, model_name: str) -> ModelCapabilities:
        return await self.resolver.get_model_info(model_name)

    async def list_all_models(self) -> dict[str, ModelCapabilities]:
        return await self.resolver.list_all_models()

    # --- File-to-file pipeline ---

    async def transfer_context(
        self,
        from_model: str,
        to_model: str,
        input_file: str | os.PathLike[str],
        output_file: str | os.PathLike[str],
        options: TransferOptions | Mapping[str, Any] | None = None,
        **overrides: Any,
    ) -> str:
        """Load, extract, summarize, format and save in one call.

        Unlike `ContextTransferAPI.transfer`, errors propagate. Keyword
        overrides such as ``last_n=3`` or ``hints={...}`` take precedence over
        ``options``.

        Returns:
            The formatted prompt that was written to ``output_file``.
        """
        if isinstance(options, TransferOptions):
            base = {**dataclasses.asdict(options), "hints": options.hints}
        else:
            base = dict(options or {})
        opts = TransferOptions.from_config(self.config, **{**base, **overrides})
        messages = self.load_conversation_from_file(input_file)
        extracted = self.extract_context(messages, opts.last_n, opts.smart_extraction)
        summary = self.summarize_for_options(extracted, opts)
        prompt = await self.format_for_target_model(
            to_model,
            summary,
            from_model,
            opts.hints.to_dict(),
            include_metadata=opts.include_metadata,
        )
        self.save_formatted_prompt(prompt, output_file, opts.output_format)
        return prompt


class ContextTransferAPI:
    """Result-returning facade for single, batch and validation calls."""

    def __init__(self, manager: ContextTransferManager | None = None) -> None:
        self.manager = manager or ContextTransferManager()

    async def transfer(
        self,
        source_model: str,
        target_model: str,
        conversation_data: Any,
        options: TransferOptions | Mapping[str, Any] | None = None,
    ) -> TransferResult:
        """Transfer one conversation to a target model.

        Args:
            source_model: Model the conversation came from.
            target_model: Model the prompt is formatted for.
            conversation_data: Message sequence, mapping with a ``messages`` or
                ``conversation`` list, or a path to a conversation file.
            options: Per-call options; unspecified values use configured defaults.

        Returns:
            A successful result with prompt and metadata, or a failure result
            carrying the error message and exception type. Never raises.
        """
        try:
            opts = TransferOptions.from_mapping(options, self.manager.config)
            messages = to_messages(coerce_entries(conversation_data))
            extracted = self.manager.extract_context(
                messages, opts.last_n, opts.smart_extraction
            )
            summary = self.manager.summarize_for_options(extracted, opts)
            prompt = await self.manager.format_for_target_model(
                target_model,
                summary,
                source_model,
                opts.hints.to_dict(),
                include_metadata=opts.include_metadata,
            )

            capabilities = None
            if opts.include_metadata:
                capabilities = {
                    "source": await self.manager.get_model_info(source_model),
                    "target": await self.manager.get_model_info(target_model),
                }

            metadata = TransferMetadata(
                source_model=source_model,
                target_model=target_model,
                summary_type=opts.summary_type,
                smart_extraction=opts.smart_extraction,
                messages_processed=len(messages),
                messages_extracted=len(extracted),
                prompt_length=len(prompt),
                created_at=utc_now_iso(),
                output_format=opts.output_format,
                model_capabilities=capabilities,
            )
        except Exception as e:  # noqa: BLE001
            log.exception("Context transfer failed: %s", e)
            return TransferResult.failure(e)

        log.info("Context transfer completed: %s -> %s", source_model, target_model)
        return TransferResult(success=True, formatted_prompt=prompt, metadata=metadata)

    async def batch_transfer(
        self,
        transfers: Iterable[TransferRequest | Mapping[str, Any]],
        *,
        max_concurrency: int = 1,
    ) -> BatchTransferResult:
        """Run many transfers independently; one failure never aborts the batch.

        Args:
            transfers: Requests, as `TransferRequest` objects or mappings.
            max_concurrency: Maximum transfers in flight. The default of 1
                processes requests strictly sequentially.

        Returns:
            Aggregate counts plus one result per request, in input order, each
            tagged with its original index.
        """
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")

        requests = list(transfers)

        async def run_one(index: int, request: Any) -> TransferResult:
            try:
                req = (
                    request
                    if isinstance(request, TransferRequest)
                    else TransferRequest.from_mapping(request)
                )
                result = await self.transfer(
                    req.source_model,
                    req.target_model,
                    req.conversation_data,
                    req.options,
                )
            except Exception as e:  # noqa: BLE001
                result = TransferResult.failure(e)
            return result.with_index(index)

        if max_concurrency == 1:
            results = [await run_one(i, r) for i, r in enumerate(requests)]
        else:
            semaphore = asyncio.Semaphore(max_concurrency)

            async def bounded(index: int, request: Any) -> TransferResult:
                async with semaphore:
                    return await run_one(index, request)

            results = list(
                await asyncio.gather(*(bounded(i, r) for i, r in enumerate(requests)))
            )

        successful = sum(1 for r in results if r.success)
        failed = len(results) - successful
        log.info("Batch transfer finished: %d succeeded, %d failed", successful, failed)
        return BatchTransferResult(
            success=failed == 0,
            total_transfers=len(results),
            successful_transfers=successful,
            failed_transfers=failed,
            results=tuple(results),
            completed_at=utc_now_iso(),
        )

    async def validate(self, conversation_data: Any) -> ValidationResult:
        """Analyze conversation data; never raises."""
        return validate_conversation_data(conversation_data)

    async def get_supported_models(self) -> dict[str, Any]:
        try:
            capabilities = await self.manager.list_all_models()
            return {
                "success": True,
                "models": {k: v.to_dict() for k, v in capabilities.items()},
                "total_models": len(capabilities),
                "supported_formats": list(SUPPORTED_FORMATS),
                "metadata": {"generated_at": utc_now_iso(), "api_version": API_VERSION},
            }
        except Exception as e:  # noqa: BLE001
            log.exception("Failed to get supported models: %s", e)
            return {"success": False, "error": str(e), "error_type": type(e).__name__}

    async def get_model_capabilities(self, model_name: str) -> dict[str, Any]:
        try:
            capabilities = await self.manager.get_model_info(model_name)
            return {
                "success": True,
                "model": model_name,
                "capabilities": capabilities.to_dict(),
                "metadata": {"generated_at": utc_now_iso()},
            }
        except Exception as e:  # noqa: BLE001
            return {"success": False, "error": str(e), "error_type": type(e).__name__}

    def create_extension_config(self) -> dict[str, Any]:
        """Configuration document for a browser extension front end."""
        config = self.manager.config
        return {
            "api_version": API_VERSION,
            "supported_models": self.manager.get_supported_models(),
            "supported_formats": list(SUPPORTED_FORMATS),
            "default_options": {
                "last_n": config.last_n,
                "include_summary": config.include_summary,
                "summary_type": config.summary_type,
                "smart_extraction": config.smart_extraction,
                "output_format": config.output_format,
            },
            "chrome_extension": {
                "manifest_version": 3,
                "permissions": ["activeTab", "storage"],
                "content_scripts": ["content.js"],
                "background_scripts": ["background.js"],
                "popup": "popup.html",
            },
            "endpoints": {
                "transfer": "/api/transfer",
                "models": "/api/models",
                "validate": "/api/validate",
                "batch": "/api/batch",
            },
            "metadata": {"generated_at": utc_now_iso(), "sdk_version": sdk_version()},
        }


def create_api(
    config: FrozenConfig | None = None,
    *,
    provider: CapabilityProvider | None = None,
    profile: str | None = None,
) -> ContextTransferAPI:
    """Create an API facade with optional configuration.

    If no configuration is provided, it is resolved from the environment and
    configuration files. This is the only place ambient configuration is read.
    """
    final_config = (
        config if config is not None else resolve_config(profile=profile).to_frozen()
    )
    return ContextTransferAPI(ContextTransferManager(final_config, provider))


# --- Convenience functions ---


async def quick_transfer(
    source_model: str,
    target_model: str,
    conversation_data: Any,
    options: TransferOptions | Mapping[str, Any] | None = None,
) -> str:
    """Transfer and return the prompt, raising on failure."""
    result = await create_api().transfer(
        source_model, target_model, conversation_data, options
    )
    if result.success and result.formatted_prompt is not None:
        return result.formatted_prompt
    raise ContextTransferError(f"Transfer failed: {result.error or 'Unknown error'}")


async def get_all_models() -> dict[str, Any]:
    return await create_api().get_supported_models()


async def validate_conversation(conversation_data: Any) -> ValidationResult:
    return await create_api().validate(conversation_data)
