"""Command-line interface for context transfer.

Modes are checked in priority order: ``--list-models``, ``--chrome-config``,
``--validate``, ``--batch``, then a direct transfer.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path
import sys
from typing import Any

from context_transfer.config import resolve_config
from context_transfer.core.types import OUTPUT_FORMATS, SUMMARY_TYPES
from context_transfer.transfer import ContextTransferAPI, create_api

log = logging.getLogger(__name__)

CHROME_CONFIG_FILE = "chrome_extension_config.json"
RULE = "-" * 50

SAMPLE_CONVERSATION: list[dict[str, str]] = [
    {"role": "user", "content": "I need help with Python programming"},
    {
        "role": "assistant",
        "content": "I'd be happy to help with Python! "
        "What specific topic are you working on?",
    },
    {"role": "user", "content": "I'm trying to understand decorators"},
    {
        "role": "assistant",
        "content": "Decorators are a powerful Python feature. "
        "They allow you to modify or enhance functions...",
    },
]

SAMPLE_BATCH: list[dict[str, Any]] = [
    {
        "source_model": "chatgpt",
        "target_model": "deepseek",
        "conversation_data": [
            {"role": "user", "content": "Explain machine learning basics"},
            {
                "role": "assistant",
                "content": "Machine learning is a subset of AI that enables "
                "computers to learn...",
            },
        ],
        "options": {"summary_type": "concise"},
    },
    {
        "source_model": "claude",
        "target_model": "gemini",
        "conversation_data": [
            {"role": "user", "content": "Help me with data analysis"},
            {
                "role": "assistant",
                "content": "Data analysis involves collecting, cleaning, and "
                "interpreting data...",
            },
        ],
        "options": {"summary_type": "detailed", "include_code_context": True},
    },
    {
        "source_model": "gemini",
        "target_model": "mistral",
        "conversation_data": [
            {"role": "user", "content": "What are the best practices for API design?"},
            {
                "role": "assistant",
                "content": "API design best practices include RESTful "
                "principles, proper error handling...",
            },
        ],
        "options": {"include_reasoning": True, "include_examples": True},
    },
]

# (flag, option name, help)
HINT_FLAGS: tuple[tuple[str, str, str], ...] = (
    ("--include-code", "include_code_context", "Include code context"),
    ("--include-reasoning", "include_reasoning", "Include reasoning guidance"),
    ("--include-safety", "include_safety", "Include safety guidance"),
    ("--include-creativity", "include_creativity", "Include creativity guidance"),
    ("--include-examples", "include_examples", "Include example generation"),
    ("--include-step-by-step", "include_step_by_step", "Include step-by-step"),
    ("--include-multimodal", "include_multimodal", "Include multimodal context"),
    ("--include-web-search", "include_web_search", "Include web search context"),
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="context-transfer",
        description="Transfer conversation context between AI models",
        epilog=(
            "input formats: JSON array of {role, content} objects; TXT with "
            "User:/Assistant:/System: prefixes; MD with ### User:/### "
            "Assistant:/### System: headers"
        ),
    )
    parser.add_argument("-s", "--source", help="Source model name")
    parser.add_argument("-t", "--target", help="Target model name")
    parser.add_argument("-i", "--input", help="Conversation file (json, txt, md)")
    parser.add_argument("-o", "--output", help="Write the result to this file")
    parser.add_argument(
        "--last-n", type=int, help="Number of recent messages to extract"
    )
    parser.add_argument(
        "--summary-type", choices=SUMMARY_TYPES, help="Summary style"
    )
    parser.add_argument(
        "--output-format",
        choices=OUTPUT_FORMATS,
        help="Format used when saving with --output",
    )
    parser.add_argument(
        "--no-smart-extraction",
        dest="smart_extraction",
        action="store_const",
        const=False,
        help="Take only the most recent messages",
    )
    parser.add_argument(
        "--no-metadata",
        dest="include_metadata",
        action="store_const",
        const=False,
        help="Omit attribution and capability metadata",
    )
    for flag, dest, help_text in HINT_FLAGS:
        parser.add_argument(flag, dest=dest, action="store_true", help=help_text)

    parser.add_argument(
        "--batch",
        action="store_true",
        help="Run a batch; --input supplies a JSON list of requests",
    )
    parser.add_argument(
        "--validate", action="store_true", help="Validate the --input conversation"
    )
    parser.add_argument(
        "--list-models", action="store_true", help="List known models"
    )
    parser.add_argument(
        "--chrome-config",
        action="store_true",
        help=f"Write browser extension configuration (default {CHROME_CONFIG_FILE})",
    )
    parser.add_argument("--profile", help="Configuration profile to use")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    return parser


def options_from_args(args: argparse.Namespace) -> dict[str, Any]:
    """Transfer options given on the command line; unset values are omitted."""
    options: dict[str, Any] = {
        "last_n": args.last_n,
        "summary_type": args.summary_type,
        "smart_extraction": args.smart_extraction,
        "output_format": args.output_format,
        "include_metadata": args.include_metadata,
    }
    for _flag, dest, _help in HINT_FLAGS:
        if getattr(args, dest):
            options[dest] = True
    return {k: v for k, v in options.items() if v is not None}


# --- Modes ---


async def list_models(api: ContextTransferAPI) -> int:
    result = await api.get_supported_models()
    if not result["success"]:
        print(f"Error: {result['error']}")
        return 1

    print(f"Total models: {result['total_models']}")
    print(f"Supported formats: {', '.join(result['supported_formats'])}\n")
    models: dict[str, dict[str, Any]] = result["models"]
    if not models:
        print("Known model names:")
        for name in api.manager.get_supported_models():
            print(f"  {name}")
        return 0
    for name, caps in models.items():
        features = [
            label
            for key, label in (
                ("supports_code", "Code"),
                ("supports_images", "Images"),
                ("supports_tools", "Tools"),
            )
            if caps.get(key)
        ]
        suffix = f" ({', '.join(features)})" if features else ""
        print(f"  {name}: {caps['max_context_length']:,} tokens{suffix}")
    return 0


def write_chrome_config(api: ContextTransferAPI, output: str | None) -> int:
    config = api.create_extension_config()
    path = Path(output or CHROME_CONFIG_FILE)
    path.write_text(json.dumps(config, indent=2) + "\n", encoding="utf-8")
    print(f"Extension configuration saved to: {path}")
    print(f"  API version: {config['api_version']}")
    print(f"  Supported models: {len(config['supported_models'])}")
    print(f"  Supported formats: {', '.join(config['supported_formats'])}")
    return 0


async def validate(api: ContextTransferAPI, input_file: str) -> int:
    result = await api.validate(Path(input_file))
    if not (result.success and result.valid) or result.analysis is None:
        print("Conversation format is invalid!")
        print(f"Error: {result.error}")
        return 1

    analysis = result.analysis
    print("Conversation format is valid!\n")
    print(f"  Total messages: {analysis.total_messages}")
    print(f"  User messages: {analysis.user_messages}")
    print(f"  Assistant messages: {analysis.assistant_messages}")
    print(f"  System messages: {analysis.system_messages}")
    print(f"  Unknown messages: {analysis.unknown_messages}")
    print(f"  Average message length: {analysis.average_message_length:.0f} characters")
    print(f"  Has system context: {'Yes' if analysis.has_system_context else 'No'}")
    if result.recommendations:
        print("\nRecommendations:")
        for rec in result.recommendations:
            print(f"  - {rec}")
    return 0


async def run_batch(api: ContextTransferAPI, input_file: str | None) -> int:
    if input_file:
        requests = json.loads(Path(input_file).read_text(encoding="utf-8"))
        if not isinstance(requests, list):
            raise ValueError("Batch input must be a JSON list of transfer requests")
    else:
        requests = SAMPLE_BATCH

    batch = await api.batch_transfer(requests)
    rate = (
        batch.successful_transfers / batch.total_transfers * 100
        if batch.total_transfers
        else 0.0
    )
    print(f"Total transfers: {batch.total_transfers}")
    print(f"Successful: {batch.successful_transfers}")
    print(f"Failed: {batch.failed_transfers}")
    print(f"Success rate: {rate:.1f}%\n")
    for result in batch.results:
        number = (result.index or 0) + 1
        if result.success and result.metadata is not None:
            meta = result.metadata
            print(
                f"  Transfer {number}: {meta.source_model} -> {meta.target_model} "
                f"({meta.prompt_length:,} chars)"
            )
        else:
            print(f"  Transfer {number} failed: {result.error}")
    return 0 if batch.success else 1


async def run_transfer(api: ContextTransferAPI, args: argparse.Namespace) -> int:
    if args.input:
        conversation: Any = Path(args.input)
    else:
        conversation = SAMPLE_CONVERSATION
        print("Using sample conversation (use --input to specify a file)")

    result = await api.transfer(
        args.source, args.target, conversation, options_from_args(args)
    )
    if not result.success or result.formatted_prompt is None:
        print(f"Transfer failed: {result.error}")
        return 1

    meta = result.metadata
    if meta is not None:
        print(f"Messages processed: {meta.messages_processed}")
        print(f"Messages extracted: {meta.messages_extracted}")
        print(f"Summary type: {meta.summary_type}")
        print(f"Smart extraction: {'Enabled' if meta.smart_extraction else 'Disabled'}")
        print(f"Prompt length: {meta.prompt_length:,} characters")
        if meta.model_capabilities:
            source = meta.model_capabilities["source"]
            target = meta.model_capabilities["target"]
            print(f"Source ({meta.source_model}): {source.max_context_length:,} tokens")
            print(f"Target ({meta.target_model}): {target.max_context_length:,} tokens")
        print()

    if args.output:
        fmt = meta.output_format if meta is not None else "txt"
        path = api.manager.save_formatted_prompt(
            result.formatted_prompt, args.output, fmt
        )
        print(f"Formatted prompt saved to: {path}")
    else:
        print(RULE)
        print(result.formatted_prompt)
        print(RULE)
    return 0


async def run(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    api = create_api(resolve_config(profile=args.profile).to_frozen())

    if args.list_models:
        return await list_models(api)
    if args.chrome_config:
        return write_chrome_config(api, args.output)
    if args.validate:
        if not args.input:
            raise ValueError("--validate requires --input")
        return await validate(api, args.input)
    if args.batch:
        return await run_batch(api, args.input)
    if args.source and args.target:
        return await run_transfer(api, args)

    parser.print_help()
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point; returns the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        return asyncio.run(run(args, parser))
    except Exception as e:  # noqa: BLE001
        log.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
