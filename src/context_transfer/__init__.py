"""Transfer conversation context between AI models."""

import importlib.metadata
import logging

from context_transfer.adapters import (
    AdapterRegistry,
    AdapterResolver,
    CapabilityProvider,
    GenericAdapter,
    ModelAdapter,
    RemoteCapabilityProvider,
)
from context_transfer.config import FrozenConfig, resolve_config
from context_transfer.core.types import (
    BatchTransferResult,
    ConversationAnalysis,
    FormattingHints,
    Message,
    ModelCapabilities,
    TransferMetadata,
    TransferOptions,
    TransferRequest,
    TransferResult,
    ValidationResult,
)
from context_transfer.exceptions import (
    AdapterLookupError,
    ConfigurationError,
    ContextTransferError,
    FormatError,
    ValidationError,
)
from context_transfer.extraction import extract_context
from context_transfer.parsing import load_conversation, parse_conversation
from context_transfer.persistence import save_formatted_prompt
from context_transfer.summarizer import summarize_context
from context_transfer.transfer import (
    ContextTransferAPI,
    ContextTransferManager,
    create_api,
    get_all_models,
    quick_transfer,
    validate_conversation,
)
from context_transfer.validation import validate_conversation_data

try:
    __version__ = importlib.metadata.version("context-transfer")
except importlib.metadata.PackageNotFoundError:
    __version__ = "development"

# Library logging stays silent unless the application configures handlers.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [  # noqa: RUF022
    # Entry points
    "ContextTransferAPI",
    "ContextTransferManager",
    "create_api",
    "quick_transfer",
    "get_all_models",
    "validate_conversation",
    # Pipeline stages
    "parse_conversation",
    "load_conversation",
    "extract_context",
    "summarize_context",
    "save_formatted_prompt",
    "validate_conversation_data",
    # Adapters
    "ModelAdapter",
    "CapabilityProvider",
    "AdapterRegistry",
    "AdapterResolver",
    "GenericAdapter",
    "RemoteCapabilityProvider",
    # Configuration
    "resolve_config",
    "FrozenConfig",
    # Types
    "Message",
    "FormattingHints",
    "TransferOptions",
    "TransferRequest",
    "TransferResult",
    "TransferMetadata",
    "BatchTransferResult",
    "ModelCapabilities",
    "ConversationAnalysis",
    "ValidationResult",
    # Exceptions
    "ContextTransferError",
    "FormatError",
    "ValidationError",
    "AdapterLookupError",
    "ConfigurationError",
]
