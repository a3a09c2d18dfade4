"""Core data types that flow through the transfer pipeline.

Every value here is created fresh per call and is immutable once built. Stages
hand these objects to each other left to right: parsed `Message` tuples go
into extraction, extracted messages into summarization, and the orchestrator
wraps the final prompt in a `TransferResult`.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import dataclasses
from datetime import UTC, datetime
import os
import typing

from context_transfer.exceptions import ValidationError

if typing.TYPE_CHECKING:
    from context_transfer.config import FrozenConfig

Role = typing.Literal["user", "assistant", "system"]
SummaryType = typing.Literal["concise", "detailed", "structured"]
OutputFormat = typing.Literal["txt", "json", "markdown"]

ROLES: tuple[str, ...] = ("user", "assistant", "system")
SUMMARY_TYPES: tuple[str, ...] = ("concise", "detailed", "structured")
OUTPUT_FORMATS: tuple[str, ...] = ("txt", "json", "markdown")

# Conversation data accepted by the orchestrator and validator: a message
# sequence, an object carrying `messages`/`conversation`, or a file path.
ConversationData = (
    str | os.PathLike[str] | Sequence[typing.Any] | Mapping[str, typing.Any]
)


def utc_now_iso() -> str:
    """Return the current time as an ISO-8601 string in UTC."""
    return datetime.now(UTC).isoformat()


def _require(
    *,
    condition: bool,
    message: str,
    exc: type[Exception] = ValueError,
    field_name: str | None = None,
) -> None:
    """Centralized validation with optional field context for clearer errors."""
    if not condition:
        if field_name:
            raise exc(f"{field_name}: {message}")
        raise exc(message)


# --- Messages ---


@dataclasses.dataclass(frozen=True, slots=True)
class Message:
    """A single role-tagged turn of a transcript."""

    role: Role
    content: str

    def __post_init__(self) -> None:
        """Validate invariants for type safety."""
        _require(
            condition=self.role in ROLES,
            message=f"must be one of {list(ROLES)}, got {self.role!r}",
            field_name="role",
            exc=ValidationError,
        )
        _require(
            condition=isinstance(self.content, str),
            message="must be str",
            field_name="content",
            exc=ValidationError,
        )

    @classmethod
    def from_mapping(cls, entry: Mapping[str, typing.Any]) -> Message:
        """Build a message from a `{role, content}` mapping.

        Raises:
            ValidationError: If the entry is not a mapping, the role is not one
                of user/assistant/system, or the content is not a string.
        """
        if isinstance(entry, Message):
            return entry
        if not isinstance(entry, Mapping):
            raise ValidationError(
                f"Message entry must be a mapping, got {type(entry).__name__}"
            )
        return cls(role=entry.get("role"), content=entry.get("content"))  # type: ignore[arg-type]

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


# --- Options ---


@dataclasses.dataclass(frozen=True, slots=True)
class FormattingHints:
    """Opaque capability hints forwarded to the adapter layer.

    The core never interprets these flags; their meaning is owned entirely by
    whichever adapter formats the prompt.
    """

    include_code_context: bool = False
    include_reasoning: bool = False
    include_safety: bool = False
    include_creativity: bool = False
    include_examples: bool = False
    include_step_by_step: bool = False
    include_multimodal: bool = False
    include_web_search: bool = False

    def to_dict(self) -> dict[str, bool]:
        return dataclasses.asdict(self)

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in dataclasses.fields(cls))


# camelCase spellings accepted in option mappings (e.g. JSON batch files).
_OPTION_ALIASES: dict[str, str] = {
    "lastN": "last_n",
    "includeSummary": "include_summary",
    "summaryType": "summary_type",
    "smartExtraction": "smart_extraction",
    "outputFormat": "output_format",
    "includeMetadata": "include_metadata",
    "includeCodeContext": "include_code_context",
    "includeCode": "include_code_context",
    "includeReasoning": "include_reasoning",
    "includeSafety": "include_safety",
    "includeCreativity": "include_creativity",
    "includeExamples": "include_examples",
    "includeStepByStep": "include_step_by_step",
    "includeMultimodal": "include_multimodal",
    "includeWebSearch": "include_web_search",
}


@dataclasses.dataclass(frozen=True, slots=True)
class TransferOptions:
    """Resolved options controlling extraction, summarization and output."""

    last_n: int = 5
    include_summary: bool = True
    summary_type: str = "concise"
    smart_extraction: bool = True
    output_format: str = "txt"
    include_metadata: bool = True
    hints: FormattingHints = dataclasses.field(default_factory=FormattingHints)

    def __post_init__(self) -> None:
        """Validate option values."""
        _require(
            condition=isinstance(self.last_n, int)
            and not isinstance(self.last_n, bool)
            and self.last_n >= 1,
            message=f"must be an int >= 1, got {self.last_n!r}",
            field_name="last_n",
            exc=ValidationError,
        )
        _require(
            condition=self.output_format in OUTPUT_FORMATS,
            message=f"must be one of {list(OUTPUT_FORMATS)}, got {self.output_format!r}",
            field_name="output_format",
            exc=ValidationError,
        )
        # Unknown summary types are tolerated; the summarizer falls back to concise.
        _require(
            condition=isinstance(self.summary_type, str),
            message="must be str",
            field_name="summary_type",
            exc=ValidationError,
        )

    @classmethod
    def from_config(
        cls, config: FrozenConfig | None = None, **overrides: typing.Any
    ) -> TransferOptions:
        """Build options from configured defaults plus explicit overrides.

        Args:
            config: Frozen configuration supplying defaults. When None, the
                documented defaults are used.
            **overrides: Option values (snake_case or camelCase). Hint flags
                may be given individually or as a `hints` mapping/object.

        Returns:
            A validated TransferOptions instance.
        """
        values: dict[str, typing.Any] = {}
        if config is not None:
            values.update(
                last_n=config.last_n,
                include_summary=config.include_summary,
                summary_type=config.summary_type,
                smart_extraction=config.smart_extraction,
                output_format=config.output_format,
                include_metadata=config.include_metadata,
            )

        hint_names = set(FormattingHints.field_names())
        hint_values: dict[str, bool] = {}
        for raw_key, value in overrides.items():
            key = _OPTION_ALIASES.get(raw_key, raw_key)
            if value is None:
                continue
            if key == "hints":
                if isinstance(value, FormattingHints):
                    hint_values.update(value.to_dict())
                else:
                    for hk, hv in dict(value).items():
                        hk = _OPTION_ALIASES.get(hk, hk)
                        if hk in hint_names:
                            hint_values[hk] = bool(hv)
            elif key in hint_names:
                hint_values[key] = bool(value)
            elif key in {f.name for f in dataclasses.fields(cls)}:
                values[key] = value
            # Unknown keys are ignored for forward compatibility.

        return cls(**values, hints=FormattingHints(**hint_values))

    @classmethod
    def from_mapping(
        cls,
        data: Mapping[str, typing.Any] | TransferOptions | None,
        config: FrozenConfig | None = None,
    ) -> TransferOptions:
        """Coerce a mapping (or existing options) into TransferOptions."""
        if isinstance(data, TransferOptions):
            return data
        return cls.from_config(config, **dict(data or {}))


# --- Model capabilities ---


@dataclasses.dataclass(frozen=True, slots=True)
class ModelCapabilities:
    """Advisory metadata about a model; used for reporting only."""

    name: str
    supported_formats: tuple[str, ...] = ("text",)
    max_context_length: int = 8000
    supports_code: bool = True
    supports_images: bool = False
    supports_tools: bool = False

    @classmethod
    def default(cls, name: str) -> ModelCapabilities:
        """The record used whenever a capability lookup fails."""
        return cls(name=name)

    @classmethod
    def from_mapping(
        cls, name: str, data: Mapping[str, typing.Any]
    ) -> ModelCapabilities:
        """Build a record from a snake_case or camelCase payload.

        Missing fields take the default record's values.
        """

        def pick(snake: str, camel: str, default: typing.Any) -> typing.Any:
            if snake in data:
                return data[snake]
            return data.get(camel, default)

        formats = pick("supported_formats", "supportedFormats", ("text",))
        return cls(
            name=str(data.get("name", name)),
            supported_formats=tuple(str(f) for f in formats),
            max_context_length=int(
                pick("max_context_length", "maxContextLength", 8000)
            ),
            supports_code=bool(pick("supports_code", "supportsCode", True)),
            supports_images=bool(pick("supports_images", "supportsImages", False)),
            supports_tools=bool(pick("supports_tools", "supportsTools", False)),
        )

    def to_dict(self) -> dict[str, typing.Any]:
        data = dataclasses.asdict(self)
        data["supported_formats"] = list(self.supported_formats)
        return data


# --- Results ---


@dataclasses.dataclass(frozen=True, slots=True)
class TransferMetadata:
    """Counts, lengths and timestamps describing a successful transfer."""

    source_model: str
    target_model: str
    summary_type: str
    smart_extraction: bool
    messages_processed: int
    messages_extracted: int
    prompt_length: int
    created_at: str
    output_format: str
    model_capabilities: Mapping[str, ModelCapabilities] | None = None

    def to_dict(self) -> dict[str, typing.Any]:
        data = {
            f.name: getattr(self, f.name)
            for f in dataclasses.fields(self)
            if f.name != "model_capabilities"
        }
        if self.model_capabilities is not None:
            data["model_capabilities"] = {
                k: v.to_dict() for k, v in self.model_capabilities.items()
            }
        return data


@dataclasses.dataclass(frozen=True, slots=True)
class TransferResult:
    """Terminal artifact of a single transfer.

    `metadata` is populated only on success. `index` is set when the result
    belongs to a batch and records the request's original position.
    """

    success: bool
    formatted_prompt: str | None = None
    metadata: TransferMetadata | None = None
    error: str | None = None
    error_type: str | None = None
    index: int | None = None

    @classmethod
    def failure(cls, exc: BaseException, index: int | None = None) -> TransferResult:
        return cls(
            success=False,
            error=str(exc),
            error_type=type(exc).__name__,
            index=index,
        )

    def with_index(self, index: int) -> TransferResult:
        return dataclasses.replace(self, index=index)

    def to_dict(self) -> dict[str, typing.Any]:
        data: dict[str, typing.Any] = {"success": self.success}
        if self.formatted_prompt is not None:
            data["formatted_prompt"] = self.formatted_prompt
        if self.metadata is not None:
            data["metadata"] = self.metadata.to_dict()
        if self.error is not None:
            data["error"] = self.error
            data["error_type"] = self.error_type
        if self.index is not None:
            data["index"] = self.index
        return data


@dataclasses.dataclass(frozen=True, slots=True)
class TransferRequest:
    """One element of a batch transfer."""

    source_model: str
    target_model: str
    conversation_data: typing.Any
    options: TransferOptions | Mapping[str, typing.Any] | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, typing.Any]) -> TransferRequest:
        """Build a request from snake_case or camelCase keys."""
        if not isinstance(data, Mapping):
            raise ValidationError(
                f"Transfer request must be a mapping, got {type(data).__name__}"
            )
        source = data.get("source_model", data.get("sourceModel"))
        target = data.get("target_model", data.get("targetModel"))
        conversation = data.get("conversation_data", data.get("conversationData"))
        _require(
            condition=isinstance(source, str) and source.strip() != "",
            message="must be a non-empty str",
            field_name="source_model",
            exc=ValidationError,
        )
        _require(
            condition=isinstance(target, str) and target.strip() != "",
            message="must be a non-empty str",
            field_name="target_model",
            exc=ValidationError,
        )
        return cls(
            source_model=typing.cast("str", source),
            target_model=typing.cast("str", target),
            conversation_data=conversation,
            options=data.get("options"),
        )


@dataclasses.dataclass(frozen=True, slots=True)
class BatchTransferResult:
    """Aggregate of independently processed transfers."""

    success: bool
    total_transfers: int
    successful_transfers: int
    failed_transfers: int
    results: tuple[TransferResult, ...]
    completed_at: str

    def to_dict(self) -> dict[str, typing.Any]:
        return {
            "success": self.success,
            "total_transfers": self.total_transfers,
            "successful_transfers": self.successful_transfers,
            "failed_transfers": self.failed_transfers,
            "results": [r.to_dict() for r in self.results],
            "metadata": {"completed_at": self.completed_at},
        }


@dataclasses.dataclass(frozen=True, slots=True)
class ConversationAnalysis:
    """Statistics computed over every message of a conversation."""

    total_messages: int
    user_messages: int
    assistant_messages: int
    system_messages: int
    unknown_messages: int
    average_message_length: float
    has_system_context: bool

    def to_dict(self) -> dict[str, typing.Any]:
        return dataclasses.asdict(self)


@dataclasses.dataclass(frozen=True, slots=True)
class ValidationResult:
    """Outcome of validating conversation data."""

    success: bool
    valid: bool
    analysis: ConversationAnalysis | None = None
    recommendations: tuple[str, ...] = ()
    error: str | None = None
    error_type: str | None = None

    def to_dict(self) -> dict[str, typing.Any]:
        data: dict[str, typing.Any] = {"success": self.success, "valid": self.valid}
        if self.analysis is not None:
            data["analysis"] = self.analysis.to_dict()
            data["recommendations"] = list(self.recommendations)
        if self.error is not None:
            data["error"] = self.error
            data["error_type"] = self.error_type
        return data
