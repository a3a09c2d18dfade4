"""Configuration schema and validation using Pydantic.

This module defines the settings schema that validates and coerces configuration
values from various sources (environment, files, programmatic) into the correct
types with proper defaults.
"""

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from context_transfer.core.types import OUTPUT_FORMATS, SUMMARY_TYPES


class TransferSettings(BaseSettings):
    """Pydantic settings schema for context transfer configuration.

    This handles validation, type coercion, and default values for all
    configuration fields. It integrates with environment variables using
    the CONTEXT_TRANSFER_ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="CONTEXT_TRANSFER_",
        env_file=None,  # Only used when explicitly requested
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore unknown env vars for forward compatibility
    )

    # --- Extraction & summarization defaults ---

    last_n: int = Field(
        default=5,
        description="Number of recent messages to keep",
        ge=1,
    )

    include_summary: bool = Field(
        default=True,
        description="Summarize the extracted messages instead of only the last one",
    )

    summary_type: str = Field(
        default="concise",
        description="Summary strategy: concise, detailed or structured",
    )

    smart_extraction: bool = Field(
        default=True,
        description="Keep flagged important earlier messages alongside recent ones",
    )

    output_format: str = Field(
        default="txt",
        description="Persisted prompt format: txt, json or markdown",
    )

    include_metadata: bool = Field(
        default=True,
        description="Attach capability metadata and attribution footers",
    )

    important_window: int = Field(
        default=2,
        description="How many important earlier messages smart extraction keeps",
        ge=0,
    )

    concise_max_chars: int = Field(
        default=500,
        description="Per-message truncation length for concise summaries",
        ge=1,
    )

    # --- External capability service ---

    capability_service_url: str | None = Field(
        default=None,
        description="Base URL of the out-of-process adapter service",
    )

    request_timeout: float = Field(
        default=30.0,
        description="Timeout in seconds for capability service requests",
        gt=0,
    )

    # --- Validation Rules ---

    @field_validator("summary_type", mode="before")
    @classmethod
    def parse_summary_type(cls, v: Any) -> str:
        """Normalize and check the summary type."""
        if isinstance(v, str) and v.strip().lower() in SUMMARY_TYPES:
            return v.strip().lower()
        raise ValueError(
            f"Invalid summary_type: {v}. Must be one of: {', '.join(SUMMARY_TYPES)}"
        )

    @field_validator("output_format", mode="before")
    @classmethod
    def parse_output_format(cls, v: Any) -> str:
        """Normalize and check the output format (``md`` is accepted)."""
        if isinstance(v, str):
            normalized = v.strip().lower()
            if normalized == "md":
                normalized = "markdown"
            if normalized in OUTPUT_FORMATS:
                return normalized
        raise ValueError(
            f"Invalid output_format: {v}. Must be one of: {', '.join(OUTPUT_FORMATS)}"
        )

    @field_validator("capability_service_url", mode="before")
    @classmethod
    def empty_url_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @classmethod
    def defaults(cls) -> dict[str, Any]:
        """Schema defaults, without reading the environment."""
        return {name: field.default for name, field in cls.model_fields.items()}

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary suitable for origin tracking.

        Returns:
            Dictionary with field names as keys and resolved values.
        """
        return {name: getattr(self, name) for name in type(self).model_fields}
