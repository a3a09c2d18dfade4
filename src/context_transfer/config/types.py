"""Core configuration data types.

Configuration follows a resolve-once, freeze-then-flow pattern: values are
merged from every source into a `ResolvedConfig` (with origin tracking) and
then frozen into the `FrozenConfig` the pipeline reads.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal, NamedTuple

# --- Source Tracking Types ---

ConfigOrigin = Literal["programmatic", "env", "file", "default"]
SourceMap = Mapping[str, ConfigOrigin]

FIELD_ORDER: tuple[str, ...] = (
    "last_n",
    "include_summary",
    "summary_type",
    "smart_extraction",
    "output_format",
    "include_metadata",
    "important_window",
    "concise_max_chars",
    "capability_service_url",
    "request_timeout",
)


class ResolvedConfig(NamedTuple):
    """Configuration after resolution from all sources, before freezing.

    This represents the validated, merged result of combining programmatic
    overrides, environment variables, files, and defaults, plus the origin of
    every value for audit.
    """

    last_n: int
    include_summary: bool
    summary_type: str
    smart_extraction: bool
    output_format: str
    include_metadata: bool
    important_window: int
    concise_max_chars: int
    capability_service_url: str | None
    request_timeout: float

    # Audit metadata - tracks where each field value came from
    origin: SourceMap

    def to_frozen(self) -> "FrozenConfig":
        """Convert to the immutable configuration used in the pipeline."""
        values = self._asdict()
        values.pop("origin")
        return FrozenConfig(**values)

    def with_overrides(self, **overrides: object) -> "ResolvedConfig":
        """Create a new ResolvedConfig with programmatic overrides applied.

        Args:
            **overrides: Field values to override. Unknown fields are ignored.

        Returns:
            New ResolvedConfig with overrides applied and origin updated.
        """
        new_values = self._asdict()
        new_origin = dict(self.origin)

        for field, value in overrides.items():
            if field in FIELD_ORDER:
                new_values[field] = value
                new_origin[field] = "programmatic"

        new_values["origin"] = new_origin
        return ResolvedConfig(**new_values)

    def audit(self) -> str:
        """Human-readable report showing the origin of each field."""
        lines = []
        for field in FIELD_ORDER:
            origin = self.origin.get(field, "default")
            lines.append(f"{field}: {getattr(self, field)!r} (from {origin})")
        return "\n".join(lines)


@dataclass(frozen=True, slots=True)
class FrozenConfig:
    """Immutable configuration consumed by the transfer pipeline."""

    last_n: int = 5
    include_summary: bool = True
    summary_type: str = "concise"
    smart_extraction: bool = True
    output_format: str = "txt"
    include_metadata: bool = True
    important_window: int = 2
    concise_max_chars: int = 500
    capability_service_url: str | None = None
    request_timeout: float = 30.0
