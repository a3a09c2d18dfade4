"""Configuration management for context transfer.

Resolve-once, freeze-then-flow configuration:

- ResolvedConfig: Post-resolution configuration with origin metadata
- FrozenConfig: Immutable configuration read by the pipeline
- resolve_config(): Merge programmatic > env > project file > home file > defaults
"""

from pathlib import Path
from typing import Any

from .env_loader import EnvironmentConfigLoader
from .file_loader import ConfigFileError, FileConfigLoader
from .resolver import ConfigResolver
from .schema import TransferSettings
from .types import ConfigOrigin, FrozenConfig, ResolvedConfig, SourceMap

# Global resolver instance for efficient reuse
_resolver = ConfigResolver()


def resolve_config(
    programmatic: dict[str, Any] | None = None,
    *,
    profile: str | None = None,
    use_env_file: str | Path | None = None,
    project_root: Path | None = None,
) -> ResolvedConfig:
    """Resolve configuration from all sources with proper precedence.

    Args:
        programmatic: Dictionary of programmatic overrides (highest precedence).
                     Only known configuration fields are used.
        profile: Profile name to load from configuration files. If None,
                uses CONTEXT_TRANSFER_PROFILE environment variable if set.
        use_env_file: Optional path to .env file to load before reading
                     environment variables.
        project_root: Directory to search for pyproject.toml. If None,
                     searches current directory and parents.

    Returns:
        ResolvedConfig with merged values and source tracking for audit.

    Raises:
        ConfigurationError: If validation fails or the environment holds
            invalid values.
        ConfigFileError: If the project configuration file is malformed.

    Example:
        config = resolve_config({"last_n": 8}, profile="long-chats")
        frozen = config.to_frozen()
    """
    return _resolver.resolve(
        programmatic,
        profile=profile,
        use_env_file=use_env_file,
        project_root=project_root,
    )


def list_available_profiles(project_root: Path | None = None) -> dict[str, list[str]]:
    """List profile names defined in the project and home configuration files."""
    return _resolver.list_available_profiles(project_root)


__all__ = [  # noqa: RUF022
    "resolve_config",
    "list_available_profiles",
    "ResolvedConfig",
    "FrozenConfig",
    "SourceMap",
    "ConfigOrigin",
    "TransferSettings",
    "ConfigResolver",
    "FileConfigLoader",
    "EnvironmentConfigLoader",
    "ConfigFileError",
]
