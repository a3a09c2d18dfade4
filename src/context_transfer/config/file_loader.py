"""File-based configuration loading with profile support.

This module handles loading configuration from TOML files, supporting both
project-level (pyproject.toml) and home-level (~/.config/context_transfer.toml)
configuration with named profiles.
"""

import os
from pathlib import Path
import tomllib
from typing import Any

HOME_CONFIG_ENV = "CONTEXT_TRANSFER_CONFIG_HOME"
PYPROJECT_PATH_ENV = "CONTEXT_TRANSFER_PYPROJECT_PATH"


class ConfigFileError(Exception):
    """Raised when configuration file loading fails."""

    def __init__(
        self, file_path: Path, message: str, cause: Exception | None = None
    ) -> None:
        """Initialize with file path, message, and optional cause.

        Args:
            file_path: The file that failed to load
            message: Human-readable error message
            cause: The underlying exception that caused the failure
        """
        self.file_path = file_path
        self.message = message
        self.cause = cause
        super().__init__(f"Config file error in {file_path}: {message}")


class FileConfigLoader:
    """Loads configuration from TOML files with profile support."""

    def load_project_config(
        self, project_root: Path | None = None, profile: str | None = None
    ) -> dict[str, Any]:
        """Load configuration from pyproject.toml in the project root.

        Args:
            project_root: Directory to search for pyproject.toml. If None,
                         searches current directory and parents.
            profile: Optional profile name to load from
                    [tool.context_transfer.profiles.<name>]. If None, loads
                    from [tool.context_transfer].

        Returns:
            Dictionary of configuration values from the file.
            Empty dict if file doesn't exist or has no context_transfer section.

        Raises:
            ConfigFileError: If file exists but cannot be parsed, or the
                requested profile does not exist.
        """
        pyproject_path = self._find_pyproject_toml(project_root)
        if not pyproject_path:
            return {}

        data = self._read_toml(pyproject_path)
        section = data.get("tool", {}).get("context_transfer", {})
        if not section:
            return {}
        return self._select_profile(pyproject_path, section, profile)

    def load_home_config(self, profile: str | None = None) -> dict[str, Any]:
        """Load configuration from the home configuration file.

        Args:
            profile: Optional profile name to load from [profiles.<name>].
                    If None, loads from the root level.

        Returns:
            Dictionary of configuration values. Empty dict if file doesn't exist.

        Raises:
            ConfigFileError: If file exists but cannot be parsed.
        """
        home_config_path = self._get_home_config_path()
        if not home_config_path.exists():
            return {}

        data = self._read_toml(home_config_path)
        return self._select_profile(home_config_path, data, profile)

    def list_available_profiles(
        self, project_root: Path | None = None
    ) -> dict[str, list[str]]:
        """List all available profiles from project and home files.

        Returns:
            Dictionary with 'project' and 'home' keys containing lists of profile names.
        """
        profiles: dict[str, list[str]] = {"project": [], "home": []}

        try:
            pyproject_path = self._find_pyproject_toml(project_root)
            if pyproject_path:
                data = self._read_toml(pyproject_path)
                section = data.get("tool", {}).get("context_transfer", {})
                profiles["project"] = list(section.get("profiles", {}).keys())
        except ConfigFileError:
            # Ignore parsing errors for profile listing
            pass

        try:
            home_config_path = self._get_home_config_path()
            if home_config_path.exists():
                data = self._read_toml(home_config_path)
                profiles["home"] = list(data.get("profiles", {}).keys())
        except ConfigFileError:
            pass

        return profiles

    def _read_toml(self, path: Path) -> dict[str, Any]:
        try:
            with Path(path).open(mode="rb") as f:
                return tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigFileError(path, f"Failed to parse TOML: {e}", cause=e) from e

    def _select_profile(
        self, path: Path, section: dict[str, Any], profile: str | None
    ) -> dict[str, Any]:
        if profile:
            profiles = section.get("profiles", {})
            if profile not in profiles:
                available = list(profiles.keys()) if profiles else []
                raise ConfigFileError(
                    path,
                    f"Profile '{profile}' not found. Available profiles: {available}",
                )
            return dict(profiles[profile])
        # Return base configuration, excluding profiles section
        config = dict(section)
        config.pop("profiles", None)
        return config

    def _find_pyproject_toml(self, start_dir: Path | None = None) -> Path | None:
        """Find pyproject.toml by searching up the directory tree.

        ``CONTEXT_TRANSFER_PYPROJECT_PATH`` names the file directly when no
        start directory is given.
        """
        if start_dir is None:
            override = os.getenv(PYPROJECT_PATH_ENV)
            if override:
                path = Path(override).expanduser()
                return path if path.exists() else None
            start_dir = Path.cwd()

        current = Path(start_dir).resolve()

        while True:
            pyproject_path = current / "pyproject.toml"
            if pyproject_path.exists():
                return pyproject_path
            if current == current.parent:  # Stop at filesystem root
                return None
            current = current.parent

    def _get_home_config_path(self) -> Path:
        """Path to the home configuration file.

        ``CONTEXT_TRANSFER_CONFIG_HOME`` overrides ~/.config/context_transfer.toml.
        """
        override = os.getenv(HOME_CONFIG_ENV)
        if override:
            return Path(override).expanduser()
        return Path.home() / ".config" / "context_transfer.toml"
