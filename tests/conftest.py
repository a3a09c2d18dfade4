"""
Global test configuration with support for different test types.
"""

from contextlib import suppress
import os
from pathlib import Path

import pytest

from context_transfer.core.types import Message


# --- Environment Isolation (Autouse) ---
@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests.

    Opt-in escape hatch: mark a test with @pytest.mark.allow_dotenv
    to permit .env loading for that specific test.
    """
    if request.node.get_closest_marker("allow_dotenv"):
        return
    with suppress(Exception):
        monkeypatch.setattr(
            "context_transfer.config.env_loader.load_dotenv",
            lambda *_args, **_kwargs: False,
        )


@pytest.fixture(autouse=True)
def isolate_context_transfer_env(monkeypatch):
    """Ensure a clean CONTEXT_TRANSFER_* environment for each test."""
    for key in list(os.environ.keys()):
        if key.startswith("CONTEXT_TRANSFER_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def neutral_config_files(request, monkeypatch, tmp_path, isolate_context_transfer_env):  # noqa: ARG001
    """Point home and project config paths at isolated temp files.

    Prevents reading a developer's real ~/.config/context_transfer.toml or a
    pyproject.toml found above the working directory.

    Escape hatch: mark test with @pytest.mark.allow_real_config_files.
    """
    if request.node.get_closest_marker("allow_real_config_files"):
        return

    isolated = tmp_path / "config_isolated"
    isolated.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv(
        "CONTEXT_TRANSFER_CONFIG_HOME", str(isolated / "context_transfer.toml")
    )
    monkeypatch.setenv("CONTEXT_TRANSFER_PYPROJECT_PATH", str(isolated / "pyproject.toml"))


@pytest.fixture
def config_files(tmp_path, monkeypatch):
    """Write project and home TOML files and point the loaders at them.

    Usage:
        config_files(pyproject='[tool.context_transfer]\\nlast_n = 7')
    """

    def _write(*, pyproject: str = "", home: str = "") -> tuple[Path, Path]:
        pyproject_path = tmp_path / "project" / "pyproject.toml"
        home_path = tmp_path / "home" / "context_transfer.toml"
        pyproject_path.parent.mkdir(exist_ok=True)
        home_path.parent.mkdir(exist_ok=True)
        if pyproject:
            pyproject_path.write_text(pyproject, encoding="utf-8")
        if home:
            home_path.write_text(home, encoding="utf-8")
        monkeypatch.setenv("CONTEXT_TRANSFER_PYPROJECT_PATH", str(pyproject_path))
        monkeypatch.setenv("CONTEXT_TRANSFER_CONFIG_HOME", str(home_path))
        return pyproject_path, home_path

    return _write


# --- Test Environment Markers ---
def pytest_configure(config):
    """Configure custom markers for test organization."""
    markers = [
        "unit: Fast, isolated unit tests",
        "integration: Component integration tests with mocked services",
        "allow_dotenv: Permit .env loading for this test",
        "allow_real_config_files: Read real home and project config files",
    ]
    for marker in markers:
        config.addinivalue_line("markers", marker)


# --- Core Fixtures ---


@pytest.fixture
def sample_messages() -> list[Message]:
    """A short coding conversation with one system message."""
    return [
        Message("system", "You are a helpful coding assistant."),
        Message("user", "How do I read a file in Python?"),
        Message("assistant", "Use open() inside a with block."),
        Message("user", "What about binary files?"),
        Message("assistant", "Pass mode='rb' to open()."),
    ]


@pytest.fixture
def sample_records() -> list[dict[str, str]]:
    """A four-turn conversation as plain role/content mappings."""
    return [
        {"role": "user", "content": "I need help with Python programming"},
        {"role": "assistant", "content": "What specific topic are you working on?"},
        {"role": "user", "content": "I'm trying to understand decorators"},
        {"role": "assistant", "content": "Decorators wrap a function..."},
    ]
