"""Pytest configuration and fixtures."""

import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest


@pytest.fixture
def temp_workspace() -> Generator[Path, None, None]:
    """Create a temporary workspace directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config_file(temp_workspace: Path) -> Path:
    """Path of the workspace config file, with its directory created."""
    config_dir = temp_workspace / ".bulletflow"
    config_dir.mkdir()
    return config_dir / "config.toml"
