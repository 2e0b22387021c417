"""Tests for version module."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path

import pytest

from bulletflow.__main__ import main
from bulletflow._version import __version__, get_full_version_string, get_version


class TestVersionModule:
    """Tests for version module functions."""

    def test_version_is_string(self) -> None:
        """__version__ should be a string."""
        assert isinstance(__version__, str)

    def test_version_format(self) -> None:
        """Version should follow semver pattern."""
        parts = __version__.split(".")
        assert len(parts) >= 2
        assert all(p.isdigit() for p in parts[:2])

    def test_get_version_returns_string(self) -> None:
        """get_version should return a non-empty version string."""
        assert get_version()

    def test_get_full_version_string_starts_with_name(self) -> None:
        """Full version string should start with 'bulletflow'."""
        version_str = get_full_version_string()
        assert version_str.startswith("bulletflow ")
        assert version_str.endswith(get_version())


class TestVersionCLI:
    """Tests for --version CLI flag."""

    def test_version_flag_exits_zero(self, capsys) -> None:
        """--version should print the version and exit with code 0."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert "bulletflow" in capsys.readouterr().out

    def test_version_via_subprocess(self) -> None:
        """Version should work when invoked via subprocess."""
        result = subprocess.run(
            [sys.executable, "-m", "bulletflow", "--version"],
            capture_output=True,
            text=True,
            cwd=Path(__file__).parent.parent,
        )
        assert result.returncode == 0
        assert "bulletflow" in result.stdout
