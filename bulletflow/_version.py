"""Version information for bulletflow.

The version is statically defined here and should match pyproject.toml. An
installed distribution's metadata takes precedence when available.
"""

from importlib.metadata import PackageNotFoundError, version

__version__ = "0.1.0"


def get_version() -> str:
    """Get the version string, e.g. "0.1.0"."""
    try:
        return version("bulletflow")
    except PackageNotFoundError:
        return __version__


def get_full_version_string() -> str:
    """Get a human-readable version string like "bulletflow 0.1.0"."""
    return f"bulletflow {get_version()}"
