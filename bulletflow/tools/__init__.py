"""Tools for working with outline notes."""

from bulletflow.tools.outline import (
    OutlineAction,
    OutlineExecutor,
    OutlineObservation,
    OutlineTool,
)

__all__ = [
    "OutlineAction",
    "OutlineExecutor",
    "OutlineObservation",
    "OutlineTool",
]
