"""bulletflow configuration management.

Loads configuration from .bulletflow/config.toml if present, with sensible defaults.
Configuration hierarchy (highest priority first):
1. Command-line flags
2. Workspace config (.bulletflow/config.toml)
3. Defaults
"""

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from bulletflow.tools.outline.classifier import (
    DEFAULT_TRIGGER_STATES,
    TaskState,
    task_state_from_name,
)

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_HEADING = "## Todo"
DEFAULT_DESTINATION_HEADING = "## Log"
CONFIG_PATH = Path(".bulletflow") / "config.toml"


@dataclass
class HeadingsConfig:
    """Section headings used by moves and migrations."""

    source: str = DEFAULT_SOURCE_HEADING
    destination: str = DEFAULT_DESTINATION_HEADING
    migration: str | None = None  # Defaults to the destination heading

    def __post_init__(self) -> None:
        if self.migration is None:
            self.migration = self.destination


@dataclass
class MoveConfig:
    """Which task states trigger a move."""

    trigger_states: frozenset[TaskState] = DEFAULT_TRIGGER_STATES


@dataclass
class BulletflowConfig:
    """bulletflow configuration."""

    headings: HeadingsConfig = field(default_factory=HeadingsConfig)
    move: MoveConfig = field(default_factory=MoveConfig)

    def get_headings(
        self, *, source: str | None = None, destination: str | None = None
    ) -> tuple[str, str]:
        """Resolve source and destination headings, letting CLI flags win."""
        return source or self.headings.source, destination or self.headings.destination


def parse_trigger_states(names: list[str]) -> frozenset[TaskState]:
    """Convert state names to states, skipping unknown names.

    An empty result falls back to the default trigger states.
    """
    states: set[TaskState] = set()
    for name in names:
        state = task_state_from_name(name)
        if state is None:
            logger.warning("Ignoring unknown trigger state in config: %s", name)
            continue
        states.add(state)
    return frozenset(states) if states else DEFAULT_TRIGGER_STATES


def load_config(workspace: Path) -> BulletflowConfig:
    """Load configuration from .bulletflow/config.toml if it exists.

    Args:
        workspace: Path to the workspace (the directory holding the notes).

    Returns:
        BulletflowConfig with values from config file or defaults.
    """
    config_path = workspace / CONFIG_PATH

    if not config_path.exists():
        return BulletflowConfig()

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    headings_data = data.get("headings", {})
    move_data = data.get("move", {})

    headings = HeadingsConfig(
        source=headings_data.get("source", DEFAULT_SOURCE_HEADING),
        destination=headings_data.get("destination", DEFAULT_DESTINATION_HEADING),
        migration=headings_data.get("migration"),
    )

    move = MoveConfig(
        trigger_states=parse_trigger_states(move_data.get("trigger_states", [])),
    )

    return BulletflowConfig(headings=headings, move=move)
