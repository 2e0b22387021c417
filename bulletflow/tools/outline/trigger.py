"""Detect task state transitions and turn them into moves.

This is the host-side glue around the planner: it compares two snapshots of
a note, finds a task that just entered a trigger state, and plans the move.
Edits produced by a mover carry its tag so the mover ignores its own changes.
"""

from __future__ import annotations

import difflib
import logging
from collections.abc import Iterable

from .classifier import DEFAULT_TRIGGER_STATES, TaskState, classify_line
from .operations import EditScript, MovePlanner

logger = logging.getLogger(__name__)

AUTO_MOVE_TAG = "bulletflow.auto-move"


def detect_trigger(
    old_text: str,
    new_text: str,
    trigger_states: Iterable[TaskState] = DEFAULT_TRIGGER_STATES,
) -> int | None:
    """Find the first line of ``new_text`` whose task just entered a trigger state.

    Changed lines are aligned with their counterpart in ``old_text``; a line
    that already had the same state before the change is not a trigger.

    Returns:
        0-indexed line in ``new_text``, or None.
    """
    states = frozenset(trigger_states)
    old_lines = old_text.split("\n")
    new_lines = new_text.split("\n")

    matcher = difflib.SequenceMatcher(a=old_lines, b=new_lines, autojunk=False)
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag not in ("replace", "insert"):
            continue
        for offset, j in enumerate(range(j1, j2)):
            new_state = classify_line(new_lines[j]).state
            if new_state not in states:
                continue
            old_index = i1 + offset
            if tag == "replace" and old_index < i2:
                if classify_line(old_lines[old_index]).state is new_state:
                    continue
            return j

    return None


class AutoMover:
    """Moves tasks out of a section as soon as they reach a trigger state."""

    def __init__(
        self,
        source_heading: str,
        dest_heading: str,
        trigger_states: Iterable[TaskState] = DEFAULT_TRIGGER_STATES,
        tag: str = AUTO_MOVE_TAG,
    ):
        self.source_heading = source_heading
        self.dest_heading = dest_heading
        self.planner = MovePlanner(trigger_states)
        self.tag = tag

    def on_change(self, old_text: str, new_text: str, tag: str | None = None) -> EditScript | None:
        """Plan a move for a document change, or None if there is nothing to do.

        Args:
            old_text: Snapshot before the change
            new_text: Snapshot after the change; offsets in the result refer to it
            tag: Tag of the transaction that produced the change
        """
        if tag == self.tag:
            return None

        line = detect_trigger(old_text, new_text, self.planner.trigger_states)
        if line is None:
            return None

        script = self.planner.plan(new_text, line, self.source_heading, self.dest_heading)
        if script is not None:
            logger.info("Auto-moving task at line %d to '%s'", line, self.dest_heading)
        return script

    def process(self, old_text: str, new_text: str, tag: str | None = None) -> tuple[str, str | None]:
        """Apply the planned move, if any.

        Returns:
            The resulting text and the tag to attach to the change (None when
            nothing was moved).
        """
        script = self.on_change(old_text, new_text, tag)
        if script is None:
            return new_text, None
        return script.apply(new_text), self.tag
