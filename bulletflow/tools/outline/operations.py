"""Move planning for outline notes.

A move relocates a task block from one section to another. It is expressed
as an edit script against a single snapshot of the document: one deletion and
one insertion, both in offsets of the original text, to be applied together.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from .classifier import (
    DEFAULT_TRIGGER_STATES,
    TaskState,
    classify_line,
    dedent_lines_by_amount,
    extract_task_text,
)
from .insertion import find_insertion_line, insert_under_heading
from .parser import SectionRange, find_section, parse_target_heading
from .tree import Block, collect_block, find_block

logger = logging.getLogger(__name__)


class MoveState(Enum):
    """Progress of a single move plan."""

    IDLE = "idle"
    VALIDATING = "validating"
    RESOLVING = "resolving"
    PLANNING = "planning"
    DONE = "done"
    REJECTED = "rejected"


@dataclass(frozen=True)
class EditOperation:
    """Replace ``text[from_offset:to_offset]`` with ``insert_text``."""

    from_offset: int
    to_offset: int
    insert_text: str = ""


@dataclass(frozen=True)
class EditScript:
    """The deletion and insertion that make up one move."""

    delete_from: int
    delete_to: int
    insert_at: int
    insert_text: str
    block: Block
    insertion_line: int
    created_section: bool = False

    @property
    def edits(self) -> list[EditOperation]:
        """Both operations in offset order, against the original snapshot."""
        operations = [
            EditOperation(self.delete_from, self.delete_to),
            EditOperation(self.insert_at, self.insert_at, self.insert_text),
        ]
        return sorted(operations, key=lambda op: (op.from_offset, op.to_offset))

    def apply(self, text: str) -> str:
        return apply_edits(text, self.edits)


@dataclass
class SweepResult:
    """Result of moving every eligible task out of a section."""

    content: str
    moved: int
    scripts: list[EditScript]


@dataclass
class MigrationResult:
    """Result of copying a task block into another note."""

    source_content: str
    target_content: str
    task_text: str
    lines_moved: int


def line_to_offset(lines: list[str], line_num: int, doc_length: int) -> int:
    """Character offset of the start of ``line_num``.

    Line numbers at or past the end map to the end of the document.
    """
    if line_num >= len(lines):
        return doc_length
    return sum(len(line) + 1 for line in lines[:line_num])


def apply_edits(text: str, edits: Iterable[EditOperation]) -> str:
    """Apply edits that were all computed against ``text``.

    Edits are applied from the highest offset down so earlier offsets stay
    valid. Overlapping edits are not supported.
    """
    ordered = sorted(edits, key=lambda op: (op.from_offset, op.to_offset), reverse=True)
    for op in ordered:
        text = text[: op.from_offset] + op.insert_text + text[op.to_offset :]
    return text


def reopen_scheduled(line: str) -> str:
    """Rewrite a scheduled task (``[<]``) as open; other lines are unchanged."""
    info = classify_line(line)
    if info.marker is None or info.state is not TaskState.SCHEDULED:
        return line
    return info.with_marker(info.marker.to_open()).text


def _is_blank(line: str) -> bool:
    return line.strip() == ""


class MovePlanner:
    """Plans moves of task blocks between sections.

    The planner keeps only the outcome of its most recent plan (``state`` and
    ``reason``); every plan starts again from the raw text.
    """

    def __init__(self, trigger_states: Iterable[TaskState] = DEFAULT_TRIGGER_STATES):
        self.trigger_states = frozenset(trigger_states)
        self.state = MoveState.IDLE
        self.reason: str | None = None

    def _reject(self, reason: str) -> None:
        self.state = MoveState.REJECTED
        self.reason = reason
        logger.debug("Move rejected: %s", reason)

    def plan(
        self, doc_text: str, trigger_line: int, source_heading: str, dest_heading: str
    ) -> EditScript | None:
        """Plan moving the block around ``trigger_line`` to ``dest_heading``.

        Args:
            doc_text: Full document text
            trigger_line: 0-indexed line of the task that changed state
            source_heading: Heading of the section the task must be in ("## Todo")
            dest_heading: Heading of the destination section ("## Log")

        Returns:
            The edit script, or None when the move does not apply.
        """
        self.state = MoveState.VALIDATING
        self.reason = None
        lines = doc_text.split("\n")

        if not 0 <= trigger_line < len(lines):
            self._reject(f"line {trigger_line} is out of range")
            return None

        source = find_section(lines, source_heading)
        if source is None:
            self._reject(f"section not found: '{source_heading}'")
            return None
        if not source.contains(trigger_line):
            self._reject(f"line {trigger_line} is not inside '{source_heading}'")
            return None

        state = classify_line(lines[trigger_line]).state
        if state is None or state not in self.trigger_states:
            self._reject(f"line {trigger_line} is not a task in a trigger state")
            return None

        self.state = MoveState.RESOLVING
        block = find_block(lines, trigger_line, source.start, source.end)
        if block is None:
            self._reject(f"no block at line {trigger_line}")
            return None

        self.state = MoveState.PLANNING
        block_text = "\n".join(reopen_scheduled(line) for line in block.lines(lines))
        delete_from, delete_to = self._deletion_span(lines, block, len(doc_text))

        dest = find_section(lines, dest_heading)
        created_section = dest is None
        if dest is None:
            insertion_line = len(lines)
            insert_at = len(doc_text)
            body = self._new_heading(dest_heading, source) + "\n" + block_text
            insert_text = self._insertion_text(doc_text, insert_at, body)
        else:
            if dest.start < source.end and source.start < dest.end:
                self._reject(f"'{dest_heading}' overlaps '{source_heading}'")
                return None
            insertion_line = find_insertion_line(lines, dest.start, dest.end)
            if insertion_line is None:
                self._reject(f"no insertion point in '{dest_heading}'")
                return None
            insert_at = line_to_offset(lines, insertion_line, len(doc_text))
            insert_text = self._insertion_text(doc_text, insert_at, block_text)

        if delete_from < insert_at < delete_to:
            self._reject("insertion point falls inside the moved block")
            return None

        self.state = MoveState.DONE
        logger.debug(
            "Planned move of lines %d-%d to line %d", block.start_line, block.end_line, insertion_line
        )
        return EditScript(
            delete_from=delete_from,
            delete_to=delete_to,
            insert_at=insert_at,
            insert_text=insert_text,
            block=block,
            insertion_line=insertion_line,
            created_section=created_section,
        )

    def _deletion_span(self, lines: list[str], block: Block, doc_length: int) -> tuple[int, int]:
        """Offsets to delete for ``block``.

        A blank line after the block is taken along only when the line before
        the block is blank too; otherwise it is a separator that must stay.
        """
        start, end = block.start_line, block.end_line
        delete_from = line_to_offset(lines, start, doc_length)

        if end >= len(lines):
            # Block runs to the end of a document without a trailing newline:
            # take the newline before it instead of leaving a dangling one.
            return max(delete_from - 1, 0), doc_length

        if _is_blank(lines[end]) and start > 0 and _is_blank(lines[start - 1]):
            end += 1

        return delete_from, line_to_offset(lines, end, doc_length)

    def _insertion_text(self, doc_text: str, insert_at: int, body: str) -> str:
        """Text to insert so ``body`` lands on lines of its own."""
        if insert_at == len(doc_text) and doc_text and not doc_text.endswith("\n"):
            return "\n" + body
        return body + "\n"

    def _new_heading(self, dest_heading: str, source: SectionRange) -> str:
        level, title = parse_target_heading(dest_heading)
        return f"{'#' * (level or source.level)} {title}"


def plan_move(
    doc_text: str,
    trigger_line: int,
    source_heading: str,
    dest_heading: str,
    trigger_states: Iterable[TaskState] = DEFAULT_TRIGGER_STATES,
) -> EditScript | None:
    """Plan a move with a fresh planner. See ``MovePlanner.plan``."""
    return MovePlanner(trigger_states).plan(doc_text, trigger_line, source_heading, dest_heading)


def find_eligible_task(
    doc_text: str,
    source_heading: str,
    trigger_states: Iterable[TaskState] = DEFAULT_TRIGGER_STATES,
) -> int | None:
    """First line in the source section holding a task in a trigger state."""
    states = frozenset(trigger_states)
    lines = doc_text.split("\n")
    section = find_section(lines, source_heading)
    if section is None:
        return None

    for i in range(section.content_start, section.end):
        if classify_line(lines[i]).state in states:
            return i
    return None


def move_all(
    doc_text: str,
    source_heading: str,
    dest_heading: str,
    trigger_states: Iterable[TaskState] = DEFAULT_TRIGGER_STATES,
) -> SweepResult | None:
    """Move every eligible task block out of the source section.

    Returns:
        The swept content, or None when nothing was moved.
    """
    planner = MovePlanner(trigger_states)
    current = doc_text
    scripts: list[EditScript] = []

    # Each applied move takes at least one eligible line out of the section.
    for _ in range(len(doc_text.split("\n"))):
        line = find_eligible_task(current, source_heading, planner.trigger_states)
        if line is None:
            break
        script = planner.plan(current, line, source_heading, dest_heading)
        if script is None:
            break
        current = script.apply(current)
        scripts.append(script)

    if not scripts:
        return None

    logger.info("Moved %d task blocks from '%s' to '%s'", len(scripts), source_heading, dest_heading)
    return SweepResult(content=current, moved=len(scripts), scripts=scripts)


MIGRATION_MARKS = (TaskState.MIGRATED, TaskState.SCHEDULED)
MIGRATABLE_STATES = frozenset({TaskState.OPEN, TaskState.STARTED})


def migrate_task(
    source_content: str,
    line: int,
    target_content: str,
    target_heading: str,
    mark: TaskState = TaskState.MIGRATED,
) -> MigrationResult | None:
    """Copy an incomplete task and its children into another note.

    The copy is dedented to the top level and reopened. In the source note the
    task keeps its place, marked ``[>]`` (or ``[<]`` when scheduling), and its
    children are removed.

    Args:
        source_content: Text of the note holding the task
        line: 0-indexed line of the task
        target_content: Text of the note receiving the task
        target_heading: Heading to append under in the target ("## Log")
        mark: MIGRATED or SCHEDULED

    Returns:
        MigrationResult with both updated texts, or None if the line is not an
        incomplete task.
    """
    if mark not in MIGRATION_MARKS:
        logger.debug("Cannot mark migrated task as %s", mark.value)
        return None

    lines = source_content.split("\n")
    if not 0 <= line < len(lines):
        return None

    info = classify_line(lines[line])
    if info.marker is None or info.state not in MIGRATABLE_STATES:
        return None

    block = collect_block(lines, line, len(lines))
    if block is None:
        return None

    parent = info.marker.to_open().apply_to_line(lines[line][info.indent :])
    children = dedent_lines_by_amount(lines[line + 1 : block.end_line], info.indent)

    marker = info.marker.to_scheduled() if mark is TaskState.SCHEDULED else info.marker.to_migrated()
    lines[line] = marker.apply_to_line(lines[line])
    del lines[line + 1 : block.end_line]

    return MigrationResult(
        source_content="\n".join(lines),
        target_content=insert_under_heading(target_content, "\n".join([parent, *children]), target_heading),
        task_text=extract_task_text(parent),
        lines_moved=1 + len(children),
    )
