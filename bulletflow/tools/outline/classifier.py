"""Line classification for outline notes.

Every structural decision in the outline engine is derived from a single line
at a time: its indentation, whether it is a heading or a list item, and the
task marker (if any) carried by the checkbox after the bullet.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum

HEADING_PATTERN = re.compile(r"^(#{1,6})\s+(.+?)\s*$")
# indent, bullet, whitespace, optional "[c]" checkbox and the whitespace after it
LIST_ITEM_PATTERN = re.compile(r"^([ \t]*)([-*+])(?:[ \t]+|$)(?:\[([^\[\]])\](?=\s|$)[ \t]*)?")


class TaskState(Enum):
    """State carried by a task checkbox."""

    OPEN = "open"
    COMPLETED = "completed"
    STARTED = "started"
    SCHEDULED = "scheduled"
    MIGRATED = "migrated"
    MEETING = "meeting"
    UNKNOWN = "unknown"


MARKER_CHARS: dict[str, TaskState] = {
    " ": TaskState.OPEN,
    "x": TaskState.COMPLETED,
    "X": TaskState.COMPLETED,
    "/": TaskState.STARTED,
    "<": TaskState.SCHEDULED,
    ">": TaskState.MIGRATED,
    "o": TaskState.MEETING,
}

STATE_CHARS: dict[TaskState, str] = {
    TaskState.OPEN: " ",
    TaskState.COMPLETED: "x",
    TaskState.STARTED: "/",
    TaskState.SCHEDULED: "<",
    TaskState.MIGRATED: ">",
    TaskState.MEETING: "o",
}

DEFAULT_TRIGGER_STATES = frozenset({TaskState.COMPLETED, TaskState.STARTED})


def task_state_from_name(name: str) -> TaskState | None:
    """Look up a task state by its name ("completed", "started", ...)."""
    try:
        return TaskState(name.strip().lower())
    except ValueError:
        return None


@dataclass(frozen=True)
class TaskMarker:
    """The checkbox token of a task line, e.g. ``[x]``."""

    state: TaskState
    char: str

    @classmethod
    def from_char(cls, char: str) -> TaskMarker:
        return cls(state=MARKER_CHARS.get(char, TaskState.UNKNOWN), char=char)

    @classmethod
    def from_state(cls, state: TaskState) -> TaskMarker:
        if state not in STATE_CHARS:
            raise ValueError(f"No marker character for state: {state.value}")
        return cls(state=state, char=STATE_CHARS[state])

    @property
    def token(self) -> str:
        return f"[{self.char}]"

    def to_open(self) -> TaskMarker:
        return TaskMarker.from_state(TaskState.OPEN)

    def to_scheduled(self) -> TaskMarker:
        return TaskMarker.from_state(TaskState.SCHEDULED)

    def to_migrated(self) -> TaskMarker:
        return TaskMarker.from_state(TaskState.MIGRATED)

    def apply_to_line(self, line: str) -> str:
        """Replace the checkbox of a task line with this marker.

        Lines that are not tasks are returned unchanged.
        """
        match = LIST_ITEM_PATTERN.match(line)
        if not match or match.group(3) is None:
            return line
        start = match.start(3)
        return line[:start] + self.char + line[start + 1 :]


class LineKind(Enum):
    """Structural kind of a line."""

    BLANK = "blank"
    HEADING = "heading"
    LIST_ITEM = "list_item"
    PLAIN = "plain"


@dataclass(frozen=True)
class LineInfo:
    """Classification of a single line of an outline note."""

    text: str
    kind: LineKind
    indent: int
    heading_level: int | None = None
    heading_title: str | None = None
    bullet: str | None = None
    marker: TaskMarker | None = None
    prefix: str = ""
    content: str = ""

    @property
    def is_blank(self) -> bool:
        return self.kind is LineKind.BLANK

    @property
    def is_heading(self) -> bool:
        return self.kind is LineKind.HEADING

    @property
    def is_list_item(self) -> bool:
        return self.kind is LineKind.LIST_ITEM

    @property
    def is_task(self) -> bool:
        return self.marker is not None

    @property
    def state(self) -> TaskState | None:
        return self.marker.state if self.marker else None

    def with_marker(self, marker: TaskMarker) -> LineInfo:
        """Return a copy of a task line carrying a different marker."""
        if self.marker is None:
            return self
        return replace(self, text=marker.apply_to_line(self.text), marker=marker)


def count_indent(line: str) -> int:
    """Count leading whitespace characters (spaces and tabs)."""
    return len(line) - len(line.lstrip(" \t"))


def classify_line(text: str) -> LineInfo:
    """Classify one line. Never raises; odd input degrades to a plainer kind."""
    if text.strip() == "":
        return LineInfo(text=text, kind=LineKind.BLANK, indent=count_indent(text))

    indent = count_indent(text)

    heading = HEADING_PATTERN.match(text)
    if heading:
        hashes, title = heading.groups()
        return LineInfo(
            text=text,
            kind=LineKind.HEADING,
            indent=indent,
            heading_level=len(hashes),
            heading_title=title,
            content=title,
        )

    item = LIST_ITEM_PATTERN.match(text)
    if item:
        marker_char = item.group(3)
        prefix = item.group(0)
        return LineInfo(
            text=text,
            kind=LineKind.LIST_ITEM,
            indent=indent,
            bullet=item.group(2),
            marker=TaskMarker.from_char(marker_char) if marker_char is not None else None,
            prefix=prefix,
            content=text[len(prefix) :].rstrip(),
        )

    return LineInfo(text=text, kind=LineKind.PLAIN, indent=indent, content=text.strip())


def extract_task_text(line: str) -> str:
    """Get the trimmed text of a task line, or "" for anything else."""
    info = classify_line(line)
    if not info.is_task:
        return ""
    return info.content.strip()


def dedent_lines_by_amount(lines: list[str], amount: int) -> list[str]:
    """Remove up to ``amount`` leading whitespace characters from each line.

    Blank lines are normalised to "".
    """
    if amount <= 0:
        return list(lines)

    out: list[str] = []
    for line in lines:
        if line.strip() == "":
            out.append("")
            continue
        out.append(line[min(count_indent(line), amount) :])
    return out
