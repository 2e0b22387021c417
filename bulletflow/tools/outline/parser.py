"""Heading and section parsing for outline notes."""

import re
from dataclasses import dataclass, field
from pathlib import Path

from .classifier import TaskState, classify_line

TARGET_HEADING_PATTERN = re.compile(r"^(#{1,6})\s+(.+?)\s*$")


@dataclass(frozen=True)
class SectionRange:
    """Half-open line range of a section, starting at its heading line."""

    start: int
    end: int
    level: int
    title: str

    @property
    def heading(self) -> str:
        return f"{'#' * self.level} {self.title}"

    @property
    def content_start(self) -> int:
        return self.start + 1

    def contains(self, line: int) -> bool:
        """Whether ``line`` is inside the section body (heading excluded)."""
        return self.start < line < self.end


def parse_target_heading(heading_text: str) -> tuple[int | None, str]:
    """Split a configured heading like "## Log" into (level, title).

    Text without leading ``#`` markers yields a level of None.
    """
    text = heading_text.strip()
    match = TARGET_HEADING_PATTERN.match(text)
    if match:
        hashes, title = match.groups()
        return len(hashes), title
    return None, text


def find_section(lines: list[str], heading_text: str) -> SectionRange | None:
    """Find a section by heading text.

    Args:
        lines: All document lines
        heading_text: Heading including its markers ("## Log"), or a bare title
            to match a heading of any level

    Returns:
        The first matching section, or None when no heading matches. The
        section ends at the next heading of the same or a higher level, or at
        the end of the document.
    """
    level, title = parse_target_heading(heading_text)
    if not title:
        return None

    start: int | None = None
    found_level = 0
    for i, line in enumerate(lines):
        info = classify_line(line)
        if not info.is_heading or info.heading_title != title:
            continue
        if level is not None and info.heading_level != level:
            continue
        start = i
        found_level = info.heading_level or 0
        break

    if start is None:
        return None

    end = len(lines)
    for i in range(start + 1, len(lines)):
        info = classify_line(lines[i])
        if info.is_heading and (info.heading_level or 0) <= found_level:
            end = i
            break

    return SectionRange(start=start, end=end, level=found_level, title=title)


@dataclass
class Section:
    """A section of an outline note with a summary of its tasks."""

    level: int
    title: str
    start_line: int  # Heading line (0-indexed)
    end_line: int  # Exclusive; next heading of the same or higher level
    task_counts: dict[TaskState, int] = field(default_factory=dict)
    children: list["Section"] = field(default_factory=list)

    @property
    def heading(self) -> str:
        return f"{'#' * self.level} {self.title}"

    @property
    def total_tasks(self) -> int:
        return sum(self.task_counts.values())

    def get_all_sections(self) -> list["Section"]:
        """Get this section and all descendants in document order."""
        sections: list[Section] = [self]
        for child in self.children:
            sections.extend(child.get_all_sections())
        return sections


@dataclass
class ParseResult:
    """Result of parsing an outline note."""

    sections: list[Section]
    lines: list[str]

    def get_all_sections(self) -> list[Section]:
        all_sections: list[Section] = []
        for section in self.sections:
            all_sections.extend(section.get_all_sections())
        return all_sections


class OutlineParser:
    """Builds the section tree of an outline note."""

    def parse_file(self, file_path: str | Path) -> ParseResult:
        """Parse an outline file and return the parse result."""
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        return self.parse_content(path.read_text(encoding="utf-8"))

    def parse_content(self, content: str) -> ParseResult:
        """Parse outline content into a section tree.

        Task counts are attributed to the innermost section holding the task.
        """
        lines = content.split("\n")

        headings: list[tuple[int, int, str]] = []
        for i, line in enumerate(lines):
            info = classify_line(line)
            if info.is_heading:
                headings.append((i, info.heading_level or 0, info.heading_title or ""))

        sections: list[Section] = []
        stack: list[Section] = []
        for j, (line_num, level, title) in enumerate(headings):
            end_line = len(lines)
            for later_line, later_level, _ in headings[j + 1 :]:
                if later_level <= level:
                    end_line = later_line
                    break

            section = Section(level=level, title=title, start_line=line_num, end_line=end_line)

            while stack and stack[-1].level >= level:
                stack.pop()

            if stack:
                stack[-1].children.append(section)
            else:
                sections.append(section)
            stack.append(section)

        self._count_tasks(sections, lines, headings)
        return ParseResult(sections=sections, lines=lines)

    def _count_tasks(
        self, sections: list[Section], lines: list[str], headings: list[tuple[int, int, str]]
    ) -> None:
        """Attribute each task line to the nearest heading above it."""
        by_start = {s.start_line: s for root in sections for s in root.get_all_sections()}
        heading_lines = [h[0] for h in headings]

        owner: Section | None = None
        next_heading = 0
        for i, line in enumerate(lines):
            if next_heading < len(heading_lines) and heading_lines[next_heading] == i:
                owner = by_start[i]
                next_heading += 1
                continue
            if owner is None:
                continue
            state = classify_line(line).state
            if state is not None:
                owner.task_counts[state] = owner.task_counts.get(state, 0) + 1
