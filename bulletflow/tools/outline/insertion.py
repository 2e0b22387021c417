"""Choose where new content goes inside a section."""

from __future__ import annotations

from .parser import find_section


def find_insertion_line(lines: list[str], section_start: int, section_end: int) -> int | None:
    """Find the line before which moved content should be inserted.

    Content after the first blank line of a section is treated as "upcoming"
    and stays last, so insertion happens right before that blank line. With no
    blank line the content is appended at the section end, and an empty (or
    all-blank) section receives it right after the heading.

    Args:
        lines: All document lines
        section_start: Heading line of the section
        section_end: Exclusive end of the section

    Returns:
        Line index to insert before, or None if ``section_start`` is out of
        range.
    """
    if not 0 <= section_start < len(lines):
        return None

    section_end = min(section_end, len(lines))
    body = range(section_start + 1, section_end)

    if all(lines[i].strip() == "" for i in body):
        return section_start + 1

    for i in body:
        if lines[i].strip() == "":
            return i

    return section_end


def _front_matter_end(lines: list[str]) -> int:
    """Line index just after a leading YAML front matter block (0 if none)."""
    if not lines or lines[0] != "---":
        return 0
    for i in range(1, len(lines)):
        if lines[i] == "---":
            return i + 1
    return 0


def insert_under_heading(content: str, new_content: str, heading: str) -> str:
    """Append ``new_content`` at the end of the section under ``heading``.

    The content goes after the last non-blank line of the section, so the
    blank separator before the next heading is preserved. A missing heading is
    created after the front matter (or at the top of the note).
    """
    lines = content.split("\n")
    new_lines = new_content.split("\n")

    section = find_section(lines, heading)
    if section is None:
        insert_at = _front_matter_end(lines)
        if lines == [""]:
            return "\n".join([heading.strip(), *new_lines]) + "\n"
        lines[insert_at:insert_at] = [heading.strip(), *new_lines]
        return "\n".join(lines)

    insert_at = section.end
    while insert_at > section.start + 1 and lines[insert_at - 1].strip() == "":
        insert_at -= 1

    lines[insert_at:insert_at] = new_lines
    return "\n".join(lines)
