"""Resolve the implicit outline tree of indented list items.

There is no persistent tree: parents and subtrees are found by walking the
line array, using indentation depth as the only structural signal.
"""

from __future__ import annotations

from dataclasses import dataclass

from .classifier import classify_line, count_indent


@dataclass(frozen=True)
class Block:
    """A list item and its full subtree as a half-open line range."""

    start_line: int
    end_line: int

    def __len__(self) -> int:
        return self.end_line - self.start_line

    def lines(self, all_lines: list[str]) -> list[str]:
        return all_lines[self.start_line : self.end_line]


def _is_blank(line: str) -> bool:
    return line.strip() == ""


def find_root_ancestor(lines: list[str], start_line: int, section_start: int) -> int | None:
    """Find the topmost ancestor of ``start_line`` below ``section_start``.

    Walks upward one parent at a time. Blank lines and lines at the same or
    a deeper level are skipped, so a child separated from its parent by a
    blank line still resolves to that parent. A shallower line that is not a
    list item (a paragraph, a heading) ends the walk.

    Args:
        lines: All document lines
        start_line: Line to start from (0-indexed)
        section_start: Heading line of the enclosing section; never crossed

    Returns:
        Line index of the root ancestor (possibly ``start_line``), or None if
        ``start_line`` is out of range.
    """
    if not 0 <= start_line < len(lines):
        return None

    current = start_line
    depth = count_indent(lines[current])

    i = current - 1
    while depth > 0 and i > section_start:
        line = lines[i]
        if _is_blank(line):
            i -= 1
            continue

        indent = count_indent(line)
        if indent >= depth:
            i -= 1
            continue

        if not classify_line(line).is_list_item:
            break

        current = i
        depth = indent
        i -= 1

    return current


def collect_block(lines: list[str], root_line: int, section_end: int) -> Block | None:
    """Collect ``root_line`` and all of its descendants.

    Deeper lines belong to the block. A run of blank lines belongs to it only
    when a deeper line follows the run inside the section, so a separator
    blank before the next sibling (or the section end) is never included.

    Args:
        lines: All document lines
        root_line: First line of the block
        section_end: Exclusive end of the enclosing section

    Returns:
        The block, or None if ``root_line`` is out of range.
    """
    if not 0 <= root_line < len(lines):
        return None

    section_end = min(section_end, len(lines))
    root_indent = count_indent(lines[root_line])
    end_line = root_line + 1

    while end_line < section_end:
        line = lines[end_line]

        if _is_blank(line):
            next_line = end_line + 1
            while next_line < section_end and _is_blank(lines[next_line]):
                next_line += 1
            if next_line < section_end and count_indent(lines[next_line]) > root_indent:
                end_line = next_line + 1
                continue
            break

        if count_indent(line) <= root_indent:
            break
        end_line += 1

    return Block(start_line=root_line, end_line=end_line)


def find_block(lines: list[str], line: int, section_start: int, section_end: int) -> Block | None:
    """Resolve the full movable block containing ``line``."""
    root = find_root_ancestor(lines, line, section_start)
    if root is None:
        return None
    return collect_block(lines, root, section_end)
