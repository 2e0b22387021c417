"""Wikilink helpers.

Links are opaque to the outline engine; these helpers only exist to render
line content for display.
"""

import re
from dataclasses import dataclass

WIKILINK_PATTERN = re.compile(r"\[\[([^\]]+)\]\]")


@dataclass(frozen=True)
class ParsedWikilink:
    """The parts of a ``[[path#section|alias]]`` link."""

    link_path: str
    section: str | None = None
    alias: str | None = None


@dataclass(frozen=True)
class WikilinkMatch:
    """A wikilink found in a line of text."""

    index: int
    match_text: str
    inner: str


def parse_wikilink_text(inner: str) -> ParsedWikilink:
    """Parse the text between ``[[`` and ``]]``.

    "Note#Section|Alias" -> ParsedWikilink("Note", "Section", "Alias")
    """
    left, _, alias = inner.partition("|")
    link_path, _, section = left.partition("#")
    return ParsedWikilink(
        link_path=link_path,
        section=section if "#" in left else None,
        alias=alias if "|" in inner else None,
    )


def find_wikilink_matches(line: str) -> list[WikilinkMatch]:
    """Find all wikilinks in a line, ignoring embeds (``![[...]]``)."""
    matches: list[WikilinkMatch] = []
    for match in WIKILINK_PATTERN.finditer(line):
        if match.start() > 0 and line[match.start() - 1] == "!":
            continue
        matches.append(WikilinkMatch(index=match.start(), match_text=match.group(0), inner=match.group(1)))
    return matches


def strip_wikilinks_to_display_text(text: str) -> str:
    """Replace each wikilink with its display text.

    The alias wins, then the section name, then the link path. Embeds are
    left as they are.
    """
    parts: list[str] = []
    pos = 0
    for match in find_wikilink_matches(text):
        parsed = parse_wikilink_text(match.inner)
        if parsed.alias:
            display = parsed.alias.strip()
        elif parsed.section and parsed.section.strip():
            display = parsed.section.strip()
        else:
            display = parsed.link_path.strip()
        parts.append(text[pos : match.index])
        parts.append(display)
        pos = match.index + len(match.match_text)
    parts.append(text[pos:])
    return "".join(parts)
