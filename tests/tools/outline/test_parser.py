"""Tests for section lookup and the section tree."""

import pytest

from bulletflow.tools.outline.classifier import TaskState
from bulletflow.tools.outline.parser import (
    OutlineParser,
    SectionRange,
    find_section,
    parse_target_heading,
)


class TestParseTargetHeading:
    """Test splitting configured headings into level and title."""

    def test_with_markers(self):
        assert parse_target_heading("## Log") == (2, "Log")

    def test_bare_title(self):
        assert parse_target_heading("Log") == (None, "Log")

    def test_whitespace_trimmed(self):
        assert parse_target_heading("  ### Done today  ") == (3, "Done today")


class TestFindSection:
    """Test locating a section by heading text."""

    def test_finds_section_and_end(self):
        lines = ["## Todo", "- [ ] a", "", "## Log", "- b"]
        section = find_section(lines, "## Todo")
        assert section == SectionRange(start=0, end=3, level=2, title="Todo")

    def test_section_runs_to_end_of_document(self):
        lines = ["## Todo", "- [ ] a", "", "## Log", "- b"]
        section = find_section(lines, "## Log")
        assert (section.start, section.end) == (3, 5)

    def test_subsections_belong_to_section(self):
        lines = ["## Log", "### Morning", "- x", "## Next"]
        assert find_section(lines, "## Log").end == 3

    def test_higher_level_heading_ends_section(self):
        lines = ["## Log", "- x", "# Next day", "- y"]
        assert find_section(lines, "## Log").end == 2

    def test_level_must_match(self):
        lines = ["### Log", "- x"]
        assert find_section(lines, "## Log") is None

    def test_bare_title_matches_any_level(self):
        lines = ["# Day", "### Log", "- x"]
        section = find_section(lines, "Log")
        assert section.start == 1
        assert section.level == 3

    def test_first_match_wins(self):
        lines = ["## Log", "- a", "## Log", "- b"]
        assert find_section(lines, "## Log").start == 0

    def test_heading_with_trailing_spaces(self):
        lines = ["## Log   ", "- a"]
        assert find_section(lines, "## Log").start == 0

    def test_missing_section(self):
        assert find_section(["## Todo"], "## Log") is None

    def test_empty_heading_text(self):
        assert find_section(["## Todo"], "") is None

    def test_contains_excludes_heading(self):
        section = SectionRange(start=2, end=5, level=2, title="Todo")
        assert not section.contains(2)
        assert section.contains(3)
        assert section.contains(4)
        assert not section.contains(5)
        assert section.heading == "## Todo"
        assert section.content_start == 3


class TestOutlineParser:
    """Test building the section tree with task counts."""

    def test_section_tree(self, daily_note):
        result = OutlineParser().parse_content(daily_note)

        assert len(result.sections) == 1
        day = result.sections[0]
        assert day.heading == "# 2026-10-16"
        assert [child.title for child in day.children] == ["Todo", "Log"]
        assert [child.title for child in day.children[0].children] == ["Errands"]

    def test_section_ranges(self, daily_note):
        result = OutlineParser().parse_content(daily_note)
        sections = {s.title: s for s in result.get_all_sections()}

        assert (sections["Todo"].start_line, sections["Todo"].end_line) == (1, 7)
        assert (sections["Errands"].start_line, sections["Errands"].end_line) == (5, 7)
        assert sections["Log"].end_line == len(result.lines)

    def test_task_counts_go_to_innermost_section(self, daily_note):
        result = OutlineParser().parse_content(daily_note)
        sections = {s.title: s for s in result.get_all_sections()}

        assert sections["Todo"].task_counts == {TaskState.OPEN: 1, TaskState.COMPLETED: 1}
        assert sections["Errands"].task_counts == {TaskState.STARTED: 1}
        assert sections["Log"].total_tasks == 1
        assert sections["2026-10-16"].total_tasks == 0

    def test_tasks_before_first_heading_ignored(self):
        result = OutlineParser().parse_content("- [ ] loose\n## Todo\n- [ ] a\n")
        assert result.get_all_sections()[0].task_counts == {TaskState.OPEN: 1}

    def test_no_headings(self):
        result = OutlineParser().parse_content("- [ ] a\n")
        assert result.sections == []

    def test_parse_file(self, tmp_path, root_level_doc):
        note = tmp_path / "note.md"
        note.write_text(root_level_doc)
        result = OutlineParser().parse_file(note)
        assert [s.title for s in result.sections] == ["Todo", "Log"]

    def test_parse_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            OutlineParser().parse_file(tmp_path / "missing.md")
