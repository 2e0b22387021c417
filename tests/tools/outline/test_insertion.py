"""Tests for choosing insertion points."""

from bulletflow.tools.outline.insertion import find_insertion_line, insert_under_heading


class TestFindInsertionLine:
    """Test where moved blocks land inside a section."""

    def test_empty_section_inserts_after_heading(self):
        lines = ["## Log", "## Later"]
        assert find_insertion_line(lines, 0, 1) == 1

    def test_all_blank_section_inserts_after_heading(self):
        lines = ["## Log", "", "", "## Later"]
        assert find_insertion_line(lines, 0, 3) == 1

    def test_inserts_before_first_blank(self):
        lines = ["## Log", "- a", "", "- future", "", "## Later"]
        assert find_insertion_line(lines, 0, 5) == 2

    def test_appends_when_no_blank(self):
        lines = ["## Log", "- a", "- b", "## Later"]
        assert find_insertion_line(lines, 0, 3) == 3

    def test_section_at_end_of_document(self):
        lines = ["## Log", "- a"]
        assert find_insertion_line(lines, 0, 2) == 2

    def test_end_clamped_to_document(self):
        lines = ["## Log", "- a"]
        assert find_insertion_line(lines, 0, 10) == 2

    def test_start_past_document(self):
        assert find_insertion_line(["## Log", "- a"], 10, 20) is None

    def test_negative_start(self):
        assert find_insertion_line(["## Log", "- a"], -3, 2) is None


class TestInsertUnderHeading:
    """Test appending content under a heading in another note."""

    def test_appends_after_last_item(self):
        content = "## Log\n- a\n\n## Next\n"
        assert insert_under_heading(content, "- b", "## Log") == "## Log\n- a\n- b\n\n## Next\n"

    def test_appends_at_end_of_note(self):
        content = "# Day\n\n## Log\n- a\n"
        assert insert_under_heading(content, "- b\n  - c", "## Log") == (
            "# Day\n\n## Log\n- a\n- b\n  - c\n"
        )

    def test_empty_section(self):
        content = "## Log\n\n## Next\n"
        assert insert_under_heading(content, "- b", "## Log") == "## Log\n- b\n\n## Next\n"

    def test_missing_heading_created_at_top(self):
        assert insert_under_heading("Body", "- b", "## Log") == "## Log\n- b\nBody"

    def test_missing_heading_after_front_matter(self):
        content = "---\ntitle: Day\n---\nBody"
        assert insert_under_heading(content, "- b", "## Log") == (
            "---\ntitle: Day\n---\n## Log\n- b\nBody"
        )

    def test_empty_note(self):
        assert insert_under_heading("", "- b", "## Log") == "## Log\n- b\n"
