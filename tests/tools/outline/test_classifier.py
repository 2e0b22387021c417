"""Tests for line classification and task markers."""

import pytest

from bulletflow.tools.outline.classifier import (
    LineKind,
    TaskMarker,
    TaskState,
    classify_line,
    count_indent,
    dedent_lines_by_amount,
    extract_task_text,
    task_state_from_name,
)


class TestClassifyLine:
    """Test classify_line for each kind of line."""

    def test_blank_line(self):
        info = classify_line("   ")
        assert info.kind == LineKind.BLANK
        assert info.is_blank
        assert info.state is None

    def test_empty_line(self):
        assert classify_line("").is_blank

    def test_heading(self):
        info = classify_line("## Log")
        assert info.is_heading
        assert info.heading_level == 2
        assert info.heading_title == "Log"

    def test_heading_trailing_whitespace_trimmed(self):
        info = classify_line("### Project notes   ")
        assert info.heading_level == 3
        assert info.heading_title == "Project notes"

    def test_heading_requires_space(self):
        """A hash run glued to text is not a heading."""
        assert classify_line("#tag").kind == LineKind.PLAIN

    def test_seven_hashes_is_not_heading(self):
        assert classify_line("####### Too deep").kind == LineKind.PLAIN

    def test_plain_list_item(self):
        info = classify_line("- Did something")
        assert info.is_list_item
        assert not info.is_task
        assert info.bullet == "-"
        assert info.content == "Did something"

    @pytest.mark.parametrize("bullet", ["-", "*", "+"])
    def test_all_bullets(self, bullet):
        info = classify_line(f"{bullet} [x] Done")
        assert info.bullet == bullet
        assert info.state == TaskState.COMPLETED

    @pytest.mark.parametrize(
        "char,state",
        [
            (" ", TaskState.OPEN),
            ("x", TaskState.COMPLETED),
            ("X", TaskState.COMPLETED),
            ("/", TaskState.STARTED),
            ("<", TaskState.SCHEDULED),
            (">", TaskState.MIGRATED),
            ("o", TaskState.MEETING),
        ],
    )
    def test_marker_states(self, char, state):
        info = classify_line(f"- [{char}] Task")
        assert info.is_task
        assert info.state == state
        assert info.marker.char == char

    def test_unknown_marker(self):
        """Unrecognised single characters keep a marker with UNKNOWN state."""
        info = classify_line("- [?] Maybe")
        assert info.is_task
        assert info.state == TaskState.UNKNOWN

    def test_checkbox_at_end_of_line(self):
        assert classify_line("- [ ]").state == TaskState.OPEN

    def test_checkbox_glued_to_text_is_not_task(self):
        info = classify_line("- [x]done")
        assert info.is_list_item
        assert not info.is_task

    def test_multi_char_checkbox_is_not_task(self):
        info = classify_line("- [xx] Odd")
        assert info.is_list_item
        assert info.marker is None
        assert info.content == "[xx] Odd"

    def test_unbalanced_bracket_degrades(self):
        info = classify_line("- [x Unbalanced")
        assert info.is_list_item
        assert not info.is_task

    def test_bullet_without_space_is_plain(self):
        assert classify_line("-[x] nope").kind == LineKind.PLAIN

    def test_bare_bullet(self):
        assert classify_line("-").is_list_item

    def test_indent_counts_characters(self):
        assert classify_line("    - [x] Deep").indent == 4
        assert classify_line("\t- [x] Tab").indent == 1

    def test_prefix_and_content(self):
        info = classify_line("  - [/] Half way  ")
        assert info.prefix == "  - [/] "
        assert info.content == "Half way"

    def test_plain_text(self):
        info = classify_line("  Some paragraph")
        assert info.kind == LineKind.PLAIN
        assert info.indent == 2
        assert info.content == "Some paragraph"


class TestTaskMarker:
    """Test task marker conversions."""

    def test_token(self):
        assert TaskMarker.from_char("x").token == "[x]"

    def test_from_state_unknown_raises(self):
        with pytest.raises(ValueError):
            TaskMarker.from_state(TaskState.UNKNOWN)

    def test_conversions(self):
        marker = TaskMarker.from_char("x")
        assert marker.to_open().char == " "
        assert marker.to_scheduled().char == "<"
        assert marker.to_migrated().char == ">"

    def test_apply_to_line_keeps_indent_and_text(self):
        marker = TaskMarker.from_state(TaskState.COMPLETED)
        assert marker.apply_to_line("  * [ ] Call [[Bob]]") == "  * [x] Call [[Bob]]"

    def test_apply_to_non_task_is_noop(self):
        marker = TaskMarker.from_state(TaskState.OPEN)
        assert marker.apply_to_line("- plain item") == "- plain item"

    def test_with_marker(self):
        info = classify_line("- [<] Later")
        reopened = info.with_marker(info.marker.to_open())
        assert reopened.text == "- [ ] Later"
        assert reopened.state == TaskState.OPEN


class TestHelpers:
    """Test indentation and text helpers."""

    def test_task_state_from_name(self):
        assert task_state_from_name("Completed") == TaskState.COMPLETED
        assert task_state_from_name(" started ") == TaskState.STARTED
        assert task_state_from_name("done") is None

    def test_count_indent_mixed(self):
        assert count_indent("\t  - x") == 3
        assert count_indent("- x") == 0

    def test_extract_task_text(self):
        assert extract_task_text("- [x]  Foo  ") == "Foo"
        assert extract_task_text("- Foo") == ""

    def test_dedent_by_amount_never_eats_text(self):
        assert dedent_lines_by_amount([" - a", "    - b"], 2) == ["- a", "  - b"]
