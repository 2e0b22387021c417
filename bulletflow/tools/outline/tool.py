"""Outline Tool for moving finished tasks between sections of outline notes."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from openhands.sdk.tool import (
    Action,
    Observation,
    ToolAnnotations,
    ToolDefinition,
    ToolExecutor,
)
from pydantic import Field
from rich.text import Text

from bulletflow import config as outline_config

from .classifier import classify_line
from .operations import MovePlanner, move_all
from .parser import OutlineParser, find_section
from .tree import find_block

if TYPE_CHECKING:
    from openhands.sdk.conversation.state import ConversationState


OUTLINE_TOOL_DESCRIPTION = """
Outline Tool for task lists kept in markdown notes.

This tool provides commands for:
- Moving a finished task and its nested children from one section to another
  (by default from '## Todo' to '## Log')
- Sweeping every finished task out of a section at once
- Showing the block of nested list items around a line
- Listing the sections of a note with their task counts

Task markers: [ ] open, [x] completed, [/] started, [<] scheduled, [>] migrated,
[o] meeting. Line numbers are 1-based.
""".strip()

# Command visualization metadata: (icon, style, label_template)
# label_template can use {line} placeholder
ACTION_DISPLAY: dict[str, tuple[str, str, str]] = {
    "move": ("↔️ ", "magenta", "Move Task at Line {line}"),
    "sweep": ("🧹 ", "green", "Sweep Finished Tasks"),
    "block": ("🔍 ", "blue", "Show Block at Line {line}"),
    "sections": ("📄 ", "yellow", "List Sections"),
}


class OutlineAction(Action):
    """Action for the outline tool."""

    command: Literal["move", "sweep", "block", "sections"] = Field(
        description=(
            "Command to execute: 'move' moves the finished task block at 'line', "
            "'sweep' moves every finished task block, 'block' shows the nested block "
            "around 'line', 'sections' lists sections with task counts"
        )
    )
    file: str = Field(description="Path to the markdown note to process")
    line: int | None = Field(
        default=None, description="1-based line number. Used with move, block."
    )
    source: str | None = Field(
        default=None,
        description="Heading of the section tasks move out of, e.g. '## Todo'. Used with move, sweep.",
    )
    destination: str | None = Field(
        default=None,
        description="Heading of the section tasks move into, e.g. '## Log'. Used with move, sweep.",
    )

    @property
    def visualize(self) -> Text:
        """Return Rich Text representation of this action."""
        content = Text()
        icon, style, label_template = ACTION_DISPLAY[self.command]
        label = label_template.format(line=self.line)
        content.append(icon, style=style)
        content.append(label, style=style)
        content.append(f" - {self.file}", style="white")
        return content


class OutlineObservation(Observation):
    """Observation from the outline tool."""

    command: Literal["move", "sweep", "block", "sections"] = Field(
        description="The command that was executed."
    )
    file: str = Field(description="Path to the note that was processed.")
    result: str = Field(description="Result of the operation: 'success', 'error', or 'warning'.")

    # Move/sweep fields
    moved: int | None = Field(default=None, description="Number of task blocks moved.")
    moved_lines: list[str] | None = Field(
        default=None, description="Lines of the moved block (move only)."
    )
    destination: str | None = Field(default=None, description="Heading tasks were moved to.")
    created_section: bool | None = Field(
        default=None, description="Whether the destination section had to be created."
    )
    reason: str | None = Field(default=None, description="Why nothing was moved.")

    # Block fields
    block_start: int | None = Field(default=None, description="1-based first line of the block.")
    block_end: int | None = Field(default=None, description="1-based last line of the block.")
    block_lines: list[str] | None = Field(default=None, description="Lines of the block.")
    task_state: str | None = Field(default=None, description="State of the block's root task.")

    # Sections fields
    sections: list[dict[str, str | int]] | None = Field(
        default=None, description="Sections with level, title, lines and task counts."
    )

    @property
    def visualize(self) -> Text:
        """Return Rich Text representation of this observation."""
        text = Text()

        if self.is_error:
            text.append("❌ ", style="red bold")
            text.append(self.ERROR_MESSAGE_HEADER, style="bold red")
            return text

        if self.result == "success":
            text.append("✅ ", style="green bold")
        else:
            text.append("⚠️  ", style="yellow bold")

        if self.command == "move":
            if self.moved:
                text.append(f"Moved {len(self.moved_lines or [])} lines", style="magenta")
                text.append(f" to {self.destination}", style="dim")
                if self.created_section:
                    text.append(" (section created)", style="dim")
            else:
                text.append(f"Nothing moved: {self.reason}", style="yellow")

        elif self.command == "sweep":
            if self.moved:
                text.append(f"Moved {self.moved} task blocks", style="green")
                text.append(f" to {self.destination}", style="dim")
            else:
                text.append("No finished tasks to move", style="dim")

        elif self.command == "block":
            text.append(f"Block at lines {self.block_start}-{self.block_end}", style="blue")
            if self.task_state:
                text.append(f" ({self.task_state})", style="dim")

        elif self.command == "sections":
            text.append(f"Found {len(self.sections or [])} sections", style="yellow")

        return text


class OutlineExecutor(ToolExecutor[OutlineAction, OutlineObservation]):
    """Executor for outline note operations."""

    def __init__(self, workspace_dir: Path):
        """Initialize the outline executor.

        Args:
            workspace_dir: Path to the workspace directory.
        """
        self.workspace_dir = workspace_dir
        self.config = outline_config.load_config(workspace_dir)

    def __call__(self, action: OutlineAction, conversation=None) -> OutlineObservation:  # noqa: ARG002
        """Execute an outline action.

        Args:
            action: The action to execute.
            conversation: The conversation context (unused).

        Returns:
            Observation with the results.
        """
        return self.execute(action)

    def _error(self, action: OutlineAction, text: str) -> OutlineObservation:
        return OutlineObservation.from_text(
            text=text,
            is_error=True,
            command=action.command,
            file=action.file,
            result="error",
        )

    def execute(self, action: OutlineAction) -> OutlineObservation:
        """Execute an outline action.

        Args:
            action: The action to execute.

        Returns:
            Observation with the results.
        """
        try:
            file_path = (self.workspace_dir / action.file).resolve()

            # Prevent path traversal attacks
            if not file_path.is_relative_to(self.workspace_dir.resolve()):
                return self._error(action, f"Invalid path (outside workspace): {action.file}")

            if not file_path.exists():
                return self._error(action, f"File not found: {action.file}")

            try:
                content = file_path.read_text(encoding="utf-8")
            except UnicodeDecodeError:
                return self._error(action, f"Could not read file as UTF-8: {action.file}")

            read_only_handlers = {
                "block": self._show_block,
                "sections": self._list_sections,
            }
            mutating_handlers = {
                "move": self._move_task,
                "sweep": self._sweep_tasks,
            }

            if handler := read_only_handlers.get(action.command):
                return handler(action, content)
            if handler := mutating_handlers.get(action.command):
                return handler(action, content, file_path)

            return self._error(action, f"Unknown command: {action.command}")

        except Exception as e:
            return self._error(action, f"Unexpected error: {str(e)}")

    def _move_task(
        self, action: OutlineAction, content: str, file_path: Path
    ) -> OutlineObservation:
        """Move the finished task block at the given line."""
        if action.line is None:
            return self._error(action, "Missing required parameter: 'line'")

        source, destination = self.config.get_headings(
            source=action.source, destination=action.destination
        )
        planner = MovePlanner(self.config.move.trigger_states)
        script = planner.plan(content, action.line - 1, source, destination)

        if script is None:
            return OutlineObservation(
                command=action.command,
                file=action.file,
                result="warning",
                moved=0,
                destination=destination,
                reason=planner.reason,
            )

        file_path.write_text(script.apply(content), encoding="utf-8")

        return OutlineObservation(
            command=action.command,
            file=action.file,
            result="success",
            moved=1,
            moved_lines=script.block.lines(content.split("\n")),
            destination=destination,
            created_section=script.created_section,
        )

    def _sweep_tasks(
        self, action: OutlineAction, content: str, file_path: Path
    ) -> OutlineObservation:
        """Move every finished task block out of the source section."""
        source, destination = self.config.get_headings(
            source=action.source, destination=action.destination
        )
        result = move_all(content, source, destination, self.config.move.trigger_states)

        if result is None:
            return OutlineObservation(
                command=action.command,
                file=action.file,
                result="success",
                moved=0,
                destination=destination,
            )

        file_path.write_text(result.content, encoding="utf-8")

        return OutlineObservation(
            command=action.command,
            file=action.file,
            result="success",
            moved=result.moved,
            destination=destination,
        )

    def _show_block(self, action: OutlineAction, content: str) -> OutlineObservation:
        """Show the nested block around the given line."""
        if action.line is None:
            return self._error(action, "Missing required parameter: 'line'")

        lines = content.split("\n")
        start, end = -1, len(lines)
        if action.source:
            section = find_section(lines, action.source)
            if section is None:
                return self._error(action, f"Section not found: '{action.source}'")
            start, end = section.start, section.end

        block = find_block(lines, action.line - 1, start, end)
        if block is None:
            return self._error(action, f"No block at line {action.line}")

        state = classify_line(lines[block.start_line]).state
        return OutlineObservation(
            command=action.command,
            file=action.file,
            result="success",
            block_start=block.start_line + 1,
            block_end=block.end_line,
            block_lines=block.lines(lines),
            task_state=state.value if state else None,
        )

    def _list_sections(self, action: OutlineAction, content: str) -> OutlineObservation:
        """List sections with their task counts."""
        result = OutlineParser().parse_content(content)

        sections: list[dict[str, str | int]] = []
        for section in result.get_all_sections():
            entry: dict[str, str | int] = {
                "title": section.title,
                "level": section.level,
                "start_line": section.start_line + 1,
                "end_line": section.end_line,
                "tasks": section.total_tasks,
            }
            for state, count in section.task_counts.items():
                entry[state.value] = count
            sections.append(entry)

        return OutlineObservation(
            command=action.command,
            file=action.file,
            result="success",
            sections=sections,
        )


class OutlineTool(ToolDefinition[OutlineAction, OutlineObservation]):
    """Tool for moving finished tasks between sections of outline notes."""

    @classmethod
    def create(cls, conv_state: ConversationState) -> Sequence[OutlineTool]:
        """Create the outline tool.

        Args:
            conv_state: Conversation state with workspace info.
        """
        workspace_dir = Path(conv_state.workspace.working_dir)
        executor = OutlineExecutor(workspace_dir)

        return [
            cls(
                description=OUTLINE_TOOL_DESCRIPTION,
                action_type=OutlineAction,
                observation_type=OutlineObservation,
                annotations=ToolAnnotations(
                    title="Outline Tool",
                ),
                executor=executor,
            )
        ]
