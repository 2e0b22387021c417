"""CLI entry point for bulletflow.

Usage:
    python -m bulletflow move notes/2026-10-16.md 12       # Move the task block at line 12
    python -m bulletflow sweep notes/2026-10-16.md         # Move every finished task
    python -m bulletflow block notes/2026-10-16.md 12      # Show the block around line 12
    python -m bulletflow sections notes/2026-10-16.md      # List sections and task counts
    python -m bulletflow migrate today.md 4 tomorrow.md    # Copy an open task forward

Or via the installed command:
    bulletflow move today.md 12 --from "## Todo" --to "## Done"
    bulletflow sweep today.md --dry-run
    bulletflow migrate today.md 4 week.md --schedule
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel

from bulletflow._version import get_full_version_string
from bulletflow.config import CONFIG_PATH, BulletflowConfig, load_config
from bulletflow.tools.outline.classifier import TaskState, classify_line
from bulletflow.tools.outline.links import strip_wikilinks_to_display_text
from bulletflow.tools.outline.operations import MovePlanner, migrate_task, move_all
from bulletflow.tools.outline.parser import OutlineParser, Section, find_section
from bulletflow.tools.outline.tree import find_block

# Load environment variables (LOG_LEVEL)
load_dotenv()

console = Console()
logger = logging.getLogger("bulletflow")


def configure_logging() -> None:
    """Route log records through rich, at the level named by LOG_LEVEL."""
    level = getattr(logging, os.getenv("LOG_LEVEL", "WARNING").upper(), logging.WARNING)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def read_note(path: Path) -> str | None:
    """Read a note, printing an error and returning None on failure."""
    if not path.exists():
        console.print(f"[red]Error:[/] File not found: {escape(str(path))}")
        return None
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        console.print(f"[red]Error:[/] Could not read file as UTF-8: {escape(str(path))}")
        return None


def print_lines(lines: list[str], first_line: int) -> None:
    """Print note lines with 1-based line numbers."""
    for offset, line in enumerate(lines):
        display = strip_wikilinks_to_display_text(line)
        console.print(f"[dim]{first_line + offset + 1:>5}[/]  {escape(display)}")


def run_move(
    note: Path,
    line: int,
    config: BulletflowConfig,
    *,
    source: str | None = None,
    destination: str | None = None,
    dry_run: bool = False,
) -> int:
    """Move the task block at ``line`` (1-based) to the destination section.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    content = read_note(note)
    if content is None:
        return 1

    source_heading, dest_heading = config.get_headings(source=source, destination=destination)
    planner = MovePlanner(config.move.trigger_states)
    script = planner.plan(content, line - 1, source_heading, dest_heading)

    if script is None:
        console.print(f"[yellow]![/] Nothing to move: {escape(planner.reason or 'unknown reason')}")
        return 1

    lines = content.split("\n")
    console.print(
        f"[bold]Moving lines {script.block.start_line + 1}-{script.block.end_line}[/] "
        f"from [cyan]{escape(source_heading)}[/] to [cyan]{escape(dest_heading)}[/]"
    )
    print_lines(script.block.lines(lines), script.block.start_line)
    if script.created_section:
        console.print(f"[yellow]![/] {escape(dest_heading)} will be created at the end of the note")

    if dry_run:
        console.print("[yellow]Dry run mode - no changes will be made[/]")
        return 0

    note.write_text(script.apply(content), encoding="utf-8")
    console.print("[green]✓[/] Note updated.")
    return 0


def run_sweep(
    note: Path,
    config: BulletflowConfig,
    *,
    source: str | None = None,
    destination: str | None = None,
    dry_run: bool = False,
) -> int:
    """Move every task in a trigger state out of the source section.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    content = read_note(note)
    if content is None:
        return 1

    console.print(Panel("[bold blue]bulletflow - Sweep[/]", expand=False))

    source_heading, dest_heading = config.get_headings(source=source, destination=destination)
    result = move_all(content, source_heading, dest_heading, config.move.trigger_states)

    if result is None:
        console.print(f"[dim]No finished tasks under {escape(source_heading)}.[/]")
        return 0

    console.print(f"[bold]Task blocks moved:[/] {result.moved}")
    if dry_run:
        console.print("[yellow]Dry run mode - no changes will be made[/]")
        return 0

    note.write_text(result.content, encoding="utf-8")
    console.print("[green]✓[/] Note updated.")
    return 0


def run_block(note: Path, line: int, section_heading: str | None = None) -> int:
    """Show the block of list items around ``line`` (1-based).

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    content = read_note(note)
    if content is None:
        return 1

    lines = content.split("\n")
    index = line - 1
    if not 0 <= index < len(lines):
        console.print(f"[red]Error:[/] Line {line} is out of range (1-{len(lines)})")
        return 1

    start, end = -1, len(lines)
    if section_heading:
        section = find_section(lines, section_heading)
        if section is None:
            console.print(f"[red]Error:[/] Section not found: '{escape(section_heading)}'")
            return 1
        start, end = section.start, section.end

    block = find_block(lines, index, start, end)
    if block is None:
        console.print(f"[red]Error:[/] No block at line {line}")
        return 1

    info = classify_line(lines[block.start_line])
    state = info.state.value if info.state else "not a task"
    console.print(
        f"[bold]Block[/] lines {block.start_line + 1}-{block.end_line} [dim]({escape(state)})[/]"
    )
    print_lines(block.lines(lines), block.start_line)
    return 0


def format_counts(section: Section) -> str:
    parts = [
        f"{count} {state.value}"
        for state in TaskState
        if (count := section.task_counts.get(state, 0))
    ]
    return ", ".join(parts) if parts else "no tasks"


def run_sections(note: Path) -> int:
    """List the sections of a note with their task counts.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    content = read_note(note)
    if content is None:
        return 1

    console.print(Panel(f"[bold blue]{escape(note.name)}[/]", expand=False))

    result = OutlineParser().parse_content(content)
    sections = result.get_all_sections()
    if not sections:
        console.print("[dim]No sections found.[/]")
        return 0

    for section in sections:
        indent = "  " * (section.level - 1)
        console.print(
            f"{indent}[bold]{escape(section.heading)}[/] "
            f"[dim]lines {section.start_line + 1}-{section.end_line} · {format_counts(section)}[/]"
        )
    return 0


def run_migrate(
    note: Path,
    line: int,
    target: Path,
    config: BulletflowConfig,
    *,
    heading: str | None = None,
    schedule: bool = False,
) -> int:
    """Copy the open task at ``line`` (1-based) into another note.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    if note.resolve() == target.resolve():
        console.print("[red]Error:[/] Source and target must be different notes")
        return 1

    content = read_note(note)
    if content is None:
        return 1
    target_content = read_note(target)
    if target_content is None:
        return 1

    target_heading = heading or config.headings.migration or config.headings.destination
    mark = TaskState.SCHEDULED if schedule else TaskState.MIGRATED
    result = migrate_task(content, line - 1, target_content, target_heading, mark=mark)

    if result is None:
        console.print(f"[red]Error:[/] Line {line} is not an open or started task")
        return 1

    note.write_text(result.source_content, encoding="utf-8")
    target.write_text(result.target_content, encoding="utf-8")

    verb = "Scheduled" if schedule else "Migrated"
    console.print(
        f"[green]✓[/] {verb} '{escape(strip_wikilinks_to_display_text(result.task_text))}' "
        f"to {escape(target.name)} under {escape(target_heading)}"
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = argparse.ArgumentParser(
        prog="bulletflow",
        description="bulletflow - Move finished tasks between sections of outline notes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""\
Examples:
  bulletflow move today.md 12                Move the task block at line 12 to ## Log
  bulletflow move today.md 12 --to "## Done" Move it somewhere else
  bulletflow sweep today.md                  Move every finished task out of ## Todo
  bulletflow block today.md 12               Show the block around line 12
  bulletflow sections today.md               List sections and task counts
  bulletflow migrate today.md 4 tomorrow.md  Copy an open task to another note

Configuration:
  Create {CONFIG_PATH} in your notes folder to customize headings:
    [headings]
    source = "## Todo"
    destination = "## Log"

    [move]
    trigger_states = ["completed", "started"]
""",
    )
    parser.add_argument("--version", action="version", version=get_full_version_string())

    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_workspace(sub: argparse.ArgumentParser) -> None:
        sub.add_argument(
            "--workspace",
            "-w",
            type=Path,
            default=None,
            help=f"Directory holding {CONFIG_PATH} (defaults to the nearest one above the note)",
        )

    # Move subcommand
    move_parser = subparsers.add_parser("move", help="Move one finished task block")
    move_parser.add_argument("file", type=Path, help="Path to the note")
    move_parser.add_argument("line", type=int, help="Line of the task (1-based)")
    move_parser.add_argument("--from", dest="source", default=None, help="Source heading")
    move_parser.add_argument("--to", dest="destination", default=None, help="Destination heading")
    move_parser.add_argument(
        "--dry-run", "-n", action="store_true", help="Show the move without changing the note"
    )
    add_workspace(move_parser)

    # Sweep subcommand
    sweep_parser = subparsers.add_parser("sweep", help="Move every finished task block")
    sweep_parser.add_argument("file", type=Path, help="Path to the note")
    sweep_parser.add_argument("--from", dest="source", default=None, help="Source heading")
    sweep_parser.add_argument("--to", dest="destination", default=None, help="Destination heading")
    sweep_parser.add_argument(
        "--dry-run", "-n", action="store_true", help="Count moves without changing the note"
    )
    add_workspace(sweep_parser)

    # Block subcommand
    block_parser = subparsers.add_parser("block", help="Show the list block around a line")
    block_parser.add_argument("file", type=Path, help="Path to the note")
    block_parser.add_argument("line", type=int, help="Any line inside the block (1-based)")
    block_parser.add_argument(
        "--section", "-s", default=None, help="Heading of the section bounding the block"
    )

    # Sections subcommand
    sections_parser = subparsers.add_parser("sections", help="List sections and task counts")
    sections_parser.add_argument("file", type=Path, help="Path to the note")

    # Migrate subcommand
    migrate_parser = subparsers.add_parser("migrate", help="Copy an open task into another note")
    migrate_parser.add_argument("file", type=Path, help="Path to the note holding the task")
    migrate_parser.add_argument("line", type=int, help="Line of the task (1-based)")
    migrate_parser.add_argument("target", type=Path, help="Path to the receiving note")
    migrate_parser.add_argument("--heading", default=None, help="Heading in the receiving note")
    migrate_parser.add_argument(
        "--schedule", action="store_true", help="Mark the source task [<] instead of [>]"
    )
    add_workspace(migrate_parser)

    args = parser.parse_args(argv)
    configure_logging()

    note = args.file.resolve()

    if args.command == "block":
        return run_block(note, args.line, args.section)

    if args.command == "sections":
        return run_sections(note)

    workspace = args.workspace.resolve() if args.workspace else find_workspace_root(note.parent)
    config = load_config(workspace)
    logger.debug("Using workspace %s", workspace)

    if args.command == "move":
        return run_move(
            note,
            args.line,
            config,
            source=args.source,
            destination=args.destination,
            dry_run=args.dry_run,
        )

    if args.command == "sweep":
        return run_sweep(
            note, config, source=args.source, destination=args.destination, dry_run=args.dry_run
        )

    return run_migrate(
        note,
        args.line,
        args.target.resolve(),
        config,
        heading=args.heading,
        schedule=args.schedule,
    )


def find_workspace_root(start_path: Path) -> Path:
    """Find the nearest directory holding a .bulletflow folder.

    Args:
        start_path: Directory to start searching from

    Returns:
        Path to the workspace, or start_path if not found
    """
    current = start_path.resolve()
    while current != current.parent:
        if (current / CONFIG_PATH.parent).is_dir():
            return current
        current = current.parent
    return start_path


if __name__ == "__main__":
    sys.exit(main())
