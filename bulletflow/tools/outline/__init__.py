"""Outline engine for moving finished tasks between sections of notes."""

from .classifier import (
    DEFAULT_TRIGGER_STATES,
    LineInfo,
    LineKind,
    TaskMarker,
    TaskState,
    classify_line,
)
from .insertion import find_insertion_line, insert_under_heading
from .links import strip_wikilinks_to_display_text
from .operations import (
    EditOperation,
    EditScript,
    MigrationResult,
    MovePlanner,
    MoveState,
    SweepResult,
    apply_edits,
    migrate_task,
    move_all,
    plan_move,
)
from .parser import OutlineParser, ParseResult, Section, SectionRange, find_section
from .tool import OutlineAction, OutlineExecutor, OutlineObservation, OutlineTool
from .tree import Block, collect_block, find_block, find_root_ancestor
from .trigger import AutoMover, detect_trigger

__all__ = [
    "classify_line",
    "LineInfo",
    "LineKind",
    "TaskMarker",
    "TaskState",
    "DEFAULT_TRIGGER_STATES",
    "Block",
    "find_root_ancestor",
    "collect_block",
    "find_block",
    "find_section",
    "SectionRange",
    "OutlineParser",
    "ParseResult",
    "Section",
    "find_insertion_line",
    "insert_under_heading",
    "plan_move",
    "MovePlanner",
    "MoveState",
    "EditOperation",
    "EditScript",
    "apply_edits",
    "move_all",
    "SweepResult",
    "migrate_task",
    "MigrationResult",
    "strip_wikilinks_to_display_text",
    "detect_trigger",
    "AutoMover",
    "OutlineTool",
    "OutlineAction",
    "OutlineObservation",
    "OutlineExecutor",
]
