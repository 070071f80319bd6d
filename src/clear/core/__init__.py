"""Functional core - pure business logic with no I/O."""

from .tasks import (
    ActivityEffect,
    ActivityType,
    Task,
    TaskActivity,
    TaskCandidate,
    TaskStatus,
    activity_effect,
    filter_eligible,
    parse_activity_type,
)
from .scoring import neglect_score, priority
from .focus import DailyFocus, FocusSelection, ResolvedFocus, select_focus
from .settings import FocusSettings, validate_setting
from .intake import DumpEntry, validate_content
from .report import BatchReport
from .extraction import build_extraction_prompt, fallback_candidate, parse_extraction_response

__all__ = [
    # Tasks
    "Task",
    "TaskStatus",
    "TaskCandidate",
    "TaskActivity",
    "ActivityType",
    "ActivityEffect",
    "activity_effect",
    "parse_activity_type",
    "filter_eligible",
    # Scoring
    "neglect_score",
    "priority",
    # Focus
    "DailyFocus",
    "FocusSelection",
    "ResolvedFocus",
    "select_focus",
    # Settings
    "FocusSettings",
    "validate_setting",
    # Intake
    "DumpEntry",
    "validate_content",
    # Reports
    "BatchReport",
    # Extraction
    "build_extraction_prompt",
    "parse_extraction_response",
    "fallback_candidate",
]
