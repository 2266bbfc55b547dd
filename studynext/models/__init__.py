"""Data models for studynext."""

from studynext.models.course import RawTask, CourseRecord
from studynext.models.task import Task, TaskType, PriorityRankedTask, default_status
from studynext.models.suggestions import (
    NudgeSuggestion,
    NudgeType,
    NudgePriority,
    TriageMode,
    NextStep,
    NextStepKind,
)
from studynext.models.identity import Identity, IdentityKind, User
from studynext.models.completion import CompletionOutcome, CompletionResult

__all__ = [
    "RawTask",
    "CourseRecord",
    "Task",
    "TaskType",
    "PriorityRankedTask",
    "default_status",
    "NudgeSuggestion",
    "NudgeType",
    "NudgePriority",
    "TriageMode",
    "NextStep",
    "NextStepKind",
    "Identity",
    "IdentityKind",
    "User",
    "CompletionOutcome",
    "CompletionResult",
]
