"""Task data model for studynext."""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from studynext.models.constants import STATUS_COMPLETED, STATUS_NOT_STARTED, STATUS_UPCOMING


class TaskType(str, Enum):
    """Task type enumeration."""
    ASSIGNMENT = "assignment"
    EXAM = "exam"


def default_status(task_type: str) -> str:
    """Status a task of this type returns to when it is not completed."""
    return STATUS_UPCOMING if task_type == TaskType.EXAM else STATUS_NOT_STARTED


class Task(BaseModel):
    """Canonical, normalized unit of work derived from a course record."""

    id: str = Field(..., description="Deterministic id: '{chat_id}-{name}' (+ '-exam' for exams)")
    type: TaskType = Field(..., description="Assignment or exam")
    name: str = Field(..., description="Display name")
    date: datetime = Field(..., description="Due/exam time in local wall-clock time (naive)")
    course: str = Field(..., description="Course display name")
    course_code: str = Field(..., description="Course code")
    chat_id: str = Field(..., description="Owning course record id")
    weight: float = Field(..., description="Grade weight")
    status: str = Field(..., description="Free-text status; 'Completed' marks the task inactive")
    description: Optional[str] = Field(None, description="Optional description")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
        frozen = True

    @property
    def is_completed(self) -> bool:
        return self.status == STATUS_COMPLETED

    @property
    def is_exam(self) -> bool:
        return self.type == TaskType.EXAM


class PriorityRankedTask(Task):
    """Task with its rank inside the lookahead window (0 = unranked)."""

    priority: int = Field(0, ge=0, description="1 = most urgent; 0 = outside the window or completed")
