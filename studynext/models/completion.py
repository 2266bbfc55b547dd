"""Completion toggle result model for studynext."""

from enum import Enum
from pydantic import BaseModel, Field


class CompletionOutcome(str, Enum):
    """How a completion toggle was applied."""
    LOCAL = "local"  # Kept in the local cache only (guest, or remote write failed)
    SYNCED = "synced"  # Written to the remote store
    PERMISSION_DENIED = "permission_denied"  # Remote record belongs to someone else


class CompletionResult(BaseModel):
    """Result of toggling a task, used to drive toast feedback."""

    task_id: str = Field(..., description="Toggled task id")
    completed: bool = Field(..., description="Completion state after the toggle")
    status: str = Field(..., description="Status string after the toggle")
    outcome: CompletionOutcome = Field(..., description="Where the change took effect")
    message: str = Field("", description="Feedback text for the user")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
