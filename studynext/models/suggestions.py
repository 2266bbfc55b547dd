"""Dashboard suggestion models for studynext."""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field

from studynext.models.task import Task


class NudgeType(str, Enum):
    """Nudge type enumeration."""
    OPPORTUNITY = "opportunity"
    WARNING = "warning"
    TIP = "tip"


class NudgePriority(str, Enum):
    """Nudge priority enumeration."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class NudgeSuggestion(BaseModel):
    """The single proactive suggestion shown in the daily briefing."""

    type: NudgeType = Field(..., description="Kind of nudge")
    message: str = Field(..., description="Text shown to the user")
    action_text: Optional[str] = Field(None, description="Call-to-action label")
    action_href: Optional[str] = Field(None, description="Opaque deep link for the call-to-action")
    priority: NudgePriority = Field(..., description="Display priority")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True


class TriageMode(BaseModel):
    """Overload state for a week with too many deadlines."""

    is_active: bool = Field(True, description="Always true when present")
    week: str = Field(..., description="Human label, e.g. 'Week of Oct 18'")
    tasks: List[Task] = Field(default_factory=list, description="Every task in the flagged week")
    suggestion: str = Field(..., description="Restructuring suggestion")


class NextStepKind(str, Enum):
    """Next-step kind enumeration."""
    ASSIGNMENT = "assignment"
    EXAM = "exam"
    REVIEW = "review"


class NextStep(BaseModel):
    """Single "next best step" card."""

    kind: NextStepKind
    title: str
    course_label: str
    detail: str
    cta: str
    href: str
    urgency_label: Optional[str] = None

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
