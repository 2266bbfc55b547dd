"""Course record models for studynext.

Course records are produced by the document-ingestion side of the product and are
loosely shaped: dates are free text, weights may be numbers or numeric strings and
status is free text. These models accept that shape as-is; `engine.normalizer` is
the single place that turns it into strict `Task` objects.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class RawTask(BaseModel):
    """A raw assignment or exam entry as stored in a course record."""

    name: Optional[str] = Field(None, description="Display name")
    due_date: Optional[Any] = Field(None, alias="dueDate", description="Assignment due date (free text)")
    date: Optional[Any] = Field(None, description="Exam date (free text)")
    weight: Optional[Any] = Field(None, description="Grade weight, number or numeric string")
    status: Optional[str] = Field(None, description="Free-text status")
    description: Optional[str] = Field(None, description="Optional description")

    class Config:
        """Pydantic configuration."""
        populate_by_name = True
        extra = "allow"


class CourseRecord(BaseModel):
    """A course and its raw assignments and exams."""

    id: str = Field(..., description="Course record identifier (chat id)")
    user_id: Optional[str] = Field(None, description="Ownership stamp (empty for legacy records)")
    title: Optional[str] = Field(None, description="Chat title, used when no course code is known")
    course_code: Optional[str] = Field(None, alias="courseCode", description="Course code, e.g. BIO 101")
    course_name: Optional[str] = Field(None, alias="courseName", description="Course display name")
    assignments: List[RawTask] = Field(default_factory=list, description="Raw assignments in source order")
    exams: List[RawTask] = Field(default_factory=list, description="Raw exams in source order")
    created_at: Optional[datetime] = Field(None, description="Record creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Record last update timestamp")

    class Config:
        """Pydantic configuration."""
        populate_by_name = True

    @property
    def label(self) -> Optional[str]:
        """Course code, falling back to the chat title."""
        return self.course_code or self.title

    def course_data(self) -> Dict[str, Any]:
        """Document body as persisted in the remote store."""
        return {
            "courseCode": self.course_code,
            "courseName": self.course_name,
            "assignments": [a.model_dump(by_alias=True, exclude_none=True) for a in self.assignments],
            "exams": [e.model_dump(by_alias=True, exclude_none=True) for e in self.exams],
        }

    @classmethod
    def from_course_data(
        cls,
        record_id: str,
        course_data: Optional[Dict[str, Any]],
        user_id: Optional[str] = None,
        title: Optional[str] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ) -> "CourseRecord":
        """Build a record from a stored document body."""
        data = course_data or {}
        return cls(
            id=record_id,
            user_id=user_id,
            title=title,
            course_code=data.get("courseCode"),
            course_name=data.get("courseName"),
            assignments=[RawTask(**a) for a in data.get("assignments") or [] if isinstance(a, dict)],
            exams=[RawTask(**e) for e in data.get("exams") or [] if isinstance(e, dict)],
            created_at=created_at,
            updated_at=updated_at,
        )
