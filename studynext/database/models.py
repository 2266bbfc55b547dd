"""SQLAlchemy database models for studynext."""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, JSON

from studynext.database.database import Base


class CourseRecordDB(Base):
    """Database model for a course record (one per class chat)."""

    __tablename__ = "course_records"

    # Primary key (chat id)
    id = Column(String, primary_key=True)

    # Ownership stamp; empty on records created before stamping existed
    user_id = Column(String, nullable=True, index=True)

    title = Column(String, nullable=True)

    # Document body: courseCode, courseName, assignments[], exams[]
    course_data = Column(JSON, nullable=False, default=dict)

    # Timestamps
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from studynext.models.course import CourseRecord

        return CourseRecord.from_course_data(
            self.id,
            self.course_data,
            user_id=self.user_id,
            title=self.title,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    @classmethod
    def from_pydantic(cls, record):
        """Create database model from Pydantic model."""
        now = datetime.utcnow()
        return cls(
            id=record.id,
            user_id=record.user_id,
            title=record.title,
            course_data=record.course_data(),
            created_at=record.created_at or now,
            updated_at=record.updated_at or now,
        )


class UserDB(Base):
    """Database model for User."""

    __tablename__ = "users"

    id = Column(String, primary_key=True)
    email = Column(String, nullable=False, unique=True)
    name = Column(String, nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from studynext.models.identity import User
        return User(
            id=self.id,
            email=self.email,
            name=self.name,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

