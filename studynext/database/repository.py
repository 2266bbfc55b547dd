"""Repository layer for course record operations."""

import copy
import logging
from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session

from studynext.completion.errors import PermissionDeniedError, RemoteWriteError
from studynext.database.models import CourseRecordDB
from studynext.models.course import CourseRecord
from studynext.models.task import TaskType

logger = logging.getLogger(__name__)


def _collection_key(task_type: str) -> str:
    return "exams" if task_type == TaskType.EXAM else "assignments"


class CourseRecordRepository:
    """Repository for CourseRecord database operations."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, record_id: str) -> Optional[CourseRecord]:
        """Get a course record by id (no ownership filter)."""
        record_db = self.db.query(CourseRecordDB).filter(CourseRecordDB.id == record_id).first()
        return record_db.to_pydantic() if record_db else None

    def get_all(self, user_id: str) -> List[CourseRecord]:
        """Get all course records owned by a user, oldest first."""
        records_db = (
            self.db.query(CourseRecordDB)
            .filter(CourseRecordDB.user_id == user_id)
            .order_by(CourseRecordDB.created_at, CourseRecordDB.id)
            .all()
        )
        return [record_db.to_pydantic() for record_db in records_db]

    def upsert(self, record: CourseRecord) -> CourseRecord:
        """Create or replace a course record."""
        record_db = self.db.query(CourseRecordDB).filter(CourseRecordDB.id == record.id).first()
        try:
            if record_db:
                record_db.title = record.title
                record_db.course_data = record.course_data()
                if record.user_id:
                    record_db.user_id = record.user_id
                record_db.updated_at = datetime.utcnow()
            else:
                record_db = CourseRecordDB.from_pydantic(record)
                self.db.add(record_db)
            self.db.commit()
            self.db.refresh(record_db)
            logger.debug(f"Saved course record {record.id}")
            return record_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to save course record {record.id}: {type(e).__name__}: {str(e)}")
            raise

    def set_task_status(
        self,
        record_id: str,
        task_type: str,
        task_name: str,
        status: str,
        owner_id: str,
    ) -> CourseRecord:
        """Rewrite one task's status and stamp ownership.

        Raises:
            PermissionDeniedError: The record is stamped with a different owner
            RemoteWriteError: The record or the task no longer exists
        """
        record_db = self.db.query(CourseRecordDB).filter(CourseRecordDB.id == record_id).first()
        if not record_db:
            raise RemoteWriteError(f"Course record {record_id} not found")
        if record_db.user_id and record_db.user_id != owner_id:
            raise PermissionDeniedError(
                f"Course record {record_id} is owned by another user",
                owner_id=record_db.user_id,
            )

        # Replace the JSON document so the change is detected
        course_data = copy.deepcopy(record_db.course_data or {})
        key = _collection_key(task_type)
        entries = course_data.get(key) or []
        matched = False
        for entry in entries:
            if isinstance(entry, dict) and entry.get("name") == task_name:
                entry["status"] = status
                matched = True
        if not matched:
            raise RemoteWriteError(f"{key[:-1].capitalize()} '{task_name}' not found in course record {record_id}")
        course_data[key] = entries

        try:
            record_db.course_data = course_data
            record_db.user_id = owner_id
            record_db.updated_at = datetime.utcnow()
            self.db.commit()
            self.db.refresh(record_db)
            logger.debug(f"Set {key[:-1]} '{task_name}' in {record_id} to {status}")
            return record_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to update task status in {record_id}: {type(e).__name__}: {str(e)}")
            raise
