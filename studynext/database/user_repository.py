"""Repository for User database operations."""

from typing import Optional
from sqlalchemy.orm import Session

from studynext.models.identity import User
from studynext.database.models import UserDB


class UserRepository:
    """Read access to accounts; rows are provisioned by the sign-in service."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: str) -> Optional[User]:
        """Get user by ID."""
        user_db = self.db.query(UserDB).filter(UserDB.id == user_id).first()
        return user_db.to_pydantic() if user_db else None
