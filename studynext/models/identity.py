"""Identity and user models for studynext."""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class IdentityKind(str, Enum):
    """Identity kind enumeration."""
    DURABLE = "durable"  # Signed-in account; remote writes allowed
    EPHEMERAL = "ephemeral"  # Guest session; local-only completion state


class Identity(BaseModel):
    """Who is acting on the dashboard."""

    kind: IdentityKind = Field(..., description="Durable account or ephemeral guest session")
    owner_id: Optional[str] = Field(None, description="Account id used for ownership checks")
    session_id: Optional[str] = Field(None, description="Guest session id")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
        frozen = True

    @property
    def is_ephemeral(self) -> bool:
        return self.kind == IdentityKind.EPHEMERAL or not self.owner_id

    @property
    def cache_key(self) -> str:
        """Key for this identity's local completion cache."""
        if self.is_ephemeral:
            return f"guest:{self.session_id or 'anonymous'}"
        return f"user:{self.owner_id}"

    @classmethod
    def durable(cls, owner_id: str) -> "Identity":
        return cls(kind=IdentityKind.DURABLE, owner_id=owner_id)

    @classmethod
    def guest(cls, session_id: Optional[str] = None) -> "Identity":
        return cls(kind=IdentityKind.EPHEMERAL, session_id=session_id)


class User(BaseModel):
    """User account model."""

    id: str = Field(..., description="Unique user identifier")
    email: str = Field(..., description="User email address")
    name: Optional[str] = Field(None, description="User display name")
    created_at: datetime = Field(..., description="User creation timestamp")
    updated_at: datetime = Field(..., description="User last update timestamp")
