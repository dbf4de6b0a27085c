"""User domain model."""

from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, EmailStr


class UserRole(StrEnum):
    """Role granted to an authenticated identity."""

    USER = "user"
    ADMIN = "admin"


class User(BaseModel):
    """Authenticated actor resolved from a session."""

    id: UUID
    username: str
    email: EmailStr
    role: UserRole
    is_active: bool = True
    created_at: datetime | None = None

    class Config:
        """Pydantic config."""

        from_attributes = True
