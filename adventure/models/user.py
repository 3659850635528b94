"""
User accounts: creators upload videos, marketers run campaigns
"""

from datetime import datetime, UTC
from typing import Optional

from pydantic import BaseModel, Field

from adventure.models.status_enums import UserRole


class User(BaseModel):
    """Stored user document"""

    id: Optional[str] = None
    name: str
    email: str
    password_hash: str
    role: UserRole

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    class Config:
        use_enum_values = True


class UserPublic(BaseModel):
    """User as exposed by the API (no credentials)"""

    id: str
    name: str
    email: str
    role: UserRole

    class Config:
        use_enum_values = True

    @classmethod
    def from_user(cls, user: User) -> "UserPublic":
        return cls(id=user.id or "", name=user.name, email=user.email, role=user.role)
