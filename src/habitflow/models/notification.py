"""In-app notification records."""

from __future__ import annotations

from datetime import datetime
from typing import Any, ClassVar, Optional

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


class Notification(SQLModel, table=True):
    """A reminder, celebration or motivation message shown to the user."""

    __tablename__: ClassVar[str] = "notification"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(nullable=False, max_length=120)
    message: str = Field(nullable=False, max_length=500)
    type: str = Field(nullable=False, max_length=16)
    is_read: bool = Field(default=False, nullable=False)
    created_at: datetime = Field(
        default_factory=datetime.now, sa_type=DateTime(), nullable=False, index=True
    )
    scheduled_for: Optional[datetime] = Field(default=None, sa_type=DateTime())
    habit_id: Optional[str] = Field(default=None, foreign_key="habit.id", max_length=32)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "message": self.message,
            "type": self.type,
            "isRead": self.is_read,
            "createdAt": self.created_at.isoformat(),
            "scheduledFor": self.scheduled_for.isoformat() if self.scheduled_for else None,
            "habitId": self.habit_id,
        }
