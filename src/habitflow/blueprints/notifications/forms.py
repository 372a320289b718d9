"""Request models for notification endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ...services.notifications import NotificationType


class NotificationForm(BaseModel):
    """Payload for creating a notification."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True
    )

    title: str = Field(min_length=1, max_length=120)
    message: str = Field(min_length=1, max_length=500)
    type: NotificationType
    scheduled_for: Optional[datetime] = None
    habit_id: Optional[str] = None
    is_read: bool = False


__all__ = ["NotificationForm"]
