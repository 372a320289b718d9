"""Notification records (storage only; delivery happens elsewhere)."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from ..domain.repositories.notification import NotificationRepository
from ..errors import NotFoundError, ValidationError
from ..models.notification import Notification


class NotificationType(str, Enum):
    REMINDER = "reminder"
    CELEBRATION = "celebration"
    MOTIVATION = "motivation"


class NotificationService:
    def __init__(self, repository: NotificationRepository):
        self.repository = repository

    def list_recent(self, limit: int = 10) -> list[Notification]:
        if limit < 1:
            raise ValidationError("limit", "must be at least 1")
        return self.repository.list_recent(limit)

    def add(
        self,
        *,
        title: str,
        message: str,
        type: str,
        scheduled_for: Optional[datetime] = None,
        habit_id: Optional[str] = None,
        is_read: bool = False,
    ) -> Notification:
        try:
            kind = NotificationType(type)
        except ValueError as exc:
            raise ValidationError("type", f"unknown notification type {type!r}") from exc
        return self.repository.add(
            Notification(
                title=title,
                message=message,
                type=kind.value,
                scheduled_for=scheduled_for,
                habit_id=habit_id,
                is_read=is_read,
            )
        )

    def mark_read(self, notification_id: int) -> None:
        if not self.repository.mark_read(notification_id):
            raise NotFoundError("notification", notification_id)
