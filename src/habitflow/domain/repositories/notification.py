"""Notification repository protocol."""

from __future__ import annotations

from typing import Protocol

from ...models.notification import Notification


class NotificationRepository(Protocol):
    """Repository for in-app notifications."""

    def list_recent(self, limit: int = 10) -> list[Notification]:
        """Newest notifications first."""
        ...

    def add(self, notification: Notification) -> Notification:
        """Persist a notification."""
        ...

    def mark_read(self, notification_id: int) -> bool:
        """Flag a notification read; False when it does not exist."""
        ...
