"""SQLModel implementation of the notification repository."""

from __future__ import annotations

from sqlmodel import col, select

from ...models.notification import Notification
from ..database import SessionFactory


class SQLModelNotificationRepository:
    """SQLModel-based notification repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def list_recent(self, limit: int = 10) -> list[Notification]:
        with self.session_factory() as session:
            statement = (
                select(Notification)
                .order_by(col(Notification.created_at).desc(), col(Notification.id).desc())
                .limit(limit)
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def add(self, notification: Notification) -> Notification:
        with self.session_factory() as session:
            session.add(notification)
            session.commit()
            session.refresh(notification)
            session.expunge(notification)
            return notification

    def mark_read(self, notification_id: int) -> bool:
        with self.session_factory() as session:
            notification = session.get(Notification, notification_id)
            if notification is None:
                return False
            notification.is_read = True
            session.add(notification)
            session.commit()
            return True
