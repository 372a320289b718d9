"""Concrete repository implementations using SQLModel."""

from .habit import SQLModelHabitRepository
from .notification import SQLModelNotificationRepository

__all__ = ["SQLModelHabitRepository", "SQLModelNotificationRepository"]
