"""Repository protocol definitions for domain layer."""

from .habit import HabitRepository, StreakDeriver
from .notification import NotificationRepository

__all__ = ["HabitRepository", "NotificationRepository", "StreakDeriver"]
