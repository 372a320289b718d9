"""SQLModel table definitions."""

from .habit import Habit, HabitCompletion, HabitStreak
from .notification import Notification

__all__ = ["Habit", "HabitCompletion", "HabitStreak", "Notification"]
