"""Exception types shared by the scheduling core, services and API layer."""

from __future__ import annotations

from datetime import date
from typing import Any


class HabitflowError(Exception):
    """Base class for application errors."""


class ValidationError(HabitflowError, ValueError):
    """A value failed validation; ``field`` names the offending input."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class NotFoundError(HabitflowError, LookupError):
    """Requested record does not exist."""

    def __init__(self, entity: str, key: Any) -> None:
        super().__init__(f"{entity} not found: {key}")
        self.entity = entity
        self.key = key


class DuplicateCompletionError(HabitflowError):
    """A completion already exists for the habit on that date."""

    def __init__(self, habit_id: str, day: date) -> None:
        super().__init__(f"Habit {habit_id} already completed on {day.isoformat()}")
        self.habit_id = habit_id
        self.day = day


__all__ = ["DuplicateCompletionError", "HabitflowError", "NotFoundError", "ValidationError"]
