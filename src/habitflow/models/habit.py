"""Habit tracking data structures."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, ClassVar, Optional
from uuid import uuid4

from sqlalchemy import JSON, Column, DateTime
from sqlmodel import Field, SQLModel


def _new_id() -> str:
    return uuid4().hex


class Habit(SQLModel, table=True):
    """A user-defined habit with a recurrence frequency."""

    __tablename__: ClassVar[str] = "habit"

    id: str = Field(default_factory=_new_id, primary_key=True, max_length=32)
    name: str = Field(nullable=False, max_length=100, index=True)
    category: str = Field(nullable=False, max_length=64)
    description: Optional[str] = Field(default=None, max_length=400)
    frequency: str = Field(default="daily", nullable=False, max_length=16)
    custom_schedule: Optional[dict[str, Any]] = Field(
        default=None, sa_column=Column(JSON, nullable=True)
    )
    reminder_time: Optional[str] = Field(default=None, max_length=5)
    is_active: bool = Field(default=True, nullable=False)
    color: str = Field(default="#6366F1", max_length=16)
    icon: str = Field(default="fa-star", max_length=32)
    # Naive local time, stored without a timezone.
    created_at: datetime = Field(default_factory=datetime.now, sa_type=DateTime(), nullable=False)
    updated_at: datetime = Field(default_factory=datetime.now, sa_type=DateTime(), nullable=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "description": self.description,
            "frequency": self.frequency,
            "customSchedule": self.custom_schedule,
            "reminderTime": self.reminder_time,
            "isActive": self.is_active,
            "color": self.color,
            "icon": self.icon,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }


class HabitCompletion(SQLModel, table=True):
    """A habit performed on a calendar day; one row per (habit, day)."""

    __tablename__: ClassVar[str] = "habit_completion"

    habit_id: str = Field(foreign_key="habit.id", primary_key=True, max_length=32)
    occurred_on: date = Field(primary_key=True, index=True)
    notes: Optional[str] = Field(default=None, max_length=400)
    # Audit only; scheduling uses occurred_on.
    completed_at: datetime = Field(default_factory=datetime.now, sa_type=DateTime(), nullable=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "habitId": self.habit_id,
            "date": self.occurred_on.isoformat(),
            "notes": self.notes,
            "completedAt": self.completed_at.isoformat(),
        }


class HabitStreak(SQLModel, table=True):
    """Persisted streak state, one row per habit."""

    __tablename__: ClassVar[str] = "habit_streak"

    habit_id: str = Field(foreign_key="habit.id", primary_key=True, max_length=32)
    current_streak: int = Field(default=0, nullable=False)
    longest_streak: int = Field(default=0, nullable=False)
    last_completed_date: Optional[date] = Field(default=None)
    updated_at: datetime = Field(default_factory=datetime.now, sa_type=DateTime(), nullable=False)
