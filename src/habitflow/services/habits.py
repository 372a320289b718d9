"""Habit service: composes the scheduling core with persistence."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, fields
from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..domain.repositories.habit import HabitRepository, StreakDeriver
from ..errors import NotFoundError, ValidationError
from ..logging_config import get_logger
from ..models.habit import Habit, HabitCompletion
from .analytics import (
    DEFAULT_WINDOW_DAYS,
    BatchFailure,
    DailyStat,
    HabitWithStats,
    daily_stats,
    habits_with_derived_stats,
    month_calendar,
    today_summary,
)
from .dates import DateLike, parse_date
from .schedule import Frequency, validate_frequency
from .streaks import StreakState, on_completion_added, recompute

logger = get_logger("services.habits")


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


@dataclass(slots=True)
class HabitPatch:
    """Partial update for a habit; fields left UNSET keep their current value."""

    name: Any = UNSET
    category: Any = UNSET
    description: Any = UNSET
    frequency: Any = UNSET
    custom_schedule: Any = UNSET
    reminder_time: Any = UNSET
    is_active: Any = UNSET
    color: Any = UNSET
    icon: Any = UNSET

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "HabitPatch":
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})

    def changes(self) -> dict[str, Any]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNSET
        }

    def apply(self, habit: Habit) -> Habit:
        """Merge set fields onto ``habit`` in place and return it."""
        for key, value in self.changes().items():
            setattr(habit, key, value)
        return habit


def _frequency_value(raw: Any) -> str:
    try:
        return Frequency(raw).value
    except ValueError as exc:
        raise ValidationError("frequency", f"unknown frequency {raw!r}") from exc


def _derive_after_add(day: date) -> StreakDeriver:
    """Incremental update for appends, full recompute for backfills."""

    def derive(habit: Habit, previous: StreakState, dates: Sequence[date]) -> StreakState:
        last = previous.last_completed_date
        if (last is None and len(dates) == 1) or (last is not None and day > last):
            return on_completion_added(habit, previous, day)
        return recompute(habit, dates)

    return derive


def _derive_after_remove(habit: Habit, _previous: StreakState, dates: Sequence[date]) -> StreakState:
    return recompute(habit, dates)


class HabitService:
    """Use-cases for habits, completions, streaks and analytics."""

    def __init__(self, repository: HabitRepository, *, window_days: int = DEFAULT_WINDOW_DAYS):
        self.repository = repository
        self.window_days = window_days

    # Habits
    def get_habit(self, habit_id: str) -> Habit:
        habit = self.repository.get_habit(habit_id)
        if habit is None:
            raise NotFoundError("habit", habit_id)
        return habit

    def list_habits(self, include_inactive: bool = False) -> list[Habit]:
        return self.repository.list_habits(include_inactive=include_inactive)

    def create_habit(
        self,
        *,
        name: str,
        category: str,
        frequency: str,
        description: Optional[str] = None,
        custom_schedule: Optional[dict[str, Any]] = None,
        reminder_time: Optional[str] = None,
        color: str = "#6366F1",
        icon: str = "fa-star",
        is_active: bool = True,
    ) -> Habit:
        habit = Habit(
            name=name,
            category=category,
            frequency=_frequency_value(frequency),
            description=description,
            custom_schedule=custom_schedule,
            reminder_time=reminder_time,
            color=color,
            icon=icon,
            is_active=is_active,
        )
        habit = self.repository.create_habit(habit)
        logger.info("Created habit", extra={"habit_id": habit.id, "frequency": habit.frequency})
        return habit

    def update_habit(self, habit_id: str, patch: HabitPatch) -> Habit:
        """Apply ``patch``; a frequency change re-derives the streak."""
        habit = self.get_habit(habit_id)
        previous_frequency = habit.frequency
        if patch.frequency is not UNSET:
            patch.frequency = _frequency_value(patch.frequency)
        patch.apply(habit)
        habit.updated_at = datetime.now()
        habit = self.repository.update_habit(habit)
        if habit.frequency != previous_frequency:
            self.recompute_streak(habit.id)
        return habit

    def delete_habit(self, habit_id: str) -> None:
        if not self.repository.soft_delete_habit(habit_id):
            raise NotFoundError("habit", habit_id)
        logger.info("Soft-deleted habit", extra={"habit_id": habit_id})

    # Completions
    def list_completions(
        self,
        habit_id: str,
        start: Optional[DateLike] = None,
        end: Optional[DateLike] = None,
    ) -> list[HabitCompletion]:
        self.get_habit(habit_id)
        return self.repository.list_completions(
            habit_id,
            parse_date(start, "startDate") if start is not None else None,
            parse_date(end, "endDate") if end is not None else None,
        )

    def add_completion(
        self, habit_id: str, day: DateLike, notes: Optional[str] = None
    ) -> tuple[HabitCompletion, StreakState]:
        """Record a completion; raises DuplicateCompletionError for a repeat day."""
        habit = self.get_habit(habit_id)
        if not habit.is_active:
            raise ValidationError("habitId", "habit is inactive")
        validate_frequency(habit)
        occurred_on = parse_date(day, "date")

        completion = HabitCompletion(habit_id=habit.id, occurred_on=occurred_on, notes=notes)
        completion, state = self.repository.record_completion(
            completion, _derive_after_add(occurred_on)
        )
        logger.info(
            "Recorded completion",
            extra={"habit_id": habit_id, "date": occurred_on.isoformat(), **state.to_dict()},
        )
        return completion, state

    def remove_completion(self, habit_id: str, day: DateLike) -> StreakState:
        """Delete a completion and recompute the streak from what remains."""
        occurred_on = parse_date(day, "date")
        validate_frequency(self.get_habit(habit_id))
        state = self.repository.delete_completion(habit_id, occurred_on, _derive_after_remove)
        if state is None:
            raise NotFoundError("completion", f"{habit_id}@{occurred_on.isoformat()}")
        logger.info(
            "Removed completion",
            extra={"habit_id": habit_id, "date": occurred_on.isoformat(), **state.to_dict()},
        )
        return state

    # Streaks
    def get_streak(self, habit_id: str) -> StreakState:
        self.get_habit(habit_id)
        return self.repository.get_streak(habit_id) or StreakState()

    def recompute_streak(self, habit_id: str) -> StreakState:
        habit = self.get_habit(habit_id)
        dates = [c.occurred_on for c in self.repository.list_completions(habit_id)]
        return self.repository.save_streak(habit_id, recompute(habit, dates))

    def recompute_all(
        self, *, failures: Optional[list[BatchFailure]] = None
    ) -> dict[str, StreakState]:
        """Recompute every habit's streak, skipping habits that fail validation."""
        results: dict[str, StreakState] = {}
        for habit in self.repository.list_habits(include_inactive=True):
            try:
                results[habit.id] = self.recompute_streak(habit.id)
            except ValidationError as exc:
                logger.warning("Skipping streak recompute for %s: %s", habit.id, exc)
                if failures is not None:
                    failures.append(BatchFailure(key=habit.id, error=exc))
        return results

    # Analytics
    def habits_with_stats(
        self,
        today: Optional[DateLike] = None,
        *,
        failures: Optional[list[BatchFailure]] = None,
    ) -> list[HabitWithStats]:
        day = parse_date(today, "today") if today is not None else date.today()
        habits = self.repository.list_habits()
        completions = {h.id: self.repository.list_completions(h.id) for h in habits}
        streaks = {}
        for habit in habits:
            state = self.repository.get_streak(habit.id)
            if state is not None:
                streaks[habit.id] = state
        return habits_with_derived_stats(
            habits,
            completions,
            streaks,
            day,
            window_days=self.window_days,
            failures=failures,
        )

    def daily_stats(
        self,
        start: DateLike,
        end: DateLike,
        *,
        failures: Optional[list[BatchFailure]] = None,
    ) -> list[DailyStat]:
        start_day = parse_date(start, "startDate")
        end_day = parse_date(end, "endDate")
        if end_day < start_day:
            raise ValidationError("endDate", "must not be before startDate")

        by_date: dict[date, list[HabitCompletion]] = defaultdict(list)
        for completion in self.repository.completions_between(start_day, end_day):
            by_date[completion.occurred_on].append(completion)
        return daily_stats(
            self.repository.list_habits(), by_date, start_day, end_day, failures=failures
        )

    def habit_calendar(
        self, habit_id: str, year: int, month: int, today: Optional[DateLike] = None
    ) -> list[dict[str, str]]:
        habit = self.get_habit(habit_id)
        done = {c.occurred_on for c in self.repository.list_completions(habit_id)}
        now = parse_date(today, "today") if today is not None else date.today()
        return month_calendar(habit, done, year, month, now)

    def today_summary(self, today: Optional[DateLike] = None) -> dict[str, Any]:
        return today_summary(self.habits_with_stats(today))


__all__ = ["UNSET", "HabitPatch", "HabitService"]
