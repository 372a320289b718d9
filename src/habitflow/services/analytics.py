"""Completion analytics built on the schedule evaluator."""

from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import MAXYEAR, MINYEAR, date, timedelta
from enum import Enum
from typing import Any, Collection, Iterable, Mapping, Optional, Protocol, Sequence

from ..errors import ValidationError
from ..logging_config import get_logger
from .dates import DateLike, iter_dates, parse_date
from .schedule import ScheduledHabit, is_due, validate_frequency
from .streaks import EMPTY_STREAK, StreakState

logger = get_logger("services.analytics")

DEFAULT_WINDOW_DAYS = 30


class Completion(Protocol):
    habit_id: str
    occurred_on: date


class TrackedHabit(ScheduledHabit, Protocol):
    id: str


class DayStatus(str, Enum):
    """How a habit stands on one calendar day."""

    COMPLETED = "completed"
    PENDING = "pending"
    MISSED = "missed"
    NOT_SCHEDULED = "not-scheduled"


@dataclass(slots=True)
class BatchFailure:
    """A record skipped by a batch function, with the reason."""

    key: str
    error: Exception


@dataclass(frozen=True, slots=True)
class DailyStat:
    """Scheduled vs completed counts for one day."""

    date: date
    total_habits: int
    completed_habits: int
    completion_rate: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "totalHabits": self.total_habits,
            "completedHabits": self.completed_habits,
            "completionRate": self.completion_rate,
        }


@dataclass(slots=True)
class HabitWithStats:
    """A habit joined with its streak and derived flags for display."""

    habit: Any
    streak: StreakState
    completions: list[Any] = field(default_factory=list)
    completed_today: bool = False
    scheduled_today: bool = False
    completion_rate: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        payload = self.habit.to_dict() if hasattr(self.habit, "to_dict") else dict(vars(self.habit))
        payload.update(
            {
                "streak": self.streak.to_dict(),
                "completions": [
                    c.to_dict() if hasattr(c, "to_dict") else c for c in self.completions
                ],
                "completedToday": self.completed_today,
                "scheduledToday": self.scheduled_today,
                "completionRate": self.completion_rate,
            }
        )
        return payload


def _rate(done: int, total: int) -> float:
    return done / total * 100 if total > 0 else 0.0


def daily_stats(
    habits: Sequence[TrackedHabit],
    completions_by_date: Mapping[DateLike, Collection[Any]],
    start_date: DateLike,
    end_date: DateLike,
    *,
    failures: Optional[list[BatchFailure]] = None,
) -> list[DailyStat]:
    """Per-day scheduled/completed counts for every date in ``[start_date, end_date]``.

    ``completed_habits`` counts every completion recorded that day, whether or
    not its habit was due. Habits with an unset frequency and completion keys
    that are not dates are skipped and reported through ``failures``.
    """

    start = parse_date(start_date, "start_date")
    end = parse_date(end_date, "end_date")
    by_date: dict[date, Collection[Any]] = {}
    for key, value in completions_by_date.items():
        try:
            by_date[parse_date(key, "completions_by_date")] = value
        except ValidationError as exc:
            _record_failure(failures, str(key), exc)

    valid: list[TrackedHabit] = []
    for habit in habits:
        try:
            validate_frequency(habit)
        except ValidationError as exc:
            _record_failure(failures, str(getattr(habit, "id", "?")), exc)
            continue
        valid.append(habit)

    stats: list[DailyStat] = []
    for day in iter_dates(start, end):
        scheduled = sum(1 for habit in valid if is_due(habit, day))
        completed = len(by_date.get(day, ()))
        stats.append(
            DailyStat(
                date=day,
                total_habits=scheduled,
                completed_habits=completed,
                completion_rate=_rate(completed, scheduled),
            )
        )
    return stats


def habit_completion_rate(
    habit: ScheduledHabit,
    completions: Iterable[DateLike],
    window_days: int = DEFAULT_WINDOW_DAYS,
    *,
    today: Optional[DateLike] = None,
) -> float:
    """Percentage of due dates in the trailing window (today included) that were completed."""

    validate_frequency(habit)
    if window_days < 1:
        raise ValidationError("window_days", "must be at least 1")
    end = parse_date(today, "today") if today is not None else date.today()
    done = {parse_date(value, "completions") for value in completions}

    scheduled = completed = 0
    for offset in range(window_days):
        day = end - timedelta(days=offset)
        if is_due(habit, day):
            scheduled += 1
            if day in done:
                completed += 1
    return _rate(completed, scheduled)


def habits_with_derived_stats(
    habits: Sequence[TrackedHabit],
    completions_by_habit: Mapping[str, Sequence[Completion]],
    streaks_by_habit: Mapping[str, StreakState],
    today: DateLike,
    *,
    window_days: int = DEFAULT_WINDOW_DAYS,
    failures: Optional[list[BatchFailure]] = None,
) -> list[HabitWithStats]:
    """Join each habit with streak, completions and today's flags.

    A missing streak counts as all zeros. Habits that fail validation are
    skipped and reported through ``failures``.
    """

    day = parse_date(today, "today")
    results: list[HabitWithStats] = []
    for habit in habits:
        completions = list(completions_by_habit.get(habit.id, ()))
        try:
            dates = [c.occurred_on for c in completions]
            rate = habit_completion_rate(habit, dates, window_days, today=day)
        except ValidationError as exc:
            _record_failure(failures, str(habit.id), exc)
            continue
        results.append(
            HabitWithStats(
                habit=habit,
                streak=streaks_by_habit.get(habit.id) or EMPTY_STREAK,
                completions=completions,
                completed_today=day in dates,
                scheduled_today=is_due(habit, day),
                completion_rate=rate,
            )
        )
    return results


def habit_day_status(
    habit: ScheduledHabit,
    completion_dates: Collection[date],
    target: DateLike,
    today: DateLike,
) -> DayStatus:
    """Classify ``target`` for ``habit`` relative to ``today``."""

    day = parse_date(target, "date")
    now = parse_date(today, "today")
    if not is_due(habit, day):
        return DayStatus.NOT_SCHEDULED
    if day in completion_dates:
        return DayStatus.COMPLETED
    if day < now:
        return DayStatus.MISSED
    if day == now:
        return DayStatus.PENDING
    return DayStatus.NOT_SCHEDULED


def month_calendar(
    habit: ScheduledHabit,
    completion_dates: Collection[date],
    year: int,
    month: int,
    today: DateLike,
) -> list[dict[str, str]]:
    """Day-by-day statuses for one month, for calendar views."""

    if not 1 <= month <= 12:
        raise ValidationError("month", f"month must be 1-12, got {month}")
    if not MINYEAR <= year <= MAXYEAR:
        raise ValidationError("month", f"year must be {MINYEAR}-{MAXYEAR}, got {year}")
    _, last_day = calendar.monthrange(year, month)
    return [
        {
            "date": day.isoformat(),
            "status": habit_day_status(habit, completion_dates, day, today).value,
        }
        for day in iter_dates(date(year, month, 1), date(year, month, last_day))
    ]


def today_summary(habits: Iterable[HabitWithStats]) -> dict[str, Any]:
    """Headline numbers for today's dashboard."""

    items = list(habits)
    scheduled = [item for item in items if item.scheduled_today]
    completed = [item for item in scheduled if item.completed_today]
    return {
        "total": len(scheduled),
        "completed": len(completed),
        "completionRate": _rate(len(completed), len(scheduled)),
        "longestStreak": max((item.streak.current_streak for item in items), default=0),
    }


def _record_failure(failures: Optional[list[BatchFailure]], key: str, error: Exception) -> None:
    logger.warning("Skipping %s in batch: %s", key, error)
    if failures is not None:
        failures.append(BatchFailure(key=key, error=error))


__all__ = [
    "BatchFailure",
    "DEFAULT_WINDOW_DAYS",
    "DailyStat",
    "DayStatus",
    "HabitWithStats",
    "daily_stats",
    "habit_completion_rate",
    "habit_day_status",
    "habits_with_derived_stats",
    "month_calendar",
    "today_summary",
]
