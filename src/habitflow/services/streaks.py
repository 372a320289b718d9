"""Streak derivation from a habit's completion history.

Two entry points share the same gap rules:

* :func:`on_completion_added` folds one new completion into an existing
  :class:`StreakState`. Completions must arrive in non-decreasing date order;
  the function does not detect violations.
* :func:`recompute` rebuilds the state from the full history. Use it after a
  removal or after inserting a completion older than ``last_completed_date``.

For ``alternate`` habits consecutive occurrences are two days apart and a one
day gap stays inside the current cycle. For every other frequency consecutive
occurrences are one day apart and a zero day gap is tolerated.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import Iterable, Optional

from .dates import DateLike, day_difference, parse_date
from .schedule import Frequency, ScheduledHabit, validate_frequency


@dataclass(frozen=True, slots=True)
class StreakState:
    """Derived streak values for one habit."""

    current_streak: int = 0
    longest_streak: int = 0
    last_completed_date: Optional[date] = None

    def to_dict(self) -> dict[str, object]:
        return {
            "currentStreak": self.current_streak,
            "longestStreak": self.longest_streak,
            "lastCompletedDate": (
                self.last_completed_date.isoformat() if self.last_completed_date else None
            ),
        }


EMPTY_STREAK = StreakState()


def _gaps_for(habit: ScheduledHabit) -> tuple[int, int]:
    """Return (expected_gap, tolerated_gap) for the habit's frequency."""

    if validate_frequency(habit) is Frequency.ALTERNATE:
        return 2, 1
    return 1, 0


def on_completion_added(
    habit: ScheduledHabit, state: Optional[StreakState], new_date: DateLike
) -> StreakState:
    """Fold a completion on ``new_date`` into ``state``."""

    expected_gap, tolerated_gap = _gaps_for(habit)
    state = state or EMPTY_STREAK
    day = parse_date(new_date, "date")

    if state.last_completed_date is None:
        streak = 1
    else:
        gap = day_difference(state.last_completed_date, day)
        if gap == expected_gap:
            streak = state.current_streak + 1
        elif gap == tolerated_gap:
            streak = state.current_streak
        else:
            streak = 1

    return replace(
        state,
        current_streak=streak,
        longest_streak=max(state.longest_streak, streak),
        last_completed_date=day,
    )


def recompute(habit: ScheduledHabit, completions: Iterable[DateLike]) -> StreakState:
    """Rebuild streak state from every completion date of ``habit``."""

    expected_gap, tolerated_gap = _gaps_for(habit)
    days = sorted((parse_date(value, "date") for value in completions), reverse=True)
    if not days:
        return EMPTY_STREAK

    run = 1
    longest = 0
    current: Optional[int] = None
    for later, earlier in zip(days, days[1:]):
        gap = day_difference(earlier, later)
        if gap == expected_gap:
            run += 1
        elif gap != tolerated_gap:
            if current is None:
                current = run
            longest = max(longest, run)
            run = 1

    if current is None:
        current = run
    longest = max(longest, run)

    return StreakState(
        current_streak=current,
        longest_streak=longest,
        last_completed_date=days[0],
    )


__all__ = ["EMPTY_STREAK", "StreakState", "on_completion_added", "recompute"]
