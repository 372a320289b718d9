"""Habit repository protocol."""

from __future__ import annotations

from datetime import date
from typing import Callable, Optional, Protocol, Sequence

from ...models.habit import Habit, HabitCompletion
from ...services.streaks import StreakState

# (habit, previous state, completion dates after the mutation) -> new state
StreakDeriver = Callable[[Habit, StreakState, Sequence[date]], StreakState]


class HabitRepository(Protocol):
    """Persistence for habits, their completions and streak state.

    Implementations must serialize the two completion mutations per habit so
    that concurrent writers never derive streaks from a stale history.
    """

    def get_habit(self, habit_id: str) -> Optional[Habit]:
        """Retrieve a habit by ID, including soft-deleted ones."""
        ...

    def list_habits(self, include_inactive: bool = False) -> list[Habit]:
        """List habits, optionally including soft-deleted ones."""
        ...

    def create_habit(self, habit: Habit) -> Habit:
        """Persist a new habit together with a zeroed streak row."""
        ...

    def update_habit(self, habit: Habit) -> Habit:
        """Persist changes to an existing habit."""
        ...

    def soft_delete_habit(self, habit_id: str) -> bool:
        """Mark a habit inactive; False when it does not exist."""
        ...

    def list_completions(
        self, habit_id: str, start: Optional[date] = None, end: Optional[date] = None
    ) -> list[HabitCompletion]:
        """Completions for one habit, newest first, optionally bounded."""
        ...

    def completions_between(self, start: date, end: date) -> list[HabitCompletion]:
        """Completions for every habit within an inclusive range."""
        ...

    def get_completion(self, habit_id: str, occurred_on: date) -> Optional[HabitCompletion]:
        """Get a specific completion."""
        ...

    def record_completion(
        self, completion: HabitCompletion, derive: StreakDeriver
    ) -> tuple[HabitCompletion, StreakState]:
        """Insert a completion and store the streak produced by ``derive``."""
        ...

    def delete_completion(
        self, habit_id: str, occurred_on: date, derive: StreakDeriver
    ) -> Optional[StreakState]:
        """Remove a completion and store the re-derived streak; None if absent."""
        ...

    def get_streak(self, habit_id: str) -> Optional[StreakState]:
        """Stored streak state, or None when no row exists."""
        ...

    def save_streak(self, habit_id: str, state: StreakState) -> StreakState:
        """Upsert the streak row for a habit."""
        ...
