"""SQLModel implementation of the habit repository."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from ...domain.repositories.habit import StreakDeriver
from ...errors import DuplicateCompletionError, NotFoundError
from ...models.habit import Habit, HabitCompletion, HabitStreak
from ...services.streaks import StreakState
from ..database import SessionFactory


def _to_state(row: Optional[HabitStreak]) -> StreakState:
    if row is None:
        return StreakState()
    return StreakState(
        current_streak=row.current_streak,
        longest_streak=row.longest_streak,
        last_completed_date=row.last_completed_date,
    )


def _apply_state(row: HabitStreak, state: StreakState) -> None:
    row.current_streak = state.current_streak
    row.longest_streak = state.longest_streak
    row.last_completed_date = state.last_completed_date
    row.updated_at = datetime.now()


class SQLModelHabitRepository:
    """SQLModel-based habit repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_habit(self, habit_id: str) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        with self.session_factory() as session:
            obj = session.get(Habit, habit_id)
            if obj:
                session.expunge(obj)
            return obj

    def list_habits(self, include_inactive: bool = False) -> list[Habit]:
        """List habits ordered by creation time."""
        with self.session_factory() as session:
            statement = select(Habit).order_by(col(Habit.created_at), col(Habit.name))
            if not include_inactive:
                statement = statement.where(Habit.is_active == True)  # noqa: E712
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create_habit(self, habit: Habit) -> Habit:
        """Create a new habit with an empty streak."""
        with self.session_factory() as session:
            session.add(habit)
            session.add(HabitStreak(habit_id=habit.id))
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
            return habit

    def update_habit(self, habit: Habit) -> Habit:
        """Update an existing habit."""
        with self.session_factory() as session:
            if session.get(Habit, habit.id) is None:
                raise NotFoundError("habit", habit.id)
            habit = session.merge(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
            return habit

    def soft_delete_habit(self, habit_id: str) -> bool:
        """Flag a habit inactive, keeping its completions and streak."""
        with self.session_factory() as session:
            habit = session.get(Habit, habit_id)
            if habit is None:
                return False
            habit.is_active = False
            habit.updated_at = datetime.now()
            session.add(habit)
            session.commit()
            return True

    # Completion operations
    def list_completions(
        self, habit_id: str, start: Optional[date] = None, end: Optional[date] = None
    ) -> list[HabitCompletion]:
        """Completions for a habit, newest first."""
        with self.session_factory() as session:
            statement = select(HabitCompletion).where(HabitCompletion.habit_id == habit_id)
            if start is not None:
                statement = statement.where(HabitCompletion.occurred_on >= start)
            if end is not None:
                statement = statement.where(HabitCompletion.occurred_on <= end)
            statement = statement.order_by(col(HabitCompletion.occurred_on).desc())
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def completions_between(self, start: date, end: date) -> list[HabitCompletion]:
        """Completions across all habits within the inclusive range."""
        with self.session_factory() as session:
            statement = (
                select(HabitCompletion)
                .where(HabitCompletion.occurred_on >= start)
                .where(HabitCompletion.occurred_on <= end)
                .order_by(col(HabitCompletion.occurred_on))
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def get_completion(self, habit_id: str, occurred_on: date) -> Optional[HabitCompletion]:
        """Get a specific completion."""
        with self.session_factory() as session:
            obj = session.get(HabitCompletion, (habit_id, occurred_on))
            if obj:
                session.expunge(obj)
            return obj

    def record_completion(
        self, completion: HabitCompletion, derive: StreakDeriver
    ) -> tuple[HabitCompletion, StreakState]:
        """Insert a completion and persist the derived streak in one transaction."""
        with self.session_factory() as session:
            habit = session.get(Habit, completion.habit_id)
            if habit is None:
                raise NotFoundError("habit", completion.habit_id)
            streak_row = self._lock_streak(session, habit.id)

            if session.get(HabitCompletion, (completion.habit_id, completion.occurred_on)):
                raise DuplicateCompletionError(completion.habit_id, completion.occurred_on)
            session.add(completion)
            try:
                session.flush()
            except IntegrityError as exc:
                raise DuplicateCompletionError(completion.habit_id, completion.occurred_on) from exc

            state = derive(habit, _to_state(streak_row), self._completion_dates(session, habit.id))
            _apply_state(streak_row, state)
            session.add(streak_row)
            session.commit()
            session.expunge_all()
            return completion, state

    def delete_completion(
        self, habit_id: str, occurred_on: date, derive: StreakDeriver
    ) -> Optional[StreakState]:
        """Remove a completion and persist the re-derived streak."""
        with self.session_factory() as session:
            habit = session.get(Habit, habit_id)
            if habit is None:
                raise NotFoundError("habit", habit_id)
            streak_row = self._lock_streak(session, habit_id)

            completion = session.get(HabitCompletion, (habit_id, occurred_on))
            if completion is None:
                return None
            session.delete(completion)
            session.flush()

            state = derive(habit, _to_state(streak_row), self._completion_dates(session, habit_id))
            _apply_state(streak_row, state)
            session.add(streak_row)
            session.commit()
            return state

    # Streak operations
    def get_streak(self, habit_id: str) -> Optional[StreakState]:
        """Stored streak state for a habit."""
        with self.session_factory() as session:
            row = session.get(HabitStreak, habit_id)
            return _to_state(row) if row is not None else None

    def save_streak(self, habit_id: str, state: StreakState) -> StreakState:
        """Insert or update the streak row."""
        with self.session_factory() as session:
            row = self._lock_streak(session, habit_id)
            _apply_state(row, state)
            session.add(row)
            session.commit()
            return state

    @staticmethod
    def _lock_streak(session: Session, habit_id: str) -> HabitStreak:
        """Fetch the streak row FOR UPDATE, creating it when missing."""
        row = session.exec(
            select(HabitStreak).where(HabitStreak.habit_id == habit_id).with_for_update()
        ).first()
        if row is None:
            row = HabitStreak(habit_id=habit_id)
            session.add(row)
        return row

    @staticmethod
    def _completion_dates(session: Session, habit_id: str) -> list[date]:
        return list(
            session.exec(
                select(HabitCompletion.occurred_on)
                .where(HabitCompletion.habit_id == habit_id)
                .order_by(col(HabitCompletion.occurred_on).desc())
            ).all()
        )
