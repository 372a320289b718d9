"""Decide whether a habit is due on a given calendar date."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Protocol

from ..errors import ValidationError
from .dates import DateLike, day_difference, day_of_week, parse_date

MONDAY = 1


class Frequency(str, Enum):
    """Supported recurrence rules."""

    DAILY = "daily"
    ALTERNATE = "alternate"
    WEEKLY = "weekly"
    CUSTOM = "custom"


class ScheduledHabit(Protocol):
    """Fields of a habit the scheduling core reads."""

    frequency: Optional[str]
    created_at: datetime | date
    custom_schedule: Any


CustomRule = Callable[[Mapping[str, Any], date], bool]

# Custom schedule predicates keyed by the payload's ``kind`` entry.
_CUSTOM_RULES: dict[str, CustomRule] = {}


def register_custom_rule(kind: str, rule: CustomRule) -> None:
    """Install a predicate for custom payloads shaped ``{"kind": kind, ...}``."""

    _CUSTOM_RULES[kind] = rule


def unregister_custom_rule(kind: str) -> None:
    _CUSTOM_RULES.pop(kind, None)


def validate_frequency(habit: ScheduledHabit) -> Optional[Frequency]:
    """Return the habit's frequency, raising when it is empty or unset.

    An unrecognised value returns ``None``; such habits follow the daily
    streak rule and are never due.
    """

    raw = getattr(habit, "frequency", None)
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise ValidationError("frequency", "habit has no frequency set")
    try:
        return Frequency(raw)
    except ValueError:
        return None


def _custom_due(payload: Any, target: date) -> bool:
    if payload is None:
        return False
    if isinstance(payload, Mapping):
        rule = _CUSTOM_RULES.get(payload.get("kind"))
        if rule is not None:
            return bool(rule(payload, target))
    # No grammar for the payload: any non-null schedule counts as due.
    return True


def is_due(habit: ScheduledHabit, target: DateLike) -> bool:
    """Return True when ``habit`` should be performed on ``target``.

    Unknown or missing frequencies are never due.
    """

    day = parse_date(target)
    frequency = getattr(habit, "frequency", None)
    if frequency == Frequency.DAILY:
        return True
    if frequency == Frequency.ALTERNATE:
        return day_difference(habit.created_at, day) % 2 == 0
    if frequency == Frequency.WEEKLY:
        return day_of_week(day) == MONDAY
    if frequency == Frequency.CUSTOM:
        return _custom_due(habit.custom_schedule, day)
    return False


__all__ = [
    "CustomRule",
    "Frequency",
    "ScheduledHabit",
    "is_due",
    "register_custom_rule",
    "unregister_custom_rule",
    "validate_frequency",
]
