"""Habit, completion and calendar routes."""

from __future__ import annotations

import re
from datetime import date

from flask import jsonify, request

from ...errors import ValidationError
from ...extensions import habit_service
from ...services.dates import parse_date
from . import bp
from .forms import CompletionForm, HabitForm, HabitPatchForm

_MONTH = re.compile(r"^(\d{4})-(\d{2})$")


def _json_body() -> dict:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


@bp.get("")
def list_habits():
    """Active habits with streaks, completions and today's flags."""

    return jsonify([item.to_dict() for item in habit_service().habits_with_stats()])


@bp.get("/<habit_id>")
def get_habit(habit_id: str):
    return jsonify(habit_service().get_habit(habit_id).to_dict())


@bp.post("")
def create_habit():
    form = HabitForm.model_validate(_json_body())
    habit = habit_service().create_habit(**form.service_kwargs())
    return jsonify(habit.to_dict()), 201


@bp.patch("/<habit_id>")
def update_habit(habit_id: str):
    form = HabitPatchForm.model_validate(_json_body())
    habit = habit_service().update_habit(habit_id, form.to_patch())
    return jsonify(habit.to_dict())


@bp.delete("/<habit_id>")
def delete_habit(habit_id: str):
    habit_service().delete_habit(habit_id)
    return "", 204


@bp.get("/<habit_id>/completions")
def list_completions(habit_id: str):
    completions = habit_service().list_completions(
        habit_id,
        request.args.get("startDate") or None,
        request.args.get("endDate") or None,
    )
    return jsonify([c.to_dict() for c in completions])


@bp.post("/<habit_id>/completions")
def add_completion(habit_id: str):
    form = CompletionForm.model_validate(_json_body())
    completion, streak = habit_service().add_completion(habit_id, form.day, form.notes)
    payload = completion.to_dict()
    payload["streak"] = streak.to_dict()
    return jsonify(payload), 201


@bp.delete("/<habit_id>/completions/<day>")
def remove_completion(habit_id: str, day: str):
    habit_service().remove_completion(habit_id, parse_date(day, "date"))
    return "", 204


@bp.get("/<habit_id>/calendar")
def habit_calendar(habit_id: str):
    """Per-day statuses for ``?month=YYYY-MM`` (defaults to the current month)."""

    raw = request.args.get("month")
    if raw:
        match = _MONTH.match(raw.strip())
        if not match:
            raise ValidationError("month", f"expected YYYY-MM, got {raw!r}")
        year, month = int(match.group(1)), int(match.group(2))
    else:
        today = date.today()
        year, month = today.year, today.month
    days = habit_service().habit_calendar(habit_id, year, month)
    return jsonify({"habitId": habit_id, "month": f"{year:04d}-{month:02d}", "days": days})
