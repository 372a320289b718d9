"""Analytics routes."""

from __future__ import annotations

from flask import jsonify, request

from ...errors import ValidationError
from ...extensions import habit_service
from . import bp


@bp.get("/daily-stats")
def daily_stats():
    """Scheduled vs completed counts for each day in ``startDate..endDate``."""

    start = request.args.get("startDate")
    end = request.args.get("endDate")
    if not start or not end:
        raise ValidationError("startDate" if not start else "endDate", "startDate and endDate are required")
    stats = habit_service().daily_stats(start, end)
    return jsonify([stat.to_dict() for stat in stats])


@bp.get("/today")
def today():
    return jsonify(habit_service().today_summary())
