"""Notification routes."""

from __future__ import annotations

from flask import jsonify, request

from ...errors import ValidationError
from ...extensions import notification_service
from . import bp
from .forms import NotificationForm


@bp.get("")
def list_notifications():
    raw = request.args.get("limit")
    limit = 10
    if raw:
        try:
            limit = int(raw)
        except ValueError:
            raise ValidationError("limit", f"expected an integer, got {raw!r}") from None
    return jsonify([n.to_dict() for n in notification_service().list_recent(limit)])


@bp.post("")
def create_notification():
    form = NotificationForm.model_validate(request.get_json(silent=True) or {})
    data = form.model_dump()
    data["type"] = form.type.value
    notification = notification_service().add(**data)
    return jsonify(notification.to_dict()), 201


@bp.patch("/<int:notification_id>/read")
def mark_read(notification_id: int):
    notification_service().mark_read(notification_id)
    return "", 204
