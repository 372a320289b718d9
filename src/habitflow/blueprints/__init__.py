"""JSON API blueprints and shared error handling."""

from __future__ import annotations

from flask import Flask, jsonify
from pydantic import ValidationError as PydanticValidationError

from ..errors import DuplicateCompletionError, NotFoundError, ValidationError
from ..logging_config import get_logger

logger = get_logger("blueprints")


def structured_errors(exc: PydanticValidationError) -> dict[str, list[str]]:
    """Group pydantic error messages by top-level field."""

    structured: dict[str, list[str]] = {}
    for error in exc.errors(include_url=False):
        loc = error.get("loc", ())
        key = str(loc[0]) if loc else "__root__"
        structured.setdefault(key, []).append(error.get("msg", "Invalid value"))
    return structured


def register_error_handlers(app: Flask) -> None:
    """Map domain and validation errors to JSON responses."""

    @app.errorhandler(PydanticValidationError)
    def _invalid_payload(exc: PydanticValidationError):
        return jsonify({"message": "Invalid request data", "errors": structured_errors(exc)}), 400

    @app.errorhandler(ValidationError)
    def _invalid_value(exc: ValidationError):
        return jsonify({"message": exc.message, "field": exc.field}), 400

    @app.errorhandler(NotFoundError)
    def _not_found(exc: NotFoundError):
        return jsonify({"message": f"{exc.entity.capitalize()} not found"}), 404

    @app.errorhandler(DuplicateCompletionError)
    def _duplicate(exc: DuplicateCompletionError):
        logger.info("Rejected duplicate completion", extra={"habit_id": exc.habit_id})
        return jsonify({"message": str(exc)}), 409


__all__ = ["register_error_handlers", "structured_errors"]
