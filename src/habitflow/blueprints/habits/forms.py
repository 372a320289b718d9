"""Request models for habit and completion endpoints."""

from __future__ import annotations

import datetime as dt
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ...services.habits import HabitPatch
from ...services.schedule import Frequency

_REMINDER_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )


class HabitForm(_CamelModel):
    """Payload for creating a habit."""

    name: str = Field(min_length=1, max_length=100, description="Short label for the habit")
    category: str = Field(min_length=1, max_length=64)
    description: Optional[str] = Field(default=None, max_length=400)
    frequency: Frequency = Field(description="Recurrence rule")
    custom_schedule: Optional[dict[str, Any]] = None
    reminder_time: Optional[str] = Field(default=None, pattern=_REMINDER_PATTERN)
    color: str = Field(default="#6366F1", max_length=16)
    icon: str = Field(default="fa-star", max_length=32)
    is_active: bool = True

    def service_kwargs(self) -> dict[str, Any]:
        data = self.model_dump()
        data["frequency"] = self.frequency.value
        return data


class HabitPatchForm(_CamelModel):
    """Payload for partially updating a habit; omitted fields are untouched."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    category: Optional[str] = Field(default=None, min_length=1, max_length=64)
    description: Optional[str] = Field(default=None, max_length=400)
    frequency: Optional[Frequency] = None
    custom_schedule: Optional[dict[str, Any]] = None
    reminder_time: Optional[str] = Field(default=None, pattern=_REMINDER_PATTERN)
    color: Optional[str] = Field(default=None, max_length=16)
    icon: Optional[str] = Field(default=None, max_length=32)
    is_active: Optional[bool] = None

    @field_validator("name", "category", "frequency", "color", "icon", "is_active", mode="before")
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        """These columns are required; an explicit null is not a valid update."""

        if value is None:
            raise ValueError("may not be null")
        return value

    def to_patch(self) -> HabitPatch:
        data = self.model_dump(exclude_unset=True)
        if isinstance(data.get("frequency"), Frequency):
            data["frequency"] = data["frequency"].value
        return HabitPatch.from_mapping(data)


class CompletionForm(_CamelModel):
    """Payload for recording a completion."""

    day: dt.date = Field(alias="date")
    notes: Optional[str] = Field(default=None, max_length=400)

    @field_validator("day", mode="before")
    @classmethod
    def require_iso_string(cls, value: Any) -> Any:
        """Accept only ``YYYY-MM-DD`` strings (or date objects)."""

        if isinstance(value, dt.date):
            return value
        if isinstance(value, str) and len(value.strip()) == 10:
            return value.strip()
        raise ValueError("expected a YYYY-MM-DD date")


__all__ = ["CompletionForm", "HabitForm", "HabitPatchForm"]
