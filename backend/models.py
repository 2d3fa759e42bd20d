"""
Pydantic models used across the backend.

Python code uses snake_case field names; the JSON API speaks camelCase
(`startTime`, `backgroundStyle`, ...). Every model accepts both spellings
on input and dumps camelCase with `by_alias=True`.

Shapes:
- `EventDraft`: what a client submits. Every field may be missing; the
  gateway decides what is required (see `validation.py`).
- `NewEvent`: a validated, normalized draft ready for the `events` table.
- `Event`: a stored row, with the store-assigned `id` and timestamps.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

BackgroundType = Literal["solid", "gradient"]

DEFAULT_BACKGROUND_COLOR = "#FF5733"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BackgroundStyle(CamelModel):
    """Header background. Only `colors[0]` matters for `solid`."""

    type: BackgroundType
    colors: list[str] = Field(min_length=1)


class Location(CamelModel):
    """Address with optional coordinates picked on the map."""

    address: str
    latitude: float | None = None
    longitude: float | None = None


class BackgroundStyleDraft(CamelModel):
    """Background style as submitted; completeness is checked by the gateway."""

    type: BackgroundType | None = None
    colors: list[str] | None = None


class EventDraft(CamelModel):
    """Input shape for an event sent by clients.

    Fields keep whatever the client sent (after type checks) so the
    gateway can tell "omitted" from "explicitly empty":
    - `start_time` / `end_time`: datetimes, dates or ISO-8601 strings.
      An empty string counts as omitted.
    - `location`: `None` when the client never picked one.
    - `capacity`: `None` when omitted; `0` stays `0` and is rejected later.
    """

    name: str | None = None
    description: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    location: Location | None = None
    background_style: BackgroundStyleDraft | None = None
    is_public: bool | None = None
    require_approval: bool | None = None
    capacity: int | None = None

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def _date_like(cls, value: Any) -> Any:
        if isinstance(value, str) and value.strip() == "":
            return None
        if isinstance(value, date) and not isinstance(value, datetime):
            return datetime(value.year, value.month, value.day)
        return value


class NewEvent(CamelModel):
    """A normalized event, exactly as it is written to the store."""

    name: str
    description: str | None = None
    start_time: datetime
    end_time: datetime
    location: Location | None = None
    background_style: BackgroundStyle
    is_public: bool = True
    require_approval: bool = False
    capacity: int | None = None


class Event(NewEvent):
    """Complete event model with store-assigned metadata."""

    id: UUID
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


def default_draft(now: datetime | None = None) -> dict[str, Any]:
    """Initial values of the create-event form: a one hour event starting now."""

    now = now or datetime.now(timezone.utc)
    return {
        "name": "",
        "description": "",
        "start_time": now,
        "end_time": now + timedelta(hours=1),
        "background_style": {"type": "solid", "colors": [DEFAULT_BACKGROUND_COLOR]},
        "is_public": True,
        "require_approval": False,
        "capacity": None,
        "location": None,
    }
