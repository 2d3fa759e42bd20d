"""
Validation & normalization pipeline.

Two layers check the same required fields on purpose:

1. `validate_form()` is the form schema. The create-event form runs it on
   every change and only submits when it returns no messages.
2. `prepare_event()` is what the gateway runs before a write. It trusts
   nothing the client did and turns the draft into a `NewEvent`:

       payload -> parse_draft() -> check_draft() -> normalize_draft()

Every failure in layer 2 is raised as `errors.ValidationError`.
"""

from datetime import datetime, timezone
from typing import Annotated, Any, Mapping

from pydantic import Field
from pydantic import ValidationError as PydanticValidationError

from errors import ValidationError
from models import BackgroundStyle, CamelModel, EventDraft, Location, NewEvent

# Largest value the INTEGER capacity column holds
MAX_CAPACITY = 2**31 - 1

# Form-level messages for fields where the pydantic default reads badly
FORM_MESSAGES = {
    "name": "Event name is required",
    "background_style": "Pick a background color",
    "capacity": "Capacity must be a positive whole number",
}


class EventForm(CamelModel):
    """Schema the form values must satisfy before submission."""

    name: str = Field(min_length=1)
    description: str | None = None
    start_time: datetime
    end_time: datetime
    location: Location | None = None
    background_style: BackgroundStyle
    is_public: bool
    require_approval: bool
    capacity: Annotated[int, Field(gt=0, le=MAX_CAPACITY)] | None = None


def field_keys(model: type[CamelModel]) -> dict[str, str]:
    """Map both the field name and its alias to the field name."""
    keys = {}
    for name, info in model.model_fields.items():
        keys[name] = name
        if info.alias:
            keys[info.alias] = name
    return keys


def _first_errors(model: type[CamelModel], exc: PydanticValidationError) -> dict[str, str]:
    keys = field_keys(model)
    out: dict[str, str] = {}
    for err in exc.errors():
        loc = err.get("loc") or ("__root__",)
        field = keys.get(str(loc[0]), str(loc[0]))
        out.setdefault(field, err["msg"])
    return out


def validate_form(values: Mapping[str, Any]) -> dict[str, str]:
    """Return one message per invalid field; an empty dict means valid."""

    try:
        EventForm.model_validate(dict(values))
    except PydanticValidationError as exc:
        return {
            field: FORM_MESSAGES.get(field, msg)
            for field, msg in _first_errors(EventForm, exc).items()
        }
    return {}


def parse_draft(payload: EventDraft | Mapping[str, Any]) -> EventDraft:
    """Coerce a raw payload into an `EventDraft`, rejecting wrong types."""

    if isinstance(payload, EventDraft):
        return payload
    if not isinstance(payload, Mapping):
        raise ValidationError("invalid event payload")

    try:
        return EventDraft.model_validate(dict(payload))
    except PydanticValidationError as exc:
        field = next(iter(_first_errors(EventDraft, exc)))
        if field == "background_style":
            raise ValidationError("invalid background style") from exc
        alias = EventDraft.model_fields[field].alias if field in EventDraft.model_fields else None
        raise ValidationError(f"invalid {alias or field}") from exc


def check_draft(draft: EventDraft) -> None:
    """Required fields and value ranges the store relies on."""

    if draft.name is None or draft.name == "":
        raise ValidationError("name required")
    if draft.start_time is None:
        raise ValidationError("startTime required")
    if draft.end_time is None:
        raise ValidationError("endTime required")

    style = draft.background_style
    if style is None or style.type is None or not style.colors:
        raise ValidationError("invalid background style")

    if draft.capacity is not None and not 0 < draft.capacity <= MAX_CAPACITY:
        raise ValidationError("invalid capacity")


def to_instant(value: datetime) -> datetime:
    """Aware UTC datetime. Naive values are read as UTC."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _instant(value: datetime, alias: str) -> datetime:
    # Offsets can push 0001-01-01 or 9999-12-31 outside datetime's range
    try:
        return to_instant(value)
    except OverflowError as exc:
        raise ValidationError(f"invalid {alias}") from exc


def _normalize_location(location: Location | None) -> Location | None:
    if location is None:
        return None
    if location.address.strip() == "" and location.latitude is None and location.longitude is None:
        return None
    return location


def normalize_draft(draft: EventDraft) -> NewEvent:
    """Turn a checked draft into the exact record the store receives."""

    style = draft.background_style
    return NewEvent(
        name=draft.name,
        description=None if draft.description in (None, "") else draft.description,
        start_time=_instant(draft.start_time, "startTime"),
        end_time=_instant(draft.end_time, "endTime"),
        location=_normalize_location(draft.location),
        # Only type and colors survive; anything else the client sent is dropped
        background_style=BackgroundStyle(type=style.type, colors=list(style.colors)),
        is_public=True if draft.is_public is None else draft.is_public,
        require_approval=False if draft.require_approval is None else draft.require_approval,
        capacity=draft.capacity,
    )


def prepare_event(payload: EventDraft | Mapping[str, Any]) -> NewEvent:
    draft = parse_draft(payload)
    check_draft(draft)
    return normalize_draft(draft)
