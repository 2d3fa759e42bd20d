"""
Create-event form controller.

Holds the draft while the user edits it, re-validates after every change,
renders the live preview and submits through `EventService`. A failed
submit never clears the draft.
"""

import copy
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping

from errors import RenderError
from models import Event, default_draft
from preview import PreviewCard, PreviewFormat, render_preview
from service_events import EventService
from validation import EventForm, field_keys, validate_form
from widgets import TimeRange

logger = logging.getLogger(__name__)

FAILURE_NOTICE = "Failed to create event. Please try again."


def preview_path(event_id: Any) -> str:
    return f"/preview/{event_id}"


@dataclass(frozen=True)
class SubmitOutcome:
    """What the page does after a submit: navigate, or show a notice."""

    success: bool
    redirect_to: str | None = None
    notice: str | None = None
    event: Event | None = None
    errors: dict[str, str] = field(default_factory=dict)


class CreateEventForm:
    """One form session.

    `values` uses snake_case field names. Widgets in `widgets.py` produce
    whole replacement values for their slice; pass them to the matching
    setter.
    """

    def __init__(
        self,
        service: EventService,
        now: datetime | None = None,
        fmt: PreviewFormat | None = None,
    ):
        self.service = service
        self.fmt = fmt or PreviewFormat.from_settings()
        self.values: dict[str, Any] = default_draft(now)
        self.errors: dict[str, str] = {}
        self.is_submitting = False
        self._revalidate()

    def _revalidate(self) -> None:
        self.errors = validate_form(self.values)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def can_submit(self) -> bool:
        return self.is_valid and not self.is_submitting

    def set_value(self, name: str, value: Any) -> None:
        if name not in self.values:
            raise KeyError(name)
        self.values[name] = value
        self._revalidate()

    def load(self, values: Mapping[str, Any]) -> None:
        """Replace every field present in `values` (snake_case or camelCase keys)."""

        keys = field_keys(EventForm)
        for key, value in values.items():
            if key in keys:
                self.values[keys[key]] = value
        self._revalidate()

    def set_background_style(self, style: Mapping[str, Any]) -> None:
        self.set_value("background_style", dict(style))

    def set_location(self, location: Mapping[str, Any] | None) -> None:
        self.set_value("location", None if location is None else dict(location))

    @property
    def time_range(self) -> TimeRange:
        return TimeRange(self.values["start_time"], self.values["end_time"])

    def set_time_range(self, value: TimeRange) -> None:
        self.values["start_time"] = value.start_time
        self.values["end_time"] = value.end_time
        self._revalidate()

    def set_capacity_input(self, text: str) -> None:
        """Capacity as typed in the number box; empty means no limit."""

        text = text.strip()
        if text == "":
            self.set_value("capacity", None)
            return
        try:
            self.set_value("capacity", int(text))
        except ValueError:
            # Kept as typed so the schema reports it
            self.set_value("capacity", text)

    def preview(self) -> PreviewCard | None:
        """Best-effort card for the current draft, valid or not."""

        try:
            return render_preview(self.values, self.fmt)
        except RenderError as e:
            logger.warning("Preview unavailable: %s", e.message)
            return None

    def submit(self) -> SubmitOutcome:
        self._revalidate()
        if not self.can_submit:
            return SubmitOutcome(success=False, errors=dict(self.errors))

        draft = copy.deepcopy(self.values)
        self.is_submitting = True
        try:
            result = self.service.create_event(draft)
        finally:
            self.is_submitting = False

        if result.success:
            return SubmitOutcome(
                success=True,
                redirect_to=preview_path(result.data.id),
                event=result.data,
            )

        logger.error("Failed to create event: %s", result.error)
        return SubmitOutcome(success=False, notice=FAILURE_NOTICE)
