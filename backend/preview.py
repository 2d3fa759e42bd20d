"""
Preview renderer.

Pure functions from an event (a stored `Event` or an in-progress
`EventDraft`) to what the preview card shows. No I/O and no hidden state,
so the form can call `render_preview` on every keystroke.

Drafts may be missing any optional field and still render. A background
style without colors, or a solid color that is not `#RRGGBB`, raises
`RenderError`.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from html import escape
from typing import Any, Literal, Mapping
from zoneinfo import ZoneInfo

from pydantic import ConfigDict
from pydantic import ValidationError as PydanticValidationError

from errors import RenderError
from models import CamelModel, EventDraft, NewEvent
from settings import settings
from validation import to_instant

HEX_COLOR = re.compile(r"^#([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})$")
GRADIENT_ANGLE = "135deg"
PLACEHOLDER_TITLE = "Event Name"

TextColor = Literal["black", "white"]


@dataclass(frozen=True)
class PreviewFormat:
    """How dates and times are shown.

    `date_format` and `time_format` are `str.format` templates. They get
    `dt` (the datetime in `timezone`) and `hour12` (1-12).
    """

    timezone: str = "UTC"
    date_format: str = "{dt:%a}, {dt:%b} {dt.day}, {dt.year}"
    time_format: str = "{hour12}:{dt:%M} {dt:%p}"

    @classmethod
    def from_settings(cls) -> "PreviewFormat":
        return cls(
            timezone=settings.display_timezone,
            date_format=settings.preview_date_format,
            time_format=settings.preview_time_format,
        )


class PreviewCard(CamelModel):
    """Everything the preview card displays. `None` means "do not render"."""

    model_config = ConfigDict(frozen=True)

    title: str
    description: str | None = None
    background_type: Literal["solid", "gradient"]
    background: str
    text_color: TextColor
    date_label: str | None = None
    time_label: str | None = None
    location: str | None = None
    capacity: int | None = None
    visibility: str | None = None
    requires_approval: bool = False


def brightness(color: str) -> float:
    """Perceived brightness (0-255) of a `#RRGGBB` color."""

    match = HEX_COLOR.match(color)
    if match is None:
        raise RenderError(f"unsupported color {color!r}")
    r, g, b = (int(part, 16) for part in match.groups())
    return (r * 299 + g * 587 + b * 114) / 1000


def contrast_color(color: str) -> TextColor:
    return "black" if brightness(color) > 128 else "white"


def _zone(name: str) -> tzinfo:
    if name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


def _local(value: datetime, fmt: PreviewFormat) -> datetime:
    try:
        return to_instant(value).astimezone(_zone(fmt.timezone))
    except OverflowError as exc:
        raise RenderError(f"time out of range: {value.isoformat()}") from exc


def format_date(value: datetime, fmt: PreviewFormat) -> str:
    local = _local(value, fmt)
    return fmt.date_format.format(dt=local, hour12=local.hour % 12 or 12)


def format_clock(value: datetime, fmt: PreviewFormat) -> str:
    local = _local(value, fmt)
    return fmt.time_format.format(dt=local, hour12=local.hour % 12 or 12)


def _as_previewable(data: Any) -> NewEvent | EventDraft:
    if isinstance(data, (NewEvent, EventDraft)):
        return data
    if isinstance(data, Mapping):
        try:
            return EventDraft.model_validate(dict(data))
        except PydanticValidationError as exc:
            raise RenderError("invalid preview data") from exc
    raise RenderError(f"cannot preview {type(data).__name__}")


def render_preview(
    data: NewEvent | EventDraft | Mapping[str, Any],
    fmt: PreviewFormat | None = None,
) -> PreviewCard:
    """Derive the preview card of an event or draft."""

    fmt = fmt or PreviewFormat()
    event = _as_previewable(data)

    style = event.background_style
    if style is None or not style.colors or style.type is None:
        raise RenderError("background style has no colors")

    if style.type == "solid":
        background = style.colors[0]
        text_color = contrast_color(background)
    else:
        background = f"linear-gradient({GRADIENT_ANGLE}, {', '.join(style.colors)})"
        text_color = "white"

    date_label = time_label = None
    if event.start_time is not None:
        date_label = format_date(event.start_time, fmt)
        if event.end_time is not None:
            time_label = f"{format_clock(event.start_time, fmt)} - {format_clock(event.end_time, fmt)}"

    location = None
    if event.location is not None and event.location.address:
        location = event.location.address

    visibility = None
    if event.is_public is not None:
        visibility = "Public" if event.is_public else "Private"

    return PreviewCard(
        title=event.name or PLACEHOLDER_TITLE,
        description=event.description or None,
        background_type=style.type,
        background=background,
        text_color=text_color,
        date_label=date_label,
        time_label=time_label,
        location=location,
        capacity=event.capacity if event.capacity not in (None, 0) else None,
        visibility=visibility,
        requires_approval=event.require_approval is True,
    )


def page_metadata(event: NewEvent | None) -> dict[str, str | None]:
    """Title and description of the preview page."""

    if event is None:
        return {"title": "Event Not Found", "description": None}
    return {
        "title": f"{event.name} | Event Preview",
        "description": event.description or None,
    }


def _detail(value: str, label: str) -> str:
    return (
        '<div class="detail">'
        f'<p class="value">{escape(value)}</p><p class="label">{escape(label)}</p>'
        "</div>"
    )


def render_html(card: PreviewCard) -> str:
    """HTML fragment of the preview card. All text is escaped."""

    prop = "background-color" if card.background_type == "solid" else "background-image"
    header = [f'<h1>{escape(card.title)}</h1>']
    if card.description:
        header.append(f'<p class="description">{escape(card.description)}</p>')
    when = []
    if card.date_label:
        when.append(f'<span class="date">{escape(card.date_label)}</span>')
    if card.time_label:
        when.append(f'<span class="time">{escape(card.time_label)}</span>')
    if when:
        header.append(f'<div class="when">{"".join(when)}</div>')

    details = []
    if card.location:
        details.append(
            '<div class="location"><p class="label">Location</p>'
            f'<p class="value">{escape(card.location)}</p></div>'
        )
    facts = []
    if card.capacity is not None:
        facts.append(_detail(str(card.capacity), "Capacity"))
    if card.visibility is not None:
        facts.append(_detail(card.visibility, "Visibility"))
    if card.requires_approval:
        facts.append('<div class="detail approval">Requires Approval</div>')
    if facts:
        details.append(f'<div class="facts">{"".join(facts)}</div>')

    return (
        '<div class="event-preview">'
        f'<div class="banner" style="{prop}: {escape(card.background)}; color: {card.text_color};">'
        f'{"".join(header)}</div>'
        f'<div class="details">{"".join(details)}</div>'
        "</div>"
    )


PAGE_STYLE = """
    body { font-family: Arial, sans-serif; margin: 0; background: #f3f4f6; }
    .page { min-height: 100vh; display: flex; align-items: center; justify-content: center; padding: 32px; }
    .event-preview { width: 100%; max-width: 672px; border-radius: 8px; overflow: hidden; box-shadow: 0 4px 12px rgba(0,0,0,.15); }
    .banner { padding: 32px; }
    .banner h1 { margin: 0 0 12px; font-size: 28px; }
    .when span { margin-right: 16px; font-size: 14px; }
    .details { background: #fff; padding: 24px; }
    .facts { display: flex; flex-wrap: wrap; gap: 24px; }
    .label { color: #6b7280; font-size: 12px; margin: 0; }
    .value { font-size: 14px; font-weight: bold; margin: 0; }
"""


def render_page(card: PreviewCard, metadata: Mapping[str, str | None]) -> str:
    """Standalone HTML document for the shareable preview route."""

    description = metadata.get("description")
    meta = f'<meta name="description" content="{escape(description)}"/>' if description else ""
    return (
        "<!doctype html>\n<html>\n<head>\n"
        '  <meta charset="utf-8"/>\n'
        f"  <title>{escape(metadata['title'] or '')}</title>\n"
        f"  {meta}\n"
        f"  <style>{PAGE_STYLE}</style>\n"
        "</head>\n<body>\n"
        f'<div class="page">{render_html(card)}</div>\n'
        "</body>\n</html>\n"
    )
