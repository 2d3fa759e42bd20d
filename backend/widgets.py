"""
Field widgets of the create-event form.

Each widget owns one slice of the draft and returns the complete new value
of that slice. The form replaces the slice wholesale; there are no partial
updates. Values are plain dicts (snake_case keys) so they can be fed
straight back into `validate_form` and `EventService.create_event`.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from models import DEFAULT_BACKGROUND_COLOR, BackgroundStyle, BackgroundType, Location

# Background picker
DEFAULT_COLORS = [
    "#FF5733", "#33FF57", "#3357FF", "#F033FF",
    "#FF3333", "#33FFF3", "#FFB533", "#7A33FF",
]

PRESET_GRADIENTS = [
    ["#FF5733", "#33FF57"],
    ["#3357FF", "#F033FF"],
    ["#FF3333", "#33FFF3"],
    ["#FFB533", "#7A33FF"],
]

DEFAULT_GRADIENT = PRESET_GRADIENTS[0]


def _style(type_: BackgroundType, colors: list[str]) -> dict[str, Any]:
    return BackgroundStyle(type=type_, colors=colors).model_dump()


def switch_background_type(current: dict[str, Any], tab: BackgroundType) -> dict[str, Any]:
    """Switching tabs keeps the first color, or the stops when there are two."""

    colors = list(current.get("colors") or [])
    if tab == "solid":
        return _style("solid", [colors[0] if colors else DEFAULT_BACKGROUND_COLOR])
    return _style("gradient", colors if len(colors) >= 2 else list(DEFAULT_GRADIENT))


def pick_solid(color: str) -> dict[str, Any]:
    return _style("solid", [color])


def pick_gradient(colors: list[str]) -> dict[str, Any]:
    return _style("gradient", list(colors))


def set_gradient_stop(current: dict[str, Any], index: int, color: str) -> dict[str, Any]:
    """Replace one of the two custom gradient stops."""

    if index not in (0, 1):
        raise ValueError(f"gradient stop index must be 0 or 1, got {index}")
    colors = list(current.get("colors") or [])
    stops = [
        colors[0] if len(colors) > 0 else DEFAULT_GRADIENT[0],
        colors[1] if len(colors) > 1 else DEFAULT_GRADIENT[1],
    ]
    stops[index] = color
    return _style("gradient", stops)


# Time range selector
TIME_OPTIONS = [f"{hour:02d}:{minute:02d}" for hour in range(24) for minute in (0, 30)]


@dataclass(frozen=True)
class TimeRange:
    start_time: datetime
    end_time: datetime


def clock_of(value: datetime) -> str:
    return f"{value.hour:02d}:{value.minute:02d}"


def _with_clock(value: datetime, clock: str) -> datetime:
    if clock not in TIME_OPTIONS:
        raise ValueError(f"unknown time option {clock!r}")
    hours, minutes = (int(part) for part in clock.split(":"))
    return value.replace(hour=hours, minute=minutes, second=0, microsecond=0)


def _with_day(value: datetime, day: date) -> datetime:
    return value.replace(year=day.year, month=day.month, day=day.day)


def set_start_clock(current: TimeRange, clock: str) -> TimeRange:
    return TimeRange(_with_clock(current.start_time, clock), current.end_time)


def set_end_clock(current: TimeRange, clock: str) -> TimeRange:
    return TimeRange(current.start_time, _with_clock(current.end_time, clock))


def set_start_date(current: TimeRange, day: date) -> TimeRange:
    """Move the start to another day, keeping its clock time."""
    return TimeRange(_with_day(current.start_time, day), current.end_time)


def set_end_date(current: TimeRange, day: date) -> TimeRange:
    return TimeRange(current.start_time, _with_day(current.end_time, day))


# Location input
DEFAULT_MAP_CENTER = (22.5726, 88.3639)


def type_address(address: str) -> dict[str, Any]:
    """A hand-typed address; coordinates of any earlier pick no longer apply."""
    return Location(address=address).model_dump(exclude_none=True)


def pick_place(address: str, latitude: float, longitude: float) -> dict[str, Any]:
    """A place chosen from autocomplete, a map click or the device position."""
    return Location(address=address, latitude=latitude, longitude=longitude).model_dump()


def map_center(location: dict[str, Any] | None) -> tuple[float, float]:
    location = location or {}
    lat = location.get("latitude")
    lng = location.get("longitude")
    if lat is None or lng is None:
        return DEFAULT_MAP_CENTER
    return (lat, lng)
