"""Tests for the validation & normalization pipeline."""

from datetime import date, datetime, timezone

import pytest

from errors import ValidationError
from models import EventDraft, default_draft
from validation import MAX_CAPACITY, check_draft, normalize_draft, parse_draft, prepare_event, validate_form

START = datetime(2025, 6, 1, 18, 0, tzinfo=timezone.utc)
END = datetime(2025, 6, 1, 21, 0, tzinfo=timezone.utc)


@pytest.fixture
def form_values() -> dict:
    values = default_draft(START)
    values["name"] = "Launch Party"
    return values


class TestValidateForm:
    """The form schema run on every change."""

    def test_valid_values_have_no_errors(self, form_values):
        assert validate_form(form_values) == {}

    def test_default_draft_needs_a_name(self):
        errors = validate_form(default_draft(START))
        assert errors == {"name": "Event name is required"}

    def test_camel_case_keys_are_accepted(self):
        errors = validate_form({
            "name": "Launch Party",
            "startTime": START,
            "endTime": END,
            "backgroundStyle": {"type": "gradient", "colors": ["#FF5733", "#33FF57"]},
            "isPublic": False,
            "requireApproval": True,
        })
        assert errors == {}

    @pytest.mark.parametrize("capacity", [0, -5, "abc"])
    def test_capacity_must_be_positive_integer(self, form_values, capacity):
        form_values["capacity"] = capacity
        assert "capacity" in validate_form(form_values)

    def test_capacity_must_fit_the_column(self, form_values):
        form_values["capacity"] = MAX_CAPACITY + 1
        assert validate_form(form_values) == {"capacity": "Capacity must be a positive whole number"}

    def test_capacity_may_be_empty(self, form_values):
        form_values["capacity"] = None
        assert validate_form(form_values) == {}

    def test_colors_must_be_present(self, form_values):
        form_values["background_style"] = {"type": "solid", "colors": []}
        assert validate_form(form_values) == {"background_style": "Pick a background color"}

    def test_unknown_background_type(self, form_values):
        form_values["background_style"] = {"type": "striped", "colors": ["#000000"]}
        assert "background_style" in validate_form(form_values)

    def test_one_message_per_field(self, form_values):
        form_values["name"] = ""
        form_values["start_time"] = None
        errors = validate_form(form_values)
        assert set(errors) == {"name", "start_time"}


class TestCheckDraft:
    """Server-side checks, independent of anything the form did."""

    @pytest.mark.parametrize(
        "missing, message",
        [
            ("name", "name required"),
            ("startTime", "startTime required"),
            ("endTime", "endTime required"),
        ],
    )
    def test_required_fields(self, launch_party, missing, message):
        del launch_party[missing]
        with pytest.raises(ValidationError) as exc:
            prepare_event(launch_party)
        assert exc.value.message == message

    def test_empty_name(self, launch_party):
        launch_party["name"] = ""
        with pytest.raises(ValidationError, match="name required"):
            prepare_event(launch_party)

    def test_empty_time_string_counts_as_missing(self, launch_party):
        launch_party["startTime"] = ""
        with pytest.raises(ValidationError, match="startTime required"):
            prepare_event(launch_party)

    @pytest.mark.parametrize(
        "style",
        [
            None,
            {"type": "solid", "colors": []},
            {"type": "solid"},
            {"colors": ["#FF5733"]},
            {"type": "checkered", "colors": ["#FF5733"]},
        ],
    )
    def test_invalid_background_style(self, launch_party, style):
        launch_party["backgroundStyle"] = style
        with pytest.raises(ValidationError) as exc:
            prepare_event(launch_party)
        assert exc.value.message == "invalid background style"

    def test_explicit_zero_capacity_is_rejected(self, launch_party):
        launch_party["capacity"] = 0
        with pytest.raises(ValidationError, match="invalid capacity"):
            prepare_event(launch_party)

    def test_capacity_beyond_integer_column_is_rejected(self, launch_party):
        launch_party["capacity"] = 10**12
        with pytest.raises(ValidationError, match="invalid capacity"):
            prepare_event(launch_party)

    def test_largest_capacity_is_accepted(self, launch_party):
        launch_party["capacity"] = MAX_CAPACITY
        assert prepare_event(launch_party).capacity == MAX_CAPACITY

    def test_non_numeric_capacity_is_rejected(self, launch_party):
        launch_party["capacity"] = "lots"
        with pytest.raises(ValidationError, match="invalid capacity"):
            prepare_event(launch_party)

    def test_unparseable_time(self, launch_party):
        launch_party["startTime"] = "next friday-ish"
        with pytest.raises(ValidationError, match="invalid startTime"):
            prepare_event(launch_party)

    @pytest.mark.parametrize(
        "field, value",
        [
            ("startTime", "0001-01-01T00:00:00+01:00"),
            ("endTime", "9999-12-31T23:00:00-05:00"),
        ],
    )
    def test_time_that_cannot_be_shifted_to_utc(self, launch_party, field, value):
        launch_party[field] = value
        with pytest.raises(ValidationError) as exc:
            prepare_event(launch_party)
        assert exc.value.message == f"invalid {field}"

    def test_wrong_type_is_rejected(self, launch_party):
        launch_party["name"] = ["Launch", "Party"]
        with pytest.raises(ValidationError, match="invalid name"):
            prepare_event(launch_party)

    def test_non_mapping_payload(self):
        with pytest.raises(ValidationError, match="invalid event payload"):
            parse_draft(["Launch Party"])

    def test_check_draft_accepts_complete_draft(self, launch_party):
        check_draft(parse_draft(launch_party))


class TestNormalizeDraft:
    def test_absent_optionals_become_none(self, launch_party):
        event = prepare_event(launch_party)
        assert event.description is None
        assert event.location is None
        assert event.capacity is None

    def test_empty_description_becomes_none(self, launch_party):
        launch_party["description"] = ""
        assert prepare_event(launch_party).description is None

    def test_blank_location_becomes_none(self, launch_party):
        launch_party["location"] = {"address": ""}
        assert prepare_event(launch_party).location is None

    def test_location_with_coordinates_is_kept(self, launch_party):
        launch_party["location"] = {"address": "Karl Johans gate 1", "latitude": 59.91, "longitude": 10.75}
        location = prepare_event(launch_party).location
        assert location.address == "Karl Johans gate 1"
        assert location.latitude == 59.91

    def test_times_become_utc_instants(self, launch_party):
        launch_party["startTime"] = "2025-06-01T20:00:00+02:00"
        event = prepare_event(launch_party)
        assert event.start_time == START
        assert event.start_time.utcoffset().total_seconds() == 0
        assert event.end_time == END

    def test_naive_times_are_read_as_utc(self, launch_party):
        launch_party["startTime"] = datetime(2025, 6, 1, 18, 0)
        assert prepare_event(launch_party).start_time == START

    def test_plain_dates_start_at_midnight(self, launch_party):
        launch_party["startTime"] = date(2025, 6, 1)
        assert prepare_event(launch_party).start_time == datetime(2025, 6, 1, tzinfo=timezone.utc)

    def test_background_style_keeps_only_type_and_colors(self, launch_party):
        launch_party["backgroundStyle"] = {"type": "solid", "colors": ["#000000"], "opacity": 0.5}
        event = prepare_event(launch_party)
        assert event.background_style.model_dump() == {"type": "solid", "colors": ["#000000"]}

    def test_flags_default_when_unspecified(self, launch_party):
        del launch_party["isPublic"]
        del launch_party["requireApproval"]
        event = prepare_event(launch_party)
        assert event.is_public is True
        assert event.require_approval is False

    def test_explicit_false_is_kept(self, launch_party):
        launch_party["isPublic"] = False
        assert prepare_event(launch_party).is_public is False

    def test_accepts_draft_models(self):
        draft = EventDraft(
            name="Launch Party",
            start_time=START,
            end_time=END,
            background_style={"type": "gradient", "colors": ["#FF5733", "#33FF57"]},
            capacity=50,
        )
        event = normalize_draft(draft)
        assert event.capacity == 50
        assert event.background_style.type == "gradient"
