from __future__ import annotations

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from src.timeclock.timeclock.common.datetime_utils import (
    coerce_instant,
    from_db_utc,
    load_timezone,
    month_bounds,
    parse_month,
    to_db_utc,
)
from src.timeclock.timeclock.common.formatting import format_hhmm, format_minutes, progress_percentage
from src.timeclock.timeclock.common.validators import optional_text, parse_choice, parse_optional_int, require_range
from src.timeclock.timeclock.core.enums import PunchKind
from src.timeclock.timeclock.core.exceptions import ValidationError

SP = ZoneInfo("America/Sao_Paulo")


def test_format_minutes():
    assert format_minutes(485) == "+8h05min"
    assert format_minutes(-30) == "-0h30min"
    assert format_minutes(0) == "+0h00min"
    assert format_minutes(-90, signed=False) == "1h30min"
    assert format_hhmm(545) == "09:05"


def test_progress_is_capped():
    assert progress_percentage(240, 480, cap=150) == pytest.approx(50.0)
    assert progress_percentage(1000, 480, cap=150) == pytest.approx(150.0)
    assert progress_percentage(100, 0, cap=150) == 0.0


def test_parse_month():
    assert parse_month("2024-03") == date(2024, 3, 1)
    with pytest.raises(ValidationError):
        parse_month("03/2024")


def test_month_bounds_are_local_midnights():
    start, end = month_bounds(date(2024, 3, 20), SP)

    assert start == datetime(2024, 3, 1, 3, 0, tzinfo=timezone.utc)
    assert end == datetime(2024, 4, 1, 3, 0, tzinfo=timezone.utc)


def test_coerce_instant_variants():
    utc = datetime(2024, 3, 1, 11, 45, tzinfo=timezone.utc)

    assert coerce_instant("2024-03-01T08:45", SP) == utc
    assert coerce_instant("2024-03-01T11:45:00Z", SP) == utc
    assert coerce_instant(datetime(2024, 3, 1, 8, 45), SP) == utc
    assert coerce_instant("2024-03-01T08:45", SP).tzinfo is timezone.utc

    with pytest.raises(ValidationError):
        coerce_instant("", SP)
    with pytest.raises(ValidationError):
        coerce_instant(12345, SP)


def test_db_round_trip_keeps_instant():
    instant = datetime(2024, 3, 1, 8, 45, 30, 123456, tzinfo=SP)

    stored = to_db_utc(instant)
    assert stored.tzinfo is None
    assert from_db_utc(stored) == instant
    assert from_db_utc(None) is None


def test_unknown_timezone():
    with pytest.raises(ValidationError):
        load_timezone("Mars/Olympus_Mons")


def test_parsers():
    assert parse_choice(PunchKind, " OUT ", "Kind") is PunchKind.OUT
    with pytest.raises(ValidationError):
        parse_choice(PunchKind, "lunch", "Kind")

    assert parse_optional_int("", "Punch") is None
    assert parse_optional_int("12", "Punch") == 12
    with pytest.raises(ValidationError):
        parse_optional_int("abc", "Punch")


def test_optional_text():
    assert optional_text(None) is None
    assert optional_text("   ") is None
    assert optional_text(" late bus ") == "late bus"
    with pytest.raises(ValidationError):
        optional_text(5, "Note")


def test_range_rejects_non_finite():
    assert require_range(45.0, "Latitude", -90.0, 90.0) == 45.0
    with pytest.raises(ValidationError):
        require_range(float("nan"), "Latitude", -90.0, 90.0)
    with pytest.raises(ValidationError):
        require_range(float("inf"), "Longitude", -180.0, 180.0)
