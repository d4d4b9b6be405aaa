from __future__ import annotations

from datetime import date, datetime, time, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.exceptions import ValidationError


def load_timezone(name: str) -> tzinfo:
    """Resolve an IANA zone name, raising ValidationError for unknown names."""
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValidationError(f"Unknown timezone: {name!r}")


def now_utc() -> datetime:
    """Current instant (UTC, timezone-aware).

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now(timezone.utc)


def parse_month(value: str) -> date:
    """Parse YYYY-MM string into the first day of that month."""
    try:
        return datetime.strptime(value, "%Y-%m").date()
    except ValueError:
        raise ValidationError("Invalid month (YYYY-MM)")


def month_start(day: date) -> date:
    return day.replace(day=1)


def next_month_start(day: date) -> date:
    first = month_start(day)
    if first.month == 12:
        return first.replace(year=first.year + 1, month=1)
    return first.replace(month=first.month + 1)


def local_midnight(day: date, tz: tzinfo) -> datetime:
    return datetime.combine(day, time.min, tzinfo=tz)


def day_bounds(day: date, tz: tzinfo) -> tuple[datetime, datetime]:
    """[local midnight, next local midnight) as UTC instants."""
    start = local_midnight(day, tz)
    end = local_midnight(date.fromordinal(day.toordinal() + 1), tz)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def month_bounds(month: date, tz: tzinfo) -> tuple[datetime, datetime]:
    """[first local midnight of month, first local midnight of next month) as UTC instants."""
    start = local_midnight(month_start(month), tz)
    end = local_midnight(next_month_start(month), tz)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def local_day(instant: datetime, tz: tzinfo) -> date:
    return instant.astimezone(tz).date()


def coerce_instant(value: object, tz: tzinfo) -> datetime:
    """Turn a datetime or ISO-8601 string into an aware UTC datetime.

    Naive values are read as wall-clock time in ``tz``.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        raw = value.strip()
        if not raw:
            raise ValidationError("Instant is required")
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(raw)
        except ValueError:
            raise ValidationError(f"Invalid instant: {value!r}")
    else:
        raise ValidationError("Invalid instant")

    if dt.tzinfo is None or dt.utcoffset() is None:
        dt = dt.replace(tzinfo=tz)
    return dt.astimezone(timezone.utc)


def to_db_utc(instant: datetime) -> datetime:
    """Aware instant -> naive UTC for DATETIME columns."""
    return instant.astimezone(timezone.utc).replace(tzinfo=None)


def from_db_utc(value: datetime | None) -> datetime | None:
    """Naive UTC DATETIME column value -> aware instant."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
