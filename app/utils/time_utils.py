from datetime import date, datetime, time, timedelta, timezone
from typing import Callable, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

Clock = Callable[[], datetime]


def system_clock() -> datetime:
    return datetime.now(timezone.utc)


def get_zone(tz_name: str) -> ZoneInfo:
    try:
        return ZoneInfo(tz_name or "UTC")
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"Unknown timezone: {tz_name}") from e


def ensure_aware_utc(dt: datetime) -> datetime:
    """Return a timezone-aware UTC datetime. Naive values are taken as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    try:
        return dt.astimezone(timezone.utc)
    except OverflowError as e:
        raise ValueError(f"instant out of range: {dt.isoformat()}") from e


def parse_instant(value: Union[str, datetime]) -> datetime:
    """Parse an ISO-8601 instant (``Z`` suffix accepted) into aware UTC."""
    if isinstance(value, datetime):
        return ensure_aware_utc(value)
    text = (value or "").strip()
    if not text:
        raise ValueError("instant value is required")
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError as e:
        raise ValueError(f"invalid ISO-8601 instant: {value!r}") from e
    return ensure_aware_utc(parsed)


def to_iso(dt: datetime) -> str:
    return ensure_aware_utc(dt).isoformat().replace("+00:00", "Z")


def parse_hhmm(value: str) -> time:
    """Parse a wall-clock ``HH:MM`` string."""
    try:
        hours, minutes = value.split(":")
        if len(hours) != 2 or len(minutes) != 2:
            raise ValueError
        return time(int(hours), int(minutes))
    except (AttributeError, ValueError) as e:
        raise ValueError(f"time must be HH:MM, got {value!r}") from e


def day_of_week(day: date) -> int:
    """Sunday=0 ... Saturday=6."""
    return (day.weekday() + 1) % 7


def start_of_week(day: date) -> date:
    return day - timedelta(days=day_of_week(day))


def week_number(day: date) -> int:
    """Week of year, weeks starting on Sunday, week 1 holding January 1st.

    The closing days of December roll into week 1 of the following year when
    that week contains the next January 1st.
    """
    week_start = start_of_week(day)
    if (week_start + timedelta(days=6)).year > day.year:
        return 1
    first_week_start = start_of_week(date(day.year, 1, 1))
    return (week_start - first_week_start).days // 7 + 1


def week_number_for_instant(instant: datetime, tz: ZoneInfo) -> int:
    return week_number(local_date(instant, tz))


def local_date(instant: datetime, tz: ZoneInfo) -> date:
    return ensure_aware_utc(instant).astimezone(tz).date()


def start_of_day(instant: datetime, tz: ZoneInfo) -> datetime:
    """Midnight (in ``tz``) of the local day holding ``instant``, as UTC."""
    return combine_local(local_date(instant, tz), time(0, 0), tz)


def combine_local(day: date, wall_time: time, tz: ZoneInfo) -> datetime:
    return datetime.combine(day, wall_time, tzinfo=tz).astimezone(timezone.utc)


def iter_days(first: date, last: date):
    current = first
    while current <= last:
        yield current
        current += timedelta(days=1)
