import math
from datetime import date, datetime, time, timezone


def parse_local_date(value) -> date:
    """
    Parse 'YYYY-MM-DD' -> datetime.date built from its integer parts.
    Example: '2024-03-15' -> date(2024, 3, 15)

    Never routed through a generic ISO parser: those anchor the string to UTC
    midnight and can land on the previous day west of Greenwich.
    `date` values pass through; `datetime` values keep their own wall-clock day.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    parts = str(value).strip().split("-")
    if len(parts) != 3:
        raise ValueError("Date must be in YYYY-MM-DD format")

    year, month, day = map(int, parts)
    return date(year, month, day)


def sunday_weekday(d: date) -> int:
    """Weekday index with Sunday = 0 ... Saturday = 6."""
    return (d.weekday() + 1) % 7


def parse_time_of_day(value):
    """Parse time strings into datetime.time.

    Accepts common formats:
      - 'HH:MM' (24h)
      - 'HH:MM:SS' (24h)
      - 'H:MM AM/PM' (12h), case-insensitive
      - 'H AM/PM'

    `datetime.time` values pass through. Returns None for empty strings.
    """
    if value is None:
        return None
    if isinstance(value, time):
        return value
    s = str(value).strip()
    if s == "":
        return None

    candidates = [
        "%H:%M",
        "%H:%M:%S",
        "%I:%M %p",
        "%I %p",
    ]
    for fmt in candidates:
        try:
            return datetime.strptime(s, fmt).time()
        except ValueError:
            continue
    raise ValueError("Time must be in formats like 'HH:MM' or '10:00 AM'")


def time_to_hhmm(t) -> str | None:
    """Format datetime.time -> 'HH:MM'. Returns None if t is None."""
    if t is None:
        return None
    return f"{t.hour:02d}:{t.minute:02d}"


def time_to_hhmmss(t) -> str | None:
    """Format datetime.time -> 'HH:MM:SS'. Returns None if t is None."""
    if t is None:
        return None
    return f"{t.hour:02d}:{t.minute:02d}:{t.second:02d}"


def round_half_up(value: float, places: int = 0) -> float:
    """
    Round halves toward +infinity, e.g. 2.5 -> 3, -2.5 -> -2, 0.125 @2 -> 0.13.
    Python's round() rounds halves to even, which would shift displayed stats.
    """
    factor = 10 ** places
    result = math.floor(value * factor + 0.5) / factor
    if places == 0:
        return int(result)
    return result


def format_number(value) -> str:
    """Drop a trailing '.0' so 15.0 reads as '15'."""
    if value is None:
        return ""
    f = float(value)
    if f.is_integer():
        return str(int(f))
    return f"{f:g}"


def clean_number(value):
    """Decimal/float -> int when whole, float otherwise, for JSON payloads."""
    if value is None:
        return None
    f = float(value)
    return int(f) if f.is_integer() else f


def format_elapsed(start: datetime | None, end: datetime | None) -> str | None:
    """
    Elapsed wall time as '1h 5m' or '45m'. None if either end is missing.
    """
    if start is None or end is None:
        return None
    total_minutes = math.floor((end - start).total_seconds() / 60)
    hours = total_minutes // 60
    minutes = total_minutes % 60
    return f"{hours}h {minutes}m" if hours > 0 else f"{minutes}m"


def to_local_datetime(dt, tz_name: str | None = None):
    """Convert a datetime from source tz (assume UTC if naive) to local or given tz.

    - If `tz_name` is 'local' or None: use system local timezone.
    - If `tz_name` is IANA tz name (e.g., 'America/New_York'): use that.
    - If `dt` has no tzinfo, assume UTC.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    if tz_name and tz_name != "local":
        from zoneinfo import ZoneInfo
        return dt.astimezone(ZoneInfo(tz_name))
    return dt.astimezone()


def local_today(tz_name: str | None = None) -> date:
    """Today's calendar date in the configured timezone."""
    return to_local_datetime(datetime.now(timezone.utc), tz_name).date()


def local_day(dt, tz_name: str | None = None) -> date:
    """Calendar day of a timestamp; naive timestamps are taken as wall-clock."""
    if isinstance(dt, datetime):
        if dt.tzinfo is None:
            return dt.date()
        return to_local_datetime(dt, tz_name).date()
    return parse_local_date(dt)
