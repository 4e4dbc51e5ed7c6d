import re
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Any, List, Optional

from wellness_journal.config import get_settings

WEEKDAY_LABELS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

# seconds followed by a fraction of any length
_FRACTION = re.compile(r"(\d{2}:\d{2}:\d{2})\.(\d+)")


def get_timezone(tz: Optional[tzinfo] = None) -> tzinfo:
    return tz if tz is not None else get_settings().tz


def now_local(tz: Optional[tzinfo] = None) -> datetime:
    return datetime.now(get_timezone(tz))


def to_local(dt: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """Convert to the reference timezone; naive values are taken as local wall time"""
    zone = get_timezone(tz)
    if dt.tzinfo is None:
        if hasattr(zone, "localize"):
            return zone.localize(dt)
        return dt.replace(tzinfo=zone)
    return dt.astimezone(zone)


def _normalize_fraction(value: str) -> str:
    """Pad or trim fractional seconds to six digits"""
    return _FRACTION.sub(lambda m: f"{m.group(1)}.{(m.group(2) + '000000')[:6]}", value, count=1)


def parse_timestamp(value: Any, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """ISO-8601 string or datetime -> aware local datetime, None if unparsable"""
    if isinstance(value, datetime):
        return to_local(value, tz)
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        parsed = datetime.fromisoformat(_normalize_fraction(value.strip().replace("Z", "+00:00")))
    except ValueError:
        return None
    return to_local(parsed, tz)


def day_key(timestamp: datetime, tz: Optional[tzinfo] = None) -> date:
    """Calendar day of a timestamp in the reference timezone"""
    return to_local(timestamp, tz).date()


def local_midnight(day: date, tz: Optional[tzinfo] = None) -> datetime:
    return to_local(datetime.combine(day, time.min), tz)


def weekday_index(day: date) -> int:
    """0=Sunday ... 6=Saturday"""
    return (day.weekday() + 1) % 7


def weekday_label(day: date) -> str:
    return WEEKDAY_LABELS[weekday_index(day)]


def week_start(now: datetime, first_weekday: int = 0, tz: Optional[tzinfo] = None) -> datetime:
    """Midnight of the most recent first_weekday on or before now"""
    today = day_key(now, tz)
    offset = (weekday_index(today) - first_weekday) % 7
    return local_midnight(today - timedelta(days=offset), tz)


def last_n_days(today: date, n: int) -> List[date]:
    """n calendar days ending today, oldest first"""
    return [today - timedelta(days=i) for i in range(n - 1, -1, -1)]


def format_date(dt: datetime, fmt: str = "%b %d, %Y") -> str:
    return dt.strftime(fmt)
