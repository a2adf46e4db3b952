"""
Clock and business identifier helpers shared by both backends.
"""
import secrets
import string
from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional

import pytz

from ..config import settings
from ..errors import InvalidInput

BASE36_ALPHABET = string.digits + string.ascii_uppercase


def utcnow() -> datetime:
    """Naive UTC timestamp, the representation stored on every record."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def advance(previous: Optional[datetime], now: datetime) -> datetime:
    """Return ``now``, nudged forward so it is strictly after ``previous``."""
    if previous is not None and now <= previous:
        return previous + timedelta(microseconds=1)
    return now


def current_year(now: Optional[datetime] = None, tz_name: Optional[str] = None) -> int:
    """Year of ``now`` (naive UTC) in the configured local timezone."""
    tz = pytz.timezone(tz_name or settings.tz_default)
    moment = pytz.utc.localize(now or utcnow())
    return moment.astimezone(tz).year


def random_suffix(length: int = 6) -> str:
    return "".join(secrets.choice(BASE36_ALPHABET) for _ in range(length))


def sequential_number(prefix: str, year: int, seq: int, width: int = 4, separator: str = "-") -> str:
    """e.g. ``CASE-2025-001`` or ``OB/2025/0001``."""
    return f"{prefix}{separator}{year}{separator}{seq:0{width}d}"


def random_number(prefix: str, year: int, length: int = 6) -> str:
    """e.g. ``CASE-2025-K3Z9QA``."""
    return f"{prefix}-{year}-{random_suffix(length)}"


def parse_datetime(value: Any) -> Optional[datetime]:
    """Coerce a datetime, date or ISO-8601 string into a naive UTC datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            raise InvalidInput(f"Invalid datetime {value!r}")
    elif isinstance(value, date) and not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    elif not isinstance(value, datetime):
        raise InvalidInput(f"Invalid datetime {value!r}")
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value
