"""Helper utilities for PokeLeague.

Two clocks are in use. League records (trainer start dates, battle dates) are
naive local time from ``get_now``, so "recent battles" counts the server's
calendar days. Account and token times are timezone-aware UTC from
``utcnow``, since they are compared with JWT ``iat``/``exp`` epoch claims.
"""

from datetime import date, datetime, timezone


def get_now() -> datetime:
    """Naive local datetime, for league records."""
    return datetime.now()


def utcnow() -> datetime:
    """Timezone-aware UTC datetime, for accounts and tokens."""
    return datetime.now(timezone.utc)


def normalize_name(value: str) -> str:
    """Case-folded form used for case-insensitive lookups."""
    return value.strip().casefold()


def is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def format_date(d: date) -> str:
    """Format date for display."""
    return d.strftime("%Y-%m-%d")


def format_datetime(dt: datetime) -> str:
    """Format datetime for display."""
    return dt.strftime("%Y-%m-%d %H:%M")
