from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Naive UTC "now"; every timestamp column in the DB is naive UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(dt: Optional[datetime]) -> Optional[datetime]:
    if not dt:
        return None

    # Treat naive values as UTC already
    if dt.tzinfo is None:
        return dt

    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def parse_datetime(raw) -> Optional[datetime]:
    """
    Accepts a datetime or an ISO-8601 string ("2025-06-01T18:00:00Z",
    "2025-06-01T18:00:00+01:00", "2025-06-01 18:00").
    Returns naive UTC, or None if it can't be parsed.
    """
    if raw is None:
        return None

    if isinstance(raw, datetime):
        return to_naive_utc(raw)

    if not isinstance(raw, str):
        return None

    raw = raw.strip()
    if not raw:
        return None

    # fromisoformat only learned "Z" in 3.11
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"

    try:
        return to_naive_utc(datetime.fromisoformat(raw))
    except ValueError:
        return None


def isoformat(dt: Optional[datetime]) -> Optional[str]:
    if not dt:
        return None
    return dt.isoformat()
