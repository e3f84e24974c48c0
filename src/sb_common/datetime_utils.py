"""UTC datetime utilities."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def parse_iso(value: str) -> datetime:
    """Parse a provider/client ISO-8601 timestamp into an aware UTC datetime.

    Accepts a trailing 'Z' and minute-precision strings ('2026-10-18T17:00Z').
    Naive inputs are assumed to be UTC.
    """
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
