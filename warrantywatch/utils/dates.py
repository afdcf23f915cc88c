"""Date helpers: UTC timestamps, warranty date parsing and status."""

from datetime import date, datetime, timezone


def utcnow() -> datetime:
    """Current UTC time as a naive datetime.

    Both store engines persist naive UTC, so everything compared against
    stored values goes through here.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_date(value: "str | date | datetime | None") -> date | None:
    """Coerce connector/CSV date values to a calendar date.

    Accepts ``YYYY-MM-DD`` strings and ISO timestamps such as
    ``2026-06-04T12:00:00``. Empty or unparseable values return None.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def parse_timestamp(value: "str | int | float | datetime | None") -> datetime | None:
    """Coerce a timestamp (ISO string, unix seconds or datetime) to naive UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, timezone.utc).replace(tzinfo=None)
    try:
        return parse_timestamp(datetime.fromisoformat(str(value).strip()))
    except ValueError:
        return None


def infer_warranty_status(end_date: date | None, today: date | None = None) -> str:
    """'active' | 'expired' | 'unknown' from a warranty end date."""
    if end_date is None:
        return "unknown"
    today = today or utcnow().date()
    return "active" if today <= end_date else "expired"
