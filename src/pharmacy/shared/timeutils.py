"""Time helpers. Everything is compared as timezone-aware UTC."""

from datetime import UTC, date, datetime, time

from protean.exceptions import ValidationError


def utcnow():
    return datetime.now(UTC)


def as_utc(value):
    """Coerce a datetime, date or ISO string to an aware UTC datetime.

    Naive datetimes are taken to be UTC already; a bare date means midnight.
    """
    if isinstance(value, datetime):
        return value.replace(tzinfo=UTC) if value.tzinfo is None else value.astimezone(UTC)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=UTC)
    return as_utc(datetime.fromisoformat(value))


def parse_iso_date(value, field_name="expiry_date"):
    """Parse a ``YYYY-MM-DD`` string, reporting bad input as a field error."""
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError({field_name: [f"'{value}' is not a valid ISO date"]}) from exc


def iso_date(value):
    """``YYYY-MM-DD`` text for a date or datetime; strings pass through unchanged."""
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return value.isoformat()
    return value
