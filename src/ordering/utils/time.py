"""Datetime helpers for comparing persisted and in-memory timestamps."""

from datetime import UTC, date, datetime


def as_utc(value):
    """Return an aware UTC datetime. Naive values are taken to already be UTC.

    Accepts datetimes and ISO-8601 strings; relational providers may hand back
    naive datetimes and JSON payloads carry strings.
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def as_date(value):
    """Return a ``date`` from a date, datetime or ISO-8601 string."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])
