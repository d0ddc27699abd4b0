from __future__ import annotations

from datetime import datetime, date, timezone

from marshmallow import ValidationError, fields

_DATE_FORMATS = ("%Y-%m-%d", "%Y/%m/%d", "%d-%m-%Y")


def parse_datetime(value: str | None) -> datetime | None:
    """Parse an ISO date or datetime (or one of a few date formats) as UTC."""
    if not value:
        return None
    raw = value.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    parsed: datetime | None = None
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        for fmt in _DATE_FORMATS:
            try:
                parsed = datetime.strptime(raw, fmt)
                break
            except ValueError:
                continue
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


class FlexibleDateTime(fields.Field):
    """Accepts ``2024-01-10`` as well as full ISO datetimes."""

    default_error_messages = {"invalid": "Not a valid date."}

    def _serialize(self, value, attr, obj, **kwargs):
        if value is None:
            return None
        return value.isoformat()

    def _deserialize(self, value, attr, data, **kwargs):
        if isinstance(value, datetime):
            return value
        if isinstance(value, date):
            return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
        if not isinstance(value, str):
            raise self.make_error("invalid")
        parsed = parse_datetime(value)
        if parsed is None:
            raise self.make_error("invalid")
        return parsed


def not_blank(value: str) -> None:
    if not value or not value.strip():
        raise ValidationError("Must not be blank.")
