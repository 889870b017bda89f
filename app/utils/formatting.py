"""Display formatting helpers."""

from datetime import UTC, datetime


def format_event_datetime(value: datetime | str) -> str:
    """Format an event timestamp as ``MM/DD/YYYY, HH:MM UTC`` (24-hour clock).

    Args:
        value: Datetime or ISO-8601 string; naive values are taken as UTC

    Returns:
        str: Formatted timestamp, or "Invalid date" if it cannot be parsed
    """
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return "Invalid date"

    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).strftime("%m/%d/%Y, %H:%M UTC")
