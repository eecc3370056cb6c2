"""Due date parsing for CLI input."""

from __future__ import annotations

from datetime import date


def parse_due(text: str, timezone: str = "UTC") -> date | None:
    """Parse an ISO date or natural language ("next friday") into a date.

    Returns None when the text cannot be understood.
    """
    text = text.strip()
    if not text:
        return None

    try:
        return date.fromisoformat(text)
    except ValueError:
        pass

    import dateparser

    settings: dict = {
        "TIMEZONE": timezone,
        "RETURN_AS_TIMEZONE_AWARE": True,
        "PREFER_DATES_FROM": "future",
    }
    parsed = dateparser.parse(text, settings=settings)
    if parsed:
        return parsed.date()
    return None
