"""Custom Jinja2 filters for page templates."""

from datetime import datetime


def format_date(value: datetime) -> str:
    """Format a date as e.g. ``January 2, 2006``."""
    if not isinstance(value, datetime):
        return str(value)
    return f"{value:%B} {value.day}, {value.year}"


def short_date(value: datetime) -> str:
    """Format a date as e.g. ``Jan 2, 2006``."""
    if not isinstance(value, datetime):
        return str(value)
    return f"{value:%b} {value.day}, {value.year}"


def isoformat(value: datetime) -> str:
    if not isinstance(value, datetime):
        return str(value)
    return value.isoformat()
