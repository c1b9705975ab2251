"""Display helpers shared by notification channels."""

from datetime import date, datetime
from typing import Union


def format_label(value: str) -> str:
    """SNAKE_CASE enum value to Title Case label."""
    return " ".join(word.capitalize() for word in value.split("_"))


def format_currency(amount_cents: int) -> str:
    """Integer cents to a USD string, e.g. 123456 -> $1,234.56."""
    sign = "-" if amount_cents < 0 else ""
    dollars, cents = divmod(abs(amount_cents), 100)
    return f"{sign}${dollars:,}.{cents:02d}"


def format_date(value: Union[date, datetime]) -> str:
    """Long US date, e.g. January 5, 2026."""
    return f"{value.strftime('%B')} {value.day}, {value.year}"
