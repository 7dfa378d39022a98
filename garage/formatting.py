"""Display helpers producing Brazilian Portuguese number and date formats."""

from datetime import datetime
from typing import Optional


def format_number(value: float, decimals: int = 2) -> str:
    """Format a number as 1.234,56."""
    text = f"{value:,.{decimals}f}"
    return text.replace(",", "_").replace(".", ",").replace("_", ".")


def format_cost(cost: Optional[float]) -> str:
    """Format cost for display."""
    if cost is None:
        return "-"
    return f"R$ {format_number(cost)}"


def format_date(moment: Optional[datetime], with_time: Optional[bool] = None) -> str:
    """
    Format a date as dd/mm/yyyy, adding HH:MM when it carries a time.

    Args:
        with_time: Force the time on or off. By default the time is shown
            only when it is not midnight.
    """
    if moment is None:
        return "-"
    if with_time is None:
        with_time = (moment.hour, moment.minute, moment.second) != (0, 0, 0)
    if with_time:
        return moment.strftime("%d/%m/%Y %H:%M")
    return moment.strftime("%d/%m/%Y")


def format_speed(speed: float) -> str:
    return f"{speed:.1f} km/h"


def format_weight(kg: float) -> str:
    return f"{kg:.1f} kg"


def truncate(text: Optional[str], max_len: int = 30) -> str:
    """Truncate text with ellipsis if too long."""
    if not text:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
