"""Formatting utilities for display values."""

from datetime import datetime


def format_currency(value: float, symbol: str = "$") -> str:
    """Format a float as currency."""
    return f"{symbol}{value:,.2f}"


def format_quantity(value: float, threshold: float = 0, unit: str = "") -> str:
    """Format quantity with its unit, flagging low stock (at or below threshold)."""
    text = f"{value:g} {unit}".strip()
    if value <= threshold:
        return f"{text} (LOW)"
    return text


def format_report_date(day: str) -> str:
    """'2026-10-17' -> 'October 17, 2026'."""
    return datetime.strptime(day[:10], "%Y-%m-%d").strftime("%B %d, %Y")
