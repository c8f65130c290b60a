"""Text formatting for numeric table cells."""

from __future__ import annotations

from typing import Any


def _as_number(value: Any) -> float | None:
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.replace(",", ""))
        except ValueError:
            return None
    return None


def format_cell(value: Any) -> str:
    """Render a cell value as a grouped number without trailing zeros.

    Values that are not numbers are shown as text; None is shown empty.
    """
    if value is None:
        return ""
    number = _as_number(value)
    if number is None:
        return str(value)
    text = f"{number:,.6f}".rstrip("0")
    if text.endswith("."):
        text = text[:-1]
    return text


def format_fixed(value: float, decimals: int) -> str:
    """Render a number with a fixed count of decimals and no grouping."""
    if decimals < 0:
        raise ValueError("decimals must not be negative")
    return f"{float(value):.{decimals}f}"