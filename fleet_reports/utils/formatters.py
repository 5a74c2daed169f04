"""
Cell formatting shared by the tabular exporters.
"""
from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any, Optional


def cell_text(value: Any) -> str:
    """Plain-text form of a cell; no-data renders as an empty string."""
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def display_number(value: Any, decimals: Optional[int] = 2) -> str:
    """Human-facing form; floats are rounded for display only."""
    if isinstance(value, float) and decimals is not None:
        return f"{value:,.{decimals}f}"
    return cell_text(value)


def excel_value(value: Any) -> Any:
    """Value written into a worksheet cell."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (dict, list, tuple)):
        return cell_text(value)
    return value
