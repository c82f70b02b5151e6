"""Merge extracted rows into per-tick totals.

Numeric-looking values are summed, anything else is joined with commas in
arrival order. The decision is made per call by inspecting the values, so a
column that sees a device name once becomes a string column for that tick.
"""

import re
from typing import Any, Sequence

_NUMBER_RE = re.compile(
    r"""^\s*[+-]?
        (?:
            (?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?
          | inf(?:inity)?
          | nan
        )\s*$""",
    re.VERBOSE | re.IGNORECASE,
)
_INT_RE = re.compile(r"^\s*[+-]?\d+\s*$")


def looks_like_number(value: Any) -> bool:
    """True for ints/floats and for strings holding a numeric literal."""
    if value is None or isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    if isinstance(value, str):
        return bool(_NUMBER_RE.match(value))
    return False


def to_number(value: Any) -> int | float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    if _INT_RE.match(value):
        return int(value)
    return float(value)


def merge(row: Sequence[Any], totals: dict[str, Any], columns: Sequence[str]) -> dict[str, Any]:
    """Fold one extracted row into ``totals`` in place and return it."""
    for i in range(min(len(row), len(columns))):
        value = row[i]
        if value is None:
            continue

        column = columns[i]
        existing = totals.get(column)

        if looks_like_number(value) and (existing is None or looks_like_number(existing)):
            base = to_number(existing) if existing is not None else 0
            totals[column] = base + to_number(value)
        elif existing is None:
            totals[column] = value
        else:
            totals[column] = f"{existing},{value}"
    return totals


def render_value(value: Any) -> str:
    """Format a totals value for CSV and console output. Unset renders as 0."""
    if value is None or value == "" or value == 0:
        return "0"
    if isinstance(value, float):
        return "%.15g" % value
    return str(value)
