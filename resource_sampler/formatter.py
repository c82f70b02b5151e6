"""Console summary formatting."""

import re
from typing import Any

from resource_sampler.accumulator import render_value
from resource_sampler.models import SourceDefinition


def format_banner(delay: float, timestamp: str) -> str:
    return f"============== {delay} SECOND DELAY ({timestamp}) =============="


def format_header(source: SourceDefinition) -> str:
    return f"-- {source.name.upper()} SUMMARY (LOGGED) --"


def format_line(template: str, columns: tuple[str, ...], totals: dict[str, Any]) -> str:
    """Replace every ``%column%`` placeholder with that column's total."""
    line = template
    for column in columns:
        value = render_value(totals.get(column))
        line = re.sub(f"%{re.escape(column)}%", lambda _m: value, line)
    return line


def format_summary(source: SourceDefinition, totals: dict[str, Any]) -> list[str]:
    """Header plus one line per summary template."""
    lines = [format_header(source)]
    for template in source.summary_lines:
        lines.append(format_line(template, source.columns, totals))
    return lines
