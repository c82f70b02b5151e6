"""Field extractors: turn source text into sparse rows of column values.

Line extractors see one line at a time and return ``None`` for lines they
don't care about. The one-shot extractor sees a whole document per tick.
"""

import json
import re
from dataclasses import dataclass, field
from typing import Any, Protocol

DEFAULT_SPLIT = r"\s"


class ExtractionError(Exception):
    """Raised when a one-shot extractor cannot build a row from its document."""


class LineExtractor(Protocol):
    def extract(self, line: str) -> list[Any] | None: ...


def split_tokens(line: str, pattern: re.Pattern) -> list[str]:
    """Split on ``pattern`` and drop the empty tokens it leaves behind."""
    return [token for token in pattern.split(line.rstrip("\r\n")) if token != ""]


@dataclass(frozen=True)
class PositionalExtractor:
    """Pick tokens by position from lines matching ``match``.

    Positions are 0-based indexes into the split line. A position past the
    end of the split yields ``None`` in that slot.
    """

    match: str
    positions: tuple[int, ...]
    split: str = DEFAULT_SPLIT
    _match_re: re.Pattern = field(init=False, repr=False, compare=False)
    _split_re: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "positions", tuple(self.positions))
        object.__setattr__(self, "_match_re", re.compile(self.match))
        object.__setattr__(self, "_split_re", re.compile(self.split))

    def extract(self, line: str) -> list[Any] | None:
        if not self._match_re.search(line):
            return None
        tokens = split_tokens(line, self._split_re)
        return [tokens[pos] if pos < len(tokens) else None for pos in self.positions]


@dataclass(frozen=True)
class KeyedExtractor:
    """One column per key pattern, filled from whichever key a line matches.

    The first pattern that matches wins. The returned row only populates the
    slot of that pattern, with the token found at ``offset``.
    """

    keys: tuple[str, ...]
    offset: int
    split: str = DEFAULT_SPLIT
    _key_res: tuple[re.Pattern, ...] = field(init=False, repr=False, compare=False)
    _split_re: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "keys", tuple(self.keys))
        object.__setattr__(self, "_key_res", tuple(re.compile(k) for k in self.keys))
        object.__setattr__(self, "_split_re", re.compile(self.split))

    def extract(self, line: str) -> list[Any] | None:
        idx = next((i for i, key_re in enumerate(self._key_res) if key_re.search(line)), None)
        if idx is None:
            return None

        tokens = split_tokens(line, self._split_re)
        row: list[Any] = [None] * (idx + 1)
        row[idx] = tokens[self.offset] if self.offset < len(tokens) else None
        return row


def _lookup(document: Any, path: str) -> Any:
    """Resolve a dotted path such as ``healthReport.0.score``."""
    node = document
    for part in path.split("."):
        if isinstance(node, list):
            try:
                node = node[int(part)]
            except (ValueError, IndexError):
                raise ExtractionError(f"Path {path!r} not found (at {part!r})") from None
        elif isinstance(node, dict):
            if part not in node:
                raise ExtractionError(f"Path {path!r} not found (at {part!r})")
            node = node[part]
        else:
            raise ExtractionError(f"Path {path!r} not found (at {part!r})")
    return node


@dataclass(frozen=True)
class BuildStatusExtractor:
    """Summarise a build job status document (Jenkins ``/api/json`` shape).

    Row layout:
        0. 1 if the job is buildable, else 0
        1. 1 if the last build differs from the last completed one, else 0
        2. score of the first health report
        3. score of the second health report
    """

    available_path: str = "buildable"
    last_build_path: str = "lastBuild.number"
    last_completed_path: str = "lastCompletedBuild.number"
    health_path: str = "healthReport"
    health_reports: int = 2

    def extract(self, document: str) -> list[Any]:
        try:
            data = json.loads(document)
        except (json.JSONDecodeError, TypeError) as e:
            raise ExtractionError(f"Invalid JSON document: {e}") from e

        available = _lookup(data, self.available_path)
        last_build = _lookup(data, self.last_build_path)
        last_completed = _lookup(data, self.last_completed_path)
        row: list[Any] = [
            1 if available else 0,
            1 if last_build != last_completed else 0,
        ]
        for i in range(self.health_reports):
            row.append(_lookup(data, f"{self.health_path}.{i}.score"))
        return row
