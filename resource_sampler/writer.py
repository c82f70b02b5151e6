"""Per-source CSV writer: truncated at startup, one flushed row per tick."""

import csv
import logging
import os
from typing import Any

from resource_sampler.accumulator import render_value

logger = logging.getLogger(__name__)


class CsvWriter:
    def __init__(self, path: str, columns: tuple[str, ...]):
        self._path = path
        self._columns = tuple(columns)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        self._file = open(path, "w", newline="", encoding="utf-8")
        self._csv = csv.writer(self._file, lineterminator="\n")
        self._csv.writerow(["datetime", *self._columns])
        self._file.flush()

    def write_row(self, timestamp: str, totals: dict[str, Any]):
        """Append the tick's totals in column order, unset columns as 0."""
        self._csv.writerow([timestamp, *(render_value(totals.get(c)) for c in self._columns)])
        self._file.flush()

    def close(self):
        if self._file and not self._file.closed:
            self._file.close()
            logger.debug("Closed %s", self._path)


def open_writers(sources, mask: int, output_dir: str) -> dict[int, CsvWriter]:
    """Open one writer per enabled source, keyed by source id.

    Raises OSError if any output file cannot be created.
    """
    writers: dict[int, CsvWriter] = {}
    try:
        for source in sources:
            if not source.is_enabled(mask):
                continue
            path = os.path.join(output_dir, source.out_filename)
            print(f"Logging {source.name} to {path}")
            writers[source.id] = CsvWriter(path, source.columns)
    except OSError:
        close_writers(writers)
        raise
    return writers


def close_writers(writers: dict[int, CsvWriter]):
    for writer in writers.values():
        writer.close()
