"""Sampler loop: one pass over every enabled source per tick, then sleep."""

import logging
import sys
import time
from datetime import datetime
from typing import Callable, TextIO

from resource_sampler.config import DATE_FORMAT
from resource_sampler.formatter import format_banner, format_summary
from resource_sampler.models import SourceDefinition
from resource_sampler.reader import SourceReader
from resource_sampler.writer import CsvWriter

logger = logging.getLogger(__name__)


class Sampler:
    def __init__(
        self,
        sources: list[SourceDefinition],
        writers: dict[int, CsvWriter],
        reader: SourceReader,
        delay: float = 1,
        enabled_mask: int = 0,
        clock: Callable[[], datetime] | None = None,
        sleep: Callable[[float], None] = time.sleep,
        out: TextIO | None = None,
    ):
        self._sources = sources
        self._writers = writers
        self._reader = reader
        self._delay = delay
        self._mask = enabled_mask
        self._clock = clock or datetime.now
        self._sleep = sleep
        self._out = out
        self._running = True
        self._tick_count = 0

    @property
    def tick_count(self) -> int:
        return self._tick_count

    def _print(self, text: str = ""):
        print(text, file=self._out or sys.stdout, flush=True)

    def enabled_sources(self) -> list[SourceDefinition]:
        return [s for s in self._sources if s.is_enabled(self._mask)]

    def sample_source(self, source: SourceDefinition, timestamp: str) -> dict:
        """Read, persist and print one source for the current tick."""
        totals = self._reader.read(source, {})
        writer = self._writers.get(source.id)
        if writer is not None:
            writer.write_row(timestamp, totals)
        for line in format_summary(source, totals):
            self._print(line)
        return totals

    def tick(self) -> str:
        """Run one sampling pass. Returns the tick timestamp."""
        timestamp = self._clock().strftime(DATE_FORMAT)
        self._print(format_banner(self._delay, timestamp))

        for source in self.enabled_sources():
            try:
                self.sample_source(source, timestamp)
            except Exception:
                logger.exception("%s: sampling failed at %s", source.name, timestamp)

        self._tick_count += 1
        return timestamp

    def run(self, max_ticks: int | None = None):
        """Tick, sleep, repeat until stopped (or ``max_ticks`` ticks have run)."""
        while self._running:
            self.tick()
            if max_ticks is not None and self._tick_count >= max_ticks:
                break
            self._sleep(self._delay)
            self._print()

    def stop(self):
        self._running = False
