"""Source reader: fetch a source's input and fold it into per-tick totals."""

import logging
from typing import Any, Iterator
from urllib.parse import urlparse

import requests

from resource_sampler.accumulator import merge
from resource_sampler.config import ConfigError
from resource_sampler.extractors import ExtractionError
from resource_sampler.models import SourceDefinition

logger = logging.getLogger(__name__)

FILE = "file"
HTTP = "http"


def resolve_scheme(location: str) -> str:
    """Classify an input location. Raises ConfigError for unsupported schemes."""
    scheme = urlparse(location).scheme.lower()
    if scheme in ("", "file"):
        return FILE
    if scheme in ("http", "https"):
        return HTTP
    raise ConfigError(f"Unsupported input location scheme {scheme!r} in {location!r}")


def local_path(location: str) -> str:
    parsed = urlparse(location)
    return parsed.path if parsed.scheme.lower() == "file" else location


def validate_sources(sources: list[SourceDefinition]) -> None:
    """Fail fast on input locations the reader cannot handle."""
    for source in sources:
        resolve_scheme(source.in_location)


class SourceReader:
    def __init__(self, http_timeout: float | None = None, session: requests.Session | None = None):
        self._timeout = http_timeout
        self._session = session or requests.Session()

    def _file_lines(self, path: str) -> Iterator[str]:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            yield from f

    def _http_lines(self, url: str) -> Iterator[str]:
        response = self._session.get(url, timeout=self._timeout)
        response.raise_for_status()
        yield from response.text.splitlines(keepends=True)

    def lines(self, location: str) -> Iterator[str]:
        """Yield the lines of a source's input for one tick."""
        if resolve_scheme(location) == HTTP:
            return self._http_lines(location)
        return self._file_lines(local_path(location))

    def read(self, source: SourceDefinition, totals: dict[str, Any]) -> dict[str, Any]:
        """Stream one source into ``totals``. Input failures count as empty input."""
        document: list[str] = []
        try:
            for line in self.lines(source.in_location):
                if source.once_extractor is not None:
                    document.append(line)
                if source.line_extractor is not None:
                    row = source.line_extractor.extract(line)
                    if row is not None:
                        merge(row, totals, source.columns)
        except requests.RequestException as e:
            logger.warning("%s: fetch of %s failed: %s", source.name, source.in_location, e)
            return totals
        except OSError as e:
            logger.warning("%s: read of %s failed: %s", source.name, source.in_location, e)
            return totals

        if source.once_extractor is not None:
            try:
                row = source.once_extractor.extract("".join(document))
            except ExtractionError as e:
                logger.warning("%s: skipping document from %s: %s", source.name, source.in_location, e)
            else:
                merge(row, totals, source.columns)
        return totals

    def close(self):
        self._session.close()
