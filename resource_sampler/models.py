"""Source definition model for the sampler."""

from dataclasses import dataclass

from resource_sampler.extractors import BuildStatusExtractor, LineExtractor


@dataclass(frozen=True)
class SourceDefinition:
    id: int                              # bit flag, tested against the enabled mask
    name: str                            # e.g. "Disk I/O"
    out_filename: str                    # CSV path, relative to the output dir
    in_location: str                     # local path, file:// or http(s):// URL
    columns: tuple[str, ...]
    summary_lines: tuple[str, ...] = ()
    line_extractor: LineExtractor | None = None
    once_extractor: BuildStatusExtractor | None = None

    def __post_init__(self):
        object.__setattr__(self, "columns", tuple(self.columns))
        object.__setattr__(self, "summary_lines", tuple(self.summary_lines))

    def is_enabled(self, mask: int) -> bool:
        return bool(mask & self.id)