"""Built-in source table and loading of extra sources from YAML."""

import logging
import re

from resource_sampler.config import BUILD, CPU, DISK, MEM, Config, ConfigError
from resource_sampler.extractors import (
    DEFAULT_SPLIT,
    BuildStatusExtractor,
    KeyedExtractor,
    PositionalExtractor,
)
from resource_sampler.models import SourceDefinition

logger = logging.getLogger(__name__)


def default_sources(config: Config) -> list[SourceDefinition]:
    """The compiled-in sources, in processing order."""
    return [
        SourceDefinition(
            id=DISK,
            name="Disk I/O",
            out_filename="r-disk.csv",
            in_location="/proc/diskstats",
            columns=("read_sectors", "read_millis", "write_sectors", "write_millis", "total_millis"),
            summary_lines=(
                "READ:  sector count: %read_sectors%, time spent: %read_millis% ms",
                "WRITE: sector count: %write_sectors%, time spent: %write_millis% ms",
                "TOTAL: time spent: %total_millis% ms",
            ),
            # major minor name reads merged sectors ms writes merged sectors ms in_flight io_ms ...
            line_extractor=PositionalExtractor(r"(sd|hd|sr)", (5, 6, 9, 10, 12)),
        ),
        SourceDefinition(
            id=MEM,
            name="Memory",
            out_filename="r-mem.csv",
            in_location="/proc/meminfo",
            columns=("free_mem", "free_swap"),
            summary_lines=(
                "FREE: RAM: %free_mem% kB, swap: %free_swap% kB",
            ),
            line_extractor=KeyedExtractor(("MemFree", "SwapFree"), 1),
        ),
        SourceDefinition(
            id=CPU,
            name="CPU",
            out_filename="r-cpu.csv",
            in_location="/proc/stat",
            columns=("user", "nice", "system", "idle", "iowait"),
            summary_lines=(
                "PROCESSES: user: %user%, nice: %nice%, system: %system%",
                "WAITING:   idle: %idle%, IO wait: %iowait%",
            ),
            # cpuN user nice system idle iowait ...
            line_extractor=PositionalExtractor(r"cpu[0-9]+", (1, 2, 3, 4, 5)),
        ),
        SourceDefinition(
            id=BUILD,
            name="Build",
            out_filename="r-build.csv",
            in_location=config.build_status_url,
            columns=("available", "running", "health_build", "health_tests"),
            summary_lines=(
                "STATUS: available: %available%, running: %running%",
                "HEALTH: build: %health_build%, tests: %health_tests%",
            ),
            once_extractor=BuildStatusExtractor(),
        ),
    ]


_BUILD_STATUS_OPTIONS = {
    "available_path": str,
    "last_build_path": str,
    "last_completed_path": str,
    "health_path": str,
    "health_reports": int,
}


def _build_line_extractor(spec, where: str):
    if not isinstance(spec, dict):
        raise ConfigError(f"{where}: line_extractor must be a mapping")
    kind = spec.get("type")
    split = spec.get("split", DEFAULT_SPLIT)
    try:
        if kind == "positional":
            return PositionalExtractor(spec["match"], tuple(int(p) for p in spec["positions"]), split)
        if kind == "keyed":
            return KeyedExtractor(tuple(spec["keys"]), int(spec["offset"]), split)
    except KeyError as e:
        raise ConfigError(f"{where}: line_extractor is missing {e}") from None
    except (ValueError, TypeError, re.error) as e:
        raise ConfigError(f"{where}: invalid line_extractor: {e}") from None
    raise ConfigError(f"{where}: unknown line_extractor type {kind!r}")


def _build_once_extractor(spec, where: str):
    if not isinstance(spec, dict):
        raise ConfigError(f"{where}: once_extractor must be a mapping")
    kind = spec.get("type")
    if kind != "build_status":
        raise ConfigError(f"{where}: unknown once_extractor type {kind!r}")
    overrides = {k: v for k, v in spec.items() if k != "type"}
    for key, value in overrides.items():
        expected = _BUILD_STATUS_OPTIONS.get(key)
        if expected is None:
            raise ConfigError(f"{where}: unknown once_extractor option {key!r}")
        # bool is an int subclass; reject it for counts
        if not isinstance(value, expected) or isinstance(value, bool):
            raise ConfigError(f"{where}: once_extractor {key} must be {expected.__name__}, got {value!r}")
    if overrides.get("health_reports", 0) < 0:
        raise ConfigError(f"{where}: once_extractor health_reports must not be negative")
    return BuildStatusExtractor(**overrides)


def load_extra_sources(yaml_data: dict, first_id: int) -> list[tuple[SourceDefinition, bool]]:
    """Build (source, enabled) pairs from the ``sources`` list of a YAML file.

    Identifiers are handed out as consecutive bits starting at ``first_id``.
    """
    extras = []
    next_id = first_id
    for index, entry in enumerate(yaml_data.get("sources", []) or []):
        where = f"sources[{index}]"
        if not isinstance(entry, dict):
            raise ConfigError(f"{where}: expected a mapping")
        try:
            line_spec = entry.get("line_extractor")
            once_spec = entry.get("once_extractor")
            source = SourceDefinition(
                id=next_id,
                name=entry["name"],
                out_filename=entry["out_filename"],
                in_location=entry["in_location"],
                columns=tuple(entry["columns"]),
                summary_lines=tuple(entry.get("summary_lines", [])),
                line_extractor=_build_line_extractor(line_spec, where) if line_spec else None,
                once_extractor=_build_once_extractor(once_spec, where) if once_spec else None,
            )
        except KeyError as e:
            raise ConfigError(f"{where}: missing required key {e}") from None

        extras.append((source, bool(entry.get("enabled", True))))
        logger.debug("Loaded extra source %s (id=%d)", source.name, source.id)
        next_id <<= 1
    return extras


def build_sources(config: Config, yaml_data: dict) -> tuple[list[SourceDefinition], int]:
    """Return the full source list and the effective enabled mask."""
    sources = default_sources(config)
    mask = config.enabled_mask
    next_id = max(s.id for s in sources) << 1
    for source, enabled in load_extra_sources(yaml_data, next_id):
        sources.append(source)
        if enabled:
            mask |= source.id
        else:
            mask &= ~source.id
    return sources, mask
