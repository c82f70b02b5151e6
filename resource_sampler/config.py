"""Configuration module: frozen dataclass loaded from environment variables."""

import logging
import math
import os
from dataclasses import dataclass

import yaml

logger = logging.getLogger(__name__)

DISK = 1
MEM = DISK << 1
CPU = MEM << 1
BUILD = CPU << 1

SOURCE_KEYS = {
    "disk": DISK,
    "mem": MEM,
    "cpu": CPU,
    "build": BUILD,
}

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ConfigError(Exception):
    """Raised when the sampler cannot start with the given configuration."""


@dataclass(frozen=True)
class Config:
    enabled_mask: int = DISK | MEM | CPU
    delay_seconds: float = 1
    output_dir: str = "."
    build_status_url: str = "http://localhost:8080/job/main/api/json"
    http_timeout: float | None = None
    sources_file: str | None = None
    log_level: str = "INFO"


def parse_mask(value: str, keys: dict[str, int] | None = None) -> int:
    """Parse an integer bitmask or a comma-separated list of source keys."""
    keys = keys if keys is not None else SOURCE_KEYS
    value = value.strip()
    try:
        return int(value, 0)
    except ValueError:
        pass

    mask = 0
    for name in value.split(","):
        name = name.strip().lower()
        if not name:
            continue
        if name not in keys:
            raise ConfigError(f"Unknown source {name!r} in ENABLED_SOURCES")
        mask |= keys[name]
    return mask


def _parse_delay(value: str) -> float:
    delay = float(value)
    if not math.isfinite(delay) or delay < 0:
        raise ConfigError(f"DELAY_SECONDS must be a finite, non-negative number, got {value!r}")
    return int(delay) if delay.is_integer() else delay


def load_config() -> Config:
    """Build Config from environment variables with sensible defaults."""
    raw_mask = os.environ.get("ENABLED_SOURCES")
    raw_timeout = os.environ.get("HTTP_TIMEOUT")

    return Config(
        enabled_mask=parse_mask(raw_mask) if raw_mask else Config.enabled_mask,
        delay_seconds=_parse_delay(os.environ.get("DELAY_SECONDS", str(Config.delay_seconds))),
        output_dir=os.environ.get("OUTPUT_DIR", Config.output_dir),
        build_status_url=os.environ.get("BUILD_STATUS_URL", Config.build_status_url),
        http_timeout=float(raw_timeout) if raw_timeout else None,
        sources_file=os.environ.get("SOURCES_FILE") or None,
        log_level=os.environ.get("LOG_LEVEL", Config.log_level).upper(),
    )


def load_yaml_config(path: str | None) -> dict:
    """Load extra source definitions from a YAML file. Returns empty dict if no path."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Sources file %s not found, using built-in sources only", path)
        return {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Sources file {path} must contain a mapping")
    logger.info("Loaded sources file %s", path)
    return data
