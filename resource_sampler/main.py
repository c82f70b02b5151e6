#!/usr/bin/env python3
"""Resource sampler entry point."""

import logging
import signal
import sys

from resource_sampler.config import ConfigError, load_config, load_yaml_config
from resource_sampler.reader import SourceReader, validate_sources
from resource_sampler.sampler import Sampler
from resource_sampler.sources import build_sources
from resource_sampler.writer import close_writers, open_writers

logger = logging.getLogger(__name__)


def _configure_logging(level: str):
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [resource-sampler] %(levelname)s %(message)s",
        stream=sys.stderr,
    )


def main() -> int:
    try:
        config = load_config()
    except (ConfigError, ValueError) as e:
        _configure_logging("INFO")
        logger.error("Invalid configuration: %s", e)
        return 1

    _configure_logging(config.log_level)

    try:
        sources, mask = build_sources(config, load_yaml_config(config.sources_file))
        validate_sources(sources)
    except ConfigError as e:
        logger.error("Invalid configuration: %s", e)
        return 1

    logger.info(
        "Config: enabled_mask=%#x, delay=%ss, output_dir=%s, %d source(s) defined",
        mask, config.delay_seconds, config.output_dir, len(sources),
    )

    try:
        writers = open_writers(sources, mask, config.output_dir)
    except OSError as e:
        logger.error("Cannot open output file: %s", e)
        return 1

    reader = SourceReader(http_timeout=config.http_timeout)
    sampler = Sampler(
        sources, writers, reader,
        delay=config.delay_seconds,
        enabled_mask=mask,
    )

    def _signal_handler(sig, _frame):
        logger.info("Shutdown signal received (signal %d), stopping...", sig)
        sampler.stop()

    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    try:
        sampler.run()
    except KeyboardInterrupt:
        pass
    finally:
        close_writers(writers)
        reader.close()

    logger.info("Stopped after %d tick(s)", sampler.tick_count)
    return 0


if __name__ == "__main__":
    sys.exit(main())
