"""Logging setup for command line use."""

import logging

from hemicycle.config import settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str | None = None):
    """Configure the root logger once, at ``level`` or the configured log level."""
    logging.basicConfig(level=(level or settings.log_level).upper(), format=LOG_FORMAT)
    # httpx logs every request at INFO; the fetcher already does
    logging.getLogger("httpx").setLevel(logging.WARNING)
