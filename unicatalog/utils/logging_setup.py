"""Logging configuration for command-line entry points."""

import logging
from typing import Optional

from unicatalog.utils.settings import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level_name: Optional[str] = None) -> int:
    """Apply basicConfig at LOG_LEVEL (or ``level_name``); return the level used."""
    name = (level_name or get_settings().log_level).upper()
    level = getattr(logging, name, logging.INFO)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("unicatalog").setLevel(level)
    return level
