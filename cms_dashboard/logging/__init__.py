"""Request logging and error handling for the dashboard API."""

import logging

from cms_dashboard.core.config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Install the dashboard log format on the root logger."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
