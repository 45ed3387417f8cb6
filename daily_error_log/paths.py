"""Log directory bootstrap and the daily log file name."""

import logging
import os
from datetime import date

from daily_error_log.config import Config

logger = logging.getLogger(__name__)

DIR_MODE = 0o755
LOGS_SUBDIR = "logs"


def default_content_dir() -> str:
    """Parent of the directory this package is installed in."""
    return os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def resolve_log_dir(config: Config) -> str:
    if config.log_dir:
        return config.log_dir
    root = config.content_dir or default_content_dir()
    return os.path.join(root, LOGS_SUBDIR)


def prepare_log_dir(log_dir: str) -> str:
    """Create the directory and loosen its mode if needed. Never raises."""
    if not os.path.exists(log_dir):
        try:
            os.makedirs(log_dir, mode=DIR_MODE, exist_ok=True)
        except OSError as e:
            logger.debug("Could not create log directory %s: %s", log_dir, e)
    if not os.access(log_dir, os.W_OK):
        try:
            os.chmod(log_dir, DIR_MODE)
        except OSError as e:
            logger.debug("Could not chmod log directory %s: %s", log_dir, e)
    return log_dir


def daily_log_path(log_dir: str, day: date | None = None) -> str:
    day = day or date.today()
    return os.path.join(log_dir, f"debug-{day:%Y-%m-%d}.log")
