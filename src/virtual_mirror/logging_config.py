"""Logging setup shared by the app and scripts."""

import logging
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: Optional[Union[int, str]] = None) -> None:
    """Install a single stream handler on the root logger.

    When `level` is omitted the level comes from `MirrorSettings.log_level`.
    """
    if level is None:
        from .config import load_settings

        level = load_settings().log_level
    if isinstance(level, str):
        level = level.upper()
    logging.root.handlers.clear()
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.basicConfig(level=level, handlers=[handler])


def get_logger(name: str) -> logging.Logger:
    """Return a module logger, configuring logging on first use."""
    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name)
