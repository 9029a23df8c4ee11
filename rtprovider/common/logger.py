"""Logging for rtprovider.

The declarative tool reads the provider's stdout for its plugin handshake,
so everything here writes to stderr or, when enabled, to a rotating file.
Components log through ``get_logger`` under the ``rtprovider`` namespace;
``setup_logger`` attaches handlers once, at configure time.
"""

import logging
import logging.handlers
import os
import sys
from typing import List, Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"
LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _parse_level(level: str) -> int:
    level_upper = level.upper()
    if level_upper not in LEVELS:
        raise ValueError(f"Invalid log level: {level}. Must be one of: {', '.join(LEVELS)}")
    return getattr(logging, level_upper)


def _rotating_file_handler(
    name: str, log_dir: str, max_bytes: int, backup_count: int
) -> logging.Handler:
    log_dir = os.path.expanduser(log_dir)
    os.makedirs(log_dir, exist_ok=True)
    return logging.handlers.RotatingFileHandler(
        os.path.join(log_dir, f"{name}.log"), maxBytes=max_bytes, backupCount=backup_count
    )


def setup_logger(
    name: str = "rtprovider",
    log_dir: str = "~/.rtprovider/logs",
    level: str = "INFO",
    file_logging: bool = False,
    console_logging: bool = True,
    max_bytes: int = 10485760,  # 10MB
    backup_count: int = 5,
) -> logging.Logger:
    """Attach handlers to a provider logger.

    Calling it again only updates the level; handlers are added once.

    Args:
        name: Logger name, "rtprovider" for the whole provider
        log_dir: Directory for the rotating log file
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        file_logging: Also write to ``<log_dir>/<name>.log``
        console_logging: Write to stderr
        max_bytes: Maximum log file size before rotation
        backup_count: Number of rotated files to keep

    Returns:
        Configured logger instance

    Raises:
        ValueError: If the level name is unknown
    """
    logger = logging.getLogger(name)
    logger.setLevel(_parse_level(level))

    if logger.handlers:
        return logger

    handlers: List[logging.Handler] = []
    if file_logging:
        handlers.append(_rotating_file_handler(name, log_dir, max_bytes, backup_count))
    if console_logging:
        handlers.append(logging.StreamHandler(sys.stderr))

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a component logger, e.g. ``get_logger("repo_crud")``."""
    if not name:
        return logging.getLogger("rtprovider")
    return logging.getLogger(f"rtprovider.{name}")
