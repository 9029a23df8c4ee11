"""Common utilities for rtprovider."""

from .logger import setup_logger, get_logger
from .config import load_config, load_typed_config, parse_config, ProviderConfig

__all__ = [
    "ProviderConfig",
    "get_logger",
    "load_config",
    "load_typed_config",
    "parse_config",
    "setup_logger",
]
