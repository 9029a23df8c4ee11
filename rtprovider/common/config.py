"""Configuration management for rtprovider.

Handles loading of YAML provider configuration files. Values missing from
the file fall back to ``ARTIFACTORY_*`` environment variables (see
``settings.py``) and then to built-in defaults.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .settings import ProviderSettings, get_settings


@dataclass
class HttpConfig:
    """Configuration for the shared HTTP client."""

    timeout: float = 30.0
    retry_count: int = 5
    retry_wait: float = 0.1
    retry_max_wait: float = 2.0


@dataclass
class LoggingConfig:
    """Configuration for provider logging."""

    level: str = "INFO"
    log_dir: str = "~/.rtprovider/logs"
    file_logging: bool = False


@dataclass
class ProviderConfig:
    """Top-level configuration for the provider block."""

    url: str = ""
    username: str = ""
    password: str = ""
    api_key: str = ""
    access_token: str = ""
    http: HttpConfig = field(default_factory=HttpConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def parse_http_config(
    http_dict: Dict[str, Any], settings: ProviderSettings
) -> HttpConfig:
    """Parse HTTP client configuration dictionary.

    Args:
        http_dict: HTTP configuration dictionary
        settings: Environment defaults

    Returns:
        HttpConfig instance
    """
    return HttpConfig(
        timeout=float(http_dict.get("timeout", settings.timeout)),
        retry_count=int(http_dict.get("retry_count", settings.retry_count)),
        retry_wait=float(http_dict.get("retry_wait", settings.retry_wait)),
        retry_max_wait=float(http_dict.get("retry_max_wait", settings.retry_max_wait)),
    )


def parse_logging_config(
    logging_dict: Dict[str, Any], settings: ProviderSettings
) -> LoggingConfig:
    """Parse logging configuration dictionary.

    Args:
        logging_dict: Logging configuration dictionary
        settings: Environment defaults

    Returns:
        LoggingConfig instance
    """
    return LoggingConfig(
        level=logging_dict.get("level", settings.log_level),
        log_dir=logging_dict.get("log_dir", "~/.rtprovider/logs"),
        file_logging=logging_dict.get("file_logging", False),
    )


def parse_config(
    config_dict: Dict[str, Any], settings: Optional[ProviderSettings] = None
) -> ProviderConfig:
    """Parse the full provider configuration dictionary.

    Explicit values win over environment defaults.

    Args:
        config_dict: Full configuration dictionary
        settings: Environment defaults (read from the environment if None)

    Returns:
        ProviderConfig instance
    """
    if settings is None:
        settings = get_settings()

    def pick(name: str) -> str:
        value = config_dict.get(name)
        if value:
            return value
        return getattr(settings, name) or ""

    return ProviderConfig(
        url=pick("url"),
        username=pick("username"),
        password=pick("password"),
        api_key=pick("api_key"),
        access_token=pick("access_token"),
        http=parse_http_config(config_dict.get("http", {}), settings),
        logging=parse_logging_config(config_dict.get("logging", {}), settings),
    )


def load_config(config_path: str = "rtprovider.yaml") -> Dict[str, Any]:
    """Load configuration from YAML file.

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is invalid YAML
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with config_file.open("r") as f:
        config = yaml.safe_load(f)

    if config is None:
        config = {}

    if not isinstance(config, dict):
        raise TypeError(
            f"Configuration root must be a mapping, got {type(config).__name__}"
        )

    return _expand_env_vars(config)


def _expand_env_vars(obj: Any) -> Any:
    """Recursively expand environment variables in configuration.

    Args:
        obj: Configuration object (dict, list, str, etc.)

    Returns:
        Configuration with expanded environment variables
    """
    if isinstance(obj, dict):
        return {key: _expand_env_vars(value) for key, value in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(item) for item in obj]
    elif isinstance(obj, str):
        return os.path.expandvars(obj)
    else:
        return obj


def load_typed_config(
    config_path: str = "rtprovider.yaml",
    settings: Optional[ProviderSettings] = None,
) -> ProviderConfig:
    """Load and parse configuration into typed dataclass.

    Args:
        config_path: Path to configuration file
        settings: Environment defaults (read from the environment if None)

    Returns:
        ProviderConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is invalid YAML
    """
    return parse_config(load_config(config_path), settings)
