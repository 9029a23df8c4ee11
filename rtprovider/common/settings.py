"""Environment-backed defaults for the provider block.

Every provider attribute can be omitted from configuration and picked up
from an ``ARTIFACTORY_*`` environment variable instead.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class ProviderSettings(BaseSettings):
    # Connection
    url: Optional[str] = None

    # Credentials, in order of precedence: access_token, api_key, username+password
    access_token: Optional[str] = None
    api_key: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None

    # HTTP client
    timeout: float = 30.0
    retry_count: int = 5
    retry_wait: float = 0.1
    retry_max_wait: float = 2.0

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="ARTIFACTORY_",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> ProviderSettings:
    return ProviderSettings()
