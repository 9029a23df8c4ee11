"""Pytest configuration and shared fixtures."""

import pytest

from rtprovider.client.http import ArtifactoryClient, Context, default_headers
from rtprovider.common.settings import ProviderSettings

BASE_URL = "https://rt.example.com"


@pytest.fixture
def base_url():
    return BASE_URL


@pytest.fixture
def client():
    """Client with instant retries so retry tests do not sleep."""
    c = ArtifactoryClient(
        BASE_URL,
        headers=default_headers(),
        retry_count=5,
        retry_wait=0,
        retry_max_wait=0,
    )
    yield c
    c.close()


@pytest.fixture
def ctx():
    return Context.background()


@pytest.fixture
def empty_settings():
    """Settings that ignore whatever ARTIFACTORY_* variables are set."""
    return ProviderSettings(
        url=None,
        access_token=None,
        api_key=None,
        username=None,
        password=None,
    )


@pytest.fixture
def sample_config():
    """Sample provider configuration dictionary."""
    return {
        "url": "https://rt.example.com/artifactory",
        "username": "admin",
        "password": "password",
        "http": {
            "timeout": 10,
            "retry_count": 3,
        },
        "logging": {
            "level": "DEBUG",
        },
    }
