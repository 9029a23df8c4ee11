"""HTTP client for the Artifactory and Xray REST APIs."""

from .errors import APIError, ConfigurationError, OperationCancelled
from .http import (
    ArtifactoryClient,
    Context,
    RetryCondition,
    body_matches,
    build_client,
    retry_on_400,
    retry_on_merge_error,
)

__all__ = [
    "APIError",
    "ArtifactoryClient",
    "ConfigurationError",
    "Context",
    "OperationCancelled",
    "RetryCondition",
    "body_matches",
    "build_client",
    "retry_on_400",
    "retry_on_merge_error",
]
