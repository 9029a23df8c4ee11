"""Artifactory repository resources."""

from .crud import REPOSITORIES, RestEndpoint, mk_resource_schema
from .local import legacy_local_repository_resource, local_repository_resources
from .registry import ResourceRegistry, register_repository_resources
from .remote import remote_repository_resources
from .types import (
    LOCAL_PACKAGE_TYPES,
    PACKAGE_TYPES,
    REMOTE_PACKAGE_TYPES,
    VIRTUAL_PACKAGE_TYPES,
)
from .virtual import legacy_virtual_repository_resource, virtual_repository_resources

__all__ = [
    "LOCAL_PACKAGE_TYPES",
    "PACKAGE_TYPES",
    "REMOTE_PACKAGE_TYPES",
    "REPOSITORIES",
    "ResourceRegistry",
    "RestEndpoint",
    "VIRTUAL_PACKAGE_TYPES",
    "legacy_local_repository_resource",
    "legacy_virtual_repository_resource",
    "local_repository_resources",
    "mk_resource_schema",
    "register_repository_resources",
    "remote_repository_resources",
    "virtual_repository_resources",
]
