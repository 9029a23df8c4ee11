"""Registry for resource definitions.

Maps resource type names (e.g. ``artifactory_local_maven_repository``) to
their Resource definitions.
"""

from typing import Dict, List, Optional

from ..common.logger import get_logger
from ..resource.definition import Resource
from .local import legacy_local_repository_resource, local_repository_resources
from .remote import remote_repository_resources
from .virtual import legacy_virtual_repository_resource, virtual_repository_resources

logger = get_logger("resource_registry")


class ResourceRegistry:
    """Registry of resource definitions.

    One instance per provider; each provider assembles its own table.
    """

    def __init__(self) -> None:
        self._resources: Dict[str, Resource] = {}

    def register(self, name: str, resource: Resource) -> None:
        """Register a resource definition.

        Args:
            name: Resource type name
            resource: Resource definition
        """
        if name in self._resources:
            logger.warning(f"Overwriting existing resource: {name}")
        self._resources[name] = resource
        logger.debug(f"Registered resource: {name}")

    def register_all(self, resources: Dict[str, Resource]) -> None:
        for name, resource in resources.items():
            self.register(name, resource)

    def unregister(self, name: str) -> None:
        """Unregister a resource definition.

        Args:
            name: Resource type name
        """
        if name in self._resources:
            del self._resources[name]
            logger.debug(f"Unregistered resource: {name}")

    def get_resource(self, name: str) -> Optional[Resource]:
        """Get a resource definition by name.

        Args:
            name: Resource type name

        Returns:
            Resource or None if not registered
        """
        return self._resources.get(name)

    def list_resources(self) -> List[str]:
        """List registered resource names, sorted."""
        return sorted(self._resources)

    def as_dict(self) -> Dict[str, Resource]:
        return dict(self._resources)

    def __contains__(self, name: str) -> bool:
        return name in self._resources

    def __len__(self) -> int:
        return len(self._resources)

    def clear(self) -> None:
        """Clear all registered resources (mainly for testing)."""
        self._resources.clear()


def register_repository_resources(registry: ResourceRegistry) -> None:
    """Register every repository resource, typed and legacy."""
    registry.register_all(local_repository_resources())
    registry.register_all(remote_repository_resources())
    registry.register_all(virtual_repository_resources())
    registry.register("artifactory_local_repository", legacy_local_repository_resource())
    registry.register("artifactory_virtual_repository", legacy_virtual_repository_resource())
    logger.info(f"Registered {len(registry)} repository resources")
