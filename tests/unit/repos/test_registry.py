"""Tests for the resource registry."""

import pytest
from unittest.mock import MagicMock

from rtprovider.repos.registry import ResourceRegistry, register_repository_resources
from rtprovider.repos.types import LOCAL_PACKAGE_TYPES, REMOTE_PACKAGE_TYPES, VIRTUAL_PACKAGE_TYPES


class TestResourceRegistry:
    """Tests for ResourceRegistry class."""

    @pytest.fixture
    def registry(self):
        """Fresh registry for each test."""
        return ResourceRegistry()

    @pytest.fixture
    def resource(self):
        """Stand-in resource definition."""
        return MagicMock(name="resource")

    def test_register_and_get(self, registry, resource):
        """Test registering a resource."""
        registry.register("artifactory_thing", resource)

        assert registry.get_resource("artifactory_thing") is resource
        assert "artifactory_thing" in registry
        assert registry.list_resources() == ["artifactory_thing"]

    def test_get_unknown(self, registry):
        """Test unknown names return None."""
        assert registry.get_resource("nope") is None

    def test_overwrite_warns(self, registry, resource, caplog):
        """Test overwriting logs a warning."""
        registry.register("artifactory_thing", resource)
        replacement = MagicMock(name="replacement")

        registry.register("artifactory_thing", replacement)

        assert registry.get_resource("artifactory_thing") is replacement
        assert "Overwriting existing resource" in caplog.text

    def test_unregister(self, registry, resource):
        """Test unregistering a resource."""
        registry.register("artifactory_thing", resource)
        registry.unregister("artifactory_thing")
        registry.unregister("artifactory_thing")

        assert registry.get_resource("artifactory_thing") is None

    def test_clear(self, registry, resource):
        """Test clearing the registry."""
        registry.register("a", resource)
        registry.clear()

        assert len(registry) == 0

    def test_instances_are_independent(self, resource):
        """Test registries do not share state."""
        first = ResourceRegistry()
        first.register("a", resource)

        assert ResourceRegistry().get_resource("a") is None


class TestRegisterRepositoryResources:
    """Tests for the repository resource table."""

    def test_all_repository_resources(self):
        """Test every typed resource plus the two legacy ones."""
        registry = ResourceRegistry()
        register_repository_resources(registry)

        expected = (
            len(LOCAL_PACKAGE_TYPES) + len(REMOTE_PACKAGE_TYPES) + len(VIRTUAL_PACKAGE_TYPES) + 2
        )
        assert len(registry) == expected
        assert "artifactory_local_repository" in registry
        assert "artifactory_virtual_repository" in registry
        assert registry.get_resource("artifactory_virtual_repository").deprecation_message
