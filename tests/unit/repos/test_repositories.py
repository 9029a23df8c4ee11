"""Tests for local, remote and virtual repository definitions."""

import json

import pytest
import respx
from httpx import Response

from rtprovider.repos.base import get_md5_hash
from rtprovider.repos.local import (
    DockerLocalRepositoryParams,
    local_repo_schema,
    local_repository_resources,
    mk_unpack_local_repo,
)
from rtprovider.repos.remote import (
    CargoRemoteRepositoryParams,
    mk_unpack_remote_repo,
    remote_repo_schema,
    remote_repository_resource,
    remote_repository_resources,
)
from rtprovider.repos.types import (
    LOCAL_PACKAGE_TYPES,
    REMOTE_PACKAGE_TYPES,
    VIRTUAL_PACKAGE_TYPES,
)
from rtprovider.repos.virtual import (
    LEGACY_DEPRECATION_MESSAGE,
    MavenVirtualRepositoryParams,
    legacy_virtual_repository_resource,
    mk_unpack_virtual_repo,
    virtual_repo_schema,
    virtual_repository_resource,
    virtual_repository_resources,
)
from rtprovider.resource.data import ResourceData
from rtprovider.resource.marshal import default_packer, to_wire
from rtprovider.resource.schema import validate_config

CARGO_URL = "https://rt.example.com/artifactory/api/repositories/cargo-remote"


class TestPackageTypes:
    """Tests for the package type tables."""

    def test_counts(self):
        """Test each class offers the expected package types."""
        assert len(LOCAL_PACKAGE_TYPES) == 29
        assert "vagrant" not in REMOTE_PACKAGE_TYPES
        assert "cargo" not in VIRTUAL_PACKAGE_TYPES
        assert "maven" in VIRTUAL_PACKAGE_TYPES

    def test_resource_names(self):
        """Test typed resource names."""
        assert "artifactory_local_maven_repository" in local_repository_resources()
        assert "artifactory_remote_cargo_repository" in remote_repository_resources()
        assert "artifactory_virtual_npm_repository" in virtual_repository_resources()
        assert "artifactory_remote_vagrant_repository" not in remote_repository_resources()


class TestLocalRepositories:
    """Tests for local repository schemas and unpacking."""

    def test_extension_fields_only_on_matching_type(self):
        """Test docker fields appear only on docker repositories."""
        assert "max_unique_tags" in local_repo_schema("docker")
        assert "max_unique_tags" not in local_repo_schema("npm")
        assert "handle_releases" in local_repo_schema("gradle")

    def test_docker_api_version_defaults_to_v2(self):
        """Test a missing API version is sent as V2."""
        schema = local_repo_schema("docker")
        repo, key = mk_unpack_local_repo("docker")(ResourceData(schema, {"key": "docker-local"}))

        assert key == "docker-local"
        assert isinstance(repo.extension, DockerLocalRepositoryParams)
        assert repo.extension.docker_api_version == "V2"

    def test_pack_of_unpack_matches_declaration(self):
        """Test declared values survive unpack followed by pack."""
        schema = local_repo_schema("rpm")
        declared = {
            "key": "rpm-local",
            "description": "rpms",
            "notes": "internal",
            "blacked_out": True,
            "property_sets": {"artifactory"},
            "yum_root_depth": 2,
            "calculate_yum_metadata": False,
        }
        repo, _ = mk_unpack_local_repo("rpm")(ResourceData(schema, declared))
        packed = ResourceData(schema)

        default_packer(repo, packed)

        for key, value in declared.items():
            assert packed.get(key) == value, key
        assert packed.get("package_type") == "rpm"

    def test_forbidden_characters(self):
        """Test repository keys reject forbidden characters."""
        diagnostics = validate_config(local_repo_schema("generic"), {"key": "my repo"})

        assert diagnostics
        assert diagnostics[0].attribute == "key"


class TestRemoteRepositories:
    """Tests for remote repository schemas and unpacking."""

    def test_retrieval_cache_default(self):
        """Test the retrieval cache period defaults to 7200 seconds."""
        d = ResourceData(remote_repo_schema("npm"), {"key": "npm-remote"})

        assert d.get("retrieval_cache_period_seconds") == 7200

    def test_password_hashed_in_state(self):
        """Test the password is sent in clear and stored as a hash."""
        schema = remote_repo_schema("npm")
        d = ResourceData(
            schema,
            {"key": "npm-remote", "url": "https://registry.npmjs.org", "password": "secret"},
        )

        repo, _ = mk_unpack_remote_repo("npm")(d)

        assert to_wire(repo)["password"] == "secret"
        assert d.state()["password"] == get_md5_hash("secret")

    def test_unchanged_fields_left_out_of_update(self):
        """Test fields equal to prior state are not resent."""
        schema = remote_repo_schema("npm")
        values = {
            "key": "npm-remote",
            "url": "https://registry.npmjs.org",
            "notes": "same",
            "offline": True,
        }
        d = ResourceData(schema, values, prior=dict(values, offline=False), id="npm-remote")

        body = to_wire(mk_unpack_remote_repo("npm")(d)[0])

        assert "notes" not in body
        assert body["offline"] is True
        assert body["url"] == "https://registry.npmjs.org"

    def test_description_suffix_suppressed(self):
        """Test the server's cache suffix on descriptions is not a change."""
        d = ResourceData(
            remote_repo_schema("npm"),
            {"description": "mirror"},
            prior={"description": "mirror (local file cache)"},
        )

        assert not d.has_change("description")

    def test_content_synchronisation_block(self):
        """Test the smart-remote block is sent as an object."""
        d = ResourceData(
            remote_repo_schema("npm"),
            {
                "key": "npm-remote",
                "url": "https://registry.npmjs.org",
                "content_synchronisation": [{"enabled": True}],
            },
        )

        body = to_wire(mk_unpack_remote_repo("npm")(d)[0])

        assert body["contentSynchronisation"]["enabled"] is True

    def test_cargo_requires_git_registry_url(self):
        """Test cargo remotes need a valid index URL."""
        diagnostics = validate_config(
            remote_repo_schema("cargo"),
            {"key": "cargo-remote", "url": "https://crates.io", "git_registry_url": "nope"},
        )

        assert [d.attribute for d in diagnostics] == ["git_registry_url"]

    @respx.mock
    def test_cargo_create(self, client, ctx):
        """Test a cargo remote sends its index URL and anonymous flag."""
        put = respx.put(CARGO_URL).mock(return_value=Response(200))
        respx.get(CARGO_URL).mock(
            return_value=Response(
                200,
                json={
                    "key": "cargo-remote",
                    "rclass": "remote",
                    "packageType": "cargo",
                    "url": "https://github.com/rust-lang/crates.io-index",
                    "gitRegistryUrl": "https://github.com/rust-lang/crates.io-index",
                    "cargoAnonymousAccess": False,
                    "retrievalCachePeriodSecs": 7200,
                    "description": "cargo (local file cache)",
                },
            )
        )
        resource = remote_repository_resource("cargo")
        d = resource.data(
            {
                "key": "cargo-remote",
                "url": "https://github.com/rust-lang/crates.io-index",
                "git_registry_url": "https://github.com/rust-lang/crates.io-index",
            }
        )

        resource.create(ctx, d, client)

        body = json.loads(put.calls[0].request.content)
        assert body["gitRegistryUrl"] == "https://github.com/rust-lang/crates.io-index"
        assert body["cargoAnonymousAccess"] is False
        assert body["retrievalCachePeriodSecs"] == 7200
        assert body["packageType"] == "cargo"
        assert body["rclass"] == "remote"
        assert d.get("anonymous_access") is False
        assert d.get("description") == "cargo (local file cache)"

    def test_cargo_extension_class(self):
        """Test the cargo variant is selected."""
        d = ResourceData(
            remote_repo_schema("cargo"),
            {"key": "c", "url": "https://crates.io", "git_registry_url": "https://x.io/i.git"},
        )

        repo, _ = mk_unpack_remote_repo("cargo")(d)

        assert isinstance(repo.extension, CargoRemoteRepositoryParams)


class TestVirtualRepositories:
    """Tests for virtual repository schemas and unpacking."""

    def test_includes_pattern_default(self):
        """Test virtual repositories include everything by default."""
        d = ResourceData(virtual_repo_schema("npm"), {"key": "npm-virtual"})

        assert d.get("includes_pattern") == "**/*"

    def test_repositories_order_kept(self):
        """Test aggregated repositories keep their resolution order."""
        d = ResourceData(
            virtual_repo_schema("maven"),
            {"key": "maven-virtual", "repositories": ["libs-local", "central-remote"]},
        )

        repo, _ = mk_unpack_virtual_repo("maven")(d)
        body = to_wire(repo)

        assert body["repositories"] == ["libs-local", "central-remote"]
        assert body["rclass"] == "virtual"
        assert isinstance(repo.extension, MavenVirtualRepositoryParams)

    def test_pom_cleanup_policy_validated(self):
        """Test unknown cleanup policies are rejected."""
        diagnostics = validate_config(
            virtual_repo_schema("maven"),
            {
                "key": "maven-virtual",
                "repositories": ["a"],
                "pom_repository_references_cleanup_policy": "everything",
            },
        )

        assert [d.attribute for d in diagnostics] == ["pom_repository_references_cleanup_policy"]

    def test_repositories_required(self):
        """Test a virtual repository needs members."""
        diagnostics = validate_config(virtual_repo_schema("npm"), {"key": "npm-virtual"})

        assert [d.attribute for d in diagnostics] == ["repositories"]

    def test_legacy_resource_deprecated(self):
        """Test the untyped resource warns on every validation."""
        resource = legacy_virtual_repository_resource()
        d = resource.data(
            {"key": "v", "package_type": "npm", "repositories": ["npm-local"]}
        )

        diagnostics = resource.validate(d)

        assert resource.exists_context is not None
        assert [(x.summary, x.severity) for x in diagnostics] == [
            (LEGACY_DEPRECATION_MESSAGE, "warning")
        ]

    def test_legacy_requires_package_type(self):
        """Test the untyped resource needs a package type."""
        resource = legacy_virtual_repository_resource()
        d = resource.data({"key": "v", "repositories": ["npm-local"]})

        errors = [x for x in resource.validate(d) if x.severity == "error"]

        assert [x.attribute for x in errors] == ["package_type"]

    @respx.mock
    def test_virtual_update(self, client, ctx):
        """Test updating a virtual repository posts the new member list."""
        url = "https://rt.example.com/artifactory/api/repositories/npm-virtual"
        post = respx.post(url).mock(return_value=Response(200))
        respx.get(url).mock(
            return_value=Response(
                200,
                json={
                    "key": "npm-virtual",
                    "rclass": "virtual",
                    "packageType": "npm",
                    "repositories": ["b", "a"],
                    "includesPattern": "**/*",
                },
            )
        )
        resource = virtual_repository_resource("npm")
        d = resource.data(
            {"key": "npm-virtual", "repositories": ["b", "a"]},
            prior={"key": "npm-virtual", "repositories": ["a"]},
            id="npm-virtual",
        )

        resource.update(ctx, d, client)

        assert json.loads(post.calls[0].request.content)["repositories"] == ["b", "a"]
        assert d.get("repositories") == ["b", "a"]


@pytest.mark.parametrize("package_type", ["maven", "gradle", "ivy", "sbt"])
def test_maven_like_share_virtual_fields(package_type):
    """Test maven-layout types all expose the maven virtual fields."""
    assert "force_maven_authentication" in virtual_repo_schema(package_type)
