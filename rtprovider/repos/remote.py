"""Remote repositories, one typed resource per package type."""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..resource.data import FieldAccessor, ResourceData
from ..resource.definition import Resource
from ..resource.marshal import (
    bool_field,
    default_packer,
    embed,
    int_field,
    list_field,
    opt_bool_field,
    str_field,
    variant,
)
from ..resource.schema import Attribute, AttrType, merge_schema
from ..resource.validators import is_url_with_http_or_https, string_in_slice
from .base import (
    Extension,
    RemoteRepositoryBaseParams,
    base_remote_repo_schema,
    extension_for,
    unpack_base_remote_repo,
)
from .crud import mk_resource_schema
from .types import MAVEN_LIKE_TYPES, RCLASS_REMOTE, REMOTE_PACKAGE_TYPES


@dataclass
class CargoRemoteRepositoryParams:
    git_registry_url: str = str_field("gitRegistryUrl", "git_registry_url", omitempty=False)
    anonymous_access: bool = bool_field(
        "cargoAnonymousAccess", "anonymous_access", omitempty=False
    )


@dataclass
class DockerRemoteRepositoryParams:
    enable_token_authentication: Optional[bool] = opt_bool_field(
        "enableTokenAuthentication", "enable_token_authentication"
    )
    block_pushing_schema1: Optional[bool] = opt_bool_field(
        "blockPushingSchema1", "block_pushing_schema1"
    )
    external_dependencies_enabled: bool = bool_field(
        "externalDependenciesEnabled", "external_dependencies_enabled"
    )
    external_dependencies_patterns: List[str] = list_field(
        "externalDependenciesPatterns", "external_dependencies_patterns", ordered=True
    )


@dataclass
class HelmRemoteRepositoryParams:
    helm_charts_base_url: str = str_field("chartsBaseUrl", "helm_charts_base_url")


@dataclass
class MavenRemoteRepositoryParams:
    fetch_jars_eagerly: Optional[bool] = opt_bool_field("fetchJarsEagerly", "fetch_jars_eagerly")
    fetch_sources_eagerly: Optional[bool] = opt_bool_field(
        "fetchSourcesEagerly", "fetch_sources_eagerly"
    )
    remote_repo_checksum_policy_type: str = str_field(
        "remoteRepoChecksumPolicyType", "remote_repo_checksum_policy_type"
    )
    handle_releases: Optional[bool] = opt_bool_field("handleReleases", "handle_releases")
    handle_snapshots: Optional[bool] = opt_bool_field("handleSnapshots", "handle_snapshots")
    suppress_pom_consistency_checks: Optional[bool] = opt_bool_field(
        "suppressPomConsistencyChecks", "suppress_pom_consistency_checks"
    )
    max_unique_snapshots: int = int_field("maxUniqueSnapshots", "max_unique_snapshots")


def _select_extension(data: Mapping[str, Any]) -> Optional[type]:
    return extension_for(REMOTE_EXTENSIONS, data.get("packageType"))


@dataclass
class RemoteRepository:
    base: RemoteRepositoryBaseParams = embed(RemoteRepositoryBaseParams)
    extension: Optional[Any] = variant(_select_extension)

    def id(self) -> str:
        return self.base.key


def cargo_remote_schema() -> Dict[str, Attribute]:
    return {
        "git_registry_url": Attribute(
            AttrType.STRING,
            required=True,
            validate=is_url_with_http_or_https,
            description=(
                'This is the index url, expected to be a git repository. '
                'for remote artifactory use "arturl/git/repokey.git"'
            ),
        ),
        "anonymous_access": Attribute(
            AttrType.BOOL,
            optional=True,
            description=(
                "(On the UI: Anonymous download and search) Cargo client does not send "
                "credentials when performing download and search for crates. Enable this "
                "to allow anonymous access to these resources (only), note that this will "
                "override the security anonymous access option."
            ),
        ),
    }


def unpack_cargo_remote(d: FieldAccessor) -> CargoRemoteRepositoryParams:
    return CargoRemoteRepositoryParams(
        git_registry_url=d.get_string("git_registry_url"),
        anonymous_access=d.get_bool("anonymous_access"),
    )


def docker_remote_schema() -> Dict[str, Attribute]:
    return {
        "enable_token_authentication": Attribute(AttrType.BOOL, optional=True, computed=True),
        "block_pushing_schema1": Attribute(AttrType.BOOL, optional=True, computed=True),
        "external_dependencies_enabled": Attribute(
            AttrType.BOOL,
            optional=True,
            default=False,
            description="Also known as 'Foreign Layers Caching' on the UI",
        ),
        "external_dependencies_patterns": Attribute(
            AttrType.LIST, optional=True, elem=AttrType.STRING
        ),
    }


def unpack_docker_remote(d: FieldAccessor) -> DockerRemoteRepositoryParams:
    return DockerRemoteRepositoryParams(
        enable_token_authentication=d.get_bool_ref("enable_token_authentication", True),
        block_pushing_schema1=d.get_bool_ref("block_pushing_schema1", True),
        external_dependencies_enabled=d.get_bool("external_dependencies_enabled"),
        external_dependencies_patterns=d.get_list("external_dependencies_patterns"),
    )


def helm_remote_schema() -> Dict[str, Attribute]:
    return {
        "helm_charts_base_url": Attribute(
            AttrType.STRING,
            optional=True,
            description=(
                "Base URL for the translation of chart source URLs in the index.yaml "
                "of virtual repos."
            ),
        ),
    }


def unpack_helm_remote(d: FieldAccessor) -> HelmRemoteRepositoryParams:
    return HelmRemoteRepositoryParams(helm_charts_base_url=d.get_string("helm_charts_base_url"))


def maven_remote_schema() -> Dict[str, Attribute]:
    return {
        "fetch_jars_eagerly": Attribute(AttrType.BOOL, optional=True, computed=True),
        "fetch_sources_eagerly": Attribute(AttrType.BOOL, optional=True, computed=True),
        "remote_repo_checksum_policy_type": Attribute(
            AttrType.STRING,
            optional=True,
            computed=True,
            validate=string_in_slice(
                ["generate-if-absent", "fail", "ignore-and-generate", "pass-thru"]
            ),
        ),
        "handle_releases": Attribute(AttrType.BOOL, optional=True, computed=True),
        "handle_snapshots": Attribute(AttrType.BOOL, optional=True, computed=True),
        "suppress_pom_consistency_checks": Attribute(AttrType.BOOL, optional=True, computed=True),
        "max_unique_snapshots": Attribute(AttrType.INT, optional=True, computed=True),
    }


def unpack_maven_remote(d: FieldAccessor) -> MavenRemoteRepositoryParams:
    return MavenRemoteRepositoryParams(
        fetch_jars_eagerly=d.get_bool_ref("fetch_jars_eagerly", True),
        fetch_sources_eagerly=d.get_bool_ref("fetch_sources_eagerly", True),
        remote_repo_checksum_policy_type=d.get_string("remote_repo_checksum_policy_type", True),
        handle_releases=d.get_bool_ref("handle_releases", True),
        handle_snapshots=d.get_bool_ref("handle_snapshots", True),
        suppress_pom_consistency_checks=d.get_bool_ref("suppress_pom_consistency_checks", True),
        max_unique_snapshots=d.get_int("max_unique_snapshots", True),
    )


_MAVEN_REMOTE = Extension(MavenRemoteRepositoryParams, maven_remote_schema, unpack_maven_remote)

REMOTE_EXTENSIONS: Dict[str, Extension] = {
    "cargo": Extension(CargoRemoteRepositoryParams, cargo_remote_schema, unpack_cargo_remote),
    "docker": Extension(DockerRemoteRepositoryParams, docker_remote_schema, unpack_docker_remote),
    "helm": Extension(HelmRemoteRepositoryParams, helm_remote_schema, unpack_helm_remote),
}
REMOTE_EXTENSIONS.update({t: _MAVEN_REMOTE for t in MAVEN_LIKE_TYPES})


def remote_repo_schema(package_type: str) -> Dict[str, Attribute]:
    extension = REMOTE_EXTENSIONS.get(package_type)
    if extension is None:
        return base_remote_repo_schema()
    return merge_schema(base_remote_repo_schema(), extension.schema())


def mk_unpack_remote_repo(package_type: str):
    extension = REMOTE_EXTENSIONS.get(package_type)

    def unpack(data: ResourceData) -> Tuple[RemoteRepository, str]:
        d = FieldAccessor(data)
        repo = RemoteRepository(
            base=unpack_base_remote_repo(d, package_type),
            extension=extension.unpack(d) if extension is not None else None,
        )
        return repo, repo.id()

    return unpack


def mk_construct_remote_repo(package_type: str):
    def construct() -> RemoteRepository:
        cls = extension_for(REMOTE_EXTENSIONS, package_type)
        return RemoteRepository(
            base=RemoteRepositoryBaseParams(rclass=RCLASS_REMOTE, package_type=package_type),
            extension=cls() if cls is not None else None,
        )

    return construct


def remote_repository_resource(package_type: str) -> Resource:
    return mk_resource_schema(
        remote_repo_schema(package_type),
        default_packer,
        mk_unpack_remote_repo(package_type),
        mk_construct_remote_repo(package_type),
    )


def remote_repository_resources() -> Dict[str, Resource]:
    return {
        f"artifactory_remote_{package_type}_repository": remote_repository_resource(package_type)
        for package_type in REMOTE_PACKAGE_TYPES
    }
