"""Local repositories.

One typed resource per package type (``artifactory_local_<type>_repository``)
plus the legacy untyped ``artifactory_local_repository``, whose package
type is chosen in configuration and whose extension fields are picked to
match it.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from ..resource.data import FieldAccessor, ResourceData
from ..resource.definition import Resource
from ..resource.marshal import (
    default_packer,
    embed,
    int_field,
    mk_universal_pack,
    opt_bool_field,
    schema_has_key,
    str_field,
    variant,
)
from ..resource.schema import Attribute, AttrType, merge_schema
from ..resource.validators import string_in_slice
from .base import (
    Extension,
    LocalRepositoryBaseParams,
    base_local_repo_schema,
    extension_for,
    unpack_base_local_repo,
)
from .crud import mk_resource_schema
from .types import (
    LOCAL_PACKAGE_TYPES,
    MAVEN_LIKE_TYPES,
    RCLASS_LOCAL,
    repo_key_validator,
    repo_type_validator,
)

DEFAULT_DOCKER_API_VERSION = "V2"


@dataclass
class MavenLocalRepositoryParams:
    max_unique_snapshots: int = int_field("maxUniqueSnapshots", "max_unique_snapshots")
    handle_releases: Optional[bool] = opt_bool_field("handleReleases", "handle_releases")
    handle_snapshots: Optional[bool] = opt_bool_field("handleSnapshots", "handle_snapshots")
    suppress_pom_consistency_checks: Optional[bool] = opt_bool_field(
        "suppressPomConsistencyChecks", "suppress_pom_consistency_checks"
    )
    snapshot_version_behavior: str = str_field(
        "snapshotVersionBehavior", "snapshot_version_behavior"
    )
    checksum_policy_type: str = str_field("checksumPolicyType", "checksum_policy_type")


@dataclass
class DebianLocalRepositoryParams:
    debian_trivial_layout: Optional[bool] = opt_bool_field(
        "debianTrivialLayout", "debian_trivial_layout"
    )


@dataclass
class DockerLocalRepositoryParams:
    max_unique_tags: int = int_field("maxUniqueTags", "max_unique_tags")
    docker_api_version: str = str_field("dockerApiVersion", "docker_api_version")
    block_pushing_schema1: Optional[bool] = opt_bool_field(
        "blockPushingSchema1", "block_pushing_schema1"
    )
    tag_retention: int = int_field("dockerTagRetention", "tag_retention")


@dataclass
class RpmLocalRepositoryParams:
    yum_root_depth: int = int_field("yumRootDepth", "yum_root_depth")
    calculate_yum_metadata: Optional[bool] = opt_bool_field(
        "calculateYumMetadata", "calculate_yum_metadata"
    )
    enable_file_lists_indexing: Optional[bool] = opt_bool_field(
        "enableFileListsIndexing", "enable_file_lists_indexing"
    )


@dataclass
class NugetLocalRepositoryParams:
    max_unique_snapshots: int = int_field("maxUniqueSnapshots", "max_unique_snapshots")
    force_nuget_authentication: Optional[bool] = opt_bool_field(
        "forceNugetAuthentication", "force_nuget_authentication"
    )


def _select_extension(data: Mapping[str, Any]) -> Optional[type]:
    return extension_for(LOCAL_EXTENSIONS, data.get("packageType"))


@dataclass
class LocalRepository:
    """Base params plus the extension matching the package type, if any."""

    base: LocalRepositoryBaseParams = embed(LocalRepositoryBaseParams)
    extension: Optional[Any] = variant(_select_extension)

    def id(self) -> str:
        return self.base.key


def maven_local_schema() -> Dict[str, Attribute]:
    return {
        "max_unique_snapshots": Attribute(AttrType.INT, optional=True, computed=True),
        "handle_releases": Attribute(AttrType.BOOL, optional=True, computed=True),
        "handle_snapshots": Attribute(AttrType.BOOL, optional=True, computed=True),
        "suppress_pom_consistency_checks": Attribute(AttrType.BOOL, optional=True, computed=True),
        "snapshot_version_behavior": Attribute(
            AttrType.STRING,
            optional=True,
            computed=True,
            validate=string_in_slice(["unique", "non-unique", "deployer"]),
        ),
        "checksum_policy_type": Attribute(
            AttrType.STRING,
            optional=True,
            computed=True,
            validate=string_in_slice(["client-checksums", "server-generated-checksums"]),
        ),
    }


def unpack_maven_local(d: FieldAccessor) -> MavenLocalRepositoryParams:
    return MavenLocalRepositoryParams(
        max_unique_snapshots=d.get_int("max_unique_snapshots"),
        handle_releases=d.get_bool_ref("handle_releases"),
        handle_snapshots=d.get_bool_ref("handle_snapshots"),
        suppress_pom_consistency_checks=d.get_bool_ref("suppress_pom_consistency_checks"),
        snapshot_version_behavior=d.get_string("snapshot_version_behavior"),
        checksum_policy_type=d.get_string("checksum_policy_type"),
    )


def debian_local_schema() -> Dict[str, Attribute]:
    return {"debian_trivial_layout": Attribute(AttrType.BOOL, optional=True)}


def unpack_debian_local(d: FieldAccessor) -> DebianLocalRepositoryParams:
    return DebianLocalRepositoryParams(
        debian_trivial_layout=d.get_bool_ref("debian_trivial_layout"),
    )


def docker_local_schema() -> Dict[str, Attribute]:
    return {
        "max_unique_tags": Attribute(AttrType.INT, optional=True, computed=True),
        "docker_api_version": Attribute(AttrType.STRING, optional=True, computed=True),
        "block_pushing_schema1": Attribute(AttrType.BOOL, optional=True, computed=True),
        "tag_retention": Attribute(AttrType.INT, optional=True, computed=True),
    }


def unpack_docker_local(d: FieldAccessor) -> DockerLocalRepositoryParams:
    repo = DockerLocalRepositoryParams(
        max_unique_tags=d.get_int("max_unique_tags"),
        docker_api_version=d.get_string("docker_api_version"),
        block_pushing_schema1=d.get_bool_ref("block_pushing_schema1"),
        tag_retention=d.get_int("tag_retention"),
    )
    if repo.docker_api_version == "":
        # resources provisioned before the field existed expect V2
        repo.docker_api_version = DEFAULT_DOCKER_API_VERSION
    return repo


def rpm_local_schema() -> Dict[str, Attribute]:
    return {
        "yum_root_depth": Attribute(AttrType.INT, optional=True),
        "calculate_yum_metadata": Attribute(AttrType.BOOL, optional=True),
        "enable_file_lists_indexing": Attribute(AttrType.BOOL, optional=True, computed=True),
    }


def unpack_rpm_local(d: FieldAccessor) -> RpmLocalRepositoryParams:
    return RpmLocalRepositoryParams(
        yum_root_depth=d.get_int("yum_root_depth"),
        calculate_yum_metadata=d.get_bool_ref("calculate_yum_metadata"),
        enable_file_lists_indexing=d.get_bool_ref("enable_file_lists_indexing"),
    )


def nuget_local_schema() -> Dict[str, Attribute]:
    return {
        "max_unique_snapshots": Attribute(AttrType.INT, optional=True, computed=True),
        "force_nuget_authentication": Attribute(AttrType.BOOL, optional=True, computed=True),
    }


def unpack_nuget_local(d: FieldAccessor) -> NugetLocalRepositoryParams:
    return NugetLocalRepositoryParams(
        max_unique_snapshots=d.get_int("max_unique_snapshots"),
        force_nuget_authentication=d.get_bool_ref("force_nuget_authentication"),
    )


_MAVEN_LOCAL = Extension(MavenLocalRepositoryParams, maven_local_schema, unpack_maven_local)

LOCAL_EXTENSIONS: Dict[str, Extension] = {
    "debian": Extension(DebianLocalRepositoryParams, debian_local_schema, unpack_debian_local),
    "docker": Extension(DockerLocalRepositoryParams, docker_local_schema, unpack_docker_local),
    "nuget": Extension(NugetLocalRepositoryParams, nuget_local_schema, unpack_nuget_local),
    "rpm": Extension(RpmLocalRepositoryParams, rpm_local_schema, unpack_rpm_local),
}
LOCAL_EXTENSIONS.update({t: _MAVEN_LOCAL for t in MAVEN_LIKE_TYPES})


def local_repo_schema(package_type: str) -> Dict[str, Attribute]:
    extension = LOCAL_EXTENSIONS.get(package_type)
    if extension is None:
        return base_local_repo_schema()
    return merge_schema(base_local_repo_schema(), extension.schema())


def mk_unpack_local_repo(package_type: str):
    extension = LOCAL_EXTENSIONS.get(package_type)

    def unpack(data: ResourceData) -> Tuple[LocalRepository, str]:
        d = FieldAccessor(data)
        repo = LocalRepository(
            base=unpack_base_local_repo(d, package_type),
            extension=extension.unpack(d) if extension is not None else None,
        )
        return repo, repo.id()

    return unpack


def mk_construct_local_repo(package_type: str):
    def construct() -> LocalRepository:
        cls = extension_for(LOCAL_EXTENSIONS, package_type)
        return LocalRepository(
            base=LocalRepositoryBaseParams(rclass=RCLASS_LOCAL, package_type=package_type),
            extension=cls() if cls is not None else None,
        )

    return construct


def local_repository_resource(package_type: str) -> Resource:
    return mk_resource_schema(
        local_repo_schema(package_type),
        default_packer,
        mk_unpack_local_repo(package_type),
        mk_construct_local_repo(package_type),
    )


def local_repository_resources() -> Dict[str, Resource]:
    return {
        f"artifactory_local_{package_type}_repository": local_repository_resource(package_type)
        for package_type in LOCAL_PACKAGE_TYPES
    }


# Legacy untyped resource


def legacy_local_schema() -> Dict[str, Attribute]:
    computed_bool = Attribute(AttrType.BOOL, optional=True, computed=True)
    computed_int = Attribute(AttrType.INT, optional=True, computed=True)
    computed_string = Attribute(AttrType.STRING, optional=True, computed=True)
    return {
        "key": Attribute(
            AttrType.STRING, required=True, force_new=True, validate=repo_key_validator
        ),
        "package_type": Attribute(
            AttrType.STRING,
            optional=True,
            force_new=True,
            computed=True,
            validate=repo_type_validator,
        ),
        "description": Attribute(AttrType.STRING, optional=True),
        "notes": Attribute(AttrType.STRING, optional=True),
        "includes_pattern": computed_string,
        "excludes_pattern": computed_string,
        "repo_layout_ref": computed_string,
        "handle_releases": computed_bool,
        "handle_snapshots": computed_bool,
        "max_unique_snapshots": computed_int,
        "debian_trivial_layout": Attribute(AttrType.BOOL, optional=True),
        "checksum_policy_type": computed_string,
        "max_unique_tags": computed_int,
        "snapshot_version_behavior": computed_string,
        "suppress_pom_consistency_checks": computed_bool,
        "blacked_out": computed_bool,
        "property_sets": Attribute(AttrType.SET, optional=True, elem=AttrType.STRING),
        "archive_browsing_enabled": Attribute(AttrType.BOOL, optional=True),
        "calculate_yum_metadata": Attribute(AttrType.BOOL, optional=True),
        "yum_root_depth": Attribute(AttrType.INT, optional=True),
        "docker_api_version": computed_string,
        "enable_file_lists_indexing": computed_bool,
        "xray_index": computed_bool,
        "force_nuget_authentication": computed_bool,
    }


def unpack_local_repository(data: ResourceData) -> Tuple[LocalRepository, str]:
    d = FieldAccessor(data)
    package_type = d.get_string("package_type")
    extension = LOCAL_EXTENSIONS.get(package_type)
    repo = LocalRepository(
        base=unpack_base_local_repo(d, package_type),
        extension=extension.unpack(d) if extension is not None else None,
    )
    return repo, repo.id()


def construct_legacy_local_repo() -> LocalRepository:
    # extension is picked from the packageType in the response
    return LocalRepository(base=LocalRepositoryBaseParams(rclass=RCLASS_LOCAL))


def legacy_local_repository_resource() -> Resource:
    schema = legacy_local_schema()
    return mk_resource_schema(
        schema,
        mk_universal_pack(schema_has_key(schema)),
        unpack_local_repository,
        construct_legacy_local_repo,
    )
