"""Virtual repositories.

Typed resources per package type, plus the deprecated untyped
``artifactory_virtual_repository`` which also keeps the HEAD-based
existence probe.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from ..resource.data import FieldAccessor, ResourceData
from ..resource.definition import Resource
from ..resource.marshal import (
    default_packer,
    embed,
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
    VirtualRepositoryBaseParams,
    base_virtual_repo_schema,
    extension_for,
    unpack_base_virt_repo,
)
from .crud import mk_resource_schema
from .types import MAVEN_LIKE_TYPES, RCLASS_VIRTUAL, VIRTUAL_PACKAGE_TYPES, repo_type_validator

LEGACY_DEPRECATION_MESSAGE = (
    "This resource is deprecated and you should use repo type specific resources "
    "(such as artifactory_virtual_maven_repository) in the future"
)

POM_CLEANUP_POLICIES = ["discard_active_reference", "discard_any_reference", "nothing"]


@dataclass
class DebianVirtualRepositoryParams:
    debian_trivial_layout: Optional[bool] = opt_bool_field(
        "debianTrivialLayout", "debian_trivial_layout"
    )


@dataclass
class MavenVirtualRepositoryParams:
    key_pair: str = str_field("keyPair", "key_pair")
    pom_repository_references_cleanup_policy: str = str_field(
        "pomRepositoryReferencesCleanupPolicy", "pom_repository_references_cleanup_policy"
    )
    force_maven_authentication: Optional[bool] = opt_bool_field(
        "forceMavenAuthentication", "force_maven_authentication"
    )


@dataclass
class NugetVirtualRepositoryParams:
    force_nuget_authentication: Optional[bool] = opt_bool_field(
        "forceNugetAuthentication", "force_nuget_authentication"
    )


def _select_extension(data: Mapping[str, Any]) -> Optional[type]:
    return extension_for(VIRTUAL_EXTENSIONS, data.get("packageType"))


@dataclass
class VirtualRepository:
    base: VirtualRepositoryBaseParams = embed(VirtualRepositoryBaseParams)
    extension: Optional[Any] = variant(_select_extension)

    def id(self) -> str:
        return self.base.key


def debian_virtual_schema() -> Dict[str, Attribute]:
    return {"debian_trivial_layout": Attribute(AttrType.BOOL, optional=True)}


def unpack_debian_virtual(d: FieldAccessor) -> DebianVirtualRepositoryParams:
    return DebianVirtualRepositoryParams(
        debian_trivial_layout=d.get_bool_ref("debian_trivial_layout"),
    )


def maven_virtual_schema() -> Dict[str, Attribute]:
    return {
        "key_pair": Attribute(AttrType.STRING, optional=True),
        "pom_repository_references_cleanup_policy": Attribute(
            AttrType.STRING,
            optional=True,
            computed=True,
            validate=string_in_slice(POM_CLEANUP_POLICIES),
        ),
        "force_maven_authentication": Attribute(AttrType.BOOL, optional=True, computed=True),
    }


def unpack_maven_virtual(d: FieldAccessor) -> MavenVirtualRepositoryParams:
    return MavenVirtualRepositoryParams(
        key_pair=d.get_string("key_pair"),
        pom_repository_references_cleanup_policy=d.get_string(
            "pom_repository_references_cleanup_policy"
        ),
        force_maven_authentication=d.get_bool_ref("force_maven_authentication"),
    )


def nuget_virtual_schema() -> Dict[str, Attribute]:
    return {"force_nuget_authentication": Attribute(AttrType.BOOL, optional=True, computed=True)}


def unpack_nuget_virtual(d: FieldAccessor) -> NugetVirtualRepositoryParams:
    # Artifactory accepts this for any package type but only honours it for nuget
    return NugetVirtualRepositoryParams(
        force_nuget_authentication=d.get_bool_ref("force_nuget_authentication"),
    )


_MAVEN_VIRTUAL = Extension(MavenVirtualRepositoryParams, maven_virtual_schema, unpack_maven_virtual)

VIRTUAL_EXTENSIONS: Dict[str, Extension] = {
    "debian": Extension(DebianVirtualRepositoryParams, debian_virtual_schema, unpack_debian_virtual),
    "nuget": Extension(NugetVirtualRepositoryParams, nuget_virtual_schema, unpack_nuget_virtual),
}
VIRTUAL_EXTENSIONS.update({t: _MAVEN_VIRTUAL for t in MAVEN_LIKE_TYPES})


def virtual_repo_schema(package_type: str) -> Dict[str, Attribute]:
    extension = VIRTUAL_EXTENSIONS.get(package_type)
    if extension is None:
        return base_virtual_repo_schema()
    return merge_schema(base_virtual_repo_schema(), extension.schema())


def _unpack(d: FieldAccessor, package_type: str) -> VirtualRepository:
    extension = VIRTUAL_EXTENSIONS.get(package_type)
    return VirtualRepository(
        base=unpack_base_virt_repo(d, package_type),
        extension=extension.unpack(d) if extension is not None else None,
    )


def mk_unpack_virtual_repo(package_type: str):
    def unpack(data: ResourceData) -> Tuple[VirtualRepository, str]:
        repo = _unpack(FieldAccessor(data), package_type)
        return repo, repo.id()

    return unpack


def mk_construct_virtual_repo(package_type: str):
    def construct() -> VirtualRepository:
        cls = extension_for(VIRTUAL_EXTENSIONS, package_type)
        return VirtualRepository(
            base=VirtualRepositoryBaseParams(rclass=RCLASS_VIRTUAL, package_type=package_type),
            extension=cls() if cls is not None else None,
        )

    return construct


def virtual_repository_resource(package_type: str) -> Resource:
    return mk_resource_schema(
        virtual_repo_schema(package_type),
        default_packer,
        mk_unpack_virtual_repo(package_type),
        mk_construct_virtual_repo(package_type),
    )


def virtual_repository_resources() -> Dict[str, Resource]:
    return {
        f"artifactory_virtual_{package_type}_repository": virtual_repository_resource(package_type)
        for package_type in VIRTUAL_PACKAGE_TYPES
    }


# Legacy untyped resource


def legacy_virtual_schema() -> Dict[str, Attribute]:
    return merge_schema(
        base_virtual_repo_schema(),
        {
            "package_type": Attribute(
                AttrType.STRING, required=True, force_new=True, validate=repo_type_validator
            ),
            "artifactory_requests_can_retrieve_remote_artifacts": Attribute(
                AttrType.BOOL, optional=True
            ),
            "debian_trivial_layout": Attribute(AttrType.BOOL, optional=True),
            "key_pair": Attribute(AttrType.STRING, optional=True),
            "pom_repository_references_cleanup_policy": Attribute(
                AttrType.STRING, optional=True, computed=True
            ),
            "force_nuget_authentication": Attribute(AttrType.BOOL, optional=True, computed=True),
        },
    )


def unpack_virtual_repository(data: ResourceData) -> Tuple[VirtualRepository, str]:
    d = FieldAccessor(data)
    repo = _unpack(d, d.get_string("package_type"))
    return repo, repo.id()


def construct_legacy_virtual_repo() -> VirtualRepository:
    return VirtualRepository(base=VirtualRepositoryBaseParams(rclass=RCLASS_VIRTUAL))


def legacy_virtual_repository_resource() -> Resource:
    schema = legacy_virtual_schema()
    return mk_resource_schema(
        schema,
        mk_universal_pack(schema_has_key(schema)),
        unpack_virtual_repository,
        construct_legacy_virtual_repo,
        with_exists=True,
        deprecation_message=LEGACY_DEPRECATION_MESSAGE,
    )
