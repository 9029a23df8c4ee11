"""Parameters and schemas shared by every repository of a class.

Each repository class (local, remote, virtual) has a base payload, a base
schema builder and a base unpack function. Package-type specific fields
come from an ``Extension`` that is composed on top.
"""

import hashlib
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from ..resource.data import FieldAccessor
from ..resource.marshal import (
    bool_field,
    int_field,
    list_field,
    nested_field,
    opt_bool_field,
    str_field,
)
from ..resource.schema import Attribute, AttrType
from ..resource.validators import int_at_least, is_url_with_http_or_https
from .types import RCLASS_LOCAL, RCLASS_REMOTE, RCLASS_VIRTUAL, repo_key_validator


@dataclass(frozen=True)
class Extension:
    """Package-type specific fields layered on a base payload."""

    cls: type
    schema: Callable[[], Dict[str, Attribute]]
    unpack: Callable[[FieldAccessor], Any]


def extension_for(extensions: Dict[str, Extension], package_type: Optional[str]) -> Optional[type]:
    extension = extensions.get(package_type or "")
    return extension.cls if extension is not None else None


def get_md5_hash(value: str) -> str:
    return hashlib.md5(value.encode()).hexdigest()


def _key_attribute() -> Attribute:
    return Attribute(AttrType.STRING, required=True, force_new=True, validate=repo_key_validator)


def _package_type_attribute() -> Attribute:
    return Attribute(AttrType.STRING, computed=True, force_new=True)


def _string_set() -> Attribute:
    return Attribute(AttrType.SET, optional=True, elem=AttrType.STRING)


# Local


@dataclass
class LocalRepositoryBaseParams:
    key: str = str_field("key", "key")
    rclass: str = str_field("rclass", omitempty=False)
    package_type: str = str_field("packageType", "package_type")
    description: str = str_field("description", "description")
    notes: str = str_field("notes", "notes")
    includes_pattern: str = str_field("includesPattern", "includes_pattern")
    excludes_pattern: str = str_field("excludesPattern", "excludes_pattern")
    repo_layout_ref: str = str_field("repoLayoutRef", "repo_layout_ref")
    blacked_out: Optional[bool] = opt_bool_field("blackedOut", "blacked_out")
    xray_index: Optional[bool] = opt_bool_field("xrayIndex", "xray_index")
    property_sets: List[str] = list_field("propertySets", "property_sets")
    archive_browsing_enabled: Optional[bool] = opt_bool_field(
        "archiveBrowsingEnabled", "archive_browsing_enabled"
    )
    index_compression_formats: List[str] = list_field(
        "optionalIndexCompressionFormats", "index_compression_formats"
    )
    download_direct: Optional[bool] = opt_bool_field("downloadRedirect", "download_direct")

    def id(self) -> str:
        return self.key


def base_local_repo_schema() -> Dict[str, Attribute]:
    return {
        "key": _key_attribute(),
        "package_type": _package_type_attribute(),
        "description": Attribute(AttrType.STRING, optional=True),
        "notes": Attribute(AttrType.STRING, optional=True),
        "includes_pattern": Attribute(AttrType.STRING, optional=True, computed=True),
        "excludes_pattern": Attribute(AttrType.STRING, optional=True, computed=True),
        "repo_layout_ref": Attribute(AttrType.STRING, optional=True, computed=True),
        "blacked_out": Attribute(AttrType.BOOL, optional=True, default=False),
        "xray_index": Attribute(AttrType.BOOL, optional=True, computed=True),
        "property_sets": _string_set(),
        "archive_browsing_enabled": Attribute(
            AttrType.BOOL,
            optional=True,
            description=(
                "When set, you may view content such as HTML or Javadoc files directly "
                "from Artifactory.\nThis may not be safe and therefore requires strict "
                "content moderation to prevent malicious users from uploading content "
                "that may compromise security (e.g., cross-site scripting attacks)."
            ),
        ),
        "index_compression_formats": _string_set(),
        "download_direct": Attribute(AttrType.BOOL, optional=True),
    }


def unpack_base_local_repo(d: FieldAccessor, package_type: str) -> LocalRepositoryBaseParams:
    return LocalRepositoryBaseParams(
        rclass=RCLASS_LOCAL,
        key=d.get_string("key"),
        package_type=package_type,
        description=d.get_string("description"),
        notes=d.get_string("notes"),
        includes_pattern=d.get_string("includes_pattern"),
        excludes_pattern=d.get_string("excludes_pattern"),
        repo_layout_ref=d.get_string("repo_layout_ref"),
        blacked_out=d.get_bool_ref("blacked_out"),
        xray_index=d.get_bool_ref("xray_index"),
        property_sets=d.get_set("property_sets"),
        archive_browsing_enabled=d.get_bool_ref("archive_browsing_enabled"),
        index_compression_formats=d.get_set("index_compression_formats"),
        download_direct=d.get_bool_ref("download_direct"),
    )


# Remote


@dataclass
class ContentSyncStatistics:
    enabled: bool = bool_field("enabled")


@dataclass
class ContentSyncProperties:
    enabled: bool = bool_field("enabled")


@dataclass
class ContentSyncSource:
    origin_absence_detection: bool = bool_field("originAbsenceDetection")


@dataclass
class ContentSynchronisation:
    """Smart-remote sync settings; only ``enabled`` is declared."""

    enabled: bool = bool_field("enabled", "enabled")
    statistics: ContentSyncStatistics = nested_field(ContentSyncStatistics, "statistics")
    properties: ContentSyncProperties = nested_field(ContentSyncProperties, "properties")
    source: ContentSyncSource = nested_field(ContentSyncSource, "source")


@dataclass
class RemoteRepositoryBaseParams:
    key: str = str_field("key", "key")
    rclass: str = str_field("rclass", omitempty=False)
    package_type: str = str_field("packageType", "package_type")
    url: str = str_field("url", "url", omitempty=False)
    username: str = str_field("username", "username")
    # never returned by the server; state keeps the configured hash
    password: str = str_field("password")
    proxy: str = str_field("proxy", "proxy", omitempty=False)
    description: str = str_field("description", "description")
    notes: str = str_field("notes", "notes")
    includes_pattern: str = str_field("includesPattern", "includes_pattern")
    excludes_pattern: str = str_field("excludesPattern", "excludes_pattern")
    repo_layout_ref: str = str_field("repoLayoutRef", "repo_layout_ref")
    hard_fail: Optional[bool] = opt_bool_field("hardFail", "hard_fail")
    offline: Optional[bool] = opt_bool_field("offline", "offline")
    blacked_out: Optional[bool] = opt_bool_field("blackedOut", "blacked_out")
    xray_index: Optional[bool] = opt_bool_field("xrayIndex", "xray_index")
    propagate_query_params: bool = bool_field(
        "propagateQueryParams", "propagate_query_params", omitempty=False
    )
    priority_resolution: bool = bool_field(
        "priorityResolution", "priority_resolution", omitempty=False
    )
    store_artifacts_locally: Optional[bool] = opt_bool_field(
        "storeArtifactsLocally", "store_artifacts_locally"
    )
    socket_timeout_millis: int = int_field("socketTimeoutMillis", "socket_timeout_millis")
    local_address: str = str_field("localAddress", "local_address")
    retrieval_cache_period_seconds: int = int_field(
        "retrievalCachePeriodSecs", "retrieval_cache_period_seconds"
    )
    # doesn't appear in the body when calling GET
    failed_retrieval_cache_period_secs: int = int_field("failedRetrievalCachePeriodSecs")
    missed_cache_period_seconds: int = int_field(
        "missedRetrievalCachePeriodSecs", "missed_cache_period_seconds"
    )
    unused_artifacts_cleanup_period_enabled: Optional[bool] = opt_bool_field(
        "unusedArtifactsCleanupEnabled", "unused_artifacts_cleanup_period_enabled"
    )
    unused_artifacts_cleanup_period_hours: int = int_field(
        "unusedArtifactsCleanupPeriodHours", "unused_artifacts_cleanup_period_hours"
    )
    assumed_offline_period_secs: int = int_field(
        "assumedOfflinePeriodSecs", "assumed_offline_period_secs"
    )
    share_configuration: Optional[bool] = opt_bool_field(
        "shareConfiguration", "share_configuration"
    )
    synchronize_properties: Optional[bool] = opt_bool_field(
        "synchronizeProperties", "synchronize_properties"
    )
    block_mismatching_mime_types: Optional[bool] = opt_bool_field(
        "blockMismatchingMimeTypes", "block_mismatching_mime_types"
    )
    property_sets: List[str] = list_field("propertySets", "property_sets")
    allow_any_host_auth: Optional[bool] = opt_bool_field("allowAnyHostAuth", "allow_any_host_auth")
    enable_cookie_management: Optional[bool] = opt_bool_field(
        "enableCookieManagement", "enable_cookie_management"
    )
    bypass_head_requests: Optional[bool] = opt_bool_field(
        "bypassHeadRequests", "bypass_head_requests"
    )
    client_tls_certificate: str = str_field("clientTlsCertificate", "client_tls_certificate")
    content_synchronisation: Optional[ContentSynchronisation] = nested_field(
        ContentSynchronisation, "contentSynchronisation", "content_synchronisation", nullable=True
    )

    def id(self) -> str:
        return self.key


def _suppress_local_file_cache(key: str, old: Any, new: Any) -> bool:
    # this is literally what comes back from the server
    return old == f"{new} (local file cache)"


def base_remote_repo_schema() -> Dict[str, Attribute]:
    non_negative = int_at_least(0)
    head_request_note = (
        "Before caching an artifact, Artifactory first sends a HEAD request to the remote "
        "resource. In some remote resources, HEAD requests are disallowed and therefore "
        "rejected, even though downloading the artifact is allowed. When checked, "
        "Artifactory will bypass the HEAD request and cache the artifact directly using "
        "a GET request."
    )
    return {
        "key": _key_attribute(),
        "package_type": _package_type_attribute(),
        "url": Attribute(AttrType.STRING, required=True, validate=is_url_with_http_or_https),
        "username": Attribute(AttrType.STRING, optional=True),
        "password": Attribute(
            AttrType.STRING, optional=True, sensitive=True, state_func=get_md5_hash
        ),
        "proxy": Attribute(AttrType.STRING, optional=True, computed=True),
        "description": Attribute(
            AttrType.STRING,
            optional=True,
            computed=True,
            diff_suppress=_suppress_local_file_cache,
        ),
        "notes": Attribute(AttrType.STRING, optional=True),
        "includes_pattern": Attribute(AttrType.STRING, optional=True, computed=True),
        "excludes_pattern": Attribute(AttrType.STRING, optional=True, computed=True),
        "repo_layout_ref": Attribute(AttrType.STRING, optional=True, computed=True),
        "hard_fail": Attribute(AttrType.BOOL, optional=True, computed=True),
        "offline": Attribute(
            AttrType.BOOL,
            optional=True,
            computed=True,
            description=(
                "If set, Artifactory does not try to fetch remote artifacts. "
                "Only locally-cached artifacts are retrieved."
            ),
        ),
        "blacked_out": Attribute(
            AttrType.BOOL,
            optional=True,
            computed=True,
            description=(
                "(A.K.A 'Ignore Repository' on the UI) When set, the repository or its "
                "local cache do not participate in artifact resolution."
            ),
        ),
        "xray_index": Attribute(AttrType.BOOL, optional=True, computed=True),
        "store_artifacts_locally": Attribute(
            AttrType.BOOL,
            optional=True,
            computed=True,
            description=(
                "When set, the repository should store cached artifacts locally. When not "
                "set, artifacts are not stored locally, and direct repository-to-client "
                "streaming is used."
            ),
        ),
        "socket_timeout_millis": Attribute(
            AttrType.INT, optional=True, computed=True, validate=non_negative
        ),
        "local_address": Attribute(AttrType.STRING, optional=True),
        "retrieval_cache_period_seconds": Attribute(
            AttrType.INT,
            optional=True,
            computed=True,
            default_func=lambda: 7200,
            validate=non_negative,
            description=(
                "The metadataRetrievalTimeoutSecs field not allowed to be bigger "
                "then retrievalCachePeriodSecs field."
            ),
        ),
        "failed_retrieval_cache_period_secs": Attribute(
            AttrType.INT,
            optional=True,
            computed=True,
            validate=non_negative,
            deprecated=(
                "This field is not returned in a get payload but is offered on the UI. "
                "It's inserted here for inclusive and informational reasons. It does not function"
            ),
        ),
        "missed_cache_period_seconds": Attribute(
            AttrType.INT,
            optional=True,
            computed=True,
            validate=non_negative,
            description="This is actually the missedRetrievalCachePeriodSecs in the API",
        ),
        "unused_artifacts_cleanup_period_enabled": Attribute(
            AttrType.BOOL, optional=True, computed=True
        ),
        "unused_artifacts_cleanup_period_hours": Attribute(
            AttrType.INT, optional=True, computed=True, validate=non_negative
        ),
        "assumed_offline_period_secs": Attribute(
            AttrType.INT, optional=True, validate=non_negative
        ),
        "share_configuration": Attribute(AttrType.BOOL, optional=True, computed=True),
        "synchronize_properties": Attribute(
            AttrType.BOOL,
            optional=True,
            computed=True,
            description="When set, remote artifacts are fetched along with their properties.",
        ),
        "block_mismatching_mime_types": Attribute(
            AttrType.BOOL, optional=True, computed=True, description=head_request_note
        ),
        "property_sets": _string_set(),
        "allow_any_host_auth": Attribute(
            AttrType.BOOL,
            optional=True,
            computed=True,
            description=(
                "Also known as 'Lenient Host Authentication', Allow credentials of this "
                "repository to be used on requests redirected to any other host."
            ),
        ),
        "enable_cookie_management": Attribute(
            AttrType.BOOL,
            optional=True,
            computed=True,
            description=(
                "Enables cookie management if the remote repository uses cookies to "
                "manage client state."
            ),
        ),
        "bypass_head_requests": Attribute(
            AttrType.BOOL, optional=True, computed=True, description=head_request_note
        ),
        "priority_resolution": Attribute(AttrType.BOOL, optional=True, computed=True),
        "client_tls_certificate": Attribute(AttrType.STRING, optional=True, computed=True),
        "content_synchronisation": Attribute(
            AttrType.LIST,
            optional=True,
            computed=True,
            max_items=1,
            elem={"enabled": Attribute(AttrType.BOOL, optional=True)},
        ),
        "propagate_query_params": Attribute(AttrType.BOOL, optional=True, default=False),
    }


def unpack_content_synchronisation(d: FieldAccessor) -> Optional[ContentSynchronisation]:
    value, ok = d.get_ok("content_synchronisation")
    if not ok:
        return None
    block = value[0] or {}
    return ContentSynchronisation(enabled=bool(block.get("enabled", False)))


def unpack_base_remote_repo(d: FieldAccessor, package_type: str) -> RemoteRepositoryBaseParams:
    return RemoteRepositoryBaseParams(
        rclass=RCLASS_REMOTE,
        key=d.get_string("key"),
        package_type=package_type,
        url=d.get_string("url"),
        username=d.get_string("username", True),
        password=d.get_string("password", True),
        proxy=d.get_string("proxy", True),
        description=d.get_string("description", True),
        notes=d.get_string("notes", True),
        includes_pattern=d.get_string("includes_pattern", True),
        excludes_pattern=d.get_string("excludes_pattern", True),
        repo_layout_ref=d.get_string("repo_layout_ref", True),
        hard_fail=d.get_bool_ref("hard_fail", True),
        offline=d.get_bool_ref("offline", True),
        blacked_out=d.get_bool_ref("blacked_out", True),
        xray_index=d.get_bool_ref("xray_index", True),
        propagate_query_params=d.get_bool("propagate_query_params"),
        priority_resolution=d.get_bool("priority_resolution"),
        store_artifacts_locally=d.get_bool_ref("store_artifacts_locally", True),
        socket_timeout_millis=d.get_int("socket_timeout_millis", True),
        local_address=d.get_string("local_address", True),
        retrieval_cache_period_seconds=d.get_int("retrieval_cache_period_seconds", True),
        missed_cache_period_seconds=d.get_int("missed_cache_period_seconds", True),
        unused_artifacts_cleanup_period_enabled=d.get_bool_ref(
            "unused_artifacts_cleanup_period_enabled", True
        ),
        unused_artifacts_cleanup_period_hours=d.get_int(
            "unused_artifacts_cleanup_period_hours", True
        ),
        assumed_offline_period_secs=d.get_int("assumed_offline_period_secs", True),
        share_configuration=d.get_bool_ref("share_configuration", True),
        synchronize_properties=d.get_bool_ref("synchronize_properties", True),
        block_mismatching_mime_types=d.get_bool_ref("block_mismatching_mime_types", True),
        property_sets=d.get_set("property_sets"),
        allow_any_host_auth=d.get_bool_ref("allow_any_host_auth", True),
        enable_cookie_management=d.get_bool_ref("enable_cookie_management", True),
        bypass_head_requests=d.get_bool_ref("bypass_head_requests", True),
        client_tls_certificate=d.get_string("client_tls_certificate", True),
        content_synchronisation=unpack_content_synchronisation(d),
    )


# Virtual


@dataclass
class VirtualRepositoryBaseParams:
    key: str = str_field("key", "key")
    rclass: str = str_field("rclass", omitempty=False)
    package_type: str = str_field("packageType", "package_type")
    description: str = str_field("description", "description")
    notes: str = str_field("notes", "notes")
    includes_pattern: str = str_field("includesPattern", "includes_pattern")
    excludes_pattern: str = str_field("excludesPattern", "excludes_pattern")
    repo_layout_ref: str = str_field("repoLayoutRef", "repo_layout_ref")
    repositories: List[str] = list_field("repositories", "repositories", ordered=True)
    artifactory_requests_can_retrieve_remote_artifacts: Optional[bool] = opt_bool_field(
        "artifactoryRequestsCanRetrieveRemoteArtifacts",
        "artifactory_requests_can_retrieve_remote_artifacts",
    )
    default_deployment_repo: str = str_field("defaultDeploymentRepo", "default_deployment_repo")

    def id(self) -> str:
        return self.key


def base_virtual_repo_schema() -> Dict[str, Attribute]:
    return {
        "key": _key_attribute(),
        "package_type": _package_type_attribute(),
        "description": Attribute(AttrType.STRING, optional=True),
        "notes": Attribute(AttrType.STRING, optional=True),
        "includes_pattern": Attribute(
            AttrType.STRING,
            optional=True,
            default="**/*",
            description=(
                "List of artifact patterns to include when evaluating artifact requests in "
                "the form of x/y/**/z/*. When used, only artifacts matching one of the "
                "include patterns are served. By default, all artifacts are included (**/*)."
            ),
        ),
        "excludes_pattern": Attribute(
            AttrType.STRING,
            optional=True,
            description=(
                "List of artifact patterns to exclude when evaluating artifact requests, in "
                "the form of x/y/**/z/*. By default no artifacts are excluded."
            ),
        ),
        "repo_layout_ref": Attribute(AttrType.STRING, optional=True, computed=True),
        "repositories": Attribute(AttrType.LIST, required=True, elem=AttrType.STRING),
        "artifactory_requests_can_retrieve_remote_artifacts": Attribute(
            AttrType.BOOL, optional=True, default=False
        ),
        "default_deployment_repo": Attribute(AttrType.STRING, optional=True),
    }


def unpack_base_virt_repo(d: FieldAccessor, package_type: str) -> VirtualRepositoryBaseParams:
    return VirtualRepositoryBaseParams(
        key=d.get_string("key"),
        rclass=RCLASS_VIRTUAL,
        package_type=package_type,
        includes_pattern=d.get_string("includes_pattern"),
        excludes_pattern=d.get_string("excludes_pattern"),
        repo_layout_ref=d.get_string("repo_layout_ref"),
        artifactory_requests_can_retrieve_remote_artifacts=d.get_bool_ref(
            "artifactory_requests_can_retrieve_remote_artifacts"
        ),
        repositories=d.get_list("repositories"),
        description=d.get_string("description"),
        notes=d.get_string("notes"),
        default_deployment_repo=d.get_string("default_deployment_repo"),
    )
