"""Xray watches (``artifactory_xray_watch``).

The watch body nests its name and flags under ``general_data``, so state
is packed explicitly rather than through the generic lookup.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from ..repos.crud import RestEndpoint, mk_resource_schema
from ..resource.data import FieldAccessor, ResourceData
from ..resource.definition import Resource
from ..resource.marshal import PackError, bool_field, list_field, nested_field, str_field
from ..resource.schema import Attribute, AttrType
from ..resource.validators import string_in_slice

WATCHES = RestEndpoint(
    "xray/api/v2/watches/",
    create_method="POST",
    create_on_collection=True,
    update_method="PUT",
)

RESOURCE_TYPES = ["all-repos", "repository", "all-builds", "build", "all-projects", "project"]
FILTER_TYPES = ["regex", "package-type"]
POLICY_TYPES = ["security", "license"]


@dataclass
class WatchGeneralData:
    name: str = str_field("name")
    description: str = str_field("description")
    active: bool = bool_field("active", omitempty=False)


@dataclass
class WatchFilter:
    type: str = str_field("type")
    value: str = str_field("value")


@dataclass
class WatchProjectResource:
    type: str = str_field("type")
    name: str = str_field("name")
    bin_mgr_id: str = str_field("bin_mgr_id")
    filters: List[WatchFilter] = list_field("filters", cls=WatchFilter)


@dataclass
class WatchProjectResources:
    resources: List[WatchProjectResource] = list_field(
        "resources", cls=WatchProjectResource, omitempty=False
    )


@dataclass
class WatchAssignedPolicy:
    name: str = str_field("name")
    type: str = str_field("type")


@dataclass
class Watch:
    general_data: WatchGeneralData = nested_field(WatchGeneralData, "general_data")
    project_resources: WatchProjectResources = nested_field(
        WatchProjectResources, "project_resources"
    )
    assigned_policies: List[WatchAssignedPolicy] = list_field(
        "assigned_policies", cls=WatchAssignedPolicy, omitempty=False
    )
    watch_recipients: List[str] = list_field("watch_recipients")

    def id(self) -> str:
        return self.general_data.name


def watch_schema() -> Dict[str, Attribute]:
    watch_filter = {
        "type": Attribute(AttrType.STRING, required=True, validate=string_in_slice(FILTER_TYPES)),
        "value": Attribute(AttrType.STRING, required=True),
    }
    watch_resource = {
        "type": Attribute(
            AttrType.STRING, required=True, validate=string_in_slice(RESOURCE_TYPES)
        ),
        "name": Attribute(AttrType.STRING, optional=True),
        "bin_mgr_id": Attribute(AttrType.STRING, optional=True, default="default"),
        "filter": Attribute(AttrType.LIST, optional=True, elem=watch_filter),
    }
    assigned_policy = {
        "name": Attribute(AttrType.STRING, required=True),
        "type": Attribute(AttrType.STRING, required=True, validate=string_in_slice(POLICY_TYPES)),
    }
    return {
        "name": Attribute(AttrType.STRING, required=True, force_new=True),
        "description": Attribute(AttrType.STRING, optional=True),
        "active": Attribute(AttrType.BOOL, optional=True, default=True),
        "watch_resource": Attribute(AttrType.LIST, required=True, elem=watch_resource),
        "assigned_policy": Attribute(AttrType.LIST, required=True, elem=assigned_policy),
        "watch_recipients": Attribute(AttrType.SET, optional=True, elem=AttrType.STRING),
    }


def unpack_watch(data: ResourceData) -> Tuple[Watch, str]:
    d = FieldAccessor(data)
    resources = [
        WatchProjectResource(
            type=raw.get("type") or "",
            name=raw.get("name") or "",
            bin_mgr_id=raw.get("bin_mgr_id") or "default",
            filters=[
                WatchFilter(type=f.get("type") or "", value=f.get("value") or "")
                for f in raw.get("filter") or []
            ],
        )
        for raw in d.get("watch_resource") or []
    ]
    policies = [
        WatchAssignedPolicy(name=raw.get("name") or "", type=raw.get("type") or "")
        for raw in d.get("assigned_policy") or []
    ]
    watch = Watch(
        general_data=WatchGeneralData(
            name=d.get_string("name"),
            description=d.get_string("description"),
            active=d.get_bool("active"),
        ),
        project_resources=WatchProjectResources(resources=resources),
        assigned_policies=policies,
        watch_recipients=d.get_set("watch_recipients"),
    )
    return watch, watch.id()


def _flatten_resource(resource: WatchProjectResource) -> Dict[str, Any]:
    return {
        "type": resource.type,
        "name": resource.name,
        "bin_mgr_id": resource.bin_mgr_id,
        "filter": [{"type": f.type, "value": f.value} for f in resource.filters],
    }


def pack_watch(watch: Watch, d: ResourceData) -> None:
    """Write a watch read from Xray back into state.

    Raises:
        PackError: If any attribute failed to set
    """
    values = {
        "name": watch.general_data.name,
        "description": watch.general_data.description,
        "active": watch.general_data.active,
        "watch_resource": [
            _flatten_resource(resource) for resource in watch.project_resources.resources
        ],
        "assigned_policy": [
            {"name": policy.name, "type": policy.type} for policy in watch.assigned_policies
        ],
        "watch_recipients": set(watch.watch_recipients),
    }
    errors = [error for error in (d.set(k, v) for k, v in values.items()) if error]
    if errors:
        raise PackError(errors)


def watch_resource() -> Resource:
    return mk_resource_schema(watch_schema(), pack_watch, unpack_watch, Watch, endpoint=WATCHES)
