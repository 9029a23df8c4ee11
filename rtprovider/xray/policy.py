"""Xray security and license policies (``artifactory_xray_policy``)."""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..repos.crud import RestEndpoint, mk_resource_schema
from ..resource.data import FieldAccessor, ResourceData
from ..resource.definition import Resource
from ..resource.marshal import (
    bool_field,
    default_packer,
    int_field,
    list_field,
    nested_field,
    opt_bool_field,
    str_field,
)
from ..resource.schema import Attribute, AttrType
from ..resource.validators import int_at_least, string_in_slice

POLICIES = RestEndpoint(
    "xray/api/v2/policies/",
    create_method="POST",
    create_on_collection=True,
    update_method="PUT",
)

POLICY_TYPES = ["security", "license"]
SEVERITIES = ["All Severities", "Critical", "High", "Medium", "Low"]


@dataclass
class BlockDownload:
    unscanned: bool = bool_field("unscanned", "unscanned", omitempty=False)
    active: bool = bool_field("active", "active", omitempty=False)


@dataclass
class PolicyRuleActions:
    mails: List[str] = list_field("mails", "mails")
    webhooks: List[str] = list_field("webhooks", "webhooks")
    fail_build: bool = bool_field("fail_build", "fail_build", omitempty=False)
    block_download: BlockDownload = nested_field(BlockDownload, "block_download", "block_download")
    block_release_bundle_distribution: bool = bool_field(
        "block_release_bundle_distribution", "block_release_bundle_distribution", omitempty=False
    )
    fail_pull_request: bool = bool_field(
        "fail_pull_request", "fail_pull_request", omitempty=False
    )
    notify_deployer: bool = bool_field("notify_deployer", "notify_deployer", omitempty=False)
    notify_watch_recipients: bool = bool_field(
        "notify_watch_recipients", "notify_watch_recipients", omitempty=False
    )
    create_ticket_enabled: bool = bool_field(
        "create_ticket_enabled", "create_ticket_enabled", omitempty=False
    )


@dataclass
class PolicyRuleCriteria:
    # security policies
    min_severity: str = str_field("min_severity", "min_severity")
    # license policies
    allowed_licenses: List[str] = list_field("allowed_licenses", "allowed_licenses")
    banned_licenses: List[str] = list_field("banned_licenses", "banned_licenses")
    allow_unknown: Optional[bool] = opt_bool_field("allow_unknown", "allow_unknown")


@dataclass
class PolicyRule:
    name: str = str_field("name", "name")
    priority: int = int_field("priority", "priority")
    criteria: PolicyRuleCriteria = nested_field(PolicyRuleCriteria, "criteria", "criteria")
    actions: PolicyRuleActions = nested_field(PolicyRuleActions, "actions", "actions")


@dataclass
class Policy:
    name: str = str_field("name", "name")
    type: str = str_field("type", "type")
    description: str = str_field("description", "description")
    author: str = str_field("author", "author")
    created: str = str_field("created", "created")
    modified: str = str_field("modified", "modified")
    rules: List[PolicyRule] = list_field("rules", "rules", cls=PolicyRule)

    def id(self) -> str:
        return self.name


def policy_schema() -> Dict[str, Attribute]:
    criteria = {
        "min_severity": Attribute(
            AttrType.STRING, optional=True, validate=string_in_slice(SEVERITIES)
        ),
        "allowed_licenses": Attribute(AttrType.SET, optional=True, elem=AttrType.STRING),
        "banned_licenses": Attribute(AttrType.SET, optional=True, elem=AttrType.STRING),
        "allow_unknown": Attribute(AttrType.BOOL, optional=True),
    }
    block_download = {
        "unscanned": Attribute(AttrType.BOOL, optional=True),
        "active": Attribute(AttrType.BOOL, optional=True),
    }
    actions = {
        "mails": Attribute(AttrType.SET, optional=True, elem=AttrType.STRING),
        "webhooks": Attribute(AttrType.SET, optional=True, elem=AttrType.STRING),
        "fail_build": Attribute(AttrType.BOOL, optional=True),
        "block_download": Attribute(
            AttrType.LIST, required=True, max_items=1, elem=block_download
        ),
        "block_release_bundle_distribution": Attribute(AttrType.BOOL, optional=True),
        "fail_pull_request": Attribute(AttrType.BOOL, optional=True),
        "notify_deployer": Attribute(AttrType.BOOL, optional=True),
        "notify_watch_recipients": Attribute(AttrType.BOOL, optional=True),
        "create_ticket_enabled": Attribute(AttrType.BOOL, optional=True),
    }
    rule = {
        "name": Attribute(AttrType.STRING, required=True),
        "priority": Attribute(AttrType.INT, required=True, validate=int_at_least(1)),
        "criteria": Attribute(AttrType.LIST, required=True, max_items=1, elem=criteria),
        "actions": Attribute(AttrType.LIST, required=True, max_items=1, elem=actions),
    }
    return {
        "name": Attribute(AttrType.STRING, required=True, force_new=True),
        "type": Attribute(AttrType.STRING, required=True, validate=string_in_slice(POLICY_TYPES)),
        "description": Attribute(AttrType.STRING, optional=True),
        "author": Attribute(AttrType.STRING, computed=True),
        "created": Attribute(AttrType.STRING, computed=True),
        "modified": Attribute(AttrType.STRING, computed=True),
        "rules": Attribute(AttrType.LIST, required=True, elem=rule),
    }


def _first(block: Any) -> Mapping[str, Any]:
    if isinstance(block, (list, tuple)) and block:
        return block[0] or {}
    return {}


def _strings(value: Any) -> List[str]:
    return sorted(str(item) for item in value or [])


def unpack_criteria(raw: Mapping[str, Any]) -> PolicyRuleCriteria:
    allow_unknown = raw.get("allow_unknown")
    return PolicyRuleCriteria(
        min_severity=raw.get("min_severity") or "",
        allowed_licenses=_strings(raw.get("allowed_licenses")),
        banned_licenses=_strings(raw.get("banned_licenses")),
        allow_unknown=bool(allow_unknown) if allow_unknown is not None else None,
    )


def unpack_actions(raw: Mapping[str, Any]) -> PolicyRuleActions:
    block_download = _first(raw.get("block_download"))
    return PolicyRuleActions(
        mails=_strings(raw.get("mails")),
        webhooks=_strings(raw.get("webhooks")),
        fail_build=bool(raw.get("fail_build")),
        block_download=BlockDownload(
            unscanned=bool(block_download.get("unscanned")),
            active=bool(block_download.get("active")),
        ),
        block_release_bundle_distribution=bool(raw.get("block_release_bundle_distribution")),
        fail_pull_request=bool(raw.get("fail_pull_request")),
        notify_deployer=bool(raw.get("notify_deployer")),
        notify_watch_recipients=bool(raw.get("notify_watch_recipients")),
        create_ticket_enabled=bool(raw.get("create_ticket_enabled")),
    )


def unpack_rules(raw_rules: Any) -> List[PolicyRule]:
    return [
        PolicyRule(
            name=raw.get("name") or "",
            priority=raw.get("priority") or 0,
            criteria=unpack_criteria(_first(raw.get("criteria"))),
            actions=unpack_actions(_first(raw.get("actions"))),
        )
        for raw in raw_rules or []
    ]


def unpack_policy(data: ResourceData) -> Tuple[Policy, str]:
    d = FieldAccessor(data)
    policy = Policy(
        name=d.get_string("name"),
        type=d.get_string("type"),
        description=d.get_string("description"),
        rules=unpack_rules(d.get("rules")),
    )
    return policy, policy.id()


def policy_resource() -> Resource:
    return mk_resource_schema(
        policy_schema(),
        default_packer,
        unpack_policy,
        Policy,
        endpoint=POLICIES,
    )
