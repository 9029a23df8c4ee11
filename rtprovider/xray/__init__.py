"""Xray policy and watch resources."""

from typing import Dict

from ..resource.definition import Resource
from .policy import POLICIES, Policy, policy_resource
from .watch import WATCHES, Watch, watch_resource


def xray_resources() -> Dict[str, Resource]:
    return {
        "artifactory_xray_policy": policy_resource(),
        "artifactory_xray_watch": watch_resource(),
    }


__all__ = [
    "POLICIES",
    "Policy",
    "WATCHES",
    "Watch",
    "policy_resource",
    "watch_resource",
    "xray_resources",
]
