"""Repository classes, package types and their validators."""

import re

from ..resource.validators import (
    all_of,
    string_does_not_contain_any,
    string_does_not_match,
    string_in_slice,
)

RCLASS_LOCAL = "local"
RCLASS_REMOTE = "remote"
RCLASS_VIRTUAL = "virtual"

PACKAGE_TYPES = (
    "alpine",
    "bower",
    "cargo",
    "chef",
    "cocoapods",
    "composer",
    "conan",
    "conda",
    "cran",
    "debian",
    "docker",
    "gems",
    "generic",
    "gitlfs",
    "go",
    "gradle",
    "helm",
    "ivy",
    "maven",
    "npm",
    "nuget",
    "opkg",
    "p2",
    "puppet",
    "pypi",
    "rpm",
    "sbt",
    "vagrant",
    "vcs",
)

LOCAL_PACKAGE_TYPES = PACKAGE_TYPES

REMOTE_PACKAGE_TYPES = tuple(t for t in PACKAGE_TYPES if t != "vagrant")

VIRTUAL_PACKAGE_TYPES = tuple(
    t
    for t in PACKAGE_TYPES
    if t not in ("cargo", "cocoapods", "composer", "opkg", "vagrant", "vcs")
)

# Maven-layout package types share one set of extension fields
MAVEN_LIKE_TYPES = ("gradle", "ivy", "maven", "sbt")

REPO_KEY_FORBIDDEN_CHARS = " !@#$%^&*()_+={}[]:;<>,/?~`|\\"

repo_key_validator = all_of(
    string_does_not_match(re.compile(r"^[0-9].*"), "repo key cannot start with a number"),
    string_does_not_contain_any(REPO_KEY_FORBIDDEN_CHARS),
)

repo_type_validator = string_in_slice(PACKAGE_TYPES)
