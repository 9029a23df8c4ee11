"""Declarative resource model: schemas, state, marshalling."""

from .data import FieldAccessor, ResourceData
from .definition import Resource, import_state_passthrough
from .marshal import (
    PackError,
    decode_into,
    default_packer,
    from_wire,
    lookup,
    mk_universal_pack,
    schema_has_key,
    to_wire,
    universal_pack,
)
from .schema import (
    AttrType,
    Attribute,
    Diagnostic,
    ValidationError,
    merge_schema,
    validate_config,
)

__all__ = [
    "AttrType",
    "Attribute",
    "Diagnostic",
    "FieldAccessor",
    "PackError",
    "Resource",
    "ResourceData",
    "ValidationError",
    "decode_into",
    "default_packer",
    "from_wire",
    "import_state_passthrough",
    "lookup",
    "merge_schema",
    "mk_universal_pack",
    "schema_has_key",
    "to_wire",
    "universal_pack",
    "validate_config",
]
