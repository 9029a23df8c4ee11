"""Mapping between payload dataclasses, JSON bodies and declared state.

Payloads are dataclasses whose fields carry a static descriptor in their
metadata:

    json       wire name (camelCase), fields without one never go on the wire
    hcl        declared-state attribute name, fields without one are hidden
    omitempty  leave the field out of the body when empty
    nullable   None means "absent"; False/0 are sent as real values
    embedded   a component whose fields are flattened into the parent
    ordered    a string list kept as a list in state (default: set)
    cls        payload class for nested objects
    select     for embedded variants, picks the class from the raw body

Composition happens through ``embed``: a repository payload is its base
parameters plus at most one package-type extension.
"""

from dataclasses import MISSING, field, fields, is_dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Type, TypeVar

from .data import ResourceData
from .schema import Attribute

T = TypeVar("T")

PackFunc = Callable[[Any, ResourceData], None]
KeyPredicate = Callable[[str], bool]


def _meta(json: Optional[str], hcl: Optional[str], **extra: Any) -> Dict[str, Any]:
    meta = {"json": json, "hcl": hcl, "omitempty": True, "nullable": False}
    meta.update(extra)
    return meta


def str_field(json: str, hcl: Optional[str] = None, omitempty: bool = True) -> Any:
    return field(default="", metadata=_meta(json, hcl, omitempty=omitempty))


def bool_field(json: str, hcl: Optional[str] = None, omitempty: bool = True) -> Any:
    return field(default=False, metadata=_meta(json, hcl, omitempty=omitempty))


def int_field(json: str, hcl: Optional[str] = None, omitempty: bool = True) -> Any:
    return field(default=0, metadata=_meta(json, hcl, omitempty=omitempty))


def opt_bool_field(json: str, hcl: Optional[str] = None) -> Any:
    return field(default=None, metadata=_meta(json, hcl, nullable=True))


def opt_str_field(json: str, hcl: Optional[str] = None) -> Any:
    return field(default=None, metadata=_meta(json, hcl, nullable=True))


def list_field(
    json: str,
    hcl: Optional[str] = None,
    ordered: bool = False,
    omitempty: bool = True,
    cls: Optional[type] = None,
) -> Any:
    return field(
        default_factory=list,
        metadata=_meta(json, hcl, ordered=ordered, omitempty=omitempty, cls=cls),
    )


def nested_field(cls: type, json: str, hcl: Optional[str] = None, nullable: bool = False) -> Any:
    default: Any = None if nullable else MISSING
    factory: Any = MISSING if nullable else cls
    return field(
        default=default,
        default_factory=factory,
        metadata=_meta(json, hcl, nullable=nullable, cls=cls),
    )


def embed(cls: type) -> Any:
    return field(default_factory=cls, metadata=_meta(None, None, embedded=True, cls=cls))


def variant(select: Callable[[Mapping[str, Any]], Optional[type]]) -> Any:
    """An embedded component whose class depends on the payload itself."""
    return field(
        default=None,
        metadata=_meta(None, None, embedded=True, nullable=True, select=select),
    )


# Pack direction: payload -> declared state


def lookup(payload: Any) -> Dict[str, Any]:
    """Collect the declared-state mapping of a payload.

    Embedded components are merged flat, nested objects become a
    single-element list, string lists become sets unless ordered, and
    fields without an ``hcl`` name or holding None are left out.
    """
    values: Dict[str, Any] = {}
    for f in fields(payload):
        value = getattr(payload, f.name)
        meta = f.metadata

        if meta.get("embedded"):
            if value is not None:
                values.update(lookup(value))
            continue

        hcl = meta.get("hcl")
        if not hcl or value is None:
            continue

        if is_dataclass(value):
            values[hcl] = [lookup(value)]
        elif isinstance(value, list) and meta.get("cls") is not None:
            values[hcl] = [lookup(item) for item in value]
        elif isinstance(value, list):
            values[hcl] = list(value) if meta.get("ordered") else set(value)
        else:
            values[hcl] = value
    return values


class PackError(RuntimeError):
    """One or more attributes could not be written into state."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__(f"failed saving state {errors!r}")


def all_keys(key: str) -> bool:
    return True


def schema_has_key(schema: Mapping[str, Attribute]) -> KeyPredicate:
    """Predicate accepting only attributes present in ``schema``."""

    def predicate(key: str) -> bool:
        return key in schema

    return predicate


def universal_pack(
    payload: Any, d: ResourceData, predicate: KeyPredicate = all_keys
) -> None:
    """Write every packed attribute into ``d``.

    All keys are attempted; failures are reported together.

    Raises:
        PackError: If any attribute failed to set
    """
    errors: List[str] = []
    for key, value in lookup(payload).items():
        if not predicate(key):
            continue
        error = d.set(key, value)
        if error:
            errors.append(error)
    if errors:
        raise PackError(errors)


def mk_universal_pack(predicate: KeyPredicate) -> PackFunc:
    def pack(payload: Any, d: ResourceData) -> None:
        universal_pack(payload, d, predicate)

    return pack


default_packer = mk_universal_pack(all_keys)


# Wire direction: payload <-> JSON body


def _is_empty(value: Any) -> bool:
    if is_dataclass(value):
        return False
    return value in ("", 0, False) or (isinstance(value, list) and not value)


def to_wire(payload: Any) -> Dict[str, Any]:
    """Encode a payload as a JSON-ready dict."""
    body: Dict[str, Any] = {}
    for f in fields(payload):
        value = getattr(payload, f.name)
        meta = f.metadata

        if meta.get("embedded"):
            if value is not None:
                body.update(to_wire(value))
            continue

        name = meta.get("json")
        if not name:
            continue

        if value is None:
            if meta.get("nullable") and not meta.get("omitempty"):
                body[name] = None
            continue
        if not meta.get("nullable") and meta.get("omitempty") and _is_empty(value):
            continue

        if is_dataclass(value):
            body[name] = to_wire(value)
        elif isinstance(value, list):
            body[name] = [to_wire(v) if is_dataclass(v) else v for v in value]
        else:
            body[name] = value
    return body


def decode_into(payload: T, data: Mapping[str, Any]) -> T:
    """Overlay a decoded JSON body onto an existing payload.

    Fields missing from the body keep their current value, so constructor
    stamps such as ``rclass`` survive a sparse response.
    """
    for f in fields(payload):
        meta = f.metadata

        if meta.get("embedded"):
            child = getattr(payload, f.name)
            if child is None:
                select = meta.get("select")
                cls = select(data) if select is not None else meta.get("cls")
                if cls is None:
                    continue
                child = cls()
                setattr(payload, f.name, child)
            decode_into(child, data)
            continue

        name = meta.get("json")
        if not name or name not in data:
            continue
        raw = data[name]

        if raw is None:
            if meta.get("nullable"):
                setattr(payload, f.name, None)
            continue

        cls = meta.get("cls")
        if cls is not None and isinstance(raw, Mapping):
            child = getattr(payload, f.name) or cls()
            setattr(payload, f.name, decode_into(child, raw))
        elif cls is not None and isinstance(raw, list):
            setattr(payload, f.name, [decode_into(cls(), item) for item in raw])
        elif isinstance(raw, list):
            setattr(payload, f.name, list(raw))
        else:
            setattr(payload, f.name, raw)
    return payload


def from_wire(cls: Type[T], data: Mapping[str, Any]) -> T:
    return decode_into(cls(), data)
