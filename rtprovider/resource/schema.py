"""Declarative schema descriptors.

A resource schema is a plain ``Dict[str, Attribute]`` keyed by the
snake_case attribute name. Schemas are built by functions that return a
fresh dict on every call, and composed with ``merge_schema``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from .validators import Validator


class AttrType(Enum):
    """Value kinds the declarative tool understands."""

    STRING = "string"
    BOOL = "bool"
    INT = "int"
    LIST = "list"
    SET = "set"


_PYTHON_TYPES = {
    AttrType.STRING: (str,),
    AttrType.BOOL: (bool,),
    AttrType.INT: (int,),
    AttrType.LIST: (list, tuple),
    AttrType.SET: (set, frozenset, list, tuple),
}


@dataclass(frozen=True)
class Attribute:
    """One attribute of a resource schema.

    ``elem`` is the element type for LIST/SET attributes, or a nested
    schema when the attribute is a block (a LIST of mappings, usually with
    ``max_items=1``).
    """

    type: AttrType
    required: bool = False
    optional: bool = False
    computed: bool = False
    force_new: bool = False
    sensitive: bool = False
    default: Any = None
    default_func: Optional[Callable[[], Any]] = None
    validate: Optional[Validator] = None
    description: str = ""
    deprecated: str = ""
    elem: Union[AttrType, Dict[str, "Attribute"], None] = None
    max_items: int = 0
    state_func: Optional[Callable[[Any], Any]] = None
    diff_suppress: Optional[Callable[[str, Any, Any], bool]] = None

    @property
    def is_block(self) -> bool:
        return isinstance(self.elem, dict)

    def zero_value(self) -> Any:
        if self.type is AttrType.STRING:
            return ""
        if self.type is AttrType.BOOL:
            return False
        if self.type is AttrType.INT:
            return 0
        if self.type is AttrType.SET:
            return set()
        return []

    def default_value(self) -> Any:
        """The configured default, or None when the attribute has none."""
        if self.default_func is not None:
            return self.default_func()
        return self.default

    def type_error(self, key: str, value: Any) -> Optional[str]:
        expected = _PYTHON_TYPES[self.type]
        if self.type is AttrType.INT and isinstance(value, bool):
            return f"{key}: expected int, got bool"
        if not isinstance(value, expected):
            return f"{key}: expected {self.type.value}, got {type(value).__name__}"
        return None


@dataclass(frozen=True)
class Diagnostic:
    """A problem reported back to the declarative tool."""

    summary: str
    attribute: str = ""
    severity: str = "error"

    def __str__(self) -> str:
        if self.attribute:
            return f"{self.attribute}: {self.summary}"
        return self.summary


class ValidationError(ValueError):
    """Configuration failed schema validation; nothing was sent."""

    def __init__(self, diagnostics: List[Diagnostic]):
        self.diagnostics = diagnostics
        super().__init__("; ".join(str(d) for d in diagnostics))


def merge_schema(*schemas: Mapping[str, Attribute]) -> Dict[str, Attribute]:
    """Compose schemas into a new dict; later definitions win on collision."""
    result: Dict[str, Attribute] = {}
    for schema in schemas:
        result.update(schema)
    return result


def _is_unset(value: Any) -> bool:
    return value is None or value == "" or (isinstance(value, (list, set, tuple)) and not value)


def validate_config(
    schema: Mapping[str, Attribute],
    values: Mapping[str, Any],
    prefix: str = "",
) -> List[Diagnostic]:
    """Check configured values against a schema.

    Returns every problem found rather than stopping at the first one.
    """
    diagnostics: List[Diagnostic] = []

    for key in values:
        if key not in schema:
            diagnostics.append(
                Diagnostic(f'An argument named "{key}" is not expected here', prefix + key)
            )

    for key, attr in schema.items():
        path = prefix + key
        value = values.get(key)

        if _is_unset(value):
            if attr.required:
                diagnostics.append(Diagnostic(f'The argument "{key}" is required', path))
            continue

        type_error = attr.type_error(key, value)
        if type_error:
            diagnostics.append(Diagnostic(type_error, path))
            continue

        if attr.validate is not None:
            for message in attr.validate(value, key):
                diagnostics.append(Diagnostic(message, path))

        if attr.is_block:
            if attr.max_items and len(value) > attr.max_items:
                diagnostics.append(
                    Diagnostic(f"Too many {key} blocks, no more than {attr.max_items} allowed", path)
                )
            for index, item in enumerate(value):
                if not isinstance(item, Mapping):
                    diagnostics.append(Diagnostic(f"{key}: expected a block", f"{path}.{index}"))
                    continue
                diagnostics.extend(validate_config(attr.elem, item, f"{path}.{index}."))

    return diagnostics
