"""Per-resource state handed to the provider by the declarative tool.

``ResourceData`` holds the planned values for one resource instance, the
prior state it is being compared against, and the remote id. The
``FieldAccessor`` on top of it gives typed reads for unpack functions.
"""

from typing import Any, Dict, List, Mapping, Optional, Tuple

from .schema import Attribute, AttrType


class ResourceData:
    """Attribute bag for one resource instance.

    Args:
        schema: The resource schema
        values: Planned (configured) values; defaults are filled in
        prior: Last-known state, used for change detection
        id: Remote id, empty when the resource does not exist yet
    """

    def __init__(
        self,
        schema: Mapping[str, Attribute],
        values: Optional[Mapping[str, Any]] = None,
        prior: Optional[Mapping[str, Any]] = None,
        id: str = "",
    ):
        self._schema = schema
        self._values: Dict[str, Any] = dict(values or {})
        self._prior: Dict[str, Any] = dict(prior or {})
        self._id = id

        for key, attr in schema.items():
            if self._values.get(key) is None:
                default = attr.default_value()
                if default is not None:
                    self._values[key] = default

    @property
    def schema(self) -> Mapping[str, Attribute]:
        return self._schema

    @property
    def id(self) -> str:
        return self._id

    def set_id(self, value: str) -> None:
        """Set the remote id; an empty id marks the resource as gone."""
        self._id = value

    def _attribute(self, key: str) -> Optional[Attribute]:
        return self._schema.get(key)

    def _zero(self, key: str) -> Any:
        attr = self._attribute(key)
        return attr.zero_value() if attr is not None else None

    def get(self, key: str) -> Any:
        """Current value, or the type's zero value when unset."""
        value = self._values.get(key)
        if value is None:
            return self._zero(key)
        return value

    def get_ok(self, key: str) -> Tuple[Any, bool]:
        """Current value and whether it is set to a non-zero value."""
        value = self.get(key)
        return value, value is not None and value != self._zero(key)

    def is_set(self, key: str) -> bool:
        """Whether a value was given at all, even False or 0."""
        return self._values.get(key) is not None

    def has_change(self, key: str) -> bool:
        attr = self._attribute(key)
        old = self._prior.get(key)
        if old is None:
            old = self._zero(key)
        new = self.get(key)
        if attr is not None:
            if attr.state_func is not None and new:
                new = attr.state_func(new)
            if attr.diff_suppress is not None and attr.diff_suppress(key, old, new):
                return False
            if attr.type is AttrType.SET:
                return set(old) != set(new)
        return old != new

    def set(self, key: str, value: Any) -> Optional[str]:
        """Store a value read back from the server.

        Returns:
            An error message, or None on success
        """
        attr = self._attribute(key)
        if attr is None:
            return f"Invalid address to set: {key!r}"
        if value is None:
            self._values[key] = None
            return None
        error = attr.type_error(key, value)
        if error:
            return error
        if attr.type is AttrType.SET:
            value = set(value)
        elif attr.type is AttrType.LIST:
            value = list(value)
        self._values[key] = value
        return None

    def state(self) -> Dict[str, Any]:
        """The state the declarative tool should persist."""
        result: Dict[str, Any] = {"id": self._id}
        for key, value in self._values.items():
            attr = self._attribute(key)
            if attr is not None and attr.state_func is not None and value:
                value = attr.state_func(value)
            result[key] = value
        return result

    def config(self) -> Dict[str, Any]:
        """Planned values (defaults included), for validation."""
        return dict(self._values)


class FieldAccessor:
    """Typed getters over a ResourceData.

    With ``only_if_changed`` set, a value that has not changed since the
    last-known state comes back as its zero value. Update payloads then
    leave out fields the server itself defaulted, which avoids spurious
    diffs on the next read.
    """

    def __init__(self, data: ResourceData):
        self._data = data

    def __getattr__(self, name: str) -> Any:
        return getattr(self._data, name)

    def _skip(self, key: str, only_if_changed: bool) -> bool:
        return only_if_changed and not self._data.has_change(key)

    def get_string(self, key: str, only_if_changed: bool = False) -> str:
        if self._skip(key, only_if_changed):
            return ""
        value = self._data.get(key)
        return value if isinstance(value, str) else ""

    def get_string_ref(self, key: str, only_if_changed: bool = False) -> Optional[str]:
        value, ok = self._data.get_ok(key)
        if ok and not self._skip(key, only_if_changed):
            return value
        return None

    def get_bool(self, key: str, only_if_changed: bool = False) -> bool:
        if self._skip(key, only_if_changed):
            return False
        return bool(self._data.get(key))

    def get_bool_ref(self, key: str, only_if_changed: bool = False) -> Optional[bool]:
        if self._data.is_set(key) and not self._skip(key, only_if_changed):
            return bool(self._data.get(key))
        return None

    def get_int(self, key: str, only_if_changed: bool = False) -> int:
        if self._skip(key, only_if_changed):
            return 0
        value = self._data.get(key)
        return value if isinstance(value, int) else 0

    def get_list(self, key: str, only_if_changed: bool = False) -> List[str]:
        if self._skip(key, only_if_changed):
            return []
        return [str(item) for item in self._data.get(key) or []]

    def get_set(self, key: str, only_if_changed: bool = False) -> List[str]:
        """Set members as a sorted list, so payloads are deterministic."""
        if self._skip(key, only_if_changed):
            return []
        return sorted(str(item) for item in self._data.get(key) or [])
