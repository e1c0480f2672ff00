import copy
import dataclasses
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional


class ResourceData:
    """Attribute bag for one declarative resource, with change tracking.

    ``attributes`` holds the desired/current values, ``prior`` the values last
    recorded in state. A key has changed when the two disagree.

    Args:
        attributes: Current attribute values, keyed by snake_case name.
        prior: Previously recorded values; empty for a new resource.
        id: Identifier recorded in state; empty means the resource is absent.
    """

    def __init__(
            self,
            attributes: Optional[Dict[str, Any]] = None,
            prior: Optional[Dict[str, Any]] = None,
            id: str = "",
    ) -> None:
        self._attributes: Dict[str, Any] = copy.deepcopy(attributes or {})
        self._prior: Dict[str, Any] = copy.deepcopy(prior or {})
        self._id = id

    def id(self) -> str:
        return self._id

    def set_id(self, value: str) -> None:
        self._id = value

    def get(self, key: str, default: Any = None) -> Any:
        return self._attributes.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._attributes[key] = value

    def has_change(self, key: str) -> bool:
        return self._attributes.get(key) != self._prior.get(key)

    def changed_keys(self) -> List[str]:
        keys = set(self._attributes) | set(self._prior)
        return sorted(k for k in keys if self.has_change(k))

    def attributes(self) -> Dict[str, Any]:
        return copy.deepcopy(self._attributes)


@dataclass
class SchemaField:
    type: str
    description: str = ""
    computed: bool = False
    elem: Optional[Dict[str, "SchemaField"]] = None


@dataclass
class Resource:
    """Descriptor tying a schema to its CRUD handlers."""

    schema: Dict[str, SchemaField]
    create: Callable
    read: Callable
    update: Callable
    delete: Callable
    importer: Optional[Callable] = None
    description: str = ""


def _type_name(f: dataclasses.Field) -> str:
    if "elem" in f.metadata:
        return "list"
    if f.type is bool:
        return "bool"
    return "string"


def resource_schema_build(cls: type) -> Dict[str, SchemaField]:
    """Derives the attribute schema from a dataclass and its field metadata."""
    schema: Dict[str, SchemaField] = {}
    for f in dataclasses.fields(cls):
        elem = f.metadata.get("elem")
        schema[f.name] = SchemaField(
            type=_type_name(f),
            description=f.metadata.get("description", ""),
            computed=f.metadata.get("computed", False),
            elem=resource_schema_build(elem) if elem is not None else None,
        )
    return schema


def _build(cls: type, values: Dict[str, Any], only: Optional[set] = None) -> Any:
    kwargs: Dict[str, Any] = {}
    for f in dataclasses.fields(cls):
        if only is not None and f.name not in only:
            continue
        value = values.get(f.name)
        if value is None:
            continue
        elem = f.metadata.get("elem")
        if elem is not None:
            value = [_build(elem, item) for item in value]
        kwargs[f.name] = value
    return cls(**kwargs)


def resource_build_struct(data: ResourceData, cls: type) -> Any:
    """Builds an instance of ``cls`` from every attribute in ``data``."""
    return _build(cls, data.attributes())


def resource_update(data: ResourceData, cls: type) -> Any:
    """Builds an instance of ``cls`` holding only the changed attributes.

    Unchanged fields keep their zero value, so they are left out of the
    request body and the server keeps its copy.
    """
    return _build(cls, data.attributes(), only=set(data.changed_keys()))


def _to_attribute(value: Any) -> Any:
    if dataclasses.is_dataclass(value):
        return {f.name: _to_attribute(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, list):
        return [_to_attribute(item) for item in value]
    return value


def resource_read(data: ResourceData, obj: Any) -> None:
    """Copies every field of ``obj`` into ``data``."""
    for f in dataclasses.fields(obj):
        data.set(f.name, _to_attribute(getattr(obj, f.name)))


def import_state_passthrough(data: ResourceData, config: Any) -> List[ResourceData]:
    """Imports by ID alone; the following read fills in the attributes."""
    return [data]
