"""
Managed entity types and their wire codec.

Each resource kind is a dataclass plus an EntityKind descriptor naming its
route prefix and the fields that must never be read back (write-only
secrets). Decoding ignores unknown wire fields and maps absent or null
fields to the field's zero value; a present field of the wrong type is a
DecodeError.
"""

import dataclasses
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar, get_origin

from errors import DecodeError

# Fields assigned by the server and never sent in a draft
COMPUTED_FIELDS = ("id", "created_at", "updated_at")

_ZERO_VALUES = {str: "", int: 0, float: 0.0, bool: False}


def _wire(name: str, **extra: Any) -> Dict[str, Any]:
    return {"wire": name, **extra}


@dataclass
class Entity:
    """Fields shared by every managed entity."""

    id: str = ""
    created_at: int = field(default=0, metadata=_wire("createdAt"))
    updated_at: int = field(default=0, metadata=_wire("updatedAt"))


@dataclass
class Blueprint(Entity):
    name: str = ""
    description: str = ""
    visibility: str = ""
    meta: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Bot(Entity):
    name: str = ""
    description: str = ""
    model: str = ""
    dataset_id: str = field(default="", metadata=_wire("datasetId"))
    skillset_id: str = field(default="", metadata=_wire("skillsetId"))
    backstory: str = ""
    temperature: float = 0.0
    instructions: str = ""
    moderation: bool = False
    privacy: bool = False
    meta: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Dataset(Entity):
    name: str = ""
    description: str = ""
    type: str = ""
    meta: Dict[str, Any] = field(default_factory=dict)


@dataclass
class File(Entity):
    name: str = ""
    type: str = ""
    source: str = ""
    meta: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Integration(Entity):
    name: str = ""
    description: str = ""
    type: str = ""
    bot_id: str = field(default="", metadata=_wire("botId"))
    meta: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Portal(Entity):
    name: str = ""
    description: str = ""
    slug: str = ""
    blueprint_id: str = field(default="", metadata=_wire("blueprintId"))
    config: Dict[str, Any] = field(default_factory=dict)
    meta: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Secret(Entity):
    name: str = ""
    value: str = field(default="", repr=False)  # Write-only, never logged
    meta: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Skillset(Entity):
    name: str = ""
    description: str = ""
    meta: Dict[str, Any] = field(default_factory=dict)


E = TypeVar("E", bound=Entity)


@dataclass
class ListPage:
    """One page of a listing plus the cursor for the next one, if any."""

    items: List[Any] = field(default_factory=list)
    cursor: Optional[str] = None


def wire_name(f: dataclasses.Field) -> str:
    return f.metadata.get("wire", f.name)


def field_type(f: dataclasses.Field) -> type:
    """Plain Python type of a dataclass field (dict for mapping fields)."""
    return get_origin(f.type) or f.type


def zero_value(f: dataclasses.Field) -> Any:
    """The documented empty value for a field's type."""
    ftype = field_type(f)
    if ftype is dict:
        return {}
    return _ZERO_VALUES[ftype]


def _decode_value(f: dataclasses.Field, raw: Any) -> Any:
    if raw is None:
        return zero_value(f)

    ftype = field_type(f)
    if ftype is bool:
        if isinstance(raw, bool):
            return raw
    elif ftype is int:
        if isinstance(raw, int) and not isinstance(raw, bool):
            return raw
        if isinstance(raw, float) and raw.is_integer():
            return int(raw)
    elif ftype is float:
        if isinstance(raw, (int, float)) and not isinstance(raw, bool):
            return float(raw)
    elif ftype is str:
        if isinstance(raw, str):
            return raw
    elif ftype is dict:
        if isinstance(raw, dict):
            return dict(raw)

    raise DecodeError(
        f"field '{wire_name(f)}' expected {ftype.__name__}, "
        f"got {type(raw).__name__}"
    )


def from_wire(entity_cls: Type[E], data: Any) -> E:
    """Build an entity from a decoded JSON object."""
    if not isinstance(data, dict):
        raise DecodeError(
            f"expected a JSON object for {entity_cls.__name__}, "
            f"got {type(data).__name__}"
        )
    values = {
        f.name: _decode_value(f, data.get(wire_name(f)))
        for f in dataclasses.fields(entity_cls)
    }
    return entity_cls(**values)


def to_draft(entity: Entity) -> Dict[str, Any]:
    """
    Encode every mutable field of an entity for the wire.

    Zero values are included, so an update overwrites fields the caller
    left empty instead of keeping their previous remote value.
    """
    return {
        wire_name(f): getattr(entity, f.name)
        for f in dataclasses.fields(entity)
        if f.name not in COMPUTED_FIELDS
    }


def parse_json(payload: bytes) -> Any:
    try:
        return json.loads(payload)
    except ValueError as e:
        raise DecodeError(f"failed to unmarshal response: {e}") from e


@dataclass(frozen=True)
class EntityKind:
    """
    Descriptor of one resource kind.

    The route prefix is the kind name. Sensitive fields are write-only:
    they are sent on create/update but never returned from lookups or
    refreshed from the server on read.
    """

    name: str
    entity_cls: Type[Entity]
    sensitive_fields: Tuple[str, ...] = ()

    @property
    def fields(self) -> Tuple[dataclasses.Field, ...]:
        return dataclasses.fields(self.entity_cls)

    @property
    def mutable_fields(self) -> List[dataclasses.Field]:
        return [f for f in self.fields if f.name not in COMPUTED_FIELDS]

    def decode(self, payload: bytes) -> Entity:
        """Decode a response body into this kind's entity."""
        return from_wire(self.entity_cls, parse_json(payload))

    def decode_page(self, payload: bytes) -> ListPage:
        """Decode a list response body into a ListPage."""
        data = parse_json(payload)
        if not isinstance(data, dict):
            raise DecodeError(
                f"expected a JSON object for {self.name} list, "
                f"got {type(data).__name__}"
            )

        items = data.get("items")
        if items is None:
            items = []
        if not isinstance(items, list):
            raise DecodeError(
                f"field 'items' expected list, got {type(items).__name__}"
            )

        cursor = data.get("cursor")
        if cursor is not None and not isinstance(cursor, str):
            raise DecodeError(
                f"field 'cursor' expected str, got {type(cursor).__name__}"
            )

        return ListPage(
            items=[from_wire(self.entity_cls, item) for item in items],
            cursor=cursor or None,
        )

    def entity_from_record(self, record: Dict[str, Any]) -> Entity:
        """
        Build a draft entity from a declared configuration record.

        Unset (missing or None) fields take their zero value. Computed
        fields are ignored.
        """
        values = {}
        for f in self.mutable_fields:
            value = record.get(f.name)
            values[f.name] = zero_value(f) if value is None else value
        return self.entity_cls(**values)

    def record_from_entity(
        self, entity: Entity, redact: bool = False
    ) -> Dict[str, Any]:
        """Convert an entity to a record dict, optionally without sensitive fields."""
        record = dataclasses.asdict(entity)
        if redact:
            for name in self.sensitive_fields:
                record.pop(name, None)
        return record

    def normalize(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Mutable fields of a record with unset values replaced by zero values."""
        return {
            f.name: zero_value(f) if record.get(f.name) is None else record[f.name]
            for f in self.mutable_fields
        }


BLUEPRINT = EntityKind("blueprint", Blueprint)
BOT = EntityKind("bot", Bot)
DATASET = EntityKind("dataset", Dataset)
FILE = EntityKind("file", File)
INTEGRATION = EntityKind("integration", Integration)
PORTAL = EntityKind("portal", Portal)
SECRET = EntityKind("secret", Secret, sensitive_fields=("value",))
SKILLSET = EntityKind("skillset", Skillset)

KINDS: Dict[str, EntityKind] = {
    kind.name: kind
    for kind in (
        BLUEPRINT,
        BOT,
        DATASET,
        FILE,
        INTEGRATION,
        PORTAL,
        SECRET,
        SKILLSET,
    )
}


def get_kind(name: str) -> EntityKind:
    """
    Look up a kind descriptor by name.

    Raises:
        ValueError: If the kind is unknown
    """
    kind = KINDS.get(name.lower())
    if kind is None:
        available = ", ".join(KINDS)
        raise ValueError(f"Unknown resource kind: {name}. Available kinds: {available}")
    return kind
