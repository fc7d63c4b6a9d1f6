"""
API schema sync check.

Compares the entity dataclasses against the ChatBotKit API schema so that
field drift between the API and this package is caught at build time.
The schema is fetched from the API spec endpoint when reachable; otherwise
the embedded copy below is used.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests

from entities import COMPUTED_FIELDS, KINDS, EntityKind, field_type, wire_name
from validation import validate_schema

logger = logging.getLogger(__name__)

API_SPEC_URL = "https://api.chatbotkit.com/v1/spec"

_JSON_TYPES = {str: "string", int: "integer", float: "number", bool: "boolean", dict: "object"}

_TYPE_ALIASES = {
    "float": "number",
    "float64": "number",
    "double": "number",
    "int": "integer",
    "int64": "integer",
    "bool": "boolean",
    "map": "object",
}


def _string(**extra: Any) -> Dict[str, Any]:
    return {"type": "string", **extra}


_ID = _string(readOnly=True)
_TIMESTAMP = {"type": "integer", "readOnly": True}
_META = {"type": "object"}

EMBEDDED_SCHEMAS: Dict[str, Dict[str, Any]] = {
    "blueprint": {
        "type": "object",
        "required": ["name"],
        "properties": {
            "id": _ID,
            "name": _string(),
            "description": _string(),
            "visibility": _string(),
            "meta": _META,
            "createdAt": _TIMESTAMP,
            "updatedAt": _TIMESTAMP,
        },
    },
    "bot": {
        "type": "object",
        "required": ["name"],
        "properties": {
            "id": _ID,
            "name": _string(),
            "description": _string(),
            "model": _string(),
            "datasetId": _string(),
            "skillsetId": _string(),
            "backstory": _string(),
            "temperature": {"type": "number"},
            "instructions": _string(),
            "moderation": {"type": "boolean"},
            "privacy": {"type": "boolean"},
            "meta": _META,
            "createdAt": _TIMESTAMP,
            "updatedAt": _TIMESTAMP,
        },
    },
    "dataset": {
        "type": "object",
        "required": ["name"],
        "properties": {
            "id": _ID,
            "name": _string(),
            "description": _string(),
            "type": _string(),
            "meta": _META,
            "createdAt": _TIMESTAMP,
            "updatedAt": _TIMESTAMP,
        },
    },
    "file": {
        "type": "object",
        "required": ["name"],
        "properties": {
            "id": _ID,
            "name": _string(),
            "type": _string(),
            "source": _string(),
            "meta": _META,
            "createdAt": _TIMESTAMP,
            "updatedAt": _TIMESTAMP,
        },
    },
    "integration": {
        "type": "object",
        "required": ["name"],
        "properties": {
            "id": _ID,
            "name": _string(),
            "description": _string(),
            "type": _string(),
            "botId": _string(),
            "meta": _META,
            "createdAt": _TIMESTAMP,
            "updatedAt": _TIMESTAMP,
        },
    },
    "portal": {
        "type": "object",
        "required": ["name"],
        "properties": {
            "id": _ID,
            "name": _string(),
            "description": _string(),
            "slug": _string(),
            "blueprintId": _string(),
            "config": {"type": "object"},
            "meta": _META,
            "createdAt": _TIMESTAMP,
            "updatedAt": _TIMESTAMP,
        },
    },
    "secret": {
        "type": "object",
        "required": ["name"],
        "properties": {
            "id": _ID,
            "name": _string(),
            "value": _string(writeOnly=True),
            "meta": _META,
            "createdAt": _TIMESTAMP,
            "updatedAt": _TIMESTAMP,
        },
    },
    "skillset": {
        "type": "object",
        "required": ["name"],
        "properties": {
            "id": _ID,
            "name": _string(),
            "description": _string(),
            "meta": _META,
            "createdAt": _TIMESTAMP,
            "updatedAt": _TIMESTAMP,
        },
    },
}


@dataclass
class KindSyncResult:
    """Comparison of one kind's dataclass against its API schema."""

    kind: str
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass
class SyncReport:
    """Result of a full sync check."""

    source: str
    results: Dict[str, KindSyncResult] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return all(result.ok for result in self.results.values())


def normalize_type(type_name: Any) -> Optional[str]:
    """
    Canonical JSON type of a schema 'type' value.

    Type lists ('["string", "null"]') reduce to their single non-null
    member; anything else that is not a plain type name gives None.
    """
    if isinstance(type_name, list):
        types = [t for t in type_name if t != "null"]
        if len(types) != 1:
            return None
        type_name = types[0]
    if not isinstance(type_name, str):
        return None
    return _TYPE_ALIASES.get(type_name, type_name)


def declared_record_schema(kind_name: str) -> Dict[str, Any]:
    """
    JSON Schema for a declared configuration record of a kind.

    Uses Python field names, omits server-assigned fields, and accepts
    null for every optional field (null means unset).
    """
    kind = KINDS[kind_name]
    api_schema = EMBEDDED_SCHEMAS[kind_name]
    by_wire = {wire_name(f): f.name for f in kind.fields}
    required = set(api_schema.get("required", []))

    properties = {}
    for wire, prop in api_schema["properties"].items():
        if prop.get("readOnly") or wire not in by_wire:
            continue
        prop_type = prop["type"] if wire in required else [prop["type"], "null"]
        properties[by_wire[wire]] = {"type": prop_type}

    return {
        "type": "object",
        "required": sorted(by_wire[wire] for wire in required if wire in by_wire),
        "properties": properties,
        "additionalProperties": False,
    }


def compare_kind(kind: EntityKind, schema: Dict[str, Any]) -> KindSyncResult:
    """
    Compare an entity dataclass against an API object schema.

    Missing required fields and type mismatches are errors; missing
    optional fields, extra fields, and read-only fields that would be sent
    in drafts are warnings.
    """
    result = KindSyncResult(kind=kind.name)
    properties = schema.get("properties", {})
    required = set(schema.get("required", []))

    ours = {wire_name(f): f for f in kind.fields}

    for name, prop in properties.items():
        if not isinstance(prop, dict):
            prop = {}
        expected = normalize_type(prop.get("type"))
        f = ours.get(name)
        if f is None:
            if name in required:
                result.errors.append(
                    f"Missing required field '{name}' (expected type: {expected})"
                )
            else:
                result.warnings.append(
                    f"Missing optional field '{name}' (expected type: {expected})"
                )
            continue

        # Untyped properties and $ref schemas are not compared
        actual = _JSON_TYPES[field_type(f)]
        if expected is not None and expected != actual:
            result.errors.append(
                f"Field '{name}' type mismatch: expected {expected}, got {actual}"
            )

        if prop.get("readOnly") and f.name not in COMPUTED_FIELDS:
            result.warnings.append(
                f"Read-only field '{name}' is sent in create/update drafts"
            )

    for name in ours:
        if name not in properties:
            result.warnings.append(f"Extra field '{name}' not in API schema")

    return result


def fetch_api_schemas(url: str = API_SPEC_URL, timeout: float = 10.0) -> Dict[str, Any]:
    """
    Fetch the OpenAPI document and extract one object schema per kind.

    Component schemas are matched to kinds by name, case-insensitively
    (e.g. 'Bot' -> 'bot').

    Raises:
        requests.RequestException: If the spec cannot be fetched
        ValueError: If the document is not usable
    """
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    document = response.json()
    if not isinstance(document, dict):
        raise ValueError("API spec is not a JSON object")

    components = document.get("components", {}).get("schemas", {})
    schemas = {}
    for component_name, schema in components.items():
        kind_name = component_name.lower()
        if kind_name not in KINDS:
            continue
        ok, error = validate_schema(schema)
        if not ok:
            raise ValueError(f"Schema for '{component_name}' is invalid: {error}")
        schemas[kind_name] = schema
    return schemas


def validate_api_sync(url: str = API_SPEC_URL) -> SyncReport:
    """
    Check every kind against the API schema.

    Falls back to the embedded schemas when the spec endpoint cannot be
    reached or returns nothing usable.
    """
    source = "api"
    try:
        schemas = fetch_api_schemas(url)
    except (requests.RequestException, ValueError) as e:
        logger.warning(f"Could not fetch API schema from {url}: {e}")
        schemas = {}

    if not schemas:
        logger.warning("Using embedded API schema as fallback")
        schemas = EMBEDDED_SCHEMAS
        source = "embedded"

    report = SyncReport(source=source)
    for kind_name in sorted(schemas):
        report.results[kind_name] = compare_kind(KINDS[kind_name], schemas[kind_name])
    return report
