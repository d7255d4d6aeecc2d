"""Schema node model and parsing from raw OpenAPI / Swagger dicts.

A SchemaNode is one of Primitive, Array, Map, Reference or Object. Parsing
never raises for a dict-shaped schema; unknown shapes become free-form
objects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union


@dataclass
class _Node:
    description: str | None = field(default=None, kw_only=True)
    example: Any = field(default=None, kw_only=True)


@dataclass
class Primitive(_Node):
    kind: str
    format: str | None = None
    enum: list[Any] | None = None


@dataclass
class Array(_Node):
    item: SchemaNode


@dataclass
class Map(_Node):
    value: SchemaNode


@dataclass
class Reference(_Node):
    ref: str

    @property
    def name(self) -> str:
        """Definition name: the last path segment of the reference."""
        return self.ref.split("/")[-1]


@dataclass
class Object(_Node):
    name: str | None = None
    properties: dict[str, SchemaNode] = field(default_factory=dict)
    required: list[str] = field(default_factory=list)
    parent: str | None = None


SchemaNode = Union[Primitive, Array, Map, Reference, Object]

_PRIMITIVE_KINDS = {"string", "number", "integer", "boolean", "file"}


def _schema_kind(raw: dict[str, Any]) -> str | None:
    kind = raw.get("type")
    if isinstance(kind, list):
        kind = next((k for k in kind if k != "null"), None)
    return kind


def parse_schema(raw: Any, name: str | None = None) -> SchemaNode:
    """Parse a raw schema dict into a SchemaNode.

    ``name`` is attached to object nodes parsed from named definitions.
    """
    if not isinstance(raw, dict):
        return Object(name=name)

    meta = {"description": raw.get("description"), "example": raw.get("example")}

    if "$ref" in raw:
        return Reference(raw["$ref"], **meta)

    if "allOf" in raw:
        return _parse_all_of(raw, name, meta)

    if "oneOf" in raw or "anyOf" in raw:
        return Object(name=name, **meta)

    kind = _schema_kind(raw)

    if kind == "array" or (kind is None and "items" in raw):
        return Array(parse_schema(raw.get("items", {})), **meta)

    if kind in _PRIMITIVE_KINDS:
        return Primitive(kind, raw.get("format"), raw.get("enum"), **meta)

    if kind not in (None, "object"):
        # Unknown type names still get a node; the resolver decides.
        return Primitive(kind, raw.get("format"), raw.get("enum"), **meta)

    properties = raw.get("properties") or {}
    additional = raw.get("additionalProperties")
    if not properties and additional not in (None, False):
        return Map(parse_schema(additional if isinstance(additional, dict) else {}), **meta)

    return Object(
        name=name,
        properties={k: parse_schema(v) for k, v in properties.items()},
        required=list(raw.get("required", [])),
        **meta,
    )


def _parse_all_of(raw: dict[str, Any], name: str | None, meta: dict[str, Any]) -> SchemaNode:
    members = raw["allOf"]
    refs = [m["$ref"] for m in members if isinstance(m, dict) and "$ref" in m]
    inline = [m for m in members if isinstance(m, dict) and "$ref" not in m]
    inline_props = any(m.get("properties") for m in inline) or raw.get("properties")

    # allOf: [{$ref}] is how Swagger attaches a description to a reference.
    if len(refs) == 1 and not inline_props:
        return Reference(refs[0], **meta)

    properties: dict[str, SchemaNode] = {}
    required: list[str] = list(raw.get("required", []))
    for member in inline + [raw]:
        for prop_name, prop_schema in (member.get("properties") or {}).items():
            properties[prop_name] = parse_schema(prop_schema)
        if member is not raw:
            required.extend(member.get("required", []))

    parent = refs[0].split("/")[-1] if refs else None
    return Object(name=name, properties=properties, required=required, parent=parent, **meta)
