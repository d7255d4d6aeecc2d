"""Resolve schema nodes to Rust type strings.

Resolution order:
1. Array                 -> Vec<item>
2. Map                   -> HashMap<String, value>
3. string/number/integer/boolean -> String / f32 / i64 / bool
4. string date-time      -> DateTime<Utc>
5. string date           -> Date<Utc> (+ serde annotation for the caller)
6. everything else goes through the type mapping table, references,
   already-resolved names and finally a best-effort model name.

Resolution never raises: a schema that cannot be typed precisely still gets
a name, with a warning in the log.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping

from .config import GeneratorConfig
from .naming import model_type_name
from .schema import Array, Map, Object, Primitive, Reference, SchemaNode

logger = logging.getLogger(__name__)

# Formats that turn a primitive into a distinct schema type name.
_FORMAT_SCHEMA_TYPES: dict[tuple[str, str], str] = {
    ("string", "binary"): "binary",
    ("string", "byte"): "ByteArray",
    ("string", "uuid"): "UUID",
    ("string", "password"): "password",
    ("string", "date-time"): "DateTime",
    ("string", "date"): "date",
    ("integer", "int64"): "long",
    ("number", "float"): "float",
    ("number", "double"): "double",
}

# String formats that are not plain strings and take the fallback path.
_SPECIAL_STRING_FORMATS = {"binary", "byte", "uuid", "password"}


@dataclass(frozen=True)
class TypeResolution:
    """Resolved type plus what the caller should record alongside it."""

    type: str
    annotation: str | None = None
    data_format: str | None = None


def schema_type_name(node: SchemaNode) -> str:
    """Return the schema-level type name used for table lookups."""
    if isinstance(node, Reference):
        return node.name
    if isinstance(node, Primitive):
        return _FORMAT_SCHEMA_TYPES.get((node.kind, node.format or ""), node.kind)
    if isinstance(node, Array):
        return "array"
    if isinstance(node, Map):
        return "map"
    return "object"


def resolve_type(
    config: GeneratorConfig,
    schemas: Mapping[str, SchemaNode],
    node: SchemaNode,
    _expanding: frozenset[str] = frozenset(),
) -> TypeResolution:
    """Resolve a schema node to a type declaration."""
    if isinstance(node, Array):
        inner = resolve_type(config, schemas, node.item, _expanding).type
        return TypeResolution(config.sequence_template.format(inner))

    if isinstance(node, Map):
        inner = resolve_type(config, schemas, node.value, _expanding).type
        return TypeResolution(config.mapping_template.format(inner))

    if isinstance(node, Primitive):
        fmt = node.format or ""
        if node.kind == "string":
            if fmt == "date-time":
                return TypeResolution(config.datetime_type)
            if fmt == "date":
                return TypeResolution(config.date_type, config.date_annotation, "date")
            if fmt not in _SPECIAL_STRING_FORMATS:
                return TypeResolution(config.string_type)
        elif node.kind == "number":
            return TypeResolution(config.number_type)
        elif node.kind == "integer":
            return TypeResolution(config.integer_type)
        elif node.kind == "boolean":
            return TypeResolution(config.boolean_type)

    return TypeResolution(_resolve_fallback(config, schemas, node, _expanding))


def _resolve_fallback(
    config: GeneratorConfig,
    schemas: Mapping[str, SchemaNode],
    node: SchemaNode,
    expanding: frozenset[str],
) -> str:
    schema_type = schema_type_name(node)
    target = None

    if isinstance(node, Reference):
        target = schemas.get(node.name)
        if target is not None and not isinstance(target, Object):
            # Trivial aliases (e.g. a named string) resolve to what they alias.
            schema_type = schema_type_name(target)

    if schema_type in config.type_mapping:
        return config.type_mapping[schema_type]

    if isinstance(node, Reference):
        if isinstance(target, (Array, Map, Reference)):
            if node.name in expanding:
                logger.warning(
                    "Cyclic reference through `%s`; using its model name", node.name,
                )
            else:
                return resolve_type(config, schemas, target, expanding | {node.name}).type
        return model_type_name(config, node.name)

    if schema_type in config.type_mapping.values():
        return schema_type

    model_name = model_type_name(config, schema_type)
    logger.warning(
        "could not resolve given type (schema type: %s, model name: %s). "
        "The generated code is probably faulty. Check the schema!",
        schema_type, model_name,
    )
    return schema_type if schema_type in config.language_primitives else model_name


def type_string(config: GeneratorConfig, schemas: Mapping[str, SchemaNode], node: SchemaNode) -> str:
    """Resolve a schema node and return only the type string."""
    return resolve_type(config, schemas, node).type


def innermost_node(node: SchemaNode) -> SchemaNode:
    """Strip Array and Map wrappers."""
    while isinstance(node, (Array, Map)):
        node = node.item if isinstance(node, Array) else node.value
    return node


def needs_import(config: GeneratorConfig, type_name: str) -> bool:
    """Whether a resolved type refers to another generated model."""
    return (
        type_name not in config.default_includes
        and type_name not in config.language_primitives
        and type_name not in config.type_mapping.values()
    )
