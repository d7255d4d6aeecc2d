"""Build the renderer context from a parsed API document.

Turns every schema definition into a ModelDescriptor, every operation into
an OperationDescriptor grouped by tag, and every enumerated property into an
EnumVariantTable, then freezes the lot for the renderer.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from .config import GeneratorConfig
from .enums import build_variant_table, enum_type_name
from .loader import check_reference_cycles, get_paths, parse_definitions, resolve_ref
from .models import (
    EnumVariantTable,
    ModelDescriptor,
    OperationDescriptor,
    ParameterDescriptor,
    PropertyDescriptor,
)
from .naming import (
    camelize,
    member_name,
    model_file_name,
    model_type_name,
    operation_name,
    param_name,
    sanitize_name,
)
from .postprocess import (
    ModelHook,
    example_text,
    post_process_model,
    post_process_parameter,
    trace_model,
)
from .schema import Object, Primitive, Reference, SchemaNode, parse_schema
from .schema_parser import innermost_node, needs_import, resolve_type, type_string

logger = logging.getLogger(__name__)

_HTTP_METHODS = ("get", "post", "put", "delete", "patch", "head", "options")

DEFAULT_TAG = "default"

_JSON_CONTENT_TYPES = ("application/json", "text/json", "*/*")

# Swagger 2.0 inline parameter keys that describe the value's schema.
_INLINE_SCHEMA_KEYS = {"type", "format", "items", "enum", "example", "additionalProperties"}


def strip_leading_slash(path: str) -> str:
    """Remove exactly one leading slash."""
    return path[1:] if path.startswith("/") else path


def derive_operation_id(method: str, path: str) -> str:
    """Build an operationId for operations that lack one.

    GET /containers/{id}/json -> containersIdJsonGet
    """
    words = [sanitize_name(seg.strip("{}")) for seg in path.split("/") if seg]
    words = [w for w in words if w]
    head = words[0] if words else "root"
    tail = "".join(camelize(w) for w in words[1:])
    return head + tail + method.capitalize()


def _deduplicate(names: list[str]) -> list[str]:
    """Make names unique by appending _2, _3, ... to repeats."""
    seen: dict[str, int] = {}
    result = []
    for name in names:
        if name in seen:
            seen[name] += 1
            result.append(f"{name}_{seen[name]}")
        else:
            seen[name] = 1
            result.append(name)
    return result


def _enum_node(node: SchemaNode) -> Primitive | None:
    """The primitive carrying enum values, looking through containers."""
    inner = innermost_node(node)
    if isinstance(inner, Primitive) and inner.enum:
        return inner
    return None


def build_property(
    config: GeneratorConfig,
    schemas: Mapping[str, SchemaNode],
    model_raw_name: str,
    prop_name: str,
    node: SchemaNode,
    required: bool = False,
) -> PropertyDescriptor:
    """Resolve and name one model property."""
    resolution = resolve_type(config, schemas, node)
    prop = PropertyDescriptor(
        raw_name=prop_name,
        normalized_name=member_name(config, prop_name),
        type_string=resolution.type,
        example=example_text(node.example),
        required=required,
        description=node.description,
        annotation=resolution.annotation,
        data_format=resolution.data_format,
    )

    enum = _enum_node(node)
    if enum is not None:
        datatype = type_string(config, schemas, enum)
        prop.is_enum = True
        prop.enum_name = enum_type_name(config, f"{model_raw_name}_{prop_name}")
        prop.variants = build_variant_table(config, enum.enum, datatype)

    return prop


def _model_imports(
    config: GeneratorConfig,
    schemas: Mapping[str, SchemaNode],
    node: Object,
) -> list[str]:
    imports = set()
    for prop_node in node.properties.values():
        inner = innermost_node(prop_node)
        if isinstance(inner, Reference):
            name = type_string(config, schemas, inner)
            if needs_import(config, name):
                imports.add(name)
    return sorted(imports)


def build_model(
    config: GeneratorConfig,
    schemas: Mapping[str, SchemaNode],
    raw_name: str,
    node: SchemaNode,
) -> ModelDescriptor:
    """Build the descriptor for one named definition (before post-processing)."""
    model = ModelDescriptor(
        name=model_type_name(config, raw_name),
        file_name=model_file_name(config, raw_name),
        raw_name=raw_name,
        description=node.description,
    )

    if isinstance(node, Object):
        required = set(node.required)
        model.properties = [
            build_property(config, schemas, raw_name, prop_name, prop_node, prop_name in required)
            for prop_name, prop_node in node.properties.items()
        ]
        if node.parent:
            model.parent_name = node.parent
        model.imports = _model_imports(config, schemas, node)
    else:
        model.alias_type = type_string(config, schemas, node)
        if isinstance(node, Primitive) and node.enum:
            model.variants = build_variant_table(config, node.enum, model.alias_type)

    return model


def _parameter_schema(param: dict[str, Any]) -> dict[str, Any]:
    if "schema" in param:
        return param["schema"]
    return {k: v for k, v in param.items() if k in _INLINE_SCHEMA_KEYS}


def _request_body_schema(request_body: dict[str, Any]) -> dict[str, Any] | None:
    content = request_body.get("content", {})
    for ct in _JSON_CONTENT_TYPES:
        if ct in content:
            return content[ct].get("schema", {})
    return None


def build_parameters(
    config: GeneratorConfig,
    spec: dict[str, Any],
    schemas: Mapping[str, SchemaNode],
    operation: dict[str, Any],
    path_params: Sequence[dict[str, Any]] = (),
) -> list[ParameterDescriptor]:
    """Resolve, name and post-process the parameters of one operation."""
    merged: dict[tuple[str, str], dict[str, Any]] = {}
    for raw in list(path_params) + list(operation.get("parameters", [])):
        if "$ref" in raw:
            raw = resolve_ref(spec, raw["$ref"])
        merged[(raw.get("name", ""), raw.get("in", "query"))] = raw

    entries: list[tuple[str, str, bool, dict[str, Any], Any, str | None]] = []
    for (name, location), raw in merged.items():
        schema = _parameter_schema(raw)
        example = raw.get("example", schema.get("example") if isinstance(schema, dict) else None)
        entries.append((name, location, bool(raw.get("required", False)), schema, example,
                        raw.get("description")))

    request_body = operation.get("requestBody")
    if request_body:
        body_schema = _request_body_schema(request_body)
        if body_schema is not None:
            entries.append(("body", "body", bool(request_body.get("required", False)),
                            body_schema, body_schema.get("example"), request_body.get("description")))

    params = []
    names = _deduplicate([param_name(config, e[0]) for e in entries])
    for normalized, (name, location, required, schema, example, description) in zip(names, entries):
        resolution = resolve_type(config, schemas, parse_schema(schema))
        param = ParameterDescriptor(
            raw_name=name,
            normalized_name=normalized,
            type_string=resolution.type,
            location=location,
            required=required or location == "path",
            example=example_text(example),
            description=description,
            annotation=resolution.annotation,
            data_format=resolution.data_format,
        )
        params.append(post_process_parameter(config, param))
    return params


def build_operations(
    config: GeneratorConfig,
    spec: dict[str, Any],
    schemas: Mapping[str, SchemaNode],
) -> list[OperationDescriptor]:
    """Build one descriptor per operation, in sorted path order."""
    operations: list[OperationDescriptor] = []

    for path, path_item in sorted(get_paths(spec).items()):
        for method in _HTTP_METHODS:
            if method not in path_item:
                continue

            operation = path_item[method]
            raw_id = operation.get("operationId")
            if not raw_id:
                raw_id = derive_operation_id(method, path)
                logger.warning(
                    "Empty operationId for %s %s. Using %s", method.upper(), path, raw_id,
                )

            tags = operation.get("tags") or [DEFAULT_TAG]
            operations.append(OperationDescriptor(
                raw_id=raw_id,
                normalized_id=operation_name(config, raw_id),
                path=strip_leading_slash(path),
                group_tag=tags[0],
                method=method,
                summary=operation.get("summary"),
                parameters=build_parameters(
                    config, spec, schemas, operation, path_item.get("parameters", []),
                ),
            ))

    for op, name in zip(operations, _deduplicate([op.normalized_id for op in operations])):
        op.normalized_id = name

    return operations


def group_by_tag(operations: Sequence[OperationDescriptor]) -> dict[str, list[OperationDescriptor]]:
    """Group operations by tag, keeping first-seen tag order."""
    groups: dict[str, list[OperationDescriptor]] = {}
    for op in operations:
        groups.setdefault(op.group_tag, []).append(op)
    return groups


def _collect_enums(models: Sequence[ModelDescriptor]) -> dict[str, EnumVariantTable]:
    """One table per enum; colliding inline enum names get _2, _3, ...

    Named enum definitions are listed first so they keep their model name.
    """
    owners: list[tuple[PropertyDescriptor | None, str, EnumVariantTable]] = [
        (None, model.name, model.variants) for model in models if model.variants is not None
    ]
    for model in models:
        for prop in model.properties:
            if prop.is_enum and prop.variants is not None:
                owners.append((prop, prop.enum_name, prop.variants))

    enums: dict[str, EnumVariantTable] = {}
    for (prop, _, variants), name in zip(owners, _deduplicate([o[1] for o in owners])):
        if prop is not None:
            prop.enum_name = name
        enums[name] = variants
    return enums


def build_context(
    spec: dict[str, Any],
    config: GeneratorConfig | None = None,
    hooks: Mapping[str, Sequence[ModelHook]] | None = None,
) -> dict[str, Any]:
    """Build the full renderer context from the API document."""
    config = config or GeneratorConfig()
    schemas = parse_definitions(spec)
    check_reference_cycles(schemas)

    all_hooks: dict[str, list[ModelHook]] = {k: list(v) for k, v in (hooks or {}).items()}
    for name in config.trace_models:
        all_hooks.setdefault(name, []).append(trace_model)

    models = []
    for raw_name, node in sorted(schemas.items()):
        model = build_model(config, schemas, raw_name, node)
        models.append(post_process_model(config, model, all_hooks))

    operations = build_operations(config, spec, schemas)
    enums = _collect_enums(models)

    for model in models:
        model.freeze()
    for op in operations:
        op.freeze()

    logger.info("Built %d models, %d operations, %d enums", len(models), len(operations), len(enums))

    return {
        "models": models,
        "operations": operations,
        "operations_by_tag": group_by_tag(operations),
        "enums": enums,
        "model_count": len(models),
        "operation_count": len(operations),
        "package_name": config.package_name,
        "package_version": config.package_version,
        "api_version": spec.get("info", {}).get("version", "unknown"),
    }
