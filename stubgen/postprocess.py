"""Finish model and parameter descriptors before hand-off to the renderer.

Handles:
- Per-model hooks (keyed by definition name, type name or "*")
- Parent names carrying the upstream "null" artifact prefix
- Examples rewritten as /// documentation-comment blocks
- Timestamp parameters: wire format tag and a canonical example
- Text escaping for literals emitted into generated source
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Mapping, Sequence

from .config import GeneratorConfig
from .models import ModelDescriptor, ParameterDescriptor
from .naming import model_type_name

logger = logging.getLogger(__name__)

ModelHook = Callable[[ModelDescriptor], None]

# Upstream reference resolution sometimes yields parents like "nullObjectVersion".
_PARENT_ARTIFACT_PREFIX = "null"

DATETIME_FORMAT = "datetime"


def escape_quotation_mark(text: str) -> str:
    """Remove double quotes so they cannot terminate a string literal."""
    return text.replace('"', "")


def escape_unsafe_characters(text: str) -> str:
    """Break up comment delimiters."""
    return text.replace("*/", "*_/").replace("/*", "/_*")


def escape_text(text: str) -> str:
    """Escape text for use inside a double-quoted string literal."""
    text = text.replace("\\", "\\\\").replace('"', '\\"')
    text = text.replace("\n", "\\n").replace("\r", "\\r").replace("\t", "\\t")
    return escape_unsafe_characters(text)


def example_text(example: Any) -> str | None:
    """Render a raw schema example as text; structured values become JSON."""
    if example is None:
        return None
    if isinstance(example, str):
        return example
    return json.dumps(example, indent=2)


def format_example(config: GeneratorConfig, example: str) -> str:
    """Rewrite an example as a documentation-comment block."""
    marker = config.doc_comment
    if "\n" in example:
        lines = [f"{marker} Example:\n"]
        lines.extend(f"{marker} {part}\n" for part in example.rstrip("\n").split("\n"))
        return "".join(lines)
    return f"{marker} {example}"


def trace_model(model: ModelDescriptor) -> None:
    """Log the fields of a model and its properties at debug level."""
    logger.debug(
        "Model %s: file_name=%s raw_name=%s parent=%s properties=%d imports=%s",
        model.name, model.file_name, model.raw_name, model.parent_name,
        len(model.properties), list(model.imports),
    )
    for prop in model.properties:
        logger.debug(
            "  %s.%s: raw_name=%s type=%s required=%s enum=%s annotation=%s example=%r",
            model.name, prop.normalized_name, prop.raw_name, prop.type_string,
            prop.required, prop.enum_name if prop.is_enum else None,
            prop.annotation, prop.example,
        )


def run_model_hooks(model: ModelDescriptor, hooks: Mapping[str, Sequence[ModelHook]]) -> None:
    """Run hooks registered for this model, then the "*" hooks."""
    keys = []
    for key in (model.raw_name, model.name, "*"):
        if key and key not in keys:
            keys.append(key)
    for key in keys:
        for hook in hooks.get(key, ()):
            hook(model)


def post_process_model(
    config: GeneratorConfig,
    model: ModelDescriptor,
    hooks: Mapping[str, Sequence[ModelHook]] | None = None,
) -> ModelDescriptor:
    """Finish a model whose properties are already resolved and named."""
    if hooks:
        run_model_hooks(model, hooks)

    if model.parent_name:
        parent = model.parent_name
        if parent.startswith(_PARENT_ARTIFACT_PREFIX):
            parent = parent[len(_PARENT_ARTIFACT_PREFIX):]
        model.parent_name = model_type_name(config, parent)

    for prop in model.properties:
        if prop.example is not None:
            prop.example = format_example(config, prop.example)

    return model


def post_process_parameter(config: GeneratorConfig, param: ParameterDescriptor) -> ParameterDescriptor:
    """Apply timestamp formatting and examples to an operation parameter."""
    if param.type_string != config.datetime_type:
        return param

    param.data_format = DATETIME_FORMAT
    if param.example is None:
        param.example = config.timestamp_example
    else:
        param.example = format_example(config, param.example)
    return param
