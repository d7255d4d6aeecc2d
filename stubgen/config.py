"""Generator configuration: type mapping, reserved words, naming options.

Defaults target Rust. A YAML file can override any field; the resulting
GeneratorConfig is never mutated during a generation run.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import yaml


class ConfigError(ValueError):
    """Raised for unreadable or invalid configuration files."""


RUST_RESERVED_WORDS: frozenset[str] = frozenset({
    "abstract", "alignof", "as", "become", "box",
    "break", "const", "continue", "crate", "do",
    "else", "enum", "extern", "false", "final",
    "fn", "for", "if", "impl", "in",
    "let", "loop", "macro", "match", "mod",
    "move", "mut", "offsetof", "override", "priv",
    "proc", "pub", "pure", "ref", "return",
    "self", "sizeof", "static", "struct",
    "super", "trait", "true", "type", "typeof",
    "unsafe", "unsized", "use", "virtual", "where",
    "while", "yield",
})

# Schema type name -> Rust type. Consulted on the fallback path only; direct
# primitive schemas resolve through the *_type fields below first.
RUST_TYPE_MAPPING: dict[str, str] = {
    "integer": "i32",
    "long": "i64",
    "number": "f32",
    "float": "f32",
    "double": "f64",
    "boolean": "bool",
    "string": "String",
    "UUID": "String",
    "date": "String",
    "DateTime": "String",
    "password": "String",
    "file": "File",
    "binary": "Vec<u8>",
    "ByteArray": "String",
    "object": "Value",
}

RUST_PRIMITIVES: frozenset[str] = frozenset({
    "i8", "i16", "i32", "i64",
    "u8", "u16", "u32", "u64",
    "f32", "f64", "str", "String",
    "char", "bool", "Vec<u8>", "File", "BigDecimal",
})

# Container type names that never need an import.
DEFAULT_INCLUDES: frozenset[str] = frozenset({"map", "array"})


@dataclass(frozen=True)
class GeneratorConfig:
    """Settings shared by every stage of one generation run."""

    package_name: str = "docker-api-stubs"
    package_version: str = "0.1.0"
    model_name_prefix: str = ""
    model_name_suffix: str = ""
    reserved_words: frozenset[str] = RUST_RESERVED_WORDS
    type_mapping: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType(dict(RUST_TYPE_MAPPING))
    )
    language_primitives: frozenset[str] = RUST_PRIMITIVES
    default_includes: frozenset[str] = DEFAULT_INCLUDES

    # Direct schema-kind resolution. Deliberately independent of
    # type_mapping["integer"], which stays "i32".
    string_type: str = "String"
    number_type: str = "f32"
    integer_type: str = "i64"
    boolean_type: str = "bool"
    datetime_type: str = "DateTime<Utc>"
    date_type: str = "Date<Utc>"
    date_annotation: str = "serde(with=date_serializer)"
    sequence_template: str = "Vec<{}>"
    mapping_template: str = "HashMap<String, {}>"

    enum_numeric_datatypes: frozenset[str] = frozenset({
        "int", "double", "float",
        "i8", "i16", "i32", "i64", "u8", "u16", "u32", "u64", "f32", "f64",
    })
    doc_comment: str = "///"
    timestamp_example: str = "2019-03-19T18:38:33.131642+03:00"

    # Model names whose descriptors are logged field by field at debug level.
    trace_models: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "reserved_words", frozenset(w.lower() for w in self.reserved_words),
        )
        object.__setattr__(self, "type_mapping", MappingProxyType(dict(self.type_mapping)))
        for name in ("language_primitives", "default_includes",
                     "enum_numeric_datatypes", "trace_models"):
            object.__setattr__(self, name, frozenset(getattr(self, name)))


_FIELD_NAMES = {f.name for f in fields(GeneratorConfig)}


def config_from_dict(data: Mapping[str, Any]) -> GeneratorConfig:
    """Build a config from a plain mapping, rejecting unknown keys.

    ``type_mapping`` entries are merged over the defaults; set
    ``replace_type_mapping: true`` to start from an empty table instead.
    """
    data = dict(data)
    replace_mapping = bool(data.pop("replace_type_mapping", False))

    unknown = sorted(set(data) - _FIELD_NAMES)
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

    if "type_mapping" in data:
        mapping = data["type_mapping"]
        if not isinstance(mapping, Mapping):
            raise ConfigError("type_mapping must be a mapping")
        base = {} if replace_mapping else dict(RUST_TYPE_MAPPING)
        base.update({str(k): str(v) for k, v in mapping.items()})
        data["type_mapping"] = base

    for key in ("reserved_words", "language_primitives", "default_includes",
                "enum_numeric_datatypes", "trace_models"):
        if key in data:
            value = data[key]
            if isinstance(value, str) or not isinstance(value, (list, tuple, set, frozenset)):
                raise ConfigError(f"{key} must be a list of strings")
            data[key] = frozenset(str(v) for v in value)

    return GeneratorConfig(**data)


def load_config(path: Path | None = None) -> GeneratorConfig:
    """Load a YAML config file; no path means the built-in Rust defaults."""
    if path is None:
        return GeneratorConfig()
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Cannot read config {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must contain a mapping")
    return config_from_dict(data)
