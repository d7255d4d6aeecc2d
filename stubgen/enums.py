"""Derive enum type names and variant identifiers from raw enum values."""

from __future__ import annotations

import re
from typing import Any, Iterable

from .config import GeneratorConfig
from .models import EnumVariant, EnumVariantTable
from .naming import (
    escape_reserved_word,
    is_reserved_word,
    model_type_name,
    sanitize_name,
    snake_case,
    starts_with_digit,
)
from .postprocess import escape_text

# Whole-value names for values made only of punctuation.
_SYMBOL_NAMES: dict[str, str] = {
    "$": "Dollar",
    "^": "Caret",
    "|": "Pipe",
    "=": "Equal",
    "*": "Star",
    "-": "Minus",
    "&": "Ampersand",
    "%": "Percent",
    "#": "Hash",
    "@": "At",
    "!": "Exclamation",
    "+": "Plus",
    ":": "Colon",
    ">": "Greater_Than",
    "<": "Less_Than",
    ".": "Period",
    "_": "Underscore",
    "?": "Question_Mark",
    ",": "Comma",
    "'": "Quote",
    '"': "Double_Quote",
    "/": "Slash",
    "\\": "Back_Slash",
    "(": "Left_Parenthesis",
    ")": "Right_Parenthesis",
    "{": "Left_Curly_Bracket",
    "}": "Right_Curly_Bracket",
    "[": "Left_Square_Bracket",
    "]": "Right_Square_Bracket",
    "~": "Tilde",
    "`": "Backtick",
    "<=": "Less_Than_Or_Equal_To",
    ">=": "Greater_Than_Or_Equal_To",
    "!=": "Not_Equal",
}


def symbol_name(value: str) -> str | None:
    return _SYMBOL_NAMES.get(value)


def is_numeric_datatype(config: GeneratorConfig, datatype: str) -> bool:
    return datatype in config.enum_numeric_datatypes


def variant_name(config: GeneratorConfig, raw: str, datatype: str) -> str:
    """Build the identifier for one enum value."""
    if len(raw) == 0:
        return "EMPTY"

    if is_numeric_datatype(config, datatype):
        return raw.replace("-", "MINUS_").replace("+", "PLUS_").replace(".", "_DOT_")

    symbol = symbol_name(raw)
    if symbol is not None:
        return symbol.upper()

    name = sanitize_name(snake_case(raw).upper())
    name = re.sub(r"^_", "", name, count=1)
    name = re.sub(r"_$", "", name, count=1)

    # nothing identifier-safe left, e.g. " " or "é"
    if not name:
        return "EMPTY"

    if is_reserved_word(config, name) or starts_with_digit(name):
        return escape_reserved_word(config, name)
    return name


def enum_type_name(config: GeneratorConfig, property_name: str) -> str:
    """Build the type name of an inline enum from its property name."""
    name = snake_case(model_type_name(config, property_name)).upper()

    # array / map of enum
    name = name.replace("[]", "")

    if starts_with_digit(name):
        return "_" + name
    return name


def default_variant_value(datatype: str, raw: str) -> str:
    """Fallback reference to the constant holding an enum default."""
    return datatype + "_" + raw


def variant_value(config: GeneratorConfig, raw: str, datatype: str) -> str:
    """The literal emitted for a variant: numbers as-is, text escaped."""
    if is_numeric_datatype(config, datatype):
        return raw
    return escape_text(raw)


def _raw_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


def build_variant_table(config: GeneratorConfig, values: Iterable[Any], datatype: str) -> EnumVariantTable:
    """Build the ordered variant table for an enum's raw values.

    Distinct values that normalize to the same identifier get a numeric
    suffix so the emitted enum stays valid.
    """
    table = EnumVariantTable()
    used: dict[str, int] = {}
    for value in values:
        raw = _raw_text(value)
        if raw in table:
            continue
        ident = variant_name(config, raw, datatype)
        if ident in used:
            used[ident] += 1
            ident = f"{ident}_{used[ident]}"
        else:
            used[ident] = 1
        table[raw] = EnumVariant(
            identifier=ident,
            default_value=default_variant_value(datatype, raw),
            value=variant_value(config, raw, datatype),
        )
    return table
