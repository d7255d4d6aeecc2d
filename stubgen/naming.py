"""Normalize raw schema names into valid, non-colliding Rust identifiers.

Members and parameters become snake_case, models get a snake_case file name
and an UpperCamelCase type name, operations become snake_case method names.

Examples:
  created-at  -> created_at         (member)
  PetId       -> pet_id             (member)
  type        -> _type              (member, reserved)
  1stField    -> var_1st_field      (member, leading digit)
  return      -> model_return / ModelReturn   (model)
  200Response -> model_200_response / Model200Response
  delete      -> call_delete        (operation)
"""

from __future__ import annotations

import logging
import re

from .config import GeneratorConfig

logger = logging.getLogger(__name__)

_CONSTANT_RE = re.compile(r"^[A-Z_]*$")
_LEADING_DIGIT_RE = re.compile(r"^\d")


def snake_case(name: str) -> str:
    """Convert camelCase or PascalCase to snake_case."""
    s1 = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    s2 = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", s1)
    return s2.replace("-", "_").lower()


def camelize(name: str) -> str:
    """Convert snake_case to UpperCamelCase: phone_number -> PhoneNumber."""
    return "".join(part[:1].upper() + part[1:] for part in name.split("_"))


def sanitize_name(name: str) -> str:
    """Reduce a name to identifier-safe characters.

    ``[]`` markers are dropped, separators become underscores and anything
    else outside ``[A-Za-z0-9_]`` is removed.
    """
    name = name.replace("[]", "")
    name = re.sub(r"[\[(.\- ]", "_", name)
    name = re.sub(r"[\])]", "", name)
    return re.sub(r"[^A-Za-z0-9_]", "", name)


def starts_with_digit(name: str) -> bool:
    return bool(_LEADING_DIGIT_RE.match(name))


def is_reserved_word(config: GeneratorConfig, name: str) -> bool:
    """Check a name against the reserved words, ignoring case."""
    return name.lower() in config.reserved_words


def escape_reserved_word(config: GeneratorConfig, name: str) -> str:
    """Prefix underscores until the name no longer collides."""
    escaped = "_" + name
    while is_reserved_word(config, escaped):
        escaped = "_" + escaped
    return escaped


def member_name(config: GeneratorConfig, raw: str) -> str:
    """Build a struct field / variable name."""
    name = sanitize_name(raw.replace("-", "_"))

    # Already an upper-case constant such as ID or API_KEY
    if _CONSTANT_RE.match(name):
        return name

    name = snake_case(name)

    if is_reserved_word(config, name):
        escaped = escape_reserved_word(config, name)
        logger.debug("Reserved word `%s` cannot be used as member name. Renamed to %s", name, escaped)
        name = escaped

    if starts_with_digit(name):
        logger.debug("Member name `%s` starts with a number. Renamed to var_%s", name, name)
        name = "var_" + name

    return name


def param_name(config: GeneratorConfig, raw: str) -> str:
    """Build an operation parameter name (same rules as members)."""
    return member_name(config, raw)


def model_file_name(config: GeneratorConfig, raw: str) -> str:
    """Build the snake_case file-level name of a model."""
    name = raw
    if config.model_name_prefix:
        name = config.model_name_prefix + "_" + name
    if config.model_name_suffix:
        name = name + "_" + config.model_name_suffix

    name = sanitize_name(name)

    if is_reserved_word(config, name):
        logger.warning(
            "Reserved word `%s` cannot be used as model name. Renamed to model_%s", name, name,
        )
        name = "model_" + name

    if starts_with_digit(name):
        logger.warning(
            "Model name `%s` starts with number cannot be used as model name. Renamed to model_%s",
            name, name,
        )
        name = "model_" + name

    return snake_case(name)


def model_type_name(config: GeneratorConfig, raw: str) -> str:
    """Build the UpperCamelCase type name of a model."""
    return camelize(model_file_name(config, raw))


def operation_name(config: GeneratorConfig, raw: str) -> str:
    """Build a snake_case method name from an operationId."""
    name = sanitize_name(raw)

    if is_reserved_word(config, name) or starts_with_digit(name):
        logger.debug(
            "`%s` cannot be used as method name. Renamed to %s", raw, snake_case("call_" + name),
        )
        name = "call_" + name

    return snake_case(name)
