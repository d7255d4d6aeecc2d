"""Load and parse an OpenAPI / Swagger document.

Reads JSON or YAML from a local path or an http(s) URL and extracts paths,
named schema definitions and parameters.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import httpx
import yaml

from .schema import Array, Map, Object, Reference, SchemaNode, parse_schema

logger = logging.getLogger(__name__)

SPEC_PATH = Path(__file__).parent.parent / "spec" / "docker-api.yaml"


class SpecLoadError(ValueError):
    """Raised when a document cannot be fetched or parsed."""


class SchemaCycleError(ValueError):
    """Raised when definitions alias each other in a cycle."""

    def __init__(self, chain: list[str]) -> None:
        self.chain = chain
        super().__init__("Cyclic schema reference: " + " -> ".join(chain))


def _parse_text(text: str, source: str) -> dict[str, Any]:
    try:
        if source.endswith(".json"):
            data = json.loads(text)
        else:
            # YAML is a superset of JSON, so this also covers JSON bodies.
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise SpecLoadError(f"Cannot parse {source}: {exc}") from exc
    if not isinstance(data, dict):
        raise SpecLoadError(f"{source} does not contain an API document")
    return data


def load_spec(
    source: str | Path | None = None,
    client: httpx.Client | None = None,
) -> dict[str, Any]:
    """Load the API document from disk or from an http(s) URL."""
    source = str(source or SPEC_PATH)

    if source.startswith(("http://", "https://")):
        logger.info("Fetching %s", source)
        owns_client = client is None
        client = client or httpx.Client(timeout=30.0, follow_redirects=True)
        try:
            resp = client.get(source)
            resp.raise_for_status()
            text = resp.text
        except httpx.HTTPError as exc:
            raise SpecLoadError(f"Cannot fetch {source}: {exc}") from exc
        finally:
            if owns_client:
                client.close()
    else:
        try:
            with open(source) as f:
                text = f.read()
        except OSError as exc:
            raise SpecLoadError(f"Cannot read {source}: {exc}") from exc

    return _parse_text(text, source)


def get_paths(spec: dict[str, Any]) -> dict[str, Any]:
    """Extract paths from the spec."""
    return spec.get("paths", {})


def get_schemas(spec: dict[str, Any]) -> dict[str, Any]:
    """Extract raw schema definitions (OpenAPI 3 components or Swagger 2)."""
    schemas = spec.get("components", {}).get("schemas")
    if schemas is None:
        schemas = spec.get("definitions", {})
    return schemas


def resolve_ref(spec: dict[str, Any], ref: str) -> dict[str, Any]:
    """Resolve a $ref pointer in the spec."""
    parts = ref.lstrip("#/").split("/")
    node = spec
    for part in parts:
        node = node[part]
    return node


def parse_definitions(spec: dict[str, Any]) -> dict[str, SchemaNode]:
    """Parse every named schema definition into a SchemaNode."""
    return {name: parse_schema(raw, name) for name, raw in get_schemas(spec).items()}


def _alias_targets(node: SchemaNode) -> list[str]:
    """Definition names the resolver would expand when resolving ``node``."""
    if isinstance(node, Reference):
        return [node.name]
    if isinstance(node, Array):
        return _alias_targets(node.item)
    if isinstance(node, Map):
        return _alias_targets(node.value)
    return []


def check_reference_cycles(definitions: dict[str, SchemaNode]) -> None:
    """Raise SchemaCycleError if non-object definitions alias each other in a loop.

    Object definitions end a chain: references to them resolve to their
    type name without being expanded.
    """
    done: set[str] = set()

    def visit(name: str, chain: list[str]) -> None:
        if name in chain:
            raise SchemaCycleError(chain[chain.index(name):] + [name])
        if name in done:
            return
        node = definitions.get(name)
        if node is not None and not isinstance(node, Object):
            for target in _alias_targets(node):
                target_node = definitions.get(target)
                if target_node is not None and not isinstance(target_node, Object):
                    visit(target, chain + [name])
        done.add(name)

    for name in definitions:
        visit(name, [])
