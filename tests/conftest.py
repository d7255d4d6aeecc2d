"""Shared fixtures for stubgen tests.

Session-scoped fixtures load the sample Docker document in spec/ once and
build the renderer context from it with the default Rust configuration.
"""

from __future__ import annotations

from typing import Any

import pytest

from stubgen.config import GeneratorConfig
from stubgen.context_builder import build_context
from stubgen.loader import load_spec, parse_definitions


@pytest.fixture(scope="session")
def config() -> GeneratorConfig:
    """Default Rust configuration."""
    return GeneratorConfig()


@pytest.fixture(scope="session")
def spec() -> dict[str, Any]:
    """The sample Docker Engine API document."""
    return load_spec()


@pytest.fixture(scope="session")
def schemas(spec):
    """Parsed definitions of the sample document."""
    return parse_definitions(spec)


@pytest.fixture(scope="session")
def ctx(spec, config) -> dict[str, Any]:
    """Renderer context built from the sample document."""
    return build_context(spec, config)


@pytest.fixture(scope="session")
def models_by_name(ctx):
    return {m.raw_name: m for m in ctx["models"]}


@pytest.fixture(scope="session")
def operations_by_id(ctx):
    return {op.raw_id: op for op in ctx["operations"]}
