"""Render templates and write generated output.

Takes the context from context_builder and produces models.rs and paths.rs.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import jinja2

from .naming import sanitize_name, snake_case
from .postprocess import escape_quotation_mark

TEMPLATE_DIR = Path(__file__).parent / "templates"
OUTPUT_DIR = Path.cwd() / "generated"

_OUTPUTS = {
    "models.rs.j2": "models.rs",
    "paths.rs.j2": "paths.rs",
}


def make_environment() -> jinja2.Environment:
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=jinja2.StrictUndefined,
    )
    env.filters["const_name"] = lambda s: s.upper()
    env.filters["module_name"] = lambda tag: snake_case(sanitize_name(tag)) or "default"
    env.filters["unquote"] = escape_quotation_mark
    return env


def render(context: dict[str, Any]) -> dict[str, str]:
    """Render every template; returns file name -> source text."""
    env = make_environment()
    return {
        out_name: env.get_template(template_name).render(**context)
        for template_name, out_name in _OUTPUTS.items()
    }


def generate(context: dict[str, Any], output_dir: Path | None = None) -> list[Path]:
    """Render the templates and write them under output_dir/src."""
    src_dir = (output_dir or OUTPUT_DIR) / "src"
    src_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for out_name, text in render(context).items():
        output_path = src_dir / out_name
        output_path.write_text(text)
        written.append(output_path)

    print(
        f"Generated {src_dir} ({context['model_count']} models,"
        f" {context['operation_count']} operations)"
    )
    return written
