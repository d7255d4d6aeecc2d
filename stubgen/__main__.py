"""Entry point: python -m stubgen [SPEC] [-c CONFIG] [-o OUT] [-v]

Reads an OpenAPI / Swagger document (path or URL, defaults to
spec/docker-api.yaml) and writes models.rs and paths.rs under OUT/src.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .codegen import generate
from .config import ConfigError, load_config
from .context_builder import build_context
from .loader import SchemaCycleError, SpecLoadError, load_spec

logger = logging.getLogger("stubgen")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="stubgen", description="Generate Rust API stubs")
    parser.add_argument("spec", nargs="?", help="API document path or URL")
    parser.add_argument("-c", "--config", type=Path, help="YAML generator config")
    parser.add_argument("-o", "--output", type=Path, default=Path("generated"),
                        help="output directory (default: generated)")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
        spec = load_spec(args.spec)
        context = build_context(spec, config)
    except (ConfigError, SpecLoadError, SchemaCycleError) as exc:
        logger.error("%s", exc)
        return 1

    generate(context, args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
