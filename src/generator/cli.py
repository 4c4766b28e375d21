"""
Command line entry point.

Usage:
    python -m src.generator.cli generate schema.yaml [--bundle bundle.json] [--options opts.yaml]
    python -m src.generator.cli sample schema.yaml --method GET --path /pets
"""

import argparse
import json
import logging
import random
import sys
from pathlib import Path
from typing import Any, List, Optional

import yaml

from .json_schema import generate, generate_static
from .models import HttpOperation
from .options import FakerOptions
from .sampler import DEFAULT_TICKS

logger = logging.getLogger(__name__)


def load_document(path: Path) -> Any:
    """Load a JSON or YAML document."""
    with open(path, "r") as f:
        if path.suffix == ".json":
            return json.load(f)
        return yaml.safe_load(f)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate example payloads from JSON Schemas"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    gen = subparsers.add_parser("generate", help="Generate fake data honoring directives")
    gen.add_argument("schema", type=Path, help="Path to a JSON or YAML schema")
    gen.add_argument(
        "--bundle",
        type=Path,
        default=None,
        help="Document merged in as __bundled__ for reference resolution",
    )
    gen.add_argument(
        "--options",
        type=Path,
        default=None,
        help="YAML or JSON file overriding engine options",
    )
    gen.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducible output",
    )

    smp = subparsers.add_parser("sample", help="Sample a representative structure")
    smp.add_argument("schema", type=Path, help="Path to a JSON or YAML schema")
    smp.add_argument("--method", type=str, default="get", help="Operation HTTP method")
    smp.add_argument("--path", type=str, default="/", help="Operation path")
    smp.add_argument(
        "--ticks",
        type=int,
        default=DEFAULT_TICKS,
        help=f"Complexity budget (default: {DEFAULT_TICKS})",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    schema = load_document(args.schema)

    if args.command == "generate":
        options = FakerOptions.load(args.options) if args.options else FakerOptions.mocking()
        if args.seed is not None:
            options.seed = args.seed
        bundle = load_document(args.bundle) if args.bundle else None
        result = generate(schema, bundle=bundle, options=options, rng=random.Random(options.seed))
    else:
        operation = HttpOperation(method=args.method, path=args.path)
        result = generate_static(operation, schema, ticks=args.ticks)

    if not result.ok:
        logger.error(f"{type(result.error).__name__}: {result.error}")
        return 1

    print(json.dumps(result.value, indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
