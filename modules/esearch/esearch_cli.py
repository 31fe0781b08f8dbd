#!/usr/bin/env python3
"""
ESEARCH CLI - Index schema tools

Usage:
    python -m esearch.esearch_cli schema myapp.models
    python -m esearch.esearch_cli schema myapp.models --json
    python -m esearch.esearch_cli recreate myapp.models

Model modules are imported so their @searchable types register themselves.
The index name comes from APPLICATION_NAME / ESEARCH_INDEX.
"""

import argparse
import importlib
import json
import logging
import sys

from .config import config
from .errors import ESearchError
from .introspection import describe, searchable_types
from .mapping import build_schema
from .plugin import ESearch

logger = logging.getLogger(__name__)


def load_models(module_names):
    """Import model modules and return the searchable types they define."""
    names = {importlib.import_module(name).__name__ for name in module_names}
    return [t for t in searchable_types() if t.__module__ in names]


def cmd_schema(args):
    schema = build_schema(load_models(args.modules))

    if args.json:
        print(json.dumps({"index": config.index_name, "mappings": schema}, indent=2))
        return

    print(f"Index: {config.index_name}")
    for name, mapping in schema.items():
        print(f"\n  {name}")
        for field_name, options in mapping["properties"].items():
            extra = f" ({options['index']})" if "index" in options else ""
            print(f"    {field_name}: {options['type']}{extra}")


def cmd_recreate(args):
    models = load_models(args.modules)
    for model_type in models:
        logger.info(f"Searchable: {describe(model_type).type_name} <- {model_type.__qualname__}")

    adapter = ESearch.from_config(models=models)
    try:
        adapter.start()
        print(f"Recreated index {adapter.index_name} with {len(models)} types")
    finally:
        adapter.stop()


def main():
    parser = argparse.ArgumentParser(
        description="ESEARCH CLI - Index schema tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m esearch.esearch_cli schema myapp.models
    python -m esearch.esearch_cli schema myapp.models --json
    python -m esearch.esearch_cli recreate myapp.models
        """
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Command")

    p_schema = subparsers.add_parser("schema", help="Print the index schema of the given model modules")
    p_schema.add_argument("modules", nargs="+", help="Modules defining @searchable models")
    p_schema.add_argument("--json", "-j", action="store_true", help="JSON output")
    p_schema.set_defaults(func=cmd_schema)

    p_recreate = subparsers.add_parser("recreate", help="Delete and recreate the index (destructive)")
    p_recreate.add_argument("modules", nargs="+", help="Modules defining @searchable models")
    p_recreate.set_defaults(func=cmd_recreate)

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        args.func(args)
    except ESearchError as e:
        logger.error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
