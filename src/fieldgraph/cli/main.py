#!/usr/bin/env python3
"""
Fieldgraph CLI - Main entry point.

Usage:
    fieldgraph init                                  # Write fieldgraph.yaml
    fieldgraph check-schema [schema.yaml]            # Compile and report errors
    fieldgraph process Todo read '["id", "title"]'   # Print select/load/template
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from ..core.compiler import SchemaCompiler, load_schema_document
from ..core.errors import FieldgraphError
from ..core.registry import SchemaRegistry
from ..runtime.context import ProcessingContext
from ..runtime.error_builder import build_error_response
from ..runtime.pipeline import FieldSelectionPipeline
from .config import DEFAULT_CONFIG_PATH, LOG_LEVELS, FieldgraphConfig, load_config


DEFAULT_SCHEMA = '''# Fieldgraph schema
version: 1

types: {}

resources:
  Todo:
    attributes:
      id: uuid
      title: string
    actions:
      read: {type: read}
'''


def _load_config(args: argparse.Namespace) -> FieldgraphConfig:
    config = load_config(args.config)
    return config if config is not None else FieldgraphConfig()


def cmd_init(args: argparse.Namespace) -> int:
    """Initialize a new fieldgraph project."""
    config_path = Path(args.config)

    if config_path.exists() and not args.force:
        print(f"Error: {config_path} already exists. Use --force to overwrite.")
        return 1

    config = FieldgraphConfig(schema=args.schema)
    config.save(config_path)
    print(f"Created {config_path}")

    schema_path = config.schema_path(config_path.parent)
    if not schema_path.exists():
        schema_path.write_text(DEFAULT_SCHEMA)
        print(f"Created {schema_path}")

    print("Next steps:")
    print("  fieldgraph check-schema            # Validate the schema")
    print("  fieldgraph process Todo read '[\"id\"]'")
    return 0


def cmd_check_schema(args: argparse.Namespace) -> int:
    """Compile the schema and report every error."""
    config = _load_config(args)
    schema_path = Path(args.schema) if args.schema else config.schema_path(Path(args.config).parent)

    try:
        document = load_schema_document(schema_path)
    except FieldgraphError as e:
        print(f"Error: {e}")
        return 1

    result = SchemaCompiler().compile(document)
    if not result.success:
        print(f"Schema {schema_path} has {len(result.errors)} error(s):")
        for message in result.error_messages():
            print(f"  {message}")
        return 1

    print(f"Schema {schema_path} OK ({len(result.schema.resources)} resources)")
    return 0


def cmd_process(args: argparse.Namespace) -> int:
    """Run field selection for a resource action and print the result as JSON."""
    config = _load_config(args)
    schema_path = Path(args.schema) if args.schema else config.schema_path(Path(args.config).parent)

    try:
        fields = json.loads(args.fields)
    except json.JSONDecodeError as e:
        print(f"Error: fields must be a JSON list ({e})")
        return 1

    try:
        registry = SchemaRegistry.from_yaml(schema_path)
        context = ProcessingContext.create(
            registry,
            input_formatter=config.input_field_formatter,
            output_formatter=config.output_field_formatter,
        )
        selection = FieldSelectionPipeline(context).process(args.resource, args.action, fields)
    except FieldgraphError as e:
        print(json.dumps({"error": build_error_response(e)}, indent=2, default=str))
        return 1

    print(json.dumps(selection.to_dict(), indent=2, default=str))
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="fieldgraph",
        description="Fieldgraph - field selection planning for resource schemas"
    )
    parser.add_argument("--version", action="version", version="%(prog)s 0.1.0")
    parser.add_argument("--config", "-c", default=DEFAULT_CONFIG_PATH, help="Config file path")
    parser.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS, help="Override the configured log level")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # init
    init_parser = subparsers.add_parser("init", help="Write a default config and schema")
    init_parser.add_argument("--schema", default="schema.yaml", help="Schema file name")
    init_parser.add_argument("--force", "-f", action="store_true", help="Overwrite existing config")

    # check-schema
    check_parser = subparsers.add_parser("check-schema", help="Validate the schema document")
    check_parser.add_argument("schema", nargs="?", help="Schema file (defaults to the configured one)")

    # process
    process_parser = subparsers.add_parser("process", help="Plan select/load/template for a request")
    process_parser.add_argument("resource", help="Resource name")
    process_parser.add_argument("action", help="Action name")
    process_parser.add_argument("fields", help="Field list as JSON")
    process_parser.add_argument("--schema", "-s", help="Schema file (defaults to the configured one)")

    return parser


def _configure_logging(parsed: argparse.Namespace) -> None:
    level = parsed.log_level
    if level is None:
        try:
            config = load_config(parsed.config)
        except FieldgraphError:
            config = None
        level = config.log_level if config else "WARNING"
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def app(args: Optional[List[str]] = None) -> int:
    """Main CLI application."""
    parser = create_parser()
    parsed = parser.parse_args(args)

    if not parsed.command:
        parser.print_help()
        return 0

    _configure_logging(parsed)

    commands = {
        "init": cmd_init,
        "check-schema": cmd_check_schema,
        "process": cmd_process,
    }

    handler = commands.get(parsed.command)
    if handler:
        try:
            return handler(parsed)
        except FieldgraphError as e:
            print(f"Error: {e}")
            return 1

    parser.print_help()
    return 1


def main() -> None:
    """Entry point for CLI."""
    sys.exit(app())


if __name__ == "__main__":
    main()
