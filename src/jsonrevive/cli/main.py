# Copyright 2026 jsonrevive Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the jsonrevive command-line interface."""

import argparse
import json
import logging
import sys
from pathlib import Path

from jsonrevive.config.loader import CONFIG_FILE_NAME, apply_config, load_config
from jsonrevive.errors import ConfigError, JsonReviveError
from jsonrevive.model.mappers import from_wire, iter_references
from jsonrevive.registry.namespace import default_registry

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the jsonrevive CLI."""
    parser = argparse.ArgumentParser(
        prog="jsonrevive",
        description="jsonrevive: typed revival of JSON data",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # names subcommand
    names_parser = subparsers.add_parser(
        "names",
        help="List the registered qualified names",
        description="Print every qualified name of the registry, flagging names owned by more than one type.",
    )
    _add_common_arguments(names_parser)

    # check subcommand
    check_parser = subparsers.add_parser(
        "check",
        help="Check that every reference of a mapper resolves",
        description="Load a mapper in wire form and resolve each qualified name it references.",
    )
    check_parser.add_argument(
        "mapper_file",
        help="JSON file holding the mapper",
    )
    _add_common_arguments(check_parser)

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    sys.exit(_dispatch(args))


# ################
# Implementation
# ################


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default=None,
        help=f"Registry configuration file (default: {CONFIG_FILE_NAME} in the current directory, if present)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log registry activity to stderr",
    )


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    try:
        _configure(args.config)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    if args.command == "names":
        return _cmd_names(args)
    if args.command == "check":
        return _cmd_check(args)
    return 0


def _configure(config_path: str | None) -> None:
    """Load and apply the registry configuration, if any."""
    if config_path is not None:
        path = Path(config_path)
        if not path.exists():
            raise ConfigError(f"Configuration file '{path}' does not exist")
    else:
        path = Path.cwd() / CONFIG_FILE_NAME
        if not path.exists():
            return
    apply_config(load_config(path))


def _cmd_names(args: argparse.Namespace) -> int:
    """Handle the names subcommand."""
    for name, count in default_registry.names().items():
        if count > 1:
            print(f"{name}  (conflict: {count} types)")
        else:
            print(name)
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    """Handle the check subcommand."""
    path = Path(args.mapper_file)
    try:
        wire = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        print(f"Error: cannot read '{path}': {exc}", file=sys.stderr)
        return 1
    except json.JSONDecodeError as exc:
        print(f"Error: invalid JSON in '{path}': {exc}", file=sys.stderr)
        return 1

    references = list(iter_references(from_wire(wire)))
    print(f"Checking {len(references)} reference(s)...")
    has_errors = False
    for key_path, name in references:
        location = "/".join(key_path) or "<root>"
        try:
            target = default_registry.resolve(name)
        except JsonReviveError as exc:
            print(f"Error: {location}: {exc}", file=sys.stderr)
            has_errors = True
            continue
        if default_registry.reviver_of(target) is None:
            print(f'Error: {location}: "{name}" has no bound reviver', file=sys.stderr)
            has_errors = True

    if has_errors:
        return 1

    print("No issues found.")
    return 0
