#!/usr/bin/env python3
# Copyright 2025 Ant Group Co., Ltd.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#   http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Command-line interface for opgraph.

Input files hold an operation serialized with `opgraph.ir.serde`.

Examples:
    # Export a module to a DOT file
    python -m opgraph.cli export module.json -o module.dot

    # Same, with options from YAML and one flag overridden
    python -m opgraph.cli export module.json --options export.yaml --control-flow-edges

    # Open the control-flow graph of the module body in a viewer
    python -m opgraph.cli cfg module.json --view

    # Print the IR as text
    python -m opgraph.cli print module.json
"""

import argparse
import sys
from typing import Any

from opgraph.export.destinations import (
    FileDestination,
    GraphDestination,
    ViewerDestination,
    write_graph,
    write_region_cfg,
)
from opgraph.export.errors import GraphExportError
from opgraph.export.options import ExportOptions, load_options
from opgraph.ir import serde
from opgraph.ir.graph import Operation
from opgraph.ir.printer import format_ir
from opgraph.logging_config import get_logger, setup_logging

logger = get_logger(__name__)

# CLI flag -> ExportOptions field
_BOOL_FLAGS = {
    "data-flow-edges": "print_data_flow_edges",
    "control-flow-edges": "print_control_flow_edges",
    "region-control-flow-edges": "print_region_control_flow_edges",
    "result-types": "print_result_types",
    "attrs": "print_attrs",
    "condense": "condense_to_entry_and_exit_per_block",
}


def load_operation(path: str) -> Operation:
    """Load the root operation stored in `path`."""
    obj = serde.load(path)
    if not isinstance(obj, Operation):
        raise ValueError(f"{path} does not contain an operation")
    return obj


def build_options(args: argparse.Namespace) -> ExportOptions:
    """Options file first, then explicit command-line overrides."""
    options = load_options(args.options) if args.options else ExportOptions()
    overrides: dict[str, Any] = {
        field: getattr(args, field) for field in _BOOL_FLAGS.values()
    }
    overrides["max_label_length"] = args.max_label_length
    overrides["large_container_element_threshold"] = args.element_threshold
    return options.replace(**overrides)


def build_destination(args: argparse.Namespace, name: str) -> GraphDestination:
    if args.view:
        return ViewerDestination(name, format=args.format)
    return FileDestination(args.output)


def add_output_args(parser: argparse.ArgumentParser) -> None:
    """Add common output arguments to subparsers."""
    parser.add_argument("input", help="Serialized IR file (JSON, optionally gzipped)")
    parser.add_argument(
        "-o", "--output", default="-", help="Output DOT file (default: stdout)"
    )
    parser.add_argument(
        "--view", action="store_true", help="Render and open in a viewer instead"
    )
    parser.add_argument(
        "--format", default="svg", help="Viewer render format (default: svg)"
    )


def add_option_args(parser: argparse.ArgumentParser) -> None:
    """Add export option arguments; unset flags keep the configured value."""
    parser.add_argument("--options", help="YAML file with export options")
    for flag, field in _BOOL_FLAGS.items():
        parser.add_argument(
            f"--{flag}",
            dest=field,
            action=argparse.BooleanOptionalAction,
            default=None,
            help=f"Override {field}",
        )
    parser.add_argument("--max-label-length", type=int, default=None)
    parser.add_argument("--element-threshold", type=int, default=None)


def cmd_export(args: argparse.Namespace) -> None:
    """Export the whole operation."""
    root = load_operation(args.input)
    options = build_options(args)
    logger.info("Exporting %s", args.input)
    write_graph(root, build_destination(args, "graph"), options)


def cmd_cfg(args: argparse.Namespace) -> None:
    """Export the control-flow graph of the root's first region."""
    root = load_operation(args.input)
    if not root.regions:
        raise ValueError(f"{root.opcode} has no regions")
    logger.info("Exporting region CFG of %s", args.input)
    write_region_cfg(root.regions[0], build_destination(args, "region"))


def cmd_print(args: argparse.Namespace) -> None:
    """Print the IR as text."""
    print(format_ir(load_operation(args.input)))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Graphviz export of structured IR",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Log level (default: WARNING)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # 'export' subcommand
    export_parser = subparsers.add_parser("export", help="Export an operation")
    add_output_args(export_parser)
    add_option_args(export_parser)

    # 'cfg' subcommand
    cfg_parser = subparsers.add_parser("cfg", help="Export a region control-flow graph")
    add_output_args(cfg_parser)

    # 'print' subcommand
    print_parser = subparsers.add_parser("print", help="Print the IR as text")
    print_parser.add_argument("input", help="Serialized IR file")

    args = parser.parse_args(argv)
    setup_logging(level=args.log_level, force=True)

    commands = {"export": cmd_export, "cfg": cmd_cfg, "print": cmd_print}
    if args.command not in commands:
        parser.print_help()
        return 1

    try:
        commands[args.command](args)
    except (GraphExportError, ValueError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
