#!/usr/bin/env python3
"""Command-line interface for amd_lookup.

Example:
    $ lookup-amd -c js/config.json -f js/app.js jquery
    js/vendor/jquery.min.js
    $ lookup-amd -f js/subdir/subsubdir/a.js ../../b
    js/b.js
    $ lookup-amd -c js/main.js -f js/app.js --explain hgn!templates/a
"""

import argparse
import json
import logging
import os
import sys

from . import __version__
from .colors import get_colors
from .config_reader import ConfigParseError
from .lookup import ResolveResult, explain


def add_lookup_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the lookup arguments to ``parser``."""
    parser.add_argument("path", help="Dependency to resolve, e.g. 'jquery' or 'hgn!templates/a'")
    parser.add_argument("-c", "--config", help="Location of a RequireJS config file for AMD")
    parser.add_argument("-f", "--filename", help="File containing the dependency")
    parser.add_argument("-d", "--directory", help="Directory containing all files")
    parser.add_argument(
        "--discover-extensions",
        action="store_true",
        help="Look for an existing file with another extension when .js was inferred",
    )
    parser.add_argument(
        "--explain", action="store_true", help="Show how the dependency was resolved"
    )
    parser.add_argument(
        "--json", action="store_true", help="With --explain, output JSON instead of text"
    )
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")


def format_explanation(result: ResolveResult, colors) -> str:
    """Render a ResolveResult as labelled lines."""

    def value(text):
        return colors.yellow(text) if text else colors.dim("-")

    lines = [
        f"{colors.cyan('path:')}      {colors.green(result.path)}",
        f"{colors.cyan('strategy:')}  {result.strategy.value}",
        f"{colors.cyan('plugin:')}    {value(result.plugin)}",
        f"{colors.cyan('module:')}    {result.module_id}",
        f"{colors.cyan('mapped:')}    {value(result.mapped_from)}",
    ]
    return "\n".join(lines)


def run_lookup(args: argparse.Namespace) -> int:
    """Execute a lookup from parsed arguments.

    Returns:
        Process exit code.
    """
    # Without a filename, resolve as if requested from the root directory
    filename = args.filename or os.path.join(args.directory or os.curdir, "")

    try:
        result = explain(
            args.path,
            filename,
            config=args.config,
            directory=args.directory,
            discover_extensions=args.discover_extensions,
        )
    except (OSError, ValueError) as e:
        # json.JSONDecodeError and ConfigParseError are both ValueErrors
        colors = get_colors(args.no_color, stream=sys.stderr)
        label = "Invalid config" if isinstance(e, (ConfigParseError, json.JSONDecodeError)) else "Error"
        print(colors.error(f"{label}: {e}"), file=sys.stderr)
        return 1

    if not args.explain:
        print(result.path)
    elif args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(format_explanation(result, get_colors(args.no_color)))
    return 0


def main():
    """Command-line entry point for lookup-amd.

    Usage:
        lookup-amd [-c CONFIG] [-f FILENAME] [-d DIRECTORY] [--explain] PATH
    """
    parser = argparse.ArgumentParser(
        prog="lookup-amd",
        usage="%(prog)s [options] <path>",
        description="Resolve aliased dependency paths using a RequireJS config",
        epilog="Example: lookup-amd -c js/config.json -f js/app.js jquery",
    )
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    add_lookup_arguments(parser)

    args = parser.parse_args()

    if args.debug:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)

    sys.exit(run_lookup(args))


if __name__ == "__main__":
    main()
