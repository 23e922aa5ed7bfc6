"""Main CLI entry point for the build orchestrator."""

import argparse
import sys
from typing import Optional

from .commands import run_build


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        'build_file',
        type=str,
        help='Path to build YAML file'
    )
    parser.add_argument(
        '--property', '-P',
        dest='property',
        action='append',
        metavar='KEY=VALUE',
        help='Project property overriding every other source (can be specified multiple times)'
    )
    parser.add_argument(
        '--no-vcs',
        action='store_true',
        help="Skip git probing; bind git_version and builder to 'Unknown'"
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )
    parser.add_argument(
        '--quiet',
        action='store_true',
        help='Suppress non-error output'
    )
    parser.add_argument(
        '--log-level',
        choices=['debug', 'info', 'warn', 'error'],
        default='info',
        help='Set log level'
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the build CLI."""
    parser = argparse.ArgumentParser(
        prog='buildorch',
        description='Multi-module build orchestrator with resource filtering'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Build command
    build_parser = subparsers.add_parser('build', help='Configure projects and filter resources')
    _add_common_arguments(build_parser)
    mode = build_parser.add_mutually_exclusive_group()
    mode.add_argument(
        '--strict',
        dest='strict',
        action='store_const',
        const=True,
        default=None,
        help='Fail on undefined variables (default unless the build file says otherwise)'
    )
    mode.add_argument(
        '--lenient',
        dest='strict',
        action='store_const',
        const=False,
        help='Leave undefined placeholders untouched'
    )
    build_parser.add_argument(
        '--jobs', '-j',
        type=int,
        default=1,
        help='Number of projects to materialize in parallel'
    )
    build_parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Validate and list the files each rule would filter without writing'
    )

    # Properties command
    properties_parser = subparsers.add_parser('properties', help='Print the resolved build-wide properties')
    _add_common_arguments(properties_parser)

    return parser


def main(args: Optional[list] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 1

    if parsed_args.command == 'build':
        return run_build(parsed_args)
    elif parsed_args.command == 'properties':
        from buildorch.cli.commands import show_properties
        return show_properties(parsed_args)
    else:
        parser.print_help()
        return 1


if __name__ == '__main__':
    sys.exit(main())
