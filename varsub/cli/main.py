"""Main CLI entry point for varsub."""

import argparse
import sys
from typing import Optional

from varsub.variables import SubstitutionType, ValueShape

from .commands import render_template, render_text


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    """Scope, substitution and logging options shared by all commands."""
    parser.add_argument(
        '--var',
        action='append',
        metavar='KEY=VALUE',
        help='Local variable (can be specified multiple times); consulted before --scope files'
    )
    parser.add_argument(
        '--scope',
        action='append',
        metavar='FILE',
        help='YAML/JSON file used as a local scope (can be specified multiple times, first wins)'
    )
    parser.add_argument(
        '--global',
        dest='globals',
        action='append',
        metavar='KEY=VALUE',
        help='Global variable (can be specified multiple times)'
    )
    parser.add_argument(
        '--global-file',
        type=str,
        metavar='FILE',
        help='YAML/JSON file of global variables'
    )
    parser.add_argument(
        '--type',
        dest='substitution_type',
        choices=[t.value for t in SubstitutionType],
        default=SubstitutionType.ALL.value,
        help='Which scopes are eligible for resolution'
    )
    parser.add_argument(
        '--default',
        type=str,
        help='Value substituted when a variable resolves to null'
    )
    parser.add_argument(
        '--output',
        type=str,
        metavar='FILE',
        help='Write the result to FILE instead of stdout'
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
        default='warn',
        help='Set log level'
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the varsub CLI."""
    parser = argparse.ArgumentParser(
        prog='varsub',
        description='Substitute %key% placeholders in text and YAML/JSON documents'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Render command
    render_parser = subparsers.add_parser('render', help='Substitute a YAML/JSON template file')
    render_parser.add_argument(
        'template',
        type=str,
        help='Path to template YAML/JSON file'
    )
    render_parser.add_argument(
        '--recurse',
        action='store_true',
        help='Also substitute nested documents and document lists'
    )
    render_parser.add_argument(
        '--include-nulls',
        action='store_true',
        help='Keep keys whose substituted value is null'
    )
    render_parser.add_argument(
        '--format',
        choices=['yaml', 'json'],
        default='yaml',
        help='Output format'
    )
    _add_common_arguments(render_parser)

    # Text command
    text_parser = subparsers.add_parser('text', help='Substitute a single string')
    text_parser.add_argument(
        'text',
        type=str,
        help='Template string'
    )
    text_parser.add_argument(
        '--shape',
        choices=[s.value for s in ValueShape],
        default=ValueShape.STRING.value,
        help='Shape of the substituted value'
    )
    _add_common_arguments(text_parser)

    return parser


def main(args: Optional[list] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 1

    if parsed_args.command == 'render':
        return render_template(parsed_args)
    elif parsed_args.command == 'text':
        return render_text(parsed_args)
    else:
        parser.print_help()
        return 1


if __name__ == '__main__':
    sys.exit(main())
