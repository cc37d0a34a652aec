#!/usr/bin/env python3
"""
CLI for the Jerboa interpreter.

Usage:
    python -m jerboa run FILE [--config CONFIG.yaml] [--all]
    python -m jerboa run -e CODE
    python -m jerboa check FILE
    python -m jerboa tokens FILE
    python -m jerboa ast FILE

Examples:
    # Evaluate a program and print the value of its last statement
    python -m jerboa run examples/adder.jb

    # Evaluate an inline program, printing every statement's value
    python -m jerboa run -e 'let x = 7; x * 6' --all

    # Run with a narrower integer type
    python -m jerboa run prog.jb --config limits.yaml

    # Check syntax only
    python -m jerboa check prog.jb
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

import yaml


def read_source(path_str: str) -> Tuple[Optional[str], Optional[str]]:
    """Read a source file, returning (source, filename) or (None, None) if missing."""
    source_path = Path(path_str)
    if not source_path.exists():
        print(f"Error: File not found: {source_path}", file=sys.stderr)
        return None, None
    return source_path.read_text(encoding="utf-8"), source_path.name


def cmd_run(args):
    """Evaluate a program and print its result."""
    from . import Interpreter, JerboaError, load_config

    if args.expression is not None:
        source, filename = args.expression, "<expr>"
    elif args.file is not None:
        source, filename = read_source(args.file)
        if source is None:
            return 1
    else:
        print("Error: give a FILE or -e CODE", file=sys.stderr)
        return 1

    config = None
    if args.config:
        try:
            config = load_config(args.config)
        except (OSError, ValueError, yaml.YAMLError) as e:
            print(f"Error: bad config: {e}", file=sys.stderr)
            return 1

    try:
        values = Interpreter(config).eval_program(source, filename)
    except JerboaError as e:
        print(e, file=sys.stderr)
        return 1

    if args.all:
        for value in values:
            print(value)
    elif values:
        print(values[-1])
    return 0


def cmd_check(args):
    """Check a file for lexical and syntax errors."""
    from . import parse_source, JerboaError

    source, filename = read_source(args.file)
    if source is None:
        return 1

    try:
        program = parse_source(source, filename)
    except JerboaError as e:
        print(e, file=sys.stderr)
        return 1

    print(f"OK: {filename} - {len(program.statements)} statement(s), no errors")
    return 0


def cmd_tokens(args):
    """Dump the token stream of a file."""
    from . import Lexer, JerboaError

    source, filename = read_source(args.file)
    if source is None:
        return 1

    try:
        for token in Lexer(source, filename):
            location = token.span.start if token.span is not None else "?"
            print(f"{location}\t{token}")
    except JerboaError as e:
        print(e, file=sys.stderr)
        return 1
    return 0


def cmd_ast(args):
    """Print the syntax tree of a file."""
    from . import parse_source, print_ast, JerboaError

    source, filename = read_source(args.file)
    if source is None:
        return 1

    try:
        program = parse_source(source, filename)
    except JerboaError as e:
        print(e, file=sys.stderr)
        return 1

    print_ast(program)
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog='python -m jerboa',
        description='Jerboa interpreter',
    )
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable debug logging')

    subparsers = parser.add_subparsers(dest='action', required=True)

    # run command
    run_parser = subparsers.add_parser('run', help='Evaluate a program')
    run_parser.add_argument('file', nargs='?', help='Jerboa source file')
    run_parser.add_argument('-e', '--expression', metavar='CODE',
                            help='Evaluate CODE instead of a file')
    run_parser.add_argument('-c', '--config', metavar='FILE',
                            help='Interpreter configuration (YAML)')
    run_parser.add_argument('-a', '--all', action='store_true',
                            help='Print the value of every top-level statement')

    # check command
    check_parser = subparsers.add_parser('check', help='Check a file for syntax errors')
    check_parser.add_argument('file', help='Jerboa source file')

    # tokens command
    tokens_parser = subparsers.add_parser('tokens', help='Dump the token stream')
    tokens_parser.add_argument('file', help='Jerboa source file')

    # ast command
    ast_parser = subparsers.add_parser('ast', help='Print the syntax tree')
    ast_parser.add_argument('file', help='Jerboa source file')

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(name)s: %(message)s')

    if args.action == 'run':
        return cmd_run(args)
    elif args.action == 'check':
        return cmd_check(args)
    elif args.action == 'tokens':
        return cmd_tokens(args)
    elif args.action == 'ast':
        return cmd_ast(args)
    else:
        parser.print_help()
        return 1


if __name__ == '__main__':
    sys.exit(main())
