"""Command line front end: print, validate or convert UP files."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Sequence

from .document import UpDocument
from .errors import ParseError
from .formatter import UpFormatter, format_tree
from .parser import parse


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="uplang",
        description="Parse UP (Unified Properties) files and print, validate or convert them.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log scanner and parser activity to stderr.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    print_parser = subparsers.add_parser("print", help="Print an outline of the parsed tree.")
    print_parser.add_argument("file", help="Path to a UP file.")

    validate_parser = subparsers.add_parser("validate", help="Check that a file parses (exit code 1 if not).")
    validate_parser.add_argument("file", help="Path to a UP file.")

    convert_parser = subparsers.add_parser("convert", help="Convert a UP file to JSON or canonical UP.")
    convert_parser.add_argument("file", help="Path to a UP file.")
    convert_parser.add_argument(
        "--to",
        choices=["json", "up"],
        default="json",
        help="Output format (default: json).",
    )
    convert_parser.add_argument(
        "-o",
        "--output",
        help="Write the result to this file instead of stdout.",
    )
    return parser.parse_args(argv)


def convert(document: UpDocument, target: str) -> str:
    if target == "json":
        return json.dumps(document.to_python(), indent=2) + "\n"
    return UpFormatter().format_document(document)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    path = Path(args.file)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        print(f"Error reading file '{path}': {exc}", file=sys.stderr)
        return 1
    try:
        document = parse(text, config={"enable_logger": args.verbose})
    except ParseError as exc:
        print(f"Parse error: {exc}", file=sys.stderr)
        return 1

    if args.command == "print":
        print(format_tree(document))
    elif args.command == "validate":
        print(f"OK: {len(document.nodes)} nodes")
    else:
        try:
            output = convert(document, args.to)
        except ValueError as exc:
            print(f"Conversion error: {exc}", file=sys.stderr)
            return 1
        if args.output:
            destination = Path(args.output)
            try:
                destination.write_text(output, encoding="utf-8")
            except OSError as exc:
                print(f"Error writing file '{destination}': {exc}", file=sys.stderr)
                return 1
            print(f"Wrote {destination}")
        else:
            sys.stdout.write(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
