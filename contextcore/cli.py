"""contextcore CLI - extract semantic context from the command line.

Usage:
    contextcore extract "I'm building an ESP32 sensor project"
    echo "I prefer dark mode" | contextcore extract -
    contextcore category goals "I want to learn Rust next year"
    contextcore version
"""

import argparse
import json
import logging
import sys
import time

from . import __version__
from .compiler import CATEGORY_BY_NAME, extract_context, get_compiler
from .types import CATEGORY_NAMES


def _read_text(value: str) -> str:
    """Return the text argument, reading stdin when it is ``-``."""
    if value == "-":
        return sys.stdin.read()
    return value


def _dump(data, pretty: bool) -> str:
    return json.dumps(data, indent=2 if pretty else None, ensure_ascii=False)


def cmd_extract(args: argparse.Namespace) -> int:
    """Extract all categories and print the response."""
    text = _read_text(args.text)

    t0 = time.perf_counter()
    response = extract_context(text, source=args.source)
    elapsed_ms = (time.perf_counter() - t0) * 1000
    logging.getLogger(__name__).info("Extracted %d items in %.2fms", response.total, elapsed_ms)

    print(_dump(response.to_dict(), args.pretty))
    return 0


def cmd_category(args: argparse.Namespace) -> int:
    """Extract one category and print its items."""
    if args.name not in CATEGORY_BY_NAME:
        print(
            f"Error: unknown category {args.name!r} (choose from {', '.join(CATEGORY_NAMES)})",
            file=sys.stderr,
        )
        return 1
    items = get_compiler().extract_category(args.name, _read_text(args.text))
    print(_dump([item.to_dict() for item in items], args.pretty))
    return 0


def cmd_version(_args: argparse.Namespace) -> int:
    """Print the version."""
    print(f"contextcore {__version__}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="contextcore",
        description="contextcore: deterministic semantic context extraction",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging on stderr",
    )
    sub = parser.add_subparsers(dest="command")

    # contextcore extract
    p_extract = sub.add_parser("extract", help="Extract all categories from text")
    p_extract.add_argument("text", help="The text to analyze, or - to read stdin")
    p_extract.add_argument(
        "--source", "-s",
        default="text",
        help="Label recorded in meta.source (default: text)",
    )
    p_extract.add_argument(
        "--pretty",
        action="store_true",
        default=False,
        help="Indent the JSON output",
    )
    p_extract.set_defaults(func=cmd_extract)

    # contextcore category
    p_category = sub.add_parser("category", help="Extract a single category from text")
    p_category.add_argument("name", help=f"Category name ({', '.join(CATEGORY_NAMES)})")
    p_category.add_argument("text", help="The text to analyze, or - to read stdin")
    p_category.add_argument(
        "--pretty",
        action="store_true",
        default=False,
        help="Indent the JSON output",
    )
    p_category.set_defaults(func=cmd_category)

    # contextcore version
    p_version = sub.add_parser("version", help="Show version")
    p_version.set_defaults(func=cmd_version)

    return parser


def main(argv=None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        stream=sys.stderr,
    )

    if not args.command:
        parser.print_help()
        sys.exit(0)

    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
