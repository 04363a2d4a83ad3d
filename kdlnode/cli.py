"""
Command line entry point: ``kdlnode [FILE]``.

Parses a document and prints it as JSON (default), as canonical text
(``--format``) or not at all (``--check``).
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional, Sequence

from . import __version__
from .config import ParserConfig
from .emitter import format_document
from .lexer.errors import InvalidSyntaxError
from .parser import parse


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_SYNTAX_ERROR = 1
EXIT_IO_ERROR = 2


def build_argparser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kdlnode",
        description="Parse a KDL node document and print its tree.",
    )
    parser.add_argument("file", nargs="?", default="-", help="document to parse ('-' or omitted reads stdin)")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--check", action="store_true", help="only validate; print nothing on success")
    mode.add_argument("--format", action="store_true", help="print the document in canonical form")
    parser.add_argument("--max-depth", type=int, default=None, help="deepest allowed children nesting")
    parser.add_argument("-v", "--verbose", action="store_true", help="log parser activity to stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _read_input(path: str) -> bytes:
    if path == "-":
        return sys.stdin.buffer.read()
    with open(path, "rb") as f:
        return f.read()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_argparser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    filename = "<stdin>" if args.file == "-" else args.file
    try:
        config = ParserConfig.from_env(max_depth=args.max_depth, filename=filename)
    except ValueError as exc:
        print(f"kdlnode: {exc}", file=sys.stderr)
        return EXIT_IO_ERROR

    try:
        data = _read_input(args.file)
    except OSError as exc:
        print(f"kdlnode: cannot read {filename}: {exc.strerror or exc}", file=sys.stderr)
        return EXIT_IO_ERROR

    try:
        nodes = parse(data, config)
    except InvalidSyntaxError as exc:
        logger.debug("Parse of %s failed with %s", filename, exc.code)
        sys.stderr.write(str(exc))
        return EXIT_SYNTAX_ERROR

    if args.check:
        return EXIT_OK
    if args.format:
        sys.stdout.write(format_document(nodes))
        return EXIT_OK

    tree: List[dict] = [node.to_dict() for node in nodes]
    print(json.dumps(tree, ensure_ascii=False, indent=2))
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
