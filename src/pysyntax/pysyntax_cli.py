"""
pysyntax CLI Entrypoint.

This module provides the command-line interface for parsing Python-family source
and printing the resulting syntax tree.

Features:
    - Read source from files or inline strings.
    - Parse at a chosen language level, optionally with a `__future__` feature enabled.
    - Render the tree as an indented dump, as JSON, or back to source text.
    - List only the syntax errors, as `name:line:col: message`.
    - Output to console or file.

Example usage:
    pysyntax module.py
    pysyntax -s "print >>f, x" --level 2.7
    pysyntax module.py -f json -o module.json
    pysyntax module.py --errors --level 3.3

Functions:
    run_pysyntax(source: str, is_string: bool = False, level: str | None = None,
                 future: str | None = None, fmt: str = "tree", out: str | None = None,
                 errors_only: bool = False, show_trivia: bool = False) -> int:
        Runs the pipeline (read → parse → render → output) and returns the error count.

    main() -> None:
        Parses CLI arguments, runs the pipeline and exits 1 when errors were found.
"""

import argparse
import logging
import sys

from pysyntax.pysyntax_context import FutureFeature, LanguageLevel
from pysyntax.pysyntax_parser import PythonParser
from pysyntax.pysyntax_render import Renderer
from pysyntax.pysyntax_tree import ErrorAnnotation

logger = logging.getLogger(__name__)

FORMATS = ("tree", "json", "text")


def line_and_column(text: str, offset: int) -> tuple[int, int]:
    """1-based line and column of `offset` in `text`."""
    line = text.count("\n", 0, offset) + 1
    column = offset - (text.rfind("\n", 0, offset) + 1) + 1
    return line, column


def format_error(name: str, text: str, error: ErrorAnnotation) -> str:
    line, column = line_and_column(text, error.start)
    return f"{name}:{line}:{column}: {error.message}"


def run_pysyntax(
    source: str,
    is_string: bool = False,
    level: str | None = None,
    future: str | None = None,
    fmt: str = "tree",
    out: str | None = None,
    errors_only: bool = False,
    show_trivia: bool = False,
) -> int:
    """
    Run the pysyntax pipeline: read, parse, render, and print or write the output.

    Args:
        source (str): Source code, or a path to a source file.
        is_string (bool): If True, treats `source` as raw code instead of a file path. Defaults to False.
        level (str | None): Language level such as "2.7" or "3.3". Defaults to the parser default.
        future (str | None): A `__future__` feature name assumed imported at the top.
        fmt (str): Output format: "tree", "json" or "text". Defaults to "tree".
        out (str | None): Optional path to write the output to. If None, prints to stdout.
        errors_only (bool): If True, prints only the error listing instead of the tree.
        show_trivia (bool): If True, the tree format also lists whitespace and comments.

    Returns:
        int: The number of syntax errors found.

    Raises:
        ValueError: On an unknown level, future feature or format.
        OSError: If the source file cannot be read or the output cannot be written.
    """
    name = "<string>" if is_string else source
    if not is_string:
        with open(source, encoding="utf-8") as f:
            source = f.read()

    tree = PythonParser(level, future).parse(source)
    errors = sorted(tree.iter_errors(), key=lambda e: (e.start, e.end))

    if errors_only:
        output = "\n".join(format_error(name, source, e) for e in errors)
    else:
        options = {"show_trivia": show_trivia} if fmt == "tree" else {}
        output = Renderer(fmt, **options).render(tree)

    if out:
        with open(out, "w", encoding="utf-8") as f:
            f.write(output)
        logger.info("wrote %s output to %s", fmt, out)
    elif output:
        print(output)

    if errors and not errors_only:
        for error in errors:
            print(format_error(name, source, error), file=sys.stderr)
    return len(errors)


def main() -> None:
    """
    Entry point for the pysyntax CLI.

    Supported flags:
        - `-s`, `--string`: Interpret source as a raw string instead of a file path.
        - `-l`, `--level`: Language level (2.4 to 3.3), default 2.7.
        - `--future`: Enable a `__future__` feature from the first line on.
        - `-f`, `--format`: Output format ('tree', 'json' or 'text'), default 'tree'.
        - `-o`, `--out`: Write the output to a file.
        - `--errors`: Print only the error listing.
        - `--trivia`: Include whitespace and comments in the tree dump.
        - `-v`, `--verbose`: Debug logging.

    Exits with status 1 when the source has syntax errors.
    """
    parser = argparse.ArgumentParser(prog="pysyntax")
    parser.add_argument("source", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "-l",
        "--level",
        choices=[str(level) for level in LanguageLevel],
        default=str(LanguageLevel.default()),
        help="Language level (default: %(default)s)",
    )
    parser.add_argument(
        "--future",
        choices=[feature.value for feature in FutureFeature],
        help="__future__ feature enabled from the start",
    )
    parser.add_argument(
        "-f",
        "--format",
        dest="fmt",
        choices=FORMATS,
        default="tree",
        help="Output format (default: tree)",
    )
    parser.add_argument("-o", "--out", metavar="OUTFILE", help="Output to file")
    parser.add_argument(
        "--errors", action="store_true", help="Only list syntax errors"
    )
    parser.add_argument(
        "--trivia", action="store_true", help="Show whitespace and comments in the tree"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        error_count = run_pysyntax(
            source=args.source,
            is_string=args.string,
            level=args.level,
            future=args.future,
            fmt=args.fmt,
            out=args.out,
            errors_only=args.errors,
            show_trivia=args.trivia,
        )
    except OSError as e:
        parser.error(str(e))
    if error_count:
        sys.exit(1)


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    main()
