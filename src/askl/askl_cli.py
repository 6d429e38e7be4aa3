"""
askl CLI Entrypoint.

This module provides the command-line interface for parsing askl queries and dumping
the resulting syntax tree.

Features:
    - Read a query from an `.askl` file or an inline string.
    - Lex and parse it into a `Query` AST.
    - Output the AST as JSON, as canonical askl text, or as an indented tree.
    - Output to console or file.
    - Syntax errors are reported on stderr with a caret under the offending column.

Example usage:
    askl rules.askl
    askl -s '@timeout(seconds="30") { "foo" }' -f tree
    askl rules.askl -f askl -o canonical.askl
    askl -vv rules.askl

Functions:
    run_askl(source: str, is_string: bool = False, fmt: str = "json", out: str | None = None,
             indent: int = 2) -> str:
        Executes the full askl pipeline (lex → parse → format → output).

    main(argv: list[str] | None = None) -> int:
        Parses CLI arguments and invokes `run_askl`, returning the exit status.
"""

import argparse
import json
import logging
import sys

from askl.askl_errors import AsklSyntaxError
from askl.askl_format import Formatter
from askl.askl_lexer import CharacterStream, Lexer
from askl.askl_parser import Parser

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("json", "askl", "tree")


def run_askl(
    source: str,
    is_string: bool = False,
    fmt: str = "json",
    out: str | None = None,
    indent: int = 2,
) -> str:
    """
    Run the askl front end: read, parse, format, and print or write the result.

    Args:
        source (str): The askl query or path to a `.askl` file.
        is_string (bool): If True, treats `source` as the query itself. Defaults to False.
        fmt (str): Output format ('json', 'askl' or 'tree'). Defaults to 'json'.
        out (str | None): Optional path to write the output to. If None, prints to stdout.
        indent (int): JSON indentation. Defaults to 2.

    Returns:
        str: The formatted output.

    Raises:
        ValueError: If `is_string` is False and the source does not end with '.askl',
            or if `fmt` is unknown.
        AsklSyntaxError: If the query does not parse.
    """
    if fmt not in OUTPUT_FORMATS:
        raise ValueError(f"Unknown output format: {fmt!r}")
    if not is_string and not source.endswith(".askl"):
        raise ValueError("Only .askl files are supported.")

    # 1. Read source
    if not is_string:
        logger.info("reading query from %s", source)
        with open(source, encoding="utf-8") as f:
            source = f.read()

    # 2. Parsing
    query = Parser(Lexer(CharacterStream(source))).parse()
    logger.info("parsed %d top-level statements", len(query.statements))

    # 3. Formatting
    if fmt == "json":
        text = json.dumps(query.to_dict(), indent=indent, ensure_ascii=False)
    else:
        text = Formatter(fmt).format(query)

    # 4. Output result
    if out:
        with open(out, "w", encoding="utf-8") as f:
            f.write(text + "\n")
        logger.info("wrote %s output to %s", fmt, out)
    else:
        print(text)
    return text


def configure_logging(verbosity: int) -> None:
    """Sends log records to stderr; -v selects INFO and -vv or more DEBUG."""
    level = {0: logging.WARNING, 1: logging.INFO}.get(verbosity, logging.DEBUG)
    logging.basicConfig(
        level=level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr
    )


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the askl CLI.

    Supported flags:
        - `-s`, `--string`: Interpret source as the query text instead of a file path.
        - `-f`, `--format`: Output format ('json', 'askl' or 'tree'), default is 'json'.
        - `-o`, `--out`: Write output to a file.
        - `--indent`: JSON indentation width.
        - `-v`, `--verbose`: Increase log verbosity (repeatable).

    Returns:
        int: 0 on success, 1 if the query has a syntax error, cannot be read, or
            nests too deeply to format.
    """
    parser = argparse.ArgumentParser(
        prog="askl", description="Parse an askl query and dump its syntax tree."
    )
    parser.add_argument("source", help="Filename or raw query (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal query"
    )
    parser.add_argument(
        "-f",
        "--format",
        dest="fmt",
        choices=OUTPUT_FORMATS,
        default="json",
        help="Output format (default: json)",
    )
    parser.add_argument("-o", "--out", metavar="OUTFILE", help="Output to file")
    parser.add_argument(
        "--indent", type=int, default=2, help="JSON indentation (default: 2)"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug)",
    )

    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        run_askl(
            source=args.source,
            is_string=args.string,
            fmt=args.fmt,
            out=args.out,
            indent=args.indent,
        )
    except AsklSyntaxError as e:
        print(e.render(), file=sys.stderr)
        return 1
    except (OSError, ValueError) as e:
        print(f"askl: error: {e}", file=sys.stderr)
        return 1
    except RecursionError:
        print("askl: error: query nests too deeply to format", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    sys.exit(main())
