"""
minexpr CLI Entrypoint.

This module provides the command-line interface for scanning and parsing minexpr source.

Features:
    - Read source from `.mx` files or inline strings.
    - Print the token stream, or parse and render the AST as JSON or Graphviz DOT.
    - Output to console or file.
    - Report lexer/parser errors on stderr with a non-zero exit status.

Example usage:
    minexpr expr.mx
    minexpr -s "x = 5 + 3 * 2" -t dot -o ast.dot
    minexpr -s "func(x, y + 1)" --tokens
    minexpr expr.mx --verbose

Functions:
    run_minexpr(source: str, is_string: bool = False, target: str = "json", out: str | None = None,
                tokens: bool = False, pretty: bool = False) -> None:
        Executes the pipeline (read → lex/parse → render → output).

    main(argv: list[str] | None = None) -> None:
        Parses CLI arguments, configures logging and invokes `run_minexpr`.
"""

import argparse
import logging
import sys

from minexpr.minexpr_constants import source_suffix
from minexpr.minexpr_errors import LexerError, ParseError
from minexpr.minexpr_lexer import read_source, tokenize
from minexpr.minexpr_parser import Parser
from minexpr.minexpr_render import Renderer

logger = logging.getLogger(__name__)


def format_tokens(source: str) -> str:
    """Returns one line per token, `EOF` included: `line:col TYPE value [kind]`."""
    lines = []
    for tok in tokenize(source):
        kind = "" if tok.kind is None else f" {tok.kind!r}"
        lines.append(f"{tok.line}:{tok.col} {tok.type} {tok.value!r}{kind}")
    return "\n".join(lines)


def run_minexpr(
    source: str,
    is_string: bool = False,
    target: str = "json",
    out: str | None = None,
    tokens: bool = False,
    pretty: bool = False,
) -> None:
    """
    Run the minexpr toolchain: read, lex/parse, render, and print or write the result.

    Args:
        source (str): minexpr source text or path to a `.mx` file.
        is_string (bool): If True, treats `source` as raw code instead of a file path.
        target (str): Render target for the AST ('json' or 'dot'). Defaults to 'json'.
        out (str | None): Optional path to write the output. If None, prints to stdout.
        tokens (bool): If True, prints the token stream instead of the AST.
        pretty (bool): If True, prints banners around the output.

    Raises:
        ValueError: If `is_string` is False and the source does not end with '.mx'.
        LexerError, ParseError: On malformed input or unreadable files.
    """
    if not is_string and not source.endswith(source_suffix):
        raise ValueError(f"Only {source_suffix} files are supported.")
    # 1. Read source
    if not is_string:
        logger.debug("Reading %s", source)
        source = read_source(source)

    # 2. Scan or parse + render
    if tokens:
        text = format_tokens(source)
        title = "Tokens"
    else:
        program = Parser(source).parse()
        text = Renderer(target).render(program)
        title = f"AST ({target})"

    # 3. Output result
    if out:
        with open(out, "w", encoding="utf-8") as f:
            f.write(text if text.endswith("\n") else text + "\n")
        if pretty:
            print(f"(wrote to {out})")
    elif pretty:
        banner = "=" * 20
        print(f"{banner}\n{title}\n{banner}\n{text.rstrip()}\n{banner}\n")
    else:
        print(text.rstrip("\n"))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="minexpr", description="Scan and parse minexpr expressions"
    )
    parser.add_argument("source", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "-t",
        "--target",
        choices=("json", "dot"),
        default="json",
        help="AST output format (default: json)",
    )
    parser.add_argument(
        "--tokens", action="store_true", help="Print the token stream instead of the AST"
    )
    parser.add_argument("-o", "--out", metavar="OUTFILE", help="Output to file")
    parser.add_argument(
        "-p", "--pretty", action="store_true", help="Show output with banners"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> None:
    """
    Entry point for the minexpr CLI.

    Exits with status 1 after printing `error: <message>` to stderr when the
    source cannot be read, scanned, parsed or rendered.
    """
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        run_minexpr(
            source=args.source,
            is_string=args.string,
            target=args.target,
            out=args.out,
            tokens=args.tokens,
            pretty=args.pretty,
        )
    except (LexerError, ParseError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    main()
