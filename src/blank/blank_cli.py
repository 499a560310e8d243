"""
Blank CLI Entrypoint.

Parses Blank source from a `.blank` file or an inline string and prints the
result, or starts the interactive REPL.

Features:
    - Read source from `.blank` files or inline strings (`-s`).
    - Print the reconstructed program (default), the token stream
      (`--tokens`), or the syntax tree as JSON (`--json`).
    - Report parse errors on stderr with a non-zero exit status.
    - Launch the REPL with optional verbosity.

Example usage:
    blank hello.blank
    blank -s "var x = 5; x + 1"
    blank -s "1 + 2 * 3" --json
    blank --repl --verbose

Exit status:
    0 on success, 1 if the parser reported errors or the tree is too deep to
    serialize with `--json`, 2 if the input exceeds `--max-length`.
"""

import argparse
import json
import sys

from blank.blank_lexer import Lexer
from blank.blank_parser import Parser

EXIT_OK = 0
EXIT_PARSE_ERRORS = 1
EXIT_TOO_LONG = 2


def run_blank(
    source: str,
    is_string: bool = False,
    tokens: bool = False,
    as_json: bool = False,
    max_length: int | None = None,
) -> int:
    """
    Run the Blank front end over one source: lex, parse, then print.

    Args:
        source (str): Blank source code or path to a `.blank` file.
        is_string (bool): If True, treats `source` as raw code instead of a file path.
        tokens (bool): If True, prints the token stream instead of the program.
        as_json (bool): If True, prints the syntax tree as JSON.
        max_length (int | None): Reject sources longer than this many characters.

    Returns:
        int: Process exit status.

    Raises:
        ValueError: If `is_string` is False and the source does not end with '.blank'.
    """
    if not is_string and not source.endswith(".blank"):
        raise ValueError("Only .blank files are supported.")
    if not is_string:
        with open(source, encoding="utf-8") as f:
            source = f.read()

    if max_length is not None and len(source) > max_length:
        print(
            f"input is {len(source)} characters, limit is {max_length}",
            file=sys.stderr,
        )
        return EXIT_TOO_LONG

    lexer = Lexer(source)
    if tokens:
        for tok in lexer:
            print(f"{tok.line}:{tok.col}\t{tok.kind.name}\t{tok.literal!r}")
        return EXIT_OK

    parser = Parser(lexer)
    program = parser.parse_program()
    errors = parser.errors()
    if errors:
        for msg in errors:
            print(msg, file=sys.stderr)
        return EXIT_PARSE_ERRORS

    if as_json:
        try:
            payload = json.dumps(program.to_dict(), indent=2)
        except RecursionError:
            print("syntax tree too deeply nested for --json", file=sys.stderr)
            return EXIT_PARSE_ERRORS
        print(payload)
    else:
        print(program)
    return EXIT_OK


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="blank")
    parser.add_argument("source", nargs="?", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    output = parser.add_mutually_exclusive_group()
    output.add_argument(
        "--tokens", action="store_true", help="Print the token stream and stop"
    )
    output.add_argument(
        "--json", dest="as_json", action="store_true", help="Print the AST as JSON"
    )
    parser.add_argument(
        "--max-length",
        type=int,
        metavar="N",
        help="Reject input longer than N characters",
    )
    parser.add_argument(
        "--repl",
        action="store_true",
        help="Launch interactive REPL",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Verbose REPL mode (if --repl)"
    )
    return parser


def main() -> None:
    """
    Entry point for the `blank` console script.

    Starts the REPL when no source is given or `--repl` is passed; otherwise
    runs `run_blank` and exits with its status.
    """
    args = build_arg_parser().parse_args()

    if args.repl or args.source is None:
        from blank.blank_repl import start_repl

        start_repl(verbose=args.verbose, max_length=args.max_length)
        return

    sys.exit(
        run_blank(
            source=args.source,
            is_string=args.string,
            tokens=args.tokens,
            as_json=args.as_json,
            max_length=args.max_length,
        )
    )


if __name__ == "__main__":
    main()
