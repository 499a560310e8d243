"""
Interactive read-parse-print loop for the Blank language.

Each line typed at the prompt is tokenized and parsed on its own. Parse
errors are printed under an `[error] >>>` banner; otherwise the canonical
reconstruction of the program is echoed back.

Commands:
    exit, quit     Leave the REPL.
    verbose-mode   Toggle echoing of the token stream before each parse.
"""

import getpass
import io
import traceback

from blank.blank_lexer import Lexer
from blank.blank_parser import Parser

PROMPT = ">> "


def current_user() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "friend"


def print_parser_errors(errors: list[str]) -> None:
    print("[error] >>>")
    for msg in errors:
        print(f"\t{msg}")


def print_traceback() -> None:
    buf = io.StringIO()
    traceback.print_exc(file=buf)
    print("[error] >>>")
    print(buf.getvalue())


def evaluate_line(src: str, verbose: bool = False) -> bool:
    """Parses one line and prints either its errors or its reconstruction.

    Returns:
        bool: True if the line parsed without errors.
    """
    lexer = Lexer(src)
    if verbose:
        print(f"[tokens] >>> {lexer.tokenize()}")

    parser = Parser(lexer)
    program = parser.parse_program()
    errors = parser.errors()
    if errors:
        print_parser_errors(errors)
        return False
    print(program)
    return True


def start_repl(verbose: bool = False, max_length: int | None = None) -> None:
    print(f"Blank Lang: Welcome {current_user()}!")
    print("Type 'exit' or 'quit' to leave.")

    while True:
        try:
            line = input(PROMPT)
        except (KeyboardInterrupt, EOFError):
            print("\nExiting Blank REPL.")
            return

        src = line.strip()
        if not src:
            continue
        if src in ("exit", "quit"):
            print("Exiting Blank REPL.")
            return
        if src.lower() == "verbose-mode":
            verbose = not verbose
            print(f"[mode] >>> Verbose mode {'ON' if verbose else 'OFF'}")
            continue
        if max_length is not None and len(src) > max_length:
            print("[error] >>>")
            print(f"\tinput is {len(src)} characters, limit is {max_length}")
            continue

        try:
            evaluate_line(src, verbose=verbose)
        except Exception:
            print_traceback()


def main() -> None:
    start_repl()


if __name__ == "__main__":
    main()
