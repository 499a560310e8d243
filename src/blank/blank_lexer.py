"""
Lexical analyzer for the Blank programming language.

This module turns raw source text into a stream of tokens for the parser.

Classes:
    CharacterStream: Cursor over the source text with line/column tracking.
    Token: A single token with kind, literal text, and source location.
    Lexer: Converts source text into a sequence of tokens.

Features:
    - Skips whitespace (space, tab, carriage return, newline)
    - Longest-match recognition of operators (`==` before `=`, `<=` before `<`)
    - Recognizes:
        * Identifiers and keywords (`func`, `var`, `return`, `true`, ...)
        * Integer literals (runs of decimal digits)
        * Operators and delimiters
    - Unknown characters become ILLEGAL tokens; the lexer itself never raises

Example:
    >>> lexer = Lexer("var x = 5;")
    >>> lexer.next_token()
    Token(VAR, var)

Exports:
    - CharacterStream
    - Token
    - Lexer
"""

import string
from collections.abc import Iterator
from typing import Any

from blank.blank_constants import TokenKind, lookup_ident, operator_tokens

WHITESPACE = " \t\r\n"
IDENT_START = string.ascii_letters + "_"
IDENT_CHARS = IDENT_START + string.digits
DIGITS = string.digits

MAX_OPERATOR_LENGTH = max(len(op) for op in operator_tokens)


class CharacterStream:
    """Read cursor over the source; `line` and `column` are 1-based."""

    def __init__(self, source: str) -> None:
        self.source = source
        self.position = 0
        self.line = 1
        self.column = 1

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)

    def peek(self, offset: int = 0) -> str:
        # "" stands in for every position outside the source
        index = self.position + offset
        return self.source[index] if 0 <= index < len(self.source) else ""

    def next(self) -> str:
        if self.end_of_file():
            raise IndexError(f"no character left to read (line {self.line})")
        char = self.source[self.position]
        self.position += 1
        if char == "\n":
            self.line, self.column = self.line + 1, 1
        else:
            self.column += 1
        return char


class Token:
    """A lexical token of the Blank language.

    Attributes:
        kind (TokenKind): The token's category.
        literal (str): The exact source text of the token ("" for EOF).
        line (int): 1-based line where the token starts (0 if unknown).
        col (int): 1-based column where the token starts (0 if unknown).
    """

    __slots__ = ("kind", "literal", "line", "col")

    kind: TokenKind
    literal: str
    line: int
    col: int

    def __init__(self, kind: TokenKind, literal: str, line: int = 0, col: int = 0):
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "literal", literal)
        object.__setattr__(self, "line", line)
        object.__setattr__(self, "col", col)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"Token is immutable, cannot set {name!r}")

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.literal})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.kind == other.kind
            and self.literal == other.literal
            and self.line == other.line
            and self.col == other.col
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.literal, self.line, self.col))


class Lexer:
    """Lexical analyzer for the Blank language.

    `next_token` walks the source once and keeps returning EOF once the
    input is exhausted. Iterating over the lexer is restartable: every
    `iter(lexer)` scans the source again from the start and stops after the
    EOF token, without touching the `next_token` cursor.

    Attributes:
        source (str): The text being tokenized.
        stream (CharacterStream): Cursor used by `next_token`.
    """

    def __init__(self, source: str) -> None:
        self.source = source
        self.stream = CharacterStream(source)

    def __iter__(self) -> Iterator[Token]:
        lexer = Lexer(self.source)
        while True:
            tok = lexer.next_token()
            yield tok
            if tok.kind is TokenKind.EOF:
                return

    def tokenize(self) -> list[Token]:
        """Returns every token of the source, EOF included."""
        return list(self)

    def peek(self, offset: int = 0) -> str:
        return self.stream.peek(offset)

    def advance(self) -> str:
        return self.stream.next()

    def skip_whitespace(self) -> None:
        while not self.stream.end_of_file() and self.peek() in WHITESPACE:
            self.advance()

    def read_while(self, allowed: str) -> str:
        """Consumes the longest run of characters drawn from `allowed`."""
        text = ""
        while not self.stream.end_of_file() and self.peek() in allowed:
            text += self.advance()
        return text

    def match_operator(self) -> Token | None:
        """Matches the longest operator or delimiter at the cursor.

        Returns:
            Token | None: The operator token, or None if nothing matches.
        """
        line, col = self.stream.line, self.stream.column
        best = ""
        candidate = ""

        for i in range(MAX_OPERATOR_LENGTH):
            ch = self.peek(i)
            if ch == "":
                break
            candidate += ch
            if candidate in operator_tokens:
                best = candidate

        if not best:
            return None
        for _ in best:
            self.advance()
        return Token(operator_tokens[best], best, line, col)

    def next_token(self) -> Token:
        """Consumes and returns the next token.

        Returns:
            Token: The next token; EOF (empty literal) once input is exhausted.
        """
        self.skip_whitespace()

        line, col = self.stream.line, self.stream.column
        if self.stream.end_of_file():
            return Token(TokenKind.EOF, "", line, col)

        ch = self.peek()

        # 1. Identifier or keyword
        if ch in IDENT_START:
            word = self.read_while(IDENT_CHARS)
            return Token(lookup_ident(word), word, line, col)

        # 2. Integer
        if ch in DIGITS:
            return Token(TokenKind.INT, self.read_while(DIGITS), line, col)

        # 3. Operator or delimiter
        token = self.match_operator()
        if token:
            return token

        # 4. Anything else is left for the parser to reject
        return Token(TokenKind.ILLEGAL, self.advance(), line, col)


__all__ = ["CharacterStream", "Lexer", "Token"]
