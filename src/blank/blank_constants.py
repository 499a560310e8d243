"""
Token kinds and lookup tables shared by the Blank lexer and parser.

Exports:
    - TokenKind: closed enumeration of every lexical category.
    - keywords: reserved words mapped to their token kind.
    - operator_tokens: operator and delimiter spellings mapped to their token kind.
    - lookup_ident: classifies a scanned word as a keyword or an identifier.
"""

from enum import Enum


class TokenKind(str, Enum):
    """Lexical category of a token.

    The value of each member is the text used when a kind is shown in a
    diagnostic, e.g. ``expected next token to be IDENT, got INT instead``.
    """

    ILLEGAL = "ILLEGAL"
    EOF = "EOF"

    # Identifiers + literals
    IDENT = "IDENT"
    INT = "INT"

    # Operators
    ASSIGN = "="
    PLUS = "+"
    MINUS = "-"
    ASTERISK = "*"
    SLASH = "/"
    LT = "<"
    GT = ">"
    BANG = "!"
    EQ = "=="
    NOT_EQ = "!="
    GTE = ">="
    LTE = "<="

    # Delimiters
    COMMA = ","
    SEMICOLON = ";"
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"

    # Keywords
    FUNCTION = "FUNCTION"
    VAR = "VAR"
    RETURN = "RETURN"
    BREAK = "BREAK"
    IF = "IF"
    ELSE = "ELSE"
    BLANKOUT = "BLANKOUT"
    BLANKIN = "BLANKIN"
    TRUE = "TRUE"
    FALSE = "FALSE"

    def __str__(self) -> str:
        return self.value


keywords: dict[str, TokenKind] = {
    "func": TokenKind.FUNCTION,
    "var": TokenKind.VAR,
    "return": TokenKind.RETURN,
    "break": TokenKind.BREAK,
    "if": TokenKind.IF,
    "else": TokenKind.ELSE,
    "blankout": TokenKind.BLANKOUT,
    "blankin": TokenKind.BLANKIN,
    "true": TokenKind.TRUE,
    "false": TokenKind.FALSE,
}

operator_tokens: dict[str, TokenKind] = {
    kind.value: kind
    for kind in (
        TokenKind.ASSIGN,
        TokenKind.PLUS,
        TokenKind.MINUS,
        TokenKind.ASTERISK,
        TokenKind.SLASH,
        TokenKind.LT,
        TokenKind.GT,
        TokenKind.BANG,
        TokenKind.EQ,
        TokenKind.NOT_EQ,
        TokenKind.GTE,
        TokenKind.LTE,
        TokenKind.COMMA,
        TokenKind.SEMICOLON,
        TokenKind.LPAREN,
        TokenKind.RPAREN,
        TokenKind.LBRACE,
        TokenKind.RBRACE,
    )
}


def lookup_ident(word: str) -> TokenKind:
    """Returns the keyword kind for `word`, or IDENT if it is not reserved."""
    return keywords.get(word, TokenKind.IDENT)


__all__ = ["TokenKind", "keywords", "lookup_ident", "operator_tokens"]
