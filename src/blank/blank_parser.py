"""
Blank Language Parser

Builds a `Program` syntax tree from the tokens of a `Lexer` using Pratt
(precedence-climbing) expression parsing.

Supported Constructs
--------------------
- Statements:
    * `var <ident> = ...;` (the bound value is skipped up to `;`)
    * `return ...;` (the returned value is skipped up to `;`)
    * Bare expressions, with an optional trailing `;`
- Expressions:
    * Identifiers, integer literals, `true` / `false`
    * Prefix operators: `!`, `-`
    * Infix operators: `+ - * / < > == !=`

Keywords such as `func`, `if`, `else` and `break` are tokenized but have no
statement production yet; they surface as "no prefix parse function" errors.

Parser Behavior
---------------
- Never raises on malformed input. Every problem is appended to the error
  list and parsing continues with the next statement or token.
- Callers must check `errors()` after `parse_program()` and treat a tree
  with errors as unreliable.
- One token of lookahead (`peek_token`) beyond `cur_token`.

Entry Points
------------
- `Parser(lexer).parse_program()`: Parse a whole source into a `Program`.
- `Parser.errors()`: Diagnostics collected during the parse.
- `parse(source)`: Fresh lexer/parser pair, returns `(program, errors)`.

Example
-------
>>> program, errors = parse("2 + 2 * 4 - 5")
>>> str(program), errors
('2 + 2 * 4 - 5', [])
"""

from __future__ import annotations

from collections.abc import Callable
from enum import IntEnum

from blank.blank_ast import (
    BooleanExpression,
    Expression,
    ExpressionStatement,
    Identifier,
    InfixExpression,
    IntegerLiteral,
    PrefixExpression,
    Program,
    ReturnStatement,
    Statement,
    VarStatement,
)
from blank.blank_constants import TokenKind
from blank.blank_lexer import Lexer, Token

PrefixParseFn = Callable[[], Expression]
InfixParseFn = Callable[[Expression], Expression]

PREFIX_OPERATORS = frozenset({TokenKind.BANG, TokenKind.MINUS})

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class Precedence(IntEnum):
    """Binding strength of operators, lowest first."""

    LOWEST = 1
    EQUALS = 2  # == !=
    LESSGREATER = 3  # < >
    SUM = 4  # + -
    PRODUCT = 5  # * /
    PREFIX = 6  # -x !x
    CALL = 7  # reserved for fn(x)


precedences: dict[TokenKind, Precedence] = {
    TokenKind.EQ: Precedence.EQUALS,
    TokenKind.NOT_EQ: Precedence.EQUALS,
    TokenKind.LT: Precedence.LESSGREATER,
    TokenKind.GT: Precedence.LESSGREATER,
    TokenKind.PLUS: Precedence.SUM,
    TokenKind.MINUS: Precedence.SUM,
    TokenKind.ASTERISK: Precedence.PRODUCT,
    TokenKind.SLASH: Precedence.PRODUCT,
}


def parse_int64(literal: str) -> int:
    """Converts integer literal text with the base taken from its prefix.

    `0x`, `0o` and `0b` select hexadecimal, octal and binary; any other
    leading `0` means octal; everything else is decimal. The result must fit
    in a signed 64-bit integer.

    Raises:
        ValueError: If the text is not a valid literal or is out of range.
    """
    text = literal
    sign = 1
    if text[:1] in ("+", "-"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]

    base = 10
    lowered = text.lower()
    if lowered.startswith(("0x", "0o", "0b")):
        base = {"x": 16, "o": 8, "b": 2}[lowered[1]]
        text = text[2:]
    elif len(text) > 1 and text.startswith("0"):
        base = 8
        text = text[1:]

    if not text or not text.isascii() or not text.isalnum():
        raise ValueError(f"invalid integer literal: {literal!r}")
    value = sign * int(text, base)
    if not INT64_MIN <= value <= INT64_MAX:
        raise ValueError(f"integer literal out of range: {literal!r}")
    return value


class Parser:
    """
    Blank Parser Class

    Consumes the tokens of one `Lexer` and produces a `Program`. A parser is
    single-use: build a new one for every source string.

    Attributes
    ----------
    cur_token : Token
        The token under examination.
    peek_token : Token
        The token after `cur_token`.
    prefix_parse_fns : dict[TokenKind, PrefixParseFn]
        Handlers for tokens that can start an expression.
    infix_parse_fns : dict[TokenKind, InfixParseFn]
        Handlers for tokens that can continue an expression as binary operators.
    """

    def __init__(self, lexer: Lexer) -> None:
        self.lexer = lexer
        self._tokens = iter(lexer)
        self._errors: list[str] = []

        self.prefix_parse_fns: dict[TokenKind, PrefixParseFn] = {}
        self.infix_parse_fns: dict[TokenKind, InfixParseFn] = {}

        self.register_prefix(TokenKind.IDENT, self.parse_identifier)
        self.register_prefix(TokenKind.INT, self.parse_integer_literal)
        for kind in PREFIX_OPERATORS:
            self.register_prefix(kind, self.parse_prefix_expression)
        self.register_prefix(TokenKind.TRUE, self.parse_boolean)
        self.register_prefix(TokenKind.FALSE, self.parse_boolean)

        for kind in precedences:
            self.register_infix(kind, self.parse_infix_expression)

        # Read two tokens so cur_token and peek_token are both set
        self.cur_token: Token = next(self._tokens)
        self.peek_token: Token = next(self._tokens, self.cur_token)

    def register_prefix(self, kind: TokenKind, fn: PrefixParseFn) -> None:
        self.prefix_parse_fns[kind] = fn

    def register_infix(self, kind: TokenKind, fn: InfixParseFn) -> None:
        self.infix_parse_fns[kind] = fn

    def errors(self) -> list[str]:
        """Returns the diagnostics recorded so far, oldest first."""
        return list(self._errors)

    def next_token(self) -> None:
        """Shifts the lookahead window by one token; EOF repeats at the end."""
        self.cur_token = self.peek_token
        self.peek_token = next(self._tokens, self.peek_token)

    def cur_token_is(self, kind: TokenKind) -> bool:
        return self.cur_token.kind is kind

    def peek_token_is(self, kind: TokenKind) -> bool:
        return self.peek_token.kind is kind

    def expect_peek(self, kind: TokenKind) -> bool:
        """Advances if the next token has the wanted kind, else records an error."""
        if self.peek_token_is(kind):
            self.next_token()
            return True
        self.peek_error(kind)
        return False

    def peek_error(self, kind: TokenKind) -> None:
        self._errors.append(
            f"expected next token to be {kind}, got {self.peek_token.kind} instead"
        )

    def no_prefix_parse_fn_error(self, kind: TokenKind) -> None:
        self._errors.append(f"no prefix parse function for {kind} found")

    def peek_precedence(self) -> Precedence:
        return precedences.get(self.peek_token.kind, Precedence.LOWEST)

    def cur_precedence(self) -> Precedence:
        return precedences.get(self.cur_token.kind, Precedence.LOWEST)

    # Statements

    def parse_program(self) -> Program:
        """Parses statements until EOF and returns the program root.

        If an expression nests deeper than the interpreter stack allows, an
        error is recorded and the statements parsed so far are returned.
        """
        statements: list[Statement] = []
        while not self.cur_token_is(TokenKind.EOF):
            try:
                stmt = self.parse_statement()
            except RecursionError:
                self._errors.append("expression nested too deeply")
                break
            if stmt is not None:
                statements.append(stmt)
            self.next_token()
        return Program(statements)

    def parse_statement(self) -> Statement | None:
        if self.cur_token.kind is TokenKind.VAR:
            return self.parse_var_statement()
        if self.cur_token.kind is TokenKind.RETURN:
            return self.parse_return_statement()
        return self.parse_expression_statement()

    def skip_to_semicolon(self) -> None:
        while not self.cur_token_is(TokenKind.SEMICOLON) and not self.cur_token_is(
            TokenKind.EOF
        ):
            self.next_token()

    def parse_var_statement(self) -> VarStatement | None:
        """Parses `var <ident> = ...;`.

        The value expression is not parsed yet: tokens after `=` are skipped
        up to the closing `;` and the statement's `value` stays None.
        """
        token = self.cur_token
        if not self.expect_peek(TokenKind.IDENT):
            return None
        name = Identifier(self.cur_token, self.cur_token.literal)
        if not self.expect_peek(TokenKind.ASSIGN):
            return None

        # TODO: parse the bound value with parse_expression(LOWEST)
        self.skip_to_semicolon()
        return VarStatement(token, name)

    def parse_return_statement(self) -> ReturnStatement:
        """Parses `return ...;`, skipping the returned value like `var` does."""
        token = self.cur_token
        self.next_token()

        # TODO: parse the returned value with parse_expression(LOWEST)
        self.skip_to_semicolon()
        return ReturnStatement(token)

    def parse_expression_statement(self) -> ExpressionStatement:
        token = self.cur_token
        expression = self.parse_expression(Precedence.LOWEST)
        if self.peek_token_is(TokenKind.SEMICOLON):
            self.next_token()
        return ExpressionStatement(token, expression)

    # Expressions

    def parse_expression(self, precedence: Precedence) -> Expression | None:
        """Parses an expression whose operators all bind tighter than `precedence`.

        Example: `2 + 2 * 4 - 5` parses as `((2 + (2 * 4)) - 5)`. Each infix
        handler parses its right operand at its own operator's precedence, so
        an equal-precedence operator on the right is left for this loop and
        groups left to right.
        """
        prefix = self.prefix_parse_fns.get(self.cur_token.kind)
        if prefix is None:
            self.no_prefix_parse_fn_error(self.cur_token.kind)
            return None
        left = prefix()

        while (
            not self.peek_token_is(TokenKind.SEMICOLON)
            and precedence < self.peek_precedence()
        ):
            infix = self.infix_parse_fns.get(self.peek_token.kind)
            if infix is None:
                return left
            self.next_token()
            left = infix(left)

        return left

    def parse_identifier(self) -> Expression:
        return Identifier(self.cur_token, self.cur_token.literal)

    def parse_integer_literal(self) -> Expression:
        token = self.cur_token
        try:
            value = parse_int64(token.literal)
        except ValueError:
            self._errors.append(f"Error, {token.literal} is not a number!!")
            value = 0
        return IntegerLiteral(token, value)

    def parse_boolean(self) -> Expression:
        return BooleanExpression(self.cur_token, self.cur_token_is(TokenKind.TRUE))

    def parse_prefix_expression(self) -> Expression:
        """Parses a run of prefix operators and the operand they apply to.

        `!-x` becomes `(!(-x))`. The operators are collected in a loop so a
        long run does not grow the call stack.
        """
        operators: list[Token] = []
        while self.cur_token.kind in PREFIX_OPERATORS:
            operators.append(self.cur_token)
            self.next_token()

        right = self.parse_expression(Precedence.PREFIX)
        for token in reversed(operators):
            right = PrefixExpression(token, right)
        return right

    def parse_infix_expression(self, left: Expression) -> Expression:
        token = self.cur_token
        precedence = self.cur_precedence()
        self.next_token()
        right = self.parse_expression(precedence)
        return InfixExpression(token, left, right)


def parse(source: str) -> tuple[Program, list[str]]:
    """Parses `source` with a fresh lexer and parser.

    Returns:
        tuple[Program, list[str]]: The program root and its error messages.
    """
    parser = Parser(Lexer(source))
    program = parser.parse_program()
    return program, parser.errors()


__all__ = ["Parser", "Precedence", "parse", "parse_int64", "precedences"]
