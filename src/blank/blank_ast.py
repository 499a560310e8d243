"""
Defines the abstract syntax tree (AST) produced by the Blank parser.

Classes:
    Node: Base class of every tree node.
    Statement, Expression: The two disjoint node capabilities.
    Program: Root node holding the top-level statements.
    VarStatement, ReturnStatement, ExpressionStatement: Statement nodes.
    Identifier, IntegerLiteral, BooleanExpression,
    PrefixExpression, InfixExpression: Expression nodes.
    ASTDict: TypedDict shape returned by `Node.to_dict()`.

Every node can report the literal text of the token that defines it
(`token_literal()`) and reconstructs a canonical rendering of itself through
`str()`. That rendering is deterministic but not the input text verbatim: infix
expressions print as `left op right` without grouping parentheses, and
`var`/`return` statements always end in `;`.

Example:
    >>> from blank.blank_parser import parse
    >>> program, errors = parse("-a + b * c;")
    >>> str(program)
    '-a + b * c'
"""

from typing import Any, TypedDict

from blank.blank_lexer import Token


class ASTDict(TypedDict, total=False):
    """
    Serialized form of a node, suitable for JSON output or test assertions.

    Fields:
        kind (str): The node class name (e.g. "InfixExpression").
        token (str): Literal of the defining token.
        value (Any): Identifier name, integer value, or boolean value.
        name (ASTDict): Bound identifier of a `var` statement.
        operator (str): Operator literal of prefix/infix expressions.
        left (ASTDict | None): Left operand of an infix expression.
        right (ASTDict | None): Operand of a prefix or infix expression.
        expression (ASTDict | None): Wrapped expression of a statement.
        return_value (ASTDict | None): Value of a `return` statement.
        statements (list[ASTDict]): Top-level statements of a program.
    """

    kind: str
    token: str
    value: Any
    name: "ASTDict"
    operator: str
    left: "ASTDict | None"
    right: "ASTDict | None"
    expression: "ASTDict | None"
    return_value: "ASTDict | None"
    statements: list["ASTDict"]


def _dump(node: "Node | None") -> ASTDict | None:
    return node.to_dict() if node is not None else None


class Node:
    """Base class for all Blank AST nodes.

    Subclasses provide `token_literal()`, `__str__()` and `to_dict()`.
    Equality is structural: two nodes are equal when they are the same class
    and serialize to the same dictionary.
    """

    def token_literal(self) -> str:
        raise NotImplementedError

    def to_dict(self) -> ASTDict:
        raise NotImplementedError

    def __str__(self) -> str:
        raise NotImplementedError

    def __eq__(self, other: Any) -> bool:
        if type(self) is not type(other):
            return False
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r})"


class Statement(Node):
    """A node that can appear at the top level of a program."""


class Expression(Node):
    """A node that produces a value."""


class Program(Node):
    """Root of the tree; owns every top-level statement in source order."""

    def __init__(self, statements: list[Statement] | None = None) -> None:
        self.statements: list[Statement] = statements or []

    def token_literal(self) -> str:
        if self.statements:
            return self.statements[0].token_literal()
        return ""

    def __str__(self) -> str:
        return "".join(str(stmt) for stmt in self.statements)

    def to_dict(self) -> ASTDict:
        return {
            "kind": "Program",
            "statements": [stmt.to_dict() for stmt in self.statements],
        }


class Identifier(Expression):
    def __init__(self, token: Token, value: str) -> None:
        self.token = token
        self.value = value

    def token_literal(self) -> str:
        return self.token.literal

    def __str__(self) -> str:
        return self.value

    def to_dict(self) -> ASTDict:
        return {"kind": "Identifier", "token": self.token.literal, "value": self.value}


class VarStatement(Statement):
    """`var <name> = <value>;`

    `value` is None while the grammar skips the right-hand side of the
    binding; see `Parser.parse_var_statement`.
    """

    def __init__(
        self, token: Token, name: Identifier, value: Expression | None = None
    ) -> None:
        self.token = token
        self.name = name
        self.value = value

    def token_literal(self) -> str:
        return self.token.literal

    def __str__(self) -> str:
        value = str(self.value) if self.value is not None else ""
        return f"{self.token_literal()} {self.name} = {value};"

    def to_dict(self) -> ASTDict:
        return {
            "kind": "VarStatement",
            "token": self.token.literal,
            "name": self.name.to_dict(),
            "value": _dump(self.value),
        }


class ReturnStatement(Statement):
    """`return <value>;`"""

    def __init__(self, token: Token, return_value: Expression | None = None) -> None:
        self.token = token
        self.return_value = return_value

    def token_literal(self) -> str:
        return self.token.literal

    def __str__(self) -> str:
        value = str(self.return_value) if self.return_value is not None else ""
        return f"{self.token_literal()} {value};"

    def to_dict(self) -> ASTDict:
        return {
            "kind": "ReturnStatement",
            "token": self.token.literal,
            "return_value": _dump(self.return_value),
        }


class ExpressionStatement(Statement):
    """A bare expression used as a statement; the trailing `;` is optional."""

    def __init__(self, token: Token, expression: Expression | None) -> None:
        self.token = token
        self.expression = expression

    def token_literal(self) -> str:
        return self.token.literal

    def __str__(self) -> str:
        return str(self.expression) if self.expression is not None else ""

    def to_dict(self) -> ASTDict:
        return {
            "kind": "ExpressionStatement",
            "token": self.token.literal,
            "expression": _dump(self.expression),
        }


class IntegerLiteral(Expression):
    def __init__(self, token: Token, value: int = 0) -> None:
        self.token = token
        self.value = value

    def token_literal(self) -> str:
        return self.token.literal

    def __str__(self) -> str:
        return self.token.literal

    def to_dict(self) -> ASTDict:
        return {
            "kind": "IntegerLiteral",
            "token": self.token.literal,
            "value": self.value,
        }


class BooleanExpression(Expression):
    def __init__(self, token: Token, value: bool) -> None:
        self.token = token
        self.value = value

    def token_literal(self) -> str:
        return self.token.literal

    def __str__(self) -> str:
        return self.token.literal

    def to_dict(self) -> ASTDict:
        return {
            "kind": "BooleanExpression",
            "token": self.token.literal,
            "value": self.value,
        }


class PrefixExpression(Expression):
    """Unary operator applied to the operand on its right (`!x`, `-30`)."""

    def __init__(self, token: Token, right: Expression | None) -> None:
        self.token = token
        self.right = right

    @property
    def operator(self) -> str:
        return self.token.literal

    def token_literal(self) -> str:
        return self.token.literal

    def __str__(self) -> str:
        return _render_operators(self)

    def to_dict(self) -> ASTDict:
        return {
            "kind": "PrefixExpression",
            "token": self.token.literal,
            "operator": self.operator,
            "right": _dump(self.right),
        }


class InfixExpression(Expression):
    """Binary operator with its left and right operands."""

    def __init__(
        self, token: Token, left: Expression, right: Expression | None
    ) -> None:
        self.token = token
        self.left = left
        self.right = right

    @property
    def operator(self) -> str:
        return self.token.literal

    def token_literal(self) -> str:
        return self.token.literal

    def __str__(self) -> str:
        return _render_operators(self)

    def to_dict(self) -> ASTDict:
        return {
            "kind": "InfixExpression",
            "token": self.token.literal,
            "operator": self.operator,
            "left": _dump(self.left),
            "right": _dump(self.right),
        }


def _render_operators(node: Expression) -> str:
    """Renders a tree of prefix and infix expressions without recursing.

    Operator chains can be arbitrarily long (`!!!!x`, `1 + 1 + ... + 1`), so
    the tree is walked with an explicit stack of pending nodes and text.
    """
    parts: list[str] = []
    pending: list[Expression | str | None] = [node]
    while pending:
        item = pending.pop()
        if item is None:
            continue
        if isinstance(item, str):
            parts.append(item)
        elif isinstance(item, PrefixExpression):
            pending += [item.right, item.operator]
        elif isinstance(item, InfixExpression):
            pending += [item.right, f" {item.operator} ", item.left]
        else:
            parts.append(str(item))
    return "".join(parts)


__all__ = [
    "ASTDict",
    "BooleanExpression",
    "Expression",
    "ExpressionStatement",
    "Identifier",
    "InfixExpression",
    "IntegerLiteral",
    "Node",
    "PrefixExpression",
    "Program",
    "ReturnStatement",
    "Statement",
    "VarStatement",
]
