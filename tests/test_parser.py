from typing import Any

import pytest
from hypothesis import given
from hypothesis import strategies as st
from hypothesis.strategies import composite

from blank.blank_ast import (
    BooleanExpression,
    Expression,
    ExpressionStatement,
    Identifier,
    InfixExpression,
    IntegerLiteral,
    Node,
    PrefixExpression,
    Program,
    ReturnStatement,
    VarStatement,
)
from blank.blank_constants import TokenKind, keywords
from blank.blank_lexer import Lexer
from blank.blank_parser import Parser, Precedence, parse, parse_int64, precedences

identifiers = st.from_regex(r"[a-zA-Z_][a-zA-Z0-9_]{0,10}", fullmatch=True).filter(
    lambda s: s not in keywords
)
skipped_values = st.text(alphabet="abxyz0129 +-*/<>!=(){},", max_size=20)


def parse_clean(source: str) -> Program:
    program, errors = parse(source)
    assert errors == [], f"parser errors: {errors}"
    return program


def single_expression(source: str) -> Expression | None:
    program = parse_clean(source)
    assert len(program.statements) == 1
    stmt = program.statements[0]
    assert isinstance(stmt, ExpressionStatement)
    return stmt.expression


def grouped(node: Node | None) -> str:
    """Renders an expression tree with every operation parenthesized."""
    if isinstance(node, InfixExpression):
        return f"({grouped(node.left)} {node.operator} {grouped(node.right)})"
    if isinstance(node, PrefixExpression):
        return f"({node.operator}{grouped(node.right)})"
    return str(node)


def check_literal(exp: Any, expected: Any) -> None:
    if isinstance(expected, bool):
        assert isinstance(exp, BooleanExpression)
        assert exp.value is expected
        assert exp.token_literal() == str(expected).lower()
    elif isinstance(expected, int):
        assert isinstance(exp, IntegerLiteral)
        assert exp.value == expected
        assert exp.token_literal() == str(expected)
    else:
        assert isinstance(exp, Identifier)
        assert exp.value == expected
        assert exp.token_literal() == expected


# Statements


def test_var_statements() -> None:
    source = """
        var x = 5;
        var y = 10;
        var foobar = 838383;
    """
    program = parse_clean(source)
    assert len(program.statements) == 3
    for stmt, name in zip(program.statements, ["x", "y", "foobar"]):
        assert isinstance(stmt, VarStatement)
        assert stmt.token_literal() == "var"
        assert stmt.name.value == name
        assert stmt.name.token_literal() == name
        assert stmt.value is None


def test_return_statements() -> None:
    program = parse_clean("return 5; return 10; return 993322;")
    assert len(program.statements) == 3
    for stmt in program.statements:
        assert isinstance(stmt, ReturnStatement)
        assert stmt.token_literal() == "return"
        assert stmt.return_value is None


@given(
    names=st.lists(identifiers, min_size=1, max_size=6),
    values=st.lists(skipped_values, min_size=6, max_size=6),
)  # type: ignore[misc]
def test_var_statements_keep_names_in_order(
    names: list[str], values: list[str]
) -> None:
    source = "\n".join(f"var {n} = {v};" for n, v in zip(names, values))
    program, errors = parse(source)
    assert errors == []
    assert len(program.statements) == len(names)
    for stmt, name in zip(program.statements, names):
        assert isinstance(stmt, VarStatement)
        assert stmt.name.value == name


@given(values=st.lists(skipped_values, min_size=0, max_size=6))  # type: ignore[misc]
def test_return_statements_count(values: list[str]) -> None:
    program, errors = parse(" ".join(f"return {v};" for v in values))
    assert errors == []
    assert len(program.statements) == len(values)
    assert all(
        isinstance(s, ReturnStatement) and s.token_literal() == "return"
        for s in program.statements
    )


@pytest.mark.parametrize("source", ["var x = 5", "return 5", "return", "var x ="])
def test_missing_semicolon_stops_at_eof(source: str) -> None:
    program = parse_clean(source)
    assert len(program.statements) == 1


def test_empty_input() -> None:
    program, errors = parse("")
    assert program.statements == []
    assert program.token_literal() == ""
    assert errors == []


def test_var_and_return_strings() -> None:
    program = parse_clean("var a = 1 + 2; return a;")
    assert str(program) == "var a = ;return ;"


# Expressions


def test_identifier_expression() -> None:
    check_literal(single_expression("foobar;"), "foobar")


def test_integer_expression() -> None:
    check_literal(single_expression("190;"), 190)


@pytest.mark.parametrize(
    "source,operator,operand",
    [
        ("!test;", "!", "test"),
        ("-30;", "-", 30),
        ("!true;", "!", True),
        ("!false;", "!", False),
    ],
)
def test_prefix_expressions(source: str, operator: str, operand: Any) -> None:
    exp = single_expression(source)
    assert isinstance(exp, PrefixExpression)
    assert exp.operator == operator
    assert exp.token_literal() == operator
    check_literal(exp.right, operand)


@pytest.mark.parametrize(
    "source,left,operator,right",
    [
        ("5 - 5;", 5, "-", 5),
        ("23 * 2;", 23, "*", 2),
        ("13 + 13;", 13, "+", 13),
        ("10 / 2;", 10, "/", 2),
        ("5 > 4;", 5, ">", 4),
        ("5 < 4;", 5, "<", 4),
        ("true == true;", True, "==", True),
        ("true != false;", True, "!=", False),
        ("false == false;", False, "==", False),
        ("alice * bob", "alice", "*", "bob"),
    ],
)
def test_infix_expressions(source: str, left: Any, operator: str, right: Any) -> None:
    exp = single_expression(source)
    assert isinstance(exp, InfixExpression)
    check_literal(exp.left, left)
    assert exp.operator == operator
    check_literal(exp.right, right)


@pytest.mark.parametrize("source,value", [("true;", True), ("false;", False)])
def test_boolean_expression(source: str, value: bool) -> None:
    check_literal(single_expression(source), value)


@pytest.mark.parametrize(
    "source,expected",
    [
        ("2 + 2 * 4 - 5", "((2 + (2 * 4)) - 5)"),
        ("-a * b", "((-a) * b)"),
        ("-a + b", "((-a) + b)"),
        ("!-a", "(!(-a))"),
        ("a + b + c", "((a + b) + c)"),
        ("a + b - c", "((a + b) - c)"),
        ("a * b * c", "((a * b) * c)"),
        ("a * b / c", "((a * b) / c)"),
        ("a + b / c", "(a + (b / c))"),
        ("a + b * c + d / e - f", "(((a + (b * c)) + (d / e)) - f)"),
        ("5 > 4 == 3 < 4", "((5 > 4) == (3 < 4))"),
        ("5 < 4 != 3 > 4", "((5 < 4) != (3 > 4))"),
        ("3 + 4 * 5 == 3 * 1 + 4 * 5", "((3 + (4 * 5)) == ((3 * 1) + (4 * 5)))"),
        ("true != !false", "(true != (!false))"),
    ],
)
def test_operator_precedence(source: str, expected: str) -> None:
    assert grouped(single_expression(source)) == expected


def test_precedence_reconstruction_string() -> None:
    program = parse_clean("2 + 2 * 4 - 5")
    assert str(program) == "2 + 2 * 4 - 5"


def test_multiple_expression_statements_without_semicolons() -> None:
    program = parse_clean("a b\n1 + 2")
    assert [str(s) for s in program.statements] == ["a", "b", "1 + 2"]


@composite  # type: ignore[misc]
def arithmetic(draw: Any) -> str:
    operands = draw(
        st.lists(st.integers(min_value=0, max_value=999), min_size=2, max_size=6)
    )
    ops = draw(
        st.lists(
            st.sampled_from(["+", "-", "*", "/", "<", ">", "==", "!="]),
            min_size=len(operands) - 1,
            max_size=len(operands) - 1,
        )
    )
    parts = [str(operands[0])]
    for op, operand in zip(ops, operands[1:]):
        parts += [op, str(operand)]
    return " ".join(parts)


@given(source=arithmetic())  # type: ignore[misc]
def test_binary_chains_reconstruct_source(source: str) -> None:
    program = parse_clean(source + ";")
    assert str(program) == source


@given(source=arithmetic())  # type: ignore[misc]
def test_children_bind_at_least_as_tightly(source: str) -> None:
    def check(node: Node | None) -> None:
        if not isinstance(node, InfixExpression):
            return
        prec = precedences[node.token.kind]
        if isinstance(node.left, InfixExpression):
            assert precedences[node.left.token.kind] >= prec
        if isinstance(node.right, InfixExpression):
            assert precedences[node.right.token.kind] > prec
        check(node.left)
        check(node.right)

    check(single_expression(source))


# Integer literals


@pytest.mark.parametrize(
    "literal,value",
    [
        ("0", 0),
        ("190", 190),
        ("017", 15),
        ("00", 0),
        ("0x1F", 31),
        ("0o17", 15),
        ("0b101", 5),
        ("-5", -5),
        ("9223372036854775807", 2**63 - 1),
        ("-9223372036854775808", -(2**63)),
    ],
)
def test_parse_int64(literal: str, value: int) -> None:
    assert parse_int64(literal) == value


@pytest.mark.parametrize(
    "literal", ["", "08", "0x", "12a", "1_000", "9223372036854775808", "٣"]
)
def test_parse_int64_rejects(literal: str) -> None:
    with pytest.raises(ValueError):
        parse_int64(literal)


def test_integer_literal_octal_prefix() -> None:
    exp = single_expression("017;")
    assert isinstance(exp, IntegerLiteral)
    assert exp.value == 15
    assert str(exp) == "017"


@pytest.mark.parametrize("literal", ["99999999999999999999", "09"])
def test_integer_out_of_range_is_zero_with_error(literal: str) -> None:
    program, errors = parse(f"{literal};")
    assert errors == [f"Error, {literal} is not a number!!"]
    stmt = program.statements[0]
    assert isinstance(stmt, ExpressionStatement)
    assert isinstance(stmt.expression, IntegerLiteral)
    assert stmt.expression.value == 0


# Errors


def test_var_without_identifier() -> None:
    program, errors = parse("var 5 = x;")
    assert errors[0] == "expected next token to be IDENT, got INT instead"
    assert "no prefix parse function for = found" in errors
    assert not any(isinstance(s, VarStatement) for s in program.statements)


def test_var_without_assign() -> None:
    program, errors = parse("var x 5;")
    assert errors == ["expected next token to be =, got INT instead"]
    assert [str(s) for s in program.statements] == ["5"]


def test_parsing_continues_after_bad_statement() -> None:
    program, errors = parse("var = 1; var ok = 2;")
    assert errors[0] == "expected next token to be IDENT, got = instead"
    names = [s.name.value for s in program.statements if isinstance(s, VarStatement)]
    assert names == ["ok"]


@pytest.mark.parametrize(
    "source,message",
    [
        ("@", "no prefix parse function for ILLEGAL found"),
        (";", "no prefix parse function for ; found"),
        ("5 +", "no prefix parse function for EOF found"),
        ("if (x) { y }", "no prefix parse function for IF found"),
        ("func", "no prefix parse function for FUNCTION found"),
        ("(1)", "no prefix parse function for ( found"),
    ],
)
def test_no_prefix_parse_function(source: str, message: str) -> None:
    _, errors = parse(source)
    assert errors[0] == message


def test_missing_operand_keeps_partial_node() -> None:
    program, errors = parse("5 + ;")
    assert errors == ["no prefix parse function for ; found"]
    stmt = program.statements[0]
    assert isinstance(stmt, ExpressionStatement)
    assert isinstance(stmt.expression, InfixExpression)
    assert stmt.expression.right is None


def test_non_operator_peek_ends_expression() -> None:
    program, errors = parse("5 (")
    assert errors == ["no prefix parse function for ( found"]
    assert str(program.statements[0]) == "5"


def test_errors_returns_copy() -> None:
    parser = Parser(Lexer("@"))
    parser.parse_program()
    parser.errors().clear()
    assert parser.errors() == ["no prefix parse function for ILLEGAL found"]


# Parser machinery


def test_registered_handlers() -> None:
    parser = Parser(Lexer(""))
    assert set(parser.prefix_parse_fns) == {
        TokenKind.IDENT,
        TokenKind.INT,
        TokenKind.BANG,
        TokenKind.MINUS,
        TokenKind.TRUE,
        TokenKind.FALSE,
    }
    assert set(parser.infix_parse_fns) == set(precedences)


def test_precedence_order() -> None:
    assert (
        Precedence.LOWEST
        < Precedence.EQUALS
        < Precedence.LESSGREATER
        < Precedence.SUM
        < Precedence.PRODUCT
        < Precedence.PREFIX
        < Precedence.CALL
    )
    assert Precedence.CALL not in precedences.values()


def test_peek_and_cur_precedence() -> None:
    parser = Parser(Lexer("1 * 2"))
    assert parser.cur_precedence() is Precedence.LOWEST
    assert parser.peek_precedence() is Precedence.PRODUCT
    parser.next_token()
    assert parser.cur_precedence() is Precedence.PRODUCT


def test_next_token_repeats_eof() -> None:
    parser = Parser(Lexer("x"))
    parser.next_token()
    parser.next_token()
    parser.next_token()
    assert parser.cur_token_is(TokenKind.EOF)
    assert parser.peek_token_is(TokenKind.EOF)


def test_expect_peek_records_error() -> None:
    parser = Parser(Lexer("var 1"))
    assert not parser.expect_peek(TokenKind.IDENT)
    assert parser.cur_token_is(TokenKind.VAR)
    assert parser.errors() == ["expected next token to be IDENT, got INT instead"]


def test_same_lexer_parses_identically_twice() -> None:
    lexer = Lexer("var 5 = x; -a * b")
    first = Parser(lexer)
    second = Parser(lexer)
    assert first.parse_program() == second.parse_program()
    assert first.errors() == second.errors()


@given(source=st.text(max_size=120))  # type: ignore[misc]
def test_parse_is_total_and_idempotent(source: str) -> None:
    program1, errors1 = parse(source)
    program2, errors2 = parse(source)
    assert program1 == program2
    assert errors1 == errors2


@given(
    source=st.text(alphabet="ab12 +-*/<>!=;", max_size=60)
)  # type: ignore[misc]
def test_operator_soup_never_raises(source: str) -> None:
    program, errors = parse(source)
    assert isinstance(program, Program)
    assert all(isinstance(e, str) for e in errors)


@pytest.mark.parametrize("operator,operand", [("-", "1"), ("!", "x")])
def test_long_prefix_run(operator: str, operand: str) -> None:
    source = operator * 1000 + operand
    node = single_expression(source + ";")
    assert str(node) == source

    depth = 0
    while isinstance(node, PrefixExpression):
        assert node.operator == operator
        node = node.right
        depth += 1
    assert depth == 1000
    check_literal(node, int(operand) if operand.isdigit() else operand)


def test_prefix_run_binds_tighter_than_infix() -> None:
    assert grouped(single_expression("--a * !!b")) == "((-(-a)) * (!(!b)))"


def test_long_infix_chain() -> None:
    source = " + ".join(["1"] * 2000)
    node = single_expression(source)
    assert str(node) == source

    depth = 0
    while isinstance(node, InfixExpression):
        check_literal(node.right, 1)
        node = node.left
        depth += 1
    assert depth == 1999


def test_stack_exhaustion_is_reported(monkeypatch: pytest.MonkeyPatch) -> None:
    parser = Parser(Lexer("1; 2; 3"))

    def overflow() -> None:
        raise RecursionError

    monkeypatch.setattr(parser, "parse_statement", overflow)
    program = parser.parse_program()
    assert program.statements == []
    assert parser.errors() == ["expression nested too deeply"]
