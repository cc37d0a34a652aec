"""
Unit tests for the Jerboa parser.
"""

import textwrap

import pytest
from jerboa import (
    tokenize, parse, parse_source, Lexer, Parser, ParserError, LexerError, TokenKind,
    Token, format_node, print_ast,
    # AST nodes
    Program, IntegerLiteral, BooleanLiteral, StringLiteral, Identifier,
    BinaryExpression, UnaryExpression, GroupedExpression, CallExpression,
    IfExpression, FunctionLiteral,
    VarStatement, ReturnStatement, ExpressionStatement, BlockStatement,
)


def parse_text(source: str) -> Program:
    """Helper to dedent, tokenize and parse source."""
    source = textwrap.dedent(source)
    return parse(tokenize(source), source=source)


def parse_expr(source: str):
    """Parse a single expression statement and return its expression."""
    program = parse_text(source)
    assert len(program.statements) == 1
    stmt = program.statements[0]
    assert isinstance(stmt, ExpressionStatement)
    return stmt.expression


def lit(n):
    return IntegerLiteral(span=None, value=n)


def ident(name):
    return Identifier(span=None, name=name)


def binary(left, op, right):
    return BinaryExpression(span=None, left=left, operator=op, right=right)


def expr_stmt(expression):
    return ExpressionStatement(span=None, expression=expression)


def block(*statements):
    return BlockStatement(span=None, statements=list(statements))


class TestStatements:
    """Test statement-level parsing."""

    def test_empty_program(self):
        assert parse_text("").statements == []

    def test_var_statement(self):
        program = parse_text("let x = 5;")
        assert program.statements == [VarStatement(span=None, name="x", value=lit(5))]

    def test_return_statement(self):
        program = parse_text("return x + 1;")
        assert program.statements == [
            ReturnStatement(span=None, value=binary(ident("x"), TokenKind.PLUS, lit(1))),
        ]

    def test_expression_statement(self):
        program = parse_text("x;")
        assert program.statements == [expr_stmt(ident("x"))]

    def test_block_statement(self):
        program = parse_text("{ let a = 1; a }")
        assert program.statements == [
            block(VarStatement(span=None, name="a", value=lit(1)), expr_stmt(ident("a"))),
        ]

    def test_empty_block(self):
        assert parse_text("{ }").statements == [block()]

    def test_multiple_statements(self):
        program = parse_text("""
            let a = 1;
            let b = 2;
            a + b;
        """)
        assert len(program.statements) == 3
        assert isinstance(program.statements[2], ExpressionStatement)


class TestOptionalSemicolons:
    """Test where a trailing ';' may be left off."""

    def test_last_statement_in_program(self):
        assert parse_text("1 + 2").statements == [expr_stmt(binary(lit(1), TokenKind.PLUS, lit(2)))]

    def test_last_statement_in_block(self):
        fn = parse_expr("fn(x) { x }")
        assert fn.body == block(expr_stmt(ident("x")))

    def test_after_if_expression(self):
        program = parse_text("if true { 1 } 2;")
        assert len(program.statements) == 2

    def test_required_between_expressions(self):
        with pytest.raises(ParserError) as exc_info:
            parse_text("x y")
        assert exc_info.value.code == "E101"
        assert "';'" in exc_info.value.message

    def test_required_after_let(self):
        with pytest.raises(ParserError) as exc_info:
            parse_text("let x = 5")
        assert exc_info.value.code == "E102"


class TestPrecedence:
    """Test binding powers and associativity."""

    def test_multiplication_binds_tighter(self):
        assert parse_expr("1 + 2 * 3") == binary(
            lit(1), TokenKind.PLUS, binary(lit(2), TokenKind.STAR, lit(3)),
        )

    def test_left_associative_subtraction(self):
        assert parse_expr("1 - 2 - 3") == binary(
            binary(lit(1), TokenKind.MINUS, lit(2)), TokenKind.MINUS, lit(3),
        )

    def test_left_associative_division(self):
        assert parse_expr("8 / 4 % 3") == binary(
            binary(lit(8), TokenKind.SLASH, lit(4)), TokenKind.PERCENT, lit(3),
        )

    def test_comparison_below_additive(self):
        assert parse_expr("a + 1 < b") == binary(
            binary(ident("a"), TokenKind.PLUS, lit(1)), TokenKind.LT, ident("b"),
        )

    def test_equality_is_loosest(self):
        assert parse_expr("1 < 2 == true") == binary(
            binary(lit(1), TokenKind.LT, lit(2)),
            TokenKind.EQ,
            BooleanLiteral(span=None, value=True),
        )

    def test_prefix_binds_tightest(self):
        assert parse_expr("-a * b") == binary(
            UnaryExpression(span=None, operator=TokenKind.MINUS, operand=ident("a")),
            TokenKind.STAR,
            ident("b"),
        )

    def test_nested_prefix(self):
        assert parse_expr("!-a") == UnaryExpression(
            span=None,
            operator=TokenKind.BANG,
            operand=UnaryExpression(span=None, operator=TokenKind.MINUS, operand=ident("a")),
        )

    def test_grouping_overrides_precedence(self):
        assert parse_expr("(1 + 2) * 3") == binary(
            GroupedExpression(span=None, expression=binary(lit(1), TokenKind.PLUS, lit(2))),
            TokenKind.STAR,
            lit(3),
        )


class TestPrimaryExpressions:
    """Test literals, calls, functions and conditionals."""

    def test_boolean_literals(self):
        assert parse_expr("true") == BooleanLiteral(span=None, value=True)
        assert parse_expr("false") == BooleanLiteral(span=None, value=False)

    def test_string_literal(self):
        assert parse_expr('"hi"') == StringLiteral(span=None, value="hi")

    def test_call_without_arguments(self):
        assert parse_expr("f()") == CallExpression(span=None, callee="f", arguments=[])

    def test_nested_calls(self):
        assert parse_expr("add(5 + 5, add(5, 5))") == CallExpression(
            span=None,
            callee="add",
            arguments=[
                binary(lit(5), TokenKind.PLUS, lit(5)),
                CallExpression(span=None, callee="add", arguments=[lit(5), lit(5)]),
            ],
        )

    def test_function_literal(self):
        fn = parse_expr("fn(x, y) { x + y; }")
        assert isinstance(fn, FunctionLiteral)
        assert fn.parameters == ["x", "y"]
        assert fn.body == block(expr_stmt(binary(ident("x"), TokenKind.PLUS, ident("y"))))

    def test_function_without_parameters(self):
        assert parse_expr("fn() { 1 }").parameters == []

    def test_if_without_else(self):
        expr = parse_expr("if x { 1 }")
        assert expr == IfExpression(
            span=None, condition=ident("x"), consequence=block(expr_stmt(lit(1))),
        )
        assert expr.alternative is None

    def test_if_else(self):
        expr = parse_expr("if (x < y) { x } else { y }")
        assert isinstance(expr, IfExpression)
        assert expr.alternative == block(expr_stmt(ident("y")))

    def test_else_if_chain(self):
        expr = parse_expr("if a { 1 } else if b { 2 } else { 3 }")
        nested = expr.alternative
        assert isinstance(nested, ExpressionStatement)
        assert isinstance(nested.expression, IfExpression)
        assert nested.expression.alternative == block(expr_stmt(lit(3)))

    def test_integer_limits(self):
        assert parse_expr("2147483647") == lit(2147483647)
        with pytest.raises(ParserError) as exc_info:
            parse_text("2147483648")
        assert exc_info.value.code == "E103"

    def test_narrow_integer_width(self):
        assert parse_source("127", integer_bits=8).statements == [expr_stmt(lit(127))]
        with pytest.raises(ParserError) as exc_info:
            parse_source("128", integer_bits=8)
        assert exc_info.value.code == "E103"


class TestDeterminism:
    """The same text always yields an equal tree."""

    def test_reparse_is_equal(self):
        source = "let f = fn(a, b) { if a > b { return a; } b }; f(1, 2);"
        assert parse_source(source) == parse_source(source)

    def test_spans_do_not_affect_equality(self):
        assert parse_source("1+2") == parse_source("  1   +   2  ")


class TestTokenStream:
    """Test the parser's pull-based token handling."""

    def test_parses_from_lazy_lexer(self):
        program = Parser(Lexer("let x = 1; x")).parse_program()
        assert len(program.statements) == 2

    def test_missing_eof_is_synthesized(self):
        tokens = [t for t in tokenize("x;") if t.kind != TokenKind.EOF]
        program = parse(tokens)
        assert program.statements == [expr_stmt(ident("x"))]

    def test_stops_at_first_lexer_error(self):
        with pytest.raises(LexerError):
            parse_source("let x = 1; @")


class TestParserErrors:
    """Test error reporting."""

    def test_unexpected_token_carries_token(self):
        with pytest.raises(ParserError) as exc_info:
            parse_text("let = 5;")
        err = exc_info.value
        assert err.code == "E101"
        assert err.token.kind == TokenKind.ASSIGN
        assert err.token.lexeme == "="
        assert "ASSIGN '='" in err.message

    def test_missing_operand(self):
        with pytest.raises(ParserError) as exc_info:
            parse_text("1 + ;")
        assert exc_info.value.code == "E101"
        assert "expected expression" in exc_info.value.message

    def test_unclosed_block(self):
        with pytest.raises(ParserError) as exc_info:
            parse_text("fn(x) { x")
        assert exc_info.value.code == "E102"

    def test_unclosed_call(self):
        with pytest.raises(ParserError):
            parse_text("add(1, 2")

    def test_bad_parameter(self):
        with pytest.raises(ParserError) as exc_info:
            parse_text("fn(1) { 1 }")
        assert "parameter name" in exc_info.value.message

    def test_var_statement_requires_let(self):
        parser = Parser(tokenize("x = 5;"))
        with pytest.raises(ParserError) as exc_info:
            parser.parse_var_statement()
        assert exc_info.value.code == "E104"
        assert "`let`" in exc_info.value.message

    def test_return_statement_requires_return(self):
        parser = Parser(tokenize("5;"))
        with pytest.raises(ParserError) as exc_info:
            parser.parse_return_statement()
        assert exc_info.value.code == "E104"

    def test_error_reports_location(self):
        with pytest.raises(ParserError) as exc_info:
            parse_source("let a = 1;\nlet = 2;")
        assert exc_info.value.diagnostic.span.start.line == 2
        assert "let = 2;" in str(exc_info.value)


class TestRendering:
    """Test AST rendering helpers."""

    def test_format_function(self):
        fn = parse_expr("fn(x) { x + 1 }")
        assert format_node(fn) == "fn(x) {\n    x + 1;\n}"

    def test_format_if_else(self):
        expr = parse_expr("if a { 1 } else { 2 }")
        assert format_node(expr) == "if a {\n    1;\n} else {\n    2;\n}"

    def test_format_round_trips(self):
        source = "let f = fn(a) { if a == 0 { return 1; } a * f(a - 1) };"
        program = parse_source(source)
        assert parse_source(format_node(program)) == program

    def test_print_ast(self, capsys):
        print_ast(parse_source("let x = 1 + 2;"))
        out = capsys.readouterr().out
        assert "Program" in out
        assert "VarStatement" in out
        assert "BinaryExpression" in out
        assert "+" in out
