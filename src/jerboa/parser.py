"""
Recursive descent parser for Jerboa.

Converts a token stream into an Abstract Syntax Tree (AST). Statements are
parsed by recursive descent; expressions by precedence climbing over
binding-power pairs.
"""

import logging
from typing import Iterable, Iterator, List, Optional

from .tokens import Token, TokenKind, SourceSpan
from .lexer import Lexer
from .ast import (
    # Expressions
    Expression, IntegerLiteral, BooleanLiteral, StringLiteral, Identifier,
    BinaryExpression, UnaryExpression, GroupedExpression, CallExpression,
    IfExpression, FunctionLiteral,
    # Statements
    Statement, VarStatement, ReturnStatement, ExpressionStatement,
    BlockStatement, Program,
)
from .errors import (
    error_unexpected_token,
    error_unexpected_eof,
    error_invalid_integer,
    error_missing_keyword,
    error_nesting_too_deep,
)

logger = logging.getLogger(__name__)

DEFAULT_INTEGER_BITS = 32


class Parser:
    """
    Recursive descent parser with two tokens of lookahead.

    Usage:
        parser = Parser(Lexer(source), source=source)
        program = parser.parse_program()

    Tokens are pulled from the stream on demand; only `current` and `next`
    are buffered. Binding powers (higher = tighter binding):

        Lowest:  == !=          (1, 2)
                 < > <= >=      (3, 4)
                 + -            (5, 6)
                 * / %          (7, 8)
        Highest: prefix ! -     9

    A left power lower than its right power makes the operator
    left-associative.
    """

    # Infix operators: (left binding power, right binding power)
    INFIX_POWER = {
        TokenKind.EQ: (1, 2),
        TokenKind.NE: (1, 2),
        TokenKind.LT: (3, 4),
        TokenKind.GT: (3, 4),
        TokenKind.LE: (3, 4),
        TokenKind.GE: (3, 4),
        TokenKind.PLUS: (5, 6),
        TokenKind.MINUS: (5, 6),
        TokenKind.STAR: (7, 8),
        TokenKind.SLASH: (7, 8),
        TokenKind.PERCENT: (7, 8),
    }

    # Prefix operators: right binding power
    PREFIX_POWER = {
        TokenKind.BANG: 9,
        TokenKind.MINUS: 9,
    }

    def __init__(self, tokens: Iterable[Token], source: Optional[str] = None,
                 integer_bits: int = DEFAULT_INTEGER_BITS):
        self._tokens: Iterator[Token] = iter(tokens)
        self._lines: List[str] = source.splitlines() if source else []
        self.integer_bits = integer_bits
        self._eof: Optional[Token] = None
        self._previous: Optional[Token] = None

        # fill the two-token window
        self.current: Token = self._pull()
        self.next: Token = self._pull()

    # =========================================================================
    # Token Navigation
    # =========================================================================

    def _pull(self) -> Token:
        """Pull one token from the stream. Never reads past EOF."""
        if self._eof is not None:
            return self._eof
        token = next(self._tokens, None)
        if token is None:
            # stream ended without its EOF marker; synthesize one
            span = self._previous.span if self._previous is not None else None
            token = Token(TokenKind.EOF, "", span)
        if token.kind == TokenKind.EOF:
            self._eof = token
        return token

    def _advance(self) -> Token:
        """Consume and return current token."""
        token = self.current
        self._previous = token
        self.current = self.next
        self.next = self._pull()
        return token

    def _check(self, kind: TokenKind) -> bool:
        return self.current.kind == kind

    def _check_any(self, *kinds: TokenKind) -> bool:
        return self.current.kind in kinds

    def _match(self, *kinds: TokenKind) -> Optional[Token]:
        """Consume token if it matches any of the given kinds."""
        if self.current.kind in kinds:
            return self._advance()
        return None

    def _consume(self, kind: TokenKind, expected: str) -> Token:
        """Consume token of expected kind, or raise error."""
        if self._check(kind):
            return self._advance()
        self._error(expected)

    def _source_line(self, token: Token) -> Optional[str]:
        if token.span is None:
            return None
        line_num = token.span.start.line
        if 1 <= line_num <= len(self._lines):
            return self._lines[line_num - 1]
        return None

    def _error(self, expected: str) -> None:
        """Raise a parser error at the current token."""
        token = self.current
        if token.kind == TokenKind.EOF:
            raise error_unexpected_eof(expected, token)
        raise error_unexpected_token(expected, token, self._source_line(token))

    def _span_from(self, start: Token) -> Optional[SourceSpan]:
        """Create a span from start token to the last consumed token."""
        if start.span is None:
            return None
        end = self._previous if self._previous is not None else start
        if end.span is None:
            return start.span
        return SourceSpan(start.span.start, end.span.end)

    # =========================================================================
    # Statement Parsing
    # =========================================================================

    def parse_program(self) -> Program:
        """Parse statements until end of input.

        Raises:
            RecursionLimitError: If nesting exhausts the Python stack (E601)
        """
        start = self.current
        statements = []
        try:
            while not self._check(TokenKind.EOF):
                statements.append(self.parse_statement())
        except RecursionError:
            span = self.current.span
            raise error_nesting_too_deep("parsing", span, self._source_line(self.current)) from None

        logger.debug("parsed %d top-level statement(s)", len(statements))
        return Program(span=self._span_from(start), statements=statements)

    def parse_statement(self) -> Statement:
        """Parse a statement, dispatching on the leading keyword."""
        if self._check(TokenKind.LET):
            return self.parse_var_statement()
        if self._check(TokenKind.RETURN):
            return self.parse_return_statement()
        if self._check(TokenKind.LBRACE):
            return self.parse_block_statement()
        return self.parse_expression_statement()

    def parse_var_statement(self) -> VarStatement:
        """Parse `let name = value;`."""
        start = self.current
        if not self._check(TokenKind.LET):
            raise error_missing_keyword("let", "binding", start, self._source_line(start))
        self._advance()

        name = self._consume(TokenKind.IDENTIFIER, "identifier").value
        self._consume(TokenKind.ASSIGN, "'='")
        value = self.parse_expression()
        self._consume(TokenKind.SEMICOLON, "';'")

        return VarStatement(span=self._span_from(start), name=name, value=value)

    def parse_return_statement(self) -> ReturnStatement:
        """Parse `return value;`."""
        start = self.current
        if not self._check(TokenKind.RETURN):
            raise error_missing_keyword("return", "return", start, self._source_line(start))
        self._advance()

        value = self.parse_expression()
        self._consume(TokenKind.SEMICOLON, "';'")

        return ReturnStatement(span=self._span_from(start), value=value)

    def parse_expression_statement(self) -> ExpressionStatement:
        """Parse `expression;`.

        The semicolon may be left off before '}' or end of input, and after
        expressions that end in a block (if/fn).
        """
        start = self.current
        expression = self.parse_expression()

        if not self._match(TokenKind.SEMICOLON):
            ends_with_block = isinstance(expression, (IfExpression, FunctionLiteral))
            if not ends_with_block and not self._check_any(TokenKind.RBRACE, TokenKind.EOF):
                self._error("';'")

        return ExpressionStatement(span=self._span_from(start), expression=expression)

    def parse_block_statement(self) -> BlockStatement:
        """Parse `{ statement* }`."""
        start = self._consume(TokenKind.LBRACE, "'{'")
        statements = []

        while not self._check_any(TokenKind.RBRACE, TokenKind.EOF):
            statements.append(self.parse_statement())

        self._consume(TokenKind.RBRACE, "'}'")
        return BlockStatement(span=self._span_from(start), statements=statements)

    # =========================================================================
    # Expression Parsing
    # =========================================================================

    def parse_expression(self, min_power: int = 0) -> Expression:
        """Parse an expression by precedence climbing.

        Infix operators whose left binding power is below `min_power` end
        the loop and are left for the caller.
        """
        left = self._parse_prefix_expr()

        while True:
            powers = self.INFIX_POWER.get(self.current.kind)
            if powers is None:
                break
            left_power, right_power = powers
            if left_power < min_power:
                break

            op = self._advance()
            right = self.parse_expression(right_power)
            left = BinaryExpression(
                span=self._join(left, right),
                left=left,
                operator=op.kind,
                right=right,
            )

        return left

    def _join(self, left: Expression, right: Expression) -> Optional[SourceSpan]:
        if left.span is None or right.span is None:
            return None
        return SourceSpan(left.span.start, right.span.end)

    def _parse_prefix_expr(self) -> Expression:
        """Parse prefix operators (! -) or fall through to a primary."""
        power = self.PREFIX_POWER.get(self.current.kind)
        if power is None:
            return self._parse_primary_expr()

        op = self._advance()
        operand = self.parse_expression(power)
        return UnaryExpression(span=self._span_from(op), operator=op.kind, operand=operand)

    def _parse_primary_expr(self) -> Expression:
        """Parse literals, names, calls, grouping, fn and if forms."""
        token = self.current

        if token.kind == TokenKind.INT:
            return self._parse_integer_literal()

        if token.kind == TokenKind.STRING:
            self._advance()
            return StringLiteral(span=token.span, value=token.value)

        if token.kind in (TokenKind.TRUE, TokenKind.FALSE):
            self._advance()
            return BooleanLiteral(span=token.span, value=token.kind == TokenKind.TRUE)

        if token.kind == TokenKind.IDENTIFIER:
            if self.next.kind == TokenKind.LPAREN:
                return self._parse_call_expr()
            self._advance()
            return Identifier(span=token.span, name=token.value)

        if token.kind == TokenKind.LPAREN:
            return self._parse_grouped_expr()

        if token.kind == TokenKind.FN:
            return self._parse_function_literal()

        if token.kind == TokenKind.IF:
            return self._parse_if_expr()

        self._error("expression")

    def _parse_integer_literal(self) -> IntegerLiteral:
        token = self._advance()
        try:
            value = int(token.lexeme)
        except ValueError:
            raise error_invalid_integer(token, self.integer_bits, self._source_line(token)) from None
        if value >= 1 << (self.integer_bits - 1):
            raise error_invalid_integer(token, self.integer_bits, self._source_line(token))
        return IntegerLiteral(span=token.span, value=value)

    def _parse_call_expr(self) -> CallExpression:
        """Parse `name(arg, ...)`."""
        start = self._advance()  # callee name
        self._consume(TokenKind.LPAREN, "'('")

        arguments = []
        if not self._check(TokenKind.RPAREN):
            arguments.append(self.parse_expression())
            while self._match(TokenKind.COMMA):
                arguments.append(self.parse_expression())
        self._consume(TokenKind.RPAREN, "')'")

        return CallExpression(span=self._span_from(start), callee=start.value, arguments=arguments)

    def _parse_grouped_expr(self) -> GroupedExpression:
        start = self._advance()  # consume '('
        expression = self.parse_expression()
        self._consume(TokenKind.RPAREN, "')'")
        return GroupedExpression(span=self._span_from(start), expression=expression)

    def _parse_function_literal(self) -> FunctionLiteral:
        """Parse `fn(a, b) { ... }`."""
        start = self._advance()  # consume 'fn'
        self._consume(TokenKind.LPAREN, "'('")

        parameters = []
        if not self._check(TokenKind.RPAREN):
            parameters.append(self._consume(TokenKind.IDENTIFIER, "parameter name").value)
            while self._match(TokenKind.COMMA):
                parameters.append(self._consume(TokenKind.IDENTIFIER, "parameter name").value)
        self._consume(TokenKind.RPAREN, "')'")

        body = self.parse_block_statement()
        return FunctionLiteral(span=self._span_from(start), parameters=parameters, body=body)

    def _parse_if_expr(self) -> IfExpression:
        """Parse `if cond { ... } [else { ... } | else if ...]`."""
        start = self._advance()  # consume 'if'
        condition = self.parse_expression()
        consequence = self.parse_block_statement()

        alternative = None
        if self._match(TokenKind.ELSE):
            if self._check(TokenKind.IF):
                nested = self._parse_if_expr()
                alternative = ExpressionStatement(span=nested.span, expression=nested)
            else:
                alternative = self.parse_block_statement()

        return IfExpression(
            span=self._span_from(start),
            condition=condition,
            consequence=consequence,
            alternative=alternative,
        )


def parse(tokens: Iterable[Token], source: Optional[str] = None,
          integer_bits: int = DEFAULT_INTEGER_BITS) -> Program:
    """
    Convenience function to parse tokens into a program.

    Args:
        tokens: Token stream ending with EOF (a list or a Lexer)
        source: Optional original source code for error messages
        integer_bits: Width of the signed integer type

    Returns:
        Parsed Program AST

    Raises:
        ParserError: If parsing fails
        RecursionLimitError: If nesting exhausts the Python stack
    """
    return Parser(tokens, source, integer_bits).parse_program()


def parse_source(source: str, filename: Optional[str] = None,
                 integer_bits: int = DEFAULT_INTEGER_BITS) -> Program:
    """Lex and parse source text in one step.

    Raises:
        LexerError: If scanning fails
        ParserError: If parsing fails
        RecursionLimitError: If nesting exhausts the Python stack
    """
    return parse(Lexer(source, filename), source, integer_bits)
