"""
Tree-walking interpreter for Jerboa.

Evaluates a parsed Program statement by statement against a chain of
Environment frames, producing one Value per top-level statement.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import List, Optional

from ..ast import (
    Expression, IntegerLiteral, BooleanLiteral, StringLiteral, Identifier,
    BinaryExpression, UnaryExpression, GroupedExpression, CallExpression,
    IfExpression, FunctionLiteral,
    Statement, VarStatement, ReturnStatement, ExpressionStatement,
    BlockStatement, Program,
)
from ..config import InterpreterConfig, DEFAULT_CONFIG
from ..errors import (
    JerboaError,
    error_type_mismatch,
    error_condition_not_boolean,
    error_unsupported_operator,
    error_identifier_not_found,
    error_function_not_found,
    error_division_by_zero,
    error_modulo_by_zero,
    error_integer_overflow,
    error_wrong_arity,
    error_recursion_limit,
    error_nesting_too_deep,
)
from ..parser import parse_source
from ..tokens import SourceSpan, TokenKind, SYMBOLS
from .builtins import call_builtin, is_builtin, lookup_builtin
from .environment import Environment
from .values import (
    Value, ValueKind, UNIT,
    int_val, bool_val, string_val, function_val, return_val,
)

logger = logging.getLogger(__name__)


def _trunc_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    q = abs(a) // abs(b)
    return -q if (a < 0) != (b < 0) else q


class Interpreter:
    """
    Tree-walking interpreter.

    Usage:
        interp = Interpreter()
        values = interp.eval_program("let x = 2; x * 21")

    The global frame persists across `eval_program` calls on the same
    instance, so bindings from one program are visible to the next.

    A `return` statement produces a RETURN-kind Value. Every construct that
    evaluates a sub-expression or sub-statement hands such a value straight
    back to its caller; blocks stop at it; function calls unwrap it.
    """

    def __init__(self, config: Optional[InterpreterConfig] = None):
        self.config = config or DEFAULT_CONFIG
        self.globals = Environment(name="global")
        self.env = self.globals
        self._depth = 0
        self._lines: List[str] = []

    @contextmanager
    def _scope(self, env: Environment):
        """Make `env` current for the duration of the block."""
        previous = self.env
        self.env = env
        try:
            yield env
        finally:
            self.env = previous

    # =========================================================================
    # Entry Points
    # =========================================================================

    def eval_program(self, source: str, filename: Optional[str] = None) -> List[Value]:
        """
        Parse and evaluate a whole program.

        The entire program is parsed before anything runs, so syntax errors
        surface with no side effects.

        Returns:
            One value per top-level statement

        Raises:
            JerboaError: The first lexer, parser or evaluation error
        """
        program = parse_source(source, filename, self.config.integer_bits)
        self._lines = source.splitlines()
        return self.eval_ast(program)

    def eval_ast(self, program: Program) -> List[Value]:
        """Evaluate an already-parsed program in the global frame."""
        results = []
        try:
            for stmt in program.statements:
                results.append(self._execute_statement(stmt))
        except RecursionError:
            self.env = self.globals
            self._depth = 0
            raise error_nesting_too_deep("evaluating") from None
        return results

    # =========================================================================
    # Statements
    # =========================================================================

    def _execute_statement(self, stmt: Statement) -> Value:
        if isinstance(stmt, VarStatement):
            return self._exec_var(stmt)
        elif isinstance(stmt, ReturnStatement):
            return self._exec_return(stmt)
        elif isinstance(stmt, ExpressionStatement):
            return self._evaluate(stmt.expression)
        elif isinstance(stmt, BlockStatement):
            with self._scope(Environment.enclose(self.env)):
                return self._execute_statements(stmt.statements)
        else:
            raise RuntimeError(f"Unknown statement type: {type(stmt).__name__}")

    def _execute_statements(self, statements: List[Statement]) -> Value:
        """Run statements in the current frame, stopping at a return."""
        result = UNIT
        for stmt in statements:
            result = self._execute_statement(stmt)
            if result.is_return:
                break
        return result

    def _exec_var(self, stmt: VarStatement) -> Value:
        value = self._evaluate(stmt.value)
        if value.is_return:
            return value
        self.env.set(stmt.name, value)
        return UNIT

    def _exec_return(self, stmt: ReturnStatement) -> Value:
        value = self._evaluate(stmt.value)
        if value.is_return:
            return value
        return return_val(value)

    # =========================================================================
    # Expressions
    # =========================================================================

    def _evaluate(self, expr: Expression) -> Value:
        """Evaluate an expression to produce a Value."""
        if isinstance(expr, IntegerLiteral):
            return int_val(expr.value)
        elif isinstance(expr, BooleanLiteral):
            return bool_val(expr.value)
        elif isinstance(expr, StringLiteral):
            return string_val(expr.value)
        elif isinstance(expr, Identifier):
            return self._resolve(expr.name, expr.span)
        elif isinstance(expr, BinaryExpression):
            return self._eval_binary(expr)
        elif isinstance(expr, UnaryExpression):
            return self._eval_unary(expr)
        elif isinstance(expr, GroupedExpression):
            return self._evaluate(expr.expression)
        elif isinstance(expr, IfExpression):
            return self._eval_if(expr)
        elif isinstance(expr, FunctionLiteral):
            return function_val(expr.parameters, expr.body, self.env)
        elif isinstance(expr, CallExpression):
            return self._eval_call(expr)
        else:
            raise RuntimeError(f"Unknown expression type: {type(expr).__name__}")

    def _resolve(self, name: str, span: Optional[SourceSpan]) -> Value:
        """Look a name up in the scope chain, then among the built-ins."""
        if self.env.contains(name):
            return self.env.get(name)
        if self.config.enable_builtins and is_builtin(name):
            return lookup_builtin(name, span)
        raise error_identifier_not_found(name, span, self._line(span))

    def _eval_binary(self, expr: BinaryExpression) -> Value:
        left = self._evaluate(expr.left)
        if left.is_return:
            return left
        right = self._evaluate(expr.right)
        if right.is_return:
            return right

        op = expr.operator
        if left.kind == ValueKind.INTEGER and right.kind == ValueKind.INTEGER:
            return self._eval_int_binary(op, left.data, right.data, expr.span)
        if left.kind == ValueKind.BOOLEAN and right.kind == ValueKind.BOOLEAN:
            if op == TokenKind.EQ:
                return bool_val(left.data == right.data)
            if op == TokenKind.NE:
                return bool_val(left.data != right.data)
        raise error_type_mismatch(SYMBOLS[op], str(left), str(right), expr.span, self._line(expr.span))

    def _eval_int_binary(self, op: TokenKind, a: int, b: int,
                         span: Optional[SourceSpan]) -> Value:
        if op == TokenKind.EQ:
            return bool_val(a == b)
        elif op == TokenKind.NE:
            return bool_val(a != b)
        elif op == TokenKind.LT:
            return bool_val(a < b)
        elif op == TokenKind.GT:
            return bool_val(a > b)
        elif op == TokenKind.LE:
            return bool_val(a <= b)
        elif op == TokenKind.GE:
            return bool_val(a >= b)

        if op == TokenKind.PLUS:
            result = a + b
        elif op == TokenKind.MINUS:
            result = a - b
        elif op == TokenKind.STAR:
            result = a * b
        elif op == TokenKind.SLASH:
            if b == 0:
                raise error_division_by_zero(span, self._line(span))
            result = _trunc_div(a, b)
        elif op == TokenKind.PERCENT:
            if b == 0:
                raise error_modulo_by_zero(span, self._line(span))
            result = a - b * _trunc_div(a, b)
        else:
            raise RuntimeError(f"Unknown binary operator: {op}")

        return self._check_int(result, SYMBOLS[op], a, b, span)

    def _check_int(self, result: int, operator: str, left: int, right: Optional[int],
                   span: Optional[SourceSpan]) -> Value:
        """Wrap an integer result, rejecting values outside the signed width."""
        if not self.config.int_min <= result <= self.config.int_max:
            raise error_integer_overflow(
                operator, left, right, self.config.integer_bits, span, self._line(span),
            )
        return int_val(result)

    def _eval_unary(self, expr: UnaryExpression) -> Value:
        operand = self._evaluate(expr.operand)
        if operand.is_return:
            return operand

        op = expr.operator
        if op == TokenKind.BANG:
            if operand.kind == ValueKind.BOOLEAN:
                return bool_val(not operand.data)
            if operand.kind == ValueKind.INTEGER:
                return int_val(~operand.data)
        elif op == TokenKind.MINUS:
            if operand.kind == ValueKind.INTEGER:
                return self._check_int(-operand.data, "-", operand.data, None, expr.span)
        raise error_unsupported_operator(SYMBOLS[op], str(operand), expr.span, self._line(expr.span))

    def _eval_if(self, expr: IfExpression) -> Value:
        condition = self._evaluate(expr.condition)
        if condition.is_return:
            return condition
        if condition.kind != ValueKind.BOOLEAN:
            span = expr.condition.span
            raise error_condition_not_boolean(str(condition), span, self._line(span))

        if condition.data:
            return self._execute_statement(expr.consequence)
        if expr.alternative is not None:
            return self._execute_statement(expr.alternative)
        return UNIT

    def _eval_call(self, expr: CallExpression) -> Value:
        callee = self._resolve(expr.callee, expr.span)
        if callee.kind not in (ValueKind.FUNCTION, ValueKind.BUILTIN):
            raise error_function_not_found(expr.callee, str(callee), expr.span, self._line(expr.span))

        if callee.kind == ValueKind.FUNCTION:
            closure = callee.data
            if len(expr.arguments) != len(closure.parameters):
                raise error_wrong_arity(
                    len(closure.parameters), len(expr.arguments), expr.span, self._line(expr.span),
                )

        # Arguments are evaluated left to right in the caller's frame
        args = []
        for arg_expr in expr.arguments:
            arg = self._evaluate(arg_expr)
            if arg.is_return:
                return arg
            args.append(arg)

        if callee.kind == ValueKind.BUILTIN:
            return call_builtin(callee.data, args, expr.span, self._line(expr.span))

        if self._depth >= self.config.max_call_depth:
            raise error_recursion_limit(self.config.max_call_depth, expr.span, self._line(expr.span))

        frame = Environment.enclose(closure.env, name=expr.callee)
        for name, value in zip(closure.parameters, args):
            frame.set(name, value)

        self._depth += 1
        logger.debug("call %s at depth %d", expr.callee, self._depth)
        try:
            with self._scope(frame):
                result = self._execute_statements(closure.body.statements)
        finally:
            self._depth -= 1

        return result.unwrap()

    def _line(self, span: Optional[SourceSpan]) -> Optional[str]:
        if span is None:
            return None
        line_num = span.start.line
        if 1 <= line_num <= len(self._lines):
            return self._lines[line_num - 1]
        return None


# =============================================================================
# Convenience Functions
# =============================================================================

@dataclass
class ExecutionResult:
    """Result of running a program."""
    success: bool
    values: List[Value] = field(default_factory=list)
    error: Optional[JerboaError] = None

    @property
    def value(self) -> Optional[Value]:
        """The last statement's value, if any."""
        if self.values:
            return self.values[-1]
        return None

    @property
    def error_message(self) -> Optional[str]:
        if self.error is None:
            return None
        return str(self.error)


def evaluate(source: str, config: Optional[InterpreterConfig] = None) -> List[Value]:
    """
    Evaluate source text with a fresh interpreter.

    Raises:
        JerboaError: The first error encountered
    """
    return Interpreter(config).eval_program(source)


def run_source(
    source: str,
    config: Optional[InterpreterConfig] = None,
    filename: Optional[str] = None,
) -> ExecutionResult:
    """
    Run source text and report the outcome as an ExecutionResult.

    This is the simplest way to run a program without handling exceptions:

        from jerboa import run_source

        result = run_source("let double = fn(x) { x * 2 }; double(21)")
        if result.success:
            print(result.value)
        else:
            print(result.error_message)
    """
    interpreter = Interpreter(config)
    try:
        values = interpreter.eval_program(source, filename)
    except JerboaError as e:
        logger.debug("run failed with %s", e.code)
        return ExecutionResult(success=False, error=e)
    return ExecutionResult(success=True, values=values)
