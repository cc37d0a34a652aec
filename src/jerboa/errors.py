"""
Jerboa exceptions and error reporting.

Every error is an exception carrying a Diagnostic (code, message, location)
and a closed ErrorKind tag. The first error raised aborts the whole run.

Error code ranges:
- E0xx: Lexer errors
- E1xx: Parser errors
- E2xx: Type errors
- E3xx: Lookup errors
- E4xx: Arithmetic errors
- E5xx: Arity errors
- E6xx: Resource errors
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, TYPE_CHECKING
from .tokens import SourceSpan

if TYPE_CHECKING:
    from .tokens import Token


class ErrorSeverity(Enum):
    """Severity levels for diagnostics."""
    ERROR = "error"


class ErrorKind(Enum):
    """Closed taxonomy of failures surfaced to callers."""
    SYNTAX = "syntax"
    LOOKUP = "lookup"
    TYPE = "type"
    ARITHMETIC = "arithmetic"
    ARITY = "arity"
    RESOURCE = "resource"


@dataclass
class Diagnostic:
    """A single diagnostic message."""
    code: str                       # E001, E101, etc.
    message: str                    # Human-readable message
    severity: ErrorSeverity
    span: Optional[SourceSpan] = None
    source_line: Optional[str] = None   # The actual line of source code
    hints: List[str] = field(default_factory=list)

    def format(self, show_source: bool = True) -> str:
        """Format the diagnostic for display."""
        parts = []

        # Header: location: severity[code]: message
        header = f"{self.severity.value}[{self.code}]: {self.message}"
        if self.span is not None:
            header = f"{self.span.start}: {header}"
        parts.append(header)

        # Source line with caret
        if show_source and self.span is not None and self.source_line is not None:
            parts.append("  |")
            line_num = str(self.span.start.line)
            parts.append(f"{line_num:>3} | {self.source_line}")

            col = self.span.start.column
            end_col = self.span.end.column if self.span.start.line == self.span.end.line else len(self.source_line) + 1
            underline_len = max(1, end_col - col)
            parts.append(f"    | {' ' * (col - 1)}{'^' * underline_len}")

        for hint in self.hints:
            parts.append(f"    = hint: {hint}")

        return "\n".join(parts)

    def to_json(self) -> dict:
        """Convert to JSON-serializable dict for tooling integration."""
        data = {
            "code": self.code,
            "message": self.message,
            "severity": self.severity.value,
            "hints": self.hints,
        }
        if self.span is not None:
            data["range"] = {
                "start": {
                    "line": self.span.start.line,
                    "column": self.span.start.column,
                    "offset": self.span.start.offset,
                },
                "end": {
                    "line": self.span.end.line,
                    "column": self.span.end.column,
                    "offset": self.span.end.offset,
                },
            }
        return data


class JerboaError(Exception):
    """Base exception for all Jerboa errors."""

    kind: ErrorKind = ErrorKind.SYNTAX

    def __init__(self, diagnostic: Diagnostic):
        self.diagnostic = diagnostic
        super().__init__(diagnostic.message)

    @property
    def code(self) -> str:
        return self.diagnostic.code

    @property
    def message(self) -> str:
        return self.diagnostic.message

    def __str__(self) -> str:
        return self.diagnostic.format()


class LexerError(JerboaError):
    """Error during lexical analysis (E0xx)."""
    kind = ErrorKind.SYNTAX


class ParserError(JerboaError):
    """Error during parsing (E1xx)."""
    kind = ErrorKind.SYNTAX

    def __init__(self, diagnostic: Diagnostic, token: Optional["Token"] = None):
        super().__init__(diagnostic)
        self.token = token


class EvalError(JerboaError):
    """Base class for errors raised while evaluating a program."""
    kind = ErrorKind.TYPE


class EvalTypeError(EvalError):
    """Operand kinds do not fit the operation (E2xx)."""
    kind = ErrorKind.TYPE


class EvalLookupError(EvalError):
    """A name could not be resolved (E3xx)."""
    kind = ErrorKind.LOOKUP

    def __init__(self, diagnostic: Diagnostic, name: str):
        super().__init__(diagnostic)
        self.name = name


class EvalArithmeticError(EvalError):
    """Division or remainder by zero, or integer overflow (E4xx)."""
    kind = ErrorKind.ARITHMETIC


class ArityError(EvalError):
    """Wrong number of arguments in a call (E5xx)."""
    kind = ErrorKind.ARITY

    def __init__(self, diagnostic: Diagnostic, expected: int, actual: int):
        super().__init__(diagnostic)
        self.expected = expected
        self.actual = actual


class RecursionLimitError(EvalError):
    """Call nesting exceeded the configured depth (E6xx)."""
    kind = ErrorKind.RESOURCE


def _diag(code: str, message: str, span: Optional[SourceSpan],
          source_line: Optional[str] = None, hints: Optional[List[str]] = None) -> Diagnostic:
    return Diagnostic(
        code=code,
        message=message,
        severity=ErrorSeverity.ERROR,
        span=span,
        source_line=source_line,
        hints=hints or [],
    )


# --- Lexer error codes ---

def error_unexpected_character(char: str, span: SourceSpan, source_line: str = None) -> LexerError:
    """E001: Unexpected character."""
    return LexerError(_diag("E001", f"unexpected character '{char}'", span, source_line))


def error_unterminated_string(span: SourceSpan, source_line: str = None) -> LexerError:
    """E002: Unterminated string literal."""
    return LexerError(_diag(
        "E002", "unterminated string literal", span, source_line,
        hints=["string literals must be closed with a double quote"],
    ))


# --- Parser error codes ---

def error_unexpected_token(expected: str, token: "Token", source_line: str = None) -> ParserError:
    """E101: Unexpected token."""
    diag = _diag("E101", f"expected {expected}, found {token.describe()}", token.span, source_line)
    return ParserError(diag, token)


def error_unexpected_eof(expected: str, token: "Token") -> ParserError:
    """E102: Unexpected end of input."""
    diag = _diag("E102", f"unexpected end of input, expected {expected}", token.span)
    return ParserError(diag, token)


def error_invalid_integer(token: "Token", bits: int, source_line: str = None) -> ParserError:
    """E103: Integer literal does not fit the signed integer width."""
    diag = _diag(
        "E103", f"invalid integer literal '{token.lexeme}'", token.span, source_line,
        hints=[f"integers are {bits}-bit signed values"],
    )
    return ParserError(diag, token)


def error_missing_keyword(keyword: str, statement: str, token: "Token",
                          source_line: str = None) -> ParserError:
    """E104: Statement does not start with its keyword."""
    diag = _diag(
        "E104", f"{statement} statements must start with `{keyword}`",
        token.span, source_line,
    )
    return ParserError(diag, token)


# --- Type error codes ---

def error_type_mismatch(operator: str, left: str, right: str, span: SourceSpan,
                        source_line: str = None) -> EvalTypeError:
    """E201: Operator not defined for the operand kinds."""
    return EvalTypeError(_diag(
        "E201", f"type mismatch: cannot perform '{operator}' between '{left}' and '{right}'",
        span, source_line,
    ))


def error_condition_not_boolean(found: str, span: SourceSpan,
                                source_line: str = None) -> EvalTypeError:
    """E202: If condition is not a boolean."""
    return EvalTypeError(_diag(
        "E202", f"type mismatch: `if` condition must be a boolean, found '{found}'",
        span, source_line,
    ))


def error_unsupported_operator(operator: str, operand: str, span: SourceSpan,
                               source_line: str = None) -> EvalTypeError:
    """E203: Unary operator not defined for the operand kind."""
    return EvalTypeError(_diag(
        "E203", f"unsupported operator: '{operator}' cannot be applied to '{operand}'",
        span, source_line,
    ))


def error_argument_type(function: str, expected: str, found: str, span: SourceSpan,
                        source_line: str = None) -> EvalTypeError:
    """E204: Built-in received an argument of the wrong kind."""
    return EvalTypeError(_diag(
        "E204", f"argument to `{function}` must be {expected}, found '{found}'",
        span, source_line,
    ))


# --- Lookup error codes ---

def error_identifier_not_found(name: str, span: Optional[SourceSpan] = None,
                               source_line: str = None) -> EvalLookupError:
    """E301: Identifier not bound anywhere in the scope chain."""
    return EvalLookupError(_diag("E301", f"identifier not found: {name}", span, source_line), name)


def error_function_not_found(name: str, found: str, span: SourceSpan,
                             source_line: str = None) -> EvalLookupError:
    """E302: Callee resolved to something that is not a function."""
    return EvalLookupError(_diag(
        "E302", f"function not found: '{name}' is bound to '{found}'", span, source_line,
        hints=["check if this identifier is a declared function"],
    ), name)


# --- Arithmetic error codes ---

def error_division_by_zero(span: SourceSpan, source_line: str = None) -> EvalArithmeticError:
    """E401: Division by zero."""
    return EvalArithmeticError(_diag("E401", "division by zero isn't allowed", span, source_line))


def error_modulo_by_zero(span: SourceSpan, source_line: str = None) -> EvalArithmeticError:
    """E402: Remainder by zero."""
    return EvalArithmeticError(_diag("E402", "modulo of zero isn't allowed", span, source_line))


def error_integer_overflow(operator: str, left: int, right: Optional[int], bits: int,
                           span: SourceSpan, source_line: str = None) -> EvalArithmeticError:
    """E403: Result does not fit the signed integer width."""
    if right is None:
        text = f"{operator}{left}"
    else:
        text = f"{left} {operator} {right}"
    return EvalArithmeticError(_diag(
        "E403", f"integer overflow: {text} does not fit in {bits} bits", span, source_line,
    ))


# --- Arity error codes ---

def error_wrong_arity(expected: int, actual: int, span: SourceSpan,
                      source_line: str = None) -> ArityError:
    """E501: Wrong number of call arguments."""
    return ArityError(_diag(
        "E501", f"function call with the wrong number of arguments: expected {expected}, got {actual}",
        span, source_line,
    ), expected, actual)


# --- Resource error codes ---

def error_recursion_limit(limit: int, span: Optional[SourceSpan] = None,
                          source_line: str = None) -> RecursionLimitError:
    """E601: Call nesting too deep."""
    return RecursionLimitError(_diag(
        "E601", f"maximum call depth of {limit} exceeded", span, source_line,
        hints=["raise max_call_depth in the interpreter configuration"],
    ))


def error_nesting_too_deep(stage: str, span: Optional[SourceSpan] = None,
                           source_line: str = None) -> RecursionLimitError:
    """E601: Python stack exhausted by deeply nested source."""
    return RecursionLimitError(_diag(
        "E601", f"nesting too deep: the stack was exhausted while {stage}", span, source_line,
        hints=["split deeply nested expressions into `let` bindings"],
    ))
