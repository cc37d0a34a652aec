"""
Runtime values for the Jerboa interpreter.

Every runtime value is a `Value` tagged with a `ValueKind`. The set of kinds
is closed; operations dispatch on the kind and reject anything they do not
explicitly support.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, TYPE_CHECKING

from ..ast import Statement, format_node

if TYPE_CHECKING:
    from .builtins import Builtin
    from .environment import Environment


class ValueKind(Enum):
    INTEGER = "integer"
    BOOLEAN = "boolean"
    STRING = "string"
    UNIT = "unit"
    FUNCTION = "function"
    BUILTIN = "builtin"
    RETURN = "return"       # control-flow wrapper around another Value


@dataclass
class Closure:
    """
    A function value: parameter names, body, and the environment that was
    current when the function literal was evaluated.

    Parameters and body compare structurally; the captured environment
    compares by identity.
    """
    parameters: List[str]
    body: Statement
    env: "Environment" = field(repr=False)

    def __str__(self) -> str:
        return f"fn({', '.join(self.parameters)}) {format_node(self.body)}"


@dataclass
class Value:
    """
    A runtime value.

    The `data` field holds the Python payload:
    INTEGER -> int, BOOLEAN -> bool, STRING -> str, UNIT -> None,
    FUNCTION -> Closure, BUILTIN -> Builtin tag, RETURN -> wrapped Value.
    """
    kind: ValueKind
    data: Any

    def __repr__(self) -> str:
        return f"Value({self.kind.name}, {self.data!r})"

    def __str__(self) -> str:
        if self.kind == ValueKind.INTEGER:
            return str(self.data)
        if self.kind == ValueKind.BOOLEAN:
            return "true" if self.data else "false"
        if self.kind == ValueKind.STRING:
            return f'"{self.data}"'
        if self.kind == ValueKind.UNIT:
            return "()"
        if self.kind == ValueKind.FUNCTION:
            return str(self.data)
        if self.kind == ValueKind.BUILTIN:
            return f"built-in function {self.data.value}"
        if self.kind == ValueKind.RETURN:
            return f"return {self.data}"
        raise ValueError(f"unknown value kind: {self.kind}")

    @property
    def is_return(self) -> bool:
        """True for the wrapper produced by a `return` statement."""
        return self.kind == ValueKind.RETURN

    def unwrap(self) -> "Value":
        """Strip a return wrapper; other values are returned unchanged."""
        if self.kind == ValueKind.RETURN:
            return self.data
        return self


# Convenience constructors

def int_val(n: int) -> Value:
    return Value(ValueKind.INTEGER, int(n))


def bool_val(b: bool) -> Value:
    return TRUE if b else FALSE


def string_val(s: str) -> Value:
    return Value(ValueKind.STRING, str(s))


def unit_val() -> Value:
    return UNIT


def function_val(parameters: List[str], body: Statement, env: "Environment") -> Value:
    """Create a closure over `env` (captured by reference, not copied)."""
    return Value(ValueKind.FUNCTION, Closure(list(parameters), body, env))


def builtin_val(tag: "Builtin") -> Value:
    return Value(ValueKind.BUILTIN, tag)


def return_val(inner: Value) -> Value:
    """Wrap a value to signal that a `return` statement produced it."""
    return Value(ValueKind.RETURN, inner)


UNIT = Value(ValueKind.UNIT, None)
TRUE = Value(ValueKind.BOOLEAN, True)
FALSE = Value(ValueKind.BOOLEAN, False)
