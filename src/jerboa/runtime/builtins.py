"""
Built-in function table for the Jerboa interpreter.

The table is closed and static: `len` and `push` are the only built-ins.
Callers see a built-in as a BUILTIN value holding its `Builtin` tag; the
implementation is looked up here when the value is called.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional

from .values import Value, ValueKind, builtin_val, int_val, string_val
from ..tokens import SourceSpan
from ..errors import (
    error_identifier_not_found,
    error_wrong_arity,
    error_argument_type,
)


class Builtin(Enum):
    LEN = "len"
    PUSH = "push"


@dataclass
class BuiltinFunction:
    """A built-in tag with its implementation and argument count."""
    tag: Builtin
    arity: int
    implementation: Callable[..., Value]
    doc: str = ""

    @property
    def name(self) -> str:
        return self.tag.value


def _expect_string(function: str, arg: Value, span: Optional[SourceSpan],
                   source_line: Optional[str]) -> str:
    if arg.kind != ValueKind.STRING:
        raise error_argument_type(function, "a string", str(arg), span, source_line)
    return arg.data


def _len(s: str) -> Value:
    return int_val(len(s))


def _push(s: str, t: str) -> Value:
    return string_val(s + t)


BUILTINS: Dict[str, BuiltinFunction] = {
    "len": BuiltinFunction(Builtin.LEN, 1, _len, "len(s) -> number of characters in s"),
    "push": BuiltinFunction(Builtin.PUSH, 2, _push, "push(s, t) -> s with t appended"),
}

_BY_TAG: Dict[Builtin, BuiltinFunction] = {func.tag: func for func in BUILTINS.values()}


def is_builtin(name: str) -> bool:
    return name in BUILTINS


def lookup_builtin(name: str, span: Optional[SourceSpan] = None,
                   source_line: Optional[str] = None) -> Value:
    """
    Resolve a built-in by name.

    Returns:
        A BUILTIN value carrying the tag

    Raises:
        EvalLookupError: If no built-in has that name (E301)
    """
    func = BUILTINS.get(name)
    if func is None:
        raise error_identifier_not_found(name, span, source_line)
    return builtin_val(func.tag)


def call_builtin(tag: Builtin, args: List[Value], span: Optional[SourceSpan] = None,
                 source_line: Optional[str] = None) -> Value:
    """
    Apply a built-in to already-evaluated arguments.

    Raises:
        ArityError: If the argument count is wrong (E501)
        EvalTypeError: If an argument is not a string (E204)
    """
    func = _BY_TAG[tag]
    if len(args) != func.arity:
        raise error_wrong_arity(func.arity, len(args), span, source_line)
    strings = [_expect_string(func.name, arg, span, source_line) for arg in args]
    return func.implementation(*strings)
