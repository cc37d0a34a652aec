"""
Jerboa runtime - tree-walking interpreter.

This module provides:
- Interpreter: Evaluates parsed programs
- Value: Tagged runtime values and closures
- Environment: Chained lexical scope frames
- Builtin: The static built-in function table
"""

from .values import (
    Value,
    ValueKind,
    Closure,
    UNIT,
    TRUE,
    FALSE,
    int_val,
    bool_val,
    string_val,
    unit_val,
    function_val,
    builtin_val,
    return_val,
)

from .environment import Environment

from .builtins import (
    Builtin,
    BuiltinFunction,
    BUILTINS,
    is_builtin,
    lookup_builtin,
    call_builtin,
)

from .interpreter import (
    Interpreter,
    ExecutionResult,
    evaluate,
    run_source,
)

__all__ = [
    # Values
    "Value",
    "ValueKind",
    "Closure",
    "UNIT",
    "TRUE",
    "FALSE",
    "int_val",
    "bool_val",
    "string_val",
    "unit_val",
    "function_val",
    "builtin_val",
    "return_val",
    # Environment
    "Environment",
    # Built-ins
    "Builtin",
    "BuiltinFunction",
    "BUILTINS",
    "is_builtin",
    "lookup_builtin",
    "call_builtin",
    # Interpreter
    "Interpreter",
    "ExecutionResult",
    "evaluate",
    "run_source",
]
