"""
Jerboa: a small expression-oriented scripting language.

This package provides:
- Lexer: Tokenizes source text
- Parser: Builds an AST from tokens
- Interpreter: Evaluates the AST with lexical closures
- Config: YAML-backed interpreter limits

Usage:
    from jerboa import Interpreter, run_source

    interp = Interpreter()
    values = interp.eval_program('''
        let newAdder = fn(x) { fn(y) { x + y } };
        let addTwo = newAdder(2);
        addTwo(2);
    ''')
    print(values[-1])   # 4

    result = run_source("10 / 0")
    if not result.success:
        print(result.error_message)
"""

import logging

from .tokens import (
    Token,
    TokenKind,
    SourceLocation,
    SourceSpan,
    KEYWORDS,
)

from .lexer import (
    Lexer,
    tokenize,
)

from .parser import (
    Parser,
    parse,
    parse_source,
)

from .ast import (
    AstNode,
    AstVisitor,
    Expression,
    Statement,
    IntegerLiteral,
    BooleanLiteral,
    StringLiteral,
    Identifier,
    BinaryExpression,
    UnaryExpression,
    GroupedExpression,
    CallExpression,
    IfExpression,
    FunctionLiteral,
    VarStatement,
    ReturnStatement,
    ExpressionStatement,
    BlockStatement,
    Program,
    format_node,
    print_ast,
)

from .errors import (
    ErrorKind,
    ErrorSeverity,
    Diagnostic,
    JerboaError,
    LexerError,
    ParserError,
    EvalError,
    EvalTypeError,
    EvalLookupError,
    EvalArithmeticError,
    ArityError,
    RecursionLimitError,
)

from .config import (
    InterpreterConfig,
    DEFAULT_CONFIG,
    config_from_mapping,
    load_config,
    save_config,
)

from .runtime import (
    Value,
    ValueKind,
    Closure,
    Environment,
    Builtin,
    Interpreter,
    ExecutionResult,
    evaluate,
    run_source,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # Tokens
    "Token",
    "TokenKind",
    "SourceLocation",
    "SourceSpan",
    "KEYWORDS",
    # Lexer
    "Lexer",
    "tokenize",
    # Parser
    "Parser",
    "parse",
    "parse_source",
    # AST
    "AstNode",
    "AstVisitor",
    "Expression",
    "Statement",
    "IntegerLiteral",
    "BooleanLiteral",
    "StringLiteral",
    "Identifier",
    "BinaryExpression",
    "UnaryExpression",
    "GroupedExpression",
    "CallExpression",
    "IfExpression",
    "FunctionLiteral",
    "VarStatement",
    "ReturnStatement",
    "ExpressionStatement",
    "BlockStatement",
    "Program",
    "format_node",
    "print_ast",
    # Errors
    "ErrorKind",
    "ErrorSeverity",
    "Diagnostic",
    "JerboaError",
    "LexerError",
    "ParserError",
    "EvalError",
    "EvalTypeError",
    "EvalLookupError",
    "EvalArithmeticError",
    "ArityError",
    "RecursionLimitError",
    # Config
    "InterpreterConfig",
    "DEFAULT_CONFIG",
    "config_from_mapping",
    "load_config",
    "save_config",
    # Runtime
    "Value",
    "ValueKind",
    "Closure",
    "Environment",
    "Builtin",
    "Interpreter",
    "ExecutionResult",
    "evaluate",
    "run_source",
]
