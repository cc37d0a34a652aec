"""
Token types for the Jerboa lexer.

Error code ranges used across the package:
- E0xx: Lexer errors
- E1xx: Parser errors
- E2xx: Type errors
- E3xx: Lookup errors
- E4xx: Arithmetic errors
- E5xx: Arity errors
- E6xx: Resource errors
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any, Optional


class TokenKind(Enum):
    """All token kinds recognized by the lexer."""

    # --- Literals ---
    INT = auto()                # 42
    STRING = auto()             # "hello"
    TRUE = auto()               # true
    FALSE = auto()              # false

    # --- Identifiers ---
    IDENTIFIER = auto()         # user-defined names

    # --- Keywords ---
    LET = auto()                # let
    RETURN = auto()             # return
    FN = auto()                 # fn
    IF = auto()                 # if
    ELSE = auto()               # else

    # --- Arithmetic operators ---
    PLUS = auto()               # +
    MINUS = auto()              # -
    STAR = auto()               # *
    SLASH = auto()              # /
    PERCENT = auto()            # %
    BANG = auto()               # !

    # --- Comparison operators ---
    LT = auto()                 # <
    GT = auto()                 # >
    LE = auto()                 # <=
    GE = auto()                 # >=
    EQ = auto()                 # ==
    NE = auto()                 # !=

    # --- Assignment ---
    ASSIGN = auto()             # =

    # --- Delimiters ---
    LPAREN = auto()             # (
    RPAREN = auto()             # )
    LBRACE = auto()             # {
    RBRACE = auto()             # }
    COMMA = auto()              # ,
    SEMICOLON = auto()          # ;

    # --- Special ---
    EOF = auto()                # end of input


# Source text of each operator and delimiter, used in messages and rendering
SYMBOLS: dict[TokenKind, str] = {
    TokenKind.PLUS: "+",
    TokenKind.MINUS: "-",
    TokenKind.STAR: "*",
    TokenKind.SLASH: "/",
    TokenKind.PERCENT: "%",
    TokenKind.BANG: "!",
    TokenKind.LT: "<",
    TokenKind.GT: ">",
    TokenKind.LE: "<=",
    TokenKind.GE: ">=",
    TokenKind.EQ: "==",
    TokenKind.NE: "!=",
    TokenKind.ASSIGN: "=",
    TokenKind.LPAREN: "(",
    TokenKind.RPAREN: ")",
    TokenKind.LBRACE: "{",
    TokenKind.RBRACE: "}",
    TokenKind.COMMA: ",",
    TokenKind.SEMICOLON: ";",
}


@dataclass(frozen=True)
class SourceLocation:
    """Represents a position in source code."""
    line: int           # 1-indexed line number
    column: int         # 1-indexed column number
    offset: int         # 0-indexed character offset from start
    filename: Optional[str] = None

    def __str__(self) -> str:
        if self.filename:
            return f"{self.filename}:{self.line}:{self.column}"
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class SourceSpan:
    """Represents a range in source code."""
    start: SourceLocation
    end: SourceLocation

    def __str__(self) -> str:
        if self.start.filename:
            return f"{self.start.filename}:{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"
        return f"{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"


@dataclass(frozen=True)
class Token:
    """A single token from the lexer."""
    kind: TokenKind
    lexeme: str             # The original source text
    span: SourceSpan        # Location in source
    value: Any = None       # Decoded text for identifiers and strings

    def __str__(self) -> str:
        if self.kind in (TokenKind.INT, TokenKind.STRING, TokenKind.IDENTIFIER):
            return f"{self.kind.name}({self.lexeme})"
        return self.kind.name

    def describe(self) -> str:
        """Describe the token for error messages (kind plus literal text)."""
        if self.kind == TokenKind.EOF:
            return "end of input"
        return f"{self.kind.name} '{self.lexeme}'"


# Keyword mapping - maps string to token kind
KEYWORDS: dict[str, TokenKind] = {
    "let": TokenKind.LET,
    "return": TokenKind.RETURN,
    "fn": TokenKind.FN,
    "if": TokenKind.IF,
    "else": TokenKind.ELSE,
    "true": TokenKind.TRUE,
    "false": TokenKind.FALSE,
}
