"""
Lexer for the Jerboa language.

Converts source text into a stream of tokens for the parser.
Supports:
- Line comments (// to end of line)
- Decimal integer literals
- Double-quoted string literals with escape sequences
- Keywords, identifiers, one- and two-character operators

Tokens are produced lazily; the stream always ends with a single EOF token.
"""

from typing import List, Optional, Iterator
from .tokens import Token, TokenKind, SourceLocation, SourceSpan, KEYWORDS
from .errors import (
    error_unexpected_character,
    error_unterminated_string,
)

# ASCII decimal digits only
DIGITS = "0123456789"


class Lexer:
    """
    Tokenizer for Jerboa source.

    Usage:
        lexer = Lexer(source_code)
        tokens = lexer.tokenize()

    Or for streaming:
        lexer = Lexer(source_code)
        for token in lexer:
            process(token)
    """

    def __init__(self, source: str, filename: Optional[str] = None):
        self.source = source
        self.filename = filename
        self.pos = 0            # Current position in source
        self.line = 1           # Current line (1-indexed)
        self.column = 1         # Current column (1-indexed)
        self._lines: Optional[List[str]] = None  # Cached line list

    @property
    def lines(self) -> List[str]:
        """Lazy-load line list for error reporting."""
        if self._lines is None:
            self._lines = self.source.splitlines()
        return self._lines

    def get_source_line(self, line_num: int) -> Optional[str]:
        """Get a specific line of source (1-indexed)."""
        if 1 <= line_num <= len(self.lines):
            return self.lines[line_num - 1]
        return None

    def _location(self) -> SourceLocation:
        return SourceLocation(self.line, self.column, self.pos, self.filename)

    def _span(self, start: SourceLocation) -> SourceSpan:
        return SourceSpan(start, self._location())

    def _peek(self, offset: int = 0) -> str:
        """Look at character at current position + offset without consuming."""
        idx = self.pos + offset
        if idx >= len(self.source):
            return '\0'
        return self.source[idx]

    def _advance(self) -> str:
        """Consume and return current character."""
        if self.pos >= len(self.source):
            return '\0'
        ch = self.source[self.pos]
        self.pos += 1
        if ch == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def _match(self, expected: str) -> bool:
        """Consume character if it matches expected."""
        if self._peek() == expected:
            self._advance()
            return True
        return False

    def _is_at_end(self) -> bool:
        return self.pos >= len(self.source)

    def _skip_whitespace_and_comments(self) -> None:
        while not self._is_at_end():
            ch = self._peek()
            if ch in ' \t\r\n':
                self._advance()
            elif ch == '/' and self._peek(1) == '/':
                while self._peek() != '\n' and not self._is_at_end():
                    self._advance()
            else:
                break

    def _make_token(self, kind: TokenKind, start: SourceLocation, value=None) -> Token:
        lexeme = self.source[start.offset:self.pos]
        return Token(kind, lexeme, self._span(start), value)

    def _scan_string(self) -> Token:
        """Scan a double-quoted string literal."""
        start = self._location()
        self._advance()  # consume opening quote

        chars = []
        while not self._is_at_end() and self._peek() != '"':
            ch = self._peek()
            if ch == '\n':
                break
            if ch == '\\':
                self._advance()
                chars.append(self._scan_escape_sequence())
            else:
                chars.append(self._advance())

        if self._peek() != '"':
            raise error_unterminated_string(
                self._span(start),
                self.get_source_line(start.line)
            )

        self._advance()  # consume closing quote
        return self._make_token(TokenKind.STRING, start, ''.join(chars))

    def _scan_escape_sequence(self) -> str:
        escape_chars = {
            'n': '\n',
            't': '\t',
            'r': '\r',
            '\\': '\\',
            '"': '"',
            '0': '\0',
        }
        start = self._location()
        ch = self._advance()
        if ch in escape_chars:
            return escape_chars[ch]
        raise error_unexpected_character(
            f"\\{ch}", self._span(start), self.get_source_line(start.line)
        )

    def _scan_number(self) -> Token:
        """Scan a decimal integer literal; the parser converts the lexeme."""
        start = self._location()
        while self._peek() in DIGITS:
            self._advance()
        return self._make_token(TokenKind.INT, start)

    def _scan_identifier_or_keyword(self) -> Token:
        start = self._location()

        while self._peek().isalnum() or self._peek() == '_':
            self._advance()

        lexeme = self.source[start.offset:self.pos]
        if lexeme in KEYWORDS:
            return self._make_token(KEYWORDS[lexeme], start)
        return self._make_token(TokenKind.IDENTIFIER, start, lexeme)

    def _scan_token(self) -> Token:
        """Scan the next token."""
        self._skip_whitespace_and_comments()

        start = self._location()
        if self._is_at_end():
            return self._make_token(TokenKind.EOF, start)

        ch = self._peek()

        if ch == '"':
            return self._scan_string()

        if ch in DIGITS:
            return self._scan_number()

        if ch.isalpha() or ch == '_':
            return self._scan_identifier_or_keyword()

        self._advance()

        # Two-character operators
        if ch == '=' and self._match('='):
            return self._make_token(TokenKind.EQ, start)
        if ch == '!' and self._match('='):
            return self._make_token(TokenKind.NE, start)
        if ch == '<' and self._match('='):
            return self._make_token(TokenKind.LE, start)
        if ch == '>' and self._match('='):
            return self._make_token(TokenKind.GE, start)

        single_char_tokens = {
            '+': TokenKind.PLUS,
            '-': TokenKind.MINUS,
            '*': TokenKind.STAR,
            '/': TokenKind.SLASH,
            '%': TokenKind.PERCENT,
            '!': TokenKind.BANG,
            '<': TokenKind.LT,
            '>': TokenKind.GT,
            '=': TokenKind.ASSIGN,
            '(': TokenKind.LPAREN,
            ')': TokenKind.RPAREN,
            '{': TokenKind.LBRACE,
            '}': TokenKind.RBRACE,
            ',': TokenKind.COMMA,
            ';': TokenKind.SEMICOLON,
        }

        if ch in single_char_tokens:
            return self._make_token(single_char_tokens[ch], start)

        raise error_unexpected_character(
            ch, self._span(start), self.get_source_line(start.line)
        )

    def next_token(self) -> Token:
        """Pull a single token. Keeps returning EOF once the input is exhausted."""
        return self._scan_token()

    def tokenize(self) -> List[Token]:
        """Tokenize the entire source, returning a list of tokens."""
        return list(self)

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self._scan_token()
            yield token
            if token.kind == TokenKind.EOF:
                break


def tokenize(source: str, filename: Optional[str] = None) -> List[Token]:
    """
    Convenience function to tokenize source code.

    Args:
        source: The source code to tokenize
        filename: Optional filename for error messages

    Returns:
        List of tokens, ending with EOF

    Raises:
        LexerError: If tokenization fails
    """
    return Lexer(source, filename).tokenize()
