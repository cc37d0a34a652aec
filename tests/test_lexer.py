"""
Unit tests for the Jerboa lexer.
"""

import pytest
from jerboa import tokenize, Lexer, TokenKind, LexerError


def kinds(source):
    return [t.kind for t in tokenize(source)]


class TestLexerBasics:
    """Test basic lexer functionality."""

    def test_empty_source(self):
        """Empty source produces only EOF."""
        tokens = tokenize("")
        assert len(tokens) == 1
        assert tokens[0].kind == TokenKind.EOF

    def test_whitespace_only(self):
        tokens = tokenize("  \t\n\r\n ")
        assert [t.kind for t in tokens] == [TokenKind.EOF]

    def test_let_statement(self):
        """Basic let statement tokenization."""
        assert kinds("let x = 42;") == [
            TokenKind.LET,
            TokenKind.IDENTIFIER,
            TokenKind.ASSIGN,
            TokenKind.INT,
            TokenKind.SEMICOLON,
            TokenKind.EOF,
        ]

    def test_identifier_value(self):
        """Identifier token carries its name."""
        tokens = tokenize("foo_bar123")
        assert tokens[0].kind == TokenKind.IDENTIFIER
        assert tokens[0].value == "foo_bar123"

    def test_integer_keeps_lexeme_only(self):
        tokens = tokenize("12345")
        assert tokens[0].kind == TokenKind.INT
        assert tokens[0].lexeme == "12345"
        assert tokens[0].value is None

    def test_position_tracking(self):
        """Token positions are tracked correctly."""
        tokens = tokenize("let x = 5;")
        assert tokens[0].span.start.line == 1
        assert tokens[0].span.start.column == 1
        # 'x' starts at column 5
        assert tokens[1].span.start.column == 5

    def test_multiline_position_tracking(self):
        tokens = tokenize("let x = 5;\nlet y = 10;")
        let_tokens = [t for t in tokens if t.kind == TokenKind.LET]
        assert let_tokens[0].span.start.line == 1
        assert let_tokens[1].span.start.line == 2

    def test_filename_in_locations(self):
        tokens = tokenize("x", filename="prog.jb")
        assert str(tokens[0].span.start) == "prog.jb:1:1"


class TestKeywords:
    """Test keyword recognition."""

    @pytest.mark.parametrize("word,kind", [
        ("let", TokenKind.LET),
        ("return", TokenKind.RETURN),
        ("fn", TokenKind.FN),
        ("if", TokenKind.IF),
        ("else", TokenKind.ELSE),
        ("true", TokenKind.TRUE),
        ("false", TokenKind.FALSE),
    ])
    def test_keyword(self, word, kind):
        assert kinds(word)[0] == kind

    def test_keyword_prefix_is_identifier(self):
        """Words that merely start with a keyword are identifiers."""
        tokens = tokenize("letter iffy")
        assert tokens[0].kind == TokenKind.IDENTIFIER
        assert tokens[1].kind == TokenKind.IDENTIFIER


class TestOperators:
    """Test operator tokenization."""

    def test_single_char_operators(self):
        assert kinds("+ - * / % ! < > =")[:-1] == [
            TokenKind.PLUS, TokenKind.MINUS, TokenKind.STAR, TokenKind.SLASH,
            TokenKind.PERCENT, TokenKind.BANG, TokenKind.LT, TokenKind.GT,
            TokenKind.ASSIGN,
        ]

    def test_two_char_operators(self):
        assert kinds("== != <= >=")[:-1] == [
            TokenKind.EQ, TokenKind.NE, TokenKind.LE, TokenKind.GE,
        ]

    def test_operators_without_spaces(self):
        assert kinds("a<=b!=!c")[:-1] == [
            TokenKind.IDENTIFIER, TokenKind.LE, TokenKind.IDENTIFIER,
            TokenKind.NE, TokenKind.BANG, TokenKind.IDENTIFIER,
        ]

    def test_delimiters(self):
        assert kinds("(){},;")[:-1] == [
            TokenKind.LPAREN, TokenKind.RPAREN, TokenKind.LBRACE,
            TokenKind.RBRACE, TokenKind.COMMA, TokenKind.SEMICOLON,
        ]


class TestComments:
    """Test comment handling."""

    def test_line_comment(self):
        """Line comments are skipped."""
        assert kinds("// a comment\nlet")[0] == TokenKind.LET

    def test_comment_at_end(self):
        assert kinds("x; // trailing") == [
            TokenKind.IDENTIFIER, TokenKind.SEMICOLON, TokenKind.EOF,
        ]

    def test_single_slash_is_division(self):
        assert kinds("a / b")[1] == TokenKind.SLASH


class TestStrings:
    """Test string literals."""

    def test_simple_string(self):
        tokens = tokenize('"hello"')
        assert tokens[0].kind == TokenKind.STRING
        assert tokens[0].value == "hello"
        assert tokens[0].lexeme == '"hello"'

    def test_escape_sequences(self):
        tokens = tokenize(r'"a\nb\t\"c\\"')
        assert tokens[0].value == 'a\nb\t"c\\'

    def test_empty_string(self):
        assert tokenize('""')[0].value == ""

    def test_unterminated_string(self):
        with pytest.raises(LexerError) as exc_info:
            tokenize('"never closed')
        assert exc_info.value.code == "E002"

    def test_string_cannot_span_lines(self):
        with pytest.raises(LexerError) as exc_info:
            tokenize('"one\ntwo"')
        assert exc_info.value.code == "E002"

    def test_bad_escape(self):
        with pytest.raises(LexerError) as exc_info:
            tokenize(r'"\q"')
        assert exc_info.value.code == "E001"


class TestLexerErrors:
    """Test lexer error reporting."""

    def test_unexpected_character(self):
        with pytest.raises(LexerError) as exc_info:
            tokenize("let x = 5 @ 3;")
        assert exc_info.value.code == "E001"
        assert "'@'" in exc_info.value.message

    @pytest.mark.parametrize("source", ["٣ + 1", "²", "１"])
    def test_non_ascii_digits_rejected(self, source):
        """Only ASCII 0-9 start an integer literal."""
        with pytest.raises(LexerError) as exc_info:
            tokenize(source)
        assert exc_info.value.code == "E001"

    def test_error_formats_source_line(self):
        with pytest.raises(LexerError) as exc_info:
            tokenize("let x = $;")
        text = str(exc_info.value)
        assert "error[E001]" in text
        assert "let x = $;" in text
        assert "^" in text


class TestStreaming:
    """Test lazy token production."""

    def test_iteration_stops_after_eof(self):
        tokens = list(Lexer("a b"))
        assert [t.kind for t in tokens] == [
            TokenKind.IDENTIFIER, TokenKind.IDENTIFIER, TokenKind.EOF,
        ]

    def test_next_token_repeats_eof(self):
        lexer = Lexer("x")
        assert lexer.next_token().kind == TokenKind.IDENTIFIER
        assert lexer.next_token().kind == TokenKind.EOF
        assert lexer.next_token().kind == TokenKind.EOF

    def test_errors_surface_lazily(self):
        """Tokens before a bad character are produced before the error."""
        stream = iter(Lexer("ok #"))
        assert next(stream).kind == TokenKind.IDENTIFIER
        with pytest.raises(LexerError):
            next(stream)
