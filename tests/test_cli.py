"""
Tests for the jerboa command-line interface.
"""

import logging

import pytest

from jerboa.__main__ import main


@pytest.fixture
def program(tmp_path):
    """Write a source file and return its path as a string."""
    def _write(source, name="prog.jb"):
        path = tmp_path / name
        path.write_text(source)
        return str(path)
    return _write


class TestRun:
    """Test the run subcommand."""

    def test_prints_last_value(self, program, capsys):
        path = program("let add = fn(a, b) { a + b }; add(20, 22)")
        assert main(["run", path]) == 0
        assert capsys.readouterr().out == "42\n"

    def test_all_values(self, program, capsys):
        path = program('let s = "hi"; s; len(s)')
        assert main(["run", path, "--all"]) == 0
        assert capsys.readouterr().out == '()\n"hi"\n2\n'

    def test_inline_expression(self, capsys):
        assert main(["run", "-e", "if 1 < 2 { true } else { false }"]) == 0
        assert capsys.readouterr().out == "true\n"

    def test_empty_program_prints_nothing(self, program, capsys):
        assert main(["run", program("")]) == 0
        assert capsys.readouterr().out == ""

    def test_runtime_error(self, program, capsys):
        path = program("let x = 1;\nx / 0")
        assert main(["run", path]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "error[E401]" in captured.err
        assert "x / 0" in captured.err

    def test_missing_file(self, tmp_path, capsys):
        assert main(["run", str(tmp_path / "nope.jb")]) == 1
        assert "File not found" in capsys.readouterr().err

    def test_no_input(self, capsys):
        assert main(["run"]) == 1
        assert "FILE or -e" in capsys.readouterr().err

    def test_config_file(self, program, tmp_path, capsys):
        config = tmp_path / "limits.yaml"
        config.write_text("integer_bits: 8\n")
        assert main(["run", "-e", "100 + 100", "--config", str(config)]) == 1
        assert "E403" in capsys.readouterr().err

    def test_bad_config_file(self, tmp_path, capsys):
        config = tmp_path / "limits.yaml"
        config.write_text("max_depth: 3\n")
        assert main(["run", "-e", "1", "--config", str(config)]) == 1
        assert "bad config" in capsys.readouterr().err

    def test_verbose(self, capsys):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        try:
            assert main(["--verbose", "run", "-e", "let f = fn() { 1 }; f()"]) == 0
            assert capsys.readouterr().out == "1\n"
        finally:
            root.handlers[:] = handlers
            root.setLevel(level)


class TestCheck:
    """Test the check subcommand."""

    def test_ok(self, program, capsys):
        path = program("let x = 1; x + 1;")
        assert main(["check", path]) == 0
        assert "2 statement(s)" in capsys.readouterr().out

    def test_syntax_error(self, program, capsys):
        path = program("let = 1;")
        assert main(["check", path]) == 1
        assert "E101" in capsys.readouterr().err

    @pytest.mark.parametrize("action", ["check", "ast", "run"])
    def test_deep_nesting_reports_error(self, action, program, capsys):
        path = program("(" * 1000 + "1" + ")" * 1000)
        assert main([action, path]) == 1
        assert "E601" in capsys.readouterr().err

    def test_does_not_evaluate(self, program):
        assert main(["check", program("1 / 0")]) == 0


class TestTokensAndAst:
    """Test the tokens and ast subcommands."""

    def test_tokens(self, program, capsys):
        assert main(["tokens", program("let x = 5;")]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines[0].endswith("LET")
        assert lines[1].endswith("IDENTIFIER(x)")
        assert lines[-1].endswith("EOF")

    def test_tokens_lexer_error(self, program, capsys):
        assert main(["tokens", program("let @")]) == 1
        assert "E001" in capsys.readouterr().err

    def test_ast(self, program, capsys):
        assert main(["ast", program("let x = 1 + 2;")]) == 0
        out = capsys.readouterr().out
        assert "VarStatement" in out
        assert "BinaryExpression" in out
