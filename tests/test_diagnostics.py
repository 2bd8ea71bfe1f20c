"""Tests for compiler diagnostic parsing and classification."""

from conftest import EOF_TEXT

from gofi.diagnostics import (
    Diagnostic,
    discard_statement,
    is_incomplete,
    parse_diagnostics,
    parse_line,
    recoverable_identifiers,
)


class TestParseLine:
    def test_unused_variable(self):
        diag = parse_line("./main.go:4:2: declared and not used: x")
        assert diag == Diagnostic("./main.go", 4, 2, "declared and not used: x")
        assert diag.recoverable
        assert diag.identifier == "x"

    def test_other_error_is_unrecoverable(self):
        diag = parse_line("./main.go:7:9: undefined: foo")
        assert diag is not None
        assert not diag.recoverable
        assert diag.identifier is None

    def test_marker_must_be_relative(self):
        assert parse_line("/tmp/gofi123/main.go:4:2: declared and not used: x") is None

    def test_non_matching_lines(self):
        assert parse_line("# command-line-arguments") is None
        assert parse_line("exit status 1") is None
        assert parse_line("") is None

    def test_windows_line_endings(self):
        diag = parse_line("./main.go:4:2: declared and not used: total\r")
        assert diag.identifier == "total"

    def test_marker_only_counts_at_message_start(self):
        diag = parse_line('./main.go:4:2: something else: "declared and not used: x"')
        assert not diag.recoverable


class TestParseDiagnostics:
    OUTPUT = (
        "# command-line-arguments\n"
        "./main.go:4:2: declared and not used: a\n"
        "./main.go:5:2: declared and not used: b\n"
        "./main.go:6:7: cannot use s (variable of type string) as int value in assignment\n"
    )

    def test_all_matching_lines(self):
        diags = parse_diagnostics(self.OUTPUT)
        assert [d.line for d in diags] == [4, 5, 6]

    def test_recoverable_identifiers_in_order(self):
        assert recoverable_identifiers(parse_diagnostics(self.OUTPUT)) == ["a", "b"]

    def test_nothing_recoverable(self):
        text = "./main.go:3:1: missing return\n"
        assert recoverable_identifiers(parse_diagnostics(text)) == []

    def test_empty_output(self):
        assert parse_diagnostics("") == []


def test_discard_statement():
    assert discard_statement("x") == "_ = x"


def test_incomplete_detection():
    assert is_incomplete(EOF_TEXT)
    assert not is_incomplete("<standard input>:3:5: expected operand, found ')'")
