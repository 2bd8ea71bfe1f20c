"""Tests for :meta commands."""

import shlex
import sys

import pytest

from gofi.errors import MetaCommandError
from gofi.shell import is_meta_command, run_meta_command, split_command

PY = shlex.quote(sys.executable)


def test_is_meta_command():
    assert is_meta_command(":go get example.com/x")
    assert not is_meta_command("x := 1")


def test_split_command_handles_quotes():
    assert split_command(':echo "a b" c') == ["echo", "a b", "c"]


@pytest.mark.parametrize("line", [":", ":   ", ':echo "unterminated'])
def test_bad_commands(line):
    with pytest.raises(MetaCommandError) as exc:
        split_command(line)
    assert str(exc.value).startswith("bad command")


def test_runs_in_workspace(tmp_path):
    out = run_meta_command(f":{PY} -c 'import os; print(os.getcwd())'", tmp_path)
    assert out == str(tmp_path.resolve()) or out == str(tmp_path)


def test_output_is_combined(tmp_path):
    out = run_meta_command(
        f":{PY} -c 'import sys; print(1); sys.stdout.flush(); print(2, file=sys.stderr)'", tmp_path)
    assert out.split("\n") == ["1", "2"]


def test_failure_includes_output(tmp_path):
    with pytest.raises(MetaCommandError) as exc:
        run_meta_command(f":{PY} -c 'import sys; print(\"nope\"); sys.exit(3)'", tmp_path)
    assert str(exc.value) == "command failed: nope"


def test_missing_program(tmp_path):
    with pytest.raises(MetaCommandError) as exc:
        run_meta_command(":definitely-not-a-real-program-gofi", tmp_path)
    assert str(exc.value).startswith("command failed:")
