"""Shared fixtures: keep logs out of the home directory, fake toolchain."""

import os
import sys
import tempfile
from pathlib import Path
from typing import List, Optional, Union

os.environ.setdefault("GOFI_LOG_DIR", tempfile.mkdtemp(prefix="gofi-test-logs"))

# Ensure src is on path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest

from gofi.config import Config
from gofi.errors import SyntaxIncomplete
from gofi.session import Session
from gofi.toolchain import RunResult, Toolchain


EOF_TEXT = "<standard input>:4:1: expected '}', found 'EOF'"


def unused(name: str, line: int = 4) -> str:
    return f"./main.go:{line}:2: declared and not used: {name}"


def compile_failure(*lines: str) -> RunResult:
    return RunResult.from_output("# command-line-arguments\n" + "\n".join(lines) + "\n", 1)


def success(output: str = "") -> RunResult:
    return RunResult.from_output(output, 0)


def runtime_failure(output: str, status: int = 1) -> RunResult:
    return RunResult.from_output(output + f"exit status {status}\n", 1)


class FakeToolchain(Toolchain):
    """Replays scripted results and records every source it was given.

    Each script entry is a RunResult to return from compile_and_run, or
    SyntaxIncomplete to raise from organize_imports.
    """

    def __init__(self, script: List[Union[RunResult, type]], config: Optional[Config] = None):
        super().__init__(config or Config(max_fix_attempts=16))
        self.script = list(script)
        self.sources: List[str] = []

    def organize_imports(self, source, working_directory=None):
        self.sources.append(source)
        if self.script and self.script[0] is SyntaxIncomplete:
            self.script.pop(0)
            raise SyntaxIncomplete(EOF_TEXT)
        return source

    def compile_and_run(self, file_path, working_directory):
        assert Path(file_path).read_text() == self.sources[-1]
        if not self.script:
            raise AssertionError("unexpected compile_and_run call")
        return self.script.pop(0)


@pytest.fixture
def session(tmp_path):
    return Session(working_directory=tmp_path, file_path=tmp_path / "main.go")
