"""Exception taxonomy for gofi.

Per-turn failures derive from ``TurnError``: the REPL reports them and keeps
going with the session intact. ``ToolchainUnavailable`` and
``WorkspaceError`` are fatal to the whole session.
"""

from typing import List


class GofiError(Exception):
    """Base class for all gofi errors."""


class SyntaxIncomplete(GofiError):
    """The accumulated input is an unterminated fragment; more input needed."""


class TurnError(GofiError):
    """A single turn failed. The session is left unchanged."""


class CompileError(TurnError):
    """The program did not compile and nothing could be patched."""

    def __init__(self, output: str):
        super().__init__(output)
        self.output = output


class FixLoopExhausted(CompileError):
    """Auto-fixing stopped making progress or hit the attempt limit."""

    def __init__(self, output: str, attempts: int, identifiers: List[str]):
        super().__init__(output)
        self.attempts = attempts
        self.identifiers = identifiers


class ProgramError(TurnError):
    """The program compiled but exited with a non-zero status."""

    def __init__(self, output: str, exit_code: int = 1):
        super().__init__(output)
        self.output = output
        self.exit_code = exit_code


class FormatError(TurnError):
    """The import organizer rejected the source for a reason other than EOF."""


class RunTimeout(TurnError):
    """The program ran longer than the configured timeout and was killed."""

    def __init__(self, timeout: float):
        super().__init__(f"program killed after {timeout:g} seconds")
        self.timeout = timeout


class MetaCommandError(TurnError):
    """A ``:command`` could not be parsed or exited unsuccessfully."""


class ToolchainUnavailable(GofiError):
    """The Go toolchain (or goimports) could not be invoked at all."""


class WorkspaceError(GofiError):
    """The session workspace could not be created or restored."""
