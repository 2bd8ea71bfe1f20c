"""Interactive Go, one statement at a time."""

__version__ = "0.1.0"

from .config import Config
from .diagnostics import Diagnostic, parse_diagnostics, recoverable_identifiers
from .engine import Engine, TurnResult
from .errors import (
    GofiError,
    SyntaxIncomplete,
    TurnError,
    CompileError,
    FixLoopExhausted,
    ProgramError,
    FormatError,
    RunTimeout,
    MetaCommandError,
    ToolchainUnavailable,
    WorkspaceError,
)
from .session import Session
from .toolchain import RunKind, RunResult, Toolchain

__all__ = [
    "Config",
    "Diagnostic",
    "parse_diagnostics",
    "recoverable_identifiers",
    "Engine",
    "TurnResult",
    "GofiError",
    "SyntaxIncomplete",
    "TurnError",
    "CompileError",
    "FixLoopExhausted",
    "ProgramError",
    "FormatError",
    "RunTimeout",
    "MetaCommandError",
    "ToolchainUnavailable",
    "WorkspaceError",
    "Session",
    "RunKind",
    "RunResult",
    "Toolchain",
]
