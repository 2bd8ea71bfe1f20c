"""The per-turn compile, patch and retry loop.

A turn composes the whole program with the new statement, formats it and
runs it. Unused-variable errors are patched with discard statements and the
program is retried; any other outcome ends the turn. The session is touched
only when the program finally runs cleanly.
"""

import re
from pathlib import Path
from typing import List, Optional, Set

from pydantic import BaseModel, Field

from .config import Config
from .diagnostics import discard_statement, parse_diagnostics, recoverable_identifiers
from .errors import CompileError, FixLoopExhausted, ProgramError
from .logger import get_logger, truncate
from .output import count_lines, new_output, strip_exit_status, visible
from .session import Session
from .toolchain import RunKind, RunResult, Toolchain

log = get_logger("engine")

_EXIT_CODE_RE = re.compile(r"exit status (\d+)")


class TurnResult(BaseModel):
    """Outcome of a successful turn."""

    statement: str
    output: str
    attempts: int = 1
    fixes: List[str] = Field(default_factory=list)


class Engine:
    """Runs turns against a session.

    The toolchain is injected so tests can feed synthetic compiler output.
    """

    def __init__(
        self,
        session: Session,
        toolchain: Optional[Toolchain] = None,
        config: Optional[Config] = None,
    ):
        self.session = session
        self.config = config or (toolchain.config if toolchain else Config())
        self.toolchain = toolchain or Toolchain(self.config)

    def _write(self, text: str) -> None:
        Path(self.session.file_path).write_text(text, encoding="utf-8")

    def _attempt(self, statement: str, fixes: List[str]) -> RunResult:
        source = self.session.compose(statement, fixes)
        self._write(source)
        formatted = self.toolchain.organize_imports(source, self.session.working_directory)
        self._write(formatted)
        return self.toolchain.compile_and_run(
            Path(self.session.file_path), Path(self.session.working_directory)
        )

    def execute(self, statement: str) -> TurnResult:
        """Run one turn for ``statement``.

        Returns the output the statement produced. Raises SyntaxIncomplete
        when more input is needed, or a TurnError when the turn fails; in
        both cases the session is unchanged.
        """
        fixes: List[str] = []
        previous: Optional[Set[str]] = None
        attempts = 0

        while True:
            attempts += 1
            result = self._attempt(statement, fixes)
            kind = result.kind

            if kind is RunKind.SUCCESS:
                return self._commit(statement, result, attempts, fixes)

            if kind is RunKind.RUNTIME_FAILURE:
                raise self._program_error(result)

            diagnostics = parse_diagnostics(result.output)
            identifiers = recoverable_identifiers(diagnostics)
            raw = result.output.rstrip("\n")
            if not identifiers:
                log.info("compile failed with %d diagnostic(s)", len(diagnostics))
                raise CompileError(raw)

            found = set(identifiers)
            if found == previous:
                log.warning("discards for %s did not help, giving up", sorted(found))
                raise FixLoopExhausted(raw, attempts, identifiers)
            if attempts >= self.config.max_fix_attempts:
                log.warning("gave up after %d attempts", attempts)
                raise FixLoopExhausted(raw, attempts, identifiers)
            previous = found

            for name in identifiers:
                log.debug("discarding unused variable %s", name)
                fixes.append(discard_statement(name))

    def _commit(self, statement: str, result: RunResult, attempts: int, fixes: List[str]) -> TurnResult:
        fresh = new_output(result.output, self.session.offset)
        self.session.commit(statement, count_lines(result.output))
        log.info("committed statement #%d after %d attempt(s): %s",
                 len(self.session.confirmed), attempts, truncate(statement))
        return TurnResult(
            statement=statement,
            output=visible(fresh),
            attempts=attempts,
            fixes=list(fixes),
        )

    def _program_error(self, result: RunResult) -> ProgramError:
        text = visible(new_output(strip_exit_status(result.output), self.session.offset))
        m = _EXIT_CODE_RE.match(result.last_non_empty_line)
        exit_code = int(m.group(1)) if m else result.exit_code
        if not text:
            text = result.last_non_empty_line
        log.info("program exited with status %d", exit_code)
        return ProgramError(text, exit_code)
