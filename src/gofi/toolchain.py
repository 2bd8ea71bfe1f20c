"""Go toolchain adapter: goimports, go run and go mod init."""

import subprocess
from enum import Enum
from pathlib import Path
from typing import List, Optional

import psutil
from pydantic import BaseModel

from .config import Config
from .diagnostics import is_incomplete
from .errors import FormatError, RunTimeout, SyntaxIncomplete, ToolchainUnavailable
from .logger import get_logger, truncate
from .output import ends_with_exit_status, last_non_empty_line

log = get_logger("toolchain")


class RunKind(str, Enum):
    """How a compile-and-run attempt ended."""
    SUCCESS = "success"
    COMPILE_FAILURE = "compile_failure"
    RUNTIME_FAILURE = "runtime_failure"


class RunResult(BaseModel):
    """Combined output of ``go run`` and how it ended."""

    output: str
    succeeded: bool
    exit_code: int = 0
    last_non_empty_line: str = ""

    @classmethod
    def from_output(cls, output: str, exit_code: int) -> "RunResult":
        return cls(
            output=output,
            succeeded=exit_code == 0,
            exit_code=exit_code,
            last_non_empty_line=last_non_empty_line(output),
        )

    @property
    def kind(self) -> RunKind:
        if self.succeeded:
            return RunKind.SUCCESS
        if ends_with_exit_status(self.output):
            return RunKind.RUNTIME_FAILURE
        return RunKind.COMPILE_FAILURE


def kill_process_tree(pid: int, timeout: float = 3.0) -> None:
    """Kill a process and all its descendants.

    ``go run`` builds a binary and runs it as a child, so killing only the
    go process would leave the user's program running.
    """
    try:
        parent = psutil.Process(pid)
    except psutil.NoSuchProcess:
        return

    children = []
    try:
        children = parent.children(recursive=True)
    except (psutil.NoSuchProcess, psutil.AccessDenied):
        pass

    # Leaf-to-root order
    for proc in reversed(children + [parent]):
        try:
            proc.kill()
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            pass

    psutil.wait_procs(children + [parent], timeout=timeout)


class Toolchain:
    """Thin wrapper over the external Go tools."""

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()

    def _missing(self, binary: str, exc: OSError) -> ToolchainUnavailable:
        log.error("cannot invoke %s: %s", binary, exc)
        return ToolchainUnavailable(f"cannot run {binary!r}: {exc}")

    def organize_imports(self, source: str, working_directory: Optional[Path] = None) -> str:
        """Format ``source`` and fix up its imports.

        Raises:
            SyntaxIncomplete: the source ends inside an open construct.
            FormatError: any other formatting failure.
            ToolchainUnavailable: goimports is not installed.
        """
        cmd = [self.config.goimports_binary]
        if working_directory is not None:
            cmd += ["-srcdir", str(working_directory)]
        try:
            proc = subprocess.run(
                cmd,
                input=source,
                capture_output=True,
                text=True,
                cwd=str(working_directory) if working_directory else None,
            )
        except OSError as e:
            raise self._missing(self.config.goimports_binary, e) from e

        if proc.returncode != 0:
            message = (proc.stderr or proc.stdout).rstrip("\n")
            if is_incomplete(message):
                log.debug("incomplete input: %s", truncate(message))
                raise SyntaxIncomplete(message)
            raise FormatError(f"failed to process imports: {message}")
        return proc.stdout

    def compile_and_run(self, file_path: Path, working_directory: Path) -> RunResult:
        """Compile and execute ``file_path`` with ``go run``.

        The program's stdout and stderr are combined. It runs with stdin
        detached and is killed after ``run_timeout`` seconds (0 disables
        the limit) or on KeyboardInterrupt.
        """
        cmd = [self.config.go_binary, "run", file_path.name]
        timeout = self.config.run_timeout or None
        try:
            proc = subprocess.Popen(
                cmd,
                cwd=str(working_directory),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
            )
        except OSError as e:
            raise self._missing(self.config.go_binary, e) from e

        try:
            out, _ = proc.communicate(timeout=timeout)
        except subprocess.TimeoutExpired:
            log.warning("run timed out after %ss, killing pid %d", timeout, proc.pid)
            kill_process_tree(proc.pid)
            proc.communicate()
            raise RunTimeout(timeout)
        except KeyboardInterrupt:
            log.info("run interrupted, killing pid %d", proc.pid)
            kill_process_tree(proc.pid)
            proc.communicate()
            raise

        result = RunResult.from_output(out or "", proc.returncode)
        log.debug("go run exit=%d kind=%s output=%s",
                  proc.returncode, result.kind.value, truncate(result.output))
        return result

    def init_module(self, directory: Path, module_path: Optional[str] = None) -> None:
        """Run ``go mod init`` in ``directory``."""
        module_path = module_path or self.config.module_path
        cmd: List[str] = [self.config.go_binary, "mod", "init", module_path]
        try:
            proc = subprocess.run(
                cmd,
                cwd=str(directory),
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
            )
        except OSError as e:
            raise self._missing(self.config.go_binary, e) from e
        if proc.returncode != 0:
            raise ToolchainUnavailable(
                f'failed to run "go mod init": {proc.stdout.strip()}'
            )
        log.info("initialised module %s in %s", module_path, directory)
