"""Meta commands: ``:cmd args`` runs a program in the workspace directory."""

import shlex
import subprocess
from pathlib import Path
from typing import List

from .errors import MetaCommandError
from .logger import get_logger

log = get_logger("shell")

META_PREFIX = ":"


def is_meta_command(line: str) -> bool:
    return line.startswith(META_PREFIX)


def split_command(line: str) -> List[str]:
    """Split ``:cmd args`` into an argv list."""
    text = line[len(META_PREFIX):] if is_meta_command(line) else line
    try:
        argv = shlex.split(text)
    except ValueError as e:
        raise MetaCommandError(f"bad command: {e}") from e
    if not argv:
        raise MetaCommandError("bad command: empty")
    return argv


def run_meta_command(line: str, cwd: Path) -> str:
    """Run a meta command and return its combined output.

    Raises:
        MetaCommandError: the command could not be parsed, started, or
            exited with a non-zero status.
    """
    argv = split_command(line)
    log.info("meta command %s in %s", argv, cwd)
    try:
        proc = subprocess.run(
            argv,
            cwd=str(cwd),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
        )
    except OSError as e:
        raise MetaCommandError(f"command failed: {e}") from e

    output = proc.stdout.rstrip("\n")
    if proc.returncode != 0:
        raise MetaCommandError(f"command failed: {output}")
    return output
