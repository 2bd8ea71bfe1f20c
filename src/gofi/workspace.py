"""Creating and releasing the directory a session compiles in."""

import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from .errors import WorkspaceError
from .logger import get_logger
from .session import DEFAULT_PREAMBLE, Session
from .toolchain import Toolchain

log = get_logger("workspace")

MAIN_FILE = "main.go"


@contextmanager
def scratch_workspace(toolchain: Toolchain) -> Iterator[Session]:
    """A throwaway module in a temporary directory, removed on exit."""
    directory = Path(tempfile.mkdtemp(prefix="gofi"))
    log.info("created scratch workspace %s", directory)
    try:
        toolchain.init_module(directory)
        yield Session(
            working_directory=directory,
            file_path=directory / MAIN_FILE,
            preamble=DEFAULT_PREAMBLE,
        )
    finally:
        shutil.rmtree(directory, ignore_errors=True)
        log.info("removed scratch workspace %s", directory)


@contextmanager
def file_workspace(path: Path) -> Iterator[Session]:
    """Use an existing Go file as the preamble.

    Every turn overwrites the file, so its original content is written back
    on exit no matter how the session ends.
    """
    path = Path(path).resolve()
    try:
        original = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise WorkspaceError(f"bad file {str(path)!r}: {e}") from e

    log.info("using %s as preamble (%d bytes)", path, len(original))
    try:
        yield Session(
            working_directory=path.parent,
            file_path=path,
            preamble=original,
        )
    finally:
        try:
            path.write_text(original, encoding="utf-8")
            log.info("restored %s", path)
        except OSError as e:
            log.error("failed to restore %s: %s", path, e)
            raise WorkspaceError(f"failed to restore {str(path)!r}: {e}") from e


def open_workspace(path: Optional[Path], toolchain: Toolchain):
    """Context manager for the session workspace: a file, or a scratch module."""
    if path is None:
        return scratch_workspace(toolchain)
    return file_workspace(path)
