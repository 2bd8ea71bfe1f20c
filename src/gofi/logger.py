"""Centralized logger for gofi.

Writes a structured, always-on log to ~/.gofi/gofi.log (or the directory
named by GOFI_LOG_DIR). Every compile attempt, injected fix and commit is
recorded so a confusing turn can be reconstructed after the fact.

Usage in any module:
    from .logger import get_logger
    log = get_logger(__name__)
    log.info("something happened")

The log file rotates at 5 MB and keeps the last 5 files.
"""

import logging
import os
import sys
import traceback
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

# ── Singleton state ──────────────────────────────────────────

_initialized = False
_log_dir: Optional[Path] = None


def default_log_dir() -> Path:
    """Return the log directory from GOFI_LOG_DIR or ~/.gofi."""
    env_dir = os.environ.get("GOFI_LOG_DIR")
    if env_dir:
        return Path(env_dir)
    return Path.home() / ".gofi"


def init_logging(
    log_dir: Optional[Path] = None,
    level: int = logging.DEBUG,
) -> None:
    """Initialise the file logger.  Safe to call more than once."""
    global _initialized, _log_dir

    _log_dir = Path(log_dir) if log_dir else default_log_dir()

    if _initialized:
        return
    _initialized = True

    root = logging.getLogger("gofi")
    root.setLevel(level)
    root.propagate = False

    # Avoid duplicate handlers if init is called twice
    if root.handlers:
        return

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d | %(levelname)-5s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        _log_dir.mkdir(parents=True, exist_ok=True)
        log_path = _log_dir / "gofi.log"
        handler = RotatingFileHandler(
            str(log_path),
            maxBytes=5 * 1024 * 1024,   # 5 MB per file
            backupCount=5,
            encoding="utf-8",
        )
    except OSError:
        # Read-only home: keep running without a log file
        handler = logging.NullHandler()
        log_path = None
    handler.setLevel(level)
    handler.setFormatter(fmt)
    root.addHandler(handler)

    # Also log to stderr if GOFI_DEBUG is set
    if os.environ.get("GOFI_DEBUG"):
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setLevel(logging.DEBUG)
        stderr_handler.setFormatter(fmt)
        root.addHandler(stderr_handler)

    root.info(
        "=== Logging initialised === pid=%d python=%s log=%s",
        os.getpid(),
        sys.version.split()[0],
        log_path,
    )


def get_logger(name: str) -> logging.Logger:
    """Return a child logger under the 'gofi' namespace.

    Automatically initialises logging on first call so that even
    imports before init_logging() still get a working logger.
    """
    if not _initialized:
        init_logging()
    if name.startswith("gofi."):
        name = name[len("gofi."):]
    return logging.getLogger(f"gofi.{name}")


# ── Convenience helpers ──────────────────────────────────────

def log_exception(logger: logging.Logger, msg: str, exc: BaseException) -> None:
    """Log an exception with full traceback."""
    tb = traceback.format_exception(type(exc), exc, exc.__traceback__)
    logger.error("%s: %s\n%s", msg, exc, "".join(tb))


def truncate(text: str, max_len: int = 200) -> str:
    """Truncate a string for log readability."""
    if not text:
        return "(empty)"
    text = text.replace("\n", "\\n")
    if len(text) <= max_len:
        return text
    return text[:max_len] + f"...[{len(text)} chars]"
