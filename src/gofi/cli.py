"""Interactive prompt loop and command-line entry point."""

import argparse
import sys
from pathlib import Path
from typing import Callable, List, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.auto_suggest import AutoSuggestFromHistory
from prompt_toolkit.history import FileHistory, InMemoryHistory
from rich.console import Console
from rich.text import Text

from . import __version__
from .config import Config
from .engine import Engine
from .errors import GofiError, SyntaxIncomplete, TurnError
from .logger import get_logger, log_exception
from .shell import is_meta_command, run_meta_command
from .toolchain import Toolchain
from .workspace import open_workspace

log = get_logger("cli")

QUIT_COMMANDS = (".quit", ".exit")
SOURCE_COMMAND = ".source"


def write_raw(console: Console, text: str) -> None:
    """Write program or compiler text untouched: no wrapping, no markup,
    control characters kept."""
    console.file.write(text + "\n")
    console.file.flush()


def create_prompt_session(history_file: Optional[Path]) -> PromptSession:
    """Create a prompt session with persistent history (if a file is given)."""
    if history_file is not None:
        try:
            history_file.parent.mkdir(parents=True, exist_ok=True)
            history = FileHistory(str(history_file))
        except OSError:
            history = InMemoryHistory()
    else:
        history = InMemoryHistory()

    return PromptSession(
        history=history,
        auto_suggest=AutoSuggestFromHistory(),
        multiline=False,
    )


def stdin_reader(prompt: str) -> str:
    """Print the prompt and read one line from piped stdin.

    Raises EOFError at end of input.
    """
    sys.stdout.write(prompt)
    sys.stdout.flush()
    line = sys.stdin.readline()
    if not line:
        raise EOFError
    return line


class Repl:
    """Feeds lines to the engine and prints what each turn produced.

    A statement that ends inside an open block is held back and extended
    with the following lines until it compiles (or fails for another reason).
    """

    def __init__(
        self,
        engine: Engine,
        config: Optional[Config] = None,
        console: Optional[Console] = None,
        err_console: Optional[Console] = None,
    ):
        self.engine = engine
        self.config = config or engine.config
        self.console = console or Console()
        self.err_console = err_console or Console(stderr=True)
        self.pending = ""

    @property
    def prompt(self) -> str:
        return self.config.continuation_prompt if self.pending else self.config.prompt

    def error(self, message: str) -> None:
        write_raw(self.err_console, message)

    def notice(self, message: str) -> None:
        self.err_console.print(Text(message, style="red"))

    def feed(self, raw: str) -> bool:
        """Handle one physical input line. Returns False when the user quits."""
        line = raw.strip()
        if line in QUIT_COMMANDS:
            return False

        if not self.pending:
            if not line:
                return True
            if is_meta_command(line):
                self._meta(line)
                return True
            if line == SOURCE_COMMAND:
                write_raw(self.console, self.engine.session.source().rstrip("\n"))
                return True

        statement = f"{self.pending}\n{line}" if self.pending else line
        try:
            result = self.engine.execute(statement)
        except SyntaxIncomplete:
            self.pending = statement
            return True
        except TurnError as e:
            self.pending = ""
            self.error(str(e))
            return True
        except KeyboardInterrupt:
            self.pending = ""
            self.notice("interrupted")
            return True

        self.pending = ""
        if result.output:
            write_raw(self.console, result.output)
        return True

    def _meta(self, line: str) -> None:
        try:
            output = run_meta_command(line, Path(self.engine.session.working_directory))
        except TurnError as e:
            self.error(str(e))
            return
        if output:
            write_raw(self.console, output)

    def cancel(self) -> None:
        """Drop a partially entered statement."""
        self.pending = ""

    def run(self, read: Callable[[str], str]) -> None:
        """Prompt until EOF or a quit command."""
        while True:
            try:
                raw = read(self.prompt)
            except KeyboardInterrupt:
                self.cancel()
                continue
            except EOFError:
                break
            if not self.feed(raw):
                break


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gofi",
        description="Interactive Go: type statements, see their output.",
    )
    parser.add_argument("file", nargs="?", type=Path,
                        help="Go file to use as preamble (restored on exit)")
    parser.add_argument("--timeout", type=float, default=None,
                        help="Kill programs running longer than this many seconds (0 = no limit)")
    parser.add_argument("--max-fixes", type=int, default=None,
                        help="Compile attempts per statement before giving up")
    parser.add_argument("--no-history", action="store_true",
                        help="Do not read or write the prompt history file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    err_console = Console(stderr=True)

    try:
        workspace = args.file.resolve().parent if args.file else None
        config = Config.load(workspace)
        if args.timeout is not None:
            config.run_timeout = args.timeout
        if args.max_fixes is not None:
            config.max_fix_attempts = args.max_fixes
        if args.no_history:
            config.history_file = None
        config.validate()
    except ValueError as e:
        err_console.print(Text(f"invalid configuration: {e}", style="red"))
        return 2

    toolchain = Toolchain(config)
    try:
        with open_workspace(args.file, toolchain) as session:
            engine = Engine(session, toolchain, config)
            repl = Repl(engine, config, err_console=err_console)
            if sys.stdin.isatty():
                prompt_session = create_prompt_session(config.history_file)
                repl.run(prompt_session.prompt)
            else:
                repl.run(stdin_reader)
    except GofiError as e:
        log_exception(log, "session aborted", e)
        err_console.print(Text(str(e), style="red"))
        return 1
    except KeyboardInterrupt:
        return 130
    return 0
