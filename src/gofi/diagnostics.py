"""Parsing of Go compiler diagnostics.

The compiler reports problems as ``./main.go:12:5: message``. Only the
"declared and not used" message is mechanically fixable: gofi discards the
variable with ``_ = name`` and tries again. Everything else is reported to
the user verbatim.
"""

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional

DIAGNOSTIC_RE = re.compile(r"^(\./[^\s:]+):(\d+):(\d+):\s*(.+)$")

UNUSED_MARKER = "declared and not used: "
EOF_MARKER = "found 'EOF'"


@dataclass(frozen=True)
class Diagnostic:
    """One compiler diagnostic line."""

    file_marker: str
    line: int
    column: int
    message: str

    @property
    def recoverable(self) -> bool:
        return self.message.startswith(UNUSED_MARKER)

    @property
    def identifier(self) -> Optional[str]:
        """The unused variable name, for recoverable diagnostics."""
        if not self.recoverable:
            return None
        return self.message[len(UNUSED_MARKER):].strip()


def parse_line(line: str) -> Optional[Diagnostic]:
    """Parse one line of toolchain output, or return None if it doesn't match."""
    m = DIAGNOSTIC_RE.match(line.rstrip("\r"))
    if m is None:
        return None
    return Diagnostic(
        file_marker=m.group(1),
        line=int(m.group(2)),
        column=int(m.group(3)),
        message=m.group(4),
    )


def parse_diagnostics(text: str) -> List[Diagnostic]:
    """Parse every diagnostic line in ``text``. Other lines are skipped."""
    diagnostics = []
    for line in text.split("\n"):
        diag = parse_line(line)
        if diag is not None:
            diagnostics.append(diag)
    return diagnostics


def recoverable_identifiers(diagnostics: Iterable[Diagnostic]) -> List[str]:
    """Identifiers of all recoverable diagnostics, in report order."""
    return [d.identifier for d in diagnostics if d.recoverable and d.identifier]


def discard_statement(identifier: str) -> str:
    """The statement that marks ``identifier`` as used."""
    return f"_ = {identifier}"


def is_incomplete(text: str) -> bool:
    """True when the parser hit end of input inside an open construct."""
    return EOF_MARKER in text
