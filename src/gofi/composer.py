"""Assembling the full Go source for one compile attempt."""

from typing import Iterable

MAIN_OPEN = "\nfunc main() {\n"
MAIN_CLOSE = "}\n"


def _line(statement: str) -> str:
    return statement if statement.endswith("\n") else statement + "\n"


def compose(
    preamble: str,
    confirmed: Iterable[str],
    candidate: str = "",
    fixes: Iterable[str] = (),
) -> str:
    """Build the program: preamble, then a ``main`` holding every statement.

    Confirmed statements come first, then the candidate, then the discard
    statements. A discard has to follow the declaration it refers to, and the
    candidate may be the statement that declares it.
    """
    parts = [preamble.rstrip("\n"), MAIN_OPEN]
    parts.extend(_line(s) for s in confirmed)
    if candidate:
        parts.append(_line(candidate))
    parts.extend(_line(f) for f in fixes)
    parts.append(MAIN_CLOSE)
    return "".join(parts)
