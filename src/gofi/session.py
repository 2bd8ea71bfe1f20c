"""Durable state of an interactive session."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence, Tuple

from .composer import compose

DEFAULT_PREAMBLE = "package main"


@dataclass
class Session:
    """Everything that survives from one turn to the next.

    ``confirmed`` only ever grows, and only with the user's own text;
    ``offset`` is the line count of the last successful run's output.
    Both change together in ``commit`` and nowhere else.
    """

    working_directory: Path
    file_path: Path
    preamble: str = DEFAULT_PREAMBLE
    _confirmed: List[str] = field(default_factory=list, repr=False)
    _offset: int = 0

    @property
    def confirmed(self) -> Tuple[str, ...]:
        return tuple(self._confirmed)

    @property
    def offset(self) -> int:
        return self._offset

    def compose(self, candidate: str = "", fixes: Sequence[str] = ()) -> str:
        return compose(self.preamble, self._confirmed, candidate, fixes)

    def commit(self, statement: str, line_count: int) -> None:
        """Record a successful turn."""
        if line_count < 0:
            raise ValueError("line count must not be negative")
        self._confirmed.append(statement)
        self._offset = line_count

    def snapshot(self) -> Tuple[Tuple[str, ...], int]:
        """State that must be identical before and after a failed turn."""
        return self.confirmed, self._offset

    def source(self) -> str:
        """The accumulated program, as it stands after the last success."""
        return self.compose()
