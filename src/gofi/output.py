"""Isolating the output produced by the newest statement.

Every turn reruns the whole program, so its output repeats everything the
earlier turns printed. The session remembers how many lines had been printed
after the last successful turn; whatever follows that line is new.
"""

EXIT_STATUS_MARKER = "exit status "


def count_lines(output: str) -> int:
    """Number of newline-terminated lines in ``output``."""
    return output.count("\n")


def new_output(output: str, offset: int) -> str:
    """Return ``output`` with its first ``offset`` lines removed.

    Returns an empty string when ``output`` has ``offset`` lines or fewer.
    """
    if offset <= 0:
        return output
    pos = -1
    for _ in range(offset):
        pos = output.find("\n", pos + 1)
        if pos == -1:
            return ""
    return output[pos + 1:]


def last_non_empty_line(output: str) -> str:
    for line in reversed(output.split("\n")):
        if line.strip():
            return line.rstrip("\r")
    return ""


def ends_with_exit_status(output: str) -> bool:
    """True when ``go run`` reported a non-zero exit of the program."""
    return last_non_empty_line(output).startswith(EXIT_STATUS_MARKER)


def strip_exit_status(output: str) -> str:
    """Drop the trailing ``exit status N`` line that ``go run`` appends."""
    lines = output.rstrip("\n").split("\n")
    if lines and lines[-1].startswith(EXIT_STATUS_MARKER):
        lines.pop()
        return "\n".join(lines) + "\n" if lines else ""
    return output


def visible(output: str) -> str:
    """Text to show the user: no trailing newline."""
    return output[:-1] if output.endswith("\n") else output
