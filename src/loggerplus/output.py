"""Default native writers.

A writer takes the final, enriched values of a log call and performs
the actual output. The engine never patches ``print`` or ``sys.stdout``;
it wraps whichever writers it is given and falls back to these.

Values are written space-separated on one line, like ``print()``.
Streams are looked up at call time so redirection (and pytest's
capsys) applies.
"""

import sys
from typing import Any, Callable

Writer = Callable[..., None]


def native_log(*values: Any) -> None:
    """Write values to stdout."""
    print(*values, file=sys.stdout)


def native_warn(*values: Any) -> None:
    """Write values to stderr."""
    print(*values, file=sys.stderr)


def native_error(*values: Any) -> None:
    """Write values to stderr."""
    print(*values, file=sys.stderr)


def stream_writer(stream) -> Writer:
    """Build a writer that prints to a fixed stream (file, StringIO, ...)."""
    def write(*values: Any) -> None:
        print(*values, file=stream)
    return write
