"""
Payloads and the streams that consume them.

A stream is anything with ``write(payload)`` and ``pipe(stream)``.
ConsoleStream is the built-in default: quiet levels go to stdout,
``warn`` and ``error`` go to stderr.
"""

import sys
import time
from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterable, Optional, Protocol, TextIO, runtime_checkable

from .levels import DEFAULT_LEVELS, Levels


@dataclass(frozen=True)
class Payload:
    """One emitted call, as handed to a stream.

    Attributes:
        timestamp: Epoch milliseconds when the call was made
        level: Rank of the call
        name: Name of the emitting logger
        data: The list of arguments for convenience methods, or exactly
            the value passed to write()
    """
    timestamp: int
    level: int
    name: str
    data: Any = None

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


@runtime_checkable
class Stream(Protocol):
    """Destination for payloads."""

    def write(self, payload: Payload) -> None:
        """Consume one payload."""

    def pipe(self, stream: 'Stream') -> 'Stream':
        """Return ``stream`` so calls can be chained onto it."""


def format_payload(payload: Payload, level_name: Optional[str] = None) -> str:
    """Render a payload as a single console line.

    Sequences passed by the convenience methods are joined with spaces;
    any other data is rendered with str().
    """
    label = (level_name or str(payload.level)).upper()
    data = payload.data
    if isinstance(data, (list, tuple)):
        text = ' '.join(str(item) for item in data)
    elif data is None:
        text = ''
    else:
        text = str(data)
    return f"[{payload.name}] {label}: {text}" if text else f"[{payload.name}] {label}"


class ConsoleStream:
    """Write payloads to stdout/stderr depending on their level.

    Ranks that no configured level carries are dropped, the same way an
    unknown severity falls through a switch. Payloads carry only a rank,
    so aliases sharing one are labeled with the first declared name:
    ``info()`` output reads ``LOG`` with the default levels.

    Usage::

        stream = ConsoleStream()
        logger.pipe(stream)
    """

    ERR_LEVELS = frozenset({'warn', 'error'})

    def __init__(
        self,
        levels: Levels = None,
        out: TextIO = None,
        err: TextIO = None,
        err_levels: Iterable[str] = None,
    ):
        self.levels = levels if levels is not None else DEFAULT_LEVELS
        self._out = out
        self._err = err
        self.err_levels = frozenset(err_levels) if err_levels is not None else self.ERR_LEVELS

    @property
    def out(self) -> TextIO:
        # Resolved on each write so pytest capture and redirects apply
        return self._out if self._out is not None else sys.stdout

    @property
    def err(self) -> TextIO:
        return self._err if self._err is not None else sys.stderr

    def write(self, payload: Payload) -> None:
        level_name = self.levels.name_for(payload.level)
        if level_name is None:
            return
        target = self.err if level_name in self.err_levels else self.out
        print(format_payload(payload, level_name), file=target)

    def pipe(self, stream: Stream) -> Stream:
        return stream
