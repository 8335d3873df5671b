"""
Logger — a named, filterable source of payloads.

A logger decides per call whether to emit, using its own state
(enabled flag, threshold) and the registry's global state
(``enabled_all``, exclusivity):

    emit  iff  (enabled_all or enabled)
          and  threshold <= level
          and  (nobody holds exclusivity or this logger does)

Exclusivity silences every other logger unconditionally. ``enabled_all``
lets a globally enabled process bypass a locally disabled logger, while
``disable_all()`` never silences a logger that is itself enabled.
"""

from typing import TYPE_CHECKING, Any, Optional

from .errors import InvalidLevel
from .levels import LevelLike
from .streams import Payload, Stream, now_ms

if TYPE_CHECKING:
    from .registry import Registry


class Logger:
    """Named logger bound to a registry.

    Loggers are created through Registry.create(), never directly by
    callers. Every mutator returns the logger so calls chain::

        log = registry.create('svc').level('warn').enable()
        log.warn('disk almost full', 93)
    """

    def __init__(
        self,
        name: str,
        registry: 'Registry',
        *,
        enabled: bool,
        threshold: int,
        stream: Optional[Stream],
    ):
        self._name = name
        self._registry = registry
        self._enabled = enabled
        self._threshold = threshold
        self._stream = stream

    # -----------------------------------------------------------------
    # Read-only views
    # -----------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def registry(self) -> 'Registry':
        return self._registry

    @property
    def enabled(self) -> bool:
        """The logger's own flag (ignores enabled_all)."""
        return self._enabled

    @property
    def threshold(self) -> int:
        return self._threshold

    @property
    def stream(self) -> Optional[Stream]:
        return self._stream

    @property
    def is_exclusive(self) -> bool:
        return self._registry.state.only is self

    # -----------------------------------------------------------------
    # Filtering
    # -----------------------------------------------------------------

    def is_enabled(self, level: LevelLike = None) -> bool:
        """Check if a call at ``level`` would be emitted right now.

        Args:
            level: Level name or rank; None means the lowest rank

        Returns:
            True if the call passes the enable flags, the threshold,
            and the exclusivity check
        """
        rank = self._registry.levels.resolve(level)
        with self._registry.lock:
            return self._passes(rank)

    def _passes(self, rank: int) -> bool:
        state = self._registry.state
        return (
            (state.enabled_all or self._enabled)
            and self._threshold <= rank
            and state.admits(self)
        )

    # -----------------------------------------------------------------
    # Output
    # -----------------------------------------------------------------

    def pipe(self, stream: Optional[Stream]) -> Optional[Stream]:
        """Replace the current stream; returns ``stream``.

        The previous stream receives no further writes. Passing None
        detaches the logger from any stream.
        """
        with self._registry.lock:
            if stream is not self._stream:
                self._stream = stream
        return stream

    def write(self, level: LevelLike = None, data: Any = None) -> 'Logger':
        """Emit ``data`` at ``level`` if the filters allow it.

        A filtered call is a silent no-op. The payload's ``data`` is
        exactly the value passed in.

        Args:
            level: Level name or rank; None means the lowest rank
            data: Value delivered to the stream unchanged
        """
        rank = self._registry.levels.resolve(level)
        with self._registry.lock:
            if not self._passes(rank):
                return self
            stream = self._stream
        if stream is None:
            self._registry.sink_missing(self, rank)
            return self
        # Stream writes happen outside the registry lock
        stream.write(Payload(timestamp=now_ms(), level=rank, name=self._name, data=data))
        return self

    log_data = write

    def emit(self, level_name: str, *args: Any) -> 'Logger':
        """Emit ``args`` at the named level (generic per-level dispatch)."""
        rank = self._registry.levels.rank(level_name)
        return self.write(rank, list(args))

    def log(self, *args: Any) -> 'Logger':
        return self.emit('log', *args)

    def info(self, *args: Any) -> 'Logger':
        return self.emit('info', *args)

    def warn(self, *args: Any) -> 'Logger':
        return self.emit('warn', *args)

    def error(self, *args: Any) -> 'Logger':
        return self.emit('error', *args)

    # -----------------------------------------------------------------
    # Local state
    # -----------------------------------------------------------------

    def enable(self) -> 'Logger':
        """Enable this logger. Takes effect on the next call."""
        with self._registry.lock:
            self._enabled = True
        return self

    def disable(self) -> 'Logger':
        """Disable this logger.

        Has no effect while enabled_all is set; the global flag wins.
        """
        with self._registry.lock:
            self._enabled = False
        return self

    def level(self, level: LevelLike) -> 'Logger':
        """Set the threshold (level name or rank)."""
        if level is None:
            raise InvalidLevel("threshold must be a level name or rank")
        rank = self._registry.levels.resolve(level)
        with self._registry.lock:
            self._threshold = rank
        return self

    # -----------------------------------------------------------------
    # Global state
    # -----------------------------------------------------------------

    def only(self, strict: Optional[bool] = None) -> 'Logger':
        """Make this the only logger that emits.

        If another logger already holds exclusivity the request is
        ignored, or raises ExclusivityDenied when strict. ``strict=None``
        uses the registry's setting.
        """
        state = self._registry.state
        with self._registry.lock:
            granted = state.claim(self)
            holder = state.only
        if not granted:
            self._registry.claim_denied(self, holder, strict)
        return self

    def all(self) -> 'Logger':
        """Clear exclusivity, whichever logger held it."""
        with self._registry.lock:
            self._registry.state.release()
        return self

    def enable_all(self) -> 'Logger':
        """Set the process-wide enabled flag."""
        with self._registry.lock:
            self._registry.state.enabled_all = True
        return self

    def disable_all(self) -> 'Logger':
        """Clear the process-wide enabled flag."""
        with self._registry.lock:
            self._registry.state.enabled_all = False
        return self

    def __repr__(self) -> str:
        return (f"Logger({self._name!r}, enabled={self._enabled}, "
                f"threshold={self._threshold})")
