"""
Registry — the name -> Logger table and the state loggers share.

A Registry owns everything that is process-wide in spirit: the level
table, the global enable flag, the exclusivity claim, and the loggers
themselves. Most programs use the module-level singleton through
``get_registry()`` / ``get_logger()``; tests build their own Registry.

Entries are never removed or replaced. ``create()`` on a known name
returns the existing logger and ignores the new options (first writer
wins).
"""

import threading
from typing import Callable, Dict, List, Mapping, Optional, TextIO, Union

from .errors import ExclusivityDenied, NotFound, SinkUnavailable
from .levels import LevelLike, Levels
from .logger import Logger
from .state import GlobalState
from .streams import ConsoleStream, Stream

GLOBAL_NAME = 'global'


class Registry:
    """Create-or-get table of named loggers.

    Args:
        levels: Level table (Levels or plain mapping); default set if None
        default_enabled: Enabled flag for loggers created without one
        default_stream: Stream for loggers created without one. A
            callable is treated as a factory and called per logger.
            None means a ConsoleStream over this registry's levels.
        strict: Raise ExclusivityDenied / SinkUnavailable instead of
            ignoring denied claims and writes with no stream
        diagnostics: File handle that receives one line per ignored
            claim or dropped write (default: silent)

    Usage::

        reg = Registry()
        svc = reg.create('svc', level='warn')
        svc.warn('slow response', 1200)
        reg.find('svc') is svc        # True
        reg.find('nope')              # None
    """

    def __init__(
        self,
        levels: Union[Levels, Mapping[str, int], None] = None,
        default_enabled: bool = True,
        default_stream: Union[Stream, Callable[[], Stream], None] = None,
        strict: bool = False,
        diagnostics: Optional[TextIO] = None,
    ):
        if default_stream is not None and not (hasattr(default_stream, 'write')
                                               or callable(default_stream)):
            raise ValueError(
                f"default_stream must be a stream or a stream factory: {default_stream!r}")
        self.levels = Levels.coerce(levels)
        self.default_enabled = default_enabled
        self.default_stream = default_stream
        self.strict = strict
        self.diagnostics = diagnostics
        self.state = GlobalState()
        self.lock = threading.RLock()
        self._loggers: Dict[str, Logger] = {}

    # -----------------------------------------------------------------
    # Create / lookup
    # -----------------------------------------------------------------

    def create(
        self,
        name: str,
        enabled: Optional[bool] = None,
        stream: Optional[Stream] = None,
        level: LevelLike = None,
    ) -> Logger:
        """Return the logger named ``name``, creating it if needed.

        Options only apply when the logger is created; on a known name
        they are ignored.

        Raises:
            ValueError: if ``name`` is not a non-empty string
            InvalidLevel: if ``level`` is not a known name or an int
        """
        if not isinstance(name, str) or not name:
            raise ValueError(f"logger name must be a non-empty string: {name!r}")
        with self.lock:
            self._ensure_global()
            return self._create(name, enabled, stream, level)

    def _create(self, name, enabled, stream, level) -> Logger:
        existing = self._loggers.get(name)
        if existing is not None:
            return existing
        threshold = self.levels.resolve(level)
        logger = Logger(
            name,
            self,
            enabled=self.default_enabled if enabled is None else bool(enabled),
            threshold=threshold,
            stream=stream if stream is not None else self._make_stream(),
        )
        self._loggers[name] = logger
        return logger

    def _make_stream(self) -> Stream:
        default = self.default_stream
        if default is None:
            return ConsoleStream(self.levels)
        if isinstance(default, type) or not hasattr(default, 'write'):
            return default()
        return default

    def _ensure_global(self) -> Logger:
        if GLOBAL_NAME not in self._loggers:
            self._create(GLOBAL_NAME, None, None, None)
        return self._loggers[GLOBAL_NAME]

    def find(self, name: str) -> Optional[Logger]:
        """Look up a logger by name. Returns None if not found."""
        with self.lock:
            self._ensure_global()
            return self._loggers.get(name)

    def require(self, name: str) -> Logger:
        """Look up a logger by name, raising NotFound if it is missing."""
        logger = self.find(name)
        if logger is None:
            raise NotFound(name)
        return logger

    @property
    def global_logger(self) -> Logger:
        """The default logger, named 'global'."""
        with self.lock:
            return self._ensure_global()

    def names(self) -> List[str]:
        with self.lock:
            return list(self._loggers)

    def __contains__(self, name) -> bool:
        with self.lock:
            return name in self._loggers

    def __len__(self) -> int:
        with self.lock:
            return len(self._loggers)

    # -----------------------------------------------------------------
    # Ignored outcomes
    # -----------------------------------------------------------------

    def claim_denied(self, logger: Logger, holder: Optional[Logger],
                     strict: Optional[bool] = None) -> None:
        """Handle an only() call that lost to an existing claim."""
        holder_name = holder.name if holder is not None else None
        if self.strict if strict is None else strict:
            raise ExclusivityDenied(logger.name, holder_name)
        self._note(f"only() denied for {logger.name!r} (held by {holder_name!r})")

    def sink_missing(self, logger: Logger, rank: int) -> None:
        """Handle an emittable write from a logger with no stream."""
        if self.strict:
            raise SinkUnavailable(logger.name, rank)
        self._note(f"{logger.name!r} has no stream; dropped level {rank}")

    def _note(self, message: str) -> None:
        if self.diagnostics is not None:
            print(f"namelog: {message}", file=self.diagnostics)

    def __repr__(self) -> str:
        return f"Registry(loggers={len(self)}, state={self.state!r})"


# =============================================================================
# Module-level singleton
# =============================================================================

_registry: Optional[Registry] = None
_registry_lock = threading.Lock()


def init_registry(
    levels: Union[Levels, Mapping[str, int], None] = None,
    default_enabled: bool = True,
    default_stream: Union[Stream, Callable[[], Stream], None] = None,
    strict: bool = False,
    diagnostics: Optional[TextIO] = None,
) -> Registry:
    """Replace the module-level Registry singleton.

    Call once at program startup, before any logger is created.
    Loggers obtained from a previous singleton keep working but are no
    longer reachable through get_logger().

    Returns:
        The new Registry instance
    """
    global _registry
    with _registry_lock:
        _registry = Registry(
            levels=levels,
            default_enabled=default_enabled,
            default_stream=default_stream,
            strict=strict,
            diagnostics=diagnostics,
        )
        return _registry


def get_registry() -> Registry:
    """Get the module-level Registry, creating a default if needed."""
    global _registry
    with _registry_lock:
        if _registry is None:
            _registry = Registry()
        return _registry


def create(name: str, enabled: Optional[bool] = None,
           stream: Optional[Stream] = None, level: LevelLike = None) -> Logger:
    """Create-or-get a logger on the singleton registry."""
    return get_registry().create(name, enabled=enabled, stream=stream, level=level)


def find(name: str) -> Optional[Logger]:
    """Look up a logger on the singleton registry."""
    return get_registry().find(name)


def get_logger(name: Optional[str] = None) -> Logger:
    """Return the named logger (created if needed), or the global one."""
    if name is None:
        return get_registry().global_logger
    return create(name)
