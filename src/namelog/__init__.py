"""
namelog — named loggers with global and per-logger enablement.

Callers obtain a Logger by name, attach one stream, set a threshold, and
emit. Each call is forwarded only when the logger (or the whole process)
is enabled, the call's level meets the threshold, and no other logger
holds exclusivity.

Public API:
    Registry         — name -> Logger table plus shared state
    init_registry    — replace the singleton registry
    get_registry     — access the singleton registry
    create           — create-or-get a logger on the singleton
    find             — look up a logger on the singleton (None if missing)
    get_logger       — named logger, or the 'global' default
    Logger           — named, filterable logger
    Levels           — validated name -> rank table
    Payload          — record delivered to a stream
    ConsoleStream    — default stdout/stderr stream
    configure_from_env — apply NAMELOG settings from the environment
"""

from ._version import __version__, __app_name__
from .errors import (
    NamelogError, NotFound, ExclusivityDenied, SinkUnavailable,
    InvalidLevel, ConfigError,
)
from .levels import Levels, DEFAULT_LEVELS, LOG, INFO, WARN, ERROR
from .state import GlobalState
from .streams import Payload, Stream, ConsoleStream, format_payload
from .logger import Logger
from .registry import (
    Registry, init_registry, get_registry, create, find, get_logger,
)
from .config import (
    LoggerSpec, parse_logger_spec, configure, configure_from_env,
    load_config, init_from_config,
)

__all__ = [
    '__version__', '__app_name__',
    'NamelogError', 'NotFound', 'ExclusivityDenied', 'SinkUnavailable',
    'InvalidLevel', 'ConfigError',
    'Levels', 'DEFAULT_LEVELS', 'LOG', 'INFO', 'WARN', 'ERROR',
    'GlobalState',
    'Payload', 'Stream', 'ConsoleStream', 'format_payload',
    'Logger',
    'Registry', 'init_registry', 'get_registry', 'create', 'find', 'get_logger',
    'LoggerSpec', 'parse_logger_spec', 'configure', 'configure_from_env',
    'load_config', 'init_from_config',
]
