"""
Configuration for namelog: logger specs, environment, JSON files.

Logger spec syntax (compact, positional):
    NAME:LEVEL:STATE

    Examples:
        svc             # create 'svc' with defaults
        svc:warn        # threshold warn
        svc:2           # threshold rank 2
        svc::off        # default threshold, disabled
        db:error:on     # threshold error, enabled

Environment:
    NAMELOG              comma-separated logger specs
    NAMELOG_ENABLE_ALL   truthy value turns enabled_all on

JSON config file::

    {
        "levels": {"debug": 0, "info": 1, "warn": 2, "error": 3},
        "default_enabled": true,
        "strict": false,
        "enable_all": false,
        "loggers": {"svc": {"level": "warn", "enabled": true}}
    }
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from .errors import ConfigError, InvalidLevel
from .registry import Registry, get_registry, init_registry


ENV_SPECS = 'NAMELOG'
ENV_ENABLE_ALL = 'NAMELOG_ENABLE_ALL'

_TRUE = {'1', 'on', 'true', 'yes'}
_FALSE = {'0', 'off', 'false', 'no'}


@dataclass
class LoggerSpec:
    """Requested settings for one logger. None means 'leave as is'."""
    name: str
    level: Union[str, int, None] = None
    enabled: Optional[bool] = None


def parse_flag(value: str) -> bool:
    """Parse an on/off style flag. Raises ConfigError if unrecognized."""
    text = value.strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ConfigError(f"not an on/off value: {value!r}")


def _parse_level(text: str) -> Union[str, int]:
    try:
        return int(text)
    except ValueError:
        return text


def parse_logger_spec(spec: str) -> LoggerSpec:
    """Parse a logger spec string into a LoggerSpec.

    Empty slots use :: (empty between colons). Level names are not
    checked here; that happens when the spec is applied to a registry.

    Args:
        spec: Logger spec string like "svc:warn" or "svc::off"

    Returns:
        LoggerSpec with parsed values

    Raises:
        ConfigError: on a missing name, too many slots, or a bad flag
    """
    parts = spec.strip().split(':')
    if len(parts) > 3:
        raise ConfigError(f"too many fields in logger spec: {spec!r}")

    name = parts[0].strip()
    if not name:
        raise ConfigError(f"logger spec has no name: {spec!r}")

    level = None
    enabled = None
    if len(parts) > 1 and parts[1].strip():
        level = _parse_level(parts[1].strip())
    if len(parts) > 2 and parts[2].strip():
        enabled = parse_flag(parts[2])

    return LoggerSpec(name=name, level=level, enabled=enabled)


def parse_logger_specs(text: str) -> List[LoggerSpec]:
    """Parse a comma-separated list of logger specs, skipping blanks."""
    return [parse_logger_spec(chunk) for chunk in text.split(',') if chunk.strip()]


def configure(registry: Registry, specs: Iterable[Union[LoggerSpec, str]]) -> Registry:
    """Apply logger specs to a registry.

    Missing loggers are created first; then level and enabled flag are
    set wherever the spec gives them, so existing loggers are updated too.

    Raises:
        InvalidLevel: if a spec names an unknown level
    """
    for spec in specs:
        if isinstance(spec, str):
            spec = parse_logger_spec(spec)
        logger = registry.create(spec.name, enabled=spec.enabled, level=spec.level)
        if spec.level is not None:
            logger.level(spec.level)
        if spec.enabled is True:
            logger.enable()
        elif spec.enabled is False:
            logger.disable()
    return registry


def configure_from_env(registry: Registry = None,
                       environ: Mapping[str, str] = None) -> Registry:
    """Apply NAMELOG / NAMELOG_ENABLE_ALL to a registry.

    Args:
        registry: Target registry (default: the singleton)
        environ: Environment mapping (default: os.environ)

    Returns:
        The configured registry
    """
    registry = registry if registry is not None else get_registry()
    environ = environ if environ is not None else os.environ

    specs = environ.get(ENV_SPECS, '')
    if specs.strip():
        configure(registry, parse_logger_specs(specs))

    flag = environ.get(ENV_ENABLE_ALL, '')
    if flag.strip():
        if parse_flag(flag):
            registry.global_logger.enable_all()
        else:
            registry.global_logger.disable_all()
    return registry


def load_config(path) -> Dict[str, Any]:
    """Load a JSON config file, returning empty dict on error."""
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def _bool_setting(data: Dict[str, Any], key: str, default: bool) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise ConfigError(f"{key!r} must be a boolean, got {value!r}")
    return value


def _logger_specs(loggers: Any) -> List[LoggerSpec]:
    if not isinstance(loggers, dict):
        raise ConfigError("'loggers' must be an object")
    specs = []
    for name, options in loggers.items():
        if options is None:
            options = {}
        if not isinstance(options, dict):
            raise ConfigError(f"options for logger {name!r} must be an object")
        enabled = options.get('enabled')
        if enabled is not None and not isinstance(enabled, bool):
            raise ConfigError(f"'enabled' for logger {name!r} must be a boolean")
        specs.append(LoggerSpec(name=name, level=options.get('level'), enabled=enabled))
    return specs


def init_from_config(path: Union[str, Path], environ: Mapping[str, str] = None) -> Registry:
    """Build the singleton registry from a JSON config file.

    Environment settings are applied after the file, so NAMELOG wins
    over the file's "loggers" section for the same logger.

    Raises:
        InvalidLevel: if the "levels" table is malformed
        ConfigError: if another section has the wrong shape
    """
    data = load_config(path)

    levels = data.get('levels')
    if levels is not None and not isinstance(levels, dict):
        raise InvalidLevel("'levels' must be an object of name -> rank")

    registry = init_registry(
        levels=levels,
        default_enabled=_bool_setting(data, 'default_enabled', True),
        strict=_bool_setting(data, 'strict', False),
    )
    if _bool_setting(data, 'enable_all', False):
        registry.global_logger.enable_all()
    if 'loggers' in data:
        configure(registry, _logger_specs(data['loggers']))

    return configure_from_env(registry, environ)
