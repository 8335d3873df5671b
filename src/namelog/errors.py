"""
Named outcomes for namelog.

Filtering is always silent. These exceptions cover the cases that are
worth naming: lookups that miss, exclusivity claims that lose, writes
with nowhere to go (strict mode only), and malformed configuration.
"""


class NamelogError(Exception):
    """Base class for all namelog errors."""


class NotFound(NamelogError, KeyError):
    """No logger is registered under the requested name."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"no logger named {self.name!r}"


class ExclusivityDenied(NamelogError):
    """only() was called while another logger holds exclusivity."""

    def __init__(self, requester: str, holder: str):
        super().__init__(f"only() denied for {requester!r} (held by {holder!r})")
        self.requester = requester
        self.holder = holder


class SinkUnavailable(NamelogError):
    """An emittable message was written by a logger with no stream."""

    def __init__(self, name: str, level: int):
        super().__init__(f"{name!r} has no stream; dropped level {level}")
        self.name = name
        self.level = level


class InvalidLevel(NamelogError, ValueError):
    """A level name or level table is unknown or not comparable."""


class ConfigError(NamelogError, ValueError):
    """A logger spec or config document is malformed."""
