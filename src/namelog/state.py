"""
Process-wide enablement state shared by every logger of a registry.

Holds the ``enabled_all`` flag and the exclusivity claim. Callers are
expected to hold the owning registry's lock around mutations.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .logger import Logger


class GlobalState:
    """Global enable flag plus at most one exclusive logger."""

    def __init__(self, enabled_all: bool = False):
        self.enabled_all = enabled_all
        self._only: Optional['Logger'] = None

    @property
    def only(self) -> Optional['Logger']:
        """The logger currently holding exclusivity, if any."""
        return self._only

    def claim(self, logger: 'Logger') -> bool:
        """Give ``logger`` exclusivity if nobody holds it.

        First claim wins: there is no transfer and no stacking.
        Returns True when ``logger`` holds exclusivity afterwards.
        """
        if self._only is None:
            self._only = logger
        return self._only is logger

    def release(self) -> None:
        """Clear exclusivity, whoever held it."""
        self._only = None

    def admits(self, logger: 'Logger') -> bool:
        """True unless another logger holds exclusivity."""
        return self._only is None or self._only is logger

    def __repr__(self) -> str:
        holder = self._only.name if self._only is not None else None
        return f"GlobalState(enabled_all={self.enabled_all}, only={holder!r})"
