"""
Severity level table for namelog.

Levels are plain name -> integer rank pairs. The emit rule is:

    call.rank >= logger.threshold  ->  message is shown

Several names may share one rank (``log`` and ``info`` are aliases).

Level assignments (default set):
    ←── quieter ─────────── louder ──→
     1            2      3
     log/info     warn   error
"""

from typing import Dict, Iterator, List, Mapping, Optional, Tuple, Union

from .errors import InvalidLevel


# Default ranks, for readability at call sites
LOG = 1
INFO = 1
WARN = 2
ERROR = 3


LevelLike = Union[str, int, None]


class Levels:
    """Immutable, ordered name -> rank table.

    Validated once at construction; malformed tables raise InvalidLevel
    so a bad configuration never reaches a runtime comparison.

    Usage::

        levels = Levels({'debug': 0, 'info': 1, 'error': 5})
        levels.rank('info')       # 1
        levels.resolve(None)      # 0 (lowest)
        levels.name_for(5)        # 'error'
    """

    def __init__(self, mapping: Mapping[str, int]):
        if not mapping:
            raise InvalidLevel("level table must not be empty")
        table: Dict[str, int] = {}
        for name, rank in mapping.items():
            if not isinstance(name, str) or not name.isidentifier():
                raise InvalidLevel(f"level name must be an identifier: {name!r}")
            if isinstance(rank, bool) or not isinstance(rank, int):
                raise InvalidLevel(f"rank for {name!r} must be an int, got {rank!r}")
            table[name] = rank
        # Sorted by rank; insertion order breaks ties so aliases keep
        # their declared order.
        self._table = dict(sorted(table.items(), key=lambda kv: kv[1]))

    @classmethod
    def coerce(cls, levels: Union['Levels', Mapping[str, int], None]) -> 'Levels':
        """Return a Levels for ``levels`` (None means the default set)."""
        if levels is None:
            return DEFAULT_LEVELS
        if isinstance(levels, Levels):
            return levels
        if isinstance(levels, Mapping):
            return cls(levels)
        raise InvalidLevel(f"not a level table: {levels!r}")

    def rank(self, name: str) -> int:
        """Look up the rank of a level name."""
        try:
            return self._table[name]
        except (KeyError, TypeError):
            raise InvalidLevel(f"unknown level: {name!r}") from None

    def resolve(self, level: LevelLike) -> int:
        """Turn a level name, rank, or None into a rank.

        None resolves to the lowest configured rank. Integer ranks are
        accepted as-is, even if no name carries them.
        """
        if level is None:
            return self.lowest
        if isinstance(level, bool):
            raise InvalidLevel(f"not a level: {level!r}")
        if isinstance(level, int):
            return level
        if isinstance(level, str):
            return self.rank(level)
        raise InvalidLevel(f"not a level: {level!r}")

    def name_for(self, rank: int) -> Optional[str]:
        """Return the first name carrying ``rank``, or None."""
        for name, value in self._table.items():
            if value == rank:
                return name
        return None

    @property
    def lowest(self) -> int:
        return next(iter(self._table.values()))

    @property
    def highest(self) -> int:
        return next(reversed(self._table.values()))

    def names(self) -> List[str]:
        return list(self._table)

    def items(self) -> List[Tuple[str, int]]:
        return list(self._table.items())

    def __contains__(self, name) -> bool:
        return name in self._table

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def __eq__(self, other) -> bool:
        if isinstance(other, Levels):
            return self._table == other._table
        return NotImplemented

    def __hash__(self) -> int:
        return hash(tuple(self._table.items()))

    def __repr__(self) -> str:
        return f"Levels({self._table!r})"


DEFAULT_LEVELS = Levels({'log': LOG, 'info': INFO, 'warn': WARN, 'error': ERROR})
