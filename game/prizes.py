"""
Prize table - prize amounts and fireproof (guaranteed) levels.
"""
from dataclasses import dataclass
from typing import Iterable, Tuple

PRIZES: Tuple[int, ...] = (
    100, 200, 300, 500, 1000,
    2000, 4000, 8000, 16000, 32000,
    64000, 125000, 250000, 500000, 1000000,
)
FIREPROOF_LEVELS = frozenset({4, 9})


@dataclass(frozen=True)
class PrizeLevel:
    """One row of the prize table."""
    level: int
    prize: int
    fireproof: bool


class PrizeTable:
    """Immutable mapping from level to prize and fireproof flag."""

    def __init__(self, prizes: Iterable[int], fireproof_levels: Iterable[int]):
        prizes = tuple(prizes)
        fireproof_levels = frozenset(fireproof_levels)
        if not prizes:
            raise ValueError("Prize table must have at least one level")
        if any(lvl < 0 or lvl >= len(prizes) for lvl in fireproof_levels):
            raise ValueError(f"Fireproof levels out of range: {sorted(fireproof_levels)}")

        self.levels: Tuple[PrizeLevel, ...] = tuple(
            PrizeLevel(level=lvl, prize=prize, fireproof=lvl in fireproof_levels)
            for lvl, prize in enumerate(prizes)
        )
        # floors[i] is the largest fireproof prize at or below level i
        floors = []
        floor = 0
        for row in self.levels:
            if row.fireproof:
                floor = row.prize
            floors.append(floor)
        self._floors = tuple(floors)

    def __len__(self) -> int:
        return len(self.levels)

    @property
    def last_level(self) -> int:
        return len(self.levels) - 1

    def prize_for(self, level: int) -> int:
        """Cumulative prize for completing ``level``; 0 below level 0."""
        if level < 0:
            return 0
        return self.levels[min(level, self.last_level)].prize

    def fireproof_prize_below(self, level: int) -> int:
        """Largest fireproof prize at or below ``level``, 0 if none reached."""
        if level < 0:
            return 0
        return self._floors[min(level, self.last_level)]

    def is_last_level(self, level: int) -> bool:
        return level == self.last_level


PRIZE_TABLE = PrizeTable(PRIZES, FIREPROOF_LEVELS)
