"""
Per-player remaining-piece counters.
"""

import logging
from typing import Dict, List, Tuple

from stratego_game_engine.core.game_state import Rank, Player

logger = logging.getLogger(__name__)


# Fixed deployment, 40 pieces per side
STANDARD_DEPLOYMENT: Dict[Rank, int] = {
    Rank.FLAG: 1,
    Rank.SPY: 1,
    Rank.SCOUT: 8,
    Rank.MINER: 5,
    Rank.FOUR: 4,
    Rank.FIVE: 4,
    Rank.SIX: 4,
    Rank.SEVEN: 3,
    Rank.EIGHT: 2,
    Rank.NINE: 1,
    Rank.MARSHAL: 1,
    Rank.BOMB: 6,
}

# Row order of the remaining-pieces table (the flag is never listed)
STANDINGS_ORDER: List[Rank] = [
    Rank.MARSHAL,
    Rank.NINE,
    Rank.EIGHT,
    Rank.SEVEN,
    Rank.SIX,
    Rank.FIVE,
    Rank.FOUR,
    Rank.MINER,
    Rank.SCOUT,
    Rank.SPY,
    Rank.BOMB,
]


class RosterTracker:
    """Remaining-piece counts by rank for both players."""

    def __init__(self):
        self.counters: Dict[Player, Dict[Rank, int]] = {}
        self.reset()

    def reset(self) -> None:
        """Reinitialize both players' counters to the standard deployment."""
        self.counters = {player: dict(STANDARD_DEPLOYMENT) for player in Player}

    def remaining(self, player: Player, rank: Rank) -> int:
        return self.counters[player].get(rank, 0)

    def total(self, player: Player) -> int:
        return sum(self.counters[player].values())

    def decrement(self, player: Player, rank: Rank) -> int:
        """
        Remove one piece of the given rank. Counters are not clamped,
        so a negative result means the reported outcomes were inconsistent.

        Returns:
            The new count
        """
        if rank not in STANDARD_DEPLOYMENT:
            raise ValueError(f"Rank {rank.value} is not tracked by the roster")
        count = self.counters[player][rank] - 1
        self.counters[player][rank] = count
        logger.debug(f"Roster P{player.value} {rank.value}: {count} remaining")
        return count

    def standings(self) -> List[Tuple[Rank, int, int]]:
        """Rows of (rank, player one count, player two count) in table order."""
        return [
            (rank, self.remaining(Player.ONE, rank), self.remaining(Player.TWO, rank))
            for rank in STANDINGS_ORDER
        ]
