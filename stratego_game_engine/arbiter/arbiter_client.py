"""
Abstract base class for arbiter clients.
"""

from abc import ABC, abstractmethod
from typing import List

from stratego_game_engine.core.game_state import Rank
from stratego_game_engine.core.moves import Move, MoveResponse, Placement


class TransportError(Exception):
    """Raised by an arbiter client when an exchange did not complete."""
    pass


class ArbiterClient(ABC):
    """
    Abstract base class for arbiter clients.

    The arbiter is the remote authority that generates setups, decides
    combat and plays the opponent. Clients only marshal requests and
    answers; they never touch engine state.
    """

    @abstractmethod
    def generate_setup(self) -> List[Placement]:
        """
        Ask the arbiter for a setup of the local player's 40 figures.

        Raises:
            TransportError: If the exchange did not complete
        """
        pass

    @abstractmethod
    def confirm_setup(self, placements: List[Placement]) -> bool:
        """
        Submit the final setup.

        Returns:
            Whether the opponent accepted the setup
        """
        pass

    @abstractmethod
    def submit_move(self, move: Move, rank: Rank) -> MoveResponse:
        """
        Submit a local move.

        Args:
            move: The decided move
            rank: Rank of the moving figure

        Returns:
            The arbiter's answer. success is False when the arbiter
            rejects the move.
        """
        pass

    @abstractmethod
    def request_opponent_move(self) -> MoveResponse:
        """Fetch the opponent's decided move and its outcome."""
        pass

    @abstractmethod
    def get_name(self) -> str:
        pass
