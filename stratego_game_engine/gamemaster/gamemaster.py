"""
Main Gamemaster orchestrator for running Stratego games against an arbiter.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, TypeVar

from stratego_game_engine.arbiter.arbiter_client import ArbiterClient, TransportError
from stratego_game_engine.core.errors import EngineError, InconsistentOutcome
from stratego_game_engine.core.game import Game, LOCAL_PLAYER, OPPONENT
from stratego_game_engine.core.game_state import GamePhase, Winner
from stratego_game_engine.core.moves import Move, MoveResponse
from stratego_game_engine.core.resolver import ResolutionResult

logger = logging.getLogger(__name__)

T = TypeVar('T')


class RequestInProgressError(EngineError):
    """Raised when a committing request is started while another is outstanding."""
    pass


@dataclass
class TurnResult:
    """What happened during one local turn."""
    accepted: bool
    local: Optional[ResolutionResult] = None
    opponent: Optional[ResolutionResult] = None
    winner: Optional[Winner] = None

    @property
    def game_over(self) -> bool:
        return self.winner is not None


class Gamemaster:
    """Orchestrates a complete game between the local engine and an arbiter."""

    def __init__(self, arbiter: ArbiterClient, game: Optional[Game] = None, max_attempts: int = 3):
        """
        Initialize Gamemaster.

        Args:
            arbiter: Client for the remote arbiter
            game: Game to drive (a new one by default)
            max_attempts: Attempts per arbiter exchange before giving up
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        self.arbiter = arbiter
        self.game = game if game is not None else Game()
        self.max_attempts = max_attempts
        self.request_in_progress = False
        self.pending_opponent_reply = False

        logger.info(f"Gamemaster initialized with arbiter '{arbiter.get_name()}'")

    def _exchange(self, description: str, call: Callable[[], T]) -> T:
        """
        Run one arbiter exchange with bounded retry.

        Nothing in the engine is touched here; callers apply the answer
        only after it has arrived.
        """
        for attempt in range(1, self.max_attempts + 1):
            try:
                return call()
            except TransportError as e:
                logger.warning(f"{description} failed (attempt {attempt}/{self.max_attempts}): {e}")

        logger.error(f"{description} failed after {self.max_attempts} attempts")
        raise TransportError(f"{description} failed after {self.max_attempts} attempts")

    def _begin_request(self, resuming: bool = False) -> None:
        if self.request_in_progress:
            raise RequestInProgressError("A request to the arbiter is already in progress")
        if self.pending_opponent_reply and not resuming:
            raise RequestInProgressError("The opponent reply is still outstanding; call resume_opponent_move() first")
        self.request_in_progress = True

    def start_game(self) -> bool:
        """
        Generate, place and confirm the local setup.

        Returns:
            Whether the game reached the Playing phase
        """
        self._begin_request()
        try:
            placements = self._exchange("generate_setup", self.arbiter.generate_setup)
            self.game.begin_setup(placements)
            confirmed = self._exchange("confirm_setup", lambda: self.arbiter.confirm_setup(placements))
        finally:
            self.request_in_progress = False

        return self.game.confirm_setup(confirmed)

    def play_turn(self, move: Move) -> TurnResult:
        """
        Play one local move and, unless the game ended, the opponent's reply.

        Raises:
            RequestInProgressError: If another request or an opponent reply is outstanding
            PhaseViolation: Outside Playing
            InvalidSelection: The move fails local validation
            TransportError: An exchange exhausted its retry budget
        """
        self._begin_request()
        try:
            return self._play_turn(move)
        finally:
            self.request_in_progress = False

    def _play_turn(self, move: Move) -> TurnResult:
        self.game.check_local_move(move)
        rank = self.game.board.get(*move.start).rank

        response = self._exchange("submit_move", lambda: self.arbiter.submit_move(move, rank))
        if not response.success:
            logger.warning(f"Invalid move. {move} was rejected by the arbiter")
            return TurnResult(accepted=False)

        turn = TurnResult(accepted=True)
        turn.local = self.game.submit_move(move, response.outcome, LOCAL_PLAYER)
        if response.game_over:
            turn.winner = self._end_game(response)
            return turn

        self.pending_opponent_reply = True
        self._apply_opponent_move(turn)
        return turn

    def resume_opponent_move(self) -> TurnResult:
        """
        Fetch and apply the opponent reply of a turn whose reply exchange
        failed. The local half of that turn is already applied.

        Raises:
            EngineError: If no opponent reply is outstanding
            TransportError: The exchange exhausted its retry budget again
        """
        if not self.pending_opponent_reply:
            raise EngineError("No opponent reply is outstanding")

        self._begin_request(resuming=True)
        try:
            logger.info("Resuming the outstanding opponent reply")
            turn = TurnResult(accepted=True)
            self._apply_opponent_move(turn)
            return turn
        finally:
            self.request_in_progress = False

    def _apply_opponent_move(self, turn: TurnResult) -> None:
        reply = self._exchange("request_opponent_move", self.arbiter.request_opponent_move)
        self.pending_opponent_reply = False
        if not reply.success or reply.move is None:
            raise InconsistentOutcome("Arbiter did not deliver an opponent move")

        turn.opponent = self.game.submit_move(reply.move, reply.outcome, OPPONENT)
        if reply.game_over:
            turn.winner = self._end_game(reply)

    def _end_game(self, response: MoveResponse) -> Winner:
        winner = response.winner or Winner.UNKNOWN
        self.game.end_game(winner)
        return winner

    def run(self, moves: Iterable[Move]) -> Optional[Winner]:
        """
        Run a complete game from a sequence of local moves.

        Returns:
            The winner, or None if the moves ran out before the game ended
        """
        logger.info("=" * 60)
        logger.info(f"STARTING GAME against {self.arbiter.get_name()}")
        logger.info("=" * 60)

        if not self.start_game():
            logger.warning("Setup was not confirmed; game did not start")
            return None

        for move in moves:
            if self.game.phase != GamePhase.PLAYING:
                break
            turn = self.play_turn(move)
            if turn.game_over:
                logger.info(f"GAME OVER - {turn.winner.value}")
                return turn.winner

        logger.info("Moves exhausted before the game ended")
        return None
