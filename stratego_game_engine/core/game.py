"""
Game manager for the Stratego game engine.
Owns the game session and gates every operation by phase.
"""

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from stratego_game_engine.core.board import Board, SETUP_ROWS, BOARD_SIZE, in_setup_zone
from stratego_game_engine.core.errors import InvalidSelection, InconsistentOutcome
from stratego_game_engine.core.game_state import Figure, GamePhase, Player, Rank, Status, Winner
from stratego_game_engine.core.moves import (
    Move, MoveOutcome, Placement,
    is_valid_field, is_selectable_own_figure, is_valid_destination, is_valid_opponent_move
)
from stratego_game_engine.core.phase_manager import PhaseManager, PhaseTrigger
from stratego_game_engine.core.resolver import ResolutionResult, apply_move
from stratego_game_engine.core.roster import RosterTracker, STANDARD_DEPLOYMENT
from stratego_game_engine.io.move_notation import format_move

logger = logging.getLogger(__name__)

LOCAL_PLAYER = Player.ONE
OPPONENT = Player.TWO


@dataclass
class MoveRecord:
    """One applied move, in move notation with its outcome tag."""
    player: Player
    line: str
    winner: Optional[Winner] = None  # set on the move that ended the game


class GameSession:
    """Everything one game owns: board, roster, captured batch and phase."""

    def __init__(self):
        self.board = Board()
        self.roster = RosterTracker()
        self.captured: List[Figure] = []
        self.phase = GamePhase.INITIAL
        self.history: List[MoveRecord] = []
        self.setup: List[Placement] = []  # local setup as confirmed


class Game:
    """Main game controller."""

    def __init__(self, session: Optional[GameSession] = None):
        self.session = session if session is not None else GameSession()
        self.last_winner: Optional[Winner] = None
        self.last_session: Optional[GameSession] = None

    @property
    def phase(self) -> GamePhase:
        return self.session.phase

    @property
    def board(self) -> Board:
        return self.session.board

    @property
    def roster(self) -> RosterTracker:
        return self.session.roster

    def begin_setup(self, placements: Iterable[Placement]) -> None:
        """
        Start (or regenerate) the local setup from a generated layout.

        Args:
            placements: 40 placements covering player one's rows 0-3

        Raises:
            PhaseViolation: Outside Initial or Setup
            InvalidSelection: A placement lies outside the setup rows
            InconsistentOutcome: Wrong number, duplicates or wrong composition
        """
        PhaseManager.check_operation(self.phase, "begin_setup")
        placements = list(placements)
        board = self._build_setup_board(placements)

        self.session.board = board
        self.session.roster = RosterTracker()
        self.session.captured.clear()
        self.session.history.clear()
        PhaseManager.advance_phase(self.session, PhaseTrigger.BEGIN_SETUP)
        logger.info(f"Setup placed: {len(placements)} figures")

    def _build_setup_board(self, placements: List[Placement]) -> Board:
        expected = sum(STANDARD_DEPLOYMENT.values())
        if len(placements) != expected:
            raise InconsistentOutcome(f"Setup has {len(placements)} figures, expected {expected}")

        seen = set()
        for placement in placements:
            if not in_setup_zone(LOCAL_PLAYER, placement.row, placement.col) \
                    or not is_valid_field(placement.row, placement.col):
                raise InvalidSelection(
                    f"Setup position ({placement.row}, {placement.col}) is outside the setup rows"
                )
            if (placement.row, placement.col) in seen:
                raise InconsistentOutcome(f"Setup position ({placement.row}, {placement.col}) used twice")
            seen.add((placement.row, placement.col))

        composition = Counter(placement.rank for placement in placements)
        if dict(composition) != STANDARD_DEPLOYMENT:
            raise InconsistentOutcome("Setup does not match the standard deployment")

        board = Board()
        for placement in placements:
            board.set(placement.row, placement.col, Figure(placement.rank, LOCAL_PLAYER))
        return board

    def swap_setup(self, row1: int, col1: int, row2: int, col2: int) -> None:
        """Exchange two of the local player's setup cells."""
        PhaseManager.check_operation(self.phase, "swap_setup")
        for row, col in ((row1, col1), (row2, col2)):
            if not in_setup_zone(LOCAL_PLAYER, row, col) or not is_valid_field(row, col):
                raise InvalidSelection(f"({row}, {col}) is not in the setup rows")
        self.board.swap(row1, col1, row2, col2)

    def confirm_setup(self, success: bool) -> bool:
        """
        Record the opponent's answer to the submitted setup.

        On success the opponent's rows are filled with Unknown figures,
        the roster is reset and the game moves to Playing.

        Returns:
            Whether the game is now in Playing
        """
        PhaseManager.check_operation(self.phase, "confirm_setup")
        if not success:
            logger.warning("Setup was not confirmed by the opponent")
            return False

        for row in SETUP_ROWS[OPPONENT]:
            for col in range(BOARD_SIZE):
                self.board.set(row, col, Figure(Rank.UNKNOWN, OPPONENT, Status.NONE))

        self.session.setup = [
            Placement(row, col, figure.rank) for (row, col), figure in self.board.figures_of(LOCAL_PLAYER)
        ]
        self.roster.reset()
        self.session.captured.clear()
        PhaseManager.advance_phase(self.session, PhaseTrigger.SETUP_CONFIRMED)
        return True

    def check_local_move(self, move: Move) -> None:
        """
        Validate a local move before it is submitted anywhere.

        Raises:
            PhaseViolation: Outside Playing
            InvalidSelection: The move is not a legal move
        """
        PhaseManager.check_operation(self.phase, "submit_move")
        if not is_selectable_own_figure(self.board, LOCAL_PLAYER, *move.start):
            raise InvalidSelection(f"{move}: not a legal move (start cannot be selected)")
        if not is_valid_destination(self.board, LOCAL_PLAYER, *move.start, *move.end):
            raise InvalidSelection(f"{move}: not a legal move (invalid destination)")

    def check_opponent_move(self, move: Move) -> None:
        PhaseManager.check_operation(self.phase, "submit_move")
        if not is_valid_opponent_move(self.board, OPPONENT, move):
            raise InvalidSelection(f"{move}: not a legal opponent move")

    def submit_move(
        self,
        move: Move,
        outcome: Optional[MoveOutcome] = None,
        player: Player = LOCAL_PLAYER
    ) -> ResolutionResult:
        """
        Apply a decided move.

        Args:
            move: The move
            outcome: Outcome reported by the arbiter. For a local move
                without combat it may be omitted.
            player: Side that made the move

        Returns:
            The resolution result
        """
        if player == LOCAL_PLAYER:
            self.check_local_move(move)
            if outcome is None:
                outcome = MoveOutcome.no_collision(self.board.get(*move.start).rank)
        else:
            self.check_opponent_move(move)
            if outcome is None:
                raise InconsistentOutcome(f"{move}: opponent move without an outcome")

        self.session.captured.clear()
        result = apply_move(self.board, self.roster, self.session.captured, move, outcome)
        self._record(player, result)
        return result

    def _record(self, player: Player, result: ResolutionResult) -> None:
        notation_outcome = MoveOutcome(
            attacker_rank=result.attacker.rank,
            defender_rank=result.defender.rank if result.defender is not None else None,
            attacker_survives=result.outcome.attacker_survives,
            defender_survives=result.outcome.defender_survives,
        )
        line = format_move(result.move, notation_outcome)
        self.session.history.append(MoveRecord(player, line))
        logger.info(f"P{player.value}: {line}")

    def end_game(self, winner: Optional[Winner]) -> GameSession:
        """
        End the game on the arbiter's game-over signal.

        The finished session is returned; the game starts over with a
        fresh session in Initial.
        """
        PhaseManager.check_operation(self.phase, "end_game")
        finished = self.session
        PhaseManager.advance_phase(finished, PhaseTrigger.GAME_OVER)
        self.last_winner = winner or Winner.UNKNOWN
        if finished.history:
            finished.history[-1].winner = self.last_winner
        self.last_session = finished
        self.session = GameSession()
        logger.info(PhaseManager.game_over_message(self.last_winner))
        return finished

    def abandon_game(self) -> None:
        """Drop the current game without a result."""
        PhaseManager.check_operation(self.phase, "abandon_game")
        PhaseManager.advance_phase(self.session, PhaseTrigger.ABANDON)
        self.session = GameSession()

    def captured_message(self) -> str:
        if not self.session.captured:
            return ""
        codes = " ".join(figure.rank.display_code for figure in self.session.captured)
        return f"Captured: {codes}"

    def standings(self) -> List[Tuple[Rank, int, int]]:
        return self.roster.standings()
