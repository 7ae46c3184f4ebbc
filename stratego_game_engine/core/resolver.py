"""
Resolution engine for the Stratego game engine.
Applies a decided move and its reported outcome to the board and roster.

The engine never decides combat itself. The arbiter's outcome is ground
truth; this module records it, infers ranks from it and keeps the
remaining-piece counters in step.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from stratego_game_engine.core.board import Board
from stratego_game_engine.core.errors import InvalidSelection, InconsistentOutcome
from stratego_game_engine.core.game_state import Figure, Rank, Status, Player
from stratego_game_engine.core.moves import Move, MoveOutcome, is_valid_field
from stratego_game_engine.core.roster import RosterTracker

logger = logging.getLogger(__name__)


@dataclass
class ResolutionResult:
    """Result of applying one move."""
    move: Move
    attacker: Figure
    defender: Optional[Figure]
    outcome: MoveOutcome
    captured: List[Figure] = field(default_factory=list)
    roster_changes: List[Tuple[Player, Rank, int]] = field(default_factory=list)  # (player, rank, new count)
    warnings: List[str] = field(default_factory=list)  # recoverable data-integrity problems


class CombatResolver:
    """Applies one move to a board, a roster and the shared captured batch."""

    def __init__(self, board: Board, roster: RosterTracker, captured: List[Figure]):
        self.board = board
        self.roster = roster
        self.captured = captured

    def resolve(self, move: Move, outcome: MoveOutcome) -> ResolutionResult:
        """
        Apply the move in five ordered steps.

        Everything that could reject the move is checked first, so a
        rejected move leaves board, roster and captured batch untouched.
        """
        attacker, defender = self._validate(move, outcome)
        result = ResolutionResult(move=move, attacker=attacker, defender=defender, outcome=outcome)

        # Step 1: attacker rank inference
        self._infer_attacker_rank(attacker, move, outcome, result)

        # Step 2: defender rank inference and detection of both combatants
        if defender is not None:
            self._reveal_combatants(attacker, defender, outcome, result)

        # Step 3: board mutation
        self._update_board(move, attacker, outcome)

        # Step 4: capture bookkeeping
        if outcome.collision:
            self._record_captures(attacker, defender, outcome, result)

        # Step 5: roster decrement
        if outcome.collision:
            self._update_roster(attacker, defender, outcome, result)

        return result

    def _validate(self, move: Move, outcome: MoveOutcome) -> Tuple[Figure, Optional[Figure]]:
        if not is_valid_field(*move.start) or not is_valid_field(*move.end):
            raise InvalidSelection(f"{move} touches an invalid field")
        if move.start == move.end:
            raise InvalidSelection(f"{move} does not leave its start cell")

        attacker = self.board.get(*move.start)
        if attacker is None:
            raise InvalidSelection(f"{move}: no figure at the start cell")

        defender = self.board.get(*move.end)
        if defender is not None and defender.player == attacker.player:
            raise InvalidSelection(f"{move}: destination holds a figure of the same player")

        if outcome.collision and defender is None:
            raise InconsistentOutcome(f"{move}: combat reported but the destination is empty")
        if not outcome.collision and defender is not None:
            raise InconsistentOutcome(f"{move}: destination is occupied but no combat was reported")
        if outcome.collision and outcome.attacker_survives and outcome.defender_survives:
            raise InconsistentOutcome(f"{move}: attacker and defender cannot both survive combat")
        if not outcome.collision and not outcome.attacker_survives:
            raise InconsistentOutcome(f"{move}: attacker lost without a defender")

        return attacker, defender

    def _warn(self, result: ResolutionResult, message: str) -> None:
        logger.warning(message)
        result.warnings.append(message)

    def _infer_attacker_rank(
        self,
        attacker: Figure,
        move: Move,
        outcome: MoveOutcome,
        result: ResolutionResult
    ) -> None:
        reported = outcome.attacker_rank
        if attacker.rank == Rank.UNKNOWN:
            if reported is not None and reported.is_known:
                attacker.rank = reported
                attacker.update_status(Status.DETECTED)
                logger.debug(f"Attacker at {move.start} revealed as {reported.value}")
            elif move.distance > 1:
                # Only a Scout moves more than one square
                attacker.rank = Rank.SCOUT
                attacker.update_status(Status.DETECTED)
                logger.debug(f"Attacker at {move.start} inferred as Scout from a {move.distance}-square move")
        elif reported is not None and reported.is_known and reported != attacker.rank:
            self._warn(
                result,
                f"Reported attacker rank {reported.value} contradicts known rank "
                f"{attacker.rank.value} at {move.start}; keeping {attacker.rank.value}"
            )

    def _reveal_combatants(
        self,
        attacker: Figure,
        defender: Figure,
        outcome: MoveOutcome,
        result: ResolutionResult
    ) -> None:
        reported = outcome.defender_rank
        if reported is not None and reported.is_known:
            if defender.rank == Rank.UNKNOWN:
                defender.rank = reported
            elif defender.rank != reported:
                self._warn(
                    result,
                    f"Reported defender rank {reported.value} contradicts known rank "
                    f"{defender.rank.value}; keeping {defender.rank.value}"
                )

        # Combat reveals both participants, even if already known
        attacker.update_status(Status.DETECTED)
        defender.update_status(Status.DETECTED)

    def _update_board(self, move: Move, attacker: Figure, outcome: MoveOutcome) -> None:
        if outcome.attacker_survives:
            self.board.set(*move.end, attacker)
            attacker.update_status(Status.MOVED)
        elif not outcome.defender_survives:
            self.board.set(*move.end, None)

        self.board.set(*move.start, None)

    def _record_captures(
        self,
        attacker: Figure,
        defender: Figure,
        outcome: MoveOutcome,
        result: ResolutionResult
    ) -> None:
        if not outcome.attacker_survives:
            self.captured.append(attacker)
            result.captured.append(attacker)
        if not outcome.defender_survives:
            self.captured.append(defender)
            result.captured.append(defender)
        if result.captured:
            logger.debug(f"Captured: {result.captured}")

    def _update_roster(
        self,
        attacker: Figure,
        defender: Figure,
        outcome: MoveOutcome,
        result: ResolutionResult
    ) -> None:
        if outcome.attacker_survives:
            self._decrement(defender, result)
        elif outcome.defender_survives:
            self._decrement(attacker, result)
        else:
            self._decrement(attacker, result)
            self._decrement(defender, result)

    def _decrement(self, figure: Figure, result: ResolutionResult) -> None:
        if figure.rank == Rank.UNKNOWN:
            self._warn(
                result,
                f"Cannot update roster of player {figure.player.value}: removed figure's rank is unknown"
            )
            return

        count = self.roster.decrement(figure.player, figure.rank)
        result.roster_changes.append((figure.player, figure.rank, count))
        if count < 0:
            self._warn(
                result,
                f"Roster of player {figure.player.value} went negative for {figure.rank.value} ({count})"
            )


def apply_move(
    board: Board,
    roster: RosterTracker,
    captured: List[Figure],
    move: Move,
    outcome: MoveOutcome
) -> ResolutionResult:
    """Apply a decided move and its outcome. See CombatResolver.resolve."""
    return CombatResolver(board, roster, captured).resolve(move, outcome)
