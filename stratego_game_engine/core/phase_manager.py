"""
Phase manager for handling game phase transitions and operation gating.
"""

from enum import Enum
from typing import Dict, List, Optional, Tuple
import logging

from stratego_game_engine.core.errors import PhaseViolation
from stratego_game_engine.core.game_state import GamePhase, Winner

logger = logging.getLogger(__name__)


class PhaseTrigger(Enum):
    """Events from the collaborator that move the game between phases."""
    BEGIN_SETUP = "begin_setup"
    SETUP_CONFIRMED = "setup_confirmed"
    GAME_OVER = "game_over"
    ABANDON = "abandon"


# Phase rules: which operations are allowed in which phase
PHASE_ALLOWED_OPERATIONS: Dict[GamePhase, List[str]] = {
    GamePhase.INITIAL: ["begin_setup"],
    GamePhase.SETUP: ["begin_setup", "swap_setup", "confirm_setup"],
    GamePhase.PLAYING: ["submit_move", "end_game", "abandon_game"],
}

# Setup may be regenerated while in Setup; Playing only goes back to Initial
PHASE_TRANSITIONS: Dict[Tuple[GamePhase, PhaseTrigger], GamePhase] = {
    (GamePhase.INITIAL, PhaseTrigger.BEGIN_SETUP): GamePhase.SETUP,
    (GamePhase.SETUP, PhaseTrigger.BEGIN_SETUP): GamePhase.SETUP,
    (GamePhase.SETUP, PhaseTrigger.SETUP_CONFIRMED): GamePhase.PLAYING,
    (GamePhase.PLAYING, PhaseTrigger.GAME_OVER): GamePhase.INITIAL,
    (GamePhase.PLAYING, PhaseTrigger.ABANDON): GamePhase.INITIAL,
}

GAME_OVER_MESSAGES: Dict[Winner, str] = {
    Winner.PLAYER: "Game Over - You win!",
    Winner.OPPONENT: "Game Over - You lose!",
    Winner.TIED: "Game Over - The game is a tie.",
}


class PhaseManager:
    """Gates operations by phase and performs phase transitions."""

    @staticmethod
    def is_allowed(phase: GamePhase, operation: str) -> bool:
        return operation in PHASE_ALLOWED_OPERATIONS.get(phase, [])

    @staticmethod
    def check_operation(phase: GamePhase, operation: str) -> None:
        """
        Validate that an operation is allowed in the given phase.

        Raises:
            PhaseViolation: If the phase does not permit the operation
        """
        if not PhaseManager.is_allowed(phase, operation):
            raise PhaseViolation(operation, phase, PHASE_ALLOWED_OPERATIONS.get(phase, []))

    @staticmethod
    def determine_next_phase(phase: GamePhase, trigger: PhaseTrigger) -> GamePhase:
        """
        Determine the phase reached from the current phase on a trigger.

        Args:
            phase: Current phase
            trigger: The collaborator event

        Returns:
            The next phase

        Raises:
            PhaseViolation: If the trigger is not valid in the current phase
        """
        next_phase = PHASE_TRANSITIONS.get((phase, trigger))
        if next_phase is None:
            allowed = [t.value for (p, t) in PHASE_TRANSITIONS if p == phase]
            raise PhaseViolation(trigger.value, phase, allowed)
        return next_phase

    @staticmethod
    def advance_phase(session, trigger: PhaseTrigger) -> GamePhase:
        """
        Move a session to the phase reached on a trigger.

        Args:
            session: Object with a mutable `phase` attribute
            trigger: The collaborator event

        Returns:
            The new phase
        """
        next_phase = PhaseManager.determine_next_phase(session.phase, trigger)
        logger.info(f"Advancing from {session.phase.name} to {next_phase.name} on {trigger.value}")
        session.phase = next_phase
        return next_phase

    @staticmethod
    def game_over_message(winner: Optional[Winner]) -> str:
        return GAME_OVER_MESSAGES.get(winner, "Game Over!")
