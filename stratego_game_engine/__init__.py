"""
Stratego Game Engine
Game-state engine for a two-player hidden-information Stratego game,
driven move by move by a remote arbiter.
"""

from stratego_game_engine.core.game_state import Rank, Status, Player, GamePhase, Winner, Figure, parse_rank
from stratego_game_engine.core.board import Board, BOARD_SIZE, LAKE_CELLS
from stratego_game_engine.core.errors import EngineError, PhaseViolation, InvalidSelection, InconsistentOutcome
from stratego_game_engine.core.moves import (
    Move, MoveOutcome, MoveResponse, Placement,
    is_valid_field, is_selectable_own_figure, is_valid_destination, legal_destinations
)
from stratego_game_engine.core.resolver import ResolutionResult, apply_move
from stratego_game_engine.core.roster import RosterTracker, STANDARD_DEPLOYMENT
from stratego_game_engine.core.phase_manager import PhaseManager
from stratego_game_engine.core.game import Game, GameSession, MoveRecord
from stratego_game_engine.io.move_notation import parse_move_line, format_move
from stratego_game_engine.io.setup_codec import encode_setup, decode_setup
from stratego_game_engine.io.yaml_moves import YAMLMatchLoader

__version__ = "1.0.0"
__all__ = [
    'Rank', 'Status', 'Player', 'GamePhase', 'Winner', 'Figure', 'parse_rank',
    'Board', 'BOARD_SIZE', 'LAKE_CELLS',
    'EngineError', 'PhaseViolation', 'InvalidSelection', 'InconsistentOutcome',
    'Move', 'MoveOutcome', 'MoveResponse', 'Placement',
    'is_valid_field', 'is_selectable_own_figure', 'is_valid_destination', 'legal_destinations',
    'ResolutionResult', 'apply_move',
    'RosterTracker', 'STANDARD_DEPLOYMENT',
    'PhaseManager',
    'Game', 'GameSession', 'MoveRecord',
    'parse_move_line', 'format_move',
    'encode_setup', 'decode_setup',
    'YAMLMatchLoader'
]
