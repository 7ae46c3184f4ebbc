"""
Gamemaster module for orchestrating Stratego games against an arbiter.
"""

from stratego_game_engine.gamemaster.gamemaster import Gamemaster, RequestInProgressError, TurnResult
from stratego_game_engine.gamemaster.move_writer import MoveWriter

__all__ = ['Gamemaster', 'RequestInProgressError', 'TurnResult', 'MoveWriter']
