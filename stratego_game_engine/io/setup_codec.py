"""
Compact setup file format.

A setup is written as the local player's cell coordinates grouped by
rank: for each rank in SETUP_RANK_ORDER, two characters chr(col) and
chr(row) per figure, scanning rows 3 down to 0 and columns left to right.
The deployment counts tell the reader where each group ends.
"""

import logging
from typing import List

from stratego_game_engine.core.board import Board, BOARD_SIZE, SETUP_ROWS
from stratego_game_engine.core.errors import InconsistentOutcome
from stratego_game_engine.core.game_state import Player, Rank
from stratego_game_engine.core.moves import Placement
from stratego_game_engine.core.roster import STANDARD_DEPLOYMENT

logger = logging.getLogger(__name__)

SETUP_RANK_ORDER: List[Rank] = [
    Rank.FLAG,
    Rank.SPY,
    Rank.MARSHAL,
    Rank.NINE,
    Rank.EIGHT,
    Rank.SEVEN,
    Rank.SIX,
    Rank.FIVE,
    Rank.FOUR,
    Rank.MINER,
    Rank.SCOUT,
    Rank.BOMB,
]


def encode_setup(board: Board, player: Player = Player.ONE) -> str:
    """Encode a player's setup rows."""
    groups = {rank: "" for rank in SETUP_RANK_ORDER}
    for row in reversed(SETUP_ROWS[player]):
        for col in range(BOARD_SIZE):
            figure = board.get(row, col)
            if figure is None or figure.player != player or figure.rank not in groups:
                continue
            groups[figure.rank] += chr(col) + chr(row)
    return "".join(groups[rank] for rank in SETUP_RANK_ORDER)


def decode_setup(text: str) -> List[Placement]:
    """
    Decode an encoded setup into placements.

    Raises:
        InconsistentOutcome: If the text does not hold exactly one full deployment
    """
    expected = 2 * sum(STANDARD_DEPLOYMENT.values())
    if len(text) != expected:
        raise InconsistentOutcome(f"Setup data has {len(text)} characters, expected {expected}")

    placements = []
    pos = 0
    for rank in SETUP_RANK_ORDER:
        for _ in range(STANDARD_DEPLOYMENT[rank]):
            col, row = ord(text[pos]), ord(text[pos + 1])
            placements.append(Placement(row, col, rank))
            pos += 2
    return placements


def save_setup(board: Board, filepath: str) -> None:
    """Write the local player's setup to a file."""
    with open(filepath, 'w', newline='') as f:
        f.write(encode_setup(board))
    logger.info(f"Saved setup to {filepath}")


def load_setup(filepath: str) -> List[Placement]:
    """Read placements from a file written by save_setup."""
    with open(filepath, 'r', newline='') as f:
        return decode_setup(f.read())
