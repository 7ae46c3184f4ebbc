"""
Utility for writing a game's move history in the match script format.
"""

import yaml
from typing import List, Optional
import logging

from stratego_game_engine.core.board import BOARD_SIZE, SETUP_ROWS
from stratego_game_engine.core.game import MoveRecord
from stratego_game_engine.core.game_state import Player, EMPTY_CODE
from stratego_game_engine.core.moves import Placement

logger = logging.getLogger(__name__)

SIDE_NAMES = {
    Player.ONE: 'player',
    Player.TWO: 'opponent',
}


class MoveWriter:
    """Converts move records to YAML that the match loader reads back."""

    @staticmethod
    def moves_to_yaml_dict(
        records: List[MoveRecord],
        name: str,
        placements: Optional[List[Placement]] = None
    ) -> dict:
        """
        Convert move records to a YAML-compatible dictionary.

        Args:
            records: Applied moves, in order
            name: Match name
            placements: Confirmed local setup, written as the 'setup'
                block when given

        Returns:
            Dictionary in match script format
        """
        yaml_dict = {'name': name}

        if placements:
            yaml_dict['setup'] = MoveWriter._setup_rows(placements)

        yaml_dict['moves'] = [MoveWriter._record_to_dict(record) for record in records]
        return yaml_dict

    @staticmethod
    def _record_to_dict(record: MoveRecord) -> dict:
        entry = {'by': SIDE_NAMES[record.player], 'line': record.line}
        if record.winner is not None:
            entry['game_over'] = True
            entry['winner'] = record.winner.value
        return entry

    @staticmethod
    def _setup_rows(placements: List[Placement]) -> List[str]:
        codes = {(p.row, p.col): p.rank.display_code for p in placements}
        return [
            "".join(codes.get((row, col), EMPTY_CODE) for col in range(BOARD_SIZE))
            for row in SETUP_ROWS[Player.ONE]
        ]

    @staticmethod
    def save_moves_to_yaml(
        records: List[MoveRecord],
        filepath: str,
        name: str,
        placements: Optional[List[Placement]] = None
    ) -> None:
        """
        Save move records to a YAML file.

        Args:
            records: Applied moves, in order
            filepath: Path to save YAML file
            name: Match name
            placements: Optional confirmed setup
        """
        yaml_dict = MoveWriter.moves_to_yaml_dict(records, name, placements)

        with open(filepath, 'w') as f:
            yaml.dump(yaml_dict, f, default_flow_style=False, sort_keys=False)

        logger.info(f"Saved {len(records)} moves to {filepath}")
