"""
YAML match script loader for the Stratego game engine.
A match script records a setup and the arbiter's side of every exchange,
so a game can be replayed offline.

    name: Example match
    setup:                 # rows 0-3, one display code per column
      - "B9F9B99B98"
      ...
    confirm: true
    moves:
      - by: player
        line: "4 3 DOWN OK"
        transport_failures: 1
      - by: opponent
        line: "4 6 UP OK"
      - by: player
        line: "2 6 DOWN KILLS 8 F"
        game_over: true
        winner: WebPlayer
"""

import yaml
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from stratego_game_engine.core.board import BOARD_SIZE, SETUP_ROWS
from stratego_game_engine.core.errors import InvalidSelection
from stratego_game_engine.core.game_state import Player, Rank, Winner, rank_from_code
from stratego_game_engine.core.moves import Move, MoveOutcome, Placement
from stratego_game_engine.io.move_notation import parse_move_line


class ScriptValidationError(Exception):
    """Raised when a match script cannot be used at all."""
    pass


@dataclass
class ScriptedExchange:
    """One arbiter exchange from a match script."""
    by: Player
    move: Move
    outcome: MoveOutcome
    accepted: bool = True
    transport_failures: int = 0
    game_over: bool = False
    winner: Optional[Winner] = None


@dataclass
class MatchScript:
    """A fully parsed match script."""
    name: str
    placements: List[Placement]
    confirm: bool = True
    exchanges: List[ScriptedExchange] = field(default_factory=list)

    def player_moves(self) -> List[Move]:
        """The local moves in script order, as a driver would submit them."""
        return [exchange.move for exchange in self.exchanges if exchange.by == Player.ONE]


class YAMLMatchLoader:
    """Loads and validates match scripts from YAML files."""

    def __init__(self):
        self.warnings = []
        self.corrections = []

    def load_from_file(self, filepath: str) -> Dict:
        """Load YAML match script."""
        with open(filepath, 'r') as f:
            data = yaml.safe_load(f)
        if not isinstance(data, dict):
            raise ScriptValidationError(f"{filepath} does not contain a match script")
        return data

    def parse_script(self, yaml_data: Dict) -> MatchScript:
        """Parse a complete match script."""
        return MatchScript(
            name=yaml_data.get('name', 'Unnamed match'),
            placements=self.parse_setup(yaml_data),
            confirm=self.parse_confirm(yaml_data),
            exchanges=self.parse_moves(yaml_data),
        )

    def parse_setup(self, yaml_data: Dict) -> List[Placement]:
        """
        Parse the local setup from four rows of display codes.

        Raises:
            ScriptValidationError: If the setup block is missing or malformed
        """
        rows = yaml_data.get('setup')
        setup_rows = list(SETUP_ROWS[Player.ONE])
        if not isinstance(rows, list) or len(rows) != len(setup_rows):
            raise ScriptValidationError(f"'setup' must list {len(setup_rows)} rows of display codes")

        placements = []
        for row, codes in zip(setup_rows, rows):
            codes = str(codes).replace(' ', '')
            if len(codes) != BOARD_SIZE:
                raise ScriptValidationError(f"Setup row {row} has {len(codes)} cells, expected {BOARD_SIZE}")
            for col, code in enumerate(codes):
                try:
                    rank = rank_from_code(code)
                except ValueError as e:
                    raise ScriptValidationError(f"Setup row {row}: {e}") from None
                if rank == Rank.UNKNOWN:
                    raise ScriptValidationError(f"Setup row {row}: own figures must have a known rank")
                placements.append(Placement(row, col, rank))

        return placements

    def parse_confirm(self, yaml_data: Dict) -> bool:
        return bool(yaml_data.get('confirm', True))

    def parse_moves(self, yaml_data: Dict) -> List[ScriptedExchange]:
        """
        Parse the scripted exchanges.
        Entries that cannot be parsed are skipped with a warning.
        """
        exchanges = []

        if 'moves' not in yaml_data:
            return exchanges

        for move_data in yaml_data['moves'] or []:
            try:
                exchange = self._parse_single_move(move_data)
                if exchange:
                    exchanges.append(exchange)
            except (InvalidSelection, ScriptValidationError, AttributeError, TypeError, ValueError) as e:
                self.warnings.append(f"Failed to parse move {move_data}: {e}")

        return exchanges

    def _parse_single_move(self, move_data: Dict) -> Optional[ScriptedExchange]:
        """Parse a single scripted exchange."""
        by = self._normalize_side(str(move_data.get('by', '')))
        if by is None:
            self.warnings.append(f"Unknown side: {move_data.get('by')}")
            return None

        line = str(move_data.get('line', '')).strip()
        if not line:
            raise ScriptValidationError("Missing move line")

        notated = parse_move_line(line)
        outcome = notated.outcome
        if outcome is None:
            if by == Player.TWO:
                raise ScriptValidationError("Opponent moves need an outcome tag")
            outcome = MoveOutcome.no_collision()

        failures = int(move_data.get('transport_failures', 0))
        if failures < 0:
            raise ScriptValidationError("transport_failures cannot be negative")

        winner = move_data.get('winner')
        game_over = bool(move_data.get('game_over', False)) or winner is not None

        return ScriptedExchange(
            by=by,
            move=notated.move,
            outcome=outcome,
            accepted=bool(move_data.get('accepted', True)),
            transport_failures=failures,
            game_over=game_over,
            winner=Winner.from_wire(winner) if game_over else None,
        )

    def _normalize_side(self, side: str) -> Optional[Player]:
        """Normalize the side of an exchange, accepting a few aliases."""
        side = side.lower().strip()

        aliases = {
            'p': 'player',
            'me': 'player',
            'local': 'player',
            'o': 'opponent',
            'computer': 'opponent',
            'remote': 'opponent',
        }

        if side in aliases:
            normalized = aliases[side]
            self.corrections.append(f"Expanded side '{side}' to '{normalized}'")
            side = normalized

        if side == 'player':
            return Player.ONE
        if side == 'opponent':
            return Player.TWO
        return None

    def get_warnings(self) -> List[str]:
        """Get all warnings from parsing."""
        return self.warnings

    def get_corrections(self) -> List[str]:
        """Get all auto-corrections made."""
        return self.corrections
