"""
Board module for the Stratego game engine.
A 10x10 grid of optional figures with two fixed 2x2 lakes.
"""

from typing import Dict, Iterable, List, Optional, Tuple

from stratego_game_engine.core.errors import InvalidSelection
from stratego_game_engine.core.game_state import Figure, Player, EMPTY_CODE

Coord = Tuple[int, int]

BOARD_SIZE = 10

# rows {4,5} x cols {2,3} and rows {4,5} x cols {6,7}
LAKE_CELLS = frozenset(
    (row, col) for row in (4, 5) for col in (2, 3, 6, 7)
)

SETUP_ROWS: Dict[Player, range] = {
    Player.ONE: range(0, 4),
    Player.TWO: range(6, 10),
}


def is_in_bounds(row: int, col: int) -> bool:
    return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE


def is_lake(row: int, col: int) -> bool:
    return (row, col) in LAKE_CELLS


def in_setup_zone(player: Player, row: int, col: int) -> bool:
    """Check whether a cell lies in a player's home setup rows."""
    return is_in_bounds(row, col) and row in SETUP_ROWS[player]


class Board:
    """The game board. Pure data plus accessors; no rule checks beyond geometry."""

    def __init__(self):
        self.grid: List[List[Optional[Figure]]] = [
            [None] * BOARD_SIZE for _ in range(BOARD_SIZE)
        ]

    @staticmethod
    def _require_in_bounds(row: int, col: int) -> None:
        if not is_in_bounds(row, col):
            raise InvalidSelection(f"Coordinates ({row}, {col}) are off the board")

    def get(self, row: int, col: int) -> Optional[Figure]:
        self._require_in_bounds(row, col)
        return self.grid[row][col]

    def set(self, row: int, col: int, figure: Optional[Figure]) -> None:
        self._require_in_bounds(row, col)
        if figure is not None and is_lake(row, col):
            raise InvalidSelection(f"Cannot place a figure in the lake at ({row}, {col})")
        self.grid[row][col] = figure

    def is_lake(self, row: int, col: int) -> bool:
        return is_lake(row, col)

    def is_in_bounds(self, row: int, col: int) -> bool:
        return is_in_bounds(row, col)

    def swap(self, row1: int, col1: int, row2: int, col2: int) -> None:
        """Exchange two cells. Callers restrict this to own setup-zone cells."""
        self._require_in_bounds(row1, col1)
        self._require_in_bounds(row2, col2)
        self.grid[row1][col1], self.grid[row2][col2] = (
            self.grid[row2][col2],
            self.grid[row1][col1],
        )

    def coords(self) -> Iterable[Coord]:
        for row in range(BOARD_SIZE):
            for col in range(BOARD_SIZE):
                yield (row, col)

    def figures_of(self, player: Player) -> List[Tuple[Coord, Figure]]:
        """All figures owned by a player, in row-major order."""
        result = []
        for row, col in self.coords():
            figure = self.grid[row][col]
            if figure is not None and figure.player == player:
                result.append(((row, col), figure))
        return result

    def clear(self) -> None:
        for row, col in self.coords():
            self.grid[row][col] = None

    def pretty(self) -> str:
        """One line per row, one display code per cell ('.' for empty and lake cells)."""
        lines = []
        for row in range(BOARD_SIZE):
            line = ""
            for col in range(BOARD_SIZE):
                figure = self.grid[row][col]
                line += EMPTY_CODE if figure is None else figure.rank.display_code
            lines.append(line)
        return "\n".join(lines)
