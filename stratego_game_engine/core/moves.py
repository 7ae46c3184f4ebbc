"""
Moves, move outcomes and the move-legality predicates.

The local validator checks geometry only. A Scout's long move must be
collinear, but the cells in between are not checked: the arbiter is the
authority on final legality.
"""

from dataclasses import dataclass
from typing import List, Optional

from stratego_game_engine.core.board import Board, Coord, is_in_bounds, is_lake
from stratego_game_engine.core.game_state import Rank, Player, Winner


@dataclass(frozen=True)
class Move:
    """A decided move from a start cell to an end cell."""
    start_row: int
    start_col: int
    end_row: int
    end_col: int

    @property
    def start(self) -> Coord:
        return (self.start_row, self.start_col)

    @property
    def end(self) -> Coord:
        return (self.end_row, self.end_col)

    @property
    def distance(self) -> int:
        """Manhattan distance between start and end."""
        return abs(self.end_row - self.start_row) + abs(self.end_col - self.start_col)

    @property
    def is_straight(self) -> bool:
        return self.start_row == self.end_row or self.start_col == self.end_col

    def __repr__(self) -> str:
        return f"Move({self.start_row},{self.start_col} -> {self.end_row},{self.end_col})"


@dataclass(frozen=True)
class MoveOutcome:
    """
    Outcome of a move as reported by the arbiter.

    A rank of None means no such figure took part; defender_rank None
    therefore means the move went into an empty cell.
    """
    attacker_rank: Optional[Rank] = None
    defender_rank: Optional[Rank] = None
    attacker_survives: bool = True
    defender_survives: bool = False

    @property
    def collision(self) -> bool:
        return self.defender_rank is not None

    @staticmethod
    def no_collision(attacker_rank: Optional[Rank] = None) -> 'MoveOutcome':
        return MoveOutcome(attacker_rank=attacker_rank)


@dataclass(frozen=True)
class MoveResponse:
    """Arbiter answer to a submitted move or an opponent-move request."""
    success: bool
    outcome: MoveOutcome = MoveOutcome()
    move: Optional[Move] = None
    game_over: bool = False
    winner: Optional[Winner] = None

    @property
    def collision(self) -> bool:
        return self.outcome.collision


@dataclass(frozen=True)
class Placement:
    """One entry of a generated setup."""
    row: int
    col: int
    rank: Rank


def orthogonal_neighbors(row: int, col: int) -> List[Coord]:
    return [(row - 1, col), (row, col - 1), (row, col + 1), (row + 1, col)]


def is_valid_field(row: int, col: int) -> bool:
    """In bounds and not a lake cell."""
    return is_in_bounds(row, col) and not is_lake(row, col)


def _opens_move(board: Board, player: Player, row: int, col: int) -> bool:
    if not is_valid_field(row, col):
        return False
    neighbor = board.get(row, col)
    return neighbor is None or neighbor.player != player


def is_selectable_own_figure(board: Board, player: Player, row: int, col: int) -> bool:
    """
    Check whether a cell holds a figure the player may pick up.

    The figure must belong to the player, be movable (not Flag or Bomb),
    and have at least one orthogonal neighbor that is a valid field and
    either empty or held by the opponent.
    """
    if not is_valid_field(row, col):
        return False

    figure = board.get(row, col)
    if figure is None or figure.player != player or not figure.rank.is_movable:
        return False

    return any(
        _opens_move(board, player, n_row, n_col)
        for n_row, n_col in orthogonal_neighbors(row, col)
    )


def is_valid_destination(
    board: Board,
    player: Player,
    start_row: int,
    start_col: int,
    end_row: int,
    end_col: int
) -> bool:
    """Check the second selection of a move: the destination cell."""
    if not is_valid_field(start_row, start_col) or not is_valid_field(end_row, end_col):
        return False

    if (end_row, end_col) == (start_row, start_col):
        return False

    target = board.get(end_row, end_col)
    if target is not None and target.player == player:
        return False

    distance = abs(end_row - start_row) + abs(end_col - start_col)
    if distance == 1:
        return True

    # Only a Scout moves further, and only along a row or a column
    mover = board.get(start_row, start_col)
    if mover is None or mover.rank != Rank.SCOUT:
        return False
    return end_row == start_row or end_col == start_col


def is_valid_opponent_move(board: Board, opponent: Player, move: Move) -> bool:
    """
    Plausibility check for a move reported by the arbiter.

    The mover's rank is usually still Unknown, so a long straight move is
    accepted for Unknown figures as well as for detected Scouts.
    """
    if not is_valid_field(*move.start) or not is_valid_field(*move.end):
        return False

    mover = board.get(*move.start)
    if mover is None or mover.player != opponent or not mover.rank.is_movable:
        return False

    target = board.get(*move.end)
    if target is not None and target.player == opponent:
        return False

    if move.distance == 0:
        return False
    if move.distance == 1:
        return True
    return move.is_straight and mover.rank in (Rank.SCOUT, Rank.UNKNOWN)


def legal_destinations(board: Board, player: Player, row: int, col: int) -> List[Coord]:
    """All cells that pass is_valid_destination from the given start."""
    if not is_selectable_own_figure(board, player, row, col):
        return []
    return [
        (end_row, end_col)
        for end_row, end_col in board.coords()
        if is_valid_destination(board, player, row, col, end_row, end_col)
    ]
