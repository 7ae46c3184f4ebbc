"""
Plain-text move notation used by scripted matches and move logs.

    "<col> <row> <DIRECTION> [<distance>] [<outcome>]"

DIRECTION is UP, DOWN, LEFT or RIGHT (UP decreases the row) and the
distance defaults to 1. The optional outcome is OK for a move into an
empty cell, or KILLS / DIES / BOTHDIE followed by the attacker's and the
defender's display codes.
"""

from dataclasses import dataclass
from typing import Optional

from stratego_game_engine.core.errors import InvalidSelection
from stratego_game_engine.core.game_state import Rank, rank_from_code
from stratego_game_engine.core.moves import Move, MoveOutcome


# (row delta, col delta) per step
DIRECTIONS = {
    "UP": (-1, 0),
    "DOWN": (1, 0),
    "LEFT": (0, -1),
    "RIGHT": (0, 1),
}

# outcome tag -> (attacker survives, defender survives)
COMBAT_TAGS = {
    "KILLS": (True, False),
    "DIES": (False, True),
    "BOTHDIE": (False, False),
}

NO_COMBAT_TAG = "OK"


@dataclass(frozen=True)
class NotatedMove:
    """A parsed notation line. outcome is None when the line has no outcome tag."""
    move: Move
    outcome: Optional[MoveOutcome] = None


def _parse_int(token: str, what: str, line: str) -> int:
    try:
        return int(token)
    except ValueError:
        raise InvalidSelection(f"Illegal move '{line}': {what} '{token}' is not a number") from None


def _parse_code(token: str, line: str) -> Rank:
    try:
        return rank_from_code(token)
    except ValueError:
        raise InvalidSelection(f"Illegal move '{line}': unknown rank code '{token}'") from None


def parse_move_line(line: str) -> NotatedMove:
    """
    Parse one notation line.

    Raises:
        InvalidSelection: If the line is not a well-formed move
    """
    tokens = line.split()
    if len(tokens) < 3:
        raise InvalidSelection(f"Illegal move '{line}': expected '<col> <row> <DIRECTION>'")

    col = _parse_int(tokens[0], "column", line)
    row = _parse_int(tokens[1], "row", line)

    direction = tokens[2].upper()
    if direction not in DIRECTIONS:
        raise InvalidSelection(f"Illegal move '{line}': unknown direction '{tokens[2]}'")

    rest = tokens[3:]
    distance = 1
    if rest and rest[0].isdecimal():
        distance = int(rest[0])
        rest = rest[1:]
    if distance < 1:
        raise InvalidSelection(f"Illegal move '{line}': distance must be at least 1")

    d_row, d_col = DIRECTIONS[direction]
    move = Move(row, col, row + d_row * distance, col + d_col * distance)

    outcome = None
    if rest:
        tag = rest[0].upper()
        if tag == NO_COMBAT_TAG and len(rest) == 1:
            outcome = MoveOutcome.no_collision()
        elif tag in COMBAT_TAGS and len(rest) == 3:
            attacker_survives, defender_survives = COMBAT_TAGS[tag]
            outcome = MoveOutcome(
                attacker_rank=_parse_code(rest[1], line),
                defender_rank=_parse_code(rest[2], line),
                attacker_survives=attacker_survives,
                defender_survives=defender_survives,
            )
        else:
            raise InvalidSelection(f"Illegal move '{line}': cannot parse outcome '{' '.join(rest)}'")

    return NotatedMove(move, outcome)


def outcome_tag(outcome: MoveOutcome) -> str:
    """Notation suffix for an outcome, e.g. 'OK' or 'KILLS 1 B'."""
    if not outcome.collision:
        return NO_COMBAT_TAG

    if outcome.attacker_survives:
        tag = "KILLS"
    elif outcome.defender_survives:
        tag = "DIES"
    else:
        tag = "BOTHDIE"

    attacker_code = (outcome.attacker_rank or Rank.UNKNOWN).display_code
    defender_code = outcome.defender_rank.display_code
    return f"{tag} {attacker_code} {defender_code}"


def format_move(move: Move, outcome: Optional[MoveOutcome] = None) -> str:
    """Write a move (and optionally its outcome) in notation."""
    if not move.is_straight or move.distance == 0:
        raise InvalidSelection(f"{move} cannot be written in move notation")

    d_row = move.end_row - move.start_row
    d_col = move.end_col - move.start_col
    if d_row > 0:
        direction = "DOWN"
    elif d_row < 0:
        direction = "UP"
    elif d_col > 0:
        direction = "RIGHT"
    else:
        direction = "LEFT"

    line = f"{move.start_col} {move.start_row} {direction}"
    if move.distance != 1:
        line += f" {move.distance}"
    if outcome is not None:
        line += f" {outcome_tag(outcome)}"
    return line
