"""
Tests for the plain-text move notation and the rank name/code mappings.
"""

import pytest

from stratego_game_engine.core.errors import InconsistentOutcome, InvalidSelection
from stratego_game_engine.core.game_state import Rank, Winner, parse_rank, rank_from_code
from stratego_game_engine.core.moves import Move, MoveOutcome
from stratego_game_engine.io.move_notation import format_move, outcome_tag, parse_move_line


def test_directions():
    """UP decreases the row, LEFT decreases the column."""
    assert parse_move_line("4 6 UP").move == Move(6, 4, 5, 4)
    assert parse_move_line("4 3 DOWN").move == Move(3, 4, 4, 4)
    assert parse_move_line("4 3 LEFT").move == Move(3, 4, 3, 3)
    assert parse_move_line("4 3 right").move == Move(3, 4, 3, 5)


def test_distance_and_outcome():
    notated = parse_move_line("0 3 RIGHT 5 OK")
    assert notated.move == Move(3, 0, 3, 5)
    assert notated.outcome == MoveOutcome.no_collision()

    notated = parse_move_line("2 6 DOWN KILLS 8 F")
    assert notated.move == Move(6, 2, 7, 2)
    assert notated.outcome == MoveOutcome(Rank.MINER, Rank.FLAG, True, False)

    assert parse_move_line("1 1 UP DIES 9 5").outcome == MoveOutcome(Rank.SCOUT, Rank.SIX, False, True)
    assert parse_move_line("1 1 UP BOTHDIE # 6").outcome == MoveOutcome(Rank.UNKNOWN, Rank.FIVE, False, False)
    assert parse_move_line("1 1 UP").outcome is None


@pytest.mark.parametrize("line", [
    "4 6",
    "4 6 NORTH",
    "x 6 UP",
    "4 6 UP 0",
    "4 6 UP WINS 1 2",
    "4 6 UP KILLS 1",
    "4 6 UP KILLS 1 Z",
    "4 6 UP OK extra",
    "1 3 DOWN ²",
    "² 3 DOWN",
])
def test_malformed_lines_are_illegal_moves(line):
    with pytest.raises(InvalidSelection):
        parse_move_line(line)


def test_format_move():
    assert format_move(Move(6, 4, 5, 4)) == "4 6 UP"
    assert format_move(Move(3, 0, 3, 5), MoveOutcome.no_collision()) == "0 3 RIGHT 5 OK"
    assert format_move(Move(4, 9, 4, 8), MoveOutcome(Rank.MARSHAL, Rank.SCOUT, True, False)) == \
        "9 4 LEFT KILLS 1 9"
    assert format_move(Move(5, 5, 4, 5), MoveOutcome(None, Rank.BOMB, False, True)) == "5 5 UP DIES # B"

    with pytest.raises(InvalidSelection):
        format_move(Move(3, 0, 4, 1))


def test_outcome_tags():
    assert outcome_tag(MoveOutcome.no_collision(Rank.SIX)) == "OK"
    assert outcome_tag(MoveOutcome(Rank.FIVE, Rank.FIVE, False, False)) == "BOTHDIE 6 6"


def test_display_codes_are_total_and_invertible():
    codes = [rank.display_code for rank in Rank]
    assert len(set(codes)) == len(Rank)
    for rank in Rank:
        assert rank_from_code(rank.display_code) == rank

    assert Rank.SCOUT.display_code == "9"
    assert Rank.MARSHAL.display_code == "1"
    with pytest.raises(ValueError):
        rank_from_code("X")


def test_wire_rank_names():
    assert parse_rank("Two") == Rank.SCOUT
    assert parse_rank("Ten") == Rank.MARSHAL
    assert parse_rank("One") == Rank.SPY
    assert parse_rank("None") is None
    assert parse_rank("") is None
    assert parse_rank(None) is None
    with pytest.raises(InconsistentOutcome):
        parse_rank("Eleven")


def test_wire_winner_values():
    assert Winner.from_wire("WebPlayer") == Winner.PLAYER
    assert Winner.from_wire("ComputerPlayer") == Winner.OPPONENT
    assert Winner.from_wire("tied") == Winner.TIED
    assert Winner.from_wire("") == Winner.UNKNOWN
    assert Winner.from_wire("nobody") == Winner.UNKNOWN
