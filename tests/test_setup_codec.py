"""
Tests for the compact setup file format.
"""

import os
import tempfile

import pytest

from stratego_game_engine.core.errors import InconsistentOutcome
from stratego_game_engine.core.game_state import Rank
from stratego_game_engine.io.setup_codec import decode_setup, encode_setup, load_setup, save_setup

from match_helpers import playing_game, standard_placements


def test_encoding_layout():
    """Groups run Flag, One, Ten, ... Bomb; rows are scanned from 3 down to 0."""
    game = playing_game()

    text = encode_setup(game.board)

    assert len(text) == 80
    # Flag at row 0, col 1
    assert text[0:2] == chr(1) + chr(0)
    # Spy at row 1, col 2
    assert text[2:4] == chr(2) + chr(1)
    # Marshal at row 3, col 8
    assert text[4:6] == chr(8) + chr(3)
    # First Scout is the one in row 3, col 0
    scouts_start = 2 * (1 + 1 + 1 + 1 + 2 + 3 + 4 + 4 + 4 + 5)
    assert text[scouts_start:scouts_start + 2] == chr(0) + chr(3)
    # Opponent figures are never written
    assert all(ord(ch) < 10 for ch in text)


def test_decode_inverts_encode():
    game = playing_game()

    placements = decode_setup(encode_setup(game.board))

    assert sorted((p.row, p.col, p.rank.value) for p in placements) == \
        sorted((p.row, p.col, p.rank.value) for p in standard_placements())


def test_decode_rejects_partial_setups():
    with pytest.raises(InconsistentOutcome):
        decode_setup(chr(1) + chr(0))


def test_setup_file():
    game = playing_game()

    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, 'setup')
        save_setup(game.board, path)
        placements = load_setup(path)

    flag = [p for p in placements if p.rank == Rank.FLAG]
    assert len(placements) == 40
    assert [(p.row, p.col) for p in flag] == [(0, 1)]
