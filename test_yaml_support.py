"""
Test that the YAML match loader parses setups, exchanges and aliases.
"""

import os
import sys
import tempfile
sys.path.insert(0, '.')

import pytest

from stratego_game_engine.core.game_state import Player, Rank, Winner
from stratego_game_engine.core.moves import Move, MoveOutcome
from stratego_game_engine.io.yaml_moves import YAMLMatchLoader, ScriptValidationError

SCRIPT = """
name: Loader test
setup:
  - "BFB8889BB8"
  - "B8s7766559"
  - "B776655443"
  - "9949 3929 19"
moves:
  - by: player
    line: "1 3 DOWN 2"
    transport_failures: 2
  - by: o
    line: "4 6 UP OK"
  - by: opponent
    line: "4 6 UP"
  - by: spectator
    line: "4 6 UP OK"
  - by: player
    line: "4 3 SIDEWAYS"
  - by: player
    line: "8 3 DOWN OK"
    accepted: false
  - by: player
    line: "2 6 DOWN KILLS 8 F"
    winner: WebPlayer
"""


def test_yaml_match_parsing():
    """Test that the loader parses a complete match script."""
    print("=" * 60)
    print("TESTING YAML MATCH PARSING")
    print("=" * 60)

    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, 'match.yaml')
        with open(path, 'w') as f:
            f.write(SCRIPT)

        loader = YAMLMatchLoader()
        script = loader.parse_script(loader.load_from_file(path))

    print(f"✓ Parsed {len(script.exchanges)} exchanges")
    for warning in loader.get_warnings():
        print(f"  {warning}")

    assert script.name == "Loader test"
    assert script.confirm is True
    assert len(script.placements) == 40
    assert script.placements[1].rank == Rank.FLAG
    assert script.placements[-1].rank == Rank.SCOUT
    assert (script.placements[-1].row, script.placements[-1].col) == (3, 9)

    assert len(script.exchanges) == 4
    first, second, rejected, last = script.exchanges

    assert first.by == Player.ONE
    assert first.move == Move(3, 1, 5, 1)
    assert first.outcome == MoveOutcome.no_collision()
    assert first.transport_failures == 2

    assert second.by == Player.TWO
    assert not second.game_over

    assert rejected.accepted is False

    assert last.game_over
    assert last.winner == Winner.PLAYER
    assert last.outcome.defender_rank == Rank.FLAG

    assert script.player_moves() == [Move(3, 1, 5, 1), Move(3, 8, 4, 8), Move(6, 2, 7, 2)]

    # opponent move without outcome, unknown side, unknown direction
    assert len(loader.get_warnings()) == 3
    assert loader.get_corrections() == ["Expanded side 'o' to 'opponent'"]


def test_bad_setup_is_fatal():
    loader = YAMLMatchLoader()

    with pytest.raises(ScriptValidationError):
        loader.parse_setup({'setup': ["BFB8889BB8"]})
    with pytest.raises(ScriptValidationError):
        loader.parse_setup({'setup': ["BFB8889BB8", "B8s7766559", "B776655443", "994939291"]})
    with pytest.raises(ScriptValidationError):
        loader.parse_setup({'setup': ["BFB8889BB8", "B8s7766559", "B776655443", "994939291X"]})
    with pytest.raises(ScriptValidationError):
        loader.parse_setup({'setup': ["BFB8889BB8", "B8s7766559", "B776655443", "994939291#"]})


def test_missing_moves_block():
    loader = YAMLMatchLoader()
    assert loader.parse_moves({'name': 'empty'}) == []
    assert loader.parse_confirm({'confirm': False}) is False


if __name__ == "__main__":
    try:
        test_yaml_match_parsing()
        test_bad_setup_is_fatal()
        test_missing_moves_block()
    except Exception as e:
        print(f"\n✗ Test failed with error: {e}")
        import traceback
        traceback.print_exc()
