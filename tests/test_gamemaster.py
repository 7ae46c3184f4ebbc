"""
Tests for the Gamemaster orchestrator: bounded retry, the admission gate
and the no-mutation guarantee for exchanges that never completed.
"""

import pytest

from stratego_game_engine.arbiter import ArbiterClient, ScriptedArbiter, TransportError
from stratego_game_engine.core.errors import EngineError, InvalidSelection
from stratego_game_engine.core.game_state import GamePhase, Player, Rank, Status, Winner
from stratego_game_engine.core.moves import Move, MoveOutcome
from stratego_game_engine.gamemaster import Gamemaster, RequestInProgressError
from stratego_game_engine.io.yaml_moves import MatchScript, ScriptedExchange

from match_helpers import standard_placements


def exchange(by, move, outcome=None, **kwargs):
    return ScriptedExchange(by=by, move=move, outcome=outcome or MoveOutcome.no_collision(), **kwargs)


def make_script(*exchanges, confirm=True):
    return MatchScript(name="test", placements=standard_placements(), confirm=confirm, exchanges=list(exchanges))


def test_start_game_reaches_playing():
    gamemaster = Gamemaster(ScriptedArbiter(make_script()))

    assert gamemaster.start_game()
    assert gamemaster.game.phase == GamePhase.PLAYING
    assert not gamemaster.request_in_progress


def test_unconfirmed_setup():
    gamemaster = Gamemaster(ScriptedArbiter(make_script(confirm=False)))

    assert not gamemaster.start_game()
    assert gamemaster.game.phase == GamePhase.SETUP
    assert gamemaster.run([]) is None


def test_turn_applies_both_moves():
    script = make_script(
        exchange(Player.ONE, Move(3, 1, 5, 1)),
        exchange(Player.TWO, Move(6, 9, 4, 9)),
    )
    gamemaster = Gamemaster(ScriptedArbiter(script))
    gamemaster.start_game()

    turn = gamemaster.play_turn(Move(3, 1, 5, 1))

    board = gamemaster.game.board
    assert turn.accepted
    assert not turn.game_over
    assert board.get(5, 1).rank == Rank.SCOUT
    assert board.get(4, 9).rank == Rank.SCOUT
    assert board.get(4, 9).status == Status.DETECTED
    assert [record.line for record in gamemaster.game.session.history] == ["1 3 DOWN 2 OK", "9 6 UP 2 OK"]


def test_transport_failures_are_retried():
    """A lost exchange is resubmitted and applied exactly once."""
    script = make_script(
        exchange(Player.ONE, Move(3, 0, 4, 0), transport_failures=2),
        exchange(Player.TWO, Move(6, 4, 5, 4), transport_failures=1),
    )
    gamemaster = Gamemaster(ScriptedArbiter(script), max_attempts=3)
    gamemaster.start_game()

    turn = gamemaster.play_turn(Move(3, 0, 4, 0))

    assert turn.accepted
    assert len(gamemaster.game.session.history) == 2
    assert gamemaster.game.board.get(3, 0) is None


def test_exhausted_retries_leave_the_engine_untouched():
    script = make_script(exchange(Player.ONE, Move(3, 0, 4, 0), transport_failures=5))
    gamemaster = Gamemaster(ScriptedArbiter(script), max_attempts=2)
    gamemaster.start_game()
    before = gamemaster.game.board.pretty()

    with pytest.raises(TransportError):
        gamemaster.play_turn(Move(3, 0, 4, 0))

    assert gamemaster.game.board.pretty() == before
    assert gamemaster.game.session.history == []
    assert not gamemaster.request_in_progress


def test_rejected_move_is_not_applied():
    script = make_script(
        exchange(Player.ONE, Move(3, 0, 4, 0), accepted=False),
        exchange(Player.ONE, Move(3, 0, 4, 0)),
        exchange(Player.TWO, Move(6, 4, 5, 4)),
    )
    gamemaster = Gamemaster(ScriptedArbiter(script))
    gamemaster.start_game()

    turn = gamemaster.play_turn(Move(3, 0, 4, 0))
    assert not turn.accepted
    assert gamemaster.game.board.get(3, 0).rank == Rank.SCOUT

    turn = gamemaster.play_turn(Move(3, 0, 4, 0))
    assert turn.accepted
    assert gamemaster.game.board.get(4, 0).rank == Rank.SCOUT


def test_illegal_move_is_never_submitted():
    script = make_script(exchange(Player.ONE, Move(0, 1, 1, 1)))
    arbiter = ScriptedArbiter(script)
    gamemaster = Gamemaster(arbiter)
    gamemaster.start_game()

    with pytest.raises(InvalidSelection):
        gamemaster.play_turn(Move(0, 1, 1, 1))

    assert arbiter.remaining_exchanges == 1


def test_lost_opponent_reply_is_resumed():
    """A reply that exhausted its retries is fetched again before the next local move."""
    script = make_script(
        exchange(Player.ONE, Move(3, 1, 5, 1)),
        exchange(Player.TWO, Move(6, 9, 4, 9), transport_failures=5),
        exchange(Player.ONE, Move(3, 0, 4, 0)),
        exchange(Player.TWO, Move(6, 4, 5, 4)),
    )
    arbiter = ScriptedArbiter(script)
    gamemaster = Gamemaster(arbiter, max_attempts=2)
    gamemaster.start_game()

    with pytest.raises(TransportError):
        gamemaster.play_turn(Move(3, 1, 5, 1))

    assert gamemaster.pending_opponent_reply
    assert not gamemaster.request_in_progress
    assert gamemaster.game.board.get(5, 1).status == Status.MOVED
    assert gamemaster.game.board.get(6, 9) is not None

    with pytest.raises(RequestInProgressError):
        gamemaster.play_turn(Move(3, 0, 4, 0))
    assert arbiter.remaining_exchanges == 3

    with pytest.raises(TransportError):
        gamemaster.resume_opponent_move()
    assert gamemaster.pending_opponent_reply

    turn = gamemaster.resume_opponent_move()
    assert turn.accepted
    assert turn.local is None
    assert turn.opponent is not None
    assert not gamemaster.pending_opponent_reply
    assert gamemaster.game.board.get(4, 9).rank == Rank.SCOUT

    turn = gamemaster.play_turn(Move(3, 0, 4, 0))
    assert turn.accepted
    assert [record.line for record in gamemaster.game.session.history] == [
        "1 3 DOWN 2 OK", "9 6 UP 2 OK", "0 3 DOWN OK", "4 6 UP OK"
    ]


def test_nothing_to_resume():
    gamemaster = Gamemaster(ScriptedArbiter(make_script()))
    gamemaster.start_game()

    with pytest.raises(EngineError):
        gamemaster.resume_opponent_move()


class ReentrantArbiter(ScriptedArbiter):
    """Tries to start a second request while the first is outstanding."""

    def __init__(self, script):
        super().__init__(script)
        self.gamemaster = None
        self.blocked = None

    def submit_move(self, move, rank):
        try:
            self.gamemaster.play_turn(Move(3, 9, 4, 9))
        except RequestInProgressError as e:
            self.blocked = e
        return super().submit_move(move, rank)


def test_admission_gate_blocks_a_second_request():
    script = make_script(
        exchange(Player.ONE, Move(3, 0, 4, 0)),
        exchange(Player.TWO, Move(6, 4, 5, 4)),
    )
    arbiter = ReentrantArbiter(script)
    gamemaster = Gamemaster(arbiter)
    arbiter.gamemaster = gamemaster
    gamemaster.start_game()

    turn = gamemaster.play_turn(Move(3, 0, 4, 0))

    assert isinstance(arbiter.blocked, RequestInProgressError)
    assert turn.accepted
    assert gamemaster.game.board.get(3, 9).rank == Rank.SCOUT
    assert len(gamemaster.game.session.history) == 2


def test_game_over_on_local_move():
    script = make_script(
        exchange(Player.ONE, Move(3, 0, 4, 0), game_over=True, winner=Winner.PLAYER),
    )
    gamemaster = Gamemaster(ScriptedArbiter(script))

    winner = gamemaster.run([Move(3, 0, 4, 0), Move(4, 0, 5, 0)])

    assert winner == Winner.PLAYER
    assert gamemaster.game.phase == GamePhase.INITIAL
    assert gamemaster.game.last_winner == Winner.PLAYER
    assert len(gamemaster.game.last_session.history) == 1


def test_game_over_on_opponent_move():
    script = make_script(
        exchange(Player.ONE, Move(3, 0, 4, 0)),
        exchange(
            Player.TWO, Move(6, 0, 4, 0),
            MoveOutcome(attacker_rank=Rank.MARSHAL, defender_rank=Rank.SCOUT),
            game_over=True, winner=Winner.OPPONENT
        ),
    )
    gamemaster = Gamemaster(ScriptedArbiter(script))

    assert gamemaster.run([Move(3, 0, 4, 0)]) == Winner.OPPONENT
    session = gamemaster.game.last_session
    assert session.roster.remaining(Player.ONE, Rank.SCOUT) == 7
    assert session.board.get(4, 0).rank == Rank.MARSHAL


def test_run_without_result():
    script = make_script(
        exchange(Player.ONE, Move(3, 0, 4, 0)),
        exchange(Player.TWO, Move(6, 4, 5, 4)),
    )
    gamemaster = Gamemaster(ScriptedArbiter(script))

    assert gamemaster.run([Move(3, 0, 4, 0)]) is None
    assert gamemaster.game.phase == GamePhase.PLAYING


def test_max_attempts_must_be_positive():
    with pytest.raises(ValueError):
        Gamemaster(ScriptedArbiter(make_script()), max_attempts=0)


class FlakySetupArbiter(ArbiterClient):
    """Loses the first setup request."""

    def __init__(self):
        self.calls = 0

    def generate_setup(self):
        self.calls += 1
        if self.calls == 1:
            raise TransportError("connection reset")
        return standard_placements()

    def confirm_setup(self, placements):
        return True

    def submit_move(self, move, rank):
        raise TransportError("offline")

    def request_opponent_move(self):
        raise TransportError("offline")

    def get_name(self):
        return "flaky"


def test_setup_exchange_is_retried():
    arbiter = FlakySetupArbiter()
    gamemaster = Gamemaster(arbiter, max_attempts=2)

    assert gamemaster.start_game()
    assert arbiter.calls == 2
