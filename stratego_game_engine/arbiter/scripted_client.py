"""
Arbiter client that plays back a YAML match script.
"""

import logging
from dataclasses import replace
from typing import Dict, List, Optional

from stratego_game_engine.arbiter.arbiter_client import ArbiterClient, TransportError
from stratego_game_engine.core.game_state import Player, Rank
from stratego_game_engine.core.moves import Move, MoveResponse, Placement
from stratego_game_engine.io.yaml_moves import MatchScript, ScriptedExchange, ScriptValidationError

logger = logging.getLogger(__name__)


class ScriptedArbiter(ArbiterClient):
    """
    Serves arbiter answers from a match script, one exchange at a time.

    An exchange with transport_failures N raises TransportError N times
    before it is answered.
    """

    def __init__(self, script: MatchScript):
        self.script = script
        self.position = 0
        self._failures_left: Dict[int, int] = {
            index: exchange.transport_failures
            for index, exchange in enumerate(script.exchanges)
        }

    @property
    def remaining_exchanges(self) -> int:
        return len(self.script.exchanges) - self.position

    def _peek(self, side: Player) -> ScriptedExchange:
        if self.position >= len(self.script.exchanges):
            raise ScriptValidationError(f"Match script '{self.script.name}' has no more exchanges")

        exchange = self.script.exchanges[self.position]
        if exchange.by != side:
            raise ScriptValidationError(
                f"Exchange {self.position + 1} of '{self.script.name}' is by player {exchange.by.value}, "
                f"expected player {side.value}"
            )

        if self._failures_left[self.position] > 0:
            self._failures_left[self.position] -= 1
            raise TransportError(f"Simulated transport failure on exchange {self.position + 1}")

        return exchange

    def _respond(self, exchange: ScriptedExchange, attacker_rank: Optional[Rank] = None) -> MoveResponse:
        self.position += 1
        outcome = exchange.outcome
        if outcome.attacker_rank is None and attacker_rank is not None:
            outcome = replace(outcome, attacker_rank=attacker_rank)
        return MoveResponse(
            success=True,
            outcome=outcome,
            move=exchange.move,
            game_over=exchange.game_over,
            winner=exchange.winner,
        )

    def generate_setup(self) -> List[Placement]:
        return list(self.script.placements)

    def confirm_setup(self, placements: List[Placement]) -> bool:
        return self.script.confirm

    def submit_move(self, move: Move, rank: Rank) -> MoveResponse:
        exchange = self._peek(Player.ONE)

        if exchange.move != move:
            logger.warning(f"Submitted {move} does not match scripted {exchange.move}; rejecting")
            return MoveResponse(success=False, move=move)

        if not exchange.accepted:
            self.position += 1
            return MoveResponse(success=False, move=move)

        return self._respond(exchange, rank)

    def request_opponent_move(self) -> MoveResponse:
        return self._respond(self._peek(Player.TWO))

    def get_name(self) -> str:
        return f"scripted:{self.script.name}"
