"""
Game state module for the Stratego game engine.
Ranks, figure status, players, phases and the Figure record.
"""

from enum import Enum
from typing import Optional
from dataclasses import dataclass

from stratego_game_engine.core.errors import InconsistentOutcome


class Rank(Enum):
    """Figure rank. Values are the wire names used by the arbiter."""
    FLAG = "Flag"
    SPY = "One"
    SCOUT = "Two"
    MINER = "Three"
    FOUR = "Four"
    FIVE = "Five"
    SIX = "Six"
    SEVEN = "Seven"
    EIGHT = "Eight"
    NINE = "Nine"
    MARSHAL = "Ten"
    BOMB = "Bomb"
    UNKNOWN = "Unknown"

    @property
    def display_code(self) -> str:
        """Single character used for compact board printing."""
        return DISPLAY_CODES[self]

    @property
    def is_movable(self) -> bool:
        return self not in (Rank.FLAG, Rank.BOMB)

    @property
    def is_known(self) -> bool:
        return self != Rank.UNKNOWN


DISPLAY_CODES = {
    Rank.MARSHAL: "1",
    Rank.NINE: "2",
    Rank.EIGHT: "3",
    Rank.SEVEN: "4",
    Rank.SIX: "5",
    Rank.FIVE: "6",
    Rank.FOUR: "7",
    Rank.MINER: "8",
    Rank.SCOUT: "9",
    Rank.SPY: "s",
    Rank.BOMB: "B",
    Rank.FLAG: "F",
    Rank.UNKNOWN: "#",
}

EMPTY_CODE = "."

_RANKS_BY_CODE = {code: rank for rank, code in DISPLAY_CODES.items()}


def rank_from_code(code: str) -> Rank:
    """Inverse of Rank.display_code."""
    try:
        return _RANKS_BY_CODE[code]
    except KeyError:
        raise ValueError(f"Unknown rank display code: {code!r}") from None


def parse_rank(text: Optional[str]) -> Optional[Rank]:
    """
    Parse a wire rank name.

    "None" (or an empty value) means no figure took part, and maps to None.
    """
    if text is None:
        return None
    text = str(text).strip()
    if text == "" or text == "None":
        return None
    try:
        return Rank(text)
    except ValueError:
        raise InconsistentOutcome(f"Unrecognised rank name: {text!r}") from None


class Status(Enum):
    """What the local viewer knows about a figure."""
    NONE = 0
    MOVED = 1
    DETECTED = 2


class Player(Enum):
    """Side owning a figure. Player ONE is the local side."""
    ONE = 1
    TWO = 2

    @property
    def opponent(self) -> 'Player':
        return Player.TWO if self == Player.ONE else Player.ONE


class GamePhase(Enum):
    """Phases of the game state machine."""
    INITIAL = 0
    SETUP = 1
    PLAYING = 2


class Winner(Enum):
    """Game result as reported by the arbiter, from the local side's view."""
    PLAYER = "WebPlayer"
    OPPONENT = "ComputerPlayer"
    TIED = "Tied"
    UNKNOWN = "Unknown"

    @staticmethod
    def from_wire(text: Optional[str]) -> 'Winner':
        """Map a wire winner value; anything unrecognised is UNKNOWN."""
        if not text:
            return Winner.UNKNOWN
        normalized = str(text).strip().lower()
        aliases = {
            "webplayer": Winner.PLAYER,
            "player": Winner.PLAYER,
            "computerplayer": Winner.OPPONENT,
            "opponent": Winner.OPPONENT,
            "tied": Winner.TIED,
            "tie": Winner.TIED,
        }
        return aliases.get(normalized, Winner.UNKNOWN)


@dataclass(eq=False)
class Figure:
    """A single piece on the board. Compared by identity."""
    rank: Rank
    player: Player
    status: Status = Status.NONE

    def update_status(self, status: Status) -> None:
        """Apply a status change. DETECTED is final; MOVED never overrides it."""
        if status == Status.DETECTED:
            self.status = Status.DETECTED
        elif status == Status.MOVED and self.status != Status.DETECTED:
            self.status = Status.MOVED

    @property
    def is_detected(self) -> bool:
        return self.status == Status.DETECTED

    def __repr__(self) -> str:
        return f"Figure({self.rank.value}, P{self.player.value}, {self.status.name})"
