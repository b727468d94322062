"""
Bank Dice - Game Engine Base Classes

This module defines the foundational data structures and enums used throughout
the game engine. Value types are immutable (frozen dataclasses); the only
mutable state lives inside RoundEngine and the session layer.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Hashable

from src.engine.rules import DIE_FACES, is_doubles, is_seven
from src.engine.validators import validate_player_count, validate_round_count

PlayerId = Hashable


class RollKind(Enum):
    """Outcome category of a reported roll."""
    SEVEN = "seven"
    DOUBLES = "doubles"
    VALUE = "value"


class Zone(Enum):
    """Which part of the round a roll fell in."""
    SAFETY = "safety"  # rolls 1-3
    PRESS = "press"    # roll 4 onward


@dataclass(frozen=True)
class RollRecord:
    """
    A reported roll outcome.

    Attributes:
        kind: Seven, Doubles or Value
        total: Sum of both dice (None for a Seven)
    """
    kind: RollKind
    total: int | None = None

    @classmethod
    def from_dice(cls, die1: int, die2: int) -> "RollRecord":
        """Classify two physical d6 faces into a roll record."""
        for value in (die1, die2):
            if not (1 <= value <= DIE_FACES):
                raise ValueError(
                    f"Invalid die value {value}. Must be between 1 and {DIE_FACES}."
                )
        total = die1 + die2
        if is_seven(total):
            return cls(kind=RollKind.SEVEN)
        if is_doubles(die1, die2):
            return cls(kind=RollKind.DOUBLES, total=total)
        return cls(kind=RollKind.VALUE, total=total)


@dataclass(frozen=True)
class RollResult:
    """
    Result of applying a roll to the current round.

    Attributes:
        pot_delta: New pot minus old pot (negative when a Seven wipes it)
        round_ended_by_seven: True when a press-zone Seven ended the round
        pot: Pot value after the roll
        roll_count: Roll number this result belongs to (1-based)
        zone: Safety or press zone
    """
    pot_delta: int
    round_ended_by_seven: bool
    pot: int
    roll_count: int
    zone: Zone


@dataclass(frozen=True)
class RoundState:
    """
    Snapshot of the current round.

    Attributes:
        round_number: 1-based round counter
        roll_count: Rolls taken this round
        pot: Shared points at stake
        active_players: Ids still eligible to roll or bank
        roller_index: Turn-order position of the current roller
    """
    round_number: int = 1
    roll_count: int = 0
    pot: int = 0
    active_players: frozenset = field(default_factory=frozenset)
    roller_index: int = 0


@dataclass(frozen=True)
class RoundScoreEntry:
    """
    One player's outcome for one round.

    Attributes:
        player_id: Player the entry belongs to
        round_number: Round the points were scored in
        points: Points banked this round (0 when caught by a Seven)
        running_total: Total after this round
    """
    player_id: PlayerId
    round_number: int
    points: int
    running_total: int


@dataclass(frozen=True)
class GameConfig:
    """
    Configuration for a game session.

    Attributes:
        max_rounds: Scheduled number of rounds (7-30)
        num_players: Number of players (3-8)
    """
    max_rounds: int
    num_players: int

    def __post_init__(self) -> None:
        """Validate configuration."""
        validate_round_count(self.max_rounds)
        validate_player_count(self.num_players)
