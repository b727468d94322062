"""
Bank Dice - Game Event Definitions

Event types and payloads the session queues for the UI layer to pull.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Hashable


class GameEvent(Enum):
    """Events that can occur during a game."""

    GAME_STARTED = auto()
    ROLL_APPLIED = auto()
    PLAYERS_BANKED = auto()
    ROLLER_ADVANCED = auto()
    ROUND_ENDED = auto()
    ROUND_STARTED = auto()
    GAME_WON = auto()
    GAME_QUIT = auto()


@dataclass
class EventPayload:
    """Wrapper for a game event and its data."""

    event: GameEvent
    round_number: int
    player_id: Hashable | None = None
    data: dict[str, Any] = field(default_factory=dict)
