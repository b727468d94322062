"""
Bank Dice Session Layer.

Roster, score ledger and the coordinator that runs a game round by round.
"""

from src.session.coordinator import BankResult, GameCoordinator, GameOutcome, TurnPhase
from src.session.events import EventPayload, GameEvent
from src.session.ledger import ScoreLedger
from src.session.models import Player, Standing

__all__ = [
    "BankResult",
    "EventPayload",
    "GameCoordinator",
    "GameEvent",
    "GameOutcome",
    "Player",
    "ScoreLedger",
    "Standing",
    "TurnPhase",
]
