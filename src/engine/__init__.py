"""
Bank Dice Game Engine.

Pure Python round logic with zero UI/database dependencies.
Handles roll arithmetic, safety/press zones, banking and roller rotation.
"""

from src.engine.base import (
    GameConfig,
    RollKind,
    RollRecord,
    RollResult,
    RoundScoreEntry,
    RoundState,
    Zone,
)
from src.engine.errors import (
    BankDiceError,
    ConfigurationError,
    GameStateError,
    InvalidRollValue,
)
from src.engine.round_engine import RoundEngine

__all__ = [
    # Data Classes
    "GameConfig",
    "RollRecord",
    "RollResult",
    "RoundScoreEntry",
    "RoundState",
    # Enums
    "RollKind",
    "Zone",
    # Errors
    "BankDiceError",
    "ConfigurationError",
    "GameStateError",
    "InvalidRollValue",
    # Engines
    "RoundEngine",
]
