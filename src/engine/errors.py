"""
Bank Dice - Engine Exceptions

All validation errors derive from ValueError so callers that already catch
ValueError keep working; out-of-order calls derive from RuntimeError.
"""


class BankDiceError(Exception):
    """Base class for all Bank Dice errors."""


class ConfigurationError(BankDiceError, ValueError):
    """Round count, player count or roster names outside the allowed bounds."""


class InvalidRollValue(BankDiceError, ValueError):
    """A Doubles or Value roll reported without a total in 2-12."""


class GameStateError(BankDiceError, RuntimeError):
    """An operation was called at a point in the game where it is not allowed."""
