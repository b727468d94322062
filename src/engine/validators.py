"""
Bank Dice - Input Validation Utilities

Provides validation functions for game engine inputs. All validators
either return validated data or raise a descriptive ConfigurationError or
InvalidRollValue (both ValueError subclasses).
"""

from typing import Hashable, Sequence

from src.engine.errors import ConfigurationError, InvalidRollValue
from src.engine.rules import (
    MAX_PLAYERS,
    MAX_ROLL_TOTAL,
    MAX_ROUNDS,
    MIN_PLAYERS,
    MIN_ROLL_TOTAL,
    MIN_ROUNDS,
)


def validate_round_count(rounds: int) -> int:
    """
    Validate the scheduled number of rounds.

    Args:
        rounds: Number of rounds chosen at setup

    Returns:
        Validated round count

    Raises:
        ConfigurationError: If rounds is not 7-30
    """
    if not isinstance(rounds, int):
        raise ConfigurationError(f"Rounds must be an integer, got {type(rounds).__name__}.")

    if not (MIN_ROUNDS <= rounds <= MAX_ROUNDS):
        raise ConfigurationError(
            f"Rounds must be between {MIN_ROUNDS} and {MAX_ROUNDS}, got {rounds}."
        )

    return rounds


def validate_player_count(count: int) -> int:
    """
    Validate number of players.

    Args:
        count: Number of players

    Returns:
        Validated count

    Raises:
        ConfigurationError: If count is not 3-8
    """
    if not isinstance(count, int):
        raise ConfigurationError(f"Player count must be an integer, got {type(count).__name__}.")

    if not (MIN_PLAYERS <= count <= MAX_PLAYERS):
        raise ConfigurationError(
            f"Players must be between {MIN_PLAYERS} and {MAX_PLAYERS}, got {count}."
        )

    return count


def validate_player_ids(player_ids: Sequence[Hashable]) -> tuple[Hashable, ...]:
    """
    Validate an ordered roster of player ids.

    Args:
        player_ids: Ids in turn order

    Returns:
        Ids as a tuple, order preserved

    Raises:
        ConfigurationError: If the count is out of bounds or an id repeats
    """
    ids = tuple(player_ids)
    validate_player_count(len(ids))

    if len(set(ids)) != len(ids):
        raise ConfigurationError("Player ids must be unique.")

    return ids


def validate_roll_total(total: int | None, label: str = "Roll") -> int:
    """
    Validate the reported sum of two dice.

    Args:
        total: Sum reported for a Doubles or Value roll
        label: Name used in the error message

    Returns:
        Validated total

    Raises:
        InvalidRollValue: If the total is missing, not an integer, or not 2-12
    """
    if total is None:
        raise InvalidRollValue(f"{label} total is required.")

    if isinstance(total, bool) or not isinstance(total, int):
        raise InvalidRollValue(f"{label} total must be an integer, got {type(total).__name__}.")

    if not (MIN_ROLL_TOTAL <= total <= MAX_ROLL_TOTAL):
        raise InvalidRollValue(
            f"{label} total must be between {MIN_ROLL_TOTAL} and {MAX_ROLL_TOTAL}, got {total}."
        )

    return total


def validate_doubles_entry(total: int | None) -> int:
    """
    Stricter input guard for a Doubles total entered by hand.

    The engine accepts any 2-12 total for Doubles; this check is for the
    input layer, where a pair of equal faces can only sum to an even number.

    Raises:
        InvalidRollValue: If the total is out of range or odd
    """
    total = validate_roll_total(total, label="Doubles")

    if total % 2 != 0:
        raise InvalidRollValue(f"Doubles total must be even, got {total}.")

    return total
