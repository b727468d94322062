"""
Bank Dice - Rule Constants

Numeric policy shared by the engine, validators and session layer.
"""

SAFETY_ROLLS = 3
SEVEN_BONUS_IN_SAFETY = 70

MIN_ROUNDS = 7
MAX_ROUNDS = 30

MIN_PLAYERS = 3
MAX_PLAYERS = 8

# Two d6 always total 2-12
MIN_ROLL_TOTAL = 2
MAX_ROLL_TOTAL = 12

DIE_FACES = 6


def is_seven(total: int) -> bool:
    return total == 7


def is_doubles(die1: int, die2: int) -> bool:
    return die1 == die2


def is_safety_roll(roll_number: int) -> bool:
    """Rolls 1-3 of a round are the safety zone; roll 4 onward is the press zone."""
    return roll_number <= SAFETY_ROLLS
