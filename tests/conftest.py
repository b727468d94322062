"""
Bank Dice - Test Configuration and Fixtures

Common fixtures and test data for all test modules.
"""

import pytest

from src.config.settings import Settings
from src.engine.round_engine import RoundEngine
from src.session.coordinator import GameCoordinator


# =============================================================================
# ROSTERS
# =============================================================================

@pytest.fixture
def three_ids() -> list[str]:
    return ["ann", "ben", "cal"]


@pytest.fixture
def four_ids() -> list[str]:
    return ["ann", "ben", "cal", "dee"]


@pytest.fixture
def names() -> list[str]:
    """Four player names in turn order."""
    return ["Ann", "Ben", "Cal", "Dee"]


# =============================================================================
# ENGINE FIXTURES
# =============================================================================

@pytest.fixture
def engine(three_ids) -> RoundEngine:
    """Round engine started with three players and 7 rounds."""
    e = RoundEngine()
    e.start_game(three_ids, 7)
    return e


@pytest.fixture
def engine4(four_ids) -> RoundEngine:
    """Round engine started with four players and 7 rounds."""
    e = RoundEngine()
    e.start_game(four_ids, 7)
    return e


# =============================================================================
# SESSION FIXTURES
# =============================================================================

@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, default_rounds=7)


@pytest.fixture
def coordinator(settings, names) -> GameCoordinator:
    """Coordinator with four players over 7 rounds, round 1 in progress."""
    c = GameCoordinator(settings=settings)
    c.start_game(names, 7)
    c.drain_events()
    return c
