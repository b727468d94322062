"""
Bank Dice - Session Models

Pydantic models for the roster and the standings table.
"""

from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class Player(BaseModel):
    """A seat at the table. Fixed for the whole game."""

    id: UUID = Field(default_factory=uuid4)
    name: str = Field(min_length=1, max_length=30)
    turn_order: int = Field(ge=0)

    model_config = {"frozen": True, "str_strip_whitespace": True}


class Standing(BaseModel):
    """One row of the standings table."""

    player_id: UUID
    name: str
    round_points: int = 0
    total: int = 0
    rank: int = Field(ge=1)

    model_config = {"frozen": True}
