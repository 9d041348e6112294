"""
Common data types and base models for the post-game summary pipeline.
All models use Pydantic V2 and are immutable once constructed.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict

TEAM_ID_BLUE = 100
TEAM_ID_RED = 200


class TeamSide(str, Enum):
    """Map side of a team, as seen by the narrative layer."""

    BLUE = "BLUE"
    RED = "RED"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_team_id(cls, team_id: int | None) -> "TeamSide":
        if team_id == TEAM_ID_BLUE:
            return cls.BLUE
        if team_id == TEAM_ID_RED:
            return cls.RED
        return cls.UNKNOWN


class Role(str, Enum):
    """Functional lane role of a participant."""

    TOP = "TOP"
    JUNGLE = "JUNGLE"
    MIDDLE = "MIDDLE"
    BOTTOM = "BOTTOM"
    SUPPORT = "SUPPORT"


class PlayerTag(str, Enum):
    """Descriptive tags assigned by the golden rules and live enrichment."""

    HARD_CARRY = "hard_carry"
    FRONTLINE_ROCK = "frontline_rock"
    VISION_MVP = "vision_mvp"
    UTILITY_MVP = "utility_mvp"
    OBJECTIVE_BRAIN = "objective_brain"
    WEAKSIDE_WARRIOR = "weakside_warrior"
    HEROIC_IN_LOSS = "heroic_in_loss"
    CLUTCH_SAVIOR = "clutch_savior"
    CRITICAL_SAVIOR = "critical_savior"


class BaseContract(BaseModel):
    """Base model for all data contracts with common configuration."""

    model_config = ConfigDict(
        # Entities are built once per match-end event and never mutated
        frozen=True,
        # Use enum values in JSON
        use_enum_values=True,
        # Forbid extra fields to ensure data integrity
        extra="forbid",
    )
