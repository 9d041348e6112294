"""Contract models for data validation."""

from .common import TEAM_ID_BLUE, TEAM_ID_RED, PlayerTag, Role, TeamSide
from .match_record import MatchRecord, ParticipantRecord, TeamObjectives
from .match_summary import (
    ClutchStats,
    GameAchievements,
    MatchSummary,
    PlayerMetrics,
    PlayerSummary,
    StandoutFlags,
    TeamInsights,
)

__all__ = [
    "TEAM_ID_BLUE",
    "TEAM_ID_RED",
    "PlayerTag",
    "Role",
    "TeamSide",
    "MatchRecord",
    "ParticipantRecord",
    "TeamObjectives",
    "ClutchStats",
    "GameAchievements",
    "MatchSummary",
    "PlayerMetrics",
    "PlayerSummary",
    "StandoutFlags",
    "TeamInsights",
]
