"""Scoring data models carried between pipeline passes.

Data structures only, no business logic. Each pass returns new instances
via ``model_copy(update=...)``; nothing is mutated after construction.
"""

from pydantic import BaseModel, ConfigDict, Field

from src.contracts.match_record import MatchRecord, ParticipantRecord
from src.contracts.match_summary import GameAchievements, PlayerMetrics, StandoutFlags


class PlayerState(BaseModel):
    """One participant plus everything derived about them so far."""

    model_config = ConfigDict(frozen=True)

    participant: ParticipantRecord
    metrics: PlayerMetrics
    is_afk: bool = False
    standouts: StandoutFlags = Field(default_factory=StandoutFlags)
    tags: tuple[str, ...] = Field(default_factory=tuple)

    @property
    def index(self) -> int:
        return self.participant.index

    @property
    def team_id(self) -> int:
        return self.participant.team_id


class TeamTotals(BaseModel):
    """Team-level sums used as share denominators."""

    model_config = ConfigDict(frozen=True)

    kills: int = Field(0, ge=0)
    damage_to_champions: int = Field(0, ge=0)
    gold_earned: int = Field(0, ge=0)
    damage_taken: int = Field(0, ge=0)


class DerivedMatch(BaseModel):
    """Canonical record plus per-player state, in source order."""

    model_config = ConfigDict(frozen=True)

    record: MatchRecord
    team_totals: dict[int, TeamTotals] = Field(default_factory=dict)
    players: tuple[PlayerState, ...] = Field(default_factory=tuple)
    achievements: GameAchievements = Field(default_factory=GameAchievements)

    @property
    def active_players(self) -> list[PlayerState]:
        """Players eligible for ranking passes (AFK excluded)."""
        return [p for p in self.players if not p.is_afk]

    def teammates(self, team_id: int) -> list[PlayerState]:
        """Non-AFK players on ``team_id``."""
        return [p for p in self.players if p.team_id == team_id and not p.is_afk]
