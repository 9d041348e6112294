"""
Match summary contracts handed to the narrative-generation layer.

Field names and nesting are part of the outbound contract: the narrative
workflow and the debug logs both consume ``MatchSummary.to_payload()``.
"""

from typing import Any

from pydantic import Field

from .common import BaseContract, Role, TeamSide


class PlayerMetrics(BaseContract):
    """Per-player derived metrics. Every denominator is floored at 1."""

    kills: int = Field(0, ge=0)
    deaths: int = Field(0, ge=0)
    assists: int = Field(0, ge=0)

    # Team totals used as share denominators
    team_kills: int = Field(0, ge=0)
    team_damage_to_champions: int = Field(0, ge=0)
    team_gold: int = Field(0, ge=0)
    team_damage_taken: int = Field(0, ge=0)

    game_minutes: float = Field(0.0, ge=0)
    cs_total: int = Field(0, ge=0)

    kda: float = Field(0.0, ge=0)
    kill_participation: float = Field(0.0, ge=0)
    damage_share: float = Field(0.0, ge=0)
    gold_share: float = Field(0.0, ge=0)
    damage_taken_share: float = Field(0.0, ge=0)

    cs_per_min: float = Field(0.0, ge=0)
    damage_per_min: float = Field(0.0, ge=0)
    vision_per_min: float = Field(0.0, ge=0)
    damage_taken_per_min: float = Field(0.0, ge=0)
    cc_per_min: float = Field(0.0, ge=0)

    # Healing + shielding (per 1000) plus CC/min
    utility_score: float = Field(0.0, ge=0)

    role: Role | None = Field(None, description="Declared or inferred role")


class StandoutFlags(BaseContract):
    """Boolean superlatives. Ties at the maximum all receive the flag."""

    highest_damage_in_game: bool = False
    highest_damage_on_team: bool = False
    most_healing_in_game: bool = False
    most_shielding_in_game: bool = False
    most_healing_shielding: bool = False
    highest_vision_in_game: bool = False
    highest_vision_on_team: bool = False
    most_cc_in_game: bool = False
    most_cc_on_team: bool = False
    most_tanking_in_game: bool = False


class GameAchievements(BaseContract):
    """Single canonical champion name per standout category (empty if none)."""

    highest_damage_in_game: str = ""
    highest_damage_on_my_team: str = ""
    most_healing_shielding: str = ""
    highest_vision_in_game: str = ""
    highest_vision_on_my_team: str = ""
    most_cc_in_game: str = ""
    most_cc_on_my_team: str = ""
    most_tanking_in_game: str = ""


class TeamInsights(BaseContract):
    """Aggregate view of one side, computed over its non-AFK players."""

    average_kp: float = 0.0
    high_kp_count: int = 0
    total_utility: int = 0
    total_vision: int = 0
    well_rounded_players: int = 0
    synergy_score: float = 0.0
    carry_performance: str = Field("", description="distributed | focused | balanced")
    team_composition: str = Field("", description="damage-heavy | utility-heavy | balanced")

    total_utility_formatted: str = ""
    total_vision_formatted: str = ""


class ClutchStats(BaseContract):
    """Opaque live-monitoring record, keyed by champion name by the caller."""

    lives_saved: int = Field(0, ge=0)
    times_saved: int = Field(0, ge=0)
    critical_saves: int = Field(0, ge=0)


class PlayerSummary(BaseContract):
    """Everything the narrative layer needs to know about one player."""

    index: int = Field(..., ge=0, description="Stable position in the source payload")
    summoner_name: str
    team: TeamSide
    champion: str
    k: int = Field(0, ge=0)
    d: int = Field(0, ge=0)
    a: int = Field(0, ge=0)
    cs_per_min: float = 0.0
    damage_share: float = 0.0
    vision_score: int = 0
    tags: tuple[str, ...] = Field(default_factory=tuple)
    afk: bool = False
    metrics: PlayerMetrics
    standouts: StandoutFlags = Field(default_factory=StandoutFlags)

    total_damage: int = 0
    total_healing: int = 0
    total_shielding: int = 0
    total_cc: int = 0
    total_damage_mitigated: int = 0

    # Human-readable versions for prompts
    total_damage_formatted: str = ""
    total_healing_formatted: str = ""
    total_shielding_formatted: str = ""
    total_cc_formatted: str = ""
    total_damage_mitigated_formatted: str = ""

    # Live monitoring enrichment
    lives_saved: int = 0
    times_saved: int = 0
    critical_saves: int = 0


class MatchSummary(BaseContract):
    """Root output of the pipeline."""

    game_id: str = ""
    game_duration_minutes: float = Field(0.0, ge=0)
    winning_team: TeamSide = TeamSide.UNKNOWN
    my_summoner_name: str = ""
    my_team: TeamSide = TeamSide.UNKNOWN
    players: tuple[PlayerSummary, ...] = Field(default_factory=tuple)
    afk_on_my_team: bool = False
    afk_on_enemy_team: bool = False

    game_mode: str = ""
    queue_type: str = ""
    game_type: str = ""

    # Match intensity indicators
    is_intense_match: bool = False
    is_comeback: bool = False
    total_kills: int = 0
    kill_difference: int = 0
    gold_difference: int = 0
    damage_difference: int = 0

    my_team_insights: TeamInsights = Field(default_factory=TeamInsights)
    enemy_team_insights: TeamInsights = Field(default_factory=TeamInsights)

    # Game story indicators
    was_stomp: bool = False
    was_close: bool = False
    had_clutch_moments: bool = False
    teamwork_highlight: str = ""

    achievements: GameAchievements = Field(default_factory=GameAchievements)

    def to_payload(self) -> dict[str, Any]:
        """JSON-safe dict with stable field names for downstream consumers."""
        return self.model_dump(mode="json")
