"""
Canonical end-of-match record produced by the telemetry normalizer.

The raw end-of-game payload arrives in several shapes; by the time it is
turned into a ``MatchRecord`` every counter is a non-negative integer and
every identity field has been resolved through its fallback chain.
"""

from pydantic import Field

from .common import BaseContract, Role


class TeamObjectives(BaseContract):
    """Epic objective counts for one team (zero when the source omits them)."""

    dragon_count: int = Field(0, ge=0)
    baron_count: int = Field(0, ge=0)


class ParticipantRecord(BaseContract):
    """One player in the match, with raw end-of-game counters."""

    # Position in the source payload; tie-breaks depend on it
    index: int = Field(..., ge=0)

    # Identity
    display_name: str = Field("Unknown", description="Resolved summoner / Riot ID")
    champion_name: str = Field("Unknown", description="Champion name or Champion<ID>")
    team_id: int = Field(0, description="100 (blue) or 200 (red)")
    won: bool = Field(False)

    # Raw counters
    kills: int = Field(0, ge=0)
    deaths: int = Field(0, ge=0)
    assists: int = Field(0, ge=0)
    minion_kills: int = Field(0, ge=0)
    neutral_minion_kills: int = Field(0, ge=0)
    gold_earned: int = Field(0, ge=0)
    damage_to_champions: int = Field(0, ge=0)
    damage_taken: int = Field(0, ge=0)
    vision_score: int = Field(0, ge=0)
    time_ccing_others: int = Field(0, ge=0, description="Seconds")
    healing_on_teammates: int = Field(0, ge=0)
    shielding_on_teammates: int = Field(0, ge=0)
    damage_self_mitigated: int = Field(0, ge=0)

    declared_role: Role | None = Field(None, description="Role reported by the source, if any")
    is_leaver: bool = Field(False, description="Authoritative leaver/AFK flag from the source")

    @property
    def heal_shield_total(self) -> int:
        return self.healing_on_teammates + self.shielding_on_teammates

    @property
    def cs_total(self) -> int:
        return self.minion_kills + self.neutral_minion_kills


class MatchRecord(BaseContract):
    """Complete canonical end-of-match record."""

    game_id: str = Field("", description="Source game identifier, empty when unknown")
    duration_seconds: int = Field(0, ge=0)
    game_mode: str = Field("", description="e.g. CLASSIC, ARAM, URF")
    queue_type: str = Field("", description="e.g. RANKED_SOLO_5x5")
    game_type: str = Field("", description="e.g. MATCHED_GAME")

    participants: tuple[ParticipantRecord, ...] = Field(default_factory=tuple)
    team_objectives: dict[int, TeamObjectives] = Field(default_factory=dict)

    @property
    def game_minutes(self) -> float:
        return self.duration_seconds / 60.0

    @property
    def team_ids(self) -> list[int]:
        """Distinct team ids in first-seen order."""
        return list(dict.fromkeys(p.team_id for p in self.participants))

    @property
    def has_ambiguous_teams(self) -> bool:
        return len(self.team_ids) != 2

    def objectives_for(self, team_id: int) -> TeamObjectives:
        return self.team_objectives.get(team_id) or TeamObjectives()

    def get_team_participants(self, team_id: int) -> list[ParticipantRecord]:
        """Get all participants for a team."""
        return [p for p in self.participants if p.team_id == team_id]
