"""Summary assembler - combines derived state into one MatchSummary.

Side aggregates, team insights and story indicators are evaluated only
over non-AFK players. "My" side is the viewer's team; every other player
counts as the opposing side (including all players when the viewer is not
found in the match).
"""

import logging
from dataclasses import dataclass

import numpy as np

from src.contracts.common import TeamSide
from src.contracts.match_record import MatchRecord
from src.contracts.match_summary import MatchSummary, PlayerSummary, TeamInsights
from src.core.scoring.models import DerivedMatch, PlayerState
from src.core.utils.number_format import format_number

logger = logging.getLogger(__name__)

# Team insight thresholds
HIGH_KP = 0.60
HIGH_DAMAGE_SHARE = 0.25
HIGH_VISION_PER_MIN = 1.5
HIGH_UTILITY_SCORE = 5.0
HIGH_CS_PER_MIN = 6.0
DAMAGE_HEAVY_AVG_DAMAGE = 50_000
DAMAGE_HEAVY_MAX_UTILITY = 20_000
UTILITY_HEAVY_MIN_UTILITY = 30_000


@dataclass(frozen=True)
class SideTotals:
    """Kill/gold/damage/death sums for one side (non-AFK players only)."""

    kills: int = 0
    gold: int = 0
    damage: int = 0
    deaths: int = 0


# ---------------------------------------------------------------------------
# Perspective
# ---------------------------------------------------------------------------


def resolve_viewer_team(record: MatchRecord, viewer_name: str) -> int | None:
    """Team id of the viewing player, or None if they are not in the match.

    Matching order: exact name, case-insensitive name, then the game-name
    part before ``#`` (so ``"Faker"`` finds ``"Faker#KR1"``).
    """
    wanted = (viewer_name or "").strip()
    if not wanted:
        return None

    matchers = (
        lambda name: name == wanted,
        lambda name: name.casefold() == wanted.casefold(),
        lambda name: name.split("#", 1)[0].casefold() == wanted.split("#", 1)[0].casefold(),
    )
    for matches in matchers:
        for participant in record.participants:
            if matches(participant.display_name):
                return participant.team_id
    return None


def winning_side(record: MatchRecord) -> TeamSide:
    for participant in record.participants:
        if participant.won:
            return TeamSide.from_team_id(participant.team_id)
    return TeamSide.UNKNOWN


# ---------------------------------------------------------------------------
# Per-player
# ---------------------------------------------------------------------------


def build_player_summary(player: PlayerState) -> PlayerSummary:
    p = player.participant
    return PlayerSummary(
        index=p.index,
        summoner_name=p.display_name,
        team=TeamSide.from_team_id(p.team_id),
        champion=p.champion_name,
        k=p.kills,
        d=p.deaths,
        a=p.assists,
        cs_per_min=player.metrics.cs_per_min,
        damage_share=player.metrics.damage_share,
        vision_score=p.vision_score,
        tags=player.tags,
        afk=player.is_afk,
        metrics=player.metrics,
        standouts=player.standouts,
        total_damage=p.damage_to_champions,
        total_healing=p.healing_on_teammates,
        total_shielding=p.shielding_on_teammates,
        total_cc=p.time_ccing_others,
        total_damage_mitigated=p.damage_self_mitigated,
        total_damage_formatted=format_number(p.damage_to_champions),
        total_healing_formatted=format_number(p.healing_on_teammates),
        total_shielding_formatted=format_number(p.shielding_on_teammates),
        total_cc_formatted=format_number(p.time_ccing_others),
        total_damage_mitigated_formatted=format_number(p.damage_self_mitigated),
    )


# ---------------------------------------------------------------------------
# Team insights
# ---------------------------------------------------------------------------


def _excellence_count(player: PlayerState) -> int:
    m = player.metrics
    return sum(
        (
            m.damage_share >= HIGH_DAMAGE_SHARE,
            m.vision_per_min >= HIGH_VISION_PER_MIN,
            m.kill_participation >= HIGH_KP,
            m.utility_score >= HIGH_UTILITY_SCORE,
            m.cs_per_min >= HIGH_CS_PER_MIN,
        )
    )


def _synergy(player: PlayerState) -> float:
    m = player.metrics
    return m.kill_participation * 0.6 + (m.utility_score / 10.0) * 0.4


def compute_team_insights(players: list[PlayerState]) -> TeamInsights:
    """Aggregate one side. An empty side yields zeroed insights."""
    if not players:
        return TeamInsights()

    total_utility = sum(p.participant.heal_shield_total for p in players)
    total_vision = sum(p.participant.vision_score for p in players)
    avg_damage = np.mean([p.participant.damage_to_champions for p in players]).item()

    high_damage = sum(1 for p in players if p.metrics.damage_share >= HIGH_DAMAGE_SHARE)
    if high_damage >= 3:
        carry_performance = "distributed"
    elif high_damage >= 1:
        carry_performance = "focused"
    else:
        carry_performance = "balanced"

    if avg_damage >= DAMAGE_HEAVY_AVG_DAMAGE and total_utility < DAMAGE_HEAVY_MAX_UTILITY:
        composition = "damage-heavy"
    elif total_utility >= UTILITY_HEAVY_MIN_UTILITY:
        composition = "utility-heavy"
    else:
        composition = "balanced"

    return TeamInsights(
        average_kp=np.mean([p.metrics.kill_participation for p in players]).item(),
        high_kp_count=sum(1 for p in players if p.metrics.kill_participation >= HIGH_KP),
        total_utility=total_utility,
        total_vision=total_vision,
        well_rounded_players=sum(1 for p in players if _excellence_count(p) >= 2),
        synergy_score=np.mean([_synergy(p) for p in players]).item(),
        carry_performance=carry_performance,
        team_composition=composition,
        total_utility_formatted=format_number(total_utility),
        total_vision_formatted=format_number(total_vision),
    )


def teamwork_highlight(insights: TeamInsights) -> str:
    """Key teamwork angle for the viewer's side (first match wins)."""
    if insights.high_kp_count >= 4:
        return "exceptional_team_coordination"
    if insights.synergy_score >= 0.7:
        return "strong_team_synergy"
    if insights.well_rounded_players >= 3:
        return "well_rounded_team"
    if insights.total_utility >= UTILITY_HEAVY_MIN_UTILITY:
        return "outstanding_support_play"
    if insights.average_kp >= 0.65:
        return "high_team_participation"
    return ""


# ---------------------------------------------------------------------------
# Match-level indicators
# ---------------------------------------------------------------------------


def side_totals(players: list[PlayerState]) -> SideTotals:
    return SideTotals(
        kills=sum(p.participant.kills for p in players),
        gold=sum(p.participant.gold_earned for p in players),
        damage=sum(p.participant.damage_to_champions for p in players),
        deaths=sum(p.participant.deaths for p in players),
    )


def comeback_score(mine: SideTotals, enemy: SideTotals, game_minutes: float) -> int:
    """Accumulate the comeback sub-conditions for a won match."""
    kill_diff = abs(mine.kills - enemy.kills)
    total_kills = mine.kills + enemy.kills

    score = 0
    if kill_diff <= 8 and total_kills >= 50:
        score += 2
    if game_minutes >= 35:
        score += 1
    if kill_diff <= 5 and total_kills >= 60:
        score += 2
    if mine.deaths > enemy.deaths and total_kills >= 50:
        score += 1
    return score


def is_comeback(mine: SideTotals, enemy: SideTotals, game_minutes: float, won: bool) -> bool:
    if not won:
        return False
    score = comeback_score(mine, enemy, game_minutes)
    return score >= 3 or (score >= 2 and game_minutes >= 30)


def is_intense(
    mine: SideTotals, enemy: SideTotals, game_minutes: float, comeback: bool
) -> bool:
    kill_diff = abs(mine.kills - enemy.kills)
    total_kills = mine.kills + enemy.kills
    damage_diff = abs(mine.damage - enemy.damage)
    return (
        game_minutes >= 30
        or (kill_diff <= 10 and total_kills >= 40)
        or total_kills >= 60
        or (damage_diff <= 10_000 and mine.damage + enemy.damage >= 200_000)
        or comeback
    )


def assemble(derived: DerivedMatch, viewer_name: str, my_team_id: int | None) -> MatchSummary:
    """Build the final MatchSummary from a fully classified match."""
    record = derived.record
    game_minutes = record.game_minutes

    my_players = [p for p in derived.players if my_team_id is not None and p.team_id == my_team_id]
    enemy_players = [p for p in derived.players if my_team_id is None or p.team_id != my_team_id]
    my_active = [p for p in my_players if not p.is_afk]
    enemy_active = [p for p in enemy_players if not p.is_afk]

    mine = side_totals(my_active)
    enemy = side_totals(enemy_active)
    kill_diff = abs(mine.kills - enemy.kills)
    gold_diff = abs(mine.gold - enemy.gold)
    damage_diff = abs(mine.damage - enemy.damage)
    total_kills = mine.kills + enemy.kills

    winner = winning_side(record)
    my_side = TeamSide.from_team_id(my_team_id)
    won = my_side != TeamSide.UNKNOWN and winner == my_side

    comeback = is_comeback(mine, enemy, game_minutes, won)
    my_insights = compute_team_insights(my_active)

    summary = MatchSummary(
        game_id=record.game_id,
        game_duration_minutes=game_minutes,
        winning_team=winner,
        my_summoner_name=viewer_name,
        my_team=my_side,
        players=tuple(build_player_summary(p) for p in derived.players),
        afk_on_my_team=my_team_id is not None and any(p.is_afk for p in my_players),
        afk_on_enemy_team=my_team_id is not None and any(p.is_afk for p in enemy_players),
        game_mode=record.game_mode,
        queue_type=record.queue_type,
        game_type=record.game_type,
        is_intense_match=is_intense(mine, enemy, game_minutes, comeback),
        is_comeback=comeback,
        total_kills=total_kills,
        kill_difference=kill_diff,
        gold_difference=gold_diff,
        damage_difference=damage_diff,
        my_team_insights=my_insights,
        enemy_team_insights=compute_team_insights(enemy_active),
        was_stomp=kill_diff >= 20 or gold_diff >= 15_000,
        was_close=kill_diff <= 5 and total_kills >= 40,
        had_clutch_moments=comeback or (kill_diff <= 3 and total_kills >= 50),
        teamwork_highlight=teamwork_highlight(my_insights),
        achievements=derived.achievements,
    )

    logger.info(
        "match_summary_assembled",
        extra={
            "game_id": record.game_id,
            "my_team": summary.my_team,
            "winning_team": summary.winning_team,
            "is_comeback": comeback,
        },
    )
    return summary
