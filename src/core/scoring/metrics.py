"""Metric deriver - per-player ratios and team aggregates.

Two passes, in this order:
1. Team totals (kills, damage to champions, gold, damage taken) per team id.
2. Per-player ratios using those totals as denominators.

Every denominator is floored at 1 (or 1 minute), so an all-zero participant
yields zeros rather than NaN/inf.
"""

import logging

from src.contracts.match_record import MatchRecord, ParticipantRecord
from src.contracts.match_summary import PlayerMetrics
from src.core.scoring.models import DerivedMatch, PlayerState, TeamTotals

logger = logging.getLogger(__name__)

MIN_DENOMINATOR = 1.0


def _floor(value: float) -> float:
    return max(MIN_DENOMINATOR, float(value))


def compute_team_totals(record: MatchRecord) -> dict[int, TeamTotals]:
    """Pass 1: sum counters over every participant, grouped by team id."""
    totals: dict[int, TeamTotals] = {}
    for team_id in record.team_ids:
        team = record.get_team_participants(team_id)
        totals[team_id] = TeamTotals(
            kills=sum(p.kills for p in team),
            damage_to_champions=sum(p.damage_to_champions for p in team),
            gold_earned=sum(p.gold_earned for p in team),
            damage_taken=sum(p.damage_taken for p in team),
        )
    return totals


def compute_player_metrics(
    participant: ParticipantRecord, totals: TeamTotals, game_minutes: float
) -> PlayerMetrics:
    """Pass 2: per-player ratios against the participant's team totals."""
    minutes = _floor(game_minutes)
    takedowns = participant.kills + participant.assists
    cc_per_min = participant.time_ccing_others / minutes

    return PlayerMetrics(
        kills=participant.kills,
        deaths=participant.deaths,
        assists=participant.assists,
        team_kills=totals.kills,
        team_damage_to_champions=totals.damage_to_champions,
        team_gold=totals.gold_earned,
        team_damage_taken=totals.damage_taken,
        game_minutes=game_minutes,
        cs_total=participant.cs_total,
        kda=takedowns / _floor(participant.deaths),
        kill_participation=takedowns / _floor(totals.kills),
        damage_share=participant.damage_to_champions / _floor(totals.damage_to_champions),
        gold_share=participant.gold_earned / _floor(totals.gold_earned),
        damage_taken_share=participant.damage_taken / _floor(totals.damage_taken),
        cs_per_min=participant.cs_total / minutes,
        damage_per_min=participant.damage_to_champions / minutes,
        vision_per_min=participant.vision_score / minutes,
        damage_taken_per_min=participant.damage_taken / minutes,
        cc_per_min=cc_per_min,
        utility_score=participant.heal_shield_total / 1000.0 + cc_per_min,
        role=participant.declared_role,
    )


def derive(record: MatchRecord) -> DerivedMatch:
    """Attach PlayerMetrics to every participant of ``record``."""
    team_totals = compute_team_totals(record)
    game_minutes = record.game_minutes

    players = tuple(
        PlayerState(
            participant=participant,
            metrics=compute_player_metrics(
                participant, team_totals[participant.team_id], game_minutes
            ),
        )
        for participant in record.participants
    )

    logger.debug(
        "metrics_derived",
        extra={"game_id": record.game_id, "teams": len(team_totals), "players": len(players)},
    )
    return DerivedMatch(record=record, team_totals=team_totals, players=players)
