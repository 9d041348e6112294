"""Role inference and AFK detection.

Both run before any ranking pass: standouts, achievements and tags all
exclude AFK players, so every player's AFK status must be final first.
"""

import logging

from src.config.settings import AFKThresholds
from src.contracts.common import Role
from src.contracts.match_record import ParticipantRecord
from src.contracts.match_summary import PlayerMetrics
from src.core.scoring.models import DerivedMatch

logger = logging.getLogger(__name__)

# Role decision list thresholds
JUNGLE_NEUTRAL_MINIONS = 50
JUNGLE_NEUTRAL_MINIONS_LONG_GAME = 30
JUNGLE_LONG_GAME_MINUTES = 20.0
SUPPORT_HEAL_SHIELD = 5000
SUPPORT_VISION = 50
SUPPORT_MAX_CS_PER_MIN = 2.0
BOTTOM_CS_PER_MIN = 7.0
MIDDLE_CS_PER_MIN = 5.0
MIDDLE_DAMAGE_SHARE = 0.25
TOP_CS_PER_MIN = 4.0


def infer_role(participant: ParticipantRecord, metrics: PlayerMetrics) -> Role | None:
    """Ordered decision list; first matching rule wins, None if nothing matches."""
    neutral = participant.neutral_minion_kills
    if neutral >= JUNGLE_NEUTRAL_MINIONS or (
        neutral >= JUNGLE_NEUTRAL_MINIONS_LONG_GAME
        and metrics.game_minutes >= JUNGLE_LONG_GAME_MINUTES
    ):
        return Role.JUNGLE

    if participant.heal_shield_total >= SUPPORT_HEAL_SHIELD or (
        participant.vision_score >= SUPPORT_VISION
        and metrics.cs_per_min < SUPPORT_MAX_CS_PER_MIN
    ):
        return Role.SUPPORT

    if metrics.cs_per_min >= BOTTOM_CS_PER_MIN:
        return Role.BOTTOM
    if metrics.cs_per_min >= MIDDLE_CS_PER_MIN and metrics.damage_share >= MIDDLE_DAMAGE_SHARE:
        return Role.MIDDLE
    if metrics.cs_per_min >= TOP_CS_PER_MIN:
        return Role.TOP
    return None


def is_afk(
    participant: ParticipantRecord, metrics: PlayerMetrics, thresholds: AFKThresholds
) -> bool:
    """Authoritative leaver flag first, then the all-conditions heuristic."""
    if participant.is_leaver:
        return True

    if metrics.game_minutes < thresholds.min_game_minutes:
        return False

    return (
        metrics.cs_per_min < thresholds.max_cs_per_min
        and participant.damage_to_champions < thresholds.max_damage_to_champions
        and participant.gold_earned < thresholds.max_gold_earned
        and participant.kills == 0
        and participant.assists == 0
    )


def classify(derived: DerivedMatch, thresholds: AFKThresholds) -> DerivedMatch:
    """Resolve roles and AFK status for every player."""
    players = []
    for player in derived.players:
        participant, metrics = player.participant, player.metrics

        if metrics.role is None:
            role = infer_role(participant, metrics)
            if role is not None:
                metrics = metrics.model_copy(update={"role": role.value})
                logger.debug(
                    "role_inferred",
                    extra={"player_index": participant.index, "role": role.value},
                )

        afk = is_afk(participant, metrics, thresholds)
        if afk:
            logger.info(
                "player_marked_afk",
                extra={
                    "player_index": participant.index,
                    "champion": participant.champion_name,
                    "leaver_flag": participant.is_leaver,
                },
            )

        players.append(player.model_copy(update={"metrics": metrics, "is_afk": afk}))

    return derived.model_copy(update={"players": tuple(players)})
