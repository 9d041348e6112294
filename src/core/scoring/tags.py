"""Tag classifier - the golden rules.

Each rule is independent and may append one tag; there is no early exit.
Team-relative comparisons only look at non-AFK teammates (the player
included). AFK players never receive tags.
"""

from collections.abc import Callable, Sequence

from src.contracts.common import TEAM_ID_BLUE, TEAM_ID_RED, PlayerTag, Role
from src.core.scoring.models import DerivedMatch, PlayerState

HEROIC_SOURCE_TAGS = frozenset(
    {
        PlayerTag.HARD_CARRY.value,
        PlayerTag.FRONTLINE_ROCK.value,
        PlayerTag.VISION_MVP.value,
        PlayerTag.UTILITY_MVP.value,
    }
)
HEROIC_MIN_GAME_MINUTES = 25.0

HARD_CARRY_DAMAGE_SHARE = 0.30
HARD_CARRY_KILL_PARTICIPATION = 0.60
HARD_CARRY_KDA = 2.0
HARD_CARRY_TAKEDOWNS = 10
FRONTLINE_DAMAGE_TAKEN_SHARE = 0.30
FRONTLINE_MAX_DEATHS = 8
FRONTLINE_CC_TOP_N = 2
VISION_MVP_PER_MIN = 1.5
UTILITY_MVP_ASSISTS = 10
OBJECTIVE_BRAIN_KILL_PARTICIPATION = 0.60
WEAKSIDE_MAX_GOLD_SHARE = 0.18
WEAKSIDE_MAX_DEATHS = 5
WEAKSIDE_KILL_PARTICIPATION = 0.40
WEAKSIDE_ASSISTS = 8

ValueOf = Callable[[PlayerState], float]


def _cc_per_min(player: PlayerState) -> float:
    return player.metrics.cc_per_min


def _vision_per_min(player: PlayerState) -> float:
    return player.metrics.vision_per_min


def _heal_shield(player: PlayerState) -> float:
    return player.participant.heal_shield_total


def is_highest(player: PlayerState, teammates: Sequence[PlayerState], value_of: ValueOf) -> bool:
    """Player's value is the team maximum (ties qualify) and non-zero."""
    value = value_of(player)
    return value > 0 and value >= max(value_of(p) for p in teammates)


def is_strict_highest(
    player: PlayerState, teammates: Sequence[PlayerState], value_of: ValueOf
) -> bool:
    """Player's value beats every other teammate outright."""
    value = value_of(player)
    return value > 0 and all(
        value_of(p) < value for p in teammates if p is not player
    )


def is_top_n(
    player: PlayerState, teammates: Sequence[PlayerState], value_of: ValueOf, n: int
) -> bool:
    """Player's value is within the top ``n`` by value (ties all qualify)."""
    value = value_of(player)
    if value <= 0:
        return False
    ranked = sorted((value_of(p) for p in teammates), reverse=True)
    cutoff = ranked[min(n, len(ranked)) - 1]
    return value >= cutoff


def _opposing_team(team_id: int) -> int | None:
    if team_id == TEAM_ID_BLUE:
        return TEAM_ID_RED
    if team_id == TEAM_ID_RED:
        return TEAM_ID_BLUE
    return None


def classify_player(
    player: PlayerState, teammates: Sequence[PlayerState], derived: DerivedMatch
) -> list[str]:
    """Apply every golden rule to one non-AFK player."""
    m = player.metrics
    p = player.participant
    tags: list[str] = []

    if (
        m.damage_share >= HARD_CARRY_DAMAGE_SHARE
        and m.kill_participation >= HARD_CARRY_KILL_PARTICIPATION
        and (m.kda >= HARD_CARRY_KDA or p.kills + p.assists >= HARD_CARRY_TAKEDOWNS)
    ):
        tags.append(PlayerTag.HARD_CARRY.value)

    if (
        m.damage_taken_share >= FRONTLINE_DAMAGE_TAKEN_SHARE
        and p.deaths <= FRONTLINE_MAX_DEATHS
        and is_top_n(player, teammates, _cc_per_min, FRONTLINE_CC_TOP_N)
    ):
        tags.append(PlayerTag.FRONTLINE_ROCK.value)

    if (
        is_strict_highest(player, teammates, _vision_per_min)
        and m.vision_per_min >= VISION_MVP_PER_MIN
    ):
        tags.append(PlayerTag.VISION_MVP.value)

    if p.assists >= UTILITY_MVP_ASSISTS and (
        is_highest(player, teammates, _heal_shield) or is_highest(player, teammates, _cc_per_min)
    ):
        tags.append(PlayerTag.UTILITY_MVP.value)

    if (
        m.role in (Role.JUNGLE.value, Role.SUPPORT.value)
        and m.kill_participation >= OBJECTIVE_BRAIN_KILL_PARTICIPATION
    ):
        mine = derived.record.objectives_for(player.team_id)
        enemy_id = _opposing_team(player.team_id)
        enemy = derived.record.objectives_for(enemy_id) if enemy_id is not None else None
        if enemy is None or (
            mine.dragon_count >= enemy.dragon_count and mine.baron_count >= enemy.baron_count
        ):
            tags.append(PlayerTag.OBJECTIVE_BRAIN.value)

    if (
        m.gold_share <= WEAKSIDE_MAX_GOLD_SHARE
        and p.deaths <= WEAKSIDE_MAX_DEATHS
        and (
            m.kill_participation >= WEAKSIDE_KILL_PARTICIPATION or p.assists >= WEAKSIDE_ASSISTS
        )
    ):
        tags.append(PlayerTag.WEAKSIDE_WARRIOR.value)

    if (
        not p.won
        and m.game_minutes >= HEROIC_MIN_GAME_MINUTES
        and HEROIC_SOURCE_TAGS.intersection(tags)
    ):
        tags.append(PlayerTag.HEROIC_IN_LOSS.value)

    return tags


def assign_tags(derived: DerivedMatch) -> DerivedMatch:
    """Run the golden rules over every non-AFK player."""
    players = []
    for player in derived.players:
        if player.is_afk:
            players.append(player.model_copy(update={"tags": ()}))
            continue
        teammates = derived.teammates(player.team_id)
        tags = classify_player(player, teammates, derived)
        players.append(player.model_copy(update={"tags": tuple(tags)}))

    return derived.model_copy(update={"players": tuple(players)})
