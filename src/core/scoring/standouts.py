"""Standout & achievement engine.

Flags are not exclusive: every non-AFK player tied at a category maximum
gets the flag. Achievements name exactly one champion per category, the
first player in source order whose flag is set and whose value equals the
recorded maximum. A maximum of zero never qualifies.
"""

from collections.abc import Callable, Iterable

from src.contracts.match_summary import GameAchievements, StandoutFlags
from src.core.scoring.models import DerivedMatch, PlayerState

TANKING_MIN_SCORE = 1000.0
TANKING_MAX_DEATHS = 5

ValueOf = Callable[[PlayerState], float]


def damage_of(player: PlayerState) -> float:
    return player.participant.damage_to_champions


def healing_of(player: PlayerState) -> float:
    return player.participant.healing_on_teammates


def shielding_of(player: PlayerState) -> float:
    return player.participant.shielding_on_teammates


def heal_shield_of(player: PlayerState) -> float:
    return player.participant.heal_shield_total


def vision_of(player: PlayerState) -> float:
    return player.participant.vision_score


def cc_of(player: PlayerState) -> float:
    return player.participant.time_ccing_others


def tanking_of(player: PlayerState) -> float:
    """Damage taken per death, deaths floored at 1."""
    return player.participant.damage_taken / max(player.participant.deaths, 1)


# flag name -> value accessor (game-wide scope)
GAME_CATEGORIES: dict[str, ValueOf] = {
    "highest_damage_in_game": damage_of,
    "most_healing_in_game": healing_of,
    "most_shielding_in_game": shielding_of,
    "most_healing_shielding": heal_shield_of,
    "highest_vision_in_game": vision_of,
    "most_cc_in_game": cc_of,
}

# flag name -> value accessor (per-team scope)
TEAM_CATEGORIES: dict[str, ValueOf] = {
    "highest_damage_on_team": damage_of,
    "highest_vision_on_team": vision_of,
    "most_cc_on_team": cc_of,
}


def _max_value(players: Iterable[PlayerState], value_of: ValueOf) -> float:
    return max((value_of(p) for p in players), default=0.0)


def _is_standout(value: float, maximum: float) -> bool:
    return value > 0 and value == maximum


def _flags_for(
    player: PlayerState,
    game_max: dict[str, float],
    team_max: dict[int, dict[str, float]],
) -> StandoutFlags:
    flags = {
        flag: _is_standout(value_of(player), game_max[flag])
        for flag, value_of in GAME_CATEGORIES.items()
    }
    own_team = team_max.get(player.team_id, {})
    flags.update(
        {
            flag: _is_standout(value_of(player), own_team.get(flag, 0.0))
            for flag, value_of in TEAM_CATEGORIES.items()
        }
    )

    tanking = tanking_of(player)
    flags["most_tanking_in_game"] = (
        _is_standout(tanking, game_max["most_tanking_in_game"])
        and game_max["most_tanking_in_game"] > TANKING_MIN_SCORE
        and player.participant.deaths <= TANKING_MAX_DEATHS
    )
    return StandoutFlags(**flags)


def _first_holder(
    players: Iterable[PlayerState], flag: str, value_of: ValueOf, maximum: float
) -> str:
    for player in players:
        if getattr(player.standouts, flag) and value_of(player) == maximum:
            return player.participant.champion_name
    return ""


def compute_standouts(derived: DerivedMatch, my_team_id: int | None) -> DerivedMatch:
    """Assign standout flags to non-AFK players and resolve achievements.

    Args:
        derived: Match after role/AFK classification.
        my_team_id: Viewer's team, or None when the viewer is not in the match.
    """
    active = derived.active_players

    game_max = {flag: _max_value(active, value_of) for flag, value_of in GAME_CATEGORIES.items()}
    game_max["most_tanking_in_game"] = _max_value(active, tanking_of)

    team_max: dict[int, dict[str, float]] = {}
    for team_id in derived.record.team_ids:
        teammates = derived.teammates(team_id)
        team_max[team_id] = {
            flag: _max_value(teammates, value_of) for flag, value_of in TEAM_CATEGORIES.items()
        }

    players = tuple(
        player
        if player.is_afk
        else player.model_copy(update={"standouts": _flags_for(player, game_max, team_max)})
        for player in derived.players
    )

    ranked = [p for p in players if not p.is_afk]
    mine = [p for p in ranked if my_team_id is not None and p.team_id == my_team_id]
    my_max = team_max.get(my_team_id, {}) if my_team_id is not None else {}

    achievements = GameAchievements(
        highest_damage_in_game=_first_holder(
            ranked, "highest_damage_in_game", damage_of, game_max["highest_damage_in_game"]
        ),
        highest_damage_on_my_team=_first_holder(
            mine, "highest_damage_on_team", damage_of, my_max.get("highest_damage_on_team", 0.0)
        ),
        most_healing_shielding=_first_holder(
            ranked,
            "most_healing_shielding",
            heal_shield_of,
            game_max["most_healing_shielding"],
        ),
        highest_vision_in_game=_first_holder(
            ranked, "highest_vision_in_game", vision_of, game_max["highest_vision_in_game"]
        ),
        highest_vision_on_my_team=_first_holder(
            mine, "highest_vision_on_team", vision_of, my_max.get("highest_vision_on_team", 0.0)
        ),
        most_cc_in_game=_first_holder(
            ranked, "most_cc_in_game", cc_of, game_max["most_cc_in_game"]
        ),
        most_cc_on_my_team=_first_holder(
            mine, "most_cc_on_team", cc_of, my_max.get("most_cc_on_team", 0.0)
        ),
        most_tanking_in_game=_first_holder(
            ranked, "most_tanking_in_game", tanking_of, game_max["most_tanking_in_game"]
        ),
    )

    return derived.model_copy(update={"players": players, "achievements": achievements})
