"""Telemetry normalizer: raw end-of-game payload -> canonical MatchRecord.

The game client reports end-of-game statistics in several shapes depending
on the client version and the endpoint that produced them:

- per-team ``teams[].players`` lists (the live end-of-game endpoint);
- a flat top-level ``participants`` list (match-history style);
- ``statsBlock.participants`` (older end-of-game wrapper);
- an already-canonical document (e.g. ``MatchRecord.model_dump()``).

Counters can live in a nested ``stats`` object with either camelCase or
UPPER_SNAKE keys, or as top-level siblings. Extraction walks an ordered
candidate table per canonical field and keeps the first non-zero value.
Field-level problems never raise: a missing or mistyped value becomes 0.
"""

import json
import logging
import math
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from src.contracts.common import TEAM_ID_BLUE, TEAM_ID_RED, Role
from src.contracts.match_record import MatchRecord, ParticipantRecord, TeamObjectives
from src.core.errors import EmptyMatchError, MalformedPayloadError

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"

# canonical field -> (camelCase keys, UPPER_SNAKE keys)
COUNTER_SOURCES: dict[str, tuple[tuple[str, ...], tuple[str, ...]]] = {
    "kills": (("kills",), ("CHAMPIONS_KILLED",)),
    "deaths": (("deaths",), ("NUM_DEATHS",)),
    "assists": (("assists",), ("ASSISTS",)),
    "minion_kills": (("totalMinionsKilled", "minionsKilled"), ("MINIONS_KILLED",)),
    "neutral_minion_kills": (("neutralMinionsKilled",), ("NEUTRAL_MINIONS_KILLED",)),
    "gold_earned": (("goldEarned",), ("GOLD_EARNED",)),
    "damage_to_champions": (
        ("totalDamageDealtToChampions",),
        ("TOTAL_DAMAGE_DEALT_TO_CHAMPIONS",),
    ),
    "damage_taken": (("totalDamageTaken",), ("TOTAL_DAMAGE_TAKEN",)),
    "vision_score": (("visionScore",), ("VISION_SCORE",)),
    "time_ccing_others": (("timeCCingOthers",), ("TIME_CCING_OTHERS",)),
    "healing_on_teammates": (("totalHealsOnTeammates",), ("TOTAL_HEAL_ON_TEAMMATES",)),
    "shielding_on_teammates": (
        ("totalDamageShieldedOnTeammates",),
        ("TOTAL_DAMAGE_SHIELDED_ON_TEAMMATES",),
    ),
    "damage_self_mitigated": (
        ("totalDamageSelfMitigated", "damageSelfMitigated"),
        ("TOTAL_DAMAGE_SELF_MITIGATED",),
    ),
}

WIN_KEYS = ("win", "WIN")
LEAVER_KEYS = ("leaver", "wasAfk", "WAS_AFK")
ROLE_KEYS = ("role", "teamPosition", "individualPosition", "position")

ROLE_ALIASES: dict[str, Role] = {
    "TOP": Role.TOP,
    "JUNGLE": Role.JUNGLE,
    "MIDDLE": Role.MIDDLE,
    "MID": Role.MIDDLE,
    "BOTTOM": Role.BOTTOM,
    "BOT": Role.BOTTOM,
    "ADC": Role.BOTTOM,
    "CARRY": Role.BOTTOM,
    "SUPPORT": Role.SUPPORT,
    "UTILITY": Role.SUPPORT,
}

TEAM_ALIASES: dict[str, int] = {
    "BLUE": TEAM_ID_BLUE,
    "ORDER": TEAM_ID_BLUE,
    "RED": TEAM_ID_RED,
    "CHAOS": TEAM_ID_RED,
}


# ---------------------------------------------------------------------------
# Safe coercion
# ---------------------------------------------------------------------------


def as_int(value: Any) -> int:
    """Coerce to a non-negative int; anything unusable becomes 0.

    Booleans are rejected: a ``True`` in a counter slot is a schema mix-up,
    not the number 1.
    """
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, int):
        return max(0, value)
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return 0
    if isinstance(value, float):
        if not math.isfinite(value):
            return 0
        return max(0, int(value))
    return 0


def as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return False


def as_str(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def as_team_id(value: Any) -> int:
    """Resolve 100/200, numeric strings, or side names to a team id (0 if unknown)."""
    if isinstance(value, str) and value.strip().upper() in TEAM_ALIASES:
        return TEAM_ALIASES[value.strip().upper()]
    return as_int(value)


def as_role(value: Any) -> Role | None:
    return ROLE_ALIASES.get(as_str(value).upper())


# ---------------------------------------------------------------------------
# Per-participant extraction
# ---------------------------------------------------------------------------


def _stats_of(player: Mapping[str, Any]) -> Mapping[str, Any]:
    stats = player.get("stats")
    return stats if isinstance(stats, Mapping) else {}


def _lookup_counter(player: Mapping[str, Any], field: str) -> int:
    """Nested stats (camel, then UPPER) before top-level; first non-zero wins."""
    camel_keys, upper_keys = COUNTER_SOURCES[field]
    for source in (_stats_of(player), player):
        for key in (*camel_keys, *upper_keys):
            value = as_int(source.get(key))
            if value:
                return value
    return 0


def _lookup_flag(player: Mapping[str, Any], keys: tuple[str, ...]) -> bool:
    stats = _stats_of(player)
    return any(as_bool(source.get(key)) for source in (stats, player) for key in keys)


def resolve_display_name(player: Mapping[str, Any]) -> str:
    """summonerName -> gameName#tag -> gameName -> displayName -> Unknown."""
    summoner_name = as_str(player.get("summonerName"))
    if summoner_name:
        return summoner_name

    game_name = as_str(player.get("riotIdGameName"))
    tagline = as_str(player.get("riotIdTagline")) or as_str(player.get("riotIdTagLine"))
    if game_name and tagline:
        return f"{game_name}#{tagline}"
    if game_name:
        return game_name

    return as_str(player.get("displayName")) or UNKNOWN


def resolve_champion_name(player: Mapping[str, Any]) -> str:
    champion_name = as_str(player.get("championName"))
    if champion_name:
        return champion_name
    champion_id = as_int(player.get("championId"))
    if champion_id:
        return f"Champion{champion_id}"
    return UNKNOWN


def _declared_role(player: Mapping[str, Any]) -> Role | None:
    for source in (player, _stats_of(player)):
        for key in ROLE_KEYS:
            role = as_role(source.get(key))
            if role is not None:
                return role
    return None


def build_participant(
    player: Mapping[str, Any],
    index: int,
    fallback_team_id: int = 0,
    fallback_won: bool = False,
) -> ParticipantRecord:
    """Build one canonical participant from a raw player mapping."""
    counters = {field: _lookup_counter(player, field) for field in COUNTER_SOURCES}
    return ParticipantRecord(
        index=index,
        display_name=resolve_display_name(player),
        champion_name=resolve_champion_name(player),
        team_id=as_team_id(player.get("teamId")) or fallback_team_id,
        won=_lookup_flag(player, WIN_KEYS) or fallback_won,
        declared_role=_declared_role(player),
        is_leaver=_lookup_flag(player, LEAVER_KEYS),
        **counters,
    )


def _has_identity(participant: ParticipantRecord) -> bool:
    return participant.display_name != UNKNOWN or participant.champion_name != UNKNOWN


# ---------------------------------------------------------------------------
# Match-level extraction
# ---------------------------------------------------------------------------


def _first_present(document: Mapping[str, Any], key: str) -> Any:
    value = document.get(key)
    if value is None:
        stats_block = document.get("statsBlock")
        if isinstance(stats_block, Mapping):
            value = stats_block.get(key)
    return value


def _duration_seconds(document: Mapping[str, Any]) -> int:
    for key in ("gameLength", "gameDuration", "gameDurationSeconds"):
        seconds = as_int(_first_present(document, key))
        if seconds:
            return seconds
    return 0


def _queue_type(document: Mapping[str, Any]) -> str:
    queue = _first_present(document, "queueType")
    if isinstance(queue, Mapping):
        queue = queue.get("type")
    return as_str(queue)


def extract_game_id(document: Mapping[str, Any]) -> str:
    raw = _first_present(document, "gameId")
    if isinstance(raw, str):
        return raw.strip()
    game_id = as_int(raw)
    return str(game_id) if game_id else ""


def _objective_map(document: Mapping[str, Any], key: str) -> dict[int, int]:
    raw = _first_present(document, key)
    if not isinstance(raw, Mapping):
        return {}
    return {as_team_id(team): as_int(count) for team, count in raw.items()}


def _team_objectives(document: Mapping[str, Any]) -> dict[int, TeamObjectives]:
    dragons = _objective_map(document, "teamDragons")
    barons = _objective_map(document, "teamBarons")

    teams = document.get("teams")
    if isinstance(teams, list):
        for team in teams:
            if not isinstance(team, Mapping):
                continue
            team_id = as_team_id(team.get("teamId"))
            if not team_id:
                continue
            dragons.setdefault(team_id, as_int(team.get("dragonKills")))
            barons.setdefault(team_id, as_int(team.get("baronKills")))

    return {
        team_id: TeamObjectives(
            dragon_count=dragons.get(team_id, 0), baron_count=barons.get(team_id, 0)
        )
        for team_id in sorted(set(dragons) | set(barons))
        if team_id
    }


# ---------------------------------------------------------------------------
# Participant-list strategies
# ---------------------------------------------------------------------------


def _from_team_players(document: Mapping[str, Any]) -> list[ParticipantRecord] | None:
    """Strategy (a): ``teams[].players``; unnamed players are dropped."""
    teams = document.get("teams")
    if not isinstance(teams, list):
        return None

    located = False
    participants: list[ParticipantRecord] = []
    for team in teams:
        if not isinstance(team, Mapping) or not isinstance(team.get("players"), list):
            continue
        located = True
        team_id = as_team_id(team.get("teamId"))
        team_won = as_bool(team.get("isWinningTeam"))
        for player in team["players"]:
            if not isinstance(player, Mapping):
                continue
            participant = build_participant(player, len(participants), team_id, team_won)
            if participant.display_name == UNKNOWN:
                continue
            participants.append(participant)
    return participants if located else None


def _from_list(raw: Any) -> list[ParticipantRecord] | None:
    if not isinstance(raw, list):
        return None
    players = [player for player in raw if isinstance(player, Mapping)]
    return [build_participant(player, index) for index, player in enumerate(players)]


def _from_participants(document: Mapping[str, Any]) -> list[ParticipantRecord] | None:
    """Strategy (b): flat top-level ``participants``."""
    return _from_list(document.get("participants"))


def _from_stats_block(document: Mapping[str, Any]) -> list[ParticipantRecord] | None:
    """Strategy (c): ``statsBlock.participants``."""
    stats_block = document.get("statsBlock")
    if not isinstance(stats_block, Mapping):
        return None
    return _from_list(stats_block.get("participants"))


STRATEGIES = (
    ("team_players", _from_team_players),
    ("participants", _from_participants),
    ("stats_block", _from_stats_block),
)


def _decode(raw_payload: Any) -> Mapping[str, Any]:
    if isinstance(raw_payload, (bytes, bytearray)):
        try:
            raw_payload = raw_payload.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedPayloadError(f"Payload is not valid UTF-8: {e}") from e
    if isinstance(raw_payload, str):
        try:
            raw_payload = json.loads(raw_payload)
        except json.JSONDecodeError as e:
            raise MalformedPayloadError(f"Payload is not valid JSON: {e}") from e
    if not isinstance(raw_payload, Mapping):
        raise MalformedPayloadError(
            f"Payload must be a JSON object, got {type(raw_payload).__name__}"
        )
    return raw_payload


def _direct_parse(document: Mapping[str, Any]) -> MatchRecord | None:
    """Strategy (d): the document already is a canonical MatchRecord."""
    if not isinstance(document.get("participants"), list):
        return None
    try:
        return MatchRecord.model_validate(dict(document))
    except ValidationError:
        return None


def normalize(raw_payload: Any) -> MatchRecord:
    """Parse a raw end-of-game payload into a canonical ``MatchRecord``.

    Args:
        raw_payload: Decoded JSON object, or JSON text / bytes.

    Returns:
        The canonical record. Participants keep their source order.

    Raises:
        MalformedPayloadError: No participant list could be located.
        EmptyMatchError: A participant list exists but holds no players.
    """
    document = _decode(raw_payload)

    located = False
    unresolved: tuple[str, list[ParticipantRecord]] | None = None
    participants: list[ParticipantRecord] | None = None
    strategy_name = ""

    for name, strategy in STRATEGIES:
        candidates = strategy(document)
        if candidates is None:
            continue
        located = True
        if any(_has_identity(p) for p in candidates):
            participants, strategy_name = candidates, name
            break
        if candidates and unresolved is None:
            unresolved = (name, candidates)

    if participants is None:
        direct = _direct_parse(document)
        if direct is not None:
            if not direct.participants:
                logger.info("empty_match", extra={"game_id": direct.game_id})
                raise EmptyMatchError("Payload lists zero participants")
            _warn_if_ambiguous(direct)
            return direct

    if participants is None and unresolved is not None:
        # Best effort: stats without any identity are still worth summarizing
        strategy_name, participants = unresolved
        logger.warning(
            "participants_without_identity",
            extra={"strategy": strategy_name, "count": len(participants)},
        )

    if participants is None:
        if located:
            logger.info("empty_match", extra={"game_id": extract_game_id(document)})
            raise EmptyMatchError("Payload lists zero participants")
        logger.warning("payload_malformed", extra={"keys": sorted(map(str, document))[:20]})
        raise MalformedPayloadError("No participant list found in payload")

    record = MatchRecord(
        game_id=extract_game_id(document),
        duration_seconds=_duration_seconds(document),
        game_mode=as_str(_first_present(document, "gameMode")),
        queue_type=_queue_type(document),
        game_type=as_str(_first_present(document, "gameType")),
        participants=tuple(participants),
        team_objectives=_team_objectives(document),
    )

    logger.debug(
        "payload_normalized",
        extra={
            "strategy": strategy_name,
            "participants": len(record.participants),
            "duration_seconds": record.duration_seconds,
        },
    )
    _warn_if_ambiguous(record)
    return record


def _warn_if_ambiguous(record: MatchRecord) -> None:
    if record.has_ambiguous_teams:
        logger.warning(
            "ambiguous_team_structure",
            extra={"game_id": record.game_id, "team_ids": record.team_ids},
        )
