"""Live-monitoring enrichment merged into a finished MatchSummary.

Clutch records come from an unrelated in-game heuristic, keyed by champion
name. They are treated as opaque: matched by champion, copied onto the
player, and turned into two extra tags.
"""

import logging
from collections.abc import Mapping
from typing import Any

from src.contracts.common import PlayerTag
from src.contracts.match_summary import ClutchStats, MatchSummary
from src.core.ingest.normalizer import as_bool, as_int

logger = logging.getLogger(__name__)

CLUTCH_SAVIOR_MIN_LIVES_SAVED = 5
CRITICAL_SAVIOR_MIN_CRITICAL_SAVES = 3


def parse_clutch_stats(raw: Any) -> dict[str, ClutchStats]:
    """Decode the live monitor's ``champion -> record`` mapping.

    Accepts either the monitor's own shape (``livesSaved``, ``timesSaved``,
    ``events[].wasCritical``) or already-canonical snake_case records.
    """
    if not raw:
        return {}
    if not isinstance(raw, Mapping):
        logger.warning("clutch_stats_ignored", extra={"type": type(raw).__name__})
        return {}

    parsed: dict[str, ClutchStats] = {}
    for champion, record in raw.items():
        if isinstance(record, ClutchStats):
            parsed[str(champion)] = record
            continue
        if not isinstance(record, Mapping):
            continue

        critical = as_int(record.get("critical_saves"))
        events = record.get("events")
        if isinstance(events, list):
            critical = max(
                critical,
                sum(
                    1
                    for event in events
                    if isinstance(event, Mapping) and as_bool(event.get("wasCritical"))
                ),
            )

        parsed[str(champion)] = ClutchStats(
            lives_saved=as_int(record.get("lives_saved", record.get("livesSaved"))),
            times_saved=as_int(record.get("times_saved", record.get("timesSaved"))),
            critical_saves=critical,
        )
    return parsed


def integrate_clutch_stats(
    summary: MatchSummary, clutch_stats: Mapping[str, ClutchStats] | None
) -> MatchSummary:
    """Return a new summary with clutch counters and tags merged in."""
    if not clutch_stats:
        return summary

    players = []
    for player in summary.players:
        stats = clutch_stats.get(player.champion)
        if stats is None:
            players.append(player)
            continue

        tags = list(player.tags)
        if not player.afk:
            if stats.lives_saved >= CLUTCH_SAVIOR_MIN_LIVES_SAVED:
                tags.append(PlayerTag.CLUTCH_SAVIOR.value)
            if stats.critical_saves >= CRITICAL_SAVIOR_MIN_CRITICAL_SAVES:
                tags.append(PlayerTag.CRITICAL_SAVIOR.value)

        players.append(
            player.model_copy(
                update={
                    "lives_saved": stats.lives_saved,
                    "times_saved": stats.times_saved,
                    "critical_saves": stats.critical_saves,
                    "tags": tuple(tags),
                }
            )
        )

    logger.debug(
        "clutch_stats_integrated",
        extra={"game_id": summary.game_id, "records": len(clutch_stats)},
    )
    return summary.model_copy(update={"players": tuple(players)})
