"""Pure entry point: raw end-of-game payload -> MatchSummary.

No I/O, no settings lookups, no shared state. Given byte-identical input
the output is byte-identical.
"""

import logging
from collections.abc import Mapping
from typing import Any

from src.config.settings import AFKThresholds
from src.contracts.match_summary import ClutchStats, MatchSummary
from src.core.errors import EmptyMatchError
from src.core.ingest.normalizer import normalize
from src.core.observability import trace_performance
from src.core.scoring.classifier import classify
from src.core.scoring.enrichment import integrate_clutch_stats
from src.core.scoring.metrics import derive
from src.core.scoring.standouts import compute_standouts
from src.core.scoring.summary import assemble, resolve_viewer_team
from src.core.scoring.tags import assign_tags

logger = logging.getLogger(__name__)


@trace_performance
def summarize_match(
    raw_payload: Any,
    thresholds: AFKThresholds | None = None,
    viewer_name: str = "",
    clutch_stats: Mapping[str, ClutchStats] | None = None,
) -> MatchSummary | None:
    """Run the full pipeline over one end-of-game payload.

    Args:
        raw_payload: Decoded JSON object, or JSON text / bytes.
        thresholds: AFK heuristic cut-offs (defaults when omitted).
        viewer_name: Display name of the viewing player.
        clutch_stats: Optional live-monitoring records keyed by champion name.

    Returns:
        The assembled summary, or None when the match has no participants.

    Raises:
        MalformedPayloadError: No participant list could be located.
    """
    try:
        record = normalize(raw_payload)
    except EmptyMatchError:
        logger.info("nothing_to_summarize")
        return None

    my_team_id = resolve_viewer_team(record, viewer_name)
    if viewer_name and my_team_id is None:
        logger.warning("viewer_not_in_match", extra={"game_id": record.game_id})

    derived = derive(record)
    derived = classify(derived, thresholds or AFKThresholds())
    derived = compute_standouts(derived, my_team_id)
    derived = assign_tags(derived)

    summary = assemble(derived, viewer_name, my_team_id)
    return integrate_clutch_stats(summary, clutch_stats)
