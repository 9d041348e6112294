"""Post-game statistics pipeline.

Passes, in order:
1. Metric derivation (team totals, then per-player ratios)
2. Role inference and AFK detection
3. Standout flags and achievements
4. Golden-rule tags
5. Summary assembly (+ optional live-monitoring enrichment)
"""

from src.core.scoring.enrichment import integrate_clutch_stats, parse_clutch_stats
from src.core.scoring.models import DerivedMatch, PlayerState, TeamTotals
from src.core.scoring.pipeline import summarize_match

__all__ = [
    "DerivedMatch",
    "PlayerState",
    "TeamTotals",
    "integrate_clutch_stats",
    "parse_clutch_stats",
    "summarize_match",
]
