"""Clutch-stat enrichment tests."""

from __future__ import annotations

import pytest

from src.contracts.match_summary import ClutchStats
from src.core.scoring import summarize_match
from src.core.scoring.enrichment import integrate_clutch_stats, parse_clutch_stats
from tests.payloads import match_payload, player, standard_match


def _player(summary, champion: str):
    return next(p for p in summary.players if p.champion == champion)


def test_parse_monitor_shape_counts_critical_events() -> None:
    raw = {
        "Lulu": {
            "livesSaved": 6,
            "timesSaved": 2,
            "events": [{"wasCritical": True}, {"wasCritical": False}, {"wasCritical": True}],
        }
    }

    parsed = parse_clutch_stats(raw)

    assert parsed["Lulu"] == ClutchStats(lives_saved=6, times_saved=2, critical_saves=2)


def test_parse_snake_case_and_skips_junk() -> None:
    raw = {
        "Thresh": {"lives_saved": 1, "times_saved": 0, "critical_saves": 4},
        "Broken": "not a record",
    }

    parsed = parse_clutch_stats(raw)

    assert set(parsed) == {"Thresh"}
    assert parsed["Thresh"].critical_saves == 4


def test_parse_empty_input() -> None:
    assert parse_clutch_stats(None) == {}
    assert parse_clutch_stats({}) == {}


@pytest.mark.parametrize("raw", [[{"livesSaved": 5}], "Lulu", 42])
def test_parse_non_mapping_input_is_ignored(raw) -> None:
    assert parse_clutch_stats(raw) == {}


def test_integration_appends_tags_and_counters() -> None:
    summary = summarize_match(standard_match(), viewer_name="Viewer#EUW")
    clutch = {
        "Lulu": ClutchStats(lives_saved=5, times_saved=3, critical_saves=3),
        "Thresh": ClutchStats(lives_saved=4, times_saved=1, critical_saves=0),
    }

    enriched = integrate_clutch_stats(summary, clutch)

    lulu = _player(enriched, "Lulu")
    assert lulu.lives_saved == 5
    assert lulu.times_saved == 3
    assert lulu.tags[-2:] == ("clutch_savior", "critical_savior")
    thresh = _player(enriched, "Thresh")
    assert thresh.lives_saved == 4
    assert "clutch_savior" not in thresh.tags
    # the input summary is left untouched
    assert _player(summary, "Lulu").lives_saved == 0


def test_afk_player_gets_counters_but_no_clutch_tags() -> None:
    payload = match_payload(
        [
            player("Gone", "Yasuo", 100, leaver=True),
            player("Here", "Lux", 200, kills=2),
        ]
    )
    summary = summarize_match(payload)

    enriched = integrate_clutch_stats(
        summary, {"Yasuo": ClutchStats(lives_saved=9, critical_saves=9)}
    )

    yasuo = _player(enriched, "Yasuo")
    assert yasuo.lives_saved == 9
    assert yasuo.tags == ()


def test_no_clutch_stats_returns_same_summary() -> None:
    summary = summarize_match(standard_match())

    assert integrate_clutch_stats(summary, None) is summary
    assert integrate_clutch_stats(summary, {}) is summary
