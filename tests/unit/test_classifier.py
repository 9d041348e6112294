"""Role inference and AFK detection tests."""

from __future__ import annotations

import pytest

from src.config.settings import AFKThresholds
from src.contracts.common import Role
from src.core.ingest.normalizer import normalize
from src.core.scoring.classifier import classify, infer_role, is_afk
from src.core.scoring.metrics import derive
from tests.payloads import match_payload, player


def _single(duration: int = 1800, **stats):
    """Derived state for one blue player plus a red filler."""
    payload = match_payload(
        [player("Subject", "Annie", 100, **stats), player("Filler", "Lux", 200, kills=1)],
        duration=duration,
    )
    return derive(normalize(payload)).players[0]


@pytest.mark.parametrize(
    ("stats", "duration", "expected"),
    [
        ({"neutral": 50}, 600, Role.JUNGLE),
        ({"neutral": 30}, 1200, Role.JUNGLE),
        ({"neutral": 30}, 1140, None),
        ({"heal": 3000, "shield": 2000}, 1800, Role.SUPPORT),
        ({"vision": 50, "cs": 30}, 1800, Role.SUPPORT),
        ({"vision": 50, "cs": 60}, 1800, None),
        ({"cs": 210}, 1800, Role.BOTTOM),
        ({"cs": 150, "damage": 10}, 1800, Role.MIDDLE),
        ({"cs": 150}, 1800, Role.TOP),
        ({"cs": 120}, 1800, Role.TOP),
        ({"cs": 100}, 1800, None),
    ],
)
def test_infer_role_decision_list(stats, duration, expected) -> None:
    state = _single(duration, **stats)

    assert infer_role(state.participant, state.metrics) == expected


def test_jungle_rule_wins_over_support_rule() -> None:
    state = _single(neutral=60, heal=6000)

    assert infer_role(state.participant, state.metrics) == Role.JUNGLE


def test_middle_requires_damage_share() -> None:
    payload = match_payload(
        [
            player("Mid", "Zed", 100, cs=150, damage=2000),
            player("Carry", "Jinx", 100, cs=100, damage=8000),
            player("Red", "Lux", 200),
        ]
    )
    state = derive(normalize(payload)).players[0]

    # 5.0 CS/min but only 20% damage share falls through to TOP
    assert infer_role(state.participant, state.metrics) == Role.TOP


def test_classify_keeps_declared_role() -> None:
    payload = match_payload([player("A", "Annie", 100, neutral=200, position="TOP")])

    classified = classify(derive(normalize(payload)), AFKThresholds())

    assert classified.players[0].metrics.role == "TOP"


def test_all_zero_player_is_afk_under_default_thresholds(thresholds) -> None:
    state = _single(duration=600)

    assert is_afk(state.participant, state.metrics, thresholds) is True


def test_short_game_skips_heuristic(thresholds) -> None:
    state = _single(duration=599)

    assert is_afk(state.participant, state.metrics, thresholds) is False


def test_leaver_flag_is_authoritative_even_in_short_game(thresholds) -> None:
    state = _single(duration=60, leaver=True, kills=12, damage=40000, gold=15000, cs=300)

    assert is_afk(state.participant, state.metrics, thresholds) is True


@pytest.mark.parametrize(
    "stats",
    [
        {"cs": 15},  # 0.5 CS/min is not below the maximum
        {"damage": 1500},
        {"gold": 4000},
        {"kills": 1},
        {"assists": 1},
    ],
)
def test_any_single_active_signal_prevents_afk(stats, thresholds) -> None:
    state = _single(**stats)

    assert is_afk(state.participant, state.metrics, thresholds) is False


def test_custom_thresholds_are_respected() -> None:
    state = _single(gold=4500)
    strict = AFKThresholds(max_gold_earned=5000)

    assert is_afk(state.participant, state.metrics, strict) is True


def test_classify_marks_afk_and_logs(caplog, thresholds) -> None:
    payload = match_payload([player("Idle", "Annie", 100), player("Active", "Lux", 200, kills=3)])

    with caplog.at_level("INFO"):
        classified = classify(derive(normalize(payload)), thresholds)

    assert [p.is_afk for p in classified.players] == [True, False]
    assert any(r.getMessage() == "player_marked_afk" for r in caplog.records)
