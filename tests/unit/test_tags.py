"""Golden-rule tag classifier tests."""

from __future__ import annotations

from src.config.settings import AFKThresholds
from src.contracts.match_record import MatchRecord, ParticipantRecord
from src.core.ingest.normalizer import normalize
from src.core.scoring import summarize_match
from src.core.scoring import tags as tags_module
from src.core.scoring.classifier import classify
from src.core.scoring.metrics import derive
from src.core.scoring.standouts import compute_standouts
from src.core.scoring.tags import assign_tags, is_highest, is_strict_highest, is_top_n
from tests.payloads import match_payload, player, standard_match


def _tagged(payload):
    derived = classify(derive(normalize(payload)), AFKThresholds())
    return assign_tags(compute_standouts(derived, 100))


def _tags(result, champion: str) -> tuple[str, ...]:
    return next(p.tags for p in result.players if p.participant.champion_name == champion)


def test_standard_match_tags() -> None:
    result = _tagged(standard_match())

    assert _tags(result, "Ahri") == ("hard_carry",)
    assert _tags(result, "Garen") == ("frontline_rock",)
    assert _tags(result, "LeeSin") == ("utility_mvp", "objective_brain")
    assert _tags(result, "Jinx") == ()
    assert _tags(result, "Lulu") == (
        "vision_mvp",
        "utility_mvp",
        "objective_brain",
        "weakside_warrior",
    )
    assert _tags(result, "Thresh") == ("vision_mvp", "weakside_warrior", "heroic_in_loss")
    assert _tags(result, "Vi") == ()


def test_objective_brain_requires_objective_parity() -> None:
    payload = standard_match(teamDragons={"100": 1, "200": 3})

    result = _tagged(payload)

    assert "objective_brain" not in _tags(result, "LeeSin")
    assert "objective_brain" not in _tags(result, "Lulu")


def test_hard_carry_via_takedowns_when_kda_low() -> None:
    players = [
        player("Carry", "Katarina", 100, kills=6, deaths=8, assists=6, damage=30000),
        player("Mate", "Annie", 100, kills=4, deaths=2, damage=20000),
        player("Red", "Lux", 200, kills=8),
    ]

    result = _tagged(match_payload(players))

    # KDA 1.5 but 12 takedowns
    assert "hard_carry" in _tags(result, "Katarina")


def test_heroic_in_loss_needs_long_game() -> None:
    short = _tagged(standard_match(gameLength=1440))

    assert "heroic_in_loss" not in _tags(short, "Thresh")
    assert "vision_mvp" in _tags(short, "Thresh")


def test_vision_mvp_requires_outright_team_lead() -> None:
    players = [
        player("A", "Annie", 100, kills=1, vision=60),
        player("B", "Braum", 100, kills=1, vision=60),
        player("R", "Lux", 200, kills=1, vision=10),
    ]

    result = _tagged(match_payload(players))

    assert "vision_mvp" not in _tags(result, "Annie")
    assert "vision_mvp" not in _tags(result, "Braum")


def test_afk_teammates_are_excluded_from_comparisons() -> None:
    players = [
        player("Gone", "Yasuo", 100, vision=90, leaver=True),
        player("Ward", "Janna", 100, kills=1, vision=60),
        player("R", "Lux", 200, kills=1, vision=10),
    ]

    result = _tagged(match_payload(players))

    assert _tags(result, "Yasuo") == ()
    assert "vision_mvp" in _tags(result, "Janna")


def test_comparison_helpers() -> None:
    result = _tagged(standard_match())
    blue = [p for p in result.players if p.team_id == 100]
    lee, garen, jinx = blue[2], blue[1], blue[3]

    def cc(p):
        return p.metrics.cc_per_min

    assert is_highest(lee, blue, cc)
    assert is_strict_highest(lee, blue, cc)
    assert is_top_n(garen, blue, cc, 2)
    assert not is_top_n(jinx, blue, cc, 2)
    assert not is_highest(jinx, blue, cc)


def test_vision_mvp_tie_with_duplicate_indexes_is_not_outright() -> None:
    record = MatchRecord(
        game_id="77",
        duration_seconds=1800,
        participants=(
            ParticipantRecord(index=0, display_name="A", champion_name="Annie", team_id=100,
                              kills=1, vision_score=60),
            ParticipantRecord(index=0, display_name="B", champion_name="Braum", team_id=100,
                              kills=1, vision_score=60),
            ParticipantRecord(index=1, display_name="R", champion_name="Lux", team_id=200,
                              kills=1, vision_score=10),
        ),
    )

    summary = summarize_match(record.model_dump(mode="json"))

    tags = {p.champion: p.tags for p in summary.players}
    assert "vision_mvp" not in tags["Annie"]
    assert "vision_mvp" not in tags["Braum"]


def test_rule_thresholds_are_module_settings(monkeypatch) -> None:
    monkeypatch.setattr(tags_module, "VISION_MVP_PER_MIN", 3.0)

    result = _tagged(standard_match())

    assert "vision_mvp" not in _tags(result, "Lulu")
    assert "vision_mvp" not in _tags(result, "Thresh")
