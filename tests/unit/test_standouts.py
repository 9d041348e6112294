"""Standout flag and achievement tests, including tie-breaks and AFK exclusion."""

from __future__ import annotations

from src.config.settings import AFKThresholds
from src.core.ingest.normalizer import normalize
from src.core.scoring.classifier import classify
from src.core.scoring.metrics import derive
from src.core.scoring.standouts import compute_standouts
from tests.payloads import match_payload, player, standard_match


def _standouts(payload, my_team_id: int | None = 100):
    derived = classify(derive(normalize(payload)), AFKThresholds())
    return compute_standouts(derived, my_team_id)


def _flags(result, champion: str):
    return next(p.standouts for p in result.players if p.participant.champion_name == champion)


def test_standard_match_achievements() -> None:
    result = _standouts(standard_match())
    achievements = result.achievements

    assert achievements.highest_damage_in_game == "Ahri"
    assert achievements.highest_damage_on_my_team == "Ahri"
    assert achievements.most_healing_shielding == "Lulu"
    assert achievements.highest_vision_in_game == "Lulu"
    assert achievements.highest_vision_on_my_team == "Lulu"
    assert achievements.most_cc_in_game == "Thresh"
    assert achievements.most_cc_on_my_team == "LeeSin"
    assert achievements.most_tanking_in_game == "Garen"


def test_team_scope_flags_are_per_team() -> None:
    result = _standouts(standard_match())

    assert _flags(result, "Zed").highest_damage_on_team is True
    assert _flags(result, "Zed").highest_damage_in_game is False
    assert _flags(result, "Thresh").highest_vision_on_team is True
    assert _flags(result, "Thresh").most_cc_on_team is True
    assert _flags(result, "LeeSin").most_cc_on_team is True
    assert _flags(result, "Lulu").most_healing_in_game is True
    assert _flags(result, "Ahri").most_healing_in_game is False
    assert _flags(result, "Lulu").most_shielding_in_game is True


def test_damage_tie_flags_both_but_names_first_in_input_order() -> None:
    players = [
        player("A", "Annie", 100, kills=1, damage=20000),
        player("B", "Brand", 200, kills=1, damage=20000),
        player("C", "Corki", 100, kills=1, damage=5000),
    ]

    result = _standouts(match_payload(players))

    assert _flags(result, "Annie").highest_damage_in_game is True
    assert _flags(result, "Brand").highest_damage_in_game is True
    assert result.achievements.highest_damage_in_game == "Annie"

    reordered = _standouts(match_payload([players[1], players[0], players[2]]))
    assert reordered.achievements.highest_damage_in_game == "Brand"


def test_all_zero_damage_yields_no_damage_standout() -> None:
    players = [player(f"P{i}", f"Champ{i}", 100 if i < 5 else 200, kills=1) for i in range(10)]

    result = _standouts(match_payload(players))

    assert not any(p.standouts.highest_damage_in_game for p in result.players)
    assert result.achievements.highest_damage_in_game == ""
    assert result.achievements.highest_damage_on_my_team == ""


def test_leaver_never_receives_standouts() -> None:
    players = [
        player("Gone", "Yasuo", 100, kills=20, damage=90000, vision=99, cc=300, leaver=True),
        player("Here", "Annie", 100, kills=2, damage=10000, vision=10, cc=5),
        player("Red", "Lux", 200, kills=2, damage=8000, vision=12, cc=3),
    ]

    result = _standouts(match_payload(players))

    gone = result.players[0]
    assert gone.is_afk is True
    assert not any(gone.standouts.model_dump().values())
    assert result.achievements.highest_damage_in_game == "Annie"
    assert result.achievements.highest_vision_in_game == "Lux"
    assert "Yasuo" not in result.achievements.model_dump().values()


def test_tanking_requires_threshold_and_death_ceiling() -> None:
    players = [
        player("Fed", "Malphite", 100, kills=1, deaths=6, taken=60000),
        player("Low", "Annie", 200, kills=1, deaths=1, taken=900),
    ]

    result = _standouts(match_payload(players))

    # Malphite holds the max (10000/death) but died six times
    assert _flags(result, "Malphite").most_tanking_in_game is False
    assert _flags(result, "Annie").most_tanking_in_game is False
    assert result.achievements.most_tanking_in_game == ""


def test_unknown_viewer_leaves_my_team_achievements_empty() -> None:
    result = _standouts(standard_match(), my_team_id=None)

    assert result.achievements.highest_damage_in_game == "Ahri"
    assert result.achievements.highest_damage_on_my_team == ""
    assert result.achievements.most_cc_on_my_team == ""
