"""Command-line entry point tests."""

from __future__ import annotations

import json

import pytest

import main
from src.config.settings import Settings
from tests.payloads import match_payload, standard_match

pytestmark = pytest.mark.integration


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(main, "setup_logging", lambda log_file=None: None)


@pytest.fixture
def payload_file(tmp_path):
    path = tmp_path / "4242.json"
    path.write_text(json.dumps(standard_match()), encoding="utf-8")
    return path


def test_summary_is_printed_to_stdout(payload_file, capsys) -> None:
    assert main.main([str(payload_file), "--viewer", "Viewer#EUW"]) == main.EXIT_OK

    printed = json.loads(capsys.readouterr().out)
    assert printed["my_team"] == "BLUE"
    assert printed["total_kills"] == 34


def test_summary_is_written_to_output_file(payload_file, tmp_path, capsys) -> None:
    out = tmp_path / "summary.json"

    code = main.main([str(payload_file), "--viewer", "Viewer#EUW", "--output", str(out)])

    assert code == main.EXIT_OK
    assert capsys.readouterr().out == ""
    assert json.loads(out.read_text(encoding="utf-8"))["game_id"] == "4242"


def test_viewer_defaults_to_settings(payload_file, monkeypatch, capsys) -> None:
    monkeypatch.setattr(
        main, "get_settings", lambda: Settings(_env_file=None, viewer_summoner_name="RedMid")
    )

    assert main.main([str(payload_file)]) == main.EXIT_OK

    assert json.loads(capsys.readouterr().out)["my_team"] == "RED"


def test_clutch_file_is_applied(payload_file, tmp_path, capsys) -> None:
    clutch = tmp_path / "clutch.json"
    clutch.write_text(json.dumps({"Lulu": {"livesSaved": 7, "timesSaved": 2}}), encoding="utf-8")

    assert main.main([str(payload_file), "--clutch", str(clutch)]) == main.EXIT_OK

    players = json.loads(capsys.readouterr().out)["players"]
    assert "clutch_savior" in players[4]["tags"]
    assert players[4]["lives_saved"] == 7


def test_empty_match_prints_notice(tmp_path, capsys) -> None:
    path = tmp_path / "empty.json"
    path.write_text(json.dumps(match_payload([])), encoding="utf-8")

    assert main.main([str(path)]) == main.EXIT_OK

    assert "Nothing to summarize" in capsys.readouterr().out


def test_malformed_payload_exit_code(tmp_path, capsys) -> None:
    path = tmp_path / "broken.json"
    path.write_text('{"gameId": 1}', encoding="utf-8")

    assert main.main([str(path)]) == main.EXIT_MALFORMED
    assert "Malformed payload" in capsys.readouterr().err


def test_missing_file_exit_code(tmp_path, capsys) -> None:
    assert main.main([str(tmp_path / "nope.json")]) == main.EXIT_USAGE
    assert "Cannot read input" in capsys.readouterr().err


def test_clutch_file_with_list_is_ignored(payload_file, tmp_path, capsys) -> None:
    clutch = tmp_path / "clutch.json"
    clutch.write_text(json.dumps([{"livesSaved": 7}]), encoding="utf-8")

    assert main.main([str(payload_file), "--clutch", str(clutch)]) == main.EXIT_OK

    players = json.loads(capsys.readouterr().out)["players"]
    assert all(p["lives_saved"] == 0 for p in players)
