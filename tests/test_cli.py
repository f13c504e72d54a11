"""Tests for cli.py module."""

from __future__ import annotations

import json

import pytest

from hockey_replay.cli import ConsolePresenter, build_parser, main
from hockey_replay.game_state import build_game_state
from hockey_replay.models import CENTER_ICE, Frame, ScoreSnapshot, TeamScore


class TestTimelineCommand:
    """Tests for `hockey-replay timeline`."""

    def test_prints_json_lines(self, tmp_path, sample_game, capsys):
        path = tmp_path / "game.json"
        path.write_text(json.dumps(sample_game))

        exit_code = main(["timeline", "--file", str(path)])

        assert exit_code == 0
        records = [json.loads(line) for line in capsys.readouterr().out.splitlines() if line.startswith("{")]
        lines = [record for record in records if "eventType" in record]
        assert lines[0]["eventType"] == "PERIOD_START"
        assert lines[-1]["score"]["home"]["goals"] == 1
        penalty = next(line for line in lines if line["eventType"] == "PENALTY")
        assert penalty["penaltyInfo"] == {"home": [], "away": [[False, 420]]}

    def test_missing_file_fails(self, tmp_path):
        assert main(["timeline", "--file", str(tmp_path / "missing.json")]) == 1

    def test_malformed_record_fails(self, tmp_path):
        path = tmp_path / "game.json"
        path.write_text(json.dumps({"gamePk": 1}))

        assert main(["timeline", "--file", str(path)]) == 1


class TestParser:
    def test_source_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["timeline"])

    def test_sources_exclusive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["play", "--file", "g.json", "--game-pk", "2019020001"])

    def test_play_speed(self):
        args = build_parser().parse_args(["play", "--game-pk", "2019020001", "--speed", "20"])

        assert args.game_pk == 2019020001
        assert args.speed == 20


class TestConsolePresenter:
    def test_prints_scoreboard_line(self, sample_game, capsys):
        presenter = ConsolePresenter()
        presenter.game = build_game_state(sample_game)

        presenter.show_event(
            Frame(
                time_elapsed=360,
                period=1,
                description="Goal scored",
                event_label="GOAL_HOME",
                score=ScoreSnapshot(home=TeamScore(goals=1)),
                coordinates=CENTER_ICE,
                special_anim=None,
                advantage=None,
            )
        )

        out = capsys.readouterr().out
        assert "14:00 1st" in out
        assert "MTL 0 - 1 TOR" in out
        assert "GOAL_HOME" in out
