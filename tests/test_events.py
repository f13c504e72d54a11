"""Tests for events.py module."""

from __future__ import annotations

import pytest
from conftest import build_game, build_play, build_scorer

from hockey_replay.events import build_feed_event, build_synthetic_event, stoppage_for
from hockey_replay.game_state import build_game_state
from hockey_replay.models import CENTER_ICE, Coordinates, ScoreSnapshot


@pytest.fixture
def game():
    return build_game_state(build_game([build_play("PERIOD_START", 1, "00:00")]))


@pytest.fixture
def playoff_game():
    return build_game_state(build_game([], game_pk=2019030115, game_type="P"))


class TestTimeElapsed:
    """Tests for clock folding."""

    def test_period_time_folded_into_game_time(self, game):
        event = build_feed_event(game, build_play("SHOT", 2, "05:30", "TOR"), 0)

        assert event.time_elapsed == 1200 + 330
        assert event.period == 2

    def test_regular_season_capped_at_overtime_end(self, game):
        event = build_feed_event(game, build_play("SHOT", 5, "00:00", "TOR"), 0)

        assert event.time_elapsed == 3900

    def test_playoffs_not_capped(self, playoff_game):
        event = build_feed_event(playoff_game, build_play("GOAL", 5, "03:00", "TOR"), 0)

        assert event.time_elapsed == 4800 + 180

    def test_unparsable_time_uses_previous_event(self, game):
        previous = build_feed_event(game, build_play("SHOT", 1, "04:00", "TOR"), 0)

        event = build_feed_event(game, build_play("STOP", 1, None), 1, previous)

        assert event.time_elapsed == 240

    def test_unparsable_time_uses_period_start_in_new_period(self, game):
        previous = build_feed_event(game, build_play("SHOT", 1, "04:00", "TOR"), 0)

        event = build_feed_event(game, build_play("STOP", 3, "garbage"), 1, previous)

        assert event.time_elapsed == 2400

    def test_missing_period_uses_previous(self, game):
        previous = build_feed_event(game, build_play("SHOT", 2, "04:00", "TOR"), 0)

        event = build_feed_event(game, build_play("STOP", None, "05:00"), 1, previous)

        assert event.period == 2
        assert event.time_elapsed == 1500


class TestTeamAttribution:
    """Tests for team/side resolution."""

    def test_team_from_tri_code(self, game):
        assert build_feed_event(game, build_play("SHOT", 1, "01:00", "TOR"), 0).team == "home"
        assert build_feed_event(game, build_play("SHOT", 1, "01:00", "MTL"), 0).team == "away"

    def test_neutral_event_has_no_team(self, game):
        event = build_feed_event(game, build_play("STOP", 1, "01:00"), 0)

        assert event.team is None
        assert event.tri_code is None

    def test_blocked_shot_credited_to_shooter(self, game):
        event = build_feed_event(game, build_play("BLOCKED_SHOT", 1, "01:00", "TOR"), 0)

        assert event.tri_code == "TOR"
        assert event.team == "away"


class TestEventDetails:
    """Tests for relabeling, stoppages and flags."""

    def test_timeout_relabel(self, game):
        event = build_feed_event(game, build_play("STOP", 1, "10:00", description="Home Timeout"), 0)

        assert event.event_type == "TIMEOUT"
        assert event.stoppage_time == 5000
        assert event.minor_stoppage is False

    def test_plain_stop_is_minor(self, game):
        event = build_feed_event(game, build_play("STOP", 1, "10:00", description="Offside"), 0)

        assert event.stoppage_time == 1000
        assert event.minor_stoppage is True

    @pytest.mark.parametrize(
        ("event_type", "expected"),
        [
            ("PERIOD_START", 2500),
            ("PERIOD_END", 2500),
            ("PENALTY", 2500),
            ("GOAL", 5000),
            ("CHALLENGE", 5000),
            ("SHOT", 0),
            ("FACEOFF", 0),
        ],
    )
    def test_stoppage_table(self, event_type, expected):
        assert stoppage_for(event_type)[0] == expected

    def test_post_ping(self, game):
        event = build_feed_event(
            game,
            build_play("MISSED_SHOT", 1, "02:00", "MTL", description="Hit Crossbar"),
            0,
        )

        assert event.special_anim == "PING_AWAY"

    def test_wide_shot_no_ping(self, game):
        event = build_feed_event(game, build_play("MISSED_SHOT", 1, "02:00", "TOR", description="Wide of Net"), 0)

        assert event.special_anim is None

    def test_period_start_at_center_ice(self, game):
        event = build_feed_event(game, build_play("PERIOD_START", 1, "00:00"), 0)

        assert event.coordinates == CENTER_ICE

    def test_coordinates(self, game):
        with_coords = build_feed_event(game, build_play("SHOT", 1, "01:00", "TOR", coordinates={"x": -50, "y": 8}), 0)
        without = build_feed_event(game, build_play("SHOT", 1, "01:00", "TOR"), 0)

        assert with_coords.coordinates == Coordinates(-50, 8)
        assert without.coordinates is None

    def test_numeric_string_coordinates_coerced(self, game):
        event = build_feed_event(game, build_play("SHOT", 1, "01:00", "TOR", coordinates={"x": "-60", "y": "5.5"}), 0)

        assert event.coordinates == Coordinates(-60.0, 5.5)

    def test_non_numeric_coordinates_dropped(self, game):
        event = build_feed_event(game, build_play("SHOT", 1, "01:00", "TOR", coordinates={"x": "left", "y": 5}), 0)

        assert event.coordinates is None

    def test_penalty_shot_flag(self, game):
        event = build_feed_event(
            game,
            build_play("PENALTY", 1, "12:00", "MTL", penaltySeverity="Penalty Shot", penaltyMinutes=0),
            0,
        )

        assert event.is_penalty_shot is True
        assert event.penalty_minutes == 0

    def test_shootout_flag(self, game):
        event = build_feed_event(game, build_play("SHOT", 5, "00:00", "TOR", period_type="SHOOTOUT"), 0)

        assert event.is_shootout is True

    def test_player_fields(self, game):
        event = build_feed_event(
            game,
            build_play("GOAL", 1, "06:00", "TOR", players=build_scorer(8471214, "Auston Matthews")),
            0,
        )

        assert event.scorer_ids == (8471214,)
        assert event.shooter_name == "Auston Matthews"

    def test_missing_players(self, game):
        event = build_feed_event(game, build_play("GOAL", 1, "06:00", "TOR"), 0)

        assert event.scorer_ids is None
        assert event.shooter_name is None


class TestSyntheticEvents:
    def test_defaults_follow_event_type(self):
        event = build_synthetic_event("PERIOD_END", 1200, ScoreSnapshot(), period=1)

        assert event.stoppage_time == 2500
        assert event.penalty_info.is_empty()

    def test_explicit_stoppage_wins(self):
        event = build_synthetic_event("SHOOTOUT_SHOOTER_READY", 3900, ScoreSnapshot(), stoppage_time=2500)

        assert event.stoppage_time == 2500
