"""Display-ready labels for the scoreboard."""

from __future__ import annotations

import math

from .models import AdvantageState, Coordinates, GameState

SHOOTOUT_PERIOD = 5


def period_name(period: int, is_playoffs: bool) -> str:
    """Return the period label.

    Regular season: 1st, 2nd, 3rd, OT, SO
    Playoffs:       1st, 2nd, 3rd, OT, 2OT, 3OT …
    """
    if period == 1:
        return "1st"
    if period == 2:
        return "2nd"
    if period == 3:
        return "3rd"
    if period == 4:
        return "OT"
    if period == SHOOTOUT_PERIOD and not is_playoffs:
        return "SO"
    return f"{period - 3}OT"


def game_clock_label(time_elapsed: int, period: int, game: GameState) -> str:
    """Countdown clock plus period: "12:34 2nd", "0:00 SO"."""
    # Shootouts have no clock
    if period == SHOOTOUT_PERIOD and not game.is_playoffs:
        return "0:00 SO"

    period_end_minutes = 20 * period
    if not game.is_playoffs:
        # One overtime period, shorter than a regular one
        period_end_minutes = min(period_end_minutes, 60 + game.overtime_length)

    minutes = period_end_minutes - math.ceil(time_elapsed / 60)
    seconds = (60 - time_elapsed % 60) % 60
    return f"{minutes}:{seconds:02d} {period_name(period, game.is_playoffs)}"


def speed_label(playback_speed: int) -> str:
    """Speed multiple relative to real time, e.g. 40 ms per second -> "25x"."""
    return f"{1000 // playback_speed}x"


def advantage_label(advantage: AdvantageState | None) -> str:
    if advantage is None:
        return ""
    return f"{advantage.tri_code or advantage.team.upper()} {advantage.type} {advantage.clock}"


def rink_coordinates(coordinates: Coordinates, game: GameState) -> Coordinates:
    """Undo the feed's flipped orientation for games detected as mirrored."""
    if not game.mirror_coordinates:
        return coordinates
    return Coordinates(x=-coordinates.x, y=-coordinates.y)
