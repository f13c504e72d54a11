"""Build a GameState from a raw game feed record.

Older records are patched up on the way in: missing tri-codes are derived
from the team name and the overtime length follows the season's rules.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Any

from .constants import (
    FIRST_SEASON_FIVE_MINUTE_OVERTIME,
    FIRST_SEASON_FOUR_ROUND_PLAYOFFS,
    PERIOD_START,
    PLAYOFF_GAME_TYPE,
)
from .exceptions import FeedFormatError
from .logging import logger
from .models import GameState, TeamInfo
from .utils.parsing import parse_int

# e.g. 2019030115: 2019 season, 03 playoffs, round 01, series 1, game 5
_PLAYOFF_PK_PATTERN = re.compile(r"^(\d{4})03(\d{2})\d(\d)$")

# Game dates are reported in GMT; the calendar day is taken in Eastern time
_EASTERN_OFFSET = timedelta(hours=6)


def build_game_state(game: dict[str, Any]) -> GameState:
    """Derive immutable per-game metadata from a raw feed record.

    Raises:
        FeedFormatError: The record has no gameData/liveData sections
    """
    if not isinstance(game, dict):
        raise FeedFormatError("game record is not a JSON object")
    game_data = game.get("gameData")
    live_data = game.get("liveData")
    if not isinstance(game_data, dict) or not isinstance(live_data, dict):
        raise FeedFormatError("game record is missing gameData or liveData")

    game_pk = parse_int(game.get("gamePk"))
    if game_pk is None:
        game_pk = parse_int((game_data.get("game") or {}).get("pk"))
    if game_pk is None:
        raise FeedFormatError("game record has no gamePk")

    teams = game_data.get("teams") or {}
    game_info = game_data.get("game") or {}
    season = str(game_info.get("season") or "")
    is_playoffs = game_info.get("type") == PLAYOFF_GAME_TYPE
    plays = (live_data.get("plays") or {}).get("allPlays") or []

    state = GameState(
        game_pk=game_pk,
        home=_build_team(teams.get("home") or {}, "HOME"),
        away=_build_team(teams.get("away") or {}, "AWAY"),
        season=season,
        is_playoffs=is_playoffs,
        overtime_length=overtime_length_for_season(season),
        has_period_events=has_period_events(plays),
        playoff_description=playoff_description(game_pk) if is_playoffs else None,
        game_detail=game_detail(game_data),
    )
    logger.info(
        "game_state_built",
        game_pk=game_pk,
        season=season,
        home=state.home.tri_code,
        away=state.away.tri_code,
        is_playoffs=is_playoffs,
        has_period_events=state.has_period_events,
    )
    return state


def has_period_events(plays: list[Any]) -> bool:
    """Whether the feed records its own period starts; malformed plays are ignored."""
    return any(
        isinstance(play, dict) and (play.get("result") or {}).get("eventTypeId") == PERIOD_START
        for play in plays
    )


def overtime_length_for_season(season: str) -> int:
    """Regular-season overtime was 10 minutes before 1983-84."""
    return 5 if season >= FIRST_SEASON_FIVE_MINUTE_OVERTIME else 10


def playoff_description(game_pk: int) -> str | None:
    """Describe a playoff game from its packed identifier, e.g. "Round 1, Game 5"."""
    match = _PLAYOFF_PK_PATTERN.match(str(game_pk))
    if not match:
        logger.warning("playoff_game_pk_unparsable", game_pk=game_pk)
        return None

    season_start, round_code, game_number = match.groups()
    if round_code == "00":
        series_name = "Play-In"
    elif round_code == "03":
        series_name = "Stanley Cup Final" if season_start < FIRST_SEASON_FOUR_ROUND_PLAYOFFS else "Round 3"
    elif round_code == "04":
        series_name = "Stanley Cup Final"
    else:
        series_name = f"Round {int(round_code)}"
    return f"{series_name}, Game {int(game_number)}"


def game_detail(game_data: dict[str, Any]) -> str:
    """Return "May 8, 2022 - Venue" with whichever parts are available."""
    parts: list[str] = []

    raw_start = (game_data.get("datetime") or {}).get("dateTime")
    if raw_start:
        try:
            start = datetime.fromisoformat(raw_start.replace("Z", "+00:00"))
            if start.tzinfo is None:
                start = start.replace(tzinfo=timezone.utc)
            local = start.astimezone(timezone.utc) - _EASTERN_OFFSET
            parts.append(f"{local:%b} {local.day}, {local.year}")
        except (AttributeError, ValueError) as exc:
            logger.warning("game_date_unparsable", value=raw_start, error=str(exc))

    venue = (game_data.get("venue") or {}).get("name")
    if venue:
        parts.append(venue)

    return " - ".join(parts)


def _build_team(team: dict[str, Any], default_code: str) -> TeamInfo:
    """Build TeamInfo, deriving a tri-code for records that lack one."""
    name = team.get("name") or ""
    tri_code = team.get("triCode") or team.get("abbreviation")
    if not tri_code:
        # e.g. "Montreal Wanderers" -> "MW"
        capitals = re.sub(r"[^A-Z]", "", name)
        tri_code = capitals or default_code

    return TeamInfo(
        tri_code=tri_code,
        location_name=team.get("locationName") or "",
        team_name=team.get("teamName") or "",
        name=name,
        team_id=parse_int(team.get("id")),
    )
