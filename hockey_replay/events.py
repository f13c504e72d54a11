"""Feed play normalization.

Turns one raw play from the game feed into a FeedEvent, and builds the
synthetic events the timeline needs but the feed never recorded.
"""

from __future__ import annotations

from typing import Any

from .constants import (
    BLOCKED_SHOT,
    MINOR_STOPPAGE_TYPES,
    MISSED_SHOT,
    PENALTY,
    PERIOD_SECONDS,
    PERIOD_START,
    PING_AWAY,
    PING_HOME,
    PING_MARKERS,
    SHOOTOUT_PERIOD_TYPE,
    STOP,
    STOPPAGE_BY_TYPE,
    TIMEOUT,
    TIMEOUT_MARKER,
)
from .logging import logger
from .models import (
    CENTER_ICE,
    Coordinates,
    FeedEvent,
    GameState,
    PenaltyLedger,
    ScoreSnapshot,
    Side,
    SyntheticEvent,
    opponent,
)
from .utils.parsing import parse_clock_seconds, parse_int

PENALTY_SHOT_SEVERITY = "Penalty Shot"
SCORER_TYPE = "Scorer"
SHOOTER_TYPES = ("Shooter", "Scorer")


def stoppage_for(event_type: str) -> tuple[int, bool]:
    """Return (stoppage ms, is minor stoppage) for an event type."""
    return STOPPAGE_BY_TYPE.get(event_type, 0), event_type in MINOR_STOPPAGE_TYPES


def build_feed_event(
    game: GameState,
    play: dict[str, Any],
    index: int,
    previous: FeedEvent | None = None,
) -> FeedEvent:
    """Normalize a single play from the feed.

    Malformed sub-fields never raise: a missing clock falls back to the
    previous event's time (or the start of the period), a missing player
    list simply leaves the player-derived fields empty.

    Args:
        game: Metadata for the game being replayed
        play: One entry of liveData.plays.allPlays
        index: Position of the play in the feed
        previous: The previously normalized play, used for fallbacks
    """
    result = play.get("result") or {}
    about = play.get("about") or {}

    event_type = result.get("eventTypeId") or "UNKNOWN"
    description = result.get("description") or ""
    if event_type == STOP and TIMEOUT_MARKER in description:
        event_type = TIMEOUT

    period = parse_int(about.get("period"))
    if period is None:
        period = previous.period if previous and previous.period else 1
        logger.warning("feed_event_period_missing", game_pk=game.game_pk, index=index, fallback=period)

    time_elapsed = _time_elapsed(game, about, period, index, previous)

    tri_code = (play.get("team") or {}).get("triCode")
    team = game.side_for(tri_code)
    # The feed credits blocked shots to the blocking team; count them for the shooter
    if event_type == BLOCKED_SHOT and team is not None:
        team = opponent(team)

    stoppage_time, minor_stoppage = stoppage_for(event_type)

    players = play.get("players")
    scorer_ids, shooter_name = _player_fields(players)

    return FeedEvent(
        event_type=event_type,
        time_elapsed=time_elapsed,
        period=period,
        description=description,
        coordinates=CENTER_ICE if event_type == PERIOD_START else _coordinates(game, play.get("coordinates"), index),
        tri_code=tri_code,
        team=team,
        stoppage_time=stoppage_time,
        minor_stoppage=minor_stoppage,
        special_anim=_ping_anim(event_type, description, team),
        is_shootout=about.get("periodType") == SHOOTOUT_PERIOD_TYPE,
        source_index=index,
        is_penalty_shot=event_type == PENALTY and result.get("penaltySeverity") == PENALTY_SHOT_SEVERITY,
        penalty_minutes=parse_int(result.get("penaltyMinutes")),
        penalty_severity=result.get("penaltySeverity"),
        scorer_ids=scorer_ids,
        shooter_name=shooter_name,
    )


def build_synthetic_event(
    event_type: str,
    time_elapsed: int,
    score: ScoreSnapshot,
    *,
    period: int | None = None,
    description: str = "",
    penalty_info: PenaltyLedger | None = None,
    **fields: Any,
) -> SyntheticEvent:
    """Build an invented event with the default stoppage for its type."""
    stoppage_time, minor_stoppage = stoppage_for(event_type)
    fields.setdefault("stoppage_time", stoppage_time)
    fields.setdefault("minor_stoppage", minor_stoppage)
    return SyntheticEvent(
        event_type=event_type,
        time_elapsed=time_elapsed,
        period=period,
        description=description,
        score=score,
        penalty_info=penalty_info if penalty_info is not None else PenaltyLedger(),
        **fields,
    )


def _time_elapsed(
    game: GameState,
    about: dict[str, Any],
    period: int,
    index: int,
    previous: FeedEvent | None,
) -> int:
    """Fold the period-relative clock into seconds since the opening faceoff."""
    period_seconds = parse_clock_seconds(about.get("periodTime"))
    if period_seconds is None:
        fallback = (period - 1) * PERIOD_SECONDS
        if previous is not None and previous.period == period:
            fallback = previous.time_elapsed
        logger.warning(
            "feed_event_time_unparsable",
            game_pk=game.game_pk,
            index=index,
            period_time=about.get("periodTime"),
            fallback=fallback,
        )
        time_elapsed = fallback
    else:
        time_elapsed = (period - 1) * PERIOD_SECONDS + period_seconds

    # Regular-season overtime is capped; some feeds report shootout clocks past it
    if not game.is_playoffs:
        time_elapsed = min(game.max_game_seconds, time_elapsed)
    return time_elapsed


def _coordinates(game: GameState, raw: Any, index: int) -> Coordinates | None:
    if not isinstance(raw, dict):
        return None
    x, y = raw.get("x"), raw.get("y")
    if x is None or y is None:
        return None
    try:
        return Coordinates(x=float(x), y=float(y))
    except (TypeError, ValueError):
        logger.warning("feed_event_coordinates_invalid", game_pk=game.game_pk, index=index, x=x, y=y)
        return None


def _ping_anim(event_type: str, description: str, team: Side | None) -> str | None:
    """Posts and crossbars are only recorded in the description text."""
    if event_type != MISSED_SHOT or team is None:
        return None
    if any(marker in description for marker in PING_MARKERS):
        return PING_HOME if team == "home" else PING_AWAY
    return None


def _player_fields(players: Any) -> tuple[tuple[int, ...] | None, str | None]:
    """Extract goal scorer ids and the shooter's name from the player list."""
    if not isinstance(players, list):
        return None, None

    scorer_ids: list[int] = []
    shooter_name: str | None = None
    for entry in players:
        if not isinstance(entry, dict):
            continue
        player = entry.get("player") or {}
        player_type = entry.get("playerType")
        if player_type == SCORER_TYPE:
            player_id = parse_int(player.get("id"))
            if player_id is not None:
                scorer_ids.append(player_id)
        if shooter_name is None and player_type in SHOOTER_TYPES:
            shooter_name = player.get("fullName")
    return tuple(scorer_ids), shooter_name
