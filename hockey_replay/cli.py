"""Command-line entry point.

Usage:
    hockey-replay timeline (--file PATH | --game-pk PK)
    hockey-replay play (--file PATH | --game-pk PK) [--speed MS]
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

from .display import advantage_label, game_clock_label, rink_coordinates, speed_label
from .exceptions import ReplayError
from .feed_client import GameFeedClient
from .game_state import build_game_state
from .logging import logger
from .models import ClockUpdate, Frame, GameState, LoadingState, TimelineEvent
from .player import GamePlayer
from .preferences import JsonPreferencesStore
from .synthesizer import synthesize
from .timers import AsyncioIntervalTimer

POLL_SECONDS = 0.1


def event_payload(event: TimelineEvent) -> dict[str, Any]:
    """JSON-ready view of one timeline event."""
    return {
        "eventType": event.event_type,
        "timeElapsed": event.time_elapsed,
        "period": event.period,
        "description": event.description,
        "team": event.team,
        "triCode": event.tri_code,
        "coordinates": None if event.coordinates is None else {"x": event.coordinates.x, "y": event.coordinates.y},
        "stoppageTime": event.stoppage_time,
        "minorStoppage": event.minor_stoppage,
        "specialAnim": event.special_anim,
        "score": event.score.to_dict(),
        "penaltyInfo": event.penalty_info.to_dict(),
    }


class ConsolePresenter:
    """Prints one scoreboard line per dispatched event."""

    def __init__(self) -> None:
        self.game: GameState | None = None

    def show_event(self, frame: Frame) -> None:
        if self.game is None:
            return
        clock = game_clock_label(frame.time_elapsed, frame.period, self.game)
        score = f"{self.game.away.tri_code} {frame.score.away.goals} - {frame.score.home.goals} {self.game.home.tri_code}"
        coordinates = rink_coordinates(frame.coordinates, self.game)
        parts = [clock, score, frame.event_label, advantage_label(frame.advantage), frame.description]
        print(" | ".join(part for part in parts if part), f"@({coordinates.x}, {coordinates.y})")

    def show_clock(self, update: ClockUpdate) -> None:
        # Only events are printed
        pass

    def show_status(self, state: LoadingState) -> None:
        logger.debug("replay_status", state=state.value)


def _load_raw_game(args: argparse.Namespace) -> dict[str, Any]:
    if args.file:
        return json.loads(Path(args.file).read_text(encoding="utf-8"))
    client = GameFeedClient()
    try:
        return client.fetch_game(args.game_pk)
    finally:
        client.close()


def run_timeline(args: argparse.Namespace) -> int:
    raw_game = _load_raw_game(args)
    game = build_game_state(raw_game)
    plays = (raw_game["liveData"].get("plays") or {}).get("allPlays") or []
    timeline = synthesize(game, plays)
    for event in timeline:
        print(json.dumps(event_payload(event)))
    return 0


async def _replay(raw_game: dict[str, Any], speed: int | None) -> int:
    presenter = ConsolePresenter()
    player = GamePlayer(
        presenter,
        timer=AsyncioIntervalTimer(),
        preferences_store=JsonPreferencesStore(),
    )
    if speed:
        player.scheduler.playback_speed = speed

    timeline = player.load_game(raw_game)
    if timeline is None:
        return 1
    presenter.game = timeline.game
    print(f"{timeline.game.away.display_name} at {timeline.game.home.display_name}", timeline.game.game_detail)
    print(f"Speed {speed_label(player.scheduler.playback_speed)}")

    while player.scheduler.is_playing:
        await asyncio.sleep(POLL_SECONDS)
    return 0


def run_play(args: argparse.Namespace) -> int:
    return asyncio.run(_replay(_load_raw_game(args), args.speed))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hockey-replay", description="Replay hockey games from play-by-play data")
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, handler, help_text in (
        ("timeline", run_timeline, "Print the synthesized timeline as JSON lines"),
        ("play", run_play, "Replay a game in the terminal"),
    ):
        command = subparsers.add_parser(name, help=help_text)
        source = command.add_mutually_exclusive_group(required=True)
        source.add_argument("--file", help="Path to a saved game feed JSON document")
        source.add_argument("--game-pk", type=int, help="Game identifier to fetch from the feed")
        command.set_defaults(handler=handler)

    subparsers.choices["play"].add_argument(
        "--speed",
        type=int,
        default=None,
        help="Milliseconds of real time per game second (default: saved preference)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return args.handler(args)
    except (ReplayError, OSError, ValueError) as exc:
        logger.error("replay_command_failed", command=args.command, error=str(exc))
        return 1


if __name__ == "__main__":
    sys.exit(main())
