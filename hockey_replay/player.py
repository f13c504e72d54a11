"""
Game player: wires the feed, the synthesizer and the scheduler together.

download_game() fetches a record and hands it to load_game(), which builds
the GameState, synthesizes the timeline and starts playback. Retrieval and
format failures end in the scheduler's ERROR state instead of raising.
"""

from __future__ import annotations

from typing import Any

from .exceptions import FeedFormatError, FeedUnavailableError
from .feed_client import GameFeedClient
from .game_state import build_game_state
from .links import parse_share_reference, share_url
from .logging import logger
from .models import Timeline
from .preferences import PreferencesStore
from .scheduler import PlaybackScheduler, Presenter
from .synthesizer import synthesize
from .timers import IntervalTimer


class GamePlayer:
    """One viewer session; loading a game replaces the previous one."""

    def __init__(
        self,
        presenter: Presenter,
        *,
        feed_client: GameFeedClient | None = None,
        timer: IntervalTimer | None = None,
        preferences_store: PreferencesStore | None = None,
        scheduler: PlaybackScheduler | None = None,
    ) -> None:
        self.scheduler = scheduler or PlaybackScheduler(
            presenter,
            timer=timer,
            preferences_store=preferences_store,
        )
        self._feed_client = feed_client
        self.timeline: Timeline | None = None

    @property
    def feed_client(self) -> GameFeedClient:
        if self._feed_client is None:
            self._feed_client = GameFeedClient()
        return self._feed_client

    def download_game(self, game_pk: int) -> Timeline | None:
        """Fetch a game from the feed and start playing it."""
        self.timeline = None
        self.scheduler.begin_download()
        try:
            raw_game = self.feed_client.fetch_game(game_pk)
        except FeedUnavailableError as exc:
            logger.error("game_download_failed", game_pk=game_pk, reason=exc.reason)
            self.scheduler.fail(str(exc))
            return None
        return self.load_game(raw_game)

    def load_game(self, raw_game: dict[str, Any]) -> Timeline | None:
        """Synthesize an already-fetched record and start playing it."""
        self.scheduler.begin_initializing()
        try:
            game = build_game_state(raw_game)
        except FeedFormatError as exc:
            logger.error("game_record_invalid", error=str(exc))
            self.scheduler.fail(str(exc))
            return None

        plays = (raw_game["liveData"].get("plays") or {}).get("allPlays") or []
        self.timeline = synthesize(game, plays)
        self.scheduler.load(self.timeline)
        return self.timeline

    def open_reference(self, reference: str) -> Timeline | None:
        """Load the game named by a share link (or a bare gamePk)."""
        game_pk = parse_share_reference(reference)
        if game_pk is None:
            logger.warning("share_reference_unparsable", reference=reference)
            return None
        return self.download_game(game_pk)

    def share_url(self, base_url: str | None = None) -> str | None:
        """Link to the loaded game, or None when nothing is loaded."""
        if self.timeline is None:
            return None
        return share_url(self.timeline.game.game_pk, base_url)
