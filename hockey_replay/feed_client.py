"""Client for the league's live game feed.

Only fetches; everything the replay derives from the record happens in
game_state and synthesizer.
"""

from __future__ import annotations

from typing import Any

import httpx

from .config import settings
from .exceptions import FeedUnavailableError
from .logging import logger

GAME_FEED_PATH = "/game/{game_pk}/feed/live"


class GameFeedClient:
    """Fetches complete game records from the stats API."""

    def __init__(self, base_url: str | None = None, client: httpx.Client | None = None) -> None:
        self.base_url = (base_url or settings.feed_base_url).rstrip("/")
        self.client = client or httpx.Client(
            timeout=settings.request_timeout_seconds,
            headers={"User-Agent": "hockey-replay/1.0"},
        )

    def game_url(self, game_pk: int | str) -> str:
        return self.base_url + GAME_FEED_PATH.format(game_pk=game_pk)

    def fetch_game(self, game_pk: int | str) -> dict[str, Any]:
        """Fetch the raw feed record for one game.

        Raises:
            FeedUnavailableError: Transport failure, non-200 status or a body
                that is not a JSON object
        """
        url = self.game_url(game_pk)
        logger.info("game_feed_fetch", url=url, game_pk=game_pk)

        try:
            response = self.client.get(url)
        except httpx.HTTPError as exc:
            logger.error("game_feed_fetch_error", game_pk=game_pk, error=str(exc))
            raise FeedUnavailableError(game_pk, str(exc)) from exc

        if response.status_code != 200:
            logger.warning(
                "game_feed_fetch_failed",
                game_pk=game_pk,
                status=response.status_code,
                body=response.text[:200] if response.text else "",
            )
            raise FeedUnavailableError(game_pk, f"HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as exc:
            logger.warning("game_feed_invalid_json", game_pk=game_pk, error=str(exc))
            raise FeedUnavailableError(game_pk, "response is not valid JSON") from exc

        if not isinstance(payload, dict):
            raise FeedUnavailableError(game_pk, "response is not a JSON object")

        plays = payload.get("liveData", {}).get("plays", {}).get("allPlays", [])
        logger.info("game_feed_fetched", game_pk=game_pk, plays=len(plays))
        return payload

    def close(self) -> None:
        self.client.close()
