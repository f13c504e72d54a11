"""Exceptions raised at the edges of the replay engine."""

from __future__ import annotations


class ReplayError(Exception):
    """Base class for replay engine errors."""


class FeedFormatError(ReplayError):
    """Raw game record is missing the sections needed to build a game."""


class FeedUnavailableError(ReplayError):
    """Game feed could not be retrieved."""

    def __init__(self, game_pk: int | str, reason: str) -> None:
        super().__init__(f"Game feed {game_pk} unavailable: {reason}")
        self.game_pk = game_pk
        self.reason = reason
