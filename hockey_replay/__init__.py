"""Replay historical hockey play-by-play as a time-driven scoreboard."""

__version__ = "0.1.0"
