"""Pydantic models describing a loaded game."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

Side = Literal["home", "away"]


def opponent(side: Side) -> Side:
    """Given "home" or "away", return the other side."""
    return "away" if side == "home" else "home"


class TeamInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    tri_code: str
    location_name: str = ""
    team_name: str = ""
    name: str = ""
    team_id: int | None = None

    @property
    def display_name(self) -> str:
        full = f"{self.location_name} {self.team_name}".strip()
        return full or self.name or self.tri_code


class GameState(BaseModel):
    """Per-game metadata derived once from the raw record.

    Frozen after construction. The timeline synthesizer returns an updated
    copy once it has decided whether coordinates are mirrored.
    """

    model_config = ConfigDict(frozen=True)

    game_pk: int
    home: TeamInfo
    away: TeamInfo
    season: str = ""
    is_playoffs: bool = False
    overtime_length: int = 5  # minutes; only binding for regular-season games
    has_period_events: bool = False
    playoff_description: str | None = None
    game_detail: str = ""
    mirror_coordinates: bool = False

    def team(self, side: Side) -> TeamInfo:
        return self.home if side == "home" else self.away

    def side_for(self, tri_code: str | None) -> Side | None:
        """Map a feed tri-code onto home/away; unknown codes count as away."""
        if not tri_code:
            return None
        return "home" if tri_code == self.home.tri_code else "away"

    @property
    def max_game_seconds(self) -> int:
        """Latest timestamp a regular-season game can reach."""
        return (60 + self.overtime_length) * 60
