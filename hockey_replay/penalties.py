"""
Penalty tracking and power-play derivation.

Keeps the running penalties for each side and answers "who has the man
advantage right now, and until when". The tracker is stateful but can be
dumped to and restored from an immutable PenaltyLedger, which is how the
timeline carries it per event.

Rules modelled here:
- Identical penalties (same major flag, same expiry) assessed against both
  sides offset and are both removed.
- A power-play goal releases the shorthanded side's minor that expires
  soonest. A double minor only loses its current 2:00 block.
- Majors never end early.
"""

from __future__ import annotations

from .constants import DEFAULT_PENALTY_MINUTES, MINOR_PENALTY_SECONDS
from .logging import logger
from .models import AdvantageState, Penalty, PenaltyLedger, Side, opponent
from .utils.parsing import format_clock

SIDES: tuple[Side, ...] = ("home", "away")


class PenaltyTracker:
    """Running penalty ledger for one game."""

    def __init__(self, home_tri_code: str | None = None, away_tri_code: str | None = None) -> None:
        self._penalties: dict[Side, list[Penalty]] = {"home": [], "away": []}
        self._tri_codes: dict[Side, str | None] = {"home": home_tri_code, "away": away_tri_code}

    def assess(self, team: Side, ts: int, minutes: int | None = None, is_major: bool = False) -> None:
        """Add a penalty against ``team`` at timestamp ``ts``.

        Args:
            team: Side that took the penalty
            ts: Game seconds when the penalty was called
            minutes: Length of the penalty (default 2)
            is_major: Whether the penalty survives a power-play goal
        """
        self.clean_up(ts)

        seconds = minutes * 60 if minutes else DEFAULT_PENALTY_MINUTES * 60
        new_penalty = Penalty(bool(is_major), ts + seconds)

        opposing = self._penalties[opponent(team)]
        if new_penalty in opposing:
            opposing.remove(new_penalty)
            logger.debug("penalty_offset", team=team, ts=ts, expires_at=new_penalty.expires_at)
            return

        self._penalties[team].append(new_penalty)
        logger.debug(
            "penalty_assessed",
            team=team,
            ts=ts,
            expires_at=new_penalty.expires_at,
            is_major=new_penalty.is_major,
        )

    def goal(self, team: Side, ts: int) -> None:
        """Release a penalty if ``team`` scored with the man advantage."""
        adv_state = self.get_advantage_state(ts)
        if adv_state is None or adv_state.team != team:
            return

        # A double minor expiring in 2:01 is one second into its first
        # block, so compare remaining time within the current 2:00 block.
        shorthanded = self._penalties[opponent(team)]
        candidate_index: int | None = None
        candidate_remaining = 0
        for index, penalty in enumerate(shorthanded):
            if penalty.is_major:
                continue
            remaining = (penalty.expires_at - 1 - ts) % MINOR_PENALTY_SECONDS
            if candidate_index is None or remaining < candidate_remaining:
                candidate_index = index
                candidate_remaining = remaining

        if candidate_index is None:
            return

        candidate = shorthanded[candidate_index]
        full_blocks_left = (candidate.expires_at - ts - 1) // MINOR_PENALTY_SECONDS
        shorthanded[candidate_index] = candidate._replace(
            expires_at=ts + full_blocks_left * MINOR_PENALTY_SECONDS
        )
        logger.debug(
            "penalty_released_by_goal",
            scoring_team=team,
            ts=ts,
            previous_expiry=candidate.expires_at,
            new_expiry=shorthanded[candidate_index].expires_at,
        )
        self.clean_up(ts)

    def clean_up(self, ts: int) -> None:
        """Drop penalties that have expired by ``ts``."""
        for side in SIDES:
            self._penalties[side] = [p for p in self._penalties[side] if p.expires_at > ts]

    def get_advantage_state(self, ts: int) -> AdvantageState | None:
        """Return the advantage at ``ts``, or None at even strength."""
        self.clean_up(ts)

        counts = {side: len(self._penalties[side]) for side in SIDES}
        diff = counts["home"] - counts["away"]
        if diff == 0:
            return None

        change_time = min(p.expires_at for side in SIDES for p in self._penalties[side])
        team: Side = "away" if diff > 0 else "home"
        return AdvantageState(
            team=team,
            tri_code=self._tri_codes[team],
            type="PP" if abs(diff) == 1 else "5v3",
            exp=change_time,
            clock=format_clock(change_time - ts),
        )

    def load(self, snapshot: PenaltyLedger) -> None:
        """Restore the ledger from a snapshot."""
        self._penalties = {"home": list(snapshot.home), "away": list(snapshot.away)}

    def dump(self) -> PenaltyLedger:
        """Snapshot the ledger. The result shares nothing with the tracker."""
        return PenaltyLedger(home=tuple(self._penalties["home"]), away=tuple(self._penalties["away"]))
