"""Constants for game feed processing and playback.

Contains feed event type codes, stoppage durations and the rule cut-over
seasons that change how old games are interpreted.
"""

from __future__ import annotations

# Feed event type codes (result.eventTypeId)
GOAL = "GOAL"
SHOT = "SHOT"
BLOCKED_SHOT = "BLOCKED_SHOT"
MISSED_SHOT = "MISSED_SHOT"
PENALTY = "PENALTY"
FACEOFF = "FACEOFF"
STOP = "STOP"
CHALLENGE = "CHALLENGE"
PERIOD_START = "PERIOD_START"
PERIOD_END = "PERIOD_END"
# Not a feed code: STOP events described as a timeout are relabeled
TIMEOUT = "TIMEOUT"
# Synthetic only: announces the next shootout shooter
SHOOTOUT_SHOOTER_READY = "SHOOTOUT_SHOOTER_READY"

SHOT_ON_GOAL_TYPES = frozenset({GOAL, SHOT})
SHOT_ATTEMPT_TYPES = frozenset({GOAL, SHOT, BLOCKED_SHOT, MISSED_SHOT})

# Events that carry nothing worth replaying
IGNORED_EVENT_TYPES = frozenset({"PERIOD_READY", "GAME_SCHEDULED", "PERIOD_OFFICIAL"})

SHOOTOUT_PERIOD_TYPE = "SHOOTOUT"
PLAYOFF_GAME_TYPE = "P"

# Stoppage durations (ms of wall-clock pause after dispatch)
STOPPAGE_SHORT_MS = 1000
STOPPAGE_LONG_MS = 2500
STOPPAGE_LONGEST_MS = 5000

STOPPAGE_BY_TYPE: dict[str, int] = {
    PERIOD_START: STOPPAGE_LONG_MS,
    PERIOD_END: STOPPAGE_LONG_MS,
    PENALTY: STOPPAGE_LONG_MS,
    STOP: STOPPAGE_SHORT_MS,
    GOAL: STOPPAGE_LONGEST_MS,
    CHALLENGE: STOPPAGE_LONGEST_MS,
    TIMEOUT: STOPPAGE_LONGEST_MS,
}
# Only honored when the viewer pauses on all stoppages
MINOR_STOPPAGE_TYPES = frozenset({STOP})

# Clock geometry (seconds)
PERIOD_SECONDS = 1200
REGULATION_SECONDS = 3 * PERIOD_SECONDS
# Anything strictly later is overtime (or a shootout)
OVERTIME_START_SECONDS = REGULATION_SECONDS
# Double minors are tracked as stacked blocks of this length
MINOR_PENALTY_SECONDS = 120
DEFAULT_PENALTY_MINUTES = 2
MAX_TRACKED_PENALTY_MINUTES = 5

# Rule cut-over seasons (compared lexicographically as YYYYYYYY)
# Penalties before this season have no usable timestamps
LAST_SEASON_WITHOUT_PENALTY_TIMES = "19431944"
# Before this season minors also survived goals
FIRST_SEASON_MINORS_EXPIRE_ON_GOAL = "19561957"
# Regular-season overtime dropped from 10 to 5 minutes
FIRST_SEASON_FIVE_MINUTE_OVERTIME = "19831984"
# Round 3 was the final before this season
FIRST_SEASON_FOUR_ROUND_PLAYOFFS = "1974"

# Feed description markers
TIMEOUT_MARKER = "Timeout"
PING_MARKERS = ("Goalpost", "Crossbar")

# Special animation tags
HAT_TRICK_HOME = "HAT_TRICK_HOME"
HAT_TRICK_AWAY = "HAT_TRICK_AWAY"
PING_HOME = "PING_HOME"
PING_AWAY = "PING_AWAY"
