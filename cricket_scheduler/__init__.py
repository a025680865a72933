"""
Cricket fixture scheduler - greedy group-stage and knockout scheduling engine.
"""

__version__ = "0.1.0"

from .config import SchedulerConfig
from .errors import InvalidInputError, SchedulerError
from .models import (
    ConflictLevel,
    MatchRef,
    MatchRecord,
    MatchStatus,
    QualifiedTeam,
    ScheduleInput,
    ScheduleResult,
    SlotRef,
    TeamBlackout,
    TeamConflict,
)
from .pairings import generate_round_robin
from .engine import generate_group_schedule
from .knockout import generate_knockout_bracket
from .reschedule import reschedule
from .match_ops import move_match, toggle_lock
from .standings import calculate_standings

__all__ = [
    "SchedulerConfig",
    "SchedulerError",
    "InvalidInputError",
    "ConflictLevel",
    "MatchRef",
    "MatchRecord",
    "MatchStatus",
    "QualifiedTeam",
    "ScheduleInput",
    "ScheduleResult",
    "SlotRef",
    "TeamBlackout",
    "TeamConflict",
    "generate_round_robin",
    "generate_group_schedule",
    "generate_knockout_bracket",
    "reschedule",
    "move_match",
    "toggle_lock",
    "calculate_standings",
]
