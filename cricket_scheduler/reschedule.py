"""
Re-scheduling of matches that are neither locked nor played.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .config import SchedulerConfig
from .engine import GroupScheduler
from .models import (
    ExistingMatch,
    MatchRecord,
    ScheduleInput,
    ScheduleResult,
    SlotRef,
    TeamBlackout,
    TeamConflict,
)

logger = logging.getLogger(__name__)

NOTHING_TO_RESCHEDULE = "No matches eligible for re-scheduling"


@dataclass
class RescheduleInput:
    all_matches: List[MatchRecord]
    slots: List[SlotRef]
    conflicts: List[TeamConflict] = field(default_factory=list)
    blackouts: List[TeamBlackout] = field(default_factory=list)
    division_team_ids: List[int] = field(default_factory=list)
    team_format_map: Optional[Dict[int, str]] = None


def is_preserved(match: MatchRecord) -> bool:
    """Locked and played matches keep their slot."""
    return match.is_locked or match.is_played


def reschedule(
    reschedule_input: RescheduleInput,
    config: Optional[SchedulerConfig] = None
) -> ScheduleResult:
    """
    Clear and re-run scheduling for every match that is not locked or played.

    Preserved matches with a slot become the committed schedule the group
    scheduler works around; they are not returned or changed.

    Args:
        reschedule_input: All stored matches plus slots and constraints
        config: Scheduler configuration

    Returns:
        ScheduleResult: outcome for the eligible matches only
    """
    inp = reschedule_input
    preserved = [m for m in inp.all_matches if is_preserved(m)]
    eligible = [m for m in inp.all_matches if not is_preserved(m)]

    if not eligible:
        logger.info(NOTHING_TO_RESCHEDULE)
        return ScheduleResult(message=NOTHING_TO_RESCHEDULE)

    existing_schedule = [
        ExistingMatch(
            time_slot_id=m.time_slot_id,
            team_a_id=m.team_a_id,
            team_b_id=m.team_b_id,
            umpire_team1_id=m.umpire_team1_id,
            umpire_team2_id=m.umpire_team2_id,
        )
        for m in preserved
        if m.time_slot_id is not None
    ]

    logger.info(
        "Rescheduling %d matches around %d preserved", len(eligible), len(preserved)
    )

    return GroupScheduler(config).schedule(ScheduleInput(
        matches=[m.to_match_ref() for m in eligible],
        slots=inp.slots,
        conflicts=inp.conflicts,
        blackouts=inp.blackouts,
        existing_schedule=existing_schedule,
        division_team_ids=inp.division_team_ids,
        team_format_map=inp.team_format_map,
    ))
