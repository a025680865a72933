"""
Single elimination bracket generation from group-stage qualifiers.
"""

import logging
import math
from typing import Dict, List, Optional, Sequence, Tuple

from .config import SchedulerConfig
from .constraints import find_candidate_slots
from .errors import InvalidInputError
from .models import (
    KnockoutBracket,
    KnockoutMatch,
    KnockoutResult,
    KnockoutScheduledMatch,
    MatchRef,
    OccupancyMap,
    QualifiedTeam,
    SlotRef,
    TeamBlackout,
    TeamConflict,
)
from .scoring import ScoreContext, pick_best_slot
from .umpire import select_umpire_team

logger = logging.getLogger(__name__)

# Knockout matches do not belong to a group
KNOCKOUT_GROUP_ID = 0


def get_round_name(teams_in_round: int) -> str:
    """Get the name of a round based on number of teams."""
    if teams_in_round == 2:
        return "Final"
    elif teams_in_round == 4:
        return "Semifinal"
    elif teams_in_round == 8:
        return "Quarterfinal"
    else:
        return f"Round of {teams_in_round}"


def calculate_bracket_size(num_teams: int) -> int:
    """Calculate the bracket size (smallest power of 2 >= num_teams)."""
    size = 1
    while size < num_teams:
        size *= 2
    return size


def calculate_total_rounds(num_teams: int) -> int:
    """Rounds needed to reduce num_teams to a single winner."""
    return math.ceil(math.log2(num_teams)) if num_teams > 1 else 0


def seed_for_cross_group(qualifiers: Sequence[QualifiedTeam]) -> List[QualifiedTeam]:
    """
    Order qualifiers so adjacent bracket positions come from different groups.

    Teams are sorted by group rank (then group id), bucketed per group in
    first-seen order, and drawn from the buckets in turn.
    """
    ordered = sorted(qualifiers, key=lambda q: (q.group_rank, q.group_id))

    queues: Dict[int, List[QualifiedTeam]] = {}
    for q in ordered:
        queues.setdefault(q.group_id, []).append(q)

    seeded = []
    group_queues = list(queues.values())
    while any(group_queues):
        for queue in group_queues:
            if queue:
                seeded.append(queue.pop(0))

    return seeded


def create_round1_matches(
    seeded: Sequence[QualifiedTeam],
    bye_count: int
) -> List[KnockoutMatch]:
    """
    Create round 1 entries. The first bye_count seeds advance automatically;
    the rest are paired in order.
    """
    matches = [
        KnockoutMatch(team_a_id=q.team_id, team_b_id=None, is_bye=True, knockout_round=1)
        for q in seeded[:bye_count]
    ]

    rest = seeded[bye_count:]
    for i in range(0, len(rest) - 1, 2):
        matches.append(KnockoutMatch(
            team_a_id=rest[i].team_id,
            team_b_id=rest[i + 1].team_id,
            is_bye=False,
            knockout_round=1,
        ))

    return matches


def generate_knockout_bracket(
    qualifiers: Sequence[QualifiedTeam],
    slots: Sequence[SlotRef],
    conflicts: Sequence[TeamConflict],
    eligible_team_ids: Sequence[int],
    occupancy: OccupancyMap,
    umpire_counts: Dict[int, int],
    blackouts: Sequence[TeamBlackout] = (),
    match_format: Optional[str] = None,
    config: Optional[SchedulerConfig] = None
) -> KnockoutResult:
    """
    Build a single elimination bracket and schedule its round 1.

    Args:
        qualifiers: Teams with their group rank and group
        slots: Candidate slots for round 1
        conflicts: Team conflicts
        eligible_team_ids: Umpire pool
        occupancy: Slot occupancy before the knockout; not modified
        umpire_counts: Umpiring assignments so far; not modified
        blackouts: Team blackout dates
        match_format: Format of the knockout, defaults to the first slot's ground format
        config: Scheduler configuration

    Returns:
        KnockoutResult: bracket and the round 1 matches that found a slot.
        Matches with no eligible slot are left out of the scheduled list.

    Raises:
        InvalidInputError: fewer than 2 qualifiers
    """
    if len(qualifiers) < 2:
        raise InvalidInputError("Knockout bracket requires at least 2 qualifiers")

    config = config or SchedulerConfig()

    bracket_size = calculate_bracket_size(len(qualifiers))
    total_rounds = calculate_total_rounds(len(qualifiers))
    bye_count = bracket_size - len(qualifiers)

    seeded = seed_for_cross_group(qualifiers)
    matches = create_round1_matches(seeded, bye_count)
    bracket = KnockoutBracket(
        matches=matches,
        total_rounds=total_rounds,
        bracket_size=bracket_size,
        bye_count=bye_count,
    )

    logger.info(
        "Knockout bracket: %d qualifiers, size %d, %d rounds, %d byes",
        len(qualifiers), bracket_size, total_rounds, bye_count
    )

    if match_format is None:
        match_format = slots[0].ground_format if slots else None

    # Private copies; the caller's maps are left as they were
    ctx = ScoreContext(
        occupancy={slot_id: list(teams) for slot_id, teams in occupancy.items()},
        umpire_counts=dict(umpire_counts),
        all_slots=list(slots),
    )

    scheduled = []
    for km in matches:
        if km.is_bye:
            continue

        match = MatchRef(
            team_a_id=km.team_a_id,
            team_b_id=km.team_b_id,
            group_id=KNOCKOUT_GROUP_ID,
            format=match_format,
        )

        candidates = find_candidate_slots(match, slots, ctx.occupancy, conflicts, blackouts)
        if not candidates:
            logger.warning(
                "No slot for knockout match %d vs %d; left unscheduled",
                km.team_a_id, km.team_b_id
            )
            continue

        best_slot = pick_best_slot(candidates, match, ctx, config.weights)
        umpire1, umpire2 = _assign_umpires(
            best_slot, match, ctx, conflicts, eligible_team_ids,
            config.umpires_per_knockout_match
        )
        ctx.record_match(best_slot, match.teams)

        scheduled.append(KnockoutScheduledMatch(
            team_a_id=km.team_a_id,
            team_b_id=km.team_b_id,
            time_slot_id=best_slot.id,
            umpire_team1_id=umpire1,
            umpire_team2_id=umpire2,
            knockout_round=km.knockout_round,
        ))

    return KnockoutResult(bracket=bracket, scheduled=scheduled)


def _assign_umpires(
    slot: SlotRef,
    match: MatchRef,
    ctx: ScoreContext,
    conflicts: Sequence[TeamConflict],
    eligible_team_ids: Sequence[int],
    umpires_needed: int
) -> Tuple[Optional[int], Optional[int]]:
    """
    Pick umpires one at a time, adding each pick to the slot before the
    next so the two are always distinct.
    """
    slot_teams = ctx.occupancy.setdefault(slot.id, [])
    slot_teams.extend(match.teams)

    picks: List[Optional[int]] = []
    for _ in range(umpires_needed):
        umpire_id = select_umpire_team(
            slot.id, match, ctx.occupancy, ctx.umpire_counts, conflicts, eligible_team_ids
        )
        if umpire_id is not None:
            slot_teams.append(umpire_id)
            ctx.umpire_counts[umpire_id] = ctx.umpire_counts.get(umpire_id, 0) + 1
        picks.append(umpire_id)

    picks.extend([None] * (2 - len(picks)))
    return picks[0], picks[1]
