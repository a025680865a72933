"""
Hard constraints a slot must satisfy before a match can be placed in it.

Every check here is a pure function over the occupancy map and the
caller's conflict, blackout and slot lists. Nothing is mutated.
"""

from datetime import date, timedelta
from typing import Iterable, List, Sequence

from .models import (
    ConflictLevel,
    ExistingMatch,
    MatchRef,
    OccupancyMap,
    SlotRef,
    TeamBlackout,
    TeamConflict,
)


def is_format_compatible(slot: SlotRef, match: MatchRef) -> bool:
    """Check the slot's ground is set up for the match format."""
    return slot.ground_format == match.format


def is_slot_occupied(slot_id: int, occupancy: OccupancyMap) -> bool:
    """Check if a slot already has a match in it. Each slot holds one match."""
    return len(occupancy.get(slot_id, [])) > 0


def is_team_available(slot_id: int, match: MatchRef, occupancy: OccupancyMap) -> bool:
    """Check neither playing team is already in the slot."""
    teams_in_slot = occupancy.get(slot_id, [])
    return match.team_a_id not in teams_in_slot and match.team_b_id not in teams_in_slot


def _has_conflict_with(
    present: Iterable[int],
    match: MatchRef,
    conflicts: Iterable[TeamConflict],
    level: ConflictLevel
) -> bool:
    present = set(present)
    if not present:
        return False

    for conflict in conflicts:
        if conflict.level != level:
            continue
        for team_id in match.teams:
            other = conflict.other(team_id)
            if other is not None and other in present:
                return True
    return False


def has_team_conflict_in_slot(
    slot_id: int,
    match: MatchRef,
    occupancy: OccupancyMap,
    conflicts: Iterable[TeamConflict]
) -> bool:
    """
    Check if a team already in the slot has a same_slot conflict with
    either playing team.
    """
    return _has_conflict_with(
        occupancy.get(slot_id, []), match, conflicts, ConflictLevel.SAME_SLOT
    )


def teams_on_date(the_date: date, occupancy: OccupancyMap, all_slots: Iterable[SlotRef]) -> set:
    """Collect every team present in any slot on the given date."""
    teams = set()
    for slot in all_slots:
        if slot.date == the_date:
            teams.update(occupancy.get(slot.id, []))
    return teams


def has_team_conflict_on_day(
    the_date: date,
    match: MatchRef,
    occupancy: OccupancyMap,
    all_slots: Iterable[SlotRef],
    conflicts: Iterable[TeamConflict]
) -> bool:
    """
    Check if a team playing or umpiring anywhere on the date has a
    same_day conflict with either playing team.
    """
    return _has_conflict_with(
        teams_on_date(the_date, occupancy, all_slots), match, conflicts, ConflictLevel.SAME_DAY
    )


def weekend_key(the_date: date) -> date:
    """
    Get the key of the weekend a date belongs to.

    Saturday and Sunday share the Saturday date. Weekdays are not grouped
    and key to themselves.
    """
    if the_date.weekday() == 6:
        return the_date - timedelta(days=1)
    return the_date


def has_team_played_this_weekend(
    the_date: date,
    match: MatchRef,
    occupancy: OccupancyMap,
    all_slots: Iterable[SlotRef]
) -> bool:
    """
    Check if either team is already in a slot on the other day of the
    same weekend. The same date is left to is_team_available.
    """
    target_key = weekend_key(the_date)

    for slot in all_slots:
        if slot.date == the_date:
            continue
        if weekend_key(slot.date) != target_key:
            continue

        teams_in_slot = occupancy.get(slot.id, [])
        for team_id in match.teams:
            if team_id in teams_in_slot:
                return True

    return False


def is_team_blacked_out(
    the_date: date,
    match: MatchRef,
    blackouts: Iterable[TeamBlackout]
) -> bool:
    """Check if either team is unavailable on the date."""
    for blackout in blackouts:
        if blackout.date == the_date and blackout.team_id in match.teams:
            return True
    return False


def find_candidate_slots(
    match: MatchRef,
    slots: Sequence[SlotRef],
    occupancy: OccupancyMap,
    conflicts: Sequence[TeamConflict],
    blackouts: Sequence[TeamBlackout]
) -> List[SlotRef]:
    """
    Find every slot that passes all hard constraints, in input order.

    Args:
        match: Match to place
        slots: All slots of the run
        occupancy: Current slot occupancy
        conflicts: Team conflicts
        blackouts: Team blackout dates

    Returns:
        List[SlotRef]: Eligible slots
    """
    return [
        slot for slot in slots
        if is_format_compatible(slot, match)
        and not is_slot_occupied(slot.id, occupancy)
        and is_team_available(slot.id, match, occupancy)
        and not has_team_conflict_in_slot(slot.id, match, occupancy, conflicts)
        and not has_team_conflict_on_day(slot.date, match, occupancy, slots, conflicts)
        and not has_team_played_this_weekend(slot.date, match, occupancy, slots)
        and not is_team_blacked_out(slot.date, match, blackouts)
    ]


def build_occupancy_map(existing_matches: Iterable[ExistingMatch]) -> OccupancyMap:
    """
    Build a fresh occupancy map from committed matches, including their
    umpiring teams.
    """
    occupancy: OccupancyMap = {}

    for match in existing_matches:
        teams = occupancy.setdefault(match.time_slot_id, [])
        teams.extend(match.teams)
        teams.extend(match.umpires)

    return occupancy


def conflict_count(match: MatchRef, conflicts: Iterable[TeamConflict]) -> int:
    """Count conflicts of any level touching either team of the match."""
    return sum(
        1 for conflict in conflicts
        if conflict.involves(match.team_a_id) or conflict.involves(match.team_b_id)
    )


def sort_by_constraint_difficulty(
    matches: Iterable[MatchRef],
    conflicts: Sequence[TeamConflict]
) -> List[MatchRef]:
    """Order matches most-constrained first. Equal difficulty keeps input order."""
    return sorted(matches, key=lambda m: conflict_count(m, conflicts), reverse=True)
