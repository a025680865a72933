"""
Validation of manual match moves and lock toggles.

Nothing here mutates its arguments: the caller persists an accepted move
(and, for an overridden conflict, the override reason) itself.
"""

from typing import Sequence

from .constraints import has_team_conflict_in_slot, is_format_compatible, is_team_available
from .models import LockResult, MatchRecord, MoveResult, OccupancyMap, SlotRef, TeamConflict


def move_match(
    match: MatchRecord,
    new_slot: SlotRef,
    occupancy: OccupancyMap,
    conflicts: Sequence[TeamConflict],
    override_conflict: bool = False
) -> MoveResult:
    """
    Check whether a match may move to a new slot.

    Locked, played and format-incompatible moves are rejected outright.
    A double booking or same_slot conflict is reported as a conflict unless
    override_conflict is set.
    """
    if match.is_locked:
        return MoveResult(success=False, error="Match is locked")

    if match.is_played:
        return MoveResult(success=False, error="Match is already played")

    match_ref = match.to_match_ref()

    if not is_format_compatible(new_slot, match_ref):
        return MoveResult(
            success=False,
            error=f'Slot format "{new_slot.ground_format}" is incompatible with match format "{match.format}"'
        )

    if not is_team_available(new_slot.id, match_ref, occupancy):
        conflict = f"Team is already playing in slot {new_slot.id}"
    elif has_team_conflict_in_slot(new_slot.id, match_ref, occupancy, conflicts):
        conflict = f"Team conflict detected in slot {new_slot.id}"
    else:
        return MoveResult(success=True)

    if override_conflict:
        return MoveResult(success=True)
    return MoveResult(success=False, conflict=conflict)


def toggle_lock(match: MatchRecord) -> LockResult:
    """Flip a match's lock state. Played matches cannot be toggled."""
    if match.is_played:
        return LockResult(
            success=False,
            new_lock_state=match.is_locked,
            error="Cannot toggle lock on a played match"
        )

    return LockResult(success=True, new_lock_state=not match.is_locked)
