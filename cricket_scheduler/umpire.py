"""
Umpire team selection.
"""

from typing import Dict, Iterable, Optional, Sequence

from .models import MatchRef, OccupancyMap, TeamConflict


def select_umpire_team(
    slot_id: int,
    match: MatchRef,
    occupancy: OccupancyMap,
    umpire_counts: Dict[int, int],
    conflicts: Iterable[TeamConflict],
    eligible_team_ids: Sequence[int],
    match_format: Optional[str] = None,
    team_format_map: Optional[Dict[int, str]] = None
) -> Optional[int]:
    """
    Select the umpiring team for a match in a slot.

    A candidate must not be playing, must not already be in the slot, must
    have no conflict of any level with either playing team and, when both
    match_format and team_format_map are given, must play the same format.
    Format filtering is skipped when either is None.

    Args:
        slot_id: Slot the match is placed in
        match: The match needing an umpire
        occupancy: Current slot occupancy
        umpire_counts: Umpiring assignments per team so far
        conflicts: Team conflicts
        eligible_team_ids: Pool to choose from, in preference order
        match_format: Format of the match
        team_format_map: team id -> format

    Returns:
        Optional[int]: Team with fewest assignments (pool order on ties), or None
    """
    teams_in_slot = occupancy.get(slot_id, [])
    playing = match.teams
    conflicts = list(conflicts)
    check_format = match_format is not None and team_format_map is not None

    best_team = None
    best_count = None

    for team_id in eligible_team_ids:
        if team_id in playing or team_id in teams_in_slot:
            continue

        if check_format and team_format_map.get(team_id) != match_format:
            continue

        if any(c.involves(team_id) and c.other(team_id) in playing for c in conflicts):
            continue

        count = umpire_counts.get(team_id, 0)
        if best_count is None or count < best_count:
            best_count = count
            best_team = team_id

    return best_team
