"""
Core scheduling engine: greedy assignment of round-robin matches to slots.
"""

import logging
from typing import Dict, List, Optional

from .config import SchedulerConfig
from .constraints import (
    build_occupancy_map,
    find_candidate_slots,
    sort_by_constraint_difficulty,
)
from .models import (
    ConflictLevel,
    MatchRef,
    ScheduledMatch,
    ScheduleInput,
    ScheduleResult,
    UnschedulableMatch,
)
from .pairings import expected_match_counts
from .scoring import ScoreContext, pick_best_slot
from .umpire import select_umpire_team

logger = logging.getLogger(__name__)

NO_SLOT_REASON = (
    "No compatible slot available: all slots failed format, availability, "
    "or conflict constraints"
)


class GroupScheduler:
    """Greedy group-stage scheduler. One instance can run any number of inputs."""

    def __init__(self, config: Optional[SchedulerConfig] = None):
        self.config = config or SchedulerConfig()

    def schedule(self, schedule_input: ScheduleInput) -> ScheduleResult:
        """
        Assign every match a slot and an umpire, or record why it could not.

        Args:
            schedule_input: Matches, slots, constraints and committed matches

        Returns:
            ScheduleResult: scheduled and unschedulable matches, which together
            are exactly the input matches
        """
        inp = schedule_input
        result = ScheduleResult()

        # 1. Most-constrained matches first
        remaining = sort_by_constraint_difficulty(inp.matches, inp.conflicts)

        # 2. Working state seeded from committed matches
        ctx = self._build_context(inp)
        expected = (
            inp.expected_match_counts
            if inp.expected_match_counts is not None
            else expected_match_counts(inp.matches)
        )
        ctx.team_expected_counts = expected

        logger.info(
            "Scheduling %d matches into %d slots (%d committed)",
            len(remaining), len(inp.slots), len(inp.existing_schedule)
        )

        while remaining:
            # 3. Least-progressed teams go next
            match = remaining.pop(self._pick_next_match(remaining, ctx.team_total_counts, expected))

            # 4. Hard constraints
            candidates = find_candidate_slots(
                match, inp.slots, ctx.occupancy, inp.conflicts, inp.blackouts
            )
            if not candidates:
                logger.warning(
                    "No eligible slot for %d vs %d (group %d)",
                    match.team_a_id, match.team_b_id, match.group_id
                )
                result.unschedulable.append(UnschedulableMatch(
                    team_a_id=match.team_a_id,
                    team_b_id=match.team_b_id,
                    group_id=match.group_id,
                    format=match.format,
                    reason=NO_SLOT_REASON,
                ))
                continue

            # 5. Soft constraints
            best_slot = pick_best_slot(candidates, match, ctx, self.config.weights)

            # 6. Umpire
            umpire_id = select_umpire_team(
                best_slot.id,
                match,
                ctx.occupancy,
                ctx.umpire_counts,
                inp.conflicts,
                inp.division_team_ids,
                match.format,
                inp.team_format_map
            )

            # 7. Record and update state
            result.scheduled.append(ScheduledMatch(
                team_a_id=match.team_a_id,
                team_b_id=match.team_b_id,
                group_id=match.group_id,
                format=match.format,
                time_slot_id=best_slot.id,
                umpire_team1_id=umpire_id,
            ))

            slot_teams = ctx.occupancy.setdefault(best_slot.id, [])
            slot_teams.extend(match.teams)
            if umpire_id is not None:
                slot_teams.append(umpire_id)
                ctx.umpire_counts[umpire_id] = ctx.umpire_counts.get(umpire_id, 0) + 1

            ctx.record_match(best_slot, match.teams)

            logger.debug(
                "Scheduled %d vs %d in slot %d (umpire %s)",
                match.team_a_id, match.team_b_id, best_slot.id, umpire_id
            )

        logger.info(
            "Scheduled %d of %d matches",
            len(result.scheduled), len(result.scheduled) + len(result.unschedulable)
        )
        return result

    def _build_context(self, inp: ScheduleInput) -> ScoreContext:
        """Build fresh tracking maps; the caller's existing schedule is only read."""
        ctx = ScoreContext(
            occupancy=build_occupancy_map(inp.existing_schedule),
            all_slots=list(inp.slots),
            date_match_counts={},
        )
        ctx.team_total_counts = {team_id: 0 for team_id in inp.division_team_ids}

        for existing in inp.existing_schedule:
            for umpire_id in existing.umpires:
                ctx.umpire_counts[umpire_id] = ctx.umpire_counts.get(umpire_id, 0) + 1

        slot_map = {s.id: s for s in inp.slots}
        for existing in inp.existing_schedule:
            slot = slot_map.get(existing.time_slot_id)
            if slot is None:
                continue
            ctx.record_match(slot, existing.teams)

        return ctx

    @staticmethod
    def _pick_next_match(
        remaining: List[MatchRef],
        totals: Dict[int, int],
        expected: Dict[int, int]
    ) -> int:
        """
        Get the index of the match whose teams have the lowest average
        progress ratio (scheduled / expected). First found wins ties.
        """
        best_idx = 0
        best_ratio = None

        for idx, match in enumerate(remaining):
            a_ratio = totals.get(match.team_a_id, 0) / (expected.get(match.team_a_id) or 1)
            b_ratio = totals.get(match.team_b_id, 0) / (expected.get(match.team_b_id) or 1)
            avg_ratio = (a_ratio + b_ratio) / 2
            if best_ratio is None or avg_ratio < best_ratio:
                best_ratio = avg_ratio
                best_idx = idx

        return best_idx


def generate_group_schedule(
    schedule_input: ScheduleInput,
    config: Optional[SchedulerConfig] = None
) -> ScheduleResult:
    """
    Convenience function to run the group scheduler.

    Args:
        schedule_input: Scheduler input
        config: Scheduler configuration

    Returns:
        ScheduleResult: Complete result
    """
    return GroupScheduler(config).schedule(schedule_input)


def validate_schedule(result: ScheduleResult, schedule_input: ScheduleInput) -> Dict[str, List[str]]:
    """
    Validate a completed schedule against the hard constraints.

    Args:
        result: Schedule to validate
        schedule_input: The input it was produced from

    Returns:
        Dict[str, List[str]]: Validation results
    """
    violations = {
        'errors': [],
        'warnings': []
    }

    # Every input match accounted for exactly once
    def key(m):
        return (m.team_a_id, m.team_b_id, m.group_id, m.format)

    input_keys = sorted(key(m) for m in schedule_input.matches)
    output_keys = sorted(
        [key(m) for m in result.scheduled] + [key(m) for m in result.unschedulable]
    )
    if input_keys != output_keys:
        violations['errors'].append(
            "Scheduled and unschedulable matches do not partition the input matches"
        )

    slot_map = {s.id: s for s in schedule_input.slots}
    used_slots = {m.time_slot_id for m in schedule_input.existing_schedule}
    # per slot and per date, the playing teams of each match
    slot_entries: Dict[int, List[List[int]]] = {}
    date_entries: Dict = {}

    for existing in schedule_input.existing_schedule:
        slot_entries.setdefault(existing.time_slot_id, []).append(existing.teams)
        slot = slot_map.get(existing.time_slot_id)
        if slot is not None:
            date_entries.setdefault(slot.date, []).append(existing.teams)

    for match in result.scheduled:
        slot = slot_map.get(match.time_slot_id)
        if slot is None:
            violations['errors'].append(f"Match {match.team_a_id} vs {match.team_b_id} uses unknown slot {match.time_slot_id}")
            continue

        if slot.ground_format != match.format:
            violations['errors'].append(
                f"Match {match.team_a_id} vs {match.team_b_id} ({match.format}) placed on a {slot.ground_format} ground"
            )
        if slot.id in used_slots:
            violations['errors'].append(f"Slot {slot.id} holds more than one match")
        used_slots.add(slot.id)

        if match.umpire_team1_id in match.teams:
            violations['errors'].append(f"Team {match.umpire_team1_id} umpires its own match in slot {slot.id}")
        if match.umpire_team1_id is None:
            violations['warnings'].append(f"No umpire for {match.team_a_id} vs {match.team_b_id} in slot {slot.id}")

        slot_entries.setdefault(slot.id, []).append(match.teams)
        date_entries.setdefault(slot.date, []).append(match.teams)

    for conflict in schedule_input.conflicts:
        a, b = conflict.team_a_id, conflict.team_b_id
        if conflict.level == ConflictLevel.SAME_SLOT:
            for slot_id, entries in slot_entries.items():
                if _in_different_matches(entries, a, b):
                    violations['errors'].append(
                        f"Teams {conflict.team_a_id} and {conflict.team_b_id} share slot {slot_id}"
                    )
        else:
            for the_date, entries in date_entries.items():
                if _in_different_matches(entries, a, b):
                    violations['errors'].append(
                        f"Teams {conflict.team_a_id} and {conflict.team_b_id} both play on {the_date}"
                    )

    if result.unschedulable:
        violations['warnings'].append(f"Unschedulable matches: {len(result.unschedulable)}")

    return violations


def _in_different_matches(entries: List[List[int]], team_a: int, team_b: int) -> bool:
    """Check the two teams appear in two different matches of the list."""
    return any(
        team_a in x and team_b in y
        for i, x in enumerate(entries)
        for j, y in enumerate(entries)
        if i != j
    )
