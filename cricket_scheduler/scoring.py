"""
Soft-constraint scoring of candidate slots (lower is better).
"""

import math
from dataclasses import dataclass, field
from datetime import date, time
from typing import Dict, Iterable, List, Optional

from .config import ScoringWeights
from .models import MatchRef, OccupancyMap, SlotRef


@dataclass
class ScoreContext:
    """
    Tracking maps needed to score a slot. Built fresh for each scheduling
    run and updated as matches are placed.
    """
    # team -> date -> matches that day
    team_day_counts: Dict[int, Dict[date, int]] = field(default_factory=dict)
    # team -> ground id -> matches on that ground
    team_ground_counts: Dict[int, Dict[int, int]] = field(default_factory=dict)
    # team -> start time -> matches at that time
    team_time_counts: Dict[int, Dict[time, int]] = field(default_factory=dict)
    # team -> matches scheduled so far
    team_total_counts: Dict[int, int] = field(default_factory=dict)
    # team -> matches in its full round robin; enables ratio fairness
    team_expected_counts: Optional[Dict[int, int]] = None
    umpire_counts: Dict[int, int] = field(default_factory=dict)
    occupancy: OccupancyMap = field(default_factory=dict)
    all_slots: List[SlotRef] = field(default_factory=list)
    # date -> occupied slots that day; counted from occupancy when absent
    date_match_counts: Optional[Dict[date, int]] = None

    def record_match(self, slot: SlotRef, team_ids: Iterable[int]) -> None:
        """Count a match in the per-team maps and the per-date totals."""
        for team_id in team_ids:
            _increment_nested(self.team_day_counts, team_id, slot.date)
            _increment_nested(self.team_ground_counts, team_id, slot.ground_id)
            _increment_nested(self.team_time_counts, team_id, slot.start_time)
            self.team_total_counts[team_id] = self.team_total_counts.get(team_id, 0) + 1
        if self.date_match_counts is not None:
            self.date_match_counts[slot.date] = self.date_match_counts.get(slot.date, 0) + 1


def _increment_nested(counts: Dict, team_id: int, key) -> None:
    inner = counts.setdefault(team_id, {})
    inner[key] = inner.get(key, 0) + 1


def day_match_count(occupancy: OccupancyMap, all_slots: Iterable[SlotRef], the_date: date) -> int:
    """Count occupied slots on a date. Each occupied slot is one match."""
    count = 0
    for slot in all_slots:
        if slot.date == the_date and occupancy.get(slot.id):
            count += 1
    return count


def progress_ratio(team_id: int, totals: Dict[int, int], expected: Dict[int, int]) -> float:
    """Share of a team's round robin already scheduled. Unknown teams expect 1 match."""
    return totals.get(team_id, 0) / (expected.get(team_id) or 1)


def fairness_penalty(match: MatchRef, ctx: ScoreContext, weights: ScoringWeights) -> int:
    """
    Penalise teams that are ahead of the least-scheduled team.

    With expected counts the lead is measured in progress ratio, so groups
    of different sizes are compared fairly; otherwise in raw match counts.
    """
    totals = ctx.team_total_counts
    if not totals:
        return 0

    penalty = 0
    if ctx.team_expected_counts:
        expected = ctx.team_expected_counts
        min_ratio = min(progress_ratio(t, totals, expected) for t in totals)
        for team_id in match.teams:
            lead = progress_ratio(team_id, totals, expected) - min_ratio
            penalty += math.floor(lead * weights.ratio_resolution) * weights.fairness
    else:
        min_total = min(totals.values())
        for team_id in match.teams:
            penalty += (totals.get(team_id, 0) - min_total) * weights.fairness

    return max(penalty, 0)


def score_slot(
    slot: SlotRef,
    match: MatchRef,
    ctx: ScoreContext,
    weights: Optional[ScoringWeights] = None
) -> int:
    """
    Score how good a slot is for a match. Lower score = better.

    Penalties, per playing team unless noted:
    - fairness: lead over the least-scheduled team (x50)
    - +10 per existing match on the slot's date
    - +8 per existing match on the slot's ground
    - +8 per existing match at the slot's start time
    - +1 per occupied slot on the date (day load, not per team)

    Args:
        slot: Candidate slot
        match: Match being placed
        ctx: Tracking maps for the current run
        weights: Penalty weights, defaults as above

    Returns:
        int: Non-negative penalty
    """
    weights = weights or ScoringWeights()
    score = fairness_penalty(match, ctx, weights)

    for team_id in match.teams:
        score += ctx.team_day_counts.get(team_id, {}).get(slot.date, 0) * weights.day_clumping
        score += ctx.team_ground_counts.get(team_id, {}).get(slot.ground_id, 0) * weights.ground_clumping
        score += ctx.team_time_counts.get(team_id, {}).get(slot.start_time, 0) * weights.time_clumping

    if ctx.date_match_counts is not None:
        score += ctx.date_match_counts.get(slot.date, 0) * weights.day_load
    else:
        score += day_match_count(ctx.occupancy, ctx.all_slots, slot.date) * weights.day_load

    return score


def pick_best_slot(
    candidates: List[SlotRef],
    match: MatchRef,
    ctx: ScoreContext,
    weights: Optional[ScoringWeights] = None
) -> Optional[SlotRef]:
    """Pick the lowest-scoring candidate; the earliest candidate wins ties."""
    best_slot = None
    best_score = None

    for slot in candidates:
        score = score_slot(slot, match, ctx, weights)
        if best_score is None or score < best_score:
            best_score = score
            best_slot = slot

    return best_slot
