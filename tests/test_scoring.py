"""
Tests for soft-constraint slot scoring.
"""

from datetime import date, time
from pathlib import Path
import sys

sys.path.append(str(Path(__file__).parent.parent))

from cricket_scheduler.config import ScoringWeights
from cricket_scheduler.models import MatchRef, SlotRef
from cricket_scheduler.scoring import (
    ScoreContext,
    day_match_count,
    fairness_penalty,
    pick_best_slot,
    progress_ratio,
    score_slot,
)

DAY = date(2025, 3, 1)
OTHER_DAY = date(2025, 3, 8)
SLOT = SlotRef(1, DAY, "leather", 1, time(9, 0))
MATCH = MatchRef(1, 2, 1, "leather")


def test_empty_context_scores_zero():
    """Test a fresh context gives no penalty."""
    assert score_slot(SLOT, MATCH, ScoreContext()) == 0


def test_day_clumping():
    """Test two earlier matches on the date cost 10 each."""
    ctx = ScoreContext(team_day_counts={1: {DAY: 2}})

    assert score_slot(SLOT, MATCH, ctx) == 20


def test_ground_and_time_clumping():
    """Test ground and start-time repeats cost 8 each per team."""
    ctx = ScoreContext(
        team_ground_counts={1: {1: 1}},
        team_time_counts={2: {time(9, 0): 2}},
    )

    assert score_slot(SLOT, MATCH, ctx) == 24


def test_day_load_from_occupancy():
    """Test each occupied slot on the date adds 1, whoever is in it."""
    slots = [
        SLOT,
        SlotRef(2, DAY, "leather", 2, time(9, 0)),
        SlotRef(3, DAY, "tape_ball", 3, time(13, 0)),
        SlotRef(4, OTHER_DAY, "leather", 1, time(9, 0)),
    ]
    ctx = ScoreContext(occupancy={2: [5, 6], 3: [7, 8], 4: [1, 2]}, all_slots=slots)

    assert day_match_count(ctx.occupancy, slots, DAY) == 2
    assert score_slot(SLOT, MATCH, ctx) == 2


def test_day_load_from_date_counts():
    """Test pre-aggregated date counts take precedence over occupancy."""
    ctx = ScoreContext(date_match_counts={DAY: 5})

    assert score_slot(SLOT, MATCH, ctx) == 5


def test_raw_fairness():
    """Test without expected counts the lead is in raw matches, x50."""
    ctx = ScoreContext(team_total_counts={1: 3, 2: 2, 3: 1})

    assert fairness_penalty(MATCH, ctx, ScoringWeights()) == 150
    assert fairness_penalty(MatchRef(1, 3, 1, "leather"), ctx, ScoringWeights()) == 100


def test_ratio_fairness_across_group_sizes():
    """Test the lead is measured in progress ratio when expected counts are known."""
    ctx = ScoreContext(
        team_total_counts={1: 2, 2: 1, 3: 0},
        team_expected_counts={1: 4, 2: 4, 3: 4},
    )

    # leads 0.5 and 0.25 -> floor(50)*50 + floor(25)*50
    assert fairness_penalty(MATCH, ctx, ScoringWeights()) == 3750
    assert fairness_penalty(MatchRef(2, 3, 1, "leather"), ctx, ScoringWeights()) == 1250


def test_ratio_fairness_equal_progress_in_different_groups():
    """Test one match of 2 and two matches of 4 are equally fair."""
    ctx = ScoreContext(
        team_total_counts={1: 1, 2: 2, 3: 1},
        team_expected_counts={1: 2, 2: 4, 3: 2},
    )

    assert fairness_penalty(MATCH, ctx, ScoringWeights()) == 0


def test_progress_ratio_unknown_team():
    """Test a team with no expected count is treated as expecting 1 match."""
    assert progress_ratio(9, {9: 2}, {}) == 2
    assert progress_ratio(9, {9: 2}, {9: 0}) == 2
    assert progress_ratio(9, {}, {9: 4}) == 0


def test_custom_weights():
    """Test weights from configuration are applied."""
    ctx = ScoreContext(team_day_counts={1: {DAY: 1}, 2: {DAY: 1}})

    assert score_slot(SLOT, MATCH, ctx, ScoringWeights(day_clumping=3)) == 6


def test_pick_best_slot_first_wins_ties():
    """Test the lowest score wins and the earliest candidate breaks ties."""
    a = SlotRef(1, DAY, "leather", 1, time(9, 0))
    b = SlotRef(2, DAY, "leather", 2, time(9, 0))
    c = SlotRef(3, OTHER_DAY, "leather", 1, time(9, 0))

    assert pick_best_slot([a, b], MATCH, ScoreContext()) == a

    ctx = ScoreContext(team_day_counts={1: {DAY: 1}})
    assert pick_best_slot([a, b, c], MATCH, ctx) == c
    assert pick_best_slot([], MATCH, ctx) is None


def test_record_match():
    """Test recording a match updates every tracking map."""
    ctx = ScoreContext(date_match_counts={})
    ctx.record_match(SLOT, [1, 2])

    assert ctx.team_day_counts == {1: {DAY: 1}, 2: {DAY: 1}}
    assert ctx.team_ground_counts[2] == {1: 1}
    assert ctx.team_time_counts[1] == {time(9, 0): 1}
    assert ctx.team_total_counts == {1: 1, 2: 1}
    assert ctx.date_match_counts == {DAY: 1}
