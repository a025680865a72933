"""
Tests for result models and their pandas views.
"""

from datetime import date, time
from pathlib import Path
import sys

sys.path.append(str(Path(__file__).parent.parent))

from cricket_scheduler.models import (
    ConflictLevel,
    KnockoutBracket,
    KnockoutMatch,
    MatchRecord,
    MatchStatus,
    ScheduledMatch,
    ScheduleResult,
    SlotRef,
    TeamConflict,
    UnschedulableMatch,
)

SLOTS = [
    SlotRef(1, date(2025, 3, 8), "leather", 1, time(9, 0)),
    SlotRef(2, date(2025, 3, 1), "leather", 2, time(13, 0)),
    SlotRef(3, date(2025, 3, 1), "leather", 1, time(9, 0)),
]


def make_result():
    return ScheduleResult(
        scheduled=[
            ScheduledMatch(1, 2, 1, "leather", time_slot_id=1, umpire_team1_id=3),
            ScheduledMatch(1, 3, 1, "leather", time_slot_id=2, umpire_team1_id=None),
            ScheduledMatch(2, 3, 1, "leather", time_slot_id=3, umpire_team1_id=1),
        ],
        unschedulable=[UnschedulableMatch(4, 5, 2, "tape_ball", "no slot")],
    )


def test_team_conflict_other():
    """Test the opposite team of a conflict pair."""
    conflict = TeamConflict(1, 2, ConflictLevel.SAME_DAY)

    assert conflict.other(1) == 2
    assert conflict.other(2) == 1
    assert conflict.other(3) is None
    assert conflict.involves(2)


def test_to_dataframe_sorted_by_slot_time():
    """Test rows are joined to slots and ordered by date, time and ground."""
    df = make_result().to_dataframe(SLOTS)

    assert list(df.columns) == [
        'Slot', 'Date', 'Start Time', 'Ground', 'Format', 'Group', 'Team A', 'Team B', 'Umpire'
    ]
    assert df['Slot'].tolist() == [3, 2, 1]
    assert df['Umpire'].isna().tolist() == [False, True, False]


def test_to_dataframe_without_slots():
    """Test the frame keeps result order when no slots are given."""
    df = make_result().to_dataframe()

    assert df['Slot'].tolist() == [1, 2, 3]
    assert df['Date'].isna().all()
    assert ScheduleResult().to_dataframe().empty


def test_summary_stats():
    """Test summary counts for teams, umpires and dates."""
    stats = make_result().get_summary_stats(SLOTS)

    assert stats['total_scheduled'] == 3
    assert stats['total_unschedulable'] == 1
    assert stats['group_matches'] == {1: 3}
    assert stats['matches_per_team'] == {1: 2, 2: 2, 3: 2}
    assert stats['umpire_assignments'] == {1: 1, 3: 1}
    assert stats['unumpired_matches'] == 1
    assert stats['date_range'] == {'start': date(2025, 3, 1), 'end': date(2025, 3, 8)}
    assert stats['date_matches'] == {date(2025, 3, 1): 2, date(2025, 3, 8): 1}


def test_summary_stats_empty():
    """Test an empty result only reports totals."""
    assert ScheduleResult().get_summary_stats() == {'total_scheduled': 0, 'total_unschedulable': 0}


def test_bracket_bye_teams():
    """Test bye entries are listed by team."""
    bracket = KnockoutBracket(
        matches=[
            KnockoutMatch(7, None, True, 1),
            KnockoutMatch(8, 9, False, 1),
        ],
        total_rounds=2,
        bracket_size=4,
        bye_count=1,
    )

    assert bracket.bye_team_ids == [7]
    assert bracket.rounds() == [1, 2]


def test_match_status_lifecycle():
    """Test a stored match is either scheduled or played."""
    assert [s.value for s in MatchStatus] == ["scheduled", "played"]

    match = MatchRecord(1, 1, 2, 1, "leather")
    assert match.status == MatchStatus.SCHEDULED
    assert not match.is_played

    match.status = MatchStatus.PLAYED
    assert match.is_played
    assert match.to_match_ref().teams == [1, 2]
