"""
Tests for re-scheduling around locked and played matches.
"""

from datetime import date, time
from pathlib import Path
import sys

sys.path.append(str(Path(__file__).parent.parent))

from cricket_scheduler.models import MatchRecord, MatchStatus, SlotRef
from cricket_scheduler.reschedule import NOTHING_TO_RESCHEDULE, RescheduleInput, reschedule

SLOTS = [SlotRef(i, date(2025, 3, 1 + 7 * (i - 1)), "leather", 1, time(9, 0)) for i in range(1, 5)]


def test_nothing_to_reschedule():
    """Test an all-locked or played list returns only the message."""
    inp = RescheduleInput(
        all_matches=[
            MatchRecord(1, 1, 2, 1, "leather", time_slot_id=1, is_locked=True),
            MatchRecord(2, 3, 4, 1, "leather", time_slot_id=2, status=MatchStatus.PLAYED),
        ],
        slots=SLOTS,
        division_team_ids=[1, 2, 3, 4],
    )

    result = reschedule(inp)

    assert result.message == NOTHING_TO_RESCHEDULE == "No matches eligible for re-scheduling"
    assert result.scheduled == []
    assert result.unschedulable == []


def test_preserved_matches_keep_their_slots():
    """Test only eligible matches are returned, placed around preserved ones."""
    locked = MatchRecord(1, 1, 2, 1, "leather", time_slot_id=1, is_locked=True, umpire_team1_id=3)
    played = MatchRecord(2, 3, 4, 1, "leather", time_slot_id=2, status=MatchStatus.PLAYED)
    movable = MatchRecord(3, 1, 3, 1, "leather", time_slot_id=1)
    inp = RescheduleInput(
        all_matches=[locked, played, movable],
        slots=SLOTS,
        division_team_ids=[1, 2, 3, 4],
    )

    result = reschedule(inp)

    assert result.message is None
    assert len(result.scheduled) == 1
    assert result.scheduled[0].teams == [1, 3]
    assert result.scheduled[0].time_slot_id in (3, 4)
    assert result.scheduled[0].umpire_team1_id == 2

    # Input records are not modified
    assert movable.time_slot_id == 1
    assert locked.is_locked


def test_unplaced_preserved_match_does_not_block():
    """Test a locked match without a slot occupies nothing."""
    inp = RescheduleInput(
        all_matches=[
            MatchRecord(1, 1, 2, 1, "leather", is_locked=True),
            MatchRecord(2, 3, 4, 1, "leather"),
        ],
        slots=SLOTS[:1],
        division_team_ids=[1, 2, 3, 4],
    )

    result = reschedule(inp)

    assert [m.time_slot_id for m in result.scheduled] == [1]


def test_no_slot_left_is_unschedulable():
    """Test eligible matches with nowhere to go are reported, not raised."""
    inp = RescheduleInput(
        all_matches=[
            MatchRecord(1, 1, 2, 1, "leather", time_slot_id=1, is_locked=True),
            MatchRecord(2, 3, 4, 1, "leather", time_slot_id=1),
        ],
        slots=SLOTS[:1],
        division_team_ids=[1, 2, 3, 4],
    )

    result = reschedule(inp)

    assert result.scheduled == []
    assert len(result.unschedulable) == 1
