"""
Tests for umpire team selection.
"""

from pathlib import Path
import sys

sys.path.append(str(Path(__file__).parent.parent))

from cricket_scheduler.models import ConflictLevel, MatchRef, TeamConflict
from cricket_scheduler.umpire import select_umpire_team

MATCH = MatchRef(1, 2, 1, "leather")


def test_fewest_assignments_wins():
    """Test the least-used eligible team is picked."""
    umpire = select_umpire_team(10, MATCH, {}, {3: 2, 4: 1, 5: 1}, [], [1, 2, 3, 4, 5])

    assert umpire == 4


def test_pool_order_breaks_ties():
    """Test equal counts fall back to pool order."""
    assert select_umpire_team(10, MATCH, {}, {}, [], [5, 4, 3]) == 5


def test_playing_and_present_teams_excluded():
    """Test neither playing team nor a team already in the slot can umpire."""
    umpire = select_umpire_team(10, MATCH, {10: [3]}, {}, [], [1, 2, 3, 4])

    assert umpire == 4


def test_conflicted_teams_excluded():
    """Test any conflict with a playing team rules a candidate out."""
    conflicts = [
        TeamConflict(3, 1, ConflictLevel.SAME_SLOT),
        TeamConflict(2, 4, ConflictLevel.SAME_DAY),
        TeamConflict(5, 9, ConflictLevel.SAME_SLOT),
    ]

    assert select_umpire_team(10, MATCH, {}, {}, conflicts, [3, 4, 5]) == 5


def test_format_filter():
    """Test format filtering applies only when both format inputs are given."""
    formats = {3: "tape_ball", 4: "leather"}

    assert select_umpire_team(10, MATCH, {}, {}, [], [3, 4], "leather", formats) == 4
    assert select_umpire_team(10, MATCH, {}, {}, [], [3, 4], None, formats) == 3
    assert select_umpire_team(10, MATCH, {}, {}, [], [3, 4], "leather", None) == 3


def test_no_eligible_team():
    """Test None is returned when nobody can umpire."""
    assert select_umpire_team(10, MATCH, {10: [3]}, {}, [], [1, 2, 3]) is None
    assert select_umpire_team(10, MATCH, {}, {}, [], []) is None
