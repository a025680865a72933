"""
Data models for the cricket fixture scheduler.
"""

from dataclasses import dataclass, field
from datetime import date, time
from typing import List, Optional, Dict, Any
from enum import Enum
import pandas as pd

from .errors import InvalidInputError


# slot id -> team ids present in that slot (playing and umpiring)
OccupancyMap = Dict[int, List[int]]


class ConflictLevel(Enum):
    """How strongly two teams must be kept apart."""
    SAME_SLOT = "same_slot"
    SAME_DAY = "same_day"


class MatchStatus(Enum):
    """Lifecycle of a stored match."""
    SCHEDULED = "scheduled"
    PLAYED = "played"


@dataclass(frozen=True)
class TeamConflict:
    """A rule keeping two teams out of the same slot or off the same day."""
    team_a_id: int
    team_b_id: int
    level: ConflictLevel

    def involves(self, team_id: int) -> bool:
        return team_id in (self.team_a_id, self.team_b_id)

    def other(self, team_id: int) -> Optional[int]:
        """Get the opposite team of the pair, or None if team_id is not in it."""
        if self.team_a_id == team_id:
            return self.team_b_id
        if self.team_b_id == team_id:
            return self.team_a_id
        return None


@dataclass(frozen=True)
class TeamBlackout:
    """A date on which a team cannot play."""
    team_id: int
    date: date


@dataclass(frozen=True)
class SlotRef:
    """A ground and start time on a date. Holds at most one match."""
    id: int
    date: date
    ground_format: str
    ground_id: int
    start_time: time


@dataclass(frozen=True)
class MatchRef:
    """A fixture that still needs a slot."""
    team_a_id: int
    team_b_id: int
    group_id: int
    format: str

    def __post_init__(self):
        if self.team_a_id == self.team_b_id:
            raise InvalidInputError(f"Team {self.team_a_id} cannot play itself")

    @property
    def teams(self) -> List[int]:
        """Get both teams in this match."""
        return [self.team_a_id, self.team_b_id]


@dataclass(frozen=True)
class ExistingMatch:
    """A committed (locked or played) match that occupies a slot."""
    time_slot_id: int
    team_a_id: int
    team_b_id: int
    umpire_team1_id: Optional[int] = None
    umpire_team2_id: Optional[int] = None

    @property
    def teams(self) -> List[int]:
        return [self.team_a_id, self.team_b_id]

    @property
    def umpires(self) -> List[int]:
        return [u for u in (self.umpire_team1_id, self.umpire_team2_id) if u is not None]


@dataclass(frozen=True)
class ScheduledMatch:
    """A match placed into a slot by the group scheduler."""
    team_a_id: int
    team_b_id: int
    group_id: int
    format: str
    time_slot_id: int
    umpire_team1_id: Optional[int] = None

    @property
    def teams(self) -> List[int]:
        return [self.team_a_id, self.team_b_id]


@dataclass(frozen=True)
class UnschedulableMatch:
    """A match no slot could take, with the reason why."""
    team_a_id: int
    team_b_id: int
    group_id: int
    format: str
    reason: str


@dataclass
class ScheduleInput:
    """Everything the group scheduler needs for one run."""
    matches: List[MatchRef]
    slots: List[SlotRef]
    conflicts: List[TeamConflict] = field(default_factory=list)
    blackouts: List[TeamBlackout] = field(default_factory=list)
    existing_schedule: List[ExistingMatch] = field(default_factory=list)
    division_team_ids: List[int] = field(default_factory=list)
    # team id -> format, enables format-aware umpire selection when given
    team_format_map: Optional[Dict[int, str]] = None
    # team id -> matches it plays in the full round robin; derived from matches when absent
    expected_match_counts: Optional[Dict[int, int]] = None


@dataclass
class ScheduleResult:
    """Output of a group scheduling or rescheduling run."""
    scheduled: List[ScheduledMatch] = field(default_factory=list)
    unschedulable: List[UnschedulableMatch] = field(default_factory=list)
    message: Optional[str] = None

    def to_dataframe(self, slots: Optional[List[SlotRef]] = None) -> pd.DataFrame:
        """Convert scheduled matches to a pandas DataFrame, joined to slot details when given."""
        if not self.scheduled:
            return pd.DataFrame()

        slot_map = {s.id: s for s in slots or []}
        data = []
        for match in self.scheduled:
            slot = slot_map.get(match.time_slot_id)
            data.append({
                'Slot': match.time_slot_id,
                'Date': slot.date if slot else None,
                'Start Time': slot.start_time if slot else None,
                'Ground': slot.ground_id if slot else None,
                'Format': match.format,
                'Group': match.group_id,
                'Team A': match.team_a_id,
                'Team B': match.team_b_id,
                'Umpire': match.umpire_team1_id,
            })

        df = pd.DataFrame(data)
        df['Umpire'] = df['Umpire'].astype('Int64')
        if slot_map and df['Date'].notna().all():
            df = df.sort_values(['Date', 'Start Time', 'Ground'], kind='stable')
        return df.reset_index(drop=True)

    def get_summary_stats(self, slots: Optional[List[SlotRef]] = None) -> Dict[str, Any]:
        """Get summary statistics for the schedule."""
        stats: Dict[str, Any] = {
            'total_scheduled': len(self.scheduled),
            'total_unschedulable': len(self.unschedulable),
        }
        if not self.scheduled:
            return stats

        df = self.to_dataframe(slots)
        team_counts = pd.concat([df['Team A'], df['Team B']]).value_counts()
        umpire_counts = df['Umpire'].dropna().astype(int).value_counts()

        stats.update({
            'group_matches': df['Group'].value_counts().sort_index().to_dict(),
            'format_matches': df['Format'].value_counts().to_dict(),
            'matches_per_team': team_counts.sort_index().to_dict(),
            'umpire_assignments': umpire_counts.sort_index().to_dict(),
            'unumpired_matches': int(df['Umpire'].isna().sum()),
        })
        if slots:
            stats['date_range'] = {
                'start': df['Date'].min(),
                'end': df['Date'].max()
            }
            stats['date_matches'] = df['Date'].value_counts().sort_index().to_dict()
        return stats


@dataclass(frozen=True)
class QualifiedTeam:
    """A team that earned a knockout place through its group rank."""
    team_id: int
    group_rank: int
    group_id: int


@dataclass(frozen=True)
class KnockoutMatch:
    """A bracket entry. Byes carry a single team and no opponent."""
    team_a_id: Optional[int]
    team_b_id: Optional[int]
    is_bye: bool
    knockout_round: int


@dataclass
class KnockoutBracket:
    """Round-1 entries of a single-elimination bracket."""
    matches: List[KnockoutMatch]
    total_rounds: int
    bracket_size: int
    bye_count: int

    def rounds(self) -> List[int]:
        return list(range(1, self.total_rounds + 1))

    @property
    def bye_team_ids(self) -> List[int]:
        return [m.team_a_id for m in self.matches if m.is_bye]


@dataclass(frozen=True)
class KnockoutScheduledMatch:
    """A knockout match placed into a slot with its umpiring teams."""
    team_a_id: int
    team_b_id: int
    time_slot_id: int
    umpire_team1_id: Optional[int]
    umpire_team2_id: Optional[int]
    knockout_round: int

    @property
    def umpires(self) -> List[int]:
        return [u for u in (self.umpire_team1_id, self.umpire_team2_id) if u is not None]


@dataclass
class KnockoutResult:
    bracket: KnockoutBracket
    scheduled: List[KnockoutScheduledMatch] = field(default_factory=list)


@dataclass
class MatchRecord:
    """A stored match as the caller sees it: used for moves, locks and rescheduling."""
    id: int
    team_a_id: int
    team_b_id: int
    group_id: int
    format: str
    time_slot_id: Optional[int] = None
    is_locked: bool = False
    status: MatchStatus = MatchStatus.SCHEDULED
    umpire_team1_id: Optional[int] = None
    umpire_team2_id: Optional[int] = None
    conflict_override: Optional[str] = None

    @property
    def is_played(self) -> bool:
        return self.status == MatchStatus.PLAYED

    def to_match_ref(self) -> MatchRef:
        return MatchRef(self.team_a_id, self.team_b_id, self.group_id, self.format)


@dataclass(frozen=True)
class MoveResult:
    success: bool
    conflict: Optional[str] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class LockResult:
    success: bool
    new_lock_state: bool
    error: Optional[str] = None


@dataclass(frozen=True)
class PlayedMatch:
    """A completed fixture. winner_id of None means a tie."""
    team_a_id: int
    team_b_id: int
    team_a_score: int
    team_b_score: int
    winner_id: Optional[int] = None


@dataclass
class Standing:
    """One row of a group table."""
    team_id: int
    played: int = 0
    won: int = 0
    lost: int = 0
    tied: int = 0
    points: int = 0
    net_run_rate: float = 0.0
