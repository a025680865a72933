"""
Loading a tournament description from YAML into scheduler inputs.
"""

import datetime
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .config import SchedulerConfig
from .models import (
    ConflictLevel,
    ExistingMatch,
    PlayedMatch,
    ScheduleInput,
    SlotRef,
    TeamBlackout,
    TeamConflict,
)
from .pairings import build_group_matches


class GroupSpec(BaseModel):
    """A round-robin group."""
    id: int
    format: str
    team_ids: List[int] = Field(default_factory=list)


class SlotSpec(BaseModel):
    """A ground and start time on a game day."""
    id: int
    date: datetime.date
    ground_id: int
    ground_format: str
    start_time: datetime.time

    @field_validator('start_time', mode='before')
    @classmethod
    def parse_start_time(cls, v):
        # YAML 1.1 reads an unquoted 10:30 as the base-60 integer 630
        if isinstance(v, int):
            return datetime.time(v // 60, v % 60)
        return v

    def to_slot(self) -> SlotRef:
        return SlotRef(
            id=self.id,
            date=self.date,
            ground_format=self.ground_format,
            ground_id=self.ground_id,
            start_time=self.start_time,
        )


class ConflictSpec(BaseModel):
    team_a_id: int
    team_b_id: int
    level: ConflictLevel


class BlackoutSpec(BaseModel):
    team_id: int
    date: datetime.date


class ExistingMatchSpec(BaseModel):
    """A locked or played match already sitting in a slot."""
    time_slot_id: int
    team_a_id: int
    team_b_id: int
    umpire_team1_id: Optional[int] = None
    umpire_team2_id: Optional[int] = None


class ResultSpec(BaseModel):
    """A played group match. A missing winner_id is a tie."""
    group_id: int
    team_a_id: int
    team_b_id: int
    team_a_score: int = Field(ge=0)
    team_b_score: int = Field(ge=0)
    winner_id: Optional[int] = None

    @model_validator(mode='after')
    def validate_winner(self):
        if self.winner_id is not None and self.winner_id not in (self.team_a_id, self.team_b_id):
            raise ValueError(
                f"Winner {self.winner_id} did not play in {self.team_a_id} vs {self.team_b_id}"
            )
        return self


class KnockoutSpec(BaseModel):
    format: str
    qualifiers_per_group: int = Field(default=2, ge=1)


class TournamentFile(BaseModel):
    """Everything a scheduling run needs, as written in a tournament file."""
    name: str = "Tournament"
    groups: List[GroupSpec]
    slots: List[SlotSpec] = Field(default_factory=list)
    conflicts: List[ConflictSpec] = Field(default_factory=list)
    blackouts: List[BlackoutSpec] = Field(default_factory=list)
    existing_matches: List[ExistingMatchSpec] = Field(default_factory=list)
    umpire_team_ids: Optional[List[int]] = Field(
        default=None, description="Umpire pool; defaults to every team"
    )
    results: List[ResultSpec] = Field(default_factory=list)
    knockout: Optional[KnockoutSpec] = None

    @model_validator(mode='after')
    def validate_ids(self):
        slot_ids = [s.id for s in self.slots]
        duplicates = sorted({i for i in slot_ids if slot_ids.count(i) > 1})
        if duplicates:
            raise ValueError(f"Duplicate slot ids: {duplicates}")

        seen: Dict[int, int] = {}
        for group in self.groups:
            for team_id in group.team_ids:
                if team_id in seen:
                    raise ValueError(
                        f"Team {team_id} is in both group {seen[team_id]} and group {group.id}"
                    )
                seen[team_id] = group.id
        return self

    def all_team_ids(self) -> List[int]:
        return [team_id for group in self.groups for team_id in group.team_ids]

    def team_format_map(self) -> Dict[int, str]:
        return {team_id: group.format for group in self.groups for team_id in group.team_ids}

    def check_formats(self, config: SchedulerConfig) -> None:
        """Reject any group, slot or knockout format the configuration does not know."""
        used = [g.format for g in self.groups] + [s.ground_format for s in self.slots]
        if self.knockout:
            used.append(self.knockout.format)
        unknown = sorted(set(used) - set(config.formats))
        if unknown:
            raise ValueError(f"Unknown match formats: {unknown}. Must be one of {config.formats}")

    def to_slots(self) -> List[SlotRef]:
        return [s.to_slot() for s in self.slots]

    def to_conflicts(self) -> List[TeamConflict]:
        return [TeamConflict(c.team_a_id, c.team_b_id, c.level) for c in self.conflicts]

    def to_schedule_input(self) -> ScheduleInput:
        """Build the group scheduler input: one round robin per group."""
        return ScheduleInput(
            matches=build_group_matches(g.model_dump() for g in self.groups),
            slots=self.to_slots(),
            conflicts=self.to_conflicts(),
            blackouts=[TeamBlackout(b.team_id, b.date) for b in self.blackouts],
            existing_schedule=[ExistingMatch(**m.model_dump()) for m in self.existing_matches],
            division_team_ids=(
                list(self.umpire_team_ids) if self.umpire_team_ids is not None else self.all_team_ids()
            ),
            team_format_map=self.team_format_map(),
        )

    def played_matches_by_group(self) -> Dict[int, List[PlayedMatch]]:
        by_group: Dict[int, List[PlayedMatch]] = {g.id: [] for g in self.groups}
        for r in self.results:
            by_group.setdefault(r.group_id, []).append(PlayedMatch(
                team_a_id=r.team_a_id,
                team_b_id=r.team_b_id,
                team_a_score=r.team_a_score,
                team_b_score=r.team_b_score,
                winner_id=r.winner_id,
            ))
        return by_group


def load_tournament(tournament_path: str, config: Optional[SchedulerConfig] = None) -> TournamentFile:
    """
    Load a tournament from a YAML file.

    Args:
        tournament_path: Path to the YAML file
        config: Scheduler configuration used to check match formats

    Returns:
        TournamentFile: Validated tournament
    """
    with open(tournament_path, 'r') as f:
        data = yaml.safe_load(f) or {}

    tournament = TournamentFile(**data)
    tournament.check_formats(config or SchedulerConfig())
    return tournament
