"""
Group tables and knockout qualification.
"""

from typing import Dict, List, Optional, Sequence

from .config import PointsConfig
from .models import PlayedMatch, QualifiedTeam, Standing


def calculate_standings(
    team_ids: Sequence[int],
    played_matches: Sequence[PlayedMatch],
    points: Optional[PointsConfig] = None
) -> List[Standing]:
    """
    Calculate a group table from played matches.

    Net run rate is (runs scored - runs conceded) / matches played, 0 for a
    team that has not played. Matches involving a team outside team_ids are
    ignored.

    Args:
        team_ids: Teams of the group, all of which appear in the table
        played_matches: Completed matches
        points: Points per win/tie/loss

    Returns:
        List[Standing]: sorted by points, then net run rate, both descending
    """
    points = points or PointsConfig()
    table: Dict[int, Standing] = {team_id: Standing(team_id=team_id) for team_id in team_ids}
    scored = {team_id: 0 for team_id in team_ids}
    conceded = {team_id: 0 for team_id in team_ids}

    for match in played_matches:
        a = table.get(match.team_a_id)
        b = table.get(match.team_b_id)
        if a is None or b is None:
            continue

        a.played += 1
        b.played += 1
        scored[a.team_id] += match.team_a_score
        conceded[a.team_id] += match.team_b_score
        scored[b.team_id] += match.team_b_score
        conceded[b.team_id] += match.team_a_score

        if match.winner_id is None:
            a.tied += 1
            b.tied += 1
            a.points += points.tie
            b.points += points.tie
        else:
            winner, loser = (a, b) if match.winner_id == a.team_id else (b, a)
            winner.won += 1
            loser.lost += 1
            winner.points += points.win
            loser.points += points.loss

    for standing in table.values():
        if standing.played > 0:
            standing.net_run_rate = (
                scored[standing.team_id] - conceded[standing.team_id]
            ) / standing.played

    return sorted(table.values(), key=lambda s: (-s.points, -s.net_run_rate))


def select_qualifiers(
    group_standings: Dict[int, List[Standing]],
    qualifier_count: int
) -> List[QualifiedTeam]:
    """
    Take the top qualifier_count teams of each group table.

    Args:
        group_standings: group id -> sorted table from calculate_standings
        qualifier_count: Teams advancing per group

    Returns:
        List[QualifiedTeam]: in group order, ranks starting at 1
    """
    qualifiers = []
    for group_id, standings in group_standings.items():
        for rank, standing in enumerate(standings[:qualifier_count], start=1):
            qualifiers.append(QualifiedTeam(
                team_id=standing.team_id,
                group_rank=rank,
                group_id=group_id,
            ))
    return qualifiers
