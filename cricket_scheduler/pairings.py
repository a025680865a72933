"""
Matchup generation for round-robin group play.
"""

from itertools import combinations
from typing import Dict, Iterable, List, Sequence, Tuple

from .errors import InvalidInputError
from .models import MatchRef


def generate_round_robin(team_ids: Sequence[int]) -> List[Tuple[int, int]]:
    """
    Generate every pairing of a single round robin.

    Pairs come out in nested-loop order (i < j), so the result is
    deterministic for a given team order.

    Args:
        team_ids: Team ids in group order

    Returns:
        List[Tuple[int, int]]: N(N-1)/2 unordered pairs

    Raises:
        InvalidInputError: fewer than 2 teams were given
    """
    if len(team_ids) < 2:
        raise InvalidInputError(
            f"Round-robin requires at least 2 teams, got {len(team_ids)}"
        )

    return list(combinations(team_ids, 2))


def build_group_matches(groups: Iterable[Dict]) -> List[MatchRef]:
    """
    Build match references for every group's round robin.

    Groups with fewer than 2 teams are skipped.

    Args:
        groups: Dicts with 'id', 'format' and 'team_ids' keys

    Returns:
        List[MatchRef]: Matches in group order, then pairing order
    """
    matches = []

    for group in groups:
        team_ids = group['team_ids']
        if len(team_ids) < 2:
            continue

        for team_a, team_b in generate_round_robin(team_ids):
            matches.append(MatchRef(
                team_a_id=team_a,
                team_b_id=team_b,
                group_id=group['id'],
                format=group['format'],
            ))

    return matches


def expected_match_counts(matches: Iterable[MatchRef]) -> Dict[int, int]:
    """Count how many of the given matches each team plays."""
    counts: Dict[int, int] = {}
    for match in matches:
        for team_id in match.teams:
            counts[team_id] = counts.get(team_id, 0) + 1
    return counts


def get_matchup_summary(matches: List[MatchRef]) -> Dict:
    """
    Get summary statistics for generated matches.

    Args:
        matches: List of matches

    Returns:
        Dict: Summary statistics
    """
    if not matches:
        return {}

    group_counts: Dict[int, int] = {}
    for match in matches:
        group_counts[match.group_id] = group_counts.get(match.group_id, 0) + 1

    team_counts = expected_match_counts(matches)

    return {
        'total_matches': len(matches),
        'groups': group_counts,
        'teams': len(team_counts),
        'avg_matches_per_team': sum(team_counts.values()) / len(team_counts),
    }
