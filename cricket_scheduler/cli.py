"""
Command-line interface for the cricket fixture scheduler.
"""

import argparse
import logging
import sys
import yaml
from pydantic import ValidationError
from .config import SchedulerConfig, load_config
from .constraints import build_occupancy_map
from .engine import generate_group_schedule, validate_schedule
from .errors import InvalidInputError
from .ingest import TournamentFile, load_tournament
from .knockout import generate_knockout_bracket, get_round_name
from .standings import calculate_standings, select_qualifiers


def run_knockout(tournament: TournamentFile, config: SchedulerConfig) -> None:
    """Print group tables and the knockout bracket built from them."""
    spec = tournament.knockout
    played = tournament.played_matches_by_group()

    group_standings = {}
    for group in tournament.groups:
        if group.format != spec.format or len(group.team_ids) < 2:
            continue
        standings = calculate_standings(group.team_ids, played.get(group.id, []), config.points)
        group_standings[group.id] = standings

        print(f"\nGroup {group.id} ({group.format})")
        print(f"  {'Team':>6} {'P':>3} {'W':>3} {'L':>3} {'T':>3} {'Pts':>4} {'NRR':>8}")
        for s in standings:
            print(f"  {s.team_id:>6} {s.played:>3} {s.won:>3} {s.lost:>3} {s.tied:>3} {s.points:>4} {s.net_run_rate:>8.3f}")

    qualifiers = select_qualifiers(group_standings, spec.qualifiers_per_group)
    schedule_input = tournament.to_schedule_input()
    occupancy = build_occupancy_map(schedule_input.existing_schedule)
    umpire_counts = {}
    for existing in schedule_input.existing_schedule:
        for umpire_id in existing.umpires:
            umpire_counts[umpire_id] = umpire_counts.get(umpire_id, 0) + 1

    eligible = [t for t in schedule_input.division_team_ids
                if schedule_input.team_format_map.get(t) == spec.format]

    result = generate_knockout_bracket(
        qualifiers,
        schedule_input.slots,
        schedule_input.conflicts,
        eligible,
        occupancy,
        umpire_counts,
        blackouts=schedule_input.blackouts,
        match_format=spec.format,
        config=config,
    )

    bracket = result.bracket
    print(f"\nRound 1 ({get_round_name(bracket.bracket_size)}): {len(qualifiers)} qualifiers, "
          f"{bracket.total_rounds} rounds, {bracket.bye_count} byes")
    for m in bracket.matches:
        if m.is_bye:
            print(f"  Team {m.team_a_id}: bye")
        else:
            print(f"  Team {m.team_a_id} vs Team {m.team_b_id}")

    print("\nScheduled knockout matches:")
    for m in result.scheduled:
        print(f"  Slot {m.time_slot_id}: {m.team_a_id} vs {m.team_b_id} "
              f"(umpires {m.umpire_team1_id}, {m.umpire_team2_id})")


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Cricket fixture scheduler - group stage and knockout scheduling"
    )

    parser.add_argument(
        "--tournament",
        required=True,
        help="Path to YAML tournament file"
    )

    parser.add_argument(
        "--config",
        help="Path to YAML configuration file (optional)"
    )

    parser.add_argument(
        "--validate-only",
        action="store_true",
        help="Only load and validate the tournament file"
    )

    parser.add_argument(
        "--knockout",
        action="store_true",
        help="Build the knockout bracket from the tournament's results"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output"
    )

    args = parser.parse_args()

    try:
        # Load configuration
        config = load_config(args.config) if args.config else SchedulerConfig()
        logging.basicConfig(
            level=logging.DEBUG if args.verbose else config.log_level,
            format="%(levelname)s %(name)s: %(message)s"
        )

        # Load tournament
        print("Loading tournament...")
        tournament = load_tournament(args.tournament, config)
        print(f"Loaded {tournament.name}: {len(tournament.groups)} groups, "
              f"{len(tournament.all_team_ids())} teams, {len(tournament.slots)} slots")

        if args.validate_only:
            print("Validation complete. Exiting.")
            return

        if args.knockout:
            if tournament.knockout is None:
                print("ERROR: Tournament file has no knockout section")
                sys.exit(1)
            run_knockout(tournament, config)
            return

        # Run group scheduling
        schedule_input = tournament.to_schedule_input()
        print(f"Scheduling {len(schedule_input.matches)} matches...")
        result = generate_group_schedule(schedule_input, config)

        violations = validate_schedule(result, schedule_input)
        if violations['errors']:
            print("ERRORS found in schedule:")
            for error in violations['errors']:
                print(f"  - {error}")
        if violations['warnings']:
            print("WARNINGS found in schedule:")
            for warning in violations['warnings']:
                print(f"  - {warning}")

        df = result.to_dataframe(schedule_input.slots)
        if not df.empty:
            print()
            print(df.to_string(index=False))

        if result.unschedulable:
            print("\nUnschedulable matches:")
            for m in result.unschedulable:
                print(f"  - {m.team_a_id} vs {m.team_b_id} (group {m.group_id}): {m.reason}")

        # Print summary
        print("\n" + "=" * 50)
        print("SCHEDULING COMPLETE")
        print("=" * 50)

        stats = result.get_summary_stats(schedule_input.slots)
        print(f"Matches scheduled: {stats['total_scheduled']}")
        print(f"Matches unschedulable: {stats['total_unschedulable']}")
        if 'date_range' in stats:
            print(f"Date range: {stats['date_range']['start']} to {stats['date_range']['end']}")
        if 'umpire_assignments' in stats:
            print(f"Umpire assignments: {stats['umpire_assignments']}")

    except FileNotFoundError as e:
        print(f"ERROR: File not found: {e}")
        sys.exit(1)
    except yaml.YAMLError as e:
        print(f"ERROR: Invalid YAML: {e}")
        sys.exit(1)
    except (ValidationError, InvalidInputError, ValueError) as e:
        print(f"ERROR: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
