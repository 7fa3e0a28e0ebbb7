#!/usr/bin/env python3
"""FM Career CLI.

Simulates one season for a player described on the command line and
prints a rich season report.
"""

import argparse
import json
import sys
from typing import Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from fm_career.config import ConfigManager, get_balance_config
from fm_career.core.config import get_settings
from fm_career.core.exceptions import FMCareerError
from fm_career.core.models.player import Player, PlayerStats, Position, Team, Trait, TraitTier
from fm_career.core.models.season import ExtendedSeasonStats, SeasonResult
from fm_career.engine.match_rating import MatchRatingCalculator
from fm_career.engine.season_simulator import SeasonSimulator
from fm_career.utils.logging_config import setup_logging

console = Console()

IMPORTANCE_STYLES = {"legendary": "bold gold1", "high": "bold green", "normal": "white"}


def parse_trait(value: str) -> Trait:
    """Parse ``Name`` or ``Name:Tier`` into a Trait."""
    name, _, tier = value.partition(":")
    try:
        return Trait(name.strip(), TraitTier(tier.strip().title()) if tier else TraitTier.BRONZE)
    except ValueError:
        raise argparse.ArgumentTypeError(f"unknown trait tier in {value!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Simulate a footballer's career season")
    parser.add_argument("--name", default="Career Player", help="Player name")
    parser.add_argument(
        "--position", default="ST", choices=[p.value for p in Position], help="Player position"
    )
    parser.add_argument("--overall", type=float, default=80, help="Overall rating (0-100)")
    parser.add_argument("--finishing", type=float, help="Finishing (defaults to overall)")
    parser.add_argument("--age", type=int, default=25, help="Player age")
    parser.add_argument("--style", help="Playing style, e.g. Poacher or 'False 9'")
    parser.add_argument(
        "--trait", action="append", type=parse_trait, default=[],
        help="Trait as Name or Name:Tier (repeatable)",
    )
    parser.add_argument("--team", default="Career FC", help="Team name")
    parser.add_argument("--reputation", type=float, default=75, help="Team reputation (0-100)")
    parser.add_argument("--tier", type=int, default=1, help="League tier (1-5)")
    parser.add_argument("--matches", type=int, help="Matches in the season")
    parser.add_argument("--seed", type=int, help="Season seed")
    parser.add_argument("--goals", type=int, help="Force a season goal total")
    parser.add_argument("--workers", type=int, help="Worker threads")
    parser.add_argument("--balance", help="Path to a balance YAML file")
    parser.add_argument("--log-level", help="Logging level")
    parser.add_argument("--json", action="store_true", help="Print season stats as JSON")
    return parser


def build_player(args: argparse.Namespace) -> Player:
    """Create a player whose headline skills track the overall rating."""
    overall = args.overall
    position = Position(args.position)
    stats = PlayerStats(
        overall=overall,
        pace=overall,
        shooting=overall,
        passing=overall,
        dribbling=overall,
        defending=overall,
        physical=overall,
        finishing=args.finishing if args.finishing is not None else overall,
        composure=overall,
        positioning=overall,
        traits=list(args.trait),
    )
    if position.is_goalkeeper:
        stats.diving = stats.handling = stats.reflexes = stats.gk_positioning = overall
    team = Team(name=args.team, reputation=args.reputation, league_tier=args.tier)
    return Player(
        name=args.name,
        position=position,
        stats=stats,
        team=team,
        age=args.age,
        playing_style=args.style,
    )


def _stat_table(title: str, rows: list[tuple[str, str]]) -> Table:
    table = Table(title=title, show_header=False, title_style="bold cyan", min_width=30)
    table.add_column("Stat", style="dim")
    table.add_column("Value", justify="right")
    for label, value in rows:
        table.add_row(label, value)
    return table


def print_report(result: SeasonResult) -> None:
    """Print a season summary."""
    s: ExtendedSeasonStats = result.stats
    console.print(Panel(
        f"[bold]{s.player_name}[/] ({s.position}, {s.age}) - {s.team_name}, tier {s.league_tier}\n"
        f"[dim]Seed {result.seed} - balance {result.config_version}[/]",
        title="Season Report",
        border_style="green",
    ))

    console.print(_stat_table("Appearances", [
        ("Matches", f"{s.matches_played}/{s.total_matches}"),
        ("Minutes", str(s.minutes_played)),
        ("Record (W-D-L)", f"{s.wins}-{s.draws}-{s.losses}"),
        ("Average rating", f"{s.average_rating:.2f} ({MatchRatingCalculator.get_rating_description(s.average_rating)})"),
        ("Best / worst", f"{s.best_rating:.1f} / {s.worst_rating:.1f}"),
    ]))
    console.print(_stat_table("Attack", [
        ("Goals", str(s.goals)),
        ("Assists", str(s.assists)),
        ("Goals per 90", f"{s.goals_per_90:.2f}"),
        ("Shots (on target)", f"{s.shots} ({s.shots_on_target})"),
        ("Conversion", f"{s.goal_conversion:.1f}%"),
        ("xG", f"{s.expected_goals:.2f}"),
        ("Shots inside / outside box", f"{s.shots_inside_box} / {s.shots_outside_box}"),
        ("Big chances missed", str(s.big_chances_missed)),
        ("Key passes", str(s.key_passes)),
        ("xA", f"{s.expected_assists:.2f}"),
        ("Big chances created", str(s.big_chances_created)),
        ("Braces / hat-tricks", f"{s.braces} / {s.hat_tricks}"),
    ]))
    if s.goals:
        console.print(_stat_table("Goal Breakdown", [
            ("Left / right / head", f"{s.left_foot_goals} / {s.right_foot_goals} / {s.headed_goals}"),
            ("Inside / outside box", f"{s.goals_inside_box} / {s.goals_outside_box}"),
            ("Penalties / free kicks / corners", f"{s.penalty_goals} / {s.free_kick_goals} / {s.corner_goals}"),
            ("Golazos", str(s.golazos)),
            ("Game winners / equalizers", f"{s.game_winning_goals} / {s.equalizing_goals}"),
        ]))
    console.print(_stat_table("Passing", [
        ("Passes (completion)", f"{s.passes} ({s.pass_completion:.1f}%)"),
        ("Forward passes", f"{s.forward_passes} ({s.forward_pass_pct:.1f}%)"),
        ("Crosses", f"{s.crosses_accurate}/{s.crosses} ({s.cross_accuracy:.1f}%)"),
        ("Long balls", f"{s.long_balls_accurate}/{s.long_balls} ({s.long_ball_accuracy:.1f}%)"),
        ("Through balls", f"{s.through_balls_accurate}/{s.through_balls} ({s.through_ball_accuracy:.1f}%)"),
    ]))
    console.print(_stat_table("All-round", [
        ("Dribble success", f"{s.dribble_success:.1f}%"),
        ("Duels won", f"{s.duels_won}/{s.duels}"),
        ("Tackles won", f"{s.tackles_won}/{s.tackles}"),
        ("Interceptions", str(s.interceptions)),
        ("Cards (Y/R)", f"{s.yellow_cards}/{s.red_cards}"),
        ("Team of the week", str(s.team_of_the_week)),
        ("Man of the match", str(s.man_of_the_match)),
    ]))
    if s.goalkeeping_source != "none":
        console.print(_stat_table("Goalkeeping", [
            ("Saves", str(s.saves)),
            ("Save %", f"{s.save_percentage:.1f}%"),
            ("Goals conceded", str(s.goals_conceded)),
            ("Clean sheets", str(s.clean_sheets)),
            ("Source", s.goalkeeping_source),
        ]))

    if result.events:
        console.print("\n[bold]Milestones:[/]")
        for event in result.events:
            style = IMPORTANCE_STYLES.get(event.importance, "white")
            console.print(f"  [{style}]{event.title}[/] - {event.description}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(args.log_level or settings.log_level)

    try:
        if args.balance:
            config = ConfigManager(args.balance).load()
        else:
            path = settings.balance_path
            config = get_balance_config(str(path) if path else None)
        simulator = SeasonSimulator(config, settings)
        result = simulator.simulate_season(
            build_player(args),
            n_matches=args.matches,
            seed=args.seed,
            forced_goals=args.goals,
            workers=args.workers,
        )
    except FMCareerError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1

    if args.json:
        payload = {"seed": result.seed, "config_version": result.config_version, "stats": result.stats.to_dict()}
        console.print_json(json.dumps(payload))
    else:
        print_report(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
