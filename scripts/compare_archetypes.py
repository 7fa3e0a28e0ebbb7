#!/usr/bin/env python3
"""
Archetype Balance Check Script.

Simulates several seasons for a set of reference players and prints their
average output, so balance-table changes can be judged at a glance.
Usage:
    python scripts/compare_archetypes.py
    python scripts/compare_archetypes.py --seasons 20 --balance my_balance.yaml
"""

import argparse
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from rich.console import Console
from rich.progress import Progress
from rich.table import Table

from fm_career.config import ConfigManager
from fm_career.core.exceptions import ConfigError
from fm_career.core.models.player import Player, PlayerStats, Position, Team, Trait, TraitTier
from fm_career.engine.season_simulator import SeasonSimulator

console = Console()


def _player(name: str, position: Position, overall: float, style: str | None = None,
            traits: list[Trait] | None = None, **skills) -> Player:
    values = {key: overall for key in ("pace", "shooting", "passing", "dribbling", "defending", "physical")}
    values.update(skills)
    return Player(
        name=name,
        position=position,
        stats=PlayerStats(overall=overall, traits=traits or [], **values),
        team=Team(name="Reference FC", reputation=80, league_tier=1),
        playing_style=style,
    )


ARCHETYPES = [
    _player("Elite Poacher", Position.ST, 91, "Poacher",
            [Trait("Poacher", TraitTier.GOLD)], finishing=93, composure=90),
    _player("Complete Forward", Position.ST, 86, "Complete Forward", finishing=86),
    _player("Inverted Winger", Position.RW, 85, "Inverted Winger", long_shots=84),
    _player("Playmaker", Position.CAM, 87, "Advanced Playmaker",
            [Trait("Vision", TraitTier.SILVER)], vision=91),
    _player("Box-to-Box", Position.CM, 82, "Box-to-Box"),
    _player("Stopper", Position.CB, 84, "Stopper", heading=86),
    _player("Shot Stopper", Position.GK, 86, "Shot Stopper",
            diving=87, handling=85, reflexes=89, gk_positioning=86),
]


def main():
    parser = argparse.ArgumentParser(description="Compare reference players across seasons")
    parser.add_argument("--seasons", type=int, default=10, help="Seasons per archetype")
    parser.add_argument("--matches", type=int, default=38, help="Matches per season")
    parser.add_argument("--seed", type=int, default=2024, help="Base seed")
    parser.add_argument("--balance", help="Path to a balance YAML file")
    args = parser.parse_args()

    try:
        config = ConfigManager(args.balance).load()
    except ConfigError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    simulator = SeasonSimulator(config)
    table = Table(title=f"Archetype averages over {args.seasons} seasons (balance {config.version})")
    table.add_column("Player", style="cyan")
    table.add_column("Pos")
    for column in ("Goals", "Assists", "Shots", "xG", "Rating", "MOTM", "Clean sheets"):
        table.add_column(column, justify="right")

    with Progress(console=console) as progress:
        task = progress.add_task("Simulating", total=len(ARCHETYPES) * args.seasons)
        for player in ARCHETYPES:
            totals = {"goals": 0.0, "assists": 0.0, "shots": 0.0, "xg": 0.0, "rating": 0.0,
                      "motm": 0.0, "clean_sheets": 0.0}
            for season in range(args.seasons):
                stats = simulator.simulate_season(
                    player, n_matches=args.matches, seed=args.seed + season
                ).stats
                totals["goals"] += stats.goals
                totals["assists"] += stats.assists
                totals["shots"] += stats.shots
                totals["xg"] += stats.expected_goals
                totals["rating"] += stats.average_rating
                totals["motm"] += stats.man_of_the_match
                totals["clean_sheets"] += stats.clean_sheets
                progress.advance(task)

            n = args.seasons
            table.add_row(
                player.name,
                player.position.value,
                f"{totals['goals'] / n:.1f}",
                f"{totals['assists'] / n:.1f}",
                f"{totals['shots'] / n:.1f}",
                f"{totals['xg'] / n:.1f}",
                f"{totals['rating'] / n:.2f}",
                f"{totals['motm'] / n:.1f}",
                f"{totals['clean_sheets'] / n:.1f}" if player.position.is_goalkeeper else "-",
            )

    console.print(table)


if __name__ == "__main__":
    main()
