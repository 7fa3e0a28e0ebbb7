"""Season orchestration.

Generates a fixture list of match contexts, runs every match (optionally
across worker threads) and aggregates the season once at the end.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from fm_career.config import BalanceConfig, get_balance_config
from fm_career.core.config import Settings, get_settings
from fm_career.core.models.match import ForcedResult, MatchSimulation
from fm_career.core.models.player import Player
from fm_career.core.models.season import SeasonResult
from fm_career.engine.capability_analyzer import CapabilityAnalyzer
from fm_career.engine.career_events import CareerEventGenerator
from fm_career.engine.match_context import MatchContextGenerator
from fm_career.engine.match_simulation_engine import MatchSimulationEngine
from fm_career.engine.random_source import RandomSource, create_random, derive_seed
from fm_career.engine.season_aggregator import SeasonStatsAggregator

logger = logging.getLogger(__name__)


class SeasonSimulator:
    """Simulate a full season for one player.

    Each match owns a random source derived from the season seed and its
    fixture index, so a season is reproducible whether it runs on one
    thread or many.
    """

    def __init__(self, config: Optional[BalanceConfig] = None, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        if config is None:
            path = self.settings.balance_path
            config = get_balance_config(str(path) if path else None)
        self.config = config

        analyzer = CapabilityAnalyzer(config)
        self.engine = MatchSimulationEngine(config, analyzer)
        self.context_generator = MatchContextGenerator(config)
        self.aggregator = SeasonStatsAggregator(config, analyzer)
        self.event_generator = CareerEventGenerator()

    def simulate_season(
        self,
        player: Player,
        n_matches: Optional[int] = None,
        seed: Optional[int] = None,
        forced_goals: Optional[int] = None,
        workers: Optional[int] = None,
    ) -> SeasonResult:
        """
        Simulate a season.

        Args:
            player: The player to simulate
            n_matches: Fixtures in the season (defaults to settings)
            seed: Season seed (defaults to settings, random when unset)
            forced_goals: Season goal total to spread across the matches
            workers: Worker threads (1 runs sequentially)

        Returns:
            SeasonResult with aggregated stats and career events
        """
        if player is None:
            raise ValueError("simulate_season() requires a player")

        n_matches = self.settings.matches_per_season if n_matches is None else n_matches
        if n_matches < 0:
            raise ValueError(f"n_matches must be non-negative, got {n_matches}")
        if seed is None:
            seed = self.settings.seed
        if seed is None:
            seed = create_random().getrandbits(32)
        workers = max(1, workers or self.settings.workers)

        season_rng = create_random(seed)
        if forced_goals is not None:
            plan = self.distribute_goals(forced_goals, n_matches, player, season_rng)
        else:
            plan = [None] * n_matches

        logger.info(
            "Simulating %d matches for %s (seed %d, %d worker%s)",
            n_matches, player.name, seed, workers, "" if workers == 1 else "s",
        )

        if workers == 1:
            matches = [self.play_match(player, index, seed, goals) for index, goals in enumerate(plan)]
        else:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                futures = [
                    executor.submit(self.play_match, player, index, seed, goals)
                    for index, goals in enumerate(plan)
                ]
                # Results are collected in fixture order, not completion order
                matches = [future.result() for future in futures]

        stats = self.aggregator.aggregate(matches, n_matches, player, create_random(derive_seed(seed, n_matches)))
        events = self.event_generator.generate(stats, player)
        return SeasonResult(stats=stats, events=events, seed=seed, config_version=self.config.version)

    def play_match(
        self, player: Player, index: int, seed: int, forced_goals: Optional[int] = None
    ) -> MatchSimulation:
        """Play fixture ``index`` with its own derived random source."""
        rng = create_random(derive_seed(seed, index))
        context = self.context_generator.generate(player.team, rng, is_home=index % 2 == 0)
        forced = ForcedResult(goals=forced_goals) if forced_goals is not None else None
        return self.engine.simulate_match(player, context, rng, forced)

    def distribute_goals(
        self, total: int, n_matches: int, player: Player, rng: RandomSource
    ) -> list[Optional[int]]:
        """Spread a season goal total over the fixtures without breaking the per-match cap."""
        cap = self.config.position(player.position).max_goals
        plan = [0] * n_matches
        remaining = max(0, int(total))
        capacity = cap * n_matches
        if remaining > capacity:
            logger.warning(
                "Season goal total %d exceeds what %d matches can hold (%d), clamping",
                remaining, n_matches, capacity,
            )
            remaining = capacity

        while remaining > 0:
            open_slots = [i for i, goals in enumerate(plan) if goals < cap]
            index = open_slots[rng.randint(0, len(open_slots) - 1)]
            plan[index] += 1
            remaining -= 1
        return list(plan)
