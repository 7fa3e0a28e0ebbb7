"""Tests for season orchestration."""

import logging
import random

import pytest

from fm_career.core.config import Settings
from fm_career.core.models.player import Position
from fm_career.engine.season_simulator import SeasonSimulator


@pytest.fixture
def simulator(config):
    return SeasonSimulator(config, Settings(FM_CAREER_SEED=None, FM_CAREER_WORKERS=1))


class TestSeasonSimulator:
    """Tests for full-season simulation."""

    def test_full_season(self, simulator, striker):
        """A season plays every fixture and returns stats and metadata."""
        result = simulator.simulate_season(striker, n_matches=38, seed=2024)

        assert result.stats.matches_played == 38
        assert result.stats.player_name == "Elite Striker"
        assert result.seed == 2024
        assert result.config_version == "2024.1"
        assert result.stats.goals >= 0

    def test_seeded_season_is_reproducible(self, simulator, striker):
        """The same seed gives the same season."""
        first = simulator.simulate_season(striker, n_matches=20, seed=7)
        second = simulator.simulate_season(striker, n_matches=20, seed=7)
        assert first.stats == second.stats
        assert first.events == second.events

    def test_different_seeds_differ(self, simulator, striker):
        """Different seeds give different seasons."""
        first = simulator.simulate_season(striker, n_matches=38, seed=1)
        second = simulator.simulate_season(striker, n_matches=38, seed=2)
        assert first.stats != second.stats

    def test_parallel_matches_sequential(self, simulator, striker):
        """Worker threads do not change the outcome."""
        sequential = simulator.simulate_season(striker, n_matches=30, seed=11, workers=1)
        parallel = simulator.simulate_season(striker, n_matches=30, seed=11, workers=4)
        assert sequential.stats == parallel.stats

    def test_random_seed_is_reported(self, simulator, striker):
        """An unseeded season reports the seed it used, so it can be replayed."""
        result = simulator.simulate_season(striker, n_matches=5)
        replay = simulator.simulate_season(striker, n_matches=5, seed=result.seed)
        assert result.seed is not None
        assert replay.stats == result.stats

    def test_forced_season_goals(self, simulator, striker):
        """A season goal total is distributed across the fixtures exactly."""
        result = simulator.simulate_season(striker, n_matches=38, seed=3, forced_goals=25)
        assert result.stats.goals == 25
        assert "20-Goal Season" in [event.title for event in result.events]

    def test_zero_matches(self, simulator, striker):
        """An empty season is valid."""
        result = simulator.simulate_season(striker, n_matches=0, seed=1)
        assert result.stats.matches_played == 0
        assert result.events == []

    def test_invalid_arguments(self, simulator, striker):
        """Negative fixture counts and missing players are rejected."""
        with pytest.raises(ValueError):
            simulator.simulate_season(striker, n_matches=-1)
        with pytest.raises(ValueError):
            simulator.simulate_season(None, n_matches=5)

    def test_goalkeeper_season(self, simulator, goalkeeper):
        """Keepers get real goalkeeping data from their matches."""
        result = simulator.simulate_season(goalkeeper, n_matches=38, seed=9)
        assert result.stats.goalkeeping_source == "match"
        assert result.stats.goals <= 38
        assert result.stats.saves > 0

    def test_settings_defaults(self, config, striker):
        """Fixture count and seed default to the settings."""
        simulator = SeasonSimulator(config, Settings(FM_CAREER_SEED=5, FM_CAREER_MATCHES_PER_SEASON=10))
        result = simulator.simulate_season(striker)
        assert result.seed == 5
        assert result.stats.matches_played == 10


class TestDistributeGoals:
    """Tests for spreading a season goal total over fixtures."""

    def test_exact_total_under_cap(self, simulator, striker):
        """The plan sums to the total and respects the per-match cap."""
        plan = simulator.distribute_goals(30, 38, striker, random.Random(1))
        assert len(plan) == 38
        assert sum(plan) == 30
        assert max(plan) <= 4

    def test_total_above_capacity(self, simulator, player_factory, caplog):
        """Totals no season could hold clamp with a warning."""
        keeper = player_factory(Position.GK)
        with caplog.at_level(logging.WARNING):
            plan = simulator.distribute_goals(50, 10, keeper, random.Random(1))
        assert plan == [1] * 10
        assert "clamping" in caplog.text

    def test_negative_total(self, simulator, striker):
        """Negative totals become goalless plans."""
        assert simulator.distribute_goals(-3, 4, striker, random.Random(1)) == [0, 0, 0, 0]
