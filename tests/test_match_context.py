"""Tests for match context generation."""

import random
from collections import Counter

import pytest

from fm_career.core.models.match import MatchContext, MatchImportance, OppositionTactic, fatigue_level
from fm_career.core.models.player import Team
from fm_career.engine.match_context import MatchContextGenerator
from fm_career.engine.random_source import SequenceRandom


@pytest.fixture
def generator(config):
    return MatchContextGenerator(config)


class TestMatchContextGenerator:
    """Tests for fixture context generation."""

    def test_quality_is_clamped(self, generator):
        """Opposition quality stays within 55-92 whatever the team."""
        rng = random.Random(1)
        for reputation in (20, 75, 99):
            team = Team(reputation=reputation, league_tier=1)
            for _ in range(200):
                context = generator.generate(team, rng)
                assert 55 <= context.opposition_quality <= 92

    def test_lower_tiers_face_weaker_opposition(self, generator):
        """Opposition is drawn below the team's reputation in lower tiers."""
        rng = random.Random(2)
        top = [generator.opposition_quality(Team(reputation=80, league_tier=1), rng) for _ in range(2000)]
        fifth = [generator.opposition_quality(Team(reputation=80, league_tier=5), rng) for _ in range(2000)]
        assert sum(top) / len(top) == pytest.approx(80, abs=1.0)
        assert sum(fifth) / len(fifth) == pytest.approx(60, abs=1.0)

    def test_fatigue_timeline_never_decreases(self, generator):
        """Fatigue only builds up over the match."""
        rng = random.Random(3)
        for _ in range(100):
            context = generator.generate(Team(), rng)
            timeline = context.fatigue_timeline
            assert len(timeline) == 7
            assert list(timeline) == sorted(timeline)
            assert context.fatigue == timeline[0]
            assert 0 <= timeline[0] <= 20

    def test_home_flag_is_honored(self, generator, rng):
        """An explicit home flag overrides the coin toss."""
        assert generator.generate(Team(), rng, is_home=True).home_advantage is True
        assert generator.generate(Team(), rng, is_home=False).home_advantage is False

    def test_importance_distribution(self, generator):
        """League fixtures dominate; derbies are rare."""
        rng = random.Random(4)
        counts = Counter(generator.generate(Team(), rng).importance for _ in range(5000))
        assert counts[MatchImportance.LEAGUE] > 2500
        assert counts[MatchImportance.DERBY] < 250

    def test_scripted_rolls(self, generator):
        """Roll tables map low draws to the first entry."""
        rng = SequenceRandom([0.01])
        context = generator.generate(Team(), rng, is_home=True)
        assert context.importance is MatchImportance.DERBY

    def test_tactic_bands(self, generator, rng):
        """Weak opposition never presses or attacks."""
        for _ in range(100):
            assert generator.opposition_tactic(60, rng) in (OppositionTactic.DEFENSIVE, OppositionTactic.COUNTER)

    def test_none_team(self, generator, rng):
        """A missing team is a programming error."""
        with pytest.raises(ValueError):
            generator.generate(None, rng)


class TestMatchContext:
    """Tests for the context value object."""

    def test_fatigue_at(self):
        """Fatigue is read from the 15-minute checkpoint."""
        context = MatchContext(fatigue=5, fatigue_timeline=(5, 10, 15, 20, 25, 30, 35))
        assert context.fatigue_at(0) == 5
        assert context.fatigue_at(44) == 15
        assert context.fatigue_at(200) == 35

    def test_fatigue_at_without_timeline(self):
        """The pre-match level applies when no timeline was generated."""
        assert MatchContext(fatigue=12).fatigue_at(60) == 12

    def test_fatigue_level_lookup(self):
        """Timeline lookups clamp to the last checkpoint and fall back to a default."""
        assert fatigue_level((10, 20), 100) == 20
        assert fatigue_level((10, 20), 16) == 20
        assert fatigue_level((), 30, default=5.0) == 5.0
