"""Tests for season statistics aggregation."""

import math
import random
from dataclasses import fields

import pytest

from fm_career.core.models.match import ForcedResult, MatchContext, MatchSimulation
from fm_career.core.models.player import Position
from fm_career.engine.match_simulation_engine import MatchSimulationEngine
from fm_career.engine.season_aggregator import (
    SeasonStatsAggregator,
    largest_remainder,
    pct,
    per_90,
    safe_div,
)


@pytest.fixture
def aggregator(config):
    return SeasonStatsAggregator(config)


@pytest.fixture
def engine(config):
    return MatchSimulationEngine(config)


def _season(engine, player, n=38, seed=0, forced=None):
    rng = random.Random(seed)
    return [
        engine.simulate_match(player, MatchContext(home_advantage=i % 2 == 0), rng, forced)
        for i in range(n)
    ]


class TestHelpers:
    """Tests for safe arithmetic and rounding helpers."""

    def test_safe_div(self):
        """Zero denominators return the default."""
        assert safe_div(5, 0) == 0.0
        assert safe_div(5, 0, default=1.0) == 1.0
        assert safe_div(6, 3) == 2.0

    def test_rates(self):
        """Percentages and per-90 figures round to two decimals."""
        assert pct(1, 3) == 33.33
        assert pct(1, 0) == 0.0
        assert per_90(3, 270) == 1.0
        assert per_90(3, 0) == 0.0

    def test_largest_remainder(self):
        """Rescaled counts sum exactly to the target."""
        assert largest_remainder({"a": 1, "b": 1, "c": 1}, 4, {}) == {"a": 2, "b": 1, "c": 1}
        assert largest_remainder({"a": 3, "b": 1}, 2, {}) == {"a": 2, "b": 0}
        assert largest_remainder({"in": 2, "out": 1}, 3, {}) == {"in": 2, "out": 1}

    def test_largest_remainder_fallback(self):
        """Empty counts are filled from the fallback weights."""
        assert largest_remainder({"inside": 0, "outside": 0}, 3, {"inside": 1.0}) == {"inside": 3, "outside": 0}
        assert largest_remainder({"a": 0, "b": 0}, 2, {}) == {"a": 1, "b": 1}
        assert largest_remainder({"a": 4, "b": 1}, 0, {}) == {"a": 0, "b": 0}


class TestAggregate:
    """Tests for whole-season aggregation."""

    def test_breakdowns_sum_to_goals(self, aggregator, engine, striker):
        """Every goal breakdown family sums to the season goal total."""
        matches = _season(engine, striker)
        stats = aggregator.aggregate(matches, 38, striker, random.Random(1))

        assert stats.goals == sum(m.goals for m in matches)
        assert stats.left_foot_goals + stats.right_foot_goals + stats.headed_goals == stats.goals
        assert stats.goals_inside_box + stats.goals_outside_box == stats.goals
        assert stats.set_piece_goals + stats.open_play_goals == stats.goals
        assert sum(
            getattr(stats, f"goals_{bucket}")
            for bucket in ("0_15", "15_30", "30_45", "45_60", "60_75", "75_90")
        ) == stats.goals
        assert stats.preferred_foot_goals + stats.weak_foot_goals == stats.left_foot_goals + stats.right_foot_goals

    def test_rates_derived_from_totals(self, aggregator, engine, striker):
        """Percentages come from season totals, not averaged match percentages."""
        matches = _season(engine, striker, seed=3)
        stats = aggregator.aggregate(matches, 38, striker, random.Random(1))

        assert stats.goal_conversion == pct(stats.goals, stats.shots)
        assert stats.pass_completion == pct(stats.passes_completed, stats.passes)
        assert stats.duel_success == pct(stats.duels_won, stats.duels)
        assert stats.minutes_played == 38 * 90
        assert stats.goals_per_90 == per_90(stats.goals, stats.minutes_played)
        assert stats.wins + stats.draws + stats.losses == 38

    def test_pass_type_breakdown(self, aggregator, engine, player_factory):
        """Pass types are summed from matches and their accuracies derived from totals."""
        winger = player_factory(Position.RW, overall=84)
        matches = _season(engine, winger, seed=8)
        stats = aggregator.aggregate(matches, 38, winger, random.Random(1))

        assert stats.crosses == sum(m.crosses for m in matches) > 0
        assert stats.long_balls == sum(m.long_balls for m in matches)
        assert stats.through_balls == sum(m.through_balls for m in matches)
        assert stats.cross_accuracy == pct(stats.crosses_accurate, stats.crosses)
        assert stats.long_ball_accuracy == pct(stats.long_balls_accurate, stats.long_balls)
        assert stats.through_ball_accuracy == pct(stats.through_balls_accurate, stats.through_balls)
        assert stats.forward_pass_pct == pct(stats.forward_passes, stats.passes)
        assert stats.crosses + stats.long_balls + stats.through_balls <= stats.passes
        assert stats.expected_assists == round(sum(m.expected_assists for m in matches), 2)
        assert stats.big_chances_created <= stats.key_passes

    def test_shot_locations_cover_all_shots(self, aggregator, engine, striker):
        """Every season shot is counted inside or outside the box."""
        matches = _season(engine, striker, seed=5)
        stats = aggregator.aggregate(matches, 38, striker, random.Random(1))

        assert stats.shots_inside_box + stats.shots_outside_box == stats.shots
        assert stats.shots_outside_box >= stats.goals_outside_box
        assert stats.big_chances_missed <= stats.shots - stats.goals

    def test_goalless_season(self, aggregator, engine, striker):
        """Thirty goalless matches produce zeros, never NaN."""
        matches = _season(engine, striker, n=30, forced=ForcedResult(goals=0))
        stats = aggregator.aggregate(matches, 30, striker, random.Random(1))

        assert stats.goals == 0
        assert stats.goal_conversion == 0.0
        assert stats.goals_inside_box + stats.goals_outside_box == 0
        assert stats.minutes_per_goal == 0.0
        for f in fields(stats):
            value = getattr(stats, f.name)
            if isinstance(value, float):
                assert not math.isnan(value), f.name

    def test_empty_season(self, aggregator, striker):
        """No matches yields an all-zero season."""
        stats = aggregator.aggregate([], 38, striker, random.Random(1))
        assert stats.matches_played == 0
        assert stats.total_matches == 38
        assert stats.average_rating == 0.0
        assert stats.appearance_rate == 0.0

    def test_missing_breakdowns_are_reconciled(self, aggregator, player_factory):
        """Goals without attribution are spread using fallbacks."""
        player = player_factory(Position.ST)
        matches = [MatchSimulation(goals=3, shots=4, shots_on_target=3, team_score=3)]
        stats = aggregator.aggregate(matches, 1, player, random.Random(1))

        assert stats.right_foot_goals == 3
        assert stats.goals_inside_box == 3
        assert stats.open_play_goals == 3
        assert stats.goals_0_15 + stats.goals_15_30 + stats.goals_30_45 + stats.goals_45_60 \
            + stats.goals_60_75 + stats.goals_75_90 == 3
        assert stats.hat_tricks == 1

    def test_appearance_rate(self, aggregator, engine, striker):
        """Appearance rate compares matches played with fixtures."""
        matches = _season(engine, striker, n=19)
        stats = aggregator.aggregate(matches, 38, striker, random.Random(1))
        assert stats.appearance_rate == 50.0

    def test_fresh_instance_each_season(self, aggregator, engine, striker):
        """Aggregating twice gives equal, independent results."""
        matches = _season(engine, striker, n=10)
        first = aggregator.aggregate(matches, 10, striker, random.Random(5))
        second = aggregator.aggregate(matches, 10, striker, random.Random(5))
        assert first == second
        assert first is not second

    def test_to_dict(self, aggregator, engine, striker):
        """Season stats export as a plain dict."""
        stats = aggregator.aggregate(_season(engine, striker, n=5), 5, striker, random.Random(1))
        data = stats.to_dict()
        assert data["goals"] == stats.goals
        assert data["player_name"] == "Elite Striker"

    def test_none_player(self, aggregator):
        """A missing player is a programming error."""
        with pytest.raises(ValueError):
            aggregator.aggregate([], 0, None, random.Random(1))


class TestAwards:
    """Tests for team-of-the-week and man-of-the-match counting."""

    def test_outstanding_matches_always_count(self, aggregator, striker):
        """Ratings of 9+ and hat-tricks always make the team of the week."""
        matches = [MatchSimulation(goals=3, shots=5, shots_on_target=4, rating=9.5, team_score=3)] * 20
        totw, motm = aggregator.count_awards(matches, striker, random.Random(1))
        assert totw == 20
        assert motm == 20

    def test_poor_matches_never_count(self, aggregator, striker):
        """Low ratings never earn awards."""
        matches = [MatchSimulation(rating=5.0, team_score=0, opponent_score=2)] * 20
        assert aggregator.count_awards(matches, striker, random.Random(1)) == (0, 0)

    def test_perceived_rating_bonuses(self, aggregator, striker, goalkeeper):
        """Braces and keeper clean sheets with many saves stand out to voters."""
        brace = MatchSimulation(goals=2, rating=7.0)
        assert aggregator.perceived_rating(brace, striker) == pytest.approx(7.3)
        keeper = MatchSimulation(rating=7.0, saves=5, goals_conceded=0, clean_sheet=True)
        assert aggregator.perceived_rating(keeper, goalkeeper) == pytest.approx(7.5)


class TestGoalkeeping:
    """Tests for the goalkeeper season branch."""

    def test_real_match_data(self, aggregator, engine, goalkeeper):
        """Per-match keeper data is summed when present."""
        matches = _season(engine, goalkeeper, seed=4)
        stats = aggregator.aggregate(matches, 38, goalkeeper, random.Random(1))

        assert stats.goalkeeping_source == "match"
        assert stats.saves == sum(m.saves for m in matches)
        assert stats.clean_sheets == sum(1 for m in matches if m.clean_sheet)
        assert stats.shots_faced == stats.saves + stats.goals_conceded
        assert 0.0 <= stats.save_percentage <= 100.0

    def test_heuristic_without_match_data(self, aggregator, goalkeeper):
        """Keepers with no save data get a season estimate."""
        matches = [MatchSimulation(rating=6.5, team_score=1, opponent_score=1)] * 30
        stats = aggregator.aggregate(matches, 30, goalkeeper, random.Random(2))

        assert stats.goalkeeping_source == "heuristic"
        assert 0 <= stats.clean_sheets <= 30
        assert stats.saves >= 30 * 2
        assert 0.0 < stats.save_percentage < 100.0
        assert stats.penalties_saved == 0

    def test_outfielders_have_no_keeper_stats(self, aggregator, engine, striker):
        """Outfield players report no goalkeeping."""
        stats = aggregator.aggregate(_season(engine, striker, n=5), 5, striker, random.Random(1))
        assert stats.goalkeeping_source == "none"
        assert stats.saves == 0
        assert stats.save_percentage == 0.0
