"""Tests for goal attribution."""

import random

import pytest

from fm_career.core.models.match import (
    BodyPart,
    GoalLocation,
    MatchSituation,
    SetPieceType,
    SpecialShot,
)
from fm_career.core.models.player import Foot, Position, Trait, TraitTier
from fm_career.engine.goal_simulator import GoalSimulator


@pytest.fixture
def simulator(config):
    return GoalSimulator(config)


class TestGoalAttribution:
    """Tests for per-goal attribution."""

    @pytest.mark.parametrize("goals", [0, 1, 2, 3, 4])
    def test_families_sum_to_goal_count(self, simulator, striker, goals):
        """Every breakdown family sums to the requested goal count."""
        rng = random.Random(goals)
        for _ in range(50):
            detail = simulator.simulate_goals(
                striker, goals, 6, MatchSituation(team_score=goals, opponent_score=1), rng
            )
            assert detail.total == goals
            assert detail.left_foot + detail.right_foot + detail.headers == goals
            assert detail.inside_box + detail.outside_box == goals
            assert detail.penalties + detail.free_kicks + detail.corners + detail.open_play == goals
            assert sum(detail.minute_buckets().values()) == goals
            assert goals <= detail.shots_on_target <= detail.shots

    def test_shots_raised_to_goals(self, simulator, striker, rng):
        """Fewer shots than goals is corrected."""
        detail = simulator.simulate_goals(striker, 3, 1, MatchSituation(team_score=3), rng)
        assert detail.shots >= 3
        assert detail.shots_on_target >= 3

    def test_minutes_sorted_and_in_range(self, simulator, striker, rng):
        """Goal minutes are chronological and within regulation plus stoppage time."""
        for _ in range(100):
            detail = simulator.simulate_goals(striker, 4, 8, MatchSituation(team_score=4), rng)
            minutes = [record.minute for record in detail.records]
            assert minutes == sorted(minutes)
            assert all(1 <= minute <= 95 for minute in minutes)

    def test_penalties_are_strong_foot_inside_box(self, simulator, player_factory, rng):
        """Penalties are struck with the preferred foot from inside the box."""
        player = player_factory(preferred_foot=Foot.LEFT)
        seen = 0
        for _ in range(300):
            detail = simulator.simulate_goals(player, 3, 6, MatchSituation(team_score=3), rng)
            for record in detail.records:
                if record.set_piece is SetPieceType.PENALTY:
                    seen += 1
                    assert record.body_part is BodyPart.LEFT_FOOT
                    assert record.location is GoalLocation.INSIDE_BOX
        assert seen > 0

    def test_headers_never_special_or_outside(self, simulator, player_factory, rng):
        """Headed goals are inside the box and carry no special shot."""
        player = player_factory(Position.CB, heading=90, jumping=90)
        for _ in range(300):
            detail = simulator.simulate_goals(player, 1, 2, MatchSituation(team_score=1), rng)
            for record in detail.records:
                if record.body_part is BodyPart.HEADER:
                    assert record.location is GoalLocation.INSIDE_BOX
                    assert record.special_shot is None

    def test_spectacular_shots_are_golazos(self, simulator, striker, rng):
        """Chips, trivelas, volleys, bicycles and rabonas always count as golazos."""
        spectacular = {SpecialShot.CHIP, SpecialShot.TRIVELA, SpecialShot.VOLLEY,
                       SpecialShot.BICYCLE, SpecialShot.RABONA}
        for _ in range(500):
            detail = simulator.simulate_goals(striker, 2, 5, MatchSituation(team_score=2), rng)
            for record in detail.records:
                if record.special_shot in spectacular:
                    assert record.is_golazo

    def test_xg_bounds(self, simulator, striker, rng):
        """Per-goal xG is a probability."""
        detail = simulator.simulate_goals(striker, 4, 8, MatchSituation(team_score=4), rng)
        assert all(0.0 < record.xg < 1.0 for record in detail.records)


class TestDecisiveGoals:
    """Tests for game-winner and equalizer flags."""

    def test_at_most_one_of_each(self, simulator, striker, rng):
        """A match has at most one game-winner and one equalizer."""
        for _ in range(300):
            detail = simulator.simulate_goals(
                striker, 3, 6, MatchSituation(team_score=4, opponent_score=2), rng
            )
            assert detail.game_winners <= 1
            assert detail.equalizers <= 1

    def test_no_winner_without_a_win(self, simulator, striker, rng):
        """Draws and defeats have no game-winner."""
        for _ in range(200):
            drawn = simulator.simulate_goals(striker, 2, 4, MatchSituation(team_score=2, opponent_score=2), rng)
            lost = simulator.simulate_goals(striker, 1, 4, MatchSituation(team_score=1, opponent_score=3), rng)
            assert drawn.game_winners == 0
            assert lost.game_winners == 0

    def test_only_team_goal_in_one_nil_wins(self, simulator, striker, rng):
        """The only goal of a 1-0 is the game-winner and never an equalizer."""
        for _ in range(100):
            detail = simulator.simulate_goals(striker, 1, 3, MatchSituation(team_score=1, opponent_score=0), rng)
            assert detail.game_winners == 1
            assert detail.equalizers == 0

    def test_only_goal_in_one_all_is_equalizer(self, simulator, striker, rng):
        """When the player scores the only goal of a 1-1 after the opponent, it levels the match."""
        equalizers = 0
        for _ in range(200):
            detail = simulator.simulate_goals(striker, 1, 3, MatchSituation(team_score=1, opponent_score=1), rng)
            equalizers += detail.equalizers
        # The player's goal levels the score whenever it comes second
        assert 40 < equalizers < 160


class TestTraitEffects:
    """Statistical tests for trait-driven finishes."""

    def _golazo_share(self, simulator, player, samples=4000):
        rng = random.Random(7)
        golazos = 0
        for _ in range(samples // 2):
            detail = simulator.simulate_goals(player, 2, 4, MatchSituation(team_score=2), rng)
            golazos += detail.golazos
        return golazos / samples

    def test_diamond_poacher_scores_more_golazos(self, simulator, player_factory):
        """A Diamond Poacher volleys more often, raising the golazo share."""
        plain = player_factory(overall=85)
        poacher = player_factory(overall=85)
        poacher.stats.traits = [Trait("Poacher", TraitTier.DIAMOND)]

        assert self._golazo_share(simulator, poacher) > self._golazo_share(simulator, plain)

    def test_preferred_foot_dominates(self, simulator, player_factory):
        """Most foot goals come from the preferred foot."""
        player = player_factory(preferred_foot=Foot.LEFT, weak_foot=2)
        rng = random.Random(3)
        left = right = 0
        for _ in range(1000):
            detail = simulator.simulate_goals(player, 2, 4, MatchSituation(team_score=2), rng)
            left += detail.left_foot
            right += detail.right_foot
        assert left > right

    def test_fatigue_pushes_goals_earlier(self, simulator, striker):
        """A player tiring through the match scores a smaller share late on."""

        def late_share(timeline):
            rng = random.Random(17)
            minutes = []
            for _ in range(1500):
                situation = MatchSituation(team_score=2, fatigue_timeline=timeline)
                detail = simulator.simulate_goals(striker, 2, 4, situation, rng)
                minutes.extend(record.minute for record in detail.records)
            return sum(1 for minute in minutes if minute > 60) / len(minutes)

        fresh = late_share((0, 0, 0, 0, 0, 0, 0))
        exhausted = late_share((0, 20, 40, 60, 80, 100, 100))
        assert exhausted < fresh - 0.05
