"""Tests for attribute resolution and capability analysis."""

import pytest

from fm_career.core.models.player import (
    ExpandedAttributes,
    ExpandedTechnical,
    Foot,
    PhysicalProfile,
    Player,
    PlayerStats,
    Position,
    Trait,
    TraitTier,
)
from fm_career.engine.attribute_resolver import AttributeResolver, AttributeSource
from fm_career.engine.capability_analyzer import CapabilityAnalyzer


class TestAttributeResolver:
    """Tests for expanded -> base -> default resolution."""

    def test_expanded_wins(self):
        """An expanded value overrides the base skill."""
        stats = PlayerStats(
            finishing=60,
            expanded=ExpandedAttributes(technical=ExpandedTechnical(finishing_inside_box=85)),
        )
        resolved = AttributeResolver(stats).resolve("finishing")
        assert resolved.value == 85
        assert resolved.source is AttributeSource.EXPANDED

    def test_base_fallback_chain(self):
        """Missing specific skills fall back to the broader headline skill."""
        stats = PlayerStats(shooting=77)
        resolved = AttributeResolver(stats).resolve("finishing")
        assert resolved.value == 77
        assert resolved.source is AttributeSource.BASE

    def test_neutral_default(self):
        """Nothing known resolves to the neutral default."""
        resolved = AttributeResolver(PlayerStats()).resolve("heading")
        assert resolved.value == 70
        assert resolved.is_default

    def test_malformed_values_are_ignored(self):
        """NaN and non-numeric values are treated as missing; out-of-range values clamp."""
        stats = PlayerStats(finishing=float("nan"), shooting="fast", heading=140)
        resolver = AttributeResolver(stats)
        assert resolver.resolve("finishing").is_default
        assert resolver.value("heading") == 100

    def test_weak_foot_is_clamped(self):
        """Weak-foot rating stays on the 1-5 scale."""
        stats = PlayerStats(expanded=ExpandedAttributes(profile=PhysicalProfile(weak_foot_level=9)))
        resolved = AttributeResolver(stats).weak_foot()
        assert resolved.value == 5
        assert resolved.source is AttributeSource.EXPANDED

    def test_missing_overall(self):
        """A missing overall resolves to the default."""
        assert AttributeResolver(PlayerStats(overall=None)).overall().value == 70


class TestCapabilityAnalyzer:
    """Tests for the capability matrix."""

    def test_deterministic(self, config, striker):
        """The same player always yields the same matrix."""
        analyzer = CapabilityAnalyzer(config)
        assert analyzer.analyze(striker) == analyzer.analyze(striker)

    def test_empty_player_uses_defaults(self, config):
        """A player with no skills gets neutral capabilities, not an error."""
        caps = CapabilityAnalyzer(config).analyze(Player(name="Blank", position=Position.CM))
        assert caps.attacking.finishing_power == pytest.approx(70)
        assert caps.passing.vision == pytest.approx(70)
        assert caps.overall == 70

    def test_values_are_bounded(self, config, player_factory):
        """Every capability stays within 0-100, even with stacked traits."""
        player = player_factory(overall=99, finishing=100, composure=100, vision=100)
        player.stats.traits = [
            Trait("Clinical Finisher", TraitTier.DIAMOND),
            Trait("Poacher", TraitTier.DIAMOND),
            Trait("Vision", TraitTier.DIAMOND),
        ]
        caps = CapabilityAnalyzer(config).analyze(player)
        for group in (caps.attacking, caps.passing, caps.defensive, caps.physical,
                      caps.mental, caps.technical, caps.goalkeeping):
            for value in vars(group).values():
                assert 0.0 <= value <= 100.0

    def test_none_player(self, config):
        """A missing player is a programming error."""
        with pytest.raises(ValueError):
            CapabilityAnalyzer(config).analyze(None)

    def test_trait_multiplier(self, config, player_factory):
        """A Gold Clinical Finisher boosts finishing power by its tier constant."""
        analyzer = CapabilityAnalyzer(config)
        plain = player_factory(overall=75)
        traited = player_factory(overall=75)
        traited.stats.traits = [Trait("Clinical Finisher", TraitTier.GOLD)]

        base = analyzer.analyze(plain).attacking.finishing_power
        boosted = analyzer.analyze(traited).attacking.finishing_power
        assert boosted == pytest.approx(base * 1.13)

    def test_traits_compound(self, config, player_factory):
        """Multiple traits listed for a capability multiply together."""
        analyzer = CapabilityAnalyzer(config)
        plain = player_factory(overall=70)
        traited = player_factory(overall=70)
        traited.stats.traits = [
            Trait("Clinical Finisher", TraitTier.GOLD),
            Trait("Poacher", TraitTier.GOLD),
        ]
        base = analyzer.analyze(plain).attacking.finishing_power
        boosted = analyzer.analyze(traited).attacking.finishing_power
        assert boosted == pytest.approx(base * 1.13 * 1.12)

    def test_age_decay_hits_physical_block(self, config, player_factory):
        """Veterans lose speed but keep strength."""
        analyzer = CapabilityAnalyzer(config)
        young = analyzer.analyze(player_factory(overall=80, age=25))
        veteran = analyzer.analyze(player_factory(overall=80, age=36))
        assert veteran.physical.speed == pytest.approx(young.physical.speed * 0.70)
        assert veteran.physical.strength == pytest.approx(young.physical.strength)

    def test_height_biases_heading(self, config, player_factory):
        """Tall players head the ball better than the reference height."""
        analyzer = CapabilityAnalyzer(config)
        plain = player_factory(overall=75)
        tall = player_factory(overall=75)
        tall.stats.expanded = ExpandedAttributes(profile=PhysicalProfile(height=190))
        assert analyzer.analyze(tall).attacking.heading_threat == pytest.approx(
            analyzer.analyze(plain).attacking.heading_threat + 15 * 0.6
        )

    @pytest.mark.parametrize("foot,weak_foot,expected", [
        (Foot.RIGHT, 1, 0.9 * 60 + 0.1 * 90),
        (Foot.RIGHT, 5, 0.5 * 60 + 0.5 * 90),
        (Foot.LEFT, 1, 0.9 * 90 + 0.1 * 60),
        (Foot.BOTH, 1, 75),
    ])
    def test_foot_blending(self, config, foot, weak_foot, expected):
        """Foot-specific finishing is blended by preferred foot and weak-foot rating."""
        stats = PlayerStats(
            preferred_foot=foot,
            weak_foot=weak_foot,
            expanded=ExpandedAttributes(
                technical=ExpandedTechnical(left_foot_finishing=90, right_foot_finishing=60),
            ),
        )
        analyzer = CapabilityAnalyzer(config)
        assert analyzer.effective_foot_finishing(AttributeResolver(stats)) == pytest.approx(expected)

    def test_keeper_ability(self, config, goalkeeper, player_factory):
        """Keepers with strong shot-stopping skills score higher than outfielders."""
        analyzer = CapabilityAnalyzer(config)
        outfielder = player_factory(Position.CB, overall=85)
        assert analyzer.keeper_ability(goalkeeper) > analyzer.keeper_ability(outfielder)
