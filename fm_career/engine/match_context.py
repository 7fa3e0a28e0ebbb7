"""Match context generation.

Builds the situational modifiers for a fixture from the player's team and
a random source: opposition strength and tactic, fixture importance,
weather, momentum and a fatigue timeline.
"""

import logging
from typing import Optional

from fm_career.config import BalanceConfig, Roll
from fm_career.core.models.match import MatchContext, MatchImportance, OppositionTactic, Weather
from fm_career.core.models.player import Team
from fm_career.engine.random_source import RandomSource, clamp, clamped_gauss

logger = logging.getLogger(__name__)

# 0, 15, ..., 90
FATIGUE_CHECKPOINTS = 7


class MatchContextGenerator:
    """Generate ``MatchContext`` values for a team's fixtures."""

    def __init__(self, config: BalanceConfig):
        self.config = config
        self.context_config = config.context

    def generate(self, team: Team, rng: RandomSource, is_home: Optional[bool] = None) -> MatchContext:
        if team is None:
            raise ValueError("generate() requires a team")

        quality = self.opposition_quality(team, rng)
        tactic = self.opposition_tactic(quality, rng)
        importance = MatchImportance(
            self._roll(rng, self.context_config.importance_rolls, self.context_config.default_importance)
        )
        weather = Weather(
            self._roll(rng, self.context_config.weather_rolls, self.context_config.default_weather)
        )
        if is_home is None:
            is_home = rng.random() < 0.5
        momentum = rng.gauss(0.0, self.context_config.momentum_sigma)
        timeline = self.fatigue_timeline(rng)

        context = MatchContext(
            opposition_quality=quality,
            opposition_tactic=tactic,
            home_advantage=is_home,
            importance=importance,
            weather=weather,
            fatigue=timeline[0],
            team_momentum=momentum,
            fatigue_timeline=timeline,
        )
        logger.debug(
            "Context for %s: opposition %.1f (%s), %s, %s, %s",
            team.name, quality, tactic.value, "home" if is_home else "away",
            importance.value, weather.value,
        )
        return context

    def opposition_quality(self, team: Team, rng: RandomSource) -> float:
        """Opposition strength drawn around the team's reputation for its tier."""
        tiers = self.context_config.tier_quality
        tier = team.league_tier if team.league_tier in tiers else max(tiers)
        params = tiers[tier]
        low, high = self.context_config.quality_range
        return clamped_gauss(rng, team.reputation + params.offset, params.sigma, low, high)

    def opposition_tactic(self, quality: float, rng: RandomSource) -> OppositionTactic:
        for band in self.context_config.tactic_bands:
            if quality >= band.min:
                choice = band.tactics[rng.randint(0, len(band.tactics) - 1)]
                return OppositionTactic(choice)
        return OppositionTactic.BALANCED

    def fatigue_timeline(self, rng: RandomSource) -> tuple[float, ...]:
        """Fatigue at each 15-minute checkpoint, starting from the pre-match level."""
        level = rng.uniform(*self.context_config.pre_match_fatigue)
        timeline = [level]
        for _ in range(FATIGUE_CHECKPOINTS - 1):
            level = clamp(level + rng.uniform(*self.context_config.fatigue_per_period), 0.0, 100.0)
            timeline.append(level)
        return tuple(timeline)

    @staticmethod
    def _roll(rng: RandomSource, rolls: list[Roll], default: str) -> str:
        roll = rng.random()
        for entry in rolls:
            if roll < entry.below:
                return entry.value
        return default
