"""Layered attribute resolution.

Every attribute the simulation reads is resolved in one fixed order:

1. the expanded (ultra-detailed) block, when present,
2. the base skill (and its broader fallbacks),
3. a neutral default.

The result carries where the value came from so callers and tests can tell
a real reading from a fallback.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

from fm_career.core.models.player import Foot, PlayerStats

logger = logging.getLogger(__name__)

T = TypeVar("T")

NEUTRAL_DEFAULT = 70.0


class AttributeSource(Enum):
    EXPANDED = "expanded"
    BASE = "base"
    DEFAULT = "default"


@dataclass(frozen=True)
class Resolved(Generic[T]):
    """A resolved attribute value and the layer that supplied it."""
    value: T
    source: AttributeSource

    @property
    def is_default(self) -> bool:
        return self.source is AttributeSource.DEFAULT


# logical name -> (expanded paths, base skill fields), each tried in order
ATTRIBUTE_SOURCES: dict[str, tuple[tuple[str, ...], tuple[str, ...]]] = {
    # Finishing
    "finishing": (("technical.finishing_inside_box",), ("finishing", "shooting")),
    "long_shots": (("technical.long_shots", "technical.finishing_outside_box"), ("long_shots", "shooting")),
    "shot_power": (("technical.shot_power",), ("shot_power", "shooting")),
    "volleys": (("technical.volleys",), ("volleys", "finishing")),
    "heading": (("technical.heading_accuracy",), ("heading",)),
    "penalties": (("technical.penalties",), ("penalties", "finishing")),
    # Passing
    "short_passing": (("technical.short_passing",), ("short_passing", "passing")),
    "vision": (("technical.vision",), ("vision", "passing")),
    "crossing": (("technical.crossing",), ("crossing", "passing")),
    "through_balls": (("technical.through_balls",), ("vision", "passing")),
    "free_kicks": (("technical.free_kicks",), ("free_kick", "curve")),
    "corners": (("technical.corners",), ("crossing", "curve")),
    "curve": ((), ("curve",)),
    # Technique
    "first_touch": (("technical.first_touch",), ("ball_control", "dribbling")),
    "ball_control": (("technical.close_control",), ("ball_control", "dribbling")),
    "dribbling": (("technical.close_control",), ("dribbling",)),
    "speed_dribbling": (("technical.speed_dribbling",), ("dribbling", "pace")),
    "skill_moves": (("technical.skill_moves",), ("flair", "dribbling")),
    "flair": (("technical.flair",), ("flair",)),
    # Physical
    "speed": (("physical.top_speed",), ("sprint_speed", "pace")),
    "acceleration": (("physical.acceleration",), ("acceleration", "pace")),
    "stamina": (("physical.stamina",), ("stamina", "physical")),
    "agility": (("physical.agility",), ("agility",)),
    "balance": (("physical.balance",), ("balance",)),
    "jumping": (("physical.jumping",), ("jumping", "physical")),
    "strength": (("physical.strength",), ("strength", "physical")),
    "natural_fitness": (("physical.natural_fitness",), ("stamina",)),
    "work_rate": ((), ("work_rate", "stamina")),
    # Mental
    "composure": (("mental.composure",), ("composure",)),
    "positioning": (("mental.positioning",), ("positioning",)),
    "off_the_ball": (("mental.off_the_ball",), ("positioning",)),
    "anticipation": (("mental.anticipation",), ("decisions", "positioning")),
    "decisions": (("mental.decisions",), ("decisions",)),
    "concentration": (("mental.concentration",), ("concentration",)),
    "leadership": (("mental.leadership",), ("leadership",)),
    "big_match": (("mental.big_match",), ("big_matches", "composure")),
    "consistency": (("mental.consistency",), ("consistency",)),
    "temperament": (("mental.temperament",), ("aggression",)),
    # Defending
    "marking": (("defensive.marking",), ("marking", "defending")),
    "tackling": (("defensive.standing_tackle", "defensive.sliding_tackle"), ("tackling", "defending")),
    "interception": (("defensive.interception",), ("interceptions", "defending")),
    "shot_blocking": (("defensive.shot_blocking",), ("defending",)),
    "aerial_defending": (("defensive.aerial_defending",), ("heading",)),
    "defensive_positioning": (("defensive.positioning",), ("defending", "positioning")),
    # Goalkeeping
    "reflexes": (("goalkeeper.reflexes",), ("reflexes",)),
    "diving": (("goalkeeper.diving",), ("diving",)),
    "handling": (("goalkeeper.handling",), ("handling",)),
    "one_on_one": (("goalkeeper.one_on_one",), ("reflexes",)),
    "gk_positioning": (("goalkeeper.positioning",), ("gk_positioning",)),
    "command_of_area": (("goalkeeper.command_of_area",), ("handling",)),
    "distribution": (("goalkeeper.distribution",), ("kicking",)),
}


def _clean(value: Any) -> Optional[float]:
    """Return a usable 0-100 number, or None for missing or malformed input."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return max(0.0, min(100.0, number))


class AttributeResolver:
    """Resolve a player's attributes through the expanded -> base -> default chain."""

    def __init__(self, stats: PlayerStats, neutral_default: float = NEUTRAL_DEFAULT):
        self.stats = stats
        self.neutral_default = neutral_default
        self.expanded = stats.expanded

    def _expanded_value(self, path: str) -> Optional[float]:
        if self.expanded is None:
            return None
        block_name, field_name = path.split(".")
        block = getattr(self.expanded, block_name, None)
        if block is None:
            return None
        return _clean(getattr(block, field_name, None))

    def resolve(self, name: str) -> Resolved[float]:
        """Resolve a logical attribute."""
        expanded_paths, base_fields = ATTRIBUTE_SOURCES[name]
        for path in expanded_paths:
            value = self._expanded_value(path)
            if value is not None:
                return Resolved(value, AttributeSource.EXPANDED)
        for field_name in base_fields:
            value = _clean(getattr(self.stats, field_name, None))
            if value is not None:
                return Resolved(value, AttributeSource.BASE)
        logger.debug("Attribute %s missing, using neutral default %.0f", name, self.neutral_default)
        return Resolved(self.neutral_default, AttributeSource.DEFAULT)

    def value(self, name: str) -> float:
        return self.resolve(name).value

    def expanded_only(self, path: str) -> Optional[float]:
        """Read an expanded field with no fallback (e.g. foot-specific finishing)."""
        return self._expanded_value(path)

    def overall(self) -> Resolved[float]:
        value = _clean(self.stats.overall)
        if value is None:
            logger.debug("Overall missing, using neutral default %.0f", self.neutral_default)
            return Resolved(self.neutral_default, AttributeSource.DEFAULT)
        return Resolved(value, AttributeSource.BASE)

    def preferred_foot(self) -> Resolved[Foot]:
        profile = self.expanded.profile if self.expanded else None
        if profile is not None and profile.preferred_foot is not None:
            return Resolved(profile.preferred_foot, AttributeSource.EXPANDED)
        if isinstance(self.stats.preferred_foot, Foot):
            return Resolved(self.stats.preferred_foot, AttributeSource.BASE)
        return Resolved(Foot.RIGHT, AttributeSource.DEFAULT)

    def weak_foot(self) -> Resolved[int]:
        """Weak-foot rating on the 1-5 scale."""
        profile = self.expanded.profile if self.expanded else None
        if profile is not None and profile.weak_foot_level is not None:
            return Resolved(int(max(1, min(5, profile.weak_foot_level))), AttributeSource.EXPANDED)
        value = _clean(self.stats.weak_foot)
        if value is not None:
            return Resolved(int(max(1, min(5, value))), AttributeSource.BASE)
        return Resolved(3, AttributeSource.DEFAULT)

    def height(self) -> Optional[float]:
        profile = self.expanded.profile if self.expanded else None
        if profile is None or profile.height is None:
            return None
        return float(profile.height)

    def weight(self) -> Optional[float]:
        profile = self.expanded.profile if self.expanded else None
        if profile is None or profile.weight is None:
            return None
        return float(profile.weight)
