"""Capability analysis.

Turns a player's raw (and optional expanded) attributes plus active traits
into a normalized 0-100 capability matrix consumed by the match formulas.
"""

import logging
from dataclasses import dataclass

from fm_career.config import BalanceConfig, CapabilityConfig
from fm_career.core.models.player import Foot, Player
from fm_career.engine.attribute_resolver import AttributeResolver
from fm_career.engine.random_source import clamp

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttackingCapabilities:
    finishing_power: float
    long_shot_threat: float
    heading_threat: float
    composure_in_box: float
    off_ball_movement: float
    weak_foot_factor: float


@dataclass(frozen=True)
class PassingCapabilities:
    short_passing: float
    vision: float
    crossing: float
    through_balls: float
    set_piece_delivery: float


@dataclass(frozen=True)
class DefensiveCapabilities:
    tackling: float
    interception: float
    marking: float
    aerial_dominance: float
    blocking: float
    positioning: float


@dataclass(frozen=True)
class PhysicalCapabilities:
    speed: float
    acceleration: float
    stamina: float
    agility: float
    jumping: float
    strength: float


@dataclass(frozen=True)
class MentalCapabilities:
    composure: float
    decisions: float
    leadership: float
    big_match: float
    consistency: float
    aggression_control: float


@dataclass(frozen=True)
class TechnicalCapabilities:
    dribbling: float
    speed_dribbling: float
    ball_control: float
    flair: float
    skill_moves: float
    first_touch: float


@dataclass(frozen=True)
class GoalkeepingCapabilities:
    shot_stopping: float
    reflexes: float
    diving: float
    handling: float
    positioning: float
    command_of_area: float
    distribution: float


@dataclass(frozen=True)
class CapabilityMatrix:
    """Normalized capability scores for one player, fixed for a match."""
    attacking: AttackingCapabilities
    passing: PassingCapabilities
    defensive: DefensiveCapabilities
    physical: PhysicalCapabilities
    mental: MentalCapabilities
    technical: TechnicalCapabilities
    goalkeeping: GoalkeepingCapabilities
    overall: float

    @property
    def keeper_ability(self) -> float:
        """Composite shot-stopping score used for save and clean-sheet rates."""
        gk = self.goalkeeping
        return (gk.reflexes + gk.diving + gk.positioning) / 3


# Weighted blends per capability. Weights are normalized at use, so each
# row only needs the right proportions.
CAPABILITY_WEIGHTS: dict[str, list[tuple[str, float]]] = {
    "attacking.finishing_power": [
        ("foot_finishing", 0.55), ("composure", 0.25), ("shot_power", 0.12), ("positioning", 0.08),
    ],
    "attacking.long_shot_threat": [("long_shots", 0.55), ("shot_power", 0.30), ("curve", 0.15)],
    "attacking.heading_threat": [("heading", 0.60), ("jumping", 0.25), ("strength", 0.15)],
    "attacking.composure_in_box": [("composure", 0.50), ("finishing", 0.30), ("decisions", 0.20)],
    "attacking.off_ball_movement": [("off_the_ball", 0.60), ("anticipation", 0.25), ("acceleration", 0.15)],

    "passing.short_passing": [("short_passing", 0.70), ("first_touch", 0.15), ("decisions", 0.15)],
    "passing.vision": [("vision", 0.65), ("decisions", 0.20), ("anticipation", 0.15)],
    "passing.crossing": [("crossing", 0.75), ("curve", 0.25)],
    "passing.through_balls": [("through_balls", 0.50), ("vision", 0.35), ("short_passing", 0.15)],
    "passing.set_piece_delivery": [("free_kicks", 0.50), ("corners", 0.30), ("curve", 0.20)],

    "defensive.tackling": [("tackling", 0.70), ("strength", 0.15), ("anticipation", 0.15)],
    "defensive.interception": [("interception", 0.60), ("anticipation", 0.25), ("defensive_positioning", 0.15)],
    "defensive.marking": [("marking", 0.60), ("concentration", 0.20), ("strength", 0.20)],
    "defensive.aerial_dominance": [("aerial_defending", 0.45), ("jumping", 0.35), ("strength", 0.20)],
    "defensive.blocking": [("shot_blocking", 0.60), ("defensive_positioning", 0.25), ("concentration", 0.15)],
    "defensive.positioning": [("defensive_positioning", 0.60), ("anticipation", 0.25), ("concentration", 0.15)],

    "physical.speed": [("speed", 0.80), ("acceleration", 0.20)],
    "physical.acceleration": [("acceleration", 0.80), ("agility", 0.20)],
    "physical.stamina": [("stamina", 0.75), ("natural_fitness", 0.25)],
    "physical.agility": [("agility", 0.70), ("balance", 0.30)],
    "physical.jumping": [("jumping", 0.85), ("strength", 0.15)],
    "physical.strength": [("strength", 0.80), ("balance", 0.20)],

    "mental.composure": [("composure", 0.70), ("concentration", 0.30)],
    "mental.decisions": [("decisions", 0.60), ("anticipation", 0.25), ("concentration", 0.15)],
    "mental.leadership": [("leadership", 0.80), ("composure", 0.20)],
    "mental.big_match": [("big_match", 0.70), ("composure", 0.30)],
    "mental.consistency": [("consistency", 0.70), ("concentration", 0.30)],
    "mental.aggression_control": [("calmness", 0.60), ("composure", 0.40)],

    "technical.dribbling": [("dribbling", 0.60), ("ball_control", 0.25), ("agility", 0.15)],
    "technical.speed_dribbling": [("speed_dribbling", 0.60), ("speed", 0.25), ("ball_control", 0.15)],
    "technical.ball_control": [("ball_control", 0.70), ("first_touch", 0.30)],
    "technical.flair": [("flair", 0.80), ("skill_moves", 0.20)],
    "technical.skill_moves": [("skill_moves", 0.70), ("flair", 0.15), ("agility", 0.15)],
    "technical.first_touch": [("first_touch", 0.70), ("composure", 0.30)],

    "goalkeeping.shot_stopping": [("reflexes", 0.40), ("diving", 0.35), ("gk_positioning", 0.25)],
    "goalkeeping.reflexes": [("reflexes", 0.80), ("concentration", 0.20)],
    "goalkeeping.diving": [("diving", 0.80), ("agility", 0.20)],
    "goalkeeping.handling": [("handling", 0.80), ("concentration", 0.20)],
    "goalkeeping.positioning": [("gk_positioning", 0.70), ("anticipation", 0.30)],
    "goalkeeping.command_of_area": [("command_of_area", 0.60), ("jumping", 0.20), ("leadership", 0.20)],
    "goalkeeping.distribution": [("distribution", 0.70), ("vision", 0.30)],
}

# Physical capabilities that lose value with age (strength holds up)
AGE_SENSITIVE = {"physical.speed", "physical.acceleration", "physical.stamina",
                 "physical.agility", "physical.jumping"}


class CapabilityAnalyzer:
    """Derive a capability matrix from a player's attributes and traits.

    Pure and deterministic: the same player always yields the same matrix.
    Missing attributes resolve to the configured neutral default instead of
    raising.
    """

    def __init__(self, config: BalanceConfig):
        self.config = config
        self.cap_config: CapabilityConfig = config.capabilities

    def analyze(self, player: Player) -> CapabilityMatrix:
        if player is None:
            raise ValueError("analyze() requires a player")

        resolver = AttributeResolver(player.stats, self.cap_config.neutral_default)
        inputs = self._collect_inputs(resolver)
        age_factor = self.cap_config.age_multiplier(player.age)

        scores: dict[str, float] = {}
        for key, weights in CAPABILITY_WEIGHTS.items():
            value = self._blend(inputs, weights)
            if key in AGE_SENSITIVE:
                value *= age_factor
            scores[key] = value

        scores["attacking.weak_foot_factor"] = 20.0 + (resolver.weak_foot().value - 1) * 20.0
        self._apply_body_profile(scores, resolver)

        for key in scores:
            scores[key] = clamp(self._apply_traits(key, scores[key], player), 0.0, 100.0)

        logger.debug(
            "Capabilities for %s: finishing %.1f, vision %.1f, keeper %.1f",
            player.name,
            scores["attacking.finishing_power"],
            scores["passing.vision"],
            scores["goalkeeping.shot_stopping"],
        )
        return CapabilityMatrix(
            attacking=AttackingCapabilities(**self._group(scores, "attacking")),
            passing=PassingCapabilities(**self._group(scores, "passing")),
            defensive=DefensiveCapabilities(**self._group(scores, "defensive")),
            physical=PhysicalCapabilities(**self._group(scores, "physical")),
            mental=MentalCapabilities(**self._group(scores, "mental")),
            technical=TechnicalCapabilities(**self._group(scores, "technical")),
            goalkeeping=GoalkeepingCapabilities(**self._group(scores, "goalkeeping")),
            overall=resolver.overall().value,
        )

    def overall_rating(self, player: Player) -> float:
        return AttributeResolver(player.stats, self.cap_config.neutral_default).overall().value

    def keeper_ability(self, player: Player) -> float:
        return self.analyze(player).keeper_ability

    def _collect_inputs(self, resolver: AttributeResolver) -> dict[str, float]:
        names = {name for weights in CAPABILITY_WEIGHTS.values() for name, _ in weights}
        names -= {"foot_finishing", "calmness"}
        inputs = {name: resolver.value(name) for name in names}
        inputs["foot_finishing"] = self.effective_foot_finishing(resolver)
        inputs["calmness"] = 100.0 - resolver.value("temperament")
        return inputs

    def effective_foot_finishing(self, resolver: AttributeResolver) -> float:
        """Blend left and right foot finishing by preferred foot and weak-foot rating.

        Falls back to general finishing unless both foot values are known.
        """
        left = resolver.expanded_only("technical.left_foot_finishing")
        right = resolver.expanded_only("technical.right_foot_finishing")
        if left is None or right is None:
            return resolver.value("finishing")

        foot = resolver.preferred_foot().value
        if foot is Foot.BOTH:
            return (left + right) / 2
        low, high = self.cap_config.foot_weight_range
        weak_foot = resolver.weak_foot().value
        preferred_weight = high - (high - low) * (weak_foot - 1) / 4
        preferred, other = (left, right) if foot is Foot.LEFT else (right, left)
        return preferred_weight * preferred + (1 - preferred_weight) * other

    def _apply_body_profile(self, scores: dict[str, float], resolver: AttributeResolver) -> None:
        step = self.cap_config.height_weight_step
        height = resolver.height()
        if height is not None:
            shift = (height - self.cap_config.reference_height) * step
            scores["attacking.heading_threat"] += shift
            scores["defensive.aerial_dominance"] += shift
            scores["goalkeeping.command_of_area"] += shift * 0.5
        weight = resolver.weight()
        if weight is not None:
            shift = (weight - self.cap_config.reference_weight) * step * 0.5
            scores["physical.strength"] += shift
            scores["defensive.aerial_dominance"] += shift * 0.5

    def _apply_traits(self, key: str, value: float, player: Player) -> float:
        boosting = self.cap_config.capability_traits.get(key)
        if not boosting:
            return value
        for trait in player.stats.traits:
            if trait.name in boosting:
                value *= self.cap_config.trait_multiplier(trait.name, trait.tier)
        return value

    @staticmethod
    def _blend(inputs: dict[str, float], weights: list[tuple[str, float]]) -> float:
        total = sum(w for _, w in weights)
        return sum(inputs[name] * w for name, w in weights) / total

    @staticmethod
    def _group(scores: dict[str, float], group: str) -> dict[str, float]:
        prefix = group + "."
        return {key[len(prefix):]: value for key, value in scores.items() if key.startswith(prefix)}

