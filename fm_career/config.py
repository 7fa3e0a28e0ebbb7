"""Balance configuration for FM Career.

Position-keyed rate tables, multipliers and trait tables are loaded from
YAML into validated, read-only pydantic models. The default file ships in
``fm_career/data/balance.yaml``; a local override is merged on top.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from fm_career.core.exceptions import ConfigError
from fm_career.core.models.player import Position, TraitTier

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "data" / "balance.yaml"
LOCAL_CONFIG_PATH = Path(__file__).parent / "data" / "balance.local.yaml"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class Threshold(_Frozen):
    """``value`` applies when the input is at least ``min``."""
    min: float
    value: float


class Ceiling(_Frozen):
    """``value`` applies when the input is below ``max``."""
    max: float
    value: float


def pick_threshold(table: list[Threshold], x: float, default: float = 1.0) -> float:
    """First entry in a descending table whose minimum is met."""
    for entry in table:
        if x >= entry.min:
            return entry.value
    return default


def pick_ceiling(table: list[Ceiling], x: float, default: float = 0.0) -> float:
    for entry in table:
        if x < entry.max:
            return entry.value
    return default


class EventRange(_Frozen):
    range: tuple[int, int]
    chance: float = 1.0


class PositionBalance(_Frozen):
    """Per-position rates, hard caps and ancillary ranges."""
    expected_goals: float
    expected_assists: float
    shots: float
    key_passes: float
    max_goals: int
    max_assists: int
    max_shots: int
    max_key_passes: int
    passes: tuple[int, int]
    duels: tuple[int, int]
    dribbles: tuple[int, int]
    crosses: tuple[int, int]
    long_balls: tuple[int, int]
    tackles: EventRange
    interceptions: EventRange
    clearances: EventRange
    blocks: EventRange
    heading_multiplier: float = 1.0
    set_piece_weight: float = 1.0
    outside_box_multiplier: float = 1.0


class OverallCurve(_Frozen):
    minimum: float
    maximum: float
    steepness: float
    midpoint: float


class EliteBand(_Frozen):
    min_overall: float
    base: float
    per_point: float
    floor: float
    ceiling: float


class FinishingFactor(_Frozen):
    divisor: float
    minimum: float
    maximum: float
    sweet_spot: tuple[float, float]
    sweet_spot_bonus: float


class PassingFactor(_Frozen):
    vision_weight: float
    through_ball_weight: float
    divisor: float
    minimum: float
    maximum: float


class TeamMultipliers(_Frozen):
    goals: list[Threshold]
    assists: list[Threshold]


class ExpectedCaps(_Frozen):
    goals: list[Threshold]
    assists: list[Threshold]


class FormConfig(_Frozen):
    goals_divisor: float
    goals_range: tuple[float, float]
    assists_divisor: float
    assists_range: tuple[float, float]


class HomeFactor(_Frozen):
    goals: float
    assists: float


class TierBoost(_Frozen):
    weak: float
    second: float
    mid: float


class LeagueTierConfig(_Frozen):
    elite_tier: int
    elite_reputation: float
    elite_goals: float
    elite_assists: float
    scoring_positions: list[Position]
    creative_positions: list[Position]
    goals_scorer: TierBoost
    goals_other: TierBoost
    assists_creative: TierBoost
    assists_other: TierBoost


class DefensiveTacticRule(_Frozen):
    min_quality: float
    importance: list[str] = Field(default_factory=list)
    value: float


class FatigueConfig(_Frozen):
    max_reduction: float
    floor: float


class VarianceBands(_Frozen):
    goals: tuple[float, float]
    assists: tuple[float, float]
    shots: tuple[float, float]
    key_passes: tuple[float, float]


class StyleModifier(_Frozen):
    goals: float = 1.0
    assists: float = 1.0


class SamplingConfig(_Frozen):
    bernoulli_threshold: float
    max_goal_walk: int
    max_shot_walk: int
    shots_per_goal: float
    composure_rescue_min: float
    composure_rescue_chance: float
    min_key_pass_rate: float
    vision_bonus_min: float
    vision_bonus_chance: float


class PassingConfig(_Frozen):
    volume_variance: float
    accuracy_variance: float
    accuracy_range: tuple[float, float]
    forward_share: tuple[float, float]
    cross_accuracy_divisor: float
    cross_accuracy_range: tuple[float, float]
    long_ball_accuracy_scale: float
    long_ball_accuracy_range: tuple[float, float]
    through_ball_share: float
    through_ball_accuracy_divisor: float
    through_ball_accuracy_range: tuple[float, float]
    big_chance_share: float
    xa_per_key_pass: float
    xa_per_big_chance: float


class ShotProfileConfig(_Frozen):
    """Where shots come from and how many clear chances go begging."""
    outside_box_share: float
    outside_box_range: tuple[float, float]
    big_chance_miss_rate: float


class DribblingConfig(_Frozen):
    volume_variance: float
    success_variance: float
    success_range: tuple[float, float]
    control_weight: float


class DuelConfig(_Frozen):
    ground_share: float
    reference_weight: float
    reference_height: float
    advantage_divisor: float
    ground_bonus: list[Threshold]
    ground_range: tuple[float, float]
    aerial_bonus: list[Threshold]
    aerial_range: tuple[float, float]
    tackle_success_range: tuple[float, float]


class GoalkeeperDiscipline(_Frozen):
    foul_chance: float
    fouled_chance: float
    yellow_chance: float
    direct_red_chance: float


class DisciplineConfig(_Frozen):
    fouls_committed: tuple[int, int]
    fouls_suffered: tuple[int, int]
    offsides: tuple[int, int]
    offside_positions: list[Position]
    yellow_risk: list[Ceiling]
    direct_red_risk: list[Ceiling]
    second_yellow_chance: float
    goalkeeper: GoalkeeperDiscipline


class GoalkeepingHeuristic(_Frozen):
    """Season-level estimate used when matches carry no keeper data."""
    base_clean_sheet_rate: float
    ability_weight: float
    reputation_reference: float
    reputation_divisor: float
    clean_sheet_range: tuple[float, float]
    clean_sheet_variance: tuple[float, float]
    base_conceded: float
    reputation_slope: float
    top_tier_adjustment: float
    lower_tier_adjustment: float
    ability_reduction: float
    conceded_range: tuple[float, float]
    conceded_variance: tuple[float, float]
    shots_on_target_per_game: float
    min_shots_on_target_per_game: int


class GoalkeepingConfig(_Frozen):
    base_save_pct: float
    save_pct_spread: float
    save_pct_range: tuple[float, float]
    save_variance: tuple[float, float]
    max_saves: int
    clean_sheet_saves_strong: tuple[int, int]
    clean_sheet_saves: tuple[int, int]
    strong_opposition: float
    penalty_save_chance: float
    heuristic: GoalkeepingHeuristic


class TeamResultConfig(_Frozen):
    base_goals: float
    opponent_base_goals: float
    strength_scale: float
    home_bonus: float
    max_goals: int


class SetPieceSplit(_Frozen):
    penalty: float
    free_kick: float
    corner: float


class LocationSplit(_Frozen):
    inside: float
    outside: float
    penalty_spot: float


class MinutePeriod(_Frozen):
    start: int
    end: int
    weight: float


class XGTable(_Frozen):
    penalty: float
    inside_foot: float
    inside_header: float
    outside: float
    free_kick: float
    missed_shot: float = 0.09


class GoalConfig(_Frozen):
    set_piece_probability: float
    set_piece_split: SetPieceSplit
    corner_header_chance: float
    location: LocationSplit
    free_kick_outside_chance: float
    preferred_foot_weight: float
    weak_foot_base: float
    weak_foot_step: float
    header_scale: float
    height_reference: float
    height_step: float
    height_range: tuple[float, float]
    golazo_inside: float
    golazo_outside: float
    golazo_flair_reference: float
    spectacular_shots: list[str]
    special_shot_base: dict[str, float]
    trait_frequency: dict[TraitTier, float]
    special_shot_traits: dict[str, list[str]]
    minute_periods: list[MinutePeriod]
    fatigue_minute_damping: float
    xg: XGTable
    special_shot_xg: dict[str, float]
    trait_xg_bonus: dict[TraitTier, float]

    @model_validator(mode="after")
    def _check_split(self) -> "GoalConfig":
        split = self.set_piece_split
        total = split.penalty + split.free_kick + split.corner
        if abs(total - 1.0) > 0.01:
            raise ValueError(f"set_piece_split must sum to 1.0, got {total:.3f}")
        return self


class AgeBand(_Frozen):
    max_age: int
    value: float


class CapabilityConfig(_Frozen):
    neutral_default: float
    tier_multipliers: dict[TraitTier, float]
    trait_overrides: dict[str, dict[TraitTier, float]] = Field(default_factory=dict)
    capability_traits: dict[str, list[str]] = Field(default_factory=dict)
    age_decay: list[AgeBand]
    age_decay_floor: float
    reference_height: float
    reference_weight: float
    height_weight_step: float
    foot_weight_range: tuple[float, float]

    def trait_multiplier(self, trait_name: str, tier: TraitTier) -> float:
        table = self.trait_overrides.get(trait_name, self.tier_multipliers)
        return table.get(tier, 1.0)

    def age_multiplier(self, age: int) -> float:
        for band in self.age_decay:
            if age <= band.max_age:
                return band.value
        return self.age_decay_floor


class AwardsConfig(_Frozen):
    totw_base: tuple[float, float]
    totw_noise: float
    totw_range: tuple[float, float]
    totw_auto_rating: float
    motm_mean: float
    motm_sigma: float
    motm_range: tuple[float, float]
    motm_loss_penalty: float
    motm_win_discount: float
    league_difficulty: dict[int, float]
    position_adjustment: dict[Position, float]
    bonus_game_winner: float
    bonus_brace: float
    bonus_hat_trick: float
    bonus_clean_sheet_saves: float
    clean_sheet_saves_min: int


class TierQuality(_Frozen):
    offset: float
    sigma: float


class Roll(_Frozen):
    below: float
    value: str


class TacticBand(_Frozen):
    min: float
    tactics: list[str]


class ContextConfig(_Frozen):
    tier_quality: dict[int, TierQuality]
    quality_range: tuple[float, float]
    importance_rolls: list[Roll]
    default_importance: str
    weather_rolls: list[Roll]
    default_weather: str
    momentum_sigma: float
    pre_match_fatigue: tuple[float, float]
    fatigue_per_period: tuple[float, float]
    tactic_bands: list[TacticBand]


class BalanceConfig(_Frozen):
    """Versioned, read-only balance tables."""
    version: str
    positions: dict[Position, PositionBalance]
    overall_curve: OverallCurve
    elite_bonus: list[EliteBand]
    finishing_factor: FinishingFactor
    passing_factor: PassingFactor
    key_pass_vision_divisor: float
    team_multipliers: TeamMultipliers
    opposition_factors: list[Threshold]
    expected_caps: ExpectedCaps
    form: FormConfig
    home_factor: HomeFactor
    league_tier: LeagueTierConfig
    defensive_tactic: list[DefensiveTacticRule]
    fatigue: FatigueConfig
    variance: VarianceBands
    style_modifiers: dict[str, StyleModifier] = Field(default_factory=dict)
    style_outside_box: dict[str, float] = Field(default_factory=dict)
    sampling: SamplingConfig
    shots_on_target: list[Threshold]
    shot_profile: ShotProfileConfig
    passing: PassingConfig
    dribbling: DribblingConfig
    duels: DuelConfig
    discipline: DisciplineConfig
    goalkeeping: GoalkeepingConfig
    team_result: TeamResultConfig
    goals: GoalConfig
    capabilities: CapabilityConfig
    awards: AwardsConfig
    context: ContextConfig

    @model_validator(mode="after")
    def _check_positions(self) -> "BalanceConfig":
        missing = [p.value for p in Position if p not in self.positions]
        if missing:
            raise ValueError(f"positions table is missing {', '.join(missing)}")
        return self

    def position(self, position: Position) -> PositionBalance:
        return self.positions[position]

    def style(self, name: Optional[str]) -> StyleModifier:
        if not name:
            return StyleModifier()
        return self.style_modifiers.get(name, StyleModifier())


def load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML mapping from disk."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read balance file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Balance file {path} must contain a mapping")
    return data


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class ConfigManager:
    """Load balance tables from the default file plus an optional override."""

    def __init__(self, config_path: Optional[Path] = None, override_path: Optional[Path] = None):
        self.config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        self.override_path = Path(override_path) if override_path else LOCAL_CONFIG_PATH
        self._config: Optional[BalanceConfig] = None

    def load(self) -> BalanceConfig:
        """Load, merge and validate the configuration."""
        data = load_yaml(self.config_path)
        if self.override_path.exists():
            logger.info("Merging balance overrides from %s", self.override_path)
            data = deep_merge(data, load_yaml(self.override_path))
        self._config = self.from_dict(data)
        logger.debug("Loaded balance config version %s", self._config.version)
        return self._config

    @staticmethod
    def from_dict(data: dict[str, Any]) -> BalanceConfig:
        try:
            return BalanceConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid balance configuration: {e}") from e

    @property
    def config(self) -> BalanceConfig:
        if self._config is None:
            self.load()
        return self._config


@lru_cache
def get_balance_config(path: Optional[str] = None) -> BalanceConfig:
    """Get the cached balance configuration."""
    return ConfigManager(Path(path) if path else None).load()
