"""Match simulation engine.

Turns a player, a match context and a random source into one
``MatchSimulation``. Expected rates are built from the balance tables and
the player's capability matrix, sampled, filled out with the ancillary
event families (passing, duels, discipline, goalkeeping), validated
against the per-position hard caps and finally rated.
"""

import logging
import math
from dataclasses import dataclass, replace
from typing import Optional

from fm_career.config import (
    BalanceConfig,
    EventRange,
    PositionBalance,
    TierBoost,
    pick_ceiling,
    pick_threshold,
)
from fm_career.core.models.match import (
    ForcedResult,
    GoalDetail,
    MatchContext,
    MatchSimulation,
    MatchSituation,
)
from fm_career.core.models.player import Player, Position
from fm_career.engine.attribute_resolver import AttributeResolver
from fm_career.engine.capability_analyzer import CapabilityAnalyzer, CapabilityMatrix
from fm_career.engine.goal_simulator import GoalSimulator
from fm_career.engine.match_rating import MatchRatingCalculator
from fm_career.engine.random_source import (
    RandomSource,
    binomial,
    chance,
    clamp,
    poisson_sample,
    sample_count,
)

logger = logging.getLogger(__name__)

KEY_PASS_WALK = 10
ASSIST_WALK = 4
ASSISTS_PER_KEY_PASS = 0.35
THROUGH_BALL_WALK = 6


@dataclass(frozen=True)
class ExpectedRates:
    """Per-match means before match variance and sampling."""
    goals: float
    assists: float
    shots: float
    key_passes: float


class MatchSimulationEngine:
    """Simulate a single player's match.

    Stateless between calls; every random draw comes from the ``rng``
    passed to ``simulate_match``.
    """

    def __init__(
        self,
        config: BalanceConfig,
        analyzer: Optional[CapabilityAnalyzer] = None,
        goal_simulator: Optional[GoalSimulator] = None,
        rating: Optional[type[MatchRatingCalculator]] = None,
    ):
        self.config = config
        self.analyzer = analyzer or CapabilityAnalyzer(config)
        self.goal_simulator = goal_simulator or GoalSimulator(config, self.analyzer)
        self.rating = rating or MatchRatingCalculator

    def simulate_match(
        self,
        player: Player,
        context: MatchContext,
        rng: RandomSource,
        forced_result: Optional[ForcedResult] = None,
    ) -> MatchSimulation:
        """
        Simulate one match.

        Args:
            player: The player being simulated
            context: Fixture modifiers
            rng: Random source
            forced_result: Outcome to honor (goals, assists, rating, score)

        Returns:
            Validated and rated MatchSimulation
        """
        if player is None:
            raise ValueError("simulate_match() requires a player")
        if context is None:
            raise ValueError("simulate_match() requires a match context")

        forced = forced_result or ForcedResult()
        balance = self.config.position(player.position)
        caps = self.analyzer.analyze(player)
        rates = self.expected_rates(player, caps, context)

        # === Goals and shots ===
        variance = self.config.variance
        expected_goals = self._cap_expected(
            rates.goals * rng.uniform(*variance.goals), self.config.expected_caps.goals, caps.overall
        )
        if forced.goals is not None:
            goals = self._forced_count(forced.goals, balance.max_goals, "goals", player)
        else:
            goals = self._sample_goals(expected_goals, caps, rng)
            goals = min(goals, balance.max_goals)

        expected_shots = rates.shots * rng.uniform(*variance.shots)
        shots = self._sample_shots(expected_shots, goals, rng)
        shots_on_target = self._sample_shots_on_target(shots, goals, caps, rng)

        # === Creativity ===
        assist_rate = self._cap_expected(
            rates.assists * rng.uniform(*variance.assists), self.config.expected_caps.assists, caps.overall
        )
        key_passes = self._sample_key_passes(
            rates.key_passes * rng.uniform(*variance.key_passes), caps, rng
        )
        if forced.assists is not None:
            assists = self._forced_count(forced.assists, balance.max_assists, "assists", player)
            key_passes = max(key_passes, assists)
        else:
            assists = self._sample_assists(assist_rate, key_passes, rng)

        # === Team result ===
        team_score, opponent_score, goals_conceded = self._team_result(
            player, context, goals, assists, forced, rng
        )

        detail = self.goal_simulator.simulate_goals(
            player,
            goals,
            shots,
            MatchSituation(
                is_home=context.home_advantage,
                importance=context.importance,
                team_score=team_score,
                opponent_score=opponent_score,
                fatigue_timeline=context.fatigue_timeline,
            ),
            rng,
            capabilities=caps,
            shots_on_target=shots_on_target,
        )

        simulation = MatchSimulation(
            goals=goals,
            assists=assists,
            shots=detail.shots,
            shots_on_target=detail.shots_on_target,
            key_passes=key_passes,
            expected_goals=self.match_xg(detail, detail.shots, goals),
            team_score=team_score,
            opponent_score=opponent_score,
            goals_conceded=goals_conceded,
            clean_sheet=goals_conceded == 0,
            goal_detail=detail,
        )
        simulation = self._simulate_shot_profile(simulation, balance, caps, rng)
        simulation = self._simulate_passing(simulation, balance, caps, rng)
        simulation = self._simulate_dribbling(simulation, balance, caps, rng)
        simulation = self._simulate_duels(simulation, player, balance, caps, rng)
        simulation = self._simulate_defensive_actions(simulation, balance, caps, rng)
        simulation = self._simulate_discipline(simulation, player, caps, rng)
        if player.position.is_goalkeeper:
            simulation = self._simulate_goalkeeping(simulation, caps, context, rng)

        simulation = self.validate(simulation, player.position)

        if forced.rating is not None:
            rating = self.rating.clamp(forced.rating)
        else:
            rating = self.rating.calculate(simulation, player.position)
        simulation = replace(simulation, rating=rating)

        logger.debug(
            "%s vs %.0f: %d-%d, %d goals, %d assists, %d shots, rating %.1f",
            player.name, context.opposition_quality, team_score, opponent_score,
            simulation.goals, simulation.assists, simulation.shots, simulation.rating,
        )
        return simulation

    # ==================== Expected values ====================

    def expected_rates(self, player: Player, caps: CapabilityMatrix, context: MatchContext) -> ExpectedRates:
        """Per-match expected goals, assists, shots and key passes before variance."""
        cfg = self.config
        balance = cfg.position(player.position)
        team = player.team
        style = cfg.style(player.playing_style)

        overall_factor = self.overall_factor(caps.overall)
        opposition = pick_threshold(cfg.opposition_factors, team.reputation - context.opposition_quality)
        tactic = self.defensive_tactic_modifier(context)
        fatigue = self.fatigue_impact(context.fatigue, caps.physical.stamina)

        goals = (
            balance.expected_goals
            * overall_factor
            * self.finishing_factor(caps.attacking.finishing_power)
            * pick_threshold(cfg.team_multipliers.goals, team.reputation)
            * opposition
            * clamp(1 + player.form / cfg.form.goals_divisor, *cfg.form.goals_range)
            * (cfg.home_factor.goals if context.home_advantage else 1.0)
            * self.league_tier_factor(player, scoring=True)
            * tactic
            * style.goals
            * fatigue
        )
        assists = (
            balance.expected_assists
            * overall_factor
            * self.passing_factor(caps.passing.vision, caps.passing.through_balls)
            * pick_threshold(cfg.team_multipliers.assists, team.reputation)
            * opposition
            * clamp(1 + player.form / cfg.form.assists_divisor, *cfg.form.assists_range)
            * (cfg.home_factor.assists if context.home_advantage else 1.0)
            * self.league_tier_factor(player, scoring=False)
            * tactic
            * style.assists
            * fatigue
        )
        shots = balance.shots * opposition
        key_passes = balance.key_passes * (caps.passing.vision / cfg.key_pass_vision_divisor) * opposition

        return ExpectedRates(
            goals=max(0.0, goals),
            assists=max(0.0, assists),
            shots=max(0.0, shots),
            key_passes=max(0.0, key_passes),
        )

    def overall_factor(self, overall: float) -> float:
        """Logistic curve over overall rating, with a stepped bonus for elite players."""
        curve = self.config.overall_curve
        factor = curve.minimum + (curve.maximum - curve.minimum) / (
            1 + math.exp(-curve.steepness * (overall - curve.midpoint))
        )
        factor = clamp(factor, curve.minimum, curve.maximum)
        for band in self.config.elite_bonus:
            if overall >= band.min_overall:
                bonus = band.base + (overall - band.min_overall) * band.per_point
                factor *= 1 + clamp(bonus, band.floor, band.ceiling)
                break
        return factor

    def finishing_factor(self, finishing: float) -> float:
        ff = self.config.finishing_factor
        factor = clamp(finishing / ff.divisor, ff.minimum, ff.maximum)
        low, high = ff.sweet_spot
        if low <= finishing <= high:
            factor *= ff.sweet_spot_bonus
        return factor

    def passing_factor(self, vision: float, through_balls: float) -> float:
        pf = self.config.passing_factor
        combined = vision * pf.vision_weight + through_balls * pf.through_ball_weight
        return clamp(combined / pf.divisor, pf.minimum, pf.maximum)

    def league_tier_factor(self, player: Player, scoring: bool) -> float:
        """Production boost in weaker leagues, slight damping for elite clubs in the top tier."""
        lt = self.config.league_tier
        tier = player.team.league_tier
        reputation = player.team.reputation
        if tier == lt.elite_tier and reputation >= lt.elite_reputation:
            return lt.elite_goals if scoring else lt.elite_assists

        if scoring:
            boost: TierBoost = lt.goals_scorer if player.position in lt.scoring_positions else lt.goals_other
        else:
            boost = lt.assists_creative if player.position in lt.creative_positions else lt.assists_other

        if tier >= 3 or reputation < 60:
            return boost.weak
        if tier == 2 or reputation < 70:
            return boost.second
        if reputation < 75:
            return boost.mid
        return 1.0

    def defensive_tactic_modifier(self, context: MatchContext) -> float:
        """Strong opponents suppress chances, more so in high-stakes fixtures."""
        for rule in self.config.defensive_tactic:
            if context.opposition_quality < rule.min_quality:
                continue
            if not rule.importance or context.importance.value in rule.importance:
                return rule.value
        return 1.0

    def fatigue_impact(self, fatigue: float, stamina: float) -> float:
        """Performance multiplier for accumulated fatigue; stamina attenuates it."""
        if fatigue <= 0:
            return 1.0
        cfg = self.config.fatigue
        attenuation = 0.5 + stamina / 200
        effective = (fatigue / 100) * (1 - attenuation * 0.5)
        return clamp(1.0 - effective * cfg.max_reduction, cfg.floor, 1.0)

    @staticmethod
    def _cap_expected(expected: float, caps_table, overall: float) -> float:
        return clamp(expected, 0.0, pick_threshold(caps_table, overall, default=0.0))

    # ==================== Sampling ====================

    def _sample_goals(self, expected: float, caps: CapabilityMatrix, rng: RandomSource) -> int:
        sampling = self.config.sampling
        goals = sample_count(rng, expected, sampling.max_goal_walk, sampling.bernoulli_threshold)
        if (
            goals == 0
            and caps.mental.composure >= sampling.composure_rescue_min
            and chance(rng, sampling.composure_rescue_chance)
        ):
            goals = 1
        return goals

    def _sample_shots(self, expected: float, goals: int, rng: RandomSource) -> int:
        sampling = self.config.sampling
        lam = max(expected, goals * sampling.shots_per_goal)
        return max(poisson_sample(rng, lam, sampling.max_shot_walk), goals)

    def _sample_shots_on_target(self, shots: int, goals: int, caps: CapabilityMatrix, rng: RandomSource) -> int:
        rate = pick_threshold(self.config.shots_on_target, caps.attacking.finishing_power, default=0.35)
        return min(shots, max(binomial(rng, shots, rate), goals))

    def _sample_key_passes(self, expected: float, caps: CapabilityMatrix, rng: RandomSource) -> int:
        sampling = self.config.sampling
        key_passes = poisson_sample(rng, max(sampling.min_key_pass_rate, expected), KEY_PASS_WALK)
        if caps.passing.vision >= sampling.vision_bonus_min and chance(rng, sampling.vision_bonus_chance):
            key_passes += 1
        return key_passes

    def _sample_assists(self, expected: float, key_passes: int, rng: RandomSource) -> int:
        lam = min(expected, key_passes * ASSISTS_PER_KEY_PASS)
        assists = sample_count(rng, lam, ASSIST_WALK, self.config.sampling.bernoulli_threshold)
        return min(assists, key_passes)

    @staticmethod
    def _forced_count(value: int, cap: int, label: str, player: Player) -> int:
        value = max(0, int(value))
        if value > cap:
            logger.warning(
                "Forced %s %d for %s exceeds the %s cap of %d, clamping",
                label, value, player.name, player.position.value, cap,
            )
            return cap
        return value

    def _team_result(
        self,
        player: Player,
        context: MatchContext,
        goals: int,
        assists: int,
        forced: ForcedResult,
        rng: RandomSource,
    ) -> tuple[int, int, int]:
        """Team score, opponent score and goals conceded, honoring forced values.

        The team score is at least the player's goals plus assists, since
        every assist sets up a teammate's goal.
        """
        tr = self.config.team_result
        gap = player.team.reputation - context.opposition_quality
        home = tr.home_bonus if context.home_advantage else 0.0
        away = 0.0 if context.home_advantage else tr.home_bonus
        team_lambda = max(0.2, tr.base_goals + gap * tr.strength_scale + home)
        opponent_lambda = max(0.2, tr.opponent_base_goals - gap * tr.strength_scale + away)

        if forced.team_score is not None:
            team_score = max(0, int(forced.team_score))
        else:
            team_score = poisson_sample(rng, team_lambda, tr.max_goals)
        involvements = goals + assists
        if team_score < involvements:
            if forced.team_score is not None:
                logger.warning(
                    "Forced team score %d is below %s's %d goals and %d assists, raising it",
                    team_score, player.name, goals, assists,
                )
            team_score = involvements

        if forced.opponent_score is not None:
            opponent_score = max(0, int(forced.opponent_score))
        elif forced.goals_conceded is not None:
            opponent_score = max(0, int(forced.goals_conceded))
        else:
            opponent_score = poisson_sample(rng, opponent_lambda, tr.max_goals)

        if forced.goals_conceded is not None:
            goals_conceded = max(0, int(forced.goals_conceded))
        else:
            goals_conceded = opponent_score
        return team_score, opponent_score, goals_conceded

    def match_xg(self, detail: Optional[GoalDetail], shots: int, goals: int) -> float:
        """Per-goal xG plus a flat value for every shot that did not score."""
        scored = detail.xg if detail is not None else 0.0
        return round(scored + max(0, shots - goals) * self.config.goals.xg.missed_shot, 2)

    # ==================== Ancillary events ====================

    def _simulate_shot_profile(
        self, sim: MatchSimulation, balance: PositionBalance, caps: CapabilityMatrix, rng: RandomSource
    ) -> MatchSimulation:
        """Split shots by location and count the clear chances that went begging."""
        cfg = self.config.shot_profile
        detail = sim.goal_detail or GoalDetail()
        missed = sim.shots - sim.goals
        outside_share = clamp(
            cfg.outside_box_share * balance.outside_box_multiplier * caps.attacking.long_shot_threat / 70,
            *cfg.outside_box_range,
        )
        missed_outside = binomial(rng, missed, outside_share)
        shots_outside = detail.outside_box + missed_outside
        return replace(
            sim,
            shots_inside_box=sim.shots - shots_outside,
            shots_outside_box=shots_outside,
            big_chances_missed=binomial(rng, missed - missed_outside, cfg.big_chance_miss_rate),
        )

    def _simulate_passing(
        self, sim: MatchSimulation, balance: PositionBalance, caps: CapabilityMatrix, rng: RandomSource
    ) -> MatchSimulation:
        cfg = self.config.passing
        vision = caps.passing.vision

        crosses = rng.randint(*balance.crosses)
        cross_accuracy = clamp(caps.passing.crossing / cfg.cross_accuracy_divisor, *cfg.cross_accuracy_range)
        long_balls = rng.randint(*balance.long_balls)
        long_ball_accuracy = clamp(
            (caps.passing.short_passing + vision) / 200 * cfg.long_ball_accuracy_scale,
            *cfg.long_ball_accuracy_range,
        )
        through_rate = sim.key_passes * cfg.through_ball_share * caps.passing.through_balls / 70
        through_balls = poisson_sample(rng, through_rate, THROUGH_BALL_WALK)
        through_accuracy = clamp(
            caps.passing.through_balls / cfg.through_ball_accuracy_divisor, *cfg.through_ball_accuracy_range
        )

        # Crosses, long balls and through balls are part of the pass volume
        volume = rng.randint(*balance.passes) * rng.uniform(1 - cfg.volume_variance, 1 + cfg.volume_variance)
        passes = max(round(volume), crosses + long_balls + through_balls, 0)
        accuracy = clamp(
            caps.passing.short_passing / 100 + rng.uniform(-cfg.accuracy_variance, cfg.accuracy_variance),
            *cfg.accuracy_range,
        )
        low, high = cfg.forward_share

        big_chances = binomial(rng, sim.key_passes, cfg.big_chance_share)
        expected_assists = sim.key_passes * cfg.xa_per_key_pass + big_chances * cfg.xa_per_big_chance
        return replace(
            sim,
            passes=passes,
            passes_completed=binomial(rng, passes, accuracy),
            forward_passes=binomial(rng, passes, low + (high - low) * vision / 100),
            crosses=crosses,
            crosses_accurate=binomial(rng, crosses, cross_accuracy),
            long_balls=long_balls,
            long_balls_accurate=binomial(rng, long_balls, long_ball_accuracy),
            through_balls=through_balls,
            through_balls_accurate=binomial(rng, through_balls, through_accuracy),
            big_chances_created=big_chances,
            expected_assists=round(expected_assists, 2),
        )

    def _simulate_dribbling(
        self, sim: MatchSimulation, balance: PositionBalance, caps: CapabilityMatrix, rng: RandomSource
    ) -> MatchSimulation:
        cfg = self.config.dribbling
        volume = rng.randint(*balance.dribbles) * rng.uniform(1 - cfg.volume_variance, 1 + cfg.volume_variance)
        dribbles = max(0, round(volume))
        skill = (
            cfg.control_weight * caps.technical.dribbling
            + (1 - cfg.control_weight) * caps.technical.speed_dribbling
        ) / 100
        success = clamp(skill + rng.uniform(-cfg.success_variance, cfg.success_variance), *cfg.success_range)
        return replace(sim, dribbles=dribbles, dribbles_succeeded=binomial(rng, dribbles, success))

    def _simulate_duels(
        self,
        sim: MatchSimulation,
        player: Player,
        balance: PositionBalance,
        caps: CapabilityMatrix,
        rng: RandomSource,
    ) -> MatchSimulation:
        cfg = self.config.duels
        resolver = AttributeResolver(player.stats, self.config.capabilities.neutral_default)
        weight = resolver.weight() or cfg.reference_weight
        height = resolver.height() or cfg.reference_height

        physical_power = (caps.physical.strength + caps.physical.agility) / 2
        ground_rate = 0.5 + (weight - cfg.reference_weight) / cfg.advantage_divisor / 100
        ground_rate += pick_threshold(cfg.ground_bonus, physical_power, default=0.0)
        ground_rate = clamp(ground_rate, *cfg.ground_range)

        aerial_rate = 0.5 + (height - cfg.reference_height) / cfg.advantage_divisor / 100
        aerial_rate += pick_threshold(cfg.aerial_bonus, caps.defensive.aerial_dominance, default=0.0)
        aerial_rate = clamp(aerial_rate, *cfg.aerial_range)

        duels = rng.randint(*balance.duels)
        ground = math.floor(duels * cfg.ground_share)
        aerial = duels - ground
        ground_won = binomial(rng, ground, ground_rate)
        aerial_won = binomial(rng, aerial, aerial_rate)
        return replace(
            sim,
            duels=duels,
            duels_won=ground_won + aerial_won,
            ground_duels=ground,
            ground_duels_won=ground_won,
            aerial_duels=aerial,
            aerial_duels_won=aerial_won,
        )

    def _simulate_defensive_actions(
        self, sim: MatchSimulation, balance: PositionBalance, caps: CapabilityMatrix, rng: RandomSource
    ) -> MatchSimulation:
        tackles = self._event_count(balance.tackles, rng)
        success = clamp(caps.defensive.tackling / 100, *self.config.duels.tackle_success_range)
        return replace(
            sim,
            tackles=tackles,
            tackles_won=binomial(rng, tackles, success),
            interceptions=self._event_count(balance.interceptions, rng),
            clearances=self._event_count(balance.clearances, rng),
            blocks=self._event_count(balance.blocks, rng),
        )

    @staticmethod
    def _event_count(event: EventRange, rng: RandomSource) -> int:
        if event.chance < 1.0 and not chance(rng, event.chance):
            return 0
        return rng.randint(*event.range)

    def _simulate_discipline(
        self, sim: MatchSimulation, player: Player, caps: CapabilityMatrix, rng: RandomSource
    ) -> MatchSimulation:
        cfg = self.config.discipline

        # Goalkeepers rarely foul and are never offside
        if player.position.is_goalkeeper:
            gk = cfg.goalkeeper
            yellow = chance(rng, gk.yellow_chance)
            if yellow:
                red = chance(rng, cfg.second_yellow_chance)
            else:
                red = chance(rng, gk.direct_red_chance)
            return replace(
                sim,
                fouls_committed=1 if chance(rng, gk.foul_chance) else 0,
                fouls_suffered=1 if chance(rng, gk.fouled_chance) else 0,
                offsides=0,
                yellow_cards=int(yellow),
                red_cards=int(red),
            )

        fouls_committed = rng.randint(*cfg.fouls_committed)
        fouls_suffered = rng.randint(*cfg.fouls_suffered)
        offsides = rng.randint(*cfg.offsides) if player.position in cfg.offside_positions else 0

        control = caps.mental.aggression_control
        yellow = chance(rng, pick_ceiling(cfg.yellow_risk, control))
        if yellow:
            red = chance(rng, cfg.second_yellow_chance)
        else:
            red = chance(rng, pick_ceiling(cfg.direct_red_risk, control))
        return replace(
            sim,
            fouls_committed=fouls_committed,
            fouls_suffered=fouls_suffered,
            offsides=offsides,
            yellow_cards=int(yellow),
            red_cards=int(red),
        )

    def _simulate_goalkeeping(
        self, sim: MatchSimulation, caps: CapabilityMatrix, context: MatchContext, rng: RandomSource
    ) -> MatchSimulation:
        cfg = self.config.goalkeeping
        save_pct = clamp(
            cfg.base_save_pct + (caps.keeper_ability - 50) / 50 * cfg.save_pct_spread,
            *cfg.save_pct_range,
        )
        if sim.goals_conceded == 0:
            strong = context.opposition_quality > cfg.strong_opposition
            saves = rng.randint(*(cfg.clean_sheet_saves_strong if strong else cfg.clean_sheet_saves))
        else:
            expected = sim.goals_conceded * save_pct / (1 - save_pct)
            saves = max(1, round(expected * rng.uniform(*cfg.save_variance)))
        penalties_saved = 1 if chance(rng, cfg.penalty_save_chance) else 0
        saves = min(max(saves, penalties_saved), cfg.max_saves)
        return replace(sim, saves=saves, penalties_saved=penalties_saved)

    # ==================== Validation ====================

    def validate(self, sim: MatchSimulation, position: Position) -> MatchSimulation:
        """Enforce count relationships and per-position hard caps.

        Deterministic and idempotent: validating a validated simulation
        returns an equal value.
        """
        balance = self.config.position(position)

        def nonneg(value: int) -> int:
            return max(0, int(value))

        goals = min(nonneg(sim.goals), balance.max_goals)
        shots = min(max(nonneg(sim.shots), nonneg(sim.shots_on_target), goals), balance.max_shots)
        shots = max(shots, goals)
        shots_on_target = int(clamp(nonneg(sim.shots_on_target), goals, shots))

        assists = min(nonneg(sim.assists), balance.max_assists)
        key_passes = min(max(nonneg(sim.key_passes), assists), balance.max_key_passes)

        crosses = nonneg(sim.crosses)
        long_balls = nonneg(sim.long_balls)
        through_balls = nonneg(sim.through_balls)
        passes = max(nonneg(sim.passes), crosses + long_balls + through_balls)
        dribbles = nonneg(sim.dribbles)
        tackles = nonneg(sim.tackles)
        ground = nonneg(sim.ground_duels)
        aerial = nonneg(sim.aerial_duels)
        ground_won = min(nonneg(sim.ground_duels_won), ground)
        aerial_won = min(nonneg(sim.aerial_duels_won), aerial)

        goals_conceded = nonneg(sim.goals_conceded)
        saves = None
        if sim.saves is not None:
            saves = min(nonneg(sim.saves), self.config.goalkeeping.max_saves)
        penalties_saved = nonneg(sim.penalties_saved)
        if saves is not None:
            penalties_saved = min(penalties_saved, saves)

        detail = sim.goal_detail
        if detail is not None:
            records = detail.records[:goals]
            detail = replace(detail, records=records, shots=shots, shots_on_target=shots_on_target)

        # Scored shots keep their recorded location
        goals_inside = detail.inside_box if detail is not None else 0
        goals_outside = detail.outside_box if detail is not None else 0
        shots_outside = int(clamp(nonneg(sim.shots_outside_box), goals_outside, shots - goals_inside))
        if detail is not None:
            expected_goals = self.match_xg(detail, shots, goals)
        else:
            expected_goals = max(0.0, sim.expected_goals)

        return replace(
            sim,
            goals=goals,
            assists=assists,
            shots=shots,
            shots_on_target=shots_on_target,
            key_passes=key_passes,
            expected_goals=expected_goals,
            shots_inside_box=shots - shots_outside,
            shots_outside_box=shots_outside,
            big_chances_missed=min(nonneg(sim.big_chances_missed), shots - goals),
            passes=passes,
            passes_completed=min(nonneg(sim.passes_completed), passes),
            forward_passes=min(nonneg(sim.forward_passes), passes),
            crosses=crosses,
            crosses_accurate=min(nonneg(sim.crosses_accurate), crosses),
            long_balls=long_balls,
            long_balls_accurate=min(nonneg(sim.long_balls_accurate), long_balls),
            through_balls=through_balls,
            through_balls_accurate=min(nonneg(sim.through_balls_accurate), through_balls),
            big_chances_created=min(nonneg(sim.big_chances_created), key_passes),
            expected_assists=max(0.0, sim.expected_assists),
            dribbles=dribbles,
            dribbles_succeeded=min(nonneg(sim.dribbles_succeeded), dribbles),
            tackles=tackles,
            tackles_won=min(nonneg(sim.tackles_won), tackles),
            duels=ground + aerial,
            duels_won=ground_won + aerial_won,
            ground_duels=ground,
            ground_duels_won=ground_won,
            aerial_duels=aerial,
            aerial_duels_won=aerial_won,
            interceptions=nonneg(sim.interceptions),
            clearances=nonneg(sim.clearances),
            blocks=nonneg(sim.blocks),
            fouls_committed=nonneg(sim.fouls_committed),
            fouls_suffered=nonneg(sim.fouls_suffered),
            offsides=nonneg(sim.offsides),
            yellow_cards=min(nonneg(sim.yellow_cards), 2),
            red_cards=min(nonneg(sim.red_cards), 1),
            minutes_played=int(clamp(nonneg(sim.minutes_played), 0, 120)),
            rating=self.rating.clamp(sim.rating),
            team_score=max(nonneg(sim.team_score), goals + assists),
            opponent_score=nonneg(sim.opponent_score),
            goals_conceded=goals_conceded,
            clean_sheet=goals_conceded == 0,
            saves=saves,
            penalties_saved=penalties_saved,
            goal_detail=detail,
        )
