"""Season statistics aggregation.

Reduces a season's ``MatchSimulation`` list into one ``ExtendedSeasonStats``
in two passes: raw counters are summed verbatim, then every percentage,
per-game and per-90 figure is derived from the totals. Goal breakdown
families are reconciled to the goal total before anything is derived.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Optional, Sequence

from fm_career.config import BalanceConfig
from fm_career.core.models.match import MINUTE_BUCKETS, MatchSimulation, SpecialShot
from fm_career.core.models.player import Foot, Player
from fm_career.core.models.season import ExtendedSeasonStats
from fm_career.engine.attribute_resolver import AttributeResolver
from fm_career.engine.capability_analyzer import CapabilityAnalyzer
from fm_career.engine.random_source import RandomSource, clamp, clamped_gauss

logger = logging.getLogger(__name__)


def safe_div(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Divide, returning ``default`` for a zero (or invalid) denominator."""
    if not denominator:
        return default
    result = numerator / denominator
    if math.isnan(result) or math.isinf(result):
        return default
    return result


def pct(numerator: float, denominator: float) -> float:
    return round(safe_div(numerator, denominator) * 100, 2)


def per_game(total: float, games: int) -> float:
    return round(safe_div(total, games), 2)


def per_90(total: float, minutes: int) -> float:
    return round(safe_div(total * 90, minutes), 2)


def largest_remainder(counts: dict[str, int], total: int, fallback: dict[str, float]) -> dict[str, int]:
    """Rescale ``counts`` so they sum to ``total`` using largest-remainder rounding.

    When every count is zero the ``fallback`` weights are used instead.
    """
    current = sum(counts.values())
    if current == total:
        return dict(counts)
    if total <= 0:
        return {key: 0 for key in counts}

    weights = {key: float(value) for key, value in counts.items()}
    if current <= 0:
        weights = {key: float(fallback.get(key, 0.0)) for key in counts}
        if sum(weights.values()) <= 0:
            weights = {key: 1.0 for key in counts}

    weight_total = sum(weights.values())
    quotas = {key: total * weight / weight_total for key, weight in weights.items()}
    result = {key: int(math.floor(quota)) for key, quota in quotas.items()}
    leftover = total - sum(result.values())
    # Ties resolve in key order so the result is deterministic
    order = sorted(counts, key=lambda key: (-(quotas[key] - result[key]), list(counts).index(key)))
    for key in order[:leftover]:
        result[key] += 1
    return result


@dataclass
class SeasonTotals:
    """Raw counters summed verbatim from a season's matches."""
    matches: int = 0
    minutes: int = 0
    goals: int = 0
    assists: int = 0
    shots: int = 0
    shots_on_target: int = 0
    key_passes: int = 0
    expected_goals: float = 0.0
    shots_inside_box: int = 0
    shots_outside_box: int = 0
    big_chances_missed: int = 0
    big_chances_created: int = 0
    expected_assists: float = 0.0
    passes: int = 0
    passes_completed: int = 0
    forward_passes: int = 0
    crosses: int = 0
    crosses_accurate: int = 0
    long_balls: int = 0
    long_balls_accurate: int = 0
    through_balls: int = 0
    through_balls_accurate: int = 0
    dribbles: int = 0
    dribbles_succeeded: int = 0
    tackles: int = 0
    tackles_won: int = 0
    duels: int = 0
    duels_won: int = 0
    ground_duels: int = 0
    ground_duels_won: int = 0
    aerial_duels: int = 0
    aerial_duels_won: int = 0
    interceptions: int = 0
    clearances: int = 0
    blocks: int = 0
    fouls_committed: int = 0
    fouls_suffered: int = 0
    offsides: int = 0
    yellow_cards: int = 0
    red_cards: int = 0
    matches_scored_in: int = 0
    braces: int = 0
    hat_tricks: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    team_goals_scored: int = 0
    team_goals_conceded: int = 0
    ratings: list[float] = field(default_factory=list)

    # Goal breakdown families
    body: dict[str, int] = field(default_factory=lambda: {"left": 0, "right": 0, "header": 0})
    location: dict[str, int] = field(default_factory=lambda: {"inside": 0, "outside": 0})
    set_piece: dict[str, int] = field(
        default_factory=lambda: {"penalty": 0, "free_kick": 0, "corner": 0, "open_play": 0}
    )
    minute_buckets: dict[str, int] = field(default_factory=lambda: {b: 0 for b in MINUTE_BUCKETS})
    special_shots: dict[SpecialShot, int] = field(default_factory=lambda: {s: 0 for s in SpecialShot})
    golazos: int = 0
    game_winners: int = 0
    equalizers: int = 0

    # Goalkeeping (real match data only)
    keeper_matches: int = 0
    saves: int = 0
    goals_conceded: int = 0
    clean_sheets: int = 0
    penalties_saved: int = 0

    def add(self, match: MatchSimulation) -> None:
        self.matches += 1
        self.minutes += match.minutes_played
        for name in (
            "goals", "assists", "shots", "shots_on_target", "key_passes", "expected_goals",
            "shots_inside_box", "shots_outside_box", "big_chances_missed", "big_chances_created",
            "expected_assists", "passes", "passes_completed", "forward_passes", "crosses",
            "crosses_accurate", "long_balls", "long_balls_accurate", "through_balls",
            "through_balls_accurate", "dribbles", "dribbles_succeeded", "tackles",
            "tackles_won", "duels", "duels_won", "ground_duels", "ground_duels_won",
            "aerial_duels", "aerial_duels_won", "interceptions", "clearances", "blocks",
            "fouls_committed", "fouls_suffered", "offsides", "yellow_cards", "red_cards",
        ):
            setattr(self, name, getattr(self, name) + getattr(match, name))

        if match.goals >= 1:
            self.matches_scored_in += 1
        if match.goals == 2:
            self.braces += 1
        if match.goals >= 3:
            self.hat_tricks += 1

        if match.won:
            self.wins += 1
        elif match.drew:
            self.draws += 1
        else:
            self.losses += 1
        self.team_goals_scored += match.team_score
        self.team_goals_conceded += match.opponent_score
        self.ratings.append(match.rating)

        detail = match.goal_detail
        if detail is not None:
            self.body["left"] += detail.left_foot
            self.body["right"] += detail.right_foot
            self.body["header"] += detail.headers
            self.location["inside"] += detail.inside_box
            self.location["outside"] += detail.outside_box
            self.set_piece["penalty"] += detail.penalties
            self.set_piece["free_kick"] += detail.free_kicks
            self.set_piece["corner"] += detail.corners
            self.set_piece["open_play"] += detail.open_play
            for bucket, count in detail.minute_buckets().items():
                self.minute_buckets[bucket] += count
            for shot, count in detail.special_shots().items():
                self.special_shots[shot] += count
            self.golazos += detail.golazos
            self.game_winners += detail.game_winners
            self.equalizers += detail.equalizers

        if match.saves is not None:
            self.keeper_matches += 1
            self.saves += match.saves
            self.goals_conceded += match.goals_conceded
            self.clean_sheets += int(match.clean_sheet)
            self.penalties_saved += match.penalties_saved


@dataclass(frozen=True)
class KeeperSeason:
    saves: int
    goals_conceded: int
    clean_sheets: int
    penalties_saved: int
    source: str


class SeasonStatsAggregator:
    """Build ``ExtendedSeasonStats`` from a season of match simulations."""

    def __init__(self, config: BalanceConfig, analyzer: Optional[CapabilityAnalyzer] = None):
        self.config = config
        self.awards = config.awards
        self.analyzer = analyzer or CapabilityAnalyzer(config)

    def aggregate(
        self,
        matches: Sequence[MatchSimulation],
        total_matches: int,
        player: Player,
        rng: RandomSource,
    ) -> ExtendedSeasonStats:
        """
        Aggregate a season.

        Args:
            matches: Simulated matches in fixture order
            total_matches: Fixtures the team played (for appearance rate)
            player: The player the matches belong to
            rng: Random source for award thresholds and keeper estimates

        Returns:
            A fresh ExtendedSeasonStats
        """
        if player is None:
            raise ValueError("aggregate() requires a player")

        # Pass 1: raw counters
        totals = SeasonTotals()
        for match in matches:
            totals.add(match)
        self.reconcile(totals, player)

        totw, motm = self.count_awards(matches, player, rng)
        keeper = self.keeper_season(totals, player, rng)

        # Pass 2: derived figures, strictly from totals
        stats = self._derive(totals, total_matches, player, totw, motm, keeper)
        logger.info(
            "Season for %s: %d apps, %d goals, %d assists, avg rating %.2f",
            player.name, stats.matches_played, stats.goals, stats.assists, stats.average_rating,
        )
        return stats

    def reconcile(self, totals: SeasonTotals, player: Player) -> None:
        """Make every goal breakdown family sum to the goal total."""
        goals = totals.goals
        foot = AttributeResolver(player.stats).preferred_foot().value
        foot_fallback = {
            "left": 1.0 if foot is Foot.LEFT else 0.0,
            "right": 0.0 if foot is Foot.LEFT else 1.0,
            "header": 0.0,
        }
        families = (
            ("body", foot_fallback),
            ("location", {"inside": 1.0}),
            ("set_piece", {"open_play": 1.0}),
            ("minute_buckets", {b: 1.0 for b in MINUTE_BUCKETS}),
        )
        for name, fallback in families:
            counts = getattr(totals, name)
            if sum(counts.values()) != goals:
                logger.debug(
                    "Reconciling %s for %s: %d counted vs %d goals",
                    name, player.name, sum(counts.values()), goals,
                )
                setattr(totals, name, largest_remainder(counts, goals, fallback))

        totals.golazos = min(totals.golazos, goals)
        totals.game_winners = min(totals.game_winners, goals)
        totals.equalizers = min(totals.equalizers, goals - totals.game_winners)
        special_total = sum(totals.special_shots.values())
        if special_total > goals:
            totals.special_shots = largest_remainder(totals.special_shots, goals, {})

    # ==================== Awards ====================

    def count_awards(
        self, matches: Sequence[MatchSimulation], player: Player, rng: RandomSource
    ) -> tuple[int, int]:
        """Team-of-the-week and man-of-the-match counts against per-match rolled bars."""
        aw = self.awards
        league = aw.league_difficulty.get(player.team.league_tier, 0.0)
        position = aw.position_adjustment.get(player.position, 0.0)

        totw = 0
        motm = 0
        for match in matches:
            weekly = clamp(rng.uniform(*aw.totw_base) + rng.gauss(0.0, aw.totw_noise), *aw.totw_range)
            threshold = weekly + league + position
            if match.rating >= threshold or match.rating >= aw.totw_auto_rating or match.goals >= 3:
                totw += 1

            bar = clamped_gauss(rng, aw.motm_mean, aw.motm_sigma, *aw.motm_range) + league + position
            if match.lost:
                bar += aw.motm_loss_penalty
            elif match.won:
                bar -= aw.motm_win_discount
            if self.perceived_rating(match, player) >= bar:
                motm += 1
        return totw, motm

    def perceived_rating(self, match: MatchSimulation, player: Player) -> float:
        """Match rating as voters see it: decisive and multi-goal games stand out."""
        aw = self.awards
        perceived = match.rating
        if match.goal_detail is not None and match.goal_detail.game_winners > 0:
            perceived += aw.bonus_game_winner
        if match.goals >= 2:
            perceived += aw.bonus_brace
        if match.goals >= 3:
            perceived += aw.bonus_hat_trick
        if (
            player.position.is_goalkeeper
            and match.goals_conceded == 0
            and (match.saves or 0) >= aw.clean_sheet_saves_min
        ):
            perceived += aw.bonus_clean_sheet_saves
        return perceived

    # ==================== Goalkeeping ====================

    def keeper_season(self, totals: SeasonTotals, player: Player, rng: RandomSource) -> KeeperSeason:
        """Real per-match keeper data when present, a season estimate otherwise."""
        if totals.keeper_matches > 0:
            return KeeperSeason(
                saves=totals.saves,
                goals_conceded=totals.goals_conceded,
                clean_sheets=totals.clean_sheets,
                penalties_saved=totals.penalties_saved,
                source="match",
            )
        if not player.position.is_goalkeeper or totals.matches == 0:
            return KeeperSeason(0, 0, 0, 0, source="none")

        h = self.config.goalkeeping.heuristic
        played = totals.matches
        ability = self.analyzer.keeper_ability(player) / 100
        reputation = player.team.reputation
        tier = player.team.league_tier

        rate = h.base_clean_sheet_rate + (ability - 0.7) * h.ability_weight
        rate += (reputation - h.reputation_reference) / h.reputation_divisor
        rate = clamp(rate, *h.clean_sheet_range)
        clean_sheets = min(played, round(played * rate * rng.uniform(*h.clean_sheet_variance)))

        per_match = h.base_conceded - (reputation - 75) * h.reputation_slope
        if tier == 1:
            per_match += h.top_tier_adjustment
        elif tier >= 3:
            per_match += h.lower_tier_adjustment
        per_match *= 1 - (ability - 0.7) * h.ability_reduction
        per_match = clamp(per_match, *h.conceded_range)
        conceded = round(played * per_match * rng.uniform(*h.conceded_variance))

        faced = max(
            conceded + round(played * h.shots_on_target_per_game * ability * rng.uniform(0.9, 1.1)),
            conceded + played * h.min_shots_on_target_per_game,
        )
        logger.debug("Estimated keeper season for %s from ability %.2f", player.name, ability)
        return KeeperSeason(
            saves=faced - conceded,
            goals_conceded=conceded,
            clean_sheets=clean_sheets,
            penalties_saved=0,
            source="heuristic",
        )

    # ==================== Derivation ====================

    def _derive(
        self,
        t: SeasonTotals,
        total_matches: int,
        player: Player,
        totw: int,
        motm: int,
        keeper: KeeperSeason,
    ) -> ExtendedSeasonStats:
        mp = t.matches
        minutes = t.minutes
        goals = t.goals
        contributions = goals + t.assists

        foot = AttributeResolver(player.stats).preferred_foot().value
        left, right = t.body["left"], t.body["right"]
        if foot is Foot.LEFT:
            preferred, weak = left, right
        elif foot is Foot.RIGHT:
            preferred, weak = right, left
        else:
            preferred, weak = max(left, right), min(left, right)

        set_pieces = t.set_piece["penalty"] + t.set_piece["free_kick"] + t.set_piece["corner"]
        specials = t.special_shots
        buckets = t.minute_buckets
        defensive_actions = t.tackles + t.interceptions + t.clearances + t.blocks
        shots_faced = keeper.saves + keeper.goals_conceded
        ratings = t.ratings

        return ExtendedSeasonStats(
            player_name=player.name,
            position=player.position.value,
            age=player.age,
            team_name=player.team.name,
            league_tier=player.team.league_tier,

            matches_played=mp,
            total_matches=max(total_matches, mp),
            appearance_rate=pct(mp, max(total_matches, mp)),
            minutes_played=minutes,
            minutes_per_game=per_game(minutes, mp),

            goals=goals,
            assists=t.assists,
            goal_contributions=contributions,
            goals_per_game=per_game(goals, mp),
            assists_per_game=per_game(t.assists, mp),
            goal_contributions_per_game=per_game(contributions, mp),
            goals_per_90=per_90(goals, minutes),
            assists_per_90=per_90(t.assists, minutes),
            goal_contributions_per_90=per_90(contributions, minutes),
            minutes_per_goal=round(safe_div(minutes, goals), 1),
            matches_scored_in=t.matches_scored_in,
            scoring_match_rate=pct(t.matches_scored_in, mp),
            braces=t.braces,
            hat_tricks=t.hat_tricks,

            shots=t.shots,
            shots_on_target=t.shots_on_target,
            shots_off_target=t.shots - t.shots_on_target,
            shots_per_game=per_game(t.shots, mp),
            shots_on_target_per_game=per_game(t.shots_on_target, mp),
            shots_per_90=per_90(t.shots, minutes),
            shot_accuracy=pct(t.shots_on_target, t.shots),
            goal_conversion=pct(goals, t.shots),
            on_target_conversion=pct(goals, t.shots_on_target),
            expected_goals=round(t.expected_goals, 2),
            expected_goals_per_game=per_game(t.expected_goals, mp),
            expected_goals_per_90=per_90(t.expected_goals, minutes),
            xg_per_shot=round(safe_div(t.expected_goals, t.shots), 3),
            goals_minus_xg=round(goals - t.expected_goals, 2),
            shots_inside_box=t.shots_inside_box,
            shots_outside_box=t.shots_outside_box,
            outside_box_shot_pct=pct(t.shots_outside_box, t.shots),
            big_chances_missed=t.big_chances_missed,

            left_foot_goals=left,
            right_foot_goals=right,
            headed_goals=t.body["header"],
            preferred_foot_goals=preferred,
            weak_foot_goals=weak,
            goals_inside_box=t.location["inside"],
            goals_outside_box=t.location["outside"],
            penalty_goals=t.set_piece["penalty"],
            free_kick_goals=t.set_piece["free_kick"],
            corner_goals=t.set_piece["corner"],
            set_piece_goals=set_pieces,
            open_play_goals=t.set_piece["open_play"],
            golazos=t.golazos,
            chip_goals=specials[SpecialShot.CHIP],
            trivela_goals=specials[SpecialShot.TRIVELA],
            finesse_goals=specials[SpecialShot.FINESSE],
            power_goals=specials[SpecialShot.POWER],
            volley_goals=specials[SpecialShot.VOLLEY],
            bicycle_goals=specials[SpecialShot.BICYCLE],
            rabona_goals=specials[SpecialShot.RABONA],
            game_winning_goals=t.game_winners,
            equalizing_goals=t.equalizers,
            goals_0_15=buckets["0-15"],
            goals_15_30=buckets["15-30"],
            goals_30_45=buckets["30-45"],
            goals_45_60=buckets["45-60"],
            goals_60_75=buckets["60-75"],
            goals_75_90=buckets["75-90"],
            left_foot_goal_pct=pct(left, goals),
            right_foot_goal_pct=pct(right, goals),
            headed_goal_pct=pct(t.body["header"], goals),
            inside_box_goal_pct=pct(t.location["inside"], goals),
            outside_box_goal_pct=pct(t.location["outside"], goals),
            set_piece_goal_pct=pct(set_pieces, goals),
            penalty_goal_pct=pct(t.set_piece["penalty"], goals),
            golazo_pct=pct(t.golazos, goals),
            decisive_goal_pct=pct(t.game_winners + t.equalizers, goals),

            key_passes=t.key_passes,
            key_passes_per_game=per_game(t.key_passes, mp),
            key_passes_per_90=per_90(t.key_passes, minutes),
            key_pass_conversion=pct(t.assists, t.key_passes),
            big_chances_created=t.big_chances_created,
            big_chances_created_per_game=per_game(t.big_chances_created, mp),
            expected_assists=round(t.expected_assists, 2),
            expected_assists_per_90=per_90(t.expected_assists, minutes),
            assists_minus_xa=round(t.assists - t.expected_assists, 2),

            passes=t.passes,
            passes_completed=t.passes_completed,
            pass_completion=pct(t.passes_completed, t.passes),
            passes_per_game=per_game(t.passes, mp),
            passes_completed_per_game=per_game(t.passes_completed, mp),
            passes_per_90=per_90(t.passes, minutes),
            forward_passes=t.forward_passes,
            forward_pass_pct=pct(t.forward_passes, t.passes),
            crosses=t.crosses,
            crosses_accurate=t.crosses_accurate,
            cross_accuracy=pct(t.crosses_accurate, t.crosses),
            long_balls=t.long_balls,
            long_balls_accurate=t.long_balls_accurate,
            long_ball_accuracy=pct(t.long_balls_accurate, t.long_balls),
            through_balls=t.through_balls,
            through_balls_accurate=t.through_balls_accurate,
            through_ball_accuracy=pct(t.through_balls_accurate, t.through_balls),

            dribbles=t.dribbles,
            dribbles_succeeded=t.dribbles_succeeded,
            dribble_success=pct(t.dribbles_succeeded, t.dribbles),
            dribbles_per_game=per_game(t.dribbles, mp),
            dribbles_succeeded_per_game=per_game(t.dribbles_succeeded, mp),

            duels=t.duels,
            duels_won=t.duels_won,
            duel_success=pct(t.duels_won, t.duels),
            duels_per_game=per_game(t.duels, mp),
            ground_duels=t.ground_duels,
            ground_duels_won=t.ground_duels_won,
            ground_duel_success=pct(t.ground_duels_won, t.ground_duels),
            aerial_duels=t.aerial_duels,
            aerial_duels_won=t.aerial_duels_won,
            aerial_duel_success=pct(t.aerial_duels_won, t.aerial_duels),

            tackles=t.tackles,
            tackles_won=t.tackles_won,
            tackle_success=pct(t.tackles_won, t.tackles),
            tackles_per_game=per_game(t.tackles, mp),
            interceptions=t.interceptions,
            interceptions_per_game=per_game(t.interceptions, mp),
            clearances=t.clearances,
            clearances_per_game=per_game(t.clearances, mp),
            blocks=t.blocks,
            blocks_per_game=per_game(t.blocks, mp),
            defensive_actions=defensive_actions,
            defensive_actions_per_game=per_game(defensive_actions, mp),

            fouls_committed=t.fouls_committed,
            fouls_suffered=t.fouls_suffered,
            fouls_per_game=per_game(t.fouls_committed, mp),
            offsides=t.offsides,
            yellow_cards=t.yellow_cards,
            red_cards=t.red_cards,
            cards_per_game=per_game(t.yellow_cards + t.red_cards, mp),

            average_rating=round(safe_div(sum(ratings), len(ratings)), 2),
            best_rating=max(ratings, default=0.0),
            worst_rating=min(ratings, default=0.0),
            ratings_above_8=sum(1 for r in ratings if r >= 8.0),
            ratings_below_6=sum(1 for r in ratings if r < 6.0),

            team_of_the_week=totw,
            man_of_the_match=motm,
            totw_rate=pct(totw, mp),
            motm_rate=pct(motm, mp),

            wins=t.wins,
            draws=t.draws,
            losses=t.losses,
            win_rate=pct(t.wins, mp),
            team_goals_scored=t.team_goals_scored,
            team_goals_conceded=t.team_goals_conceded,
            goal_share=pct(goals, t.team_goals_scored),

            saves=keeper.saves,
            shots_faced=shots_faced,
            goals_conceded=keeper.goals_conceded,
            clean_sheets=keeper.clean_sheets,
            penalties_saved=keeper.penalties_saved,
            save_percentage=pct(keeper.saves, shots_faced),
            saves_per_game=per_game(keeper.saves, mp),
            goals_conceded_per_game=per_game(keeper.goals_conceded, mp),
            clean_sheet_rate=pct(keeper.clean_sheets, mp),
            goalkeeping_source=keeper.source,
        )
