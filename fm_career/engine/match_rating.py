"""Match rating calculation.

Position-specific rating for a single simulated match. The engine calls
this once, with the validated simulation, so the rating always reflects
the final (capped and reconciled) counts.
"""

from dataclasses import dataclass

from fm_career.core.models.match import MatchSimulation
from fm_career.core.models.player import Position, PositionGroup


@dataclass(frozen=True)
class RatingWeights:
    """Rating weights for one position group."""
    # Offensive weights
    goals_weight: float = 0.5
    assists_weight: float = 0.35
    key_passes_weight: float = 0.08
    shots_on_target_weight: float = 0.05
    dribbles_weight: float = 0.08

    # Defensive weights
    tackles_weight: float = 0.08
    interceptions_weight: float = 0.08
    blocks_weight: float = 0.10
    clearances_weight: float = 0.05
    aerial_duels_won_weight: float = 0.05
    duels_won_weight: float = 0.02

    # Passing weights
    passes_completed_weight: float = 0.02

    # Goalkeeper weights
    saves_weight: float = 0.15
    goals_conceded_weight: float = -0.25
    clean_sheet_weight: float = 1.0
    penalties_saved_weight: float = 0.8


class MatchRatingCalculator:
    """
    Calculate match ratings from a simulated match.

    Rating system:
    - Base rating: 6.0
    - Performance bonuses: goals, assists, key passes, defensive actions
    - Result bonus: winning/losing
    - Range: 3.0 - 10.0
    """

    BASE_RATING = 6.0
    MIN_RATING = 3.0
    MAX_RATING = 10.0

    POSITION_WEIGHTS = {
        PositionGroup.GK: RatingWeights(
            goals_weight=1.0,
            assists_weight=0.5,
            key_passes_weight=0.0,
            dribbles_weight=0.0,
            tackles_weight=0.0,
            interceptions_weight=0.05,
            blocks_weight=0.0,
            clearances_weight=0.03,
            aerial_duels_won_weight=0.10,
            duels_won_weight=0.0,
            passes_completed_weight=0.01,
        ),
        PositionGroup.DEF: RatingWeights(
            goals_weight=0.60,
            assists_weight=0.35,
            tackles_weight=0.08,
            interceptions_weight=0.08,
            clearances_weight=0.05,
            blocks_weight=0.10,
            aerial_duels_won_weight=0.08,
            passes_completed_weight=0.02,
            goals_conceded_weight=-0.10,
            clean_sheet_weight=0.4,
        ),
        PositionGroup.MID: RatingWeights(
            goals_weight=0.55,
            assists_weight=0.40,
            key_passes_weight=0.10,
            tackles_weight=0.05,
            interceptions_weight=0.05,
            passes_completed_weight=0.02,
            dribbles_weight=0.06,
            goals_conceded_weight=0.0,
            clean_sheet_weight=0.0,
        ),
        PositionGroup.ATT: RatingWeights(
            goals_weight=0.50,
            assists_weight=0.35,
            key_passes_weight=0.08,
            shots_on_target_weight=0.05,
            dribbles_weight=0.08,
            goals_conceded_weight=0.0,
            clean_sheet_weight=0.0,
        ),
    }

    @classmethod
    def calculate(cls, simulation: MatchSimulation, position: Position) -> float:
        """
        Calculate the match rating for a player.

        Args:
            simulation: Validated match simulation
            position: Player position

        Returns:
            Match rating (3.0 - 10.0)
        """
        if simulation.minutes_played <= 0:
            return cls.MIN_RATING

        group = position.group
        weights = cls.POSITION_WEIGHTS[group]
        stats = simulation

        rating = cls.BASE_RATING

        # === Offensive contributions ===
        rating += stats.goals * weights.goals_weight
        rating += stats.assists * weights.assists_weight
        rating += stats.key_passes * weights.key_passes_weight

        # === Shot accuracy ===
        if stats.shots > 0:
            accuracy = stats.shots_on_target / stats.shots
            rating += (accuracy - 0.5) * weights.shots_on_target_weight

        # === Passing accuracy ===
        if stats.passes > 0:
            pass_accuracy = stats.passes_completed / stats.passes
            if group in (PositionGroup.DEF, PositionGroup.MID):
                rating += (pass_accuracy - 0.75) * weights.passes_completed_weight * 100
            else:
                rating += (pass_accuracy - 0.70) * weights.passes_completed_weight * 50

        # === Defensive contributions ===
        rating += stats.tackles_won * weights.tackles_weight
        rating += stats.interceptions * weights.interceptions_weight
        rating += stats.blocks * weights.blocks_weight
        rating += stats.clearances * weights.clearances_weight

        # === Duels ===
        if stats.aerial_duels > 0:
            win_rate = stats.aerial_duels_won / stats.aerial_duels
            rating += (win_rate - 0.5) * weights.aerial_duels_won_weight
        if stats.duels > 0:
            rating += (stats.duels_won / stats.duels - 0.5) * weights.duels_won_weight * 10

        # === Dribbles ===
        if stats.dribbles > 0:
            success_rate = stats.dribbles_succeeded / stats.dribbles
            rating += (success_rate - 0.5) * weights.dribbles_weight
            rating += stats.dribbles_succeeded * 0.02

        # === Goals against ===
        rating += stats.goals_conceded * weights.goals_conceded_weight
        if stats.clean_sheet and stats.minutes_played >= 90:
            rating += weights.clean_sheet_weight

        # === Goalkeeper specific ===
        if group is PositionGroup.GK:
            rating += (stats.saves or 0) * weights.saves_weight
            rating += stats.penalties_saved * weights.penalties_saved_weight

        # === Match result ===
        score_diff = stats.team_score - stats.opponent_score
        if score_diff > 0:
            rating += 0.3  # Winner bonus
        elif score_diff == 0:
            rating += 0.1  # Draw bonus
        else:
            rating -= 0.2  # Loser penalty

        # === Minutes played ===
        if stats.minutes_played >= 90:
            rating += 0.1  # Full match bonus
        elif stats.minutes_played < 45:
            rating -= 0.2  # Sub penalty

        # === Cards ===
        rating -= stats.yellow_cards * 0.3
        rating -= stats.red_cards * 1.5

        return cls.clamp(rating)

    @classmethod
    def clamp(cls, rating: float) -> float:
        return round(max(cls.MIN_RATING, min(cls.MAX_RATING, rating)), 1)

    @classmethod
    def get_rating_description(cls, rating: float) -> str:
        """Get textual description of rating."""
        if rating >= 9.0:
            return "World Class"
        elif rating >= 8.0:
            return "Excellent"
        elif rating >= 7.0:
            return "Very Good"
        elif rating >= 6.0:
            return "Good"
        elif rating >= 5.0:
            return "Average"
        elif rating >= 4.0:
            return "Poor"
        else:
            return "Terrible"
