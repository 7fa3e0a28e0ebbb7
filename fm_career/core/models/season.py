"""Season-level statistics and career event models."""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Optional


@dataclass(frozen=True)
class ExtendedSeasonStats:
    """A player's season reduced from per-match simulations.

    Built once per season and never reset. Percentages are 0-100 and are
    derived from season totals, never averaged across matches.
    """
    player_name: str = ""
    position: str = ""
    age: int = 0
    team_name: str = ""
    league_tier: int = 1

    # Appearances
    matches_played: int = 0
    total_matches: int = 0
    appearance_rate: float = 0.0
    minutes_played: int = 0
    minutes_per_game: float = 0.0

    # Goals and assists
    goals: int = 0
    assists: int = 0
    goal_contributions: int = 0
    goals_per_game: float = 0.0
    assists_per_game: float = 0.0
    goal_contributions_per_game: float = 0.0
    goals_per_90: float = 0.0
    assists_per_90: float = 0.0
    goal_contributions_per_90: float = 0.0
    minutes_per_goal: float = 0.0
    matches_scored_in: int = 0
    scoring_match_rate: float = 0.0
    braces: int = 0
    hat_tricks: int = 0

    # Shooting
    shots: int = 0
    shots_on_target: int = 0
    shots_off_target: int = 0
    shots_per_game: float = 0.0
    shots_on_target_per_game: float = 0.0
    shots_per_90: float = 0.0
    shot_accuracy: float = 0.0
    goal_conversion: float = 0.0
    on_target_conversion: float = 0.0
    expected_goals: float = 0.0
    expected_goals_per_game: float = 0.0
    expected_goals_per_90: float = 0.0
    xg_per_shot: float = 0.0
    goals_minus_xg: float = 0.0
    shots_inside_box: int = 0
    shots_outside_box: int = 0
    outside_box_shot_pct: float = 0.0
    big_chances_missed: int = 0

    # Goal breakdown
    left_foot_goals: int = 0
    right_foot_goals: int = 0
    headed_goals: int = 0
    preferred_foot_goals: int = 0
    weak_foot_goals: int = 0
    goals_inside_box: int = 0
    goals_outside_box: int = 0
    penalty_goals: int = 0
    free_kick_goals: int = 0
    corner_goals: int = 0
    set_piece_goals: int = 0
    open_play_goals: int = 0
    golazos: int = 0
    chip_goals: int = 0
    trivela_goals: int = 0
    finesse_goals: int = 0
    power_goals: int = 0
    volley_goals: int = 0
    bicycle_goals: int = 0
    rabona_goals: int = 0
    game_winning_goals: int = 0
    equalizing_goals: int = 0
    goals_0_15: int = 0
    goals_15_30: int = 0
    goals_30_45: int = 0
    goals_45_60: int = 0
    goals_60_75: int = 0
    goals_75_90: int = 0
    left_foot_goal_pct: float = 0.0
    right_foot_goal_pct: float = 0.0
    headed_goal_pct: float = 0.0
    inside_box_goal_pct: float = 0.0
    outside_box_goal_pct: float = 0.0
    set_piece_goal_pct: float = 0.0
    penalty_goal_pct: float = 0.0
    golazo_pct: float = 0.0
    decisive_goal_pct: float = 0.0

    # Creativity
    key_passes: int = 0
    key_passes_per_game: float = 0.0
    key_passes_per_90: float = 0.0
    key_pass_conversion: float = 0.0
    big_chances_created: int = 0
    big_chances_created_per_game: float = 0.0
    expected_assists: float = 0.0
    expected_assists_per_90: float = 0.0
    assists_minus_xa: float = 0.0

    # Passing
    passes: int = 0
    passes_completed: int = 0
    pass_completion: float = 0.0
    passes_per_game: float = 0.0
    passes_completed_per_game: float = 0.0
    passes_per_90: float = 0.0
    forward_passes: int = 0
    forward_pass_pct: float = 0.0
    crosses: int = 0
    crosses_accurate: int = 0
    cross_accuracy: float = 0.0
    long_balls: int = 0
    long_balls_accurate: int = 0
    long_ball_accuracy: float = 0.0
    through_balls: int = 0
    through_balls_accurate: int = 0
    through_ball_accuracy: float = 0.0

    # Dribbling
    dribbles: int = 0
    dribbles_succeeded: int = 0
    dribble_success: float = 0.0
    dribbles_per_game: float = 0.0
    dribbles_succeeded_per_game: float = 0.0

    # Duels
    duels: int = 0
    duels_won: int = 0
    duel_success: float = 0.0
    duels_per_game: float = 0.0
    ground_duels: int = 0
    ground_duels_won: int = 0
    ground_duel_success: float = 0.0
    aerial_duels: int = 0
    aerial_duels_won: int = 0
    aerial_duel_success: float = 0.0

    # Defending
    tackles: int = 0
    tackles_won: int = 0
    tackle_success: float = 0.0
    tackles_per_game: float = 0.0
    interceptions: int = 0
    interceptions_per_game: float = 0.0
    clearances: int = 0
    clearances_per_game: float = 0.0
    blocks: int = 0
    blocks_per_game: float = 0.0
    defensive_actions: int = 0
    defensive_actions_per_game: float = 0.0

    # Discipline
    fouls_committed: int = 0
    fouls_suffered: int = 0
    fouls_per_game: float = 0.0
    offsides: int = 0
    yellow_cards: int = 0
    red_cards: int = 0
    cards_per_game: float = 0.0

    # Ratings
    average_rating: float = 0.0
    best_rating: float = 0.0
    worst_rating: float = 0.0
    ratings_above_8: int = 0
    ratings_below_6: int = 0

    # Awards
    team_of_the_week: int = 0
    man_of_the_match: int = 0
    totw_rate: float = 0.0
    motm_rate: float = 0.0

    # Team results
    wins: int = 0
    draws: int = 0
    losses: int = 0
    win_rate: float = 0.0
    team_goals_scored: int = 0
    team_goals_conceded: int = 0
    goal_share: float = 0.0

    # Goalkeeping
    saves: int = 0
    shots_faced: int = 0
    goals_conceded: int = 0
    clean_sheets: int = 0
    penalties_saved: int = 0
    save_percentage: float = 0.0
    saves_per_game: float = 0.0
    goals_conceded_per_game: float = 0.0
    clean_sheet_rate: float = 0.0
    goalkeeping_source: str = "none"  # "match", "heuristic" or "none"

    def to_dict(self) -> dict[str, Any]:
        """Plain dict suitable for JSON export."""
        return asdict(self)


class CareerEventType(Enum):
    """Kinds of season milestones."""
    GOALS = "goals"
    ASSISTS = "assists"
    CONTRIBUTIONS = "contributions"
    DISCIPLINE = "discipline"
    EFFICIENCY = "efficiency"
    AWARDS = "awards"
    GOALKEEPING = "goalkeeping"


@dataclass(frozen=True)
class CareerEvent:
    """A narrative milestone flag raised from a finished season."""
    event_type: CareerEventType
    title: str
    description: str
    importance: str = "normal"  # "normal", "high" or "legendary"


@dataclass
class SeasonResult:
    """Everything produced by simulating one season."""
    stats: ExtendedSeasonStats
    events: list[CareerEvent] = field(default_factory=list)
    seed: Optional[int] = None
    config_version: str = ""
