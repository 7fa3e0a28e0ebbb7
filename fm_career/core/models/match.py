"""Match context, goal attribution and per-match result models."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class MatchImportance(Enum):
    """How much is riding on a fixture."""
    FRIENDLY = "Friendly"
    LEAGUE = "League"
    CUP = "Cup"
    CONTINENTAL = "Continental"
    DERBY = "Derby"

    @property
    def is_high_stakes(self) -> bool:
        return self in (MatchImportance.CUP, MatchImportance.CONTINENTAL, MatchImportance.DERBY)


class OppositionTactic(Enum):
    ATTACKING = "Attacking"
    BALANCED = "Balanced"
    DEFENSIVE = "Defensive"
    COUNTER = "Counter"
    PRESSING = "Pressing"


class Weather(Enum):
    PERFECT = "Perfect"
    RAINY = "Rainy"
    WINDY = "Windy"
    COLD = "Cold"


@dataclass(frozen=True)
class MatchContext:
    """Situational modifiers for one fixture.

    ``fatigue`` is the pre-match level. ``fatigue_timeline`` holds the
    level at each 15-minute checkpoint and never decreases.
    """
    opposition_quality: float = 75.0  # 55-92
    opposition_tactic: OppositionTactic = OppositionTactic.BALANCED
    home_advantage: bool = True
    importance: MatchImportance = MatchImportance.LEAGUE
    weather: Weather = Weather.PERFECT
    fatigue: float = 0.0  # 0-100
    team_momentum: float = 0.0
    fatigue_timeline: tuple[float, ...] = ()

    def fatigue_at(self, minute: int) -> float:
        """Fatigue level at a given match minute."""
        return fatigue_level(self.fatigue_timeline, minute, self.fatigue)


def fatigue_level(timeline: tuple[float, ...], minute: int, default: float = 0.0) -> float:
    """Level at ``minute`` in a 15-minute checkpoint timeline."""
    if not timeline:
        return default
    index = min(len(timeline) - 1, max(0, minute) // 15)
    return timeline[index]


@dataclass(frozen=True)
class ForcedResult:
    """An externally decided outcome the engine must honor."""
    goals: Optional[int] = None
    assists: Optional[int] = None
    rating: Optional[float] = None
    goals_conceded: Optional[int] = None
    team_score: Optional[int] = None
    opponent_score: Optional[int] = None


@dataclass(frozen=True)
class MatchSituation:
    """Scoreline information handed to the goal simulator."""
    is_home: bool = True
    importance: MatchImportance = MatchImportance.LEAGUE
    team_score: int = 0
    opponent_score: int = 0
    fatigue_timeline: tuple[float, ...] = ()


class BodyPart(Enum):
    LEFT_FOOT = "left_foot"
    RIGHT_FOOT = "right_foot"
    HEADER = "header"


class GoalLocation(Enum):
    INSIDE_BOX = "inside_box"
    OUTSIDE_BOX = "outside_box"


class SetPieceType(Enum):
    OPEN_PLAY = "open_play"
    PENALTY = "penalty"
    FREE_KICK = "free_kick"
    CORNER = "corner"


class SpecialShot(Enum):
    CHIP = "chip"
    TRIVELA = "trivela"
    FINESSE = "finesse"
    POWER = "power"
    VOLLEY = "volley"
    BICYCLE = "bicycle"
    RABONA = "rabona"


MINUTE_BUCKETS = ("0-15", "15-30", "30-45", "45-60", "60-75", "75-90")


def minute_bucket(minute: int) -> str:
    """Return the 15-minute bucket a goal minute falls in (stoppage time included)."""
    index = min(len(MINUTE_BUCKETS) - 1, max(0, minute - 1) // 15)
    return MINUTE_BUCKETS[index]


@dataclass(frozen=True)
class GoalRecord:
    """How a single goal was scored."""
    minute: int
    body_part: BodyPart
    location: GoalLocation
    set_piece: SetPieceType = SetPieceType.OPEN_PLAY
    special_shot: Optional[SpecialShot] = None
    is_golazo: bool = False
    is_game_winner: bool = False
    is_equalizer: bool = False
    xg: float = 0.0

    @property
    def is_set_piece(self) -> bool:
        return self.set_piece is not SetPieceType.OPEN_PLAY


@dataclass(frozen=True)
class GoalDetail:
    """Fully attributed breakdown of a player's goals in one match.

    Counters are derived from ``records`` so each family always sums to
    ``total``.
    """
    records: tuple[GoalRecord, ...] = ()
    shots: int = 0
    shots_on_target: int = 0

    @property
    def total(self) -> int:
        return len(self.records)

    def _count(self, predicate) -> int:
        return sum(1 for record in self.records if predicate(record))

    @property
    def left_foot(self) -> int:
        return self._count(lambda r: r.body_part is BodyPart.LEFT_FOOT)

    @property
    def right_foot(self) -> int:
        return self._count(lambda r: r.body_part is BodyPart.RIGHT_FOOT)

    @property
    def headers(self) -> int:
        return self._count(lambda r: r.body_part is BodyPart.HEADER)

    @property
    def inside_box(self) -> int:
        return self._count(lambda r: r.location is GoalLocation.INSIDE_BOX)

    @property
    def outside_box(self) -> int:
        return self._count(lambda r: r.location is GoalLocation.OUTSIDE_BOX)

    @property
    def penalties(self) -> int:
        return self._count(lambda r: r.set_piece is SetPieceType.PENALTY)

    @property
    def free_kicks(self) -> int:
        return self._count(lambda r: r.set_piece is SetPieceType.FREE_KICK)

    @property
    def corners(self) -> int:
        return self._count(lambda r: r.set_piece is SetPieceType.CORNER)

    @property
    def open_play(self) -> int:
        return self._count(lambda r: not r.is_set_piece)

    @property
    def golazos(self) -> int:
        return self._count(lambda r: r.is_golazo)

    @property
    def game_winners(self) -> int:
        return self._count(lambda r: r.is_game_winner)

    @property
    def equalizers(self) -> int:
        return self._count(lambda r: r.is_equalizer)

    @property
    def xg(self) -> float:
        return sum(record.xg for record in self.records)

    def special_shots(self) -> dict[SpecialShot, int]:
        counts = {shot: 0 for shot in SpecialShot}
        for record in self.records:
            if record.special_shot is not None:
                counts[record.special_shot] += 1
        return counts

    def minute_buckets(self) -> dict[str, int]:
        counts = {bucket: 0 for bucket in MINUTE_BUCKETS}
        for record in self.records:
            counts[minute_bucket(record.minute)] += 1
        return counts


@dataclass(frozen=True)
class MatchSimulation:
    """Raw event counts for one player in one match."""
    goals: int = 0
    assists: int = 0
    shots: int = 0
    shots_on_target: int = 0
    key_passes: int = 0
    expected_goals: float = 0.0
    shots_inside_box: int = 0
    shots_outside_box: int = 0
    big_chances_missed: int = 0

    passes: int = 0
    passes_completed: int = 0
    forward_passes: int = 0
    crosses: int = 0
    crosses_accurate: int = 0
    long_balls: int = 0
    long_balls_accurate: int = 0
    through_balls: int = 0
    through_balls_accurate: int = 0
    big_chances_created: int = 0
    expected_assists: float = 0.0
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

    minutes_played: int = 90
    rating: float = 6.0

    team_score: int = 0
    opponent_score: int = 0
    goals_conceded: int = 0
    clean_sheet: bool = False
    # Goalkeeper data; ``None`` when the player did not keep goal
    saves: Optional[int] = None
    penalties_saved: int = 0

    goal_detail: Optional[GoalDetail] = None

    @property
    def won(self) -> bool:
        return self.team_score > self.opponent_score

    @property
    def drew(self) -> bool:
        return self.team_score == self.opponent_score

    @property
    def lost(self) -> bool:
        return self.team_score < self.opponent_score
