"""Player, team and attribute models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class Position(Enum):
    """Player positions on the field."""
    GK = "GK"  # Goalkeeper
    CB = "CB"  # Center Back
    LB = "LB"  # Left Back
    RB = "RB"  # Right Back
    LWB = "LWB"  # Left Wing Back
    RWB = "RWB"  # Right Wing Back
    CDM = "CDM"  # Central Defensive Midfielder
    CM = "CM"  # Central Midfielder
    LM = "LM"  # Left Midfielder
    RM = "RM"  # Right Midfielder
    CAM = "CAM"  # Central Attacking Midfielder
    LW = "LW"  # Left Winger
    RW = "RW"  # Right Winger
    CF = "CF"  # Center Forward
    ST = "ST"  # Striker

    @property
    def group(self) -> "PositionGroup":
        return POSITION_GROUPS[self]

    @property
    def is_goalkeeper(self) -> bool:
        return self is Position.GK


class PositionGroup(Enum):
    """Coarse position buckets."""
    GK = "GK"
    DEF = "DEF"
    MID = "MID"
    ATT = "ATT"


POSITION_GROUPS = {
    Position.GK: PositionGroup.GK,
    Position.CB: PositionGroup.DEF,
    Position.LB: PositionGroup.DEF,
    Position.RB: PositionGroup.DEF,
    Position.LWB: PositionGroup.DEF,
    Position.RWB: PositionGroup.DEF,
    Position.CDM: PositionGroup.MID,
    Position.CM: PositionGroup.MID,
    Position.LM: PositionGroup.MID,
    Position.RM: PositionGroup.MID,
    Position.CAM: PositionGroup.MID,
    Position.LW: PositionGroup.ATT,
    Position.RW: PositionGroup.ATT,
    Position.CF: PositionGroup.ATT,
    Position.ST: PositionGroup.ATT,
}


class Foot(Enum):
    """Preferred foot."""
    LEFT = "Left"
    RIGHT = "Right"
    BOTH = "Both"


class TraitTier(Enum):
    """Trait strength, weakest first."""
    BRONZE = "Bronze"
    SILVER = "Silver"
    GOLD = "Gold"
    DIAMOND = "Diamond"

    @property
    def rank(self) -> int:
        return list(TraitTier).index(self)


@dataclass(frozen=True)
class Trait:
    """An active player trait."""
    name: str
    tier: TraitTier = TraitTier.BRONZE


# Expanded attribute blocks. Every field is optional; a missing value falls
# back to the matching base skill.

@dataclass
class PhysicalProfile:
    height: Optional[float] = None  # cm
    weight: Optional[float] = None  # kg
    preferred_foot: Optional[Foot] = None
    weak_foot_level: Optional[int] = None  # 1-5


@dataclass
class ExpandedTechnical:
    left_foot_finishing: Optional[float] = None
    right_foot_finishing: Optional[float] = None
    finishing_inside_box: Optional[float] = None
    finishing_outside_box: Optional[float] = None
    shot_power: Optional[float] = None
    long_shots: Optional[float] = None
    volleys: Optional[float] = None
    heading_accuracy: Optional[float] = None
    short_passing: Optional[float] = None
    vision: Optional[float] = None
    crossing: Optional[float] = None
    through_balls: Optional[float] = None
    first_touch: Optional[float] = None
    close_control: Optional[float] = None
    speed_dribbling: Optional[float] = None
    skill_moves: Optional[float] = None
    flair: Optional[float] = None
    free_kicks: Optional[float] = None
    penalties: Optional[float] = None
    corners: Optional[float] = None


@dataclass
class ExpandedPhysical:
    top_speed: Optional[float] = None
    acceleration: Optional[float] = None
    stamina: Optional[float] = None
    agility: Optional[float] = None
    jumping: Optional[float] = None
    strength: Optional[float] = None
    balance: Optional[float] = None
    natural_fitness: Optional[float] = None


@dataclass
class ExpandedMental:
    composure: Optional[float] = None
    decisions: Optional[float] = None
    anticipation: Optional[float] = None
    positioning: Optional[float] = None
    off_the_ball: Optional[float] = None
    concentration: Optional[float] = None
    leadership: Optional[float] = None
    temperament: Optional[float] = None  # 0 calm, 100 explosive
    big_match: Optional[float] = None
    consistency: Optional[float] = None


@dataclass
class ExpandedDefensive:
    marking: Optional[float] = None
    standing_tackle: Optional[float] = None
    sliding_tackle: Optional[float] = None
    interception: Optional[float] = None
    shot_blocking: Optional[float] = None
    aerial_defending: Optional[float] = None
    positioning: Optional[float] = None


@dataclass
class ExpandedGoalkeeper:
    reflexes: Optional[float] = None
    diving: Optional[float] = None
    handling: Optional[float] = None
    one_on_one: Optional[float] = None
    positioning: Optional[float] = None
    command_of_area: Optional[float] = None
    distribution: Optional[float] = None


@dataclass
class ExpandedAttributes:
    """Ultra-detailed attribute blocks that override base skills."""
    profile: Optional[PhysicalProfile] = None
    technical: Optional[ExpandedTechnical] = None
    physical: Optional[ExpandedPhysical] = None
    mental: Optional[ExpandedMental] = None
    defensive: Optional[ExpandedDefensive] = None
    goalkeeper: Optional[ExpandedGoalkeeper] = None


@dataclass
class PlayerStats:
    """Base skills on a 0-100 scale.

    Skills left as ``None`` are resolved to a neutral default when a
    capability is computed.
    """
    overall: float = 70

    # Headline
    pace: Optional[float] = None
    shooting: Optional[float] = None
    passing: Optional[float] = None
    dribbling: Optional[float] = None
    defending: Optional[float] = None
    physical: Optional[float] = None

    # Attacking
    finishing: Optional[float] = None
    composure: Optional[float] = None
    positioning: Optional[float] = None
    long_shots: Optional[float] = None
    shot_power: Optional[float] = None
    volleys: Optional[float] = None
    heading: Optional[float] = None
    penalties: Optional[float] = None

    # Creative
    vision: Optional[float] = None
    crossing: Optional[float] = None
    short_passing: Optional[float] = None
    curve: Optional[float] = None
    free_kick: Optional[float] = None
    ball_control: Optional[float] = None
    flair: Optional[float] = None

    # Physical
    acceleration: Optional[float] = None
    sprint_speed: Optional[float] = None
    stamina: Optional[float] = None
    agility: Optional[float] = None
    balance: Optional[float] = None
    jumping: Optional[float] = None
    strength: Optional[float] = None

    # Defensive / mental
    aggression: Optional[float] = None
    interceptions: Optional[float] = None
    tackling: Optional[float] = None
    marking: Optional[float] = None
    work_rate: Optional[float] = None
    leadership: Optional[float] = None
    decisions: Optional[float] = None
    concentration: Optional[float] = None
    consistency: Optional[float] = None
    big_matches: Optional[float] = None

    # Goalkeeping
    diving: Optional[float] = None
    handling: Optional[float] = None
    reflexes: Optional[float] = None
    kicking: Optional[float] = None
    gk_positioning: Optional[float] = None

    preferred_foot: Foot = Foot.RIGHT
    weak_foot: int = 3  # 1-5
    traits: list[Trait] = field(default_factory=list)
    expanded: Optional[ExpandedAttributes] = None

    def get_trait(self, name: str) -> Optional[Trait]:
        """Return the active trait with this name, if any."""
        for trait in self.traits:
            if trait.name == name:
                return trait
        return None


@dataclass
class Team:
    """The player's club as seen by the simulation."""
    name: str = "Unknown FC"
    reputation: float = 75  # 0-100
    league_tier: int = 1  # 1 = top flight
    playing_style: Optional[str] = None


@dataclass
class Player:
    """A footballer whose season is being simulated."""
    name: str
    position: Position
    stats: PlayerStats = field(default_factory=PlayerStats)
    team: Team = field(default_factory=Team)
    age: int = 25
    playing_style: Optional[str] = None  # e.g. "Poacher", "False 9"
    form: float = 0.0  # -5 (poor) to +5 (excellent)

    @property
    def overall(self) -> float:
        return self.stats.overall
