"""Core models for FM Career."""

from fm_career.core.models.player import (
    Player,
    PlayerStats,
    Team,
    Position,
    PositionGroup,
    Foot,
    Trait,
    TraitTier,
    PhysicalProfile,
    ExpandedAttributes,
    ExpandedTechnical,
    ExpandedPhysical,
    ExpandedMental,
    ExpandedDefensive,
    ExpandedGoalkeeper,
)
from fm_career.core.models.match import (
    MatchContext,
    MatchImportance,
    OppositionTactic,
    Weather,
    ForcedResult,
    MatchSituation,
    MatchSimulation,
    GoalDetail,
    GoalRecord,
    BodyPart,
    GoalLocation,
    SetPieceType,
    SpecialShot,
)
from fm_career.core.models.season import (
    ExtendedSeasonStats,
    CareerEvent,
    CareerEventType,
    SeasonResult,
)

__all__ = [
    # Player
    "Player",
    "PlayerStats",
    "Team",
    "Position",
    "PositionGroup",
    "Foot",
    "Trait",
    "TraitTier",
    "PhysicalProfile",
    "ExpandedAttributes",
    "ExpandedTechnical",
    "ExpandedPhysical",
    "ExpandedMental",
    "ExpandedDefensive",
    "ExpandedGoalkeeper",
    # Match
    "MatchContext",
    "MatchImportance",
    "OppositionTactic",
    "Weather",
    "ForcedResult",
    "MatchSituation",
    "MatchSimulation",
    "GoalDetail",
    "GoalRecord",
    "BodyPart",
    "GoalLocation",
    "SetPieceType",
    "SpecialShot",
    # Season
    "ExtendedSeasonStats",
    "CareerEvent",
    "CareerEventType",
    "SeasonResult",
]
