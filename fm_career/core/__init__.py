"""Core module for FM Career."""

from fm_career.core.config import Settings, get_settings
from fm_career.core.exceptions import FMCareerError, ConfigError
from fm_career.core.models import (
    Player,
    PlayerStats,
    Team,
    Position,
    Trait,
    TraitTier,
    MatchContext,
    MatchSimulation,
    ExtendedSeasonStats,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Errors
    "FMCareerError",
    "ConfigError",
    # Models
    "Player",
    "PlayerStats",
    "Team",
    "Position",
    "Trait",
    "TraitTier",
    "MatchContext",
    "MatchSimulation",
    "ExtendedSeasonStats",
]
