"""Shared fixtures for FM Career tests."""

import random

import pytest

from fm_career.config import BalanceConfig, ConfigManager
from fm_career.core.models.match import MatchContext
from fm_career.core.models.player import Player, PlayerStats, Position, Team


@pytest.fixture(scope="session")
def config() -> BalanceConfig:
    return ConfigManager().load()


@pytest.fixture
def rng():
    return random.Random(42)


def make_player(
    position: Position = Position.ST,
    overall: float = 80,
    name: str = "Test Player",
    reputation: float = 75,
    league_tier: int = 1,
    age: int = 25,
    playing_style=None,
    **skills,
) -> Player:
    """Player whose headline skills track ``overall`` unless overridden."""
    values = {
        "pace": overall,
        "shooting": overall,
        "passing": overall,
        "dribbling": overall,
        "defending": overall,
        "physical": overall,
    }
    values.update(skills)
    return Player(
        name=name,
        position=position,
        stats=PlayerStats(overall=overall, **values),
        team=Team(name="Test FC", reputation=reputation, league_tier=league_tier),
        age=age,
        playing_style=playing_style,
    )


@pytest.fixture
def player_factory():
    return make_player


@pytest.fixture
def striker() -> Player:
    return make_player(
        Position.ST,
        overall=90,
        name="Elite Striker",
        reputation=80,
        finishing=92,
        composure=88,
        shot_power=88,
        positioning=90,
    )


@pytest.fixture
def goalkeeper() -> Player:
    return make_player(
        Position.GK,
        overall=85,
        name="Keeper",
        reputation=80,
        diving=86,
        handling=84,
        reflexes=88,
        gk_positioning=85,
    )


@pytest.fixture
def neutral_context() -> MatchContext:
    return MatchContext(opposition_quality=75.0, home_advantage=True, fatigue=0.0)
