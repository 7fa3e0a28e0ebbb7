"""Tests for the command-line entry point."""

import argparse

import pytest

from fm_career.cli import main as cli
from fm_career.core.models.player import Position, Trait, TraitTier


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr(cli, "setup_logging", lambda *args, **kwargs: None)


class TestParsing:
    """Tests for argument parsing and player construction."""

    def test_parse_trait(self):
        """Traits parse as Name or Name:Tier."""
        assert cli.parse_trait("Poacher:Diamond") == Trait("Poacher", TraitTier.DIAMOND)
        assert cli.parse_trait("Poacher:gold") == Trait("Poacher", TraitTier.GOLD)
        assert cli.parse_trait("Vision") == Trait("Vision", TraitTier.BRONZE)

    def test_bad_trait_tier(self):
        """Unknown tiers are rejected."""
        with pytest.raises(argparse.ArgumentTypeError):
            cli.parse_trait("Poacher:Platinum")

    def test_build_player(self):
        """Command-line options become a player."""
        args = cli.build_parser().parse_args([
            "--name", "Keeper", "--position", "GK", "--overall", "84",
            "--reputation", "70", "--tier", "2", "--trait", "Leadership:Silver",
        ])
        player = cli.build_player(args)
        assert player.position is Position.GK
        assert player.stats.reflexes == 84
        assert player.team.league_tier == 2
        assert player.stats.traits == [Trait("Leadership", TraitTier.SILVER)]

    def test_finishing_override(self):
        """Finishing can differ from the overall rating."""
        player = cli.build_player(cli.build_parser().parse_args(["--overall", "80", "--finishing", "93"]))
        assert player.stats.finishing == 93
        assert player.stats.shooting == 80


class TestMain:
    """Tests for running the CLI."""

    def test_report(self, capsys):
        """A seeded run prints the season report."""
        assert cli.main(["--matches", "10", "--seed", "1", "--name", "Report Player"]) == 0
        out = capsys.readouterr().out
        assert "Season Report" in out
        assert "Report Player" in out
        assert "Passing" in out

    def test_json_output(self, capsys):
        """--json prints machine-readable stats."""
        assert cli.main(["--matches", "5", "--seed", "1", "--json"]) == 0
        out = capsys.readouterr().out
        assert '"goals"' in out
        assert '"config_version"' in out

    def test_bad_balance_file(self, tmp_path, capsys):
        """A missing balance file is reported, not raised."""
        assert cli.main(["--balance", str(tmp_path / "missing.yaml"), "--matches", "1"]) == 1
        assert "Error" in capsys.readouterr().out
