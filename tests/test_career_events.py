"""Tests for career milestone events."""

from fm_career.core.models.season import CareerEventType, ExtendedSeasonStats
from fm_career.engine.career_events import CareerEventGenerator


def _titles(events):
    return [event.title for event in events]


class TestCareerEventGenerator:
    """Tests for season milestone detection."""

    def test_quiet_season(self):
        """An unremarkable season raises no events."""
        stats = ExtendedSeasonStats(player_name="Quiet", goals=5, assists=3, goal_contributions=8)
        assert CareerEventGenerator().generate(stats) == []

    def test_only_top_goal_milestone(self):
        """Only the highest goal milestone reached is raised."""
        stats = ExtendedSeasonStats(player_name="Scorer", goals=42, goal_contributions=42)
        events = CareerEventGenerator().generate(stats)

        goal_events = [e for e in events if e.event_type is CareerEventType.GOALS]
        assert len(goal_events) == 1
        assert goal_events[0].title == "40-Goal Season"
        assert goal_events[0].importance == "legendary"
        assert "Talisman" in _titles(events)

    def test_twenty_goals(self):
        """Twenty goals is a normal milestone."""
        stats = ExtendedSeasonStats(player_name="Scorer", goals=20, goal_contributions=20)
        events = CareerEventGenerator().generate(stats)
        assert "20-Goal Season" in _titles(events)
        assert "Scorer scored 20 goals" in events[0].description

    def test_assists_and_contributions(self):
        """Creators are recognised for assists and total involvement."""
        stats = ExtendedSeasonStats(player_name="Creator", goals=10, assists=26, goal_contributions=36)
        titles = _titles(CareerEventGenerator().generate(stats))
        assert "Assist King" in titles
        assert "Key Contributor" in titles

    def test_discipline(self):
        """Card counts raise discipline events."""
        stats = ExtendedSeasonStats(player_name="Hothead", yellow_cards=13, red_cards=3)
        events = CareerEventGenerator().generate(stats)
        assert [e.title for e in events if e.event_type is CareerEventType.DISCIPLINE] == [
            "Walking a Tightrope",
            "Serial Offender",
        ]

    def test_conversion_needs_volume(self):
        """Clinical finishing needs at least twenty shots."""
        few = ExtendedSeasonStats(player_name="A", shots=10, goal_conversion=40.0)
        many = ExtendedSeasonStats(player_name="B", shots=60, goal_conversion=30.0)
        assert "Clinical Finisher" not in _titles(CareerEventGenerator().generate(few))
        assert "Clinical Finisher" in _titles(CareerEventGenerator().generate(many))

    def test_pass_completion_needs_volume(self):
        """Passing accuracy counts only over a real passing volume."""
        few = ExtendedSeasonStats(player_name="A", passes=100, pass_completion=95.0)
        many = ExtendedSeasonStats(player_name="B", passes=2000, pass_completion=91.0)
        assert "Metronome" not in _titles(CareerEventGenerator().generate(few))
        assert "Metronome" in _titles(CareerEventGenerator().generate(many))

    def test_awards(self):
        """Frequent award winners are flagged."""
        stats = ExtendedSeasonStats(player_name="Star", man_of_the_match=12, team_of_the_week=15)
        titles = _titles(CareerEventGenerator().generate(stats))
        assert "Golden Boot of Performances" in titles
        assert "Team of the Week Regular" in titles

    def test_clean_sheets_only_for_keepers(self, goalkeeper):
        """Clean-sheet milestones are for goalkeepers."""
        keeper = ExtendedSeasonStats(player_name="Keeper", position="GK", clean_sheets=21)
        defender = ExtendedSeasonStats(player_name="Defender", position="CB", clean_sheets=21)
        assert "Brick Wall" in _titles(CareerEventGenerator().generate(keeper, goalkeeper))
        assert CareerEventGenerator().generate(defender) == []
