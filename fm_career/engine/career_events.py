"""Career milestone events raised from a finished season."""

import logging
from typing import Optional

from fm_career.core.models.player import Player
from fm_career.core.models.season import CareerEvent, CareerEventType, ExtendedSeasonStats

logger = logging.getLogger(__name__)

# (minimum, importance, title), highest first; only the top milestone reached is raised
GOAL_MILESTONES = [
    (50, "legendary", "Half-Century Season"),
    (40, "legendary", "40-Goal Season"),
    (30, "high", "30-Goal Season"),
    (20, "normal", "20-Goal Season"),
]
ASSIST_MILESTONES = [
    (25, "legendary", "Assist King"),
    (15, "high", "Chief Creator"),
]
CONTRIBUTION_MILESTONES = [
    (60, "legendary", "Unstoppable Force"),
    (40, "high", "Talisman"),
    (25, "normal", "Key Contributor"),
]
YELLOW_CARD_MILESTONES = [
    (15, "high", "Disciplinary Crisis"),
    (12, "normal", "Walking a Tightrope"),
]
RED_CARD_MILESTONES = [
    (3, "high", "Serial Offender"),
    (2, "normal", "Seeing Red"),
]
CLEAN_SHEET_MILESTONES = [
    (20, "legendary", "Brick Wall"),
    (15, "high", "Safe Hands"),
]

MIN_SHOTS_FOR_CONVERSION = 20
CONVERSION_THRESHOLD = 25.0
MIN_PASSES_FOR_COMPLETION = 500
PASS_COMPLETION_THRESHOLD = 90.0
MOTM_AWARD_THRESHOLD = 10
TOTW_THRESHOLD = 10


def _milestone(value: int, table: list[tuple[int, str, str]]) -> Optional[tuple[int, str, str]]:
    for entry in table:
        if value >= entry[0]:
            return entry
    return None


class CareerEventGenerator:
    """Read finished season stats and flag the milestones worth a headline."""

    def generate(self, stats: ExtendedSeasonStats, player: Optional[Player] = None) -> list[CareerEvent]:
        events: list[CareerEvent] = []
        name = player.name if player is not None else stats.player_name

        hit = _milestone(stats.goals, GOAL_MILESTONES)
        if hit:
            events.append(CareerEvent(
                CareerEventType.GOALS, hit[2],
                f"{name} scored {stats.goals} goals this season.", hit[1],
            ))

        hit = _milestone(stats.assists, ASSIST_MILESTONES)
        if hit:
            events.append(CareerEvent(
                CareerEventType.ASSISTS, hit[2],
                f"{name} provided {stats.assists} assists this season.", hit[1],
            ))

        hit = _milestone(stats.goal_contributions, CONTRIBUTION_MILESTONES)
        if hit:
            events.append(CareerEvent(
                CareerEventType.CONTRIBUTIONS, hit[2],
                f"{name} was directly involved in {stats.goal_contributions} goals.", hit[1],
            ))

        hit = _milestone(stats.yellow_cards, YELLOW_CARD_MILESTONES)
        if hit:
            events.append(CareerEvent(
                CareerEventType.DISCIPLINE, hit[2],
                f"{name} picked up {stats.yellow_cards} yellow cards.", hit[1],
            ))

        hit = _milestone(stats.red_cards, RED_CARD_MILESTONES)
        if hit:
            events.append(CareerEvent(
                CareerEventType.DISCIPLINE, hit[2],
                f"{name} was sent off {stats.red_cards} times.", hit[1],
            ))

        if stats.shots >= MIN_SHOTS_FOR_CONVERSION and stats.goal_conversion >= CONVERSION_THRESHOLD:
            events.append(CareerEvent(
                CareerEventType.EFFICIENCY, "Clinical Finisher",
                f"{name} converted {stats.goal_conversion:.1f}% of {stats.shots} shots.", "high",
            ))

        if stats.passes >= MIN_PASSES_FOR_COMPLETION and stats.pass_completion >= PASS_COMPLETION_THRESHOLD:
            events.append(CareerEvent(
                CareerEventType.EFFICIENCY, "Metronome",
                f"{name} completed {stats.pass_completion:.1f}% of {stats.passes} passes.", "normal",
            ))

        if stats.man_of_the_match >= MOTM_AWARD_THRESHOLD:
            events.append(CareerEvent(
                CareerEventType.AWARDS, "Golden Boot of Performances",
                f"{name} was named man of the match {stats.man_of_the_match} times.", "high",
            ))

        if stats.team_of_the_week >= TOTW_THRESHOLD:
            events.append(CareerEvent(
                CareerEventType.AWARDS, "Team of the Week Regular",
                f"{name} made the team of the week {stats.team_of_the_week} times.", "normal",
            ))

        is_keeper = player.position.is_goalkeeper if player is not None else stats.position == "GK"
        if is_keeper:
            hit = _milestone(stats.clean_sheets, CLEAN_SHEET_MILESTONES)
            if hit:
                events.append(CareerEvent(
                    CareerEventType.GOALKEEPING, hit[2],
                    f"{name} kept {stats.clean_sheets} clean sheets.", hit[1],
                ))

        logger.debug("Generated %d career events for %s", len(events), name)
        return events
