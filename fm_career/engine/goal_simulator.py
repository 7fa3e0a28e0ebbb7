"""Goal attribution.

Given how many goals a player scored in a match, decide how each one
happened: body part, location, set piece, special shot type, golazo,
minute and whether it was decisive. The number of attributed goals always
equals the requested count.
"""

import logging
from dataclasses import dataclass, replace
from typing import Optional

from fm_career.config import BalanceConfig
from fm_career.core.models.match import (
    BodyPart,
    GoalDetail,
    GoalLocation,
    GoalRecord,
    MatchSituation,
    SetPieceType,
    SpecialShot,
    fatigue_level,
)
from fm_career.core.models.player import Foot, Player
from fm_career.engine.attribute_resolver import AttributeResolver
from fm_career.engine.capability_analyzer import CapabilityAnalyzer, CapabilityMatrix
from fm_career.engine.random_source import RandomSource, binomial, clamp, weighted_choice

logger = logging.getLogger(__name__)

# Rarest first so common shots never crowd out the cumulative roll
SPECIAL_SHOT_ORDER = (
    SpecialShot.BICYCLE,
    SpecialShot.RABONA,
    SpecialShot.VOLLEY,
    SpecialShot.CHIP,
    SpecialShot.TRIVELA,
    SpecialShot.FINESSE,
    SpecialShot.POWER,
)

OUTSIDE_BOX_SHOT_SCALE = {
    SpecialShot.TRIVELA: 1.5,
    SpecialShot.FINESSE: 1.3,
    SpecialShot.POWER: 1.5,
    SpecialShot.CHIP: 0.3,
    SpecialShot.VOLLEY: 1.2,
}

# Set pieces only allow a few techniques
PENALTY_SHOTS = {SpecialShot.FINESSE: 0.15, SpecialShot.POWER: 0.30, SpecialShot.CHIP: 0.01}
FREE_KICK_SHOTS = {SpecialShot.FINESSE: 0.30, SpecialShot.POWER: 0.20, SpecialShot.TRIVELA: 0.05}


@dataclass(frozen=True)
class _Tendencies:
    """Per-player probabilities shared by every goal in a match."""
    left_weight: float
    right_weight: float
    header_weight: float
    outside_box_chance: float
    flair: float
    special_chances: dict[SpecialShot, float]
    xg_bonus: dict[SpecialShot, float]
    preferred_foot: Foot


class GoalSimulator:
    """Attribute a known number of goals."""

    def __init__(self, config: BalanceConfig, analyzer: Optional[CapabilityAnalyzer] = None):
        self.config = config
        self.goal_config = config.goals
        self.analyzer = analyzer or CapabilityAnalyzer(config)

    def simulate_goals(
        self,
        player: Player,
        goal_count: int,
        shot_count: int,
        situation: MatchSituation,
        rng: RandomSource,
        capabilities: Optional[CapabilityMatrix] = None,
        shots_on_target: Optional[int] = None,
    ) -> GoalDetail:
        """Produce a fully attributed breakdown of ``goal_count`` goals.

        Args:
            player: The scorer
            goal_count: Exact number of goals to attribute
            shot_count: Shots taken; raised to ``goal_count`` if lower
            situation: Home flag, importance and final scoreline
            rng: Random source
            capabilities: Precomputed matrix, analyzed on demand when omitted
            shots_on_target: Known on-target count, sampled when omitted

        Returns:
            GoalDetail whose records number exactly ``goal_count``, with
            ``goal_count <= shots_on_target <= shots``.
        """
        goal_count = max(0, int(goal_count))
        shots = max(int(shot_count), goal_count)
        if shots_on_target is None:
            on_target = goal_count + binomial(rng, shots - goal_count, 0.3)
        else:
            on_target = int(clamp(shots_on_target, goal_count, shots))

        if goal_count == 0:
            return GoalDetail(records=(), shots=shots, shots_on_target=on_target)

        caps = capabilities or self.analyzer.analyze(player)
        tendencies = self._tendencies(player, caps)

        records = [self._attribute_goal(tendencies, rng, situation.fatigue_timeline) for _ in range(goal_count)]
        records.sort(key=lambda r: r.minute)
        records = self._flag_decisive(records, situation, rng)

        detail = GoalDetail(records=tuple(records), shots=shots, shots_on_target=on_target)
        logger.debug(
            "Attributed %d goals for %s: %d headed, %d outside box, %d set pieces",
            goal_count, player.name, detail.headers, detail.outside_box,
            goal_count - detail.open_play,
        )
        return detail

    def _tendencies(self, player: Player, caps: CapabilityMatrix) -> _Tendencies:
        gc = self.goal_config
        balance = self.config.position(player.position)
        resolver = AttributeResolver(player.stats, self.config.capabilities.neutral_default)

        preferred = resolver.preferred_foot().value
        weak = gc.weak_foot_base + resolver.weak_foot().value * gc.weak_foot_step
        if preferred is Foot.BOTH:
            left = right = (gc.preferred_foot_weight + weak) / 2
        elif preferred is Foot.LEFT:
            left, right = gc.preferred_foot_weight, weak
        else:
            left, right = weak, gc.preferred_foot_weight

        heading = resolver.value("heading")
        jumping = resolver.value("jumping")
        height = resolver.height()
        height_mod = 1.0
        if height is not None:
            low, high = gc.height_range
            height_mod = clamp(1 + (height - gc.height_reference) * gc.height_step, low, high)
        header = ((heading * 0.7 + jumping * 0.3) / 100) * gc.header_scale * height_mod
        header *= balance.heading_multiplier * balance.set_piece_weight ** 0.5

        open_play_outside = gc.location.outside / (gc.location.inside + gc.location.outside)
        finishing = max(caps.attacking.finishing_power, 1.0)
        long_shot_ratio = clamp(caps.attacking.long_shot_threat / finishing, 0.6, 1.6)
        style_scale = self.config.style_outside_box.get(player.playing_style or "", 1.0)
        outside = clamp(
            open_play_outside * balance.outside_box_multiplier * style_scale * long_shot_ratio,
            0.02,
            0.6,
        )

        flair = caps.technical.flair
        flair_scale = flair / gc.golazo_flair_reference
        special = {}
        for shot in SpecialShot:
            chance = gc.special_shot_base.get(shot.value, 0.0)
            if shot in (SpecialShot.CHIP, SpecialShot.TRIVELA, SpecialShot.RABONA):
                chance *= flair_scale
            special[shot] = chance

        xg_bonus = {shot: 0.0 for shot in SpecialShot}
        for trait in player.stats.traits:
            for shot_name in gc.special_shot_traits.get(trait.name, []):
                shot = SpecialShot(shot_name)
                special[shot] *= gc.trait_frequency.get(trait.tier, 1.0)
                xg_bonus[shot] += gc.trait_xg_bonus.get(trait.tier, 0.0)

        return _Tendencies(
            left_weight=left,
            right_weight=right,
            header_weight=header,
            outside_box_chance=outside,
            flair=flair,
            special_chances=special,
            xg_bonus=xg_bonus,
            preferred_foot=preferred,
        )

    def _attribute_goal(
        self, t: _Tendencies, rng: RandomSource, fatigue_timeline: tuple[float, ...] = ()
    ) -> GoalRecord:
        gc = self.goal_config
        feet = [(BodyPart.LEFT_FOOT, t.left_weight), (BodyPart.RIGHT_FOOT, t.right_weight)]

        set_piece = SetPieceType.OPEN_PLAY
        if rng.random() < gc.set_piece_probability:
            split = gc.set_piece_split
            set_piece = weighted_choice(rng, [
                (SetPieceType.PENALTY, split.penalty),
                (SetPieceType.FREE_KICK, split.free_kick),
                (SetPieceType.CORNER, split.corner),
            ])

        if set_piece is SetPieceType.PENALTY:
            body = self._strong_foot(t)
            location = GoalLocation.INSIDE_BOX
        elif set_piece is SetPieceType.FREE_KICK:
            body = weighted_choice(rng, feet)
            outside = rng.random() < gc.free_kick_outside_chance
            location = GoalLocation.OUTSIDE_BOX if outside else GoalLocation.INSIDE_BOX
        elif set_piece is SetPieceType.CORNER:
            header = rng.random() < gc.corner_header_chance
            body = BodyPart.HEADER if header else weighted_choice(rng, feet)
            location = GoalLocation.INSIDE_BOX
        else:
            body = weighted_choice(rng, feet + [(BodyPart.HEADER, t.header_weight)])
            if body is BodyPart.HEADER:
                location = GoalLocation.INSIDE_BOX
            elif rng.random() < t.outside_box_chance:
                location = GoalLocation.OUTSIDE_BOX
            else:
                location = GoalLocation.INSIDE_BOX

        special = self._special_shot(t, body, location, set_piece, rng)
        golazo = self._is_golazo(t, location, set_piece, special, rng)
        xg = self._goal_xg(t, body, location, set_piece, special)

        return GoalRecord(
            minute=self._goal_minute(rng, fatigue_timeline),
            body_part=body,
            location=location,
            set_piece=set_piece,
            special_shot=special,
            is_golazo=golazo,
            xg=round(xg, 3),
        )

    @staticmethod
    def _strong_foot(t: _Tendencies) -> BodyPart:
        if t.preferred_foot is Foot.LEFT:
            return BodyPart.LEFT_FOOT
        if t.preferred_foot is Foot.RIGHT:
            return BodyPart.RIGHT_FOOT
        return BodyPart.RIGHT_FOOT if t.right_weight >= t.left_weight else BodyPart.LEFT_FOOT

    def _special_shot(
        self,
        t: _Tendencies,
        body: BodyPart,
        location: GoalLocation,
        set_piece: SetPieceType,
        rng: RandomSource,
    ) -> Optional[SpecialShot]:
        if body is BodyPart.HEADER or set_piece is SetPieceType.CORNER:
            return None

        if set_piece is SetPieceType.PENALTY:
            chances = dict(PENALTY_SHOTS)
        elif set_piece is SetPieceType.FREE_KICK:
            chances = dict(FREE_KICK_SHOTS)
        else:
            chances = dict(t.special_chances)
            if location is GoalLocation.OUTSIDE_BOX:
                for shot, scale in OUTSIDE_BOX_SHOT_SCALE.items():
                    chances[shot] *= scale

        roll = rng.random()
        cumulative = 0.0
        for shot in SPECIAL_SHOT_ORDER:
            cumulative += chances.get(shot, 0.0)
            if roll < cumulative:
                return shot
        return None

    def _is_golazo(
        self,
        t: _Tendencies,
        location: GoalLocation,
        set_piece: SetPieceType,
        special: Optional[SpecialShot],
        rng: RandomSource,
    ) -> bool:
        gc = self.goal_config
        if special is not None and special.value in gc.spectacular_shots:
            return True
        if set_piece is SetPieceType.PENALTY:
            return False
        base = gc.golazo_outside if location is GoalLocation.OUTSIDE_BOX else gc.golazo_inside
        return rng.random() < base * t.flair / gc.golazo_flair_reference

    def _goal_xg(
        self,
        t: _Tendencies,
        body: BodyPart,
        location: GoalLocation,
        set_piece: SetPieceType,
        special: Optional[SpecialShot],
    ) -> float:
        table = self.goal_config.xg
        if set_piece is SetPieceType.PENALTY:
            xg = table.penalty
        elif set_piece is SetPieceType.FREE_KICK:
            xg = table.free_kick
        elif location is GoalLocation.OUTSIDE_BOX:
            xg = table.outside
        elif body is BodyPart.HEADER:
            xg = table.inside_header
        else:
            xg = table.inside_foot

        if special is not None:
            xg *= self.goal_config.special_shot_xg.get(special.value, 1.0)
            xg *= 1 + t.xg_bonus.get(special, 0.0)
        return clamp(xg, 0.01, 0.95)

    def _goal_minute(self, rng: RandomSource, fatigue_timeline: tuple[float, ...] = ()) -> int:
        """Pick a goal minute; a tiring player scores less in later periods."""
        periods = self.goal_config.minute_periods
        damping = self.goal_config.fatigue_minute_damping
        options = [
            (p, p.weight * (1 - damping * fatigue_level(fatigue_timeline, p.start) / 100))
            for p in periods
        ]
        period = weighted_choice(rng, options)
        return rng.randint(period.start, period.end)

    def _flag_decisive(
        self,
        records: list[GoalRecord],
        situation: MatchSituation,
        rng: RandomSource,
    ) -> list[GoalRecord]:
        """Mark at most one game-winner and one equalizer by replaying the match.

        The game-winner is the team goal that took the side one clear of the
        opponent's final tally, when the side won. The equalizer is the last
        of the player's goals that levelled the score.
        """
        player_goals = len(records)
        team_final = max(situation.team_score, player_goals)
        opponent_final = max(0, situation.opponent_score)

        # (minute, tie-break, owner) with owner = player goal index, -1 teammate, -2 opponent
        events = [(record.minute, rng.random(), index) for index, record in enumerate(records)]
        for _ in range(team_final - player_goals):
            events.append((self._goal_minute(rng), rng.random(), -1))
        for _ in range(opponent_final):
            events.append((self._goal_minute(rng), rng.random(), -2))
        events.sort(key=lambda e: (e[0], e[1]))

        team = opponent = 0
        winner: Optional[int] = None
        equalizer: Optional[int] = None
        for _, _, owner in events:
            if owner == -2:
                opponent += 1
                continue
            team += 1
            if owner < 0:
                continue
            if team == opponent:
                equalizer = owner
            if team_final > opponent_final and team == opponent_final + 1:
                winner = owner

        flagged = []
        for index, record in enumerate(records):
            if index == winner or index == equalizer:
                record = replace(
                    record,
                    is_game_winner=index == winner,
                    is_equalizer=index == equalizer,
                )
            flagged.append(record)
        return flagged
