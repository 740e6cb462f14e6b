"""
Ball Outcome Model.

Turns a striker, a bowler, the pitch and the format into a probability of a
wicket and a distribution over scoring shots, then samples one delivery.
"""
from __future__ import annotations

import enum
import math
import random
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from cricsim.engine.formats import FormatFamily, FormatRules
from cricsim.engine.pitch import PitchModifier
from cricsim.engine.players import BattingStyle, PlayerRole, PlayerView
from cricsim.engine.profiles import DEFAULT_PROFILES, ProfileBook

MIN_WICKET_PROBABILITY = 0.005
MAX_WICKET_PROBABILITY = 0.5
DEFAULT_WICKET_PROBABILITY = 0.05  # profile with no average

RUN_VALUES: Tuple[int, ...] = (0, 1, 2, 3, 4, 6)

# dot, 1, 2, 3, 4, 6
BASE_DISTRIBUTIONS: Dict[Optional[BattingStyle], Tuple[float, ...]] = {
    BattingStyle.AGGRESSIVE: (0.30, 0.25, 0.10, 0.05, 0.20, 0.10),
    BattingStyle.DEFENSIVE: (0.55, 0.35, 0.05, 0.02, 0.03, 0.00),
    None: (0.45, 0.38, 0.08, 0.02, 0.06, 0.01),
}


class Strategy(enum.Enum):
    DEFENSIVE = "defensive"
    BALANCED = "balanced"
    ATTACKING = "attacking"


# (run multiplier, wicket multiplier)
BATTING_STRATEGY_MODS = {
    Strategy.ATTACKING: (1.4, 1.5),
    Strategy.BALANCED: (1.0, 1.0),
    Strategy.DEFENSIVE: (0.7, 0.6),
}
BOWLING_STRATEGY_MODS = {
    Strategy.ATTACKING: (1.3, 1.2),
    Strategy.BALANCED: (1.0, 1.0),
    Strategy.DEFENSIVE: (0.8, 0.8),
}


@dataclass(frozen=True)
class TacticalState:
    batting: Strategy = Strategy.BALANCED
    bowling: Strategy = Strategy.BALANCED

    @property
    def run_multiplier(self) -> float:
        return BATTING_STRATEGY_MODS[self.batting][0] * BOWLING_STRATEGY_MODS[self.bowling][0]

    @property
    def wicket_multiplier(self) -> float:
        return BATTING_STRATEGY_MODS[self.batting][1] * BOWLING_STRATEGY_MODS[self.bowling][1]


BALANCED = TacticalState()


@dataclass(frozen=True)
class BallResult:
    runs: int = 0
    is_wicket: bool = False
    dismissal_type: str = ""
    wicket_probability: float = 0.0

    @property
    def label(self) -> str:
        return "W" if self.is_wicket else str(self.runs)


def clamp_wicket_probability(p: float) -> float:
    return max(MIN_WICKET_PROBABILITY, min(MAX_WICKET_PROBABILITY, p))


def scoring_distribution(
    style: BattingStyle,
    expected_runs_per_ball: float,
    wicket_probability: float,
) -> Tuple[float, ...]:
    """
    Probabilities for (0, 1, 2, 3, 4, 6) on a non-wicket ball.

    The style's base distribution is rescaled so its expectation matches the
    runs the batter should score per surviving ball. Boundaries scale
    linearly, twos and threes by the square root of the factor, and dots take
    the remainder. A negative remainder comes out of the singles first.
    """
    p_dot, p_1, p_2, p_3, p_4, p_6 = BASE_DISTRIBUTIONS.get(style, BASE_DISTRIBUTIONS[None])

    base_expectation = p_1 + 2 * p_2 + 3 * p_3 + 4 * p_4 + 6 * p_6
    target_expectation = expected_runs_per_ball / (1 - wicket_probability)
    factor = target_expectation / base_expectation if base_expectation > 0 else 1.0

    p_4 *= factor
    p_6 *= factor
    damped = math.sqrt(factor)
    p_2 *= damped
    p_3 *= damped

    p_dot = 1 - (p_1 + p_2 + p_3 + p_4 + p_6)
    if p_dot < 0:
        p_1 = max(0.0, p_1 + p_dot)
        p_dot = 0.0

    probs = (p_dot, p_1, p_2, p_3, p_4, p_6)
    total = sum(probs)
    return tuple(p / total for p in probs)


class BallOutcomeModel:
    """Resolves single deliveries. Holds no match state."""

    def __init__(self, rng: Optional[random.Random] = None, profiles: ProfileBook = DEFAULT_PROFILES):
        self.rng = rng or random.Random()
        self.profiles = profiles

    def expected_runs_per_ball(
        self,
        striker: PlayerView,
        pitch: PitchModifier,
        rules: FormatRules,
        tactics: TacticalState,
        is_chasing: bool,
    ) -> float:
        profile = self.profiles.resolve(striker, rules.format)
        chase = pitch.chase_penalty if is_chasing else 1.0
        return (profile.strike_rate / 100) * chase * tactics.run_multiplier

    def wicket_probability(
        self,
        striker: PlayerView,
        bowler: PlayerView,
        pitch: PitchModifier,
        rules: FormatRules,
        tactics: TacticalState = BALANCED,
        is_chasing: bool = False,
        innings_number: int = 1,
    ) -> float:
        profile = self.profiles.resolve(striker, rules.format)
        expected = self.expected_runs_per_ball(striker, pitch, rules, tactics, is_chasing)
        p = expected / profile.average if profile.average > 0 else DEFAULT_WICKET_PROBABILITY

        p += (bowler.bowling - striker.batting) / 500
        if bowler.role == PlayerRole.FAST_BOWLER:
            p += pitch.pace_bonus / 2
        elif bowler.role == PlayerRole.SPIN_BOWLER:
            p += pitch.spin_bonus / 2
        # Wearing surface in the third and fourth innings of a multi-day game
        if rules.family == FormatFamily.MULTI_DAY and innings_number > 2:
            p += pitch.deterioration * (innings_number - 2) * 0.5

        p *= pitch.for_family(rules.family).wicket_chance
        p *= tactics.wicket_multiplier
        return clamp_wicket_probability(p)

    def resolve_ball(
        self,
        striker: PlayerView,
        bowler: PlayerView,
        pitch: PitchModifier,
        rules: FormatRules,
        tactics: TacticalState = BALANCED,
        is_chasing: bool = False,
        innings_number: int = 1,
    ) -> BallResult:
        expected = self.expected_runs_per_ball(striker, pitch, rules, tactics, is_chasing)
        p_wicket = self.wicket_probability(
            striker, bowler, pitch, rules, tactics, is_chasing, innings_number
        )
        # Unplayable delivery: the surface does something odd
        if pitch.unpredictability > 0 and self.rng.random() < pitch.unpredictability:
            p_wicket = MAX_WICKET_PROBABILITY

        if self.rng.random() < p_wicket:
            return BallResult(runs=0, is_wicket=True, dismissal_type="bowled", wicket_probability=p_wicket)

        probs = scoring_distribution(striker.style, expected, p_wicket)
        roll = self.rng.random()
        cumulative = 0.0
        for runs, p in zip(RUN_VALUES, probs):
            cumulative += p
            if roll < cumulative:
                return BallResult(runs=runs, wicket_probability=p_wicket)
        # Float round-off left the roll past the last bucket
        last = max(i for i, p in enumerate(probs) if p > 0)
        return BallResult(runs=RUN_VALUES[last], wicket_probability=p_wicket)
