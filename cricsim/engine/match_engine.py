"""
Match Orchestrator.

Runs the innings a format needs, decides the result and picks a Man of the
Match. Limited-overs games are one innings per side; multi-day games are two
innings per side with the fourth-innings chase set from the first three.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Sequence, Tuple

from cricsim.engine.ball_model import BallOutcomeModel
from cricsim.engine.formats import FormatRules, MatchFormat, get_format_rules
from cricsim.engine.innings_engine import (
    BattingPerformance, BowlingPerformance, Inning, InningsEngine, ScoreLimits,
)
from cricsim.engine.pitch import BALANCED_PITCH, PitchModifier, get_pitch
from cricsim.engine.players import TeamView
from cricsim.engine.profiles import DEFAULT_PROFILES, ProfileBook
from cricsim.validators.lineup_validator import LineupValidator

logger = logging.getLogger(__name__)

ROUND_ROBIN = "Round-Robin"


@dataclass(frozen=True)
class Fixture:
    """Everything the orchestrator needs to play one match"""
    match_number: int
    home: Optional[TeamView]
    away: Optional[TeamView]
    format: MatchFormat
    pitch: str = BALANCED_PITCH
    group: str = ROUND_ROBIN
    # team id -> league position, 1 is top
    standings: Mapping[int, int] = field(default_factory=dict, compare=False, hash=False)
    # innings number -> caps, for quick background games
    score_limits: Mapping[int, ScoreLimits] = field(default_factory=dict, compare=False, hash=False)
    toss: bool = False

    @property
    def is_knockout(self) -> bool:
        return self.group != ROUND_ROBIN

    def standing(self, team_id: int) -> float:
        """League position, unranked sides count as bottom."""
        return self.standings.get(team_id, float("inf"))


@dataclass(frozen=True)
class TossResult:
    winner_id: int
    winner_name: str
    decision: str  # "bat" or "bowl"


@dataclass(frozen=True)
class ManOfTheMatch:
    player_id: int
    player_name: str
    team_id: Optional[int]
    impact: float
    summary: str


@dataclass(frozen=True)
class MatchResult:
    match_number: int
    format: MatchFormat
    home_team_id: int
    away_team_id: int
    innings: Tuple[Inning, ...]
    winner_id: Optional[int]
    loser_id: Optional[int]
    summary: str
    is_draw: bool = False
    is_tie: bool = False
    target: Optional[int] = None  # runs the final innings needed to win
    man_of_the_match: Optional[ManOfTheMatch] = None
    toss: Optional[TossResult] = None
    group: str = ROUND_ROBIN

    @property
    def is_multi_innings(self) -> bool:
        return len(self.innings) == 4


@dataclass(frozen=True)
class Decision:
    winner_id: Optional[int]
    loser_id: Optional[int]
    summary: str
    is_draw: bool = False
    is_tie: bool = False
    target: Optional[int] = None


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def _by_position(fixture: Fixture, first_id: int, second_id: int) -> Tuple[int, int]:
    """(higher placed, lower placed). Level or unranked pairs go to the second side."""
    if fixture.standing(first_id) < fixture.standing(second_id):
        return first_id, second_id
    return second_id, first_id


def decide_limited_overs(first: Inning, second: Inning, fixture: Fixture) -> Decision:
    target = first.score + 1
    if second.score > first.score:
        margin = second.wicket_cap - second.wickets
        return Decision(second.team_id, first.team_id,
                        f"{second.team_name} won by {_plural(margin, 'wicket')}", target=target)
    if first.score > second.score:
        margin = first.score - second.score
        return Decision(first.team_id, second.team_id,
                        f"{first.team_name} won by {_plural(margin, 'run')}", target=target)

    if not fixture.is_knockout:
        return Decision(None, None, "Match Tied", is_tie=True, target=target)
    winner_id, loser_id = _by_position(fixture, first.team_id, second.team_id)
    winner_name = first.team_name if winner_id == first.team_id else second.team_name
    return Decision(winner_id, loser_id, f"Match Tied ({winner_name} won on higher league position)",
                    is_tie=True, target=target)


def fourth_innings_target(innings: Sequence[Inning]) -> int:
    """Runs the side batting last needs to win, never less than 1."""
    first, second, third = innings[0], innings[1], innings[2]
    return max(1, first.score + third.score - second.score + 1)


def decide_multi_day(innings: Sequence[Inning], fixture: Fixture) -> Decision:
    target = fourth_innings_target(innings)
    fourth = innings[3]
    defending_id = innings[2].team_id
    defending_name = innings[2].team_name

    if fourth.score >= target:
        margin = fourth.wicket_cap - fourth.wickets
        return Decision(fourth.team_id, defending_id,
                        f"{fourth.team_name} won by {_plural(margin, 'wicket')}", target=target)

    if fourth.is_all_out:
        margin = target - 1 - fourth.score
        if margin > 0:
            return Decision(defending_id, fourth.team_id,
                            f"{defending_name} won by {_plural(margin, 'run')}", target=target)
        outcome, verb, flag = "Match Tied", "won", {"is_tie": True}
    else:
        outcome, verb, flag = "Match Drawn", "advanced", {"is_draw": True}

    if not fixture.is_knockout:
        return Decision(None, None, outcome, target=target, **flag)
    winner_id, loser_id = _by_position(fixture, defending_id, fourth.team_id)
    winner_name = defending_name if winner_id == defending_id else fourth.team_name
    return Decision(winner_id, loser_id, f"{outcome} ({winner_name} {verb} on higher league position)",
                    target=target, **flag)


# Man of the Match weights

def batting_impact(row: BattingPerformance, innings_index: int, multi_day: bool) -> float:
    """Impact of one batting row. innings_index is 0-based."""
    runs = row.runs
    if multi_day:
        score = runs * 1.5
        if runs >= 50:
            score += 50
        if runs >= 100:
            score += 100
        if runs >= 200:
            score += 100
        return score
    if innings_index == 0:
        score = float(runs)
        if runs >= 50:
            score += 25
        if runs >= 100:
            score += 50
        return score
    # Chasing knocks count for a little more
    score = runs * 1.2
    if runs >= 50:
        score += 30
    if runs >= 100:
        score += 60
    return score


def bowling_impact(row: BowlingPerformance, innings_index: int, multi_day: bool) -> float:
    wickets = row.wickets
    if multi_day:
        score = wickets * 30.0
        if wickets >= 3:
            score += 30
        if wickets >= 5:
            score += 75
        if wickets >= 8:
            score += 100
    elif innings_index == 0:
        score = wickets * 25.0
        if wickets >= 3:
            score += 25
        if wickets >= 5:
            score += 50
    else:
        score = wickets * 20.0
        if wickets >= 3:
            score += 20
        if wickets >= 5:
            score += 40
    return score - row.runs_conceded * 0.5


def pick_man_of_the_match(innings: Sequence[Inning]) -> Optional[ManOfTheMatch]:
    """
    Highest impact performance. Two-innings games score every batting row,
    then every bowling row; multi-day games go innings by innings, batting
    before bowling. A later performance that equals the best so far replaces it.
    """
    multi_day = len(innings) == 4
    candidates: List[Tuple[str, int, Inning]] = []
    if multi_day:
        for index, inning in enumerate(innings):
            candidates += [("bat", index, inning), ("bowl", index, inning)]
    else:
        candidates += [("bat", index, inning) for index, inning in enumerate(innings)]
        candidates += [("bowl", index, inning) for index, inning in enumerate(innings)]

    best: Optional[ManOfTheMatch] = None
    for kind, index, inning in candidates:
        if kind == "bat":
            for row in inning.batting:
                impact = batting_impact(row, index, multi_day)
                if best is None or impact >= best.impact:
                    best = ManOfTheMatch(row.player_id, row.player_name, inning.team_id, impact,
                                         f"{row.runs}({row.balls})")
        else:
            for row in inning.bowling:
                impact = bowling_impact(row, index, multi_day)
                if best is None or impact >= best.impact:
                    best = ManOfTheMatch(row.player_id, row.player_name, inning.bowling_team_id, impact,
                                         f"{row.figures} ({row.overs} ov)")
    return best


def score_to_beat(rules: FormatRules, innings: Sequence[Inning]) -> Optional[int]:
    """
    Score the next innings has to pass, or None when it is not a chase.
    `innings` are the ones already completed.
    """
    number = len(innings) + 1
    if number == rules.innings_count:
        if rules.is_multi_innings:
            return fourth_innings_target(innings) - 1
        return innings[0].score
    return None


def decide(rules: FormatRules, innings: Sequence[Inning], fixture: Fixture) -> Decision:
    if rules.is_multi_innings:
        return decide_multi_day(innings, fixture)
    return decide_limited_overs(innings[0], innings[1], fixture)


@dataclass(frozen=True)
class MatchSetup:
    """Validated sides and conditions for one match"""
    fixture: Fixture
    rules: FormatRules
    pitch: PitchModifier
    home: TeamView
    away: TeamView
    batting_first: TeamView
    bowling_first: TeamView
    toss: Optional[TossResult] = None

    def sides_for(self, innings_number: int) -> Tuple[TeamView, TeamView]:
        """(batting, bowling) for an innings, sides alternate."""
        if innings_number % 2:
            return self.batting_first, self.bowling_first
        return self.bowling_first, self.batting_first


class MatchEngine:
    """Plays whole matches with one seeded random source."""

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        profiles: ProfileBook = DEFAULT_PROFILES,
    ):
        self.rng = rng or random.Random(seed)
        self.innings_engine = InningsEngine(model=BallOutcomeModel(rng=self.rng, profiles=profiles))

    def toss(self, home: TeamView, away: TeamView) -> Tuple[TossResult, TeamView, TeamView]:
        """Returns the toss and the sides in batting order."""
        winner, loser = (home, away) if self.rng.random() < 0.5 else (away, home)
        decision = "bat" if self.rng.random() < 0.5 else "bowl"
        toss = TossResult(winner.id, winner.name, decision)
        if decision == "bat":
            return toss, winner, loser
        return toss, loser, winner

    def prepare(self, fixture: Fixture, rules: Optional[FormatRules] = None) -> MatchSetup:
        """Validate the fixture. Raises ConfigurationError subclasses, never simulates a bad side."""
        home = LineupValidator.require_valid(fixture.home, "home side")
        away = LineupValidator.require_valid(fixture.away, "away side")
        rules = rules or get_format_rules(fixture.format)
        pitch = get_pitch(fixture.pitch)

        toss = None
        first, second = home, away
        if fixture.toss:
            toss, first, second = self.toss(home, away)
        return MatchSetup(fixture, rules, pitch, home, away, first, second, toss)

    def build_result(self, setup: MatchSetup, innings: Sequence[Inning]) -> MatchResult:
        fixture = setup.fixture
        decision = decide(setup.rules, innings, fixture)
        result = MatchResult(
            match_number=fixture.match_number,
            format=setup.rules.format,
            home_team_id=setup.home.id,
            away_team_id=setup.away.id,
            innings=tuple(innings),
            winner_id=decision.winner_id,
            loser_id=decision.loser_id,
            summary=decision.summary,
            is_draw=decision.is_draw,
            is_tie=decision.is_tie,
            target=decision.target,
            man_of_the_match=pick_man_of_the_match(innings),
            toss=setup.toss,
            group=fixture.group,
        )
        logger.debug("Match %d (%s): %s", fixture.match_number, setup.rules.format.value, result.summary)
        return result

    def simulate_match(self, fixture: Fixture, rules: Optional[FormatRules] = None) -> MatchResult:
        setup = self.prepare(fixture, rules)
        innings: List[Inning] = []
        for number in range(1, setup.rules.innings_count + 1):
            batting, bowling = setup.sides_for(number)
            innings.append(self.innings_engine.run_innings(
                batting, bowling, setup.rules, score_to_beat(setup.rules, innings), setup.pitch,
                innings_number=number, limits=fixture.score_limits.get(number),
            ))
        return self.build_result(setup, innings)
