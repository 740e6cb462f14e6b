"""
Innings State Machine.

Advances one side's innings a legal ball at a time: score, wickets, strike
rotation, bowler rotation under the per-format over quota, maidens,
partnerships and fall of wickets. An innings ends when the wicket cap is
reached, the overs run out, an optional run cap is hit, or a chasing side
passes the score it has to beat.

Scratch state is mutable while the innings is in progress; the finished
innings is handed out as a frozen `Inning`.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Tuple

from cricsim.engine.ball_model import (
    BALANCED, BallOutcomeModel, BallResult, Strategy, TacticalState,
)
from cricsim.engine.commentary import get_commentary
from cricsim.engine.formats import FormatRules
from cricsim.engine.pitch import PitchModifier
from cricsim.engine.players import PlayerView, TeamView

logger = logging.getLogger(__name__)

MAX_WICKETS = 10
RECENT_BALLS_KEPT = 12


def format_overs(balls: int) -> str:
    """23 balls -> "3.5". Never renders ".6"."""
    return f"{balls // 6}.{balls % 6}"


def safe_rate(numerator: float, denominator: float, scale: float = 1.0) -> float:
    """numerator / denominator * scale, or 0 when the denominator is 0."""
    if not denominator:
        return 0.0
    return numerator / denominator * scale


@dataclass(frozen=True)
class ScoreLimits:
    """Optional caps used to keep background simulations short."""
    max_runs: Optional[int] = None
    max_wickets: Optional[int] = None

    @property
    def wicket_cap(self) -> int:
        if self.max_wickets and 0 < self.max_wickets <= MAX_WICKETS:
            return self.max_wickets
        return MAX_WICKETS

    @property
    def run_cap(self) -> Optional[int]:
        if self.max_runs and self.max_runs > 0:
            return self.max_runs
        return None


NO_LIMITS = ScoreLimits()


@dataclass(frozen=True)
class BattingPerformance:
    player_id: int
    player_name: str
    runs: int = 0
    balls: int = 0
    fours: int = 0
    sixes: int = 0
    is_out: bool = False
    dismissal_text: str = "not out"
    dismissal_type: str = "not out"
    bowler_id: Optional[int] = None
    balls_to_fifty: int = 0
    balls_to_hundred: int = 0

    @property
    def strike_rate(self) -> float:
        return safe_rate(self.runs, self.balls, 100)


@dataclass(frozen=True)
class BowlingPerformance:
    player_id: int
    player_name: str
    balls_bowled: int = 0
    maidens: int = 0
    runs_conceded: int = 0
    wickets: int = 0

    @property
    def overs(self) -> str:
        return format_overs(self.balls_bowled)

    @property
    def economy(self) -> float:
        return safe_rate(self.runs_conceded, self.balls_bowled, 6)

    @property
    def figures(self) -> str:
        return f"{self.wickets}/{self.runs_conceded}"


@dataclass(frozen=True)
class FallOfWicket:
    score: int
    wicket: int
    over: str
    batter_name: str


@dataclass(frozen=True)
class Partnership:
    wicket: int  # the wicket this stand was for, 1-based
    runs: int
    balls: int
    batter_names: Tuple[str, str]
    unbroken: bool = False


@dataclass(frozen=True)
class Inning:
    team_id: int
    team_name: str
    innings_number: int
    score: int
    wickets: int
    balls: int
    batting: Tuple[BattingPerformance, ...]
    bowling: Tuple[BowlingPerformance, ...]
    bowling_team_id: Optional[int] = None
    bowling_team_name: str = ""
    recent_balls: Tuple[str, ...] = ()
    fall_of_wickets: Tuple[FallOfWicket, ...] = ()
    partnerships: Tuple[Partnership, ...] = ()
    target: Optional[int] = None  # score to beat when chasing
    wicket_cap: int = MAX_WICKETS
    extras: int = 0

    @property
    def overs(self) -> str:
        return format_overs(self.balls)

    @property
    def run_rate(self) -> float:
        return safe_rate(self.score, self.balls, 6)

    @property
    def is_all_out(self) -> bool:
        return self.wickets >= self.wicket_cap

    @property
    def scoreline(self) -> str:
        wickets = "" if self.wickets >= MAX_WICKETS else f"/{self.wickets}"
        return f"{self.score}{wickets} ({self.overs} ov)"


@dataclass(frozen=True)
class BallEvent:
    """One delivery, as the live and background UIs consume it"""
    innings_number: int
    ball: int  # legal balls bowled so far in the innings
    label: str
    runs: int
    is_wicket: bool
    score: int
    wickets: int
    overs: str
    striker_name: str
    bowler_name: str
    commentary: str = ""
    end_of_over: bool = False
    innings_complete: bool = False


@dataclass
class _BatterCard:
    player: PlayerView
    runs: int = 0
    balls: int = 0
    fours: int = 0
    sixes: int = 0
    is_out: bool = False
    dismissal_text: str = "not out"
    dismissal_type: str = "not out"
    bowler_id: Optional[int] = None
    balls_to_fifty: int = 0
    balls_to_hundred: int = 0

    def freeze(self) -> BattingPerformance:
        return BattingPerformance(
            player_id=self.player.id,
            player_name=self.player.name,
            runs=self.runs,
            balls=self.balls,
            fours=self.fours,
            sixes=self.sixes,
            is_out=self.is_out,
            dismissal_text=self.dismissal_text,
            dismissal_type=self.dismissal_type,
            bowler_id=self.bowler_id,
            balls_to_fifty=self.balls_to_fifty,
            balls_to_hundred=self.balls_to_hundred,
        )


@dataclass
class _BowlerCard:
    player: PlayerView
    balls_bowled: int = 0
    maidens: int = 0
    runs_conceded: int = 0
    wickets: int = 0

    def freeze(self) -> BowlingPerformance:
        return BowlingPerformance(
            player_id=self.player.id,
            player_name=self.player.name,
            balls_bowled=self.balls_bowled,
            maidens=self.maidens,
            runs_conceded=self.runs_conceded,
            wickets=self.wickets,
        )


@dataclass
class _PartnershipTally:
    runs: int = 0
    balls: int = 0


class InningsSimulation:
    """
    A single innings in progress.

    `play_ball()` advances one legal delivery and returns a `BallEvent`;
    `run()` plays to completion and returns the frozen `Inning`.
    """

    def __init__(
        self,
        model: BallOutcomeModel,
        batting: TeamView,
        bowling: TeamView,
        rules: FormatRules,
        pitch: PitchModifier,
        innings_number: int = 1,
        target: Optional[int] = None,
        limits: Optional[ScoreLimits] = None,
        tactics: TacticalState = BALANCED,
        batting_ai: bool = False,
        bowling_ai: bool = False,
        commentary_rng: Optional[random.Random] = None,
    ):
        self.model = model
        self.batting_team = batting
        self.bowling_team = bowling
        self.rules = rules
        self.pitch = pitch
        self.innings_number = innings_number
        self.target = target
        self.limits = limits or NO_LIMITS
        self.tactics = tactics
        self.batting_ai = batting_ai
        self.bowling_ai = bowling_ai
        self.commentary_rng = commentary_rng

        self.score = 0
        self.wickets = 0
        self.balls = 0
        self.runs_this_over = 0

        self.batters: List[_BatterCard] = [_BatterCard(player=p) for p in batting.lineup]
        self.bowlers: List[_BowlerCard] = [_BowlerCard(player=p) for p in bowling.bowlers]
        self.striker_index = 0
        self.non_striker_index = 1
        self.bowler_index = 0

        self.recent_balls: List[str] = []
        self.fall_of_wickets: List[FallOfWicket] = []
        self.partnerships: List[Partnership] = []
        self.partnership = _PartnershipTally()

    # -- state -------------------------------------------------------------

    @property
    def wicket_cap(self) -> int:
        return self.limits.wicket_cap

    @property
    def is_chasing(self) -> bool:
        return self.target is not None

    @property
    def balls_remaining(self) -> int:
        return self.rules.max_balls - self.balls

    @property
    def runs_needed(self) -> Optional[int]:
        if self.target is None:
            return None
        return max(0, self.target + 1 - self.score)

    @property
    def required_rate(self) -> Optional[float]:
        if self.target is None:
            return None
        return safe_rate(self.runs_needed, self.balls_remaining, 6)

    @property
    def run_rate(self) -> float:
        return safe_rate(self.score, self.balls, 6)

    @property
    def striker(self) -> Optional[PlayerView]:
        if self.striker_index >= len(self.batters):
            return None
        return self.batters[self.striker_index].player

    @property
    def non_striker(self) -> Optional[PlayerView]:
        if self.non_striker_index >= len(self.batters):
            return None
        return self.batters[self.non_striker_index].player

    @property
    def current_bowler(self) -> PlayerView:
        return self.bowlers[self.bowler_index].player

    @property
    def is_complete(self) -> bool:
        if self.balls >= self.rules.max_balls or self.wickets >= self.wicket_cap:
            return True
        if self.target is not None and self.score > self.target:
            return True
        run_cap = self.limits.run_cap
        if run_cap is not None and self.score >= run_cap:
            return True
        # Ran out of batters (short lineups only)
        return self.striker is None or self.non_striker is None

    # -- tactics -----------------------------------------------------------

    def _batting_strategy(self) -> Strategy:
        if self.target is not None and self.balls_remaining > 0:
            rrr = self.required_rate
            if rrr > 8:
                return Strategy.ATTACKING
            if rrr < 4:
                return Strategy.DEFENSIVE
        return Strategy.ATTACKING if self.model.rng.random() > 0.7 else Strategy.BALANCED

    def _bowling_strategy(self) -> Strategy:
        recent_wickets = sum(1 for w in self.fall_of_wickets if w.score > self.score - 20)
        if recent_wickets > 0:
            return Strategy.ATTACKING
        if self.run_rate > 10:
            return Strategy.DEFENSIVE
        return Strategy.BALANCED

    def _current_tactics(self) -> TacticalState:
        if not (self.batting_ai or self.bowling_ai):
            return self.tactics
        batting = self._batting_strategy() if self.batting_ai else self.tactics.batting
        bowling = self._bowling_strategy() if self.bowling_ai else self.tactics.bowling
        self.tactics = TacticalState(batting=batting, bowling=bowling)
        return self.tactics

    # -- transitions -------------------------------------------------------

    def play_ball(self) -> BallEvent:
        if self.is_complete:
            raise RuntimeError("Innings is already complete")

        striker_card = self.batters[self.striker_index]
        bowler_card = self.bowlers[self.bowler_index]
        striker = striker_card.player
        bowler = bowler_card.player

        outcome = self.model.resolve_ball(
            striker, bowler, self.pitch, self.rules,
            tactics=self._current_tactics(),
            is_chasing=self.is_chasing,
            innings_number=self.innings_number,
        )

        self.balls += 1
        striker_card.balls += 1
        bowler_card.balls_bowled += 1
        self.partnership.balls += 1

        if outcome.is_wicket:
            self._record_wicket(striker_card, bowler_card, outcome)
        else:
            self._record_runs(striker_card, bowler_card, outcome.runs)

        self.recent_balls.insert(0, outcome.label)
        del self.recent_balls[RECENT_BALLS_KEPT:]

        end_of_over = self.balls % 6 == 0
        if end_of_over:
            self._end_over(bowler_card)

        commentary = ""
        if self.commentary_rng is not None:
            commentary = get_commentary(outcome.label, striker.name, bowler.name, self.commentary_rng)

        return BallEvent(
            innings_number=self.innings_number,
            ball=self.balls,
            label=outcome.label,
            runs=outcome.runs,
            is_wicket=outcome.is_wicket,
            score=self.score,
            wickets=self.wickets,
            overs=format_overs(self.balls),
            striker_name=striker.name,
            bowler_name=bowler.name,
            commentary=commentary,
            end_of_over=end_of_over,
            innings_complete=self.is_complete,
        )

    def play_over(self) -> List[BallEvent]:
        events = []
        while not self.is_complete:
            event = self.play_ball()
            events.append(event)
            if event.end_of_over:
                break
        return events

    def run(self) -> Inning:
        while not self.is_complete:
            self.play_ball()
        inning = self.to_inning()
        logger.debug(
            "Innings %d: %s %s", self.innings_number, self.batting_team.name, inning.scoreline
        )
        return inning

    def _record_runs(self, card: _BatterCard, bowler_card: _BowlerCard, runs: int) -> None:
        before = card.runs
        card.runs += runs
        if before < 50 <= card.runs and not card.balls_to_fifty:
            card.balls_to_fifty = card.balls
        if before < 100 <= card.runs and not card.balls_to_hundred:
            card.balls_to_hundred = card.balls
        if runs == 4:
            card.fours += 1
        elif runs == 6:
            card.sixes += 1

        self.score += runs
        self.runs_this_over += runs
        bowler_card.runs_conceded += runs
        self.partnership.runs += runs

        if runs % 2 == 1:
            self._swap_strike()

    def _record_wicket(self, card: _BatterCard, bowler_card: _BowlerCard, outcome: BallResult) -> None:
        self.wickets += 1
        card.is_out = True
        card.dismissal_type = outcome.dismissal_type
        card.dismissal_text = f"b {bowler_card.player.name}"
        card.bowler_id = bowler_card.player.id
        bowler_card.wickets += 1

        self.fall_of_wickets.append(FallOfWicket(
            score=self.score,
            wicket=self.wickets,
            over=format_overs(self.balls),
            batter_name=card.player.name,
        ))
        self.partnerships.append(Partnership(
            wicket=self.wickets,
            runs=self.partnership.runs,
            balls=self.partnership.balls,
            batter_names=self._pair_names(),
        ))
        self.partnership = _PartnershipTally()

        if self.wickets < self.wicket_cap:
            # Next man in takes strike, in fixed lineup order
            self.striker_index = max(self.striker_index, self.non_striker_index) + 1

    def _end_over(self, bowler_card: _BowlerCard) -> None:
        if self.runs_this_over == 0:
            bowler_card.maidens += 1
        self.runs_this_over = 0
        self._swap_strike()
        self.bowler_index = self._next_bowler_index()

    def _next_bowler_index(self) -> int:
        """Next bowler in rotation that is under quota, never the one who just bowled."""
        count = len(self.bowlers)
        quota = self.rules.bowler_over_quota
        current = self.bowler_index
        candidate = (current + 1) % count
        if quota is None:
            return candidate

        while self.bowlers[candidate].balls_bowled >= quota * 6:
            candidate = (candidate + 1) % count
            if candidate == current:
                # Everyone else is bowled out, relax the quota for this over
                candidate = (current + 1) % count
                logger.info(
                    "All bowlers of %s at quota, relaxing for over %d",
                    self.bowling_team.name, self.balls // 6 + 1,
                )
                break
        return candidate

    def _swap_strike(self) -> None:
        self.striker_index, self.non_striker_index = self.non_striker_index, self.striker_index

    def _pair_names(self) -> Tuple[str, str]:
        names = []
        for index in (self.striker_index, self.non_striker_index):
            names.append(self.batters[index].player.name if index < len(self.batters) else "")
        return names[0], names[1]

    # -- output ------------------------------------------------------------

    def to_inning(self) -> Inning:
        partnerships = list(self.partnerships)
        if self.wickets < self.wicket_cap and self.partnership.balls:
            partnerships.append(Partnership(
                wicket=self.wickets + 1,
                runs=self.partnership.runs,
                balls=self.partnership.balls,
                batter_names=self._pair_names(),
                unbroken=True,
            ))

        # Batters who came to the crease: everyone dismissed plus the not-out pair
        arrived = self.wickets + (1 if self.wickets >= self.wicket_cap else 2)
        batted = self.batters[:min(len(self.batters), arrived)]

        return Inning(
            team_id=self.batting_team.id,
            team_name=self.batting_team.name,
            innings_number=self.innings_number,
            score=self.score,
            wickets=self.wickets,
            balls=self.balls,
            batting=tuple(card.freeze() for card in batted),
            bowling=tuple(card.freeze() for card in self.bowlers),
            bowling_team_id=self.bowling_team.id,
            bowling_team_name=self.bowling_team.name,
            recent_balls=tuple(self.recent_balls),
            fall_of_wickets=tuple(self.fall_of_wickets),
            partnerships=tuple(partnerships),
            target=self.target,
            wicket_cap=self.wicket_cap,
        )


class InningsEngine:
    """Builds and runs innings against a shared ball model."""

    def __init__(self, model: Optional[BallOutcomeModel] = None, rng: Optional[random.Random] = None):
        self.model = model or BallOutcomeModel(rng=rng)

    def start(
        self,
        batting: TeamView,
        bowling: TeamView,
        rules: FormatRules,
        pitch: PitchModifier,
        innings_number: int = 1,
        target: Optional[int] = None,
        limits: Optional[ScoreLimits] = None,
        **options,
    ) -> InningsSimulation:
        return InningsSimulation(
            self.model, batting, bowling, rules, pitch,
            innings_number=innings_number, target=target, limits=limits, **options,
        )

    def run_innings(
        self,
        batting: TeamView,
        bowling: TeamView,
        rules: FormatRules,
        target: Optional[int],
        pitch: PitchModifier,
        innings_number: int = 1,
        limits: Optional[ScoreLimits] = None,
    ) -> Inning:
        """Simulate a whole innings. `target` is the score to beat, None when setting one."""
        return self.start(batting, bowling, rules, pitch, innings_number, target, limits).run()
