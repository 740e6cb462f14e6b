"""
Live (ball-by-ball) match mode.

Same orchestration as `MatchEngine.simulate_match`, but advanced one delivery
at a time so a UI can show each ball. The user's side keeps the tactics it
sets; the other side picks its own.
"""
import logging
import random
from typing import List, Optional

from cricsim.engine.ball_model import Strategy, TacticalState
from cricsim.engine.formats import FormatRules
from cricsim.engine.innings_engine import BallEvent, Inning, InningsSimulation
from cricsim.engine.match_engine import Fixture, MatchEngine, MatchResult, MatchSetup, score_to_beat

logger = logging.getLogger(__name__)


class LiveMatch:
    def __init__(
        self,
        fixture: Fixture,
        rules: Optional[FormatRules] = None,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        user_team_id: Optional[int] = None,
    ):
        self.engine = MatchEngine(rng=rng, seed=seed)
        self.setup: MatchSetup = self.engine.prepare(fixture, rules)
        self.user_team_id = user_team_id
        self.commentary_rng = random.Random(self.engine.rng.getrandbits(32))
        self.innings: List[Inning] = []
        self.result: Optional[MatchResult] = None
        self.current: Optional[InningsSimulation] = self._start_innings()

    @property
    def is_complete(self) -> bool:
        return self.result is not None

    @property
    def innings_number(self) -> int:
        return len(self.innings) + (0 if self.is_complete else 1)

    def _start_innings(self) -> InningsSimulation:
        number = len(self.innings) + 1
        batting, bowling = self.setup.sides_for(number)
        return self.engine.innings_engine.start(
            batting, bowling, self.setup.rules, self.setup.pitch,
            innings_number=number,
            target=score_to_beat(self.setup.rules, self.innings),
            limits=self.setup.fixture.score_limits.get(number),
            batting_ai=batting.id != self.user_team_id,
            bowling_ai=bowling.id != self.user_team_id,
            commentary_rng=self.commentary_rng,
        )

    def play_ball(self) -> BallEvent:
        if self.current is None:
            raise RuntimeError("Match is already complete")
        event = self.current.play_ball()
        if self.current.is_complete:
            self._close_innings()
        return event

    def play_over(self) -> List[BallEvent]:
        if self.current is None:
            raise RuntimeError("Match is already complete")
        innings = self.current
        events = innings.play_over()
        if innings.is_complete:
            self._close_innings()
        return events

    def finish(self) -> MatchResult:
        """Play out whatever is left and return the result"""
        while self.current is not None:
            self.current.run()
            self._close_innings()
        return self.result

    def set_tactics(self, batting: Optional[Strategy] = None, bowling: Optional[Strategy] = None) -> TacticalState:
        """Change the user's strategies for the rest of the current innings."""
        if self.current is None:
            raise RuntimeError("Match is already complete")
        tactics = self.current.tactics
        self.current.tactics = TacticalState(
            batting=batting or tactics.batting,
            bowling=bowling or tactics.bowling,
        )
        return self.current.tactics

    def _close_innings(self) -> None:
        inning = self.current.to_inning()
        self.innings.append(inning)
        logger.debug("Innings break: %s %s", inning.team_name, inning.scoreline)
        if len(self.innings) == self.setup.rules.innings_count:
            self.current = None
            self.result = self.engine.build_result(self.setup, self.innings)
        else:
            self.current = self._start_innings()
