"""
Season Engine - fixtures, league table, knockouts and batch simulation
"""
import logging
import random
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from cricsim.engine.formats import FormatRules, MatchFormat, get_format_rules
from cricsim.engine.match_engine import ROUND_ROBIN, Fixture, MatchEngine, MatchResult
from cricsim.engine.pitch import get_ground
from cricsim.engine.players import TeamView
from cricsim.engine.stats_aggregator import CareerStats, StatsAggregator

logger = logging.getLogger(__name__)

SEMI_FINALS = "Semi-Finals"
FINAL = "Final"


@dataclass(frozen=True)
class ScheduledMatch:
    match_number: int
    home_id: int
    away_id: int
    day: int
    group: str = ROUND_ROBIN


@dataclass
class LeagueStanding:
    """Team standing in league table"""
    team_id: int
    team_name: str
    position: int = 0
    played: int = 0
    won: int = 0
    lost: int = 0
    drawn: int = 0  # ties and draws
    points: int = 0
    runs_for: int = 0
    runs_against: int = 0

    @property
    def nrr(self) -> int:
        """Run difference, used as the tiebreak on points."""
        return self.runs_for - self.runs_against


def generate_round_robin(team_ids: Sequence[int]) -> List[ScheduledMatch]:
    """
    Double round-robin by the circle method: every pair meets twice, home
    and away, and no side plays twice on one match day. An odd number of
    sides gets a bye each day.
    """
    if not team_ids:
        return []
    slots: List[Optional[int]] = list(team_ids)
    if len(slots) % 2:
        slots.append(None)
    n = len(slots)

    first_leg: List[List[Tuple[int, int]]] = []
    for _ in range(n - 1):
        day = []
        for i in range(n // 2):
            home, away = slots[i], slots[n - 1 - i]
            if home is not None and away is not None:
                day.append((home, away))
        first_leg.append(day)
        # Keep the first slot fixed, rotate the rest
        slots.insert(1, slots.pop())

    fixtures = []
    for day_index, day in enumerate(first_leg):
        for home, away in day:
            fixtures.append((day_index + 1, home, away))
    for day_index, day in enumerate(first_leg):
        for home, away in day:
            fixtures.append((n - 1 + day_index + 1, away, home))

    return [
        ScheduledMatch(match_number=i, home_id=home, away_id=away, day=day)
        for i, (day, home, away) in enumerate(fixtures, 1)
    ]


class LeagueTable:
    """Points table for the round-robin stage"""

    def __init__(self, teams: Sequence[TeamView], rules: FormatRules):
        self.rules = rules
        self._rows: Dict[int, LeagueStanding] = {
            t.id: LeagueStanding(team_id=t.id, team_name=t.name) for t in teams
        }

    def record(self, result: MatchResult) -> None:
        home = self._rows[result.home_team_id]
        away = self._rows[result.away_team_id]
        home.played += 1
        away.played += 1

        if result.winner_id is None:
            home.drawn += 1
            away.drawn += 1
            home.points += 1
            away.points += 1
        else:
            winner = self._rows[result.winner_id]
            loser = away if winner is home else home
            winner.won += 1
            winner.points += self.rules.points_for_win
            loser.lost += 1

        for inning in result.innings:
            batting = self._rows.get(inning.team_id)
            bowling = self._rows.get(inning.bowling_team_id)
            if batting is not None:
                batting.runs_for += inning.score
            if bowling is not None:
                bowling.runs_against += inning.score

    def standings(self) -> List[LeagueStanding]:
        """Sorted by points, then NRR"""
        ordered = sorted(self._rows.values(), key=lambda s: (s.points, s.nrr), reverse=True)
        for pos, row in enumerate(ordered, 1):
            row.position = pos
        return ordered

    def positions(self) -> Dict[int, int]:
        return {row.team_id: row.position for row in self.standings()}


def derive_seed(base_seed: int, match_number: int) -> int:
    """Independent, reproducible seed for one match of a batch."""
    return random.Random(base_seed * 1_000_003 + match_number).getrandbits(32)


def _play(fixture: Fixture, seed: int) -> MatchResult:
    return MatchEngine(seed=seed).simulate_match(fixture)


def simulate_batch(fixtures: Sequence[Fixture], base_seed: int, workers: int = 1) -> List[MatchResult]:
    """
    Simulate independent fixtures, in fixture order. With workers > 1 the
    matches fan out over processes; results match a sequential run.
    """
    seeds = [derive_seed(base_seed, f.match_number) for f in fixtures]
    if workers <= 1 or len(fixtures) <= 1:
        return [_play(f, s) for f, s in zip(fixtures, seeds)]

    results: List[Optional[MatchResult]] = [None] * len(fixtures)
    with ProcessPoolExecutor(max_workers=workers) as executor:
        futures = {executor.submit(_play, f, s): i for i, (f, s) in enumerate(zip(fixtures, seeds))}
        for future in as_completed(futures):
            results[futures[future]] = future.result()
    return results


@dataclass
class SeasonSummary:
    format: MatchFormat
    results: List[MatchResult] = field(default_factory=list)
    standings: List[LeagueStanding] = field(default_factory=list)
    champion_id: Optional[int] = None
    runner_up_id: Optional[int] = None
    career: CareerStats = field(default_factory=CareerStats)


class SeasonEngine:
    """
    Plays a whole season for one format: double round-robin, then
    semi-finals (1st v 4th, 2nd v 3rd) and a final.
    """

    def __init__(
        self,
        teams: Sequence[TeamView],
        fmt: MatchFormat,
        seed: Optional[int] = None,
        workers: int = 1,
        career: Optional[CareerStats] = None,
    ):
        self.teams = {t.id: t for t in teams}
        self.rules = get_format_rules(fmt)
        self.seed = seed if seed is not None else random.randrange(2 ** 32)
        self.workers = workers
        self.table = LeagueTable(teams, self.rules)
        self.schedule = generate_round_robin([t.id for t in teams])
        self.summary = SeasonSummary(format=self.rules.format, career=career or CareerStats())

    def _fixture(self, match_number: int, home_id: int, away_id: int, group: str,
                 standings: Optional[Mapping[int, int]] = None) -> Fixture:
        home = self.teams[home_id]
        return Fixture(
            match_number=match_number,
            home=home,
            away=self.teams[away_id],
            format=self.rules.format,
            pitch=get_ground(home.home_ground).pitch,
            group=group,
            standings=dict(standings or {}),
        )

    def _apply(self, results: Sequence[MatchResult], league: bool) -> None:
        for result in results:
            if league:
                self.table.record(result)
            self.summary.career = StatsAggregator.apply_match_result(
                result, self.rules.format, self.summary.career
            )
            self.summary.results.append(result)

    def play_day(self, day: int) -> List[MatchResult]:
        """Simulate every league match scheduled on one match day"""
        fixtures = [
            self._fixture(m.match_number, m.home_id, m.away_id, m.group)
            for m in self.schedule if m.day == day
        ]
        results = simulate_batch(fixtures, self.seed, self.workers)
        self._apply(results, league=True)
        return results

    def play_league(self) -> List[LeagueStanding]:
        days = sorted({m.day for m in self.schedule})
        for day in days:
            self.play_day(day)
        logger.info("League stage complete: %d matches", len(self.schedule))
        self.summary.standings = self.table.standings()
        return self.summary.standings

    def play_knockouts(self) -> Optional[int]:
        standings = self.table.standings()
        positions = self.table.positions()
        next_number = len(self.schedule) + 1

        if len(standings) >= 4:
            semis = [
                self._fixture(next_number, standings[0].team_id, standings[3].team_id, SEMI_FINALS, positions),
                self._fixture(next_number + 1, standings[1].team_id, standings[2].team_id, SEMI_FINALS, positions),
            ]
            semi_results = simulate_batch(semis, self.seed, self.workers)
            self._apply(semi_results, league=False)
            finalists = [r.winner_id for r in semi_results]
            next_number += 2
        elif len(standings) >= 2:
            finalists = [standings[0].team_id, standings[1].team_id]
        else:
            self.summary.champion_id = standings[0].team_id if standings else None
            return self.summary.champion_id

        # The higher-placed finalist hosts
        finalists.sort(key=lambda tid: positions[tid])
        final = self._fixture(next_number, finalists[0], finalists[1], FINAL, positions)
        result = simulate_batch([final], self.seed)[0]
        self._apply([result], league=False)

        self.summary.champion_id = result.winner_id
        self.summary.runner_up_id = result.loser_id
        logger.info("Season complete, champion: %s", self.teams[result.winner_id].name)
        return result.winner_id

    def run(self) -> SeasonSummary:
        self.play_league()
        self.play_knockouts()
        return self.summary
