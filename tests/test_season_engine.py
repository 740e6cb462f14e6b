"""
Tests for fixtures, the league table, batch simulation and full seasons.
"""
from collections import Counter

import pytest

from cricsim.engine.formats import MatchFormat, get_format_rules
from cricsim.engine.match_engine import Fixture, MatchEngine, MatchResult
from cricsim.engine.season_engine import (
    FINAL, SEMI_FINALS, LeagueTable, SeasonEngine, derive_seed, generate_round_robin, simulate_batch,
)
from factories import create_inning, create_test_team

GROUNDS = ["KCG", "SG", "TG", "LWG", "MCG", "HGG"]


def league(n):
    return [create_test_team(i, f"Team{i}", skill_level=60 + i * 2, home_ground=GROUNDS[i - 1])
            for i in range(1, n + 1)]


def result(home_id, away_id, winner_id, home_score, away_score) -> MatchResult:
    loser_id = None if winner_id is None else (away_id if winner_id == home_id else home_id)
    return MatchResult(
        match_number=1, format=MatchFormat.T20, home_team_id=home_id, away_team_id=away_id,
        innings=(
            create_inning(home_id, "H", home_score, 5, bowling_team_id=away_id),
            create_inning(away_id, "A", away_score, 5, innings_number=2, bowling_team_id=home_id),
        ),
        winner_id=winner_id, loser_id=loser_id, summary="", is_tie=winner_id is None,
    )


class TestRoundRobin:

    @pytest.mark.parametrize("n", [2, 3, 4, 5, 6])
    def test_every_pair_meets_home_and_away(self, n):
        schedule = generate_round_robin(list(range(1, n + 1)))
        assert len(schedule) == n * (n - 1)
        pairs = Counter((m.home_id, m.away_id) for m in schedule)
        assert all(count == 1 for count in pairs.values())
        assert len(pairs) == n * (n - 1)

    def test_nobody_plays_twice_in_a_day(self):
        schedule = generate_round_robin(list(range(1, 7)))
        for day in {m.day for m in schedule}:
            teams = [t for m in schedule if m.day == day for t in (m.home_id, m.away_id)]
            assert len(teams) == len(set(teams))
        assert max(m.day for m in schedule) == 10

    def test_match_numbers_are_sequential(self):
        schedule = generate_round_robin([1, 2, 3, 4])
        assert [m.match_number for m in schedule] == list(range(1, 13))

    def test_empty(self):
        assert generate_round_robin([]) == []


class TestLeagueTable:

    def test_points_and_run_difference(self):
        table = LeagueTable(league(3), get_format_rules(MatchFormat.T20))
        table.record(result(1, 2, 1, 180, 150))
        table.record(result(2, 3, None, 160, 160))
        table.record(result(3, 1, 3, 140, 120))

        rows = {row.team_id: row for row in table.standings()}
        assert (rows[1].won, rows[1].lost, rows[1].points) == (1, 1, 2)
        assert (rows[2].drawn, rows[2].lost, rows[2].points) == (1, 1, 1)
        assert (rows[3].won, rows[3].drawn, rows[3].points) == (1, 1, 3)
        assert rows[1].nrr == (180 + 120) - (150 + 140)
        assert table.positions() == {3: 1, 1: 2, 2: 3}

    def test_multi_day_win_worth_four(self):
        table = LeagueTable(league(2), get_format_rules(MatchFormat.FIRST_CLASS))
        table.record(result(1, 2, 2, 100, 200))
        assert table.standings()[0].points == 4


class TestBatchSimulation:

    def fixtures(self):
        teams = league(4)
        return [
            Fixture(1, teams[0], teams[1], MatchFormat.T20),
            Fixture(2, teams[2], teams[3], MatchFormat.T20),
        ]

    def test_derived_seeds(self):
        assert derive_seed(42, 1) == derive_seed(42, 1)
        assert derive_seed(42, 1) != derive_seed(42, 2)
        assert derive_seed(42, 1) != derive_seed(43, 1)

    def test_matches_individual_runs(self):
        fixtures = self.fixtures()
        results = simulate_batch(fixtures, base_seed=7)
        expected = [MatchEngine(seed=derive_seed(7, f.match_number)).simulate_match(f) for f in fixtures]
        assert results == expected

    def test_process_pool_matches_sequential(self):
        fixtures = self.fixtures()
        assert simulate_batch(fixtures, 7, workers=2) == simulate_batch(fixtures, 7, workers=1)


class TestSeason:

    def test_four_team_season(self):
        engine = SeasonEngine(league(4), MatchFormat.T20, seed=5)
        summary = engine.run()
        assert len(summary.results) == 12 + 2 + 1
        assert [r.group for r in summary.results[12:]] == [SEMI_FINALS, SEMI_FINALS, FINAL]
        semi_winners = {r.winner_id for r in summary.results[12:14]}
        assert summary.champion_id in semi_winners
        assert summary.runner_up_id in semi_winners
        assert [row.position for row in summary.standings] == [1, 2, 3, 4]
        assert all(row.played == 6 for row in summary.standings)
        assert summary.career.records

    def test_knockouts_always_have_a_winner(self):
        summary = SeasonEngine(league(4), MatchFormat.RISE_T20, seed=11).run()
        for r in summary.results[12:]:
            assert r.winner_id is not None

    def test_three_team_season_goes_straight_to_final(self):
        summary = SeasonEngine(league(3), MatchFormat.T20, seed=2).run()
        assert len(summary.results) == 6 + 1
        final = summary.results[-1]
        assert final.group == FINAL
        top_two = {row.team_id for row in summary.standings[:2]}
        assert {final.home_team_id, final.away_team_id} == top_two
        assert final.home_team_id == summary.standings[0].team_id

    def test_same_seed_same_season(self):
        a = SeasonEngine(league(4), MatchFormat.T20, seed=3).run()
        b = SeasonEngine(league(4), MatchFormat.T20, seed=3).run()
        assert a.results == b.results
        assert a.champion_id == b.champion_id

    def test_home_ground_sets_pitch(self):
        engine = SeasonEngine(league(2), MatchFormat.T20, seed=1)
        fixture = engine._fixture(1, 2, 1, "Round-Robin")
        assert fixture.pitch == "Dusty Spinner's Haven"
