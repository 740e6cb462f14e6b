"""
Tests for the innings state machine.

Run with: pytest tests/test_innings_engine.py -v
"""
import logging
import random

import pytest

from cricsim.engine.ball_model import BallOutcomeModel
from cricsim.engine.formats import MatchFormat, get_format_rules
from cricsim.engine.innings_engine import (
    BattingPerformance, BowlingPerformance, InningsEngine, InningsSimulation, ScoreLimits,
    format_overs, safe_rate,
)
from cricsim.engine.pitch import BALANCED_PITCH, get_pitch
from cricsim.engine.players import PlayerRole, TeamView
from factories import create_inning, create_mock_player, create_test_team

T20 = get_format_rules(MatchFormat.T20)
ODI = get_format_rules(MatchFormat.ODI)
FIRST_CLASS = get_format_rules(MatchFormat.FIRST_CLASS)
PITCH = get_pitch(BALANCED_PITCH)


def run(seed, rules=T20, target=None, limits=None, batting=None, bowling=None, innings_number=1):
    engine = InningsEngine(rng=random.Random(seed))
    return engine.run_innings(
        batting or create_test_team(1, "Home"),
        bowling or create_test_team(2, "Away"),
        rules, target, PITCH, innings_number=innings_number, limits=limits,
    )


class TestOversFormatting:

    @pytest.mark.parametrize("balls,text", [(0, "0.0"), (5, "0.5"), (6, "1.0"), (23, "3.5"), (120, "20.0")])
    def test_format_overs(self, balls, text):
        assert format_overs(balls) == text

    def test_never_renders_six_balls(self):
        for balls in range(0, 600):
            assert not format_overs(balls).endswith(".6")


class TestDerivedRates:
    """Rates are pure functions of the counters, zero denominators give 0"""

    def test_safe_rate(self):
        assert safe_rate(10, 0) == 0
        assert safe_rate(30, 24, 6) == 7.5

    def test_batting_strike_rate(self):
        assert BattingPerformance(1, "A", runs=50, balls=40).strike_rate == 125
        assert BattingPerformance(1, "A").strike_rate == 0

    def test_bowling_economy_and_overs(self):
        spell = BowlingPerformance(1, "B", balls_bowled=23, runs_conceded=23, wickets=2)
        assert spell.overs == "3.5"
        assert spell.economy == pytest.approx(6.0)
        assert spell.figures == "2/23"
        assert BowlingPerformance(1, "B").economy == 0

    def test_inning_run_rate(self):
        assert create_inning(1, "A", 150, 4, balls=120).run_rate == 7.5
        assert create_inning(1, "A", 0, 0, balls=0).run_rate == 0
        assert create_inning(1, "A", 150, 4, balls=120).scoreline == "150/4 (20.0 ov)"
        assert create_inning(1, "A", 99, 10, balls=100).scoreline == "99 (16.4 ov)"


class TestScoreLimits:

    @pytest.mark.parametrize("max_wickets,cap", [(None, 10), (0, 10), (11, 10), (-2, 10), (1, 1), (5, 5), (10, 10)])
    def test_wicket_cap(self, max_wickets, cap):
        assert ScoreLimits(max_wickets=max_wickets).wicket_cap == cap

    def test_run_cap(self):
        assert ScoreLimits().run_cap is None
        assert ScoreLimits(max_runs=0).run_cap is None
        assert ScoreLimits(max_runs=120).run_cap == 120


class TestInningsBounds:
    """Counters stay inside the format's limits and add up"""

    @pytest.mark.parametrize("rules", [T20, ODI, FIRST_CLASS])
    def test_bounds_and_consistency(self, rules):
        for seed in range(15):
            inning = run(seed, rules)
            assert 0 <= inning.balls <= rules.max_balls
            assert 0 <= inning.wickets <= 10
            assert inning.score >= 0
            if inning.wickets < 10:
                assert inning.balls == rules.max_balls

            assert sum(r.runs for r in inning.batting) == inning.score
            assert sum(r.balls for r in inning.batting) == inning.balls
            assert sum(b.runs_conceded for b in inning.bowling) == inning.score
            assert sum(b.balls_bowled for b in inning.bowling) == inning.balls
            assert sum(b.wickets for b in inning.bowling) == inning.wickets
            assert sum(1 for r in inning.batting if r.is_out) == inning.wickets
            assert len(inning.fall_of_wickets) == inning.wickets
            assert sum(p.runs for p in inning.partnerships) == inning.score

    def test_batters_who_came_in(self):
        for seed in range(20):
            inning = run(seed)
            expected = inning.wickets + (1 if inning.is_all_out else 2)
            assert len(inning.batting) == expected

    def test_fall_of_wickets_in_order(self):
        inning = run(3, ODI)
        scores = [w.score for w in inning.fall_of_wickets]
        assert scores == sorted(scores)
        assert [w.wicket for w in inning.fall_of_wickets] == list(range(1, inning.wickets + 1))

    def test_same_seed_same_innings(self):
        assert run(11) == run(11)

    def test_milestone_balls_recorded(self):
        for seed in range(30):
            for row in run(seed, ODI).batting:
                if row.runs >= 50:
                    assert 0 < row.balls_to_fifty <= row.balls
                else:
                    assert row.balls_to_fifty == 0


class TestTermination:

    def test_chase_stops_once_target_passed(self):
        for seed in range(20):
            inning = run(seed, target=40)
            if inning.score > 40:
                # The winning ball is at most a six
                assert inning.score <= 46
            else:
                assert inning.is_all_out or inning.balls == T20.max_balls
            assert inning.target == 40

    def test_run_cap_ends_innings(self):
        for seed in range(10):
            inning = run(seed, limits=ScoreLimits(max_runs=30))
            assert inning.score <= 35
            if inning.score < 30:
                assert inning.is_all_out or inning.balls == T20.max_balls

    def test_wicket_cap_ends_innings(self):
        for seed in range(10):
            inning = run(seed, rules=ODI, limits=ScoreLimits(max_wickets=3))
            assert inning.wickets <= 3
            assert inning.wicket_cap == 3
            if inning.wickets == 3:
                assert inning.is_all_out
                assert len(inning.batting) == 4

    def test_play_ball_after_completion_raises(self):
        sim = InningsEngine(rng=random.Random(1)).start(
            create_test_team(1, "Home"), create_test_team(2, "Away"), T20, PITCH,
            limits=ScoreLimits(max_wickets=1),
        )
        sim.run()
        assert sim.is_complete
        with pytest.raises(RuntimeError):
            sim.play_ball()


class TestBowlerRotation:

    def test_t20_quota_respected_with_enough_bowlers(self):
        for seed in range(15):
            inning = run(seed)
            for spell in inning.bowling:
                assert spell.balls_bowled <= T20.bowler_over_quota * 6

    def test_no_bowler_bowls_consecutive_overs(self):
        sim = InningsEngine(rng=random.Random(5)).start(
            create_test_team(1, "Home"), create_test_team(2, "Away"), ODI, PITCH,
        )
        previous = None
        while not sim.is_complete:
            bowler = sim.current_bowler
            assert bowler != previous
            events = sim.play_over()
            assert all(e.bowler_name == bowler.name for e in events)
            previous = bowler

    def test_quota_relaxed_when_everyone_is_bowled_out(self, caplog):
        sim = InningsSimulation(
            BallOutcomeModel(rng=random.Random(1)), create_test_team(1, "Home"), create_test_team(2, "Away"),
            T20, PITCH,
        )
        for card in sim.bowlers:
            card.balls_bowled = T20.bowler_over_quota * 6
        sim.bowler_index = 2
        with caplog.at_level(logging.INFO, logger="cricsim.engine.innings_engine"):
            assert sim._next_bowler_index() == 3
        assert "relaxing" in caplog.text

    def test_skips_bowlers_at_quota(self):
        sim = InningsSimulation(
            BallOutcomeModel(rng=random.Random(1)), create_test_team(1, "Home"), create_test_team(2, "Away"),
            T20, PITCH,
        )
        sim.bowlers[1].balls_bowled = 24
        sim.bowlers[2].balls_bowled = 24
        sim.bowler_index = 0
        assert sim._next_bowler_index() == 3

    def test_side_without_bowlers_uses_opening_batter(self):
        batters_only = TeamView(
            id=3, name="Batters",
            lineup=tuple(create_mock_player(300 + i, f"Bat{i}", PlayerRole.BATSMAN, 60, 20) for i in range(11)),
        )
        inning = run(2, bowling=batters_only)
        assert len(inning.bowling) == 1
        assert inning.bowling[0].player_id == 300
        assert inning.bowling[0].balls_bowled == inning.balls


class TestBallEvents:

    def test_play_over_ends_at_over_boundary(self):
        sim = InningsEngine(rng=random.Random(9)).start(
            create_test_team(1, "Home"), create_test_team(2, "Away"), T20, PITCH,
            commentary_rng=random.Random(9),
        )
        events = sim.play_over()
        assert 1 <= len(events) <= 6
        last = events[-1]
        assert last.end_of_over or last.innings_complete
        assert [e.ball for e in events] == list(range(1, len(events) + 1))
        for event in events:
            assert event.commentary.startswith(f"{event.bowler_name} to {event.striker_name}:")

    def test_strike_rotates_on_odd_runs(self):
        sim = InningsEngine(rng=random.Random(4)).start(
            create_test_team(1, "Home"), create_test_team(2, "Away"), FIRST_CLASS, PITCH,
        )
        for _ in range(60):
            striker, non_striker = sim.striker, sim.non_striker
            event = sim.play_ball()
            if event.is_wicket or sim.is_complete:
                break
            swapped = (event.runs % 2 == 1) != event.end_of_over
            if swapped:
                assert (sim.striker, sim.non_striker) == (non_striker, striker)
            else:
                assert (sim.striker, sim.non_striker) == (striker, non_striker)

    def test_recent_balls_most_recent_first(self):
        sim = InningsEngine(rng=random.Random(6)).start(
            create_test_team(1, "Home"), create_test_team(2, "Away"), FIRST_CLASS, PITCH,
        )
        labels = [sim.play_ball().label for _ in range(15)]
        assert sim.recent_balls == list(reversed(labels))[:12]

    def test_chasing_state(self):
        sim = InningsEngine(rng=random.Random(1)).start(
            create_test_team(1, "Home"), create_test_team(2, "Away"), T20, PITCH, innings_number=2, target=150,
        )
        assert sim.is_chasing
        assert sim.runs_needed == 151
        assert sim.required_rate == pytest.approx(151 / 20)
