"""
Tests for match orchestration: results, targets, Man of the Match and
configuration errors.
"""
import pytest

from cricsim.engine.errors import LineupError, UnknownPitchError
from cricsim.engine.formats import MatchFormat, get_format_rules
from cricsim.engine.innings_engine import ScoreLimits
from cricsim.engine.match_engine import (
    ROUND_ROBIN, Fixture, MatchEngine, batting_impact, bowling_impact, decide_limited_overs,
    decide_multi_day, fourth_innings_target, pick_man_of_the_match, score_to_beat,
)
from cricsim.engine.players import TeamView
from factories import batting_row, bowling_row, create_inning, create_test_team

HOME = create_test_team(1, "Lions")
AWAY = create_test_team(2, "Tigers")


def fixture(fmt=MatchFormat.T20, group=ROUND_ROBIN, standings=None, **kwargs) -> Fixture:
    return Fixture(1, kwargs.pop("home", HOME), kwargs.pop("away", AWAY), fmt,
                   group=group, standings=standings or {}, **kwargs)


class TestLimitedOversResult:

    def test_chasing_side_wins_by_wickets(self):
        first = create_inning(1, "Lions", 150, 7)
        second = create_inning(2, "Tigers", 151, 6, balls=110, innings_number=2)
        decision = decide_limited_overs(first, second, fixture())
        assert decision.winner_id == 2
        assert decision.loser_id == 1
        assert decision.summary == "Tigers won by 4 wickets"
        assert decision.target == 151

    def test_defending_side_wins_by_runs(self):
        first = create_inning(1, "Lions", 180, 5)
        second = create_inning(2, "Tigers", 179, 9, innings_number=2)
        decision = decide_limited_overs(first, second, fixture())
        assert decision.winner_id == 1
        assert decision.summary == "Lions won by 1 run"

    def test_wicket_margin_uses_wicket_cap(self):
        first = create_inning(1, "Lions", 60, 5, wicket_cap=5)
        second = create_inning(2, "Tigers", 61, 4, innings_number=2, wicket_cap=5)
        assert decide_limited_overs(first, second, fixture()).summary == "Tigers won by 1 wicket"

    def test_scores_level_in_league_is_a_tie(self):
        first = create_inning(1, "Lions", 180, 6)
        second = create_inning(2, "Tigers", 180, 8, innings_number=2)
        decision = decide_limited_overs(first, second, fixture(standings={1: 3, 2: 2}))
        assert decision.is_tie
        assert decision.winner_id is None
        assert decision.loser_id is None
        assert decision.summary == "Match Tied"

    def test_scores_level_in_knockout_goes_to_higher_position(self):
        first = create_inning(1, "Lions", 180, 6)
        second = create_inning(2, "Tigers", 180, 8, innings_number=2)
        decision = decide_limited_overs(first, second, fixture(group="Semi-Finals", standings={1: 3, 2: 2}))
        assert decision.is_tie
        assert decision.winner_id == 2
        assert decision.loser_id == 1
        assert decision.summary == "Match Tied (Tigers won on higher league position)"

    def test_knockout_tie_without_standings_goes_to_second_side(self):
        first = create_inning(1, "Lions", 180, 6)
        second = create_inning(2, "Tigers", 180, 8, innings_number=2)
        decision = decide_limited_overs(first, second, fixture(group="Final"))
        assert decision.winner_id == 2
        assert decision.loser_id == 1
        assert decision.summary == "Match Tied (Tigers won on higher league position)"

    def test_unranked_side_loses_to_ranked_side(self):
        first = create_inning(1, "Lions", 180, 6)
        second = create_inning(2, "Tigers", 180, 8, innings_number=2)
        decision = decide_limited_overs(first, second, fixture(group="Final", standings={2: 4}))
        assert decision.winner_id == 2


class TestMultiDayResult:
    """Innings of 300, 250 and 200 leave the fourth innings needing 251"""

    def setup_method(self):
        self.innings = [
            create_inning(1, "Lions", 300, 10, innings_number=1),
            create_inning(2, "Tigers", 250, 10, innings_number=2),
            create_inning(1, "Lions", 200, 10, innings_number=3),
        ]

    def decide(self, score, wickets, group=ROUND_ROBIN, standings=None):
        fourth = create_inning(2, "Tigers", score, wickets, balls=400, innings_number=4)
        return decide_multi_day(self.innings + [fourth],
                                fixture(MatchFormat.FIRST_CLASS, group=group, standings=standings))

    def test_target(self):
        assert fourth_innings_target(self.innings) == 251

    def test_target_never_below_one(self):
        innings = [create_inning(1, "A", 100, 10), create_inning(2, "B", 400, 10), create_inning(1, "A", 50, 10)]
        assert fourth_innings_target(innings) == 1

    def test_successful_chase(self):
        decision = self.decide(251, 4)
        assert decision.winner_id == 2
        assert decision.summary == "Tigers won by 6 wickets"
        assert decision.target == 251

    def test_bowled_out_short(self):
        decision = self.decide(230, 10)
        assert decision.winner_id == 1
        assert decision.loser_id == 2
        assert decision.summary == "Lions won by 20 runs"

    def test_not_out_short_is_a_draw(self):
        decision = self.decide(180, 5)
        assert decision.is_draw
        assert decision.winner_id is None
        assert decision.summary == "Match Drawn"

    def test_bowled_out_level_is_a_tie(self):
        decision = self.decide(250, 10)
        assert decision.is_tie
        assert decision.winner_id is None
        assert decision.summary == "Match Tied"

    def test_knockout_draw_goes_to_higher_position(self):
        decision = self.decide(180, 5, group="Final", standings={1: 2, 2: 1})
        assert decision.is_draw
        assert decision.winner_id == 2
        assert decision.summary == "Match Drawn (Tigers advanced on higher league position)"

    def test_knockout_draw_level_positions_goes_to_chasing_side(self):
        decision = self.decide(180, 5, group="Final", standings={1: 2, 2: 2})
        assert decision.winner_id == 2
        assert decision.loser_id == 1


class TestScoreToBeat:

    def test_limited_overs(self):
        rules = get_format_rules(MatchFormat.T20)
        assert score_to_beat(rules, []) is None
        assert score_to_beat(rules, [create_inning(1, "A", 160, 8)]) == 160

    def test_multi_day(self):
        rules = get_format_rules(MatchFormat.FIRST_CLASS)
        innings = [create_inning(1, "A", 300, 10), create_inning(2, "B", 250, 10), create_inning(1, "A", 200, 10)]
        assert score_to_beat(rules, innings[:1]) is None
        assert score_to_beat(rules, innings[:2]) is None
        assert score_to_beat(rules, innings) == 250


class TestManOfTheMatch:

    def test_impact_weights(self):
        assert batting_impact(batting_row(1, 50, 40), 0, False) == 75
        assert batting_impact(batting_row(1, 100, 80), 1, False) == pytest.approx(120 + 30 + 60)
        assert batting_impact(batting_row(1, 100, 180), 2, True) == 300
        assert bowling_impact(bowling_row(1, 5, 30), 0, False) == 125 + 25 + 50 - 15
        assert bowling_impact(bowling_row(1, 3, 10), 1, False) == 75

    def test_tie_goes_to_last_evaluated(self):
        innings = [
            create_inning(1, "Lions", 160, 8, batting=[batting_row(101, 50, 40, name="Batter")],
                          bowling_team_id=2),
            create_inning(2, "Tigers", 140, 10, innings_number=2, bowling_team_id=1,
                          bowling=[bowling_row(108, 3, 10, name="Bowler")]),
        ]
        motm = pick_man_of_the_match(innings)
        assert motm.player_id == 108
        assert motm.team_id == 1
        assert motm.summary == "3/10 (4.0 ov)"

    def test_equal_batting_rows_last_wins(self):
        innings = [
            create_inning(1, "Lions", 160, 8, batting=[batting_row(101, 40, 30), batting_row(102, 40, 35)]),
            create_inning(2, "Tigers", 100, 10, innings_number=2),
        ]
        assert pick_man_of_the_match(innings).player_id == 102

    def test_multi_day_goes_innings_by_innings(self):
        innings = [
            create_inning(1, "Lions", 300, 10, bowling_team_id=2,
                          bowling=[bowling_row(201, 2, 0, name="Seamer")]),
            create_inning(2, "Tigers", 250, 10, innings_number=2, bowling_team_id=1,
                          batting=[batting_row(202, 40, 70, name="Opener")]),
            create_inning(1, "Lions", 200, 10, innings_number=3, bowling_team_id=2),
            create_inning(2, "Tigers", 180, 5, innings_number=4, bowling_team_id=1),
        ]
        motm = pick_man_of_the_match(innings)
        assert motm.impact == 60
        assert motm.player_id == 202
        assert motm.summary == "40(70)"

    def test_empty_match_has_no_award(self):
        assert pick_man_of_the_match([create_inning(1, "A", 0, 0), create_inning(2, "B", 0, 0)]) is None


class TestSimulateMatch:

    def test_t20_match(self):
        result = MatchEngine(seed=1).simulate_match(fixture())
        first, second = result.innings
        assert first.team_id == HOME.id
        assert second.team_id == AWAY.id
        assert second.target == first.score
        assert result.target == first.score + 1
        if result.winner_id is None:
            assert result.is_tie
        else:
            assert {result.winner_id, result.loser_id} == {HOME.id, AWAY.id}
        assert result.man_of_the_match is not None
        assert sum(i.balls for i in result.innings) <= get_format_rules(MatchFormat.T20).max_ball_resolutions

    def test_first_class_match(self):
        result = MatchEngine(seed=3).simulate_match(fixture(MatchFormat.FIRST_CLASS))
        assert len(result.innings) == 4
        assert [i.team_id for i in result.innings] == [1, 2, 1, 2]
        assert result.target == fourth_innings_target(result.innings)
        assert result.innings[3].target == result.target - 1
        assert not (result.is_draw and result.winner_id is not None)

    def test_same_seed_same_result(self):
        assert MatchEngine(seed=99).simulate_match(fixture()) == MatchEngine(seed=99).simulate_match(fixture())

    def test_toss_decides_batting_order(self):
        for seed in range(6):
            result = MatchEngine(seed=seed).simulate_match(fixture(toss=True))
            toss = result.toss
            assert toss.winner_id in (1, 2)
            if toss.decision == "bat":
                assert result.innings[0].team_id == toss.winner_id
            else:
                assert result.innings[1].team_id == toss.winner_id

    def test_score_limits_apply_per_innings(self):
        limits = {1: ScoreLimits(max_runs=50), 2: ScoreLimits(max_wickets=2)}
        result = MatchEngine(seed=8).simulate_match(fixture(score_limits=limits))
        assert result.innings[0].score <= 56
        assert result.innings[1].wickets <= 2


class TestConfigurationErrors:
    """Bad inputs are rejected before anything is simulated"""

    def test_missing_side(self):
        with pytest.raises(LineupError):
            MatchEngine(seed=1).simulate_match(fixture(away=None))

    def test_short_lineup(self):
        short = TeamView(id=2, name="Ten", lineup=AWAY.lineup[:10])
        with pytest.raises(LineupError, match="exactly 11"):
            MatchEngine(seed=1).simulate_match(fixture(away=short))

    def test_unknown_pitch_leaves_rng_untouched(self):
        engine = MatchEngine(seed=1)
        state = engine.rng.getstate()
        with pytest.raises(UnknownPitchError):
            engine.simulate_match(fixture(pitch="Moon Dust"))
        assert engine.rng.getstate() == state
