"""
Builders for engine values used across the test suite.
"""
from typing import Optional

from cricsim.engine.innings_engine import BattingPerformance, BowlingPerformance, Inning
from cricsim.engine.players import BattingStyle, PlayerRole, PlayerView, TeamView


def create_mock_player(
    id: int,
    name: str,
    role: PlayerRole,
    batting: int = 70,
    bowling: int = 30,
    style: BattingStyle = BattingStyle.NEUTRAL,
    is_foreign: bool = False,
    is_opener: bool = False,
) -> PlayerView:
    """Create a mock player for testing"""
    return PlayerView(
        id=id,
        name=name,
        batting=batting,
        bowling=bowling,
        style=style,
        role=role,
        is_foreign=is_foreign,
        is_opener=is_opener,
    )


def create_test_team(team_id: int = 1, name: str = "Home XI", skill_level: int = 70,
                     home_ground: Optional[str] = None) -> TeamView:
    """Create a test team with 11 players and six bowling options"""
    base = team_id * 100
    players = [
        create_mock_player(base + 1, f"{name} Opener1", PlayerRole.BATSMAN, skill_level + 10, 10, is_opener=True),
        create_mock_player(base + 2, f"{name} Opener2", PlayerRole.BATSMAN, skill_level + 5, 10, is_opener=True),
        create_mock_player(base + 3, f"{name} Batter3", PlayerRole.BATSMAN, skill_level + 8, 15,
                           BattingStyle.AGGRESSIVE),
        create_mock_player(base + 4, f"{name} Batter4", PlayerRole.BATSMAN, skill_level, 15,
                           BattingStyle.DEFENSIVE),
        create_mock_player(base + 5, f"{name} Keeper", PlayerRole.WICKET_KEEPER, skill_level - 5, 5),
        create_mock_player(base + 6, f"{name} Allrounder1", PlayerRole.ALL_ROUNDER, skill_level, skill_level),
        create_mock_player(base + 7, f"{name} Allrounder2", PlayerRole.ALL_ROUNDER, skill_level - 5, skill_level + 5),
        create_mock_player(base + 8, f"{name} Quick1", PlayerRole.FAST_BOWLER, 20, skill_level + 10,
                           BattingStyle.DEFENSIVE),
        create_mock_player(base + 9, f"{name} Quick2", PlayerRole.FAST_BOWLER, 15, skill_level + 8,
                           BattingStyle.DEFENSIVE),
        create_mock_player(base + 10, f"{name} Spinner1", PlayerRole.SPIN_BOWLER, 18, skill_level + 5),
        create_mock_player(base + 11, f"{name} Spinner2", PlayerRole.SPIN_BOWLER, 12, skill_level + 3),
    ]
    return TeamView(id=team_id, name=name, lineup=tuple(players), home_ground=home_ground)


def create_inning(team_id: int, team_name: str, score: int, wickets: int, balls: int = 120,
                  innings_number: int = 1, bowling_team_id: Optional[int] = None,
                  wicket_cap: int = 10, batting=(), bowling=()) -> Inning:
    """A finished innings with only the totals filled in"""
    return Inning(
        team_id=team_id,
        team_name=team_name,
        innings_number=innings_number,
        score=score,
        wickets=wickets,
        balls=balls,
        batting=tuple(batting),
        bowling=tuple(bowling),
        bowling_team_id=bowling_team_id,
        wicket_cap=wicket_cap,
    )


def batting_row(player_id: int, runs: int, balls: int, is_out: bool = True, name: str = "",
                balls_to_fifty: int = 0, balls_to_hundred: int = 0) -> BattingPerformance:
    return BattingPerformance(
        player_id=player_id,
        player_name=name or f"Batter {player_id}",
        runs=runs,
        balls=balls,
        is_out=is_out,
        dismissal_text="b Someone" if is_out else "not out",
        balls_to_fifty=balls_to_fifty,
        balls_to_hundred=balls_to_hundred,
    )


def bowling_row(player_id: int, wickets: int, runs: int, balls: int = 24, maidens: int = 0,
                name: str = "") -> BowlingPerformance:
    return BowlingPerformance(
        player_id=player_id,
        player_name=name or f"Bowler {player_id}",
        balls_bowled=balls,
        maidens=maidens,
        runs_conceded=runs,
        wickets=wickets,
    )
