"""
Pydantic schemas for API request/response models
"""
from pydantic import BaseModel, Field
from typing import Optional

from cricsim.engine.ball_model import Strategy
from cricsim.engine.formats import get_format_rules
from cricsim.engine.innings_engine import BallEvent, Inning, ScoreLimits
from cricsim.engine.match_engine import ROUND_ROBIN, MatchResult
from cricsim.engine.players import BattingProfile, BattingStyle, PlayerRole, PlayerView, TeamView


# Lineup Schemas
class BattingProfileIn(BaseModel):
    average: float
    strike_rate: float


class PlayerIn(BaseModel):
    id: int
    name: str
    batting: int = Field(ge=0, le=99)
    bowling: int = Field(ge=0, le=99)
    style: BattingStyle = BattingStyle.NEUTRAL
    role: PlayerRole = PlayerRole.BATSMAN
    is_foreign: bool = False
    is_opener: bool = False
    # Keyed by format name ("T20") or display name
    custom_profiles: dict[str, BattingProfileIn] = {}

    def to_view(self) -> PlayerView:
        profiles = {
            get_format_rules(key).format: BattingProfile(p.average, p.strike_rate)
            for key, p in self.custom_profiles.items()
        }
        return PlayerView(
            id=self.id,
            name=self.name,
            batting=self.batting,
            bowling=self.bowling,
            style=self.style,
            role=self.role,
            is_foreign=self.is_foreign,
            is_opener=self.is_opener,
            custom_profiles=profiles,
        )


class TeamIn(BaseModel):
    id: int
    name: str
    lineup: list[PlayerIn]
    home_ground: Optional[str] = None

    def to_view(self) -> TeamView:
        return TeamView(
            id=self.id,
            name=self.name,
            lineup=tuple(p.to_view() for p in self.lineup),
            home_ground=self.home_ground,
        )


class ScoreLimitsIn(BaseModel):
    max_runs: Optional[int] = None
    max_wickets: Optional[int] = None

    def to_limits(self) -> ScoreLimits:
        return ScoreLimits(max_runs=self.max_runs, max_wickets=self.max_wickets)


class MatchOptions(BaseModel):
    format: str = "T20"
    pitch: Optional[str] = None  # Defaults to the home ground's pitch
    group: str = ROUND_ROBIN
    standings: dict[int, int] = {}  # team id -> league position
    score_limits: dict[int, ScoreLimitsIn] = {}  # innings number -> caps
    toss: bool = False
    seed: Optional[int] = None


class SimulateMatchRequest(MatchOptions):
    home: TeamIn
    away: TeamIn


class TeamMatchRequest(MatchOptions):
    home_lineup: Optional[list[int]] = None  # Player ids in batting order, auto XI if omitted
    away_lineup: Optional[list[int]] = None
    save: bool = True


class LiveMatchRequest(SimulateMatchRequest):
    user_team_id: Optional[int] = None


class TacticsRequest(BaseModel):
    batting: Optional[Strategy] = None
    bowling: Optional[Strategy] = None


# Result Schemas
class BattingRowResponse(BaseModel):
    player_id: int
    player_name: str
    runs: int
    balls: int
    fours: int
    sixes: int
    strike_rate: float
    is_out: bool
    dismissal: str

    class Config:
        from_attributes = True


class BowlingRowResponse(BaseModel):
    player_id: int
    player_name: str
    overs: str
    maidens: int
    runs_conceded: int
    wickets: int
    economy: float

    class Config:
        from_attributes = True


class FallOfWicketResponse(BaseModel):
    score: int
    wicket: int
    over: str
    batter_name: str

    class Config:
        from_attributes = True


class InningResponse(BaseModel):
    innings_number: int
    team_id: int
    team_name: str
    score: int
    wickets: int
    overs: str
    run_rate: float
    target: Optional[int] = None
    batting: list[BattingRowResponse]
    bowling: list[BowlingRowResponse]
    fall_of_wickets: list[FallOfWicketResponse]
    recent_balls: list[str]

    @classmethod
    def from_inning(cls, inning: Inning) -> "InningResponse":
        return cls(
            innings_number=inning.innings_number,
            team_id=inning.team_id,
            team_name=inning.team_name,
            score=inning.score,
            wickets=inning.wickets,
            overs=inning.overs,
            run_rate=round(inning.run_rate, 2),
            target=inning.target,
            batting=[
                BattingRowResponse(
                    player_id=r.player_id, player_name=r.player_name, runs=r.runs, balls=r.balls,
                    fours=r.fours, sixes=r.sixes, strike_rate=round(r.strike_rate, 2),
                    is_out=r.is_out, dismissal=r.dismissal_text,
                )
                for r in inning.batting
            ],
            bowling=[
                BowlingRowResponse(
                    player_id=r.player_id, player_name=r.player_name, overs=r.overs, maidens=r.maidens,
                    runs_conceded=r.runs_conceded, wickets=r.wickets, economy=round(r.economy, 2),
                )
                for r in inning.bowling if r.balls_bowled
            ],
            fall_of_wickets=[FallOfWicketResponse.model_validate(f) for f in inning.fall_of_wickets],
            recent_balls=list(inning.recent_balls),
        )


class ManOfTheMatchResponse(BaseModel):
    player_id: int
    player_name: str
    team_id: Optional[int] = None
    summary: str

    class Config:
        from_attributes = True


class TossResponse(BaseModel):
    winner_id: int
    winner_name: str
    decision: str

    class Config:
        from_attributes = True


class MatchResultResponse(BaseModel):
    match_number: int
    format: str
    home_team_id: int
    away_team_id: int
    winner_id: Optional[int] = None
    loser_id: Optional[int] = None
    is_draw: bool
    is_tie: bool
    summary: str
    target: Optional[int] = None
    man_of_the_match: Optional[ManOfTheMatchResponse] = None
    toss: Optional[TossResponse] = None
    innings: list[InningResponse]

    @classmethod
    def from_result(cls, result: MatchResult) -> "MatchResultResponse":
        return cls(
            match_number=result.match_number,
            format=result.format.value,
            home_team_id=result.home_team_id,
            away_team_id=result.away_team_id,
            winner_id=result.winner_id,
            loser_id=result.loser_id,
            is_draw=result.is_draw,
            is_tie=result.is_tie,
            summary=result.summary,
            target=result.target,
            man_of_the_match=(
                ManOfTheMatchResponse.model_validate(result.man_of_the_match)
                if result.man_of_the_match else None
            ),
            toss=TossResponse.model_validate(result.toss) if result.toss else None,
            innings=[InningResponse.from_inning(i) for i in result.innings],
        )


class BallEventResponse(BaseModel):
    innings_number: int
    ball: int
    label: str
    runs: int
    is_wicket: bool
    score: int
    wickets: int
    overs: str
    striker_name: str
    bowler_name: str
    commentary: str
    end_of_over: bool
    innings_complete: bool

    class Config:
        from_attributes = True

    @classmethod
    def from_event(cls, event: BallEvent) -> "BallEventResponse":
        return cls.model_validate(event)


class LiveStateResponse(BaseModel):
    match_id: int
    innings_number: int
    batting_team_name: Optional[str] = None
    score: int = 0
    wickets: int = 0
    overs: str = "0.0"
    target: Optional[int] = None
    required_rate: Optional[float] = None
    batting_strategy: Optional[Strategy] = None
    bowling_strategy: Optional[Strategy] = None
    recent_balls: list[str] = []
    completed_innings: list[InningResponse] = []
    result: Optional[MatchResultResponse] = None


class BallsResponse(BaseModel):
    events: list[BallEventResponse]
    state: LiveStateResponse


# Reference Schemas
class FormatResponse(BaseModel):
    name: str
    display_name: str
    family: str
    max_overs: int
    bowler_over_quota: Optional[int] = None
    innings: int
    points_for_win: int
    domestic_only: bool


class GroundResponse(BaseModel):
    code: str
    name: str
    pitch: str
    capacity: int
    boundary_size: str

    class Config:
        from_attributes = True
