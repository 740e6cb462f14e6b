from fastapi import APIRouter, HTTPException
from typing import Dict
import itertools

from cricsim.engine.errors import ConfigurationError
from cricsim.engine.innings_engine import format_overs
from cricsim.engine.live_match import LiveMatch
from cricsim.api.match import build_fixture, resolve_seed
from cricsim.api.schemas import (
    BallEventResponse, BallsResponse, InningResponse, LiveMatchRequest, LiveStateResponse,
    MatchResultResponse, TacticsRequest,
)

router = APIRouter(prefix="/live", tags=["Live Match"])

# In-memory store for active matches
active_matches: Dict[int, LiveMatch] = {}
_match_ids = itertools.count(1)


def _release_if_complete(match_id: int, match: LiveMatch):
    # the response already carries the result
    if match.is_complete:
        active_matches.pop(match_id, None)


def _get_match(match_id: int) -> LiveMatch:
    match = active_matches.get(match_id)
    if match is None:
        raise HTTPException(status_code=404, detail="Live match not found")
    return match


def _state(match_id: int, match: LiveMatch) -> LiveStateResponse:
    state = LiveStateResponse(
        match_id=match_id,
        innings_number=match.innings_number,
        completed_innings=[InningResponse.from_inning(i) for i in match.innings],
    )
    innings = match.current
    if innings is not None:
        state.batting_team_name = innings.batting_team.name
        state.score = innings.score
        state.wickets = innings.wickets
        state.overs = format_overs(innings.balls)
        state.target = innings.target
        state.required_rate = round(innings.required_rate, 2) if innings.required_rate is not None else None
        state.batting_strategy = innings.tactics.batting
        state.bowling_strategy = innings.tactics.bowling
        state.recent_balls = list(innings.recent_balls)
    if match.result is not None:
        state.result = MatchResultResponse.from_result(match.result)
    return state


@router.post("", response_model=LiveStateResponse)
def start_live_match(request: LiveMatchRequest):
    try:
        fixture = build_fixture(request, request.home.to_view(), request.away.to_view())
        match = LiveMatch(fixture, seed=resolve_seed(request), user_team_id=request.user_team_id)
    except ConfigurationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    match_id = next(_match_ids)
    active_matches[match_id] = match
    return _state(match_id, match)


@router.get("/{match_id}", response_model=LiveStateResponse)
def get_live_state(match_id: int):
    return _state(match_id, _get_match(match_id))


@router.post("/{match_id}/ball", response_model=BallsResponse)
def play_ball(match_id: int):
    match = _get_match(match_id)
    if match.is_complete:
        raise HTTPException(status_code=400, detail="Match is already complete")
    event = match.play_ball()
    response = BallsResponse(events=[BallEventResponse.from_event(event)], state=_state(match_id, match))
    _release_if_complete(match_id, match)
    return response


@router.post("/{match_id}/over", response_model=BallsResponse)
def play_over(match_id: int):
    match = _get_match(match_id)
    if match.is_complete:
        raise HTTPException(status_code=400, detail="Match is already complete")
    events = match.play_over()
    response = BallsResponse(events=[BallEventResponse.from_event(e) for e in events], state=_state(match_id, match))
    _release_if_complete(match_id, match)
    return response


@router.post("/{match_id}/finish", response_model=LiveStateResponse)
def finish_match(match_id: int):
    match = _get_match(match_id)
    match.finish()
    state = _state(match_id, match)
    _release_if_complete(match_id, match)
    return state


@router.put("/{match_id}/tactics", response_model=LiveStateResponse)
def set_tactics(match_id: int, request: TacticsRequest):
    match = _get_match(match_id)
    if match.is_complete:
        raise HTTPException(status_code=400, detail="Match is already complete")
    match.set_tactics(batting=request.batting, bowling=request.bowling)
    return _state(match_id, match)


@router.delete("/{match_id}")
def abandon_match(match_id: int):
    _get_match(match_id)
    del active_matches[match_id]
    return {"deleted": match_id}
