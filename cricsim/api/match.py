import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import Optional

from cricsim.config import settings
from cricsim.database import get_db
from cricsim.engine.errors import ConfigurationError
from cricsim.engine.formats import get_format_rules
from cricsim.engine.match_engine import Fixture, MatchEngine
from cricsim.engine.pitch import get_ground
from cricsim.engine.players import TeamView
from cricsim.engine.stats_aggregator import StatsAggregator
from cricsim.models.match_record import MatchRecord
from cricsim.models.player_format_stats import load_career_stats, store_career_stats
from cricsim.models.team import Team
from cricsim.api.schemas import (
    MatchOptions, MatchResultResponse, SimulateMatchRequest, TeamMatchRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/match", tags=["Match"])


def build_fixture(options: MatchOptions, home: Optional[TeamView], away: Optional[TeamView],
                  match_number: int = 1, toss: Optional[bool] = None) -> Fixture:
    """Fixture from request options; the pitch defaults to the home ground's"""
    rules = get_format_rules(options.format)
    pitch = options.pitch
    if pitch is None:
        pitch = get_ground(home.home_ground).pitch if home and home.home_ground else settings.DEFAULT_PITCH
    return Fixture(
        match_number=match_number,
        home=home,
        away=away,
        format=rules.format,
        pitch=pitch,
        group=options.group,
        standings=dict(options.standings),
        score_limits={n: lim.to_limits() for n, lim in options.score_limits.items()},
        toss=options.toss if toss is None else toss,
    )


def resolve_seed(options: MatchOptions) -> Optional[int]:
    return options.seed if options.seed is not None else settings.DEFAULT_SEED


@router.post("/simulate", response_model=MatchResultResponse)
def simulate_match(request: SimulateMatchRequest):
    """Simulate a match between two inline lineups. Nothing is stored."""
    try:
        fixture = build_fixture(request, request.home.to_view(), request.away.to_view())
        result = MatchEngine(seed=resolve_seed(request)).simulate_match(fixture)
    except ConfigurationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return MatchResultResponse.from_result(result)


@router.post("/teams/{home_id}/vs/{away_id}", response_model=MatchResultResponse)
def simulate_team_match(home_id: int, away_id: int, request: TeamMatchRequest, db: Session = Depends(get_db)):
    """
    Simulate a match between two stored teams. Unless `save` is false the
    result is recorded and folded into the players' career stats.
    """
    home = db.get(Team, home_id)
    away = db.get(Team, away_id)
    if not home or not away:
        raise HTTPException(status_code=404, detail="Team not found")

    try:
        rules = get_format_rules(request.format)
        fixture = build_fixture(
            request,
            home.to_view(rules.format, request.home_lineup),
            away.to_view(rules.format, request.away_lineup),
            match_number=db.query(MatchRecord).count() + 1,
        )
        result = MatchEngine(seed=resolve_seed(request)).simulate_match(fixture, rules)
    except ConfigurationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    if request.save:
        player_ids = {row.player_id for inn in result.innings for row in inn.batting}
        player_ids |= {row.player_id for inn in result.innings for row in inn.bowling}
        career = load_career_stats(db, player_ids)
        career = StatsAggregator.apply_match_result(result, rules.format, career)
        store_career_stats(db, career)
        db.add(MatchRecord.from_result(result))
        db.commit()
        logger.info("Recorded match %d: %s", result.match_number, result.summary)

    return MatchResultResponse.from_result(result)
