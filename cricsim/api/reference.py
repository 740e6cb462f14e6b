from fastapi import APIRouter

from cricsim.engine.formats import FORMAT_RULES
from cricsim.engine.pitch import GROUNDS, PITCHES
from cricsim.api.schemas import FormatResponse, GroundResponse

router = APIRouter(prefix="/reference", tags=["Reference"])


@router.get("/formats", response_model=list[FormatResponse])
def list_formats():
    return [
        FormatResponse(
            name=rules.format.name,
            display_name=rules.format.value,
            family=rules.family.value,
            max_overs=rules.max_overs,
            bowler_over_quota=rules.bowler_over_quota,
            innings=rules.innings_count,
            points_for_win=rules.points_for_win,
            domestic_only=rules.domestic_only,
        )
        for rules in FORMAT_RULES.values()
    ]


@router.get("/pitches")
def list_pitches():
    return [pitch.to_dict() for pitch in PITCHES.values()]


@router.get("/grounds", response_model=list[GroundResponse])
def list_grounds():
    return [GroundResponse.model_validate(g) for g in GROUNDS.values()]
