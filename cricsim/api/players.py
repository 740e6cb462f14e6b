from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import Optional

from cricsim.database import get_db
from cricsim.engine.errors import UnknownFormatError
from cricsim.engine.formats import get_format_rules
from cricsim.models.player import Player
from cricsim.models.player_format_stats import load_career_stats

router = APIRouter(prefix="/players", tags=["Players"])


@router.get("/{player_id}/stats")
def get_player_stats(player_id: int, format: Optional[str] = None, db: Session = Depends(get_db)):
    """
    Career stats for one player. With `format` only that format is returned,
    otherwise every format played plus an all-formats total.
    """
    player = db.get(Player, player_id)
    if not player:
        raise HTTPException(status_code=404, detail="Player not found")

    career = load_career_stats(db, [player_id])
    if format is not None:
        try:
            fmt = get_format_rules(format).format
        except UnknownFormatError as e:
            raise HTTPException(status_code=422, detail=str(e))
        stats = career.get(player_id, fmt)
        return {**stats.to_dict(), "player_name": player.name}

    by_format = career.for_player(player_id)
    return {
        "player_id": player_id,
        "player_name": player.name,
        "formats": [stats.to_dict() for stats in by_format.values()],
        "overall": {**career.aggregate(player_id).to_dict(), "player_name": player.name},
    }
