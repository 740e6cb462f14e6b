from cricsim.models.player import Player
from cricsim.models.team import Team
from cricsim.models.player_format_stats import PlayerFormatStatsRecord
from cricsim.models.match_record import MatchRecord

__all__ = [
    "Player",
    "Team",
    "PlayerFormatStatsRecord",
    "MatchRecord",
]
