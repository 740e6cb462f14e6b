"""
Simulation views of players and teams.
The engine only ever sees these frozen values, never the ORM rows.
"""
import enum
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from cricsim.engine.formats import MatchFormat


class PlayerRole(enum.Enum):
    BATSMAN = "batsman"
    WICKET_KEEPER = "wicket_keeper"
    ALL_ROUNDER = "all_rounder"
    SPIN_BOWLER = "spin_bowler"
    FAST_BOWLER = "fast_bowler"


class BattingStyle(enum.Enum):
    AGGRESSIVE = "A"
    DEFENSIVE = "D"
    NEUTRAL = "N"
    NOT_APPLICABLE = "NA"


BOWLING_ROLES = frozenset({PlayerRole.FAST_BOWLER, PlayerRole.SPIN_BOWLER, PlayerRole.ALL_ROUNDER})


@dataclass(frozen=True)
class BattingProfile:
    """Target batting average and strike rate"""
    average: float
    strike_rate: float

    @property
    def is_usable(self) -> bool:
        return self.average > 0 and self.strike_rate > 0


@dataclass(frozen=True)
class PlayerView:
    id: int
    name: str
    batting: int  # 0-99
    bowling: int  # 0-99, the "secondary" skill
    style: BattingStyle = BattingStyle.NEUTRAL
    role: PlayerRole = PlayerRole.BATSMAN
    is_foreign: bool = False
    is_opener: bool = False
    custom_profiles: Dict[MatchFormat, BattingProfile] = field(default_factory=dict, compare=False, hash=False)

    @property
    def can_bowl(self) -> bool:
        return self.role in BOWLING_ROLES

    def custom_profile(self, fmt: MatchFormat) -> Optional[BattingProfile]:
        profile = self.custom_profiles.get(fmt)
        if profile is not None and profile.is_usable:
            return profile
        return None


@dataclass(frozen=True)
class TeamView:
    """A side as the engine receives it: a fixed, ordered playing XI."""
    id: int
    name: str
    lineup: Tuple[PlayerView, ...]
    home_ground: Optional[str] = None

    @property
    def bowlers(self) -> Tuple[PlayerView, ...]:
        """Bowling-eligible players in lineup order; the first player bowls if nobody else can."""
        eligible = tuple(p for p in self.lineup if p.can_bowl)
        if not eligible and self.lineup:
            return (self.lineup[0],)
        return eligible

    def player(self, player_id: int) -> Optional[PlayerView]:
        return next((p for p in self.lineup if p.id == player_id), None)
