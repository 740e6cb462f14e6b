from typing import Optional
from sqlalchemy import String, Integer, ForeignKey, Enum, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
import json
from cricsim.database import Base
from cricsim.engine.formats import MatchFormat
from cricsim.engine.players import BattingProfile, BattingStyle, PlayerRole, PlayerView


class Player(Base):
    __tablename__ = "players"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    age: Mapped[int] = mapped_column(Integer)
    nationality: Mapped[str] = mapped_column(String(50))
    is_foreign: Mapped[bool] = mapped_column(default=False)

    # Role and style
    role: Mapped[PlayerRole] = mapped_column(Enum(PlayerRole))
    style: Mapped[BattingStyle] = mapped_column(Enum(BattingStyle), default=BattingStyle.NEUTRAL)
    is_opener: Mapped[bool] = mapped_column(default=False)

    # Core attributes (0-99 scale)
    batting: Mapped[int] = mapped_column(Integer)
    bowling: Mapped[int] = mapped_column(Integer)  # Secondary skill

    # {"Premier T20 League": {"average": 42, "strike_rate": 150}, ...}
    custom_profiles_json: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Team relationship
    team_id: Mapped[Optional[int]] = mapped_column(ForeignKey("teams.id"), nullable=True)
    team: Mapped["Team"] = relationship("Team", back_populates="players")

    @property
    def custom_profiles(self) -> dict:
        """Deserialize per-format batting overrides from JSON. Bad entries are ignored."""
        if not self.custom_profiles_json:
            return {}
        try:
            raw = json.loads(self.custom_profiles_json)
        except (json.JSONDecodeError, TypeError):
            return {}
        profiles = {}
        for fmt in MatchFormat:
            entry = raw.get(fmt.value) if isinstance(raw, dict) else None
            if isinstance(entry, dict):
                profile = BattingProfile(
                    average=float(entry.get("average") or 0),
                    strike_rate=float(entry.get("strike_rate") or 0),
                )
                if profile.is_usable:
                    profiles[fmt] = profile
        return profiles

    @property
    def overall_rating(self) -> int:
        """Calculate overall rating based on role"""
        if self.role == PlayerRole.BATSMAN:
            return self.batting
        elif self.role in (PlayerRole.FAST_BOWLER, PlayerRole.SPIN_BOWLER):
            return self.bowling
        elif self.role == PlayerRole.ALL_ROUNDER:
            return int(self.batting * 0.5 + self.bowling * 0.5)
        elif self.role == PlayerRole.WICKET_KEEPER:
            return int(self.batting * 0.7 + self.bowling * 0.3)
        return 50

    def to_view(self) -> PlayerView:
        return PlayerView(
            id=self.id,
            name=self.name,
            batting=self.batting,
            bowling=self.bowling,
            style=self.style,
            role=self.role,
            is_foreign=self.is_foreign,
            is_opener=self.is_opener,
            custom_profiles=self.custom_profiles,
        )

    def __repr__(self):
        return f"<Player {self.name} ({self.role.value}) - OVR: {self.overall_rating}>"
