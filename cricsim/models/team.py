from sqlalchemy import String, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import Optional, Sequence
from cricsim.database import Base
from cricsim.engine.formats import MatchFormat
from cricsim.engine.players import TeamView
from cricsim.engine.xi_selector import select_xi


class Team(Base):
    __tablename__ = "teams"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    short_name: Mapped[str] = mapped_column(String(5))
    city: Mapped[str] = mapped_column(String(50))
    home_ground: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)  # Ground code, e.g. "KCG"

    # Is this team controlled by the human player?
    is_user_team: Mapped[bool] = mapped_column(default=False)
    reputation: Mapped[int] = mapped_column(Integer, default=50)

    # Relationships
    players: Mapped[list["Player"]] = relationship("Player", back_populates="team")

    @property
    def squad_size(self) -> int:
        return len(self.players)

    @property
    def foreign_count(self) -> int:
        return sum(1 for p in self.players if p.is_foreign)

    def to_view(self, fmt: MatchFormat, lineup_ids: Optional[Sequence[int]] = None) -> TeamView:
        """
        Engine view of this side. With `lineup_ids` the XI is taken in that
        batting order (unknown ids are dropped and caught by validation);
        otherwise the XI is picked automatically.
        """
        squad = [p.to_view() for p in self.players]
        if lineup_ids is not None:
            by_id = {p.id: p for p in squad}
            lineup = [by_id[pid] for pid in lineup_ids if pid in by_id]
        else:
            lineup = select_xi(squad, fmt)
        return TeamView(id=self.id, name=self.name, lineup=tuple(lineup), home_ground=self.home_ground)

    def __repr__(self):
        return f"<Team {self.name} ({self.short_name})>"
