"""
Persisted career counters, one row per player per format
"""
from dataclasses import fields
from typing import Iterable, Optional
from sqlalchemy import Integer, ForeignKey, Enum, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, Session
from cricsim.database import Base
from cricsim.engine.formats import MatchFormat
from cricsim.engine.stats_aggregator import CareerStats, PlayerFormatStats

# Counter columns shared one-to-one with the engine record
COUNTER_FIELDS = tuple(
    f.name for f in fields(PlayerFormatStats) if f.name not in ("player_id", "format", "player_name")
)


class PlayerFormatStatsRecord(Base):
    __tablename__ = "player_format_stats"
    __table_args__ = (UniqueConstraint("player_id", "format", name="uq_player_format"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    player_id: Mapped[int] = mapped_column(ForeignKey("players.id"))
    player: Mapped["Player"] = relationship("Player")
    player_name: Mapped[str] = mapped_column(String(100), default="")
    format: Mapped[MatchFormat] = mapped_column(Enum(MatchFormat))

    # Batting
    matches: Mapped[int] = mapped_column(Integer, default=0)
    runs: Mapped[int] = mapped_column(Integer, default=0)
    balls_faced: Mapped[int] = mapped_column(Integer, default=0)
    dismissals: Mapped[int] = mapped_column(Integer, default=0)
    highest_score: Mapped[int] = mapped_column(Integer, default=0)
    highest_not_out: Mapped[bool] = mapped_column(default=False)
    hundreds: Mapped[int] = mapped_column(Integer, default=0)
    fifties: Mapped[int] = mapped_column(Integer, default=0)
    thirties: Mapped[int] = mapped_column(Integer, default=0)
    fours: Mapped[int] = mapped_column(Integer, default=0)
    sixes: Mapped[int] = mapped_column(Integer, default=0)
    fastest_fifty: Mapped[int] = mapped_column(Integer, default=0)  # balls, 0 = none
    fastest_hundred: Mapped[int] = mapped_column(Integer, default=0)

    # Bowling
    wickets: Mapped[int] = mapped_column(Integer, default=0)
    runs_conceded: Mapped[int] = mapped_column(Integer, default=0)
    balls_bowled: Mapped[int] = mapped_column(Integer, default=0)
    maidens: Mapped[int] = mapped_column(Integer, default=0)
    three_wicket_hauls: Mapped[int] = mapped_column(Integer, default=0)
    five_wicket_hauls: Mapped[int] = mapped_column(Integer, default=0)
    best_wickets: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    best_runs: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    motm_awards: Mapped[int] = mapped_column(Integer, default=0)

    def to_engine(self) -> PlayerFormatStats:
        values = {name: getattr(self, name) for name in COUNTER_FIELDS}
        # Column defaults only apply on flush
        values = {k: (0 if v is None and k not in ("best_wickets", "best_runs") else v) for k, v in values.items()}
        return PlayerFormatStats(player_id=self.player_id, format=self.format,
                                 player_name=self.player_name or "", **values)

    def update_from(self, stats: PlayerFormatStats) -> None:
        self.player_name = stats.player_name
        for name in COUNTER_FIELDS:
            setattr(self, name, getattr(stats, name))

    def __repr__(self):
        return f"<PlayerFormatStats player={self.player_id} {self.format.name}: {self.runs} runs, {self.wickets} wkts>"


def load_career_stats(session: Session, player_ids: Optional[Iterable[int]] = None) -> CareerStats:
    query = session.query(PlayerFormatStatsRecord)
    if player_ids is not None:
        query = query.filter(PlayerFormatStatsRecord.player_id.in_(list(player_ids)))
    return CareerStats(records={(row.player_id, row.format): row.to_engine() for row in query.all()})


def store_career_stats(session: Session, career: CareerStats) -> None:
    """Upsert every record in `career`. The caller commits."""
    existing = {
        (row.player_id, row.format): row
        for row in session.query(PlayerFormatStatsRecord).filter(
            PlayerFormatStatsRecord.player_id.in_(sorted({pid for pid, _ in career.records}))
        ).all()
    }
    for (player_id, fmt), stats in career.records.items():
        row = existing.get((player_id, fmt))
        if row is None:
            row = PlayerFormatStatsRecord(player_id=player_id, format=fmt)
            session.add(row)
        row.update_from(stats)
