from typing import Optional
from sqlalchemy import String, Integer, ForeignKey, Enum, DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from datetime import datetime
import json
from cricsim.database import Base
from cricsim.engine.formats import MatchFormat
from cricsim.engine.match_engine import MatchResult


class MatchRecord(Base):
    """A completed match, kept for results and history screens"""
    __tablename__ = "match_records"

    id: Mapped[int] = mapped_column(primary_key=True)
    match_number: Mapped[int] = mapped_column(Integer)
    format: Mapped[MatchFormat] = mapped_column(Enum(MatchFormat))
    group: Mapped[str] = mapped_column(String(30), default="Round-Robin")
    played_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Teams
    home_team_id: Mapped[int] = mapped_column(ForeignKey("teams.id"))
    away_team_id: Mapped[int] = mapped_column(ForeignKey("teams.id"))
    home_team: Mapped["Team"] = relationship("Team", foreign_keys=[home_team_id])
    away_team: Mapped["Team"] = relationship("Team", foreign_keys=[away_team_id])

    # Toss
    toss_winner_id: Mapped[Optional[int]] = mapped_column(ForeignKey("teams.id"), nullable=True)
    toss_decision: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)  # "bat" or "bowl"

    # Result
    winner_id: Mapped[Optional[int]] = mapped_column(ForeignKey("teams.id"), nullable=True)
    is_draw: Mapped[bool] = mapped_column(default=False)
    is_tie: Mapped[bool] = mapped_column(default=False)
    result_summary: Mapped[str] = mapped_column(String(200))
    target: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    motm_player_id: Mapped[Optional[int]] = mapped_column(ForeignKey("players.id"), nullable=True)

    # [{"team_id": 1, "score": 180, "wickets": 6, "overs": "20.0"}, ...]
    innings_json: Mapped[str] = mapped_column(Text, default="[]")

    @property
    def innings(self) -> list:
        try:
            return json.loads(self.innings_json or "[]")
        except json.JSONDecodeError:
            return []

    @classmethod
    def from_result(cls, result: MatchResult) -> "MatchRecord":
        return cls(
            match_number=result.match_number,
            format=result.format,
            group=result.group,
            home_team_id=result.home_team_id,
            away_team_id=result.away_team_id,
            toss_winner_id=result.toss.winner_id if result.toss else None,
            toss_decision=result.toss.decision if result.toss else None,
            winner_id=result.winner_id,
            is_draw=result.is_draw,
            is_tie=result.is_tie,
            result_summary=result.summary,
            target=result.target,
            motm_player_id=result.man_of_the_match.player_id if result.man_of_the_match else None,
            innings_json=json.dumps([
                {
                    "innings_number": inn.innings_number,
                    "team_id": inn.team_id,
                    "score": inn.score,
                    "wickets": inn.wickets,
                    "overs": inn.overs,
                }
                for inn in result.innings
            ]),
        )

    def __repr__(self):
        return f"<MatchRecord #{self.match_number} {self.format.name}: {self.result_summary}>"
