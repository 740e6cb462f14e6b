"""
Stats Aggregator.

Folds a finished match into per-player, per-format career records. The fold
is pure: it returns a new `CareerStats` and leaves the one passed in alone.
It is not idempotent, so apply each completed match exactly once.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, Mapping, Optional, Tuple

from cricsim.engine.formats import MatchFormat
from cricsim.engine.innings_engine import BattingPerformance, BowlingPerformance, safe_rate
from cricsim.engine.match_engine import MatchResult


def is_better_figures(wickets: int, runs: int, best_wickets: Optional[int], best_runs: Optional[int]) -> bool:
    """More wickets, or as many wickets for fewer runs."""
    if best_wickets is None or best_runs is None:
        return True
    if wickets != best_wickets:
        return wickets > best_wickets
    return runs < best_runs


def _fewer_balls(candidate: int, current: int) -> int:
    """Fastest-milestone tracking; 0 means never reached."""
    if not candidate:
        return current
    if not current:
        return candidate
    return min(candidate, current)


@dataclass(frozen=True)
class PlayerFormatStats:
    player_id: int
    format: Optional[MatchFormat]  # None for the all-formats view
    player_name: str = ""

    # Batting
    matches: int = 0
    runs: int = 0
    balls_faced: int = 0
    dismissals: int = 0
    highest_score: int = 0
    highest_not_out: bool = False
    hundreds: int = 0
    fifties: int = 0
    thirties: int = 0
    fours: int = 0
    sixes: int = 0
    fastest_fifty: int = 0
    fastest_hundred: int = 0

    # Bowling
    wickets: int = 0
    runs_conceded: int = 0
    balls_bowled: int = 0
    maidens: int = 0
    three_wicket_hauls: int = 0
    five_wicket_hauls: int = 0
    best_wickets: Optional[int] = None
    best_runs: Optional[int] = None

    motm_awards: int = 0

    @property
    def average(self) -> float:
        if self.dismissals == 0:
            return float(self.runs)
        return self.runs / self.dismissals

    @property
    def strike_rate(self) -> float:
        return safe_rate(self.runs, self.balls_faced, 100)

    @property
    def bowling_average(self) -> float:
        if self.wickets == 0:
            return float(self.runs_conceded)
        return self.runs_conceded / self.wickets

    @property
    def economy(self) -> float:
        return safe_rate(self.runs_conceded, self.balls_bowled, 6)

    @property
    def best_figures(self) -> str:
        if self.best_wickets is None:
            return "-"
        return f"{self.best_wickets}/{self.best_runs}"

    @property
    def highest_score_display(self) -> str:
        return f"{self.highest_score}{'*' if self.highest_not_out else ''}"

    def with_batting(self, row: BattingPerformance) -> "PlayerFormatStats":
        runs = row.runs
        highest, highest_not_out = self.highest_score, self.highest_not_out
        if runs > highest or (runs == highest and not row.is_out and not highest_not_out):
            highest, highest_not_out = runs, not row.is_out

        return replace(
            self,
            player_name=self.player_name or row.player_name,
            matches=self.matches + 1,
            runs=self.runs + runs,
            balls_faced=self.balls_faced + row.balls,
            dismissals=self.dismissals + (1 if row.is_out else 0),
            highest_score=highest,
            highest_not_out=highest_not_out,
            hundreds=self.hundreds + (1 if runs >= 100 else 0),
            fifties=self.fifties + (1 if 50 <= runs < 100 else 0),
            thirties=self.thirties + (1 if 30 <= runs < 50 else 0),
            fours=self.fours + row.fours,
            sixes=self.sixes + row.sixes,
            fastest_fifty=_fewer_balls(row.balls_to_fifty, self.fastest_fifty),
            fastest_hundred=_fewer_balls(row.balls_to_hundred, self.fastest_hundred),
        )

    def with_bowling(self, row: BowlingPerformance) -> "PlayerFormatStats":
        best_wickets, best_runs = self.best_wickets, self.best_runs
        if is_better_figures(row.wickets, row.runs_conceded, best_wickets, best_runs):
            best_wickets, best_runs = row.wickets, row.runs_conceded

        return replace(
            self,
            player_name=self.player_name or row.player_name,
            wickets=self.wickets + row.wickets,
            runs_conceded=self.runs_conceded + row.runs_conceded,
            balls_bowled=self.balls_bowled + row.balls_bowled,
            maidens=self.maidens + row.maidens,
            five_wicket_hauls=self.five_wicket_hauls + (1 if row.wickets >= 5 else 0),
            three_wicket_hauls=self.three_wicket_hauls + (1 if 3 <= row.wickets < 5 else 0),
            best_wickets=best_wickets,
            best_runs=best_runs,
        )

    def to_dict(self) -> dict:
        return {
            "player_id": self.player_id,
            "player_name": self.player_name,
            "format": self.format.value if self.format else "All",
            "batting": {
                "matches": self.matches,
                "runs": self.runs,
                "balls_faced": self.balls_faced,
                "dismissals": self.dismissals,
                "highest_score": self.highest_score_display,
                "average": round(self.average, 2),
                "strike_rate": round(self.strike_rate, 2),
                "hundreds": self.hundreds,
                "fifties": self.fifties,
                "thirties": self.thirties,
                "fours": self.fours,
                "sixes": self.sixes,
                "fastest_fifty": self.fastest_fifty or None,
                "fastest_hundred": self.fastest_hundred or None,
            },
            "bowling": {
                "wickets": self.wickets,
                "runs_conceded": self.runs_conceded,
                "balls_bowled": self.balls_bowled,
                "maidens": self.maidens,
                "average": round(self.bowling_average, 2),
                "economy": round(self.economy, 2),
                "best_figures": self.best_figures,
                "three_wicket_hauls": self.three_wicket_hauls,
                "five_wicket_hauls": self.five_wicket_hauls,
            },
            "motm_awards": self.motm_awards,
        }


StatsKey = Tuple[int, MatchFormat]


@dataclass(frozen=True)
class CareerStats:
    """Career records keyed by (player id, format)."""
    records: Mapping[StatsKey, PlayerFormatStats] = field(default_factory=dict)

    def get(self, player_id: int, fmt: MatchFormat) -> PlayerFormatStats:
        return self.records.get((player_id, fmt)) or PlayerFormatStats(player_id=player_id, format=fmt)

    def for_player(self, player_id: int) -> Dict[MatchFormat, PlayerFormatStats]:
        return {fmt: stats for (pid, fmt), stats in self.records.items() if pid == player_id}

    def aggregate(self, player_id: int) -> PlayerFormatStats:
        """One record summing the player's career across every format."""
        return combine_formats(player_id, self.for_player(player_id).values())


def combine_formats(player_id: int, records: Iterable[PlayerFormatStats]) -> PlayerFormatStats:
    total = PlayerFormatStats(player_id=player_id, format=None)
    summed = (
        "matches", "runs", "balls_faced", "dismissals", "hundreds", "fifties", "thirties",
        "fours", "sixes", "wickets", "runs_conceded", "balls_bowled", "maidens",
        "three_wicket_hauls", "five_wicket_hauls", "motm_awards",
    )
    for rec in records:
        changes = {name: getattr(total, name) + getattr(rec, name) for name in summed}
        changes["player_name"] = total.player_name or rec.player_name

        if rec.highest_score > total.highest_score or (
                rec.highest_score == total.highest_score and rec.highest_not_out):
            changes["highest_score"] = rec.highest_score
            changes["highest_not_out"] = rec.highest_not_out
        changes["fastest_fifty"] = _fewer_balls(rec.fastest_fifty, total.fastest_fifty)
        changes["fastest_hundred"] = _fewer_balls(rec.fastest_hundred, total.fastest_hundred)

        if rec.best_wickets is not None and is_better_figures(
                rec.best_wickets, rec.best_runs, total.best_wickets, total.best_runs):
            changes["best_wickets"] = rec.best_wickets
            changes["best_runs"] = rec.best_runs
        total = replace(total, **changes)
    return total


class StatsAggregator:
    @staticmethod
    def apply_match_result(result: MatchResult, fmt: MatchFormat, career: CareerStats) -> CareerStats:
        """Return `career` with one completed match folded in."""
        records = dict(career.records)

        def current(player_id: int) -> PlayerFormatStats:
            return records.get((player_id, fmt)) or PlayerFormatStats(player_id=player_id, format=fmt)

        for inning in result.innings:
            for row in inning.batting:
                records[(row.player_id, fmt)] = current(row.player_id).with_batting(row)
            for row in inning.bowling:
                if not row.balls_bowled:
                    continue
                records[(row.player_id, fmt)] = current(row.player_id).with_bowling(row)

        motm = result.man_of_the_match
        if motm is not None:
            stats = current(motm.player_id)
            records[(motm.player_id, fmt)] = replace(
                stats,
                player_name=stats.player_name or motm.player_name,
                motm_awards=stats.motm_awards + 1,
            )
        return CareerStats(records=records)
