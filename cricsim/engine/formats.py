"""
Match formats and the rules each one plays under.
"""
import enum
from dataclasses import dataclass
from typing import Optional, Union

from cricsim.engine.errors import UnknownFormatError


class FormatFamily(enum.Enum):
    SHORT = "short"          # T20
    LIMITED = "limited"      # One-day / List-A
    MULTI_DAY = "multi_day"  # First-class


class MatchFormat(enum.Enum):
    T20 = "Premier T20 League"
    ODI = "Premier One-Day Cup"
    FIRST_CLASS = "Premier First-Class Shield"
    DEVELOPMENT_T20 = "Development T20 Cup"
    DEVELOPMENT_ODI = "Development List-A Cup"
    DEVELOPMENT_FIRST_CLASS = "Development First-Class Cup"
    RISE_T20 = "Rise T20 Cup"
    RISE_ODI = "Rise List-A Cup"
    RISE_FIRST_CLASS = "Rise First-Class Cup"


@dataclass(frozen=True)
class FormatRules:
    """Rules an innings and a match are played under"""
    format: MatchFormat
    family: FormatFamily
    max_overs: int
    bowler_over_quota: Optional[int]  # None = unlimited
    is_multi_innings: bool
    points_for_win: int
    domestic_only: bool = False  # Foreign players excluded from the auto XI

    @property
    def max_balls(self) -> int:
        return self.max_overs * 6

    @property
    def innings_count(self) -> int:
        return 4 if self.is_multi_innings else 2

    @property
    def max_ball_resolutions(self) -> int:
        """Upper bound on deliveries for a whole match"""
        return self.max_balls * self.innings_count


def _short(fmt: MatchFormat) -> FormatRules:
    return FormatRules(fmt, FormatFamily.SHORT, max_overs=20, bowler_over_quota=4,
                       is_multi_innings=False, points_for_win=2)


def _limited(fmt: MatchFormat) -> FormatRules:
    return FormatRules(fmt, FormatFamily.LIMITED, max_overs=50, bowler_over_quota=10,
                       is_multi_innings=False, points_for_win=2, domestic_only=True)


def _multi_day(fmt: MatchFormat) -> FormatRules:
    return FormatRules(fmt, FormatFamily.MULTI_DAY, max_overs=90, bowler_over_quota=None,
                       is_multi_innings=True, points_for_win=4, domestic_only=True)


FORMAT_RULES: dict[MatchFormat, FormatRules] = {
    MatchFormat.T20: _short(MatchFormat.T20),
    MatchFormat.DEVELOPMENT_T20: _short(MatchFormat.DEVELOPMENT_T20),
    MatchFormat.RISE_T20: _short(MatchFormat.RISE_T20),
    MatchFormat.ODI: _limited(MatchFormat.ODI),
    MatchFormat.DEVELOPMENT_ODI: _limited(MatchFormat.DEVELOPMENT_ODI),
    MatchFormat.RISE_ODI: _limited(MatchFormat.RISE_ODI),
    MatchFormat.FIRST_CLASS: _multi_day(MatchFormat.FIRST_CLASS),
    MatchFormat.DEVELOPMENT_FIRST_CLASS: _multi_day(MatchFormat.DEVELOPMENT_FIRST_CLASS),
    MatchFormat.RISE_FIRST_CLASS: _multi_day(MatchFormat.RISE_FIRST_CLASS),
}


def get_format_rules(fmt: Union[MatchFormat, str]) -> FormatRules:
    """Look up rules by enum, enum name ("T20") or display value."""
    if isinstance(fmt, MatchFormat):
        return FORMAT_RULES[fmt]
    for candidate in MatchFormat:
        if fmt in (candidate.name, candidate.value):
            return FORMAT_RULES[candidate]
    raise UnknownFormatError(str(fmt))
