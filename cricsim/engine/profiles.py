"""
Default batting profiles.
One table per format family, keyed by (skill tier, batting style). Every tier
must carry a Neutral entry; tables are validated when they are registered so a
missing fallback fails at import rather than in the middle of a match.
"""
import enum
from typing import Dict, Mapping, Tuple

from cricsim.engine.errors import ProfileTableError
from cricsim.engine.formats import FormatFamily, MatchFormat, get_format_rules
from cricsim.engine.players import BattingProfile, BattingStyle, PlayerView


class Tier(enum.Enum):
    TIER1 = 1  # 80+
    TIER2 = 2  # 65-79
    TIER3 = 3  # 50-64
    TIER4 = 4  # 30-49
    TIER5 = 5  # below 30


def batter_tier(batting_skill: int) -> Tier:
    if batting_skill >= 80:
        return Tier.TIER1
    if batting_skill >= 65:
        return Tier.TIER2
    if batting_skill >= 50:
        return Tier.TIER3
    if batting_skill >= 30:
        return Tier.TIER4
    return Tier.TIER5


ProfileTable = Dict[Tuple[Tier, BattingStyle], BattingProfile]

A, D, N, NA = (BattingStyle.AGGRESSIVE, BattingStyle.DEFENSIVE,
               BattingStyle.NEUTRAL, BattingStyle.NOT_APPLICABLE)


def _table(rows: Mapping[Tier, Mapping[BattingStyle, Tuple[float, float]]]) -> ProfileTable:
    return {
        (tier, style): BattingProfile(average=avg, strike_rate=sr)
        for tier, styles in rows.items()
        for style, (avg, sr) in styles.items()
    }


SHORT_PROFILES = _table({
    Tier.TIER1: {NA: (40, 135), N: (40, 125), D: (30, 110), A: (25, 155)},
    Tier.TIER2: {NA: (32, 125), N: (32, 115), D: (25, 100), A: (22, 140)},
    Tier.TIER3: {NA: (25, 115), N: (25, 105), D: (20, 95), A: (18, 125)},
    Tier.TIER4: {NA: (18, 100), N: (18, 90), D: (15, 85), A: (15, 110)},
    Tier.TIER5: {NA: (12, 85), N: (12, 80), D: (10, 70), A: (10, 95)},
})

LIMITED_PROFILES = _table({
    Tier.TIER1: {NA: (45, 95), N: (45, 90), D: (40, 80), A: (35, 105)},
    Tier.TIER2: {NA: (38, 90), N: (38, 85), D: (32, 75), A: (28, 100)},
    Tier.TIER3: {NA: (30, 85), N: (30, 80), D: (25, 70), A: (22, 90)},
    Tier.TIER4: {NA: (22, 75), N: (22, 70), D: (18, 65), A: (16, 85)},
    Tier.TIER5: {NA: (15, 70), N: (15, 65), D: (12, 60), A: (12, 75)},
})

MULTI_DAY_PROFILES = _table({
    Tier.TIER1: {NA: (45, 55), N: (45, 50), D: (48, 45), A: (40, 65)},
    Tier.TIER2: {NA: (38, 50), N: (38, 45), D: (40, 40), A: (32, 60)},
    Tier.TIER3: {NA: (30, 45), N: (30, 40), D: (32, 38), A: (25, 55)},
    Tier.TIER4: {NA: (22, 40), N: (22, 38), D: (25, 35), A: (18, 48)},
    Tier.TIER5: {NA: (15, 35), N: (15, 32), D: (18, 30), A: (12, 40)},
})


def validate_profile_table(table: ProfileTable) -> ProfileTable:
    """Reject a table unless every tier has a usable Neutral fallback."""
    for tier in Tier:
        fallback = table.get((tier, BattingStyle.NEUTRAL))
        if fallback is None or not fallback.is_usable:
            raise ProfileTableError(f"Batting profile table has no usable Neutral entry for {tier.name}")
    return table


class ProfileBook:
    """Batting profile tables for every format family."""

    def __init__(self, tables: Mapping[FormatFamily, ProfileTable]):
        missing = [fam.value for fam in FormatFamily if fam not in tables]
        if missing:
            raise ProfileTableError(f"No batting profile table for format families: {', '.join(missing)}")
        self._tables = {fam: validate_profile_table(dict(table)) for fam, table in tables.items()}

    def default_profile(self, family: FormatFamily, batting_skill: int, style: BattingStyle) -> BattingProfile:
        table = self._tables[family]
        tier = batter_tier(batting_skill)
        profile = table.get((tier, style))
        if profile is None or not profile.is_usable:
            return table[(tier, BattingStyle.NEUTRAL)]
        return profile

    def resolve(self, player: PlayerView, fmt: MatchFormat) -> BattingProfile:
        """Custom per-format override if valid, else the tier x style default."""
        custom = player.custom_profile(fmt)
        if custom is not None:
            return custom
        family = get_format_rules(fmt).family
        return self.default_profile(family, player.batting, player.style)


DEFAULT_PROFILES = ProfileBook({
    FormatFamily.SHORT: SHORT_PROFILES,
    FormatFamily.LIMITED: LIMITED_PROFILES,
    FormatFamily.MULTI_DAY: MULTI_DAY_PROFILES,
})
