"""
Automatic playing XI selection from a squad.
"""
from typing import List, Sequence, Set

from cricsim.engine.formats import FormatFamily, MatchFormat, get_format_rules
from cricsim.engine.players import PlayerRole, PlayerView

XI_SIZE = 11
OPENERS = 2
KEEPERS = 1

# (batsmen, all-rounders, bowlers) after the openers and keeper
ROLE_TARGETS = {
    FormatFamily.SHORT: (2, 3, 3),
    FormatFamily.LIMITED: (3, 2, 3),
    FormatFamily.MULTI_DAY: (4, 1, 4),
}


def _skill_sum(p: PlayerView) -> int:
    return p.batting + p.bowling


def select_xi(squad: Sequence[PlayerView], fmt: MatchFormat) -> List[PlayerView]:
    """
    Pick a balanced XI in batting order: openers, keeper, batsmen,
    all-rounders, then bowlers, topping up by overall skill.

    Domestic-only formats leave out foreign players unless that would leave
    fewer than eleven, in which case the best eleven of the whole squad play.
    """
    rules = get_format_rules(fmt)
    available = [p for p in squad if not p.is_foreign] if rules.domestic_only else list(squad)
    if len(available) < XI_SIZE:
        return sorted(squad, key=_skill_sum, reverse=True)[:XI_SIZE]

    xi: List[PlayerView] = []
    picked: Set[int] = set()

    def add_from(pool, count: int) -> None:
        added = 0
        for player in pool:
            if added >= count:
                break
            if player.id not in picked:
                xi.append(player)
                picked.add(player.id)
                added += 1

    batsmen, all_rounders, bowlers = ROLE_TARGETS[rules.family]

    add_from(sorted((p for p in available if p.is_opener), key=lambda p: p.batting, reverse=True), OPENERS)
    add_from(sorted((p for p in available if p.role == PlayerRole.WICKET_KEEPER),
                    key=_skill_sum, reverse=True), KEEPERS)
    add_from(sorted((p for p in available if p.role == PlayerRole.BATSMAN),
                    key=lambda p: p.batting, reverse=True), batsmen)
    add_from(sorted((p for p in available if p.role == PlayerRole.ALL_ROUNDER),
                    key=_skill_sum, reverse=True), all_rounders)
    add_from(sorted((p for p in available if p.role in (PlayerRole.FAST_BOWLER, PlayerRole.SPIN_BOWLER)),
                    key=lambda p: p.bowling, reverse=True), bowlers)

    if len(xi) < XI_SIZE:
        add_from(sorted(available, key=_skill_sum, reverse=True), XI_SIZE - len(xi))
    return xi[:XI_SIZE]
