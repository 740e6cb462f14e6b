from typing import Optional, Sequence

from cricsim.engine.errors import LineupError
from cricsim.engine.players import PlayerRole, PlayerView, TeamView

XI_SIZE = 11


class LineupValidator:
    @staticmethod
    def validate(players: Sequence[PlayerView]) -> dict:
        """
        Validate a playing XI.

        Errors (the engine refuses to simulate):
        1. Exactly 11 players
        2. No player listed twice

        Warnings (simulated anyway):
        3. At least 1 wicket keeper
        4. At least 1 bowling option, otherwise the first batter bowls every over
        """
        errors = []
        warnings = []

        if len(players) != XI_SIZE:
            errors.append(f"Must select exactly {XI_SIZE} players, got {len(players)}")

        ids = [p.id for p in players]
        duplicates = sorted({pid for pid in ids if ids.count(pid) > 1})
        if duplicates:
            errors.append(f"Players selected more than once: {duplicates}")

        wk_count = sum(1 for p in players if p.role == PlayerRole.WICKET_KEEPER)
        if wk_count == 0:
            warnings.append("No wicket keeper selected")

        bowling_options = sum(1 for p in players if p.can_bowl)
        if bowling_options == 0:
            warnings.append("No bowling options, the opening batter will bowl")

        return {
            "valid": len(errors) == 0,
            "errors": errors,
            "warnings": warnings,
            "breakdown": {
                "batsmen": sum(1 for p in players if p.role == PlayerRole.BATSMAN),
                "wicket_keepers": wk_count,
                "all_rounders": sum(1 for p in players if p.role == PlayerRole.ALL_ROUNDER),
                "spin_bowlers": sum(1 for p in players if p.role == PlayerRole.SPIN_BOWLER),
                "fast_bowlers": sum(1 for p in players if p.role == PlayerRole.FAST_BOWLER),
                "foreign": sum(1 for p in players if p.is_foreign),
            },
        }

    @classmethod
    def require_valid(cls, team: Optional[TeamView], side: str = "team") -> TeamView:
        """Raise LineupError unless `team` carries a simulatable XI."""
        if team is None:
            raise LineupError(f"Missing team data for {side}")
        report = cls.validate(team.lineup)
        if not report["valid"]:
            raise LineupError(f"Invalid lineup for {team.name}: {'; '.join(report['errors'])}")
        return team
