"""
Team Generator - Creates the six league sides and their squads
"""
from sqlalchemy.orm import Session

from cricsim.generators.player_generator import PlayerGenerator
from cricsim.models.team import Team


# Six league sides, each with its own home ground
LEAGUE_TEAMS = [
    {"name": "Kings", "short_name": "KIN", "city": "Keenjhur", "home_ground": "KCG"},
    {"name": "Stars", "short_name": "STA", "city": "Sargodha", "home_ground": "SG"},
    {"name": "Sixers", "short_name": "SIX", "city": "Taunsa", "home_ground": "TG"},
    {"name": "Gladiators", "short_name": "GLA", "city": "Lakeway", "home_ground": "LWG"},
    {"name": "Eagles", "short_name": "EAG", "city": "Mardan", "home_ground": "MCG"},
    {"name": "Hawks", "short_name": "HAW", "city": "Hangu", "home_ground": "HGG"},
]


class TeamGenerator:
    """Generates the league sides"""

    @classmethod
    def create_teams(cls, user_team_index: int = 0) -> list[Team]:
        """
        Create all league sides with freshly generated squads.

        Args:
            user_team_index: Index of the side the user manages

        Returns:
            List of Team objects (not yet saved to DB)
        """
        teams = []
        for i, team_data in enumerate(LEAGUE_TEAMS):
            team = Team(
                name=team_data["name"],
                short_name=team_data["short_name"],
                city=team_data["city"],
                home_ground=team_data["home_ground"],
                is_user_team=(i == user_team_index),
            )
            team.players = PlayerGenerator.generate_squad()
            teams.append(team)
        return teams

    @classmethod
    def save_teams(cls, session: Session, teams: list[Team]) -> list[Team]:
        """Save teams and their squads, return them with IDs"""
        session.add_all(teams)
        session.commit()
        for team in teams:
            session.refresh(team)
        return teams

    @classmethod
    def get_team_choices(cls) -> list[dict]:
        """Get list of teams for user selection"""
        return [
            {
                "index": i,
                "name": t["name"],
                "short_name": t["short_name"],
                "home_ground": t["home_ground"],
            }
            for i, t in enumerate(LEAGUE_TEAMS)
        ]
