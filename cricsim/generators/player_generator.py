import random
from typing import Optional

from faker import Faker

from cricsim.engine.players import BattingStyle, PlayerRole
from cricsim.models.player import Player

# Initialize Faker instances - use en_US as fallback for unavailable locales
fake_local = Faker('en_IN')
fake_au = Faker('en_AU')
fake_en = Faker('en_GB')
fake_nz = Faker('en_NZ')
fake_za = Faker('en_US')  # en_ZA not available, using en_US


class PlayerGenerator:
    """Generates fictional cricketers for league squads"""

    LOCAL = ("Local", fake_local)
    FOREIGN_NATIONALITIES = [
        ("Australia", fake_au, 30),
        ("England", fake_en, 30),
        ("New Zealand", fake_nz, 20),
        ("South Africa", fake_za, 20),
    ]

    # Squad composition, 16 players
    SQUAD_ROLES = [
        (PlayerRole.WICKET_KEEPER, 2),
        (PlayerRole.BATSMAN, 5),
        (PlayerRole.ALL_ROUNDER, 3),
        (PlayerRole.FAST_BOWLER, 3),
        (PlayerRole.SPIN_BOWLER, 3),
    ]
    FOREIGN_PER_SQUAD = 3

    # (batting base, bowling base) per role, before variance
    SKILL_BASES = {
        PlayerRole.BATSMAN: (72, 10),
        PlayerRole.WICKET_KEEPER: (66, 5),
        PlayerRole.ALL_ROUNDER: (64, 66),
        PlayerRole.FAST_BOWLER: (18, 78),
        PlayerRole.SPIN_BOWLER: (20, 76),
    }

    STYLE_WEIGHTS = {
        PlayerRole.BATSMAN: [(BattingStyle.NEUTRAL, 50), (BattingStyle.AGGRESSIVE, 30), (BattingStyle.DEFENSIVE, 20)],
        PlayerRole.WICKET_KEEPER: [(BattingStyle.NEUTRAL, 60), (BattingStyle.AGGRESSIVE, 25), (BattingStyle.DEFENSIVE, 15)],
        PlayerRole.ALL_ROUNDER: [(BattingStyle.NEUTRAL, 55), (BattingStyle.AGGRESSIVE, 30), (BattingStyle.DEFENSIVE, 15)],
        PlayerRole.FAST_BOWLER: [(BattingStyle.DEFENSIVE, 60), (BattingStyle.NEUTRAL, 35), (BattingStyle.AGGRESSIVE, 5)],
        PlayerRole.SPIN_BOWLER: [(BattingStyle.NEUTRAL, 55), (BattingStyle.DEFENSIVE, 40), (BattingStyle.AGGRESSIVE, 5)],
    }

    @staticmethod
    def seed(value: int) -> None:
        """Make generated names and attributes reproducible"""
        random.seed(value)
        Faker.seed(value)

    @staticmethod
    def _weighted_choice(choices: list[tuple]):
        """Select from weighted choices [(item, weight), ...]"""
        items = [c[0] for c in choices]
        weights = [c[-1] for c in choices]
        return random.choices(items, weights=weights, k=1)[0]

    @staticmethod
    def _generate_attribute(base: int, variance: int = 12, minimum: int = 1) -> int:
        """Generate an attribute with variance, clamped to the 0-99 skill scale"""
        value = base + random.randint(-variance, variance)
        return max(minimum, min(99, value))

    @classmethod
    def generate_player(cls, role: PlayerRole, foreign: bool = False, opener: Optional[bool] = None) -> Player:
        if foreign:
            nationality, faker_instance = cls._weighted_choice(
                [((name, faker), w) for name, faker, w in cls.FOREIGN_NATIONALITIES]
            )
        else:
            nationality, faker_instance = cls.LOCAL

        bat_base, bowl_base = cls.SKILL_BASES[role]
        # Foreign signings are picked for quality
        boost = 6 if foreign else 0
        batting = cls._generate_attribute(bat_base + boost)
        bowling = cls._generate_attribute(bowl_base + boost)

        if opener is None:
            opener = role in (PlayerRole.BATSMAN, PlayerRole.WICKET_KEEPER) and random.random() < 0.4

        return Player(
            name=faker_instance.name_male(),
            age=random.randint(19, 36),
            nationality=nationality,
            is_foreign=foreign,
            role=role,
            style=cls._weighted_choice(cls.STYLE_WEIGHTS[role]),
            is_opener=opener,
            batting=batting,
            bowling=bowling,
        )

    @classmethod
    def generate_squad(cls) -> list[Player]:
        """A 16-player squad with two guaranteed openers and three foreign players"""
        roles = [role for role, count in cls.SQUAD_ROLES for _ in range(count)]
        foreign_slots = set(random.sample(range(len(roles)), cls.FOREIGN_PER_SQUAD))

        squad = []
        openers_needed = 2
        for i, role in enumerate(roles):
            opener = None
            if role == PlayerRole.BATSMAN and openers_needed > 0:
                opener = True
                openers_needed -= 1
            squad.append(cls.generate_player(role, foreign=i in foreign_slots, opener=opener))
        return squad
