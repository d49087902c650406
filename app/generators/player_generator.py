import random
from typing import NamedTuple, Optional
from faker import Faker
from app.models.player import Player, PlayerPosition, SKILL_ATTRIBUTES

# Initialize Faker instances - Danish league, with some international names
fake_dk = Faker('da_DK')
fake_en = Faker('en_GB')


class AttributeRange(NamedTuple):
    """Half-open range [low, high) for uniformly drawn skill values"""
    low: int
    high: int


GK = PlayerPosition.GOALKEEPER
DEF = PlayerPosition.DEFENDER
MID = PlayerPosition.MIDFIELDER
ATT = PlayerPosition.ATTACKER

# Fixed position templates by roster size (roster index -> position)
SQUAD_TEMPLATES: dict[int, list[PlayerPosition]] = {
    16: [GK] * 2 + [DEF] * 5 + [MID] * 5 + [ATT] * 4,
    11: [GK] + [DEF] * 4 + [MID] * 3 + [ATT] * 3,
}

# Skill bonuses added on top of the drawn value, before clamping
POSITION_BONUSES: dict[PlayerPosition, dict[str, int]] = {
    PlayerPosition.GOALKEEPER: {"reflexes": 10, "defending": 5},
    PlayerPosition.DEFENDER: {"defending": 10, "stamina": 5},
    PlayerPosition.MIDFIELDER: {"passing": 10, "stamina": 5},
    PlayerPosition.ATTACKER: {"shooting": 10, "speed": 5},
}

_missing = set(PlayerPosition) - set(POSITION_BONUSES)
if _missing:
    raise RuntimeError(f"POSITION_BONUSES has no entry for {sorted(p.value for p in _missing)}")


def position_template(roster_size: int) -> list[PlayerPosition]:
    try:
        return list(SQUAD_TEMPLATES[roster_size])
    except KeyError:
        raise ValueError(
            f"No position template for a roster of {roster_size}; "
            f"supported sizes: {sorted(SQUAD_TEMPLATES)}"
        ) from None


class PlayerGenerator:
    """Generates fictional football players with ranged random attributes"""

    # Named attribute policies
    RANGES = {
        "seed": AttributeRange(60, 100),
        "reset": AttributeRange(50, 80),
        "free_agent": AttributeRange(40, 70),
    }

    # Bot teams get stronger the higher the league (level 1 = top tier)
    LEAGUE_LEVEL_RANGES = {
        1: AttributeRange(73, 88),
        2: AttributeRange(63, 78),
        3: AttributeRange(53, 68),
    }

    # Share of Danish names
    DANISH_NAME_SHARE = 0.6

    MIN_AGE = 18
    MAX_AGE = 32

    MIN_MARKET_VALUE = 100000

    @classmethod
    def range_for_league_level(cls, level: int) -> AttributeRange:
        if level in cls.LEAGUE_LEVEL_RANGES:
            return cls.LEAGUE_LEVEL_RANGES[level]
        # Anything below the lowest known tier plays at that tier
        return cls.LEAGUE_LEVEL_RANGES[max(cls.LEAGUE_LEVEL_RANGES)]

    @staticmethod
    def _clamp(value: int) -> int:
        return max(1, min(100, value))

    @classmethod
    def generate_attributes(cls, position: PlayerPosition, attribute_range: AttributeRange = None) -> dict[str, int]:
        """
        Draw the six skills independently from [low, high), add the position
        bonus and clamp to 1-100.
        """
        attribute_range = attribute_range or cls.RANGES["seed"]
        bonuses = POSITION_BONUSES[position]
        return {
            name: cls._clamp(random.randrange(attribute_range.low, attribute_range.high) + bonuses.get(name, 0))
            for name in SKILL_ATTRIBUTES
        }

    @classmethod
    def market_value(cls, attributes: dict[str, int], age: int) -> int:
        average = sum(attributes.values()) / len(attributes)
        value = int(average * 10000)

        # Age factor (peak at 26-28)
        if 26 <= age <= 28:
            value = int(value * 1.2)
        elif age < 22:
            value = int(value * 0.8)
        elif age > 30:
            value = int(value * 0.7)

        return max(cls.MIN_MARKET_VALUE, value)

    @classmethod
    def random_name(cls) -> str:
        faker_instance = fake_dk if random.random() < cls.DANISH_NAME_SHARE else fake_en
        return faker_instance.name_male()

    @classmethod
    def random_age(cls) -> int:
        return random.randint(cls.MIN_AGE, cls.MAX_AGE)

    @classmethod
    def generate_player(
        cls,
        position: PlayerPosition,
        attribute_range: Optional[AttributeRange] = None,
        number: int = 0,
        is_captain: bool = False,
    ) -> Player:
        """Generate a single unsaved player for the given position."""
        attributes = cls.generate_attributes(position, attribute_range)
        age = cls.random_age()

        return Player(
            name=cls.random_name(),
            age=age,
            position=position,
            number=number,
            market_value=cls.market_value(attributes, age),
            is_captain=is_captain,
            is_generated=True,
            **attributes,
        )
