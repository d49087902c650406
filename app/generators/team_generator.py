"""
Team Generator - Creates user and bot teams (without players)
"""
import json
import random
from typing import Optional

from app.config import settings
from app.generators.formations import DEFAULT_FORMATION
from app.models.team import Team


# Bot teams filling the leagues
BOT_TEAM_NAMES = [
    "FC Nordhavn",
    "Brøndby Rovers",
    "Aarhus Athletic",
    "Midtjylland United",
    "Odense Boldklub",
    "Randers City",
    "Viborg Wanderers",
    "Silkeborg Albion",
    "Lyngby Town",
    "Horsens Villa",
    "Vejle Rangers",
    "Esbjerg Palace",
    "Aalborg Hotspur",
    "Sønderborg Athletic",
    "Hobro Rovers",
    "Nordsjælland FC",
]

TEAM_COLORS = [
    {"primary": "#FF0000", "secondary": "#FFFFFF", "name": "Red & White"},
    {"primary": "#0000FF", "secondary": "#FFFFFF", "name": "Blue & White"},
    {"primary": "#00FF00", "secondary": "#000000", "name": "Green & Black"},
    {"primary": "#FFFF00", "secondary": "#000000", "name": "Yellow & Black"},
    {"primary": "#FF8000", "secondary": "#FFFFFF", "name": "Orange & White"},
    {"primary": "#8000FF", "secondary": "#FFFFFF", "name": "Purple & White"},
    {"primary": "#000000", "secondary": "#FFFFFF", "name": "Black & White"},
    {"primary": "#808080", "secondary": "#FFFFFF", "name": "Gray & White"},
]

TEAM_LOGOS = [
    "circle", "square", "triangle", "diamond", "star", "hexagon",
    "shield", "crown", "flame", "lightning", "wave", "mountain",
]


class TeamGenerator:
    """Builds Team rows; rosters come from SquadGenerator"""

    @classmethod
    def bot_team_name(cls, index: int) -> str:
        if 0 <= index < len(BOT_TEAM_NAMES):
            return BOT_TEAM_NAMES[index]
        return f"Bot Team {index + 1}"

    @classmethod
    def random_colors(cls) -> str:
        colors = random.choice(TEAM_COLORS)
        return json.dumps({"primary": colors["primary"], "secondary": colors["secondary"]})

    @classmethod
    def random_logo(cls) -> str:
        return random.choice(TEAM_LOGOS)

    @classmethod
    def create_team(
        cls,
        name: str,
        owner_id: Optional[int] = None,
        league_id: Optional[int] = None,
        formation: str = DEFAULT_FORMATION,
        is_bot: bool = False,
        budget: Optional[int] = None,
    ) -> Team:
        """
        Create a team (not yet saved to DB).

        Args:
            name: Display name
            owner_id: Owning user, None for bot teams
            league_id: League the team plays in
            formation: Formation key used when its squad is generated
            is_bot: Whether the team is computer-controlled
            budget: Starting budget, defaults to settings.STARTING_BUDGET
        """
        return Team(
            name=name,
            owner_id=owner_id,
            league_id=league_id,
            formation=formation,
            colors=cls.random_colors(),
            logo=cls.random_logo(),
            budget=budget if budget is not None else settings.STARTING_BUDGET,
            is_bot=is_bot,
        )
