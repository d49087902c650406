from app.generators.player_generator import PlayerGenerator, AttributeRange
from app.generators.team_generator import TeamGenerator
from app.generators.squad_generator import SquadGenerator, SquadSlot, build_squad

__all__ = [
    "PlayerGenerator",
    "AttributeRange",
    "TeamGenerator",
    "SquadGenerator",
    "SquadSlot",
    "build_squad",
]
