from app.models.user import User
from app.models.league import League, LeagueStatus
from app.models.team import Team
from app.models.player import Player, PlayerPosition
from app.models.team_player import TeamPlayer
from app.models.transfer import Transfer, TransferStatus

__all__ = [
    "User",
    "League",
    "LeagueStatus",
    "Team",
    "Player",
    "PlayerPosition",
    "TeamPlayer",
    "Transfer",
    "TransferStatus",
]
