from app.engine.team_engine import TeamEngine
from app.engine.league_engine import LeagueEngine
from app.engine.transfer_engine import TransferEngine

__all__ = ["TeamEngine", "LeagueEngine", "TransferEngine"]
