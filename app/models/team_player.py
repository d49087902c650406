from typing import Optional
from sqlalchemy import String, ForeignKey, Enum, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.database import Base
from app.models.player import PlayerPosition


class TeamPlayer(Base):
    """Roster entry linking a player to a team"""
    __tablename__ = "team_players"

    id: Mapped[int] = mapped_column(primary_key=True)
    team_id: Mapped[int] = mapped_column(ForeignKey("teams.id"), index=True)
    player_id: Mapped[int] = mapped_column(ForeignKey("players.id"))
    position: Mapped[PlayerPosition] = mapped_column(Enum(PlayerPosition))
    is_starter: Mapped[bool] = mapped_column(default=False)
    formation_position: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)  # "gk", "cb1", ... starters only

    team = relationship("Team", back_populates="team_players")
    player = relationship("Player", back_populates="team_players")

    __table_args__ = (
        UniqueConstraint('team_id', 'player_id', name='unique_team_player'),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self):
        return f"<TeamPlayer team={self.team_id} player={self.player_id} slot={self.formation_position}>"
