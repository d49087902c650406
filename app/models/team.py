from sqlalchemy import String, BigInteger, ForeignKey, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import Optional
from datetime import datetime
from app.database import Base


class Team(Base):
    __tablename__ = "teams"
    # Ids are never reused once a team is deleted
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    formation: Mapped[str] = mapped_column(String(10), default="4-4-2")  # e.g. "4-4-2", "4-3-3"

    # Branding
    colors: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)  # JSON {primary, secondary}
    logo: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    # Finances
    budget: Mapped[int] = mapped_column(BigInteger, default=10000000)

    # Ownership - bot teams have no owner
    owner_id: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id"), nullable=True, index=True)
    league_id: Mapped[Optional[int]] = mapped_column(ForeignKey("leagues.id"), nullable=True, index=True)
    is_bot: Mapped[bool] = mapped_column(default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationships
    owner: Mapped[Optional["User"]] = relationship("User", back_populates="teams")
    league: Mapped[Optional["League"]] = relationship("League", back_populates="teams")
    team_players: Mapped[list["TeamPlayer"]] = relationship(
        "TeamPlayer",
        back_populates="team",
        order_by="TeamPlayer.id",
    )

    @property
    def players(self) -> list["Player"]:
        """Players in roster order"""
        return [tp.player for tp in self.team_players]

    @property
    def starters(self) -> list["TeamPlayer"]:
        return [tp for tp in self.team_players if tp.is_starter]

    @property
    def squad_size(self) -> int:
        return len(self.team_players)

    @property
    def captain(self) -> Optional["Player"]:
        return next((tp.player for tp in self.team_players if tp.player.is_captain), None)

    def __repr__(self):
        return f"<Team {self.name} ({self.formation})>"
