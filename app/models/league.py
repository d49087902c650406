from typing import List, Optional
from sqlalchemy import String, Integer, Enum, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from datetime import datetime
import enum
from app.database import Base


class LeagueStatus(enum.Enum):
    SIGNUP = "SIGNUP"
    ACTIVE = "ACTIVE"
    FINISHED = "FINISHED"


class League(Base):
    __tablename__ = "leagues"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    description: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    level: Mapped[int] = mapped_column(Integer)  # 1 = top tier
    max_teams: Mapped[int] = mapped_column(Integer, default=12)
    status: Mapped[LeagueStatus] = mapped_column(Enum(LeagueStatus), default=LeagueStatus.ACTIVE)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    teams: Mapped[List["Team"]] = relationship("Team", back_populates="league")

    @property
    def team_count(self) -> int:
        return len(self.teams)

    @property
    def is_full(self) -> bool:
        return self.team_count >= self.max_teams

    def __repr__(self):
        return f"<League {self.name} (level {self.level})>"
