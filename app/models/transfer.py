from typing import Optional
from sqlalchemy import BigInteger, ForeignKey, Enum, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from datetime import datetime
import enum
from app.database import Base


class TransferStatus(enum.Enum):
    LISTED = "LISTED"
    COMPLETED = "COMPLETED"


class Transfer(Base):
    """
    Free-agent listing. Released players are listed at no cost,
    generated free agents at their market value.
    """
    __tablename__ = "transfers"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(primary_key=True)
    player_id: Mapped[int] = mapped_column(ForeignKey("players.id"), index=True)
    from_team_id: Mapped[Optional[int]] = mapped_column(ForeignKey("teams.id"), nullable=True)
    to_team_id: Mapped[Optional[int]] = mapped_column(ForeignKey("teams.id"), nullable=True)
    asking_price: Mapped[int] = mapped_column(BigInteger, default=0)
    status: Mapped[TransferStatus] = mapped_column(Enum(TransferStatus), default=TransferStatus.LISTED)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    player = relationship("Player")

    @property
    def is_free(self) -> bool:
        return self.asking_price == 0

    def __repr__(self):
        return f"<Transfer player={self.player_id} {self.status.value} price={self.asking_price}>"
