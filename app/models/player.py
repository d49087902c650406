from sqlalchemy import String, Integer, BigInteger, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship
import enum
from app.database import Base


class PlayerPosition(enum.Enum):
    GOALKEEPER = "GOALKEEPER"
    DEFENDER = "DEFENDER"
    MIDFIELDER = "MIDFIELDER"
    ATTACKER = "ATTACKER"


SKILL_ATTRIBUTES = ("speed", "shooting", "passing", "defending", "stamina", "reflexes")

# Weights used for a player's overall rating, per position (each row sums to 1)
RATING_WEIGHTS = {
    PlayerPosition.GOALKEEPER: {"reflexes": 0.5, "defending": 0.2, "passing": 0.1, "stamina": 0.1, "speed": 0.1},
    PlayerPosition.DEFENDER: {"defending": 0.5, "stamina": 0.2, "speed": 0.15, "passing": 0.15},
    PlayerPosition.MIDFIELDER: {"passing": 0.4, "stamina": 0.2, "speed": 0.15, "defending": 0.1, "shooting": 0.15},
    PlayerPosition.ATTACKER: {"shooting": 0.5, "speed": 0.25, "passing": 0.15, "stamina": 0.1},
}


class Player(Base):
    __tablename__ = "players"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    age: Mapped[int] = mapped_column(Integer)
    position: Mapped[PlayerPosition] = mapped_column(Enum(PlayerPosition))
    number: Mapped[int] = mapped_column(Integer, default=0)  # Shirt number

    # Skills (1-100 scale)
    speed: Mapped[int] = mapped_column(Integer)
    shooting: Mapped[int] = mapped_column(Integer)
    passing: Mapped[int] = mapped_column(Integer)
    defending: Mapped[int] = mapped_column(Integer)
    stamina: Mapped[int] = mapped_column(Integer)
    reflexes: Mapped[int] = mapped_column(Integer)

    market_value: Mapped[int] = mapped_column(BigInteger, default=100000)
    is_captain: Mapped[bool] = mapped_column(default=False)
    is_generated: Mapped[bool] = mapped_column(default=True)  # Generated players are removed with their team

    team_players: Mapped[list["TeamPlayer"]] = relationship("TeamPlayer", back_populates="player")

    @property
    def attributes(self) -> dict[str, int]:
        return {name: getattr(self, name) for name in SKILL_ATTRIBUTES}

    @property
    def overall_rating(self) -> int:
        """Calculate overall rating based on position"""
        weights = RATING_WEIGHTS.get(self.position)
        if weights is None:
            return 50
        return int(round(sum(getattr(self, attr) * w for attr, w in weights.items())))

    def __repr__(self):
        return f"<Player {self.name} ({self.position.value}) - OVR: {self.overall_rating}>"
