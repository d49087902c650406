"""
Transfer Engine - Releasing players and signing free agents
"""
import logging
import random
from datetime import datetime
from typing import Optional
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.engine.team_engine import TeamEngine
from app.exceptions import PlayerNotFoundError, TransferError
from app.generators.player_generator import PlayerGenerator, AttributeRange
from app.models.player import PlayerPosition
from app.models.team import Team
from app.models.team_player import TeamPlayer
from app.models.transfer import Transfer, TransferStatus

logger = logging.getLogger(__name__)


class TransferEngine:
    """
    The free-agent market. A released player is listed for nothing;
    generated free agents are listed at their market value.
    """

    def __init__(self, session: Session):
        self.session = session
        self.team_engine = TeamEngine(session)

    def free_agents(self) -> list[Transfer]:
        """Open listings, newest first"""
        return list(self.session.scalars(
            select(Transfer)
            .where(Transfer.status == TransferStatus.LISTED)
            .order_by(Transfer.created_at.desc(), Transfer.id.desc())
        ))

    def _open_listing(self, player_id: int) -> Optional[Transfer]:
        return self.session.scalars(
            select(Transfer).where(
                Transfer.player_id == player_id,
                Transfer.status == TransferStatus.LISTED,
            )
        ).first()

    def release_player(self, team_id: int, player_id: int) -> Transfer:
        """
        Take a player off the roster and list them as a free transfer.
        A released captain loses the armband.
        """
        team = self.team_engine.get_team(team_id)
        entry = self.team_engine.roster_entry(team, player_id)
        player = entry.player

        try:
            self.session.delete(entry)
            player.is_captain = False
            listing = Transfer(
                player_id=player.id,
                from_team_id=team.id,
                asking_price=0,
                status=TransferStatus.LISTED,
            )
            self.session.add(listing)
            self.session.commit()
        except SQLAlchemyError:
            logger.exception("Failed to release player %s from team %s", player_id, team_id)
            self.session.rollback()
            raise

        self.session.refresh(team)
        logger.info("Team %s released player %s", team_id, player_id)
        return listing

    def sign_free_agent(self, team_id: int, player_id: int) -> Team:
        """
        Put a listed player on the team's bench and pay the asking price.
        The roster may not grow beyond the configured squad size.
        """
        team = self.team_engine.get_team(team_id)
        listing = self._open_listing(player_id)
        if listing is None:
            raise PlayerNotFoundError(player_id)

        on_roster = self.session.scalar(
            select(func.count(TeamPlayer.id)).where(TeamPlayer.player_id == player_id)
        )
        if on_roster:
            raise TransferError(f"Player {player_id} is already on a team")
        if team.squad_size >= settings.SQUAD_SIZE:
            raise TransferError(f"Team is full (max {settings.SQUAD_SIZE} players)")
        if team.budget < listing.asking_price:
            raise TransferError(
                f"Insufficient budget: {listing.asking_price:,} needed, {team.budget:,} available"
            )

        try:
            team.budget -= listing.asking_price
            self.session.add(TeamPlayer(
                team=team,
                player=listing.player,
                position=listing.player.position,
                is_starter=False,
                formation_position=None,
            ))
            listing.status = TransferStatus.COMPLETED
            listing.to_team_id = team.id
            listing.completed_at = datetime.utcnow()
            self.session.commit()
        except SQLAlchemyError:
            logger.exception("Failed to sign player %s for team %s", player_id, team_id)
            self.session.rollback()
            raise

        logger.info(
            "Team %s signed player %s for %s", team_id, player_id, listing.asking_price,
        )
        return team

    def generate_free_agents(
        self,
        count: int = 20,
        attribute_range: Optional[AttributeRange] = None,
    ) -> list[Transfer]:
        """Create unattached players and list them at their market value."""
        attribute_range = attribute_range or PlayerGenerator.RANGES["free_agent"]
        listings = []
        try:
            for _ in range(count):
                player = PlayerGenerator.generate_player(
                    random.choice(list(PlayerPosition)),
                    attribute_range=attribute_range,
                )
                listing = Transfer(
                    player=player,
                    asking_price=player.market_value,
                    status=TransferStatus.LISTED,
                )
                self.session.add(player)
                self.session.add(listing)
                listings.append(listing)
            self.session.commit()
        except SQLAlchemyError:
            logger.exception("Failed to generate free agents")
            self.session.rollback()
            raise

        logger.info("Generated %d free agents", len(listings))
        return listings
