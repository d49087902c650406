"""
League Engine - League seeding, bot teams, placing user teams and moving them between leagues
"""
import logging
from typing import Optional
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.engine.team_engine import TeamEngine
from app.exceptions import (
    LeagueNotFoundError, LeagueMembershipError, TeamNotFoundError, SquadGenerationError,
)
from app.generators.player_generator import PlayerGenerator, AttributeRange
from app.generators.squad_generator import SquadGenerator
from app.generators.team_generator import TeamGenerator
from app.models.league import League, LeagueStatus
from app.models.team import Team
from app.models.user import User

logger = logging.getLogger(__name__)


LEAGUE_STRUCTURE = [
    {"name": "Superliga", "description": "Den bedste liga i spillet", "level": 1},
    {"name": "1. Division", "description": "Anden bedste liga", "level": 2},
    {"name": "2. Division", "description": "Laveste liga - alle starter her", "level": 3},
]


class LeagueEngine:
    """
    Sets up the league pyramid and keeps every league filled with teams.
    """

    def __init__(self, session: Session):
        self.session = session
        self.team_engine = TeamEngine(session)
        self.squad_generator = SquadGenerator(session)

    def initialize_leagues(self) -> list[League]:
        """Create the three leagues if none exist yet. Safe to run repeatedly."""
        existing = list(self.session.scalars(select(League).order_by(League.level)))
        if existing:
            logger.info("League system already initialized (%d leagues)", len(existing))
            return existing

        leagues = []
        for data in LEAGUE_STRUCTURE:
            league = League(
                name=data["name"],
                description=data["description"],
                level=data["level"],
                max_teams=settings.LEAGUE_MAX_TEAMS,
                status=LeagueStatus.ACTIVE,
            )
            self.session.add(league)
            leagues.append(league)
        self.session.commit()

        logger.info("Created %d leagues", len(leagues))
        return leagues

    def team_count(self, league_id: int) -> int:
        return self.session.scalar(
            select(func.count(Team.id)).where(Team.league_id == league_id)
        )

    def fill_with_bot_teams(self, league: League) -> list[Team]:
        """Add bot teams, each with a full squad, until the league is full."""
        existing = self.team_count(league.id)
        attribute_range = PlayerGenerator.range_for_league_level(league.level)

        created = []
        try:
            for i in range(existing, league.max_teams):
                team = TeamGenerator.create_team(
                    name=TeamGenerator.bot_team_name(i),
                    league_id=league.id,
                    is_bot=True,
                )
                self.session.add(team)
                self.session.flush()
                self.squad_generator.generate(team.id, attribute_range=attribute_range, commit=False)
                created.append(team)
            self.session.commit()
        except (SQLAlchemyError, SquadGenerationError):
            logger.exception("Failed to create bot teams for %s", league.name)
            self.session.rollback()
            raise

        if created:
            logger.info("Created %d bot teams in %s", len(created), league.name)
        return created

    def seed(self) -> list[League]:
        leagues = self.initialize_leagues()
        for league in leagues:
            self.fill_with_bot_teams(league)
        return leagues

    def rookie_league(self) -> Optional[League]:
        """The lowest tier, where every new manager starts"""
        return self.session.scalars(
            select(League).order_by(League.level.desc(), League.id)
        ).first()

    def get_league(self, league_id: int) -> League:
        league = self.session.get(League, league_id)
        if league is None:
            raise LeagueNotFoundError(league_id)
        return league

    def _make_room(self, league: League) -> bool:
        """
        Drop the newest bot team if the league is full.
        Returns False when every place is held by a human team.
        """
        if self.team_count(league.id) < league.max_teams:
            return True
        bot = self.session.scalars(
            select(Team)
            .where(Team.league_id == league.id, Team.is_bot.is_(True))
            .order_by(Team.id.desc())
        ).first()
        if bot is None:
            return False
        self.team_engine.delete_team(bot.id, commit=False)
        return True

    def create_user_team(
        self,
        user: User,
        name: Optional[str] = None,
        attribute_range: Optional[AttributeRange] = None,
        commit: bool = True,
    ) -> Team:
        """
        Give a user a new team in the rookie league, with a generated squad.
        A bot team is dropped when the league is full.
        """
        league = self.rookie_league()
        team = TeamGenerator.create_team(
            name=name or f"{user.name}'s Team",
            owner_id=user.id,
            league_id=league.id if league else None,
        )
        try:
            if league is not None and not self._make_room(league):
                logger.warning("%s is full of human teams; placing the new team anyway", league.name)
            self.session.add(team)
            self.session.flush()
            self.squad_generator.generate(
                team.id,
                attribute_range=attribute_range or PlayerGenerator.RANGES["seed"],
                commit=False,
            )
            if commit:
                self.session.commit()
        except (SQLAlchemyError, SquadGenerationError):
            logger.exception("Failed to create team for %s", user.email)
            self.session.rollback()
            raise

        logger.info("Created team '%s' for %s", team.name, user.email)
        return team

    def reset_user_team(self, user: User) -> Team:
        """Delete all of the user's teams and start over with a fresh one."""
        removed = self.team_engine.delete_owned_teams(user.id, commit=False)
        team = self.create_user_team(user, attribute_range=PlayerGenerator.RANGES["reset"], commit=False)
        self.session.commit()
        logger.info("Reset %s: removed %d team(s), new team %s", user.email, removed, team.id)
        return team

    def join_league(self, user: User, league_id: int) -> Team:
        """
        Move the user's team into another league, dropping a bot team
        if that league is full.
        """
        league = self.get_league(league_id)
        team = self.team_engine.get_owned_team(user.id)
        if team is None:
            raise TeamNotFoundError(f"owned by user {user.id}")
        if team.league_id == league.id:
            raise LeagueMembershipError(f"Team {team.id} already plays in {league.name}")
        if league.status == LeagueStatus.FINISHED:
            raise LeagueMembershipError(f"{league.name} is finished")

        try:
            if not self._make_room(league):
                raise LeagueMembershipError(f"{league.name} is full")
            team.league_id = league.id
            self.session.commit()
        except SQLAlchemyError:
            logger.exception("Failed to move team %s to %s", team.id, league.name)
            self.session.rollback()
            raise

        self.session.refresh(team)
        logger.info("Team %s joined %s", team.id, league.name)
        return team

    def leave_league(self, user: User, league_id: int) -> int:
        """Delete the user's teams in a league. Returns how many were removed."""
        league = self.get_league(league_id)
        team_ids = list(self.session.scalars(
            select(Team.id).where(Team.owner_id == user.id, Team.league_id == league.id)
        ))
        if not team_ids:
            raise LeagueMembershipError(f"User {user.id} has no team in {league.name}")

        for team_id in team_ids:
            self.team_engine.delete_team(team_id, commit=False)
        self.session.commit()
        logger.info("User %s left %s (%d team(s) removed)", user.email, league.name, len(team_ids))
        return len(team_ids)
