"""
Team Engine - Team-level operations: captaincy, formation, lineup swaps, rating and removal
"""
import json
import logging
from typing import Optional
from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.exceptions import (
    TeamNotFoundError, PlayerNotFoundError, InvalidFormationError, DuplicateTeamNameError,
)
from app.generators.formations import FORMATIONS, formation_slots, is_supported_formation
from app.models.player import Player, PlayerPosition, SKILL_ATTRIBUTES
from app.models.team import Team
from app.models.team_player import TeamPlayer
from app.models.transfer import Transfer

logger = logging.getLogger(__name__)

FULL_LINEUP = 11
CAPTAIN_BONUS_PER_SKILL = 5
MISSING_STARTER_PENALTY = 3

FIELD_POSITIONS = {
    PlayerPosition.GOALKEEPER: "GK",
    PlayerPosition.DEFENDER: "DEF",
    PlayerPosition.MIDFIELDER: "MID",
    PlayerPosition.ATTACKER: "FWD",
}


class TeamEngine:
    """
    Operations on a single team and its roster.
    """

    def __init__(self, session: Session):
        self.session = session

    def get_team(self, team_id: int) -> Team:
        team = self.session.get(Team, team_id)
        if team is None:
            raise TeamNotFoundError(team_id)
        return team

    def get_owned_team(self, user_id: int) -> Optional[Team]:
        return self.session.scalars(
            select(Team).where(Team.owner_id == user_id).order_by(Team.id)
        ).first()

    @staticmethod
    def team_rating(team: Team) -> int:
        """
        Average skill over the starting lineup.
        The captain counts +5 on every skill; each missing starter below 11
        costs 3 points.
        """
        players = [tp.player for tp in team.team_players if tp.is_starter]
        if not players:
            return 0

        total = 0
        for player in players:
            total += sum(getattr(player, attr) for attr in SKILL_ATTRIBUTES)
            if player.is_captain:
                total += CAPTAIN_BONUS_PER_SKILL * len(SKILL_ATTRIBUTES)

        average = total / (len(players) * len(SKILL_ATTRIBUTES))
        if len(players) < FULL_LINEUP:
            penalty = (FULL_LINEUP - len(players)) * MISSING_STARTER_PENALTY
            return max(0, round(average - penalty))
        return round(average)

    @classmethod
    def team_stats(cls, team: Team) -> dict:
        players = team.players
        position_counts: dict[str, int] = {}
        for player in players:
            key = FIELD_POSITIONS[player.position]
            position_counts[key] = position_counts.get(key, 0) + 1

        return {
            "overall_rating": cls.team_rating(team),
            "total_value": sum(p.market_value for p in players),
            "average_age": round(sum(p.age for p in players) / len(players)) if players else 0,
            "position_counts": position_counts,
        }

    def roster_entry(self, team: Team, player_id: int) -> TeamPlayer:
        entry = next((tp for tp in team.team_players if tp.player_id == player_id), None)
        if entry is None:
            raise PlayerNotFoundError(player_id, team.id)
        return entry

    @staticmethod
    def _relabel_starters(team: Team, formation: str) -> None:
        old_slots = formation_slots(team.formation)

        def slot_order(tp: TeamPlayer):
            if tp.formation_position in old_slots:
                return (old_slots.index(tp.formation_position), tp.id)
            return (len(old_slots), tp.id)

        starters = sorted(team.starters, key=slot_order)
        new_slots = FORMATIONS[formation]
        for i, tp in enumerate(starters):
            tp.formation_position = new_slots[i] if i < len(new_slots) else None
        team.formation = formation

    def set_captain(self, team_id: int, player_id: int) -> Team:
        """
        Make `player_id` the team's only captain.
        Setting the current captain again changes nothing.
        """
        team = self.get_team(team_id)
        entry = self.roster_entry(team, player_id)

        if entry.player.is_captain:
            return team

        for tp in team.team_players:
            if tp.player.is_captain:
                tp.player.is_captain = False
        entry.player.is_captain = True

        self.session.commit()
        logger.info("Team %s captain is now player %s", team_id, player_id)
        return team

    def change_formation(self, team_id: int, formation: str) -> Team:
        """
        Switch formation and relabel the starters. Starters keep their
        relative order (by slot in the old formation).
        """
        if not is_supported_formation(formation):
            raise InvalidFormationError(formation)

        team = self.get_team(team_id)
        self._relabel_starters(team, formation)
        self.session.commit()
        logger.info("Team %s switched to %s", team_id, formation)
        return team

    def swap_players(self, team_id: int, starter_id: int, substitute_id: int) -> Team:
        """The substitute takes the starter's slot; the starter goes to the bench."""
        team = self.get_team(team_id)
        starter = self.roster_entry(team, starter_id)
        substitute = self.roster_entry(team, substitute_id)

        if not starter.is_starter:
            raise PlayerNotFoundError(starter_id, team_id)
        if substitute.is_starter:
            raise PlayerNotFoundError(substitute_id, team_id)

        substitute.is_starter = True
        substitute.formation_position = starter.formation_position
        starter.is_starter = False
        starter.formation_position = None

        self.session.commit()
        return team

    def update_team(
        self,
        team_id: int,
        name: Optional[str] = None,
        formation: Optional[str] = None,
        colors: Optional[dict] = None,
        logo: Optional[str] = None,
    ) -> Team:
        """
        Rename or rebrand a team, optionally switching formation too.
        Names are unique within a league. Nothing is written when a check fails.
        """
        if formation is not None and not is_supported_formation(formation):
            raise InvalidFormationError(formation)

        team = self.get_team(team_id)
        if name is not None and name != team.name and team.league_id is not None:
            taken = self.session.scalars(
                select(Team.id).where(
                    Team.league_id == team.league_id,
                    Team.name == name,
                    Team.id != team.id,
                )
            ).first()
            if taken is not None:
                raise DuplicateTeamNameError(name)

        if name is not None:
            team.name = name
        if colors is not None:
            team.colors = json.dumps({"primary": colors["primary"], "secondary": colors["secondary"]})
        if logo is not None:
            team.logo = logo
        if formation is not None and formation != team.formation:
            self._relabel_starters(team, formation)

        self.session.commit()
        logger.info("Updated team %s", team_id)
        return team

    def delete_team(self, team_id: int, commit: bool = True) -> None:
        """
        Remove a team and everything hanging off it, in foreign key order:
        roster entries, then generated players and their listings, then the team row.
        """
        self.get_team(team_id)

        generated_ids = list(self.session.scalars(
            select(Player.id)
            .join(TeamPlayer, TeamPlayer.player_id == Player.id)
            .where(TeamPlayer.team_id == team_id, Player.is_generated.is_(True))
        ))

        try:
            self.session.execute(
                delete(TeamPlayer).where(TeamPlayer.team_id == team_id),
                execution_options={"synchronize_session": False},
            )
            if generated_ids:
                self.session.execute(
                    delete(Transfer).where(Transfer.player_id.in_(generated_ids)),
                    execution_options={"synchronize_session": False},
                )
                self.session.execute(
                    delete(Player).where(Player.id.in_(generated_ids)),
                    execution_options={"synchronize_session": False},
                )
            # Listings that outlive the team keep their player but lose the team reference
            self.session.execute(
                update(Transfer).where(Transfer.from_team_id == team_id).values(from_team_id=None),
                execution_options={"synchronize_session": False},
            )
            self.session.execute(
                update(Transfer).where(Transfer.to_team_id == team_id).values(to_team_id=None),
                execution_options={"synchronize_session": False},
            )
            self.session.execute(
                delete(Team).where(Team.id == team_id),
                execution_options={"synchronize_session": False},
            )
            self.session.expire_all()
            if commit:
                self.session.commit()
        except SQLAlchemyError:
            logger.exception("Failed to delete team %s", team_id)
            self.session.rollback()
            raise

        logger.info("Deleted team %s and %d generated players", team_id, len(generated_ids))

    def delete_owned_teams(self, user_id: int, commit: bool = True) -> int:
        """Delete every team a user owns. Returns how many were removed."""
        team_ids = list(self.session.scalars(select(Team.id).where(Team.owner_id == user_id)))
        for team_id in team_ids:
            self.delete_team(team_id, commit=False)
        if commit:
            self.session.commit()
        return len(team_ids)
