"""
Squad Generator - builds a team's roster with positions, starters and formation slots
"""
import logging
from dataclasses import dataclass
from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import TeamNotFoundError, SquadGenerationError
from app.generators.formations import formation_slots, formation_position, resolve_formation
from app.generators.player_generator import PlayerGenerator, AttributeRange
from app.generators.player_generator import position_template as default_position_template
from app.models.player import PlayerPosition
from app.models.team import Team
from app.models.team_player import TeamPlayer
from app.validators.squad_validator import SquadValidator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SquadSlot:
    """One roster entry before any player is attached"""
    index: int
    position: PlayerPosition
    is_starter: bool
    is_captain: bool
    formation_position: Optional[str]


def build_squad(
    formation: Optional[str],
    roster_size: int = 16,
    starter_count: int = 11,
    position_template: Optional[list[PlayerPosition]] = None,
) -> list[SquadSlot]:
    """
    Lay out a roster: positions from the fixed template, the first
    `starter_count` entries as starters with slot labels from the formation
    table, the rest as substitutes without a slot. Index 0 is captain.
    """
    slots = formation_slots(formation)
    if starter_count > roster_size:
        raise ValueError(f"starter_count ({starter_count}) exceeds roster_size ({roster_size})")
    if starter_count > len(slots):
        raise ValueError(f"starter_count ({starter_count}) exceeds the {len(slots)} slots of {resolve_formation(formation)}")

    if position_template is not None:
        template = list(position_template)
    else:
        template = default_position_template(roster_size)
    if len(template) < roster_size:
        raise ValueError(f"Position template has {len(template)} entries, need {roster_size}")

    squad = []
    for index in range(roster_size):
        is_starter = index < starter_count
        squad.append(SquadSlot(
            index=index,
            position=template[index],
            is_starter=is_starter,
            is_captain=index == 0,
            formation_position=formation_position(index, formation) if is_starter else None,
        ))
    return squad


class SquadGenerator:
    """Generates and persists a full roster for an existing team"""

    def __init__(self, session: Session, player_generator=PlayerGenerator):
        self.session = session
        self.player_generator = player_generator

    def generate(
        self,
        team_id: int,
        formation: Optional[str] = None,
        roster_size: Optional[int] = None,
        starter_count: Optional[int] = None,
        attribute_range: Optional[AttributeRange] = None,
        position_template: Optional[list[PlayerPosition]] = None,
        commit: bool = True,
    ) -> list[TeamPlayer]:
        """
        Create `roster_size` players and their roster entries for a team.

        Args:
            team_id: Team to fill; must exist
            formation: Formation key, defaults to the team's own formation
            roster_size: Players to create (default from settings, 16)
            starter_count: Starters among them (default from settings, 11)
            attribute_range: Skill policy, defaults to PlayerGenerator.RANGES["seed"]
            position_template: Explicit roster index -> position list
            commit: Commit when done; pass False to join the caller's transaction

        The roster is written all-or-nothing. Existing roster entries are not
        touched; callers delete them before regenerating.
        Raises SquadGenerationError when the roster cannot be laid out or written.
        """
        team = self.session.get(Team, team_id)
        if team is None:
            raise TeamNotFoundError(team_id)

        roster_size = roster_size if roster_size is not None else settings.SQUAD_SIZE
        starter_count = starter_count if starter_count is not None else settings.STARTER_COUNT
        formation = formation if formation is not None else team.formation

        try:
            squad = build_squad(formation, roster_size, starter_count, position_template)
        except ValueError as exc:
            raise SquadGenerationError(f"Cannot lay out a roster for team {team_id}: {exc}") from exc

        team_players = []
        try:
            for slot in squad:
                player = self.player_generator.generate_player(
                    slot.position,
                    attribute_range=attribute_range,
                    number=slot.index + 1,
                    is_captain=slot.is_captain,
                )
                team_player = TeamPlayer(
                    team=team,
                    player=player,
                    position=slot.position,
                    is_starter=slot.is_starter,
                    formation_position=slot.formation_position,
                )
                self.session.add(player)
                self.session.add(team_player)
                team_players.append(team_player)

            self.session.flush()

            result = SquadValidator.validate(team_players, starter_count)
            if not result["valid"]:
                raise SquadGenerationError(f"Generated roster for team {team_id} is invalid: {result['errors']}")

            if commit:
                self.session.commit()
        except SQLAlchemyError as exc:
            logger.exception("Roster write failed for team %s", team_id)
            self.session.rollback()
            raise SquadGenerationError(f"Could not persist roster for team {team_id}") from exc
        except SquadGenerationError:
            self.session.rollback()
            raise

        logger.info(
            "Generated %d players for team %s (%s, %d starters)",
            len(team_players), team_id, resolve_formation(formation), starter_count,
        )
        return team_players
