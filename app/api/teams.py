"""
Team API endpoints - squad view, stats, captaincy, formation, lineup swaps, branding and removal
"""
import json
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import Optional

from app.database import get_db
from app.engine.team_engine import TeamEngine
from app.exceptions import (
    TeamNotFoundError, PlayerNotFoundError, InvalidFormationError, DuplicateTeamNameError,
)
from app.models.player import Player
from app.models.team import Team
from app.models.team_player import TeamPlayer
from app.models.user import User
from app.auth.utils import get_current_user
from app.api.schemas import (
    TeamResponse, TeamStatsResponse, PlayerResponse, FormationUpdate, SwapPlayersRequest,
    TeamUpdate, MessageResponse,
)

router = APIRouter(prefix="/teams", tags=["Teams"])


def parse_colors(colors_json: Optional[str]) -> Optional[dict]:
    """Parse the stored colors JSON string, None if missing or malformed"""
    if not colors_json:
        return None
    try:
        colors = json.loads(colors_json)
    except (json.JSONDecodeError, TypeError):
        return None
    if not isinstance(colors, dict) or "primary" not in colors or "secondary" not in colors:
        return None
    return colors


def build_player_response(p: Player, tp: Optional[TeamPlayer] = None) -> PlayerResponse:
    """Roster details come from the team entry; unattached players are on nobody's bench"""
    return PlayerResponse(
        id=p.id,
        name=p.name,
        position=(tp.position if tp else p.position).value,
        rating=p.overall_rating,
        age=p.age,
        number=p.number,
        is_starter=tp.is_starter if tp else False,
        is_captain=p.is_captain,
        formation_position=tp.formation_position if tp else None,
        speed=p.speed,
        shooting=p.shooting,
        passing=p.passing,
        defending=p.defending,
        stamina=p.stamina,
        reflexes=p.reflexes,
        market_value=p.market_value,
    )


def build_team_response(team: Team) -> TeamResponse:
    players = [build_player_response(tp.player, tp) for tp in team.team_players]

    return TeamResponse(
        id=team.id,
        name=team.name,
        formation=team.formation,
        budget=team.budget,
        colors=parse_colors(team.colors),
        logo=team.logo,
        league_id=team.league_id,
        is_bot=team.is_bot,
        overall_rating=TeamEngine.team_rating(team),
        players=players,
    )


def get_owned_team(db: Session, team_id: int, user: User) -> Team:
    """Teams belonging to someone else are reported as missing"""
    team = db.get(Team, team_id)
    if team is None or team.owner_id != user.id:
        raise HTTPException(status_code=404, detail="Team not found")
    return team


@router.get("/my-team", response_model=TeamResponse)
def get_my_team(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get the current user's team with its full squad"""
    team = TeamEngine(db).get_owned_team(current_user.id)
    if team is None:
        raise HTTPException(status_code=404, detail="You don't have a team yet")
    return build_team_response(team)


@router.get("/{team_id}", response_model=TeamResponse)
def get_team(
    team_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        team = TeamEngine(db).get_team(team_id)
    except TeamNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return build_team_response(team)


@router.get("/{team_id}/stats", response_model=TeamStatsResponse)
def get_team_stats(
    team_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        team = TeamEngine(db).get_team(team_id)
    except TeamNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return TeamStatsResponse(**TeamEngine.team_stats(team))


@router.put("/{team_id}/captain/{player_id}", response_model=TeamResponse)
def set_captain(
    team_id: int,
    player_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Make a player the team captain (replaces the previous captain)"""
    get_owned_team(db, team_id, current_user)
    try:
        team = TeamEngine(db).set_captain(team_id, player_id)
    except (TeamNotFoundError, PlayerNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    return build_team_response(team)


@router.put("/{team_id}/formation", response_model=TeamResponse)
def change_formation(
    team_id: int,
    request: FormationUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    get_owned_team(db, team_id, current_user)
    try:
        team = TeamEngine(db).change_formation(team_id, request.formation)
    except InvalidFormationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except TeamNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return build_team_response(team)


@router.put("/{team_id}/swap-players", response_model=TeamResponse)
def swap_players(
    team_id: int,
    request: SwapPlayersRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Bring a substitute into the lineup in place of a starter"""
    get_owned_team(db, team_id, current_user)
    try:
        team = TeamEngine(db).swap_players(team_id, request.starter_id, request.substitute_id)
    except (TeamNotFoundError, PlayerNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    return build_team_response(team)


@router.put("/{team_id}", response_model=TeamResponse)
def update_team(
    team_id: int,
    request: TeamUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Rename or rebrand a team (name, colors, logo, formation)"""
    get_owned_team(db, team_id, current_user)
    try:
        team = TeamEngine(db).update_team(
            team_id,
            name=request.name,
            formation=request.formation,
            colors=request.colors.model_dump() if request.colors else None,
            logo=request.logo,
        )
    except (InvalidFormationError, DuplicateTeamNameError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except TeamNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return build_team_response(team)


@router.delete("/{team_id}", response_model=MessageResponse)
def delete_team(
    team_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Delete a team along with its generated players"""
    get_owned_team(db, team_id, current_user)
    try:
        TeamEngine(db).delete_team(team_id)
    except TeamNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return MessageResponse(message="Team deleted successfully")
