"""
Transfer API endpoints - the free-agent market for the caller's team
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List

from app.database import get_db
from app.engine.team_engine import TeamEngine
from app.engine.transfer_engine import TransferEngine
from app.exceptions import PlayerNotFoundError, TransferError
from app.models.team import Team
from app.models.transfer import Transfer
from app.models.user import User
from app.auth.utils import get_current_user
from app.api.schemas import FreeAgentResponse, TeamResponse
from app.api.teams import build_player_response, build_team_response

router = APIRouter(prefix="/transfers", tags=["Transfers"])


def build_free_agent_response(listing: Transfer) -> FreeAgentResponse:
    return FreeAgentResponse(
        transfer_id=listing.id,
        asking_price=listing.asking_price,
        is_free=listing.is_free,
        from_team_id=listing.from_team_id,
        player=build_player_response(listing.player),
    )


def get_my_team(db: Session, user: User) -> Team:
    team = TeamEngine(db).get_owned_team(user.id)
    if team is None:
        raise HTTPException(status_code=404, detail="You don't have a team yet")
    return team


@router.get("/free-agents", response_model=List[FreeAgentResponse])
def list_free_agents(db: Session = Depends(get_db)):
    """Players without a team, newest listing first"""
    return [build_free_agent_response(listing) for listing in TransferEngine(db).free_agents()]


@router.delete("/fire/{player_id}", response_model=FreeAgentResponse)
def fire_player(
    player_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Release a player from the caller's team; they become a free transfer"""
    team = get_my_team(db, current_user)
    try:
        listing = TransferEngine(db).release_player(team.id, player_id)
    except PlayerNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return build_free_agent_response(listing)


@router.post("/sign/{player_id}", response_model=TeamResponse)
def sign_free_agent(
    player_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Sign a listed free agent onto the caller's bench"""
    team = get_my_team(db, current_user)
    try:
        team = TransferEngine(db).sign_free_agent(team.id, player_id)
    except PlayerNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except TransferError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return build_team_response(team)
