"""
League API endpoints - browsing leagues, joining and leaving them
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session
from typing import List

from app.database import get_db
from app.engine.league_engine import LeagueEngine
from app.engine.team_engine import TeamEngine
from app.exceptions import LeagueNotFoundError, LeagueMembershipError, TeamNotFoundError
from app.models.league import League
from app.models.user import User
from app.auth.utils import get_current_user
from app.api.schemas import LeagueResponse, LeagueDetail, LeagueTeamBrief, MessageResponse, TeamResponse
from app.api.teams import build_team_response

router = APIRouter(prefix="/leagues", tags=["Leagues"])


def build_league_response(league: League) -> LeagueResponse:
    return LeagueResponse(
        id=league.id,
        name=league.name,
        description=league.description,
        level=league.level,
        max_teams=league.max_teams,
        status=league.status.value,
        team_count=league.team_count,
    )


@router.get("", response_model=List[LeagueResponse])
def list_leagues(db: Session = Depends(get_db)):
    """All leagues, top tier first"""
    leagues = db.scalars(select(League).order_by(League.level, League.id)).all()
    return [build_league_response(league) for league in leagues]


@router.get("/{league_id}", response_model=LeagueDetail)
def get_league(league_id: int, db: Session = Depends(get_db)):
    league = db.get(League, league_id)
    if league is None:
        raise HTTPException(status_code=404, detail="League not found")

    teams = [
        LeagueTeamBrief(
            id=team.id,
            name=team.name,
            is_bot=team.is_bot,
            formation=team.formation,
            overall_rating=TeamEngine.team_rating(team),
        )
        for team in sorted(league.teams, key=lambda t: t.id)
    ]
    return LeagueDetail(**build_league_response(league).model_dump(), teams=teams)


@router.post("/{league_id}/join", response_model=TeamResponse)
def join_league(
    league_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Move the caller's team into this league"""
    try:
        team = LeagueEngine(db).join_league(current_user, league_id)
    except (LeagueNotFoundError, TeamNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except LeagueMembershipError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return build_team_response(team)


@router.delete("/{league_id}/leave", response_model=MessageResponse)
def leave_league(
    league_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Leave a league; the caller's team there is deleted"""
    try:
        LeagueEngine(db).leave_league(current_user, league_id)
    except (LeagueNotFoundError, LeagueMembershipError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    return MessageResponse(message="Left league successfully")
