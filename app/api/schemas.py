"""
Pydantic schemas for API request/response models

Fields are snake_case in Python and camelCase on the wire.
"""
from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional

from app.auth.config import settings as auth_settings


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


# Auth Schemas
class RegisterRequest(CamelModel):
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=auth_settings.MIN_PASSWORD_LENGTH, max_length=128)
    name: Optional[str] = Field(default=None, max_length=120)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        value = value.strip().lower()
        local, _, domain = value.partition("@")
        if not local or "." not in domain:
            raise ValueError("Invalid email address")
        return value


class LoginRequest(CamelModel):
    email: str
    password: str


class RefreshRequest(CamelModel):
    refresh_token: str


class TokenResponse(CamelModel):
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"


class UserResponse(CamelModel):
    id: int
    email: str
    name: str


class RegisterResponse(UserResponse):
    team_id: Optional[int] = None


# Player Schemas
class PlayerResponse(CamelModel):
    id: int
    name: str
    position: str
    rating: int
    age: int
    number: int
    is_starter: bool
    is_captain: bool
    formation_position: Optional[str] = None
    speed: int
    shooting: int
    passing: int
    defending: int
    stamina: int
    reflexes: int
    market_value: int


# Team Schemas
class TeamColors(CamelModel):
    primary: str
    secondary: str


class TeamResponse(CamelModel):
    id: int
    name: str
    formation: str
    budget: int
    colors: Optional[TeamColors] = None
    logo: Optional[str] = None
    league_id: Optional[int] = None
    is_bot: bool
    overall_rating: int
    players: list[PlayerResponse]


class TeamStatsResponse(CamelModel):
    overall_rating: int
    total_value: int
    average_age: int
    position_counts: dict[str, int]


class FormationUpdate(CamelModel):
    formation: str


class SwapPlayersRequest(CamelModel):
    starter_id: int
    substitute_id: int


class TeamUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    formation: Optional[str] = None
    colors: Optional[TeamColors] = None
    logo: Optional[str] = Field(default=None, max_length=100)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("Team name cannot be blank")
        return value


class MessageResponse(CamelModel):
    message: str


# League Schemas
class LeagueResponse(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    level: int
    max_teams: int
    status: str
    team_count: int


class LeagueTeamBrief(CamelModel):
    id: int
    name: str
    is_bot: bool
    formation: str
    overall_rating: int


class LeagueDetail(LeagueResponse):
    teams: list[LeagueTeamBrief]


# Transfer Schemas
class FreeAgentResponse(CamelModel):
    transfer_id: int
    asking_price: int
    is_free: bool
    from_team_id: Optional[int] = None
    player: PlayerResponse
