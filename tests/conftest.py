"""
Shared fixtures: an in-memory database, an API client bound to it, and
helpers for users, leagues and teams.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.auth.utils import create_access_token, register_user
from app.engine.league_engine import LeagueEngine
from app.generators.squad_generator import SquadGenerator
from app.generators.team_generator import TeamGenerator
from app import models  # noqa: F401
from app.models.player import Player
from main import app

TEST_PASSWORD = "correct-horse"

engine = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    """Fresh in-memory database for each test"""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    """TestClient with database dependency override"""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def leagues(db):
    """The three leagues, without bot teams"""
    return LeagueEngine(db).initialize_leagues()


@pytest.fixture
def make_team(db):
    """Create a saved team with a generated squad"""
    def _make_team(name="Test FC", formation="4-4-2", **generate_kwargs):
        team = TeamGenerator.create_team(name=name, formation=formation)
        db.add(team)
        db.commit()
        SquadGenerator(db).generate(team.id, **generate_kwargs)
        db.refresh(team)
        return team
    return _make_team


@pytest.fixture
def make_user(db, leagues):
    """Register a user (with a team in the rookie league)"""
    def _make_user(email="manager@example.com", name="Manager"):
        return register_user(db, email, TEST_PASSWORD, name)
    return _make_user


@pytest.fixture
def auth_headers():
    """Bearer headers for a user id"""
    def _auth_headers(user_id: int) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user_id)}"}
    return _auth_headers


@pytest.fixture
def fail_roster_flush(db, monkeypatch):
    """Call to make every flush that carries new players fail, as a full disk would"""
    def _arm():
        real_flush = db.flush

        def flush(*args, **kwargs):
            if any(isinstance(obj, Player) for obj in db.new):
                raise SQLAlchemyError("disk full")
            return real_flush(*args, **kwargs)

        monkeypatch.setattr(db, "flush", flush)
    return _arm
