"""
Game configuration
"""
import os
from dotenv import load_dotenv

load_dotenv()


def _database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    # Use /app/data in Docker, current dir otherwise
    db_path = os.getenv("DATABASE_PATH", "manager_simulator.db")
    return f"sqlite:///{db_path}"


class GameSettings:
    """Game settings from environment variables"""

    DATABASE_URL: str = _database_url()
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Comma-separated, added to the local dev origins in main.py
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "")

    # Squad generation
    DEFAULT_FORMATION: str = os.getenv("DEFAULT_FORMATION", "4-4-2")
    SQUAD_SIZE: int = int(os.getenv("SQUAD_SIZE", "16"))
    STARTER_COUNT: int = int(os.getenv("STARTER_COUNT", "11"))

    # Finances
    STARTING_BUDGET: int = int(os.getenv("STARTING_BUDGET", "10000000"))

    # Leagues
    LEAGUE_MAX_TEAMS: int = int(os.getenv("LEAGUE_MAX_TEAMS", "12"))


settings = GameSettings()
