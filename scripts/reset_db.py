#!/usr/bin/env python3
"""
Rebuild the database from scratch: drop every table, recreate the schema,
then seed the leagues with bot teams.
WARNING: This will DELETE ALL existing data, including user accounts.
"""
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.database import engine, Base, get_session
from app.engine.league_engine import LeagueEngine


def reset():
    """Drop all tables, recreate them and seed"""
    # Import all models to register them with Base
    from app.models import user, league, team, player, team_player, transfer  # noqa

    print("Dropping all tables...")
    Base.metadata.drop_all(bind=engine)
    print("Creating tables...")
    Base.metadata.create_all(bind=engine)

    session = get_session()
    try:
        leagues = LeagueEngine(session).seed()
        for league in leagues:
            print(f"  {league.name}: {len(league.teams)} teams")
    finally:
        session.close()
    print("Reset complete!")


if __name__ == "__main__":
    print("=" * 60)
    print("WARNING: This will DELETE ALL existing data!")
    print("=" * 60)
    confirm = input("Type 'yes' to confirm: ")
    if confirm.lower() == 'yes':
        reset()
    else:
        print("Reset cancelled.")
