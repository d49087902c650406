#!/usr/bin/env python3
"""
CLI for seeding and inspecting the Manager Simulator database
"""
import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from sqlalchemy.exc import SQLAlchemyError

from app.database import init_db, get_session
from app.engine import LeagueEngine, TeamEngine, TransferEngine
from app.exceptions import DuplicateEmailError, SquadGenerationError
from app.auth.utils import find_user_by_email, register_user

console = Console()


@click.group()
def cli():
    """Manager Simulator - Football Management Simulation"""
    pass


@cli.command()
def init():
    """Initialize the database"""
    console.print("[yellow]Initializing database...[/yellow]")
    init_db()
    console.print("[green]Database initialized successfully![/green]")


@cli.command()
def seed():
    """Create the leagues and fill them with bot teams"""
    init_db()
    session = get_session()
    try:
        engine = LeagueEngine(session)
        leagues = engine.seed()

        table = Table(title="Leagues")
        table.add_column("Level", justify="right")
        table.add_column("Name", style="cyan")
        table.add_column("Teams", justify="right", style="green")
        for league in leagues:
            table.add_row(str(league.level), league.name, f"{engine.team_count(league.id)}/{league.max_teams}")
        console.print(table)
    except (SQLAlchemyError, SquadGenerationError) as e:
        console.print(f"[red]Seeding failed: {e}[/red]")
        raise SystemExit(1)
    finally:
        session.close()


@cli.command("create-user")
@click.argument("email")
@click.option("--name", default=None, help="Display name (defaults to the part before @)")
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
def create_user(email: str, name: str, password: str):
    """Register a user and give them a team"""
    init_db()
    session = get_session()
    try:
        user = register_user(session, email, password, name)
        team = user.teams[0]
        console.print(f"[green]Created {user.email} with team '{team.name}' (id {team.id})[/green]")
    except (DuplicateEmailError, SquadGenerationError) as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)
    finally:
        session.close()


@cli.command("reset-team")
@click.argument("email")
def reset_team(email: str):
    """Delete a user's team and generate a fresh one"""
    session = get_session()
    try:
        user = find_user_by_email(session, email)
        if user is None:
            console.print(f"[red]No user with email {email}[/red]")
            raise SystemExit(1)

        team = LeagueEngine(session).reset_user_team(user)
        console.print(f"[green]New team '{team.name}' (id {team.id}) with {team.squad_size} players[/green]")
    except (SQLAlchemyError, SquadGenerationError) as e:
        console.print(f"[red]Reset failed: {e}[/red]")
        raise SystemExit(1)
    finally:
        session.close()


@cli.command("free-agents")
@click.option("--count", default=20, show_default=True, help="Players to generate")
def free_agents(count: int):
    """Generate players and list them on the free-agent market"""
    init_db()
    session = get_session()
    try:
        listings = TransferEngine(session).generate_free_agents(count)

        table = Table(title=f"Free agents ({len(listings)} new)")
        table.add_column("Id", justify="right")
        table.add_column("Name", style="cyan")
        table.add_column("Pos", style="magenta")
        table.add_column("OVR", justify="right", style="green")
        table.add_column("Price", justify="right")
        for listing in listings:
            p = listing.player
            table.add_row(str(p.id), p.name, p.position.value, str(p.overall_rating), f"{listing.asking_price:,}")
        console.print(table)
    except SQLAlchemyError as e:
        console.print(f"[red]Could not generate free agents: {e}[/red]")
        raise SystemExit(1)
    finally:
        session.close()


@cli.command("show-team")
@click.argument("email")
def show_team(email: str):
    """Show a user's squad"""
    session = get_session()
    try:
        user = find_user_by_email(session, email)
        if user is None:
            console.print(f"[red]No user with email {email}[/red]")
            raise SystemExit(1)

        team = TeamEngine(session).get_owned_team(user.id)
        if team is None:
            console.print(f"[red]{email} has no team. Run 'reset-team' to create one.[/red]")
            raise SystemExit(1)

        stats = TeamEngine.team_stats(team)
        console.print(Panel(
            f"Formation: {team.formation}\n"
            f"Rating: {stats['overall_rating']}\n"
            f"Squad value: {stats['total_value']:,}\n"
            f"Average age: {stats['average_age']}",
            title=f"[bold]{team.name}[/bold]",
        ))

        table = Table(title=f"Squad ({team.squad_size} players)")
        table.add_column("#", justify="right")
        table.add_column("Name", style="cyan")
        table.add_column("Pos", style="magenta")
        table.add_column("Slot")
        table.add_column("Age", justify="right")
        table.add_column("OVR", justify="right", style="green")
        for tp in team.team_players:
            p = tp.player
            name = f"{p.name} (C)" if p.is_captain else p.name
            table.add_row(
                str(p.number),
                name,
                tp.position.value,
                tp.formation_position or "-",
                str(p.age),
                str(p.overall_rating),
            )
        console.print(table)
    finally:
        session.close()


if __name__ == "__main__":
    cli()
