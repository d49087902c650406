"""
Domain errors raised by the engines and generators.
The API layer maps these onto HTTP status codes.
"""


class ManagerSimulatorError(Exception):
    pass


class TeamNotFoundError(ManagerSimulatorError, LookupError):
    def __init__(self, team_id):
        super().__init__(f"Team {team_id} not found")
        self.team_id = team_id


class PlayerNotFoundError(ManagerSimulatorError, LookupError):
    def __init__(self, player_id, team_id=None):
        message = f"Player {player_id} not found"
        if team_id is not None:
            message += f" in team {team_id}"
        super().__init__(message)
        self.player_id = player_id
        self.team_id = team_id


class InvalidFormationError(ManagerSimulatorError, ValueError):
    def __init__(self, formation: str):
        super().__init__(f"Unsupported formation '{formation}'")
        self.formation = formation


class SquadGenerationError(ManagerSimulatorError):
    """Roster could not be persisted; nothing from the attempt was kept."""


class LeagueNotFoundError(ManagerSimulatorError, LookupError):
    def __init__(self, league_id):
        super().__init__(f"League {league_id} not found")
        self.league_id = league_id


class DuplicateEmailError(ManagerSimulatorError, ValueError):
    def __init__(self, email: str):
        super().__init__(f"Email {email} is already registered")
        self.email = email


class DuplicateTeamNameError(ManagerSimulatorError, ValueError):
    def __init__(self, name: str):
        super().__init__(f"A team named '{name}' already exists in this league")
        self.name = name


class LeagueMembershipError(ManagerSimulatorError, ValueError):
    """Team cannot join (or is not in) the requested league"""


class TransferError(ManagerSimulatorError, ValueError):
    """A free agent could not be signed or a player could not be released"""
