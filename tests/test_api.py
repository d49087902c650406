"""
API tests - auth flow, team endpoints, leagues and transfers through the FastAPI app.
"""
from sqlalchemy import func, select

from app.auth.utils import create_refresh_token
from app.config import settings
from app.engine.team_engine import TeamEngine
from app.engine.transfer_engine import TransferEngine
from app.generators.formations import FORMATIONS
from app.models.player import Player
from app.models.team import Team
from app.models.user import User


def _count(db, model):
    return db.scalar(select(func.count(model.id)))


PLAYER_KEYS = {
    "id", "name", "position", "rating", "age", "number", "isStarter", "isCaptain",
    "formationPosition", "speed", "shooting", "passing", "defending", "stamina",
    "reflexes", "marketValue",
}


class TestAuth:

    def test_register(self, client, leagues):
        response = client.post("/api/auth/register", json={
            "email": "Coach@Example.com", "password": "long-enough", "name": "Coach",
        })
        assert response.status_code == 201
        data = response.json()
        assert data["email"] == "coach@example.com"
        assert data["name"] == "Coach"
        assert data["teamId"] is not None

    def test_register_duplicate_email(self, client, make_user):
        make_user(email="taken@example.com")
        response = client.post("/api/auth/register", json={
            "email": "taken@example.com", "password": "long-enough",
        })
        assert response.status_code == 409

    def test_register_rolls_back_failed_squad(self, client, leagues, db, fail_roster_flush):
        fail_roster_flush()
        response = client.post("/api/auth/register", json={
            "email": "unlucky@example.com", "password": "long-enough",
        })
        assert response.status_code == 500
        assert _count(db, User) == 0
        assert _count(db, Team) == 0
        assert _count(db, Player) == 0

    def test_register_config_error_is_not_a_conflict(self, client, leagues, db, monkeypatch):
        monkeypatch.setattr(settings, "SQUAD_SIZE", 20)
        response = client.post("/api/auth/register", json={
            "email": "odd@example.com", "password": "long-enough",
        })
        assert response.status_code == 500
        assert _count(db, User) == 0

    def test_register_short_password(self, client, leagues):
        response = client.post("/api/auth/register", json={
            "email": "short@example.com", "password": "short",
        })
        assert response.status_code == 422

    def test_register_invalid_email(self, client, leagues):
        response = client.post("/api/auth/register", json={
            "email": "not-an-email", "password": "long-enough",
        })
        assert response.status_code == 422

    def test_login_and_me(self, client, make_user):
        user = make_user()
        response = client.post("/api/auth/login", json={
            "email": user.email, "password": "correct-horse",
        })
        assert response.status_code == 200
        tokens = response.json()
        assert tokens["tokenType"] == "bearer"
        assert tokens["refreshToken"]

        me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {tokens['accessToken']}"})
        assert me.status_code == 200
        assert me.json() == {"id": user.id, "email": user.email, "name": user.name}

    def test_login_wrong_password(self, client, make_user):
        user = make_user()
        response = client.post("/api/auth/login", json={"email": user.email, "password": "wrong-password"})
        assert response.status_code == 401

    def test_login_unknown_email(self, client, leagues):
        response = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "whatever1"})
        assert response.status_code == 401

    def test_refresh(self, client, make_user):
        user = make_user()
        response = client.post("/api/auth/refresh", json={"refreshToken": create_refresh_token(user.id)})
        assert response.status_code == 200
        assert response.json()["accessToken"]

    def test_refresh_rejects_access_token(self, client, make_user, auth_headers):
        user = make_user()
        access = auth_headers(user.id)["Authorization"].split()[1]
        response = client.post("/api/auth/refresh", json={"refreshToken": access})
        assert response.status_code == 401

    def test_me_requires_token(self, client):
        assert client.get("/api/auth/me").status_code in (401, 403)

    def test_me_rejects_bad_token(self, client):
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401


class TestTeams:

    def test_my_team(self, client, make_user, auth_headers):
        user = make_user()
        response = client.get("/api/teams/my-team", headers=auth_headers(user.id))
        assert response.status_code == 200

        team = response.json()
        assert team["formation"] == "4-4-2"
        assert team["isBot"] is False
        assert team["leagueId"] is not None
        assert set(team["colors"]) == {"primary", "secondary"}
        assert len(team["players"]) == 16
        assert set(team["players"][0]) == PLAYER_KEYS

        starters = [p for p in team["players"] if p["isStarter"]]
        assert [p["formationPosition"] for p in starters] == FORMATIONS["4-4-2"]
        assert sum(1 for p in team["players"] if p["isCaptain"]) == 1

    def test_my_team_missing(self, client, make_user, auth_headers, db):
        user = make_user()
        TeamEngine(db).delete_owned_teams(user.id)

        response = client.get("/api/teams/my-team", headers=auth_headers(user.id))
        assert response.status_code == 404

    def test_get_team_and_stats(self, client, make_user, auth_headers):
        user = make_user()
        team_id = user.teams[0].id
        headers = auth_headers(user.id)

        assert client.get(f"/api/teams/{team_id}", headers=headers).json()["id"] == team_id

        stats = client.get(f"/api/teams/{team_id}/stats", headers=headers).json()
        assert set(stats) == {"overallRating", "totalValue", "averageAge", "positionCounts"}
        assert stats["positionCounts"] == {"GK": 2, "DEF": 5, "MID": 5, "FWD": 4}

    def test_unknown_team(self, client, make_user, auth_headers):
        user = make_user()
        assert client.get("/api/teams/9999", headers=auth_headers(user.id)).status_code == 404
        assert client.get("/api/teams/9999/stats", headers=auth_headers(user.id)).status_code == 404

    def test_set_captain(self, client, make_user, auth_headers):
        user = make_user()
        team = user.teams[0]
        player_id = team.players[7].id
        url = f"/api/teams/{team.id}/captain/{player_id}"

        for _ in range(2):
            response = client.put(url, headers=auth_headers(user.id))
            assert response.status_code == 200
            captains = [p["id"] for p in response.json()["players"] if p["isCaptain"]]
            assert captains == [player_id]

    def test_set_captain_unknown_player(self, client, make_user, auth_headers):
        user = make_user()
        team = user.teams[0]
        response = client.put(f"/api/teams/{team.id}/captain/99999", headers=auth_headers(user.id))
        assert response.status_code == 404

    def test_cannot_modify_someone_elses_team(self, client, make_user, auth_headers):
        owner = make_user(email="owner@example.com")
        intruder = make_user(email="intruder@example.com")
        team = owner.teams[0]

        response = client.put(
            f"/api/teams/{team.id}/captain/{team.players[1].id}",
            headers=auth_headers(intruder.id),
        )
        assert response.status_code == 404

    def test_change_formation(self, client, make_user, auth_headers):
        user = make_user()
        team_id = user.teams[0].id
        response = client.put(
            f"/api/teams/{team_id}/formation",
            json={"formation": "4-3-3"},
            headers=auth_headers(user.id),
        )
        assert response.status_code == 200
        data = response.json()
        assert data["formation"] == "4-3-3"
        assert [p["formationPosition"] for p in data["players"] if p["isStarter"]] == FORMATIONS["4-3-3"]

    def test_change_formation_invalid(self, client, make_user, auth_headers):
        user = make_user()
        team_id = user.teams[0].id
        response = client.put(
            f"/api/teams/{team_id}/formation",
            json={"formation": "2-2-6"},
            headers=auth_headers(user.id),
        )
        assert response.status_code == 400

    def test_swap_players(self, client, make_user, auth_headers):
        user = make_user()
        team = user.teams[0]
        starter = team.starters[9]
        substitute = [tp for tp in team.team_players if not tp.is_starter][-1]
        slot = starter.formation_position

        response = client.put(
            f"/api/teams/{team.id}/swap-players",
            json={"starterId": starter.player_id, "substituteId": substitute.player_id},
            headers=auth_headers(user.id),
        )
        assert response.status_code == 200

        players = {p["id"]: p for p in response.json()["players"]}
        assert players[substitute.player_id]["isStarter"] is True
        assert players[substitute.player_id]["formationPosition"] == slot
        assert players[starter.player_id]["isStarter"] is False
        assert players[starter.player_id]["formationPosition"] is None
        assert sum(1 for p in players.values() if p["isStarter"]) == 11

    def test_swap_wrong_roles(self, client, make_user, auth_headers):
        user = make_user()
        team = user.teams[0]
        starters = team.starters
        response = client.put(
            f"/api/teams/{team.id}/swap-players",
            json={"starterId": starters[0].player_id, "substituteId": starters[1].player_id},
            headers=auth_headers(user.id),
        )
        assert response.status_code == 404


    def test_update_team(self, client, make_user, auth_headers):
        user = make_user()
        team_id = user.teams[0].id
        response = client.put(
            f"/api/teams/{team_id}",
            json={"name": "  Vikings  ", "colors": {"primary": "#111111", "secondary": "#222222"}, "logo": "crown"},
            headers=auth_headers(user.id),
        )
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Vikings"
        assert data["colors"] == {"primary": "#111111", "secondary": "#222222"}
        assert data["logo"] == "crown"
        assert len(data["players"]) == 16

    def test_update_team_formation_and_name(self, client, make_user, auth_headers):
        user = make_user()
        team_id = user.teams[0].id
        response = client.put(
            f"/api/teams/{team_id}",
            json={"name": "Wingers", "formation": "4-3-3"},
            headers=auth_headers(user.id),
        )
        assert response.status_code == 200
        starters = [p["formationPosition"] for p in response.json()["players"] if p["isStarter"]]
        assert starters == FORMATIONS["4-3-3"]

    def test_update_team_name_taken(self, client, make_user, auth_headers):
        first = make_user(email="first@example.com", name="First")
        second = make_user(email="second@example.com", name="Second")
        response = client.put(
            f"/api/teams/{second.teams[0].id}",
            json={"name": first.teams[0].name},
            headers=auth_headers(second.id),
        )
        assert response.status_code == 400

    def test_update_team_invalid_input(self, client, make_user, auth_headers):
        user = make_user()
        team_id = user.teams[0].id
        headers = auth_headers(user.id)
        assert client.put(f"/api/teams/{team_id}", json={"name": "   "}, headers=headers).status_code == 422
        assert client.put(f"/api/teams/{team_id}", json={"name": "x" * 51}, headers=headers).status_code == 422
        assert client.put(f"/api/teams/{team_id}", json={"formation": "0-0-10"}, headers=headers).status_code == 400

    def test_update_someone_elses_team(self, client, make_user, auth_headers):
        owner = make_user(email="owner@example.com")
        intruder = make_user(email="intruder@example.com")
        response = client.put(
            f"/api/teams/{owner.teams[0].id}",
            json={"name": "Hijacked"},
            headers=auth_headers(intruder.id),
        )
        assert response.status_code == 404

    def test_delete_team(self, client, make_user, auth_headers, db):
        user = make_user()
        headers = auth_headers(user.id)
        response = client.delete(f"/api/teams/{user.teams[0].id}", headers=headers)
        assert response.status_code == 200

        assert client.get("/api/teams/my-team", headers=headers).status_code == 404
        assert _count(db, Player) == 0

    def test_delete_someone_elses_team(self, client, make_user, auth_headers, db):
        owner = make_user(email="owner@example.com")
        intruder = make_user(email="intruder@example.com")
        response = client.delete(f"/api/teams/{owner.teams[0].id}", headers=auth_headers(intruder.id))
        assert response.status_code == 404
        assert _count(db, Team) == 2


class TestLeagues:

    def test_list_leagues(self, client, make_user):
        make_user()
        response = client.get("/api/leagues")
        assert response.status_code == 200

        leagues = response.json()
        assert [league["level"] for league in leagues] == [1, 2, 3]
        assert leagues[2]["teamCount"] == 1
        assert leagues[0]["maxTeams"] == 12
        assert leagues[0]["status"] == "ACTIVE"

    def test_league_detail(self, client, make_user):
        user = make_user()
        league_id = user.teams[0].league_id

        response = client.get(f"/api/leagues/{league_id}")
        assert response.status_code == 200
        teams = response.json()["teams"]
        assert len(teams) == 1
        assert teams[0]["isBot"] is False
        assert set(teams[0]) == {"id", "name", "isBot", "formation", "overallRating"}

    def test_unknown_league(self, client):
        assert client.get("/api/leagues/77").status_code == 404

    def test_join_league(self, client, make_user, auth_headers, leagues):
        user = make_user()
        top = leagues[0]
        response = client.post(f"/api/leagues/{top.id}/join", headers=auth_headers(user.id))
        assert response.status_code == 200
        assert response.json()["leagueId"] == top.id

        detail = client.get(f"/api/leagues/{top.id}").json()
        assert [team["isBot"] for team in detail["teams"]] == [False]

    def test_join_errors(self, client, make_user, auth_headers):
        user = make_user()
        headers = auth_headers(user.id)
        own_league = user.teams[0].league_id
        assert client.post("/api/leagues/999/join", headers=headers).status_code == 404
        assert client.post(f"/api/leagues/{own_league}/join", headers=headers).status_code == 400

    def test_join_requires_token(self, client, leagues):
        assert client.post(f"/api/leagues/{leagues[0].id}/join").status_code in (401, 403)

    def test_leave_league(self, client, make_user, auth_headers):
        user = make_user()
        headers = auth_headers(user.id)
        league_id = user.teams[0].league_id

        assert client.delete(f"/api/leagues/{league_id}/leave", headers=headers).status_code == 200
        assert client.get("/api/teams/my-team", headers=headers).status_code == 404
        assert client.delete(f"/api/leagues/{league_id}/leave", headers=headers).status_code == 404


class TestTransfers:

    def test_fire_and_sign_back(self, client, make_user, auth_headers):
        user = make_user()
        headers = auth_headers(user.id)
        player_id = user.teams[0].players[13].id

        response = client.delete(f"/api/transfers/fire/{player_id}", headers=headers)
        assert response.status_code == 200
        listing = response.json()
        assert listing["isFree"] is True
        assert listing["askingPrice"] == 0
        assert listing["player"]["id"] == player_id
        assert listing["player"]["isStarter"] is False

        market = client.get("/api/transfers/free-agents").json()
        assert [entry["player"]["id"] for entry in market] == [player_id]
        assert len(client.get("/api/teams/my-team", headers=headers).json()["players"]) == 15

        response = client.post(f"/api/transfers/sign/{player_id}", headers=headers)
        assert response.status_code == 200
        assert len(response.json()["players"]) == 16
        assert client.get("/api/transfers/free-agents").json() == []

    def test_fire_player_not_on_team(self, client, make_user, auth_headers):
        user = make_user()
        response = client.delete("/api/transfers/fire/99999", headers=auth_headers(user.id))
        assert response.status_code == 404

    def test_sign_into_full_squad(self, client, make_user, auth_headers, db):
        user = make_user()
        listing = TransferEngine(db).generate_free_agents(1)[0]
        response = client.post(f"/api/transfers/sign/{listing.player_id}", headers=auth_headers(user.id))
        assert response.status_code == 400

    def test_sign_unlisted_player(self, client, make_user, auth_headers):
        user = make_user()
        response = client.post("/api/transfers/sign/99999", headers=auth_headers(user.id))
        assert response.status_code == 404


def test_health(client):
    assert client.get("/api/health").json() == {"status": "healthy"}
