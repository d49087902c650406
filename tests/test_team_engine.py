"""
Tests for team engine - captaincy, formation changes, swaps, branding, rating and deletion.
"""
import json

import pytest
from sqlalchemy import func, select

from app.engine.team_engine import TeamEngine
from app.exceptions import (
    TeamNotFoundError, PlayerNotFoundError, InvalidFormationError, DuplicateTeamNameError,
)
from app.generators.formations import FORMATIONS
from app.models.player import Player, SKILL_ATTRIBUTES
from app.models.team import Team
from app.models.team_player import TeamPlayer


def _set_all_skills(team, value):
    for player in team.players:
        for attr in SKILL_ATTRIBUTES:
            setattr(player, attr, value)
        player.is_captain = False


class TestCaptain:

    def test_set_captain_moves_flag(self, db, make_team):
        team = make_team()
        new_captain = team.players[5]

        TeamEngine(db).set_captain(team.id, new_captain.id)

        captains = [p for p in team.players if p.is_captain]
        assert captains == [new_captain]
        assert team.captain is new_captain

    def test_set_captain_is_idempotent(self, db, make_team):
        team = make_team()
        player = team.players[3]
        engine = TeamEngine(db)

        engine.set_captain(team.id, player.id)
        engine.set_captain(team.id, player.id)

        assert [p.id for p in team.players if p.is_captain] == [player.id]

    def test_player_from_another_team(self, db, make_team):
        team = make_team()
        other = make_team(name="Other FC")

        with pytest.raises(PlayerNotFoundError):
            TeamEngine(db).set_captain(team.id, other.players[0].id)

    def test_unknown_team(self, db):
        with pytest.raises(TeamNotFoundError):
            TeamEngine(db).set_captain(404, 1)


class TestFormation:

    def test_change_relabels_starters(self, db, make_team):
        team = make_team(formation="4-4-2")
        starter_ids = [tp.id for tp in team.starters]

        TeamEngine(db).change_formation(team.id, "4-3-3")

        assert team.formation == "4-3-3"
        assert [tp.id for tp in team.starters] == starter_ids
        assert [tp.formation_position for tp in team.starters] == FORMATIONS["4-3-3"]
        assert all(tp.formation_position is None for tp in team.team_players if not tp.is_starter)

    def test_relabel_keeps_slot_order_after_swap(self, db, make_team):
        team = make_team(formation="4-4-2")
        engine = TeamEngine(db)
        starter = team.starters[0]
        substitute = next(tp for tp in team.team_players if not tp.is_starter)

        engine.swap_players(team.id, starter.player_id, substitute.player_id)
        engine.change_formation(team.id, "3-5-2")

        # The substitute held "gk", so it takes the first slot of the new table
        assert substitute.formation_position == "gk"
        assert sorted(tp.formation_position for tp in team.starters) == sorted(FORMATIONS["3-5-2"])

    def test_unsupported_formation(self, db, make_team):
        team = make_team()
        with pytest.raises(InvalidFormationError):
            TeamEngine(db).change_formation(team.id, "9-9-9")
        assert team.formation == "4-4-2"


class TestSwap:

    def test_swap_players(self, db, make_team):
        team = make_team()
        starter = team.starters[4]
        substitute = [tp for tp in team.team_players if not tp.is_starter][0]
        slot = starter.formation_position

        TeamEngine(db).swap_players(team.id, starter.player_id, substitute.player_id)

        assert substitute.is_starter is True
        assert substitute.formation_position == slot
        assert starter.is_starter is False
        assert starter.formation_position is None

        slots = [tp.formation_position for tp in team.starters]
        assert len(slots) == 11
        assert len(set(slots)) == 11

    def test_swap_requires_starter_and_substitute(self, db, make_team):
        team = make_team()
        engine = TeamEngine(db)
        starters = team.starters
        substitute = [tp for tp in team.team_players if not tp.is_starter][0]

        with pytest.raises(PlayerNotFoundError):
            engine.swap_players(team.id, starters[0].player_id, starters[1].player_id)
        with pytest.raises(PlayerNotFoundError):
            engine.swap_players(team.id, substitute.player_id, starters[0].player_id)


class TestUpdate:

    def test_rename_and_rebrand(self, db, make_team):
        team = make_team()
        TeamEngine(db).update_team(
            team.id, name="Renamed FC", colors={"primary": "#000000", "secondary": "#FFFFFF"}, logo="star",
        )

        db.refresh(team)
        assert team.name == "Renamed FC"
        assert json.loads(team.colors) == {"primary": "#000000", "secondary": "#FFFFFF"}
        assert team.logo == "star"
        assert team.formation == "4-4-2"

    def test_update_with_formation_relabels(self, db, make_team):
        team = make_team()
        TeamEngine(db).update_team(team.id, formation="3-5-2")
        assert [tp.formation_position for tp in team.starters] == FORMATIONS["3-5-2"]

    def test_name_taken_in_same_league(self, db, make_team, leagues):
        first = make_team(name="Alpha")
        second = make_team(name="Beta")
        first.league_id = second.league_id = leagues[2].id
        db.commit()

        with pytest.raises(DuplicateTeamNameError):
            TeamEngine(db).update_team(second.id, name="Alpha", logo="custom-badge")
        db.refresh(second)
        assert second.name == "Beta"
        assert second.logo != "custom-badge"

    def test_same_name_in_other_league(self, db, make_team, leagues):
        first = make_team(name="Alpha")
        second = make_team(name="Beta")
        first.league_id = leagues[1].id
        second.league_id = leagues[2].id
        db.commit()

        TeamEngine(db).update_team(second.id, name="Alpha")
        assert second.name == "Alpha"

    def test_invalid_formation_changes_nothing(self, db, make_team):
        team = make_team()
        with pytest.raises(InvalidFormationError):
            TeamEngine(db).update_team(team.id, name="Never Saved", formation="1-1-8")
        db.refresh(team)
        assert team.name == "Test FC"


class TestRating:

    def test_full_lineup_average(self, make_team):
        team = make_team()
        _set_all_skills(team, 70)
        assert TeamEngine.team_rating(team) == 70

    def test_captain_bonus(self, make_team):
        team = make_team()
        _set_all_skills(team, 70)
        for tp in team.starters:
            tp.player.is_captain = True
        # Every starter flagged: +5 on every skill
        assert TeamEngine.team_rating(team) == 75

    def test_missing_starters_penalty(self, make_team):
        team = make_team()
        _set_all_skills(team, 70)
        team.starters[0].is_starter = False
        team.starters[0].is_starter = False
        assert TeamEngine.team_rating(team) == 70 - 2 * 3

    def test_no_starters(self, make_team):
        team = make_team()
        for tp in team.team_players:
            tp.is_starter = False
        assert TeamEngine.team_rating(team) == 0

    def test_substitutes_do_not_count(self, make_team):
        team = make_team()
        _set_all_skills(team, 70)
        for tp in team.team_players:
            if not tp.is_starter:
                tp.player.speed = 1
        assert TeamEngine.team_rating(team) == 70

    def test_stats(self, make_team):
        team = make_team()
        stats = TeamEngine.team_stats(team)

        assert stats["position_counts"] == {"GK": 2, "DEF": 5, "MID": 5, "FWD": 4}
        assert stats["total_value"] == sum(p.market_value for p in team.players)
        assert 18 <= stats["average_age"] <= 32
        assert 1 <= stats["overall_rating"] <= 100


class TestDelete:

    def test_delete_team_removes_roster_and_players(self, db, make_team):
        team = make_team()
        keep = make_team(name="Keep FC")
        team_id = team.id

        TeamEngine(db).delete_team(team_id)

        assert db.get(Team, team_id) is None
        assert db.scalar(select(func.count(TeamPlayer.id)).where(TeamPlayer.team_id == team_id)) == 0
        assert db.scalar(select(func.count(Player.id))) == 16
        assert len(db.get(Team, keep.id).team_players) == 16

    def test_delete_unknown_team(self, db):
        with pytest.raises(TeamNotFoundError):
            TeamEngine(db).delete_team(123)
