from dataclasses import dataclass
from uuid import uuid4

import pytest

from konnekt_session.activity import Activity, ActivityStatus
from konnekt_session.activity_result import ActivityResult
from konnekt_session.lobby import InvalidPasswordError, Lobby
from konnekt_session.player import Player
from konnekt_session.role import Role
from konnekt_session.traits import Identifiable, Named, Scorable, Timable


@dataclass
class PlayerProfile(Identifiable, Named):
    id: str
    title: str

    def identifier(self):
        return self.id

    def name(self):
        return self.title


@dataclass
class Challenge(Identifiable, Named):
    id: str
    title: str

    def identifier(self):
        return self.id

    def name(self):
        return self.title


@dataclass
class ChallengeResult(Identifiable, Scorable, Timable):
    def identifier(self):
        return "result"


def make_admin():
    return Player(Role.ADMIN, PlayerProfile(id="123", title="Test Admin"))


def make_activity():
    return Activity(
        id="789",
        status=ActivityStatus.NOT_STARTED,
        data=Challenge(id="789", title="Test Challenge"),
    )


def test_create_lobby():
    lobby = Lobby(make_admin())

    assert lobby.get_admin().role == Role.ADMIN
    assert lobby.get_admin().data.identifier() == "123"
    assert lobby.get_admin().data.name() == "Test Admin"
    assert len(lobby.participants) == 1
    assert len(lobby.activities) == 0
    assert lobby.password is None
    assert lobby.is_admin() is True


def test_create_lobby_with_id():
    lobby_id = uuid4()
    lobby = Lobby(make_admin(), lobby_id=lobby_id)
    assert lobby.id == lobby_id


def test_add_participant():
    lobby = Lobby(make_admin())
    participant = Player(Role.PLAYER, PlayerProfile(id="456", title="Test Participant"))
    lobby.add_participant(participant)

    assert len(lobby.participants) == 2
    assert lobby.participants[1].role == Role.PLAYER
    assert lobby.participants[1].data.identifier() == "456"
    assert lobby.participants[1].data.name() == "Test Participant"


def test_add_participant_twice_is_ignored():
    lobby = Lobby(make_admin())
    participant = Player(Role.PLAYER, PlayerProfile(id="456", title="P"))
    lobby.add_participant(participant)
    lobby.add_participant(participant)
    assert len(lobby.participants) == 2


def test_select_activity():
    lobby = Lobby(make_admin())
    activity = make_activity()
    lobby.add_activity(activity)

    assert lobby.select_activity(activity.id) is not None
    assert len(lobby.activities) == 1

    assert lobby.select_activity(activity.id).id == "789"
    assert len(lobby.activities) == 1

    assert lobby.select_activity("nonexistent") is None
    assert len(lobby.activities) == 1


def test_activity_workflow():
    lobby = Lobby(make_admin())
    activity = make_activity()
    lobby.add_activity(activity)
    lobby.select_activity(activity.id)

    started = lobby.start_activity(activity.id)
    assert started.status == ActivityStatus.IN_PROGRESS

    completed = lobby.complete_activity(activity.id)
    assert completed.status == ActivityStatus.DONE

    assert lobby.catalog.get_activity("789").status == ActivityStatus.NOT_STARTED


def test_start_unknown_activity_returns_none_and_clears_results():
    lobby = Lobby(make_admin())
    lobby.add_activity_result(ActivityResult("789", lobby.player_id, ChallengeResult()))
    assert lobby.start_activity("missing") is None
    assert lobby.results == []


def test_update_player_id():
    lobby = Lobby(make_admin())
    new_id = uuid4()
    lobby.update_player_id(new_id)

    assert lobby.player_id == new_id
    assert lobby.get_admin().id == new_id


def test_join_with_password():
    password = "password"
    lobby = Lobby(make_admin(), password=password)
    player = Player(Role.PLAYER, PlayerProfile(id="456", title="P"))
    lobby.join(player, password=password)
    assert len(lobby.participants) == 2


def test_join_with_wrong_password_raises():
    password = "password"
    lobby = Lobby(make_admin(), password=password)
    player = Player(Role.PLAYER, PlayerProfile(id="456", title="P"))
    with pytest.raises(InvalidPasswordError, match="Invalid password"):
        lobby.join(player)
    assert len(lobby.participants) == 1


def test_join_without_lobby_password():
    lobby = Lobby(make_admin())
    lobby.join(Player(Role.OBSERVER, PlayerProfile(id="456", title="P")))
    assert lobby.participants[-1].role == Role.OBSERVER


def test_remove_participant():
    lobby = Lobby(make_admin())
    participant = Player(Role.PLAYER, PlayerProfile(id="456", title="P"))
    lobby.add_participant(participant)

    assert lobby.remove_participant(participant.id) == participant
    assert len(lobby.participants) == 1
    assert lobby.remove_participant(participant.id) is None


def test_is_admin_false_for_non_admin_player():
    lobby = Lobby(make_admin())
    lobby.update_player_id(uuid4())
    lobby.participants[0].role = Role.PLAYER
    assert lobby.get_admin() is None
    assert lobby.is_admin() is False


def test_update_activity_status_to_not_started_clears_results():
    lobby = Lobby(make_admin())
    lobby.add_activity(make_activity())
    lobby.select_activity("789")
    lobby.add_activity_result(ActivityResult("789", lobby.player_id, ChallengeResult()))

    updated = lobby.update_activity_status("789", ActivityStatus.DONE)
    assert updated.status == ActivityStatus.DONE
    assert len(lobby.results) == 1

    updated = lobby.update_activity_status("789", ActivityStatus.NOT_STARTED)
    assert updated.status == ActivityStatus.NOT_STARTED
    assert lobby.results == []


def test_update_activity_status_unknown_keeps_results():
    lobby = Lobby(make_admin())
    lobby.add_activity_result(ActivityResult("789", lobby.player_id, ChallengeResult()))
    assert lobby.update_activity_status("missing", ActivityStatus.NOT_STARTED) is None
    assert len(lobby.results) == 1


def test_update_activity_info_selects_activity():
    lobby = Lobby(make_admin())
    lobby.add_activity(make_activity())
    selected = lobby.update_activity_info("789", Challenge(id="789", title="Other"))
    assert selected.id == "789"
    assert len(lobby.activities) == 1