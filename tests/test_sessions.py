import pytest

from zgmserver.messages import RemoveReason
from zgmserver.rooms import RoomManager
from zgmserver.sessions import TRANSIENT_ID_LIMIT, SessionManager


class FakeSession:
    def __init__(self):
        self.messages = []
        self.cleared = []
        self.restored = []

    def send_message(self, message):
        self.messages.append(message)

    def clear_room(self, reason):
        self.cleared.append(reason)

    def restore_state(self, code, state):
        self.restored.append((code, state))


class RecordingRoom:
    def __init__(self):
        self.reconnects = []
        self.removed = []

    def reconnect(self, replacee, new_id, new_session):
        self.reconnects.append((replacee, new_id, new_session))

    def remove_player(self, transient_id, reason):
        self.removed.append((transient_id, reason))


@pytest.fixture
def manager():
    return SessionManager()


def test_new_id_counts_from_one(manager):
    assert [manager.new_id() for _ in range(3)] == [1, 2, 3]


def test_new_id_wraps_around(manager):
    manager.temp_id_counter = TRANSIENT_ID_LIMIT
    assert manager.new_id() == 1


def test_register_maps_transient_id(manager):
    tid = manager.register(FakeSession(), "alice")
    assert manager.get_user_by_transient_id(tid) == "alice"
    assert manager.sessions["alice"].transient_id == tid


def test_unknown_transient_id(manager):
    assert manager.get_user_by_transient_id(42) is None


def test_reconnection_notifies_room(manager):
    first = FakeSession()
    old_id = manager.register(first, "alice")
    room = RecordingRoom()
    manager.update_room(old_id, room)
    second = FakeSession()
    new_id = manager.register(second, "alice")
    assert room.reconnects == [(old_id, new_id, second)]
    assert manager.get_user_by_transient_id(old_id) is None
    assert manager.get_user_by_transient_id(new_id) == "alice"
    assert manager.sessions["alice"].session is second


def test_remove_session_tells_room(manager):
    tid = manager.register(FakeSession(), "bob")
    room = RecordingRoom()
    manager.update_room(tid, room)
    manager.remove_session(tid, RemoveReason.LOGOUT)
    assert room.removed == [(tid, RemoveReason.LOGOUT)]
    assert "bob" not in manager.sessions
    assert manager.get_user_by_transient_id(tid) is None


def test_remove_unknown_session_is_ignored(manager):
    manager.register(FakeSession(), "bob")
    manager.remove_session(999, RemoveReason.DISCONNECTED)
    assert list(manager.sessions) == ["bob"]


def test_update_room_clears(manager):
    tid = manager.register(FakeSession(), "carol")
    room = RecordingRoom()
    manager.update_room(tid, room)
    assert manager.sessions["carol"].room is room
    manager.update_room(tid, None)
    assert manager.sessions["carol"].room is None


def test_with_real_room(manager):
    rooms = RoomManager()
    leader_session, guest_session = FakeSession(), FakeSession()
    leader = manager.register(leader_session, "alice")
    guest = manager.register(guest_session, "bob")
    code, room = rooms.create(leader, leader_session)
    rooms.join(guest, guest_session, code)
    manager.update_room(leader, room)
    manager.update_room(guest, room)
    manager.remove_session(guest, RemoveReason.DISCONNECTED)
    assert guest_session.cleared == [RemoveReason.DISCONNECTED]
    assert room.player_count == 1
    assert room.get_id(1) is None


def test_reconnect_with_real_room_moves_slot(manager):
    rooms = RoomManager()
    session = FakeSession()
    old_id = manager.register(session, "alice")
    code, room = rooms.create(old_id, session)
    manager.update_room(old_id, room)
    replacement = FakeSession()
    new_id = manager.register(replacement, "alice")
    assert room.get_id(0) == new_id
    assert room.id_map == {new_id: 0}