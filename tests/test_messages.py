import json

import pytest

from zgmserver.messages import (
    JoinRoomError,
    JoinRoomRequest,
    Login,
    Logout,
    MessageError,
    OutgoingMessage,
    RemoveReason,
    parse_incoming,
)


def test_parse_login():
    assert parse_incoming('{"kind":"Login","data":"alice"}') == Login("alice")


def test_parse_join_with_code():
    assert parse_incoming('{"kind":"JoinRoom","data":"AB12"}') == JoinRoomRequest("AB12")


@pytest.mark.parametrize(
    "text", ['{"kind":"JoinRoom","data":null}', '{"kind":"JoinRoom"}']
)
def test_parse_join_without_code(text):
    assert parse_incoming(text) == JoinRoomRequest(None)


@pytest.mark.parametrize("text", ['{"kind":"Logout"}', '{"kind":"Logout","data":null}'])
def test_parse_logout(text):
    assert parse_incoming(text) == Logout()


@pytest.mark.parametrize(
    "text",
    [
        "not json",
        "[1, 2]",
        '{"data":"alice"}',
        '{"kind":"Dance"}',
        '{"kind":"Login","data":5}',
        '{"kind":"Login"}',
        '{"kind":"JoinRoom","data":42}',
        '{"kind":"Logout","data":"x"}',
    ],
)
def test_parse_rejects_bad_messages(text):
    with pytest.raises(MessageError):
        parse_incoming(text)


def test_game_started_has_only_a_tag():
    assert OutgoingMessage.game_started().encode() == '{"kind":"GameStarted"}'


def test_remove_from_room_dict():
    message = OutgoingMessage.remove_from_room(RemoveReason.ROOM_CLOSED)
    assert message.to_dict() == {"kind": "RemoveFromRoom", "data": "RoomClosed"}


def test_reason_accepts_wire_value():
    message = OutgoingMessage.remove_from_room("Logout")
    assert message.data == RemoveReason.LOGOUT.value


@pytest.mark.parametrize("reason", list(RemoveReason))
def test_force_disconnect_round_trip(reason):
    decoded = json.loads(OutgoingMessage.force_disconnect(reason).encode())
    assert decoded == {"kind": "ForceDisconnect", "data": reason.value}


def test_join_room_success():
    message = OutgoingMessage.join_room_success("WXYZ")
    assert message.to_dict() == {
        "kind": "JoinRoomResult",
        "data": {"status": "Success", "data": "WXYZ"},
    }


@pytest.mark.parametrize("error", list(JoinRoomError))
def test_join_room_error_round_trip(error):
    message = OutgoingMessage.join_room_error(error)
    decoded = json.loads(message.encode())
    assert decoded == message.to_dict()
    assert decoded["data"] == {"status": "Error", "data": error.value}


def test_turn_update_carries_id():
    assert OutgoingMessage.turn_update(7).to_dict() == {"kind": "TurnUpdate", "data": 7}


def test_encode_is_compact():
    assert " " not in OutgoingMessage.join_room_success("AB CD").encode().replace("AB CD", "")


def test_invalid_reason_rejected():
    with pytest.raises(ValueError):
        OutgoingMessage.remove_from_room("Exploded")