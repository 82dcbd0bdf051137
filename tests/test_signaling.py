from uuid import UUID

import pytest

from konnekt_session.signaling import Answer, IceCandidate, Offer, SignalingMessage

A = UUID(int=1)
B = UUID(int=2)


def test_offer_wire_form():
    message = SignalingMessage(A, B, Offer(sdp="v=0"))
    assert message.to_dict() == {"from": str(A), "to": str(B), "type": "offer", "sdp": "v=0"}


def test_ice_candidate_type_tag():
    message = SignalingMessage(A, B, IceCandidate("cand"))
    assert message.to_dict()["type"] == "ice-candidate"


@pytest.mark.parametrize(
    "content",
    [
        Offer("v=0"),
        Answer("v=1"),
        IceCandidate("cand", "0", 3),
        IceCandidate("cand"),
    ],
)
def test_json_round_trip(content):
    message = SignalingMessage(A, B, content)
    assert SignalingMessage.from_json(message.to_json()) == message


def test_missing_optional_ice_fields_default_to_none():
    parsed = SignalingMessage.from_dict(
        {"from": str(A), "to": str(B), "type": "ice-candidate", "candidate": "c"}
    )
    assert parsed.content == IceCandidate("c", None, None)


def test_nil_recipient_parses():
    nil = UUID(int=0)
    parsed = SignalingMessage.from_dict({"from": str(A), "to": str(nil), "type": "answer", "sdp": "s"})
    assert parsed.to == nil
    assert parsed.content == Answer("s")


def test_unknown_type_raises():
    with pytest.raises(ValueError):
        SignalingMessage.from_dict({"from": str(A), "to": str(B), "type": "bye"})


def test_missing_sdp_raises():
    with pytest.raises(ValueError):
        SignalingMessage.from_dict({"from": str(A), "to": str(B), "type": "offer"})


def test_index_out_of_range_raises():
    with pytest.raises(ValueError):
        IceCandidate("c", None, 70000)


def test_bad_sender_raises():
    with pytest.raises(ValueError):
        SignalingMessage.from_dict({"from": "nope", "to": str(B), "type": "offer", "sdp": "s"})