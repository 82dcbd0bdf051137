import json
from dataclasses import dataclass
from uuid import uuid4

from konnekt_session.activity_result import ActivityResult
from konnekt_session.traits import Identifiable, Scorable, Timable


@dataclass
class SampleResult(Identifiable, Scorable, Timable):
    id: str
    points: int
    time: int

    def identifier(self):
        return self.id

    def score(self):
        return self.points

    def time_taken(self):
        return self.time


def test_activity_result():
    wrapped = ActivityResult("activity", uuid4(), SampleResult(id="id", points=100, time=1000))
    assert wrapped.data.identifier() == "id"
    assert wrapped.data.score() == 100
    assert wrapped.data.time_taken() == 1000
    assert wrapped.to_dict()["data"] == {"id": "id", "points": 100, "time": 1000}


def test_activity_result_wraps_data():
    player_id = uuid4()
    data = SampleResult(id="id", points=100, time=1000)
    result = ActivityResult("123", player_id, data)

    assert result.activity_id == "123"
    assert result.player_id == player_id
    assert result.data.score() == 100


def test_to_dict_serializes_dataclass_payload():
    player_id = uuid4()
    result = ActivityResult("123", player_id, SampleResult("id", 100, 1000))

    assert result.to_dict() == {
        "activity_id": "123",
        "player_id": str(player_id),
        "data": {"id": "id", "points": 100, "time": 1000},
    }


def test_to_dict_is_json_ready():
    player_id = uuid4()
    result = ActivityResult("123", player_id, SampleResult("id", 100, 1000))
    decoded = json.loads(json.dumps(result.to_dict()))
    assert decoded["player_id"] == str(player_id)
    assert decoded["data"]["time"] == 1000