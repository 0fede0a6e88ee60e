from datetime import datetime, timezone
from pyrsistent import PMap, PVector
import pytest
import uuid

from halin.errors import ValidationError
from halin.event_log import EventLog


def test_append_stamps_entry():
    log = EventLog(clock=lambda: datetime(2019, 1, 2, 3, 4, 5, tzinfo=timezone.utc))

    entry = log.append(type="adduser", message='Added user "alice"', payload="alice")

    assert entry.type == "adduser"
    assert entry.payload == "alice"
    assert entry.date == "2019-01-02T03:04:05+00:00"
    assert isinstance(entry.id, uuid.UUID)
    assert list(log.snapshot()) == [entry]


def test_ids_are_unique():
    log = EventLog()
    ids = {log.append(type="t", message=str(i)).id for i in range(50)}
    assert len(ids) == 50


@pytest.mark.parametrize(
    "event",
    [
        dict(message="no type"),
        dict(type="no message"),
        dict(type="", message="empty type"),
        dict(type="empty message", message=""),
    ],
)
def test_append_requires_type_and_message(event):
    log = EventLog()
    log.append(type="ok", message="ok")

    with pytest.raises(ValidationError):
        log.append_event(event)

    assert len(log) == 1


def test_capacity_evicts_oldest():
    log = EventLog()

    for i in range(201):
        log.append(type="test", message=f"event {i}")

    snapshot = log.snapshot()
    assert len(snapshot) == 200
    assert snapshot[0].message == "event 1"
    assert snapshot[-1].message == "event 200"


def test_small_capacity():
    log = EventLog(capacity=2)
    for i in range(5):
        log.append(type="test", message=str(i))

    assert [e.message for e in log.snapshot()] == ["3", "4"]


def test_invalid_capacity():
    with pytest.raises(ValueError):
        EventLog(capacity=0)


def test_payload_is_detached_from_caller():
    log = EventLog()
    payload = {"username": "alice", "roles": ["reader"]}

    entry = log.append(type="roleassoc", message="assoc", payload=payload)
    payload["roles"].append("admin")
    payload["username"] = "mallory"

    assert entry.as_dict()["payload"] == {"username": "alice", "roles": ["reader"]}


def test_snapshot_is_unaffected_by_later_appends():
    log = EventLog()
    log.append(type="test", message="first")

    snapshot = log.snapshot()
    log.append(type="test", message="second")

    assert [e.message for e in snapshot] == ["first"]
    assert len(log) == 2


def test_entries_are_immutable():
    log = EventLog()
    entry = log.append(type="test", message="first")

    with pytest.raises(AttributeError):
        entry.message = "changed"


def test_as_dict():
    log = EventLog()
    entry = log.append(type="addrole", message='Created role "writer"', payload="writer")

    assert entry.as_dict() == {
        "id": str(entry.id),
        "type": "addrole",
        "message": 'Created role "writer"',
        "date": entry.date,
        "payload": "writer",
    }


def test_container_payloads_are_frozen():
    log = EventLog()

    entry = log.append(type="roleassoc", message="assoc", payload={"roles": ["reader"]})

    assert isinstance(entry.payload, PMap)
    assert isinstance(entry.payload["roles"], PVector)
    plain = entry.as_dict()["payload"]
    assert type(plain) is dict
    assert type(plain["roles"]) is list
