"""
Tests for the seizure alert fan-out and the seizure log queries.
"""

from datetime import datetime, timezone

import pytest
from fastapi import HTTPException

from conftest import RecordingNotifier
from episupport.crud import crud
from episupport.crud.support_graph import SupportRelationGraph
from episupport.models.models import Seizure
from episupport.schemas.alerts import Location, Vitals
from episupport.schemas.enums import UserRole
from episupport.utils.alerts import SeizureAlertService, seizure_payload


def _naive_utc(ts: datetime) -> datetime:
    if ts.tzinfo is not None:
        ts = ts.astimezone(timezone.utc).replace(tzinfo=None)
    return ts


@pytest.fixture
def graph(db):
    return SupportRelationGraph(db)


@pytest.fixture
def team(make_user, graph):
    """a@x.com supported by b@x.com (TOK1) and c@x.com (no token)."""
    a = make_user("a@x.com", first_name="Alice")
    b = make_user("b@x.com", role=UserRole.SUPPORT, push_token="TOK1")
    c = make_user("c@x.com", role=UserRole.SUPPORT)
    graph.add(a.id, b.id)
    graph.add(a.id, c.id)
    return a, b, c


def test_full_vitals_records_one_seizure_and_notifies_token_holders(db, graph, team):
    a, _, _ = team
    notifier = RecordingNotifier()
    service = SeizureAlertService(db, graph, notifier)
    before = datetime.now(timezone.utc).replace(tzinfo=None)

    outcome = service.raise_seizure_alert(
        "a@x.com", vitals=Vitals(heart_rate=90, spo2=96, movement=2)
    )

    seizures = db.query(Seizure).all()
    assert len(seizures) == 1
    assert seizures[0].monitored_user_id == a.id
    assert seizures[0].heart_rate == 90
    assert seizures[0].spo2 == 96
    assert seizures[0].movement == 2
    assert _naive_utc(seizures[0].timestamp) >= before
    assert outcome.seizure.id == seizures[0].id

    assert [call["to"] for call in notifier.calls] == ["TOK1"]
    call = notifier.calls[0]
    assert call["title"] == "Seizure Alert!"
    assert call["body"] == "Alice might need help!"
    assert call["data"] == {"navigateTo": "gps"}
    assert outcome.delivered == 1
    assert outcome.failed == 0


def test_seizure_is_saved_before_first_dispatch(db, graph, team, make_user):
    extra = make_user("d@x.com", role=UserRole.SUPPORT, push_token="TOK2")
    graph.add(team[0].id, extra.id)

    class CountingNotifier(RecordingNotifier):
        def __init__(self):
            super().__init__()
            self.rows_at_send = []

        def send(self, push_token, title, body, data=None):
            self.rows_at_send.append(db.query(Seizure).count())
            return super().send(push_token, title, body, data)

    notifier = CountingNotifier()
    SeizureAlertService(db, graph, notifier).raise_seizure_alert(
        "a@x.com", vitals=Vitals(heart_rate=90, spo2=96, movement=2)
    )

    assert notifier.rows_at_send == [1, 1]


@pytest.mark.parametrize(
    "vitals",
    [
        None,
        Vitals(heart_rate=90),
        Vitals(heart_rate=90, spo2=96),
        Vitals(spo2=96, movement=2),
    ],
)
def test_incomplete_vitals_record_nothing_but_still_alert(db, graph, team, vitals):
    notifier = RecordingNotifier()
    service = SeizureAlertService(db, graph, notifier)

    outcome = service.raise_seizure_alert("a@x.com", vitals=vitals)

    assert db.query(Seizure).count() == 0
    assert outcome.seizure is None
    assert len(notifier.calls) == 1


def test_location_is_attached_to_payload(db, graph, team):
    notifier = RecordingNotifier()
    service = SeizureAlertService(db, graph, notifier)

    service.raise_seizure_alert("a@x.com", location=Location(latitude=55.6761, longitude=12.5683))

    assert notifier.calls[0]["data"] == {
        "navigateTo": "gps",
        "latitude": "55.6761",
        "longitude": "12.5683",
    }


def test_partial_location_is_ignored():
    assert seizure_payload(Location(latitude=1.0)) == {"navigateTo": "gps"}


def test_failed_delivery_does_not_stop_other_recipients(db, graph, make_user):
    a = make_user("a@x.com", first_name="Alice")
    for i, token in enumerate(["TOK1", "TOK2", "TOK3"]):
        s = make_user(f"s{i}@x.com", role=UserRole.SUPPORT, push_token=token)
        graph.add(a.id, s.id)
    notifier = RecordingNotifier(failing_tokens={"TOK1"})
    service = SeizureAlertService(db, graph, notifier)

    outcome = service.raise_seizure_alert("a@x.com", vitals=Vitals(heart_rate=120, spo2=91, movement=7))

    assert sorted(call["to"] for call in notifier.calls) == ["TOK1", "TOK2", "TOK3"]
    assert outcome.delivered == 2
    assert outcome.failed == 1
    assert db.query(Seizure).count() == 1


def test_no_supporters_means_no_dispatch(db, graph, make_user):
    make_user("lonely@x.com")
    notifier = RecordingNotifier()
    service = SeizureAlertService(db, graph, notifier)

    outcome = service.raise_seizure_alert("lonely@x.com", vitals=Vitals(heart_rate=80, spo2=98, movement=1))

    assert notifier.calls == []
    assert outcome.deliveries == []
    assert outcome.seizure is not None


def test_unknown_monitored_user_is_not_found(db, graph):
    service = SeizureAlertService(db, graph, RecordingNotifier())
    with pytest.raises(HTTPException) as exc:
        service.raise_seizure_alert("ghost@x.com", vitals=Vitals(heart_rate=80, spo2=98, movement=1))
    assert exc.value.status_code == 404
    assert db.query(Seizure).count() == 0


# ---------------- SEIZURE LOG ----------------
def _seizure(db, user, heart_rate):
    seizure = Seizure(
        monitored_user_id=user.id,
        heart_rate=heart_rate,
        spo2=95,
        movement=3,
        timestamp=datetime.now(timezone.utc),
    )
    db.add(seizure)
    db.commit()
    return seizure


def test_list_seizures_requires_an_email(db):
    with pytest.raises(HTTPException) as exc:
        crud.list_seizures(db)
    assert exc.value.status_code == 400


def test_list_seizures_for_monitored_user(db, make_user):
    a = make_user("a@x.com")
    d = make_user("d@x.com")
    _seizure(db, a, 100)
    _seizure(db, d, 110)

    result = crud.list_seizures(db, monitored_email="a@x.com")
    assert [s.heart_rate for s in result] == [100]


def test_list_seizures_for_supporter_is_union_of_monitored(db, graph, make_user):
    a = make_user("a@x.com")
    d = make_user("d@x.com")
    e = make_user("e@x.com")
    c = make_user("c@x.com", role=UserRole.SUPPORT)
    graph.add(a.id, c.id)
    graph.add(d.id, c.id)
    _seizure(db, a, 100)
    _seizure(db, a, 101)
    _seizure(db, d, 110)
    _seizure(db, e, 120)

    result = crud.list_seizures(db, support_email="c@x.com")
    assert sorted(s.heart_rate for s in result) == [100, 101, 110]


def test_list_seizures_unknown_email_is_not_found(db):
    with pytest.raises(HTTPException) as exc:
        crud.list_seizures(db, support_email="nobody@x.com")
    assert exc.value.status_code == 404


def test_update_seizure_note(db, make_user):
    seizure = _seizure(db, make_user("a@x.com"), 100)
    updated = crud.update_seizure_note(db, seizure.id, "Lasted about two minutes")
    assert updated.note == "Lasted about two minutes"

    with pytest.raises(HTTPException) as exc:
        crud.update_seizure_note(db, 424242, "nope")
    assert exc.value.status_code == 404
