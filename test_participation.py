import pytest

from app.core.exceptions import NotFoundError, ValidationError
from app.models.event import Event, EventStatus
from app.models.event_participant import EventParticipant
from app.models.user import User
from app.services import participation_service

API = "/api/v1/events"


def _roster_size(db, event_id):
    return db.query(EventParticipant).filter(EventParticipant.event_id == event_id).count()


def test_capacity_scenario(client, db, organizer, make_user, make_event, auth_headers):
    event = make_event(organizer, max_participants=2)
    first, second, third = make_user(), make_user(), make_user()

    def toggle(user):
        return client.post(f"{API}/{event.id}/participate", headers=auth_headers(user))

    assert toggle(first).json()["data"] == {"is_participating": True, "current_participants": 1}
    assert toggle(second).json()["data"] == {"is_participating": True, "current_participants": 2}

    full = toggle(third)
    assert full.status_code == 400
    assert full.json()["message"] == "The event is full"

    assert toggle(first).json()["data"] == {"is_participating": False, "current_participants": 1}
    assert toggle(third).json()["data"] == {"is_participating": True, "current_participants": 2}

    db.expire_all()
    assert event.current_participants == _roster_size(db, event.id) == 2
    assert sorted(event.participant_ids) == sorted([second.id, third.id])


def test_counter_matches_roster_after_toggles(db, organizer, make_user, make_event):
    event = make_event(organizer)
    dancers = [make_user() for _ in range(4)]

    for dancer in dancers:
        assert participation_service.toggle_participation(db, event_id=event.id, user=dancer) is True
    for dancer in dancers[:3]:
        assert participation_service.toggle_participation(db, event_id=event.id, user=dancer) is False
    participation_service.toggle_participation(db, event_id=event.id, user=dancers[0])

    db.refresh(event)
    assert event.current_participants == _roster_size(db, event.id) == 2


def test_unlimited_event_has_no_capacity_check(db, organizer, make_user, make_event):
    event = make_event(organizer, max_participants=None)
    for _ in range(5):
        participation_service.toggle_participation(db, event_id=event.id, user=make_user())
    db.refresh(event)
    assert event.current_participants == 5


def test_cannot_join_unapproved_or_past_events(db, organizer, make_user, make_event):
    dancer = make_user()
    pending = make_event(organizer, status=EventStatus.PENDING)
    past = make_event(organizer, days_ahead=-2)

    with pytest.raises(ValidationError, match="not approved"):
        participation_service.toggle_participation(db, event_id=pending.id, user=dancer)
    with pytest.raises(ValidationError, match="past event"):
        participation_service.toggle_participation(db, event_id=past.id, user=dancer)
    with pytest.raises(NotFoundError):
        participation_service.toggle_participation(db, event_id=424242, user=dancer)

    assert _roster_size(db, pending.id) == 0
    assert _roster_size(db, past.id) == 0


def test_leaving_is_allowed_after_event_closes(db, organizer, make_user, make_event):
    dancer = make_user()
    event = make_event(organizer, max_participants=10)
    participation_service.toggle_participation(db, event_id=event.id, user=dancer)

    event.status = EventStatus.CANCELLED
    db.commit()

    assert participation_service.toggle_participation(db, event_id=event.id, user=dancer) is False
    db.refresh(event)
    assert event.current_participants == 0


def test_participate_requires_login(client, organizer, make_event):
    event = make_event(organizer)
    response = client.post(f"{API}/{event.id}/participate")
    assert response.status_code == 401


def test_interleaved_joins_never_pass_capacity(db, other_session, organizer, make_user, make_event):
    event = make_event(organizer, max_participants=1)
    first, second = make_user(), make_user()

    # The second request read the event while the seat was still free
    stale_event = other_session.get(Event, event.id)
    stale_user = other_session.get(User, second.id)
    assert stale_event.current_participants == 0

    assert participation_service.toggle_participation(db, event_id=event.id, user=first) is True
    with pytest.raises(ValidationError, match="The event is full"):
        participation_service.join_event(other_session, stale_event, stale_user)

    db.expire_all()
    assert event.current_participants == _roster_size(db, event.id) == 1
    assert event.participant_ids == [first.id]


def test_interleaved_leaves_decrement_once(db, other_session, organizer, make_user, make_event):
    event = make_event(organizer)
    first, second = make_user(), make_user()
    for dancer in (first, second):
        participation_service.toggle_participation(db, event_id=event.id, user=dancer)

    # Both requests loaded the same roster entry before either removed it
    stale_event = other_session.get(Event, event.id)
    stale_entry = other_session.query(EventParticipant).filter(
        EventParticipant.event_id == event.id,
        EventParticipant.user_id == first.id,
    ).one()

    assert participation_service.toggle_participation(db, event_id=event.id, user=first) is False
    assert participation_service.leave_event(other_session, stale_event, stale_entry) is False

    db.expire_all()
    assert event.current_participants == _roster_size(db, event.id) == 1
    assert event.participant_ids == [second.id]
