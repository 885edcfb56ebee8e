import pytest

from app.core.exceptions import NotFoundError, ValidationError
from app.models.event import EventStatus
from app.models.notification import Notification, NotificationType
from app.models.user import User
from app.services import favourite_service, follow_service

EVENTS = "/api/v1/events"
USERS = "/api/v1/users"


def test_favourite_double_toggle_restores_state(client, db, organizer, make_user, make_event, auth_headers):
    event = make_event(organizer)
    fan = make_user()
    headers = auth_headers(fan)

    added = client.post(f"{EVENTS}/{event.id}/favourite", headers=headers)
    assert added.json()["data"] == {"is_favourite": True}
    favourites = client.get(f"{EVENTS}/favourites", headers=headers).json()["data"]["events"]
    assert [e["id"] for e in favourites] == [event.id]

    removed = client.post(f"{EVENTS}/{event.id}/favourite", headers=headers)
    assert removed.json()["data"] == {"is_favourite": False}
    assert client.get(f"{EVENTS}/favourites", headers=headers).json()["data"]["events"] == []

    db.expire_all()
    assert db.get(User, fan.id).favourite_event_ids == []
    assert len(db.query(Notification).filter(
        Notification.notification_type == NotificationType.EVENT_FAVOURITE
    ).all()) == 1


def test_favourites_keep_insertion_order(db, organizer, make_user, make_event):
    fan = make_user()
    later, sooner = make_event(organizer, days_ahead=30), make_event(organizer, days_ahead=2)
    favourite_service.toggle_favourite(db, event_id=later.id, user=fan)
    favourite_service.toggle_favourite(db, event_id=sooner.id, user=fan)

    db.refresh(fan)
    assert fan.favourite_event_ids == [later.id, sooner.id]


def test_favourite_rules(db, organizer, make_user, make_event):
    pending = make_event(organizer, status=EventStatus.PENDING)
    own = make_event(organizer)

    with pytest.raises(ValidationError, match="approved"):
        favourite_service.toggle_favourite(db, event_id=pending.id, user=make_user())
    with pytest.raises(ValidationError, match="your own event"):
        favourite_service.toggle_favourite(db, event_id=own.id, user=organizer)


def test_follow_is_symmetric(client, db, make_user, auth_headers):
    alice, bruno = make_user(name="Alice"), make_user(name="Bruno")

    response = client.post(f"{USERS}/{bruno.id}/follow", headers=auth_headers(alice))
    assert response.json()["data"] == {"is_following": True, "followers_count": 1, "following_count": 1}

    db.expire_all()
    assert db.get(User, alice.id).following_ids == [bruno.id]
    assert db.get(User, bruno.id).follower_ids == [alice.id]

    followers = client.get(f"{USERS}/{bruno.id}/followers").json()["data"]
    assert [u["id"] for u in followers["users"]] == [alice.id]
    following = client.get(f"{USERS}/{alice.id}/following").json()["data"]
    assert [u["id"] for u in following["users"]] == [bruno.id]

    notification = db.query(Notification).filter(Notification.recipient_id == bruno.id).one()
    assert notification.notification_type == NotificationType.FOLLOW
    assert notification.from_user_id == alice.id

    response = client.post(f"{USERS}/{bruno.id}/follow", headers=auth_headers(alice))
    assert response.json()["data"] == {"is_following": False, "followers_count": 0, "following_count": 0}

    db.expire_all()
    assert db.get(User, alice.id).following_ids == []
    assert db.get(User, bruno.id).follower_ids == []


def test_cannot_follow_yourself_or_missing_users(db, make_user):
    carla = make_user()
    with pytest.raises(ValidationError):
        follow_service.toggle_follow(db, target_id=carla.id, user=carla)

    with pytest.raises(NotFoundError):
        follow_service.toggle_follow(db, target_id=99999, user=carla)


def test_public_profile_counts(client, organizer, make_user, make_event, auth_headers):
    make_event(organizer)
    make_event(organizer, status=EventStatus.PENDING)
    fan = make_user()
    client.post(f"{USERS}/{organizer.id}/follow", headers=auth_headers(fan))

    anonymous = client.get(f"{USERS}/{organizer.id}").json()["data"]["user"]
    assert anonymous["followers_count"] == 1
    assert anonymous["is_following"] is False
    assert len(anonymous["organized_events"]) == 1
    assert "email" not in anonymous

    as_fan = client.get(f"{USERS}/{organizer.id}", headers=auth_headers(fan)).json()["data"]["user"]
    assert as_fan["is_following"] is True


def test_user_search_and_suggestions(client, make_user, auth_headers):
    me = make_user(name="Marta")
    followed = make_user(name="Paolo Bachata")
    other = make_user(name="Paola Kizomba")
    client.post(f"{USERS}/{followed.id}/follow", headers=auth_headers(me))

    short = client.get(f"{USERS}/search", params={"q": "p"})
    assert short.status_code == 400

    found = client.get(f"{USERS}/search", params={"q": "paol"}).json()["data"]["users"]
    assert {u["id"] for u in found} == {followed.id, other.id}

    suggestions = client.get(f"{USERS}/suggestions", headers=auth_headers(me)).json()["data"]["users"]
    assert [u["id"] for u in suggestions] == [other.id]
