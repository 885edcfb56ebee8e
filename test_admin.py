import pytest

from app.core.exceptions import ValidationError
from app.db.database import utcnow
from app.models.comment import Comment, CommentLike, DELETED_COMMENT_PLACEHOLDER
from app.models.event import Event, EventStatus
from app.models.event_participant import EventParticipant
from app.models.notification import Notification
from app.models.user import User, UserFollow, UserRole
from app.schemas.comment import CommentCreate
from app.services import admin_service, comment_service, follow_service, participation_service

API = "/api/v1/admin"


def test_admin_routes_require_admin(client, make_user, auth_headers):
    user = make_user(role=UserRole.ORGANIZER)
    assert client.get(f"{API}/stats").status_code == 401
    assert client.get(f"{API}/stats", headers=auth_headers(user)).status_code == 403


def test_dashboard_stats(client, admin, organizer, make_user, make_event, auth_headers):
    make_event(organizer)
    make_event(organizer, status=EventStatus.PENDING)
    make_user()

    stats = client.get(f"{API}/stats", headers=auth_headers(admin)).json()["data"]
    assert stats["users"]["total"] == 3
    assert stats["events"]["total"] == 2

    pending = client.get(f"{API}/pending-events", headers=auth_headers(admin)).json()["data"]["events"]
    assert len(pending) == 1
    assert pending[0]["status"] == "pending"


def test_events_by_month_and_growth(client, admin, organizer, make_event, auth_headers):
    make_event(organizer)
    year = utcnow().year

    months = client.get(f"{API}/events-by-month", headers=auth_headers(admin), params={"year": year}).json()["data"]
    assert len(months) == 12
    assert sum(month["total"] for month in months) == 1
    assert months[utcnow().month - 1]["approved"] == 1

    growth = client.get(f"{API}/user-growth", headers=auth_headers(admin), params={"period": "1month"})
    assert growth.status_code == 200
    assert client.get(
        f"{API}/user-growth", headers=auth_headers(admin), params={"period": "forever"}
    ).status_code == 400

    popular = client.get(f"{API}/popular-content", headers=auth_headers(admin))
    assert popular.status_code == 200


def test_system_health_reports_recent_activity(client, admin, organizer, make_user, make_event, auth_headers):
    make_user()
    make_event(organizer)

    assert client.get(f"{API}/system-health", headers=auth_headers(organizer)).status_code == 403

    health = client.get(f"{API}/system-health", headers=auth_headers(admin)).json()["data"]
    assert health["database"] == {"connected": True, "status": "healthy"}
    assert health["api"]["status"] == "operational"
    assert health["activity"] == {"users_last_24h": 3, "events_last_24h": 1, "comments_last_24h": 0}


def test_update_user_role_and_email_conflict(client, admin, make_user, auth_headers):
    user = make_user()
    other = make_user(email="taken@example.com")

    response = client.put(
        f"{API}/users/{user.id}", headers=auth_headers(admin), json={"role": "organizer", "is_verified": True}
    )
    data = response.json()["data"]["user"]
    assert data["role"] == "organizer"
    assert data["is_verified"] is True

    conflict = client.put(f"{API}/users/{user.id}", headers=auth_headers(admin), json={"email": other.email})
    assert conflict.status_code == 409


def test_admin_cannot_delete_self(db, admin):
    with pytest.raises(ValidationError):
        admin_service.delete_user(db, user_id=admin.id, admin=admin)


def test_delete_user_cascade(client, db, admin, organizer, make_user, make_event, auth_headers, storage):
    doomed = make_user(role=UserRole.ORGANIZER, name="Doomed")
    survivor = make_user(name="Survivor")

    # An event organized elsewhere that the doomed user joined
    other_event = make_event(organizer)
    participation_service.toggle_participation(db, event_id=other_event.id, user=doomed)
    participation_service.toggle_participation(db, event_id=other_event.id, user=survivor)

    # The doomed user's own event with a stored cover image
    own_event = make_event(doomed, image_handle="events/own.jpg")
    storage.blobs["events/own.jpg"] = b"cover"

    # A comment with a reply survives as a placeholder, a lone comment is removed
    past = make_event(organizer, days_ahead=-2)
    threaded = comment_service.add_comment(db, event_id=past.id, comment_in=CommentCreate(content="Thread"), user=doomed)
    comment_service.add_comment(
        db, event_id=past.id, comment_in=CommentCreate(content="Reply", parent_comment_id=threaded.id), user=survivor
    )
    lonely = comment_service.add_comment(db, event_id=past.id, comment_in=CommentCreate(content="Alone"), user=doomed)
    survivor_comment = comment_service.add_comment(
        db, event_id=past.id, comment_in=CommentCreate(content="Like this"), user=survivor
    )
    comment_service.toggle_like(db, comment_id=survivor_comment.id, user=doomed)

    follow_service.toggle_follow(db, target_id=survivor.id, user=doomed)
    follow_service.toggle_follow(db, target_id=doomed.id, user=survivor)

    ids = dict(
        doomed=doomed.id, own_event=own_event.id, other_event=other_event.id,
        threaded=threaded.id, lonely=lonely.id, survivor_comment=survivor_comment.id,
    )

    response = client.delete(f"{API}/users/{ids['doomed']}", headers=auth_headers(admin))
    assert response.status_code == 200
    assert response.json()["data"] == {"rosters_updated": 1, "comments_kept": 1}

    db.expire_all()
    assert db.get(User, ids["doomed"]) is None
    assert db.get(Event, ids["own_event"]) is None
    assert storage.deleted == ["events/own.jpg"]

    other = db.get(Event, ids["other_event"])
    assert other.participant_ids == [survivor.id]
    assert other.current_participants == 1

    kept = db.get(Comment, ids["threaded"])
    assert kept.content == DELETED_COMMENT_PLACEHOLDER
    assert kept.author_id is None
    assert db.get(Comment, ids["lonely"]) is None

    liked = db.get(Comment, ids["survivor_comment"])
    assert liked.likes_count == 0
    assert db.query(CommentLike).count() == 0

    assert db.query(UserFollow).count() == 0
    assert db.query(EventParticipant).filter(EventParticipant.user_id == ids["doomed"]).count() == 0
    assert db.query(Notification).filter(Notification.recipient_id == ids["doomed"]).count() == 0

    survivor_view = client.get(f"/api/v1/users/{survivor.id}").json()["data"]["user"]
    assert survivor_view["followers_count"] == 0
    assert survivor_view["following_count"] == 0

    thread = client.get(f"/api/v1/events/{ids['other_event']}/comments")
    assert thread.status_code == 200
