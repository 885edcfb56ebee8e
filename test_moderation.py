from app.models.event import Event, EventStatus
from app.models.notification import Notification, NotificationType
from app.services import event_moderation_service, notification_service

API = "/api/v1/events"


def _notifications(db, recipient_id, notification_type):
    return db.query(Notification).filter(
        Notification.recipient_id == recipient_id,
        Notification.notification_type == notification_type,
    ).all()


def test_create_then_approve_sends_one_notification(client, db, organizer, admin, auth_headers, event_payload):
    created = client.post(API, headers=auth_headers(organizer), json=event_payload())
    event_id = created.json()["data"]["event"]["id"]

    response = client.put(
        f"{API}/{event_id}/status", headers=auth_headers(admin), json={"status": "approved"}
    )
    assert response.status_code == 200
    assert response.json()["data"]["event"]["status"] == "approved"

    approved = _notifications(db, organizer.id, NotificationType.EVENT_APPROVED)
    assert len(approved) == 1
    assert approved[0].event_id == event_id

    # Same status again is not a transition
    client.put(f"{API}/{event_id}/status", headers=auth_headers(admin), json={"status": "approved"})
    assert len(_notifications(db, organizer.id, NotificationType.EVENT_APPROVED)) == 1

    listing = client.get(API).json()["data"]["events"]
    assert [e["id"] for e in listing] == [event_id]


def test_reject_keeps_reason_and_notifies(client, db, organizer, admin, make_event, auth_headers):
    event = make_event(organizer, status=EventStatus.PENDING)
    response = client.put(
        f"{API}/{event.id}/status",
        headers=auth_headers(admin),
        json={"status": "rejected", "rejection_reason": "  Missing venue details "},
    )
    data = response.json()["data"]["event"]
    assert data["status"] == "rejected"
    assert data["rejection_reason"] == "Missing venue details"

    rejected = _notifications(db, organizer.id, NotificationType.EVENT_REJECTED)
    assert len(rejected) == 1
    assert "Missing venue details" in rejected[0].message

    # Approving later clears the reason
    client.put(f"{API}/{event.id}/status", headers=auth_headers(admin), json={"status": "approved"})
    db.expire_all()
    assert db.get(Event, event.id).rejection_reason is None


def test_status_change_is_admin_only(client, organizer, make_event, auth_headers):
    event = make_event(organizer, status=EventStatus.PENDING)
    response = client.put(
        f"{API}/{event.id}/status", headers=auth_headers(organizer), json={"status": "approved"}
    )
    assert response.status_code == 403


def test_cancel_does_not_notify(db, organizer, admin, make_event):
    event = make_event(organizer)
    event_moderation_service.update_event_status(
        db, event_id=event.id, status=EventStatus.CANCELLED, admin=admin
    )
    assert event.status == EventStatus.CANCELLED
    assert db.query(Notification).count() == 0


def test_bulk_approve_survives_notification_failure(client, db, admin, make_user, make_event, auth_headers, monkeypatch):
    organizer_a = make_user(name="Organizer A")
    organizer_b = make_user(name="Organizer B")
    event_a = make_event(organizer_a, status=EventStatus.PENDING)
    event_b = make_event(organizer_b, status=EventStatus.PENDING)
    already_live = make_event(organizer_a)

    real_create = notification_service.create_notification

    def flaky_create(db, **payload):
        if payload.get("event_id") == event_b.id:
            raise RuntimeError("notification store unavailable")
        return real_create(db, **payload)

    monkeypatch.setattr(notification_service, "create_notification", flaky_create)

    response = client.post(
        f"{API}/bulk-approve",
        headers=auth_headers(admin),
        json={"event_ids": [event_a.id, event_b.id, already_live.id]},
    )
    assert response.status_code == 200
    assert response.json()["data"] == {"approved_count": 2, "event_ids": [event_a.id, event_b.id]}

    db.expire_all()
    assert db.get(Event, event_a.id).status == EventStatus.APPROVED
    assert db.get(Event, event_b.id).status == EventStatus.APPROVED
    assert len(_notifications(db, organizer_a.id, NotificationType.EVENT_APPROVED)) == 1
    assert _notifications(db, organizer_b.id, NotificationType.EVENT_APPROVED) == []


def test_bulk_approve_without_pending_events(client, organizer, admin, make_event, auth_headers):
    live = make_event(organizer)
    response = client.post(f"{API}/bulk-approve", headers=auth_headers(admin), json={"event_ids": [live.id]})
    assert response.status_code == 404
    assert response.json()["message"] == "No pending events found"

    empty = client.post(f"{API}/bulk-approve", headers=auth_headers(admin), json={"event_ids": []})
    assert empty.status_code == 400
