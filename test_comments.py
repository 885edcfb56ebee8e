import pytest

from app.core.exceptions import ForbiddenError, ValidationError
from app.models.comment import Comment, DELETED_COMMENT_PLACEHOLDER
from app.models.notification import Notification, NotificationType
from app.schemas.comment import CommentCreate, CommentUpdate
from app.services import comment_service

EVENTS = "/api/v1/events"
COMMENTS = "/api/v1/comments"


@pytest.fixture
def past_event(organizer, make_event):
    return make_event(organizer, days_ahead=-1)


def test_comment_and_reply_thread(client, db, organizer, make_user, past_event, auth_headers):
    author, replier = make_user(), make_user()

    created = client.post(
        f"{EVENTS}/{past_event.id}/comments",
        headers=auth_headers(author),
        json={"content": "  Great night! ", "rating": 5},
    )
    assert created.status_code == 201
    comment = created.json()["data"]["comment"]
    assert comment["content"] == "Great night!"
    assert comment["rating"] == 5
    assert comment["author"]["id"] == author.id

    reply = client.post(
        f"{EVENTS}/{past_event.id}/comments",
        headers=auth_headers(replier),
        json={"content": "Agreed", "parent_comment_id": comment["id"]},
    )
    assert reply.status_code == 201

    listing = client.get(f"{EVENTS}/{past_event.id}/comments").json()["data"]
    assert listing["pagination"]["total"] == 1
    thread = listing["comments"][0]
    assert thread["id"] == comment["id"]
    assert [r["content"] for r in thread["replies"]] == ["Agreed"]

    kinds = {(n.recipient_id, n.notification_type) for n in db.query(Notification).all()}
    assert kinds == {
        (organizer.id, NotificationType.NEW_COMMENT),
        (author.id, NotificationType.COMMENT_REPLY),
    }


def test_reply_depth_is_limited(db, make_user, past_event):
    user = make_user()
    top = comment_service.add_comment(
        db, event_id=past_event.id, comment_in=CommentCreate(content="Top"), user=user
    )
    reply = comment_service.add_comment(
        db, event_id=past_event.id, comment_in=CommentCreate(content="Reply", parent_comment_id=top.id), user=user
    )
    with pytest.raises(ValidationError, match="top-level"):
        comment_service.add_comment(
            db, event_id=past_event.id,
            comment_in=CommentCreate(content="Too deep", parent_comment_id=reply.id), user=user,
        )

    db.refresh(top)
    assert top.reply_ids == [reply.id]


def test_comment_body_rules(db, organizer, make_user, make_event, past_event):
    user = make_user()
    upcoming = make_event(organizer)

    with pytest.raises(ValidationError):
        comment_service.add_comment(db, event_id=past_event.id, comment_in=CommentCreate(), user=user)
    with pytest.raises(ValidationError, match="Invalid comment data"):
        comment_service.add_comment(db, event_id=upcoming.id, comment_in=CommentCreate(rating=4), user=user)

    rating_only = comment_service.add_comment(
        db, event_id=past_event.id, comment_in=CommentCreate(rating=4), user=user
    )
    assert rating_only.content == ""
    assert rating_only.rating == 4


def test_invalid_rating_rejected_by_api(client, make_user, past_event, auth_headers):
    response = client.post(
        f"{EVENTS}/{past_event.id}/comments",
        headers=auth_headers(make_user()),
        json={"content": "Hmm", "rating": 7},
    )
    assert response.status_code == 400
    assert response.json()["errorsList"][0].startswith("rating:")


def test_fractional_rating_is_rejected(client, make_user, past_event, auth_headers):
    headers = auth_headers(make_user())
    for rating in (2.7, "4.5", "great"):
        response = client.post(
            f"{EVENTS}/{past_event.id}/comments", headers=headers, json={"content": "Hmm", "rating": rating}
        )
        assert response.status_code == 400
        assert response.json()["errorsList"][0].startswith("rating:")

    assert CommentCreate(rating=4.0).rating == 4
    assert CommentCreate(rating="3").rating == 3


def test_commenting_on_own_event_sends_nothing(db, organizer, past_event):
    comment_service.add_comment(db, event_id=past_event.id, comment_in=CommentCreate(content="Thanks all"), user=organizer)
    assert db.query(Notification).count() == 0


def test_delete_with_replies_leaves_placeholder(client, db, make_user, past_event, auth_headers):
    author, replier = make_user(), make_user()
    top = comment_service.add_comment(
        db, event_id=past_event.id, comment_in=CommentCreate(content="Original"), user=author
    )
    comment_service.add_comment(
        db, event_id=past_event.id, comment_in=CommentCreate(content="Reply", parent_comment_id=top.id), user=replier
    )

    response = client.delete(f"{COMMENTS}/{top.id}", headers=auth_headers(author))
    assert response.json()["data"] == {"removed": False}

    db.expire_all()
    kept = db.get(Comment, top.id)
    assert kept.content == DELETED_COMMENT_PLACEHOLDER
    assert kept.is_edited is True
    assert len(kept.replies) == 1


def test_delete_without_replies_removes_row(client, db, make_user, past_event, auth_headers):
    author = make_user()
    comment = comment_service.add_comment(
        db, event_id=past_event.id, comment_in=CommentCreate(content="Short lived"), user=author
    )
    comment_id = comment.id

    assert client.delete(f"{COMMENTS}/{comment_id}", headers=auth_headers(make_user())).status_code == 403

    response = client.delete(f"{COMMENTS}/{comment_id}", headers=auth_headers(author))
    assert response.json()["data"] == {"removed": True}
    db.expire_all()
    assert db.get(Comment, comment_id) is None


def test_edit_marks_comment(client, make_user, past_event, auth_headers, db):
    author = make_user()
    comment = comment_service.add_comment(
        db, event_id=past_event.id, comment_in=CommentCreate(content="First take"), user=author
    )
    response = client.put(
        f"{COMMENTS}/{comment.id}", headers=auth_headers(author), json={"content": "Second take", "rating": 3}
    )
    data = response.json()["data"]["comment"]
    assert data["content"] == "Second take"
    assert data["rating"] == 3
    assert data["is_edited"] is True
    assert data["edited_at"] is not None


def test_only_author_or_admin_edits(db, admin, make_user, past_event):
    author, other = make_user(), make_user()
    comment = comment_service.add_comment(
        db, event_id=past_event.id, comment_in=CommentCreate(content="Mine"), user=author
    )
    with pytest.raises(ForbiddenError):
        comment_service.update_comment(db, comment_id=comment.id, comment_in=CommentUpdate(content="Yours"), user=other)

    edited = comment_service.update_comment(
        db, comment_id=comment.id, comment_in=CommentUpdate(content="Moderated"), user=admin
    )
    assert edited.content == "Moderated"


def test_like_toggle_keeps_count_in_sync(client, db, make_user, past_event, auth_headers):
    author = make_user()
    comment = comment_service.add_comment(
        db, event_id=past_event.id, comment_in=CommentCreate(content="Like me"), user=author
    )
    fans = [make_user(), make_user()]

    for fan in fans:
        client.post(f"{COMMENTS}/{comment.id}/like", headers=auth_headers(fan))
    response = client.post(f"{COMMENTS}/{comment.id}/like", headers=auth_headers(fans[0]))
    assert response.json()["data"] == {"is_liked": False, "likes_count": 1}

    db.expire_all()
    stored = db.get(Comment, comment.id)
    assert stored.likes_count == len(stored.liked_by) == 1
    assert stored.liked_by == [fans[1].id]
