# File: app/api/v1/endpoints/users.py
from typing import Any, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from app import crud, schemas
from app.api import deps
from app.core.exceptions import ValidationError
from app.db.database import get_db
from app.models.user import User, UserRole
from app.models.event import EventStatus
from app.services import follow_service, user_service

router = APIRouter()


def _user_list(users) -> list:
    return [schemas.UserPublic.model_validate(u) for u in users]


@router.get("")
def list_users(
    db: Session = Depends(get_db),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = None,
    role: Optional[UserRole] = None,
    city: Optional[str] = None,
) -> Any:
    users, total = crud.user.get_filtered(
        db, search=search, role=role, city=city, skip=(page - 1) * limit, limit=limit
    )
    return {
        "success": True,
        "data": {"users": _user_list(users), "pagination": schemas.build_pagination(page, limit, total)},
    }


@router.get("/search")
def search_users(
    q: str = Query(""),
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(deps.get_current_user_optional),
    limit: int = Query(10, ge=1, le=50),
) -> Any:
    q = q.strip()
    if len(q) < 2:
        raise ValidationError("Search query must be at least 2 characters", ["q: at least 2 characters"])
    users = crud.user.search(db, q=q, exclude_id=current_user.id if current_user else None, limit=limit)
    return {"success": True, "data": {"users": _user_list(users)}}


@router.get("/suggestions")
def user_suggestions(
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
    limit: int = Query(10, ge=1, le=50),
) -> Any:
    users = crud.user.get_suggestions(db, user=current_user, limit=limit)
    return {"success": True, "data": {"users": _user_list(users)}}


@router.get("/{user_id}")
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(deps.get_current_user_optional),
) -> Any:
    """Public profile with organized events and social counters"""
    user = user_service.get_user_or_404(db, user_id)
    events, _ = crud.event.get_by_organizer(db, organizer_id=user.id, status=EventStatus.APPROVED, limit=50)
    data = schemas.UserPublic.model_validate(user).model_dump(mode="json")
    data.update(user_service.get_social_counts(db, user=user, viewer=current_user))
    data["organized_events"] = [schemas.EventSummary.model_validate(e) for e in events]
    return {"success": True, "data": {"user": data}}


@router.get("/{user_id}/followers")
def get_followers(user_id: int, db: Session = Depends(get_db)) -> Any:
    user = user_service.get_user_or_404(db, user_id)
    followers = crud.user.get_followers(db, user_id=user.id)
    return {"success": True, "data": {"users": _user_list(followers), "count": len(followers)}}


@router.get("/{user_id}/following")
def get_following(user_id: int, db: Session = Depends(get_db)) -> Any:
    user = user_service.get_user_or_404(db, user_id)
    following = crud.user.get_following(db, user_id=user.id)
    return {"success": True, "data": {"users": _user_list(following), "count": len(following)}}


@router.get("/{user_id}/favourites")
def get_user_favourites(user_id: int, db: Session = Depends(get_db)) -> Any:
    user = user_service.get_user_or_404(db, user_id)
    events = crud.event.get_favourites(db, user_id=user.id)
    return {"success": True, "data": {"events": [schemas.EventSummary.model_validate(e) for e in events]}}


@router.post("/{user_id}/follow")
def toggle_follow(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    result = follow_service.toggle_follow(db, target_id=user_id, user=current_user)
    return schemas.success_response(
        "You are now following this user" if result["is_following"] else "You unfollowed this user",
        result,
    )
