from typing import Any, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from app import crud, schemas
from app.api import deps
from app.db.database import get_db, utcnow
from app.models.user import User
from app.services import admin_service
from app.services.image_storage import ImageStorage, get_image_storage

router = APIRouter()


@router.get("/stats")
def dashboard_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.require_admin),
) -> Any:
    return {"success": True, "data": admin_service.get_dashboard_stats(db)}


@router.get("/pending-events")
def pending_events(
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.require_admin),
) -> Any:
    events = crud.event.get_pending(db)
    return {"success": True, "data": {"events": [schemas.EventOut.model_validate(e) for e in events]}}


@router.get("/events-by-month")
def events_by_month(
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.require_admin),
    year: Optional[int] = Query(None, ge=2000, le=2100),
) -> Any:
    year = year or utcnow().year
    return {"success": True, "data": admin_service.get_events_by_month(db, year=year)}


@router.get("/user-growth")
def user_growth(
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.require_admin),
    period: str = Query("6months", pattern="^(1month|3months|6months|1year)$"),
) -> Any:
    return {"success": True, "data": admin_service.get_user_growth(db, period=period)}


@router.get("/popular-content")
def popular_content(
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.require_admin),
) -> Any:
    return {"success": True, "data": admin_service.get_popular_content(db)}


@router.get("/system-health")
def system_health(
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.require_admin),
) -> Any:
    return {"success": True, "data": admin_service.get_system_health(db)}


@router.put("/users/{user_id}")
def update_user(
    user_id: int,
    user_in: schemas.AdminUserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.require_admin),
) -> Any:
    user = admin_service.update_user(db, user_id=user_id, user_in=user_in)
    return schemas.success_response("User updated", {"user": schemas.AdminUserView.model_validate(user)})


@router.delete("/users/{user_id}")
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.require_admin),
    storage: ImageStorage = Depends(get_image_storage),
) -> Any:
    result = admin_service.delete_user(db, user_id=user_id, admin=current_user, storage=storage)
    return schemas.success_response("User deleted", result)
