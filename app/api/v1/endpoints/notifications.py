# File: app/api/v1/endpoints/notifications.py
from typing import Any, Optional
from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.orm import Session
from app import crud, schemas
from app.api import deps
from app.db.database import get_db
from app.models.user import User
from app.models.notification import NotificationType
from app.services import notification_service

router = APIRouter()


@router.get("")
def get_my_notifications(
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    unread_only: bool = Query(False, description="Get only unread notifications"),
    notification_type: Optional[NotificationType] = Query(None, alias="type"),
) -> Any:
    items, total, unread_count = notification_service.list_notifications(
        db,
        user=current_user,
        unread_only=unread_only,
        notification_type=notification_type,
        page=page,
        limit=limit,
    )
    return {
        "success": True,
        "data": {
            "notifications": [schemas.Notification.model_validate(n) for n in items],
            "pagination": schemas.build_pagination(page, limit, total),
            "unread_count": unread_count,
        },
    }


@router.get("/unread-count")
def get_unread_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    return {"success": True, "data": {"unread_count": crud.notification.count_unread(db, recipient_id=current_user.id)}}


@router.put("/read-all")
def mark_all_as_read(
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    updated = notification_service.mark_all_as_read(db, user=current_user)
    return schemas.success_response("All notifications marked as read", {"updated": updated})


@router.post("/broadcast")
def broadcast(
    request: schemas.BroadcastRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.require_admin),
) -> Any:
    """Send one system notification to many users; emails go out after the response"""
    result = notification_service.broadcast(
        db,
        title=request.title,
        message=request.message,
        user_ids=request.user_ids,
        send_email=request.send_email,
        action_url=request.action_url,
        background_tasks=background_tasks,
    )
    return schemas.success_response(f"Notification sent to {result['recipient_count']} users", result)


@router.put("/{notification_id}/read")
def mark_as_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    notification = notification_service.mark_as_read(db, notification_id=notification_id, user=current_user)
    return schemas.success_response(
        "Notification marked as read",
        {"notification": schemas.Notification.model_validate(notification)},
    )


@router.delete("/{notification_id}")
def delete_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    notification_service.delete_notification(db, notification_id=notification_id, user=current_user)
    return schemas.success_response("Notification deleted")
