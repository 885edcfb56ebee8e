from typing import Any
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from app import schemas
from app.api import deps
from app.db.database import get_db
from app.models.user import User
from app.services import comment_service

router = APIRouter()
event_comments_router = APIRouter()


@event_comments_router.get("/{event_id}/comments")
def list_event_comments(
    event_id: int,
    db: Session = Depends(get_db),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
) -> Any:
    """Top-level comments, newest first, each with its direct replies"""
    comments, total = comment_service.list_comments(db, event_id=event_id, page=page, limit=limit)
    return {
        "success": True,
        "data": {
            "comments": [schemas.CommentOut.model_validate(c) for c in comments],
            "pagination": schemas.build_pagination(page, limit, total),
        },
    }


@event_comments_router.post("/{event_id}/comments", status_code=status.HTTP_201_CREATED)
def add_comment(
    event_id: int,
    comment_in: schemas.CommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    comment = comment_service.add_comment(db, event_id=event_id, comment_in=comment_in, user=current_user)
    return schemas.success_response("Comment added", {"comment": schemas.CommentOut.model_validate(comment)})


@router.put("/{comment_id}")
def update_comment(
    comment_id: int,
    comment_in: schemas.CommentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    comment = comment_service.update_comment(db, comment_id=comment_id, comment_in=comment_in, user=current_user)
    return schemas.success_response("Comment updated", {"comment": schemas.CommentOut.model_validate(comment)})


@router.delete("/{comment_id}")
def delete_comment(
    comment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    removed = comment_service.delete_comment(db, comment_id=comment_id, user=current_user)
    return schemas.success_response("Comment deleted", {"removed": removed})


@router.post("/{comment_id}/like")
def toggle_like(
    comment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    result = comment_service.toggle_like(db, comment_id=comment_id, user=current_user)
    return schemas.success_response("Like added" if result["is_liked"] else "Like removed", result)
