from typing import List, Optional, Tuple
from sqlalchemy.orm import Session, selectinload
from app.crud.base import CRUDBase
from app.models.comment import Comment, CommentLike
from app.schemas.comment import CommentCreate, CommentUpdate


class CRUDComment(CRUDBase[Comment, CommentCreate, CommentUpdate]):

    def get_top_level(
        self, db: Session, *, event_id: int, skip: int = 0, limit: int = 20
    ) -> Tuple[List[Comment], int]:
        """Top-level comments of an event, each with its direct replies"""
        query = db.query(Comment).filter(
            Comment.event_id == event_id,
            Comment.parent_comment_id.is_(None),
        )
        total = query.count()
        comments = (
            query.options(
                selectinload(Comment.author),
                selectinload(Comment.likes),
                selectinload(Comment.replies).selectinload(Comment.author),
                selectinload(Comment.replies).selectinload(Comment.likes),
            )
            .order_by(Comment.created_at.desc(), Comment.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )
        return comments, total

    def get_like(self, db: Session, *, comment_id: int, user_id: int) -> Optional[CommentLike]:
        return db.query(CommentLike).filter(
            CommentLike.comment_id == comment_id,
            CommentLike.user_id == user_id,
        ).first()

    def count_likes(self, db: Session, *, comment_id: int) -> int:
        return db.query(CommentLike).filter(CommentLike.comment_id == comment_id).count()


comment = CRUDComment(Comment)
