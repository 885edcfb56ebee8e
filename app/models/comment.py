from sqlalchemy import Column, Integer, ForeignKey, Text, Boolean, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from app.models.base import BaseModel

DELETED_COMMENT_PLACEHOLDER = "[Comment deleted]"


class Comment(BaseModel):
    __tablename__ = "comments"

    content = Column(Text, nullable=False, default="")
    rating = Column(Integer, nullable=True)
    # Null once the author account is removed by an admin
    author_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    parent_comment_id = Column(Integer, ForeignKey("comments.id", ondelete="CASCADE"), nullable=True, index=True)
    likes_count = Column(Integer, nullable=False, default=0)
    is_edited = Column(Boolean, nullable=False, default=False)
    edited_at = Column(DateTime, nullable=True)

    # Relationships
    author = relationship("User")
    event = relationship("Event", back_populates="comments")
    parent = relationship("Comment", remote_side="Comment.id", back_populates="replies")
    replies = relationship(
        "Comment",
        back_populates="parent",
        order_by="Comment.id",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    likes = relationship("CommentLike", back_populates="comment", cascade="all, delete-orphan", passive_deletes=True)

    @property
    def is_reply(self) -> bool:
        return self.parent_comment_id is not None

    @property
    def reply_ids(self):
        return [reply.id for reply in self.replies]

    @property
    def liked_by(self):
        return [like.user_id for like in self.likes]


class CommentLike(BaseModel):
    __tablename__ = "comment_likes"
    __table_args__ = (UniqueConstraint("comment_id", "user_id", name="uq_comment_likes_pair"),)

    comment_id = Column(Integer, ForeignKey("comments.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    comment = relationship("Comment", back_populates="likes")
