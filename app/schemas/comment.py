from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime
from app.schemas.user import UserSummary


class CommentBase(BaseModel):
    content: Optional[str] = Field(None, max_length=1000)
    rating: Optional[int] = None

    @field_validator("content")
    @classmethod
    def strip_content(cls, v):
        return v.strip() if v is not None else v

    @field_validator("rating", mode="before")
    @classmethod
    def validate_rating(cls, v):
        # 0 and "" mean "no rating" for form clients
        if v in (None, 0, ""):
            return None
        try:
            number = float(v)
        except (TypeError, ValueError):
            raise ValueError("Rating must be a whole number between 1 and 5")
        if not number.is_integer() or not 1 <= number <= 5:
            raise ValueError("Rating must be a whole number between 1 and 5")
        return int(number)


class CommentCreate(CommentBase):
    parent_comment_id: Optional[int] = None


class CommentUpdate(CommentBase):
    pass


class CommentOut(BaseModel):
    id: int
    content: str
    rating: Optional[int] = None
    author: Optional[UserSummary] = None
    event_id: int
    parent_comment_id: Optional[int] = None
    replies: List["CommentOut"] = []
    liked_by: List[int] = []
    likes_count: int = 0
    is_edited: bool = False
    edited_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


CommentOut.model_rebuild()
