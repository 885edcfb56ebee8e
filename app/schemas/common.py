from pydantic import BaseModel
from typing import Any, Optional
import math


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


def build_pagination(page: int, limit: int, total: int) -> Pagination:
    return Pagination(page=page, limit=limit, total=total, pages=math.ceil(total / limit) if limit else 0)


def success_response(message: str, data: Optional[Any] = None) -> dict:
    """Envelope shared by every mutating endpoint"""
    return {"success": True, "message": message, "data": data}
