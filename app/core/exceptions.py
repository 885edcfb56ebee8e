# File: app/core/exceptions.py
from typing import List, Optional


class AppError(Exception):
    """Base error raised by the service layer and rendered by the API boundary"""

    status_code = 500
    default_message = "Something went wrong on our end"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[str]] = None):
        self.message = message or self.default_message
        self.errors = errors or []
        super().__init__(self.message)


class NotFoundError(AppError):
    status_code = 404
    default_message = "Resource not found"


class UnauthorizedError(AppError):
    status_code = 401
    default_message = "Unauthorized access"


class ForbiddenError(AppError):
    status_code = 403
    default_message = "Insufficient permissions"


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid data"


class ConflictError(AppError):
    status_code = 409
    default_message = "Resource already exists"


class InternalError(AppError):
    status_code = 500
