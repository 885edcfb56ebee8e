# File: app/api/v1/api.py
from fastapi import APIRouter
from app.api.v1.endpoints import auth, users, events, comments, notifications, admin

# Create main API router
api_router = APIRouter()

api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["authentication"]
)

api_router.include_router(
    users.router,
    prefix="/users",
    tags=["users"]
)

# Comment routes nested under an event are declared before the event routes
api_router.include_router(
    comments.event_comments_router,
    prefix="/events",
    tags=["comments"]
)

api_router.include_router(
    events.router,
    prefix="/events",
    tags=["events"]
)

api_router.include_router(
    comments.router,
    prefix="/comments",
    tags=["comments"]
)

api_router.include_router(
    notifications.router,
    prefix="/notifications",
    tags=["notifications"]
)

api_router.include_router(
    admin.router,
    prefix="/admin",
    tags=["admin"]
)
