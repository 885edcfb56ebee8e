# File: app/api/v1/endpoints/auth.py
from typing import Any
from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.orm import Session
from app import schemas
from app.api import deps
from app.db.database import get_db
from app.models.user import User
from app.services import user_service
from app.services.image_storage import ImageStorage, get_image_storage
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


def _auth_payload(user: User, token: str) -> dict:
    return {
        "user": schemas.UserProfile.model_validate(user),
        "token": schemas.Token(access_token=token),
    }


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    user_in: schemas.RegisterRequest,
    db: Session = Depends(get_db),
) -> Any:
    """Create a user or organizer account and return an access token"""
    user, token = user_service.register(db, user_in=user_in)
    return schemas.success_response("Registration completed", _auth_payload(user, token))


@router.post("/login")
def login(
    credentials: schemas.LoginRequest,
    db: Session = Depends(get_db),
) -> Any:
    user, token = user_service.login(db, email=credentials.email, password=credentials.password)
    return schemas.success_response("Login successful", _auth_payload(user, token))


@router.get("/me")
def read_me(current_user: User = Depends(deps.get_current_user)) -> Any:
    return schemas.success_response("Current user", {"user": schemas.UserProfile.model_validate(current_user)})


@router.put("/profile")
def update_profile(
    profile_in: schemas.ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    user = user_service.update_profile(db, user=current_user, profile_in=profile_in)
    return schemas.success_response("Profile updated", {"user": schemas.UserProfile.model_validate(user)})


@router.put("/change-password")
def change_password(
    password_in: schemas.PasswordChangeRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    user_service.change_password(db, user=current_user, password_in=password_in)
    return schemas.success_response("Password changed successfully")


@router.post("/avatar")
def upload_avatar(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
    storage: ImageStorage = Depends(get_image_storage),
) -> Any:
    """Replace the caller's avatar; the previous uploaded image is removed"""
    logger.info(f"📤 Avatar upload from user {current_user.id}")
    user = user_service.set_avatar(
        db,
        user=current_user,
        storage=storage,
        content=file.file.read(),
        filename=file.filename or "",
        content_type=file.content_type or "",
    )
    return schemas.success_response("Avatar uploaded", {"avatar": user.avatar})
