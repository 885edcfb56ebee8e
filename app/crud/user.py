from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from sqlalchemy import func, or_
from app.crud.base import CRUDBase
from app.models.user import User, UserRole, UserFollow, FavouriteEvent
from app.schemas.auth import RegisterRequest
from app.schemas.user import AdminUserUpdate
from app.core.security import get_password_hash, verify_password


class CRUDUser(CRUDBase[User, RegisterRequest, AdminUserUpdate]):

    def get_by_email(self, db: Session, *, email: str) -> Optional[User]:
        return db.query(User).filter(func.lower(User.email) == email.lower()).first()

    def create(self, db: Session, *, obj_in: RegisterRequest) -> User:
        db_obj = User(
            name=obj_in.name,
            email=obj_in.email.lower(),
            hashed_password=get_password_hash(obj_in.password),
            role=obj_in.role,
        )
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def authenticate(self, db: Session, *, email: str, password: str) -> Optional[User]:
        user = self.get_by_email(db, email=email)
        if not user:
            return None
        if not verify_password(password, user.hashed_password):
            return None
        return user

    def set_password(self, db: Session, *, db_obj: User, password: str) -> User:
        db_obj.hashed_password = get_password_hash(password)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def get_filtered(
        self,
        db: Session,
        *,
        search: Optional[str] = None,
        role: Optional[UserRole] = None,
        city: Optional[str] = None,
        skip: int = 0,
        limit: int = 20
    ) -> Tuple[List[User], int]:
        query = db.query(User)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(User.name.ilike(pattern), User.bio.ilike(pattern)))
        if role:
            query = query.filter(User.role == role)
        if city:
            query = query.filter(User.city.ilike(f"%{city}%"))

        total = query.count()
        users = query.order_by(User.created_at.desc(), User.id.desc()).offset(skip).limit(limit).all()
        return users, total

    def search(self, db: Session, *, q: str, exclude_id: Optional[int] = None, limit: int = 10) -> List[User]:
        pattern = f"%{q}%"
        query = db.query(User).filter(or_(User.name.ilike(pattern), User.email.ilike(pattern)))
        if exclude_id is not None:
            query = query.filter(User.id != exclude_id)
        return query.order_by(User.name).limit(limit).all()

    def get_admins(self, db: Session) -> List[User]:
        return db.query(User).filter(User.role == UserRole.ADMIN).all()

    def get_suggestions(self, db: Session, *, user: User, limit: int = 10) -> List[User]:
        """Users the caller does not follow yet, organizers first"""
        followed = db.query(UserFollow.followed_id).filter(UserFollow.follower_id == user.id)
        return (
            db.query(User)
            .filter(User.id != user.id, User.id.notin_(followed))
            .order_by((User.role == UserRole.ORGANIZER).desc(), User.created_at.desc(), User.id.desc())
            .limit(limit)
            .all()
        )

    # ---- follow graph ----

    def get_follow(self, db: Session, *, follower_id: int, followed_id: int) -> Optional[UserFollow]:
        return db.query(UserFollow).filter(
            UserFollow.follower_id == follower_id,
            UserFollow.followed_id == followed_id,
        ).first()

    def is_following(self, db: Session, *, follower_id: int, followed_id: int) -> bool:
        return self.get_follow(db, follower_id=follower_id, followed_id=followed_id) is not None

    def count_followers(self, db: Session, *, user_id: int) -> int:
        return db.query(UserFollow).filter(UserFollow.followed_id == user_id).count()

    def count_following(self, db: Session, *, user_id: int) -> int:
        return db.query(UserFollow).filter(UserFollow.follower_id == user_id).count()

    def get_followers(self, db: Session, *, user_id: int) -> List[User]:
        return (
            db.query(User)
            .join(UserFollow, UserFollow.follower_id == User.id)
            .filter(UserFollow.followed_id == user_id)
            .order_by(UserFollow.id)
            .all()
        )

    def get_following(self, db: Session, *, user_id: int) -> List[User]:
        return (
            db.query(User)
            .join(UserFollow, UserFollow.followed_id == User.id)
            .filter(UserFollow.follower_id == user_id)
            .order_by(UserFollow.id)
            .all()
        )

    def count_favourites(self, db: Session, *, user_id: int) -> int:
        return db.query(FavouriteEvent).filter(FavouriteEvent.user_id == user_id).count()


user = CRUDUser(User)
