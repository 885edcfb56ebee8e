#!/usr/bin/env python3
"""Create the first admin user"""

import sys
import os
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from app.db.database import SessionLocal
from app.models.user import User, UserRole
from app.core.security import get_password_hash


def create_admin():
    """Create admin user from ADMIN_EMAIL / ADMIN_PASSWORD / ADMIN_NAME"""
    email = os.getenv("ADMIN_EMAIL", "admin@ritmocaribe.com").strip().lower()
    password = os.getenv("ADMIN_PASSWORD")
    name = os.getenv("ADMIN_NAME", "Administrator")

    if not password:
        print("❌ ADMIN_PASSWORD is not set")
        sys.exit(1)

    db = SessionLocal()

    try:
        existing_admin = db.query(User).filter(User.email == email).first()

        if not existing_admin:
            admin_user = User(
                name=name,
                email=email,
                hashed_password=get_password_hash(password),
                role=UserRole.ADMIN,
                is_verified=True,
            )

            db.add(admin_user)
            db.commit()
            print(f"✅ Admin created: {email}")
        elif existing_admin.role != UserRole.ADMIN:
            existing_admin.role = UserRole.ADMIN
            db.commit()
            print(f"✅ Existing user {email} promoted to admin")
        else:
            print("ℹ️  Admin already exists")

    except Exception as e:
        print(f"❌ Error creating admin: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    create_admin()
