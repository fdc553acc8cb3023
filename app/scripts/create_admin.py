#!/usr/bin/env python3
"""
Bootstrap script to create the admin account used by the dashboard.

Reads ADMIN_USERNAME / ADMIN_PASSWORD from the environment (or .env) and
creates the user when it does not exist yet. Safe to run on every deploy.

Usage:
    python -m app.scripts.create_admin
"""
import sys
from typing import Tuple

from sqlalchemy.orm import Session

from app.config.database import SessionLocal, create_tables
from app.config.settings import get_settings
from app.models.user import AdminUser


def ensure_admin(db: Session, username: str, password: str) -> Tuple[AdminUser, bool]:
    """Return the admin user, creating it first when missing."""
    existing = db.query(AdminUser).filter(AdminUser.username == username).first()
    if existing:
        return existing, False

    admin = AdminUser(
        username=username,
        hashed_password=AdminUser.hash_password(password),
        is_admin=True,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    return admin, True


def main() -> int:
    settings = get_settings()

    if not settings.ADMIN_PASSWORD:
        print("❌ Error: ADMIN_PASSWORD is not set")
        return 1
    if len(settings.ADMIN_PASSWORD) < 8:
        print("❌ Error: Password must be at least 8 characters")
        return 1

    create_tables()

    db: Session = SessionLocal()
    try:
        admin, created = ensure_admin(db, settings.ADMIN_USERNAME, settings.ADMIN_PASSWORD)
        if created:
            print(f"✅ Admin user created: {admin.username}")
        else:
            print(f"Admin user already exists: {admin.username}")
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
