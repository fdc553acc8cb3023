# ============================================================================
# FILE: app/models/user.py
# Operator accounts for the admin dashboard
# ============================================================================
from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.sql import func
from passlib.context import CryptContext
import uuid

from app.models.base import Base

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class AdminUser(Base):
    __tablename__ = "admin_users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    username = Column(String(100), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    is_admin = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    @staticmethod
    def hash_password(password: str) -> str:
        """Hash a plain text password."""
        return pwd_context.hash(password)

    def verify_password(self, password: str) -> bool:
        """Check a plain text password against the stored hash."""
        return pwd_context.verify(password, self.hashed_password)

    def __repr__(self):
        return f"<AdminUser {self.username}>"
