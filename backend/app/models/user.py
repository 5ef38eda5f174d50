"""
User model for authentication and trip ownership.
"""
from sqlalchemy import Column, String, Boolean, JSON, DateTime, ForeignKey, Integer
from sqlalchemy.orm import relationship
from app.db.base import BaseModel


def default_preferences() -> dict:
    """Preferences assigned to new accounts."""
    return {"currency": "USD", "notifications": {"email": True, "trip_reminders": True}}


class User(BaseModel):
    """User model; owns trips and favorites."""
    __tablename__ = "users"

    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    profile_photo = Column(String(500), nullable=True)
    preferences = Column(JSON, nullable=False, default=default_preferences)
    is_admin = Column(Boolean, default=False, nullable=False)

    # Relationships
    trips = relationship("Trip", back_populates="owner", cascade="all, delete-orphan", passive_deletes=True)
    favorites = relationship("Favorite", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    reset_tokens = relationship("PasswordResetToken", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)


class PasswordResetToken(BaseModel):
    """Single-use, time-limited password reset token, stored by hash only."""
    __tablename__ = "password_reset_tokens"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    token_hash = Column(String(64), unique=True, nullable=False, index=True)
    expires_at = Column(DateTime, nullable=False)
    used_at = Column(DateTime, nullable=True)

    # Relationships
    user = relationship("User", back_populates="reset_tokens")
