"""
Account service: password reset tokens.

Reset tokens live in the password_reset_tokens table, keyed by the SHA-256 of
the token, so they survive restarts and work across instances. A token is
single use and expires after RESET_TOKEN_EXPIRE_MINUTES.
"""
import logging
from datetime import datetime, timedelta
from typing import Optional
from sqlalchemy.orm import Session
from app.core.config import settings
from app.core.security import generate_reset_token, hash_reset_token, get_password_hash
from app.models.user import User, PasswordResetToken

logger = logging.getLogger(__name__)


class ResetTokenError(ValueError):
    """Raised when a reset token is unknown, expired or already used."""


def issue_reset_token(email: str, db: Session) -> Optional[str]:
    """
    Create a reset token for the account with this e-mail.
    Returns the raw token, or None when no such account exists.
    """
    user = db.query(User).filter(User.email == email.lower()).first()
    if not user:
        logger.info("Password reset requested for unknown e-mail")
        return None

    raw_token = generate_reset_token()
    db.add(PasswordResetToken(
        user_id=user.id,
        token_hash=hash_reset_token(raw_token),
        expires_at=datetime.utcnow() + timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES)
    ))
    db.commit()

    logger.info(f"Issued password reset token for user {user.id}")
    return raw_token


def reset_password(raw_token: str, new_password: str, db: Session) -> User:
    """Consume a reset token and set the new password."""
    reset = db.query(PasswordResetToken).filter(
        PasswordResetToken.token_hash == hash_reset_token(raw_token)
    ).first()

    if not reset or reset.used_at is not None:
        raise ResetTokenError("Invalid or expired reset token")
    if reset.expires_at < datetime.utcnow():
        raise ResetTokenError("Invalid or expired reset token")

    user = reset.user
    user.hashed_password = get_password_hash(new_password)
    reset.used_at = datetime.utcnow()

    # Any other outstanding tokens for this user stop working too
    db.query(PasswordResetToken).filter(
        PasswordResetToken.user_id == user.id,
        PasswordResetToken.used_at.is_(None)
    ).update({PasswordResetToken.used_at: datetime.utcnow()}, synchronize_session=False)

    db.commit()
    db.refresh(user)
    return user
