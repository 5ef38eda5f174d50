"""
Credentials for Wayfarer accounts: password hashes, bearer tokens and
password reset tokens.
"""
from datetime import datetime, timedelta
from typing import Optional
import hashlib
import secrets
import bcrypt
from jose import JWTError, jwt
from app.core.config import settings


def _password_digest(password: str) -> bytes:
    # bcrypt only reads the first 72 bytes of its input
    return hashlib.sha256(password.encode("utf-8")).digest()


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """True when plain_password matches the stored account hash."""
    return bcrypt.checkpw(_password_digest(plain_password), hashed_password.encode("utf-8"))


def get_password_hash(password: str) -> str:
    """bcrypt hash (with a fresh salt) of a traveler's password, ready for users.hashed_password."""
    return bcrypt.hashpw(_password_digest(password), bcrypt.gensalt()).decode("utf-8")


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Sign a bearer token for the claims in data (sub = user id).
    Tokens last ACCESS_TOKEN_EXPIRE_DAYS unless expires_delta says otherwise.
    """
    lifetime = expires_delta or timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS)
    claims = {**data, "exp": datetime.utcnow() + lifetime}
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    """Claims of a valid, unexpired bearer token; None for anything else."""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None


def generate_reset_token() -> str:
    """Random URL-safe token handed to the user for a password reset."""
    return secrets.token_urlsafe(32)


def hash_reset_token(token: str) -> str:
    """Lookup key for a reset token; only this hex digest is stored."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()
