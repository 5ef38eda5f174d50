"""
FastAPI dependencies for authentication.
"""
import logging
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.models.user import User
from app.core.security import decode_access_token

logger = logging.getLogger(__name__)

# auto_error is off on both schemes so a missing header yields our 401 envelope instead of FastAPI's 403
bearer_scheme = HTTPBearer(auto_error=False)


def _user_from_token(token: str, db: Session) -> Optional[User]:
    payload = decode_access_token(token)
    if not payload or "sub" not in payload:
        return None
    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        return None
    return db.query(User).filter(User.id == user_id).first()


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> User:
    """Get the authenticated user. Raises 401 if the token is missing or invalid."""
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No token provided. Authorization denied.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = _user_from_token(credentials.credentials, db)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token. Authorization denied.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> Optional[User]:
    """
    Get the authenticated user if a valid token is provided.
    Returns None for a missing or invalid token; used by endpoints that also serve public trips.
    """
    if not credentials:
        return None
    user = _user_from_token(credentials.credentials, db)
    if not user:
        logger.debug("Ignoring invalid bearer token on optional-auth endpoint")
    return user
