"""
Authentication and account routes.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from app.core.config import settings
from app.core.utils import format_response
from app.db.session import get_db
from app.schemas.common import APIResponse
from app.schemas.user import (
    UserCreate, UserLogin, UserUpdate, UserResponse, AuthPayload,
    PasswordChange, ForgotPasswordRequest, ResetPasswordRequest
)
from app.models.user import User, default_preferences
from app.core.security import verify_password, get_password_hash, create_access_token
from app.api.dependencies import get_current_user
from app.services.account_service import issue_reset_token, reset_password, ResetTokenError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _issue_token(user: User) -> str:
    return create_access_token(data={
        "sub": str(user.id),
        "email": user.email,
        "name": user.name,
        "is_admin": user.is_admin,
    })


@router.post("/register", response_model=APIResponse[AuthPayload], status_code=status.HTTP_201_CREATED)
async def register(user_data: UserCreate, db: Session = Depends(get_db)):
    """Register a new user."""
    email = user_data.email.lower()
    existing_user = db.query(User).filter(User.email == email).first()
    if existing_user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User with this email already exists"
        )

    new_user = User(
        name=user_data.name,
        email=email,
        hashed_password=get_password_hash(user_data.password),
        preferences=default_preferences(),
        is_admin=False
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)

    logger.info(f"Registered user {new_user.id}")
    payload = AuthPayload(token=_issue_token(new_user), user=UserResponse.model_validate(new_user))
    return format_response(data=payload, message="User registered successfully")


@router.post("/login", response_model=APIResponse[AuthPayload])
async def login(credentials: UserLogin, db: Session = Depends(get_db)):
    """Login and get JWT token."""
    user = db.query(User).filter(User.email == credentials.email.lower()).first()

    if not user or not verify_password(credentials.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials"
        )

    payload = AuthPayload(token=_issue_token(user), user=UserResponse.model_validate(user))
    return format_response(data=payload, message="Login successful")


@router.get("/profile", response_model=APIResponse[UserResponse])
async def get_profile(current_user: User = Depends(get_current_user)):
    """Get current user profile."""
    return format_response(data=UserResponse.model_validate(current_user))


@router.put("/profile", response_model=APIResponse[UserResponse])
async def update_profile(
    profile: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update name, photo or preferences (currency, notification flags)."""
    changes = profile.model_dump(exclude_unset=True)

    if changes.get("name"):
        current_user.name = changes["name"]
    if "profile_photo" in changes:
        current_user.profile_photo = changes["profile_photo"]
    if changes.get("preferences") is not None:
        # Merge so a partial update keeps the other preference keys
        current_user.preferences = {**(current_user.preferences or {}), **changes["preferences"]}

    db.commit()
    db.refresh(current_user)
    return format_response(data=UserResponse.model_validate(current_user), message="Profile updated successfully")


@router.put("/change-password", response_model=APIResponse[None])
async def change_password(
    passwords: PasswordChange,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Change password after checking the current one."""
    if not verify_password(passwords.current_password, current_user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Current password is incorrect"
        )

    current_user.hashed_password = get_password_hash(passwords.new_password)
    db.commit()
    return format_response(message="Password changed successfully")


@router.delete("/account", response_model=APIResponse[None])
async def delete_account(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete the account and, transitively, all of its trips."""
    user_id = current_user.id
    db.delete(current_user)
    db.commit()

    logger.info(f"Deleted account {user_id}")
    return format_response(message="Account deleted successfully")


@router.post("/forgot-password", response_model=APIResponse[dict])
async def forgot_password(request: ForgotPasswordRequest, db: Session = Depends(get_db)):
    """
    Start a password reset. The reply is the same whether or not the e-mail is known.
    Tokens are not e-mailed; in DEBUG mode the token is returned for local testing.
    """
    token = issue_reset_token(request.email, db)

    data = None
    if token and settings.DEBUG:
        data = {"reset_token": token}
    return format_response(data=data, message="If the email exists, a reset link has been sent")


@router.post("/reset-password", response_model=APIResponse[None])
async def reset_password_with_token(request: ResetPasswordRequest, db: Session = Depends(get_db)):
    """Set a new password using a reset token."""
    try:
        reset_password(request.token, request.new_password, db)
    except ResetTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    return format_response(message="Password has been reset")
