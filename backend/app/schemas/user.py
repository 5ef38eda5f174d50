"""
Pydantic schemas for User entity.
"""
from pydantic import BaseModel, EmailStr, Field
from typing import Any, Dict, Optional
from datetime import datetime


class UserBase(BaseModel):
    """Base user schema."""
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr


class UserCreate(UserBase):
    """Schema for user registration."""
    password: str = Field(..., min_length=6)


class UserUpdate(BaseModel):
    """Schema for profile update."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    profile_photo: Optional[str] = None
    preferences: Optional[Dict[str, Any]] = None


class UserResponse(UserBase):
    """Schema for user response."""
    id: int
    profile_photo: Optional[str] = None
    preferences: Dict[str, Any] = {}
    is_admin: bool
    created_at: datetime

    class Config:
        from_attributes = True


class UserLogin(BaseModel):
    """Schema for user login."""
    email: EmailStr
    password: str


class AuthPayload(BaseModel):
    """Token plus the authenticated user."""
    token: str
    user: UserResponse


class PasswordChange(BaseModel):
    """Schema for password change."""
    current_password: str
    new_password: str = Field(..., min_length=6)


class ForgotPasswordRequest(BaseModel):
    """Schema for requesting a password reset."""
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    """Schema for completing a password reset."""
    token: str
    new_password: str = Field(..., min_length=6)
