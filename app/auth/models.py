# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

import re
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class AuthUser(BaseModel):
    """
    Authenticated user extracted from Supabase JWT.

    This is the minimal user info available from the token itself,
    without querying the database.
    """
    id: UUID
    email: Optional[str] = None
    name: Optional[str] = None

    class Config:
        frozen = True  # Make immutable


class RegisterRequest(BaseModel):
    """
    Sign-up form.

    Example:
        {
            "name": "王小明",
            "email": "ming@example.com",
            "password": "Secret123",
            "confirm_password": "Secret123"
        }
    """
    name: str = Field(..., min_length=2, max_length=50)
    email: str
    password: str = Field(..., min_length=6)
    confirm_password: str

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 2:
            raise ValueError("姓名至少需要 2 個字元")
        return value

    @field_validator("email")
    @classmethod
    def valid_email(cls, value: str) -> str:
        value = value.strip().lower()
        if not EMAIL_PATTERN.match(value):
            raise ValueError("請輸入有效的電子信箱")
        return value

    @field_validator("password")
    @classmethod
    def strong_password(cls, value: str) -> str:
        if not (
            re.search(r"[a-z]", value)
            and re.search(r"[A-Z]", value)
            and re.search(r"\d", value)
        ):
            raise ValueError("密碼必須包含大小寫字母和數字")
        return value

    @model_validator(mode="after")
    def passwords_match(self) -> "RegisterRequest":
        if self.password != self.confirm_password:
            raise ValueError("密碼確認不一致")
        return self


class LoginRequest(BaseModel):
    """Email / password sign-in."""
    email: str
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class AuthSession(BaseModel):
    """
    Result of register / login.

    Tokens are absent after registration when the project requires e-mail
    confirmation before the first sign-in.
    """
    user: AuthUser
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    profile: Optional[dict[str, Any]] = None


class UserResponse(BaseModel):
    """
    Current user for /auth/me.

    Includes profile data from the public.users table.
    """
    id: UUID
    email: Optional[str] = None
    name: Optional[str] = None
    avatar_url: Optional[str] = None
    is_public: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
