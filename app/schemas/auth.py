"""Auth schemas."""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from app.schemas.base import BaseSchema, IDMixin
from app.models.enums import UserRole, UserStatus


class RegisterRequest(BaseSchema):
    """Create the local account for a verified Firebase identity."""

    email: Optional[EmailStr] = None
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    phone: Optional[str] = Field(None, min_length=10, max_length=20)
    role: UserRole = UserRole.TENANT
    telegram_chat_id: Optional[str] = Field(None, max_length=64)

    @field_validator("role")
    @classmethod
    def validate_role(cls, value: UserRole) -> UserRole:
        if value == UserRole.ADMIN:
            raise ValueError("Admin accounts cannot self-register")
        return value


class CurrentUserResponse(BaseSchema, IDMixin):
    """Current authenticated user info."""

    firebase_uid: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    role: UserRole
    status: UserStatus
    telegram_chat_id: Optional[str] = None
    created_at: datetime
