"""Auth router - local account registration for Firebase identities."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import get_current_user, verify_firebase_token, AuthenticatedUser
from app.models.enums import UserRole, UserStatus
from app.models.user import User
from app.schemas.auth import RegisterRequest, CurrentUserResponse
from app.schemas.base import ApiResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=ApiResponse[CurrentUserResponse],
    status_code=status.HTTP_201_CREATED,
)
async def register(
    data: RegisterRequest,
    db: AsyncSession = Depends(get_db),
    auth_user: AuthenticatedUser = Depends(verify_firebase_token),
):
    """Create the local account for the signed-in Firebase user.

    Tenants start PENDING until onboarding completes; landlords are ACTIVE.
    """
    email = auth_user.email or data.email
    if not email:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="An email address is required",
        )

    existing = await db.execute(
        select(User).where(or_(User.firebase_uid == auth_user.uid, User.email == email))
    )
    if existing.scalars().first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="An account with this email already exists",
        )

    user = User(
        firebase_uid=auth_user.uid,
        email=email,
        first_name=data.first_name,
        last_name=data.last_name,
        phone=data.phone,
        role=data.role,
        status=UserStatus.ACTIVE if data.role == UserRole.LANDLORD else UserStatus.PENDING,
        telegram_chat_id=data.telegram_chat_id,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)

    logger.info(f"[AUTH] Registered {user.role.value} {user.id}")
    return ApiResponse(
        data=CurrentUserResponse.model_validate(user),
        message="Account created successfully",
    )


@router.get("/me", response_model=ApiResponse[CurrentUserResponse])
async def get_current_user_info(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Get current authenticated user info."""
    user = await db.get(User, current_user.db_user_id)
    return ApiResponse(data=CurrentUserResponse.model_validate(user))
