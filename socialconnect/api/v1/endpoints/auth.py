"""Auth endpoints: register, login, refresh, logout, password management."""
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from socialconnect.api.deps import get_current_user, get_db
from socialconnect.core.exceptions import ForbiddenException, UnauthorizedException, ValidationException
from socialconnect.core.security import REFRESH, create_password_reset_token, subject_from_token, verify_password
from socialconnect.models.user import User
from socialconnect.schemas.password import ChangePasswordRequest, PasswordResetConfirm, PasswordResetRequest
from socialconnect.schemas.user import LoginRequest, RegisterResponse, Token, TokenRefresh, UserCreate
from socialconnect.services.auth_service import (
    authenticate_user,
    create_tokens_for_user,
    create_user,
    get_user_by_email,
    get_user_by_id,
    record_login,
    set_password,
    user_for_reset_token,
)
from socialconnect.services.user_service import user_to_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

RESET_MESSAGE = "If an account exists for this email, a password reset link has been sent"


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(
    data: UserCreate,
    db: AsyncSession = Depends(get_db),
):
    logger.info("Register attempt: %s %s", data.username, data.email)
    user = await create_user(db, data)
    await db.commit()
    logger.info("Register success: %s %s", user.id, user.username)
    access_token, refresh_token = create_tokens_for_user(user)
    return RegisterResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        user=user_to_response(user),
    )


@router.post("/login", response_model=Token)
async def login(
    data: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    logger.info("Login attempt: %s", data.email or data.username)
    user = await authenticate_user(db, data.password, email=data.email, username=data.username)
    if not user:
        logger.info("Login failed: invalid credentials")
        raise UnauthorizedException("Invalid credentials")
    if not user.is_active:
        raise ForbiddenException("Account has been deactivated")
    await record_login(db, user)
    await db.commit()
    logger.info("Login success: %s %s", user.id, user.username)
    access_token, refresh_token = create_tokens_for_user(user)
    return Token(
        access_token=access_token,
        refresh_token=refresh_token,
        user=user_to_response(user),
    )


@router.post("/refresh", response_model=Token)
async def refresh_token(
    body: TokenRefresh,
    db: AsyncSession = Depends(get_db),
):
    user_id = subject_from_token(body.refresh_token, REFRESH)
    if user_id is None:
        raise UnauthorizedException("Invalid refresh token")
    user = await get_user_by_id(db, user_id)
    if not user or not user.is_active:
        raise UnauthorizedException("User not found")
    new_access, new_refresh = create_tokens_for_user(user)
    return Token(
        access_token=new_access,
        refresh_token=new_refresh,
        user=user_to_response(user),
    )


@router.post("/logout")
async def logout(current_user: User = Depends(get_current_user)):
    # Tokens are stateless; the client discards them.
    logger.info("Logout: %s", current_user.id)
    return {"message": "Logged out successfully"}


@router.post("/password-reset")
async def request_password_reset(
    data: PasswordResetRequest,
    db: AsyncSession = Depends(get_db),
):
    user = await get_user_by_email(db, data.email)
    if user and user.is_active:
        from socialconnect.workers.mail import send_password_reset_email

        token = create_password_reset_token(user.id, user.password_hash)
        try:
            send_password_reset_email.delay(user.email, token)
        except Exception:
            logger.warning("Password reset mail dispatch failed for %s", user.id, exc_info=True)
    return {"message": RESET_MESSAGE}


@router.post("/password-reset/confirm")
async def confirm_password_reset(
    data: PasswordResetConfirm,
    db: AsyncSession = Depends(get_db),
):
    user = await user_for_reset_token(db, data.token)
    if not user:
        raise ValidationException("Invalid or expired reset token")
    await set_password(db, user, data.new_password)
    await db.commit()
    logger.info("Password reset completed for %s", user.id)
    return {"message": "Password has been reset"}


@router.post("/change-password")
async def change_password(
    data: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if not verify_password(data.old_password, current_user.password_hash):
        raise ValidationException("Current password is incorrect")
    await set_password(db, current_user, data.new_password)
    await db.commit()
    return {"message": "Password changed successfully"}
