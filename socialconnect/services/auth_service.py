"""Authentication business logic."""
import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from socialconnect.core.exceptions import ConflictException
from socialconnect.core.security import (
    RESET,
    create_access_token,
    create_refresh_token,
    decode_token,
    get_password_hash,
    password_fingerprint,
    verify_password,
)
from socialconnect.models.user import User
from socialconnect.schemas.user import UserCreate

logger = logging.getLogger(__name__)


async def get_user_by_id(db: AsyncSession, user_id: UUID) -> User | None:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email.lower()))
    return result.scalar_one_or_none()


async def get_user_by_username(db: AsyncSession, username: str) -> User | None:
    result = await db.execute(select(User).where(User.username == username))
    return result.scalar_one_or_none()


async def create_user(db: AsyncSession, data: UserCreate, role: str = "user") -> User:
    if await get_user_by_email(db, data.email):
        raise ConflictException("Email already registered")
    if await get_user_by_username(db, data.username):
        raise ConflictException("Username already taken")
    user = User(
        username=data.username,
        email=data.email.lower(),
        password_hash=get_password_hash(data.password),
        first_name=data.first_name or "",
        last_name=data.last_name or "",
        role=role,
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        raise ConflictException("Email or username already registered")
    await db.refresh(user)
    return user


async def authenticate_user(
    db: AsyncSession,
    password: str,
    *,
    email: str | None = None,
    username: str | None = None,
) -> User | None:
    """Look the account up by email, falling back to username, and check the password."""
    user = None
    if email:
        user = await get_user_by_email(db, email)
    elif username:
        user = await get_user_by_username(db, username)
    if not user or not verify_password(password, user.password_hash):
        return None
    return user


async def record_login(db: AsyncSession, user: User) -> None:
    user.last_login = datetime.utcnow()
    await db.flush()


def create_tokens_for_user(user: User) -> tuple[str, str]:
    return create_access_token(user.id), create_refresh_token(user.id)


async def set_password(db: AsyncSession, user: User, new_password: str) -> None:
    user.password_hash = get_password_hash(new_password)
    await db.flush()


async def user_for_reset_token(db: AsyncSession, token: str) -> User | None:
    """Resolve a password reset token; tokens die once the password they were issued for changes."""
    payload = decode_token(token)
    if not payload or payload.get("type") != RESET:
        return None
    try:
        user_id = UUID(payload.get("sub", ""))
    except ValueError:
        return None
    user = await get_user_by_id(db, user_id)
    if not user or not user.is_active:
        return None
    if payload.get("pwd") != password_fingerprint(user.password_hash):
        logger.info("Rejected stale password reset token for %s", user.id)
        return None
    return user
