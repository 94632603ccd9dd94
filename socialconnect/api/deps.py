"""API dependencies: auth, db session."""
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from socialconnect.core.exceptions import ForbiddenException, UnauthorizedException
from socialconnect.core.permissions import ensure_admin
from socialconnect.core.security import ACCESS, subject_from_token
from socialconnect.db.session import get_db
from socialconnect.models.user import User

security = HTTPBearer(auto_error=False)

__all__ = ["get_db", "get_current_user_optional", "get_current_user", "get_current_admin"]


async def get_current_user_optional(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User | None:
    if not credentials:
        return None
    user_id = subject_from_token(credentials.credentials, ACCESS)
    if user_id is None:
        return None
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_current_user(
    user: User | None = Depends(get_current_user_optional),
) -> User:
    if user is None:
        raise UnauthorizedException("Not authenticated")
    if not user.is_active:
        raise ForbiddenException("Account has been deactivated")
    return user


async def get_current_admin(
    user: User = Depends(get_current_user),
) -> User:
    ensure_admin(user)
    return user
