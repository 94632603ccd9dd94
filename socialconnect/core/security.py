"""Security utilities: password hashing and JWT token handling."""
import hashlib
from datetime import datetime, timedelta, timezone
from uuid import UUID

from jose import JWTError, jwt
from passlib.context import CryptContext

from socialconnect.core.config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCESS = "access"
REFRESH = "refresh"
RESET = "reset"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def _encode(subject: str | UUID, token_type: str, expires: timedelta, **claims) -> str:
    expire = datetime.now(timezone.utc) + expires
    to_encode = {"sub": str(subject), "exp": expire, "type": token_type, **claims}
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def create_access_token(subject: str | UUID) -> str:
    return _encode(subject, ACCESS, timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))


def create_refresh_token(subject: str | UUID) -> str:
    return _encode(subject, REFRESH, timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS))


def password_fingerprint(password_hash: str) -> str:
    """Short digest of the stored hash; a reset token stops working once the password changes."""
    return hashlib.sha256(password_hash.encode()).hexdigest()[:16]


def create_password_reset_token(subject: str | UUID, password_hash: str) -> str:
    return _encode(
        subject,
        RESET,
        timedelta(minutes=settings.PASSWORD_RESET_EXPIRE_MINUTES),
        pwd=password_fingerprint(password_hash),
    )


def decode_token(token: str) -> dict | None:
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        return payload
    except JWTError:
        return None


def subject_from_token(token: str, expected_type: str) -> UUID | None:
    """Return the user id carried by a token of the given type, or None."""
    payload = decode_token(token)
    if not payload or payload.get("type") != expected_type:
        return None
    sub = payload.get("sub")
    if not sub:
        return None
    try:
        return UUID(sub)
    except ValueError:
        return None
