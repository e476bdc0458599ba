"""Security utilities: JWT, password hashing, actor resolution."""

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional
from uuid import UUID

import bcrypt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.config import settings
from jobboard.core.constants import ErrorCode, Role
from jobboard.core.exceptions import ForbiddenError, UnauthorizedError
from jobboard.db.session import get_db
from jobboard.models.account import Account
from jobboard.utils.dates import utc_now

# HTTPBearer for simple token authentication in Swagger (just paste the access token)
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Actor:
    """Authenticated caller passed explicitly into service methods."""

    role: Role
    account_id: UUID


def get_password_hash(password: str) -> str:
    """Hash a plaintext password using bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify a plaintext password against a stored bcrypt hash."""
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    to_encode = data.copy()
    expire = utc_now() + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire, "type": "access"})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> dict:
    """Decode and verify JWT token."""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise UnauthorizedError(ErrorCode.INVALID_TOKEN, "Could not validate credentials")


async def get_current_actor(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> Actor:
    """Resolve the bearer token to an Actor, rejecting locked accounts."""
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError(ErrorCode.TOKEN_REQUIRED, "Missing bearer token")

    payload = decode_token(credentials.credentials)
    account_id = payload.get("sub")
    if account_id is None or payload.get("type") != "access":
        raise UnauthorizedError(ErrorCode.INVALID_TOKEN, "Could not validate credentials")

    try:
        account_uuid = UUID(str(account_id))
    except ValueError:
        raise UnauthorizedError(ErrorCode.INVALID_TOKEN, "Could not validate credentials")

    result = await db.execute(select(Account).where(Account.id == account_uuid))
    account = result.scalar_one_or_none()

    if account is None:
        raise UnauthorizedError(ErrorCode.UNAUTHORIZED, "Account not found")

    if account.is_locked:
        raise ForbiddenError(ErrorCode.ACCOUNT_IS_LOCKED, "Account is locked")

    return Actor(role=Role(account.role), account_id=account.id)


def require_role(*allowed_roles: Role):
    """Dependency to check if the actor has one of the required roles."""

    async def role_checker(actor: Actor = Depends(get_current_actor)) -> Actor:
        if actor.role not in allowed_roles:
            raise ForbiddenError(
                ErrorCode.FORBIDDEN,
                f"Insufficient permissions. Required: {[r.value for r in allowed_roles]}",
            )
        return actor

    return role_checker


require_admin = require_role(Role.ADMIN)
require_company = require_role(Role.COMPANY)
