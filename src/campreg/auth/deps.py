# src/campreg/auth/deps.py
from __future__ import annotations

import time
import uuid
from typing import Any, Callable, Optional, Sequence

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import jwt, JWTError, ExpiredSignatureError
from sqlalchemy.ext.asyncio import AsyncSession

from campreg.app_logger import get_logger
from campreg.core.config import settings
from campreg.db.models import User, UserRole
from campreg.db.repositories import UserRepository
from campreg.db.session import get_db
from campreg.services.note_policy import Actor

log = get_logger("auth.deps")

# ------------------------------------------------------------------------------
# Errors
# ------------------------------------------------------------------------------
class AuthError(HTTPException):
    def __init__(self, detail: str, code: int = status.HTTP_401_UNAUTHORIZED):
        headers = {"WWW-Authenticate": "Bearer"} if code == status.HTTP_401_UNAUTHORIZED else None
        super().__init__(status_code=code, detail=detail, headers=headers)

# ------------------------------------------------------------------------------
# Token helpers
# ------------------------------------------------------------------------------
def create_access_token(
    user_id: uuid.UUID | str,
    email: str | None = None,
    expires_in: int | None = None,
) -> str:
    """Sign a bearer token for `user_id` with the configured secret."""
    now = int(time.time())
    claims: dict[str, Any] = {
        "sub": str(user_id),
        "iat": now,
        "exp": now + int(expires_in or settings.JWT_EXPIRES_SECONDS),
    }
    if email:
        claims["email"] = email
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.jwt_algorithms[0])


def _decode_jwt(token: str) -> dict:
    try:
        header = jwt.get_unverified_header(token)
    except JWTError:
        raise AuthError("Malformed bearer token")

    alg = header.get("alg")
    if alg not in settings.jwt_algorithms:
        raise AuthError(f"Unsupported token algorithm: {alg}")

    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[alg],
            options={"leeway": settings.JWT_LEEWAY_SECONDS},
        )
    except ExpiredSignatureError:
        raise AuthError("Token expired")
    except JWTError as e:
        log.debug("JWT rejected: %s", e)
        raise AuthError("Invalid token")


def _subject_id(claims: dict) -> uuid.UUID:
    try:
        return uuid.UUID(str(claims.get("sub")))
    except ValueError:
        raise AuthError("Invalid token")

# ------------------------------------------------------------------------------
# Dependencies
# ------------------------------------------------------------------------------
bearer_scheme = HTTPBearer(auto_error=False)

async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    session: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the bearer token to a stored user, or fail with 401."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthError("Not authenticated")

    claims = _decode_jwt(credentials.credentials)
    user = await UserRepository(session).get_by_id(_subject_id(claims))
    if user is None:
        log.warning("token subject %s has no user record", claims.get("sub"))
        raise AuthError("Invalid token")
    return user


async def require_auth(user: User = Depends(get_current_user)) -> User:
    return user


def require_roles(*, any_of: Sequence[UserRole] | set[UserRole]) -> Callable[..., Any]:
    """
    Dependency factory: the current user must hold one of `any_of`.
    Admins always pass.
    """
    allowed = set(any_of)

    async def _dep(user: User = Depends(get_current_user)) -> User:
        if user.role == UserRole.ADMIN or user.role in allowed:
            return user
        log.info("user %s (%s) lacks role in %s", user.id, user.role.value, sorted(r.value for r in allowed))
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient privileges")

    return _dep


def actor_for(user: User) -> Actor:
    return Actor(id=user.id, role=user.role)
