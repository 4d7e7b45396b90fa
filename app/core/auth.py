# app/core/auth.py
import uuid
from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError

from app.core.config import get_settings
from app.core.supabase_client import supabase_admin
from app.repositories.user_repo import UserRoleRepository
from app.schemas.user import AuthUser

# Shoppers never send a token; only back office routes demand one.
bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Verify a Supabase access token and return its claims.

    Signature and `exp` are checked against SUPABASE_JWT_SECRET;
    `aud` is skipped since Supabase projects set it differently.

    Raises:
        HTTPException(401): bad signature, expired or malformed token.
    """
    settings = get_settings()
    try:
        return jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.SUPABASE_JWT_ALG],
            options={"verify_aud": False},
        )
    except JWTError:
        raise _unauthorized("Invalid or expired token")


def _subject(claims: dict[str, Any]) -> uuid.UUID:
    """Supabase user id carried in `sub`."""
    sub = claims.get("sub")
    if not sub:
        raise _unauthorized("Token missing sub")
    try:
        return uuid.UUID(sub)
    except ValueError:
        raise _unauthorized("Invalid sub in token")


def get_user_role_repo() -> UserRoleRepository:
    """Role lookups bypass RLS, hence the service-role client."""
    return UserRoleRepository(supabase_admin())


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    roles: UserRoleRepository = Depends(get_user_role_repo),
) -> AuthUser | None:
    """
    Caller behind the bearer token, or None without one.

    The role is "admin" when `user_roles` holds an admin row for the
    token's subject, "user" otherwise.
    """
    if credentials is None:
        return None

    claims = decode_access_token(credentials.credentials)
    user_id = _subject(claims)
    is_admin = roles.has_role(user_id, "admin")
    return AuthUser(id=user_id, email=claims.get("email"), role="admin" if is_admin else "user")


def require_auth(user: AuthUser | None = Depends(get_current_user)) -> AuthUser:
    if user is None:
        raise _unauthorized("Authentication required")
    return user


def require_admin(user: AuthUser = Depends(require_auth)) -> AuthUser:
    """
    Gate for the back office routers (catalog and promo code admin).

    Raises:
        HTTPException(403): authenticated but not an admin.
    """
    if user.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return user
