# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Bearer-token authentication for the JSON API.
#
# Tokens are HS256 JWTs signed with SECRET_KEY and issued by
# POST /api/v1/auth/token. The HTML pages use the cookie session instead
# (see app/auth/sessions.py).
#
# Usage:
#   from app.auth import get_current_user
#
#   @router.get("/protected")
#   async def protected(user: User = Depends(get_current_user)):
#       return {"user_id": user.id}
# =============================================================================

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt

from app.auth.models import TokenPayload
from app.config import settings
from app.dependencies import DbDep
from lib.db_models import User

logger = logging.getLogger(__name__)

# HTTP Bearer token extractor
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def create_access_token(user: User, expires_minutes: int | None = None) -> tuple[str, int]:
    """
    Issue a signed access token for `user`.

    Returns:
        Tuple of (token, lifetime in seconds)
    """
    lifetime = timedelta(minutes=expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    now = datetime.now(timezone.utc)
    claims = {
        "sub": str(user.id),
        "username": user.username,
        "iat": int(now.timestamp()),
        "exp": int((now + lifetime).timestamp()),
    }
    token = jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    return token, int(lifetime.total_seconds())


def decode_access_token(token: str) -> TokenPayload:
    """
    Verify a token's signature and expiry.

    Raises:
        HTTPException: 401 if the token is expired, tampered with or malformed
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        logger.warning("JWT token has expired")
        raise _unauthorized("Token has expired")
    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise _unauthorized(f"Invalid token: {str(e)}")

    try:
        return TokenPayload(**payload)
    except ValueError:
        logger.warning("JWT token missing required claims")
        raise _unauthorized("Invalid token: missing claims")


def get_current_user(
    db: DbDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> User:
    """
    Extract and validate the user from the Bearer token.

    This dependency:
    1. Extracts the Bearer token from the Authorization header
    2. Verifies the JWT signature and expiry
    3. Loads the user and checks the account is still active

    Raises:
        HTTPException: 401 if the token is missing, invalid or expired,
            or the user no longer exists or is inactive
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")

    payload = decode_access_token(credentials.credentials)

    try:
        user_id = int(payload.sub)
    except ValueError:
        logger.warning(f"Invalid user id in token: {payload.sub}")
        raise _unauthorized("Invalid token: malformed user ID")

    user = db.get(User, user_id)
    if user is None or not user.is_active:
        logger.warning(f"Token for missing or inactive user: {user_id}")
        raise _unauthorized("User not found or inactive")

    logger.debug(f"Authenticated user: {user_id}")
    return user


def get_current_user_optional(
    db: DbDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[User]:
    """
    Optionally get the current user from the Bearer token.

    Returns None if no token is provided or the token is invalid,
    instead of raising an error.
    """
    if credentials is None:
        return None

    try:
        return get_current_user(db, credentials)
    except HTTPException:
        return None


def get_current_staff_user(user: User = Depends(get_current_user)) -> User:
    """Require a staff account (403 otherwise)."""
    if not user.is_staff:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Staff privileges required",
        )
    return user
