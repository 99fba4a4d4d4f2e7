# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# API endpoints for token-based authentication.
#
# Browser logins go through the /login/ page (app/routers/pages.py);
# these routes serve API clients.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Form

from app.auth.dependencies import create_access_token, get_current_user
from app.auth.models import TokenVerification
from app.dependencies import DbDep
from app.exceptions import InvalidCredentialsError
from core.models.user import TokenResponse, UserResponse
from core.services.user_service import UserService
from lib.db_models import User

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/token", response_model=TokenResponse)
def issue_token(
    db: DbDep,
    username: Annotated[str, Form()],
    password: Annotated[str, Form()],
) -> TokenResponse:
    """
    Exchange a username and password for a Bearer token.

    Raises:
        401: If the credentials are wrong
        403: If the credentials are right but the account is inactive
    """
    user = UserService.authenticate(db, username, password, raise_inactive=True)
    if user is None:
        raise InvalidCredentialsError()

    token, expires_in = create_access_token(user)
    return TokenResponse(access_token=token, expires_in=expires_in)


@router.get("/me", response_model=UserResponse)
def get_current_user_info(
    user: User = Depends(get_current_user)
) -> UserResponse:
    """
    Get the current authenticated user's profile.

    Raises:
        401: If not authenticated
    """
    return UserResponse.model_validate(user)


@router.get("/verify", response_model=TokenVerification)
def verify_token(
    user: User = Depends(get_current_user)
) -> TokenVerification:
    """
    Verify that the current token is valid.

    Useful for checking if a stored token is still valid.

    Raises:
        401: If token is invalid or expired
    """
    return TokenVerification(user_id=user.id, username=user.username)
