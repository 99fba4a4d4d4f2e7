# =============================================================================
# app/auth/sessions.py - Cookie Session Login
# =============================================================================
# Login state for the server-rendered pages lives in the signed session
# cookie set by Starlette's SessionMiddleware. Only the user id is stored;
# the row is reloaded on every request so deactivation takes effect at once.
#
# Usage:
#   @router.get("/")
#   async def home(user: User = Depends(login_required)):
#       ...
# =============================================================================

import logging

from fastapi import Depends, Request

from app.auth.csrf import rotate_csrf_token
from app.dependencies import DbDep
from app.exceptions import LoginRequired, PermissionDeniedError
from lib.db_models import User

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "_auth_user_id"


def login(request: Request, user: User) -> None:
    """Attach `user` to the current session."""
    request.session.clear()
    request.session[SESSION_USER_KEY] = user.id
    rotate_csrf_token(request)
    logger.debug(f"Session login for user {user.id}")


def logout(request: Request) -> None:
    """Forget the logged-in user and everything else in the session."""
    user_id = request.session.get(SESSION_USER_KEY)
    request.session.clear()
    if user_id is not None:
        logger.debug(f"Session logout for user {user_id}")


def get_session_user(request: Request, db: DbDep) -> User | None:
    """
    Return the logged-in user, or None for anonymous requests.

    Inactive or deleted users are treated as anonymous.
    """
    user_id = request.session.get(SESSION_USER_KEY)
    if user_id is None:
        return None

    user = db.get(User, user_id)
    if user is None or not user.is_active:
        request.session.pop(SESSION_USER_KEY, None)
        return None
    return user


def login_required(
    request: Request,
    user: User | None = Depends(get_session_user),
) -> User:
    """Page dependency: the logged-in user, or a redirect to LOGIN_URL."""
    if user is None:
        next_path = request.url.path
        if request.url.query:
            next_path = f"{next_path}?{request.url.query}"
        raise LoginRequired(next_path)
    return user


def staff_required(user: User = Depends(login_required)) -> User:
    """Page dependency: the logged-in user if they are staff."""
    if not user.is_staff:
        raise PermissionDeniedError("access the admin pages")
    return user
