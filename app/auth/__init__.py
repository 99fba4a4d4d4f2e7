# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Two ways to be logged in:
# - Cookie session for the HTML pages (sessions.py, csrf.py)
# - Bearer JWT for the JSON API (dependencies.py, routes.py)
#
# Usage:
#   from app.auth import login_required, get_current_user
# =============================================================================

from app.auth.csrf import get_csrf_token, verify_csrf
from app.auth.dependencies import (
    create_access_token,
    get_current_staff_user,
    get_current_user,
    get_current_user_optional,
)
from app.auth.sessions import get_session_user, login, login_required, logout, staff_required

__all__ = [
    "create_access_token",
    "get_csrf_token",
    "get_current_staff_user",
    "get_current_user",
    "get_current_user_optional",
    "get_session_user",
    "login",
    "login_required",
    "logout",
    "staff_required",
    "verify_csrf",
]
