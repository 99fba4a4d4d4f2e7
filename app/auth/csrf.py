# =============================================================================
# app/auth/csrf.py - CSRF Tokens for HTML Forms
# =============================================================================
# One random token per session. Templates render it as a hidden
# `csrf_token` input; form handlers compare the posted value with the
# session copy.
# =============================================================================

import secrets

from fastapi import Request

from app.exceptions import CsrfError

CSRF_SESSION_KEY = "_csrf_token"


def get_csrf_token(request: Request) -> str:
    """Return the session's CSRF token, creating it on first use."""
    token = request.session.get(CSRF_SESSION_KEY)
    if not token:
        token = secrets.token_urlsafe(32)
        request.session[CSRF_SESSION_KEY] = token
    return token


def rotate_csrf_token(request: Request) -> str:
    """Replace the token. Called on login so a pre-login token can't be reused."""
    token = secrets.token_urlsafe(32)
    request.session[CSRF_SESSION_KEY] = token
    return token


def verify_csrf(request: Request, submitted: str | None) -> None:
    """
    Raise CsrfError unless `submitted` matches the session token.
    """
    expected = request.session.get(CSRF_SESSION_KEY)
    if not expected or not submitted or not secrets.compare_digest(expected, submitted):
        raise CsrfError()
