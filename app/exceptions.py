# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Errors should tell HOW to fix, not just WHAT failed.
#
# Two kinds of exceptions live here:
# - StaffDeskException and subclasses: rendered as JSON error bodies
# - LoginRequired / CsrfError: raised by HTML page dependencies and turned
#   into a login redirect or a 403 page
# =============================================================================

import logging
from typing import Any
from urllib.parse import urlencode

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse

from app.config import settings

logger = logging.getLogger(__name__)


class StaffDeskException(Exception):
    """
    Base exception for the StaffDesk API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "STAFFDESK_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# User Exceptions
# =============================================================================

class UserNotFoundError(StaffDeskException):
    """Raised when a user ID doesn't exist."""

    def __init__(self, user_id: int | str):
        super().__init__(
            message=f"User not found: {user_id}",
            code="USER_NOT_FOUND",
            status_code=404,
            suggestion="Check that the user id is correct",
            details={"user_id": str(user_id)}
        )


class UsernameTakenError(StaffDeskException):
    """Raised when registering a username that already exists."""

    def __init__(self, username: str):
        super().__init__(
            message=f"A user with that username already exists: {username}",
            code="USERNAME_TAKEN",
            status_code=409,
            suggestion="Pick a different username",
            details={"username": username}
        )


class PasswordValidationError(StaffDeskException):
    """Raised when a new password fails the password validators."""

    def __init__(self, errors: list[str]):
        super().__init__(
            message="Password does not meet the requirements",
            code="PASSWORD_INVALID",
            status_code=400,
            suggestion=" ".join(errors),
            details={"errors": errors}
        )


# =============================================================================
# Auth Exceptions
# =============================================================================

class InvalidCredentialsError(StaffDeskException):
    """Raised when a username/password pair does not authenticate."""

    def __init__(self):
        super().__init__(
            message="Invalid username or password",
            code="INVALID_CREDENTIALS",
            status_code=401,
            suggestion="Check the username and password and try again",
        )


class InactiveUserError(StaffDeskException):
    """Raised when a deactivated account tries to use the API."""

    def __init__(self, username: str):
        super().__init__(
            message=f"User account is inactive: {username}",
            code="USER_INACTIVE",
            status_code=403,
            suggestion="Ask an administrator to reactivate the account",
            details={"username": username}
        )


class PermissionDeniedError(StaffDeskException):
    """Raised when the authenticated user may not perform an action."""

    def __init__(self, action: str):
        super().__init__(
            message=f"You do not have permission to {action}",
            code="PERMISSION_DENIED",
            status_code=403,
            suggestion="Sign in with a staff account",
            details={"action": action}
        )


class LoginRequired(Exception):
    """Raised by page dependencies when no user is logged in."""

    def __init__(self, next_path: str | None = None):
        super().__init__("Login required")
        self.next_path = next_path


class CsrfError(Exception):
    """Raised when a form POST carries a missing or wrong CSRF token."""


# =============================================================================
# Exception Handlers
# =============================================================================

async def staffdesk_exception_handler(
    request: Request,
    exc: StaffDeskException
) -> JSONResponse:
    """
    Convert StaffDeskException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=headers,
    )


async def login_required_handler(
    request: Request,
    exc: LoginRequired
) -> RedirectResponse:
    """Redirect anonymous users to the login page, remembering where they were."""
    url = settings.LOGIN_URL
    if exc.next_path:
        url = f"{url}?{urlencode({'next': exc.next_path})}"
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


async def csrf_exception_handler(
    request: Request,
    exc: CsrfError
) -> HTMLResponse:
    """Reject a forged or stale form submission."""
    logger.warning(f"CSRF verification failed for {request.method} {request.url.path}")
    return HTMLResponse(
        "<h1>403 Forbidden</h1><p>CSRF verification failed. Reload the page and try again.</p>",
        status_code=status.HTTP_403_FORBIDDEN,
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle request validation errors.

    Converts validation errors to user-friendly messages.
    """
    return JSONResponse(
        status_code=422,
        content={
            "detail": "Validation error",
            "code": "VALIDATION_ERROR",
            "errors": [
                {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
                for err in exc.errors()
            ],
        }
    )
