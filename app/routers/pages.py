# =============================================================================
# app/routers/pages.py - Server-Rendered Account Pages
# =============================================================================
# The browser-facing routes:
#   GET  /           home page (login required)
#   GET  /login/     login form
#   POST /login/     check credentials -> redirect home, or back to /login/
#   POST /logout/    end the session
#   GET  /register/  sign-up form
#   POST /register/  create the account and log in
#
# A failed login redirects back to the login page without an error
# message, so the page never reveals which part of the pair was wrong.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import RedirectResponse

from app.auth.csrf import verify_csrf
from app.auth.sessions import get_session_user, login, login_required, logout
from app.config import settings
from app.dependencies import DbDep
from app.exceptions import UsernameTakenError
from app.templating import render
from core.models.forms import LoginForm, RegistrationForm
from core.services.user_service import UserService
from lib.db_models import User
from lib.utils import is_safe_redirect

logger = logging.getLogger(__name__)

router = APIRouter()


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


def _after_login_url(next_url: str | None) -> str:
    return next_url if is_safe_redirect(next_url) else settings.LOGIN_REDIRECT_URL


# =============================================================================
# Home
# =============================================================================

@router.get("/", name="home")
def home(request: Request, user: User = Depends(login_required)):
    """Landing page for a logged-in user."""
    return render(request, "home.html", {"user": user})


# =============================================================================
# Login / Logout
# =============================================================================

@router.get("/login/", name="login")
def login_page(
    request: Request,
    user: User | None = Depends(get_session_user),
    next: str | None = None,
):
    """
    Show the login form.

    A user who is already logged in is sent straight on.
    """
    if user is not None:
        return _redirect(_after_login_url(next))
    return render(request, "login.html", {"next": next if is_safe_redirect(next) else ""})


@router.post("/login/")
def login_submit(
    request: Request,
    db: DbDep,
    username: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
    csrf_token: Annotated[str, Form()] = "",
    next: Annotated[str, Form()] = "",
):
    """
    Authenticate and redirect.

    Success goes to `next` (when it is a local path) or LOGIN_REDIRECT_URL.
    Failure goes back to LOGIN_URL.
    """
    verify_csrf(request, csrf_token)

    form = LoginForm(username=username, password=password)
    user = UserService.authenticate(db, form.username, form.password) if form.is_complete else None

    if user is None:
        return _redirect(settings.LOGIN_URL)

    login(request, user)
    return _redirect(_after_login_url(next))


@router.post("/logout/", name="logout")
def logout_submit(
    request: Request,
    csrf_token: Annotated[str, Form()] = "",
):
    """End the session and go to LOGOUT_REDIRECT_URL."""
    verify_csrf(request, csrf_token)
    logout(request)
    return _redirect(settings.LOGOUT_REDIRECT_URL)


# =============================================================================
# Registration
# =============================================================================

@router.get("/register/", name="register")
def register_page(
    request: Request,
    user: User | None = Depends(get_session_user),
):
    """Show the sign-up form (logged-in users are sent home)."""
    if user is not None:
        return _redirect(settings.LOGIN_REDIRECT_URL)
    return render(request, "register.html", {"form": RegistrationForm(), "errors": {}})


@router.post("/register/")
def register_submit(
    request: Request,
    db: DbDep,
    username: Annotated[str, Form()] = "",
    email: Annotated[str, Form()] = "",
    first_name: Annotated[str, Form()] = "",
    last_name: Annotated[str, Form()] = "",
    department: Annotated[str, Form()] = "",
    designation: Annotated[str, Form()] = "",
    password1: Annotated[str, Form()] = "",
    password2: Annotated[str, Form()] = "",
    csrf_token: Annotated[str, Form()] = "",
):
    """
    Create an account from the sign-up form.

    Invalid input re-renders the form (400) with per-field errors. On
    success the new user is logged in and redirected home.
    """
    verify_csrf(request, csrf_token)

    form = RegistrationForm(
        username=username,
        email=email,
        first_name=first_name,
        last_name=last_name,
        department=department,
        designation=designation,
        password1=password1,
        password2=password2,
    )

    errors = form.validate_fields()
    user = None
    if not errors:
        try:
            user = UserService.create_user(db, **form.to_user_kwargs())
        except UsernameTakenError:
            errors = {"username": ["A user with that username already exists."]}

    if user is None:
        # Never echo passwords back into the page
        blank = form.model_copy(update={"password1": "", "password2": ""})
        return render(
            request,
            "register.html",
            {"form": blank, "errors": errors},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    logger.info(f"Registered user {user.id} ({user.username})")
    login(request, user)
    return _redirect(settings.LOGIN_REDIRECT_URL)
