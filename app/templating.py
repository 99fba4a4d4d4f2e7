# =============================================================================
# app/templating.py - Jinja2 Template Engine
# =============================================================================
# Single Jinja2Templates instance for the HTML pages, plus a render()
# helper that injects the values every page needs (project name, the
# current user, CSRF token, static/media URLs).
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.templating import Jinja2Templates
from starlette.responses import Response

from app.auth.csrf import get_csrf_token
from app.config import settings

templates = Jinja2Templates(directory=str(settings.TEMPLATES_DIR))
templates.env.auto_reload = settings.templates_auto_reload
templates.env.globals.update(
    project_name=settings.PROJECT_NAME,
    static_url=settings.STATIC_URL,
    media_url=settings.MEDIA_URL,
    login_url=settings.LOGIN_URL,
    debug=settings.DEBUG,
)


def render(
    request: Request,
    name: str,
    context: dict[str, Any] | None = None,
    status_code: int = 200,
) -> Response:
    """
    Render a template with the common page context.

    `user` defaults to None (anonymous) when the caller doesn't pass one.
    """
    page_context = {
        "user": None,
        "csrf_token": get_csrf_token(request),
    }
    page_context.update(context or {})
    return templates.TemplateResponse(request, name, page_context, status_code=status_code)
