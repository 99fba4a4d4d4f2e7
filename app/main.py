# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the StaffDesk web application.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
#   python scripts/manage.py runserver
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware

from app import __version__
from app.auth import routes as auth_routes
from app.auth.dependencies import get_current_user_optional
from app.config import settings
from app.exceptions import (
    CsrfError,
    LoginRequired,
    StaffDeskException,
    csrf_exception_handler,
    login_required_handler,
    staffdesk_exception_handler,
    validation_exception_handler,
)
from app.routers import admin, health, pages, users
from lib.database import init_db
from lib.db_models import User

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "same-origin",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs on startup and shutdown:
    - Startup: Create missing tables and the media directory
    - Shutdown: Log only; connections are pooled by SQLAlchemy
    """
    logger.info(f"Starting {settings.PROJECT_NAME} in {settings.ENVIRONMENT} mode")
    logger.info(f"Installed apps: {settings.installed_apps_list}")
    logger.info(f"Allowed hosts: {settings.allowed_hosts_list}")

    init_db()
    settings.MEDIA_ROOT.mkdir(parents=True, exist_ok=True)

    yield

    logger.info(f"Shutting down {settings.PROJECT_NAME}")


# Create FastAPI application
app = FastAPI(
    title=f"{settings.PROJECT_NAME} API",
    description="""
## Staff Accounts Portal

Server-rendered login, registration and a staff home page, plus a small
JSON API over the same user accounts.

### Pages

| Route | Purpose |
|-------|---------|
| `/` | Home page (login required) |
| `/login/` | Login form |
| `/register/` | Sign-up form |
| `/admin/` | Staff user administration |

### API Quick Start

```bash
# 1. Get a token
curl -X POST http://localhost:8000/api/v1/auth/token \\
  -d "username=asmith&password=..."

# 2. Call the API
curl http://localhost:8000/api/v1/auth/me \\
  -H "Authorization: Bearer <token>"
```
""",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Auth",
            "description": "Issue and verify API access tokens",
        },
        {
            "name": "Users",
            "description": "User directory (staff, or self)",
        },
        {
            "name": "Pages",
            "description": "Server-rendered account pages",
        },
        {
            "name": "Admin",
            "description": "Staff user administration pages",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================
# Starlette wraps each new middleware around the previous ones, so the
# last one added runs first. Request order:
#   TrustedHost -> CORS -> Session -> security headers -> routes

@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    """Clickjacking and content-sniffing protection on every response."""
    response = await call_next(request)
    for header, value in SECURITY_HEADERS.items():
        response.headers.setdefault(header, value)
    return response


# Signed cookie session used by the HTML login
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SECRET_KEY,
    session_cookie=settings.SESSION_COOKIE_NAME,
    max_age=settings.SESSION_COOKIE_AGE,
    same_site="lax",
    https_only=settings.SESSION_COOKIE_SECURE,
)

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Host header allow-list
app.add_middleware(
    TrustedHostMiddleware,
    allowed_hosts=settings.allowed_hosts_list,
)


# =============================================================================
# Exception Handlers
# =============================================================================

app.add_exception_handler(StaffDeskException, staffdesk_exception_handler)
app.add_exception_handler(LoginRequired, login_required_handler)
app.add_exception_handler(CsrfError, csrf_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Static & Media Files
# =============================================================================

app.mount(
    settings.STATIC_URL.rstrip("/"),
    StaticFiles(directory=str(settings.STATIC_ROOT)),
    name="static",
)
app.mount(
    settings.MEDIA_URL.rstrip("/"),
    StaticFiles(directory=str(settings.MEDIA_ROOT), check_dir=False),
    name="media",
)


# =============================================================================
# Routers
# =============================================================================

# Health check endpoints (always on)
app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

if "api" in settings.installed_apps_list:
    # Token endpoints
    app.include_router(
        auth_routes.router,
        prefix="/api/v1/auth",
        tags=["Auth"]
    )

    # User directory endpoints
    app.include_router(
        users.router,
        prefix="/api/v1/users",
        tags=["Users"]
    )

if "admin" in settings.installed_apps_list:
    # Staff administration pages
    app.include_router(
        admin.router,
        prefix="/admin",
        tags=["Admin"],
        include_in_schema=False,
    )

if "accounts" in settings.installed_apps_list:
    # Home, login, logout and registration pages
    app.include_router(
        pages.router,
        tags=["Pages"],
        include_in_schema=False,
    )


# =============================================================================
# API Root Endpoint
# =============================================================================

@app.get("/api", tags=["Root"])
def api_root(user: User | None = Depends(get_current_user_optional)):
    """
    API root - returns API info and who the Bearer token (if any) belongs to.
    """
    return {
        "name": f"{settings.PROJECT_NAME} API",
        "version": __version__,
        "docs": "/docs",
        "health": "/api/v1/health",
        "authenticated_as": user.username if user else None,
    }
