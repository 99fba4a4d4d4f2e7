# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# This package contains the FastAPI web application:
# - main.py: App entry point, middleware chain, error handlers
# - config.py: Environment variable loading and settings
# - auth/: Cookie session login, CSRF and Bearer token auth
# - routers/: Pages and API endpoints organized by feature
# - templates/, static/: Jinja2 templates and CSS
#
# The app layer is thin - it handles HTTP concerns and delegates
# business logic to the core/ package.
# =============================================================================

__version__ = "1.0.0"
