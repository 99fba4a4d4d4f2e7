# =============================================================================
# app/routers/ - Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - pages.py: Home, login, logout and registration pages
# - admin.py: Staff user administration pages
# - users.py: User directory JSON API
#
# Each router is mounted in main.py, most with a URL prefix.
# =============================================================================

from . import admin
from . import health
from . import pages
from . import users

__all__ = [
    "admin",
    "health",
    "pages",
    "users",
]
