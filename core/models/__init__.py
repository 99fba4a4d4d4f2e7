# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - user.py: User CRUD schemas and the API token response
# - forms.py: Login and registration forms posted by the HTML pages
#
# These models define the "contract" between the HTTP layer and clients.
# =============================================================================

from .forms import LoginForm, RegistrationForm
from .user import TokenResponse, UserCreate, UserList, UserResponse, UserUpdate

__all__ = [
    # Forms
    "LoginForm",
    "RegistrationForm",
    # User
    "TokenResponse",
    "UserCreate",
    "UserList",
    "UserResponse",
    "UserUpdate",
]
