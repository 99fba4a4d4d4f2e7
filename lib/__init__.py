# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - database.py: SQLAlchemy engine, session factory and declarative Base
# - db_models.py: Table models (users)
# - passwords.py: Argon2 password hashing
# - utils.py: Shared helpers (safe redirects, form value cleanup)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.database import Base, SessionLocal, engine, init_db, session_scope
from lib.db_models import User
from lib.passwords import PasswordHasher, password_hasher
from lib.utils import clean_optional, is_safe_redirect

__all__ = [
    # Database
    "Base",
    "SessionLocal",
    "engine",
    "init_db",
    "session_scope",
    "User",
    # Passwords
    "PasswordHasher",
    "password_hasher",
    # Utils
    "clean_optional",
    "is_safe_redirect",
]
