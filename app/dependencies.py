# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
# =============================================================================

from collections.abc import Iterator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from lib.database import SessionLocal


def get_db() -> Iterator[Session]:
    """
    Yield one database session per request.

    The session is always closed; uncommitted work is rolled back.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# Type alias for dependency injection
DbDep = Annotated[Session, Depends(get_db)]
