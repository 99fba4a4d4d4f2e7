# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from typing import Optional

from pydantic import BaseModel


class TokenPayload(BaseModel):
    """
    Decoded access token claims.
    """
    sub: str  # User ID
    username: Optional[str] = None
    exp: int  # Expiration timestamp
    iat: int  # Issued at timestamp


class TokenVerification(BaseModel):
    """Response of GET /auth/verify."""
    valid: bool = True
    user_id: int
    username: str
