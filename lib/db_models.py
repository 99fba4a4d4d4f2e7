# =============================================================================
# lib/db_models.py - SQLAlchemy Table Models
# =============================================================================
# Table definitions. Pydantic schemas for the API live in core/models/.
# =============================================================================

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from lib.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """User account with the staff directory fields (department, designation)."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(150), unique=True, nullable=False, index=True)
    email: Mapped[Optional[str]] = mapped_column(String(254), nullable=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    first_name: Mapped[str] = mapped_column(String(150), nullable=False, default="")
    last_name: Mapped[str] = mapped_column(String(150), nullable=False, default="")
    department: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, index=True)
    designation: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_staff: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_superuser: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    date_joined: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, server_default=func.current_timestamp()
    )
    last_login: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    @property
    def full_name(self) -> str:
        """First and last name, or the username when both are blank."""
        name = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return name or self.username

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return (
            f"<User id={self.id} username={self.username} department={self.department} "
            f"active={self.is_active} staff={self.is_staff}>"
        )
