# =============================================================================
# core/services/user_service.py - User Account Business Logic
# =============================================================================
# Handles user CRUD operations and credential checks.
# Separates HTTP concerns from database/business logic: routes pass in a
# SQLAlchemy session and get back User rows or domain exceptions.
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.exceptions import (
    InactiveUserError,
    PasswordValidationError,
    UserNotFoundError,
    UsernameTakenError,
)
from core.models.user import UserUpdate
from core.validators import validate_password
from lib.db_models import User
from lib.passwords import DUMMY_HASH, password_hasher
from lib.utils import clean_optional

logger = logging.getLogger(__name__)


class UserService:
    """
    Service for user account operations.

    Provides a clean interface between routes and the database.
    """

    @staticmethod
    def create_user(
        db: Session,
        username: str,
        password: str,
        email: str | None = None,
        **extra: Any,
    ) -> User:
        """
        Create a new user.

        Args:
            db: Database session
            username: Login name (stripped; unique case-insensitively)
            password: Plain-text password, stored as an Argon2 hash
            email: Optional email, stored lowercased
            **extra: first_name, last_name, department, designation,
                is_staff, is_superuser, is_active

        Returns:
            The created User

        Raises:
            UsernameTakenError: If the username is already in use
        """
        username = username.strip()

        if UserService.get_by_username(db, username) is not None:
            raise UsernameTakenError(username)

        email = clean_optional(email)
        user = User(
            username=username,
            email=email.lower() if email else None,
            password_hash=password_hasher.hash(password),
            first_name=(extra.pop("first_name", None) or "").strip(),
            last_name=(extra.pop("last_name", None) or "").strip(),
            department=clean_optional(extra.pop("department", None)),
            designation=clean_optional(extra.pop("designation", None)),
            is_active=extra.pop("is_active", True),
            is_staff=extra.pop("is_staff", False),
            is_superuser=extra.pop("is_superuser", False),
            date_joined=datetime.now(timezone.utc),
        )
        if extra:
            raise TypeError(f"Unexpected user fields: {', '.join(sorted(extra))}")

        db.add(user)
        db.commit()
        db.refresh(user)

        logger.info(f"Created user: {user.id} ({user.username})")
        return user

    @staticmethod
    def create_superuser(
        db: Session,
        username: str,
        password: str,
        email: str | None = None,
        **extra: Any,
    ) -> User:
        """Create a user with staff and superuser flags set."""
        extra["is_staff"] = True
        extra["is_superuser"] = True
        return UserService.create_user(db, username, password, email=email, **extra)

    @staticmethod
    def get_by_username(db: Session, username: str) -> User | None:
        """Case-insensitive username lookup."""
        stmt = select(User).where(func.lower(User.username) == username.strip().lower())
        return db.execute(stmt).scalar_one_or_none()

    @staticmethod
    def get_user(db: Session, user_id: int) -> User:
        """
        Get a user by ID.

        Raises:
            UserNotFoundError: If no user has that ID
        """
        user = db.get(User, user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    @staticmethod
    def authenticate(
        db: Session,
        username: str,
        password: str,
        raise_inactive: bool = False,
    ) -> User | None:
        """
        Check a username/password pair.

        Returns the user on success, None otherwise. Unknown usernames,
        wrong passwords and inactive accounts all return None. A hash is
        always verified so each failure takes about as long as a success.
        On success last_login is updated.

        Raises:
            InactiveUserError: If raise_inactive is set and the password
                is right but the account is deactivated
        """
        if not username or not password:
            return None

        user = UserService.get_by_username(db, username)
        if user is None:
            password_hasher.verify(DUMMY_HASH, password)
            logger.info(f"Login failed for unknown username: {username!r}")
            return None

        if not password_hasher.verify(user.password_hash, password):
            logger.info(f"Login failed for user {user.id}: bad password")
            return None

        if not user.is_active:
            logger.info(f"Login refused for inactive user {user.id}")
            if raise_inactive:
                raise InactiveUserError(user.username)
            return None

        if password_hasher.needs_rehash(user.password_hash):
            user.password_hash = password_hasher.hash(password)

        user.last_login = datetime.now(timezone.utc)
        db.commit()

        logger.info(f"User {user.id} ({user.username}) authenticated")
        return user

    @staticmethod
    def list_users(
        db: Session,
        page: int = 1,
        page_size: int = 20,
        department: str | None = None,
        active: bool | None = None,
    ) -> tuple[list[User], int]:
        """
        List users ordered by username.

        Args:
            db: Database session
            page: 1-indexed page number
            page_size: Users per page
            department: Only users in this department (case-insensitive)
            active: Filter by is_active when given

        Returns:
            Tuple of (users on this page, total matching users)
        """
        stmt = select(User)
        if department:
            stmt = stmt.where(func.lower(User.department) == department.strip().lower())
        if active is not None:
            stmt = stmt.where(User.is_active == active)

        total = db.execute(
            select(func.count()).select_from(stmt.subquery())
        ).scalar_one()

        offset = (page - 1) * page_size
        users = db.execute(
            stmt.order_by(User.username).offset(offset).limit(page_size)
        ).scalars().all()

        return list(users), total

    @staticmethod
    def list_departments(db: Session) -> list[str]:
        """Distinct non-empty departments, sorted."""
        stmt = (
            select(User.department)
            .where(User.department.is_not(None))
            .distinct()
            .order_by(User.department)
        )
        return [d for d in db.execute(stmt).scalars().all() if d]

    @staticmethod
    def update_user(db: Session, user_id: int, data: UserUpdate) -> User:
        """
        Apply the fields set on `data` to a user.

        Raises:
            UserNotFoundError: If no user has that ID
        """
        user = UserService.get_user(db, user_id)

        changes = data.model_dump(exclude_unset=True)
        if not changes:
            return user  # Nothing to update

        for field, value in changes.items():
            if field == "email":
                value = value.lower() if value else None
            elif field in ("department", "designation"):
                value = clean_optional(value)
            elif field in ("first_name", "last_name"):
                value = (value or "").strip()
            setattr(user, field, value)

        db.commit()
        db.refresh(user)

        logger.info(f"Updated user {user.id}: {sorted(changes)}")
        return user

    @staticmethod
    def set_password(db: Session, user_id: int, new_password: str) -> User:
        """
        Validate and store a new password.

        Raises:
            UserNotFoundError: If no user has that ID
            PasswordValidationError: If the password fails validation
        """
        user = UserService.get_user(db, user_id)

        errors = validate_password(
            new_password,
            {
                "username": user.username,
                "email": user.email,
                "first_name": user.first_name,
                "last_name": user.last_name,
            },
        )
        if errors:
            raise PasswordValidationError(errors)

        user.password_hash = password_hasher.hash(new_password)
        db.commit()

        logger.info(f"Password changed for user {user.id}")
        return user

    @staticmethod
    def deactivate_user(db: Session, user_id: int) -> User:
        """
        Deactivate (soft delete) a user.

        The row is kept; the account can no longer log in.
        """
        user = UserService.get_user(db, user_id)
        if user.is_active:
            user.is_active = False
            db.commit()
            logger.info(f"Deactivated user {user.id}")
        return user

    @staticmethod
    def set_active(db: Session, user_id: int, active: bool) -> User:
        user = UserService.get_user(db, user_id)
        user.is_active = active
        db.commit()
        logger.info(f"User {user.id} is_active={active}")
        return user
