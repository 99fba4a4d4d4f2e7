# =============================================================================
# core/models/user.py - User Schemas
# =============================================================================
# These models define the API contract for user operations:
# - UserCreate: Input for creating a user account
# - UserUpdate: Partial update of profile and account flags
# - UserResponse: Output when returning user data (never the password hash)
# - UserList: Paginated list of users
# - TokenResponse: API access token issued by /auth/token
# =============================================================================

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class UserCreate(BaseModel):
    """
    Schema for creating a user.

    Example:
        {
            "username": "asmith",
            "password": "correct-horse-battery",
            "email": "asmith@example.com",
            "department": "Finance",
            "designation": "Analyst"
        }
    """

    username: str = Field(
        ...,
        min_length=1,
        max_length=150,
        description="Unique login name"
    )
    password: str = Field(
        ...,
        min_length=1,
        description="Plain-text password (hashed before storage)"
    )
    email: EmailStr | None = Field(default=None, description="Contact email")
    first_name: str = Field(default="", max_length=150)
    last_name: str = Field(default="", max_length=150)
    department: str | None = Field(default=None, max_length=100)
    designation: str | None = Field(default=None, max_length=100)


class UserUpdate(BaseModel):
    """
    Schema for updating a user.

    Only fields that are set are applied. `is_active` and `is_staff` may
    only be changed by staff.

    Example:
        {
            "designation": "Senior Analyst"
        }
    """

    email: EmailStr | None = Field(default=None)
    first_name: str | None = Field(default=None, max_length=150)
    last_name: str | None = Field(default=None, max_length=150)
    department: str | None = Field(default=None, max_length=100)
    designation: str | None = Field(default=None, max_length=100)
    is_active: bool | None = Field(default=None)
    is_staff: bool | None = Field(default=None)

    @field_validator("is_active", "is_staff")
    @classmethod
    def flags_not_null(cls, value: bool | None) -> bool | None:
        # Unset flags keep their default; an explicit null is rejected
        if value is None:
            raise ValueError("must be true or false")
        return value

    @property
    def touches_account_flags(self) -> bool:
        """True when the update changes is_active or is_staff."""
        return bool({"is_active", "is_staff"} & self.model_fields_set)


class UserResponse(BaseModel):
    """
    Schema for returning user data to clients.

    Example:
        {
            "id": 7,
            "username": "asmith",
            "full_name": "Alice Smith",
            "department": "Finance",
            "designation": "Analyst",
            "is_active": true,
            ...
        }
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str | None = None
    first_name: str = ""
    last_name: str = ""
    full_name: str = ""
    department: str | None = None
    designation: str | None = None
    is_active: bool = True
    is_staff: bool = False
    is_superuser: bool = False
    date_joined: datetime | None = None
    last_login: datetime | None = None


class UserList(BaseModel):
    """
    Schema for listing multiple users.

    Returned by GET /users. Includes pagination info.
    """

    users: list[UserResponse] = Field(default_factory=list)
    total: int = Field(default=0, ge=0)
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)


class TokenResponse(BaseModel):
    """Bearer token returned by POST /auth/token."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Token lifetime in seconds")
