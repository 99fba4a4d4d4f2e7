# =============================================================================
# core/models/forms.py - HTML Form Schemas
# =============================================================================
# Forms posted by the server-rendered pages. Unlike the API schemas these
# never raise on bad input: validate() collects field errors so the page
# can be re-rendered with them.
# =============================================================================

from pydantic import BaseModel, Field

from core.validators import (
    validate_email,
    validate_password,
    validate_password_pair,
    validate_username,
)

PROFILE_FIELD_MAX_LENGTH = 100


class LoginForm(BaseModel):
    """Username and password posted to /login/."""

    username: str = ""
    password: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.username.strip()) and bool(self.password)


class RegistrationForm(BaseModel):
    """
    Sign-up form: account credentials plus the staff directory fields.

    Example:
        form = RegistrationForm(username="asmith", password1="...", password2="...")
        errors = form.validate_fields()
        if not errors:
            UserService.create_user(db, **form.to_user_kwargs())
    """

    username: str = ""
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    department: str = ""
    designation: str = ""
    password1: str = Field(default="", repr=False)
    password2: str = Field(default="", repr=False)

    def validate_fields(self) -> dict[str, list[str]]:
        """
        Validate every field.

        Returns:
            Mapping of field name -> error messages. Empty when valid.
        """
        errors: dict[str, list[str]] = {}

        def add(field: str, messages: list[str]) -> None:
            if messages:
                errors.setdefault(field, []).extend(messages)

        username = self.username.strip()
        add("username", validate_username(username))

        email = self.email.strip()
        if email:
            add("email", validate_email(email))

        for field in ("department", "designation"):
            if len(getattr(self, field).strip()) > PROFILE_FIELD_MAX_LENGTH:
                add(field, [f"Ensure this value has at most {PROFILE_FIELD_MAX_LENGTH} characters."])

        if not self.password1:
            add("password1", ["This field is required."])
        if not self.password2:
            add("password2", ["This field is required."])

        if self.password1 and self.password2:
            mismatch = validate_password_pair(self.password1, self.password2)
            add("password2", mismatch)
            if not mismatch:
                add("password2", validate_password(
                    self.password2,
                    {
                        "username": username,
                        "email": email,
                        "first_name": self.first_name.strip(),
                        "last_name": self.last_name.strip(),
                    },
                ))

        return errors

    def to_user_kwargs(self) -> dict:
        """Keyword arguments for UserService.create_user()."""
        return {
            "username": self.username.strip(),
            "password": self.password1,
            "email": self.email.strip() or None,
            "first_name": self.first_name.strip(),
            "last_name": self.last_name.strip(),
            "department": self.department.strip() or None,
            "designation": self.designation.strip() or None,
        }
