# =============================================================================
# core/validators.py - Username, Email and Password Validators
# =============================================================================
# Plain functions returning lists of human-readable error messages.
# An empty list means the value is acceptable.
#
# Usage:
#   from core.validators import validate_password
#   errors = validate_password("hunter2", {"username": "alice"})
# =============================================================================

import re

from email_validator import EmailNotValidError, validate_email as check_email

from app.config import settings

USERNAME_MAX_LENGTH = 150
USERNAME_PATTERN = re.compile(r"^[\w.@+-]+$")

# Shortest user attribute that counts for the similarity check
MIN_SIMILARITY_ATTRIBUTE_LENGTH = 3

COMMON_PASSWORDS = frozenset({
    "123456", "123456789", "12345678", "1234567890", "password", "password1",
    "password123", "qwerty", "qwerty123", "qwertyuiop", "abc123", "111111",
    "iloveyou", "admin", "admin123", "welcome", "welcome1", "letmein",
    "monkey", "dragon", "football", "baseball", "sunshine", "princess",
    "trustno1", "passw0rd", "changeme", "secret", "login", "master",
})


def validate_username(username: str) -> list[str]:
    """Check length and allowed characters (letters, digits and @/./+/-/_)."""
    errors = []
    if not username:
        errors.append("This field is required.")
        return errors
    if len(username) > USERNAME_MAX_LENGTH:
        errors.append(
            f"Ensure this value has at most {USERNAME_MAX_LENGTH} characters "
            f"(it has {len(username)})."
        )
    if not USERNAME_PATTERN.match(username):
        errors.append(
            "Enter a valid username. This value may contain only letters, "
            "numbers, and @/./+/-/_ characters."
        )
    return errors


def validate_email(email: str) -> list[str]:
    """
    Check an email address with email-validator (no DNS lookup).

    Uses the same rules as the EmailStr fields on the API schemas.
    """
    try:
        check_email(email, check_deliverability=False)
    except EmailNotValidError:
        return ["Enter a valid email address."]
    return []


def _attribute_values(user_attrs: dict[str, str | None]) -> list[str]:
    values = []
    for name, value in user_attrs.items():
        if not value:
            continue
        value = value.lower()
        if name == "email":
            value = value.split("@", 1)[0]
        if len(value) >= MIN_SIMILARITY_ATTRIBUTE_LENGTH:
            values.append(value)
    return values


def validate_password(
    password: str,
    user_attrs: dict[str, str | None] | None = None,
    min_length: int | None = None,
) -> list[str]:
    """
    Run all password validators.

    Args:
        password: The candidate password
        user_attrs: Attributes the password must not resemble
            (username, email, first_name, last_name)
        min_length: Override for PASSWORD_MIN_LENGTH

    Returns:
        List of error messages, empty when the password is acceptable
    """
    min_length = min_length or settings.PASSWORD_MIN_LENGTH
    errors = []

    if len(password) < min_length:
        errors.append(
            f"This password is too short. It must contain at least {min_length} characters."
        )

    lowered = password.lower().strip()
    for value in _attribute_values(user_attrs or {}):
        if value in lowered or lowered in value:
            errors.append("The password is too similar to your personal information.")
            break

    if lowered in COMMON_PASSWORDS:
        errors.append("This password is too common.")

    if password.isdigit():
        errors.append("This password is entirely numeric.")

    return errors


def validate_password_pair(password1: str, password2: str) -> list[str]:
    """Both password fields must match."""
    if password1 != password2:
        return ["The two password fields didn't match."]
    return []
