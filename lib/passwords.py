# =============================================================================
# lib/passwords.py - Password Hashing
# =============================================================================
# Argon2id hashing for stored user passwords.
# =============================================================================

from __future__ import annotations

from argon2 import PasswordHasher as Argon2Hasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError


class PasswordHasher:
    """Argon2id password hasher with the library's default cost parameters."""

    def __init__(self) -> None:
        self._hasher = Argon2Hasher()

    def hash(self, password: str) -> str:
        return self._hasher.hash(password)

    def verify(self, hash: str, password: str) -> bool:
        try:
            return self._hasher.verify(hash, password)
        except (VerifyMismatchError, InvalidHashError, VerificationError):
            return False

    def needs_rehash(self, hash: str) -> bool:
        """True when the hash was made with weaker parameters than current ones."""
        try:
            return self._hasher.check_needs_rehash(hash)
        except InvalidHashError:
            return True


password_hasher = PasswordHasher()

# Verified against unknown usernames so failed lookups cost the same as
# failed password checks.
DUMMY_HASH = password_hasher.hash("staffdesk-dummy-password")
