# src/task_tracker/auth/passwords.py

"""
Salted password hashing.

pbkdf2_sha256 is implemented by passlib on top of hashlib, so it needs no
compiled backend. Stored hashes carry their own scheme, salt and rounds.
"""

from __future__ import annotations

from passlib.context import CryptContext

DEFAULT_SCHEMES = ["pbkdf2_sha256"]


def build_password_context(*, rounds: int | None = None) -> CryptContext:
    kwargs = {}
    if rounds is not None:
        kwargs["pbkdf2_sha256__default_rounds"] = rounds
    return CryptContext(schemes=DEFAULT_SCHEMES, deprecated="auto", **kwargs)


class PasswordHasher:
    def __init__(self, context: CryptContext | None = None) -> None:
        self._context = context or build_password_context()
        self._dummy_hash: str | None = None

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, password_hash: str | None) -> bool:
        if password_hash is None:
            # Unknown user: spend the same effort as a real check.
            if self._dummy_hash is None:
                self._dummy_hash = self._context.hash("not-a-real-password")
            self._context.verify(password, self._dummy_hash)
            return False
        try:
            return self._context.verify(password, password_hash)
        except ValueError:
            # Unrecognized or malformed hash string.
            return False
