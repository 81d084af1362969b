# src/task_tracker/users/user_store.py

from __future__ import annotations

import logging
from pathlib import Path

from ..auth.passwords import PasswordHasher
from ..errors import (
    AccountConflictError,
    AccountNotFoundError,
    ConfigError,
    PermissionDeniedError,
    StorageError,
    UsageError,
)
from ..storage.json_file import read_json_array, restrict_permissions, write_json_array
from .user_models import Account, Role

logger = logging.getLogger(__name__)


class UserStore:
    """
    JSON-file account store.

    Passwords are hashed before they reach this store's records; the file never
    holds plaintext. The file is created on first run with a single bootstrap
    admin (see initialize_bootstrap_admin).
    """

    def __init__(self, path: str | Path, hasher: PasswordHasher) -> None:
        self._path = Path(path)
        self._hasher = hasher

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.exists()

    def load(self) -> list[Account]:
        records = read_json_array(self._path)
        if records is None:
            return []
        accounts = [Account.from_dict(r) for r in records]
        seen: set[str] = set()
        for a in accounts:
            if a.username in seen:
                raise StorageError(f'{self._path} contains duplicate user "{a.username}".')
            seen.add(a.username)
        return accounts

    def save(self, accounts: list[Account]) -> None:
        write_json_array(self._path, [a.to_dict() for a in accounts])
        restrict_permissions(self._path)

    def find(self, username: str) -> Account | None:
        for a in self.load():
            if a.username == username:
                return a
        return None

    def initialize_bootstrap_admin(
        self,
        username: str | None,
        password: str | None,
        role: str = "admin",
    ) -> bool:
        """
        Create the store with exactly one admin account if it does not exist yet.

        Returns True if the file was created. Missing credentials are fatal:
        there is no built-in default admin.
        """
        if self.exists():
            return False

        if not username or not password:
            raise ConfigError(
                "No users file found and bootstrap admin credentials are not configured. "
                "Set TASK_TRACKER_ADMIN_USERNAME and TASK_TRACKER_ADMIN_PASSWORD "
                "(or ADMIN_USERNAME / ADMIN_PASSWORD)."
            )
        if Role.parse(role) != Role.ADMIN:
            raise ConfigError(f"Bootstrap account role must be 'admin', got {role!r}.")

        admin = Account(username=username, password_hash=self._hasher.hash(password), role=Role.ADMIN)
        self.save([admin])
        logger.info("Initialized %s with bootstrap admin %r", self._path.name, username)
        return True

    def add_account(self, requesting: Account, username: str, password: str, role: str) -> Account:
        if not requesting.is_admin:
            logger.warning("Non-admin %r tried to add user %r", requesting.username, username)
            raise PermissionDeniedError()

        username = (username or "").strip()
        if not username or not password:
            raise UsageError("Username and password must not be empty.")
        parsed_role = Role.parse(role)
        if parsed_role is None:
            raise UsageError(f"Invalid role {role!r}. Use 'admin' or 'user'.")

        accounts = self.load()
        if any(a.username == username for a in accounts):
            raise AccountConflictError(username)

        account = Account(username=username, password_hash=self._hasher.hash(password), role=parsed_role)
        accounts.append(account)
        self.save(accounts)
        logger.info("User %r (%s) added by %r", username, parsed_role.value, requesting.username)
        return account

    def remove_account(self, username: str) -> Account:
        accounts = self.load()
        for account in accounts:
            if account.username == username:
                break
        else:
            logger.info("User %r not found for removal", username)
            raise AccountNotFoundError(username)

        if account.is_admin and sum(1 for a in accounts if a.is_admin) == 1:
            raise PermissionDeniedError("Cannot remove the last admin account.")

        accounts.remove(account)
        self.save(accounts)
        logger.info("User %r removed", username)
        return account
