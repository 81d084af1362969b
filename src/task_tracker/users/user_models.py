# src/task_tracker/users/user_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from ..errors import StorageError


class Role(StrEnum):
    ADMIN = "admin"
    USER = "user"

    @classmethod
    def parse(cls, raw: object) -> Role | None:
        if not isinstance(raw, str) or not raw:
            return None
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


@dataclass(slots=True)
class Account:
    username: str
    password_hash: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def to_dict(self) -> dict[str, Any]:
        # "password" is the on-disk key; it only ever holds a hash.
        return {"username": self.username, "password": self.password_hash, "role": self.role.value}

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Account:
        username = raw.get("username")
        if not isinstance(username, str) or not username:
            raise StorageError(f"Invalid account username {username!r}.")
        password_hash = raw.get("password")
        if not isinstance(password_hash, str) or not password_hash:
            raise StorageError(f'Account "{username}" has no password hash.')
        role = Role.parse(raw.get("role"))
        if role is None:
            raise StorageError(f'Account "{username}" has unknown role {raw.get("role")!r}.')
        return cls(username=username, password_hash=password_hash, role=role)
