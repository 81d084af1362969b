# src/task_tracker/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the command dispatcher.

Command handlers depend on these Protocols instead of the concrete JSON stores,
which keeps storage swappable and lets tests pass in-memory fakes.
"""

from typing import Any, Protocol


class TaskRepo(Protocol):
    def initialize(self) -> bool: ...
    def add_task(self, description: str) -> Any: ...
    def list_tasks(self, status: Any | None = None) -> list[Any]: ...
    def update_task_status(self, task_id: int, new_status: Any) -> Any: ...
    def update_task_description(self, task_id: int, description: str) -> Any: ...
    def delete_task(self, task_id: int) -> Any: ...
    def clear(self) -> int: ...


class UserRepo(Protocol):
    def exists(self) -> bool: ...
    def find(self, username: str) -> Any | None: ...
    def initialize_bootstrap_admin(
            self,
            username: str | None,
            password: str | None,
            role: str = "admin",
    ) -> bool: ...
    def add_account(self, requesting: Any, username: str, password: str, role: str) -> Any: ...
    def remove_account(self, username: str) -> Any: ...


class Authenticator(Protocol):
    def authenticate(self, username: str, password: str) -> Any: ...
    def issue_token(self, account: Any) -> str: ...
    def verify_token(self, token: str) -> Any: ...
    def require_admin(self, principal: Any) -> None: ...
