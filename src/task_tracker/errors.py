# src/task_tracker/errors.py

"""
Error taxonomy shared by stores, the auth service and the dispatcher.

Every error carries a user-facing message and the exit code the CLI returns
when the error ends an invocation. Stores and services raise; only the
dispatcher (cli/commands.py) turns errors into output.
"""

from __future__ import annotations

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_CONFIG = 3


class TrackerError(Exception):
    """Base class for all expected, user-reportable failures."""

    exit_code: int = EXIT_FAILURE

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UsageError(TrackerError):
    """Missing or malformed arguments. The operation is not attempted."""

    exit_code = EXIT_USAGE


class NotFoundError(TrackerError):
    pass


class TaskNotFoundError(NotFoundError):
    def __init__(self, task_id: int) -> None:
        super().__init__(f"Task with ID {task_id} not found.")
        self.task_id = task_id


class AccountNotFoundError(NotFoundError):
    def __init__(self, username: str) -> None:
        super().__init__(f'User "{username}" not found.')
        self.username = username


class AuthenticationError(TrackerError):
    """Bad credentials. Same message for unknown user and wrong password."""

    def __init__(self, message: str = "Invalid credentials.") -> None:
        super().__init__(message)


class InvalidTokenError(TrackerError):
    """Tampered, expired or malformed session token."""

    def __init__(self, message: str = "Invalid or expired token. Please log in again.") -> None:
        super().__init__(message)


class PermissionDeniedError(TrackerError):
    def __init__(self, message: str = "Only admins can perform this action.") -> None:
        super().__init__(message)


class AccountConflictError(TrackerError):
    def __init__(self, username: str) -> None:
        super().__init__(f'User "{username}" already exists.')
        self.username = username


class StorageError(TrackerError):
    """Backing file could not be read, parsed or written."""


class ConfigError(TrackerError):
    """Missing or invalid configuration. Fatal at startup."""

    exit_code = EXIT_CONFIG
