# src/task_tracker/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- takes the Settings built once in main(),
- wires the JSON stores, password hasher and auth service into AppState,
- performs first-run initialization of the backing files.
"""

from __future__ import annotations

import logging
from datetime import timedelta

from ..auth.passwords import PasswordHasher
from ..auth.service import AuthService
from ..config import Settings, load_settings
from ..core.state import AppState
from ..tasks.task_store import TaskStore
from ..users.user_store import UserStore

logger = logging.getLogger(__name__)


def create_initial_state(*, settings=None, hasher: PasswordHasher | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to load_settings().
    """
    if settings is None:
        settings = load_settings()

    hasher = hasher or PasswordHasher()
    users = UserStore(settings.users_file, hasher)

    return AppState(
        settings=settings,
        tasks=TaskStore(settings.tasks_file),
        users=users,
        auth=AuthService(
            users,
            hasher,
            signing_key=settings.signing_key,
            token_ttl=timedelta(seconds=settings.token_ttl_seconds),
        ),
    )


def initialize_files(state: AppState) -> None:
    """
    First run: create the users file with the bootstrap admin and an empty tasks file.

    Raises ConfigError if the users file must be created but no bootstrap
    credentials are configured.
    """
    settings: Settings = state.settings  # type: ignore[assignment]

    if state.users.initialize_bootstrap_admin(
        settings.admin_username,
        settings.admin_password,
        settings.admin_role,
    ):
        logger.info("Created users file at %s", settings.users_file)

    if state.tasks.initialize():
        logger.info("Created tasks file at %s", settings.tasks_file)
