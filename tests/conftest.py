# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from task_tracker.auth.passwords import PasswordHasher, build_password_context
from task_tracker.cli.bootstrap import create_initial_state, initialize_files
from task_tracker.core.state import AppState
from task_tracker.users.user_models import Account, Role

SIGNING_KEY = "test-signing-key-that-is-long-enough-for-hs256"
ADMIN_USER = "root"
ADMIN_PASS = "root-pass"


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with the bootstrap helpers.

    We intentionally use a SimpleNamespace rather than reading the environment,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        # Paths (tmp per test run)
        data_dir=tmp_path,
        tasks_file=tmp_path / "tasks.json",
        users_file=tmp_path / "users.json",
        # Tokens
        signing_key=SIGNING_KEY,
        token_ttl_seconds=3600,
        # Bootstrap admin
        admin_username=ADMIN_USER,
        admin_password=ADMIN_PASS,
        admin_role="admin",
    )


@pytest.fixture()
def hasher() -> PasswordHasher:
    # Few rounds: hashing cost is not what these tests are about.
    return PasswordHasher(build_password_context(rounds=1000))


@pytest.fixture()
def state(settings: SimpleNamespace, hasher: PasswordHasher) -> AppState:
    """
    AppState wired with the real JSON stores in a tmp dir, files initialized.
    """
    st = create_initial_state(settings=settings, hasher=hasher)
    initialize_files(st)
    return st


@pytest.fixture()
def admin_token(state: AppState) -> str:
    return state.auth.issue_token(state.auth.authenticate(ADMIN_USER, ADMIN_PASS))


@pytest.fixture()
def user_token(state: AppState) -> str:
    admin = state.auth.authenticate(ADMIN_USER, ADMIN_PASS)
    state.users.add_account(admin, "bob", "bob-pass", "user")
    return state.auth.issue_token(state.auth.authenticate("bob", "bob-pass"))


@pytest.fixture()
def plain_user() -> Account:
    return Account(username="carol", password_hash="x", role=Role.USER)
