# src/task_tracker/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object per invocation, built in main() and passed explicitly.
- No secrets read at import time.
- Legacy unprefixed variable names (TASKS_FILE_PATH, JWT_SECRET_KEY, ADMIN_*)
  are still accepted as fallbacks.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from .errors import ConfigError

ENV_PREFIX = "TASK_TRACKER"

DEFAULT_TOKEN_TTL_SECONDS = 3600


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(*names: str, default: Path) -> Path:
    raw = _first_env(*names)
    if raw is None:
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    log_to_file: bool

    # ---- Local data paths ----
    data_dir: Path
    tasks_file: Path
    users_file: Path

    # ---- Tokens ----
    signing_key: str | None
    token_ttl_seconds: int

    # ---- Bootstrap admin (used only when the users file is created) ----
    admin_username: str | None
    admin_password: str | None
    admin_role: str

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "task-tracker")
        log_level = _env(_k("LOG_LEVEL"), "WARNING")
        log_to_file = _env_bool(_k("LOG_TO_FILE"), True)

        data_dir = _env_path(_k("DATA_DIR"), default=Path(".local/task-tracker"))
        tasks_file = _env_path(_k("TASKS_FILE"), "TASKS_FILE_PATH", default=data_dir / "tasks.json")
        users_file = _env_path(_k("USERS_FILE"), "USERS_FILE_PATH", default=data_dir / "users.json")

        signing_key = _first_env(_k("JWT_SECRET_KEY"), "JWT_SECRET_KEY", default=None)
        token_ttl_seconds = _env_int(_k("TOKEN_TTL_SECONDS"), DEFAULT_TOKEN_TTL_SECONDS)
        if token_ttl_seconds <= 0:
            token_ttl_seconds = DEFAULT_TOKEN_TTL_SECONDS

        admin_username = _first_env(_k("ADMIN_USERNAME"), "ADMIN_USERNAME", default=None)
        admin_password = _first_env(_k("ADMIN_PASSWORD"), "ADMIN_PASSWORD", default=None)
        admin_role = (_first_env(_k("ADMIN_ROLE"), "ADMIN_ROLE", default="admin") or "admin").strip()

        return Settings(
            app_name=app_name,
            log_level=log_level,
            log_to_file=log_to_file,
            data_dir=data_dir,
            tasks_file=tasks_file,
            users_file=users_file,
            signing_key=signing_key,
            token_ttl_seconds=token_ttl_seconds,
            admin_username=admin_username.strip() if admin_username else None,
            admin_password=admin_password,
            admin_role=admin_role,
        )

    def validate(self) -> None:
        """Fail fast on configuration every command depends on."""
        if not self.signing_key:
            raise ConfigError(
                f"{_k('JWT_SECRET_KEY')} (or JWT_SECRET_KEY) must be set to sign session tokens."
            )


def load_settings(*, dotenv: bool = True) -> Settings:
    """Load .env from the working directory (real env vars win), then build Settings."""
    if dotenv:
        load_dotenv(find_dotenv(usecwd=True), override=False)
    return Settings.from_env()
