# src/task_tracker/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from .ports import Authenticator, TaskRepo, UserRepo


@dataclass
class AppState:
    """Everything one CLI invocation needs. Built by cli/bootstrap.py."""

    # Store Settings on the state for easy access in command handlers.
    settings: object

    tasks: TaskRepo
    users: UserRepo
    auth: Authenticator
