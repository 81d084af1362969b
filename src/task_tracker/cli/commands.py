# src/task_tracker/cli/commands.py

from __future__ import annotations

import logging
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import StrEnum

from ..core.state import AppState
from ..errors import EXIT_OK, EXIT_USAGE, TrackerError, UsageError
from ..tasks.task_models import Task, TaskStatus

PROG = "task-tracker"

CommandHandler = Callable[[AppState, list[str], object | None], str]
ArgsCheck = Callable[[list[str]], None]

logger = logging.getLogger(__name__)


class AuthMode(StrEnum):
    NONE = "none"
    TOKEN = "token"  # first positional argument is a session token
    ADMIN_TOKEN = "admin-token"  # ... and its role must be admin


@dataclass(frozen=True, slots=True)
class CommandSpec:
    name: str
    handler: CommandHandler
    usage: str
    help_text: str
    min_args: int = 0
    auth: AuthMode = AuthMode.NONE
    check: ArgsCheck | None = None


@dataclass(slots=True)
class CommandResult:
    text: str
    exit_code: int = EXIT_OK

    @property
    def ok(self) -> bool:
        return self.exit_code == EXIT_OK


class CommandRegistry:
    """
    argv command registry: one command per invocation.

    Order of checks for every command:
    1. known name
    2. argument count and shape (usage errors never touch auth or storage)
    3. token verification / admin gate
    4. the handler itself
    """

    def __init__(self) -> None:
        self._commands: dict[str, CommandSpec] = {}
        self._aliases: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        usage: str,
        help_text: str,
        *,
        min_args: int = 0,
        auth: AuthMode = AuthMode.NONE,
        check: ArgsCheck | None = None,
        aliases: list[str] | None = None,
    ) -> None:
        key = name.lower()
        self._commands[key] = CommandSpec(
            name=key,
            handler=handler,
            usage=usage,
            help_text=help_text,
            min_args=min_args,
            auth=auth,
            check=check,
        )
        for alias in aliases or []:
            self._aliases[alias.lower()] = key

    def get(self, name: str) -> CommandSpec | None:
        key = name.lower()
        return self._commands.get(self._aliases.get(key, key))

    def handle(self, state: AppState, argv: Sequence[str]) -> CommandResult:
        if not argv:
            return CommandResult(self.build_help(), EXIT_USAGE)

        name, args = argv[0], list(argv[1:])
        spec = self.get(name)
        if spec is None:
            return CommandResult(
                f"Unknown command: {name}. Use 'help' for a list of available commands.",
                EXIT_USAGE,
            )

        try:
            if len(args) < spec.min_args:
                raise UsageError(f"Usage: {PROG} {spec.usage}")
            if spec.check is not None:
                spec.check(args)

            principal = None
            if spec.auth is not AuthMode.NONE:
                principal = state.auth.verify_token(args[0])
                if spec.auth is AuthMode.ADMIN_TOKEN:
                    state.auth.require_admin(principal)
                args = args[1:]

            logger.debug("Running command %s", spec.name)
            return CommandResult(spec.handler(state, args, principal))
        except TrackerError as exc:
            logger.debug("Command %s failed: %s", spec.name, exc.__class__.__name__)
            return CommandResult(f"Error: {exc.message}", exc.exit_code)

    def dispatch(self, state: AppState, argv: Sequence[str]) -> int:
        """Run one command, print its outcome and return the process exit code."""
        result = self.handle(state, argv)
        if result.ok:
            print(result.text)
        else:
            print(result.text, file=sys.stderr)
        return result.exit_code

    def build_help(self) -> str:
        lines = ["Task Tracker CLI", "", "Available commands:"]
        width = max(len(s.usage) for s in self._commands.values())
        for spec in self._commands.values():
            lines.append(f"  {spec.usage.ljust(width)}  {spec.help_text}")
        lines.append("")
        lines.append(f"Get a token with '{PROG} login <username> <password>'.")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- argument helpers ----

def parse_task_id(raw: str) -> int:
    try:
        task_id = int(raw)
    except (TypeError, ValueError):
        task_id = 0
    if task_id <= 0:
        raise UsageError("Please provide a valid positive task ID.")
    return task_id


def _task_id_at(index: int) -> ArgsCheck:
    def check(args: list[str]) -> None:
        parse_task_id(args[index])

    return check


def _check_status_filter(args: list[str]) -> None:
    if len(args) > 1 and TaskStatus.parse(args[1]) is None:
        choices = ", ".join(s.value for s in TaskStatus)
        raise UsageError(f"Unknown status {args[1]!r}. Use one of: {choices}.")


def _check_clear_confirmation(args: list[str]) -> None:
    if args[1:] != ["yes", "confirm"]:
        raise UsageError(f"To clear all tasks, use '{PROG} clear <token> yes confirm'.")


def _local_ts(task_ts) -> str:
    return task_ts.astimezone().strftime("%Y-%m-%d %H:%M:%S")


def format_task(task: Task) -> str:
    line = (
        f"[ID: {task.id}] {task.description} - Status: {task.status.value.upper()} "
        f"(Created: {_local_ts(task.created_at)}"
    )
    if task.updated_at != task.created_at:
        line += f", Updated: {_local_ts(task.updated_at)}"
    return line + ")"


# ---- handlers ----

def cmd_help(state: AppState, args: list[str], principal: object | None) -> str:
    return registry.build_help()


def cmd_login(state: AppState, args: list[str], principal: object | None) -> str:
    account = state.auth.authenticate(args[0], args[1])
    token = state.auth.issue_token(account)
    return f"Logged in as {account.username} ({account.role.value}). Your token: {token}"


def cmd_add(state: AppState, args: list[str], principal: object | None) -> str:
    task = state.tasks.add_task(" ".join(args))
    return f'Task added: "{task.description}" (ID: {task.id})'


def cmd_list(state: AppState, args: list[str], principal: object | None) -> str:
    status = TaskStatus.parse(args[0]) if args else None
    tasks = state.tasks.list_tasks(status)
    if not tasks:
        return "No tasks found." if status is None else f"No tasks with status {status.value} found."
    return "\n".join(["Tasks:", *(format_task(t) for t in tasks)])


def cmd_update(state: AppState, args: list[str], principal: object | None) -> str:
    task = state.tasks.update_task_description(parse_task_id(args[0]), " ".join(args[1:]))
    return f'Task updated: "{task.description}" (ID: {task.id})'


def cmd_delete(state: AppState, args: list[str], principal: object | None) -> str:
    task = state.tasks.delete_task(parse_task_id(args[0]))
    return f'Task deleted: "{task.description}" (ID: {task.id})'


def _mark(status: TaskStatus) -> CommandHandler:
    def handler(state: AppState, args: list[str], principal: object | None) -> str:
        task = state.tasks.update_task_status(parse_task_id(args[0]), status)
        return f'Task marked as {status.value}: "{task.description}" (ID: {task.id})'

    return handler


def cmd_clear(state: AppState, args: list[str], principal: object | None) -> str:
    removed = state.tasks.clear()
    logger.info("Tasks cleared by %r", getattr(principal, "username", None))
    return f"All tasks have been cleared successfully ({removed} removed)."


def cmd_add_user(state: AppState, args: list[str], principal: object | None) -> str:
    """
    add-user <username> <password> <role> <admin_user> <admin_pass>

    The admin credentials identify the caller; the caller's own role decides.
    """
    username, password, role, admin_user, admin_pass = args[:5]
    caller = state.auth.authenticate(admin_user, admin_pass)
    account = state.users.add_account(caller, username, password, role)
    return f'User "{account.username}" ({account.role.value}) added successfully.'


def cmd_remove_user(state: AppState, args: list[str], principal: object | None) -> str:
    """remove-user <username> <admin_user> <admin_pass>, same caller rule as add-user."""
    username, admin_user, admin_pass = args[:3]
    caller = state.auth.authenticate(admin_user, admin_pass)
    state.auth.require_admin(caller)
    state.users.remove_account(username)
    return f'User "{username}" removed successfully.'


registry.register(
    "login", cmd_login, "login <username> <password>", "Log in and print a session token.", min_args=2
)
registry.register(
    "add",
    cmd_add,
    "add <token> <description>",
    "Add a new task.",
    min_args=2,
    auth=AuthMode.TOKEN,
)
registry.register(
    "list",
    cmd_list,
    "list <token> [todo|in-progress|done]",
    "List tasks, optionally by status.",
    min_args=1,
    auth=AuthMode.TOKEN,
    check=_check_status_filter,
)
registry.register(
    "update",
    cmd_update,
    "update <token> <task_id> <description>",
    "Change a task's description.",
    min_args=3,
    auth=AuthMode.TOKEN,
    check=_task_id_at(1),
)
registry.register(
    "delete",
    cmd_delete,
    "delete <token> <task_id>",
    "Delete a task by ID.",
    min_args=2,
    auth=AuthMode.TOKEN,
    check=_task_id_at(1),
)
registry.register(
    "mark-done",
    _mark(TaskStatus.DONE),
    "mark-done <token> <task_id>",
    "Mark a task as done.",
    min_args=2,
    auth=AuthMode.TOKEN,
    check=_task_id_at(1),
)
registry.register(
    "mark-in-progress",
    _mark(TaskStatus.IN_PROGRESS),
    "mark-in-progress <token> <task_id>",
    "Mark a task as in-progress.",
    min_args=2,
    auth=AuthMode.TOKEN,
    check=_task_id_at(1),
)
registry.register(
    "mark-undone",
    _mark(TaskStatus.TODO),
    "mark-undone <token> <task_id>",
    "Mark a task as todo again.",
    min_args=2,
    auth=AuthMode.TOKEN,
    check=_task_id_at(1),
)
registry.register(
    "clear",
    cmd_clear,
    "clear <token> yes confirm",
    "Delete ALL tasks (admin only, needs both confirmation words).",
    min_args=1,
    auth=AuthMode.ADMIN_TOKEN,
    check=_check_clear_confirmation,
)
registry.register(
    "add-user",
    cmd_add_user,
    "add-user <username> <password> <role> <admin_user> <admin_pass>",
    "Admin adds a new user (role: admin or user).",
    min_args=5,
)
registry.register(
    "remove-user",
    cmd_remove_user,
    "remove-user <username> <admin_user> <admin_pass>",
    "Admin removes a user.",
    min_args=3,
)
registry.register("help", cmd_help, "help", "Show this help message.", aliases=["-h", "--help"])
