# tests/test_commands.py

from __future__ import annotations

import json

import pytest

from task_tracker.cli.commands import AuthMode, CommandRegistry, registry
from task_tracker.core.state import AppState
from task_tracker.errors import EXIT_FAILURE, EXIT_OK, EXIT_USAGE, UsageError

from .conftest import ADMIN_PASS, ADMIN_USER
from .fakes import RecordingTaskRepo


def run(state: AppState, *argv: str):
    return registry.handle(state, list(argv))


def test_command_registry_routes_auth_modes(state: AppState, admin_token: str) -> None:
    reg = CommandRegistry()
    seen: dict[str, object] = {}

    def open_cmd(state, args, principal):
        seen["open"] = (args, principal)
        return "open"

    def token_cmd(state, args, principal):
        seen["token"] = (args, principal)
        return "token"

    reg.register("open", open_cmd, "open <x>", "no auth", min_args=1)
    reg.register("secure", token_cmd, "secure <token> <x>", "token", min_args=2, auth=AuthMode.TOKEN)

    assert reg.handle(state, ["open", "x"]).text == "open"
    assert seen["open"] == (["x"], None)

    result = reg.handle(state, ["SECURE", admin_token, "y"])
    assert result.ok and result.text == "token"
    args, principal = seen["token"]
    assert args == ["y"]
    assert principal.username == ADMIN_USER


def test_unknown_and_empty_commands(state: AppState) -> None:
    result = run(state, "nope")
    assert result.exit_code == EXIT_USAGE
    assert "Unknown command" in result.text
    assert "help" in result.text

    empty = registry.handle(state, [])
    assert empty.exit_code == EXIT_USAGE
    assert "Available commands" in empty.text


def test_help_lists_every_command(state: AppState) -> None:
    text = run(state, "help").text
    for name in (
        "login",
        "add",
        "list",
        "update",
        "delete",
        "mark-done",
        "mark-in-progress",
        "mark-undone",
        "clear",
        "add-user",
        "remove-user",
    ):
        assert name in text
    assert run(state, "--help").text == text


def test_login_prints_token(state: AppState) -> None:
    result = run(state, "login", ADMIN_USER, ADMIN_PASS)
    assert result.ok
    assert result.text.startswith(f"Logged in as {ADMIN_USER} (admin). Your token: ")
    token = result.text.rsplit(" ", 1)[1]
    assert state.auth.verify_token(token).username == ADMIN_USER


def test_login_failures_share_one_message(state: AppState) -> None:
    wrong_pw = run(state, "login", ADMIN_USER, "nope")
    unknown = run(state, "login", "ghost", "nope")
    assert wrong_pw.exit_code == EXIT_FAILURE
    assert wrong_pw.text == unknown.text


def test_missing_token_is_a_usage_error(state: AppState) -> None:
    for argv in (["add"], ["list"], ["delete"], ["mark-done"], ["clear"]):
        result = run(state, *argv)
        assert result.exit_code == EXIT_USAGE, argv
        assert result.text.startswith("Error: Usage: task-tracker ")


def test_invalid_token_is_rejected_uniformly(state: AppState) -> None:
    a = run(state, "add", "not-a-token", "buy milk")
    b = run(state, "list", "a.b.c")
    assert a.exit_code == b.exit_code == EXIT_FAILURE
    assert a.text == b.text
    assert state.tasks.list_tasks() == []


@pytest.mark.parametrize("bad_id", ["0", "-3", "abc", "1.5"])
def test_invalid_task_id_is_a_usage_error(state: AppState, admin_token: str, bad_id: str) -> None:
    result = run(state, "mark-done", admin_token, bad_id)
    assert result.exit_code == EXIT_USAGE
    assert "valid positive task ID" in result.text


def test_usage_errors_never_reach_auth_or_storage(state: AppState) -> None:
    state.tasks = RecordingTaskRepo()

    for argv in (
        ["delete", "bogus-token", "abc"],
        ["clear", "bogus-token", "yes"],
        ["list", "bogus-token", "blocked"],
        ["update", "bogus-token", "x", "text"],
    ):
        assert run(state, *argv).exit_code == EXIT_USAGE, argv

    assert state.tasks.calls == []


def test_task_scenario(state: AppState, admin_token: str) -> None:
    assert run(state, "list", admin_token).text == "No tasks found."

    added = run(state, "add", admin_token, "buy", "milk")
    assert added.text == 'Task added: "buy milk" (ID: 1)'

    listing = run(state, "list", admin_token).text.splitlines()
    assert listing[0] == "Tasks:"
    assert len(listing) == 2
    assert listing[1].startswith("[ID: 1] buy milk - Status: TODO (Created: ")

    assert run(state, "mark-done", admin_token, "1").text == 'Task marked as done: "buy milk" (ID: 1)'
    (task,) = state.tasks.list_tasks()
    assert task.status == "done"
    assert task.updated_at > task.created_at
    assert "Status: DONE" in run(state, "list", admin_token).text
    assert ", Updated: " in run(state, "list", admin_token).text

    assert run(state, "delete", admin_token, "1").text == 'Task deleted: "buy milk" (ID: 1)'
    assert run(state, "list", admin_token).text == "No tasks found."


def test_mark_commands_and_status_filter(state: AppState, user_token: str) -> None:
    for d in ("a", "b", "c"):
        run(state, "add", user_token, d)

    assert run(state, "mark-in-progress", user_token, "2").ok
    assert run(state, "mark-done", user_token, "3").ok
    assert run(state, "mark-undone", user_token, "3").ok

    in_progress = run(state, "list", user_token, "in-progress").text.splitlines()
    assert in_progress[1:] and all("IN-PROGRESS" in line for line in in_progress[1:])
    assert len(in_progress) == 2
    assert run(state, "list", user_token, "done").text == "No tasks with status done found."
    assert len(run(state, "list", user_token, "TODO").text.splitlines()) == 3


def test_update_command(state: AppState, user_token: str) -> None:
    run(state, "add", user_token, "draft")
    result = run(state, "update", user_token, "1", "final", "version")
    assert result.text == 'Task updated: "final version" (ID: 1)'


def test_not_found_is_reported_and_non_fatal(state: AppState, admin_token: str) -> None:
    run(state, "add", admin_token, "keep me")
    before = state.settings.tasks_file.read_bytes()

    result = run(state, "delete", admin_token, "42")

    assert result.exit_code == EXIT_FAILURE
    assert result.text == "Error: Task with ID 42 not found."
    assert state.settings.tasks_file.read_bytes() == before


@pytest.mark.parametrize(
    "confirmation",
    [
        [],
        ["yes"],
        ["confirm"],
        ["confirm", "yes"],
        ["YES", "confirm"],
        ["yes", "confirm", "now"],
        ["y", "c"],
    ],
)
def test_clear_requires_both_confirmation_words(
    state: AppState, admin_token: str, confirmation: list[str]
) -> None:
    run(state, "add", admin_token, "precious")

    result = run(state, "clear", admin_token, *confirmation)

    assert result.exit_code == EXIT_USAGE
    assert len(state.tasks.list_tasks()) == 1


def test_clear_with_confirmation_by_admin(state: AppState, admin_token: str) -> None:
    run(state, "add", admin_token, "a")
    run(state, "add", admin_token, "b")

    result = run(state, "clear", admin_token, "yes", "confirm")

    assert result.ok
    assert "cleared" in result.text
    assert state.tasks.list_tasks() == []


def test_clear_is_denied_for_regular_users(state: AppState, user_token: str) -> None:
    run(state, "add", user_token, "a")

    result = run(state, "clear", user_token, "yes", "confirm")

    assert result.exit_code == EXIT_FAILURE
    assert "Only admins" in result.text
    assert len(state.tasks.list_tasks()) == 1


def test_user_management_scenario(state: AppState) -> None:
    accounts = json.loads(state.settings.users_file.read_text("utf-8"))
    assert [(a["username"], a["role"]) for a in accounts] == [(ADMIN_USER, "admin")]

    assert run(state, "add-user", "eve", "eve-pw", "user", ADMIN_USER, ADMIN_PASS).ok

    denied = run(state, "add-user", "mallory", "pw", "user", "eve", "eve-pw")
    assert denied.exit_code == EXIT_FAILURE
    assert "Only admins" in denied.text
    assert state.users.find("mallory") is None

    created = run(state, "add-user", "bob", "pw", "user", ADMIN_USER, ADMIN_PASS)
    assert created.text == 'User "bob" (user) added successfully.'

    conflict = run(state, "add-user", "bob", "pw2", "admin", ADMIN_USER, ADMIN_PASS)
    assert conflict.exit_code == EXIT_FAILURE
    assert "already exists" in conflict.text

    assert "bob" in run(state, "login", "bob", "pw").text


def test_add_user_with_bad_admin_credentials(state: AppState) -> None:
    result = run(state, "add-user", "bob", "pw", "user", ADMIN_USER, "wrong")
    assert result.exit_code == EXIT_FAILURE
    assert result.text == "Error: Invalid credentials."
    assert state.users.find("bob") is None


def test_add_user_requires_all_arguments(state: AppState) -> None:
    result = run(state, "add-user", "bob", "pw", "user", ADMIN_USER)
    assert result.exit_code == EXIT_USAGE


def test_remove_user_checks_the_callers_own_role(state: AppState) -> None:
    run(state, "add-user", "bob", "pw", "user", ADMIN_USER, ADMIN_PASS)
    run(state, "add-user", "eve", "pw", "user", ADMIN_USER, ADMIN_PASS)

    denied = run(state, "remove-user", "eve", "bob", "pw")
    assert "Only admins" in denied.text
    assert state.users.find("eve") is not None

    removed = run(state, "remove-user", "eve", ADMIN_USER, ADMIN_PASS)
    assert removed.text == 'User "eve" removed successfully.'
    assert state.users.find("eve") is None

    missing = run(state, "remove-user", "eve", ADMIN_USER, ADMIN_PASS)
    assert missing.text == 'Error: User "eve" not found.'


def test_removed_user_can_no_longer_log_in(state: AppState) -> None:
    run(state, "add-user", "bob", "pw", "user", ADMIN_USER, ADMIN_PASS)
    run(state, "remove-user", "bob", ADMIN_USER, ADMIN_PASS)
    assert run(state, "login", "bob", "pw").exit_code == EXIT_FAILURE


def test_dispatch_prints_to_stdout_and_stderr(state: AppState, admin_token: str, capsys) -> None:
    assert registry.dispatch(state, ["add", admin_token, "x"]) == EXIT_OK
    out, err = capsys.readouterr()
    assert "Task added" in out and err == ""

    assert registry.dispatch(state, ["delete", admin_token, "9"]) == EXIT_FAILURE
    out, err = capsys.readouterr()
    assert out == "" and "not found" in err


def test_usage_error_exit_code() -> None:
    assert UsageError("x").exit_code == EXIT_USAGE
