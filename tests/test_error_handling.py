from __future__ import annotations

import pytest

from repo_command_mcp.core.errors import (
    CommandExecutionError,
    CommandSpawnError,
    CommandTimeoutError,
    CommitNotFoundError,
    CurrentBranchNotFoundError,
    InvalidPathError,
    InvalidRootError,
    ProcessInterruptedError,
    RepoCommandError,
)


@pytest.mark.parametrize(
    "exc_type",
    [
        InvalidRootError,
        InvalidPathError,
        CommandSpawnError,
        CommandExecutionError,
        CommandTimeoutError,
        ProcessInterruptedError,
        CommitNotFoundError,
        CurrentBranchNotFoundError,
    ],
)
def test_error_types_inheritance(exc_type):
    assert issubclass(exc_type, RepoCommandError)


def test_execution_error_is_a_runtime_error():
    assert issubclass(CommandExecutionError, RuntimeError)


def test_execution_error_message_carries_context():
    err = CommandExecutionError("git diff -U0 deadbeef", "/repos/x", "fatal: bad object\n", 128)

    text = str(err)
    assert "git diff -U0 deadbeef" in text
    assert "/repos/x" in text
    assert "fatal: bad object" in text
    assert "128" in text
    assert (err.command, err.root, err.stderr, err.exit_code) == (
        "git diff -U0 deadbeef", "/repos/x", "fatal: bad object\n", 128,
    )


def test_timeout_error_keeps_execution_context():
    err = CommandTimeoutError("git log", "/repo", "", -9)
    assert isinstance(err, CommandExecutionError)
    assert err.exit_code == -9
