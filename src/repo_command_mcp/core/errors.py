from __future__ import annotations


class RepoCommandError(Exception):
    """Base error for the project."""


class InvalidRootError(RepoCommandError):
    pass


class InvalidPathError(RepoCommandError, ValueError):
    """A repository-relative path argument is absolute or leaves the repository."""


class CommandSpawnError(RepoCommandError):
    pass


class CommandExecutionError(RepoCommandError, RuntimeError):
    """
    A command exited with a non-zero code.
    Carries everything needed to reproduce the failure without re-running it.
    """

    def __init__(self, command: str, root: str, stderr: str, exit_code: int) -> None:
        self.command = command
        self.root = root
        self.stderr = stderr
        self.exit_code = exit_code
        super().__init__(
            f"Error returned from command {command!r} on path {root} "
            f"(exit code {exit_code}):\n{stderr}"
        )


class CommandTimeoutError(CommandExecutionError):
    pass


class ProcessInterruptedError(RepoCommandError):
    pass


class CommitNotFoundError(RepoCommandError):
    pass


class CurrentBranchNotFoundError(RepoCommandError, IndexError):
    pass
