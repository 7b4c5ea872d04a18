from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any


@dataclass
class Author:
    git_id: str
    aliases: list[str] = field(default_factory=list)
    ignore_glob_list: list[str] = field(default_factory=list)

    def candidates(self) -> list[str]:
        """Primary identity first, then aliases, in the order given."""
        return [self.git_id, *self.aliases]


@dataclass
class RepoConfiguration:
    repo_root: str
    branch: str = "HEAD"
    since_date: date | None = None
    until_date: date | None = None
    formats: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class CommandResult:
    command: str
    root: str
    stdout: str
    stderr: str
    exit_code: int
    duration_ms: int
    timed_out: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "command": self.command,
            "root": self.root,
            "stdout": self.stdout,
            "stderr": self.stderr,
            "exit_code": self.exit_code,
            "duration_ms": self.duration_ms,
            "timed_out": self.timed_out,
        }
