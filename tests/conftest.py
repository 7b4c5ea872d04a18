from __future__ import annotations

import os
import shutil
import subprocess
import sys
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from repo_command_mcp.core.shell import ShellConfig


def _run(cmd: list[str], cwd: Path, env: dict[str, str] | None = None) -> str:
    merged = dict(os.environ)
    merged.update(env or {})
    out = subprocess.check_output(
        cmd,
        cwd=str(cwd),
        env=merged,
        stderr=subprocess.STDOUT,
        text=True,
        encoding="utf-8",
        errors="replace",
    )
    return out.strip()


def _commit(repo: Path, author: str, email: str, when: str, files: dict[str, str], msg: str) -> str:
    for relpath, content in files.items():
        p = repo / relpath
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(content, encoding="utf-8")

    env = {
        "GIT_AUTHOR_NAME": author,
        "GIT_AUTHOR_EMAIL": email,
        "GIT_AUTHOR_DATE": when,
        "GIT_COMMITTER_NAME": author,
        "GIT_COMMITTER_EMAIL": email,
        "GIT_COMMITTER_DATE": when,
    }
    _run(["git", "add", "-A"], repo)
    _run(["git", "-c", "commit.gpgsign=false", "commit", "-m", msg], repo, env=env)
    return _run(["git", "rev-parse", "HEAD"], repo)


@dataclass
class FixtureRepo:
    root: Path
    commits: dict[str, str] = field(default_factory=dict)

    @property
    def head(self) -> str:
        return _run(["git", "rev-parse", "HEAD"], self.root)

    def git(self, *args: str) -> str:
        return _run(["git", *args], self.root)


@pytest.fixture()
def fixture_repo(tmp_path: Path) -> FixtureRepo:
    """
    A small repository with fixed authors and dates (all +08:00):
      main     Main Author  2018-02-05  README.md, src/Main.java
      blame    fakeAuthor   2018-02-08  blameTest.java
      special  #()!Author   2018-02-09  special.py
      eugene   eugenepeh    2018-05-07  README.md
    plus a `test` branch forked after `special` that adds inTestBranch.java.
    Current branch is `master`.
    """
    if shutil.which("git") is None:
        pytest.skip("git is not installed")

    repo = tmp_path / "fixture repo"
    repo.mkdir()
    _run(["git", "init"], repo)
    _run(["git", "symbolic-ref", "HEAD", "refs/heads/master"], repo)
    _run(["git", "config", "user.email", "ci@example.com"], repo)
    _run(["git", "config", "user.name", "CI"], repo)

    fx = FixtureRepo(root=repo)
    fx.commits["main"] = _commit(
        repo, "Main Author", "main@example.com", "2018-02-05T10:00:00+08:00",
        {"README.md": "# fixture\n", "src/Main.java": "class Main {}\n"},
        "initial",
    )
    fx.commits["blame"] = _commit(
        repo, "fakeAuthor", "fake@example.com", "2018-02-08T10:00:00+08:00",
        {"blameTest.java": "line one\nline two\n"},
        "add blame test file",
    )
    fx.commits["special"] = _commit(
        repo, "#()!Author", "special@example.com", "2018-02-09T10:00:00+08:00",
        {"special.py": "print('special')\n"},
        "add special file",
    )

    _run(["git", "checkout", "-b", "test"], repo)
    fx.commits["test"] = _commit(
        repo, "Main Author", "main@example.com", "2018-03-01T10:00:00+08:00",
        {"inTestBranch.java": "class InTestBranch {}\n"},
        "test branch only",
    )
    _run(["git", "checkout", "master"], repo)

    fx.commits["eugene"] = _commit(
        repo, "eugenepeh", "eugene@example.com", "2018-05-07T12:00:00+08:00",
        {"README.md": "# fixture\n\nupdated\n"},
        "update readme",
    )
    return fx


@pytest.fixture()
def python_shell() -> ShellConfig:
    """A "shell" that runs command strings as Python source, on any host."""
    return ShellConfig(program=sys.executable, flag="-c", family="posix")
