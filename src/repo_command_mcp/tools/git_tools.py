from __future__ import annotations

import logging
from datetime import date
from pathlib import Path

from .common import make_runner
from ..core import commands
from ..core.dates import utc_offset_from_env
from ..core.errors import CommitNotFoundError
from ..core.filters import filter_blame, parse_current_branch
from ..core.models import Author, RepoConfiguration
from ..core.runner import ShellCommandRunner
from ..core.security import resolve_blame_path, resolve_working_dir

logger = logging.getLogger(__name__)

# Default parent directory for cloned repositories, relative to the process cwd.
REPOS_ADDRESS = "repos"


def git_log(
    config: RepoConfiguration,
    author: Author,
    runner: ShellCommandRunner | None = None,
) -> str:
    """
    Raw `git log` text for one author: "hash|name|date|subject" lines followed
    by their --shortstat line.
    """
    r = runner or make_runner()
    command = commands.log_command_for(
        config, author, utc_offset=utc_offset_from_env(), shell=r.shell
    )
    return r.run(config.repo_root, command)


def checkout(root: str, commit_hash: str, runner: ShellCommandRunner | None = None) -> str:
    r = runner or make_runner()
    return r.run(root, commands.checkout_command(commit_hash, shell=r.shell))


def checkout_to_date(
    root: str,
    branch: str,
    until_date: date | None,
    runner: ShellCommandRunner | None = None,
) -> None:
    """
    Check out the latest commit on `branch` up to the end of `until_date`.
    Does nothing when `until_date` is None.
    Raises CommitNotFoundError when no commit precedes that date.
    """
    if until_date is None:
        return

    r = runner or make_runner()
    rev_list = commands.checkout_before_date_command(
        branch, until_date, utc_offset=utc_offset_from_env(), shell=r.shell
    )
    commit_hash = r.run(root, rev_list).strip()
    if not commit_hash:
        raise CommitNotFoundError("Commit before until date is not found.")

    logger.info("Checking out %s (latest on %s before %s)", commit_hash, branch, until_date)
    r.run(root, commands.checkout_command(commit_hash, shell=r.shell))


def blame_raw(root: str, file_path: str, runner: ShellCommandRunner | None = None) -> str:
    """
    Porcelain blame of `file_path`, reduced to author lines and commit-hash lines.
    """
    r = runner or make_runner()
    repo_root = resolve_working_dir(root)
    rel = resolve_blame_path(repo_root, file_path)

    return filter_blame(r.run(repo_root, commands.blame_command(rel, shell=r.shell)))


def diff_commit(root: str, last_commit_hash: str, runner: ShellCommandRunner | None = None) -> str:
    """
    Diff of the working tree against `last_commit_hash`, without context lines.
    """
    r = runner or make_runner()
    return r.run(root, commands.diff_no_context_command(last_commit_hash, shell=r.shell))


def get_commit_hash_before_date(
    root: str,
    branch: str,
    day: date | None,
    runner: ShellCommandRunner | None = None,
) -> str:
    """
    Latest commit hash on `branch` before `day`, with git's trailing newline.
    Empty string if `day` is None or there is no such commit.
    """
    if day is None:
        return ""

    r = runner or make_runner()
    command = commands.rev_list_before_date_command(
        branch, day, utc_offset=utc_offset_from_env(), shell=r.shell
    )
    return r.run(root, command)


def get_current_branch(root: str, runner: ShellCommandRunner | None = None) -> str:
    r = runner or make_runner()
    return parse_current_branch(r.run(root, commands.current_branch_command()))


def get_shortlog_summary(
    root: str,
    since_date: date | None,
    until_date: date | None,
    runner: ShellCommandRunner | None = None,
) -> str:
    r = runner or make_runner()
    command = commands.shortlog_summary_command(
        since_date, until_date, utc_offset=utc_offset_from_env(), shell=r.shell
    )
    return r.run(root, command)


def clone_repo(
    location: str,
    repo_name: str,
    repos_dir: str | Path = REPOS_ADDRESS,
    runner: ShellCommandRunner | None = None,
) -> str:
    """
    Clone `location` into `<repos_dir>/<repo_name>/`. The target directory is
    created first; git then creates the checkout inside it.
    """
    r = runner or make_runner()
    target = Path(repos_dir) / repo_name
    target.mkdir(parents=True, exist_ok=True)
    return r.run(target, commands.clone_command(location, shell=r.shell))


def checkstyle_raw(
    directory: str,
    jar: str = commands.CHECKSTYLE_JAR,
    config: str = commands.CHECKSTYLE_CONFIG,
    runner: ShellCommandRunner | None = None,
) -> str:
    """
    Checkstyle XML report for every source file under `directory`.
    """
    r = runner or make_runner()
    abs_dir = resolve_working_dir(directory)
    command = commands.checkstyle_command(str(abs_dir), jar=jar, config=config, shell=r.shell)
    return r.run(abs_dir, command)
