from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable

from .dates import GIT_DATE_UTC_OFFSET, format_since, format_until
from .filters import escape_regex
from .models import Author, RepoConfiguration
from .shell import ShellConfig, host_shell


# Name-only match: the email part of the author field is ignored.
AUTHOR_NAME_PATTERN = "^{} <.*>$"
AUTHOR_OR_OPERATOR = "|"

LOG_PRETTY_FORMAT = "%H|%aN|%ad|%s"

CHECKSTYLE_JAR = "checkstyle-7.7-all.jar"
CHECKSTYLE_CONFIG = "/google_checks.xml"


def _shell(shell: ShellConfig | None) -> ShellConfig:
    return shell or host_shell()


def date_range_args(
    since_date: date | None,
    until_date: date | None,
    *,
    utc_offset: timedelta = GIT_DATE_UTC_OFFSET,
    shell: ShellConfig | None = None,
) -> str:
    sh = _shell(shell)
    out = ""
    if since_date is not None:
        out += " --since=" + sh.quote(format_since(since_date, utc_offset))
    if until_date is not None:
        out += " --until=" + sh.quote(format_until(until_date, utc_offset))
    return out


def author_filter_args(author: Author, *, shell: ShellConfig | None = None) -> str:
    """
    --author pattern matching the primary identity or any alias by name, literally.
    An empty pattern would match every author, so a filter with no usable name is refused.
    """
    patterns = [
        AUTHOR_NAME_PATTERN.format(escape_regex(name))
        for name in author.candidates()
        if name and name.strip()
    ]
    if not patterns:
        raise ValueError("Author has no non-blank identity or alias to filter on.")
    return " --author=" + _shell(shell).quote(AUTHOR_OR_OPERATOR.join(patterns))


def pathspec_args(
    formats: Iterable[str],
    exclude_globs: Iterable[str],
    *,
    shell: ShellConfig | None = None,
) -> str:
    """
    Format suffixes (unioned) followed by :(exclude) globs, all after a single `--`.
    Blank globs are dropped; no clauses at all means no path restriction.
    """
    sh = _shell(shell)
    clauses = [sh.quote(f"*.{fmt}") for fmt in formats if fmt]
    clauses += [sh.quote(f":(exclude){glob}") for glob in exclude_globs if glob]
    if not clauses:
        return ""
    return " -- " + " ".join(clauses)


def log_command(
    since_date: date | None,
    until_date: date | None,
    author: Author,
    formats: Iterable[str] = (),
    *,
    utc_offset: timedelta = GIT_DATE_UTC_OFFSET,
    shell: ShellConfig | None = None,
) -> str:
    """
    Non-merge commits of one author (identity or alias), case-insensitive, with
    hash/author/date/subject per commit plus --shortstat.
    """
    sh = _shell(shell)
    command = "git log --no-merges -i -E"
    command += date_range_args(since_date, until_date, utc_offset=utc_offset, shell=sh)
    command += " --pretty=format:" + sh.quote(LOG_PRETTY_FORMAT) + " --date=iso --shortstat"
    command += author_filter_args(author, shell=sh)
    command += pathspec_args(formats, author.ignore_glob_list, shell=sh)
    return command


def log_command_for(
    config: RepoConfiguration,
    author: Author,
    *,
    utc_offset: timedelta = GIT_DATE_UTC_OFFSET,
    shell: ShellConfig | None = None,
) -> str:
    return log_command(
        config.since_date,
        config.until_date,
        author,
        config.formats,
        utc_offset=utc_offset,
        shell=shell,
    )


def checkout_command(commit_hash: str, *, shell: ShellConfig | None = None) -> str:
    return "git checkout " + _shell(shell).quote(commit_hash)


def checkout_before_date_command(
    branch: str,
    until_date: date,
    *,
    utc_offset: timedelta = GIT_DATE_UTC_OFFSET,
    shell: ShellConfig | None = None,
) -> str:
    """Latest commit on `branch` up to the end of `until_date`."""
    return (
        f"git rev-list -1 --before={format_until(until_date, utc_offset)} "
        + _shell(shell).quote(branch)
    )


def rev_list_before_date_command(
    branch: str,
    day: date,
    *,
    utc_offset: timedelta = GIT_DATE_UTC_OFFSET,
    shell: ShellConfig | None = None,
) -> str:
    """Latest commit on `branch` before the start of `day`."""
    return (
        f"git rev-list -1 --before={format_since(day, utc_offset)} "
        + _shell(shell).quote(branch)
    )


def blame_command(file_path: str, *, shell: ShellConfig | None = None) -> str:
    return "git blame -w --line-porcelain " + _shell(shell).quote(file_path)


def diff_no_context_command(commit_hash: str, *, shell: ShellConfig | None = None) -> str:
    """Working tree against `commit_hash`; an empty hash diffs against the index."""
    if not commit_hash:
        return "git diff -U0"
    return "git diff -U0 " + _shell(shell).quote(commit_hash)


def current_branch_command() -> str:
    return "git branch"


def shortlog_summary_command(
    since_date: date | None,
    until_date: date | None,
    *,
    utc_offset: timedelta = GIT_DATE_UTC_OFFSET,
    shell: ShellConfig | None = None,
) -> str:
    command = "git log --pretty=short"
    command += date_range_args(since_date, until_date, utc_offset=utc_offset, shell=shell)
    command += " | git shortlog --summary"
    return command


def clone_command(location: str, *, shell: ShellConfig | None = None) -> str:
    return "git clone " + _shell(shell).quote(location)


def checkstyle_command(
    directory: str,
    *,
    jar: str = CHECKSTYLE_JAR,
    config: str = CHECKSTYLE_CONFIG,
    shell: ShellConfig | None = None,
) -> str:
    sh = _shell(shell)
    return f"java -jar {sh.quote(jar)} -c {sh.quote(config)} -f xml {sh.quote(directory)}"
