from __future__ import annotations

import logging
import os
import sys

from mcp.server.fastmcp import FastMCP

from repo_command_mcp.core.dates import parse_day
from repo_command_mcp.core.models import Author, RepoConfiguration
from repo_command_mcp.tools import (
    blame_raw,
    checkout,
    checkout_to_date,
    checkstyle_raw,
    clone_repo,
    diff_commit,
    get_commit_hash_before_date,
    get_current_branch,
    get_shortlog_summary,
    git_log,
)

LOG_LEVEL_ENV = "REPO_COMMAND_MCP_LOG_LEVEL"

mcp = FastMCP("repo-command-mcp")


@mcp.tool()
def git_log_tool(
    git_id: str,
    root: str = ".",
    aliases: list[str] | None = None,
    ignore_globs: list[str] | None = None,
    formats: list[str] | None = None,
    since: str | None = None,
    until: str | None = None,
) -> dict:
    author = Author(git_id=git_id, aliases=aliases or [], ignore_glob_list=ignore_globs or [])
    config = RepoConfiguration(
        repo_root=root,
        since_date=parse_day(since),
        until_date=parse_day(until),
        formats=formats or [],
    )
    return {"root": root, "author": git_id, "log": git_log(config, author)}


@mcp.tool()
def blame_tool(file_path: str, root: str = ".") -> dict:
    return {"root": root, "path": file_path, "blame": blame_raw(root, file_path)}


@mcp.tool()
def diff_commit_tool(commit: str, root: str = ".") -> dict:
    return {"root": root, "commit": commit, "diff": diff_commit(root, commit)}


@mcp.tool()
def commit_hash_before_date_tool(date: str, root: str = ".", branch: str = "HEAD") -> dict:
    commit = get_commit_hash_before_date(root, branch, parse_day(date)).strip()
    return {"root": root, "branch": branch, "date": date, "commit": commit or None}


@mcp.tool()
def current_branch_tool(root: str = ".") -> dict:
    return {"root": root, "branch": get_current_branch(root)}


@mcp.tool()
def shortlog_summary_tool(root: str = ".", since: str | None = None, until: str | None = None) -> dict:
    summary = get_shortlog_summary(root, parse_day(since), parse_day(until))
    return {"root": root, "since": since, "until": until, "summary": summary}


@mcp.tool()
def checkout_tool(commit: str, root: str = ".") -> dict:
    return {"root": root, "commit": commit, "output": checkout(root, commit)}


@mcp.tool()
def checkout_to_date_tool(until: str, root: str = ".", branch: str = "HEAD") -> dict:
    checkout_to_date(root, branch, parse_day(until))
    return {"root": root, "branch": branch, "until": until, "checked_out": True}


@mcp.tool()
def clone_repo_tool(location: str, repo_name: str, repos_dir: str = "repos") -> dict:
    output = clone_repo(location, repo_name, repos_dir)
    return {"location": location, "target": os.path.join(repos_dir, repo_name), "output": output}


@mcp.tool()
def checkstyle_tool(directory: str) -> dict:
    return {"directory": directory, "report": checkstyle_raw(directory)}


def configure_logging() -> None:
    # stdout carries the MCP stdio transport; logs go to stderr.
    level = os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    configure_logging()
    mcp.run()


if __name__ == "__main__":
    main()
