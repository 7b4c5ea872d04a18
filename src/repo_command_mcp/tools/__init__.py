from .git_tools import (
    git_log,
    checkout,
    checkout_to_date,
    blame_raw,
    diff_commit,
    get_commit_hash_before_date,
    get_current_branch,
    get_shortlog_summary,
    clone_repo,
    checkstyle_raw,
)

__all__ = [
    "git_log",
    "checkout",
    "checkout_to_date",
    "blame_raw",
    "diff_commit",
    "get_commit_hash_before_date",
    "get_current_branch",
    "get_shortlog_summary",
    "clone_repo",
    "checkstyle_raw",
]
