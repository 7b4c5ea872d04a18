from __future__ import annotations

import re

from .errors import CurrentBranchNotFoundError


# Extended-regex metacharacters git would otherwise interpret in --author patterns.
_REGEX_METACHARS = re.compile(r"([\\.^$|?*+()\[\]{}])")

_BLAME_LINE = re.compile(r"(author .*)|([0-9a-f]{40} .*)")
_CURRENT_BRANCH_LINE = re.compile(r"\* (.*)")


def escape_regex(text: str) -> str:
    """
    Backslash-escape every extended-regex metacharacter so `text` matches literally.
    Characters such as '#', '!', '<' are left alone: escaping them is either
    meaningless or, for '\\<', a GNU word-boundary operator.
    """
    return _REGEX_METACHARS.sub(r"\\\1", text)


def filter_text(text: str, pattern: str | re.Pattern[str]) -> str:
    """
    Keep only lines matching `pattern` at the start of the line.
    Every kept line is followed by a newline, matching the runner's output shape.
    """
    regex = re.compile(pattern) if isinstance(pattern, str) else pattern
    return "".join(f"{line}\n" for line in text.splitlines() if regex.match(line))


def filter_blame(text: str) -> str:
    """
    Reduce `git blame --line-porcelain` output to the author lines and the
    commit-hash header lines, in their original order.
    """
    return filter_text(text, _BLAME_LINE)


def parse_current_branch(text: str) -> str:
    """Extract the branch name from `git branch` output (the line marked with '*')."""
    for line in text.splitlines():
        m = _CURRENT_BRANCH_LINE.match(line)
        if m:
            return m.group(1).strip()
    raise CurrentBranchNotFoundError("No current branch marked in `git branch` output.")
