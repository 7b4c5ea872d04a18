from __future__ import annotations

import posixpath
from pathlib import Path, PurePosixPath, PureWindowsPath

from .errors import InvalidPathError, InvalidRootError


def resolve_working_dir(directory: str | Path) -> Path:
    """Absolute directory a command runs in; it must already exist."""
    p = Path(directory).expanduser().resolve()

    if not p.exists():
        raise InvalidRootError(f"Working directory does not exist: {p}")
    if not p.is_dir():
        raise InvalidRootError(f"Working directory is not a directory: {p}")

    return p


def resolve_blame_path(repo_root: Path, file_path: str) -> str:
    """
    Repository-relative, forward-slash form of `file_path` for `git blame`.
    Absolute paths and paths that leave `repo_root` (lexically or through a
    symlink) are rejected with InvalidPathError.
    """
    raw = (file_path or "").strip().replace("\\", "/")
    if not raw:
        raise InvalidPathError("Blame path is empty.")
    if PurePosixPath(raw).is_absolute() or PureWindowsPath(raw).drive:
        raise InvalidPathError(f"Blame path must be relative to the repository: {file_path!r}")

    rel = posixpath.normpath(raw)
    if rel == ".." or rel.startswith("../"):
        raise InvalidPathError(f"Blame path leaves the repository: {file_path!r}")

    real = (repo_root / rel).resolve()
    if real != repo_root and repo_root not in real.parents:
        raise InvalidPathError(f"Blame path leaves the repository: {file_path!r}")

    return rel
