"""Repository factory."""

import os
from pathlib import Path

from .config import CONTROL_DIR, DEFAULT_BRANCH, DEFAULT_STORAGE
from .repository import Repository
from .worktree import WorkingTree


def repository(
    path: str | os.PathLike = ".",
    storage: str = DEFAULT_STORAGE,
    *,
    control_dir: str = CONTROL_DIR,
    default_branch: str = DEFAULT_BRANCH,
) -> Repository:
    """Create a Repository over a working directory.

    Args:
        path: Working-tree root (default: current directory).
        storage: ``"files"`` (default) lays the control directory out
            as plain files (``objects/``, ``refs/heads/``, ``HEAD``,
            ``index``); ``"disk"`` keeps it in a diskcache database;
            ``"memory"`` keeps it in process (tests, scratch use).
        control_dir: Name of the control directory inside ``path``.
        default_branch: Branch created by ``init``.

    Returns:
        A ``Repository``. Call ``init()`` on it for a new repository.
    """
    root = Path(path)
    control = root / control_dir

    # Build backend
    if storage == "files":
        from .kv.files import Files

        backend = Files(control)
    elif storage == "disk":
        from .kv.disk import Disk

        backend = Disk(str(control))
    elif storage == "memory":
        from .kv.memory import Memory

        backend = Memory()
    else:
        raise ValueError(f"Unknown storage: {storage!r}")

    return Repository(
        backend, WorkingTree(root, control_dir), default_branch=default_branch
    )
