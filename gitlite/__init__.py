"""gitlite: a local, single-user version-control engine."""

from .errors import (
    AlreadyExists,
    GitliteError,
    InvalidState,
    NotFound,
    NothingToCommit,
    NotInitialized,
    SelfMerge,
    UncommittedChanges,
    UntrackedObstruction,
    UsageError,
)
from .graph import CommitGraph
from .kv.base import KVStore
from .merge import MergeResult
from .objects import Commit, ObjectStore, blob_hash
from .refs import Refs
from .repository import Repository, Status
from .stage import Stage
from .store import repository
from .worktree import WorkingTree

__all__ = [
    "AlreadyExists",
    "Commit",
    "CommitGraph",
    "GitliteError",
    "InvalidState",
    "KVStore",
    "MergeResult",
    "NotFound",
    "NotInitialized",
    "NothingToCommit",
    "ObjectStore",
    "Refs",
    "Repository",
    "SelfMerge",
    "Stage",
    "Status",
    "UncommittedChanges",
    "UntrackedObstruction",
    "UsageError",
    "WorkingTree",
    "blob_hash",
    "repository",
]
