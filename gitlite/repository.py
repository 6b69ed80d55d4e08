"""Repository: the context object every command runs against."""

import logging
from dataclasses import dataclass
from typing import Iterator

from .config import DEFAULT_BRANCH, HEAD_KEY, INITIAL_MESSAGE
from .errors import (
    AlreadyExists,
    InvalidState,
    NotFound,
    NotInitialized,
    NothingToCommit,
    UntrackedObstruction,
    UsageError,
)
from .graph import CommitGraph
from .kv.base import KVStore
from .merge import MergeResult, merge
from .objects import Commit, ObjectStore, blob_hash
from .refs import Refs
from .stage import Stage
from .worktree import WorkingTree

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Status:
    """Snapshot of branch, stage and working-tree state."""

    branches: tuple[str, ...]
    current_branch: str | None
    staged: tuple[str, ...]
    removed: tuple[str, ...]
    modified: tuple[str, ...]  # "path (modified)" / "path (deleted)"
    untracked: tuple[str, ...]


class Repository:
    """A version-controlled directory.

    Holds the control store (objects, refs, index) and the working
    tree. State is loaded from the store at the start of each command
    and written back at its end; nothing is cached between commands.

    Every command either returns a value or raises a ``GitliteError``
    before changing anything.
    """

    def __init__(
        self,
        store: KVStore,
        tree: WorkingTree,
        *,
        default_branch: str = DEFAULT_BRANCH,
    ) -> None:
        self.store = store
        self.tree = tree
        self.default_branch = default_branch
        self.objects = ObjectStore(store)
        self.graph = CommitGraph(self.objects)
        self.refs = Refs(store)

    # -- Setup --

    @property
    def is_initialized(self) -> bool:
        return HEAD_KEY in self.store

    def init(self) -> str:
        """Create the root commit and the default branch.

        Returns:
            The root commit hash.
        """
        if self.is_initialized:
            raise AlreadyExists(
                "A Gitlite version-control system already exists "
                "in the current directory."
            )
        root_hash = self.objects.put_commit(Commit.create(INITIAL_MESSAGE, None, {}))
        self.refs.set_branch(self.default_branch, root_hash)
        self.save_stage(Stage())
        self.refs.attach_head(self.default_branch)
        logger.info("Initialized repository on %s at %s", self.default_branch, root_hash)
        return root_hash

    def close(self) -> None:
        self.store.close()

    def _require_init(self) -> None:
        if not self.is_initialized:
            raise NotInitialized("Not in an initialized Gitlite directory.")

    # -- State access --

    def load_stage(self) -> Stage:
        return Stage.load(self.store)

    def save_stage(self, stage: Stage) -> None:
        stage.save(self.store)

    def head_commit(self) -> Commit:
        return self.graph.get(self.refs.head_commit())

    def current_branch(self) -> str | None:
        self._require_init()
        return self.refs.current_branch()

    # -- Staging --

    def add(self, path: str) -> None:
        """Stage a working-tree file for the next commit."""
        self._require_init()
        if not self.tree.exists(path):
            raise NotFound("File does not exist.")
        content = self.tree.read(path)
        stage = self.load_stage()
        if self.head_commit().snapshot.get(path) == blob_hash(content):
            stage.drop_addition(path)
        else:
            stage.add(path, self.objects.put_blob(content))
        self.save_stage(stage)

    def rm(self, path: str) -> None:
        """Unstage a file, and stage it for removal if HEAD tracks it."""
        self._require_init()
        stage = self.load_stage()
        staged = path in stage.added
        tracked = path in self.head_commit().snapshot
        if not staged and not tracked:
            raise NotFound("No reason to remove the file.")
        stage.drop_addition(path)
        if tracked:
            stage.remove(path)
            self.tree.delete(path)
        self.save_stage(stage)

    def commit(self, message: str) -> str:
        """Record the staged changes on top of HEAD.

        Returns:
            The new commit hash.
        """
        self._require_init()
        if not message:
            raise UsageError("Please enter a commit message.")
        stage = self.load_stage()
        if stage.is_clean:
            raise NothingToCommit("No changes added to the commit.")
        head_hash = self.refs.head_commit()
        head = self.graph.get(head_hash)
        new_hash = self.objects.put_commit(
            Commit.create(message, head_hash, stage.apply(head.snapshot))
        )
        self.refs.advance(new_hash)
        stage.clear()
        self.save_stage(stage)
        logger.info("Committed %s: %s", new_hash, message)
        return new_hash

    # -- History --

    def log(self) -> Iterator[tuple[str, Commit]]:
        """First-parent history from HEAD, newest first."""
        self._require_init()
        return self.graph.walk(self.refs.head_commit())

    def global_log(self) -> Iterator[tuple[str, Commit]]:
        """Every commit ever made, ordered by hash."""
        self._require_init()
        return self.objects.commits()

    def find(self, message: str) -> list[str]:
        """Hashes of all commits whose message equals message."""
        self._require_init()
        found = [h for h, c in self.objects.commits() if c.message == message]
        if not found:
            raise NotFound("Found no commit with that message.")
        return found

    def status(self) -> Status:
        self._require_init()
        stage = self.load_stage()
        head = self.head_commit().snapshot
        files = set(self.tree.list_files())

        modified: dict[str, str] = {}
        for path, tracked_hash in head.items():
            if path in stage.added or path in stage.removed:
                continue
            if path not in files:
                modified[path] = "deleted"
            elif blob_hash(self.tree.read(path)) != tracked_hash:
                modified[path] = "modified"
        for path, staged_hash in stage.added.items():
            if path not in files:
                modified[path] = "deleted"
            elif blob_hash(self.tree.read(path)) != staged_hash:
                modified[path] = "modified"

        untracked = [
            path
            for path in files
            if path not in stage.added and (path not in head or path in stage.removed)
        ]
        return Status(
            branches=tuple(self.refs.branches()),
            current_branch=self.refs.current_branch(),
            staged=tuple(sorted(stage.added)),
            removed=tuple(sorted(stage.removed)),
            modified=tuple(f"{p} ({kind})" for p, kind in sorted(modified.items())),
            untracked=tuple(sorted(untracked)),
        )

    # -- Checkout / restore --

    def check_untracked(
        self, current: dict[str, str], target: dict[str, str]
    ) -> None:
        """Refuse to clobber files the current commit does not track."""
        blocked = {
            path
            for path in self.tree.list_files()
            if path not in current and path in target
        }
        if blocked:
            raise UntrackedObstruction(blocked)

    def restore(self, target_hash: str) -> None:
        """Make the working tree match target_hash's snapshot."""
        current = self.head_commit().snapshot
        target = self.graph.get(target_hash).snapshot
        self.check_untracked(current, target)
        for path in current:
            if path not in target:
                self.tree.delete(path)
        for path, blob in target.items():
            self.tree.write(path, self.objects.get_blob(blob))

    def checkout_file(self, path: str, commit_id: str | None = None) -> None:
        """Overwrite one working file with its version in a commit.

        Uses HEAD when commit_id is None. The stage is not touched.
        """
        self._require_init()
        if commit_id is None:
            commit_hash = self.refs.head_commit()
        else:
            commit_hash = self.graph.resolve(commit_id)
        snapshot = self.graph.get(commit_hash).snapshot
        if path not in snapshot:
            raise NotFound("File does not exist in that commit.")
        self.tree.write(path, self.objects.get_blob(snapshot[path]))

    def checkout_branch(self, name: str) -> None:
        self._require_init()
        if not self.refs.has_branch(name):
            raise NotFound("No such branch exists.")
        if name == self.refs.current_branch():
            raise InvalidState("No need to checkout the current branch.")
        self.restore(self.refs.branch_commit(name))
        self.refs.attach_head(name)
        self.save_stage(Stage())
        logger.info("Switched to branch %s", name)

    def reset(self, commit_id: str) -> str:
        """Move the current branch to a commit and restore its files.

        Returns:
            The full hash that was checked out.
        """
        self._require_init()
        target = self.graph.resolve(commit_id)
        self.restore(target)
        self.refs.advance(target)
        self.save_stage(Stage())
        logger.info("Reset to %s", target)
        return target

    # -- Branches --

    def branch(self, name: str) -> None:
        self._require_init()
        self.refs.create_branch(name, self.refs.head_commit())

    def rm_branch(self, name: str) -> None:
        self._require_init()
        self.refs.delete_branch(name)

    def merge(self, branch: str) -> MergeResult:
        self._require_init()
        return merge(self, branch)
