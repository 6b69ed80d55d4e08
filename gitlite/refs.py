"""Branch pointers and HEAD."""

import logging

from .config import HASH_LENGTH, HEAD_KEY, HEADS_PREFIX, SYMREF_PREFIX
from .errors import AlreadyExists, InvalidState, NotFound, UsageError
from .kv.base import KVStore

logger = logging.getLogger(__name__)


class Refs:
    """Mutable pointers into the commit graph.

    HEAD holds either ``ref: refs/heads/<branch>`` or a raw commit hash
    (detached). Branch records hold a commit hash.
    """

    def __init__(self, store: KVStore) -> None:
        self.store = store

    # -- Branches --

    @staticmethod
    def is_valid_name(name: str) -> bool:
        """A branch name is one path component that does not start with a dot."""
        if not name or name.startswith("."):
            return False
        return "/" not in name and "\\" not in name

    def branches(self) -> list[str]:
        """List all branch names, sorted."""
        return [k[len(HEADS_PREFIX):] for k in self.store.keys(HEADS_PREFIX)]

    def has_branch(self, name: str) -> bool:
        return self.is_valid_name(name) and (HEADS_PREFIX + name) in self.store

    def branch_commit(self, name: str) -> str:
        raw = None
        if self.is_valid_name(name):
            raw = self.store.get(HEADS_PREFIX + name)
        if raw is None:
            raise NotFound("A branch with that name does not exist.")
        return raw.decode().strip()

    def set_branch(self, name: str, commit_hash: str) -> None:
        if not self.is_valid_name(name):
            raise UsageError("Invalid branch name.")
        self.store.set(HEADS_PREFIX + name, commit_hash.encode())
        logger.debug("Branch %s -> %s", name, commit_hash)

    def create_branch(self, name: str, commit_hash: str) -> None:
        if not self.is_valid_name(name):
            raise UsageError("Invalid branch name.")
        if self.has_branch(name):
            raise AlreadyExists("A branch with that name already exists.")
        self.set_branch(name, commit_hash)
        logger.info("Created branch %s at %s", name, commit_hash)

    def delete_branch(self, name: str) -> None:
        if not self.has_branch(name):
            raise NotFound("A branch with that name does not exist.")
        if name == self.current_branch():
            raise InvalidState("Cannot remove the current branch.")
        self.store.remove(HEADS_PREFIX + name)
        logger.info("Removed branch %s", name)

    # -- HEAD --

    def _head(self) -> str:
        raw = self.store.get(HEAD_KEY)
        if raw is None:
            raise NotFound("HEAD is missing.")
        return raw.decode().strip()

    def current_branch(self) -> str | None:
        """Name of the checked-out branch, or None when detached."""
        head = self._head()
        if head.startswith(SYMREF_PREFIX):
            return head[len(SYMREF_PREFIX):].removeprefix(HEADS_PREFIX)
        return None

    def head_commit(self) -> str:
        branch = self.current_branch()
        if branch is None:
            return self._head()
        return self.branch_commit(branch)

    def attach_head(self, branch: str) -> None:
        self.store.set(HEAD_KEY, f"{SYMREF_PREFIX}{HEADS_PREFIX}{branch}".encode())
        logger.debug("HEAD -> %s", branch)

    def detach_head(self, commit_hash: str) -> None:
        if len(commit_hash) != HASH_LENGTH:
            raise ValueError(f"Not a full commit hash: {commit_hash!r}")
        self.store.set(HEAD_KEY, commit_hash.encode())
        logger.debug("HEAD detached at %s", commit_hash)

    def advance(self, commit_hash: str) -> None:
        """Move whatever HEAD points at (branch or detached) to commit_hash."""
        branch = self.current_branch()
        if branch is None:
            self.detach_head(commit_hash)
        else:
            self.set_branch(branch, commit_hash)
