"""Commit graph: prefix resolution, ancestry and merge-base search."""

from collections import deque
from typing import Iterator

from .config import HASH_LENGTH
from .errors import NotFound
from .objects import Commit, ObjectStore


class CommitGraph:
    """Read-only view of the history DAG stored in an ObjectStore.

    Traversals use explicit queues, so history depth is bounded only by
    memory.
    """

    def __init__(self, objects: ObjectStore) -> None:
        self.objects = objects

    def get(self, commit_hash: str) -> Commit:
        return self.objects.get_commit(commit_hash)

    def resolve(self, hash_or_prefix: str) -> str:
        """Expand a full or abbreviated commit id to a full hash.

        Raises NotFound when nothing matches, when the prefix is
        ambiguous, or when a full-length id names no commit.
        """
        missing = NotFound("No commit with that id exists.")
        if not hash_or_prefix:
            raise missing
        if len(hash_or_prefix) == HASH_LENGTH:
            if not self.objects.exists(hash_or_prefix):
                raise missing
            self.objects.get_commit(hash_or_prefix)
            return hash_or_prefix

        matches = [
            h for h in self.objects.list_commits() if h.startswith(hash_or_prefix)
        ]
        if len(matches) != 1:
            raise missing
        return matches[0]

    def parents(self, commit_hash: str) -> tuple[str, ...]:
        return self.get(commit_hash).parents

    def ancestors(self, commit_hash: str) -> set[str]:
        """All commits reachable from commit_hash, itself included."""
        seen: set[str] = {commit_hash}
        queue: deque[str] = deque([commit_hash])
        while queue:
            current = queue.popleft()
            for p in self.parents(current):
                if p not in seen:
                    seen.add(p)
                    queue.append(p)
        return seen

    def merge_base(self, commit_a: str, commit_b: str) -> str | None:
        """Find the split point of two commits.

        Collects every ancestor of commit_a, then walks breadth-first
        from commit_b (primary parent before second parent) and returns
        the first commit already in that set.
        """
        ancestors_a = self.ancestors(commit_a)

        visited: set[str] = set()
        queue: deque[str] = deque([commit_b])
        while queue:
            current = queue.popleft()
            if current in ancestors_a:
                return current
            if current in visited:
                continue
            visited.add(current)
            for p in self.parents(current):
                if p not in visited:
                    queue.append(p)
        return None

    def walk(self, commit_hash: str) -> Iterator[tuple[str, Commit]]:
        """Yield ``(hash, commit)`` along primary parents down to the root."""
        current: str | None = commit_hash
        while current is not None:
            commit = self.get(current)
            yield current, commit
            current = commit.parent
