"""Stage: pending additions and removals between commits."""

import logging
import pickle

from .config import INDEX_KEY
from .kv.base import KVStore

logger = logging.getLogger(__name__)


class Stage:
    """The index record.

    ``added`` maps path -> staged blob hash; ``removed`` holds paths
    staged for deletion. A path is never in both. The stage is Clean
    when both are empty.
    """

    def __init__(
        self,
        added: dict[str, str] | None = None,
        removed: set[str] | None = None,
    ) -> None:
        self.added: dict[str, str] = dict(added or {})
        self.removed: set[str] = set(removed or ())

    # -- Persistence --

    @classmethod
    def load(cls, store: KVStore) -> "Stage":
        raw = store.get(INDEX_KEY)
        if raw is None:
            return cls()
        record = pickle.loads(raw)
        return cls(record["added"], record["removed"])

    def save(self, store: KVStore) -> None:
        record = {"added": dict(sorted(self.added.items())), "removed": sorted(self.removed)}
        store.set(INDEX_KEY, pickle.dumps(record))
        logger.debug(
            "Saved stage: %d added, %d removed", len(self.added), len(self.removed)
        )

    # -- Transitions --

    def add(self, path: str, blob: str) -> None:
        """Stage a path for addition, undoing a pending removal."""
        self.removed.discard(path)
        self.added[path] = blob

    def drop_addition(self, path: str) -> None:
        """Forget a pending addition; a pending removal stays."""
        self.added.pop(path, None)

    def remove(self, path: str) -> None:
        """Stage a path for removal, undoing a pending addition."""
        self.added.pop(path, None)
        self.removed.add(path)

    def clear(self) -> None:
        self.added.clear()
        self.removed.clear()

    @property
    def is_clean(self) -> bool:
        return not (self.added or self.removed)

    def apply(self, snapshot: dict[str, str]) -> dict[str, str]:
        """Return snapshot overlaid with staged additions and removals."""
        result = dict(snapshot)
        result.update(self.added)
        for path in self.removed:
            result.pop(path, None)
        return dict(sorted(result.items()))

    def __repr__(self) -> str:
        return f"Stage(added={self.added!r}, removed={sorted(self.removed)!r})"
