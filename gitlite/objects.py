"""Content-addressed object store for commits and blobs."""

import hashlib
import json
import logging
import time
from dataclasses import dataclass, field
from typing import Iterator

from .config import OBJECTS_PREFIX
from .errors import NotFound
from .kv.base import KVStore

logger = logging.getLogger(__name__)

BLOB = "blob"
COMMIT = "commit"
KINDS = (BLOB, COMMIT)


def _frame(kind: str, payload: bytes) -> bytes:
    return kind.encode() + b"\0" + payload


def object_hash(data: bytes) -> str:
    """SHA-1 hex digest of a framed object."""
    return hashlib.sha1(data).hexdigest()


def blob_hash(content: bytes) -> str:
    """The hash ``content`` gets when stored as a blob."""
    return object_hash(_frame(BLOB, content))


@dataclass(frozen=True)
class Commit:
    """An immutable history node.

    ``snapshot`` maps every tracked path to its blob hash. The
    serialized form sorts the snapshot, so two commits built from the
    same mapping in different insertion orders share one hash.
    """

    message: str
    parent: str | None
    snapshot: dict[str, str] = field(default_factory=dict)
    second_parent: str | None = None
    timestamp: int = 0

    @classmethod
    def create(
        cls,
        message: str,
        parent: str | None,
        snapshot: dict[str, str],
        second_parent: str | None = None,
    ) -> "Commit":
        """Build a commit stamped with the current time (epoch for roots)."""
        timestamp = 0 if parent is None else int(time.time())
        return cls(message, parent, dict(snapshot), second_parent, timestamp)

    @property
    def parents(self) -> tuple[str, ...]:
        return tuple(p for p in (self.parent, self.second_parent) if p is not None)

    @property
    def is_merge(self) -> bool:
        return self.second_parent is not None

    @property
    def hash(self) -> str:
        return object_hash(_frame(COMMIT, self.serialize()))

    def serialize(self) -> bytes:
        record = {
            "message": self.message,
            "parent": self.parent,
            "second_parent": self.second_parent,
            "snapshot": self.snapshot,
            "timestamp": self.timestamp,
        }
        return json.dumps(
            record, sort_keys=True, separators=(",", ":"), ensure_ascii=False
        ).encode("utf-8")

    @classmethod
    def deserialize(cls, data: bytes) -> "Commit":
        record = json.loads(data.decode("utf-8"))
        return cls(
            message=record["message"],
            parent=record["parent"],
            snapshot=dict(record["snapshot"]),
            second_parent=record["second_parent"],
            timestamp=record["timestamp"],
        )


class ObjectStore:
    """Write-once storage of tagged objects keyed by content hash.

    Each record is ``<kind> NUL <payload>``; the hash covers the whole
    record. Commits and blobs share one namespace.
    """

    def __init__(self, store: KVStore) -> None:
        self.store = store

    # -- Raw objects --

    def put(self, kind: str, payload: bytes) -> str:
        """Store an object if absent and return its hash."""
        if kind not in KINDS:
            raise ValueError(f"Unknown object kind: {kind!r}")
        data = _frame(kind, payload)
        obj_hash = object_hash(data)
        key = OBJECTS_PREFIX + obj_hash
        if key not in self.store:
            self.store.set(key, data)
            logger.debug("Stored %s %s", kind, obj_hash)
        return obj_hash

    def get(self, obj_hash: str) -> tuple[str, bytes]:
        """Return ``(kind, payload)`` for a stored object."""
        data = self.store.get(OBJECTS_PREFIX + obj_hash)
        if data is None:
            raise NotFound(f"No object with id {obj_hash} exists.")
        kind, sep, payload = data.partition(b"\0")
        if not sep:
            raise ValueError(f"Corrupt object {obj_hash}: missing type tag")
        return kind.decode(), payload

    def exists(self, obj_hash: str) -> bool:
        return (OBJECTS_PREFIX + obj_hash) in self.store

    def kind(self, obj_hash: str) -> str:
        return self.get(obj_hash)[0]

    def list_all(self) -> list[str]:
        """Every stored object hash, sorted."""
        return [k[len(OBJECTS_PREFIX):] for k in self.store.keys(OBJECTS_PREFIX)]

    def list_commits(self) -> list[str]:
        """Every stored commit hash, sorted. Blobs are skipped by tag."""
        return [h for h in self.list_all() if self.kind(h) == COMMIT]

    # -- Typed access --

    def put_blob(self, content: bytes) -> str:
        return self.put(BLOB, content)

    def get_blob(self, obj_hash: str) -> bytes:
        kind, payload = self.get(obj_hash)
        if kind != BLOB:
            raise NotFound(f"Object {obj_hash} is not a blob.")
        return payload

    def put_commit(self, commit: Commit) -> str:
        return self.put(COMMIT, commit.serialize())

    def get_commit(self, obj_hash: str) -> Commit:
        kind, payload = self.get(obj_hash)
        if kind != COMMIT:
            raise NotFound("No commit with that id exists.")
        return Commit.deserialize(payload)

    def commits(self) -> Iterator[tuple[str, Commit]]:
        """Yield ``(hash, commit)`` for every stored commit, sorted by hash."""
        for obj_hash in self.list_commits():
            yield obj_hash, self.get_commit(obj_hash)
