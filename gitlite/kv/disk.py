"""Disk-backed KV store using diskcache."""

from typing import Iterable, cast

from .base import KVStore, check_bytes

ONE_GB = 1024 * 1024 * 1024


class Disk(KVStore):
    """KV store backed by diskcache (SQLite + mmap).

    Holds the whole control directory in one cache, so objects, refs
    and the index share a single SQLite file instead of a file tree.
    """

    def __init__(self, directory: str, size_limit: int = ONE_GB) -> None:
        from diskcache import Cache as DiskCache

        # Objects are write-once; eviction would lose history.
        self.store = DiskCache(
            directory, size_limit=size_limit, eviction_policy="none"
        )

    def get(self, key: str) -> bytes | None:
        return cast(bytes | None, self.store.get(key))

    def set(self, key: str, value: bytes) -> None:
        check_bytes(key, value)
        self.store[key] = value

    def keys(self, prefix: str = "") -> Iterable[str]:
        return sorted(
            str(key) for key in self.store.iterkeys() if str(key).startswith(prefix)
        )

    def __contains__(self, key: str) -> bool:
        return key in self.store

    def remove(self, key: str) -> None:
        try:
            del self.store[key]
        except KeyError:
            pass

    def close(self) -> None:
        self.store.close()
