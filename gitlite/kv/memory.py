"""In-memory KV store."""

from typing import Iterable

from .base import KVStore, check_bytes


class Memory(KVStore):
    """A memory-backed KV store."""

    def __init__(self) -> None:
        self.memory: dict[str, bytes] = {}

    def get(self, key: str) -> bytes | None:
        return self.memory.get(key)

    def set(self, key: str, value: bytes) -> None:
        check_bytes(key, value)
        self.memory[key] = value

    def keys(self, prefix: str = "") -> Iterable[str]:
        return sorted(k for k in self.memory if k.startswith(prefix))

    def __contains__(self, key: str) -> bool:
        return key in self.memory

    def remove(self, key: str) -> None:
        self.memory.pop(key, None)
