"""Abstract KV store interface."""

from abc import ABC, abstractmethod
from typing import Iterable


class KVStore(ABC):
    """Key-value store operating on bytes only.

    Keys are ``/``-separated names relative to the repository's
    control directory (``HEAD``, ``objects/<hash>``,
    ``refs/heads/<branch>``). Serialization is handled at higher
    layers.
    """

    @abstractmethod
    def get(self, key: str) -> bytes | None:
        """Get bytes value for key, or None if not found."""

    @abstractmethod
    def set(self, key: str, value: bytes) -> None:
        """Set bytes value for key."""

    @abstractmethod
    def keys(self, prefix: str = "") -> Iterable[str]:
        """Iterate over all keys starting with prefix, in sorted order."""

    @abstractmethod
    def __contains__(self, key: str) -> bool:
        """Check if key exists in store."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Remove a key if present."""

    def close(self) -> None:
        """Release any handle the backend holds open."""


def check_bytes(key: str, value: object) -> None:
    if not isinstance(value, bytes):
        raise TypeError(f"Expected bytes for {key}, got {type(value).__name__}")
