"""Filesystem KV store: one plain file per key."""

import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable

from .base import KVStore, check_bytes

logger = logging.getLogger(__name__)

_TMP_PREFIX = ".tmp-"


class Files(KVStore):
    """KV store laid out as a directory tree.

    Key ``refs/heads/master`` lives at ``<root>/refs/heads/master``.
    Every write lands in a temporary sibling first and is moved into
    place with ``os.replace``, so readers only ever see a complete
    record under the final name.
    """

    def __init__(self, root: str | os.PathLike) -> None:
        self.root = Path(root)

    def _path(self, key: str) -> Path:
        if not key or key.startswith("/") or ".." in key.split("/"):
            raise ValueError(f"Invalid key: {key!r}")
        return self.root.joinpath(*key.split("/"))

    def get(self, key: str) -> bytes | None:
        path = self._path(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None

    def set(self, key: str, value: bytes) -> None:
        check_bytes(key, value)
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=_TMP_PREFIX, dir=path.parent)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(value)
            os.replace(tmp, path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
        logger.debug("Wrote %s (%d bytes)", key, len(value))

    def keys(self, prefix: str = "") -> Iterable[str]:
        if not self.root.is_dir():
            return []
        found = []
        for dirpath, _, filenames in os.walk(self.root):
            rel = Path(dirpath).relative_to(self.root)
            for name in filenames:
                if name.startswith(_TMP_PREFIX):
                    continue
                key = "/".join((*rel.parts, name))
                if key.startswith(prefix):
                    found.append(key)
        return sorted(found)

    def __contains__(self, key: str) -> bool:
        return self._path(key).is_file()

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)
