"""Working tree: the user's files next to the control directory."""

import logging
import os
from pathlib import Path

from .config import CONTROL_DIR

logger = logging.getLogger(__name__)


class WorkingTree:
    """Plain-file access to the directory under version control.

    Only regular files directly inside ``root`` are tracked. A path with
    a separator, ``.``/``..``, or the control directory's name is never
    a working file: ``exists`` reports it missing and ``list_files``
    never returns it.
    """

    def __init__(
        self, root: str | os.PathLike, control_dir: str = CONTROL_DIR
    ) -> None:
        self.root = Path(root)
        self.control_dir = control_dir

    def is_trackable(self, path: str) -> bool:
        """True if path names a file directly inside the root."""
        if not path or path in (".", "..", self.control_dir):
            return False
        return "/" not in path and os.sep not in path

    def _path(self, path: str) -> Path:
        if not self.is_trackable(path):
            raise ValueError(f"Not a working-tree file name: {path!r}")
        return self.root / path

    def exists(self, path: str) -> bool:
        return self.is_trackable(path) and self._path(path).is_file()

    def read(self, path: str) -> bytes:
        return self._path(path).read_bytes()

    def write(self, path: str, content: bytes) -> None:
        target = self._path(path)
        self.root.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
        logger.debug("Wrote working file %s", path)

    def delete(self, path: str) -> None:
        target = self._path(path)
        if target.is_file():
            target.unlink()
            logger.debug("Deleted working file %s", path)

    def list_files(self) -> list[str]:
        """Names of the plain files in the tree root, sorted."""
        if not self.root.is_dir():
            return []
        return sorted(
            p.name
            for p in self.root.iterdir()
            if p.is_file() and self.is_trackable(p.name)
        )
