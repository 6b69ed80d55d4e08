import pytest

from gitlite import Repository, WorkingTree
from gitlite.kv.memory import Memory


@pytest.fixture
def repo(tmp_path):
    r = Repository(Memory(), WorkingTree(tmp_path))
    r.init()
    return r


@pytest.fixture
def work(tmp_path):
    """Write a working-tree file: ``work("a.txt", b"1")``."""

    def write(name: str, content: bytes) -> None:
        (tmp_path / name).write_bytes(content)

    return write
