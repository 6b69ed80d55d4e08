"""Tests for the working tree."""

import pytest

from gitlite import WorkingTree


@pytest.fixture
def tree(tmp_path):
    return WorkingTree(tmp_path)


class TestTrackablePaths:
    @pytest.mark.parametrize("path", ["a.txt", "Makefile", "a..b"])
    def test_plain_names(self, tree, path):
        assert tree.is_trackable(path)

    @pytest.mark.parametrize(
        "path", ["", ".", "..", ".gitlite", "sub/f", "../x", ".gitlite/HEAD"]
    )
    def test_rejected(self, tree, path):
        assert not tree.is_trackable(path)

    def test_exists_false_for_nested_file(self, tree, tmp_path):
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "f").write_bytes(b"x")
        assert not tree.exists("sub/f")

    def test_write_refuses_control_dir(self, tree, tmp_path):
        with pytest.raises(ValueError):
            tree.write(".gitlite/HEAD", b"x")
        assert not (tmp_path / ".gitlite").exists()

    def test_custom_control_dir(self, tmp_path):
        assert not WorkingTree(tmp_path, ".vcs").is_trackable(".vcs")


class TestListFiles:
    def test_plain_files_only(self, tree, tmp_path):
        (tmp_path / "b.txt").write_bytes(b"b")
        (tmp_path / "a.txt").write_bytes(b"a")
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "f").write_bytes(b"f")
        assert tree.list_files() == ["a.txt", "b.txt"]

    def test_write_read_delete(self, tree):
        tree.write("a.txt", b"1")
        assert tree.read("a.txt") == b"1"
        tree.delete("a.txt")
        assert not tree.exists("a.txt")
