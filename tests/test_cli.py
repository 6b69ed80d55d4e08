"""Tests for the command line front end."""

import re

import pytest
from click.testing import CliRunner

from gitlite.cli import format_date, main


@pytest.fixture
def run(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("GITLITE_STORAGE", raising=False)
    runner = CliRunner()

    def invoke(*args):
        return runner.invoke(main, list(args))

    return invoke


@pytest.fixture
def initialized(run):
    assert run("init").exit_code == 0
    return run


def log_hashes(output):
    return re.findall(r"^commit ([0-9a-f]{40})$", output, re.MULTILINE)


class TestDispatch:
    def test_no_command(self, run):
        result = run()
        assert result.exit_code == 1
        assert "Please enter a command." in result.output

    def test_unknown_command(self, run):
        result = run("push")
        assert result.exit_code == 1
        assert "No command with that name exists." in result.output

    def test_incorrect_operands(self, initialized):
        result = initialized("log", "extra")
        assert result.exit_code == 1
        assert "Incorrect operands." in result.output

    def test_checkout_bad_shape(self, initialized):
        result = initialized("checkout", "a", "b")
        assert "Incorrect operands." in result.output

    def test_not_initialized(self, run):
        result = run("status")
        assert result.exit_code == 1
        assert "Not in an initialized Gitlite directory." in result.output

    def test_init_twice(self, initialized):
        result = initialized("init")
        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_commit_without_message(self, initialized):
        assert "Please enter a commit message." in initialized("commit").output
        assert "Please enter a commit message." in initialized("commit", "").output

    def test_commit_extra_operand(self, initialized):
        assert "Incorrect operands." in initialized("commit", "m", "x").output

    @pytest.mark.parametrize("name", ["..", "", ".hidden", "a/b"])
    def test_invalid_branch_name(self, initialized, name):
        result = initialized("branch", name)
        assert result.exit_code == 1
        assert result.output == "Invalid branch name.\n"
        assert isinstance(result.exception, SystemExit)

    def test_checkout_invalid_branch_name(self, initialized):
        result = initialized("checkout", "..")
        assert result.exit_code == 1
        assert "No such branch exists." in result.output

    def test_add_control_file(self, initialized, tmp_path):
        result = initialized("add", ".gitlite/HEAD")
        assert result.exit_code == 1
        assert "File does not exist." in result.output


class TestLogOutput:
    def test_init_then_log(self, initialized):
        result = initialized("log")
        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines[0] == "==="
        assert lines[1].startswith("commit ")
        assert lines[2] == f"Date: {format_date(0)}"
        assert lines[3] == "initial commit"
        assert len(log_hashes(result.output)) == 1
        assert "Merge:" not in result.output

    def test_date_format(self):
        assert re.fullmatch(
            r"\w{3} \w{3} \d{1,2} \d\d:\d\d:\d\d \d{4} [+-]\d{4}", format_date(0)
        )

    def test_commit_and_find(self, initialized, tmp_path):
        (tmp_path / "a.txt").write_text("hello")
        assert initialized("add", "a.txt").exit_code == 0
        assert initialized("commit", "add a").exit_code == 0
        hashes = log_hashes(initialized("log").output)
        assert len(hashes) == 2
        assert initialized("find", "add a").output.strip() == hashes[0]
        assert len(log_hashes(initialized("global-log").output)) == 2

    def test_find_missing(self, initialized):
        assert "Found no commit with that message." in initialized("find", "x").output

    def test_merge_line(self, initialized, tmp_path):
        (tmp_path / "A").write_text("1")
        initialized("add", "A")
        initialized("commit", "A")
        initialized("branch", "given")
        (tmp_path / "M").write_text("m")
        initialized("add", "M")
        initialized("commit", "M")
        initialized("checkout", "given")
        (tmp_path / "G").write_text("g")
        initialized("add", "G")
        initialized("commit", "G")
        initialized("checkout", "master")

        assert initialized("merge", "given").exit_code == 0
        output = initialized("log").output
        assert re.search(r"^Merge: [0-9a-f]{7} [0-9a-f]{7}$", output, re.MULTILINE)
        assert "Merged given into master." in output


class TestStatusOutput:
    def test_layout(self, initialized, tmp_path):
        initialized("branch", "dev")
        (tmp_path / "a.txt").write_text("a")
        initialized("add", "a.txt")
        (tmp_path / "b.txt").write_text("b")
        output = initialized("status").output
        assert output == (
            "=== Branches ===\n"
            "dev\n"
            "*master\n"
            "\n"
            "=== Staged Files ===\n"
            "a.txt\n"
            "\n"
            "=== Removed Files ===\n"
            "\n"
            "=== Modifications Not Staged For Commit ===\n"
            "\n"
            "=== Untracked Files ===\n"
            "b.txt\n"
            "\n"
        )


class TestCheckoutAndMerge:
    def test_checkout_file_forms(self, initialized, tmp_path):
        (tmp_path / "a.txt").write_text("v1")
        initialized("add", "a.txt")
        initialized("commit", "v1")
        first = log_hashes(initialized("log").output)[0]
        (tmp_path / "a.txt").write_text("v2")
        initialized("add", "a.txt")
        initialized("commit", "v2")

        (tmp_path / "a.txt").write_text("dirty")
        assert initialized("checkout", "--", "a.txt").exit_code == 0
        assert (tmp_path / "a.txt").read_text() == "v2"

        assert initialized("checkout", first[:7], "--", "a.txt").exit_code == 0
        assert (tmp_path / "a.txt").read_text() == "v1"

    def test_conflict_message(self, initialized, tmp_path):
        (tmp_path / "A").write_text("1")
        initialized("add", "A")
        initialized("commit", "A=1")
        initialized("branch", "given")
        (tmp_path / "A").write_text("2")
        initialized("add", "A")
        initialized("commit", "A=2")
        initialized("checkout", "given")
        (tmp_path / "A").write_text("3")
        initialized("add", "A")
        initialized("commit", "A=3")
        initialized("checkout", "master")

        result = initialized("merge", "given")
        assert result.exit_code == 0
        assert "Encountered a merge conflict." in result.output
        assert (tmp_path / "A").read_text() == "<<<<<<< HEAD\n2\n=======\n3\n>>>>>>>\n"

    def test_fast_forward_message(self, initialized, tmp_path):
        initialized("branch", "given")
        initialized("checkout", "given")
        (tmp_path / "A").write_text("1")
        initialized("add", "A")
        initialized("commit", "A")
        initialized("checkout", "master")
        assert "Current branch fast-forwarded." in initialized("merge", "given").output

    def test_ancestor_message(self, initialized, tmp_path):
        initialized("branch", "given")
        (tmp_path / "A").write_text("1")
        initialized("add", "A")
        initialized("commit", "A")
        output = initialized("merge", "given").output
        assert "Given branch is an ancestor of the current branch." in output

    def test_rm_branch_current(self, initialized, tmp_path):
        result = initialized("rm-branch", "master")
        assert result.exit_code == 1
        assert "Cannot remove the current branch." in result.output
        assert (tmp_path / ".gitlite" / "refs" / "heads" / "master").is_file()

    def test_reset(self, initialized, tmp_path):
        root = log_hashes(initialized("log").output)[0]
        (tmp_path / "A").write_text("1")
        initialized("add", "A")
        initialized("commit", "A")
        assert initialized("reset", root).exit_code == 0
        assert not (tmp_path / "A").exists()
        assert log_hashes(initialized("log").output) == [root]


class TestDiskStorage:
    def test_commands_on_diskcache(self, run, tmp_path, monkeypatch):
        monkeypatch.setenv("GITLITE_STORAGE", "disk")
        assert run("init").exit_code == 0
        (tmp_path / "a.txt").write_text("a")
        assert run("add", "a.txt").exit_code == 0
        assert run("commit", "add a").exit_code == 0
        assert len(log_hashes(run("log").output)) == 2

    def test_store_closed_after_each_command(self, run, monkeypatch):
        from gitlite.kv.disk import Disk

        closed = []
        original = Disk.close

        def close(self):
            closed.append(self)
            original(self)

        monkeypatch.setenv("GITLITE_STORAGE", "disk")
        monkeypatch.setattr(Disk, "close", close)
        assert run("init").exit_code == 0
        assert run("branch", "..").exit_code == 1
        assert len(closed) == 2
