"""Tests for commit-graph traversal and resolution."""

import pytest

from gitlite import Commit, CommitGraph, NotFound, ObjectStore
from gitlite.kv.memory import Memory


@pytest.fixture
def graph():
    return CommitGraph(ObjectStore(Memory()))


def add(graph, message, parent=None, second_parent=None):
    commit = Commit(message, parent, {}, second_parent, timestamp=0 if parent is None else 1)
    return graph.objects.put_commit(commit)


class TestResolve:
    def test_full_hash(self, graph):
        root = add(graph, "root")
        assert graph.resolve(root) == root

    def test_unique_prefix(self, graph):
        root = add(graph, "root")
        assert graph.resolve(root[:6]) == root

    def test_unknown_full_hash(self, graph):
        add(graph, "root")
        with pytest.raises(NotFound, match="No commit with that id exists"):
            graph.resolve("0" * 40)

    def test_unknown_prefix(self, graph):
        root = add(graph, "root")
        missing = "0" if not root.startswith("0") else "f"
        with pytest.raises(NotFound):
            graph.resolve(missing * 8)

    def test_ambiguous_prefix(self, graph):
        for i in range(40):
            add(graph, f"c{i}")
        # With 40 commits some single hex digit is shared by several.
        firsts = [h[0] for h in graph.objects.list_commits()]
        shared = next(d for d in firsts if firsts.count(d) > 1)
        with pytest.raises(NotFound):
            graph.resolve(shared)

    def test_empty_prefix(self, graph):
        add(graph, "root")
        with pytest.raises(NotFound):
            graph.resolve("")

    def test_blob_prefix_does_not_resolve(self, graph):
        blob = graph.objects.put_blob(b"content")
        with pytest.raises(NotFound):
            graph.resolve(blob)


class TestAncestors:
    def test_includes_start(self, graph):
        root = add(graph, "root")
        assert graph.ancestors(root) == {root}

    def test_linear(self, graph):
        root = add(graph, "root")
        a = add(graph, "a", root)
        b = add(graph, "b", a)
        assert graph.ancestors(b) == {root, a, b}

    def test_follows_second_parent(self, graph):
        root = add(graph, "root")
        left = add(graph, "left", root)
        right = add(graph, "right", root)
        merge = add(graph, "merge", left, right)
        assert graph.ancestors(merge) == {root, left, right, merge}

    def test_long_history(self, graph):
        current = add(graph, "root")
        for i in range(3000):
            current = add(graph, f"c{i}", current)
        assert len(graph.ancestors(current)) == 3001


class TestMergeBase:
    def test_diverged(self, graph):
        root = add(graph, "root")
        split = add(graph, "split", root)
        head = add(graph, "head", split)
        given = add(graph, "given", split)
        assert graph.merge_base(head, given) == split

    def test_ancestor_is_base(self, graph):
        root = add(graph, "root")
        a = add(graph, "a", root)
        b = add(graph, "b", a)
        assert graph.merge_base(b, a) == a
        assert graph.merge_base(a, b) == a

    def test_same_commit(self, graph):
        root = add(graph, "root")
        assert graph.merge_base(root, root) == root

    def test_after_previous_merge(self, graph):
        root = add(graph, "root")
        m1 = add(graph, "m1", root)
        o1 = add(graph, "o1", root)
        merged = add(graph, "merge", m1, o1)
        o2 = add(graph, "o2", o1)
        assert graph.merge_base(merged, o2) == o1

    def test_unrelated(self, graph):
        a = add(graph, "a")
        b = add(graph, "b")
        assert graph.merge_base(a, b) is None


class TestWalk:
    def test_first_parent_to_root(self, graph):
        root = add(graph, "root")
        left = add(graph, "left", root)
        right = add(graph, "right", root)
        merge = add(graph, "merge", left, right)
        assert [h for h, _ in graph.walk(merge)] == [merge, left, root]

    def test_restartable(self, graph):
        root = add(graph, "root")
        a = add(graph, "a", root)
        assert list(graph.walk(a)) == list(graph.walk(a))

    def test_lazy(self, graph):
        root = add(graph, "root")
        a = add(graph, "a", root)
        it = graph.walk(a)
        h, commit = next(it)
        assert h == a and commit.message == "a"
