"""Three-way merge of one branch into the current branch."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .config import CONFLICT_END, CONFLICT_SEP, CONFLICT_START
from .errors import InvalidState, NotFound, SelfMerge, UncommittedChanges
from .objects import Commit
from .stage import Stage

if TYPE_CHECKING:
    from .repository import Repository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MergeResult:
    """Result of a merge operation."""

    merged: bool
    commit: str | None
    strategy: str  # "no_op", "fast_forward", "three_way"
    taken_paths: tuple[str, ...] = ()
    conflicts: tuple[str, ...] = ()

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)

    def __bool__(self) -> bool:
        return self.merged


def conflict_content(ours: bytes | None, theirs: bytes | None) -> bytes:
    """Build the marker block recording both sides of a conflict.

    A missing side contributes nothing; a present side is terminated
    with a newline so each marker starts its own line.
    """

    def side(content: bytes | None) -> bytes:
        if not content:
            return b""
        return content if content.endswith(b"\n") else content + b"\n"

    return (
        CONFLICT_START.encode()
        + side(ours)
        + CONFLICT_SEP.encode()
        + side(theirs)
        + CONFLICT_END.encode()
    )


def merge(repo: Repository, branch: str) -> MergeResult:
    """Merge ``branch`` into the checked-out branch.

    Preconditions are checked before anything is written. A diverged
    history always ends in a two-parent merge commit; conflicting
    paths are written with markers and committed as they are.

    Raises:
        UncommittedChanges: The stage is not clean.
        NotFound: ``branch`` does not exist.
        SelfMerge: ``branch`` is the current branch.
        UntrackedObstruction: An untracked file would be overwritten.
    """
    stage = repo.load_stage()
    if not stage.is_clean:
        raise UncommittedChanges("You have uncommitted changes.")
    if not repo.refs.has_branch(branch):
        raise NotFound("A branch with that name does not exist.")
    current = repo.refs.current_branch()
    if current is None:
        raise InvalidState("Cannot merge while HEAD is detached.")
    if branch == current:
        raise SelfMerge("Cannot merge a branch with itself.")

    head_hash = repo.refs.head_commit()
    given_hash = repo.refs.branch_commit(branch)
    head = repo.graph.get(head_hash)
    given = repo.graph.get(given_hash)
    repo.check_untracked(head.snapshot, given.snapshot)

    base_hash = repo.graph.merge_base(head_hash, given_hash)
    if base_hash is None:
        raise InvalidState("No common ancestor found between the branches.")

    # Case 1: given is already in our history
    if base_hash == given_hash:
        logger.info("Merge of %s into %s is a no-op", branch, current)
        return MergeResult(merged=False, commit=head_hash, strategy="no_op")

    # Case 2: fast-forward
    if base_hash == head_hash:
        repo.restore(given_hash)
        repo.refs.set_branch(current, given_hash)
        repo.save_stage(Stage())
        logger.info("Fast-forwarded %s to %s", current, given_hash)
        return MergeResult(
            merged=True, commit=given_hash, strategy="fast_forward"
        )

    # Case 3: three-way merge
    base = repo.graph.get(base_hash)
    taken, conflicts = _merge_paths(repo, stage, base, head, given)

    message = f"Merged {branch} into {current}."
    merge_commit = Commit.create(
        message,
        head_hash,
        stage.apply(head.snapshot),
        second_parent=given_hash,
    )
    merge_hash = repo.objects.put_commit(merge_commit)
    repo.refs.set_branch(current, merge_hash)
    stage.clear()
    repo.save_stage(stage)

    if conflicts:
        logger.info(
            "Merged %s into %s with conflicts in %s",
            branch,
            current,
            ", ".join(conflicts),
        )
    else:
        logger.info("Merged %s into %s as %s", branch, current, merge_hash)
    return MergeResult(
        merged=True,
        commit=merge_hash,
        strategy="three_way",
        taken_paths=tuple(taken),
        conflicts=tuple(conflicts),
    )


def _merge_paths(
    repo: Repository, stage: Stage, base: Commit, head: Commit, given: Commit
) -> tuple[list[str], list[str]]:
    """Apply the per-path merge rules to the working tree and stage.

    Returns the paths taken from the given side and the conflicted paths.
    """
    taken: list[str] = []
    conflicts: list[str] = []
    all_paths = set(base.snapshot) | set(head.snapshot) | set(given.snapshot)

    for path in sorted(all_paths):
        s = base.snapshot.get(path)
        h = head.snapshot.get(path)
        g = given.snapshot.get(path)

        if s == h and s != g:
            # Changed only on the given side: adopt it
            if g is None:
                repo.tree.delete(path)
                stage.remove(path)
            else:
                repo.tree.write(path, repo.objects.get_blob(g))
                stage.add(path, g)
            taken.append(path)
            logger.debug("Took %s from given branch", path)
        elif s != h and s != g and h != g:
            ours = repo.objects.get_blob(h) if h is not None else None
            theirs = repo.objects.get_blob(g) if g is not None else None
            content = conflict_content(ours, theirs)
            repo.tree.write(path, content)
            stage.add(path, repo.objects.put_blob(content))
            conflicts.append(path)
            logger.debug("Conflict in %s", path)
        # Otherwise head's version already stands

    return taken, conflicts
