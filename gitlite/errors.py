"""gitlite error types.

Every error carries the one-line message shown to the user. Domain
checks run before any mutation, so a raised error leaves the
repository as it was.
"""


class GitliteError(Exception):
    """Base class for all user-facing repository errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UsageError(GitliteError):
    """Wrong operand count, unknown command, or missing message."""


class NotInitialized(GitliteError):
    """No repository control directory was found."""


class NotFound(GitliteError):
    """A commit, branch, object or file does not exist."""


class AlreadyExists(GitliteError):
    """A branch or the control directory already exists."""


class InvalidState(GitliteError):
    """The repository is in a state where the command cannot run."""


class NothingToCommit(InvalidState):
    """The stage is clean."""


class UncommittedChanges(InvalidState):
    """A merge was requested while the stage is dirty."""


class SelfMerge(InvalidState):
    """A branch was merged into itself."""


class UntrackedObstruction(GitliteError):
    """An untracked working-tree file would be overwritten or deleted.

    Attributes:
        paths: The offending working-tree paths.
    """

    def __init__(self, paths: set[str]) -> None:
        self.paths = paths
        super().__init__(
            "There is an untracked file in the way; "
            "delete it, or add and commit it first."
        )
