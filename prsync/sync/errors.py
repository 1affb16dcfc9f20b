# prsync Sync Errors
# Per-mapping failures caught at the mapping boundary

from typing import Optional


class SyncError(Exception):
    """A fatal condition that ends processing of one mapping."""

    #: Short machine-readable label used in reports
    kind = "error"

    def __init__(self, message: str, *, cause: Optional[BaseException] = None):
        self.message = message
        self.cause = cause
        super().__init__(message)


class SourceNotFound(SyncError):
    """Source file is absent or unreadable; nothing was written."""

    kind = "source-not-found"


class ContentShapeError(SourceNotFound):
    """Source path resolves to something other than a single file."""

    kind = "content-shape"


class RefResolutionError(SyncError):
    """Destination base branch (and its fallback) could not be resolved."""

    kind = "ref-resolution"


class BranchConflict(SyncError):
    """Sync branch exists and the strategy forbids reusing it."""

    kind = "branch-conflict"

    def __init__(self, branch: str, repo: str):
        self.branch = branch
        self.repo = repo
        super().__init__(
            f"Branch '{branch}' already exists in {repo} and existingBranchStrategy is 'fail'"
        )


class BranchCreationError(SyncError):
    """Creating the working branch failed, for example because a concurrent run created it first."""

    kind = "branch-creation"


class WriteFailure(SyncError):
    """Writing the destination file failed."""

    kind = "write-failure"


class PullRequestError(SyncError):
    """Opening the pull request failed; the branch and commit remain on the remote."""

    kind = "pull-request"
