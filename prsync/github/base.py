# prsync Repository Host Interface
# The six hosting API operations the sync engine depends on

from typing import Optional, Protocol

from prsync.github.models import PullRequest, RemoteFile


class RepositoryHost(Protocol):
    """
    Capabilities the sync engine needs from a repository host.

    Implementations raise NotFoundError for missing files and refs, and
    GitHubError for every other failure.
    """

    async def get_file(self, owner: str, repo: str, path: str, ref: Optional[str] = None) -> RemoteFile:
        """Read a file at a ref (default branch when ref is None)."""
        ...

    async def get_ref(self, owner: str, repo: str, branch: str) -> str:
        """Return the commit SHA a branch points at."""
        ...

    async def create_ref(self, owner: str, repo: str, branch: str, sha: str) -> None:
        """Create a branch pointing at a commit."""
        ...

    async def put_file(
        self,
        owner: str,
        repo: str,
        path: str,
        *,
        message: str,
        content: bytes,
        branch: str,
        sha: Optional[str] = None,
    ) -> str:
        """Create or update a file on a branch and return the new commit SHA."""
        ...

    async def list_pulls(self, owner: str, repo: str, *, head: str, base: str, state: str = "open") -> list[PullRequest]:
        """List pull requests filtered by head, base and state."""
        ...

    async def create_pull(self, owner: str, repo: str, *, title: str, head: str, base: str, body: str) -> PullRequest:
        """Open a pull request."""
        ...
