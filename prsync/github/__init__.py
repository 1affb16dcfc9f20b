# prsync GitHub Module
# Repository host interface and GitHub REST implementation

from prsync.github.base import RepositoryHost
from prsync.github.client import GitHubClient
from prsync.github.errors import GitHubError, NotFoundError, UnexpectedPayloadError
from prsync.github.models import PullRequest, RemoteFile

__all__ = [
    "RepositoryHost",
    "GitHubClient",
    "GitHubError",
    "NotFoundError",
    "UnexpectedPayloadError",
    "RemoteFile",
    "PullRequest",
]
