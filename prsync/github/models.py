# prsync GitHub Models
# Plain records returned by repository host operations

from dataclasses import dataclass


@dataclass(frozen=True)
class RemoteFile:
    """A single file read through the contents API."""

    path: str
    sha: str
    content: bytes


@dataclass(frozen=True)
class PullRequest:
    """An open pull request."""

    number: int
    html_url: str
    head: str = ""
    base: str = ""
