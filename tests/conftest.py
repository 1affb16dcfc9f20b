# prsync Test Fixtures
# Pytest fixtures and an in-memory repository host

import hashlib
import itertools
import tempfile
from collections.abc import Generator
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import pytest

from prsync.config.schema import FileMapping, RepositoryRef
from prsync.github.errors import GitHubError, NotFoundError, UnexpectedPayloadError
from prsync.github.models import PullRequest, RemoteFile

WRITE_OPERATIONS = {"create_ref", "put_file", "create_pull"}


def blob_sha(content: bytes) -> str:
    return hashlib.sha1(content).hexdigest()


@dataclass
class FakeRepo:
    """State of one hosted repository."""

    default_branch: str = "main"
    branches: dict[str, str] = field(default_factory=dict)
    files: dict[str, dict[str, RemoteFile]] = field(default_factory=dict)
    directories: set[str] = field(default_factory=set)
    pulls: list[dict] = field(default_factory=list)


class FakeHost:
    """
    In-memory repository host implementing the six hosting operations.

    Records every call in ``calls`` and raises any exception registered in
    ``fail_on`` for an operation name.
    """

    def __init__(self):
        self.repos: dict[str, FakeRepo] = {}
        self.calls: list[tuple[str, dict]] = []
        self.fail_on: dict[str, Exception] = {}
        self._commits = itertools.count(1)
        self._pull_numbers = itertools.count(1)

    # Setup helpers

    def add_repo(self, full_name: str, *branches: str, default_branch: str = "main") -> FakeRepo:
        repo = FakeRepo(default_branch=default_branch)
        for branch in branches or (default_branch,):
            repo.branches[branch] = self._next_commit()
            repo.files[branch] = {}
        self.repos[full_name] = repo
        return repo

    def add_file(self, full_name: str, path: str, content: bytes, *, branch: Optional[str] = None, sha: Optional[str] = None) -> RemoteFile:
        repo = self.repos[full_name]
        branch = branch or repo.default_branch
        remote = RemoteFile(path=path, sha=sha or blob_sha(content), content=content)
        repo.files.setdefault(branch, {})[path] = remote
        return remote

    def add_branch(self, full_name: str, branch: str, *, from_branch: Optional[str] = None) -> None:
        repo = self.repos[full_name]
        source = from_branch or repo.default_branch
        repo.branches[branch] = repo.branches[source]
        repo.files[branch] = dict(repo.files.get(source, {}))

    def add_pull(self, full_name: str, head: str, base: str) -> PullRequest:
        repo = self.repos[full_name]
        number = next(self._pull_numbers)
        owner = full_name.split("/")[0]
        pr = {
            "number": number,
            "head": f"{owner}:{head}",
            "base": base,
            "state": "open",
            "html_url": f"https://github.com/{full_name}/pull/{number}",
        }
        repo.pulls.append(pr)
        return _pull(pr)

    # Inspection helpers

    def calls_to(self, operation: str) -> list[dict]:
        return [kwargs for name, kwargs in self.calls if name == operation]

    @property
    def write_calls(self) -> list[tuple[str, dict]]:
        return [(name, kwargs) for name, kwargs in self.calls if name in WRITE_OPERATIONS]

    def open_pulls(self, full_name: str) -> list[dict]:
        return [pr for pr in self.repos[full_name].pulls if pr["state"] == "open"]

    def file_on(self, full_name: str, branch: str, path: str) -> Optional[RemoteFile]:
        return self.repos[full_name].files.get(branch, {}).get(path)

    # RepositoryHost operations

    async def get_file(self, owner: str, repo: str, path: str, ref: Optional[str] = None) -> RemoteFile:
        self._record("get_file", owner=owner, repo=repo, path=path, ref=ref)
        hosted = self._repo(owner, repo)
        branch = ref or hosted.default_branch
        if path in hosted.directories:
            raise UnexpectedPayloadError(f"{path} is a directory, not a file", status=200)
        if branch not in hosted.branches:
            raise NotFoundError(f"No commit found for the ref {branch}")
        remote = hosted.files.get(branch, {}).get(path)
        if remote is None:
            raise NotFoundError(f"{path}: Not Found")
        return remote

    async def get_ref(self, owner: str, repo: str, branch: str) -> str:
        self._record("get_ref", owner=owner, repo=repo, branch=branch)
        hosted = self._repo(owner, repo)
        if branch not in hosted.branches:
            raise NotFoundError(f"heads/{branch}: Not Found")
        return hosted.branches[branch]

    async def create_ref(self, owner: str, repo: str, branch: str, sha: str) -> None:
        self._record("create_ref", owner=owner, repo=repo, ref=f"refs/heads/{branch}", sha=sha)
        hosted = self._repo(owner, repo)
        if branch in hosted.branches:
            raise GitHubError("Reference already exists", status=422)
        source = next((b for b, commit in hosted.branches.items() if commit == sha), None)
        hosted.branches[branch] = sha
        hosted.files[branch] = dict(hosted.files.get(source, {})) if source else {}

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
        self._record("put_file", owner=owner, repo=repo, path=path, message=message, content=content, branch=branch, sha=sha)
        hosted = self._repo(owner, repo)
        if branch not in hosted.branches:
            raise NotFoundError(f"Branch {branch} not found")
        existing = hosted.files.setdefault(branch, {}).get(path)
        if existing is not None and sha != existing.sha:
            raise GitHubError(f"{path} does not match {sha}", status=409)
        if existing is None and sha is not None:
            raise GitHubError(f"{path} does not exist", status=422)
        hosted.files[branch][path] = RemoteFile(path=path, sha=blob_sha(content), content=content)
        commit = self._next_commit()
        hosted.branches[branch] = commit
        return commit

    async def list_pulls(self, owner: str, repo: str, *, head: str, base: str, state: str = "open") -> list[PullRequest]:
        self._record("list_pulls", owner=owner, repo=repo, head=head, base=base, state=state)
        hosted = self._repo(owner, repo)
        return [
            _pull(pr)
            for pr in hosted.pulls
            if pr["head"] == head and pr["base"] == base and pr["state"] == state
        ]

    async def create_pull(self, owner: str, repo: str, *, title: str, head: str, base: str, body: str) -> PullRequest:
        self._record("create_pull", owner=owner, repo=repo, title=title, head=head, base=base, body=body)
        hosted = self._repo(owner, repo)
        if head not in hosted.branches or base not in hosted.branches:
            raise GitHubError("Validation Failed", status=422)
        pr = self.add_pull(f"{owner}/{repo}", head, base)
        hosted.pulls[-1]["title"] = title
        return pr

    def _record(self, operation: str, **kwargs) -> None:
        self.calls.append((operation, kwargs))
        if operation in self.fail_on:
            raise self.fail_on[operation]

    def _repo(self, owner: str, repo: str) -> FakeRepo:
        hosted = self.repos.get(f"{owner}/{repo}")
        if hosted is None:
            raise NotFoundError(f"{owner}/{repo}: Not Found")
        return hosted

    def _next_commit(self) -> str:
        return f"commit{next(self._commits):04d}"


def _pull(data: dict) -> PullRequest:
    return PullRequest(
        number=data["number"],
        html_url=data["html_url"],
        head=data["head"].split(":", 1)[-1],
        base=data["base"],
    )


class FixedClock:
    """Clock returning preset times, advancing through them on each call."""

    def __init__(self, *times: datetime):
        self._times = list(times)
        self._index = 0

    def __call__(self) -> datetime:
        now = self._times[min(self._index, len(self._times) - 1)]
        self._index += 1
        return now


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def source_repo() -> RepositoryRef:
    return RepositoryRef(owner="test-owner", name="test-repo")


@pytest.fixture
def host(source_repo: RepositoryRef) -> FakeHost:
    """Fake host with the source repository and an empty acme/widgets."""
    fake = FakeHost()
    fake.add_repo(source_repo.full_name)
    fake.add_repo("acme/widgets")
    return fake


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(
        datetime(2024, 3, 5, 14, 7, 9, 123456, tzinfo=timezone.utc),
        datetime(2024, 3, 5, 14, 9, 41, 987000, tzinfo=timezone.utc),
    )


@pytest.fixture
def license_mapping() -> FileMapping:
    return FileMapping(
        sourcePath="docs",
        sourceFilename="LICENSE",
        destRepo="acme/widgets",
        destPath=".",
        destFilename="LICENSE",
    )


@pytest.fixture
def sample_mappings() -> dict:
    """Raw mapping record as passed on the command line."""
    return {
        "license": {
            "sourcePath": "docs",
            "sourceFilename": "LICENSE",
            "destRepo": "acme/widgets",
            "destPath": ".",
            "destFilename": "LICENSE",
        },
        "workflow": {
            "sourcePath": ".github/workflows",
            "sourceFilename": "ci.yml",
            "destRepo": "acme/gadgets",
            "destPath": ".github/workflows",
            "destFilename": "ci.yml",
            "destBranch": "develop",
            "existingBranchStrategy": "create-new",
        },
    }
