# prsync Sync Engine
# Drives source read, branch, write and pull request for each mapping

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from prsync.config.schema import FileMapping, RepositoryRef
from prsync.github.base import RepositoryHost
from prsync.github.errors import GitHubError, NotFoundError, UnexpectedPayloadError
from prsync.github.models import PullRequest, RemoteFile
from prsync.sync.branch import (
    BaseRef,
    BranchPlan,
    plan_working_branch,
    probe_branch_state,
    require_branch,
    resolve_base_ref,
)
from prsync.sync.errors import (
    BranchCreationError,
    ContentShapeError,
    PullRequestError,
    SourceNotFound,
    SyncError,
    WriteFailure,
)

logger = logging.getLogger(__name__)

PR_BODY = (
    "This PR was automatically created by the "
    "`[happi-file-sync-gh](https://github.com/simonloynes/happi-file-sync-gh)` action."
)


def update_message(mapping: FileMapping) -> str:
    return f"Sync {mapping.source_filename} from source repository"


def create_message(mapping: FileMapping) -> str:
    return f"Add {mapping.source_filename} from source repository"


def pull_request_title(mapping: FileMapping, source: RepositoryRef) -> str:
    return f"Sync {mapping.source_filename} from {source.full_name}"


@dataclass
class MappingResult:
    """Outcome of syncing one mapping."""

    name: str
    mapping: FileMapping
    success: bool = False
    base_branch: Optional[str] = None
    base_fallback: bool = False
    working_branch: Optional[str] = None
    file_created: bool = False
    commit_sha: Optional[str] = None
    pull_request: Optional[PullRequest] = None
    pull_request_created: bool = False
    error: Optional[SyncError] = None

    @property
    def error_message(self) -> Optional[str]:
        return self.error.message if self.error else None

    @property
    def error_kind(self) -> Optional[str]:
        return self.error.kind if self.error else None


@dataclass
class SyncResult:
    """Result of a complete sync run."""

    results: list[MappingResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> list[MappingResult]:
        return [r for r in self.results if r.success]

    @property
    def failed(self) -> list[MappingResult]:
        return [r for r in self.results if not r.success]

    @property
    def success(self) -> bool:
        """True when every mapping succeeded (vacuously true for no mappings)."""
        return not self.failed

    @property
    def pull_requests_created(self) -> int:
        return sum(1 for r in self.results if r.pull_request_created)


class SyncEngine:
    """
    Main synchronization engine.

    Runs every mapping independently against a repository host. Failures
    are recorded on the mapping's result and never affect other mappings.
    """

    def __init__(
        self,
        host: RepositoryHost,
        source: RepositoryRef,
        *,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize sync engine.

        Args:
            host: Repository host client.
            source: Repository the source files are read from.
            clock: Optional callable returning the current time (for create-new branch names).
        """
        self.host = host
        self.source = source
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def sync(self, mappings: Mapping[str, FileMapping]) -> SyncResult:
        """
        Synchronize all mappings concurrently.

        Args:
            mappings: Dict of mapping name to mapping.

        Returns:
            SyncResult with one MappingResult per mapping, in input order.
        """
        tasks = [self.sync_mapping(name, mapping) for name, mapping in mappings.items()]
        results = await asyncio.gather(*tasks)
        return SyncResult(results=list(results))

    async def sync_mapping(self, name: str, mapping: FileMapping) -> MappingResult:
        """
        Synchronize one mapping.

        Never raises for sync failures; the error is stored on the result.
        """
        result = MappingResult(name=name, mapping=mapping)
        logger.info(
            "Starting sync for %s to %s/%s",
            mapping.source_filename,
            mapping.dest_repo,
            mapping.dest_file_path,
        )

        try:
            await self._run(mapping, result)
        except SyncError as e:
            result.error = e
        except Exception as e:
            logger.debug("Unexpected error in mapping %s", name, exc_info=True)
            result.error = SyncError(f"Unexpected error: {e}", cause=e)

        if result.error is not None:
            logger.error(
                "Error syncing %s to %s: %s",
                mapping.source_filename,
                mapping.dest_repo,
                result.error.message,
            )
        else:
            result.success = True
            pr = result.pull_request
            logger.info(
                "Synced %s to %s: PR #%s %s",
                mapping.source_filename,
                mapping.dest_repo,
                pr.number if pr else "?",
                pr.html_url if pr else "",
            )
        return result

    async def _run(self, mapping: FileMapping, result: MappingResult) -> None:
        """Run all stages for one mapping, filling in the result as they complete."""
        source_file = await self.fetch_source(mapping)

        owner, repo = mapping.dest_owner, mapping.dest_name
        base = await resolve_base_ref(self.host, owner, repo, mapping.dest_branch)
        result.base_branch = base.branch
        result.base_fallback = base.used_fallback

        plan = await self.plan_branch(mapping)
        result.working_branch = plan.branch
        await self.create_branch(mapping, plan, base)

        result.file_created, result.commit_sha = await self.write_content(mapping, plan.branch, source_file.content)

        result.pull_request, result.pull_request_created = await self.reconcile_pull_request(
            mapping, plan.branch, base.branch
        )

    async def fetch_source(self, mapping: FileMapping) -> RemoteFile:
        """
        Read the source file from the source repository.

        Raises:
            SourceNotFound: If the file does not exist or cannot be read.
            ContentShapeError: If the path is not a single file.
        """
        path = mapping.source_file_path
        logger.info("Fetching content from %s/%s", self.source.full_name, path)
        try:
            source_file = await self.host.get_file(self.source.owner, self.source.name, path)
        except NotFoundError as e:
            raise SourceNotFound(f"Source file {path} not found in {self.source.full_name}", cause=e) from e
        except UnexpectedPayloadError as e:
            raise ContentShapeError(f"Source {path} is not a single file: {e.message}", cause=e) from e
        except GitHubError as e:
            raise SourceNotFound(f"Could not read source file {path}: {e.message}", cause=e) from e

        logger.info("Successfully fetched content for %s", mapping.source_filename)
        return source_file

    async def plan_branch(self, mapping: FileMapping) -> BranchPlan:
        """
        Probe the sync branch and decide the working branch.

        Raises:
            BranchConflict: If the branch exists and the strategy is fail.
            RefResolutionError: If the probe itself fails.
        """
        state = await probe_branch_state(self.host, mapping.dest_owner, mapping.dest_name, mapping.base_branch_name)
        plan = plan_working_branch(state, mapping.existing_branch_strategy, mapping.base_branch_name, self._clock())
        logger.debug("%s: %s -> %s %s", mapping.dest_repo, plan.reason, plan.action.value, plan.branch)
        return require_branch(plan, mapping.dest_repo)

    async def create_branch(self, mapping: FileMapping, plan: BranchPlan, base: BaseRef) -> None:
        """
        Create the working branch when the plan requires it.

        Raises:
            BranchCreationError: If the branch could not be created.
        """
        if not plan.needs_create:
            logger.info("Reusing existing branch %s in %s", plan.branch, mapping.dest_repo)
            return

        logger.info("Creating branch %s from %s (%s)", plan.branch, base.branch, base.sha)
        try:
            await self.host.create_ref(mapping.dest_owner, mapping.dest_name, plan.branch, base.sha)
        except GitHubError as e:
            raise BranchCreationError(
                f"Could not create branch '{plan.branch}' in {mapping.dest_repo}: {e.message}", cause=e
            ) from e

    async def write_content(self, mapping: FileMapping, branch: str, content: bytes) -> tuple[bool, str]:
        """
        Write the source content to the destination file on the working branch.

        Returns:
            Tuple of (file_created, commit_sha).

        Raises:
            WriteFailure: If the write call fails.
        """
        owner, repo, path = mapping.dest_owner, mapping.dest_name, mapping.dest_file_path

        existing_sha: Optional[str] = None
        logger.info("Checking if file %s exists in branch %s", path, branch)
        try:
            existing_sha = (await self.host.get_file(owner, repo, path, ref=branch)).sha
        except NotFoundError:
            pass
        except GitHubError as e:
            # Probe errors other than not found fall through to create
            logger.warning("Could not check %s in %s, treating it as absent: %s", path, mapping.dest_repo, e.message)

        if existing_sha is not None:
            logger.info("Updating existing file with SHA %s", existing_sha)
            message = update_message(mapping)
        else:
            logger.info("File doesn't exist, creating new file at %s", path)
            message = create_message(mapping)

        try:
            commit_sha = await self.host.put_file(
                owner,
                repo,
                path,
                message=message,
                content=content,
                branch=branch,
                sha=existing_sha,
            )
        except GitHubError as e:
            raise WriteFailure(f"Could not write {path} in {mapping.dest_repo}: {e.message}", cause=e) from e

        return existing_sha is None, commit_sha

    async def reconcile_pull_request(self, mapping: FileMapping, branch: str, base: str) -> tuple[PullRequest, bool]:
        """
        Ensure one open pull request from the working branch into the base branch.

        Returns:
            Tuple of (pull_request, created).

        Raises:
            PullRequestError: If the pull request could not be created.
        """
        owner, repo = mapping.dest_owner, mapping.dest_name
        head = f"{owner}:{branch}"

        try:
            existing = await self.host.list_pulls(owner, repo, head=head, base=base, state="open")
        except GitHubError as e:
            logger.warning("Could not list pull requests in %s, creating one: %s", mapping.dest_repo, e.message)
            existing = []

        if existing:
            pr = existing[0]
            logger.info("Pull request #%s already open for %s: %s", pr.number, branch, pr.html_url)
            return pr, False

        logger.info("Creating pull request from %s to %s", branch, base)
        try:
            pr = await self.host.create_pull(
                owner,
                repo,
                title=pull_request_title(mapping, self.source),
                head=branch,
                base=base,
                body=PR_BODY,
            )
        except GitHubError as e:
            raise PullRequestError(
                f"Could not create pull request in {mapping.dest_repo}: {e.message}", cause=e
            ) from e

        logger.info("Created PR #%s for %s in %s: %s", pr.number, mapping.dest_filename, mapping.dest_repo, pr.html_url)
        return pr, True

