# prsync Branch Resolution
# Base ref fallback and working-branch strategy decisions

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from prsync.config.schema import DEFAULT_DEST_BRANCH, ExistingBranchStrategy
from prsync.github.base import RepositoryHost
from prsync.github.errors import GitHubError, NotFoundError
from prsync.sync.errors import BranchConflict, RefResolutionError

logger = logging.getLogger(__name__)

FALLBACK_BRANCH = "master"
TIMESTAMP_FORMAT = "%Y-%m-%dT%H-%M-%S"


class BranchState(str, Enum):
    """Whether the sync branch exists in the destination."""

    NO_BRANCH = "no_branch"
    BRANCH_EXISTS = "branch_exists"


class BranchAction(str, Enum):
    """What to do with the working branch."""

    CREATE = "create"
    REUSE = "reuse"
    ABORT = "abort"


@dataclass(frozen=True)
class BranchPlan:
    """Decision for the working branch of one mapping."""

    action: BranchAction
    branch: str
    reason: str = ""

    @property
    def needs_create(self) -> bool:
        return self.action == BranchAction.CREATE


@dataclass(frozen=True)
class BaseRef:
    """Resolved branch the sync branch is cut from and the pull request targets."""

    branch: str
    sha: str

    @property
    def used_fallback(self) -> bool:
        return self.branch == FALLBACK_BRANCH


def format_branch_timestamp(now: Optional[datetime] = None) -> str:
    """
    Format a UTC timestamp for branch names.

    Args:
        now: Time to format (defaults to the current time).

    Returns:
        Timestamp as YYYY-MM-DDTHH-MM-SS, sub-second precision dropped.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return now.strftime(TIMESTAMP_FORMAT)


def plan_working_branch(
    state: BranchState,
    strategy: ExistingBranchStrategy,
    base_branch_name: str,
    now: Optional[datetime] = None,
) -> BranchPlan:
    """
    Decide which branch to commit to.

    Args:
        state: Whether the base sync branch already exists.
        strategy: Configured existing-branch strategy.
        base_branch_name: Name of the base sync branch.
        now: Time used for create-new branch names.

    Returns:
        BranchPlan describing the working branch.
    """
    if state == BranchState.NO_BRANCH:
        return BranchPlan(BranchAction.CREATE, base_branch_name, "Sync branch does not exist")

    if strategy == ExistingBranchStrategy.FAIL:
        return BranchPlan(BranchAction.ABORT, base_branch_name, "Sync branch exists (fail strategy)")

    if strategy == ExistingBranchStrategy.CREATE_NEW:
        branch = f"{base_branch_name}-{format_branch_timestamp(now)}"
        return BranchPlan(BranchAction.CREATE, branch, "Sync branch exists (create-new strategy)")

    return BranchPlan(BranchAction.REUSE, base_branch_name, "Sync branch exists (update strategy)")


def require_branch(plan: BranchPlan, repo: str) -> BranchPlan:
    """
    Raise BranchConflict for an aborted plan.

    Args:
        plan: Plan from plan_working_branch.
        repo: Destination repository for the error message.

    Returns:
        The plan unchanged when it is not an abort.
    """
    if plan.action == BranchAction.ABORT:
        raise BranchConflict(plan.branch, repo)
    return plan


async def resolve_base_ref(host: RepositoryHost, owner: str, repo: str, branch: str) -> BaseRef:
    """
    Resolve the commit the sync branch is cut from.

    Falls back from "main" to "master" once when "main" does not exist.
    Custom branch names never fall back.

    Raises:
        RefResolutionError: If no usable branch was found.
    """
    try:
        return BaseRef(branch, await host.get_ref(owner, repo, branch))
    except NotFoundError as e:
        if branch != DEFAULT_DEST_BRANCH:
            raise RefResolutionError(f"Branch '{branch}' not found in {owner}/{repo}", cause=e) from e
        logger.info("%s branch not found in %s/%s, trying %s", branch, owner, repo, FALLBACK_BRANCH)
    except GitHubError as e:
        raise RefResolutionError(f"Could not resolve branch '{branch}' in {owner}/{repo}: {e}", cause=e) from e

    try:
        return BaseRef(FALLBACK_BRANCH, await host.get_ref(owner, repo, FALLBACK_BRANCH))
    except NotFoundError as e:
        raise RefResolutionError(
            f"Neither '{branch}' nor '{FALLBACK_BRANCH}' exists in {owner}/{repo}", cause=e
        ) from e
    except GitHubError as e:
        raise RefResolutionError(
            f"Could not resolve branch '{FALLBACK_BRANCH}' in {owner}/{repo}: {e}", cause=e
        ) from e


async def probe_branch_state(host: RepositoryHost, owner: str, repo: str, branch: str) -> BranchState:
    """
    Check whether a branch exists.

    Raises:
        RefResolutionError: If the probe fails for a reason other than not found.
    """
    try:
        await host.get_ref(owner, repo, branch)
    except NotFoundError:
        return BranchState.NO_BRANCH
    except GitHubError as e:
        raise RefResolutionError(f"Could not check branch '{branch}' in {owner}/{repo}: {e}", cause=e) from e
    return BranchState.BRANCH_EXISTS
