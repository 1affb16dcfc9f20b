# prsync Sync Module
# Sync engine, branch strategy and per-mapping errors

from prsync.sync.branch import (
    BaseRef,
    BranchAction,
    BranchPlan,
    BranchState,
    format_branch_timestamp,
    plan_working_branch,
    probe_branch_state,
    resolve_base_ref,
)
from prsync.sync.engine import MappingResult, SyncEngine, SyncResult
from prsync.sync.errors import (
    BranchConflict,
    BranchCreationError,
    ContentShapeError,
    PullRequestError,
    RefResolutionError,
    SourceNotFound,
    SyncError,
    WriteFailure,
)

__all__ = [
    # Branch
    "BaseRef",
    "BranchAction",
    "BranchPlan",
    "BranchState",
    "format_branch_timestamp",
    "plan_working_branch",
    "probe_branch_state",
    "resolve_base_ref",
    # Engine
    "SyncEngine",
    "SyncResult",
    "MappingResult",
    # Errors
    "SyncError",
    "SourceNotFound",
    "ContentShapeError",
    "RefResolutionError",
    "BranchConflict",
    "BranchCreationError",
    "WriteFailure",
    "PullRequestError",
]
