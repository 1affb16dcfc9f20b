# prsync Configuration Schema
# Pydantic models for mapping validation

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from prsync.utils.paths import is_valid_repo_dir, join_repo_path, split_repo

DEFAULT_DEST_BRANCH = "main"
DEFAULT_API_URL = "https://api.github.com"


class ExistingBranchStrategy(str, Enum):
    """What to do when the sync branch from a previous run still exists."""

    UPDATE = "update"
    CREATE_NEW = "create-new"
    FAIL = "fail"


class FileMapping(BaseModel):
    """One source file synchronized to one destination file."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    source_path: str = Field(alias="sourcePath", description="Source directory, or '.' for the repository root")
    source_filename: str = Field(alias="sourceFilename", description="File to read from the source repository")
    dest_repo: str = Field(alias="destRepo", description="Destination repository as owner/name")
    dest_path: str = Field(alias="destPath", description="Destination directory, or '.' for the repository root")
    dest_filename: str = Field(alias="destFilename", description="File to write in the destination repository")
    dest_branch: str = Field(
        default=DEFAULT_DEST_BRANCH,
        alias="destBranch",
        description="Branch the sync branch is cut from and the pull request targets",
    )
    existing_branch_strategy: ExistingBranchStrategy = Field(
        default=ExistingBranchStrategy.UPDATE,
        alias="existingBranchStrategy",
        description="Behavior when the sync branch already exists",
    )

    @field_validator("source_path", "dest_path")
    @classmethod
    def check_directory(cls, v: str) -> str:
        """Require '.' or a relative path without surrounding slashes."""
        if not is_valid_repo_dir(v):
            raise ValueError("must be '.' or a relative path without leading or trailing slash")
        return v

    @field_validator("source_filename", "dest_filename")
    @classmethod
    def check_filename(cls, v: str) -> str:
        """Require a plain, non-empty file name."""
        if not v or "/" in v:
            raise ValueError("must be a non-empty file name without '/'")
        return v

    @field_validator("dest_repo")
    @classmethod
    def check_repo(cls, v: str) -> str:
        """Require owner/name."""
        split_repo(v)
        return v

    @field_validator("dest_branch")
    @classmethod
    def check_branch(cls, v: str) -> str:
        """Require a non-empty branch name."""
        if not v.strip():
            raise ValueError("must not be empty")
        return v

    @property
    def source_file_path(self) -> str:
        """Path of the file in the source repository."""
        return join_repo_path(self.source_path, self.source_filename)

    @property
    def dest_file_path(self) -> str:
        """Path of the file in the destination repository."""
        return join_repo_path(self.dest_path, self.dest_filename)

    @property
    def base_branch_name(self) -> str:
        """Name of the sync branch before any strategy suffix."""
        return f"sync-{self.source_filename}-{self.dest_filename}"

    @property
    def dest_owner(self) -> str:
        return split_repo(self.dest_repo)[0]

    @property
    def dest_name(self) -> str:
        return split_repo(self.dest_repo)[1]


class RepositoryRef(BaseModel):
    """Identity of a hosted repository."""

    model_config = ConfigDict(frozen=True)

    owner: str = Field(min_length=1)
    name: str = Field(min_length=1)

    @classmethod
    def parse(cls, full_name: str) -> "RepositoryRef":
        """Build from an 'owner/name' string."""
        owner, name = split_repo(full_name)
        return cls(owner=owner, name=name)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def __str__(self) -> str:
        return self.full_name


class PrsyncConfig(BaseModel):
    """Root configuration model for a sync run."""

    mappings: dict[str, FileMapping] = Field(default_factory=dict, description="Named file mappings")
    source_repository: str | None = Field(
        default=None, description="Source repository as owner/name (defaults to GITHUB_REPOSITORY)"
    )
    api_url: str = Field(default=DEFAULT_API_URL, description="GitHub REST API base URL")
    timeout: float = Field(default=30.0, gt=0, description="HTTP request timeout in seconds")

    @field_validator("source_repository")
    @classmethod
    def check_source_repository(cls, v: str | None) -> str | None:
        """Require owner/name when given."""
        if v is not None:
            split_repo(v)
        return v

    @field_validator("api_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")
