"""prsync - propagate files across repositories through pull requests.

Reads a file from a source repository and keeps a copy of it in any number
of destination repositories by committing it to a sync branch and opening
a pull request.
"""

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "FileMapping",
    "ExistingBranchStrategy",
    "RepositoryRef",
    "GitHubClient",
    "SyncEngine",
    "SyncResult",
    "MappingResult",
]


def __getattr__(name: str):
    """Lazy import to avoid loading dependencies during setup."""
    if name in ("FileMapping", "ExistingBranchStrategy", "RepositoryRef"):
        from prsync.config import schema

        return getattr(schema, name)
    if name == "GitHubClient":
        from prsync.github.client import GitHubClient

        return GitHubClient
    if name in ("SyncEngine", "SyncResult", "MappingResult"):
        from prsync.sync import engine

        return getattr(engine, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
