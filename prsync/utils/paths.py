# prsync Path Utilities
# Repository-relative path and repository identifier helpers

ROOT_PATH = "."


def join_repo_path(directory: str, filename: str) -> str:
    """
    Join a repository directory and a filename.

    The sentinel "." means the repository root and adds no prefix.

    Args:
        directory: Directory relative to the repository root, or ".".
        filename: File name.

    Returns:
        Repository-relative file path.
    """
    if directory == ROOT_PATH:
        return filename
    return f"{directory}/{filename}"


def is_valid_repo_dir(directory: str) -> bool:
    """
    Check if a string is a usable repository directory.

    Args:
        directory: Candidate directory.

    Returns:
        True for "." or a non-empty relative path without leading
        or trailing slash and without empty segments.
    """
    if directory == ROOT_PATH:
        return True
    if not directory or directory.startswith("/") or directory.endswith("/"):
        return False
    return all(segment for segment in directory.split("/"))


def split_repo(full_name: str) -> tuple[str, str]:
    """
    Split an "owner/name" repository identifier.

    Args:
        full_name: Repository identifier.

    Returns:
        Tuple of (owner, name).

    Raises:
        ValueError: If the identifier does not have exactly two non-empty segments
            without surrounding whitespace.
    """
    parts = full_name.split("/")
    if len(parts) != 2 or not all(part and part == part.strip() for part in parts):
        raise ValueError(f"Repository must be in 'owner/name' form, got {full_name!r}")
    return parts[0], parts[1]
