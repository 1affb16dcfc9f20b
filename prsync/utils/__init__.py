# prsync Utilities Module
# Helper functions for repository paths and content encoding

from prsync.utils.encoding import (
    decode_content,
    encode_content,
)
from prsync.utils.paths import (
    ROOT_PATH,
    is_valid_repo_dir,
    join_repo_path,
    split_repo,
)

__all__ = [
    # Paths
    "ROOT_PATH",
    "join_repo_path",
    "is_valid_repo_dir",
    "split_repo",
    # Encoding
    "encode_content",
    "decode_content",
]
